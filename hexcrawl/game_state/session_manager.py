"""
Travel save files.

One JSON file holds one map's journey: the persisted hexcrawl record plus the
terrain and climate painted on the map, so an engine can be rebuilt from a
single file. The record sits under the "hexcrawl" key in the camelCase form
produced by HexcrawlState.to_dict().
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional
import json
import logging
import uuid

from hexcrawl.data_models import CorruptHexcrawlStateError, HexcrawlState
from hexcrawl.hex_crawl.hex_crawl_engine import HexcrawlEngine
from hexcrawl.hex_crawl.terrain_index import HexClimate, HexTerrain, TerrainIndex
from hexcrawl.tables.rule_tables import RuleTables

logger = logging.getLogger(__name__)


SESSION_VERSION = "1.0.0"
DEFAULT_SAVE_DIRECTORY = Path("saves")


def _now() -> str:
    return datetime.now().isoformat()


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class TravelSession:
    """Everything needed to resume travel on one map."""

    session_id: str = field(default_factory=_new_id)
    map_id: str = ""
    created_at: str = field(default_factory=_now)
    last_saved_at: Optional[str] = None
    version: str = SESSION_VERSION

    state: HexcrawlState = field(default_factory=HexcrawlState)
    terrain: list[HexTerrain] = field(default_factory=list)
    climate: list[HexClimate] = field(default_factory=list)

    def to_engine(self, tables: Optional[RuleTables] = None) -> HexcrawlEngine:
        """Build an engine that mutates this session's state in place."""
        return HexcrawlEngine(
            state=self.state,
            terrain_index=TerrainIndex(self.terrain, self.climate),
            tables=tables,
        )

    def update_from_engine(self, engine: HexcrawlEngine) -> None:
        self.state = engine.state
        self.terrain = engine.terrain_index.terrain_assignments()
        self.climate = engine.terrain_index.climate_assignments()

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "map_id": self.map_id,
            "version": self.version,
            "created_at": self.created_at,
            "last_saved_at": self.last_saved_at,
            "hexcrawl": self.state.to_dict(),
            "terrain": [hex_terrain.to_dict() for hex_terrain in self.terrain],
            "climate": [hex_climate.to_dict() for hex_climate in self.climate],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TravelSession":
        """
        Rebuild a session from its saved form.

        Raises:
            CorruptHexcrawlStateError: The hexcrawl record is missing or
                malformed, or a painted hex names an unknown terrain or climate
        """
        if not isinstance(data, dict) or "hexcrawl" not in data:
            raise CorruptHexcrawlStateError("session has no hexcrawl record", "hexcrawl")

        try:
            terrain = [HexTerrain.from_dict(item) for item in data.get("terrain", [])]
            climate = [HexClimate.from_dict(item) for item in data.get("climate", [])]
        except (KeyError, TypeError, ValueError) as e:
            raise CorruptHexcrawlStateError(f"bad painted hex: {e}", "terrain") from e

        state = HexcrawlState.from_dict(data["hexcrawl"])
        return cls(
            session_id=data.get("session_id") or _new_id(),
            map_id=data.get("map_id", state.map_id or ""),
            created_at=data.get("created_at") or _now(),
            last_saved_at=data.get("last_saved_at"),
            version=data.get("version", SESSION_VERSION),
            state=state,
            terrain=terrain,
            climate=climate,
        )


class TravelSessionManager:
    """
    Reads and writes travel save files in one directory.

    Relative paths given to load_session() and delete_session() are looked up
    in the save directory when they do not exist as given.
    """

    def __init__(self, save_directory: Optional[Path | str] = None):
        self.save_directory = Path(save_directory) if save_directory else DEFAULT_SAVE_DIRECTORY
        self.save_directory.mkdir(parents=True, exist_ok=True)
        self._current_session: Optional[TravelSession] = None

    @property
    def current_session(self) -> Optional[TravelSession]:
        return self._current_session

    def _resolve(self, filepath: Path | str) -> Path:
        path = Path(filepath)
        return path if path.exists() else self.save_directory / path

    def _default_filename(self, session: TravelSession) -> str:
        stem = "".join(c for c in session.map_id if c.isalnum() or c in "-_") or "map"
        return f"{stem}_{session.session_id[:8]}.json"

    def new_session(self, map_id: str) -> TravelSession:
        """Start a journey on a map. The record starts disabled with defaults."""
        session = TravelSession(map_id=map_id, state=HexcrawlState(map_id=map_id))
        self._current_session = session
        logger.info(f"New travel session {session.session_id} for map '{map_id}'")
        return session

    def save_session(
        self,
        session: Optional[TravelSession] = None,
        filename: Optional[str] = None,
    ) -> Path:
        """
        Write a session to the save directory.

        Args:
            session: Session to write; the current session when omitted
            filename: File name inside the save directory; derived from the
                map id and session id when omitted

        Returns:
            Path of the written file

        Raises:
            ValueError: No session given and none is current
        """
        session = session or self._current_session
        if session is None:
            raise ValueError("No travel session to save")

        session.last_saved_at = _now()
        path = self.save_directory / (filename or self._default_filename(session))
        path.write_text(json.dumps(session.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")

        logger.info(f"Saved day {session.state.current_day} of map '{session.map_id}' to {path}")
        return path

    def load_session(self, filepath: Path | str) -> TravelSession:
        """
        Read a session and make it current.

        Raises:
            FileNotFoundError: No save file at the path
            CorruptHexcrawlStateError: The file is not JSON or its record is malformed
        """
        path = self._resolve(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Save file not found: {path}")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise CorruptHexcrawlStateError(f"{path.name} is not valid JSON: {e}") from e

        session = TravelSession.from_dict(data)
        self._current_session = session
        logger.info(f"Loaded map '{session.map_id}' at day {session.state.current_day} from {path}")
        return session

    def list_sessions(self) -> list[dict[str, Any]]:
        """Summaries of readable save files, most recently saved first. Unreadable files are skipped."""
        summaries = []
        for path in self.save_directory.glob("*.json"):
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
                current_day = (data.get("hexcrawl") or {}).get("currentDay")
            except (json.JSONDecodeError, AttributeError) as e:
                logger.warning(f"Skipping unreadable save file {path}: {e}")
                continue

            summaries.append({
                "filepath": str(path),
                "filename": path.name,
                "session_id": data.get("session_id", "unknown"),
                "map_id": data.get("map_id", ""),
                "current_day": current_day,
                "created_at": data.get("created_at"),
                "last_saved_at": data.get("last_saved_at"),
                "version": data.get("version", "unknown"),
            })

        summaries.sort(key=lambda s: s["last_saved_at"] or s["created_at"] or "", reverse=True)
        return summaries

    def delete_session(self, filepath: Path | str) -> bool:
        """Remove a save file. Returns False when there was nothing to remove."""
        path = self._resolve(filepath)
        if not path.exists():
            return False
        path.unlink()
        logger.info(f"Deleted save file {path}")
        return True
