"""Travel session persistence."""

from hexcrawl.game_state.session_manager import (
    SESSION_VERSION,
    TravelSession,
    TravelSessionManager,
)

__all__ = [
    "SESSION_VERSION",
    "TravelSession",
    "TravelSessionManager",
]
