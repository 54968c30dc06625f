"""
Host announcements for the match console and event log.
"""

from typing import List, Optional, TYPE_CHECKING

from .game_engine import MatchState
from ..config.game_config import GameConfig, default_config

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


class Host:
    """Announces what happens in the match to the console and observers."""

    def __init__(self, match_state: MatchState, config: GameConfig = default_config,
                 event_emitter: Optional['EventEmitter'] = None):
        self.match_state = match_state
        self.config = config
        self.event_emitter = event_emitter
        self.announcements: List[str] = []

    def announce(self, message: str) -> None:
        """Make a host announcement."""
        if self.config.use_host_announcements:
            self.announcements.append(message)
            print(f"[HOST] {message}")
            if self.event_emitter:
                self.event_emitter.emit_announcement(
                    message,
                    self.match_state.phase.value,
                    self.match_state.resolution.value,
                )

    def rejected(self, command: str, error: Exception) -> None:
        """Report a refused command; the match state is unchanged."""
        if self.config.use_host_announcements:
            print(f"[HOST] {command} rejected: {error}")
