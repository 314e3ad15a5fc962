"""In-memory registry of live customizer sessions."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from design_customizer.services.sessions import ImageSessionController

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class SessionRegistry:
    """Maps session ids to their controllers for the HTTP layer.

    Sessions untouched for `ttl_seconds` are closed on the next registry
    access, which releases their display handles.
    """

    factory: Callable[[], ImageSessionController]
    ttl_seconds: int = 3600
    clock: Callable[[], datetime] = _utcnow
    sessions: dict[UUID, ImageSessionController] = field(default_factory=dict)
    _touched: dict[UUID, datetime] = field(default_factory=dict, init=False)

    def create(self) -> tuple[UUID, ImageSessionController]:
        """Start a new empty session."""
        self.evict_expired()
        session_id = uuid4()
        controller = self.factory()
        self.sessions[session_id] = controller
        self._touched[session_id] = self.clock()
        return session_id, controller

    def get(self, session_id: UUID) -> ImageSessionController | None:
        """Return a live session, if present."""
        self.evict_expired()
        controller = self.sessions.get(session_id)
        if controller is not None:
            self._touched[session_id] = self.clock()
        return controller

    def close(self, session_id: UUID) -> bool:
        """Tear a session down; return false if it was unknown."""
        self._touched.pop(session_id, None)
        controller = self.sessions.pop(session_id, None)
        if controller is None:
            return False
        controller.close()
        return True

    def evict_expired(self) -> int:
        """Close every session idle for at least the TTL."""
        cutoff = self.clock() - timedelta(seconds=self.ttl_seconds)
        expired = [
            session_id
            for session_id, touched in self._touched.items()
            if touched <= cutoff
        ]
        for session_id in expired:
            self.close(session_id)
        if expired:
            _logger.info(
                "Evicted idle customizer sessions", extra={"count": len(expired)}
            )
        return len(expired)

    def close_all(self) -> None:
        """Tear down every live session."""
        for session_id in list(self.sessions):
            self.close(session_id)
        _logger.info("Closed all customizer sessions")
