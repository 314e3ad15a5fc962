"""Lifecycle management for locally-displayable image handles."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from design_customizer.domain.images import DisplayHandle

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredBlob:
    """Bytes held behind a display handle."""

    content: bytes
    content_type: str


class BlobStore(Protocol):
    """Storage interface for locally-displayable image blobs."""

    def create(self, content: bytes, content_type: str) -> DisplayHandle:
        """Store bytes and return a new display handle."""

    def read(self, handle: DisplayHandle) -> StoredBlob:
        """Return the blob for a live handle, raising KeyError once revoked."""

    def revoke(self, handle: DisplayHandle) -> None:
        """Drop the blob behind a handle, raising KeyError if unknown."""


@dataclass
class HandleLifecycle:
    """Creates display handles and releases each of them exactly once."""

    blob_store: BlobStore
    _live: set[DisplayHandle] = field(default_factory=set, init=False)

    def create(self, content: bytes, content_type: str) -> DisplayHandle:
        """Create a display handle owned by this lifecycle."""
        handle = self.blob_store.create(content, content_type)
        self._live.add(handle)
        return handle

    def release(self, handle: DisplayHandle | None) -> None:
        """Release a handle; repeated or unknown releases are ignored."""
        if handle is None or handle not in self._live:
            return
        self._live.discard(handle)
        try:
            self.blob_store.revoke(handle)
        except Exception:
            _logger.warning(
                "Failed to revoke display handle", extra={"handle": handle}
            )

    def release_all(self) -> None:
        """Release every handle still owned by this lifecycle."""
        for handle in list(self._live):
            self.release(handle)

    @property
    def live_handles(self) -> frozenset[DisplayHandle]:
        """Handles created here and not yet released."""
        return frozenset(self._live)
