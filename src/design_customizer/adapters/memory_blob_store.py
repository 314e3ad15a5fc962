"""Process-local store for displayable image blobs."""

from dataclasses import dataclass, field
from uuid import uuid4

from design_customizer.domain.images import DisplayHandle
from design_customizer.services.handles import BlobStore, StoredBlob


@dataclass
class InMemoryBlobStore(BlobStore):
    """Keeps blobs in memory behind `blob:` handles."""

    blobs: dict[DisplayHandle, StoredBlob] = field(default_factory=dict)

    def create(self, content: bytes, content_type: str) -> DisplayHandle:
        """Store bytes under a fresh handle."""
        handle = DisplayHandle(f"blob:{uuid4()}")
        self.blobs[handle] = StoredBlob(content=content, content_type=content_type)
        return handle

    def read(self, handle: DisplayHandle) -> StoredBlob:
        """Return the blob behind a live handle."""
        return self.blobs[handle]

    def revoke(self, handle: DisplayHandle) -> None:
        """Drop a blob; unknown handles raise KeyError."""
        del self.blobs[handle]
