"""Storage for the original and processed versions of a design."""

from dataclasses import dataclass, replace

from design_customizer.domain.images import (
    Artifact,
    ArtifactKind,
    ImageSessionState,
)
from design_customizer.services.handles import HandleLifecycle, StoredBlob


@dataclass
class ArtifactStore:
    """Keeps the two artifact slots and the handles they own in step."""

    lifecycle: HandleLifecycle

    def create(
        self,
        kind: ArtifactKind,
        content: bytes,
        content_type: str,
        remote_handle: str | None = None,
    ) -> Artifact:
        """Create an artifact with a freshly created display handle."""
        handle = self.lifecycle.create(content, content_type)
        return Artifact(
            kind=kind,
            display_handle=handle,
            content_type=content_type,
            remote_handle=remote_handle,
        )

    def read(self, artifact: Artifact) -> StoredBlob:
        """Return the bytes behind an artifact's display handle."""
        return self.lifecycle.blob_store.read(artifact.display_handle)

    def put(self, state: ImageSessionState, artifact: Artifact) -> None:
        """Store an artifact in its slot, releasing the handle it replaces."""
        previous = state.artifact(artifact.kind)
        self._assign(state, artifact.kind, artifact)
        if previous is not None and previous.display_handle != artifact.display_handle:
            self.lifecycle.release(previous.display_handle)

    def attach_remote_handle(
        self, state: ImageSessionState, kind: ArtifactKind, remote_handle: str
    ) -> None:
        """Record the remote handle of a stored artifact."""
        artifact = state.artifact(kind)
        if artifact is None:
            return
        self._assign(state, kind, replace(artifact, remote_handle=remote_handle))

    def clear(self, state: ImageSessionState) -> None:
        """Empty both slots and release their handles."""
        for kind in (ArtifactKind.PROCESSED, ArtifactKind.ORIGINAL):
            artifact = state.artifact(kind)
            self._assign(state, kind, None)
            if artifact is not None:
                self.lifecycle.release(artifact.display_handle)

    @staticmethod
    def _assign(
        state: ImageSessionState, kind: ArtifactKind, artifact: Artifact | None
    ) -> None:
        if kind is ArtifactKind.ORIGINAL:
            state.original = artifact
        else:
            state.processed = artifact
