"""Domain models for uploaded designs and their processed variants."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import NewType

DisplayHandle = NewType("DisplayHandle", str)


class ArtifactKind(StrEnum):
    """Which version of the uploaded image an artifact holds."""

    ORIGINAL = "original"
    PROCESSED = "processed"


class ProcessingOperation(StrEnum):
    """Remote operations that share the single processing slot."""

    REMOVE_BACKGROUND = "remove_background"
    ENHANCE = "enhance"


@dataclass(frozen=True)
class Artifact:
    """A single image representation with its local and remote references.

    The bytes live only in the blob store, behind `display_handle`.
    """

    kind: ArtifactKind
    display_handle: DisplayHandle
    content_type: str
    remote_handle: str | None = None


@dataclass(frozen=True)
class Dimensions:
    """Declared physical size of the design in inches."""

    width_inches: float
    height_inches: float


DEFAULT_DIMENSIONS = Dimensions(width_inches=10.0, height_inches=10.0)


@dataclass(frozen=True)
class ProcessingResult:
    """Raw outcome of a remote processing round trip."""

    content: bytes = field(repr=False)
    content_type: str
    remote_handle: str | None
    original_remote_handle: str | None


@dataclass
class ImageSessionState:
    """Aggregate state owned by a single session controller."""

    auto_process_enabled: bool = True
    dimensions: Dimensions = DEFAULT_DIMENSIONS
    current: ArtifactKind | None = None
    original: Artifact | None = None
    processed: Artifact | None = None
    in_flight: ProcessingOperation | None = None
    errors: dict[ProcessingOperation, str] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    def artifact(self, kind: ArtifactKind | None) -> Artifact | None:
        """Return the artifact stored under a kind, if any."""
        if kind is ArtifactKind.ORIGINAL:
            return self.original
        if kind is ArtifactKind.PROCESSED:
            return self.processed
        return None

    @property
    def current_artifact(self) -> Artifact | None:
        """Artifact currently displayed and edited."""
        return self.artifact(self.current)


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a session for the UI layer."""

    current: ArtifactKind | None
    displayed_handle: DisplayHandle | None
    cart_remote_handle: str | None
    auto_process_enabled: bool
    in_flight: ProcessingOperation | None
    errors: dict[ProcessingOperation, str]
    warnings: list[str]
    dimensions: Dimensions
    can_checkout: bool


def detect_content_type(content: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if content.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if content.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "image/webp"
    if content[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "application/octet-stream"
