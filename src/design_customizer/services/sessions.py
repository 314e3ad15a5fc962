"""Session state machine for an uploaded design and its processed variant."""

import asyncio
import logging
from dataclasses import dataclass, field

from design_customizer.domain.images import (
    Artifact,
    ArtifactKind,
    Dimensions,
    DisplayHandle,
    ImageSessionState,
    ProcessingOperation,
    SessionSnapshot,
    detect_content_type,
)
from design_customizer.errors import (
    DimensionReadError,
    ProcessingCancelledError,
    ProcessingError,
)
from design_customizer.services import projection
from design_customizer.services.artifacts import ArtifactStore
from design_customizer.services.cancellation import (
    CancellationCoordinator,
    CancellationToken,
)
from design_customizer.services.dimensions import DimensionReader, clamp_inches
from design_customizer.services.handles import HandleLifecycle
from design_customizer.services.processing import RemoteProcessingService

_logger = logging.getLogger(__name__)


@dataclass
class ImageSessionController:
    """State machine that owns one shopper's `ImageSessionState`.

    Each operation performs its whole state transition before its first
    `await`; the only suspension points are the remote processing call and
    the dimension read. Results of those calls are applied only while they
    still belong to what the session shows, so stale responses are dropped.
    """

    artifacts: ArtifactStore
    processing: RemoteProcessingService
    dimension_reader: DimensionReader
    coordinator: CancellationCoordinator = field(
        default_factory=CancellationCoordinator
    )
    state: ImageSessionState = field(default_factory=ImageSessionState)

    @property
    def lifecycle(self) -> HandleLifecycle:
        """Lifecycle owning every display handle of this session."""
        return self.artifacts.lifecycle

    def snapshot(self) -> SessionSnapshot:
        """Return the current read-only view of the session."""
        return projection.snapshot(self.state)

    async def upload(self, content: bytes, content_type: str | None = None) -> None:
        """Replace the design with a new original image."""
        self._cancel_in_flight()
        self.artifacts.clear(self.state)
        original = self.artifacts.create(
            ArtifactKind.ORIGINAL,
            content,
            content_type or detect_content_type(content),
        )
        self.artifacts.put(self.state, original)
        self.state.current = ArtifactKind.ORIGINAL
        self.state.errors.clear()
        self.state.warnings.clear()
        _logger.info(
            "Design uploaded",
            extra={
                "bytes": len(content),
                "auto_process": self.state.auto_process_enabled,
            },
        )

        pending = [self._refresh_dimensions(original.display_handle)]
        if self.state.auto_process_enabled:
            token = self._begin(ProcessingOperation.REMOVE_BACKGROUND)
            pending.append(
                self._run(token, ArtifactKind.ORIGINAL, content, original.content_type)
            )
        await asyncio.gather(*pending)

    async def remove_background(self) -> None:
        """Remove the background of the current image."""
        await self._request(ProcessingOperation.REMOVE_BACKGROUND)

    async def enhance(self) -> None:
        """Enhance the current image without touching its physical size."""
        await self._request(ProcessingOperation.ENHANCE)

    async def toggle_auto_process(self, enabled: bool) -> None:
        """Switch between the background-removed and the original view."""
        state = self.state
        state.auto_process_enabled = enabled
        if not enabled:
            # Anything started from the processed view would display it again.
            if (
                self.coordinator.in_flight is ProcessingOperation.REMOVE_BACKGROUND
                or state.current is ArtifactKind.PROCESSED
            ):
                self._cancel_in_flight()
            if state.current is ArtifactKind.PROCESSED and state.original is not None:
                await self._show(ArtifactKind.ORIGINAL)
            return

        if state.processed is not None:
            if state.current is not ArtifactKind.PROCESSED:
                await self._show(ArtifactKind.PROCESSED)
            return
        if state.original is None:
            return
        if self.coordinator.in_flight is ProcessingOperation.REMOVE_BACKGROUND:
            return
        await self._start(ProcessingOperation.REMOVE_BACKGROUND, state.original)

    def set_dimensions(self, dimensions: Dimensions) -> None:
        """Record user-declared physical dimensions."""
        self.state.dimensions = Dimensions(
            width_inches=clamp_inches(dimensions.width_inches),
            height_inches=clamp_inches(dimensions.height_inches),
        )

    def cancel_processing(self) -> bool:
        """Stop the in-flight processing call, keeping everything else."""
        cancelled = self._cancel_in_flight()
        if cancelled:
            _logger.info("Processing cancelled by user")
        return cancelled

    def clear(self) -> None:
        """Release every handle and return to the empty state."""
        self._cancel_in_flight()
        self.artifacts.clear(self.state)
        self.state.current = None
        self.state.errors.clear()
        self.state.warnings.clear()

    def close(self) -> None:
        """Tear the session down, releasing anything still owned."""
        self.clear()
        self.lifecycle.release_all()

    async def _request(self, operation: ProcessingOperation) -> None:
        source = self.state.current_artifact
        if source is None:
            _logger.info("Ignoring %s without an image", operation)
            return
        if self.coordinator.in_flight is operation:
            return
        await self._start(operation, source)

    async def _start(self, operation: ProcessingOperation, source: Artifact) -> None:
        blob = self.artifacts.read(source)
        token = self._begin(operation)
        await self._run(token, source.kind, blob.content, blob.content_type)

    def _begin(self, operation: ProcessingOperation) -> CancellationToken:
        token = self.coordinator.begin(operation)
        self.state.in_flight = operation
        self.state.errors.pop(operation, None)
        return token

    def _cancel_in_flight(self) -> bool:
        cancelled = self.coordinator.cancel()
        self.state.in_flight = None
        return cancelled

    async def _run(
        self,
        token: CancellationToken,
        source: ArtifactKind,
        content: bytes,
        content_type: str,
    ) -> None:
        operation = token.operation
        try:
            result = await self.processing.process(
                operation, content, content_type, token
            )
        except ProcessingCancelledError:
            _logger.debug("Dropped cancelled %s call", operation)
            return
        except ProcessingError as exc:
            self._fail(token, str(exc))
            return
        except asyncio.CancelledError:
            if self.coordinator.is_current(token):
                self._cancel_in_flight()
            raise
        except Exception:
            _logger.exception("Unexpected %s failure", operation)
            self._fail(token, "Image processing failed. Please try again.")
            return

        if not self.coordinator.is_current(token):
            _logger.debug("Dropped stale %s result", operation)
            return
        self.coordinator.finish(token)
        self.state.in_flight = None
        processed = self.artifacts.create(
            ArtifactKind.PROCESSED,
            result.content,
            result.content_type,
            remote_handle=result.remote_handle,
        )
        self.artifacts.put(self.state, processed)
        if source is ArtifactKind.ORIGINAL and result.original_remote_handle:
            self.artifacts.attach_remote_handle(
                self.state, ArtifactKind.ORIGINAL, result.original_remote_handle
            )
        self.state.current = ArtifactKind.PROCESSED
        _logger.info(
            "Processed image ready",
            extra={
                "operation": str(operation),
                "has_remote_handle": result.remote_handle is not None,
            },
        )
        # Enhance changes resolution only; the declared physical size stays.
        if operation is ProcessingOperation.REMOVE_BACKGROUND:
            await self._refresh_dimensions(processed.display_handle)

    def _fail(self, token: CancellationToken, message: str) -> None:
        if not self.coordinator.is_current(token):
            return
        self.coordinator.finish(token)
        self.state.in_flight = None
        self.state.errors[token.operation] = message
        _logger.warning(
            "Processing failed",
            extra={"operation": str(token.operation), "error": message},
        )

    async def _show(self, kind: ArtifactKind) -> None:
        artifact = self.state.artifact(kind)
        if artifact is None:
            return
        self.state.current = kind
        await self._refresh_dimensions(artifact.display_handle)

    async def _refresh_dimensions(self, handle: DisplayHandle) -> None:
        try:
            dimensions = await self.dimension_reader.read_dimensions(handle)
        except DimensionReadError as exc:
            _logger.warning("Could not read image dimensions: %s", exc)
            if projection.displayed_handle(self.state) == handle:
                self.state.warnings.append(f"Could not read image dimensions: {exc}")
            return
        if projection.displayed_handle(self.state) != handle:
            return
        self.state.dimensions = dimensions
