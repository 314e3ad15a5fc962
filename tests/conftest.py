"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from io import BytesIO

import pytest
from PIL import Image

from design_customizer.config import Settings
from design_customizer.containers import AppContainer, session_factory
from design_customizer.domain.images import (
    Dimensions,
    DisplayHandle,
    ProcessingOperation,
    ProcessingResult,
)
from design_customizer.errors import CartSubmissionError, DimensionReadError
from design_customizer.services.artifacts import ArtifactStore
from design_customizer.services.cache import InMemoryCache
from design_customizer.services.cart import CartClient, CartService
from design_customizer.services.customizer_settings import (
    CustomizerSettingsService,
    SettingsClient,
)
from design_customizer.services.dimensions import DimensionReader
from design_customizer.services.handles import BlobStore, HandleLifecycle, StoredBlob
from design_customizer.services.pricing import PricingService
from design_customizer.services.processing import (
    ProcessingClient,
    RemoteProcessingService,
)
from design_customizer.services.registry import SessionRegistry
from design_customizer.services.sessions import ImageSessionController


def png_bytes(width: int = 600, height: int = 300) -> bytes:
    """Encode a blank PNG of the given pixel size."""
    buffer = BytesIO()
    Image.new("RGBA", (width, height), (255, 0, 0, 255)).save(buffer, format="PNG")
    return buffer.getvalue()


@dataclass
class RecordingBlobStore(BlobStore):
    """Blob store that records every create and revoke."""

    blobs: dict[DisplayHandle, StoredBlob] = field(default_factory=dict)
    created: list[DisplayHandle] = field(default_factory=list)
    revoke_calls: list[DisplayHandle] = field(default_factory=list)
    failing_revokes: set[DisplayHandle] = field(default_factory=set)

    def create(self, content: bytes, content_type: str) -> DisplayHandle:
        handle = DisplayHandle(f"blob:test-{len(self.created) + 1}")
        self.blobs[handle] = StoredBlob(content=content, content_type=content_type)
        self.created.append(handle)
        return handle

    def read(self, handle: DisplayHandle) -> StoredBlob:
        return self.blobs[handle]

    def revoke(self, handle: DisplayHandle) -> None:
        self.revoke_calls.append(handle)
        if handle in self.failing_revokes:
            raise RuntimeError("revoke failed")
        del self.blobs[handle]


@dataclass
class FakeProcessingClient(ProcessingClient):
    """Processing client returning predictable results.

    With `gated` set, every call waits until the test opens its gate.
    """

    gated: bool = False
    failures: dict[ProcessingOperation, Exception] = field(default_factory=dict)
    calls: list[tuple[ProcessingOperation, bytes]] = field(default_factory=list)
    gates: list[asyncio.Event] = field(default_factory=list)

    async def process(
        self, operation: ProcessingOperation, content: bytes, content_type: str
    ) -> ProcessingResult:
        self.calls.append((operation, content))
        number = len(self.calls)
        if self.gated:
            gate = asyncio.Event()
            self.gates.append(gate)
            await gate.wait()
        failure = self.failures.get(operation)
        if failure is not None:
            raise failure
        return ProcessingResult(
            content=f"{operation}:".encode() + content,
            content_type="image/png",
            remote_handle=f"https://backend.test/{operation}/{number}.png",
            original_remote_handle=f"https://backend.test/original/{number}.png",
        )

    def open_gate(self, index: int) -> None:
        self.gates[index].set()

    async def wait_for_calls(self, count: int) -> None:
        for attempt in range(500):
            if len(self.calls) >= count:
                return
            await asyncio.sleep(0 if attempt < 100 else 0.01)
        raise AssertionError(f"expected {count} processing calls, got {self.calls}")


@dataclass
class FakeDimensionReader(DimensionReader):
    """Dimension reader that sizes blobs by their content."""

    blob_store: BlobStore
    sizes: dict[bytes, Dimensions] = field(default_factory=dict)
    default: Dimensions = field(default_factory=lambda: Dimensions(4.0, 3.0))
    failing: bool = False
    reads: list[DisplayHandle] = field(default_factory=list)

    async def read_dimensions(self, handle: DisplayHandle) -> Dimensions:
        self.reads.append(handle)
        if self.failing:
            raise DimensionReadError("Failed to load image for dimensions")
        try:
            blob = self.blob_store.read(handle)
        except KeyError as exc:
            raise DimensionReadError(f"Display handle {handle} is gone") from exc
        return self.sizes.get(blob.content, self.default)


@dataclass
class FakeCartClient(CartClient):
    """Cart client that records payloads."""

    payloads: list[dict[str, object]] = field(default_factory=list)
    error: str | None = None

    async def add_line_item(self, payload: dict[str, object]) -> dict[str, object]:
        self.payloads.append(payload)
        if self.error:
            raise CartSubmissionError(self.error)
        return {"id": payload["id"], "quantity": payload["quantity"]}


@dataclass
class FakeSettingsClient(SettingsClient):
    """Settings client returning a fixed payload."""

    payload: object = field(
        default_factory=lambda: {
            "enableSize": True,
            "enablePrecut": False,
            "enableQuantity": True,
            "enablePlacement": "true",
            "predefinedSizes": [{"width": 3, "height": 3}, {"width": "5", "height": 4}],
        }
    )
    error: Exception | None = None
    calls: int = 0

    async def fetch_settings(self) -> dict[str, object]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.payload  # type: ignore[return-value]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        processing_api_base="https://backend.test",
        storefront_base_url="https://shop.test",
        variant_id="4242",
    )


@pytest.fixture
def blob_store() -> RecordingBlobStore:
    return RecordingBlobStore()


@pytest.fixture
def processing_client() -> FakeProcessingClient:
    return FakeProcessingClient()


@pytest.fixture
def dimension_reader(blob_store: RecordingBlobStore) -> FakeDimensionReader:
    return FakeDimensionReader(blob_store)


@pytest.fixture
def cart_client() -> FakeCartClient:
    return FakeCartClient()


@pytest.fixture
def settings_client() -> FakeSettingsClient:
    return FakeSettingsClient()


@pytest.fixture
def controller(
    blob_store: RecordingBlobStore,
    processing_client: FakeProcessingClient,
    dimension_reader: FakeDimensionReader,
) -> ImageSessionController:
    return ImageSessionController(
        artifacts=ArtifactStore(HandleLifecycle(blob_store)),
        processing=RemoteProcessingService(processing_client),
        dimension_reader=dimension_reader,
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    blob_store: RecordingBlobStore,
    processing_client: FakeProcessingClient,
    dimension_reader: FakeDimensionReader,
    cart_client: FakeCartClient,
    settings_client: FakeSettingsClient,
) -> AppContainer:
    session_registry = SessionRegistry(
        session_factory(
            blob_store=blob_store,
            processing_service=RemoteProcessingService(processing_client),
            dimension_reader=dimension_reader,
            auto_process_default=settings.auto_process_default,
        ),
        ttl_seconds=settings.session_ttl_seconds,
    )

    async def close_resources() -> None:
        session_registry.close_all()

    return AppContainer(
        settings=settings,
        blob_store=blob_store,
        session_registry=session_registry,
        pricing_service=PricingService(base_price=settings.base_price),
        cart_service=CartService(cart_client, settings.variant_id),
        customizer_settings_service=CustomizerSettingsService(
            client=settings_client, cache=InMemoryCache()
        ),
        close_resources=close_resources,
    )
