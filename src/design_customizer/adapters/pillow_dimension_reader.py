"""Pillow-backed reader for image pixel dimensions."""

import asyncio
from dataclasses import dataclass
from io import BytesIO

from PIL import Image

from design_customizer.domain.images import Dimensions, DisplayHandle
from design_customizer.errors import DimensionReadError
from design_customizer.services.dimensions import (
    DPI,
    DimensionReader,
    pixels_to_dimensions,
)
from design_customizer.services.handles import BlobStore


@dataclass
class PillowDimensionReader(DimensionReader):
    """Decodes the blob behind a display handle to size it in inches."""

    blob_store: BlobStore
    dpi: int = DPI

    async def read_dimensions(self, handle: DisplayHandle) -> Dimensions:
        """Return clamped inches for the image behind a handle."""
        try:
            blob = self.blob_store.read(handle)
        except KeyError as exc:
            raise DimensionReadError(f"Display handle {handle} is gone") from exc
        width_px, height_px = await asyncio.to_thread(_pixel_size, blob.content)
        return pixels_to_dimensions(width_px, height_px, dpi=self.dpi)


def _pixel_size(content: bytes) -> tuple[int, int]:
    """Decode just enough of the image to learn its pixel size."""
    try:
        with Image.open(BytesIO(content)) as image:
            return image.size
    except (OSError, Image.DecompressionBombError) as exc:
        raise DimensionReadError("Failed to load image for dimensions") from exc
