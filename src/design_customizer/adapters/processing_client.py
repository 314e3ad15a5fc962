"""HTTP client for the remote image processing backend."""

from dataclasses import dataclass

import httpx

from design_customizer.domain.images import ProcessingOperation, ProcessingResult
from design_customizer.errors import ProcessingError
from design_customizer.services.processing import ProcessingClient

_ENDPOINTS = {
    ProcessingOperation.REMOVE_BACKGROUND: "api/images/remove-bg",
    ProcessingOperation.ENHANCE: "api/images/enhance",
}
_RESULT_LINK_HEADERS = {
    ProcessingOperation.REMOVE_BACKGROUND: "X-Image-Link",
    ProcessingOperation.ENHANCE: "X-AutoEnhance-Link",
}
_ORIGINAL_LINK_HEADER = "X-Original-Image-Link"


@dataclass
class HttpxProcessingClient(ProcessingClient):
    """Processing client posting multipart images with httpx."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float | None = None

    @classmethod
    def create(
        cls, base_url: str, timeout: float | None = None
    ) -> "HttpxProcessingClient":
        """Create a processing client with a managed httpx session."""
        return cls(
            base_url=base_url, http_client=httpx.AsyncClient(), timeout=timeout
        )

    async def process(
        self, operation: ProcessingOperation, content: bytes, content_type: str
    ) -> ProcessingResult:
        """Upload image bytes to the operation's endpoint."""
        url = build_server_url(self.base_url, _ENDPOINTS[operation])
        try:
            response = await self.http_client.post(
                url,
                files={"image": (_filename(content_type), content, content_type)},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ProcessingError(
                f"{operation} failed with status {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ProcessingError(f"{operation} request failed: {exc}") from exc
        if not response.content:
            raise ProcessingError(f"{operation} returned an empty image")
        return ProcessingResult(
            content=response.content,
            content_type=response.headers.get("content-type", "image/png"),
            remote_handle=build_server_url(
                self.base_url, response.headers.get(_RESULT_LINK_HEADERS[operation])
            ),
            original_remote_handle=build_server_url(
                self.base_url, response.headers.get(_ORIGINAL_LINK_HEADER)
            ),
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def build_server_url(base_url: str, path: str | None) -> str | None:
    """Join a backend path onto the API base without doubled slashes."""
    if not path:
        return None
    if path.startswith(("http://", "https://")):
        return path
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def _filename(content_type: str) -> str:
    extension = {
        "image/png": "png",
        "image/jpeg": "jpg",
        "image/webp": "webp",
        "image/gif": "gif",
    }.get(content_type, "png")
    return f"image.{extension}"
