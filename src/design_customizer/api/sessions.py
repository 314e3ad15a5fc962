"""Customizer session endpoints."""

from uuid import UUID

from fastapi import (
    APIRouter,
    Depends,
    File,
    HTTPException,
    Query,
    Request,
    Response,
    UploadFile,
    status,
)

from design_customizer.api.models import (
    AutoProcessRequest,
    CartRequest,
    DimensionsRequest,
    PriceResponse,
    SessionResponse,
)
from design_customizer.containers import AppContainer
from design_customizer.domain.images import Dimensions, detect_content_type
from design_customizer.errors import CartSubmissionError, InvalidArtifactError
from design_customizer.services import sizing
from design_customizer.services.sessions import ImageSessionController

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def get_session(
    session_id: UUID, container: AppContainer = Depends(_container)
) -> ImageSessionController:
    """Resolve a live session or respond with 404."""
    controller = container.session_registry.get(session_id)
    if controller is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Session not found"
        )
    return controller


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_session(
    container: AppContainer = Depends(_container),
) -> SessionResponse:
    """Start an empty customizer session."""
    session_id, controller = container.session_registry.create()
    return SessionResponse.from_snapshot(session_id, controller.snapshot())


@router.get("/{session_id}")
async def read_session(
    session_id: UUID, controller: ImageSessionController = Depends(get_session)
) -> SessionResponse:
    """Return the session view."""
    return SessionResponse.from_snapshot(session_id, controller.snapshot())


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: UUID, container: AppContainer = Depends(_container)
) -> Response:
    """Tear a session down and release its images."""
    if not container.session_registry.close(session_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Session not found"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{session_id}/upload")
async def upload_image(
    session_id: UUID,
    image: UploadFile = File(...),
    controller: ImageSessionController = Depends(get_session),
) -> SessionResponse:
    """Upload a new design, replacing any previous one."""
    content = await image.read()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty"
        )
    content_type = image.content_type or ""
    if not content_type.startswith("image/"):
        content_type = detect_content_type(content)
        if not content_type.startswith("image/"):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Please upload an image file",
            )
    await controller.upload(content, content_type)
    return SessionResponse.from_snapshot(session_id, controller.snapshot())


@router.post("/{session_id}/remove-background")
async def remove_background(
    session_id: UUID, controller: ImageSessionController = Depends(get_session)
) -> SessionResponse:
    """Remove the background of the current design."""
    await controller.remove_background()
    return SessionResponse.from_snapshot(session_id, controller.snapshot())


@router.post("/{session_id}/enhance")
async def enhance(
    session_id: UUID, controller: ImageSessionController = Depends(get_session)
) -> SessionResponse:
    """Enhance the current design."""
    await controller.enhance()
    return SessionResponse.from_snapshot(session_id, controller.snapshot())


@router.put("/{session_id}/auto-process")
async def set_auto_process(
    session_id: UUID,
    payload: AutoProcessRequest,
    controller: ImageSessionController = Depends(get_session),
) -> SessionResponse:
    """Turn automatic background removal on or off."""
    await controller.toggle_auto_process(payload.enabled)
    return SessionResponse.from_snapshot(session_id, controller.snapshot())


@router.put("/{session_id}/dimensions")
async def set_dimensions(
    session_id: UUID,
    payload: DimensionsRequest,
    controller: ImageSessionController = Depends(get_session),
) -> SessionResponse:
    """Set the declared print size in inches."""
    current = controller.snapshot().dimensions
    if payload.width is not None and payload.height is not None:
        dimensions = Dimensions(payload.width, payload.height)
    elif payload.width is not None:
        dimensions = sizing.resize_width(current, payload.width)
    elif payload.height is not None:
        dimensions = sizing.resize_height(current, payload.height)
    elif payload.width_steps is not None:
        dimensions = sizing.step_width(current, payload.width_steps)
    elif payload.height_steps is not None:
        dimensions = sizing.step_height(current, payload.height_steps)
    else:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provide a width, a height or a number of steps",
        )
    controller.set_dimensions(dimensions)
    return SessionResponse.from_snapshot(session_id, controller.snapshot())


@router.post("/{session_id}/cancel")
async def cancel_processing(
    session_id: UUID, controller: ImageSessionController = Depends(get_session)
) -> dict[str, object]:
    """Cancel the in-flight processing call, if any."""
    cancelled = controller.cancel_processing()
    return {
        "cancelled": cancelled,
        "session": SessionResponse.from_snapshot(
            session_id, controller.snapshot()
        ).model_dump(mode="json"),
    }


@router.post("/{session_id}/clear")
async def clear_session(
    session_id: UUID, controller: ImageSessionController = Depends(get_session)
) -> SessionResponse:
    """Remove the design and return the session to its empty state."""
    controller.clear()
    return SessionResponse.from_snapshot(session_id, controller.snapshot())


@router.get("/{session_id}/image")
async def displayed_image(
    controller: ImageSessionController = Depends(get_session),
    container: AppContainer = Depends(_container),
) -> Response:
    """Serve the bytes of the image the session currently shows."""
    handle = controller.snapshot().displayed_handle
    if handle is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="No image uploaded"
        )
    try:
        blob = container.blob_store.read(handle)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Image is no longer available"
        ) from exc
    return Response(content=blob.content, media_type=blob.content_type)


@router.get("/{session_id}/price")
async def price(
    pre_cut: bool = False,
    quantity: int = Query(default=1, ge=1),
    controller: ImageSessionController = Depends(get_session),
    container: AppContainer = Depends(_container),
) -> PriceResponse:
    """Estimate the price for the declared size."""
    dimensions = controller.snapshot().dimensions
    quote = container.pricing_service.quote(
        dimensions.width_inches, dimensions.height_inches, pre_cut, quantity
    )
    return PriceResponse.from_quote(quote)


@router.post("/{session_id}/cart")
async def add_to_cart(
    payload: CartRequest,
    controller: ImageSessionController = Depends(get_session),
    container: AppContainer = Depends(_container),
) -> dict[str, object]:
    """Add the current design to the storefront cart."""
    snapshot = controller.snapshot()
    if snapshot.in_flight is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Image processing is still in progress",
        )
    try:
        cart = await container.cart_service.add_to_cart(
            snapshot.cart_remote_handle,
            snapshot.dimensions,
            pre_cut=payload.pre_cut,
            quantity=payload.quantity,
        )
    except InvalidArtifactError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=str(exc)
        ) from exc
    except CartSubmissionError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
        ) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return {"status": "ok", "cart": cart}
