"""Tests for the customizer HTTP API."""

import asyncio
from uuid import uuid4

import httpx
import pytest
from fastapi.testclient import TestClient

from design_customizer.api.app import create_app
from design_customizer.domain.images import ProcessingOperation
from design_customizer.errors import ProcessingError
from tests.conftest import png_bytes


@pytest.fixture
def client(container) -> TestClient:
    return TestClient(create_app(container))


def _new_session(client: TestClient) -> str:
    response = client.post("/sessions")
    assert response.status_code == 201
    return response.json()["session_id"]


def _upload(client: TestClient, session_id: str, content: bytes) -> dict:
    response = client.post(
        f"/sessions/{session_id}/upload",
        files={"image": ("design.png", content, "image/png")},
    )
    assert response.status_code == 200
    return response.json()


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_settings_endpoint(client: TestClient) -> None:
    response = client.get("/settings")

    assert response.status_code == 200
    data = response.json()
    assert data["enable_size"] is True
    assert data["enable_precut"] is False
    assert data["predefined_sizes"] == [
        {"width": 3.0, "height": 3.0},
        {"width": 5.0, "height": 4.0},
    ]


def test_new_session_is_empty(client: TestClient) -> None:
    response = client.post("/sessions")

    data = response.json()
    assert data["current"] is None
    assert data["image_path"] is None
    assert data["auto_process_enabled"] is True
    assert data["dimensions"] == {"width": 10.0, "height": 10.0}
    assert data["can_checkout"] is False


def test_unknown_session_returns_404(client: TestClient) -> None:
    assert client.get(f"/sessions/{uuid4()}").status_code == 404
    assert client.post(f"/sessions/{uuid4()}/enhance").status_code == 404


def test_upload_removes_background(client: TestClient, processing_client) -> None:
    session_id = _new_session(client)
    content = png_bytes()

    data = _upload(client, session_id, content)

    assert data["current"] == "processed"
    assert data["cart_image_url"] == "https://backend.test/remove_background/1.png"
    assert data["image_path"] == f"/sessions/{session_id}/image"
    assert data["can_checkout"] is True
    assert len(processing_client.calls) == 1

    image = client.get(f"/sessions/{session_id}/image")
    assert image.status_code == 200
    assert image.headers["content-type"] == "image/png"
    assert image.content == b"remove_background:" + content


def test_upload_rejects_non_images(client: TestClient) -> None:
    session_id = _new_session(client)

    text = client.post(
        f"/sessions/{session_id}/upload",
        files={"image": ("notes.txt", b"hello", "text/plain")},
    )
    empty = client.post(
        f"/sessions/{session_id}/upload",
        files={"image": ("empty.png", b"", "image/png")},
    )

    assert text.status_code == 400
    assert empty.status_code == 400


def test_upload_sniffs_generic_content_type(client: TestClient) -> None:
    session_id = _new_session(client)

    response = client.post(
        f"/sessions/{session_id}/upload",
        files={"image": ("design", png_bytes(), "application/octet-stream")},
    )

    assert response.status_code == 200
    assert response.json()["current"] == "processed"


def test_auto_process_toggle(client: TestClient, processing_client) -> None:
    session_id = _new_session(client)
    _upload(client, session_id, png_bytes())

    off = client.put(f"/sessions/{session_id}/auto-process", json={"enabled": False})
    on = client.put(f"/sessions/{session_id}/auto-process", json={"enabled": True})

    assert off.json()["current"] == "original"
    assert off.json()["cart_image_url"] == "https://backend.test/original/1.png"
    assert on.json()["current"] == "processed"
    assert len(processing_client.calls) == 1


def test_processing_failure_is_reported(client: TestClient, processing_client) -> None:
    processing_client.failures[ProcessingOperation.REMOVE_BACKGROUND] = (
        ProcessingError("remove_background failed with status 502")
    )
    session_id = _new_session(client)

    data = _upload(client, session_id, png_bytes())

    assert data["current"] == "original"
    assert data["errors"] == {
        "remove_background": "remove_background failed with status 502"
    }
    assert data["can_checkout"] is False


def test_enhance_endpoint(client: TestClient, processing_client) -> None:
    session_id = _new_session(client)
    _upload(client, session_id, png_bytes())

    data = client.post(f"/sessions/{session_id}/enhance").json()

    assert data["current"] == "processed"
    assert data["cart_image_url"] == "https://backend.test/enhance/2.png"
    assert processing_client.calls[1][0] == "enhance"


def test_dimensions_single_side_keeps_ratio(client: TestClient) -> None:
    session_id = _new_session(client)
    client.put(f"/sessions/{session_id}/auto-process", json={"enabled": False})
    _upload(client, session_id, png_bytes())

    response = client.put(f"/sessions/{session_id}/dimensions", json={"width": 8})

    assert response.json()["dimensions"] == {"width": 8.0, "height": 6.0}


def test_dimensions_validation(client: TestClient) -> None:
    session_id = _new_session(client)

    both = client.put(
        f"/sessions/{session_id}/dimensions", json={"width": 40, "height": 0.2}
    )
    empty = client.put(f"/sessions/{session_id}/dimensions", json={})
    negative = client.put(f"/sessions/{session_id}/dimensions", json={"width": -1})

    assert both.json()["dimensions"] == {"width": 22.5, "height": 0.5}
    assert empty.status_code == 400
    assert negative.status_code == 422


def test_dimensions_steps_keep_ratio(client: TestClient) -> None:
    session_id = _new_session(client)
    client.put(f"/sessions/{session_id}/auto-process", json={"enabled": False})
    _upload(client, session_id, png_bytes())

    wider = client.put(f"/sessions/{session_id}/dimensions", json={"width_steps": 2})
    shorter = client.put(
        f"/sessions/{session_id}/dimensions", json={"height_steps": -1}
    )

    assert wider.json()["dimensions"] == {"width": 6.0, "height": 4.5}
    assert shorter.json()["dimensions"] == {"width": 4.67, "height": 3.5}

def test_price_endpoint(client: TestClient) -> None:
    session_id = _new_session(client)

    response = client.get(
        f"/sessions/{session_id}/price", params={"pre_cut": "true", "quantity": 20}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["unit_price"] == 4.4
    assert data["discounted_unit_price"] == 3.52
    assert data["total_price"] == 70.4
    assert data["tier_label"] == "15-49 pcs (20% off)"
    assert client.get(
        f"/sessions/{session_id}/price", params={"quantity": 0}
    ).status_code == 422


def test_cart_requires_remote_image(client: TestClient, cart_client) -> None:
    session_id = _new_session(client)

    response = client.post(f"/sessions/{session_id}/cart", json={"quantity": 1})

    assert response.status_code == 409
    assert cart_client.payloads == []


def test_cart_refused_while_processing(
    container, processing_client, cart_client
) -> None:
    processing_client.gated = True
    transport = httpx.ASGITransport(app=create_app(container))

    async def scenario() -> tuple[httpx.Response, httpx.Response]:
        async with httpx.AsyncClient(
            transport=transport, base_url="http://testserver"
        ) as client:
            session_id = (await client.post("/sessions")).json()["session_id"]
            upload = asyncio.create_task(
                client.post(
                    f"/sessions/{session_id}/upload",
                    files={"image": ("design.png", png_bytes(), "image/png")},
                )
            )
            await processing_client.wait_for_calls(1)

            refused = await client.post(
                f"/sessions/{session_id}/cart", json={"quantity": 1}
            )
            processing_client.open_gate(0)
            await upload
            accepted = await client.post(
                f"/sessions/{session_id}/cart", json={"quantity": 1}
            )
        return refused, accepted

    refused, accepted = asyncio.run(scenario())

    assert refused.status_code == 409
    assert refused.json()["detail"] == "Image processing is still in progress"
    assert accepted.status_code == 200
    assert len(cart_client.payloads) == 1

def test_cart_submission(client: TestClient, cart_client) -> None:
    session_id = _new_session(client)
    _upload(client, session_id, png_bytes())

    response = client.post(
        f"/sessions/{session_id}/cart", json={"pre_cut": True, "quantity": 2}
    )

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    properties = cart_client.payloads[0]["properties"]
    assert properties["CustomImage"] == "https://backend.test/remove_background/1.png"
    assert properties["_PreCut"] == "Yes"
    assert properties["_Area_x"] == "4.00"
    assert properties["_Area_y"] == "3.00"


def test_cart_rejection_returns_502(client: TestClient, cart_client) -> None:
    cart_client.error = "Cannot find variant"
    session_id = _new_session(client)
    _upload(client, session_id, png_bytes())

    response = client.post(f"/sessions/{session_id}/cart", json={"quantity": 1})

    assert response.status_code == 502
    assert response.json()["detail"] == "Cannot find variant"


def test_cancel_clear_and_delete(client: TestClient) -> None:
    session_id = _new_session(client)
    _upload(client, session_id, png_bytes())

    cancel = client.post(f"/sessions/{session_id}/cancel")
    cleared = client.post(f"/sessions/{session_id}/clear")
    image = client.get(f"/sessions/{session_id}/image")
    deleted = client.delete(f"/sessions/{session_id}")

    assert cancel.json()["cancelled"] is False
    assert cleared.json()["current"] is None
    assert image.status_code == 404
    assert deleted.status_code == 204
    assert client.get(f"/sessions/{session_id}").status_code == 404
    assert client.delete(f"/sessions/{session_id}").status_code == 404
