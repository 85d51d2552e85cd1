"""Sale Routes: simulate, register and download over HTTP.

Invariants:
    - Domain errors render as structured JSON with localized messages
    - Accept-Language selects the message language, Spanish otherwise
    - Invalid bodies answer 400 with field details
"""

import pytest

from catalog_sync.schemas.rights import PublicationMetadata, RemoteResponse

from tests.services.catalog_builders import (
    make_category, make_publication, make_publisher,
)

ISBN = "9789990000042"


@pytest.fixture
async def product_42(seed):
    await seed(
        make_category("FA", 11), make_category("FB", 12),
        make_publication(
            "pub-42", isbn=ISBN, product_id=42, amount=100.0, currency="BOB",
            migrated=True, publisher=make_publisher(tag_id=7),
        ),
    )


async def test_simulate_ok(client, product_42):
    response = await client.post("/api/v1/sales/simulate", json={"product_id": 42})

    assert response.status_code == 200
    assert response.json() == {
        "ok": True, "message": "OK", "product_id": 42, "price": 100.0,
    }


async def test_simulate_stale_product(client, rights, product_42):
    rights.simulate_response = RemoteResponse(status_code=400)
    rights.metadata = PublicationMetadata(
        isbn=ISBN, title="T", price_amount=90.0, currency="BOB",
    )

    response = await client.post("/api/v1/sales/simulate", json={"product_id": 42})

    body = response.json()
    assert response.status_code == 200
    assert body["ok"] is False
    assert body["message"] == "Los datos del producto fueron actualizados."
    assert body["price"] == 90.0


async def test_simulate_unknown_product_is_404_in_spanish(client, product_42):
    response = await client.post("/api/v1/sales/simulate", json={"product_id": 7})

    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "RESOURCE_NOT_FOUND"
    assert error["message"].startswith("No se pudo encontrar el producto")


async def test_unmappable_catalog_code_is_422(client, rights, seed):
    publication = make_publication(
        "pub-99", isbn="9789990000099", product_id=99, migrated=True, subject_codes=None,
    )
    publication.technical_protection = "99"
    await seed(publication)

    response = await client.post("/api/v1/sales/simulate", json={"product_id": 99})

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "INVALID_CATALOG_DATA"
    assert error["context"]["product_id"] == 99
    assert error["message"].startswith("Los datos del producto no son validos")
    assert rights.calls == []


async def test_error_language_follows_accept_language(client, product_42):
    response = await client.post(
        "/api/v1/sales/simulate", json={"product_id": 7},
        headers={"Accept-Language": "en-US,en;q=0.9"},
    )

    assert response.json()["error"]["message"].startswith("The requested product")


async def test_invalid_body_is_400(client):
    response = await client.post("/api/v1/sales/simulate", json={"product_id": 0})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["message"] == "Los datos enviados no son validos."
    assert error["details"][0]["field"] == "body.product_id"


async def test_register_then_download(client, product_42):
    created = await client.post(
        "/api/v1/sales",
        json={"product_id": 42, "order_id": "order-1", "username": "ana"},
    )
    assert created.status_code == 201
    token = created.json()["token"]

    download = await client.get(f"/api/v1/downloads/{token}", params={"username": "ana"})
    assert download.status_code == 200
    assert download.json() == {"download_url": "https://downloads.test/file.epub"}

    again = await client.get(f"/api/v1/downloads/{token}", params={"username": "ana"})
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "SALE_ALREADY_DOWNLOADED"


async def test_duplicate_order_is_409(client, product_42):
    body = {"product_id": 42, "order_id": "order-1", "username": "ana"}
    await client.post("/api/v1/sales", json=body)

    response = await client.post("/api/v1/sales", json=body)

    assert response.status_code == 409
    assert response.json()["error"]["message"] == "La venta de este pedido ya fue registrada."


async def test_rejected_sale_is_400(client, rights, product_42):
    rights.register_response = RemoteResponse(status_code=500)

    response = await client.post(
        "/api/v1/sales",
        json={"product_id": 42, "order_id": "order-1", "username": "ana"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["message"].startswith("No se puede registrar la venta")


async def test_unknown_download_token_is_404(client):
    response = await client.get("/api/v1/downloads/missing", params={"username": "ana"})

    assert response.status_code == 404
    assert response.json()["error"]["message"].startswith(
        "No se pudo encontrar el registro de venta",
    )


async def test_download_requires_username(client):
    response = await client.get("/api/v1/downloads/some-token")
    assert response.status_code == 400
