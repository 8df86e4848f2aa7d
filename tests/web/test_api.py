"""
HTTP tests for the FastAPI application.

Runs the real app against the in-memory test database, fake Redis and the
fake AI / card-gateway clients through httpx's ASGI transport.
"""

import httpx
import pytest
import pytest_asyncio

import config
from fakes import FakeCompletionClient, FakePaymentGateway
from web.app import create_app
from web.dependencies import get_session

ORDER_PAYLOAD = {
    "shippingInfo": {"address": "12 MG Road", "city": "Pune", "state": "MH", "country": "India",
                     "pinCode": "411001", "phoneNo": "9876543210"},
    "paymentInfo": {"method": "COD"},
    "itemsPrice": 100,
    "taxPrice": 15,
    "shippingPrice": 0,
    "totalPrice": 115,
}


@pytest.fixture
def payment_gateway():
    return FakePaymentGateway(client_secret="pi_9_secret_abc")


@pytest.fixture
def app(test_session, redis_client, payment_gateway):
    application = create_app(
        redis=redis_client,
        completion_client=FakeCompletionClient(configured=False),
        payment_gateway=payment_gateway,
    )

    async def override_session():
        yield test_session

    application.dependency_overrides[get_session] = override_session
    return application


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


def auth(user) -> dict:
    return {"X-User-Id": str(user.id)}


class TestAuthentication:

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("headers", [{}, {"X-User-Id": "abc"}, {"X-User-Id": "424242"}])
    async def test_unauthenticated(self, client, headers):
        response = await client.get("/api/cart", headers=headers)

        assert response.status_code == 401
        assert response.json()["success"] is False
        assert response.json()["error"]["kind"] == "Unauthorized"

    @pytest.mark.asyncio
    async def test_admin_route_rejects_customer(self, client, customer):
        response = await client.get("/api/admin/orders", headers=auth(customer))

        assert response.status_code == 403
        assert response.json()["error"]["kind"] == "Forbidden"

    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        response = await client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json()["error"]["kind"] == "NotFound"


class TestCatalogEndpoints:

    @pytest.mark.asyncio
    async def test_list_products(self, client, make_product):
        await make_product(name="Tripod", category="Cameras")

        response = await client.get("/api/products", params={"keyword": "tri"})

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is True
        assert body["total_products"] == 1
        assert body["products"][0]["name"] == "Tripod"
        assert body["per_page"] == config.PRODUCTS_PER_PAGE

    @pytest.mark.asyncio
    async def test_product_not_found(self, client):
        response = await client.get("/api/products/999")

        assert response.status_code == 404
        assert response.json() == {"success": False,
                                   "error": {"kind": "NotFound", "message": "Product 999 not found"}}

    @pytest.mark.asyncio
    async def test_ai_filter_fallback(self, client, make_product):
        await make_product(name="Red Running Shoes", category="Sports")

        response = await client.post("/api/products/ai-filter", json={"userQuery": "Red Running Shoes"})

        body = response.json()
        assert response.status_code == 200
        assert body["fallback"] is True
        assert body["filters"]["keyword"] == "red running shoes"
        assert len(body["products"]) == 1

    @pytest.mark.asyncio
    async def test_ai_filter_blank_query(self, client):
        response = await client.post("/api/products/ai-filter", json={"userQuery": "   "})

        assert response.status_code == 400
        assert response.json()["error"]["kind"] == "ValidationError"

    @pytest.mark.asyncio
    async def test_ai_recommendation_fallback(self, client, make_product):
        await make_product(name="Anything")

        response = await client.post("/api/products/ai-recommendation", json={"user_prompt": "gift ideas"})

        assert response.status_code == 200
        assert response.json()["fallback"] is True


class TestCartAndOrderFlow:

    @pytest.mark.asyncio
    async def test_cart_then_place_order(self, client, customer, make_product, payment_gateway):
        product = await make_product(name="Speaker", price=100.0, stock=3)

        added = await client.post("/api/cart/add", json={"productId": product.id, "quantity": 1},
                                  headers=auth(customer))
        assert added.status_code == 200
        assert added.json()["cart"]["total_price"] == 100.0

        intent = await client.post("/api/orders/create-payment-intent", headers=auth(customer))
        assert intent.json() == {"success": True, "client_secret": "pi_9_secret_abc"}
        assert payment_gateway.calls[0]["amount"] == 10000

        placed = await client.post("/api/orders/place", json=ORDER_PAYLOAD, headers=auth(customer))
        assert placed.status_code == 201
        order = placed.json()["order"]
        assert order["payment_status"] == "Pending"
        assert order["order_status"] == "Processing"

        mine = await client.get("/api/orders/my", headers=auth(customer))
        assert [o["id"] for o in mine.json()["orders"]] == [order["id"]]

        cart = await client.get("/api/cart", headers=auth(customer))
        assert cart.json()["cart"]["items"] == []

    @pytest.mark.asyncio
    async def test_price_mismatch_envelope(self, client, customer, make_product):
        product = await make_product(price=100.0)
        await client.post("/api/cart/add", json={"productId": product.id}, headers=auth(customer))

        response = await client.post("/api/orders/place", json={**ORDER_PAYLOAD, "totalPrice": 120},
                                     headers=auth(customer))

        assert response.status_code == 400
        assert response.json()["error"]["kind"] == "PriceMismatch"

    @pytest.mark.asyncio
    async def test_invalid_quantity_is_validation_error(self, client, customer, make_product):
        product = await make_product()

        response = await client.post("/api/cart/add", json={"productId": product.id, "quantity": 0},
                                     headers=auth(customer))

        assert response.status_code == 400
        assert response.json()["error"]["kind"] == "ValidationError"

    @pytest.mark.asyncio
    async def test_order_placement_is_rate_limited(self, client, customer, monkeypatch):
        monkeypatch.setattr(config, "MAX_ORDERS_PER_USER_PER_HOUR", 1)

        first = await client.post("/api/orders/place", json=ORDER_PAYLOAD, headers=auth(customer))
        second = await client.post("/api/orders/place", json=ORDER_PAYLOAD, headers=auth(customer))

        assert first.json()["error"]["kind"] == "EmptyCart"
        assert second.status_code == 429
        assert second.json()["error"]["kind"] == "RateLimited"

    @pytest.mark.asyncio
    async def test_foreign_order_is_forbidden(self, client, customer, make_user, make_product, make_order):
        stranger = await make_user(name="Stranger")
        order_id = await make_order(customer, await make_product())

        response = await client.get(f"/api/orders/{order_id}", headers=auth(stranger))

        assert response.status_code == 403


class TestWatchlistEndpoints:

    @pytest.mark.asyncio
    async def test_add_list_remove(self, client, customer, make_product):
        product = await make_product(name="Headphones", price=80.0)

        added = await client.post("/api/users/watchlist", json={"productId": product.id}, headers=auth(customer))
        assert added.status_code == 200
        assert added.json()["message"] == "Added to watchlist"

        again = await client.post("/api/users/watchlist", json={"productId": product.id}, headers=auth(customer))
        assert [p["id"] for p in again.json()["watchlist"]] == [product.id]

        listed = await client.get("/api/users/watchlist", headers=auth(customer))
        assert listed.json()["success"] is True
        assert listed.json()["watchlist"][0]["name"] == "Headphones"

        removed = await client.delete(f"/api/users/watchlist/{product.id}", headers=auth(customer))
        assert removed.json() == {"success": True, "watchlist": [], "message": "Removed from watchlist"}

    @pytest.mark.asyncio
    async def test_unknown_product(self, client, customer):
        response = await client.post("/api/users/watchlist", json={"productId": 999}, headers=auth(customer))

        assert response.status_code == 404
        assert response.json()["error"] == {"kind": "NotFound", "message": "Product 999 not found"}

    @pytest.mark.asyncio
    async def test_requires_login(self, client):
        response = await client.get("/api/users/watchlist")

        assert response.status_code == 401


class TestAdminEndpoints:

    @pytest.mark.asyncio
    async def test_status_lifecycle(self, client, admin, customer, make_product, make_order):
        order_id = await make_order(customer, await make_product())

        shipped = await client.put(f"/api/admin/orders/{order_id}/status", json={"status": "Shipped"},
                                   headers=auth(admin))
        delivered = await client.put(f"/api/admin/orders/{order_id}/status", json={"status": "Delivered"},
                                     headers=auth(admin))
        again = await client.put(f"/api/admin/orders/{order_id}/status", json={"status": "Shipped"},
                                 headers=auth(admin))

        assert shipped.status_code == 200
        assert delivered.status_code == 200
        assert again.status_code == 400
        assert again.json()["error"] == {"kind": "AlreadyDelivered",
                                         "message": "You have already delivered this order"}

    @pytest.mark.asyncio
    async def test_create_product(self, client, admin):
        response = await client.post("/api/admin/products", json={
            "name": "Action Camera", "price": 15000, "stock": 2, "category": "Cameras",
            "images": [{"url": "https://img.test/action.png", "publicId": "action"}],
        }, headers=auth(admin))

        assert response.status_code == 201
        assert response.json()["product"]["images"][0]["public_id"] == "action"

    @pytest.mark.asyncio
    async def test_list_orders_with_total(self, client, admin, customer, make_product, make_order):
        await make_order(customer, await make_product(price=49.5), quantity=2)

        response = await client.get("/api/admin/orders", headers=auth(admin))

        assert response.json()["total_amount"] == 99.0
        assert len(response.json()["orders"]) == 1

    @pytest.mark.asyncio
    async def test_last_admin_cannot_demote_self(self, client, admin):
        response = await client.put(f"/api/admin/users/{admin.id}/role", json={"role": "user"},
                                    headers=auth(admin))

        assert response.status_code == 403


class TestUnexpectedErrors:

    @pytest.mark.asyncio
    async def test_internal_error_envelope(self, app, customer, monkeypatch):
        from services.cart import CartService

        async def explode(user_id, session):
            raise RuntimeError("boom")

        monkeypatch.setattr(CartService, "get_cart", staticmethod(explode))
        transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
            response = await http_client.get("/api/cart", headers=auth(customer))

        assert response.status_code == 500
        assert response.json() == {"success": False,
                                   "error": {"kind": "InternalError", "message": "Something went wrong"}}
