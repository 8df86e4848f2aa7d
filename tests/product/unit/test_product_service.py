"""
Unit Tests: ProductService

Catalog listing (filters, sort, pagination), admin product management and
the AI-backed search / recommendation entry points.
"""

import pytest

import config
from exceptions import InvalidProductDataException, ProductNotFoundException
from fakes import FakeCompletionClient
from models.search import SearchFiltersDTO
from repositories.cart import CartRepository
from repositories.order import OrderRepository
from services.cart import CartService
from services.product import ProductService


@pytest.fixture
def catalog(make_product):
    async def _make():
        return {
            "camera": await make_product(name="Mirrorless Camera", price=55000, category="Cameras",
                                         description="24MP sensor", ratings=4.5),
            "lens": await make_product(name="Prime Lens", price=18000, category="Cameras",
                                       description="50mm f/1.8", ratings=4.0),
            "laptop": await make_product(name="Gaming Laptop", price=90000, category="Laptops",
                                         description="RTX graphics", ratings=3.5),
            "shoes": await make_product(name="Trail Runner", price=3500, category="Sports",
                                        description="Red running shoes 100% mesh", ratings=4.8),
        }
    return _make


class TestListProducts:

    @pytest.mark.asyncio
    async def test_default_is_newest_first(self, test_session, catalog):
        items = await catalog()

        page = await ProductService.list_products(SearchFiltersDTO(), 1, test_session)

        assert [p.id for p in page.products] == [items[k].id for k in ("shoes", "laptop", "lens", "camera")]
        assert page.total == 4

    @pytest.mark.asyncio
    async def test_keyword_matches_name_or_description(self, test_session, catalog):
        items = await catalog()

        by_name = await ProductService.list_products(SearchFiltersDTO(keyword="LENS"), 1, test_session)
        by_description = await ProductService.list_products(SearchFiltersDTO(keyword="rtx"), 1, test_session)

        assert [p.id for p in by_name.products] == [items["lens"].id]
        assert [p.id for p in by_description.products] == [items["laptop"].id]

    @pytest.mark.asyncio
    async def test_keyword_wildcards_are_literal(self, test_session, catalog):
        items = await catalog()

        page = await ProductService.list_products(SearchFiltersDTO(keyword="0%"), 1, test_session)

        assert [p.id for p in page.products] == [items["shoes"].id]

    @pytest.mark.asyncio
    async def test_category_and_price_range(self, test_session, catalog):
        items = await catalog()

        page = await ProductService.list_products(
            SearchFiltersDTO(category="cameras", min_price=20000, max_price=60000), 1, test_session
        )

        assert [p.id for p in page.products] == [items["camera"].id]
        assert page.total == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("sort_by,order", [
        ("price", ["shoes", "lens", "camera", "laptop"]),
        ("price-desc", ["laptop", "camera", "lens", "shoes"]),
        ("rating", ["shoes", "camera", "lens", "laptop"]),
    ])
    async def test_sorting(self, test_session, catalog, sort_by, order):
        items = await catalog()

        page = await ProductService.list_products(SearchFiltersDTO(sort_by=sort_by), 1, test_session)

        assert [p.id for p in page.products] == [items[k].id for k in order]

    @pytest.mark.asyncio
    async def test_min_rating(self, test_session, catalog):
        items = await catalog()

        page = await ProductService.list_products(SearchFiltersDTO(min_rating=4.5), 1, test_session)

        assert {p.id for p in page.products} == {items["camera"].id, items["shoes"].id}

    @pytest.mark.asyncio
    async def test_pagination(self, test_session, make_product, monkeypatch):
        monkeypatch.setattr(config, "PRODUCTS_PER_PAGE", 2)
        for index in range(5):
            await make_product(name=f"Item {index}")

        first = await ProductService.list_products(SearchFiltersDTO(), 1, test_session)
        last = await ProductService.list_products(SearchFiltersDTO(), 3, test_session)
        clamped = await ProductService.list_products(SearchFiltersDTO(), 0, test_session)

        assert len(first.products) == 2
        assert first.total == 5
        assert first.total_pages == 3
        assert [p.name for p in last.products] == ["Item 0"]
        assert clamped.page == 1

    @pytest.mark.asyncio
    async def test_categories(self, test_session, catalog):
        await catalog()

        assert await ProductService.get_categories(test_session) == ["Cameras", "Laptops", "Sports"]


class TestGetProduct:

    @pytest.mark.asyncio
    async def test_unknown(self, test_session):
        with pytest.raises(ProductNotFoundException):
            await ProductService.get_product(1, test_session)

    @pytest.mark.asyncio
    async def test_with_reviews(self, test_session, make_product):
        product = await make_product(name="Reviewed")

        found, reviews = await ProductService.get_product(product.id, test_session)

        assert found.name == "Reviewed"
        assert reviews == []


class TestProductManagement:

    @pytest.mark.asyncio
    async def test_create(self, test_session, admin):
        product = await ProductService.create_product({
            "name": "Desk Lamp",
            "description": "Warm light",
            "price": 1200,
            "stock": 4,
            "category": "Home",
            "images": [{"url": "https://img.test/lamp.png", "public_id": "lamp"}],
        }, admin.id, test_session)

        assert product.id is not None
        assert product.user_id == admin.id
        assert product.ratings == 0
        assert product.primary_image == "https://img.test/lamp.png"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("values", [
        {"price": 10, "category": "Home"},
        {"name": "X", "price": 10, "category": "Toys"},
        {"name": "X", "price": -1, "category": "Home"},
        {"name": "X", "price": 1, "stock": -3, "category": "Home"},
    ])
    async def test_create_rejects_invalid(self, test_session, admin, values):
        with pytest.raises(InvalidProductDataException):
            await ProductService.create_product(values, admin.id, test_session)

    @pytest.mark.asyncio
    async def test_partial_update(self, test_session, make_product):
        product = await make_product(name="Old", price=10, stock=3)

        updated = await ProductService.update_product(
            product.id, {"price": 12.5, "ratings": 5, "num_of_reviews": 99}, test_session
        )

        assert updated.name == "Old"
        assert updated.price == 12.5
        assert updated.stock == 3
        assert updated.ratings == 0
        assert updated.num_of_reviews == 0

    @pytest.mark.asyncio
    async def test_update_unknown(self, test_session):
        with pytest.raises(ProductNotFoundException):
            await ProductService.update_product(77, {"price": 1}, test_session)

    @pytest.mark.asyncio
    async def test_delete_drops_cart_lines_and_keeps_order_history(self, test_session, customer, make_product,
                                                                   make_order):
        doomed = await make_product(name="Doomed", price=30.0)
        kept = await make_product(name="Kept", price=5.0)
        await CartService.add_item(customer.id, doomed.id, test_session, quantity=2)
        await CartService.add_item(customer.id, kept.id, test_session)
        order_id = await make_order(customer, doomed)

        await ProductService.delete_product(doomed.id, test_session)

        cart = await CartRepository.get_by_user_id(customer.id, test_session)
        assert [item.product_id for item in cart.items] == [kept.id]
        assert cart.total_price == 5.0
        test_session.expire_all()
        order = await OrderRepository.get_by_id(order_id, test_session)
        assert order.items[0].name == "Doomed"
        assert order.items[0].product_id is None
        with pytest.raises(ProductNotFoundException):
            await ProductService.get_product(doomed.id, test_session)

    @pytest.mark.asyncio
    async def test_low_stock(self, test_session, make_product):
        empty = await make_product(name="Empty", stock=0)
        few = await make_product(name="Few", stock=config.LOW_STOCK_THRESHOLD)
        await make_product(name="Plenty", stock=config.LOW_STOCK_THRESHOLD + 1)

        low = await ProductService.get_low_stock_products(test_session)

        assert [p.id for p in low] == [empty.id, few.id]


class TestAIEntryPoints:

    @pytest.mark.asyncio
    async def test_degraded_search_still_matches_category(self, test_session, catalog):
        items = await catalog()

        filters, products = await ProductService.ai_filtered_products("cameras", None, test_session)

        assert filters.fallback is True
        assert {p.id for p in products} == {items["camera"].id, items["lens"].id}

    @pytest.mark.asyncio
    async def test_ai_filters_applied(self, test_session, catalog):
        items = await catalog()
        client = FakeCompletionClient(responses=[
            {"keyword": "", "category": "Cameras", "minPrice": 0, "maxPrice": 20000, "minRating": 0, "sortBy": ""}
        ])

        filters, products = await ProductService.ai_filtered_products("cheap camera gear", client, test_session)

        assert filters.fallback is False
        assert [p.id for p in products] == [items["lens"].id]

    @pytest.mark.asyncio
    async def test_recommendations_follow_ranked_order(self, test_session, catalog):
        items = await catalog()
        client = FakeCompletionClient(responses=[{"recommendedIds": [items["lens"].id, items["camera"].id]}])

        products, fallback = await ProductService.ai_recommended_products("photography kit", client, test_session)

        assert fallback is False
        assert [p.id for p in products] == [items["lens"].id, items["camera"].id]

    @pytest.mark.asyncio
    async def test_recommendations_fallback(self, test_session, catalog):
        await catalog()

        products, fallback = await ProductService.ai_recommended_products("anything", None, test_session)

        assert fallback is True
        assert len(products) == 4
