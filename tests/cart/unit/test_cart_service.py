"""
Unit Tests: CartService

Tests for services/cart.py covering:
- add_item() - merge, stock validation, price snapshot refresh
- set_item_quantity() - update, removal on <= 0, stock validation
- remove_item() / clear()
- get_cart() - never creates a cart as a side effect
- total invariant after every mutation
"""

import pytest

from exceptions import (
    CartItemNotFoundException,
    CartNotFoundException,
    InsufficientStockException,
    ProductNotFoundException,
)
from repositories.cart import CartRepository
from repositories.product import ProductRepository
from services.cart import CartService


def assert_total_invariant(cart):
    assert cart.total_price == pytest.approx(sum(item.price * item.quantity for item in cart.items))


class TestGetCart:

    @pytest.mark.asyncio
    async def test_missing_cart_returns_empty_value_without_persisting(self, test_session, customer):
        cart = await CartService.get_cart(customer.id, test_session)

        assert cart.id is None
        assert cart.items == []
        assert cart.total_price == 0.0
        assert await CartRepository.get_by_user_id(customer.id, test_session) is None


class TestAddItem:

    @pytest.mark.asyncio
    async def test_first_add_creates_cart_with_snapshot(self, test_session, customer, make_product):
        product = await make_product(name="Camera", price=250.0, stock=5)

        cart = await CartService.add_item(customer.id, product.id, test_session, quantity=2)

        assert cart.id is not None
        assert len(cart.items) == 1
        assert cart.items[0].product_id == product.id
        assert cart.items[0].quantity == 2
        assert cart.items[0].price == 250.0
        assert cart.items[0].product.name == "Camera"
        assert cart.items[0].product.images[0]["url"] == "https://img.test/Camera.png"
        assert cart.total_price == 500.0

    @pytest.mark.asyncio
    async def test_existing_line_is_merged(self, test_session, customer, make_product):
        product = await make_product(price=10.0, stock=5)

        await CartService.add_item(customer.id, product.id, test_session, quantity=2)
        cart = await CartService.add_item(customer.id, product.id, test_session, quantity=3)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5
        assert cart.total_price == 50.0

    @pytest.mark.asyncio
    async def test_unknown_product(self, test_session, customer):
        with pytest.raises(ProductNotFoundException):
            await CartService.add_item(customer.id, 9999, test_session)

    @pytest.mark.asyncio
    async def test_merge_beyond_stock_fails_without_mutation(self, test_session, customer, make_product):
        product = await make_product(price=10.0, stock=4)
        await CartService.add_item(customer.id, product.id, test_session, quantity=3)

        with pytest.raises(InsufficientStockException) as exc_info:
            await CartService.add_item(customer.id, product.id, test_session, quantity=2)

        assert exc_info.value.requested == 5
        assert exc_info.value.available == 4
        cart = await CartService.get_cart(customer.id, test_session)
        assert cart.items[0].quantity == 3
        assert (await ProductRepository.get_by_id(product.id, test_session)).stock == 4

    @pytest.mark.asyncio
    async def test_failed_first_add_leaves_no_cart(self, test_session, customer, make_product):
        product = await make_product(stock=1)

        with pytest.raises(InsufficientStockException):
            await CartService.add_item(customer.id, product.id, test_session, quantity=2)

        assert await CartRepository.get_by_user_id(customer.id, test_session) is None

    @pytest.mark.asyncio
    async def test_touch_refreshes_only_that_line(self, test_session, customer, make_product):
        phone = await make_product(name="Phone", price=100.0)
        case = await make_product(name="Case", price=10.0)
        await CartService.add_item(customer.id, phone.id, test_session)
        await CartService.add_item(customer.id, case.id, test_session)

        await ProductRepository.update(phone.id, {"price": 120.0}, test_session)
        await ProductRepository.update(case.id, {"price": 12.0}, test_session)
        await test_session.commit()

        cart = await CartService.add_item(customer.id, case.id, test_session)

        prices = {item.product_id: item.price for item in cart.items}
        assert prices[phone.id] == 100.0   # untouched, stale snapshot kept
        assert prices[case.id] == 12.0     # touched, refreshed
        assert cart.total_price == 100.0 + 2 * 12.0
        assert_total_invariant(cart)


class TestSetItemQuantity:

    @pytest.mark.asyncio
    async def test_update_quantity(self, test_session, customer, make_product):
        product = await make_product(price=20.0, stock=10)
        await CartService.add_item(customer.id, product.id, test_session)

        cart = await CartService.set_item_quantity(customer.id, product.id, 7, test_session)

        assert cart.items[0].quantity == 7
        assert cart.total_price == 140.0

    @pytest.mark.asyncio
    async def test_zero_removes_line(self, test_session, customer, make_product):
        keep = await make_product(name="Keep", price=5.0)
        drop = await make_product(name="Drop", price=7.0)
        await CartService.add_item(customer.id, keep.id, test_session)
        await CartService.add_item(customer.id, drop.id, test_session)

        cart = await CartService.set_item_quantity(customer.id, drop.id, 0, test_session)

        assert [item.product_id for item in cart.items] == [keep.id]
        assert cart.total_price == 5.0

    @pytest.mark.asyncio
    async def test_quantity_above_stock(self, test_session, customer, make_product):
        product = await make_product(stock=3)
        await CartService.add_item(customer.id, product.id, test_session)

        with pytest.raises(InsufficientStockException):
            await CartService.set_item_quantity(customer.id, product.id, 4, test_session)

    @pytest.mark.asyncio
    async def test_no_cart(self, test_session, customer, make_product):
        product = await make_product()
        with pytest.raises(CartNotFoundException):
            await CartService.set_item_quantity(customer.id, product.id, 1, test_session)

    @pytest.mark.asyncio
    async def test_product_not_in_cart(self, test_session, customer, make_product):
        in_cart = await make_product(name="In cart")
        other = await make_product(name="Other")
        await CartService.add_item(customer.id, in_cart.id, test_session)

        with pytest.raises(CartItemNotFoundException):
            await CartService.set_item_quantity(customer.id, other.id, 1, test_session)

    @pytest.mark.asyncio
    async def test_zero_for_product_not_in_cart(self, test_session, customer, make_product):
        in_cart = await make_product(name="In cart", price=4.0)
        other = await make_product(name="Other")
        await CartService.add_item(customer.id, in_cart.id, test_session)

        with pytest.raises(CartItemNotFoundException):
            await CartService.set_item_quantity(customer.id, other.id, 0, test_session)

        cart = await CartService.get_cart(customer.id, test_session)
        assert [item.product_id for item in cart.items] == [in_cart.id]
        assert cart.total_price == 4.0

    @pytest.mark.asyncio
    async def test_missing_line_checked_before_stock(self, test_session, customer, make_product):
        in_cart = await make_product(name="In cart")
        other = await make_product(name="Other", stock=2)
        await CartService.add_item(customer.id, in_cart.id, test_session)

        with pytest.raises(CartItemNotFoundException):
            await CartService.set_item_quantity(customer.id, other.id, 50, test_session)


class TestRemoveAndClear:

    @pytest.mark.asyncio
    async def test_remove_item(self, test_session, customer, make_product):
        first = await make_product(name="First", price=3.0)
        second = await make_product(name="Second", price=4.0)
        await CartService.add_item(customer.id, first.id, test_session, quantity=2)
        await CartService.add_item(customer.id, second.id, test_session)

        cart = await CartService.remove_item(customer.id, first.id, test_session)

        assert [item.product_id for item in cart.items] == [second.id]
        assert cart.total_price == 4.0

    @pytest.mark.asyncio
    async def test_remove_without_cart(self, test_session, customer):
        with pytest.raises(CartNotFoundException):
            await CartService.remove_item(customer.id, 1, test_session)

    @pytest.mark.asyncio
    async def test_remove_missing_item(self, test_session, customer, make_product):
        product = await make_product()
        await CartService.add_item(customer.id, product.id, test_session)

        with pytest.raises(CartItemNotFoundException):
            await CartService.remove_item(customer.id, product.id + 100, test_session)

    @pytest.mark.asyncio
    async def test_clear(self, test_session, customer, make_product):
        product = await make_product(price=9.0)
        await CartService.add_item(customer.id, product.id, test_session, quantity=3)

        cart = await CartService.clear(customer.id, test_session)

        assert cart.items == []
        assert cart.total_price == 0.0
        persisted = await CartRepository.get_by_user_id(customer.id, test_session)
        assert persisted.items == []

    @pytest.mark.asyncio
    async def test_total_invariant_over_mixed_sequence(self, test_session, customer, make_product):
        a = await make_product(name="A", price=19.99, stock=20)
        b = await make_product(name="B", price=0.5, stock=20)
        c = await make_product(name="C", price=1000.0, stock=20)

        steps = [
            lambda: CartService.add_item(customer.id, a.id, test_session, quantity=3),
            lambda: CartService.add_item(customer.id, b.id, test_session, quantity=7),
            lambda: CartService.add_item(customer.id, c.id, test_session),
            lambda: CartService.set_item_quantity(customer.id, a.id, 1, test_session),
            lambda: CartService.remove_item(customer.id, c.id, test_session),
            lambda: CartService.add_item(customer.id, b.id, test_session, quantity=2),
            lambda: CartService.set_item_quantity(customer.id, b.id, -1, test_session),
        ]
        for step in steps:
            assert_total_invariant(await step())

    @pytest.mark.asyncio
    async def test_total_keeps_sub_cent_prices(self, test_session, customer, make_product):
        product = await make_product(name="Bolt", price=0.333, stock=10)

        cart = await CartService.add_item(customer.id, product.id, test_session, quantity=3)

        assert_total_invariant(cart)
        assert cart.total_price == pytest.approx(0.999)
        persisted = await CartRepository.get_by_user_id(customer.id, test_session)
        assert persisted.total_price == pytest.approx(0.999)
