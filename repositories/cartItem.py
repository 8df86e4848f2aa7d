from models.cart import Cart
from models.cartItem import CartItem
from models.product import Product


class CartItemRepository:
    """In-memory line operations on a loaded Cart; persisted by CartRepository.save."""

    @staticmethod
    def find_line(cart: Cart, product_id: int) -> CartItem | None:
        for item in cart.items:
            if item.product_id == product_id:
                return item
        return None

    @staticmethod
    def append_line(cart: Cart, product: Product, quantity: int) -> CartItem:
        # product is attached explicitly so serializing the line never lazy-loads
        item = CartItem(product_id=product.id, product=product, quantity=quantity, price=product.price)
        cart.items.append(item)
        return item

    @staticmethod
    def remove_line(cart: Cart, item: CartItem) -> None:
        cart.items.remove(item)

    @staticmethod
    def clear_lines(cart: Cart) -> None:
        cart.items.clear()
