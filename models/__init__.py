"""
Models Package

This file ensures all SQLAlchemy models are imported and registered,
which is required for relationships to work correctly.
"""

from models.base import Base
from models.user import User
from models.product import Product
from models.cart import Cart
from models.cartItem import CartItem
from models.order import Order
from models.orderItem import OrderItem
from models.review import ProductReview
from models.watchlist import WatchlistEntry

__all__ = [
    'Base',
    'User',
    'Product',
    'Cart',
    'CartItem',
    'Order',
    'OrderItem',
    'ProductReview',
    'WatchlistEntry',
]
