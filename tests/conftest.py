"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
and configuration for all tests.
"""

import sys
import os

import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Configure the environment before config.py is imported anywhere
os.environ["RUNTIME_ENVIRONMENT"] = "TEST"
os.environ["DB_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["AI_API_KEY"] = ""
os.environ["PAYMENT_GATEWAY_SECRET_KEY"] = ""
os.environ["ORDER_VERIFY_ITEMS_PRICE"] = "false"

from enums.order_status import OrderStatus
from enums.payment_method import PaymentMethod
from enums.payment_status import PaymentStatus
from enums.user_role import UserRole
from models.base import Base
from models.order import Order
from models.orderItem import OrderItem
from models.product import Product, ProductDTO
from models.user import User, UserDTO


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine (in-memory SQLite shared by every connection)."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )

    # Importing db registers every model and the foreign-key pragma listener
    import db  # noqa: F401
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine):
    """Create test database session."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


# ============================================================================
# Redis Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def redis_client():
    """Create fake Redis client for testing (no real Redis server needed)."""
    client = FakeAsyncRedis(decode_responses=True)
    yield client
    await client.aclose()


# ============================================================================
# Data Fixtures
# ============================================================================

@pytest.fixture
def make_user(test_session):
    async def _make(name: str = "Test User", email: str | None = None, role: UserRole = UserRole.USER) -> UserDTO:
        user = User(name=name, email=email or f"{name.lower().replace(' ', '.')}@example.com", role=role.value)
        test_session.add(user)
        await test_session.commit()
        await test_session.refresh(user)
        return UserDTO.model_validate(user, from_attributes=True)
    return _make


@pytest.fixture
def make_product(test_session):
    async def _make(name: str = "Test Product",
                    price: float = 100.0,
                    stock: int = 10,
                    category: str = "Electronics",
                    description: str = "A product used in tests",
                    ratings: float = 0.0,
                    images: list | None = None) -> ProductDTO:
        product = Product(
            name=name,
            description=description,
            price=price,
            stock=stock,
            category=category,
            ratings=ratings,
            images=images if images is not None else [{"url": f"https://img.test/{name}.png", "public_id": name}],
        )
        test_session.add(product)
        await test_session.commit()
        await test_session.refresh(product)
        return ProductDTO.model_validate(product, from_attributes=True)
    return _make


@pytest.fixture
def make_order(test_session):
    """Insert an order directly (bypassing placement) for lifecycle and review tests."""
    async def _make(user: UserDTO,
                    product: ProductDTO,
                    quantity: int = 1,
                    status: OrderStatus = OrderStatus.PROCESSING) -> int:
        total = product.price * quantity
        order = Order(
            user_id=user.id,
            shipping_info={"address": "12 MG Road", "city": "Pune", "state": "MH", "country": "India",
                           "pin_code": "411001", "phone_no": "9876543210"},
            payment_id="",
            payment_status=PaymentStatus.PENDING.value,
            payment_method=PaymentMethod.CASH_ON_DELIVERY.value,
            items_price=total,
            tax_price=0.0,
            shipping_price=0.0,
            total_price=total,
            order_status=status.value,
            items=[OrderItem(product_id=product.id, name=product.name, price=product.price,
                             quantity=quantity, image=product.primary_image)],
        )
        test_session.add(order)
        await test_session.commit()
        return order.id
    return _make


@pytest_asyncio.fixture
async def customer(make_user) -> UserDTO:
    return await make_user(name="Asha Customer")


@pytest_asyncio.fixture
async def admin(make_user) -> UserDTO:
    return await make_user(name="Ravi Admin", role=UserRole.ADMIN)
