"""Global pytest configuration and fixtures."""

# Standard library imports
from decimal import Decimal
from typing import Any

# Third-party imports
import pytest
import pytest_asyncio

# Local imports
from storefront.application.config import (
    Environment,
    PaymentConfig,
    SecurityConfig,
    StoreConfig,
    reset_config,
)
from storefront.application.services import UserRegistration
from storefront.domain.entities import Address, Product, ProductCategory, UserProfile, UserRole
from storefront.infrastructure.auth import PasswordHasher
from storefront.infrastructure.container import StoreContainer, reset_container
from storefront.infrastructure.payments import FixedPaymentGateway

# Lowest cost bcrypt accepts; keeps the suite fast
TEST_HASH_ROUNDS = 4


def make_product(**overrides: Any) -> Product:
    """Draft product with sensible defaults."""
    values: dict[str, Any] = {
        "name": "Laptop",
        "description": "14 inch ultrabook",
        "price": Decimal("1200.00"),
        "category": ProductCategory.ELECTRONICS,
        "stock": 10,
        "image_url": "https://example.com/laptop.png",
        "seller_id": "seller-1",
    }
    values.update(overrides)
    return Product(**values)


@pytest.fixture(autouse=True)
def reset_globals():
    """Keep module-level singletons from leaking between tests."""
    reset_config()
    reset_container()
    yield
    reset_config()
    reset_container()


@pytest.fixture
def store_config() -> StoreConfig:
    """Configuration used by the test container."""
    return StoreConfig(
        environment=Environment.TESTING,
        security=SecurityConfig(password_hash_rounds=TEST_HASH_ROUNDS),
        payment=PaymentConfig(success_rate=1.0),
    )


@pytest.fixture
def password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=TEST_HASH_ROUNDS)


@pytest.fixture
def gateway() -> FixedPaymentGateway:
    """Approving gateway; tests flip ``approve`` to force a decline."""
    return FixedPaymentGateway(approve=True)


@pytest.fixture
def container(store_config, gateway, password_hasher) -> StoreContainer:
    """Fully wired store with deterministic collaborators."""
    return StoreContainer(store_config, payment_gateway=gateway, password_hasher=password_hasher)


@pytest.fixture
def address() -> Address:
    return Address(
        street="1 Main St",
        city="Springfield",
        state="IL",
        zip_code="62701",
        country="US",
    )


@pytest_asyncio.fixture
async def customer(container, address) -> UserProfile:
    """Registered customer."""
    result = await container.user_directory.register(
        UserRegistration(
            username="alice",
            email="alice@example.com",
            password="correct-horse",
            address=address,
        )
    )
    assert result.success
    return result.data


@pytest_asyncio.fixture
async def seller(container) -> UserProfile:
    """Registered seller."""
    result = await container.user_directory.register(
        UserRegistration(
            username="bob",
            email="bob@example.com",
            password="battery-staple",
            role=UserRole.SELLER,
        )
    )
    assert result.success
    return result.data


@pytest_asyncio.fixture
async def laptop(container) -> Product:
    """Laptop in stock: price 1200.00, stock 10."""
    result = await container.catalog.add_product(make_product())
    assert result.success
    return result.data


@pytest_asyncio.fixture
async def book(container) -> Product:
    """Book in stock: price 25.50, stock 3."""
    result = await container.catalog.add_product(
        make_product(
            name="Python Book",
            description="Learning Python",
            price=Decimal("25.50"),
            category=ProductCategory.BOOKS,
            stock=3,
        )
    )
    assert result.success
    return result.data


@pytest.fixture
def product_factory():
    """Callable building draft products; keyword arguments override defaults."""
    return make_product
