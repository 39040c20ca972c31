"""
Root conftest for the pytest test suite.

This file contains the main fixtures that are used across the entire test suite.

Each test runs against a fresh, isolated in-memory SQLite database that is
initialised by an async, autouse fixture. HTTP tests talk to the FastAPI app
through httpx's ASGI transport, so requests run on the test's own event loop
and the production lifespan is never started.

Key Fixtures:
- `initialize_test_db`: (autouse) Creates a fresh DB schema and the seed users for each test.
- `buyer`, `other_buyer`, `farmer`, `other_farmer`: The seeded users.
- `product_factory`: Creates catalog products owned by a given farmer.
- `client`: An httpx AsyncClient bound to the app.
- `auth_headers`: Builds a bearer Authorization header for a user.
"""

from decimal import Decimal
from functools import lru_cache
from typing import AsyncGenerator, Optional

import httpx
import pytest
import pytest_asyncio
from tortoise import Tortoise

from farm_market.features.auth.models import Role, User
from farm_market.features.auth.security import create_access_token, get_password_hash
from farm_market.features.products.models import Product
from farm_market.main import MODEL_MODULES, app

SEED_PASSWORD = "password123"

SEED_USERS = {
    "buyer": {"name": "Bea Buyer", "email": "buyer@example.com", "role": Role.BUYER, "phone": "555-0101"},
    "other_buyer": {"name": "Otto Buyer", "email": "otto@example.com", "role": Role.BUYER},
    "farmer": {"name": "Fern Farmer", "email": "fern@example.com", "role": Role.FARMER},
    "other_farmer": {"name": "Fred Farmer", "email": "fred@example.com", "role": Role.FARMER},
}


@lru_cache(maxsize=1)
def seed_password_hash() -> str:
    # bcrypt is slow on purpose; hash once per session.
    return get_password_hash(SEED_PASSWORD)


async def add_seed_users():
    for data in SEED_USERS.values():
        await User.create(**data, hashed_password=seed_password_hash())


@pytest_asyncio.fixture(scope="function", autouse=True)
async def initialize_test_db() -> AsyncGenerator[None, None]:
    """
    Initializes the database for each test function.

    Creates a fresh in-memory database and schema for each test and tears
    it down afterwards.
    """
    test_db_config = {
        "connections": {"default": "sqlite://:memory:"},
        "apps": {
            "models": {
                "models": MODEL_MODULES,
                "default_connection": "default",
            }
        },
    }
    await Tortoise.init(config=test_db_config)
    await Tortoise.generate_schemas()
    await add_seed_users()

    yield

    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def buyer() -> User:
    return await User.get(email=SEED_USERS["buyer"]["email"])


@pytest_asyncio.fixture
async def other_buyer() -> User:
    return await User.get(email=SEED_USERS["other_buyer"]["email"])


@pytest_asyncio.fixture
async def farmer() -> User:
    return await User.get(email=SEED_USERS["farmer"]["email"])


@pytest_asyncio.fixture
async def other_farmer() -> User:
    return await User.get(email=SEED_USERS["other_farmer"]["email"])


@pytest_asyncio.fixture
async def product_factory(farmer: User):
    """A factory to create products; owned by `farmer` unless another owner is given."""

    async def _factory(
        name: str,
        stock: int = 10,
        price: str = "100.00",
        category: str = "vegetables",
        owner: Optional[User] = None,
        rating: str = "0",
        is_active: bool = True,
    ) -> Product:
        return await Product.create(
            name=name,
            stock=stock,
            price=Decimal(price),
            category=category,
            rating=Decimal(rating),
            is_active=is_active,
            farmer=owner or farmer,
        )

    return _factory


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    Provides a non-authenticated client. Pass `headers=auth_headers(user)` per request.
    """
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _headers
