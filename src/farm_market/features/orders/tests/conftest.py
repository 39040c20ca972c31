import pytest_asyncio

from farm_market.features.auth.models import User


@pytest_asyncio.fixture
async def two_farmer_catalog(product_factory, farmer: User, other_farmer: User):
    """Product A from the first farmer (stock 10) and product B from the second (stock 5)."""
    product_a = await product_factory("Product A", stock=10, price="4.00", owner=farmer)
    product_b = await product_factory("Product B", stock=5, price="7.50", owner=other_farmer)
    return product_a, product_b
