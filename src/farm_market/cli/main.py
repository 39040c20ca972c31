import asyncio
import logging
from decimal import Decimal

import typer
from tortoise import Tortoise
from tortoise.exceptions import IntegrityError

from ..features.auth.models import Role, User as AuthUser
from ..features.auth.security import get_password_hash
from ..features.products.models import Product
from ..main import TORTOISE_ORM_CONFIG

logger = logging.getLogger(__name__)

app = typer.Typer(name="farm-market", help="CLI for managing Farm Market application data.")

# Mirrors the demo data the storefront expects on a fresh install.
SEED_FARMER = {
    "name": "Ahmed Khan",
    "email": "ahmed.khan@example.com",
    "password": "farmer123",
    "phone": "+92 300 1234567",
    "address": "Punjab, Pakistan",
}
SEED_BUYER = {
    "name": "Ali Hassan",
    "email": "ali.hassan@example.com",
    "password": "buyer123",
    "phone": "+92 300 7654321",
    "address": "Lahore, Pakistan",
}
SEED_PRODUCTS = [
    {"name": "Fresh Organic Tomatoes", "description": "Locally grown organic tomatoes", "price": "120",
     "category": "vegetables", "unit": "kg", "stock": 50, "rating": "4.5"},
    {"name": "Farm Fresh Eggs", "description": "Free-range chicken eggs", "price": "280",
     "category": "dairy", "unit": "dozen", "stock": 30, "rating": "4.8"},
    {"name": "Organic Honey", "description": "Pure natural honey from local bees", "price": "850",
     "category": "other", "unit": "kg", "stock": 20, "rating": "4.9"},
    {"name": "Fresh Spinach", "description": "Organic leafy spinach", "price": "60",
     "category": "vegetables", "unit": "bundle", "stock": 40, "rating": "4.3"},
    {"name": "Red Apples", "description": "Sweet and crispy red apples", "price": "180",
     "category": "fruits", "unit": "kg", "stock": 35, "rating": "4.6"},
    {"name": "Basmati Rice", "description": "Premium quality basmati rice", "price": "320",
     "category": "grains", "unit": "kg", "stock": 100, "rating": "4.7"},
]


# Shared async context manager for database connection
class DBConnection:
    async def __aenter__(self):
        logger.debug(f"Connecting to {TORTOISE_ORM_CONFIG['connections']['default']}")
        await Tortoise.init(config=TORTOISE_ORM_CONFIG)
        await Tortoise.generate_schemas(safe=True)  # Generate schema if it doesn't exist
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await Tortoise.close_connections()


# User management commands
user_app = typer.Typer(name="users", help="Manage user accounts.")
app.add_typer(user_app)


@user_app.command("create")
def create_user_command(
    name: str = typer.Option(..., prompt=True, help="Display name for the new user."),
    email: str = typer.Option(..., prompt=True, help="Email for the new user."),
    role: Role = typer.Option(Role.BUYER, help="Role of the new user."),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True, help="Password for the new user."),
):
    """Creates a new buyer or farmer account."""
    asyncio.run(_create_user(name, email, role, password))


async def _create_user(name: str, email: str, role: Role, password: str):
    """Async implementation for creating a user."""
    async with DBConnection():
        typer.echo(f"Attempting to create {role.value}: {name} ({email})...")
        if await AuthUser.filter(email=email).exists():
            typer.secho(f"Error: User with email '{email}' already exists.", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        try:
            user = await AuthUser.create(
                name=name,
                email=email,
                hashed_password=get_password_hash(password),
                role=role,
            )
        except IntegrityError as e:
            # Fallback for a duplicate created between the check and the insert
            typer.secho(f"Error creating user: {e}", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        typer.secho(f"User '{user.name}' created successfully with ID: {user.public_id}", fg=typer.colors.GREEN)


@app.command("seed")
def seed_command():
    """Creates a sample farmer, a sample buyer and six products, unless they already exist."""
    asyncio.run(_seed())


async def _seed():
    async with DBConnection():
        farmer = await _get_or_create_seed_user(SEED_FARMER, Role.FARMER)
        await _get_or_create_seed_user(SEED_BUYER, Role.BUYER)

        created = 0
        for product_data in SEED_PRODUCTS:
            if await Product.filter(name=product_data["name"], farmer=farmer).exists():
                continue
            await Product.create(
                **{
                    **product_data,
                    "price": Decimal(product_data["price"]),
                    "rating": Decimal(product_data["rating"]),
                },
                farmer=farmer,
            )
            created += 1
        typer.secho(f"Seeded {created} product(s).", fg=typer.colors.GREEN)


async def _get_or_create_seed_user(data: dict, role: Role) -> AuthUser:
    user = await AuthUser.get_or_none(email=data["email"])
    if user:
        typer.secho(f"User '{data['email']}' already exists.", fg=typer.colors.YELLOW)
        return user
    fields = {k: v for k, v in data.items() if k != "password"}
    user = await AuthUser.create(**fields, hashed_password=get_password_hash(data["password"]), role=role)
    typer.secho(f"Created {role.value} '{user.email}'.", fg=typer.colors.GREEN)
    return user


@app.command("test-db-connection")
def test_db_connection_command_sync():
    """Tests the database connection and counts stored users and products."""
    asyncio.run(test_db_connection_command())


async def test_db_connection_command():
    async with DBConnection():
        typer.echo("Successfully connected to the database.")
        user_count = await AuthUser.all().count()
        product_count = await Product.all().count()
        typer.echo(f"Found {user_count} user(s) and {product_count} product(s) in the database.")


if __name__ == "__main__":
    app()
