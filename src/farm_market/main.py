import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI, Request
from tortoise import Tortoise
from tortoise.contrib.fastapi import tortoise_exception_handlers

from .core.config import DATABASE_URL
from .core.exceptions import DomainError, domain_error_handler
from .core.logging_config import setup_logging
from .features.auth.router import router as auth_router
from .features.products.router import router as products_router
from .features.orders.router import router as orders_router
from .features.messages.router import router as messages_router

setup_logging()
logger = logging.getLogger("farm_market.main")  # This logger will inherit from 'farm_market'

MODEL_MODULES = [
    "farm_market.features.auth.models",
    "farm_market.features.products.models",
    "farm_market.features.orders.models",
    "farm_market.features.messages.models",
]

TORTOISE_ORM_CONFIG = {
    "connections": {"default": DATABASE_URL},
    "apps": {
        "models": {  # This is an app label, referenced as "models.<Model>" in relations
            "models": [*MODEL_MODULES, "aerich.models"],  # aerich.models for migrations
            "default_connection": "default",
        }
    },
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Opens the Tortoise connections for the app's lifetime and creates missing tables."""
    logger.info(f"Connecting to {DATABASE_URL.split(':', 1)[0]} database")
    await Tortoise.init(config=TORTOISE_ORM_CONFIG)
    await Tortoise.generate_schemas(safe=True)  # Creates missing tables only
    logger.info("Database ready")

    yield

    await Tortoise.close_connections()
    logger.info("Database connections closed")


app = FastAPI(
    title="Farm Market API",
    description="Marketplace connecting farmers and buyers: catalog, per-farmer orders and order messaging.",
    version="0.1.0",
    exception_handlers={
        **tortoise_exception_handlers(),
        DomainError: domain_error_handler,
    },
    lifespan=lifespan,
)


@app.get("/")
async def read_root(request: Request):
    client_host = request.client.host if request.client else "-"
    logger.debug(f"Welcome page requested by {client_host}")
    return {"message": "Farm Market API is running!"}


@app.get("/health")
async def health():
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc)}


# Include your routers
app.include_router(auth_router, prefix="/api")
app.include_router(products_router, prefix="/api")
app.include_router(orders_router, prefix="/api")
app.include_router(messages_router, prefix="/api")
