import os

# Loaded from environment variables; the defaults are only suitable for local development.
DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite://./farm_market.sqlite3")

SECRET_KEY: str = os.getenv("SECRET_KEY", "farm-market-secret-key-!ChangeMe!")
ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
# Seven days
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(7 * 24 * 60)))
JWT_ISSUER: str = os.getenv("JWT_ISSUER", "FarmMarketApi")
JWT_AUDIENCE: str = os.getenv("JWT_AUDIENCE", "FarmMarketApp")

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
# Comma separated logger prefixes, e.g. "farm_market.features.orders,farm_market.main"
LOG_NAMESPACES: list[str] = [
    ns.strip() for ns in os.getenv("LOG_NAMESPACES", "").split(",") if ns.strip()
]
