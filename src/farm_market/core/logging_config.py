import logging
import sys
from typing import Optional

from .config import LOG_LEVEL, LOG_NAMESPACES

APP_LOGGER_NAME = "farm_market"


class NamespaceFilter(logging.Filter):
    def __init__(self, allowed_namespaces=None):
        super().__init__()
        self.allowed_namespaces = allowed_namespaces if allowed_namespaces is not None else []

    def filter(self, record):
        if not self.allowed_namespaces:
            return True  # If no namespaces are specified, allow all records
        # Allow record if its name starts with any of the allowed namespaces
        return any(record.name.startswith(ns) for ns in self.allowed_namespaces)


log_formatter = logging.Formatter(
    fmt="%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def setup_logging(
    level: str = LOG_LEVEL, allowed_namespaces: Optional[list[str]] = None
) -> logging.Logger:
    """Configures the 'farm_market' logger hierarchy.

    Modules use logging.getLogger(__name__), which creates loggers like
    "farm_market.features.orders.service". These child loggers inherit
    levels and handlers from "farm_market" unless set specifically below.

    Calling this more than once replaces the console handler instead of
    stacking a second one.
    """
    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(level)

    for handler in list(app_logger.handlers):
        if getattr(handler, "_farm_market_console", False):
            app_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)
    console_handler._farm_market_console = True

    namespaces = allowed_namespaces if allowed_namespaces is not None else LOG_NAMESPACES
    if namespaces:
        console_handler.addFilter(NamespaceFilter(namespaces))

    app_logger.addHandler(console_handler)

    # The order ledger is the part worth tracing in detail.
    logging.getLogger(f"{APP_LOGGER_NAME}.features.orders").setLevel(logging.DEBUG)

    # To see the SQL Tortoise sends:
    # logging.getLogger("tortoise.db_client").setLevel(logging.DEBUG)
    return app_logger
