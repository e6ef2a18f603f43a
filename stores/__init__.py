import logging

from stores.base import OrderConflictError, OrderStore
from stores.memory import InMemoryOrderStore
from stores.sql import SqlOrderStore
from utils.config import Settings

logger = logging.getLogger(__name__)


def build_order_store(settings: Settings) -> OrderStore:
    """Creates the store selected by ORDER_STORE."""
    if settings.order_store == "sql":
        logger.info("Using SQL order store")
        store = SqlOrderStore(settings.database_url)
        store.create_tables()
        return store
    logger.info("Using in-memory order store")
    return InMemoryOrderStore()


__all__ = [
    "OrderConflictError",
    "OrderStore",
    "InMemoryOrderStore",
    "SqlOrderStore",
    "build_order_store",
]
