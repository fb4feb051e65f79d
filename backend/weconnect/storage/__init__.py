import logging

from .base import BookingStore
from .json_file import JsonFileBookingStore
from .memory import MemoryBookingStore
from .sql import SqlBookingStore

logger = logging.getLogger(__name__)

__all__ = [
    "BookingStore",
    "JsonFileBookingStore",
    "MemoryBookingStore",
    "SqlBookingStore",
    "build_store",
]


def build_store(database_url: str, timeout: float = 10.0) -> BookingStore:
    """Pick a storage backend from the configured URL."""
    if database_url.startswith("memory://"):
        logger.info("📊 Storage: in-memory")
        return MemoryBookingStore()

    if database_url.startswith("json://"):
        path = database_url[len("json://"):]
        logger.info(f"📊 Storage: JSON file ({path})")
        return JsonFileBookingStore(path)

    logger.info(f"📊 Storage: SQL ({database_url.split('://')[0]})")
    return SqlBookingStore.from_url(database_url, timeout=timeout)
