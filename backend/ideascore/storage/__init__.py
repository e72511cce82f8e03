from fastapi import Request

from ..config import Settings
from .base import CONTENT_FIELDS, UPDATABLE_FIELDS, Storage
from .memory import MemoryStorage
from .sql import SQLStorage


def build_storage(settings: Settings) -> Storage:
    """Instantiate the backend named by ``settings.storage_backend``."""
    if settings.storage_backend == "memory":
        return MemoryStorage()
    return SQLStorage.from_url(settings.database_url)


def get_storage(request: Request) -> Storage:
    """FastAPI dependency: the storage handle opened in the app lifespan."""
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise RuntimeError("Storage is not initialised; was the app lifespan started?")
    return storage


__all__ = [
    "Storage",
    "SQLStorage",
    "MemoryStorage",
    "build_storage",
    "get_storage",
    "CONTENT_FIELDS",
    "UPDATABLE_FIELDS",
]
