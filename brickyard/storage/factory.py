import os

import structlog

from ..config import Settings
from ..db import create_db_engine
from .memory_provider import MemoryStore
from .provider import EntityStore
from .sql_provider import SqlStore


logger = structlog.get_logger(__name__)


def build_store(settings: Settings) -> EntityStore:
    backend = settings.storage_backend.strip().lower()
    if backend == "memory":
        logger.info("store_ready", backend="memory")
        return MemoryStore()
    if backend == "sql":
        # Ensure local SQLite directory exists
        if settings.database_url.startswith("sqlite:///./"):
            os.makedirs(os.path.dirname(settings.database_url[len("sqlite:///"):]) or ".", exist_ok=True)
        store = SqlStore(create_db_engine(settings.database_url))
        if settings.auto_create_db:
            store.create_all()
        logger.info("store_ready", backend="sql", auto_create_db=settings.auto_create_db)
        return store
    raise RuntimeError(f"Unknown STORAGE_BACKEND {settings.storage_backend!r}; expected 'memory' or 'sql'")
