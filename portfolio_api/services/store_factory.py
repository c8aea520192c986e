# portfolio_api/services/store_factory.py
"""Backend selection for the key-value store, done once at startup."""
import logging

from portfolio_api.core.config import Settings
from portfolio_api.core.exceptions import config_error
from portfolio_api.services.kv_store import KeyValueStore, InMemoryStore
from portfolio_api.services.redis_service import RedisStore, RedisConfig

logger = logging.getLogger(__name__)

STORE_BACKENDS = ("auto", "memory", "redis")


def create_store(settings: Settings) -> KeyValueStore:
    """
    Build the store named by STORE_BACKEND.

    - memory: process-local store
    - redis: Redis store, REDIS_URL required
    - auto: Redis when REDIS_URL is set, otherwise memory

    Raises:
        ConfigurationError: Unknown backend, or redis without a URL
    """
    backend = settings.STORE_BACKEND.lower()

    if backend not in STORE_BACKENDS:
        raise config_error(
            f"Unknown STORE_BACKEND '{settings.STORE_BACKEND}'. Use one of: {', '.join(STORE_BACKENDS)}",
            component="store"
        )

    if backend == "auto":
        backend = "redis" if settings.REDIS_URL else "memory"
        if backend == "memory":
            logger.warning("No REDIS_URL configured - using in-memory store (data is lost on restart)")

    if backend == "memory":
        logger.info("Key-value store: in-memory")
        return InMemoryStore()

    if not settings.REDIS_URL:
        raise config_error("STORE_BACKEND=redis requires REDIS_URL", component="store")

    logger.info("Key-value store: redis")
    return RedisStore(RedisConfig(url=settings.REDIS_URL))
