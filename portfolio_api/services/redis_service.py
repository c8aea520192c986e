# portfolio_api/services/redis_service.py
"""
Redis-backed key-value store for the portfolio API.

Async wrapper around redis.asyncio with:
- Canonical JSON serialization
- Native TTL expiry (SETEX)
- Failures surfaced as StoreError
- Health checks

Upstash works through its rediss:// URL; the URL itself comes from
settings (REDIS_URL or UPSTASH_REDIS_URL).
"""
from typing import Optional, Dict, Any
from dataclasses import dataclass
import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from portfolio_api.core.service_base import BaseService
from portfolio_api.core.exceptions import config_error, store_error
from portfolio_api.services.kv_store import KeyValueStore, serialize_value, deserialize_value

logger = logging.getLogger(__name__)


@dataclass
class RedisConfig:
    """Configuration for the Redis store"""
    url: Optional[str] = None
    decode_responses: bool = True
    socket_timeout: float = 5.0
    max_connections: int = 10
    health_check_interval: int = 30


class RedisStore(BaseService, KeyValueStore):
    """
    Redis implementation of the key-value store contract.

    The client is created lazily on first use and reused for the
    lifetime of the process.
    """

    backend_name = "redis"

    def __init__(self, config: RedisConfig):
        super().__init__(config, logger)

    def _validate_config(self) -> None:
        """A Redis store without a URL is a configuration error"""
        if not self.config or not self.config.url:
            raise config_error(
                "No Redis URL configured. Set REDIS_URL or UPSTASH_REDIS_URL.",
                component="redis"
            )

    async def _initialize_client(self) -> redis.Redis:
        """Create the client and verify the connection"""
        client = redis.from_url(
            self.config.url,
            decode_responses=self.config.decode_responses,
            socket_timeout=self.config.socket_timeout,
            max_connections=self.config.max_connections,
            health_check_interval=self.config.health_check_interval
        )

        try:
            await client.ping()
        except (RedisError, OSError) as e:
            self.logger.error(f"Failed to connect to Redis: {e}")
            await client.aclose()
            raise store_error(
                "Failed to connect to Redis",
                operation="connect",
                backend=self.backend_name
            )

        self.logger.info("Redis connection successful")
        return client

    async def read(self, key: str) -> Optional[Any]:
        """
        Get a value from Redis.

        Args:
            key: The key to retrieve

        Returns:
            The deserialized value, or None if the key does not exist
        """
        await self.ensure_initialized()

        try:
            raw = await self._client.get(key)
        except (RedisError, OSError) as e:
            self.logger.error(f"Redis read failed for key '{key}': {e}")
            raise store_error(f"Redis read failed: {e}", key=key, operation="read", backend=self.backend_name)

        if raw is None:
            return None

        try:
            return deserialize_value(raw)
        except ValueError as e:
            self.logger.error(f"Corrupt JSON at key '{key}': {e}")
            raise store_error("Stored value is not valid JSON", key=key, operation="read", backend=self.backend_name)

    async def write(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """
        Set a value in Redis.

        Args:
            key: The key to set
            value: The value to store (serialized as JSON)
            ttl_seconds: Time to live in seconds
        """
        await self.ensure_initialized()

        try:
            payload = serialize_value(value)
        except (TypeError, ValueError) as e:
            raise store_error(
                f"Value for '{key}' is not JSON serializable: {e}",
                key=key, operation="write", backend=self.backend_name
            )

        try:
            if ttl_seconds:
                await self._client.setex(key, ttl_seconds, payload)
            else:
                await self._client.set(key, payload)
        except (RedisError, OSError) as e:
            self.logger.error(f"Redis write failed for key '{key}': {e}")
            raise store_error(f"Redis write failed: {e}", key=key, operation="write", backend=self.backend_name)

    async def delete(self, key: str) -> None:
        """
        Delete a key.

        Args:
            key: Key to delete
        """
        await self.ensure_initialized()

        try:
            await self._client.delete(key)
        except (RedisError, OSError) as e:
            self.logger.error(f"Redis delete failed for key '{key}': {e}")
            raise store_error(f"Redis delete failed: {e}", key=key, operation="delete", backend=self.backend_name)

    async def health_check(self) -> Dict[str, Any]:
        """
        Check Redis health.

        Returns:
            Health status including connection info
        """
        try:
            await self.ensure_initialized()
            await self._client.ping()
            info = await self._client.info()

            return {
                "healthy": True,
                "status": "connected",
                "details": {
                    "redis_version": info.get("redis_version", "unknown"),
                    "connected_clients": info.get("connected_clients", 0),
                    "used_memory_human": info.get("used_memory_human", "unknown")
                }
            }

        except Exception as e:
            self.logger.warning(f"Redis health check failed: {e}")
            return {
                "healthy": False,
                "status": "error",
                "details": {"error": type(e).__name__}
            }

    async def _cleanup(self) -> None:
        """Close the Redis connection pool"""
        await self._client.aclose()
