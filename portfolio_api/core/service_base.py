# portfolio_api/core/service_base.py
"""
Connection life cycle for store backends that talk to a server.

The client is opened on first use rather than at import or startup, so
the API boots (and answers /health as degraded) while the backend is
unreachable. A failed connect leaves nothing behind and the next
request tries again.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from portfolio_api.core.exceptions import PortfolioBaseException, store_error


class BaseService(ABC):
    """Lazily connected backend client with health check and shutdown"""

    backend_name = "service"

    def __init__(self, config: Any = None, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(self.__class__.__module__)
        self._client = None
        self._connect_lock = asyncio.Lock()

    @abstractmethod
    async def _initialize_client(self) -> Any:
        """Open the client and prove it can reach the backend"""

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """{"healthy": bool, "status": str, "details": {...}}"""

    def _validate_config(self) -> None:
        """Raise ConfigurationError before connecting if config is unusable"""

    async def _cleanup(self) -> None:
        """Release the client; called only when one is open"""

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    async def initialize(self) -> None:
        # Concurrent first requests share one connect attempt
        async with self._connect_lock:
            if self._client is not None:
                return

            self._validate_config()
            self.logger.info(f"Connecting {self.backend_name} store...")

            try:
                self._client = await self._initialize_client()
            except PortfolioBaseException:
                raise
            except Exception as e:
                self.logger.error(f"Unexpected error connecting {self.backend_name} store", exc_info=True)
                raise store_error(
                    f"Failed to connect to {self.backend_name}: {type(e).__name__}",
                    operation="connect",
                    backend=self.backend_name
                )

    async def ensure_initialized(self) -> None:
        if self._client is None:
            await self.initialize()

    async def shutdown(self) -> None:
        """Close the client. Errors are logged, teardown continues."""
        if self._client is None:
            return

        try:
            await self._cleanup()
        except Exception:
            self.logger.error(f"Error closing {self.backend_name} store", exc_info=True)
        finally:
            self._client = None

        self.logger.info(f"{self.backend_name} store closed")
