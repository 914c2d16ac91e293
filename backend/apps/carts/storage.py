from __future__ import annotations

from typing import Any, Optional

from apps.common import get_logger
from apps.common.exceptions import StorageError

logger = get_logger(__name__).bind(component="carts", layer="storage")


class CacheCartStorage:
    """
    Keeps the serialized cart under one namespaced key in a Django cache.

    Backend failures surface as ``StorageError``; the ledger decides what to do
    with them.
    """

    def __init__(self, cache_backend: Any, key: str, *, timeout: Optional[int] = None):
        self.cache = cache_backend
        self.key = key
        self.timeout = timeout

    def load(self) -> Optional[str]:
        try:
            value = self.cache.get(self.key)
        except Exception as exc:
            raise StorageError(
                "Cart could not be read from storage", details={"key": self.key}
            ) from exc
        if value is not None and not isinstance(value, str):
            logger.warning(
                "Stored cart has unexpected type", key=self.key, type=type(value).__name__
            )
            return None
        return value

    def save(self, serialized: str) -> bool:
        try:
            self.cache.set(self.key, serialized, timeout=self.timeout)
        except Exception as exc:
            raise StorageError(
                "Cart could not be written to storage", details={"key": self.key}
            ) from exc
        logger.debug("Cart persisted", key=self.key, size=len(serialized))
        return True

