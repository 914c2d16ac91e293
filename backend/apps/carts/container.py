from __future__ import annotations

from typing import Optional

from django.conf import settings
from django.core.cache import cache

from .protocols import CartStorageProtocol
from .services import CartLedger
from .storage import CacheCartStorage


def build_cart_storage() -> Optional[CartStorageProtocol]:
    config = settings.STOREFRONT
    if not config["PERSIST_CART"]:
        return None
    return CacheCartStorage(
        cache,
        config["CART_STORAGE_KEY"],
        timeout=config["CART_STORAGE_TIMEOUT"],
    )


def build_cart_ledger(*, storage: Optional[CartStorageProtocol] = None) -> CartLedger:
    return CartLedger(storage=storage or build_cart_storage())
