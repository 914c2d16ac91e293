from __future__ import annotations

from typing import Callable, Optional

from django.conf import settings

from apps.carts.container import build_cart_ledger
from apps.carts.protocols import CartStorageProtocol
from apps.catalog.container import build_catalog_filter_service, build_catalog_loader
from apps.catalog.dtos import PriceRangeDTO
from apps.catalog.protocols import CatalogSourceProtocol

from .context import StorefrontContext
from .protocols import NotifierProtocol, PresenterProtocol
from .scheduling import Debouncer


def build_storefront(
    *,
    source: Optional[CatalogSourceProtocol] = None,
    storage: Optional[CartStorageProtocol] = None,
    notifier: Optional[NotifierProtocol] = None,
    presenter: Optional[PresenterProtocol] = None,
    clock: Optional[Callable[[], float]] = None,
) -> StorefrontContext:
    config = settings.STOREFRONT
    price_range = config["PRICE_RANGE"]
    return StorefrontContext(
        loader=build_catalog_loader(source=source),
        ledger=build_cart_ledger(storage=storage),
        filter_service_factory=build_catalog_filter_service,
        debouncer=Debouncer(config["RECOMPUTE_DEBOUNCE_SECONDS"], clock=clock),
        notifier=notifier,
        presenter=presenter,
        default_sort=config["DEFAULT_SORT"],
        default_price_range=PriceRangeDTO.ordered(price_range["min"], price_range["max"]),
        enable_search=config["ENABLE_SEARCH"],
        currency=config["CURRENCY"],
        brand_name=config["BRAND_NAME"],
    )
