from __future__ import annotations

import random
from typing import Mapping, Optional

from django.conf import settings

from .dtos import CategoryDTO
from .loaders import CatalogLoader
from .protocols import CatalogSourceProtocol
from .services import CatalogFilterService
from .sources import JsonFileCatalogSource


def build_rating_rng(seed: Optional[int] = None) -> random.Random:
    if seed is None:
        seed = settings.STOREFRONT["DEFAULT_RATING_SEED"]
    return random.Random(seed)


def build_catalog_loader(
    *,
    source: Optional[CatalogSourceProtocol] = None,
    rng: Optional[random.Random] = None,
) -> CatalogLoader:
    config = settings.STOREFRONT
    return CatalogLoader(
        source=source or JsonFileCatalogSource(config["CATALOG_PATH"]),
        currency=config["CURRENCY"],
        rng=rng or build_rating_rng(),
    )


def build_catalog_filter_service(
    categories: Mapping[str, CategoryDTO],
) -> CatalogFilterService:
    config = settings.STOREFRONT
    return CatalogFilterService(
        categories,
        page_size=config["PAGE_SIZE"],
        enable_price_filter=config["ENABLE_PRICE_FILTER"],
    )
