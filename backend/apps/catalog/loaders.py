from __future__ import annotations

import random
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

from django.utils import timezone
from django.utils.translation import gettext as _

from apps.common import get_logger
from apps.common.exceptions import CatalogLoadError, CatalogValidationError

from .dtos import CatalogSnapshotDTO, CategoryDTO, PriceRangeDTO
from .mappers import PriceRangeMapper
from .normalization import normalize_products
from .protocols import CatalogSourceProtocol
from .registry import build_registry
from .samples import SAMPLE_PRODUCTS
from .serializers import PriceRangeSerializer

logger = get_logger(__name__).bind(component="catalog", layer="loader")


def extract_records(payload: Any) -> List[Any]:
    """
    Pull the product list out of a catalog payload.

    Accepts either a bare list of records or a mapping with a ``products`` list.
    Anything else is a malformed top-level shape.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        products = payload.get("products")
        if isinstance(products, list):
            return products
        raise CatalogValidationError(
            "Catalog payload has no product list",
            details={"products": type(products).__name__},
        )
    raise CatalogValidationError(
        "Catalog payload must be a list or an object",
        details={"type": type(payload).__name__},
    )


class CatalogLoader:
    """
    One-shot catalog ingestion with two outcomes.

    Either the source's payload is validated and normalized, or the built-in
    sample products are returned together with a warning for the visitor.
    Both are ordinary results; ``load`` never raises for source or shape
    problems.
    """

    def __init__(
        self,
        source: CatalogSourceProtocol,
        *,
        currency: str,
        rng: Optional[random.Random] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.source = source
        self.currency = currency
        self.rng = rng or random.Random()
        self.now = now or timezone.now
        self.logger = logger.bind(service="CatalogLoader")

    def load(self) -> CatalogSnapshotDTO:
        try:
            payload = self.source.fetch()
            records = extract_records(payload)
        except (CatalogLoadError, CatalogValidationError) as exc:
            self.logger.warning(
                "Catalog source unusable, falling back to samples",
                code=exc.code,
                details=exc.details,
            )
            return self.load_samples()
        snapshot = self._build(records, payload if isinstance(payload, Mapping) else {})
        self.logger.info(
            "Catalog loaded",
            products=len(snapshot.products),
            categories=len(snapshot.categories),
            currency=snapshot.currency,
        )
        return snapshot

    def load_samples(self) -> CatalogSnapshotDTO:
        categories = build_registry()
        products = normalize_products(
            SAMPLE_PRODUCTS, categories=categories, rng=self.rng, now=self.now
        )
        return CatalogSnapshotDTO(
            products=tuple(products),
            categories=categories,
            currency=self.currency,
            price_range=None,
            used_fallback=True,
            warning=_(
                "Using sample product data. Please check the catalog source."
            ),
        )

    def _build(self, records: List[Any], meta: Mapping[str, Any]) -> CatalogSnapshotDTO:
        categories = build_registry(meta.get("categories"))
        products = normalize_products(
            records, categories=categories, rng=self.rng, now=self.now
        )
        return CatalogSnapshotDTO(
            products=tuple(products),
            categories=categories,
            currency=self._currency(meta.get("currency")),
            price_range=self._price_range(meta.get("priceRange")),
        )

    def _currency(self, raw: Any) -> str:
        if isinstance(raw, str) and raw.strip():
            return raw.strip()
        return self.currency

    def _price_range(self, raw: Any) -> Optional[PriceRangeDTO]:
        if raw is None:
            return None
        serializer = PriceRangeSerializer(data=raw)
        if not serializer.is_valid():
            self.logger.warning(
                "Ignoring invalid catalog price range", errors=serializer.errors
            )
            return None
        return PriceRangeMapper.to_dto(serializer.validated_data)


def snapshot_summary(snapshot: CatalogSnapshotDTO) -> Dict[str, Any]:
    categories: Mapping[str, CategoryDTO] = snapshot.categories
    return {
        "products": len(snapshot.products),
        "categories": sorted(categories),
        "currency": snapshot.currency,
        "usedFallback": snapshot.used_fallback,
    }
