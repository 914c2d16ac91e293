"""
Ingestion of raw catalog records.

``normalize_products`` is the one place where raw records become ``ProductDTO``
instances. The static defaults live in ``PRODUCT_FIELD_DEFAULTS`` and the
validation rules in ``ProductRecordSerializer``; the rest of the table is the
position- and randomness-dependent defaults below:

=============  ==========================================
field          default when absent
=============  ==========================================
id             position in the list + 1
sku            ``404-NNN`` from the position
rating         random integer in [3, 6)
reviewCount    random integer in [10, 60)
createdAt      ingestion time
=============  ==========================================

``None`` and blank strings count as absent. Records that are not mappings or
fail validation are dropped; so are later records reusing an id.
"""
from __future__ import annotations

import random
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from django.utils import timezone

from apps.common import get_logger

from .dtos import CategoryDTO, ProductDTO
from .mappers import ProductMapper
from .serializers import ProductRecordSerializer

logger = get_logger(__name__).bind(component="catalog", layer="normalization")

PLACEHOLDER_RATING_RANGE = (3, 6)
PLACEHOLDER_REVIEW_COUNT_RANGE = (10, 60)
SKU_PREFIX = "404"


def default_sku(position: int) -> str:
    return f"{SKU_PREFIX}-{position + 1:03d}"


def _strip_absent(record: Mapping[str, Any]) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {}
    for key, value in record.items():
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        cleaned[key] = value
    # A lone tag / size string is accepted as a one-element list.
    for key in ("tags", "size"):
        if isinstance(cleaned.get(key), str):
            cleaned[key] = [cleaned[key]]
    return cleaned


def normalize_product(
    record: Any,
    position: int,
    *,
    categories: Mapping[str, CategoryDTO],
    rng: random.Random,
    now: datetime,
) -> Optional[ProductDTO]:
    """Validate a single raw record, returning ``None`` when it must be dropped."""
    if not isinstance(record, Mapping):
        logger.warning(
            "Skipping catalog record with unexpected shape",
            position=position,
            type=type(record).__name__,
        )
        return None
    serializer = ProductRecordSerializer(data=_strip_absent(record))
    if not serializer.is_valid():
        logger.warning(
            "Skipping invalid catalog record",
            position=position,
            errors=dict(serializer.errors),
        )
        return None
    data = dict(serializer.validated_data)
    data.setdefault("id", position + 1)
    data.setdefault("sku", default_sku(position))
    if "rating" not in data:
        data["rating"] = rng.randrange(*PLACEHOLDER_RATING_RANGE)
    if "review_count" not in data:
        data["review_count"] = rng.randrange(*PLACEHOLDER_REVIEW_COUNT_RANGE)
    data.setdefault("created_at", now)

    sale_price = data.get("sale_price")
    if sale_price is not None and sale_price >= data["price"]:
        logger.warning(
            "Dropping sale price that is not below the list price",
            product_id=data["id"],
            price=str(data["price"]),
            sale_price=str(sale_price),
        )
        data["sale_price"] = None

    sub_category = data.get("sub_category")
    if sub_category:
        category = categories.get(data["main_category"])
        if category is None or not category.has_sub_category(sub_category):
            logger.warning(
                "Clearing sub category outside its main category",
                product_id=data["id"],
                main_category=data["main_category"],
                sub_category=sub_category,
            )
            data["sub_category"] = None
    return ProductMapper.to_dto(data)


def normalize_products(
    records: Iterable[Any],
    *,
    categories: Mapping[str, CategoryDTO],
    rng: Optional[random.Random] = None,
    now: Optional[Callable[[], datetime]] = None,
) -> List[ProductDTO]:
    rng = rng or random.Random()
    ingested_at = (now or timezone.now)()
    products: List[ProductDTO] = []
    seen_ids = set()
    skipped = 0
    for position, record in enumerate(records):
        product = normalize_product(
            record, position, categories=categories, rng=rng, now=ingested_at
        )
        if product is None:
            skipped += 1
            continue
        if product.id in seen_ids:
            logger.warning(
                "Skipping catalog record with duplicate id",
                position=position,
                product_id=product.id,
            )
            skipped += 1
            continue
        seen_ids.add(product.id)
        products.append(product)
    logger.debug(
        "Normalized catalog records", accepted=len(products), skipped=skipped
    )
    return products
