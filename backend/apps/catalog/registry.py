from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from apps.common import get_logger

from .dtos import CategoryDTO
from .mappers import CategoryMapper
from .serializers import CategorySerializer

logger = get_logger(__name__).bind(component="catalog", layer="registry")

ALL_CATEGORIES = "all"

DEFAULT_CATEGORIES: Dict[str, Dict[str, Any]] = {
    "accessories": {
        "name": "Accessories",
        "icon": "\U0001F48E",
        "description": "Jewelry and accessories to complete your look",
        "subCategories": {
            "necklace": "Necklaces",
            "rings": "Rings",
            "sunglasses": "Sunglasses",
        },
    },
    "tops": {
        "name": "Tops",
        "icon": "\U0001F455",
        "description": "Shirts, jackets, and tops for every occasion",
        "subCategories": {
            "oversize": "Oversize",
            "casual_wear": "Casual Wear",
            "slim_fit": "Slim Fit",
        },
    },
    "shoes": {
        "name": "Shoes",
        "icon": "\U0001F45F",
        "description": "Footwear combining style and comfort",
        "subCategories": {
            "flats": "Flats",
            "heels": "Heels",
            "casual_shoes": "Casual Shoes",
        },
    },
    "bottoms": {
        "name": "Bottoms",
        "icon": "\U0001F456",
        "description": "Pants, jeans, skirts and shorts",
        "subCategories": {
            "shorts": "Shorts",
            "jeans": "Jeans",
            "skirt": "Skirts",
        },
    },
    "facial": {
        "name": "Facial Care",
        "icon": "✨",
        "description": "Skincare essentials for a fresh look",
        "subCategories": {
            "cleanser": "Cleansers",
            "moisturizer": "Moisturizers",
            "serum": "Serums",
        },
    },
}


def build_registry(
    overrides: Optional[Mapping[str, Any]] = None,
) -> Dict[str, CategoryDTO]:
    """
    Return the category registry: built-in entries merged with ``overrides``.

    Overrides replace whole entries key by key. Entries that do not validate are
    skipped and the built-in entry (if any) stays in place.
    """
    registry = {
        key: CategoryMapper.to_dto(key, _validated(key, raw))
        for key, raw in DEFAULT_CATEGORIES.items()
    }
    if not overrides:
        return registry
    if not isinstance(overrides, Mapping):
        logger.warning(
            "Ignoring category overrides with unexpected shape",
            type=type(overrides).__name__,
        )
        return registry
    for key, raw in overrides.items():
        key = str(key).strip()
        if not key or key == ALL_CATEGORIES:
            logger.warning("Ignoring reserved category key", key=key)
            continue
        data = _validated(key, raw)
        if data is None:
            continue
        registry[key] = CategoryMapper.to_dto(key, data)
        logger.debug("Category override applied", key=key)
    return registry


def _validated(key: str, raw: Any) -> Optional[Dict[str, Any]]:
    serializer = CategorySerializer(data=raw)
    if not serializer.is_valid():
        logger.warning(
            "Skipping invalid category entry", key=key, errors=serializer.errors
        )
        return None
    return dict(serializer.validated_data)


def category_name(categories: Mapping[str, CategoryDTO], key: str) -> str:
    category = categories.get(key)
    return category.name if category else key
