from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class CategoryDTO:
    key: str
    name: str
    icon: str = ""
    description: str = ""
    sub_categories: Dict[str, str] = field(default_factory=dict)

    def has_sub_category(self, key: Optional[str]) -> bool:
        return bool(key) and key in self.sub_categories


@dataclass(frozen=True)
class PriceRangeDTO:
    min: Decimal
    max: Decimal

    @classmethod
    def ordered(cls, low, high) -> "PriceRangeDTO":
        """Build a range from loose bounds: negatives clamp to 0, reversed bounds swap."""
        low = max(Decimal(str(low)), Decimal("0"))
        high = max(Decimal(str(high)), Decimal("0"))
        if low > high:
            low, high = high, low
        return cls(min=low, max=high)

    def contains(self, value: Decimal) -> bool:
        return self.min <= value <= self.max


@dataclass(frozen=True)
class ProductDTO:
    id: int
    title: str
    description: str
    price: Decimal
    sale_price: Optional[Decimal]
    main_category: str
    sub_category: Optional[str]
    image: str
    color: str
    sizes: Tuple[str, ...]
    material: str
    tags: Tuple[str, ...]
    featured: bool
    in_stock: bool
    sku: str
    rating: float
    review_count: int
    created_at: datetime

    @property
    def effective_price(self) -> Decimal:
        return self.sale_price if self.sale_price is not None else self.price

    @property
    def popularity(self) -> float:
        return self.rating * self.review_count


@dataclass
class CatalogPageDTO:
    items: List[ProductDTO]
    total_count: int
    filtered_count: int
    page: int = 1
    num_pages: int = 1
    has_next: bool = False


@dataclass
class CatalogSnapshotDTO:
    products: Tuple[ProductDTO, ...]
    categories: Dict[str, CategoryDTO]
    currency: str
    price_range: Optional[PriceRangeDTO] = None
    used_fallback: bool = False
    warning: Optional[str] = None


"""DTO dataclasses only. Mapping logic lives in mappers.py."""
