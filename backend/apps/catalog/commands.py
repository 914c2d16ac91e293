from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from apps.common import get_logger
from apps.common.exceptions import InvariantViolation

from .dtos import CategoryDTO, PriceRangeDTO
from .registry import ALL_CATEGORIES

logger = get_logger(__name__).bind(component="catalog", layer="filter-spec")


class SortMode(str, Enum):
    FEATURED = "featured"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    NEWEST = "newest"
    POPULAR = "popular"

    @classmethod
    def parse(cls, raw: Any) -> "SortMode":
        """Unknown or missing modes sort like ``featured``."""
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw or "").strip().lower())
        except ValueError:
            return cls.FEATURED


def _default_price_range() -> PriceRangeDTO:
    return PriceRangeDTO(min=Decimal("0"), max=Decimal("250"))


@dataclass
class FilterSpec:
    """
    Every user-adjustable input of the catalog pipeline.

    The mutators keep the filter consistent on their own: changing the main
    category clears the sub category, and any filter change sends the visitor
    back to page 1.
    """

    main_category: str = ALL_CATEGORIES
    sub_category: Optional[str] = None
    search_term: str = ""
    sort_by: SortMode = SortMode.FEATURED
    price_range: PriceRangeDTO = field(default_factory=_default_price_range)
    in_stock_only: bool = False
    featured_only: bool = False
    page: int = 1

    @property
    def normalized_search(self) -> str:
        return (self.search_term or "").strip().casefold()

    # Mutators
    def select_main_category(self, key: Optional[str]) -> None:
        self.main_category = (key or ALL_CATEGORIES).strip() or ALL_CATEGORIES
        self.sub_category = None
        self.page = 1

    def select_sub_category(self, key: Optional[str]) -> None:
        self.sub_category = None if not key or key == ALL_CATEGORIES else key
        self.page = 1

    def set_search_term(self, term: Optional[str]) -> None:
        self.search_term = (term or "").strip()
        self.page = 1

    def set_sort(self, mode: Any) -> None:
        self.sort_by = SortMode.parse(mode)
        self.page = 1

    def set_price_range(self, low, high) -> bool:
        """Returns False and keeps the current range when a bound is not a number."""
        try:
            price_range = PriceRangeDTO.ordered(low, high)
        except ArithmeticError:
            logger.warning(
                "Ignoring unparseable price range", low=repr(low), high=repr(high)
            )
            return False
        self.price_range = price_range
        self.page = 1
        return True

    def set_in_stock_only(self, enabled: bool) -> None:
        self.in_stock_only = bool(enabled)
        self.page = 1

    def set_featured_only(self, enabled: bool) -> None:
        self.featured_only = bool(enabled)
        self.page = 1

    def go_to_page(self, page: Any) -> None:
        try:
            self.page = max(int(page), 1)
        except (TypeError, ValueError):
            self.page = 1

    # Invariant handling
    def check(self, categories: Mapping[str, CategoryDTO]) -> None:
        """Raise ``InvariantViolation`` when the sub category cannot apply."""
        if not self.sub_category:
            return
        if self.main_category == ALL_CATEGORIES:
            raise InvariantViolation(
                "Sub category selected without a main category",
                details={"subCategory": self.sub_category},
            )
        category = categories.get(self.main_category)
        if category is None or not category.has_sub_category(self.sub_category):
            raise InvariantViolation(
                "Sub category does not belong to the main category",
                details={
                    "mainCategory": self.main_category,
                    "subCategory": self.sub_category,
                },
            )

    def sanitized(self, categories: Mapping[str, CategoryDTO]) -> "FilterSpec":
        """Return a copy with any offending sub category cleared."""
        try:
            self.check(categories)
        except InvariantViolation as exc:
            logger.warning(
                "Resetting sub category after invariant violation",
                code=exc.code,
                details=exc.details,
            )
            return replace(self, sub_category=None)
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mainCategory": self.main_category,
            "subCategory": self.sub_category,
            "searchTerm": self.search_term,
            "sortBy": self.sort_by.value,
            "priceRange": {
                "min": str(self.price_range.min),
                "max": str(self.price_range.max),
            },
            "inStockOnly": self.in_stock_only,
            "featuredOnly": self.featured_only,
            "page": self.page,
        }

    @staticmethod
    def from_raw(
        payload: Optional[Dict[str, Any]],
        *,
        default_sort: Any = SortMode.FEATURED,
        default_price_range: Optional[PriceRangeDTO] = None,
    ) -> "FilterSpec":
        data = dict(payload or {})
        price_range = default_price_range or _default_price_range()
        raw_range = data.get("priceRange")
        if isinstance(raw_range, dict):
            try:
                price_range = PriceRangeDTO.ordered(
                    raw_range.get("min", price_range.min),
                    raw_range.get("max", price_range.max),
                )
            except ArithmeticError:
                pass
        spec = FilterSpec(price_range=price_range)
        spec.select_main_category(data.get("mainCategory"))
        spec.select_sub_category(data.get("subCategory"))
        spec.set_search_term(data.get("searchTerm"))
        spec.set_sort(data.get("sortBy") or default_sort)
        spec.set_in_stock_only(data.get("inStockOnly", False))
        spec.set_featured_only(data.get("featuredOnly", False))
        spec.go_to_page(data.get("page", 1))
        return spec
