from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from apps.common import get_logger

from .commands import FilterSpec, SortMode
from .dtos import CatalogPageDTO, CategoryDTO, ProductDTO
from .pagination import CatalogPagination
from .registry import ALL_CATEGORIES

logger = get_logger(__name__).bind(component="catalog", layer="service")


def effective_price(product: ProductDTO) -> Decimal:
    return product.effective_price


def _created_at(product: ProductDTO):
    return product.created_at


def _popularity(product: ProductDTO) -> float:
    return product.popularity


def sort_products(products: Iterable[ProductDTO], sort_by) -> List[ProductDTO]:
    """Return a new, stably sorted list; the input is left untouched."""
    mode = SortMode.parse(sort_by)
    items = list(products)
    if mode is SortMode.PRICE_LOW:
        items.sort(key=effective_price)
    elif mode is SortMode.PRICE_HIGH:
        items.sort(key=effective_price, reverse=True)
    elif mode is SortMode.NEWEST:
        items.sort(key=_created_at, reverse=True)
    elif mode is SortMode.POPULAR:
        items.sort(key=_popularity, reverse=True)
    else:
        # Featured first; newest first inside each group.
        items.sort(key=_created_at, reverse=True)
        items.sort(key=lambda p: not p.featured)
    return items


def search_text(product: ProductDTO) -> str:
    return " ".join(
        [product.title, product.description, *product.tags, product.color, product.material]
    ).casefold()


class CatalogFilterService:
    """
    Turns the loaded product list and a ``FilterSpec`` into the displayed page.

    ``apply`` is a pure function of its arguments: the product sequence and the
    spec are never mutated, and equal inputs give equal pages.
    """

    def __init__(
        self,
        categories: Mapping[str, CategoryDTO],
        *,
        page_size: Optional[int] = None,
        enable_price_filter: bool = True,
    ):
        self.categories = categories
        self.pagination = CatalogPagination(page_size)
        self.enable_price_filter = enable_price_filter
        self.logger = logger.bind(service="CatalogFilterService")

    def filter_products(
        self, products: Sequence[ProductDTO], spec: FilterSpec
    ) -> List[ProductDTO]:
        spec = spec.sanitized(self.categories)
        filtered = list(products)
        if spec.main_category and spec.main_category != ALL_CATEGORIES:
            filtered = [p for p in filtered if p.main_category == spec.main_category]
        if spec.sub_category:
            filtered = [p for p in filtered if p.sub_category == spec.sub_category]
        term = spec.normalized_search
        if term:
            filtered = [p for p in filtered if term in search_text(p)]
        if self.enable_price_filter:
            filtered = [
                p for p in filtered if spec.price_range.contains(p.effective_price)
            ]
        if spec.in_stock_only:
            filtered = [p for p in filtered if p.in_stock]
        if spec.featured_only:
            filtered = [p for p in filtered if p.featured]
        return sort_products(filtered, spec.sort_by)

    def apply(self, products: Sequence[ProductDTO], spec: FilterSpec) -> CatalogPageDTO:
        filtered = self.filter_products(products, spec)
        items, page, num_pages, has_next = self.pagination.paginate(filtered, spec.page)
        self.logger.debug(
            "Applied catalog filters",
            total=len(products),
            filtered=len(filtered),
            page=page,
            main_category=spec.main_category,
            sort_by=spec.sort_by.value,
        )
        return CatalogPageDTO(
            items=items,
            total_count=len(products),
            filtered_count=len(filtered),
            page=page,
            num_pages=num_pages,
            has_next=has_next,
        )

    def category_counts(self, products: Iterable[ProductDTO]) -> Dict[str, int]:
        products = list(products)
        counts = {ALL_CATEGORIES: len(products)}
        for key in self.categories:
            counts[key] = 0
        for product in products:
            if product.main_category in counts and product.main_category != ALL_CATEGORIES:
                counts[product.main_category] += 1
        return counts

    @staticmethod
    def find_product(
        products: Iterable[ProductDTO], product_id
    ) -> Optional[ProductDTO]:
        try:
            product_id = int(product_id)
        except (TypeError, ValueError):
            return None
        for product in products:
            if product.id == product_id:
                return product
        return None
