from __future__ import annotations

from decimal import Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional

from django.utils.translation import gettext as _

from apps.carts.dtos import CartLineDTO
from apps.carts.services import CartLedger
from apps.catalog.commands import FilterSpec, SortMode
from apps.catalog.dtos import (
    CatalogPageDTO,
    CatalogSnapshotDTO,
    CategoryDTO,
    PriceRangeDTO,
    ProductDTO,
)
from apps.catalog.loaders import CatalogLoader, snapshot_summary
from apps.catalog.registry import ALL_CATEGORIES, build_registry, category_name
from apps.catalog.services import CatalogFilterService
from apps.common import get_logger
from apps.common.exceptions import InvalidQuantityError, InvalidSelectionError

from .formatting import describe_results, format_price
from .notifications import LoggingNotifier
from .protocols import NotificationLevel, NotifierProtocol, PresenterProtocol
from .scheduling import Debouncer

logger = get_logger(__name__).bind(component="storefront", layer="context")

FilterServiceFactory = Callable[[Mapping[str, CategoryDTO]], CatalogFilterService]


class StorefrontContext:
    """
    Everything one browsing session owns: the loaded catalog, the filter spec,
    the cart and the collaborators that display results.

    UI events call the mutators below; each one updates the ``FilterSpec`` in
    place and recomputes the displayed page, immediately or through the
    debouncer for search and price input. The presenter only ever receives
    plain data.
    """

    def __init__(
        self,
        *,
        loader: CatalogLoader,
        ledger: CartLedger,
        filter_service_factory: FilterServiceFactory,
        debouncer: Debouncer,
        notifier: Optional[NotifierProtocol] = None,
        presenter: Optional[PresenterProtocol] = None,
        default_sort: Any = SortMode.FEATURED,
        default_price_range: Optional[PriceRangeDTO] = None,
        enable_search: bool = True,
        currency: str = "RM",
        brand_name: str = "404WEAR",
    ):
        self.loader = loader
        self.ledger = ledger
        self.filter_service_factory = filter_service_factory
        self.debouncer = debouncer
        self.notifier = notifier or LoggingNotifier()
        self.presenter = presenter
        self.default_sort = SortMode.parse(default_sort)
        self.default_price_range = default_price_range or PriceRangeDTO.ordered(0, 250)
        self.enable_search = enable_search
        self.currency = currency
        self.brand_name = brand_name

        self.snapshot: Optional[CatalogSnapshotDTO] = None
        self.categories: Dict[str, CategoryDTO] = build_registry()
        self.filter_service = filter_service_factory(self.categories)
        self.spec = self._fresh_spec()
        self.page: Optional[CatalogPageDTO] = None
        self.logger = logger.bind(brand=brand_name)

    # Lifecycle
    def start(self) -> CatalogSnapshotDTO:
        self.logger.info("Storefront initializing")
        self.ledger.load()
        snapshot = self.loader.load()
        self.snapshot = snapshot
        self.categories = snapshot.categories
        self.currency = snapshot.currency
        self.filter_service = self.filter_service_factory(self.categories)
        if snapshot.price_range is not None:
            self.default_price_range = snapshot.price_range
        self.spec = self._fresh_spec()
        if snapshot.used_fallback and snapshot.warning:
            self.notifier.notify(snapshot.warning, NotificationLevel.WARNING)
        self.refresh()
        self._render_cart()
        self.logger.info(
            "Storefront ready",
            products=len(snapshot.products),
            fallback=snapshot.used_fallback,
        )
        return snapshot

    @property
    def products(self) -> tuple:
        return self.snapshot.products if self.snapshot else ()

    # Filter mutators
    def select_main_category(self, key: Optional[str]) -> CatalogPageDTO:
        if key and key != ALL_CATEGORIES and key not in self.categories:
            self.logger.warning("Unknown category selected, showing all", category=key)
            key = ALL_CATEGORIES
        self.spec.select_main_category(key)
        return self.refresh()

    def select_sub_category(self, key: Optional[str]) -> CatalogPageDTO:
        self.spec.select_sub_category(key)
        return self.refresh()

    def set_sort(self, mode: Any) -> CatalogPageDTO:
        self.spec.set_sort(mode)
        return self.refresh()

    def set_search_term(self, term: Optional[str]) -> None:
        if not self.enable_search:
            return
        self.spec.set_search_term(term)
        self.debouncer.schedule(self.refresh)

    def set_price_range(self, low, high) -> None:
        if self.spec.set_price_range(low, high):
            self.debouncer.schedule(self.refresh)

    def set_in_stock_only(self, enabled: bool) -> CatalogPageDTO:
        self.spec.set_in_stock_only(enabled)
        return self.refresh()

    def set_featured_only(self, enabled: bool) -> CatalogPageDTO:
        self.spec.set_featured_only(enabled)
        return self.refresh()

    def go_to_page(self, page: Any) -> CatalogPageDTO:
        self.spec.go_to_page(page)
        return self.refresh()

    def clear_filters(self) -> CatalogPageDTO:
        self.spec = self._fresh_spec()
        page = self.refresh()
        self.notifier.notify(_("All filters cleared"), NotificationLevel.SUCCESS)
        return page

    def tick(self) -> bool:
        """Run a debounced recompute whose quiet period has elapsed."""
        return self.debouncer.poll()

    def refresh(self) -> CatalogPageDTO:
        self.debouncer.cancel()
        sanitized = self.spec.sanitized(self.categories)
        if sanitized.sub_category != self.spec.sub_category:
            self.spec.sub_category = sanitized.sub_category
        page = self.filter_service.apply(self.products, self.spec)
        self.page = page
        if self.presenter is not None:
            self.presenter.render_catalog(page, self.results_summary(page), self.category_counts())
        return page

    # Read side
    def results_summary(self, page: Optional[CatalogPageDTO] = None) -> str:
        page = page or self.page
        if page is None:
            return describe_results(0, 0)
        name = None
        if self.spec.main_category != ALL_CATEGORIES:
            name = category_name(self.categories, self.spec.main_category)
        return describe_results(
            page.filtered_count,
            page.total_count,
            search_term=self.spec.search_term,
            category_name=name,
        )

    def category_counts(self) -> Dict[str, int]:
        return self.filter_service.category_counts(self.products)

    def product_detail(self, product_id) -> Optional[ProductDTO]:
        return self.filter_service.find_product(self.products, product_id)

    def format_price(self, amount) -> str:
        return format_price(amount, self.currency)

    # Cart
    def add_to_cart(self, product_id, quantity: int = 1, size: Optional[str] = None) -> bool:
        product = self.product_detail(product_id)
        if product is None:
            self.logger.warning("Add to cart for unknown product", product_id=product_id)
            self.notifier.notify(_("Product not found"), NotificationLevel.WARNING)
            return False
        try:
            self.ledger.add(product, quantity, size=size)
        except (InvalidQuantityError, InvalidSelectionError) as exc:
            self.logger.info("Add to cart rejected", product_id=product.id, code=exc.code)
            self.notifier.notify(exc.message, NotificationLevel.WARNING)
            return False
        self.notifier.notify(
            _('"%(title)s" added to cart!') % {"title": product.title},
            NotificationLevel.SUCCESS,
        )
        self._render_cart()
        return True

    def update_cart_quantity(self, product_id, quantity) -> bool:
        try:
            self.ledger.set_quantity(product_id, quantity)
        except InvalidQuantityError as exc:
            self.logger.info(
                "Cart quantity update rejected", product_id=product_id, code=exc.code
            )
            self.notifier.notify(exc.message, NotificationLevel.WARNING)
            return False
        self._render_cart()
        return True

    def remove_from_cart(self, product_id) -> None:
        self.ledger.remove(product_id)
        self._render_cart()

    def cart_lines(self) -> List[CartLineDTO]:
        return self.ledger.lines()

    def cart_subtotal(self) -> Decimal:
        return self.ledger.subtotal()

    def debug_snapshot(self) -> Dict[str, Any]:
        info: Dict[str, Any] = {
            "brand": self.brand_name,
            "filtered": self.page.filtered_count if self.page else 0,
            "cartLines": len(self.ledger.lines()),
            "cartItems": self.ledger.total_item_count(),
            "filter": self.spec.to_dict(),
        }
        if self.snapshot is not None:
            info.update(snapshot_summary(self.snapshot))
        else:
            info.update({"products": 0, "categories": sorted(self.categories)})
        return info

    def _fresh_spec(self) -> FilterSpec:
        return FilterSpec(sort_by=self.default_sort, price_range=self.default_price_range)

    def _render_cart(self) -> None:
        if self.presenter is not None:
            self.presenter.render_cart(self.ledger.total_item_count(), self.ledger.subtotal())
