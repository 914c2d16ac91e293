from __future__ import annotations

from decimal import Decimal
from typing import Mapping, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.catalog.dtos import CatalogPageDTO


class NotificationLevel:
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"


class NotifierProtocol(Protocol):
    def notify(self, message: str, level: str = NotificationLevel.SUCCESS) -> None:
        """Show a transient message. Fire-and-forget; never retried."""
        ...


class PresenterProtocol(Protocol):
    def render_catalog(
        self, page: "CatalogPageDTO", summary: str, counts: Mapping[str, int]
    ) -> None:
        ...

    def render_cart(self, total_items: int, subtotal: Decimal) -> None:
        ...
