from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple


@dataclass(frozen=True)
class CartLineDTO:
    """One aggregated cart entry, keyed by product id.

    The product fields are a snapshot taken when the line was created so the
    cart can be restored and totalled without the catalog.
    """

    product_id: int
    title: str
    price: Decimal
    sale_price: Optional[Decimal]
    image: str
    color: str
    sizes: Tuple[str, ...]
    quantity: int
    selected_size: Optional[str]
    selected_color: Optional[str]
    added_at: datetime

    @property
    def effective_price(self) -> Decimal:
        return self.sale_price if self.sale_price is not None else self.price

    @property
    def line_total(self) -> Decimal:
        return self.effective_price * self.quantity
