from __future__ import annotations

import json
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from django.utils import timezone

from apps.catalog.dtos import ProductDTO
from apps.common import get_logger
from apps.common.exceptions import (
    InvalidQuantityError,
    InvalidSelectionError,
    StorageError,
)

from .dtos import CartLineDTO
from .mappers import CartLineMapper
from .protocols import CartStorageProtocol
from .serializers import CartLineSerializer

logger = get_logger(__name__).bind(component="carts", layer="service")


def _positive_quantity(quantity: Any) -> int:
    # bool is an int subclass; True must not count as one item.
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantityError(
            "Quantity must be a positive integer", details={"quantity": quantity}
        )
    return quantity


def _product_key(product_id: Any) -> Optional[int]:
    if isinstance(product_id, bool):
        return None
    try:
        return int(product_id)
    except (TypeError, ValueError):
        return None


def _coerce_quantity(quantity: Any) -> int:
    if isinstance(quantity, bool):
        raise InvalidQuantityError(
            "Quantity must be an integer", details={"quantity": quantity}
        )
    try:
        return int(quantity)
    except (TypeError, ValueError):
        raise InvalidQuantityError(
            "Quantity must be an integer", details={"quantity": quantity}
        )


class CartLedger:
    """
    Local shopping cart: one line per product, in insertion order.

    Every mutation is followed by a best-effort save through the injected
    storage. A failed save is logged and the in-memory cart keeps the change.

    Quantity policy: ``add`` rejects anything but a positive integer with
    ``InvalidQuantityError``; ``set_quantity`` treats zero or less as removal.
    """

    def __init__(
        self,
        storage: Optional[CartStorageProtocol] = None,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.storage = storage
        self.clock = clock or timezone.now
        self._lines: Dict[int, CartLineDTO] = {}
        self.logger = logger.bind(service="CartLedger")

    # Mutations
    def add(
        self,
        product: ProductDTO,
        quantity: int = 1,
        *,
        size: Optional[str] = None,
        color: Optional[str] = None,
    ) -> None:
        quantity = _positive_quantity(quantity)
        self._check_size(product.id, product.sizes, size)
        existing = self._lines.get(product.id)
        if existing is not None:
            changes: Dict[str, Any] = {"quantity": existing.quantity + quantity}
            if size is not None:
                changes["selected_size"] = size
            if color is not None:
                changes["selected_color"] = color
            self._lines[product.id] = replace(existing, **changes)
            self.logger.info(
                "Cart line incremented",
                product_id=product.id,
                quantity=changes["quantity"],
            )
        else:
            self._lines[product.id] = CartLineMapper.from_product(
                product,
                quantity,
                added_at=self.clock(),
                selected_size=size,
                selected_color=color,
            )
            self.logger.info("Cart line created", product_id=product.id, quantity=quantity)
        self._persist()

    def set_quantity(self, product_id: Any, quantity: Any) -> None:
        quantity = _coerce_quantity(quantity)
        product_id = _product_key(product_id)
        if quantity <= 0:
            self.remove(product_id)
            return
        line = self._lines.get(product_id)
        if line is None:
            self.logger.debug(
                "Ignoring quantity update for product not in cart", product_id=product_id
            )
            return
        if line.quantity == quantity:
            return
        self._lines[product_id] = replace(line, quantity=quantity)
        self.logger.info("Cart line quantity set", product_id=product_id, quantity=quantity)
        self._persist()

    def remove(self, product_id: Any) -> None:
        product_id = _product_key(product_id)
        if self._lines.pop(product_id, None) is None:
            return
        self.logger.info("Cart line removed", product_id=product_id)
        self._persist()

    def select_options(
        self,
        product_id: Any,
        *,
        size: Optional[str] = None,
        color: Optional[str] = None,
    ) -> None:
        product_id = _product_key(product_id)
        line = self._lines.get(product_id)
        if line is None:
            self.logger.debug(
                "Ignoring option change for product not in cart", product_id=product_id
            )
            return
        self._check_size(product_id, line.sizes, size)
        changes: Dict[str, Any] = {}
        if size is not None:
            changes["selected_size"] = size
        if color is not None:
            changes["selected_color"] = color
        if not changes:
            return
        self._lines[product_id] = replace(line, **changes)
        self._persist()

    def clear(self) -> None:
        if not self._lines:
            return
        self._lines.clear()
        self.logger.info("Cart cleared")
        self._persist()

    # Queries
    def lines(self) -> List[CartLineDTO]:
        return list(self._lines.values())

    def get_line(self, product_id: Any) -> Optional[CartLineDTO]:
        return self._lines.get(_product_key(product_id))

    def total_item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self._lines.values()), Decimal("0"))

    def is_empty(self) -> bool:
        return not self._lines

    # Persistence
    def serialize(self) -> str:
        return json.dumps(CartLineMapper.many_to_dict(self._lines.values()))

    def restore(self, serialized: Any) -> int:
        """
        Replace the cart with persisted data and return the number of lines.

        Unparseable data yields an empty cart; individual entries that do not
        validate are skipped. Entries repeating a product id are merged.
        """
        entries = self._decode(serialized)
        restored: Dict[int, CartLineDTO] = {}
        now = self.clock()
        skipped = 0
        for position, raw in enumerate(entries):
            serializer = CartLineSerializer(data=raw)
            if not serializer.is_valid():
                skipped += 1
                self.logger.warning(
                    "Skipping malformed cart entry",
                    position=position,
                    errors=dict(serializer.errors),
                )
                continue
            line = CartLineMapper.from_validated(
                serializer.validated_data, default_added_at=now
            )
            previous = restored.get(line.product_id)
            if previous is not None:
                line = replace(previous, quantity=previous.quantity + line.quantity)
            restored[line.product_id] = line
        self._lines = restored
        self.logger.info("Cart restored", lines=len(restored), skipped=skipped)
        return len(restored)

    def load(self) -> int:
        """Restore from storage at startup; any failure leaves an empty cart."""
        if self.storage is None:
            return 0
        try:
            raw = self.storage.load()
        except StorageError as exc:
            self.logger.warning(
                "Cart storage unreadable, starting empty", code=exc.code, details=exc.details
            )
            self._lines = {}
            return 0
        except Exception:
            self.logger.exception("Cart storage raised while loading, starting empty")
            self._lines = {}
            return 0
        if raw is None:
            self._lines = {}
            return 0
        return self.restore(raw)

    def _decode(self, serialized: Any) -> List[Any]:
        data = serialized
        if isinstance(serialized, (bytes, bytearray)):
            try:
                data = serialized.decode("utf-8")
            except UnicodeDecodeError:
                self.logger.warning("Persisted cart is not valid UTF-8, starting empty")
                return []
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except ValueError:
                self.logger.warning("Persisted cart is not valid JSON, starting empty")
                return []
        if data is None:
            return []
        if not isinstance(data, list):
            self.logger.warning(
                "Persisted cart has unexpected shape, starting empty",
                type=type(data).__name__,
            )
            return []
        return data

    def _check_size(self, product_id: int, sizes, size: Optional[str]) -> None:
        if size is not None and size not in sizes:
            raise InvalidSelectionError(
                "Size is not offered for this product",
                details={"productId": product_id, "size": size, "sizes": list(sizes)},
            )

    def _persist(self) -> None:
        if self.storage is None:
            return
        try:
            saved = self.storage.save(self.serialize())
        except StorageError as exc:
            self.logger.warning(
                "Cart save failed, keeping in-memory state",
                code=exc.code,
                details=exc.details,
            )
            return
        except Exception:
            self.logger.exception("Cart save raised, keeping in-memory state")
            return
        if not saved:
            self.logger.warning("Cart storage rejected save, keeping in-memory state")
