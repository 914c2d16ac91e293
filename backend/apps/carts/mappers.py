from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from apps.catalog.dtos import ProductDTO

from .dtos import CartLineDTO


class CartLineMapper:
    @staticmethod
    def from_product(
        product: ProductDTO,
        quantity: int,
        *,
        added_at: datetime,
        selected_size: Optional[str] = None,
        selected_color: Optional[str] = None,
    ) -> CartLineDTO:
        return CartLineDTO(
            product_id=product.id,
            title=product.title,
            price=product.price,
            sale_price=product.sale_price,
            image=product.image,
            color=product.color,
            sizes=tuple(product.sizes),
            quantity=quantity,
            selected_size=selected_size,
            selected_color=selected_color if selected_color is not None else product.color,
            added_at=added_at,
        )

    @staticmethod
    def from_validated(data: Mapping[str, Any], *, default_added_at: datetime) -> CartLineDTO:
        return CartLineDTO(
            product_id=int(data["id"]),
            title=data["title"],
            price=data["price"],
            sale_price=data.get("sale_price"),
            image=data.get("image", ""),
            color=data.get("color", ""),
            sizes=tuple(data.get("sizes") or ()),
            quantity=int(data["quantity"]),
            selected_size=data.get("selected_size"),
            selected_color=data.get("selected_color"),
            added_at=data.get("added_at") or default_added_at,
        )

    @staticmethod
    def to_dict(line: CartLineDTO) -> Dict[str, Any]:
        return {
            "id": line.product_id,
            "title": line.title,
            "price": str(line.price),
            "salePrice": str(line.sale_price) if line.sale_price is not None else None,
            "image": line.image,
            "color": line.color,
            "size": list(line.sizes),
            "quantity": line.quantity,
            "selectedSize": line.selected_size,
            "selectedColor": line.selected_color,
            "addedAt": line.added_at.isoformat(),
        }

    @staticmethod
    def many_to_dict(lines: Iterable[CartLineDTO]) -> List[Dict[str, Any]]:
        return [CartLineMapper.to_dict(line) for line in lines]
