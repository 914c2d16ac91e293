from typing import Any, Dict, Iterable, List, Mapping

from .dtos import CategoryDTO, PriceRangeDTO, ProductDTO


class CategoryMapper:
    @staticmethod
    def to_dto(key: str, data: Mapping[str, Any]) -> CategoryDTO:
        return CategoryDTO(
            key=key,
            name=data["name"],
            icon=data.get("icon", ""),
            description=data.get("description", ""),
            sub_categories=dict(data.get("sub_categories") or {}),
        )

    @staticmethod
    def to_dict(category: CategoryDTO) -> Dict[str, Any]:
        return {
            "name": category.name,
            "icon": category.icon,
            "description": category.description,
            "subCategories": dict(category.sub_categories),
        }


class ProductMapper:
    @staticmethod
    def to_dto(data: Mapping[str, Any]) -> ProductDTO:
        """Build a product from normalized ``validated_data`` (snake_case keys)."""
        return ProductDTO(
            id=int(data["id"]),
            title=data["title"],
            description=data["description"],
            price=data["price"],
            sale_price=data.get("sale_price"),
            main_category=data["main_category"],
            sub_category=data.get("sub_category"),
            image=data["image"],
            color=data["color"],
            sizes=tuple(data["sizes"]),
            material=data["material"],
            tags=tuple(data["tags"]),
            featured=bool(data["featured"]),
            in_stock=bool(data["in_stock"]),
            sku=data["sku"],
            rating=float(data["rating"]),
            review_count=int(data["review_count"]),
            created_at=data["created_at"],
        )

    @staticmethod
    def to_dict(product: ProductDTO) -> Dict[str, Any]:
        return {
            "id": product.id,
            "title": product.title,
            "description": product.description,
            "price": str(product.price),
            "salePrice": str(product.sale_price) if product.sale_price is not None else None,
            "mainCategory": product.main_category,
            "subCategory": product.sub_category,
            "image": product.image,
            "color": product.color,
            "size": list(product.sizes),
            "material": product.material,
            "tags": list(product.tags),
            "featured": product.featured,
            "inStock": product.in_stock,
            "sku": product.sku,
            "rating": product.rating,
            "reviewCount": product.review_count,
            "createdAt": product.created_at.isoformat(),
        }

    @staticmethod
    def many_to_dict(products: Iterable[ProductDTO]) -> List[Dict[str, Any]]:
        return [ProductMapper.to_dict(p) for p in products]


class PriceRangeMapper:
    @staticmethod
    def to_dto(data: Mapping[str, Any]) -> PriceRangeDTO:
        return PriceRangeDTO(min=data["min"], max=data["max"])

    @staticmethod
    def to_dict(price_range: PriceRangeDTO) -> Dict[str, str]:
        return {"min": str(price_range.min), "max": str(price_range.max)}
