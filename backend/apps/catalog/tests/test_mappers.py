import unittest
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

from apps.catalog.dtos import CategoryDTO, PriceRangeDTO, ProductDTO
from apps.catalog.mappers import CategoryMapper, PriceRangeMapper, ProductMapper


class ProductMapperTests(unittest.TestCase):
    def test_to_dict_uses_catalog_keys(self):
        product = ProductDTO(
            id=3,
            title="Midnight Necklace",
            description="Sterling silver",
            price=Decimal("90.00"),
            sale_price=None,
            main_category="accessories",
            sub_category="necklace",
            image="img",
            color="Silver",
            sizes=("One Size",),
            material="Sterling Silver",
            tags=("jewelry",),
            featured=True,
            in_stock=True,
            sku="404-ACC-001",
            rating=4.8,
            review_count=56,
            created_at=datetime(2024, 1, 2, tzinfo=dt_timezone.utc),
        )
        data = ProductMapper.to_dict(product)
        self.assertEqual(data["price"], "90.00")
        self.assertIsNone(data["salePrice"])
        self.assertEqual(data["mainCategory"], "accessories")
        self.assertEqual(data["size"], ["One Size"])
        self.assertEqual(data["reviewCount"], 56)
        self.assertEqual(data["createdAt"], "2024-01-02T00:00:00+00:00")
        self.assertEqual(ProductMapper.many_to_dict([product]), [data])


class CategoryMapperTests(unittest.TestCase):
    def test_round_trip(self):
        category = CategoryMapper.to_dto(
            "bags", {"name": "Bags", "sub_categories": {"totes": "Totes"}}
        )
        self.assertEqual(
            category, CategoryDTO(key="bags", name="Bags", sub_categories={"totes": "Totes"})
        )
        self.assertEqual(
            CategoryMapper.to_dict(category),
            {"name": "Bags", "icon": "", "description": "", "subCategories": {"totes": "Totes"}},
        )


class PriceRangeMapperTests(unittest.TestCase):
    def test_to_dict(self):
        price_range = PriceRangeMapper.to_dto({"min": Decimal("0"), "max": Decimal("250")})
        self.assertEqual(PriceRangeMapper.to_dict(price_range), {"min": "0", "max": "250"})

    def test_ordered_swaps_and_clamps(self):
        self.assertEqual(
            PriceRangeDTO.ordered(300, -4), PriceRangeDTO(Decimal("0"), Decimal("300"))
        )
        self.assertTrue(PriceRangeDTO.ordered(0, 10).contains(Decimal("10")))
        self.assertFalse(PriceRangeDTO.ordered(0, 10).contains(Decimal("10.01")))
