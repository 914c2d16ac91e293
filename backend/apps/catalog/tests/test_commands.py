import unittest
from decimal import Decimal

from apps.catalog.commands import FilterSpec, SortMode
from apps.catalog.dtos import PriceRangeDTO
from apps.catalog.registry import build_registry
from apps.common.exceptions import InvariantViolation


class SortModeTests(unittest.TestCase):
    def test_parse_known_modes(self):
        self.assertIs(SortMode.parse("price-low"), SortMode.PRICE_LOW)
        self.assertIs(SortMode.parse(" NEWEST "), SortMode.NEWEST)
        self.assertIs(SortMode.parse(SortMode.POPULAR), SortMode.POPULAR)

    def test_parse_unknown_falls_back_to_featured(self):
        for raw in (None, "", "cheapest", 3):
            with self.subTest(raw=raw):
                self.assertIs(SortMode.parse(raw), SortMode.FEATURED)


class FilterSpecTests(unittest.TestCase):
    def setUp(self):
        self.categories = build_registry()

    def test_defaults(self):
        spec = FilterSpec()
        self.assertEqual(spec.main_category, "all")
        self.assertIsNone(spec.sub_category)
        self.assertEqual(spec.search_term, "")
        self.assertIs(spec.sort_by, SortMode.FEATURED)
        self.assertEqual(spec.price_range, PriceRangeDTO(Decimal("0"), Decimal("250")))
        self.assertEqual(spec.page, 1)

    def test_changing_main_category_clears_sub_category(self):
        spec = FilterSpec()
        spec.select_main_category("tops")
        spec.select_sub_category("oversize")
        spec.select_main_category("shoes")
        self.assertEqual(spec.main_category, "shoes")
        self.assertIsNone(spec.sub_category)

    def test_all_sub_category_means_none(self):
        spec = FilterSpec(main_category="tops", sub_category="oversize")
        spec.select_sub_category("all")
        self.assertIsNone(spec.sub_category)

    def test_filter_changes_reset_page(self):
        spec = FilterSpec(page=4)
        spec.set_search_term("  denim ")
        self.assertEqual(spec.search_term, "denim")
        self.assertEqual(spec.page, 1)
        spec.go_to_page("3")
        spec.set_sort("price-high")
        self.assertEqual(spec.page, 1)
        self.assertIs(spec.sort_by, SortMode.PRICE_HIGH)

    def test_go_to_page_clamps_bad_input(self):
        spec = FilterSpec()
        spec.go_to_page("abc")
        self.assertEqual(spec.page, 1)
        spec.go_to_page(-2)
        self.assertEqual(spec.page, 1)
        spec.go_to_page(5)
        self.assertEqual(spec.page, 5)

    def test_price_range_is_ordered_and_clamped(self):
        spec = FilterSpec()
        spec.set_price_range(200, 50)
        self.assertEqual(spec.price_range, PriceRangeDTO(Decimal("50"), Decimal("200")))
        spec.set_price_range(-10, "80")
        self.assertEqual(spec.price_range, PriceRangeDTO(Decimal("0"), Decimal("80")))

    def test_check_raises_for_foreign_sub_category(self):
        spec = FilterSpec(main_category="tops", sub_category="necklace")
        with self.assertRaises(InvariantViolation):
            spec.check(self.categories)

    def test_check_raises_for_sub_category_without_main(self):
        spec = FilterSpec(sub_category="oversize")
        with self.assertRaises(InvariantViolation) as ctx:
            spec.check(self.categories)
        self.assertEqual(ctx.exception.code, "INVARIANT_VIOLATION")

    def test_sanitized_clears_offending_sub_category_on_a_copy(self):
        spec = FilterSpec(main_category="tops", sub_category="necklace", page=2)
        clean = spec.sanitized(self.categories)
        self.assertIsNone(clean.sub_category)
        self.assertEqual(clean.main_category, "tops")
        self.assertEqual(clean.page, 2)
        self.assertEqual(spec.sub_category, "necklace")

    def test_sanitized_keeps_valid_spec(self):
        spec = FilterSpec(main_category="tops", sub_category="oversize")
        clean = spec.sanitized(self.categories)
        self.assertEqual(clean, spec)
        self.assertIsNot(clean, spec)

    def test_round_trip_through_dict(self):
        spec = FilterSpec()
        spec.select_main_category("shoes")
        spec.select_sub_category("heels")
        spec.set_search_term("glass")
        spec.set_sort("newest")
        spec.set_price_range(20, 120)
        spec.set_in_stock_only(True)
        spec.go_to_page(2)
        restored = FilterSpec.from_raw(spec.to_dict())
        self.assertEqual(restored, spec)

    def test_from_raw_uses_defaults_for_missing_keys(self):
        default_range = PriceRangeDTO(Decimal("5"), Decimal("99"))
        spec = FilterSpec.from_raw(
            None, default_sort="popular", default_price_range=default_range
        )
        self.assertIs(spec.sort_by, SortMode.POPULAR)
        self.assertEqual(spec.price_range, default_range)
        self.assertEqual(spec.main_category, "all")

    def test_from_raw_ignores_unparseable_price_range(self):
        spec = FilterSpec.from_raw({"priceRange": {"min": "cheap", "max": 10}})
        self.assertEqual(spec.price_range, PriceRangeDTO(Decimal("0"), Decimal("250")))

    def test_unparseable_price_bounds_keep_previous_range(self):
        spec = FilterSpec()
        spec.set_price_range(20, 90)
        spec.go_to_page(3)
        for low, high in (("", 100), ("abc", 10), ("NaN", 50), (None, 5)):
            with self.subTest(low=low, high=high):
                self.assertFalse(spec.set_price_range(low, high))
                self.assertEqual(
                    spec.price_range, PriceRangeDTO(Decimal("20"), Decimal("90"))
                )
                self.assertEqual(spec.page, 3)
        self.assertTrue(spec.set_price_range("10", "15.5"))
