import json
import unittest
from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

from apps.carts.services import CartLedger
from apps.catalog.dtos import ProductDTO
from apps.common.exceptions import InvalidQuantityError, InvalidSelectionError, StorageError

START = datetime(2024, 5, 1, 9, 0, tzinfo=dt_timezone.utc)


def make_product(product_id, price="100", sale_price=None, sizes=("S", "M", "L")):
    return ProductDTO(
        id=product_id,
        title=f"Product {product_id}",
        description="",
        price=Decimal(price),
        sale_price=Decimal(sale_price) if sale_price is not None else None,
        main_category="tops",
        sub_category=None,
        image="img.jpg",
        color="Black",
        sizes=tuple(sizes),
        material="Cotton",
        tags=(),
        featured=False,
        in_stock=True,
        sku=f"404-{product_id:03d}",
        rating=4.0,
        review_count=10,
        created_at=START,
    )


class StubClock:
    def __init__(self, start=START):
        self.now = start

    def __call__(self):
        self.now = self.now + timedelta(seconds=1)
        return self.now


class MemoryStorage:
    def __init__(self, initial=None):
        self.value = initial
        self.saves = 0

    def load(self):
        return self.value

    def save(self, serialized):
        self.value = serialized
        self.saves += 1
        return True


class BrokenStorage:
    def __init__(self, readable=True):
        self.readable = readable
        self.attempts = 0

    def load(self):
        if not self.readable:
            raise StorageError("unreadable")
        return None

    def save(self, serialized):
        self.attempts += 1
        raise StorageError("quota exceeded")


class RejectingStorage(MemoryStorage):
    def save(self, serialized):
        self.saves += 1
        return False


class CartLedgerMutationTests(unittest.TestCase):
    def setUp(self):
        self.storage = MemoryStorage()
        self.ledger = CartLedger(self.storage, clock=StubClock())
        self.shirt = make_product(1, price="250", sale_price="225")
        self.necklace = make_product(3, price="90", sizes=("One Size",))

    def test_adding_same_product_twice_merges_lines(self):
        self.ledger.add(self.shirt, 1)
        self.ledger.add(self.shirt, 2)
        lines = self.ledger.lines()
        self.assertEqual(len(lines), 1)
        self.assertEqual(lines[0].quantity, 3)
        self.assertEqual(self.ledger.total_item_count(), 3)

    def test_add_keeps_first_added_at(self):
        self.ledger.add(self.shirt)
        first = self.ledger.get_line(1).added_at
        self.ledger.add(self.shirt)
        self.assertEqual(self.ledger.get_line(1).added_at, first)

    def test_add_snapshots_product_fields(self):
        self.ledger.add(self.shirt, size="M")
        line = self.ledger.get_line(1)
        self.assertEqual(line.title, "Product 1")
        self.assertEqual(line.price, Decimal("250"))
        self.assertEqual(line.sale_price, Decimal("225"))
        self.assertEqual(line.selected_size, "M")
        self.assertEqual(line.selected_color, "Black")
        self.assertEqual(line.sizes, ("S", "M", "L"))

    def test_add_rejects_bad_quantities(self):
        for quantity in (0, -1, 1.5, "2", True, None):
            with self.subTest(quantity=quantity):
                with self.assertRaises(InvalidQuantityError):
                    self.ledger.add(self.shirt, quantity)
        self.assertTrue(self.ledger.is_empty())
        self.assertEqual(self.storage.saves, 0)

    def test_add_rejects_unknown_size(self):
        with self.assertRaises(InvalidSelectionError) as ctx:
            self.ledger.add(self.shirt, size="XXL")
        self.assertEqual(ctx.exception.code, "INVALID_SELECTION")
        self.assertTrue(self.ledger.is_empty())

    def test_lines_keep_insertion_order(self):
        self.ledger.add(self.necklace)
        self.ledger.add(self.shirt)
        self.ledger.add(self.necklace)
        self.assertEqual([line.product_id for line in self.ledger.lines()], [3, 1])

    def test_set_quantity(self):
        self.ledger.add(self.shirt)
        self.ledger.set_quantity(1, 5)
        self.assertEqual(self.ledger.get_line(1).quantity, 5)
        self.ledger.set_quantity(1, "2")
        self.assertEqual(self.ledger.get_line(1).quantity, 2)

    def test_set_quantity_zero_or_negative_removes(self):
        self.ledger.add(self.shirt)
        self.ledger.add(self.necklace)
        self.ledger.set_quantity(1, 0)
        self.assertIsNone(self.ledger.get_line(1))
        self.ledger.set_quantity(3, -4)
        self.assertTrue(self.ledger.is_empty())

    def test_set_quantity_for_missing_product_is_a_no_op(self):
        self.ledger.set_quantity(42, 3)
        self.assertTrue(self.ledger.is_empty())
        self.assertEqual(self.storage.saves, 0)

    def test_set_quantity_rejects_non_numbers(self):
        self.ledger.add(self.shirt)
        with self.assertRaises(InvalidQuantityError):
            self.ledger.set_quantity(1, "many")
        self.assertEqual(self.ledger.get_line(1).quantity, 1)

    def test_remove_and_clear(self):
        self.ledger.add(self.shirt)
        self.ledger.add(self.necklace)
        self.ledger.remove(1)
        self.ledger.remove(99)
        self.assertEqual([line.product_id for line in self.ledger.lines()], [3])
        self.ledger.clear()
        self.assertTrue(self.ledger.is_empty())
        self.assertEqual(self.ledger.subtotal(), Decimal("0"))

    def test_select_options(self):
        self.ledger.add(self.shirt)
        self.ledger.select_options(1, size="L", color="Navy")
        line = self.ledger.get_line(1)
        self.assertEqual((line.selected_size, line.selected_color), ("L", "Navy"))
        with self.assertRaises(InvalidSelectionError):
            self.ledger.select_options(1, size="XS")
        self.ledger.select_options(99, size="S")
        self.assertEqual(len(self.ledger.lines()), 1)

    def test_totals_use_sale_price(self):
        self.ledger.add(self.shirt, 2)
        self.ledger.add(self.necklace, 1)
        self.assertEqual(self.ledger.total_item_count(), 3)
        self.assertEqual(self.ledger.subtotal(), Decimal("540"))
        self.assertEqual(
            self.ledger.subtotal(),
            sum((line.line_total for line in self.ledger.lines()), Decimal("0")),
        )

    def test_every_mutation_is_persisted(self):
        self.ledger.add(self.shirt)
        self.ledger.set_quantity(1, 4)
        self.ledger.remove(1)
        self.assertEqual(self.storage.saves, 3)
        self.assertEqual(json.loads(self.storage.value), [])


class CartLedgerPersistenceTests(unittest.TestCase):
    def setUp(self):
        self.clock = StubClock()
        self.shirt = make_product(1, price="250", sale_price="225")
        self.jeans = make_product(5, price="140", sizes=("28", "30"))

    def test_serialize_restore_round_trip(self):
        ledger = CartLedger(clock=self.clock)
        ledger.add(self.shirt, 2, size="M")
        ledger.add(self.jeans, 1)
        other = CartLedger(clock=self.clock)
        self.assertEqual(other.restore(ledger.serialize()), 2)
        self.assertEqual(other.lines(), ledger.lines())
        self.assertEqual(other.subtotal(), ledger.subtotal())

    def test_serialized_form_uses_camel_case_keys(self):
        ledger = CartLedger(clock=self.clock)
        ledger.add(self.shirt, size="S")
        [entry] = json.loads(ledger.serialize())
        self.assertEqual(entry["id"], 1)
        self.assertEqual(entry["salePrice"], "225")
        self.assertEqual(entry["selectedSize"], "S")
        self.assertEqual(entry["quantity"], 1)
        self.assertIn("addedAt", entry)

    def test_restore_garbage_yields_empty_cart(self):
        ledger = CartLedger(clock=self.clock)
        ledger.add(self.shirt)
        for payload in ("{not json", '{"id": 1}', b"\xff\xfe", "null", None):
            with self.subTest(payload=payload):
                self.assertEqual(ledger.restore(payload), 0)
                self.assertTrue(ledger.is_empty())

    def test_restore_skips_invalid_entries_and_merges_duplicates(self):
        payload = json.dumps(
            [
                {"id": 1, "title": "Shirt", "price": "10", "quantity": 2},
                {"id": 2, "title": "Bad", "price": "10", "quantity": 0},
                {"title": "No id", "price": "10", "quantity": 1},
                "junk",
                {"id": 1, "title": "Shirt", "price": "10", "quantity": 3},
                {
                    "id": 4,
                    "title": "Socks",
                    "price": "5",
                    "quantity": 1,
                    "size": ["S"],
                    "selectedSize": "XL",
                },
            ]
        )
        ledger = CartLedger(clock=self.clock)
        self.assertEqual(ledger.restore(payload), 1)
        self.assertEqual(ledger.get_line(1).quantity, 5)

    def test_restore_fills_missing_added_at(self):
        ledger = CartLedger(clock=self.clock)
        ledger.restore(json.dumps([{"id": 7, "price": "12.50", "quantity": 1}]))
        line = ledger.get_line(7)
        self.assertEqual(line.title, "Untitled Product")
        self.assertEqual(line.price, Decimal("12.50"))
        self.assertIsNotNone(line.added_at)

    def test_load_reads_from_storage(self):
        source = CartLedger(clock=self.clock)
        source.add(self.shirt, 2)
        storage = MemoryStorage(initial=source.serialize())
        ledger = CartLedger(storage, clock=self.clock)
        self.assertEqual(ledger.load(), 1)
        self.assertEqual(ledger.total_item_count(), 2)

    def test_load_without_storage_or_data(self):
        self.assertEqual(CartLedger().load(), 0)
        self.assertEqual(CartLedger(MemoryStorage()).load(), 0)

    def test_unreadable_storage_starts_empty(self):
        ledger = CartLedger(BrokenStorage(readable=False), clock=self.clock)
        self.assertEqual(ledger.load(), 0)
        self.assertTrue(ledger.is_empty())

    def test_failed_saves_keep_in_memory_state(self):
        storage = BrokenStorage()
        ledger = CartLedger(storage, clock=self.clock)
        ledger.add(self.shirt)
        ledger.add(self.shirt)
        ledger.set_quantity(1, 7)
        self.assertEqual(storage.attempts, 3)
        self.assertEqual(ledger.total_item_count(), 7)

    def test_rejected_saves_keep_in_memory_state(self):
        storage = RejectingStorage()
        ledger = CartLedger(storage, clock=self.clock)
        ledger.add(self.jeans, 2)
        self.assertEqual(storage.saves, 1)
        self.assertEqual(ledger.total_item_count(), 2)


class RaisingStorage:
    def __init__(self):
        self.attempts = 0

    def load(self):
        raise OSError("disk unavailable")

    def save(self, serialized):
        self.attempts += 1
        raise OSError("disk full")


class CartLedgerUnexpectedStorageErrorTests(unittest.TestCase):
    def setUp(self):
        self.storage = RaisingStorage()
        self.ledger = CartLedger(self.storage, clock=StubClock())

    def test_load_starts_empty(self):
        with self.assertLogs("apps.carts.services", level="ERROR"):
            self.assertEqual(self.ledger.load(), 0)
        self.assertTrue(self.ledger.is_empty())

    def test_mutations_keep_in_memory_state(self):
        shirt = make_product(1)
        with self.assertLogs("apps.carts.services", level="ERROR") as captured:
            self.ledger.add(shirt, 2)
            self.ledger.set_quantity(1, 4)
            self.ledger.clear()
        self.assertEqual(self.storage.attempts, 3)
        self.assertTrue(self.ledger.is_empty())
        self.assertIs(captured.records[0].exc_info[0], OSError)


class CartLedgerProductIdTests(unittest.TestCase):
    def setUp(self):
        self.ledger = CartLedger(clock=StubClock())
        self.ledger.add(make_product(1))

    def test_string_ids_address_the_same_line(self):
        self.ledger.set_quantity("1", 5)
        self.assertEqual(self.ledger.get_line("1").quantity, 5)
        self.ledger.select_options("1", size="L")
        self.assertEqual(self.ledger.get_line(1).selected_size, "L")
        self.ledger.remove("1")
        self.assertTrue(self.ledger.is_empty())

    def test_unparseable_ids_are_ignored(self):
        self.ledger.set_quantity("abc", 3)
        self.ledger.remove(None)
        self.assertIsNone(self.ledger.get_line("abc"))
        self.assertEqual(self.ledger.get_line(1).quantity, 1)
