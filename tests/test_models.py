import os
import sys
import unittest

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from api.errors import ValidationError  # noqa: E402
from api.models import (  # noqa: E402
    FilterSet,
    Sweet,
    validate_quantity,
    validate_sweet_fields,
)
from store.query import ListingMode, QueryState  # noqa: E402


class SweetTestCase(unittest.TestCase):
    def test_from_json_coerces_wire_types(self):
        sweet = Sweet.from_json(
            {"id": "5", "name": "Fudge", "category": "Toffee", "price": "2.50",
             "quantity": "7", "description": "", "image": None}
        )
        self.assertEqual(sweet, Sweet(5, "Fudge", "Toffee", 2.5, 7))
        self.assertTrue(sweet.in_stock)

    def test_from_json_rejects_unreadable_fields(self):
        for raw in ({"name": "no id"}, {"id": 1, "price": "abc"}, {"id": None}):
            with self.assertRaises((KeyError, TypeError, ValueError)):
                Sweet.from_json(raw)

    def test_zero_quantity_is_out_of_stock(self):
        self.assertFalse(Sweet(1, "Mint", "Mints", 0.5, 0).in_stock)


class FilterSetTestCase(unittest.TestCase):
    def test_default_filters_are_inactive(self):
        self.assertFalse(FilterSet().is_active())
        self.assertFalse(FilterSet(query="   ").is_active())
        self.assertFalse(FilterSet(min_price=0.0, max_price=100.0).is_active())

    def test_any_narrowing_filter_is_active(self):
        self.assertTrue(FilterSet(query="gum").is_active())
        self.assertTrue(FilterSet(category="Caramel").is_active())
        self.assertTrue(FilterSet(min_price=0.5).is_active())
        self.assertTrue(FilterSet(max_price=99.99).is_active())


class QueryStateTestCase(unittest.TestCase):
    def test_filters_switch_mode_and_reset_page(self):
        query = QueryState(12)
        query.set_page(4)
        query.set_filters({"category": "Gummy"})
        self.assertEqual((query.mode, query.page), (ListingMode.SEARCH, 1))

        query.set_filters({"category": ""})
        self.assertEqual(query.mode, ListingMode.BROWSE)

    def test_set_page_leaves_filters_alone(self):
        query = QueryState(12)
        query.set_filters({"query": "choc"})
        query.set_page(2)
        self.assertEqual(query.filters.query, "choc")
        self.assertEqual(query.mode, ListingMode.SEARCH)

    def test_clear_returns_to_first_browse_page(self):
        query = QueryState(24)
        query.set_filters({"min_price": 10.0})
        query.set_page(3)
        query.clear()
        self.assertEqual(query.filters, FilterSet())
        self.assertEqual((query.mode, query.page, query.page_size), (ListingMode.BROWSE, 1, 24))


class ValidationTestCase(unittest.TestCase):
    def test_quantity(self):
        self.assertEqual(validate_quantity(" 3 "), 3)
        self.assertEqual(validate_quantity(1), 1)
        for bad in (0, -2, "", "1.5", "two"):
            with self.assertRaises(ValidationError) as ctx:
                validate_quantity(bad)
            self.assertIn("quantity", ctx.exception.field_errors)

    def test_valid_form_is_cleaned(self):
        cleaned = validate_sweet_fields(
            {
                "name": "  Sea Salt Caramel ",
                "category": "Caramel",
                "price": "3.499",
                "quantity": "12",
                "description": "",
                "image": "https://cdn.example.com/caramel.png",
            }
        )
        self.assertEqual(
            cleaned,
            {
                "name": "Sea Salt Caramel",
                "category": "Caramel",
                "price": 3.5,
                "quantity": 12,
                "image": "https://cdn.example.com/caramel.png",
            },
        )

    def test_each_rule_reports_its_field(self):
        cases = [
            ({"name": ""}, "name"),
            ({"name": "X"}, "name"),
            ({"category": ""}, "category"),
            ({"price": ""}, "price"),
            ({"price": "free"}, "price"),
            ({"price": "0"}, "price"),
            ({"quantity": "-1"}, "quantity"),
            ({"quantity": "2.5"}, "quantity"),
            ({"quantity": "lots"}, "quantity"),
            ({"description": "x" * 501}, "description"),
            ({"image": "not a url"}, "image"),
        ]
        base = {"name": "Toffee", "category": "Toffee", "price": 1, "quantity": 0}
        for override, field in cases:
            with self.assertRaises(ValidationError) as ctx:
                validate_sweet_fields({**base, **override})
            self.assertEqual(list(ctx.exception.field_errors), [field], override)

    def test_zero_quantity_is_allowed_on_the_form(self):
        cleaned = validate_sweet_fields(
            {"name": "Toffee", "category": "Toffee", "price": 1, "quantity": 0}
        )
        self.assertEqual(cleaned["quantity"], 0)


if __name__ == "__main__":
    unittest.main()
