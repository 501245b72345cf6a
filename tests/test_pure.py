import os
import sys
import unittest

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from api.models import Pagination, Sweet  # noqa: E402
from utils.pure import (  # noqa: E402
    format_price,
    inventory_stats,
    markdown_table,
    page_count,
    showing_range,
    stock_label,
    sweet_markdown,
)


class PureTestCase(unittest.TestCase):
    def test_markdown_table(self):
        md = markdown_table(["A", "B"], [[1, "x|y"]], ["l", "r"])
        self.assertEqual(md, "| A | B |\n| :--- | ---: |\n| 1 | x\\|y |")

    def test_markdown_table_rejects_mismatched_aligns(self):
        with self.assertRaises(ValueError):
            markdown_table(["A", "B"], [], ["c"])

    def test_page_count(self):
        self.assertEqual(page_count(0, 12), 0)
        self.assertEqual(page_count(12, 12), 1)
        self.assertEqual(page_count(13, 12), 2)
        self.assertEqual(page_count(5, 0), 0)

    def test_labels(self):
        self.assertEqual(format_price(1234.5), "$1,234.50")
        self.assertEqual(stock_label(0), "Out of stock")
        self.assertEqual(stock_label(5), "Low (5)")
        self.assertEqual(stock_label(6), "6")

    def test_showing_range(self):
        self.assertEqual(showing_range(Pagination(2, 12, 30, 3), 12), "Showing 13-24 of 30")
        self.assertEqual(showing_range(Pagination(1, 12, 0, 0), 0), "No sweets found")

    def test_sweet_markdown(self):
        md = sweet_markdown(Sweet(3, "Fudge", "Toffee", 2.0, 0, description="Rich."))
        self.assertTrue(md.startswith("### Fudge"))
        self.assertIn("| In Stock | Out of stock |", md)
        self.assertTrue(md.endswith("Rich."))

    def test_inventory_stats(self):
        stats = inventory_stats(
            [
                Sweet(1, "A", "Other", 2.0, 10),
                Sweet(2, "B", "Other", 1.5, 0),
                Sweet(3, "C", "Other", 0.25, 4),
            ]
        )
        self.assertEqual(
            stats,
            {"total_products": 3, "total_value": 21.0, "out_of_stock": 1, "low_stock": 1},
        )


if __name__ == "__main__":
    unittest.main()
