import os
import sys
import unittest

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from api.decode import (  # noqa: E402
    BareList,
    Enveloped,
    Unrecognized,
    decode_listing,
    normalize_browse,
    normalize_search,
    unwrap_one,
)
from api.models import Pagination  # noqa: E402


def sweet(i):
    return {"id": i, "name": f"Sweet {i}", "category": "Other", "price": 1.5, "quantity": i}


class DecodeListingTestCase(unittest.TestCase):
    def test_shapes_are_tagged(self):
        self.assertIsInstance(decode_listing([sweet(1)]), BareList)
        self.assertIsInstance(decode_listing({"data": [sweet(1)]}), Enveloped)
        self.assertIsInstance(decode_listing({"data": {"id": 1}}), Unrecognized)
        self.assertIsInstance(decode_listing("oops"), Unrecognized)
        self.assertIsInstance(decode_listing(None), Unrecognized)

    def test_envelope_keeps_metadata_apart_from_items(self):
        decoded = decode_listing({"data": [sweet(1)], "total": 9, "success": True})
        self.assertEqual(decoded.meta, {"total": 9, "success": True})
        self.assertEqual(len(decoded.items), 1)

    def test_non_object_items_are_dropped(self):
        decoded = decode_listing([sweet(1), "junk", 3, None, sweet(2)])
        self.assertEqual([item["id"] for item in decoded.items], [1, 2])

    def test_unwrap_one(self):
        self.assertEqual(unwrap_one({"data": {"id": 3}}), {"id": 3})
        self.assertEqual(unwrap_one({"id": 3}), {"id": 3})
        self.assertEqual(unwrap_one("ok"), "ok")


class NormalizeBrowseTestCase(unittest.TestCase):
    def test_bare_array_is_one_page_sized_to_its_items(self):
        page = normalize_browse(decode_listing([sweet(1), sweet(2), sweet(3)]), 12)
        self.assertEqual(page.pagination, Pagination(1, 3, 3, 1))
        self.assertEqual([s.id for s in page.sweets], [1, 2, 3])

    def test_envelope_without_pagination_behaves_like_bare_array(self):
        page = normalize_browse(decode_listing({"data": [sweet(1)]}), 12)
        self.assertEqual(page.pagination, Pagination(1, 1, 1, 1))

    def test_pagination_object_is_taken_as_given(self):
        body = {
            "data": [sweet(13), sweet(14)],
            "pagination": {"page": 2, "limit": 12, "total": 14, "totalPages": 2},
        }
        page = normalize_browse(decode_listing(body), 12)
        self.assertEqual(page.pagination, Pagination(2, 12, 14, 2))

    def test_missing_page_count_is_computed(self):
        body = {"data": [], "pagination": {"page": "3", "limit": "24", "total": "50"}}
        page = normalize_browse(decode_listing(body), 12)
        self.assertEqual(page.pagination, Pagination(3, 24, 50, 3))

    def test_missing_limit_falls_back_to_default(self):
        body = {"data": [sweet(1)], "pagination": {"total": 30}}
        page = normalize_browse(decode_listing(body), 12)
        self.assertEqual(page.pagination, Pagination(1, 12, 30, 3))

    def test_malformed_items_are_skipped(self):
        body = {
            "data": [{"name": "no id"}, sweet(2), {"id": 3, "price": "abc"}],
            "pagination": {"page": 1, "limit": 12, "total": 3, "totalPages": 1},
        }
        page = normalize_browse(decode_listing(body), 12)
        self.assertEqual([s.id for s in page.sweets], [2])
        self.assertEqual(page.pagination, Pagination(1, 12, 3, 1))

    def test_unrecognized_body_is_an_empty_page(self):
        page = normalize_browse(decode_listing({"message": "??"}), 12)
        self.assertEqual(page.sweets, ())
        self.assertEqual(page.pagination, Pagination(1, 0, 0, 1))


class NormalizeSearchTestCase(unittest.TestCase):
    def test_single_match_envelope(self):
        body = {"data": [{"id": 1, "name": "Choco Bar", "quantity": 5}], "total": 1}
        page = normalize_search(decode_listing(body), 12)
        self.assertEqual(page.pagination, Pagination(1, 12, 1, 1))
        self.assertEqual(page.sweets[0].name, "Choco Bar")
        self.assertEqual(page.sweets[0].quantity, 5)

    def test_bare_array_total_is_the_item_count(self):
        page = normalize_search(decode_listing([sweet(i) for i in range(25)]), 12)
        self.assertEqual(page.pagination, Pagination(1, 12, 25, 3))

    def test_no_matches(self):
        page = normalize_search(decode_listing([]), 12)
        self.assertEqual(page.pagination, Pagination(1, 12, 0, 0))


if __name__ == "__main__":
    unittest.main()
