import os
import sys
import tempfile
import unittest
from pathlib import Path

import requests

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from fake_backend import BASE_URL, FakeResponse, ScriptedHttp, make_token  # noqa: E402

from api import auth  # noqa: E402
from api import sweets as sweets_api  # noqa: E402
from api.errors import (  # noqa: E402
    ApiError,
    AuthorizationError,
    NotFoundError,
    PermissionDeniedError,
    RequestRejectedError,
    ServiceUnavailableError,
    ValidationError,
)
from api.models import FilterSet, Pagination  # noqa: E402
from api.transport import ApiClient  # noqa: E402
from utils.constants import MESSAGES  # noqa: E402
from utils.state import Session  # noqa: E402
from utils.storage import CredentialStore  # noqa: E402


class ClientTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        store = CredentialStore(Path(self.temp_dir.name) / "session.json")
        self.session = Session(store)

    def tearDown(self):
        self.temp_dir.cleanup()

    def client(self, *responses) -> ApiClient:
        self.http = ScriptedHttp(*responses)
        return ApiClient(self.session, BASE_URL + "/", http=self.http)


class TransportTestCase(ClientTestCase):
    # ---------- Headers ----------

    async def test_json_content_type_and_no_bearer_when_logged_out(self):
        client = self.client(FakeResponse(200, []))
        await client.get("/api/sweets")

        self.assertEqual(self.http.headers["Content-Type"], "application/json")
        self.assertNotIn("Authorization", self.http.calls[0].headers)

    async def test_bearer_header_attached_while_token_is_valid(self):
        token = make_token("USER")
        self.session.start(token, "jane", "jane@example.com")
        client = self.client(FakeResponse(200, []))
        await client.get("/api/sweets")

        self.assertEqual(
            self.http.calls[0].headers["Authorization"], f"Bearer {token}"
        )

    async def test_expired_token_is_not_sent(self):
        self.session.start(make_token("USER", expires_in=-60), "jane", "j@x.io")
        client = self.client(FakeResponse(200, []))
        await client.get("/api/sweets")
        self.assertNotIn("Authorization", self.http.calls[0].headers)

    async def test_base_url_trailing_slash_is_trimmed(self):
        client = self.client(FakeResponse(200, {}))
        await client.get("/api/sweets/3")
        self.assertEqual(self.http.calls[0].path, "/api/sweets/3")

    # ---------- Bodies ----------

    async def test_empty_body_reads_as_none(self):
        client = self.client(FakeResponse(204))
        self.assertIsNone(await client.delete("/api/sweets/1"))

    async def test_plain_text_body_is_returned_as_text(self):
        client = self.client(FakeResponse(200, "Sweet deleted successfully"))
        body = await sweets_api.delete_sweet(client, 1)
        self.assertEqual(body, "Sweet deleted successfully")

    # ---------- Status mapping ----------

    async def test_status_codes_map_to_error_kinds(self):
        cases = [
            (401, {"message": "jwt expired"}, AuthorizationError, MESSAGES["UNAUTHORIZED"]),
            (403, {"message": "Admins only"}, PermissionDeniedError, "Admins only"),
            (403, None, PermissionDeniedError, MESSAGES["UNAUTHORIZED"]),
            (404, {"error": "Sweet not found"}, NotFoundError, "Sweet not found"),
            (409, None, RequestRejectedError, "fallback"),
            (400, "Out of stock", RequestRejectedError, "Out of stock"),
            (500, {"message": "boom"}, ServiceUnavailableError, MESSAGES["NETWORK_ERROR"]),
            (502, None, ServiceUnavailableError, MESSAGES["NETWORK_ERROR"]),
        ]
        for status, body, kind, message in cases:
            client = self.client(FakeResponse(status, body))
            with self.assertRaises(kind) as ctx:
                await client.post("/api/sweets", {}, failure="fallback")
            self.assertEqual(ctx.exception.message, message, status)
            self.assertEqual(ctx.exception.status, status)

    async def test_server_field_errors_become_validation_error(self):
        body = {
            "message": "Validation failed",
            "status": 400,
            "errors": {"price": "Price must be positive"},
        }
        client = self.client(FakeResponse(400, body))
        with self.assertRaises(ValidationError) as ctx:
            await client.post("/api/sweets", {})
        self.assertEqual(ctx.exception.message, "Validation failed")
        self.assertEqual(ctx.exception.field_errors, {"price": "Price must be positive"})

    async def test_network_failure_is_service_unavailable(self):
        for failure in (requests.ConnectionError("refused"), requests.Timeout("slow")):
            client = self.client(failure)
            with self.assertRaises(ServiceUnavailableError) as ctx:
                await client.get("/api/sweets")
            self.assertEqual(ctx.exception.message, MESSAGES["NETWORK_ERROR"])
            self.assertIsNone(ctx.exception.status)

    async def test_missing_failure_message_defaults_to_network_error(self):
        client = self.client(FakeResponse(418))
        with self.assertRaises(RequestRejectedError) as ctx:
            await client.get("/teapot")
        self.assertEqual(ctx.exception.message, MESSAGES["NETWORK_ERROR"])


class EndpointTestCase(ClientTestCase):
    async def test_list_sweets_sends_only_set_filters(self):
        client = self.client(FakeResponse(200, []))
        await sweets_api.list_sweets(
            client, 2, 24, FilterSet(category="Mints", max_price=5.0)
        )
        self.assertEqual(
            self.http.calls[0].params,
            {"page": 2, "limit": 24, "category": "Mints", "maxPrice": 5.0},
        )

    async def test_search_page_comes_back_normalized(self):
        items = [{"id": i, "name": f"Mint {i}", "price": 1, "quantity": 1} for i in range(15)]
        client = self.client(FakeResponse(200, items))
        page = await sweets_api.search_sweets(client, FilterSet(query="mint"), 12)

        self.assertEqual(self.http.calls[0].params, {"name": "mint"})
        self.assertEqual(page.pagination, Pagination(1, 12, 15, 2))
        self.assertEqual(len(page.sweets), 15)

    async def test_get_sweet_unwraps_data_envelope(self):
        client = self.client(
            FakeResponse(200, {"data": {"id": 4, "name": "Fudge", "price": "2.10"}})
        )
        sweet = await sweets_api.get_sweet(client, 4)
        self.assertEqual((sweet.id, sweet.name, sweet.price), (4, "Fudge", 2.1))

    async def test_create_without_sweet_in_body_is_an_error(self):
        client = self.client(FakeResponse(201, {"message": "ok"}))
        with self.assertRaises(ApiError) as ctx:
            await sweets_api.create_sweet(client, {"name": "Fudge"})
        self.assertEqual(ctx.exception.message, MESSAGES["SWEET_ADD_ERROR"])

    async def test_purchase_confirmation_without_sweet_returns_none(self):
        client = self.client(FakeResponse(200, {"message": "Purchase successful"}))
        self.assertIsNone(await sweets_api.purchase_sweet(client, 1, 2))
        self.assertEqual(self.http.calls[0].path, "/api/sweets/1/purchase")
        self.assertEqual(self.http.calls[0].body, {"quantity": 2})

    async def test_login_bad_credentials_is_reported_as_login_error(self):
        client = self.client(FakeResponse(401, {"message": "Invalid credentials"}))
        with self.assertRaises(AuthorizationError) as ctx:
            await auth.login(client, "jane", "wrong")
        self.assertEqual(ctx.exception.message, MESSAGES["LOGIN_ERROR"])
        self.assertEqual(
            self.http.calls[0].body, {"usernameOrEmail": "jane", "password": "wrong"}
        )

    async def test_login_without_token_is_an_error(self):
        client = self.client(FakeResponse(200, {"username": "jane"}))
        with self.assertRaises(ApiError):
            await auth.login(client, "jane", "pw")

    async def test_register_upper_cases_role(self):
        client = self.client(FakeResponse(201, "created"))
        result = await auth.register(client, "bob", "bob@x.io", "secret", "admin")

        self.assertEqual(result, {"message": "created"})
        self.assertEqual(self.http.calls[0].body["role"], "ADMIN")


if __name__ == "__main__":
    unittest.main()
