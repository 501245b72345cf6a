# manages the connection to the REST backend, used by the endpoint modules
from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Dict, Optional

import requests

from api.errors import (
    ApiError,
    AuthorizationError,
    NotFoundError,
    PermissionDeniedError,
    RequestRejectedError,
    ServiceUnavailableError,
    ValidationError,
)
from utils.constants import MESSAGES
from utils.logger import get_logger

if TYPE_CHECKING:
    from utils.state import Session

_logger = get_logger(__name__)


class ApiClient:
    """
    Thin wrapper over one requests.Session.

    Calls are async: the blocking request runs in a worker thread so the UI
    loop keeps going. Every failure comes out as an ApiError subclass.
    """

    def __init__(
        self,
        session: Session,
        base_url: str,
        timeout: float = 10.0,
        http: Optional[requests.Session] = None,
    ) -> None:
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = http or requests.Session()
        self._http.headers.update({"Content-Type": "application/json"})

    async def get(
        self, path: str, params: Optional[Dict[str, Any]] = None, failure: str = ""
    ) -> Any:
        return await self.request("GET", path, params=params, failure=failure)

    async def post(self, path: str, body: Any = None, failure: str = "") -> Any:
        return await self.request("POST", path, body=body, failure=failure)

    async def put(self, path: str, body: Any = None, failure: str = "") -> Any:
        return await self.request("PUT", path, body=body, failure=failure)

    async def delete(self, path: str, failure: str = "") -> Any:
        return await self.request("DELETE", path, failure=failure)

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Any = None,
        failure: str = "",
    ) -> Any:
        return await asyncio.to_thread(
            self._send,
            method,
            path,
            params,
            body,
            failure or MESSAGES["NETWORK_ERROR"],
        )

    def _headers(self) -> Dict[str, str]:
        token = self.session.bearer_token()
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _send(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]],
        body: Any,
        failure: str,
    ) -> Any:
        url = self.base_url + path
        _logger.debug(f"{method} {path} params={params}")
        try:
            response = self._http.request(
                method,
                url,
                params=params,
                json=body,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            _logger.warning(f"{method} {path} failed: {e!r}")
            raise ServiceUnavailableError(MESSAGES["NETWORK_ERROR"]) from e

        payload = _read_body(response)
        if response.status_code >= 400:
            error = _error_for(response.status_code, payload, failure)
            _logger.warning(
                f"{method} {path} -> {response.status_code}: {error.message}"
            )
            raise error
        return payload


def _read_body(response: requests.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _server_message(payload: Any) -> Optional[str]:
    if isinstance(payload, dict):
        msg = payload.get("message") or payload.get("error")
        return str(msg) if msg else None
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return None


def _error_for(status: int, payload: Any, failure: str) -> ApiError:
    message = _server_message(payload)
    if status == 401:
        return AuthorizationError(MESSAGES["UNAUTHORIZED"], status)
    if status == 403:
        return PermissionDeniedError(message or MESSAGES["UNAUTHORIZED"], status)
    if status >= 500:
        return ServiceUnavailableError(MESSAGES["NETWORK_ERROR"], status)
    if status == 404:
        return NotFoundError(message or failure, status)
    field_errors = payload.get("errors") if isinstance(payload, dict) else None
    if status == 400 and isinstance(field_errors, dict):
        return ValidationError(message or failure, field_errors, status)
    return RequestRejectedError(message or failure, status)
