from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Literal, Optional

import api.auth as auth
from api.errors import PermissionDeniedError
from api.models import Identity
from api.transport import ApiClient
from utils.config import Settings
from utils.constants import MESSAGES, ROLE_ADMIN, ROLE_USER
from utils.logger import get_logger
from utils.storage import CredentialStore
from utils.token import decode_claims, token_expired

_logger = get_logger(__name__)

EndReason = Literal["logout", "expired"]


class SessionStatus(Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED_USER = "authenticated-standard"
    AUTHENTICATED_ADMIN = "authenticated-admin"


class Session:
    """
    Who is logged in, and whether they may use admin operations.

    Holds the bearer token and its identity, mirrored into durable storage
    so a restart can pick the session up again. Teardown only happens
    through `end()`; listeners registered with `add_listener` hear about it.
    """

    def __init__(
        self,
        store: CredentialStore,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._clock = clock
        self._listeners: List[Callable[[EndReason], None]] = []

        self.status = SessionStatus.UNAUTHENTICATED
        self.token: Optional[str] = None
        self.identity: Optional[Identity] = None

    @property
    def is_authenticated(self) -> bool:
        return self.status in (
            SessionStatus.AUTHENTICATED_USER,
            SessionStatus.AUTHENTICATED_ADMIN,
        )

    @property
    def is_admin(self) -> bool:
        return self.status == SessionStatus.AUTHENTICATED_ADMIN

    def add_listener(self, callback: Callable[[EndReason], None]) -> None:
        self._listeners.append(callback)

    def restore(self) -> SessionStatus:
        """
        Run once at startup: validate whatever credential was stored by a
        previous run.
        """
        self.status = SessionStatus.AUTHENTICATING
        token = self._store.token()
        user = self._store.user() or {}

        claims = decode_claims(token)
        if token and not token_expired(claims, self._clock()):
            self._adopt(token, claims, user.get("username", ""), user.get("email", ""))
            _logger.info(f"Restored session for '{self.identity.username}'.")
        else:
            if token:
                _logger.info("Stored credential expired, discarding it.")
            self._store.clear()
            self._reset()
        return self.status

    def start(self, token: str, username: str, email: str) -> Identity:
        """Adopt a freshly issued token; the role comes from its claims."""
        claims = decode_claims(token) or {}
        identity = self._adopt(token, claims, username, email)
        user = {
            "username": identity.username,
            "email": identity.email,
            "role": identity.role,
        }
        self._store.save(token, user)
        _logger.info(f"Session started for '{username}' as {identity.role}.")
        return identity

    def end(self, reason: EndReason = "logout") -> None:
        was_authenticated = self.is_authenticated
        self._store.clear()
        self._reset()
        if not was_authenticated:
            return
        _logger.info(f"Session ended ({reason}).")
        for callback in list(self._listeners):
            callback(reason)

    def bearer_token(self) -> Optional[str]:
        """The token to send, or None when there is none or it has expired."""
        if not self.token:
            return None
        if token_expired(decode_claims(self.token), self._clock()):
            return None
        return self.token

    def require_admin(self) -> None:
        if not self.is_admin:
            raise PermissionDeniedError(MESSAGES["ADMIN_ONLY"])

    def _adopt(
        self, token: str, claims: Dict[str, Any], username: str, email: str
    ) -> Identity:
        role = str(claims.get("role") or ROLE_USER).upper()
        self.token = token
        self.identity = Identity(
            username=username or str(claims.get("sub") or ""), email=email, role=role
        )
        self.status = (
            SessionStatus.AUTHENTICATED_ADMIN
            if role == ROLE_ADMIN
            else SessionStatus.AUTHENTICATED_USER
        )
        return self.identity

    def _reset(self) -> None:
        self.token = None
        self.identity = None
        self.status = SessionStatus.UNAUTHENTICATED


@dataclass
class AppState:
    """
    Context shared by the screens: configuration, the session and the one
    API client bound to it.
    """

    settings: Settings
    session: Session = field(init=False)
    client: ApiClient = field(init=False)

    def __post_init__(self) -> None:
        self.session = Session(CredentialStore(self.settings.session_file))
        self.client = ApiClient(
            self.session, self.settings.api_url, self.settings.request_timeout
        )

    async def login(self, username_or_email: str, password: str) -> Identity:
        result = await auth.login(self.client, username_or_email, password)
        return self.session.start(result.token, result.username, result.email)

    async def register(
        self, username: str, email: str, password: str, role: str = ROLE_USER
    ) -> Dict[str, Any]:
        return await auth.register(self.client, username, email, password, role)

    def logout(self) -> None:
        self.session.end("logout")
