# auth endpoints
from typing import Any, Dict

from api.errors import ApiError, AuthorizationError
from api.models import LoginResult
from api.transport import ApiClient
from utils.constants import MESSAGES, ROLE_USER

LOGIN_PATH = "/api/auth/login"
REGISTER_PATH = "/api/auth/register"


async def login(
    client: ApiClient, username_or_email: str, password: str
) -> LoginResult:
    """
    Exchange credentials for a bearer token.

    A 401 here means bad credentials rather than an expired session, so it is
    reported with the login message.
    """
    try:
        body = await client.post(
            LOGIN_PATH,
            {"usernameOrEmail": username_or_email, "password": password},
            failure=MESSAGES["LOGIN_ERROR"],
        )
    except AuthorizationError as e:
        raise AuthorizationError(MESSAGES["LOGIN_ERROR"], e.status) from e

    if not isinstance(body, dict) or not body.get("token"):
        raise ApiError(MESSAGES["LOGIN_ERROR"])
    return LoginResult(
        token=body["token"],
        username=body.get("username") or username_or_email,
        email=body.get("email") or "",
    )


async def register(
    client: ApiClient,
    username: str,
    email: str,
    password: str,
    role: str = ROLE_USER,
) -> Dict[str, Any]:
    """Create an account. Returns whatever confirmation the backend sends."""
    body = await client.post(
        REGISTER_PATH,
        {
            "username": username,
            "email": email,
            "password": password,
            "role": (role or ROLE_USER).upper(),
        },
        failure=MESSAGES["REGISTER_ERROR"],
    )
    return body if isinstance(body, dict) else {"message": body}
