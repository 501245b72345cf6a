# bearer tokens are opaque JWTs; only the payload claims are read, never verified
import base64
import binascii
import json
import time
from typing import Any, Dict, Optional


def decode_claims(token: Optional[str]) -> Optional[Dict[str, Any]]:
    """Return the JWT payload as a dict, or None if the token is malformed."""
    if not token:
        return None
    parts = token.split(".")
    if len(parts) != 3:
        return None
    payload = parts[1]
    payload += "=" * (-len(payload) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(payload))
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None
    return claims if isinstance(claims, dict) else None


def token_expired(
    claims: Optional[Dict[str, Any]], now: Optional[float] = None
) -> bool:
    """Missing or unreadable `exp` counts as expired."""
    if not claims:
        return True
    try:
        exp = float(claims["exp"])
    except (KeyError, TypeError, ValueError):
        return True
    now = time.time() if now is None else now
    return exp <= now
