import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from utils.logger import get_logger

_logger = get_logger(__name__)

TOKEN_KEY = "sweet_shop_token"
USER_KEY = "sweet_shop_user"


class CredentialStore:
    """
    Durable storage for the bearer token and the user it belongs to,
    kept as a small JSON file readable only by the owner.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            _logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def token(self) -> Optional[str]:
        return self.load().get(TOKEN_KEY)

    def user(self) -> Optional[Dict[str, Any]]:
        return self.load().get(USER_KEY)

    def save(self, token: str, user: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump({TOKEN_KEY: token, USER_KEY: user}, f)
        os.chmod(self.path, 0o600)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
