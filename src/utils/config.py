from pathlib import Path
from typing import Optional, Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime configuration, read from SWEETSHOP_* env vars or a .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SWEETSHOP_", env_file=".env", extra="ignore"
    )

    api_url: str = Field("http://localhost:5000")
    request_timeout: float = Field(10.0, gt=0)

    page_size: int = Field(12, ge=1)
    page_size_options: Tuple[int, ...] = (12, 24, 48)

    session_file: Path = Field(Path.home() / ".sweetshop" / "session.json")

    debug: bool = False
    log_file: Optional[Path] = None


settings = Settings()
