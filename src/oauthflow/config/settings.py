from pathlib import Path
from pydantic import (
    Field,
    StringConstraints
)
from pydantic_settings import (
    BaseSettings,
    SettingsConfigDict
)
from typing import Annotated

ROOT = Path(__file__).resolve().parents[3]
ENV_PATH = ROOT / ".env"
TOKENS_PATH = ROOT / ".tokens.json"


class Settings(BaseSettings):
    OAUTH_CATEGORY     : str = "oauth"

    OAUTH_CLIENT_ID    : Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    OAUTH_CLIENT_SECRET: str | None = None

    OAUTH_REDIRECT_URI : str = "http://localhost:8000/auth/callback"
    OAUTH_SCOPES       : str = ""

    OAUTH_AUTH_URL : Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    OAUTH_TOKEN_URL: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

    OAUTH_POOL_SIZE: int   = Field(default=4, ge=1)
    HTTP_TIMEOUT   : float = 20.0

    OPEN_BROWSER: bool = True

    LOG_LEVEL: str = "INFO"

    TOKENS_PATH: str = str(TOKENS_PATH)

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )
