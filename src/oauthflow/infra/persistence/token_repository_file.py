import json
import logging
import os
import stat

from pathlib import Path
from pydantic import (
    BaseModel,
    ConfigDict,
    StrictInt,
    StrictStr
)

from oauthflow.domain.models.token import Token
from oauthflow.domain.repository.token_repository import TokenRepository

logger = logging.getLogger(__name__)


class StoredToken(BaseModel):
    model_config = ConfigDict(extra="forbid")

    access_token     : StrictStr | None = None
    refresh_token    : StrictStr | None = None
    expiration_millis: StrictInt        = 0


class FileTokenRepository(TokenRepository):
    def __init__(self, path: str):
        self.path = Path(path)

        super().__init__()

    def load(self) -> Token:
        if not self.path.exists():
            return Token()

        try:
            stored = StoredToken.model_validate_json(self.path.read_text(encoding="utf-8"))

            return Token(**stored.model_dump())
        except (OSError, ValueError) as e:
            logger.warning("Failed to load token from %s: %s", self.path, e)

            return Token()

    def save(self, token: Token) -> None:
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, stat.S_IRUSR | stat.S_IWUSR)

        with os.fdopen(fd, "w", encoding="utf-8") as f:
            # O_CREAT leaves the mode of an existing file alone.
            os.chmod(self.path, stat.S_IRUSR | stat.S_IWUSR)

            json.dump(token.__dict__, f, ensure_ascii=False, indent=2)

        logger.debug("Saved token to %s", self.path)
