import logging

from datetime import (
    datetime,
    timezone
)

from oauthflow.domain.errors import OAuthError
from oauthflow.domain.models.refresh_result import (
    RefreshResult,
    RefreshStatus
)
from oauthflow.domain.models.token import (
    NEVER_EXPIRES,
    Token
)
from oauthflow.domain.repository.token_repository import TokenRepository
from oauthflow.infra.client.authorizer import Authorizer

logger = logging.getLogger(__name__)


class RefreshFailedError(OAuthError):
    def __init__(self, result: RefreshResult):
        self.result = result

        super().__init__(f"Access token could not be refreshed: {result.error}")


class AuthService:
    def __init__(self, authorizer: Authorizer, repository: TokenRepository):
        self.__authorizer = authorizer
        self.repository   = repository

    def login(self) -> bool:
        token = self.repository.get()

        if not self.__authorizer.authorize(token):
            return False

        self.repository.set(token)

        return True

    def access_token(self) -> str:
        token = self.repository.get()

        if self.__authorizer.authorize(token):
            self.repository.set(token)

        result = self.__authorizer.refresh(token)

        if result.status is RefreshStatus.REVOKED:
            # Persist the cleared token first so stale credentials are never reloaded.
            self.repository.set(token)

            self.__authorizer.authorize(token)
        elif not result.usable:
            raise RefreshFailedError(result)

        if result.status is not RefreshStatus.VALID:
            self.repository.set(token)

        return token.access_token

    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token()}"}

    def logout(self) -> None:
        token = self.repository.get()
        token.reset()

        self.repository.set(token)

        logger.info("[%s] Token cleared.", self.__authorizer.config.category)

    def close(self) -> None:
        self.__authorizer.close()

    def status(self) -> dict:
        token: Token = self.repository.get()

        return {
            "logged_in": token.authorized,
            "has_refresh": bool(token.refresh_token),
            "expired": token.is_expired if token.authorized else None,
            "expires_at": self.__format_expiration(token),
        }

    @staticmethod
    def __format_expiration(token: Token) -> str | None:
        if not token.authorized:
            return None

        if token.expiration_millis >= NEVER_EXPIRES:
            return "never"

        return datetime\
                .fromtimestamp(token.expiration_millis / 1000, tz=timezone.utc)\
                .isoformat(timespec="seconds")\
                .replace("+00:00", "Z")
