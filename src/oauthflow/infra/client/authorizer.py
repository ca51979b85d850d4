import httpx
import json
import logging
import urllib.parse

from pydantic import ValidationError
from typing import (
    Any,
    Callable
)

from oauthflow.domain.errors import (
    ClientSecretRequiredError,
    InvalidResponseError,
    RefreshTokenMissingError,
    TokenEndpointError
)
from oauthflow.domain.models.authorizer_config import AuthorizerConfig
from oauthflow.domain.models.refresh_result import (
    RefreshResult,
    RefreshStatus
)
from oauthflow.domain.models.token import (
    NEVER_EXPIRES,
    Token,
    now_millis
)
from oauthflow.domain.models.token_response import TokenResponse
from oauthflow.infra.client.code_receiver import (
    CodeReceiver,
    ConsoleCodeReceiver
)

logger = logging.getLogger(__name__)

# Authorization URL in, parsed grant out.
TokenExchange = Callable[[str], TokenResponse]


class Authorizer:
    """Obtains and refreshes OAuth 2.0 access tokens with the authorization code grant.

    Call :meth:`authorize` once to initialize a token, then :meth:`refresh`
    just before each use of the access token.

    The default exchange pastes the authorization code at the console and
    posts it together with the client secret. Distributing a client secret
    inside an application lets anyone extract it and impersonate the app, so
    only set one where the secret belongs to the user running the program.
    Otherwise pass a ``token_exchange`` that has a web service redeem the code
    and hand back the grant.

    The client secret must be set before the first authorize/refresh call and
    must not change while calls are in flight.
    """

    def __init__(
        self,
        config        : AuthorizerConfig,
        client_secret : str | None = None,
        http          : httpx.Client | None = None,
        code_receiver : CodeReceiver | None = None,
        token_exchange: TokenExchange | None = None
    ):
        self.__config        = config
        self.__client_secret = client_secret
        self.__owns_http     = http is None
        self.__http          = http or httpx.Client(
            limits=httpx.Limits(
                max_connections=config.pool_size,
                max_keepalive_connections=config.pool_size
            ),
            timeout=config.timeout
        )
        self.__code_receiver  = code_receiver or ConsoleCodeReceiver(config.category)
        self.__token_exchange = token_exchange or self.obtain_access_token

    @property
    def config(self) -> AuthorizerConfig:
        return self.__config

    @property
    def client_secret(self) -> str | None:
        return self.__client_secret

    def set_client_secret(self, client_secret: str) -> None:
        self.__client_secret = client_secret

    def build_authorize_url(self) -> str:
        params = {
            "client_id": self.__config.client_id,
            "response_type": "code",
            "redirect_uri": self.__config.redirect_uri,
            "scope": self.__config.scopes,
        }

        separator = "&" if "?" in self.__config.authorize_url else "?"

        return f"{self.__config.authorize_url}{separator}{urllib.parse.urlencode(params)}"

    def authorize(self, token: Token) -> bool:
        """Initializes the token, if necessary.

        Returns True when a new access token was obtained. Raises on any
        failure, in which case the token is left untouched.
        """
        if token.authorized:
            return False

        grant = self.__token_exchange(self.build_authorize_url())

        if not isinstance(grant, TokenResponse):
            grant = self.__parse_grant(grant)

        token.refresh_token     = grant.refresh_token
        token.access_token      = grant.access_token
        token.expiration_millis = self.__expiration(grant.expires_in)

        logger.info("[%s] Access token stored.", self.__config.category)

        return True

    def obtain_access_token(self, url: str) -> TokenResponse:
        if self.__client_secret is None:
            raise ClientSecretRequiredError()

        code = self.__code_receiver(url)

        logger.debug("[%s] Requesting access token.", self.__config.category)

        payload = self.__post({
            "code": code,
            "redirect_uri": self.__config.redirect_uri,
            "client_id": self.__config.client_id,
            "client_secret": self.__client_secret,
            "grant_type": "authorization_code",
        })

        return self.__parse_grant(payload)

    def refresh(self, token: Token) -> RefreshResult:
        """Refreshes the access token, if necessary. Never raises."""
        if not token.is_expired:
            return RefreshResult(RefreshStatus.VALID)

        category = self.__config.category

        logger.debug("[%s] Refreshing access token.", category)

        if not token.refresh_token:
            error = RefreshTokenMissingError()

            logger.error("[%s] %s", category, error)

            return RefreshResult(RefreshStatus.FAILED, error)

        data = {
            "refresh_token": token.refresh_token,
            "client_id": self.__config.client_id,
        }

        # Public clients refresh without a secret.
        if self.__client_secret is not None:
            data["client_secret"] = self.__client_secret

        data["grant_type"] = "refresh_token"

        try:
            grant = self.__parse_grant(self.__post(data), require_expiry=True)
        except TokenEndpointError as e:
            if e.is_revocation:
                token.reset()

                logger.warning("[%s] Refresh token revoked (%s), authorization required.", category, e.error_code)

                return RefreshResult(RefreshStatus.REVOKED, e)

            logger.error("[%s] Error refreshing access token: %s", category, e)

            return RefreshResult(RefreshStatus.FAILED, e)
        except Exception as e:
            logger.error("[%s] Error refreshing access token: %s", category, e)

            return RefreshResult(RefreshStatus.FAILED, e)

        token.access_token      = grant.access_token
        token.expiration_millis = self.__expiration(grant.expires_in)

        if grant.refresh_token:
            token.refresh_token = grant.refresh_token

        logger.info("[%s] Access token refreshed.", category)

        return RefreshResult(RefreshStatus.REFRESHED)

    def close(self) -> None:
        if self.__owns_http:
            self.__http.close()

    def __enter__(self) -> "Authorizer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __post(self, data: dict[str, str]) -> Any:
        r = self.__http.post(
            self.__config.token_url,
            data=data,
            headers={"Content-Type": "application/x-www-form-urlencoded"}
        )

        body = (r.text or "").strip()

        if not r.is_success:
            raise TokenEndpointError(r.status_code, r.reason_phrase, body, r.http_version)

        try:
            return json.loads(body)
        except ValueError as e:
            raise InvalidResponseError("Invalid JSON in token endpoint response", body) from e

    @staticmethod
    def __parse_grant(payload: Any, require_expiry: bool = False) -> TokenResponse:
        try:
            grant = TokenResponse.model_validate(payload)
        except ValidationError as e:
            raise InvalidResponseError("Invalid access token response", payload) from e

        if require_expiry and grant.expires_in is None:
            raise InvalidResponseError("Access token response has no expires_in", payload)

        return grant

    @staticmethod
    def __expiration(expires_in: int | None) -> int:
        if expires_in is None:
            return NEVER_EXPIRES

        return min(now_millis() + expires_in * 1000, NEVER_EXPIRES)
