from functools import lru_cache

from oauthflow.application.services.auth_service import AuthService
from oauthflow.config.settings import Settings
from oauthflow.domain.models.authorizer_config import AuthorizerConfig
from oauthflow.domain.repository.token_repository import TokenRepository
from oauthflow.infra.client.authorizer import Authorizer
from oauthflow.infra.client.code_receiver import ConsoleCodeReceiver
from oauthflow.infra.persistence.token_repository_file import FileTokenRepository


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


@lru_cache(maxsize=1)
def get_repository() -> TokenRepository:
    settings = get_settings()

    return FileTokenRepository(settings.TOKENS_PATH)


def build_authorizer(settings: Settings) -> Authorizer:
    config = AuthorizerConfig(
        category=settings.OAUTH_CATEGORY,
        client_id=settings.OAUTH_CLIENT_ID,
        redirect_uri=settings.OAUTH_REDIRECT_URI,
        authorize_url=settings.OAUTH_AUTH_URL,
        token_url=settings.OAUTH_TOKEN_URL,
        scopes=settings.OAUTH_SCOPES,
        pool_size=settings.OAUTH_POOL_SIZE,
        timeout=settings.HTTP_TIMEOUT,
    )

    return Authorizer(
        config,
        client_secret=settings.OAUTH_CLIENT_SECRET,
        code_receiver=ConsoleCodeReceiver(settings.OAUTH_CATEGORY, open_browser=settings.OPEN_BROWSER),
    )


@lru_cache(maxsize=1)
def get_authorizer() -> Authorizer:
    return build_authorizer(get_settings())


def get_auth_service() -> AuthService:
    return AuthService(get_authorizer(), get_repository())
