import httpx
import pytest
import urllib.parse

from oauthflow.domain.models.authorizer_config import AuthorizerConfig
from oauthflow.infra.client.authorizer import Authorizer


class TokenEndpoint:
    """Scripted token endpoint that records every form it receives."""

    def __init__(self, status_code: int = 200, body: str | bytes = b"{}"):
        self.status_code = status_code
        self.body        = body.encode() if isinstance(body, str) else body
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        return httpx.Response(self.status_code, content=self.body)

    @property
    def forms(self) -> list[dict[str, str]]:
        return [
            dict(urllib.parse.parse_qsl(request.content.decode()))
            for request in self.requests
        ]


@pytest.fixture
def config():
    return AuthorizerConfig(
        category="test",
        client_id="client id",
        redirect_uri="https://app.example.com/cb",
        authorize_url="https://auth.example.com/authorize",
        token_url="https://auth.example.com/token",
        scopes="read write",
    )


@pytest.fixture
def make_authorizer(config):
    created: list[Authorizer] = []

    def factory(endpoint: TokenEndpoint, **kwargs) -> Authorizer:
        kwargs.setdefault("client_secret", "s3cret")

        http = httpx.Client(transport=httpx.MockTransport(endpoint))
        authorizer = Authorizer(config, http=http, **kwargs)

        created.append(authorizer)

        return authorizer

    yield factory

    for authorizer in created:
        authorizer.close()
