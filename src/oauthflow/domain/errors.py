import json

from pydantic import ValidationError
from typing import Any

from oauthflow.domain.models.token_response import TokenErrorResponse

REVOCATION_ERRORS = frozenset({"invalid_grant", "invalid_token"})


class OAuthError(Exception):
    pass


class ClientSecretRequiredError(OAuthError):
    def __init__(self):
        super().__init__(
            "A client secret is required to exchange an authorization code. "
            "Set one, or supply a token_exchange that obtains the grant elsewhere."
        )


class RefreshTokenMissingError(OAuthError):
    def __init__(self):
        super().__init__("Refresh token is missing.")


class InvalidRedirectError(OAuthError):
    def __init__(self, redirect: str):
        self.redirect = redirect

        super().__init__(f"Invalid redirect, no authorization code found: {redirect!r}")


class InvalidResponseError(OAuthError):
    def __init__(self, message: str, raw: Any):
        self.raw = raw

        super().__init__(f"{message}: {raw}" if raw not in (None, "") else f"{message}.")


class TokenEndpointError(OAuthError):
    def __init__(self, status_code: int, reason: str, body: str, http_version: str = "HTTP/1.1"):
        self.status_code  = status_code
        self.reason       = reason
        self.body         = body
        self.http_version = http_version

        super().__init__(self.status_line + (f"\n{body}" if body else ""))

    @property
    def status_line(self) -> str:
        return f"{self.http_version} {self.status_code} {self.reason}".rstrip()

    @property
    def error_response(self) -> TokenErrorResponse | None:
        try:
            return TokenErrorResponse.model_validate(json.loads(self.body))
        except (ValueError, ValidationError):
            return None

    @property
    def error_code(self) -> str | None:
        response = self.error_response

        return response.error if response else None

    @property
    def is_revocation(self) -> bool:
        return self.error_code in REVOCATION_ERRORS
