from pydantic import (
    BaseModel,
    ConfigDict,
    StrictInt,
    StrictStr
)


class TokenResponse(BaseModel):
    """Successful grant returned by the token endpoint.

    Providers add their own fields (token_type, scope, id_token, ...), which
    are kept as extras.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    access_token : StrictStr
    refresh_token: StrictStr | None = None
    expires_in   : StrictInt | None = None


class TokenErrorResponse(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    error            : StrictStr
    error_description: str | None = None
