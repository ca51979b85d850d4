from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints
)
from typing import Annotated

NonEmpty = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class AuthorizerConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    category     : str = "oauth"
    client_id    : NonEmpty
    redirect_uri : str
    authorize_url: NonEmpty
    token_url    : NonEmpty
    scopes       : str = ""
    pool_size    : int   = Field(default=4, ge=1)
    timeout      : float = 20.0
