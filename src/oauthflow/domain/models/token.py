import time

# Largest signed 64-bit instant, used for grants that report no expires_in.
NEVER_EXPIRES = 2 ** 63 - 1


def now_millis() -> int:
    return int(time.time() * 1000)


class Token:
    def __init__(
        self,
        access_token     : str | None = None,
        refresh_token    : str | None = None,
        expiration_millis: int        = 0
    ):
        self.access_token      = access_token
        self.refresh_token     = refresh_token
        self.expiration_millis = expiration_millis

    @property
    def authorized(self) -> bool:
        return self.access_token is not None

    @property
    def is_expired(self) -> bool:
        return now_millis() >= self.expiration_millis

    def reset(self) -> None:
        self.access_token      = None
        self.refresh_token     = None
        self.expiration_millis = 0

    def __repr__(self) -> str:
        # Credentials stay out of logs and tracebacks.
        return (
            f"Token(authorized={self.authorized}, "
            f"has_refresh={self.refresh_token is not None}, "
            f"expiration_millis={self.expiration_millis})"
        )
