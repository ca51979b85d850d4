from dataclasses import dataclass
from enum import Enum


class RefreshStatus(str, Enum):
    VALID     = "valid"
    REFRESHED = "refreshed"
    REVOKED   = "revoked"
    FAILED    = "failed"


@dataclass(frozen=True)
class RefreshResult:
    status: RefreshStatus
    error : Exception | None = None

    @property
    def usable(self) -> bool:
        """True when the token holds a current access token after the call."""
        return self.status in (RefreshStatus.VALID, RefreshStatus.REFRESHED)
