from abc import (
    ABC,
    abstractmethod
)

from oauthflow.domain.models.token import Token


class TokenRepository(ABC):
    @abstractmethod
    def load(self) -> Token: ...

    @abstractmethod
    def save(self, token: Token) -> None: ...

    def get(self) -> Token:
        return self.load()

    def set(self, token: Token) -> None:
        self.save(token)
