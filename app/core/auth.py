"""Authorization guards supplying the current session to the chat repository."""

from abc import ABC, abstractmethod

from app.core.security import Session, SessionAuthenticator


class AuthGuard(ABC):
    """Source of the current caller's session."""

    @abstractmethod
    async def get_session(self) -> Session | None:
        pass


class StaticAuthGuard(AuthGuard):
    """Guard with a fixed session (``None`` for anonymous callers)."""

    def __init__(self, session: Session | None = None):
        self.session = session

    async def get_session(self) -> Session | None:
        return self.session


class BearerAuthGuard(AuthGuard):
    """Guard resolving a request's bearer token on first use."""

    def __init__(self, token: str | None, authenticator: SessionAuthenticator):
        self.token = token
        self.authenticator = authenticator
        self._session: Session | None = None
        self._resolved = False

    async def get_session(self) -> Session | None:
        if not self._resolved:
            self._session = self.authenticator.decode_session(self.token)
            self._resolved = True
        return self._session
