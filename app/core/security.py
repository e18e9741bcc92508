"""Security related functions."""

import logging

import jwt
from jwt import InvalidTokenError
from pydantic import BaseModel

from app.core.config import settings

logger = logging.getLogger(__name__)


class Session(BaseModel):
    """Identity of the caller behind the current request."""

    user_id: str
    email: str | None = None


class SessionAuthenticator:
    """
    Resolves bearer tokens into sessions.

    Tokens are HS256 JWTs signed with the application secret; the ``sub`` claim
    carries the user id. Issuing tokens is the login subsystem's job, this class
    only verifies them.

    :ivar secret_key: The secret key used to verify JWT tokens.
    :type secret_key: str
    :ivar algorithm: The signing algorithm accepted.
    :type algorithm: str
    """

    def __init__(self, secret_key: str | None = None, algorithm: str | None = None):
        self.secret_key = secret_key or settings.secret_key
        self.algorithm = algorithm or settings.algorithm

    def decode_session(self, token: str | None) -> Session | None:
        """
        Verifies a token and returns its session. Missing, invalid or expired
        tokens yield ``None`` so that callers treat the request as anonymous.

        :param token: The JWT token to be verified.
        :return: The session for the token, or None.
        """
        if not token:
            return None
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except InvalidTokenError as e:
            logger.info("Rejected session token: %s", str(e))
            return None

        user_id = payload.get("sub")
        if not user_id:
            logger.info("Session token has no subject")
            return None
        return Session(user_id=str(user_id), email=payload.get("email"))
