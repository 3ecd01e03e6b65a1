"""Security related functions.

Passwords are stored as bcrypt hashes. ``verify_password`` is the check
against a stored hash; this service issues no tokens and has no login
route, so it is used wherever a stored hash needs confirming, such as
after a seed or a password change.
"""

import jwt
from jwt import InvalidTokenError
from passlib.context import CryptContext

from app.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


class TokenAuthenticator:
    """
    Verifies bearer tokens minted by the upstream identity provider.

    Tokens are HS256 JWTs signed with the shared ``secret_key``; the ``sub``
    claim carries the user id. This class only verifies tokens, it never
    issues them.

    :ivar secret_key: The secret key used to verify JWT tokens.
    :type secret_key: str
    :ivar algorithm: Signing algorithm expected on incoming tokens.
    :type algorithm: str
    """

    def __init__(self, secret_key: str | None = None, algorithm: str | None = None):
        self.secret_key = secret_key or settings.secret_key
        self.algorithm = algorithm or settings.algorithm

    def verify_token(self, token: str) -> dict | None:
        """
        Decode and verify a JWT. Returns the payload, or None when the token
        is malformed, has a bad signature, or is expired.

        :param token: The JWT token to be verified.
        :return: The decoded payload, or None.
        """
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except InvalidTokenError:
            return None

    @staticmethod
    def subject_user_id(payload: dict) -> int | None:
        """Extract the integer user id from the ``sub`` claim."""
        sub = payload.get("sub")
        if sub is None:
            return None
        try:
            return int(sub)
        except (TypeError, ValueError):
            return None
