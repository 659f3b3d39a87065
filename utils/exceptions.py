"""
Internal auth failure kinds.

These never reach a client as-is: the session helpers in utils.sessions log
them and re-raise the matching api.errors category.
"""


class AuthError(Exception):
    """Base class for auth core failures."""


class HashingFailure(AuthError):
    """Password hashing failed or a stored hash record is unreadable."""


class SigningFailure(AuthError):
    """An access token could not be signed."""


class InvalidToken(AuthError):
    """Access token failed signature, algorithm or claim checks."""


class ExpiredToken(InvalidToken):
    """Access token is past its expiry."""


class MissingCredential(AuthError):
    """No credential header was supplied."""


class MalformedCredential(AuthError):
    """Credential header does not follow the expected '<Prefix> <value>' form."""


class RefreshTokenError(AuthError):
    pass


class TokenNotFound(RefreshTokenError):
    pass


class TokenExpired(RefreshTokenError):
    pass


class TokenRevoked(RefreshTokenError):
    pass


class PersistenceFailure(AuthError):
    """The backing store rejected a read or write."""
