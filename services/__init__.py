from .auth import AuthService, TokenPair
from .errors import AuthError, ErrorKind

__all__ = ["AuthService", "TokenPair", "AuthError", "ErrorKind"]
