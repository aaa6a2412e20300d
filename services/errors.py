from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    EMAIL_TAKEN = "EMAIL_TAKEN"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_TOKEN = "INVALID_TOKEN"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL"


class AuthError(Exception):
    """
    Failure of an AuthService operation.
    `kind` decides the HTTP status; the originating exception, if any, is
    chained as __cause__ for server-side logs and never sent to clients.
    """

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self):
        return f"AuthError({self.kind.value}, {self.message!r})"
