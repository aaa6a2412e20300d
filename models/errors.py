"""
Storage errors raised by DBStorage / SessionStorage.
Callers check the class, never the message.
"""


class StorageError(Exception):
    """Base error for the user record store."""


class NotFoundError(StorageError):
    """Requested row does not exist (or a delete affected no rows)."""


class EmailTakenError(StorageError):
    """Email unique constraint violated on user creation."""
