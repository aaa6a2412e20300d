"""
Credential hashing via argon2-cffi.

The argon2 encoded hash is self-describing (algorithm, parameters and salt
are part of the string), so verify() needs nothing but the stored hash.
"""
from __future__ import annotations

import logging

from argon2 import PasswordHasher
from argon2.exceptions import HashingError, InvalidHashError, VerificationError

logger = logging.getLogger(__name__)


class HashingFailure(Exception):
    """The hashing primitive failed to produce a hash."""


class IncorrectPassword(ValueError):
    """Password does not match the stored hash."""


class CredentialHasher:
    def __init__(self, time_cost: int = 3, memory_cost: int = 65536, parallelism: int = 4):
        self._ph = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )

    def hash(self, password: str) -> str:
        """Hash a plaintext password using Argon2 with a fresh salt
        """
        try:
            return self._ph.hash(password)
        except HashingError as exc:
            raise HashingFailure("failed to hash password") from exc

    def verify(self, password_hash: str, password: str) -> bool:
        """Verify a plaintext password; raises IncorrectPassword on mismatch
        """
        try:
            return self._ph.verify(password_hash, password)
        except VerificationError as exc:
            raise IncorrectPassword("Incorrect Password") from exc
        except InvalidHashError as exc:
            logger.warning("stored password hash is not a valid argon2 hash")
            raise IncorrectPassword("Incorrect Password") from exc

