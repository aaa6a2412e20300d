"""
Authentication service:
- register / login with argon2-hashed passwords
- short-lived access tokens, long-lived single-use refresh tokens
- refresh rotation: delete the presented token's record and insert the new
  one in one store transaction, so a refresh token works at most once
- revoke (idempotent) and stateless access token validation

Only this module decides which error kind a failure maps to.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Protocol, TypeVar

from models.errors import EmailTakenError, NotFoundError
from models.user import User
from utils.password_hasher import CredentialHasher, HashingFailure, IncorrectPassword
from utils.security import (
    AccessClaims,
    InvalidTokenError,
    RefreshClaims,
    TokenCodec,
    generate_jti,
)

from .errors import AuthError, ErrorKind

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UserStore(Protocol):
    """
    Contract for user and refresh token persistence.
    run_in_transaction() yields a store implementing the same methods.
    """
    def create_user(self, user: User) -> User: ...
    def get_user_by_email(self, email: str) -> User: ...
    def get_user_by_id(self, user_id: int) -> User: ...
    def update_user_permissions(self, user_id: int, is_admin: bool) -> None: ...
    def save_refresh_token(self, token_id: str, user_id: int, expires_at: datetime) -> None: ...
    def delete_refresh_token(self, token_id: str) -> None: ...
    def run_in_transaction(self, fn: Callable[["UserStore"], T]) -> T: ...


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class AuthService:
    def __init__(self, *, store: UserStore, codec: TokenCodec, hasher: CredentialHasher):
        self.store = store
        self.codec = codec
        self.hasher = hasher
        # verified against when the email is unknown, so both login failures cost one hash
        self._dummy_hash = hasher.hash(generate_jti())

    # --------- Core operations ----------
    def register(self, user: User, password: str) -> User:
        try:
            user.password_hash = self.hasher.hash(password)
        except HashingFailure as exc:
            raise AuthError(ErrorKind.INTERNAL, "failed to hash password") from exc

        try:
            created = self.store.create_user(user)
        except EmailTakenError as exc:
            raise AuthError(ErrorKind.EMAIL_TAKEN, "email is taken") from exc
        except Exception as exc:
            raise AuthError(ErrorKind.INTERNAL, "failed to register user") from exc

        logger.info("registered user %s", created.id)
        # the hash stays in the store
        created.password_hash = None
        return created

    def login(self, email: str, password: str) -> TokenPair:
        try:
            user = self.store.get_user_by_email(email)
        except NotFoundError as exc:
            self._burn_verification(password)
            raise AuthError(ErrorKind.INVALID_CREDENTIALS, "invalid credentials") from exc
        except Exception as exc:
            raise AuthError(ErrorKind.INTERNAL, "failed to get user") from exc

        try:
            self.hasher.verify(user.password_hash, password)
        except IncorrectPassword as exc:
            raise AuthError(ErrorKind.INVALID_CREDENTIALS, "invalid credentials") from exc

        access_token = self.codec.sign_access(user.id, user.is_admin)
        refresh_token, claims = self.codec.sign_refresh(user.id)

        try:
            self.store.save_refresh_token(claims.token_id, user.id, claims.expires_at)
        except Exception as exc:
            raise AuthError(ErrorKind.INTERNAL, "failed to save refresh token") from exc

        logger.info("user %s logged in (refresh %s)", user.id, claims.token_id)
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    def refresh(self, refresh_token: str) -> TokenPair:
        claims = self._parse_refresh(refresh_token)

        try:
            user = self.store.get_user_by_id(claims.user_id)
        except NotFoundError as exc:
            raise AuthError(ErrorKind.INVALID_TOKEN, "invalid token: missing user") from exc
        except Exception as exc:
            raise AuthError(ErrorKind.INTERNAL, "failed to get user") from exc

        new_refresh_token, new_claims = self.codec.sign_refresh(user.id)

        def rotate(tx: UserStore) -> None:
            try:
                tx.delete_refresh_token(claims.token_id)
            except NotFoundError as exc:
                raise AuthError(ErrorKind.INVALID_TOKEN, "invalid token: token has been used") from exc
            tx.save_refresh_token(new_claims.token_id, user.id, new_claims.expires_at)

        try:
            self.store.run_in_transaction(rotate)
        except AuthError:
            logger.warning("refresh token %s reused or revoked (user %s)", claims.token_id, user.id)
            raise
        except Exception as exc:
            raise AuthError(ErrorKind.INTERNAL, "failed to rotate refresh token") from exc

        access_token = self.codec.sign_access(user.id, user.is_admin)
        logger.info("user %s refreshed tokens (%s -> %s)", user.id, claims.token_id, new_claims.token_id)
        return TokenPair(access_token=access_token, refresh_token=new_refresh_token)

    def revoke(self, refresh_token: str) -> None:
        claims = self._parse_refresh(refresh_token)

        try:
            self.store.delete_refresh_token(claims.token_id)
        except NotFoundError:
            logger.debug("refresh token %s already gone", claims.token_id)
            return
        except Exception as exc:
            raise AuthError(ErrorKind.INTERNAL, "failed to delete refresh token") from exc

        logger.info("revoked refresh token %s (user %s)", claims.token_id, claims.user_id)

    def validate_access_token(self, token: str) -> AccessClaims:
        """Signature/expiry/type check only; never touches the store."""
        try:
            return self.codec.parse_access(token)
        except InvalidTokenError as exc:
            raise AuthError(ErrorKind.INVALID_TOKEN, "invalid token") from exc

    def update_user_permissions(self, user_id: int, is_admin: bool) -> None:
        # Access tokens already issued keep their admin snapshot until they expire.
        try:
            self.store.update_user_permissions(user_id, is_admin)
        except NotFoundError as exc:
            raise AuthError(ErrorKind.NOT_FOUND, "user not found") from exc
        except Exception as exc:
            raise AuthError(ErrorKind.INTERNAL, "failed to update user permissions") from exc

        logger.info("user %s admin flag set to %s", user_id, is_admin)

    # --------- Helpers ----------
    def _parse_refresh(self, token: str) -> RefreshClaims:
        try:
            return self.codec.parse_refresh(token)
        except InvalidTokenError as exc:
            raise AuthError(ErrorKind.INVALID_TOKEN, "invalid token") from exc

    def _burn_verification(self, password: str) -> None:
        try:
            self.hasher.verify(self._dummy_hash, password)
        except IncorrectPassword:
            pass
