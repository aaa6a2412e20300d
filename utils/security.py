"""
Token helpers:
- JWT creation/verification via PyJWT (HS256 only)
- JTI generation for token identifiers
- Claim dataclasses for access and refresh tokens

The signing key is handed to TokenCodec at construction; the codec keeps no
other state, so one instance can be shared by every request thread.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Tuple

import jwt

ALGORITHM = "HS256"

TYPE_ACCESS = "access"
TYPE_REFRESH = "refresh"

DEFAULT_ISSUER = "catalog-api.auth"
DEFAULT_ACCESS_TTL = timedelta(minutes=10)
DEFAULT_REFRESH_TTL = timedelta(days=30)

_REQUIRED_CLAIMS = ["exp", "iat", "jti", "iss"]


class InvalidTokenError(Exception):
    """Token is malformed, expired, forged, of the wrong type or wrong alg."""


@dataclass(frozen=True)
class AccessClaims:
    user_id: int
    is_admin: bool
    token_id: str
    issuer: str
    issued_at: datetime
    expires_at: datetime
    token_type: str = TYPE_ACCESS


@dataclass(frozen=True)
class RefreshClaims:
    user_id: int
    token_id: str
    issuer: str
    issued_at: datetime
    expires_at: datetime
    token_type: str = TYPE_REFRESH


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def _now() -> datetime:
    # JWT timestamps have one-second resolution
    return datetime.now(timezone.utc).replace(microsecond=0)


def _from_ts(value: int) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


class TokenCodec:
    def __init__(
        self,
        secret: str,
        *,
        issuer: str = DEFAULT_ISSUER,
        access_ttl: timedelta = DEFAULT_ACCESS_TTL,
        refresh_ttl: timedelta = DEFAULT_REFRESH_TTL,
    ):
        if not secret:
            raise ValueError("TokenCodec requires a non-empty secret")
        self._secret = secret
        self.issuer = issuer
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    def sign_access(self, user_id: int, is_admin: bool) -> str:
        now = _now()
        payload = {
            "type": TYPE_ACCESS,
            "userId": user_id,
            "admin": bool(is_admin),
            "jti": generate_jti(),
            "iss": self.issuer,
            "iat": int(now.timestamp()),
            "exp": int((now + self.access_ttl).timestamp()),
        }
        return self._encode(payload)

    def sign_refresh(self, user_id: int) -> Tuple[str, RefreshClaims]:
        """
        Returns the token together with its claims: the caller persists
        claims.token_id / claims.expires_at before handing the token out.
        """
        now = _now()
        claims = RefreshClaims(
            user_id=user_id,
            token_id=generate_jti(),
            issuer=self.issuer,
            issued_at=now,
            expires_at=now + self.refresh_ttl,
        )
        payload = {
            "type": TYPE_REFRESH,
            "userId": claims.user_id,
            "jti": claims.token_id,
            "iss": claims.issuer,
            "iat": int(claims.issued_at.timestamp()),
            "exp": int(claims.expires_at.timestamp()),
        }
        return self._encode(payload), claims

    def parse_access(self, token: str) -> AccessClaims:
        decoded = self._decode(token, TYPE_ACCESS)
        admin = decoded.get("admin", False)
        if not isinstance(admin, bool):
            raise InvalidTokenError("admin claim must be a boolean")
        return AccessClaims(
            user_id=decoded["userId"],
            is_admin=admin,
            token_id=decoded["jti"],
            issuer=decoded["iss"],
            issued_at=_from_ts(decoded["iat"]),
            expires_at=_from_ts(decoded["exp"]),
        )

    def parse_refresh(self, token: str) -> RefreshClaims:
        decoded = self._decode(token, TYPE_REFRESH)
        return RefreshClaims(
            user_id=decoded["userId"],
            token_id=decoded["jti"],
            issuer=decoded["iss"],
            issued_at=_from_ts(decoded["iat"]),
            expires_at=_from_ts(decoded["exp"]),
        )

    def _encode(self, payload: Dict[str, Any]) -> str:
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def _decode(self, token: str, expected_type: str) -> Dict[str, Any]:
        """
        Decode and validate a JWT. Every failure is reported as
        InvalidTokenError; the specific reason is only kept as __cause__.
        """
        try:
            decoded = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                issuer=self.issuer,
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError("invalid token") from exc

        if decoded.get("type") != expected_type:
            raise InvalidTokenError("invalid token")
        user_id = decoded.get("userId")
        # bool is an int subclass
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise InvalidTokenError("invalid token")
        return decoded
