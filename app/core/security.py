"""
Session credentials.

After a wallet proves control of its key, it receives a signed JWT. The token
is self-contained: nothing is stored server-side, so it can't be revoked early
and simply stops validating at its exp claim.

Claims:
- address / sub: canonical checksummed wallet address
- iat: issued-at (unix seconds)
- exp: expiry (iat + ACCESS_TOKEN_EXPIRE_SECONDS)
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from app.core.config import Settings
from app.core.errors import CredentialExpired, InvalidCredential

REQUIRED_CLAIMS = ["exp", "iat", "address"]


@dataclass(frozen=True)
class SessionCredential:
    token: str
    subject: str
    issued_at: datetime
    expires_at: datetime


def create_access_token(
    subject: str,
    settings: Settings,
    now: Optional[datetime] = None,
) -> SessionCredential:
    if not subject:
        raise ValueError("subject is required")

    issued_at = (now or datetime.now(timezone.utc)).replace(microsecond=0)
    expires_at = issued_at + timedelta(seconds=settings.access_token_expire_seconds)
    payload: Dict[str, Any] = {
        "address": subject,
        "sub": subject,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    token = jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_alg)
    return SessionCredential(token=token, subject=subject, issued_at=issued_at, expires_at=expires_at)


def decode_access_token(token: str, settings: Settings) -> Dict[str, Any]:
    """
    Verify signature, algorithm and expiry of a session token.

    Raises:
        CredentialExpired: signature is valid but exp is in the past
        InvalidCredential: anything else (bad signature, wrong algorithm,
            malformed token, missing claims)
    """
    if not token:
        raise InvalidCredential()

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_alg],
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError:
        raise CredentialExpired()
    except jwt.InvalidTokenError:
        raise InvalidCredential()

    address = payload.get("address")
    if not isinstance(address, str) or not address:
        raise InvalidCredential()
    return payload


def parse_bearer(authorization: Optional[str]) -> str:
    """Extract the token from an `Authorization: Bearer <token>` header."""
    if not authorization:
        raise InvalidCredential("missing auth header")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise InvalidCredential("invalid auth header")
    return parts[1]
