# core/security.py
"""
Security utilities for password hashing and JWT token management.

Tokens are HS256-signed and self-contained: subject (username), issued-at,
expiry and any extra claims such as ``role``. They carry no server-side
state; account status is re-checked on every request by the
authentication gate in ``core/deps.py``.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from config import settings

logger = logging.getLogger(__name__)

# JWT configuration
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES

_DEV_SECRET_KEY = "dev-secret-key-change-in-production-abc123xyz"


class TokenError(Exception):
    """Base class for tokens that cannot be trusted."""


class TokenMalformedError(TokenError):
    """Raised when a token cannot be parsed as a JWT."""


class TokenSignatureInvalidError(TokenError):
    """Raised when a token's signature does not verify against our key."""


def _load_secret_key() -> str:
    secret = getattr(settings, "SECRET_KEY", None)
    if secret:
        return secret
    # Development fallback - NOT for production!
    logger.warning("SECRET_KEY is not set; signing tokens with the development key")
    return _DEV_SECRET_KEY


# Read once at import so every token in this process uses the same key
SECRET_KEY = _load_secret_key()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(
        plain_password.encode('utf-8'),
        hashed_password.encode('utf-8')
    )


def get_password_hash(password: str) -> str:
    """Hash a password for storage."""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def create_access_token(
    subject: str,
    claims: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed access token.

    Args:
        subject: Username the token is issued to
        claims: Extra claims to embed (e.g. ``{"role": "ADMIN"}``)
        expires_delta: Optional custom lifetime, defaults to the configured TTL

    Returns:
        Encoded JWT token string
    """
    to_encode = dict(claims or {})

    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"sub": subject, "iat": now, "exp": now + expires_delta})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def _decode_claims(token: str) -> dict[str, Any]:
    """
    Verify the signature and return the payload. Expiry is not checked here.

    Raises:
        TokenMalformedError: token is not a parseable JWT
        TokenSignatureInvalidError: signature or header does not verify
    """
    try:
        jwt.get_unverified_claims(token)
    except JWTError as exc:
        raise TokenMalformedError("Token is malformed") from exc

    try:
        return jwt.decode(
            token,
            SECRET_KEY,
            algorithms=[ALGORITHM],
            options={"verify_exp": False},
        )
    except JWTError as exc:
        raise TokenSignatureInvalidError("Token signature is invalid") from exc


def extract_subject(token: str) -> str:
    """
    Return the subject (username) of a verified token.

    Raises:
        TokenMalformedError, TokenSignatureInvalidError
    """
    payload = _decode_claims(token)
    subject = payload.get("sub")
    if not subject:
        raise TokenMalformedError("Token has no subject")
    return subject


def is_token_valid(token: str, expected_subject: str) -> bool:
    """True iff the token verifies, belongs to ``expected_subject`` and has not expired."""
    try:
        payload = _decode_claims(token)
    except TokenError:
        return False

    if payload.get("sub") != expected_subject:
        return False

    exp = payload.get("exp")
    if exp is None:
        return False
    return datetime.now(timezone.utc).timestamp() < exp
