"""
Security utilities: password hashing and session tokens.

Passwords are hashed with bcrypt through passlib. Session tokens are HS256
JWTs signed with `settings.jwt_secret`, carrying only `sub` (user id),
`email`, `iat` and `exp`.
"""

import logging
from datetime import timedelta
from functools import lru_cache
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from notes_backend import utils
from notes_backend.config import settings

logger = logging.getLogger(__name__)

# Used when JWT_SECRET is unset. Public knowledge: development only.
DEV_FALLBACK_SECRET = "dev_default_secret_change_me"

_fallback_warned = False


# ── Password Hashing ────────────────────────────────────
@lru_cache
def _pwd_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return _pwd_context(settings.bcrypt_rounds).hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        return _pwd_context(settings.bcrypt_rounds).verify(plain_password, hashed_password)
    except ValueError:
        # Stored value is not a recognizable bcrypt digest
        logger.warning("Stored password hash could not be parsed")
        return False


# ── JWT Token ────────────────────────────────────────────
def get_signing_key() -> str:
    """
    The key tokens are signed and verified with.

    Falls back to DEV_FALLBACK_SECRET when JWT_SECRET is empty, warning once
    per process rather than once per request.
    """
    global _fallback_warned
    if settings.jwt_secret:
        return settings.jwt_secret
    if not _fallback_warned:
        logger.warning(
            "JWT_SECRET not set, using a built-in default for development. "
            "Set JWT_SECRET before deploying."
        )
        _fallback_warned = True
    return DEV_FALLBACK_SECRET


def create_access_token(user_id: str, email: str) -> str:
    """Create a signed session token valid for `token_expiry_days`."""
    now = utils.utcnow()
    payload = {
        "sub": user_id,
        "email": email,
        "iat": now,
        "exp": now + timedelta(days=settings.token_expiry_days),
    }
    return jwt.encode(payload, get_signing_key(), algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and validate a token. Returns the payload, or None if invalid or expired."""
    try:
        return jwt.decode(token, get_signing_key(), algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
