"""
AdoptMe Backend - Password Hashing & Session Tokens
====================================================

What:  bcrypt password hashing (passlib) and signed session tokens (JWT via
       python-jose) for the login cookie.
How:   `create_app()` builds one CryptContext from its Settings and keeps it
       on `app.state`; services receive it in their constructors. The
       session token carries the public SessionUser fields plus an
       `exp` claim; the cookie's max-age matches the token lifetime.
Who:   SessionService (register/login/current), MockService (mock users).
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt
from passlib.context import CryptContext

from adoptme.config import Settings
from adoptme.exceptions import AuthenticationError
from adoptme.schemas.session import SessionUser

logger = logging.getLogger(__name__)


def build_password_context(app_settings: Settings) -> CryptContext:
    """bcrypt hashing with the cost factor of the given settings (BCRYPT_ROUNDS)."""
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=app_settings.bcrypt_rounds,
    )


def hash_password(password: str, context: CryptContext) -> str:
    return context.hash(password)


def verify_password(plain_password: str, hashed_password: str, context: CryptContext) -> bool:
    """Check a plain password against a stored hash; malformed hashes never match."""
    try:
        return context.verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("Stored password hash could not be parsed")
        return False


def create_session_token(user: SessionUser, app_settings: Settings) -> str:
    expire = datetime.now(timezone.utc) + timedelta(seconds=app_settings.session_ttl_seconds)
    claims: Dict[str, Any] = {
        "sub": str(user.id),
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
        "exp": expire,
    }
    return jwt.encode(claims, app_settings.jwt_secret, algorithm=app_settings.jwt_algorithm)


def decode_session_token(token: str, app_settings: Settings) -> SessionUser:
    """
    Validate a session token and rebuild the SessionUser it carries.

    Raises:
        AuthenticationError: signature mismatch, expiry or missing claims
    """
    try:
        claims = jwt.decode(
            token,
            app_settings.jwt_secret,
            algorithms=[app_settings.jwt_algorithm],
        )
        return SessionUser(
            id=claims["sub"],
            name=claims["name"],
            email=claims["email"],
            role=claims["role"],
        )
    except (JWTError, KeyError, ValueError) as e:
        raise AuthenticationError(
            message="Invalid session",
            context={"error": str(e)},
        )
