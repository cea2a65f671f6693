"""
Authentication and authorization core:
- JWT access tokens via python-jose[cryptography]
- Password hashing via passlib[bcrypt]
- Role-based access guard (ADMIN / SETOR), fails closed

Token claims are the only source of identity for the rest of a request;
nothing here touches the database.
"""
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError
import logging

from sector_stock.config import settings
from sector_stock.schemas.auth import Role, TokenClaims

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


class AuthError(Exception):
    """Base class for authentication and authorization failures."""


class InvalidToken(AuthError):
    """Token is missing, malformed, or fails signature verification."""


class ExpiredToken(InvalidToken):
    """Token signature is valid but its expiration has passed."""


class Forbidden(AuthError):
    """Caller is authenticated but not allowed to perform the operation."""


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue a signed access token for ``user``.

    Claims: id, role, setor_id (None for unaffiliated users), iat, exp.
    """
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "id": user.id,
        "role": Role(user.role).value,
        "setor_id": user.sector_id,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> TokenClaims:
    """
    Verify ``token`` and return its claims.

    Raises ExpiredToken when past expiration, InvalidToken for anything
    else that cannot be trusted.
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"require_exp": True},
        )
    except ExpiredSignatureError as e:
        raise ExpiredToken("Token has expired") from e
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        raise InvalidToken("Invalid token") from e

    try:
        return TokenClaims.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"JWT claims rejected: {e.error_count()} invalid field(s)")
        raise InvalidToken("Invalid token claims") from e


def authorize(claims: TokenClaims, required_roles: Iterable[Role]) -> None:
    """Raise Forbidden unless the caller's role is one of ``required_roles``."""
    allowed = frozenset(required_roles)
    if claims.role not in allowed:
        logger.warning(f"User {claims.id} with role {claims.role.value} denied; requires {sorted(r.value for r in allowed)}")
        raise Forbidden("Insufficient privileges")


def require_sector(claims: TokenClaims) -> int:
    """Return the caller's sector id, or raise Forbidden if they have none."""
    if claims.sector_id is None:
        logger.warning(f"User {claims.id} has no sector for a sector-scoped write")
        raise Forbidden("User has no sector")
    return claims.sector_id
