"""
FastAPI dependencies: verified token claims, role guards, and the shared
ledger/report cache created at startup.
"""
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from typing import Optional
import logging

from sector_stock.ledger import StockLedger
from sector_stock.schemas.auth import Role, TokenClaims
from sector_stock.security import (
    ExpiredToken,
    Forbidden,
    InvalidToken,
    authorize,
    decode_access_token,
    require_sector,
)
from sector_stock.utils.report_cache import ReportCache

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_report_cache(request: Request) -> ReportCache:
    return request.app.state.report_cache


def get_stock_ledger(request: Request) -> StockLedger:
    return request.app.state.stock_ledger


def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenClaims:
    """Verify the bearer token and return its claims."""
    if credentials is None:
        raise _unauthorized("Not authenticated")

    try:
        return decode_access_token(credentials.credentials)
    except ExpiredToken:
        logger.warning("Expired JWT token provided")
        raise _unauthorized("Token has expired")
    except InvalidToken:
        logger.warning("Invalid JWT token provided")
        raise _unauthorized("Invalid authentication credentials")


def require_roles(*roles: Role):
    """Build a dependency that admits only callers holding one of ``roles``."""
    required = frozenset(roles)

    def dependency(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
        try:
            authorize(claims, required)
        except Forbidden as e:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
        return claims

    return dependency


require_admin = require_roles(Role.ADMIN)


def require_sector_claims(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
    """Admit only callers affiliated with a sector."""
    try:
        require_sector(claims)
    except Forbidden as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    return claims
