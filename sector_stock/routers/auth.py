"""
Authentication router.
Login issues a JWT; tokens are stateless, so there is no logout.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from sector_stock.crud.users import crud_user
from sector_stock.database import get_db
from sector_stock.dependencies import get_current_claims
from sector_stock.schemas.auth import LoginRequest, LoginResponse, TokenClaims, UserResponse
from sector_stock.security import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for an access token."""
    user = crud_user.authenticate(db, email=credentials.email, password=credentials.password)

    if not user:
        logger.warning(f"Failed login attempt for email: {credentials.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = create_access_token(user)
    logger.info(f"User {user.id} logged in successfully")

    return LoginResponse(token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=TokenClaims, response_model_exclude={"exp"})
async def read_current_claims(claims: TokenClaims = Depends(get_current_claims)):
    """Identity carried by the caller's token."""
    return claims
