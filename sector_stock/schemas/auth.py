"""
Authentication schemas.
Wire names follow the public API: email/senha in, setor_id/nome out.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from enum import Enum


class Role(str, Enum):
    ADMIN = "ADMIN"
    UNIT = "SETOR"


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, validation_alias="senha")


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str = Field(..., serialization_alias="nome")
    email: str
    role: Role
    sector_id: Optional[int] = Field(None, serialization_alias="setor_id")


class LoginResponse(BaseModel):
    token: str
    user: UserResponse


class TokenClaims(BaseModel):
    """Identity carried by a verified access token."""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    role: Role
    sector_id: Optional[int] = Field(None, alias="setor_id")
    exp: Optional[int] = None
