"""
Pydantic schemas for registration, login, and account profiles.

Field limits here only guard the shape of a request. Business
rules (blank values, password confirmation) are checked by
IdentityService so they surface as InvalidInputError.
"""

import uuid
from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field


# --- Request Schemas ---

class RegisterRequest(BaseModel):
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    email: str = Field(max_length=255)
    password: str = Field(max_length=255)
    confirm_password: str = Field(max_length=255)


class LoginRequest(BaseModel):
    email: str = Field(max_length=255)
    password: str = Field(max_length=255)


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(max_length=255)


class AccountUpdate(BaseModel):
    """Profile fields an account holder may change."""
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    bio: str | None = Field(default=None, max_length=500)


# --- Response Schemas ---

class AccountResponse(BaseModel):
    """Public view of an account. The password hash is never included."""
    id: uuid.UUID = Field(validation_alias=AliasChoices("external_id", "id"))
    first_name: str
    last_name: str
    email: str
    bio: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """Token pair plus the account it was issued for."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    account: AccountResponse
