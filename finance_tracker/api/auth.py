"""
Authentication API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from finance_tracker.errors import FinanceTrackerError
from finance_tracker.models.base import get_db
from finance_tracker.api.deps import get_identity_service
from finance_tracker.services.identity_service import IdentityService
from finance_tracker.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(
    request: RegisterRequest,
    db: Session = Depends(get_db),
    service: IdentityService = Depends(get_identity_service),
):
    """Create an account and return its first token pair."""
    try:
        response = service.register(request)
        db.commit()
        return response
    except FinanceTrackerError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/login", response_model=AuthResponse)
def login(
    request: LoginRequest,
    db: Session = Depends(get_db),
    service: IdentityService = Depends(get_identity_service),
):
    """Exchange email and password for a token pair."""
    try:
        response = service.login(request)
        db.commit()
        return response
    except FinanceTrackerError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/refresh", response_model=AuthResponse)
def refresh(
    request: RefreshTokenRequest,
    db: Session = Depends(get_db),
    service: IdentityService = Depends(get_identity_service),
):
    """
    Exchange a refresh token for a new pair.

    The presented refresh token is consumed; reuse it and every
    refresh token of the account is revoked.
    """
    try:
        response = service.refresh(request)
        db.commit()
        return response
    except FinanceTrackerError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))
