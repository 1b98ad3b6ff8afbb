"""
Account profile endpoints for the signed-in user.
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from finance_tracker.errors import FinanceTrackerError
from finance_tracker.models.base import get_db
from finance_tracker.api.deps import get_current_account_id, get_identity_service
from finance_tracker.services.identity_service import IdentityService
from finance_tracker.schemas.auth import AccountResponse, AccountUpdate

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("/me", response_model=AccountResponse)
def get_me(
    account_id: uuid.UUID = Depends(get_current_account_id),
    service: IdentityService = Depends(get_identity_service),
):
    """Get the caller's profile."""
    try:
        return service.get_account(account_id)
    except FinanceTrackerError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("/me", response_model=AccountResponse)
def update_me(
    request: AccountUpdate,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: IdentityService = Depends(get_identity_service),
):
    """Update the caller's name and bio."""
    try:
        account = service.update_profile(account_id, request)
        db.commit()
        return account
    except FinanceTrackerError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/me", status_code=204)
def delete_me(
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: IdentityService = Depends(get_identity_service),
):
    """Delete the caller's account along with all of its transactions."""
    try:
        service.delete_account(account_id)
        db.commit()
    except FinanceTrackerError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return Response(status_code=204)
