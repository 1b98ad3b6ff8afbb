"""
Transaction API endpoints.

Every route is scoped to the account in the bearer token. An
entry belonging to someone else answers 404, the same as one
that does not exist.
"""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from finance_tracker.errors import FinanceTrackerError
from finance_tracker.models.base import get_db
from finance_tracker.api.deps import get_current_account_id, get_ledger_service
from finance_tracker.services.ledger_service import LedgerService
from finance_tracker.schemas.ledger import (
    LedgerEntryCreate,
    LedgerEntryResponse,
    LedgerEntryUpdate,
    LedgerSummary,
)

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])


@router.post("", response_model=LedgerEntryResponse, status_code=201)
def create_transaction(
    request: LedgerEntryCreate,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: LedgerService = Depends(get_ledger_service),
):
    """Record an income ("receita") or expense ("despesa")."""
    try:
        entry = service.create_entry(account_id, request)
        db.commit()
        return entry
    except FinanceTrackerError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("", response_model=list[LedgerEntryResponse])
def list_transactions(
    start_date: date | None = None,
    end_date: date | None = None,
    category: str | None = None,
    account_id: uuid.UUID = Depends(get_current_account_id),
    service: LedgerService = Depends(get_ledger_service),
):
    """List transactions, newest first, optionally filtered."""
    try:
        return service.list_entries(account_id, start_date, end_date, category)
    except FinanceTrackerError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


# Registered before /{transaction_id} so the literal paths win
@router.get("/summary", response_model=LedgerSummary)
def get_summary(
    start_date: date | None = None,
    end_date: date | None = None,
    account_id: uuid.UUID = Depends(get_current_account_id),
    service: LedgerService = Depends(get_ledger_service),
):
    """Total income, total expense and balance for a date range."""
    try:
        return service.get_summary(account_id, start_date, end_date)
    except FinanceTrackerError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/categories", response_model=list[str])
def get_categories(
    account_id: uuid.UUID = Depends(get_current_account_id),
    service: LedgerService = Depends(get_ledger_service),
):
    """Categories the caller has used, sorted."""
    try:
        return service.get_categories(account_id)
    except FinanceTrackerError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/{transaction_id}", response_model=LedgerEntryResponse)
def get_transaction(
    transaction_id: uuid.UUID,
    account_id: uuid.UUID = Depends(get_current_account_id),
    service: LedgerService = Depends(get_ledger_service),
):
    """Get one transaction."""
    try:
        return service.get_entry(transaction_id, account_id)
    except FinanceTrackerError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("/{transaction_id}", response_model=LedgerEntryResponse)
def update_transaction(
    transaction_id: uuid.UUID,
    request: LedgerEntryUpdate,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: LedgerService = Depends(get_ledger_service),
):
    """Replace a transaction's fields."""
    try:
        entry = service.update_entry(transaction_id, account_id, request)
        db.commit()
        return entry
    except FinanceTrackerError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: uuid.UUID,
    account_id: uuid.UUID = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    service: LedgerService = Depends(get_ledger_service),
):
    """Delete a transaction."""
    try:
        service.delete_entry(transaction_id, account_id)
        db.commit()
    except FinanceTrackerError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return Response(status_code=204)
