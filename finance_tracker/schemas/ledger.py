"""
Pydantic schemas for ledger operations.

These define the API contract: what data comes in, what data
goes out. They are separate from the database models because
the API shape and the storage shape differ; the request carries
a type tag and an unsigned amount, storage keeps a signed amount.
"""

import uuid
from datetime import date as date_type, datetime
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, Field


# --- Request Schemas ---

class LedgerEntryCreate(BaseModel):
    """A new income or expense entry."""
    type: str = Field(max_length=20)
    title: str = Field(max_length=255)
    amount: Decimal
    category: str = Field(max_length=100)
    date: date_type


class LedgerEntryUpdate(LedgerEntryCreate):
    """Full replacement of an entry's editable fields."""


# --- Response Schemas ---

class LedgerEntryResponse(BaseModel):
    id: uuid.UUID = Field(validation_alias=AliasChoices("external_id", "id"))
    description: str
    amount: Decimal
    category: str
    date: date_type
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LedgerSummary(BaseModel):
    """Income, expense and balance over a set of entries."""
    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
