"""
Database models package.

All models must be imported here so that every table is
registered on Base.metadata before create_all runs.
"""

from finance_tracker.models.base import Base
from finance_tracker.models.enums import EntryKind
from finance_tracker.models.account import Account
from finance_tracker.models.ledger_entry import LedgerEntry
from finance_tracker.models.refresh_token import RefreshToken

__all__ = [
    "Base",
    "EntryKind",
    "Account",
    "LedgerEntry",
    "RefreshToken",
]
