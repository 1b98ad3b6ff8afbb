"""
Ledger service — the income and expense entries of an account.

This service enforces the ledger rules:
1. The sign of an amount comes from the type tag (expense is
   negative, income is positive) and is applied on every write
2. Amounts are exact decimals with two fractional digits, greater
   than zero and at most 9,999,999.99 before the sign is applied
3. Entry dates are never in the future
4. Every read and write is scoped to the calling account; another
   account's entry is reported as not found

The service takes a database session as a constructor argument.
The caller controls the transaction boundary.
"""

import logging
import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from finance_tracker.errors import InvalidInputError, NotFoundError, storage_guard
from finance_tracker.models.account import Account
from finance_tracker.models.enums import EntryKind
from finance_tracker.models.ledger_entry import LedgerEntry
from finance_tracker.schemas.ledger import (
    LedgerEntryCreate,
    LedgerEntryUpdate,
    LedgerSummary,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("9999999.99")
ZERO = Decimal("0.00")


def normalize_amount(kind: EntryKind, amount: Decimal) -> Decimal:
    """Apply the sign implied by the entry kind to the amount's magnitude."""
    magnitude = abs(amount).quantize(CENT)
    return -magnitude if kind == EntryKind.EXPENSE else magnitude


def validate_amount(amount: Decimal) -> None:
    if not amount.is_finite():
        raise InvalidInputError("amount must be a number", field="amount")
    if amount <= 0:
        raise InvalidInputError("amount must be greater than zero", field="amount")
    if amount > MAX_AMOUNT:
        raise InvalidInputError(
            f"amount cannot exceed {MAX_AMOUNT}", field="amount"
        )
    if amount != amount.quantize(CENT):
        raise InvalidInputError(
            "amount cannot have more than 2 decimal places", field="amount"
        )


class LedgerService:

    def __init__(self, db: Session):
        self.db = db

    # --- Writes ---

    def create_entry(
        self, account_id: uuid.UUID, request: LedgerEntryCreate
    ) -> LedgerEntry:
        """
        Record a new entry for an account.

        Raises InvalidInputError before touching the database if the
        request breaks a ledger rule, NotFoundError if the account
        no longer exists.
        """
        amount = self._validate(request)

        with storage_guard("creating a ledger entry"):
            owner = self.db.execute(
                select(Account).where(Account.external_id == account_id)
            ).scalar_one_or_none()
            if owner is None:
                raise NotFoundError(f"Account {account_id} not found")

            entry = LedgerEntry(
                account_id=owner.id,
                description=request.title.strip(),
                amount=amount,
                category=request.category.strip(),
                date=request.date,
            )
            self.db.add(entry)
            self.db.flush()

        logger.info(
            "Ledger entry %s created for account %s",
            entry.external_id, account_id,
        )
        return entry

    def update_entry(
        self,
        entry_id: uuid.UUID,
        account_id: uuid.UUID,
        request: LedgerEntryUpdate,
    ) -> LedgerEntry:
        """Replace an entry's fields, re-applying the sign rule."""
        amount = self._validate(request)

        with storage_guard("updating a ledger entry"):
            entry = self._get_owned_entry(entry_id, account_id)
            entry.description = request.title.strip()
            entry.amount = amount
            entry.category = request.category.strip()
            entry.date = request.date
            entry.updated_at = datetime.utcnow()
            self.db.flush()

        logger.info("Ledger entry %s updated", entry_id)
        return entry

    def delete_entry(self, entry_id: uuid.UUID, account_id: uuid.UUID) -> None:
        """Hard-delete an entry owned by the account."""
        with storage_guard("deleting a ledger entry"):
            entry = self._get_owned_entry(entry_id, account_id)
            self.db.delete(entry)
            self.db.flush()

        logger.info("Ledger entry %s deleted", entry_id)

    # --- Reads ---

    def get_entry(self, entry_id: uuid.UUID, account_id: uuid.UUID) -> LedgerEntry:
        """Get one entry, only if the account owns it."""
        with storage_guard("loading a ledger entry"):
            return self._get_owned_entry(entry_id, account_id)

    def list_entries(
        self,
        account_id: uuid.UUID,
        start_date: date | None = None,
        end_date: date | None = None,
        category: str | None = None,
    ) -> list[LedgerEntry]:
        """
        Return the account's entries, newest date first.

        Both date bounds are inclusive. Entries sharing a date keep
        the order they were created in. A blank category means no
        category filter.
        """
        query = self._owned(select(LedgerEntry), account_id)
        query = self._in_range(query, start_date, end_date)
        if category is not None and category.strip():
            query = query.where(LedgerEntry.category == category)

        query = query.order_by(LedgerEntry.date.desc(), LedgerEntry.id.asc())

        with storage_guard("listing ledger entries"):
            entries = self.db.execute(query).scalars().all()
        return list(entries)

    def get_summary(
        self,
        account_id: uuid.UUID,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> LedgerSummary:
        """
        Total income, total expense and balance over a date range.

        Summed in Python over Decimal values so the result is exact
        whatever the database does with numeric aggregates.
        """
        query = self._owned(select(LedgerEntry.amount), account_id)
        query = self._in_range(query, start_date, end_date)

        with storage_guard("summarizing ledger entries"):
            amounts = self.db.execute(query).scalars().all()

        total_income = sum((Decimal(a) for a in amounts if a > 0), ZERO)
        total_expense = abs(sum((Decimal(a) for a in amounts if a < 0), ZERO))

        return LedgerSummary(
            total_income=total_income,
            total_expense=total_expense,
            balance=total_income - total_expense,
        )

    def get_categories(self, account_id: uuid.UUID) -> list[str]:
        """Distinct categories the account has used, sorted, case-sensitive."""
        query = self._owned(select(LedgerEntry.category).distinct(), account_id)

        with storage_guard("listing categories"):
            categories = self.db.execute(query).scalars().all()

        # Sorted here rather than in SQL so database collation can't
        # change the order
        return sorted(set(categories))

    # --- Helpers ---

    def _validate(self, request: LedgerEntryCreate) -> Decimal:
        """Check the ledger rules and return the signed amount."""
        kind = EntryKind.parse(request.type)

        if not request.title or not request.title.strip():
            raise InvalidInputError("title is required", field="title")
        if not request.category or not request.category.strip():
            raise InvalidInputError("category is required", field="category")

        validate_amount(request.amount)

        if request.date > datetime.utcnow().date():
            raise InvalidInputError(
                "date cannot be in the future", field="date"
            )

        return normalize_amount(kind, request.amount)

    @staticmethod
    def _owned(query, account_id: uuid.UUID):
        return query.join(Account, LedgerEntry.account_id == Account.id).where(
            Account.external_id == account_id
        )

    @staticmethod
    def _in_range(query, start_date: date | None, end_date: date | None):
        if start_date is not None:
            query = query.where(LedgerEntry.date >= start_date)
        if end_date is not None:
            query = query.where(LedgerEntry.date <= end_date)
        return query

    def _get_owned_entry(
        self, entry_id: uuid.UUID, account_id: uuid.UUID
    ) -> LedgerEntry:
        entry = self.db.execute(
            self._owned(select(LedgerEntry), account_id).where(
                LedgerEntry.external_id == entry_id
            )
        ).scalar_one_or_none()
        if entry is None:
            raise NotFoundError(f"Transaction {entry_id} not found")
        return entry
