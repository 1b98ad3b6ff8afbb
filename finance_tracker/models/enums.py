"""
Shared enumerations.
"""

import enum

from finance_tracker.errors import InvalidInputError


class EntryKind(str, enum.Enum):
    """
    Whether a ledger entry is income or an expense.

    Callers send the Portuguese tags "receita" / "despesa"; the
    English "income" / "expense" are accepted as aliases. The kind
    is never stored, only the sign it implies.
    """
    INCOME = "receita"
    EXPENSE = "despesa"

    @classmethod
    def parse(cls, tag: str) -> "EntryKind":
        value = (tag or "").strip().lower()
        if value in ("receita", "income"):
            return cls.INCOME
        if value in ("despesa", "expense"):
            return cls.EXPENSE
        raise InvalidInputError(
            "type must be 'receita' or 'despesa'", field="type"
        )
