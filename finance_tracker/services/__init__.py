"""Business logic services."""

from finance_tracker.services.password_hasher import PasswordHasher
from finance_tracker.services.token_service import TokenIssuer
from finance_tracker.services.identity_service import IdentityService
from finance_tracker.services.ledger_service import LedgerService

__all__ = ["PasswordHasher", "TokenIssuer", "IdentityService", "LedgerService"]
