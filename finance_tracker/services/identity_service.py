"""
Identity service — registration, login, token refresh, and the
account lifecycle.

Accounts move from absent to active on registration and back to
absent on deletion. There is no suspended state.

Login failures never say which part was wrong. An unknown email
and a wrong password produce the same error, and both paths run
one bcrypt verification so they take about the same time.
"""

import logging
import uuid
from datetime import datetime

from email_validator import EmailNotValidError, validate_email
from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from finance_tracker.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    UnauthenticatedError,
    storage_guard,
)
from finance_tracker.models.account import Account
from finance_tracker.models.ledger_entry import LedgerEntry
from finance_tracker.models.refresh_token import RefreshToken
from finance_tracker.schemas.auth import (
    AccountResponse,
    AccountUpdate,
    AuthResponse,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
)
from finance_tracker.services.password_hasher import (
    MAX_PASSWORD_BYTES,
    PasswordHasher,
)
from finance_tracker.services.token_service import TokenIssuer

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_REFRESH_TOKEN = "Invalid or expired refresh token"


def normalize_email(email: str | None) -> str:
    """Emails are compared and stored trimmed and lower-cased."""
    return (email or "").strip().lower()


def _require(**fields: str | None) -> None:
    for name, value in fields.items():
        if value is None or not value.strip():
            raise InvalidInputError(f"{name} is required", field=name)


class IdentityService:

    def __init__(
        self,
        db: Session,
        token_issuer: TokenIssuer,
        password_hasher: PasswordHasher,
    ):
        self.db = db
        self.token_issuer = token_issuer
        self.password_hasher = password_hasher

    # --- Authentication ---

    def register(self, request: RegisterRequest) -> AuthResponse:
        """
        Create an account and sign it in.

        All input checks run before the database is touched. The
        email is checked for uniqueness up front, and again by the
        unique constraint in case two registrations race.
        """
        email = normalize_email(request.email)
        _require(
            first_name=request.first_name,
            last_name=request.last_name,
            email=email,
            password=request.password,
        )
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError as e:
            raise InvalidInputError(
                f"email is not valid: {e}", field="email"
            ) from e
        if len(request.password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise InvalidInputError(
                f"password must be at most {MAX_PASSWORD_BYTES} bytes",
                field="password",
            )
        if request.password != request.confirm_password:
            raise InvalidInputError(
                "Passwords do not match", field="confirm_password"
            )

        with storage_guard("registering an account"):
            if self._find_by_email(email) is not None:
                logger.warning("Registration with existing email: %s", email)
                raise ConflictError(f"An account with email '{email}' already exists")

            account = Account(
                first_name=request.first_name.strip(),
                last_name=request.last_name.strip(),
                email=email,
                password_hash=self.password_hasher.hash(request.password),
            )
            self.db.add(account)
            try:
                self.db.flush()
            except IntegrityError as e:
                raise ConflictError(
                    f"An account with email '{email}' already exists"
                ) from e

            response = self._issue_tokens(account)

        logger.info("Account %s registered", account.external_id)
        return response

    def login(self, request: LoginRequest) -> AuthResponse:
        """Verify credentials and issue a fresh token pair."""
        email = normalize_email(request.email)
        if not email or not request.password:
            raise UnauthenticatedError(INVALID_CREDENTIALS)

        with storage_guard("logging in"):
            account = self._find_by_email(email)
            if account is None:
                self.password_hasher.dummy_verify(request.password)
                logger.warning("Failed login attempt for email: %s", email)
                raise UnauthenticatedError(INVALID_CREDENTIALS)

            if not self.password_hasher.verify(
                request.password, account.password_hash
            ):
                logger.warning("Failed login attempt for email: %s", email)
                raise UnauthenticatedError(INVALID_CREDENTIALS)

            account.updated_at = datetime.utcnow()
            self.db.flush()
            response = self._issue_tokens(account)

        logger.info("Account %s logged in", account.external_id)
        return response

    def refresh(self, request: RefreshTokenRequest) -> AuthResponse:
        """
        Exchange a refresh token for a new token pair.

        Each refresh token works once. Presenting one that was
        already exchanged revokes every outstanding refresh token
        of that account, since one of the two holders is not the
        account owner.
        """
        token = (request.refresh_token or "").strip()
        if not token:
            raise InvalidInputError(
                "Refresh token is required", field="refresh_token"
            )

        token_hash = self.token_issuer.hash_refresh_token(token)
        now = datetime.utcnow()

        with storage_guard("refreshing tokens"):
            stored = self.db.execute(
                select(RefreshToken).where(RefreshToken.token_hash == token_hash)
            ).scalar_one_or_none()

            if stored is None:
                raise InvalidInputError(INVALID_REFRESH_TOKEN)

            if stored.used_at is not None:
                self._reject_reuse(stored.account_id, now)

            if not stored.is_usable(now):
                raise InvalidInputError(INVALID_REFRESH_TOKEN)

            account = self.db.get(Account, stored.account_id)
            if account is None:
                raise InvalidInputError(INVALID_REFRESH_TOKEN)

            # Only one concurrent caller can flip used_at from NULL
            consumed = self.db.execute(
                update(RefreshToken)
                .where(
                    RefreshToken.id == stored.id,
                    RefreshToken.used_at.is_(None),
                )
                .values(used_at=now)
                .execution_options(synchronize_session=False)
            )
            if consumed.rowcount != 1:
                self._reject_reuse(stored.account_id, now)

            response = self._issue_tokens(account)

        logger.info("Tokens refreshed for account %s", account.external_id)
        return response

    # --- Account lifecycle ---

    def get_account(self, account_id: uuid.UUID) -> Account:
        """Get an account by its public id."""
        with storage_guard("loading an account"):
            return self._get_account(account_id)

    def update_profile(
        self, account_id: uuid.UUID, request: AccountUpdate
    ) -> Account:
        """Change name and bio. Email and password are not editable here."""
        _require(first_name=request.first_name, last_name=request.last_name)

        with storage_guard("updating an account"):
            account = self._get_account(account_id)
            account.first_name = request.first_name.strip()
            account.last_name = request.last_name.strip()
            account.bio = request.bio
            account.updated_at = datetime.utcnow()
            self.db.flush()

        logger.info("Account %s updated", account_id)
        return account

    def delete_account(self, account_id: uuid.UUID) -> None:
        """
        Hard-delete an account.

        Its ledger entries and refresh tokens go with it, so nothing
        is left behind that no one can reach.
        """
        with storage_guard("deleting an account"):
            account = self._get_account(account_id)
            self.db.execute(
                delete(LedgerEntry).where(LedgerEntry.account_id == account.id)
            )
            self.db.execute(
                delete(RefreshToken).where(RefreshToken.account_id == account.id)
            )
            self.db.delete(account)
            self.db.flush()

        logger.info("Account %s deleted", account_id)

    # --- Helpers ---

    def _find_by_email(self, email: str) -> Account | None:
        return self.db.execute(
            select(Account).where(Account.email == email)
        ).scalar_one_or_none()

    def _get_account(self, account_id: uuid.UUID) -> Account:
        account = self.db.execute(
            select(Account).where(Account.external_id == account_id)
        ).scalar_one_or_none()
        if account is None:
            raise NotFoundError(f"Account {account_id} not found")
        return account

    def _issue_tokens(self, account: Account) -> AuthResponse:
        """Sign an access token and persist a new refresh token."""
        access_token = self.token_issuer.issue_access_token(
            account.external_id, account.email
        )
        refresh_token = self.token_issuer.issue_refresh_token()

        self.db.add(RefreshToken(
            account_id=account.id,
            token_hash=self.token_issuer.hash_refresh_token(refresh_token),
            expires_at=datetime.utcnow() + self.token_issuer.config.refresh_token_ttl,
        ))
        self.db.flush()

        return AuthResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self.token_issuer.access_token_ttl_seconds,
            account=AccountResponse.model_validate(account),
        )

    def _reject_reuse(self, account_id: int, now: datetime) -> None:
        """Revoke every refresh token of the account, then refuse."""
        logger.warning(
            "Refresh token reuse detected for account id %s", account_id
        )
        self._revoke_refresh_tokens(account_id, now)
        # The revocation has to outlive the caller's rollback
        self.db.commit()
        raise InvalidInputError(INVALID_REFRESH_TOKEN)

    def _revoke_refresh_tokens(self, account_id: int, now: datetime) -> None:
        self.db.execute(
            update(RefreshToken)
            .where(
                RefreshToken.account_id == account_id,
                RefreshToken.used_at.is_(None),
            )
            .values(used_at=now)
        )
