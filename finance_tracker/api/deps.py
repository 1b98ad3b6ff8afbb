"""
Shared FastAPI dependencies.

Services are built per request around the request's session.
The token issuer and password hasher are built once, from
settings, and reused.
"""

import uuid
from functools import lru_cache

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from finance_tracker.config import get_settings
from finance_tracker.errors import UnauthenticatedError
from finance_tracker.models.base import get_db
from finance_tracker.services.identity_service import IdentityService
from finance_tracker.services.ledger_service import LedgerService
from finance_tracker.services.password_hasher import PasswordHasher
from finance_tracker.services.token_service import TokenIssuer

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache()
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(get_settings().token_config())


@lru_cache()
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=get_settings().BCRYPT_ROUNDS)


def get_identity_service(
    db: Session = Depends(get_db),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
) -> IdentityService:
    return IdentityService(db, token_issuer, password_hasher)


def get_ledger_service(db: Session = Depends(get_db)) -> LedgerService:
    return LedgerService(db)


def get_current_account_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
) -> uuid.UUID:
    """
    Verify the bearer token and return the caller's account id.

    Signature, issuer, audience and expiry are all checked by the
    token issuer; any failure is a 401.
    """
    if credentials is None:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        claims = token_issuer.decode_access_token(credentials.credentials)
    except UnauthenticatedError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    return claims.account_id
