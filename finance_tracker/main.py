"""
Finance Tracker — FastAPI Application.

This is the entry point for the application.
All routers are registered here.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from finance_tracker.config import get_settings
from finance_tracker.logging_config import setup_logging
from finance_tracker.models.base import init_db
from finance_tracker.api.deps import get_token_issuer
from finance_tracker.api.health import router as health_router
from finance_tracker.api.auth import router as auth_router
from finance_tracker.api.users import router as users_router
from finance_tracker.api.transactions import router as transactions_router

settings = get_settings()

setup_logging(settings.LOG_LEVEL)

# Builds the token configuration now, so a bad signing secret
# stops the process at import instead of on the first login.
get_token_issuer()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Personal finance tracker: accounts, income and expenses",
    lifespan=lifespan,
)

# Register routers
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(transactions_router)


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(
        "finance_tracker.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
