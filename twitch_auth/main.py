"""
FastAPI application hosting the Twitch sign-in strategy.

This module wires the router and configures the application.
Strategy logic is in twitch_auth/oauth, result models in twitch_auth/core.
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import UTC, datetime

# Configure logging FIRST, before other local imports
from twitch_auth.logging_config import setup_global_logging

setup_global_logging()

# Now import other modules (they will use the configured logging)
from fastapi import FastAPI, Request, status  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402
from starlette.middleware.sessions import SessionMiddleware  # noqa: E402

from twitch_auth.core.exceptions import AuthenticationFailed  # noqa: E402
from twitch_auth.oauth import router as auth_router  # noqa: E402
from twitch_auth.oauth.config import get_twitch_config  # noqa: E402

logger = logging.getLogger(__name__)


# ============================================================================
# Application Lifecycle
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Loads configuration once at startup.
    """
    config = get_twitch_config()
    logger.info(
        "Application starting up...",
        extra={"twitch_configured": config.is_configured()},
    )
    yield
    logger.info("Shutting down application...")


app = FastAPI(
    title="Twitch Sign-In",
    description="Sign users in with Twitch OAuth2",
    version="0.5.0",
    lifespan=lifespan,
)

# Session middleware keeps the signed-in user between requests
SESSION_SECRET_KEY = os.getenv("SESSION_SECRET_KEY")
if not SESSION_SECRET_KEY:
    raise ValueError("SESSION_SECRET_KEY is not set in the environment.")
app.add_middleware(SessionMiddleware, secret_key=SESSION_SECRET_KEY)


# ============================================================================
# Centralized Exception Handlers
# ============================================================================


@app.exception_handler(AuthenticationFailed)
async def authentication_failed_handler(request: Request, exc: AuthenticationFailed):
    """
    Handle a failed callback phase.

    Returns 401 Unauthorized with every error the strategy reported.
    """
    logger.warning(f"Authentication failed: {exc}", extra={"provider": exc.provider})
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={
            "status": "error",
            "provider": exc.provider,
            "errors": [error.model_dump() for error in exc.errors],
        },
    )


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "twitch-auth",
        "timestamp": datetime.now(UTC).isoformat(),
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(auth_router.router)


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8080))
    uvicorn.run(app, host="0.0.0.0", port=port)
