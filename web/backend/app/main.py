"""FastAPI application for the Raipur Smart Connect API.

Provides REST API endpoints for:
- Civic submissions (complaints, community issues, comments, chat, votes)
- User notifications
- Officials-only security administration (stats, activity, unblocking)

Every submission endpoint is fronted by the abuse guard: rate limiting with
escalating warnings, IP blocking, spam heuristics and duplicate detection.

Run with ``uvicorn web.backend.app.main:create_app --factory``.  Behind a
reverse proxy add ``--proxy-headers --forwarded-allow-ips=<proxy address>``;
rate limiting keys on the peer address uvicorn reports.
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smartconnect import __version__
from smartconnect.auth.store import UserStore
from smartconnect.notifications.store import NotificationStore
from smartconnect.security.config import load_config
from smartconnect.security.guard import AbuseGuard
from smartconnect.security.notifier import Notifier
from smartconnect.security.sweeper import Sweeper
from smartconnect.spam.classifier import SpamClassifier
from web.backend.app.middleware.abuse import install_abuse_handler
from web.backend.app.routers import civic, security

CONFIG_ENV_VAR = "SMARTCONNECT_SECURITY_CONFIG"


def create_app(
    guard: Optional[AbuseGuard] = None,
    user_store: Optional[UserStore] = None,
    notification_store: Optional[NotificationStore] = None,
    classifier: Optional[SpamClassifier] = None,
    start_sweeper: bool = True,
) -> FastAPI:
    """Build the application.

    Collaborators default to the file-backed stores and an environment-
    configured guard; tests inject their own.
    """
    notification_store = notification_store or NotificationStore()
    executor: Optional[ThreadPoolExecutor] = None
    if guard is None:
        executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="notify")
        config = load_config(os.environ.get(CONFIG_ENV_VAR) or None)
        notifier = Notifier(
            notification_store,
            executor=executor,
            block_duration_seconds=config.block_duration_seconds,
        )
        guard = AbuseGuard(config=config, notifier=notifier)
    sweeper = Sweeper(guard)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if start_sweeper:
            sweeper.start()
        try:
            yield
        finally:
            sweeper.stop()
            if executor is not None:
                executor.shutdown(wait=False)

    app = FastAPI(
        title="Raipur Smart Connect API",
        description=(
            "REST API for Raipur Smart Connect. Civic submissions are protected "
            "by rate limiting, IP blocking, spam and duplicate detection."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    app.state.guard = guard
    app.state.sweeper = sweeper
    app.state.user_store = user_store or UserStore()
    app.state.notification_store = notification_store
    app.state.classifier = classifier or SpamClassifier()

    # -----------------------------------------------------------------------
    # CORS middleware (allow all origins for development)
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_abuse_handler(app)

    app.include_router(civic.router)
    app.include_router(security.router)

    @app.get("/", tags=["meta"])
    async def root():
        """Return basic API information."""
        return {
            "name": "Raipur Smart Connect API",
            "version": __version__,
            "docs": "/docs",
            "openapi": "/openapi.json",
        }

    @app.get("/health", tags=["meta"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
