# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

from soloauth.auth.sessions import SessionRecord, SessionSweeper
from soloauth.config import AuthConfig, credentials_path, load_password_hash
from soloauth.gateway import Authenticator

logger = logging.getLogger(__name__)


def create_app(config: Optional[AuthConfig] = None, password_hash: Optional[str] = None) -> FastAPI:
    """Build the demo application: auth routes, a home page and one protected page."""
    config = config if config is not None else AuthConfig.from_env()
    if password_hash is None:
        password_hash = load_password_hash(credentials_path())

    auth = Authenticator(password_hash, config)
    if auth.verifier.needs_rehash():
        logger.warning("Stored password hash uses outdated parameters; run scripts/set_password.py")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        sweeper = None
        if config.sweep_interval > 0:
            limiter_cleanup = getattr(auth.limiter, "cleanup", None)
            cleanups = [limiter_cleanup] if callable(limiter_cleanup) else []
            sweeper = SessionSweeper(auth.sessions, config.sweep_interval, cleanups=cleanups)
            app.state.sweeper = sweeper
            sweeper.start()
            logger.info("Session sweeper running every %.0fs", config.sweep_interval)
        try:
            yield
        finally:
            if sweeper is not None:
                sweeper.stop(timeout=5)

    app = FastAPI(lifespan=lifespan)
    auth.install(app)

    @app.get("/", response_class=HTMLResponse)
    def home(request: Request):
        record = auth.get_session(request)
        ctx = {
            "favicon": config.favicon,
            "title": config.title,
            "authenticated": record is not None,
            "expires": record.expires.isoformat() if record else "",
            "login_path": config.login_path,
            "logout_path": config.logout_path,
        }
        return auth.templates.TemplateResponse(request, "home.html", ctx)

    @app.get("/private", response_class=PlainTextResponse)
    def private(session: SessionRecord = Depends(auth.require_auth)):
        return f"OK until {session.expires.isoformat()}"

    return app
