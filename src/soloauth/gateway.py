# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request-facing side of soloauth.

``Authenticator`` owns the process-wide auth state (keys, session table,
cookie codec, XSRF tokens, login limiter), all built in ``__init__`` and never
reassigned afterwards. ``install(app)`` mounts the login/logout routes and the
error handler; ``require_auth`` and ``check_xsrf(scope)`` are dependencies for
the host application's own endpoints.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from soloauth.auth.cookies import COOKIE_NAME, CookieCodec
from soloauth.auth.keys import KeyMaterial
from soloauth.auth.passwords import CredentialVerifier
from soloauth.auth.sessions import SessionRecord, SessionStore
from soloauth.auth.xsrf import XsrfTokens
from soloauth.config import AuthConfig
from soloauth.errors import (
    AuthError,
    CookieDecodeError,
    EncodeError,
    InvalidXSRF,
    RateLimited,
    Unauthenticated,
    auth_error_handler,
)
from soloauth.ratelimit import AdmissionControl, RateLimiter

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class Authenticator:
    def __init__(
        self,
        password_hash: str,
        config: Optional[AuthConfig] = None,
        *,
        keys: Optional[KeyMaterial] = None,
        sessions: Optional[SessionStore] = None,
        verifier: Optional[CredentialVerifier] = None,
        limiter: Optional[AdmissionControl] = None,
        templates: Optional[Jinja2Templates] = None,
    ):
        self.config = config if config is not None else AuthConfig()
        self.keys = keys if keys is not None else KeyMaterial.generate()
        self.sessions = sessions if sessions is not None else SessionStore()
        self.verifier = verifier if verifier is not None else CredentialVerifier(password_hash)
        self.cookies = CookieCodec(self.keys, name=COOKIE_NAME, max_age=self.config.session_ttl)
        self.xsrf_tokens = XsrfTokens(self.keys.xsrf_key, timeout=self.config.xsrf_timeout)
        if limiter is None:
            limiter = RateLimiter(rate=self.config.login_qps, capacity=self.config.login_burst)
        self.limiter = limiter
        self.templates = templates if templates is not None else Jinja2Templates(directory=str(TEMPLATES_DIR))

    # ------------------ XSRF ------------------

    def xsrf(self, scope: str = "") -> str:
        return self.xsrf_tokens.issue(scope)

    def check_xsrf(self, scope: str = ""):
        """Dependency rejecting requests whose form ``token`` is not valid for *scope*."""

        async def _dep(request: Request) -> None:
            form = await request.form()
            if not self.xsrf_tokens.validate(str(form.get("token") or ""), scope):
                logger.warning("Invalid XSRF token from %s for %s", client_key(request), scope)
                raise InvalidXSRF("invalid XSRF")

        return _dep

    # ------------------ Sessions ------------------

    def session_id(self, request: Request) -> Optional[str]:
        value = request.cookies.get(COOKIE_NAME)
        if not value:
            return None
        try:
            return self.cookies.decode(value)
        except CookieDecodeError:
            return None

    def get_session(self, request: Request) -> Optional[SessionRecord]:
        session_id = self.session_id(request)
        if session_id is None:
            return None
        record = self.sessions.lookup(session_id)
        if record is None or record.expired(self.sessions.now()):
            return None
        return record

    def is_auth(self, request: Request) -> bool:
        return self.get_session(request) is not None

    def require_auth(self, request: Request) -> SessionRecord:
        record = self.get_session(request)
        if record is None:
            raise Unauthenticated()
        return record

    # ------------------ Handlers ------------------

    def login_page(self, request: Request) -> HTMLResponse:
        cfg = self.config
        ctx = {
            "favicon": cfg.favicon,
            "title": cfg.title,
            "login_path": cfg.login_path,
            "token": self.xsrf(cfg.login_path),
        }
        resp = self.templates.TemplateResponse(request, "login.html", ctx)
        resp.headers["Cache-Control"] = "no-store"
        return resp

    def login(self, request: Request, token: str = Form(""), password: str = Form("")) -> RedirectResponse:
        cfg = self.config
        who = client_key(request)

        rl = self.limiter.check(who)
        if not rl.allowed:
            logger.warning("Login rate limit exceeded for %s", who)
            raise RateLimited(headers=rl.headers())

        # Forged submissions are rejected before paying for argon2.
        if not self.xsrf_tokens.validate(token, cfg.login_path):
            logger.warning("Invalid XSRF token on login from %s", who)
            raise InvalidXSRF("invalid XSRF")

        try:
            self.verifier.verify(password)
        except AuthError:
            logger.warning("Failed login from %s", who)
            raise

        record = self.sessions.create(cfg.session_ttl)
        try:
            value = self.cookies.encode(record.id)
        except EncodeError:
            self.sessions.remove(record.id)
            logger.exception("Could not encode session cookie")
            raise

        resp = RedirectResponse(url=cfg.redirect_path, status_code=302)
        resp.set_cookie(COOKIE_NAME, value, expires=record.expires, **cfg.cookie_settings())
        logger.info("Login from %s", who)
        return resp

    def logout(self, request: Request) -> RedirectResponse:
        # Expired records are dropped too; the cookie only has to decode.
        session_id = self.session_id(request)
        if session_id is not None and self.sessions.lookup(session_id) is not None:
            self.sessions.remove(session_id)
            logger.info("Logout from %s", client_key(request))

        resp = RedirectResponse(url=self.config.redirect_path, status_code=302)
        resp.set_cookie(COOKIE_NAME, "", expires=EPOCH, **self.config.cookie_settings())
        return resp

    # ------------------ Wiring ------------------

    def router(self) -> APIRouter:
        cfg = self.config
        r = APIRouter()
        r.add_api_route(cfg.login_path, self.login_page, methods=["GET"], response_class=HTMLResponse)
        r.add_api_route(cfg.login_path, self.login, methods=["POST"])
        r.add_api_route(cfg.logout_path, self.logout, methods=["GET", "POST"])
        return r

    def install(self, app: FastAPI) -> None:
        app.state.auth = self
        app.include_router(self.router())
        app.add_exception_handler(AuthError, auth_error_handler(expose=self.config.expose_errors))
