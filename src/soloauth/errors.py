# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from http import HTTPStatus
from typing import Dict, Optional

from fastapi import Request
from fastapi.responses import PlainTextResponse


class AuthError(Exception):
    """Base class for failures that end a request at the auth boundary."""

    status_code = 500

    def __init__(self, message: str = "", *, headers: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.headers = headers or {}


class BadCredential(AuthError):
    status_code = 401


class InvalidXSRF(AuthError):
    status_code = 401


class Unauthenticated(AuthError):
    status_code = 401


class RateLimited(AuthError):
    status_code = 429


class EncodeError(AuthError):
    status_code = 500


class InternalError(AuthError):
    status_code = 500


class KeyMaterialError(InternalError):
    pass


class CookieDecodeError(Exception):
    """Raised by the cookie codec for any value it refuses to decode."""


def error_text(code: int, message: str = "", *, expose: bool = True) -> str:
    text = HTTPStatus(code).phrase
    if message and expose:
        text = f"{text}: {message}"
    return text


def http_error(
    code: int, message: str = "", *, expose: bool = True, headers: Optional[Dict[str, str]] = None
) -> PlainTextResponse:
    return PlainTextResponse(error_text(code, message, expose=expose), status_code=code, headers=headers)


def auth_error_handler(expose: bool = True):
    async def _handler(request: Request, exc: AuthError) -> PlainTextResponse:
        return http_error(exc.status_code, exc.message, expose=expose, headers=exc.headers or None)

    return _handler
