# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from datetime import timedelta

from itsdangerous import BadData, URLSafeTimedSerializer

DEFAULT_TIMEOUT = timedelta(hours=24)
XSRF_SALT = "soloauth.xsrf.v1"


class XsrfTokens:
    """Stateless anti-forgery tokens scoped to a path.

    Any process holding the same key accepts tokens issued by another.
    """

    def __init__(self, key: bytes, *, timeout: timedelta = DEFAULT_TIMEOUT):
        self.timeout = timeout
        self._serializer = URLSafeTimedSerializer(secret_key=key, salt=XSRF_SALT)

    def issue(self, scope: str = "") -> str:
        return self._serializer.dumps({"p": scope})

    def validate(self, token: str, scope: str = "") -> bool:
        if not token:
            return False
        try:
            data = self._serializer.loads(token, max_age=int(self.timeout.total_seconds()))
        except BadData:
            return False
        if not isinstance(data, dict):
            return False
        return data.get("p") == scope
