# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import base64
from datetime import timedelta

from cryptography.fernet import Fernet, InvalidToken
from itsdangerous import BadData, URLSafeTimedSerializer

from soloauth.auth.keys import KeyMaterial
from soloauth.errors import CookieDecodeError, EncodeError

COOKIE_NAME = "Authorization"
DEFAULT_MAX_AGE = timedelta(days=30)


class CookieCodec:
    """Encrypts a session id, then signs the ciphertext bound to the cookie name.

    ``decode`` raises the same ``CookieDecodeError`` whether the value was
    tampered with, is older than ``max_age``, was made with other keys, or is
    not a cookie at all.
    """

    def __init__(self, keys: KeyMaterial, *, name: str = COOKIE_NAME, max_age: timedelta = DEFAULT_MAX_AGE):
        self.name = name
        self.max_age = max_age
        self._fernet = Fernet(base64.urlsafe_b64encode(keys.cookie_block_key))
        self._signer = URLSafeTimedSerializer(secret_key=keys.cookie_hash_key, salt=name)

    def encode(self, session_id: str) -> str:
        if not session_id:
            raise EncodeError("empty session id")
        try:
            sealed = self._fernet.encrypt(session_id.encode("utf-8"))
            return self._signer.dumps(sealed.decode("ascii"))
        except (TypeError, ValueError) as exc:
            raise EncodeError("could not encode session cookie") from exc

    def decode(self, value: str) -> str:
        if not value:
            raise CookieDecodeError("invalid cookie")
        try:
            sealed = self._signer.loads(value, max_age=int(self.max_age.total_seconds()))
            if not isinstance(sealed, str):
                raise CookieDecodeError("invalid cookie")
            return self._fernet.decrypt(sealed.encode("ascii")).decode("utf-8")
        except (BadData, InvalidToken, TypeError, ValueError):
            raise CookieDecodeError("invalid cookie") from None
