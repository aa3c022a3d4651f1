# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import hashlib

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from soloauth.errors import BadCredential

_PH = PasswordHasher()


def _prehash(plain: str) -> str:
    # Bound arbitrarily long passwords to a fixed-length input for argon2.
    return hashlib.sha512(plain.encode("utf-8")).hexdigest()


def hash_password(plain: str) -> str:
    if not plain:
        raise ValueError("Empty password")
    return _PH.hash(_prehash(plain))


class CredentialVerifier:
    """Checks submitted passwords against the single stored hash."""

    def __init__(self, password_hash: str, *, hasher: PasswordHasher = _PH):
        self._hash = (password_hash or "").strip()
        self._hasher = hasher

    def verify(self, candidate: str) -> None:
        if not self._hash or not candidate:
            raise BadCredential("invalid password")
        try:
            self._hasher.verify(self._hash, _prehash(candidate))
        except (VerificationError, InvalidHashError):
            raise BadCredential("invalid password") from None

    def needs_rehash(self) -> bool:
        if not self._hash:
            return False
        try:
            return self._hasher.check_needs_rehash(self._hash)
        except InvalidHashError:
            return True
