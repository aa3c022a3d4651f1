# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Single-password authentication for FastAPI services.

- Password hashing/verification (argon2)
- Signed and encrypted session cookies (itsdangerous + cryptography)
- Path-scoped XSRF tokens and a login rate limiter
"""

from soloauth.auth.cookies import COOKIE_NAME
from soloauth.auth.passwords import hash_password
from soloauth.config import AuthConfig
from soloauth.gateway import Authenticator

__all__ = ["COOKIE_NAME", "AuthConfig", "Authenticator", "hash_password"]
