# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import secrets
from dataclasses import dataclass, field

from soloauth.errors import KeyMaterialError

KEY_BYTES = 32


def generate_key() -> bytes:
    try:
        return secrets.token_bytes(KEY_BYTES)
    except (OSError, NotImplementedError) as exc:
        raise KeyMaterialError("secure random source unavailable") from exc


@dataclass(frozen=True)
class KeyMaterial:
    """Secret keys owned by one process; regenerated on every start."""

    cookie_hash_key: bytes = field(repr=False)
    cookie_block_key: bytes = field(repr=False)
    xsrf_key: bytes = field(repr=False)

    def __post_init__(self) -> None:
        keys = (self.cookie_hash_key, self.cookie_block_key, self.xsrf_key)
        if any(len(k) != KEY_BYTES for k in keys):
            raise KeyMaterialError(f"keys must be {KEY_BYTES} bytes")
        if len(set(keys)) != len(keys):
            raise KeyMaterialError("keys must be independent")

    @classmethod
    def generate(cls) -> "KeyMaterial":
        return cls(
            cookie_hash_key=generate_key(),
            cookie_block_key=generate_key(),
            xsrf_key=generate_key(),
        )
