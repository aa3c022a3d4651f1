# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

import yaml

LOGIN_PATH = "/login"
LOGOUT_PATH = "/logout"
REDIRECT_PATH = "/"
DEFAULT_FAVICON = "https://raw.githubusercontent.com/scheibo/auth/master/favicon.ico"

# Anchor the default credentials path to the project root, not the cwd.
BASE_DIR = Path(__file__).resolve().parents[2]
DEFAULT_CREDENTIALS_PATH = BASE_DIR / "data" / "credentials.yml"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "y"}


def _env_path(name: str, default: str) -> str:
    # An empty override falls back to the default.
    return (os.getenv(name) or default).strip() or default


@dataclass(frozen=True)
class AuthConfig:
    login_path: str = LOGIN_PATH
    logout_path: str = LOGOUT_PATH
    redirect_path: str = REDIRECT_PATH
    title: str = "Login"
    favicon: str = DEFAULT_FAVICON
    login_qps: float = 1.0
    login_burst: int = 1
    session_ttl: timedelta = timedelta(days=30)
    xsrf_timeout: timedelta = timedelta(hours=24)
    sweep_interval: float = 0.0
    cookie_secure: bool = False
    expose_errors: bool = True

    @classmethod
    def from_env(cls) -> "AuthConfig":
        return cls(
            login_path=_env_path("SOLOAUTH_LOGIN_PATH", LOGIN_PATH),
            logout_path=_env_path("SOLOAUTH_LOGOUT_PATH", LOGOUT_PATH),
            redirect_path=_env_path("SOLOAUTH_REDIRECT_PATH", REDIRECT_PATH),
            title=os.getenv("SOLOAUTH_TITLE", "Login"),
            favicon=os.getenv("SOLOAUTH_FAVICON", DEFAULT_FAVICON),
            login_qps=float(os.getenv("SOLOAUTH_LOGIN_QPS", "1")),
            login_burst=int(os.getenv("SOLOAUTH_LOGIN_BURST", "1")),
            session_ttl=timedelta(days=float(os.getenv("SOLOAUTH_SESSION_DAYS", "30"))),
            xsrf_timeout=timedelta(seconds=float(os.getenv("SOLOAUTH_XSRF_TIMEOUT", "86400"))),
            sweep_interval=float(os.getenv("SOLOAUTH_SWEEP_INTERVAL", "0")),
            cookie_secure=_env_bool("SOLOAUTH_COOKIE_SECURE", "false"),
            expose_errors=_env_bool("SOLOAUTH_EXPOSE_ERRORS", "true"),
        )

    def cookie_settings(self) -> dict:
        return {"httponly": True, "path": "/", "samesite": "lax", "secure": self.cookie_secure}


def credentials_path() -> Path:
    return Path(os.getenv("SOLOAUTH_CREDENTIALS_PATH", str(DEFAULT_CREDENTIALS_PATH))).resolve()


def load_password_hash(path: Path) -> str:
    if not path.exists():
        raise RuntimeError(f"Missing credentials file {path} (run scripts/set_password.py)")
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    ph = str(raw.get("password_hash") or "").strip() if isinstance(raw, dict) else ""
    if not ph:
        raise RuntimeError(f"No password_hash in {path}")
    return ph


def save_password_hash(path: Path, password_hash: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    raw = {"version": 1, "password_hash": password_hash}
    path.write_text(yaml.safe_dump(raw, sort_keys=False, allow_unicode=True), encoding="utf-8")
