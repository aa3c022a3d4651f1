import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest
from fastapi import Depends, FastAPI
from fastapi.responses import PlainTextResponse
from fastapi.testclient import TestClient

from soloauth.auth.passwords import CredentialVerifier, hash_password
from soloauth.config import AuthConfig
from soloauth.gateway import Authenticator

PASSWORD = "correct horse battery staple"


class FakeClock:
    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime.now(timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class SpyVerifier(CredentialVerifier):
    def __init__(self, password_hash: str):
        super().__init__(password_hash)
        self.calls = 0

    def verify(self, candidate: str) -> None:
        self.calls += 1
        super().verify(candidate)


def build_app(auth: Authenticator) -> FastAPI:
    """Host app with one protected endpoint and one XSRF-protected form endpoint."""
    app = FastAPI()
    auth.install(app)

    @app.get("/private", response_class=PlainTextResponse)
    def private(session=Depends(auth.require_auth)):
        return "secret"

    @app.post("/notes", response_class=PlainTextResponse, dependencies=[Depends(auth.check_xsrf("/notes"))])
    def notes():
        return "saved"

    return app


@pytest.fixture(scope="session")
def password_hash() -> str:
    return hash_password(PASSWORD)


@pytest.fixture()
def config() -> AuthConfig:
    # Generous login budget; the rate-limit tests build their own config.
    return AuthConfig(login_qps=1000.0, login_burst=1000)


@pytest.fixture()
def verifier(password_hash) -> SpyVerifier:
    return SpyVerifier(password_hash)


@pytest.fixture()
def auth(password_hash, config, verifier) -> Authenticator:
    return Authenticator(password_hash, config, verifier=verifier)


@pytest.fixture()
def client(auth) -> TestClient:
    return TestClient(build_app(auth))
