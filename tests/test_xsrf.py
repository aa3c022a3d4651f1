import time
from datetime import timedelta

from soloauth.auth.keys import generate_key
from soloauth.auth.xsrf import DEFAULT_TIMEOUT, XsrfTokens


def test_round_trip():
    tokens = XsrfTokens(generate_key())
    assert tokens.validate(tokens.issue("/login"), "/login")
    assert tokens.validate(tokens.issue(), "")


def test_scope_must_match_exactly():
    tokens = XsrfTokens(generate_key())
    t = tokens.issue("/login")
    assert not tokens.validate(t, "/login/")
    assert not tokens.validate(t, "/notes")
    assert not tokens.validate(t, "")


def test_other_key_is_rejected():
    t = XsrfTokens(generate_key()).issue("/login")
    assert not XsrfTokens(generate_key()).validate(t, "/login")


def test_shared_key_validates_across_instances():
    key = generate_key()
    assert XsrfTokens(key).validate(XsrfTokens(key).issue("/login"), "/login")


def test_garbage_is_rejected():
    tokens = XsrfTokens(generate_key())
    for t in ("", "x", "a.b.c", "☃"):
        assert not tokens.validate(t, "/login")


def test_token_expires_after_window(monkeypatch):
    tokens = XsrfTokens(generate_key())
    t = tokens.issue("/login")
    real = time.time()

    monkeypatch.setattr(time, "time", lambda: real + DEFAULT_TIMEOUT.total_seconds() - 60)
    assert tokens.validate(t, "/login")

    monkeypatch.setattr(time, "time", lambda: real + DEFAULT_TIMEOUT.total_seconds() + 60)
    assert not tokens.validate(t, "/login")


def test_custom_window(monkeypatch):
    tokens = XsrfTokens(generate_key(), timeout=timedelta(minutes=5))
    t = tokens.issue("/login")
    real = time.time()
    monkeypatch.setattr(time, "time", lambda: real + 600)
    assert not tokens.validate(t, "/login")
