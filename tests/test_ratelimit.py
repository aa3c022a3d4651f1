from soloauth.ratelimit import RateLimiter, RateLimitInfo


class Tick:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class TestRateLimiter:
    def test_one_per_second(self):
        clock = Tick()
        limiter = RateLimiter(rate=1.0, capacity=1, clock=clock)
        assert limiter.allow("a") is True
        assert limiter.allow("a") is False
        clock.now += 0.5
        assert limiter.allow("a") is False
        clock.now += 0.6
        assert limiter.allow("a") is True

    def test_keys_are_independent(self):
        limiter = RateLimiter(rate=1.0, capacity=1, clock=Tick())
        assert limiter.allow("a")
        assert limiter.allow("b")
        assert not limiter.allow("a")

    def test_burst(self):
        limiter = RateLimiter(rate=0.1, capacity=3, clock=Tick())
        assert [limiter.allow("c") for _ in range(4)] == [True, True, True, False]

    def test_denied_info(self):
        limiter = RateLimiter(rate=0.5, capacity=1, clock=Tick())
        limiter.check("c")
        info = limiter.check("c")
        assert info.allowed is False
        assert info.remaining == 0
        assert info.reset_after == 2.0

    def test_cleanup(self):
        clock = Tick()
        limiter = RateLimiter(rate=1.0, capacity=1, clock=clock)
        limiter.check("old")
        clock.now += 10
        limiter.check("new")
        assert limiter.cleanup(max_age=5) == 1
        assert limiter.cleanup(max_age=5) == 0
        assert len(limiter) == 1


class TestRateLimitInfo:
    def test_headers_allowed(self):
        h = RateLimitInfo(allowed=True, limit=5, remaining=4, reset_after=1.5).headers()
        assert h["X-RateLimit-Limit"] == "5"
        assert h["X-RateLimit-Remaining"] == "4"
        assert h["X-RateLimit-Reset"] == "2"
        assert "Retry-After" not in h

    def test_headers_denied(self):
        h = RateLimitInfo(allowed=False, limit=1, remaining=0, reset_after=3.2).headers()
        assert h["Retry-After"] == "4"
