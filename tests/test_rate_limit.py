from datetime import datetime

from sortex import main
from sortex.main import RateLimiter


class _Clock:
    def __init__(self, start: float) -> None:
        self.value = start

    def now(self, tz=None):
        return datetime.fromtimestamp(self.value, tz)


def test_limit_applies_per_client_within_a_minute(monkeypatch):
    clock = _Clock(1_700_000_000.0)
    monkeypatch.setattr(main, "datetime", clock)
    limiter = RateLimiter(2)

    assert limiter.hit("10.0.0.1")
    assert limiter.hit("10.0.0.1")
    assert not limiter.hit("10.0.0.1")
    assert limiter.hit("10.0.0.2")

    clock.value += 61
    assert limiter.hit("10.0.0.1")


def test_idle_clients_are_forgotten(monkeypatch):
    clock = _Clock(1_700_000_000.0)
    monkeypatch.setattr(main, "datetime", clock)
    limiter = RateLimiter(5)

    for n in range(50):
        limiter.hit(f"10.0.1.{n}")
    assert len(limiter._hits) == 50

    clock.value += 61
    limiter.hit("10.0.2.1")
    assert list(limiter._hits) == ["10.0.2.1"]


def test_rejected_request_does_not_keep_empty_bucket(monkeypatch):
    clock = _Clock(1_700_000_000.0)
    monkeypatch.setattr(main, "datetime", clock)
    limiter = RateLimiter(0)

    assert not limiter.hit("10.0.0.9")
    clock.value += 1
    assert not limiter.hit("10.0.0.8")
    assert list(limiter._hits) == ["10.0.0.8"]
