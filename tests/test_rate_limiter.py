"""Tests for the hybrid rate limiter (memory-only, no Redis configured)"""

import pytest

from geekcare import rate_limiter
from geekcare.rate_limiter import check_rate_limit, reset_rate_limits


class FakeClock:
    def __init__(self, now=1_900_000_000):
        self.now = now

    def time(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock(monkeypatch):
    fake = FakeClock()
    monkeypatch.setattr(rate_limiter, "time", fake)
    monkeypatch.setattr(rate_limiter, "last_cleanup_time", 0)
    reset_rate_limits()
    yield fake
    reset_rate_limits()


def test_allows_up_to_limit_then_refuses(clock):
    results = [check_rate_limit("booking:1.2.3.4", 3, 60) for _ in range(4)]

    assert [allowed for allowed, _, _ in results] == [True, True, True, False]
    assert [count for _, count, _ in results] == [1, 2, 3, 3]


def test_ttl_counts_down_within_the_window(clock):
    _, _, ttl = check_rate_limit("register:1.2.3.4", 5, 3600)
    assert ttl == 3600

    clock.advance(600)
    _, _, ttl = check_rate_limit("register:1.2.3.4", 5, 3600)
    assert ttl == 3000


def test_counter_resets_when_window_expires(clock):
    for _ in range(2):
        check_rate_limit("messages:1.2.3.4", 2, 60)
    assert check_rate_limit("messages:1.2.3.4", 2, 60)[0] is False

    clock.advance(60)
    allowed, count, ttl = check_rate_limit("messages:1.2.3.4", 2, 60)

    assert allowed is True
    assert count == 1
    assert ttl == 60


def test_keys_are_counted_separately(clock):
    check_rate_limit("booking:1.2.3.4", 1, 60)

    assert check_rate_limit("booking:1.2.3.4", 1, 60)[0] is False
    assert check_rate_limit("booking:5.6.7.8", 1, 60)[0] is True
    assert check_rate_limit("support_ticket:1.2.3.4", 1, 60)[0] is True


def test_registration_endpoint_returns_429_with_retry_after(client, headers_for, clock, monkeypatch):
    monkeypatch.setattr(rate_limiter, "RATE_LIMIT_ENABLED", True)
    headers = headers_for("someone")  # no role: every attempt is a 400 but still counted

    statuses = [
        client.post("/accounts/register", json={}, headers=headers).status_code for _ in range(6)
    ]

    assert statuses == [400] * 5 + [429]
    blocked = client.post("/accounts/register", json={}, headers=headers)
    assert blocked.status_code == 429
    assert 0 < int(blocked.headers["Retry-After"]) <= 3600
