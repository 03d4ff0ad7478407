"""
Unit tests for InMemoryDownloadTokenStore
"""
import pytest

from app.services.download_tokens import InMemoryDownloadTokenStore


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryDownloadTokenStore(clock=clock)


class TestInMemoryDownloadTokenStore:

    def test_token_is_redeemable_exactly_once(self, store):
        entry = store.put("orders_20240115_103000_ab12cd34.pdf", 300)

        first = store.take(entry.token)
        second = store.take(entry.token)

        assert first.filename == "orders_20240115_103000_ab12cd34.pdf"
        assert second is None
        assert len(store) == 0

    def test_token_is_valid_until_ttl(self, store, clock):
        entry = store.put("a.pdf", 300)

        clock.now += 300
        assert not store.take(entry.token).expired

    def test_expired_token_is_flagged_and_removed(self, store, clock):
        entry = store.put("a.pdf", 300)

        clock.now += 301
        taken = store.take(entry.token)

        assert taken.expired
        assert taken.filename == "a.pdf"
        assert store.take(entry.token) is None
        assert len(store) == 0

    def test_unknown_token(self, store):
        assert store.take("nope") is None

    def test_tokens_are_unique(self, store):
        tokens = {store.put("a.pdf", 300).token for _ in range(50)}
        assert len(tokens) == 50

    def test_purge_expired_returns_only_expired_entries(self, store, clock):
        old = store.put("old.xlsx", 10)
        fresh = store.put("fresh.xlsx", 300)

        clock.now += 60
        expired = store.purge_expired()

        assert [entry.token for entry in expired] == [old.token]
        assert store.take(fresh.token) is not None
