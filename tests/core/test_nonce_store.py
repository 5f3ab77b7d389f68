import threading

from app.core.nonce_store import NonceStore

ADDRESS = "0xAbCdEf0123456789aBcDeF0123456789AbCdEf01"


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


class TestNonceStore:
    """Test cases for the in-process nonce store"""

    def test_issue_then_consume_returns_same_nonce(self):
        store = NonceStore()
        nonce = store.issue(ADDRESS)
        assert store.consume(ADDRESS) == nonce

    def test_second_consume_is_absent(self):
        store = NonceStore()
        store.issue(ADDRESS)
        assert store.consume(ADDRESS) is not None
        assert store.consume(ADDRESS) is None

    def test_consume_unknown_address(self):
        assert NonceStore().consume(ADDRESS) is None

    def test_issue_overwrites_previous_nonce(self):
        store = NonceStore()
        first = store.issue(ADDRESS)
        second = store.issue(ADDRESS)
        assert first != second
        assert len(store) == 1
        assert store.consume(ADDRESS) == second

    def test_address_case_is_folded(self):
        store = NonceStore()
        nonce = store.issue(ADDRESS.upper().replace("0X", "0x"))
        assert store.consume(ADDRESS.lower()) == nonce

    def test_nonce_has_128_bits_of_hex(self):
        nonce = NonceStore().issue(ADDRESS)
        assert len(nonce) == 32
        int(nonce, 16)

    def test_expired_nonce_is_absent_and_removed(self):
        clock = FakeClock()
        store = NonceStore(expiry_seconds=300, clock=clock)
        store.issue(ADDRESS)
        clock.now += 300
        assert store.consume(ADDRESS) is None
        assert len(store) == 0

    def test_nonce_valid_just_before_expiry(self):
        clock = FakeClock()
        store = NonceStore(expiry_seconds=300, clock=clock)
        nonce = store.issue(ADDRESS)
        clock.now += 299
        assert store.consume(ADDRESS) == nonce

    def test_zero_expiry_keeps_nonce_until_consumed(self):
        clock = FakeClock()
        store = NonceStore(expiry_seconds=0, clock=clock)
        nonce = store.issue(ADDRESS)
        clock.now += 10 ** 9
        assert store.consume(ADDRESS) == nonce

    def test_concurrent_consumers_get_the_nonce_once(self):
        store = NonceStore()
        nonce = store.issue(ADDRESS)
        results = []
        barrier = threading.Barrier(16)

        def worker():
            barrier.wait()
            results.append(store.consume(ADDRESS))

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(nonce) == 1
        assert results.count(None) == 15
