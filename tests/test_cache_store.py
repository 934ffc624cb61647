"""
Tests for the JSON price cache store.

Uses tmp_path files and a fake clock so freshness is deterministic.
"""
import json
import threading
from decimal import Decimal

from core.cache_store import CacheEntry, PriceCacheStore


class TestCacheEntry:
    """Tests for CacheEntry serialization."""

    def test_to_dict_writes_numbers(self):
        entry = CacheEntry(key="Key", lowest_price=Decimal("2.50"), updated_at=10.0)
        assert entry.to_dict() == {"lowest_price": 2.5, "updated_at": 10.0}

    def test_median_included_when_present(self):
        entry = CacheEntry(key="Key", lowest_price=Decimal("1"), median_price=Decimal("1.5"))
        assert entry.to_dict()["median_price"] == 1.5

    def test_from_dict_restores_decimals(self):
        entry = CacheEntry.from_dict("Key", {"lowest_price": 1234.56, "updated_at": 5})
        assert entry.lowest_price == Decimal("1234.56")
        assert entry.median_price is None
        assert entry.updated_at == 5.0

    def test_symbol_prices_stay_strings(self):
        entry = CacheEntry.from_dict("Key", {"lowest_price": "1,23€", "updated_at": 5})
        assert entry.lowest_price == "1,23€"


class TestPriceCacheStore:
    """Tests for PriceCacheStore."""

    def test_missing_document_is_empty(self, cache_store):
        assert cache_store.get("anything") is None
        assert cache_store.size() == 0

    def test_put_then_get(self, cache_store, clock):
        cache_store.put("Chroma 2 Case", CacheEntry(key="", lowest_price=Decimal("0.42")))

        entry = cache_store.get("Chroma 2 Case")
        assert entry is not None
        assert entry.key == "Chroma 2 Case"
        assert entry.lowest_price == Decimal("0.42")
        assert entry.updated_at == clock.now

    def test_put_rewrites_whole_document(self, cache_store, cache_file):
        cache_file.write_text(json.dumps({"Other": {"lowest_price": 1, "updated_at": 1}}))

        cache_store.put("New", CacheEntry(key="New", lowest_price=Decimal("3")))

        document = json.loads(cache_file.read_text())
        assert set(document) == {"Other", "New"}

    def test_freshness(self, cache_store, clock):
        cache_store.put("Item", CacheEntry(key="Item", lowest_price=Decimal("1")))

        clock.advance(59)
        assert cache_store.get_fresh("Item") is not None

        clock.advance(1)
        assert cache_store.get_fresh("Item") is None
        # Stale entries remain readable
        assert cache_store.get("Item") is not None

    def test_disabled_store_never_fresh(self, cache_file, clock):
        store = PriceCacheStore(cache_file, ttl_seconds=0, clock=clock)
        assert store.enabled is False

        store.put("Item", CacheEntry(key="Item", lowest_price=Decimal("1")))
        assert store.get_fresh("Item") is None

    def test_put_many_single_write(self, cache_store, cache_file, clock, monkeypatch):
        writes = []
        original = cache_store._store

        def counting_store(document):
            writes.append(dict(document))
            original(document)

        monkeypatch.setattr(cache_store, "_store", counting_store)

        count = cache_store.put_many({
            "Mann Co. Supply Crate Key": Decimal("2.50"),
            "Tour of Duty Ticket": 0.99,
        })

        assert count == 2
        assert len(writes) == 1
        key = cache_store.get("Mann Co. Supply Crate Key")
        assert key.lowest_price == Decimal("2.50")
        assert key.updated_at == clock.now
        assert cache_store.get("Tour of Duty Ticket").lowest_price == Decimal("0.99")

    def test_put_many_empty_does_not_touch_disk(self, cache_store, cache_file):
        assert cache_store.put_many({}) == 0
        assert not cache_file.exists()

    def test_corrupt_document_is_a_miss(self, cache_store, cache_file, caplog):
        cache_file.write_text("{not json")

        assert cache_store.get("Item") is None
        assert "unreadable" in caplog.text

    def test_corrupt_document_is_replaced_on_write(self, cache_store, cache_file):
        cache_file.write_text("[1, 2, 3]")

        cache_store.put("Item", CacheEntry(key="Item", lowest_price=Decimal("1")))

        assert list(json.loads(cache_file.read_text())) == ["Item"]

    def test_write_failure_is_logged_not_raised(self, tmp_path, clock, caplog):
        # The cache path is a directory, so opening it for writing fails
        target = tmp_path / "as_dir"
        target.mkdir()
        store = PriceCacheStore(target, ttl_seconds=60, clock=clock)

        store.put("Item", CacheEntry(key="Item", lowest_price=Decimal("1")))

        assert "Failed to write cache file" in caplog.text

    def test_clear(self, cache_store, cache_file):
        cache_store.put("Item", CacheEntry(key="Item", lowest_price=Decimal("1")))
        assert cache_file.exists()

        cache_store.clear()
        assert not cache_file.exists()
        cache_store.clear()  # no error when already gone

    def test_concurrent_puts_keep_every_key(self, cache_store):
        names = [f"Item {i}" for i in range(20)]

        threads = [
            threading.Thread(
                target=cache_store.put,
                args=(name, CacheEntry(key=name, lowest_price=Decimal(i))),
            )
            for i, name in enumerate(names)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert cache_store.size() == len(names)
