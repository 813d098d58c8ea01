"""Tests for ListingCache."""

from coinboard.client.listing_cache import ListingCache


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


class TestListingCache:
    """Unit tests for the ListingCache."""

    def test_replace_and_get(self, quotes):
        cache = ListingCache()
        cache.replace(quotes)
        assert cache.get(1).symbol == "BTC"
        assert cache.get(999) is None

    def test_all_preserves_listing_order(self, quotes):
        cache = ListingCache()
        cache.replace(quotes)
        assert [q.id for q in cache.all()] == [1, 1027, 74]
        assert cache.ids() == [1, 1027, 74]

    def test_all_returns_copy(self, listing):
        snapshot = listing.all()
        snapshot.clear()
        assert len(listing) == 3

    def test_replace_is_wholesale(self, listing, make_quote):
        listing.replace([make_quote(5, "Litecoin", "LTC", 80.0)])
        assert listing.ids() == [5]
        assert 1 not in listing

    def test_version_increments(self, quotes):
        cache = ListingCache()
        v0 = cache.version
        assert cache.replace(quotes) == v0 + 1
        cache.replace(quotes)
        assert cache.version == v0 + 2

    def test_search_by_name_case_insensitive(self, listing):
        assert [q.symbol for q in listing.search("bit")] == ["BTC"]
        assert [q.symbol for q in listing.search("ETHER")] == ["ETH"]

    def test_search_by_symbol(self, listing):
        assert [q.symbol for q in listing.search("doge")] == ["DOGE"]

    def test_search_matches_several(self, listing):
        # 'coin' appears in Bitcoin and Dogecoin
        assert [q.symbol for q in listing.search("coin")] == ["BTC", "DOGE"]

    def test_empty_search_returns_everything(self, listing):
        assert len(listing.search("")) == 3
        assert len(listing.search("   ")) == 3

    def test_search_no_match(self, listing):
        assert listing.search("zzz") == []

    def test_never_loaded_is_stale(self):
        cache = ListingCache()
        assert cache.age() is None
        assert cache.is_stale()

    def test_staleness_window(self, quotes):
        clock = FakeClock()
        cache = ListingCache(max_age=60.0, clock=clock)
        cache.replace(quotes)
        assert cache.age() == 0.0
        assert not cache.is_stale()

        clock.now += 61.0
        assert cache.age() == 61.0
        assert cache.is_stale()

        cache.replace(quotes)
        assert not cache.is_stale()

    def test_len_and_contains(self, listing):
        assert len(listing) == 3
        assert 1027 in listing
        assert "1027" not in listing
