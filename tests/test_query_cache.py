"""Tests for the client query cache."""
import pytest

from datadesk.client import cache as keys
from datadesk.client.cache import QueryCache, QueryKey


def test_prefix_matching():
    assert keys.ALL_COMPANIES.matches("/api/companies")
    assert keys.MY_COMPANIES.matches("/api/companies")
    assert keys.category("hot").matches(keys.ALL_COMPANIES)
    assert not keys.TODAY_COMMENTS.matches("/api/companies")
    assert not QueryKey("/api/companies-archive").matches("/api/companies")


def test_category_keys_carry_params():
    assert keys.category("hot", mine=True).query == {"mine": "true"}
    assert keys.category("hot") != keys.category("hot", mine=True)
    assert keys.category_of(keys.category("block")) == "block"
    assert keys.category_of(keys.MY_COMPANIES) is None


def test_invalidate_marks_stale_without_dropping():
    cache = QueryCache()
    cache.set(keys.ALL_COMPANIES, [{"id": 1}])
    cache.set(keys.category("hot"), [])
    cache.set(keys.HOLIDAYS, [])

    marked = cache.invalidate("/api/companies")

    assert set(marked) == {keys.ALL_COMPANIES, keys.category("hot")}
    assert cache.is_stale(keys.ALL_COMPANIES)
    assert cache.get(keys.ALL_COMPANIES) == [{"id": 1}]
    assert not cache.is_stale(keys.HOLIDAYS)
    assert cache.is_stale(keys.USERS)


@pytest.mark.asyncio
async def test_fetch_loads_only_when_missing_or_stale():
    cache = QueryCache()
    calls = []

    async def loader(key):
        calls.append(key)
        return [{"id": len(calls)}]

    assert await cache.fetch(keys.USERS, loader) == [{"id": 1}]
    assert await cache.fetch(keys.USERS, loader) == [{"id": 1}]
    cache.invalidate(keys.USERS)
    assert await cache.fetch(keys.USERS, loader) == [{"id": 2}]
    assert calls == [keys.USERS, keys.USERS]


def test_snapshot_restore_is_exact():
    cache = QueryCache()
    cache.set(keys.ALL_COMPANIES, [{"id": 1, "category": "assigned"}])
    cache.set(keys.MY_COMPANIES, [{"id": 1, "category": "assigned"}])
    cache.invalidate(keys.MY_COMPANIES)
    before = cache.dump()

    snapshot = cache.snapshot([keys.ALL_COMPANIES, keys.MY_COMPANIES, keys.category("hot")])
    cache.update(keys.ALL_COMPANIES, lambda items: items.append({"id": -5}) or items)
    cache.get(keys.MY_COMPANIES)[0]["category"] = "hot"
    cache.set(keys.MY_COMPANIES, [])
    cache.set(keys.category("hot"), [{"id": 1}])

    cache.restore(snapshot)

    assert cache.dump() == before
    assert keys.category("hot") not in cache
    assert cache.is_stale(keys.MY_COMPANIES)


def test_update_skips_uncached_keys():
    cache = QueryCache()

    assert cache.update(keys.HOLIDAYS, lambda items: items + [{"id": 1}]) is False
    assert keys.HOLIDAYS not in cache
