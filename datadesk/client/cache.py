"""Client-side query cache.

Lists fetched from the API are stored under typed keys. Keys are matched by
path prefix, so invalidating "/api/companies" marks every company list stale
(all, mine, and each category). Nothing is dropped on invalidation; stale
entries are refetched on the next fetch().
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterable


@dataclass(frozen=True)
class QueryKey:
    """A cached resource: the GET path plus its query parameters."""

    path: str
    params: tuple[tuple[str, str], ...] = ()

    def matches(self, prefix: "QueryKey | str") -> bool:
        """True if this key is the prefix or lives below it."""
        base = prefix.path if isinstance(prefix, QueryKey) else prefix
        base = base.rstrip("/")
        return self.path == base or self.path.startswith(base + "/")

    @property
    def query(self) -> dict[str, str]:
        return dict(self.params)


ALL_COMPANIES = QueryKey("/api/companies")
MY_COMPANIES = QueryKey("/api/companies/my")
TODAY_COMMENTS = QueryKey("/api/comments/today")
DATA_REQUESTS = QueryKey("/api/data-requests")
PENDING_DATA_REQUESTS = QueryKey("/api/data-requests/pending")
FACEBOOK_REQUESTS = QueryKey("/api/facebook-requests")
PENDING_FACEBOOK_REQUESTS = QueryKey("/api/facebook-requests/pending")
FACEBOOK_DATA = QueryKey("/api/facebook-data")
USERS = QueryKey("/api/admin/users")
HOLIDAYS = QueryKey("/api/holidays")

COMPANIES_PREFIX = "/api/companies"
COMMENTS_PREFIX = "/api/comments"


def category(name: str, mine: bool = False) -> QueryKey:
    """Key for the company list of one category."""
    params = (("mine", "true"),) if mine else ()
    return QueryKey(f"/api/companies/category/{name}", params)


def company_comments(company_id: int) -> QueryKey:
    return QueryKey(f"/api/comments/company/{company_id}")


def category_of(key: QueryKey) -> str | None:
    """The category a company-list key filters on, if any."""
    prefix = "/api/companies/category/"
    if key.path.startswith(prefix):
        return key.path[len(prefix):]
    return None


@dataclass
class _Entry:
    data: Any
    stale: bool = False


@dataclass(frozen=True)
class CacheSnapshot:
    """
    Deep copy of some cache entries taken before an optimistic write.

    A key mapped to None was absent when the snapshot was taken and is
    removed again on restore.
    """

    entries: dict[QueryKey, _Entry | None] = field(default_factory=dict)

    @property
    def keys(self) -> list[QueryKey]:
        return list(self.entries)


class QueryCache:
    """Key-value store of fetched lists with stale flags and snapshot/restore."""

    def __init__(self) -> None:
        self._entries: dict[QueryKey, _Entry] = {}

    def __contains__(self, key: QueryKey) -> bool:
        return key in self._entries

    def get(self, key: QueryKey, default: Any = None) -> Any:
        entry = self._entries.get(key)
        return entry.data if entry else default

    def set(self, key: QueryKey, data: Any) -> None:
        self._entries[key] = _Entry(data=data)

    def update(self, key: QueryKey, fn: Callable[[Any], Any]) -> bool:
        """
        Replace a cached value with fn(value). Keys that are not cached are
        left alone; they will be fetched fresh when first needed.
        """
        entry = self._entries.get(key)
        if entry is None:
            return False
        entry.data = fn(entry.data)
        return True

    def keys(self, prefix: QueryKey | str | None = None) -> list[QueryKey]:
        if prefix is None:
            return list(self._entries)
        return [key for key in self._entries if key.matches(prefix)]

    def invalidate(self, prefix: QueryKey | str) -> list[QueryKey]:
        """Mark every entry under prefix stale. Returns the keys marked."""
        marked = self.keys(prefix)
        for key in marked:
            self._entries[key].stale = True
        return marked

    def is_stale(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        return entry is None or entry.stale

    async def fetch(self, key: QueryKey, loader: Callable[[QueryKey], Awaitable[Any]]) -> Any:
        """Return the cached value, loading it first if missing or stale."""
        if not self.is_stale(key):
            return self._entries[key].data
        data = await loader(key)
        self.set(key, data)
        return data

    def snapshot(self, keys: Iterable[QueryKey]) -> CacheSnapshot:
        return CacheSnapshot(
            entries={key: copy.deepcopy(self._entries.get(key)) for key in keys}
        )

    def restore(self, snapshot: CacheSnapshot) -> None:
        """Put every snapshotted key back exactly as it was, including absence."""
        for key, entry in snapshot.entries.items():
            if entry is None:
                self._entries.pop(key, None)
            else:
                self._entries[key] = copy.deepcopy(entry)

    def dump(self) -> dict[QueryKey, tuple[Any, bool]]:
        """Deep copy of the whole cache as {key: (data, stale)}."""
        return {
            key: (copy.deepcopy(entry.data), entry.stale)
            for key, entry in self._entries.items()
        }
