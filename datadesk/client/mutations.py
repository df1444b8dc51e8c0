"""Optimistic mutations against the query cache.

Every mutation runs the same cycle through run_mutation():

1. snapshot every cached list it may touch
2. apply a best-guess local edit (temp-id records appended, rows removed)
3. send the request
4. success: swap temp records for the server's, then invalidate the
   affected prefixes so they are refetched
5. failure: restore the snapshot exactly and notify

All lists a mutation touches are snapshotted and restored together.
"""

import logging
import time
from datetime import date, datetime, timezone
from typing import Any, Callable

import httpx

from datadesk.client import cache as keys
from datadesk.client.api import ApiError, DashboardClient
from datadesk.client.cache import QueryCache, QueryKey
from datadesk.db.enums import RequestDecision, RequestKind

logger = logging.getLogger(__name__)

Notify = Callable[[str], None]


class TempIdFactory:
    """
    Issues ids for records that exist only in the cache.

    Ids are negative and strictly decreasing, seeded from the clock in
    milliseconds. Server ids are positive, so the two never collide.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._last = -int(clock() * 1000)

    def next(self) -> int:
        self._last -= 1
        return self._last


_temp_ids = TempIdFactory()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _append(record: dict) -> Callable[[list], list]:
    return lambda items: [*(items or []), record]


def _prepend(record: dict) -> Callable[[list], list]:
    return lambda items: [record, *(items or [])]


def _remove(record_id: int) -> Callable[[list], list]:
    return lambda items: [item for item in (items or []) if item.get("id") != record_id]


def _replace(record_id: int, record: dict) -> Callable[[list], list]:
    return lambda items: [record if item.get("id") == record_id else item for item in (items or [])]


def _patch(record_id: int, **changes) -> Callable[[list], list]:
    return lambda items: [
        {**item, **changes} if item.get("id") == record_id else item for item in (items or [])
    ]


class OptimisticMutation:
    """
    Base class. Subclasses describe which lists they touch and how.

    apply() and reconcile() only edit lists that are already cached.
    """

    description = "Request"

    def affected_keys(self, cache: QueryCache) -> list[QueryKey]:
        raise NotImplementedError

    def apply(self, cache: QueryCache) -> None:
        raise NotImplementedError

    async def send(self, client: DashboardClient) -> Any:
        raise NotImplementedError

    def reconcile(self, cache: QueryCache, result: Any) -> None:
        """Swap optimistic entries for the server's record. Default: nothing to swap."""

    def invalidates(self) -> list[QueryKey | str]:
        return []


async def run_mutation(
    cache: QueryCache,
    client: DashboardClient,
    mutation: OptimisticMutation,
    notify: Notify | None = None,
) -> Any:
    """
    Run one optimistic mutation end to end and return the server result.

    On failure the cache is restored from the snapshot, `notify` receives a
    plain-text message, and the error is re-raised.
    """
    snapshot = cache.snapshot(mutation.affected_keys(cache))
    try:
        mutation.apply(cache)
        result = await mutation.send(client)
        mutation.reconcile(cache, result)
    except Exception as exc:
        cache.restore(snapshot)
        if isinstance(exc, ApiError):
            message = exc.message
        elif isinstance(exc, httpx.HTTPError):
            message = "Network error"
        else:
            message = "Unexpected error"
            logger.exception("%s raised outside the HTTP layer", mutation.description)
        logger.info("%s failed, cache restored: %s", mutation.description, message)
        if notify:
            notify(f"{mutation.description} failed: {message}")
        raise

    for prefix in mutation.invalidates():
        cache.invalidate(prefix)
    return result


# =============================================================================
# Requests
# =============================================================================


class CreateDataRequest(OptimisticMutation):
    description = "Data request"

    def __init__(self, payload: dict, user_id: int, ids: TempIdFactory = _temp_ids):
        self.payload = payload
        self.temp_id = ids.next()
        self.record = {
            "id": self.temp_id,
            "userId": user_id,
            "requestType": payload.get("requestType"),
            "industry": payload.get("industry"),
            "justification": payload.get("justification"),
            "status": "pending",
            "approvedBy": None,
            "companiesAssigned": 0,
            "createdAt": _now_iso(),
            "updatedAt": _now_iso(),
        }

    def affected_keys(self, cache):
        return [keys.DATA_REQUESTS, keys.PENDING_DATA_REQUESTS]

    def apply(self, cache):
        for key in self.affected_keys(cache):
            cache.update(key, _prepend(self.record))

    async def send(self, client):
        return await client.create_data_request(self.payload)

    def reconcile(self, cache, result):
        for key in self.affected_keys(cache):
            cache.update(key, _replace(self.temp_id, result))

    def invalidates(self):
        return [keys.DATA_REQUESTS]


class CreateFacebookRequest(OptimisticMutation):
    description = "Facebook data request"

    def __init__(self, payload: dict, user_id: int, ids: TempIdFactory = _temp_ids):
        self.payload = payload
        self.temp_id = ids.next()
        self.record = {
            "id": self.temp_id,
            "userId": user_id,
            "justification": payload.get("justification"),
            "status": "pending",
            "approvedBy": None,
            "recordsAssigned": 0,
            "createdAt": _now_iso(),
            "updatedAt": _now_iso(),
        }

    def affected_keys(self, cache):
        return [keys.FACEBOOK_REQUESTS, keys.PENDING_FACEBOOK_REQUESTS]

    def apply(self, cache):
        for key in self.affected_keys(cache):
            cache.update(key, _prepend(self.record))

    async def send(self, client):
        return await client.create_facebook_request(self.payload)

    def reconcile(self, cache, result):
        for key in self.affected_keys(cache):
            cache.update(key, _replace(self.temp_id, result))

    def invalidates(self):
        return [keys.FACEBOOK_REQUESTS]


class UpdateRequestStatus(OptimisticMutation):
    """Approve or reject. The request leaves the pending list right away."""

    description = "Status update"

    def __init__(self, kind: RequestKind, request_id: int, status: RequestDecision | str):
        self.kind = RequestKind(kind)
        self.request_id = request_id
        self.status = RequestDecision(status).value

    @property
    def _list_key(self) -> QueryKey:
        return keys.DATA_REQUESTS if self.kind == RequestKind.DATA else keys.FACEBOOK_REQUESTS

    @property
    def _pending_key(self) -> QueryKey:
        if self.kind == RequestKind.DATA:
            return keys.PENDING_DATA_REQUESTS
        return keys.PENDING_FACEBOOK_REQUESTS

    def affected_keys(self, cache):
        return [self._list_key, self._pending_key]

    def apply(self, cache):
        cache.update(self._pending_key, _remove(self.request_id))
        cache.update(self._list_key, _patch(self.request_id, status=self.status))

    async def send(self, client):
        return await client.update_request_status(self.kind, self.request_id, self.status)

    def reconcile(self, cache, result):
        cache.update(self._list_key, _replace(self.request_id, result))

    def invalidates(self):
        prefixes: list[QueryKey | str] = [self._list_key]
        if self.status == RequestDecision.APPROVED.value:
            # Approval changed ownership elsewhere
            if self.kind == RequestKind.DATA:
                prefixes.append(keys.COMPANIES_PREFIX)
            else:
                prefixes.append(keys.FACEBOOK_DATA)
        return prefixes


# =============================================================================
# Users
# =============================================================================


class CreateUser(OptimisticMutation):
    description = "Create user"

    def __init__(self, payload: dict, ids: TempIdFactory = _temp_ids):
        self.payload = payload
        self.temp_id = ids.next()
        self.record = {
            "id": self.temp_id,
            "username": payload.get("username"),
            "email": payload.get("email"),
            "fullName": payload.get("fullName"),
            "employeeId": payload.get("employeeId"),
            "role": payload.get("role", "employee"),
            "isActive": True,
            "loginTime": None,
            "createdAt": _now_iso(),
        }

    def affected_keys(self, cache):
        return [keys.USERS]

    def apply(self, cache):
        cache.update(keys.USERS, _prepend(self.record))

    async def send(self, client):
        return await client.create_user(self.payload)

    def reconcile(self, cache, result):
        cache.update(keys.USERS, _replace(self.temp_id, result))

    def invalidates(self):
        return [keys.USERS]


class DeleteUser(OptimisticMutation):
    description = "Delete user"

    def __init__(self, user_id: int):
        self.user_id = user_id

    def affected_keys(self, cache):
        return [keys.USERS]

    def apply(self, cache):
        cache.update(keys.USERS, _remove(self.user_id))

    async def send(self, client):
        return await client.delete_user(self.user_id)

    def invalidates(self):
        # The user's companies went back to the pool
        return [keys.USERS, keys.COMPANIES_PREFIX]


# =============================================================================
# Companies
# =============================================================================


class CreateCompany(OptimisticMutation):
    """
    Add a company. Self-service companies belong to the creator; the admin
    form may name an owner or leave the company in the pool.
    """

    description = "Create company"

    def __init__(
        self,
        payload: dict,
        current_user_id: int,
        *,
        admin: bool = False,
        ids: TempIdFactory = _temp_ids,
    ):
        self.payload = payload
        self.admin = admin
        self.temp_id = ids.next()
        owner = payload.get("assignedToUserId") if admin else current_user_id
        self.owned_by_me = owner == current_user_id
        self.record = {
            "id": self.temp_id,
            "name": payload.get("name"),
            "industry": payload.get("industry"),
            "email": payload.get("email"),
            "phone": payload.get("phone"),
            "address": payload.get("address"),
            "website": payload.get("website"),
            "companySize": payload.get("companySize"),
            "notes": payload.get("notes"),
            "status": "active",
            "category": "assigned",
            "assignedToUserId": owner,
            "createdAt": _now_iso(),
            "updatedAt": _now_iso(),
        }

    def _target_keys(self, cache: QueryCache) -> list[QueryKey]:
        targets = [keys.ALL_COMPANIES]
        if self.owned_by_me:
            targets.append(keys.MY_COMPANIES)
        targets.extend(
            key for key in cache.keys(keys.COMPANIES_PREFIX)
            if keys.category_of(key) == "assigned" and (self.owned_by_me or not key.params)
        )
        return targets

    def affected_keys(self, cache):
        return self._target_keys(cache)

    def apply(self, cache):
        for key in self._target_keys(cache):
            cache.update(key, _prepend(self.record))

    async def send(self, client):
        return await client.create_company(self.payload, admin=self.admin)

    def reconcile(self, cache, result):
        for key in self._target_keys(cache):
            cache.update(key, _replace(self.temp_id, result))

    def invalidates(self):
        return [keys.COMPANIES_PREFIX]


class DeleteCompany(OptimisticMutation):
    description = "Delete company"

    def __init__(self, company_id: int):
        self.company_id = company_id

    def affected_keys(self, cache):
        return cache.keys(keys.COMPANIES_PREFIX) + [keys.TODAY_COMMENTS]

    def apply(self, cache):
        for key in cache.keys(keys.COMPANIES_PREFIX):
            cache.update(key, _remove(self.company_id))
        cache.update(
            keys.TODAY_COMMENTS,
            lambda items: [c for c in (items or []) if c.get("companyId") != self.company_id],
        )

    async def send(self, client):
        return await client.delete_company(self.company_id)

    def invalidates(self):
        return [keys.COMPANIES_PREFIX, keys.COMMENTS_PREFIX]


class AddComment(OptimisticMutation):
    """
    Comment on a company. Locally the company moves to the comment's
    category in every cached list at once.
    """

    description = "Add comment"

    def __init__(
        self,
        company_id: int,
        user_id: int,
        content: str,
        category: str,
        comment_date: datetime,
        ids: TempIdFactory = _temp_ids,
    ):
        self.company_id = company_id
        self.user_id = user_id
        self.category = category
        self.comment_date = comment_date
        self.temp_id = ids.next()
        self.payload = {
            "companyId": company_id,
            "content": content,
            "category": category,
            "commentDate": comment_date.isoformat(),
        }
        self.record = {
            "id": self.temp_id,
            "companyId": company_id,
            "userId": user_id,
            "content": content,
            "category": category,
            "commentDate": comment_date.isoformat(),
            "createdAt": _now_iso(),
        }

    def affected_keys(self, cache):
        return cache.keys(keys.COMPANIES_PREFIX) + [
            keys.TODAY_COMMENTS,
            keys.company_comments(self.company_id),
        ]

    def _find_company(self, cache: QueryCache) -> dict | None:
        for key in cache.keys(keys.COMPANIES_PREFIX):
            for item in cache.get(key) or []:
                if item.get("id") == self.company_id:
                    return item
        return None

    def apply(self, cache):
        company = self._find_company(cache)
        moved = {**company, "category": self.category} if company else None

        for key in cache.keys(keys.COMPANIES_PREFIX):
            list_category = keys.category_of(key)
            if list_category is None:
                cache.update(key, _patch(self.company_id, category=self.category))
            elif list_category != self.category:
                cache.update(key, _remove(self.company_id))
            elif moved is not None and self._belongs_in(key, moved):
                cache.update(
                    key,
                    lambda items: [moved] + [i for i in (items or []) if i.get("id") != self.company_id],
                )

        if self._is_today():
            cache.update(keys.TODAY_COMMENTS, _prepend(self.record))
        cache.update(keys.company_comments(self.company_id), _prepend(self.record))

    def _belongs_in(self, key: QueryKey, company: dict) -> bool:
        # "mine" lists only hold the commenter's own companies
        if key.query.get("mine") == "true":
            return company.get("assignedToUserId") == self.user_id
        return True

    def _is_today(self) -> bool:
        when = self.comment_date
        if when.tzinfo is not None:
            when = when.astimezone(timezone.utc)
        return when.date() == datetime.now(timezone.utc).date()

    async def send(self, client):
        return await client.add_comment(self.payload)

    def reconcile(self, cache, result):
        cache.update(keys.TODAY_COMMENTS, _replace(self.temp_id, result))
        cache.update(keys.company_comments(self.company_id), _replace(self.temp_id, result))

    def invalidates(self):
        return [keys.COMPANIES_PREFIX, keys.COMMENTS_PREFIX]


# =============================================================================
# Holidays
# =============================================================================


class CreateHoliday(OptimisticMutation):
    description = "Create holiday"

    def __init__(self, payload: dict, ids: TempIdFactory = _temp_ids):
        self.payload = payload
        self.temp_id = ids.next()
        when = payload.get("date")
        self.record = {
            "id": self.temp_id,
            "name": payload.get("name"),
            "date": when.isoformat() if isinstance(when, (date, datetime)) else when,
            "description": payload.get("description"),
            "duration": payload.get("duration", "full_day"),
            "createdAt": _now_iso(),
        }

    def affected_keys(self, cache):
        return [keys.HOLIDAYS]

    def apply(self, cache):
        cache.update(keys.HOLIDAYS, _append(self.record))

    async def send(self, client):
        return await client.create_holiday(self.payload)

    def reconcile(self, cache, result):
        cache.update(keys.HOLIDAYS, _replace(self.temp_id, result))

    def invalidates(self):
        return [keys.HOLIDAYS]


class DeleteHoliday(OptimisticMutation):
    description = "Delete holiday"

    def __init__(self, holiday_id: int):
        self.holiday_id = holiday_id

    def affected_keys(self, cache):
        return [keys.HOLIDAYS]

    def apply(self, cache):
        cache.update(keys.HOLIDAYS, _remove(self.holiday_id))

    async def send(self, client):
        return await client.delete_holiday(self.holiday_id)

    def invalidates(self):
        return [keys.HOLIDAYS]
