# tasks/ai_engine/cache.py

from __future__ import annotations

import datetime
import hashlib
import json
import logging
from typing import Any, Dict, Iterable, Optional

from django.conf import settings
from django.core.cache import cache

from ..models import TodayPlanCacheEntry
from .plan import TodayPlan, PLAN_SOURCE_CACHE

logger = logging.getLogger(__name__)

DEFAULT_TTL = 86400  # 24 hours
DEFAULT_VERSION = "v1"

# Task fields that make a cached plan stale when they change. Anything not
# listed (ai_priority_score, source, created_at, ...) never affects the hash.
HASH_TRACKED_FIELDS = (
    "id",
    "title",
    "description",
    "status",
    "importance",
    "due_date",
    "updated_at",
)


def _stable_value(value: Any) -> Any:
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.isoformat()
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return str(value)


def compute_tasks_hash(tasks: Iterable[Any]) -> str:
    """
    SHA256 digest of the tracked fields of every task.

    Tasks are sorted by id first so fetch order never changes the digest.
    """
    rows = [
        {field: _stable_value(getattr(task, field, None)) for field in HASH_TRACKED_FIELDS}
        for task in tasks
    ]
    rows.sort(key=lambda row: str(row["id"]))

    serialized_payload = json.dumps(rows, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(serialized_payload.encode()).hexdigest()


class TodayPlanCache:
    """
    Content-addressed store holding one today plan per user.

    A plan is returned only when it was generated from a task list with the
    same hash as the caller's current one, so task writes never need to
    invalidate anything explicitly.

    Tiers:
    - Django's cache framework (Redis in production), keyed by
      version + user + hash, with a TTL.
    - The durable TodayPlanCacheEntry row, one per user, overwritten on
      every successful generation.

    Failure-transparent: read errors are misses, write errors are logged
    and dropped. The cache is an optimization only.
    """

    def __init__(
        self,
        ttl: Optional[int] = None,
        version: Optional[str] = None,
    ):
        """
        Args:
            ttl: Time-to-live of the fast tier in seconds.
                Defaults to settings.TODAY_PLAN_CACHE_TTL (24 hours).
            version: Key prefix to invalidate payload schemas during deployments.
                Defaults to settings.TODAY_PLAN_CACHE_VERSION.
        """
        if ttl is None:
            ttl = getattr(settings, 'TODAY_PLAN_CACHE_TTL', DEFAULT_TTL)
        if version is None:
            version = getattr(settings, 'TODAY_PLAN_CACHE_VERSION', DEFAULT_VERSION)
        self.ttl = ttl
        self.version = version

    def get(self, user_id: Any, expected_hash: str) -> Optional[TodayPlan]:
        """
        Returns the stored plan for `user_id` if it was built from `expected_hash`.
        """
        cache_key = self._generate_key(user_id, expected_hash)

        try:
            cached_payload = cache.get(cache_key)
            if cached_payload is not None:
                logger.debug(f"Today plan cache hit (fast tier): {cache_key}")
                return TodayPlan.from_dict(cached_payload, source=PLAN_SOURCE_CACHE)
        except Exception as e:
            logger.error(f"Today plan cache read failure (fast tier): {str(e)}")

        try:
            entry = TodayPlanCacheEntry.objects.filter(user_id=user_id).first()
        except Exception as e:
            logger.error(f"Today plan cache read failure (durable tier): {str(e)}")
            return None

        if entry is None or entry.tasks_hash != expected_hash:
            logger.info(f"Today plan cache miss for user {user_id}")
            return None

        payload = {"summary": entry.summary, "advice": entry.advice, "focus": entry.focus}
        try:
            plan = TodayPlan.from_dict(payload, source=PLAN_SOURCE_CACHE)
        except (TypeError, ValueError) as e:
            logger.error(f"Discarding unreadable today plan cache row for user {user_id}: {e}")
            return None

        logger.debug(f"Today plan cache hit (durable tier) for user {user_id}")
        self._set_fast_tier(cache_key, payload)
        return plan

    def put(self, user_id: Any, tasks_hash: str, plan: TodayPlan) -> None:
        """
        Upserts the user's plan. Last writer wins.
        """
        payload = plan.as_payload()

        try:
            TodayPlanCacheEntry.objects.update_or_create(
                user_id=user_id,
                defaults={
                    "tasks_hash": tasks_hash,
                    "summary": payload["summary"],
                    "advice": payload["advice"],
                    "focus": payload["focus"],
                },
            )
        except Exception as e:
            logger.error(f"Today plan cache write failure (durable tier): {str(e)}")

        self._set_fast_tier(self._generate_key(user_id, tasks_hash), payload)

    def _set_fast_tier(self, cache_key: str, payload: Dict[str, Any]) -> None:
        try:
            cache.set(cache_key, payload, timeout=self.ttl)
        except Exception as e:
            logger.error(f"Today plan cache write failure (fast tier): {str(e)}")

    def _generate_key(self, user_id: Any, tasks_hash: str) -> str:
        return f"today_plan_{self.version}_{user_id}_{tasks_hash}"
