# tasks/ai_engine/priority.py

import datetime
import math
from typing import Any, Optional, Union

from django.utils.dateparse import parse_date, parse_datetime

# Tasks without a deadline are scored as if due this many hours from now
DEFAULT_LOOKAHEAD_HOURS = 48.0

DEFAULT_IMPORTANCE = 3
IMPORTANCE_MIN = 1
IMPORTANCE_MAX = 5

IMPORTANCE_WEIGHT = 0.6
URGENCY_WEIGHT = 0.4

DueDate = Union[datetime.datetime, datetime.date, str, None]


def _utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def _as_aware(value: datetime.datetime) -> datetime.datetime:
    # Naive datetimes are taken to be UTC
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value


def parse_due_date(value: Any) -> Optional[datetime.datetime]:
    """
    Normalize a due date to an aware datetime, or None when absent/unparseable.

    Accepts datetimes, dates (midnight UTC) and ISO-8601 strings.
    """
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        return _as_aware(value)
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time.min, tzinfo=datetime.timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = parse_datetime(text)
            if parsed is not None:
                return _as_aware(parsed)
            parsed_date = parse_date(text)
        except ValueError:
            # Well formed but impossible values, e.g. "2024-02-30"
            return None
        if parsed_date is not None:
            return parse_due_date(parsed_date)
    return None


def _resolve_importance(importance: Any) -> float:
    if importance is None or isinstance(importance, bool):
        return float(DEFAULT_IMPORTANCE)
    if isinstance(importance, int):
        # Clamp first: ints beyond float range cannot be converted
        importance = max(IMPORTANCE_MIN, min(IMPORTANCE_MAX, importance))
    try:
        value = float(importance)
    except (TypeError, ValueError, OverflowError):
        return float(DEFAULT_IMPORTANCE)
    if math.isnan(value):
        return float(DEFAULT_IMPORTANCE)
    return max(float(IMPORTANCE_MIN), min(float(IMPORTANCE_MAX), value))


def hours_remaining(due_date: DueDate, now: Optional[datetime.datetime] = None) -> float:
    """
    Hours left until the deadline, clamped at 0 for overdue tasks.

    A missing deadline yields DEFAULT_LOOKAHEAD_HOURS.
    """
    due = parse_due_date(due_date)
    if due is None:
        return DEFAULT_LOOKAHEAD_HOURS

    reference = _as_aware(now) if now is not None else _utc_now()
    raw_hours = (due - reference).total_seconds() / 3600.0
    return max(0.0, raw_hours)


def compute_urgency(due_date: DueDate, now: Optional[datetime.datetime] = None) -> float:
    """
    Proximity-to-deadline figure in (0, 1]: 1.0 when due now or overdue,
    decaying as 1 / (hours + 1).
    """
    return 1.0 / (hours_remaining(due_date, now) + 1.0)


def calc_priority(
    importance: Any = DEFAULT_IMPORTANCE,
    due_date: DueDate = None,
    now: Optional[datetime.datetime] = None,
) -> float:
    """
    Calculates a task's priority score between 0.0 and 1.0.

    score = 0.6 * (importance / 5) + 0.4 * urgency, rounded to 2 places.

    Importance dominates, but an imminent low-importance task can still
    outrank a distant important one. The function is pure and never raises:
    invalid importance falls back to 3, an invalid due date to "no deadline".

    importance: 1..5 (clamped)
    due_date: datetime, date, ISO string or None
    now: reference instant; pass one snapshot when scoring a batch of tasks
    """
    importance_score = _resolve_importance(importance) / IMPORTANCE_MAX
    urgency = compute_urgency(due_date, now)
    score = IMPORTANCE_WEIGHT * importance_score + URGENCY_WEIGHT * urgency
    return round(score, 2)


def task_priority(task: Any, now: Optional[datetime.datetime] = None) -> float:
    """Stored score when present, otherwise computed from the task's fields."""
    stored = getattr(task, "ai_priority_score", None)
    if stored is not None:
        return float(stored)
    return calc_priority(getattr(task, "importance", None), getattr(task, "due_date", None), now)
