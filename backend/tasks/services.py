# tasks/services.py
"""
Task store: the only write path for Task rows.

Every write that touches `importance` or `due_date` refreshes
`ai_priority_score`; writes that touch neither leave it alone.
"""

import logging
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.db import transaction

from .ai_engine.priority import DEFAULT_IMPORTANCE, calc_priority
from .models import Task

logger = logging.getLogger(__name__)

DEFAULT_STATUS = Task.Status.TODO
DEFAULT_SOURCE = "manual"

EDITABLE_FIELDS = ("title", "description", "due_date", "importance", "status")
PRIORITY_INPUT_FIELDS = ("importance", "due_date")


def _sanitize_nullable_string(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def _sanitize_status(value: Optional[str]) -> str:
    cleaned = _sanitize_nullable_string(value)
    return cleaned.upper() if cleaned else DEFAULT_STATUS


def _schedule_plan_refresh(user_id: Any) -> None:
    """Warm the user's today plan once the current transaction commits."""
    if not getattr(settings, "TODAY_PLAN_PREWARM_ON_WRITE", False):
        return

    def trigger_warmup():
        from .ai_engine.celery_tasks import warm_today_plan
        warm_today_plan.delay(user_id)

    transaction.on_commit(trigger_warmup)


def list_tasks(user) -> List[Task]:
    return list(Task.objects.filter(user=user))


def get_task(user, task_id) -> Optional[Task]:
    return Task.objects.filter(user=user, id=task_id).first()


def create_task(
    user,
    title: str,
    description: Optional[str] = None,
    due_date=None,
    importance: Optional[int] = None,
    status: Optional[str] = None,
    source: Optional[str] = None,
) -> Task:
    if importance is None:
        importance = DEFAULT_IMPORTANCE

    with transaction.atomic():
        task = Task.objects.create(
            user=user,
            title=title.strip(),
            description=_sanitize_nullable_string(description),
            due_date=due_date,
            importance=importance,
            status=_sanitize_status(status),
            source=_sanitize_nullable_string(source) or DEFAULT_SOURCE,
            ai_priority_score=calc_priority(importance, due_date),
        )
        _schedule_plan_refresh(user.pk)

    logger.info(f"Created Task {task.id} (priority {task.ai_priority_score})")
    return task


def update_task(task: Task, changes: Dict[str, Any]) -> Task:
    """
    Applies a partial update. Keys outside EDITABLE_FIELDS are ignored.
    """
    changes = {key: value for key, value in changes.items() if key in EDITABLE_FIELDS}
    update_fields = []

    if "title" in changes:
        task.title = changes["title"].strip()
        update_fields.append("title")
    if "description" in changes:
        task.description = _sanitize_nullable_string(changes["description"])
        update_fields.append("description")
    if "due_date" in changes:
        task.due_date = changes["due_date"]
        update_fields.append("due_date")
    if "importance" in changes:
        importance = changes["importance"]
        task.importance = importance if importance is not None else DEFAULT_IMPORTANCE
        update_fields.append("importance")
    if "status" in changes:
        task.status = _sanitize_status(changes["status"])
        update_fields.append("status")

    if not update_fields:
        return task

    if any(field in changes for field in PRIORITY_INPUT_FIELDS):
        task.ai_priority_score = calc_priority(task.importance, task.due_date)
        update_fields.append("ai_priority_score")

    with transaction.atomic():
        task.save(update_fields=update_fields + ["updated_at"])
        _schedule_plan_refresh(task.user_id)

    logger.info(f"Updated Task {task.id}: {', '.join(update_fields)}")
    return task


def delete_task(user, task_id) -> bool:
    with transaction.atomic():
        deleted, _ = Task.objects.filter(user=user, id=task_id).delete()
        if deleted:
            _schedule_plan_refresh(user.pk)

    if not deleted:
        logger.warning(f"Delete requested for missing Task {task_id}")
    return bool(deleted)
