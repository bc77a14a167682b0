# tasks/ai_engine/celery_tasks.py

import logging
from typing import Optional

from celery import shared_task

from ..models import Task
from .orchestrator import PlanOrchestrator

# Configure logging for background worker monitoring
logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    ignore_result=False,
    time_limit=60,          # Hard limit for the task process
    soft_time_limit=45      # Soft limit to allow cleanup
)
def warm_today_plan(self, user_id: int) -> Optional[str]:
    """
    Worker: rebuild the user's today plan so the next page load hits the cache.
    Input = user_id only; tasks are fetched here.

    No retry policy: a failed model call just leaves the cache cold and the
    next request tries again. Returns the plan source ("cached", "ai", ...).
    """
    logger.info(f"Today plan warm-up started for user {user_id}")

    tasks = list(Task.objects.filter(user_id=user_id))
    plan = PlanOrchestrator().generate(tasks, user_id)

    logger.info(f"Today plan warm-up finished for user {user_id} (source={plan.source})")
    return plan.source
