# tasks/ai_engine/__init__.py
"""
AI Engine Package
=================

Core decision logic of the daily planner: how a task is scored, when a
cached today plan is still valid, and how plan generation degrades when the
language model is missing or misbehaves.

Modules:
--------
- priority: Deterministic priority score (importance + deadline urgency)
- cache: Content-addressed today plan cache (task-list hash, Redis + DB)
- orchestrator: Today plan pipeline (cache -> model -> validation -> fallback)
- suggester: Transcript-to-task drafts
- llm_client: OpenAI Chat Completions wrapper, shared per process
- json_extract: Recovery of JSON from fenced / wrapped model output
- plan: The TodayPlan contract
- celery_tasks: Background plan warm-up via Celery

Contract:
---------
generate_today_plan() always returns a TodayPlan:

    {
        "summary": str,
        "advice": [str, ...],
        "focus": [{"id": str, ..., "suggestion": str?}, ...],
        "source": "empty" | "cached" | "ai" | "fallback"
    }

Usage:
------
    from tasks.ai_engine import calc_priority, generate_today_plan, suggest_task

    score = calc_priority(importance=4, due_date=task.due_date)
    plan = generate_today_plan(tasks, user.id, force_regenerate=False)
    draft = suggest_task("Call the dentist tomorrow. Ask about the invoice.")
"""

from .cache import HASH_TRACKED_FIELDS, TodayPlanCache, compute_tasks_hash
from .llm_client import (
    LanguageModelClient,
    ModelError,
    ModelUnavailableError,
    get_llm_client,
)
from .orchestrator import PlanOrchestrator, generate_today_plan
from .plan import (
    PLAN_SOURCE_AI,
    PLAN_SOURCE_CACHE,
    PLAN_SOURCE_EMPTY,
    PLAN_SOURCE_FALLBACK,
    TodayPlan,
)
from .priority import calc_priority
from .suggester import suggest_task

__all__ = [
    # Core classes
    "PlanOrchestrator",
    "TodayPlanCache",
    "LanguageModelClient",
    "TodayPlan",
    # Functions
    "calc_priority",
    "compute_tasks_hash",
    "generate_today_plan",
    "suggest_task",
    "get_llm_client",
    # Errors
    "ModelError",
    "ModelUnavailableError",
    # Constants
    "HASH_TRACKED_FIELDS",
    "PLAN_SOURCE_AI",
    "PLAN_SOURCE_CACHE",
    "PLAN_SOURCE_EMPTY",
    "PLAN_SOURCE_FALLBACK",
]
