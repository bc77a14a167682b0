# tasks/ai_engine/orchestrator.py

from __future__ import annotations

import datetime
import json
import logging
from typing import Any, Dict, List, NamedTuple, Optional, Sequence

from .cache import TodayPlanCache, compute_tasks_hash
from .json_extract import extract_json_object
from .llm_client import LanguageModelClient, ModelError, ModelUnavailableError, get_llm_client
from .plan import (
    MAX_ADVICE_ITEMS,
    PLAN_SOURCE_AI,
    PLAN_SOURCE_EMPTY,
    PLAN_SOURCE_FALLBACK,
    TodayPlan,
    focus_item,
)
from .priority import parse_due_date, task_priority

# Configure logging for pipeline auditing
logger = logging.getLogger(__name__)

FALLBACK_FOCUS_SIZE = 5

# Why a model attempt produced no plan
FAILURE_NO_MODEL = "NO_MODEL_CONFIGURED"
FAILURE_MODEL_ERROR = "MODEL_ERROR"
FAILURE_EMPTY_RESPONSE = "EMPTY_RESPONSE"
FAILURE_JSON_PARSE = "JSON_PARSE_ERROR"
FAILURE_VALIDATION = "VALIDATION_ERROR"
FAILURE_NO_FOCUS = "NO_VALID_FOCUS"

EMPTY_STATE_SUMMARY = "Nothing is scheduled yet: pick one meaningful goal and turn it into a task."
EMPTY_STATE_ADVICE = [
    "Name one result you want to reach by the end of this week.",
    "Block a short session to brainstorm or review your plans.",
]

FALLBACK_ADVICE = [
    "Prepare everything the top task needs and block a dedicated time slot for it.",
    "Batch similar tasks together to cut down on context switching.",
]
FALLBACK_IDLE_SUMMARY = "Your agenda is clear! Use the time to plan ahead or take a restorative break."
FALLBACK_IDLE_ADVICE = [
    "Review this week's goals and plan the next sprint.",
    "Spend some time learning something new or recharging.",
]

SYSTEM_PROMPT = (
    "You are a productivity assistant that builds a focused plan for today.\n\n"
    "RULES:\n"
    "1. Use only the tasks provided; refer to them by their exact id.\n"
    "2. Weigh priority, importance and due dates; ignore tasks with status DONE.\n"
    "3. Keep every advice item short and actionable, at most 5 items.\n"
    "4. Return ONLY valid JSON. No markdown, no commentary.\n"
    '5. The output must strictly follow this schema: '
    '{"summary": "string", "advice": ["string"], '
    '"focus": [{"id": "task id", "suggestion": "optional string"}]}'
)


class PlanAttempt(NamedTuple):
    """Outcome of one model-backed generation: a plan, or why there is none."""
    plan: Optional[TodayPlan]
    failure: Optional[str] = None
    detail: str = ""


def _sort_due_key(task: Any) -> float:
    due = parse_due_date(getattr(task, "due_date", None))
    return due.timestamp() if due is not None else float("inf")


class PlanOrchestrator:
    """
    Produces the user's today plan.

    Pipeline:
      1. No tasks -> fixed empty-state plan (no cache, no model).
      2. Cache lookup keyed by the hash of the task list (skipped on force).
      3. One model call, output validated against the live task ids.
      4. Any failure -> deterministic fallback plan, which is never cached.

    generate() never raises; every path ends in a usable TodayPlan.
    """

    def __init__(
        self,
        client: Optional[LanguageModelClient] = None,
        cache: Optional[TodayPlanCache] = None,
    ):
        self._client = client
        self.cache_manager = cache if cache is not None else TodayPlanCache()

    @property
    def client(self) -> LanguageModelClient:
        return self._client if self._client is not None else get_llm_client()

    def generate(
        self,
        tasks: Sequence[Any],
        user_id: Any,
        force_regenerate: bool = False,
        now: Optional[datetime.datetime] = None,
    ) -> TodayPlan:
        tasks = list(tasks)
        if not tasks:
            return self.empty_plan()

        # One snapshot for every priority computed in this request
        now = now or datetime.datetime.now(datetime.timezone.utc)

        try:
            tasks_hash = compute_tasks_hash(tasks)

            # --- LAYER 1: CONTENT-ADDRESSED CACHE ---
            if not force_regenerate:
                cached_plan = self.cache_manager.get(user_id, tasks_hash)
                if cached_plan is not None:
                    logger.info(f"Orchestrator: Cached today plan for user {user_id}")
                    return cached_plan

            # --- LAYER 2: MODEL GENERATION ---
            attempt = self._attempt_model_plan(tasks, now)
        except Exception as e:
            logger.exception(f"Orchestrator: Pipeline failure for user {user_id}: {str(e)}")
            attempt = PlanAttempt(None, FAILURE_MODEL_ERROR, str(e))

        # --- LAYER 3: SINGLE FALLBACK DECISION POINT ---
        if attempt.plan is None:
            log = logger.info if attempt.failure == FAILURE_NO_MODEL else logger.warning
            log(f"Orchestrator: Fallback plan for user {user_id} ({attempt.failure}: {attempt.detail})")
            return self.fallback_plan(tasks, now)

        self.cache_manager.put(user_id, tasks_hash, attempt.plan)
        return attempt.plan

    def empty_plan(self) -> TodayPlan:
        return TodayPlan(
            summary=EMPTY_STATE_SUMMARY,
            advice=list(EMPTY_STATE_ADVICE),
            focus=[],
            source=PLAN_SOURCE_EMPTY,
        )

    def fallback_plan(self, tasks: Sequence[Any], now: Optional[datetime.datetime] = None) -> TodayPlan:
        """
        Deterministic plan: active tasks by priority (desc), then earliest due date.
        """
        now = now or datetime.datetime.now(datetime.timezone.utc)
        active = [task for task in tasks if (task.status or "").upper() != "DONE"]
        ranked = sorted(active, key=lambda task: (-task_priority(task, now), _sort_due_key(task)))

        if not ranked:
            return TodayPlan(
                summary=FALLBACK_IDLE_SUMMARY,
                advice=list(FALLBACK_IDLE_ADVICE),
                focus=[],
                source=PLAN_SOURCE_FALLBACK,
            )

        return TodayPlan(
            summary=(
                f"Start with “{ranked[0].title}”, then work through the rest "
                "in order of importance and deadline."
            ),
            advice=list(FALLBACK_ADVICE),
            focus=[focus_item(task) for task in ranked[:FALLBACK_FOCUS_SIZE]],
            source=PLAN_SOURCE_FALLBACK,
        )

    def _attempt_model_plan(self, tasks: List[Any], now: datetime.datetime) -> PlanAttempt:
        formatted_tasks = [self._format_task(task, now) for task in tasks]
        user_content = (
            "Here are my tasks with priority and due dates: "
            f"{json.dumps(formatted_tasks, ensure_ascii=False)}"
        )

        try:
            raw_content = self.client.complete(SYSTEM_PROMPT, user_content)
        except ModelUnavailableError as e:
            return PlanAttempt(None, FAILURE_NO_MODEL, str(e))
        except ModelError as e:
            return PlanAttempt(None, FAILURE_MODEL_ERROR, f"{e.error_code}: {e}")

        if not raw_content or not raw_content.strip():
            return PlanAttempt(None, FAILURE_EMPTY_RESPONSE, "Model returned no text")

        try:
            data = extract_json_object(raw_content)
        except ValueError as e:
            return PlanAttempt(None, FAILURE_JSON_PARSE, str(e))

        return self._validate_plan(data, tasks)

    def _format_task(self, task: Any, now: datetime.datetime) -> Dict[str, Any]:
        due = parse_due_date(getattr(task, "due_date", None))
        return {
            "id": str(task.id),
            "title": task.title,
            "status": task.status,
            "importance": task.importance,
            "priority": task_priority(task, now),
            "due_date": due.isoformat() if due is not None else None,
            "has_note": bool((getattr(task, "description", None) or "").strip()),
        }

    def _validate_plan(self, data: Dict[str, Any], tasks: List[Any]) -> PlanAttempt:
        """
        Applies the output contract. Unknown focus ids are dropped silently;
        a plan left with no focus at all is rejected.
        """
        summary = data.get("summary")
        if not isinstance(summary, str) or not summary.strip():
            return PlanAttempt(None, FAILURE_VALIDATION, "summary must be a non-empty string")

        raw_advice = data.get("advice", [])
        if raw_advice is None:
            raw_advice = []
        if not isinstance(raw_advice, list):
            return PlanAttempt(None, FAILURE_VALIDATION, "advice must be a list")
        advice = [item.strip() for item in raw_advice if isinstance(item, str) and item.strip()]

        raw_focus = data.get("focus")
        task_map = {str(task.id): task for task in tasks}
        focus: List[Dict[str, Any]] = []
        seen = set()
        for entry in raw_focus if isinstance(raw_focus, list) else []:
            if not isinstance(entry, dict):
                continue
            task_id = str(entry.get("id"))
            task = task_map.get(task_id)
            if task is None or task_id in seen:
                continue
            seen.add(task_id)
            suggestion = entry.get("suggestion")
            focus.append(focus_item(task, suggestion.strip() if isinstance(suggestion, str) else None))

        if not focus:
            return PlanAttempt(None, FAILURE_NO_FOCUS, "no focus entry matched a current task")

        return PlanAttempt(
            TodayPlan(
                summary=summary.strip(),
                advice=advice[:MAX_ADVICE_ITEMS],
                focus=focus,
                source=PLAN_SOURCE_AI,
            )
        )


def generate_today_plan(
    tasks: Sequence[Any],
    user_id: Any,
    force_regenerate: bool = False,
) -> TodayPlan:
    """Module-level entry point using the process-wide model client."""
    return PlanOrchestrator().generate(tasks, user_id, force_regenerate=force_regenerate)
