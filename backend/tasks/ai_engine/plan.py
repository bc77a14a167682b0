# tasks/ai_engine/plan.py

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# How a plan was produced
PLAN_SOURCE_EMPTY = "empty"
PLAN_SOURCE_CACHE = "cached"
PLAN_SOURCE_AI = "ai"
PLAN_SOURCE_FALLBACK = "fallback"

MAX_ADVICE_ITEMS = 5


def focus_item(task: Any, suggestion: Optional[str] = None) -> Dict[str, Any]:
    """Display snapshot of a task as it appears in a plan's focus list."""
    due_date = getattr(task, "due_date", None)
    if isinstance(due_date, (datetime.datetime, datetime.date)):
        due_date = due_date.isoformat()

    item: Dict[str, Any] = {
        "id": str(task.id),
        "title": task.title,
        "status": task.status,
        "importance": task.importance,
        "ai_priority_score": getattr(task, "ai_priority_score", None),
        "due_date": due_date,
    }
    if suggestion:
        item["suggestion"] = suggestion
    return item


@dataclass
class TodayPlan:
    """
    The daily plan contract returned to callers:

        {
            "summary": str,
            "advice": [str, ...],          # at most 5
            "focus": [{"id", "title", "status", "importance",
                       "ai_priority_score", "due_date", "suggestion"?}, ...],
            "source": "empty" | "cached" | "ai" | "fallback"
        }
    """
    summary: str
    advice: List[str] = field(default_factory=list)
    focus: List[Dict[str, Any]] = field(default_factory=list)
    source: str = PLAN_SOURCE_FALLBACK

    def as_payload(self) -> Dict[str, Any]:
        """The cacheable part of the plan (everything but `source`)."""
        return {
            "summary": self.summary,
            "advice": list(self.advice),
            "focus": [dict(item) for item in self.focus],
        }

    def as_dict(self) -> Dict[str, Any]:
        data = self.as_payload()
        data["source"] = self.source
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: str) -> "TodayPlan":
        summary = data["summary"]
        advice = data.get("advice") or []
        focus = data.get("focus") or []
        if not isinstance(summary, str) or not isinstance(advice, list) or not isinstance(focus, list):
            raise ValueError("Malformed today plan payload")
        return cls(summary=summary, advice=list(advice), focus=[dict(item) for item in focus], source=source)
