# tasks/tests/test_priority.py
"""
Priority Scorer Unit Tests
==========================

Tests for the deterministic score every task carries:

    score = round(0.6 * importance / 5 + 0.4 / (hours_remaining + 1), 2)

Test Philosophy:
----------------
- Test MATH, not just models
- Test edge cases (None, overdue, far-future, garbage input)
- Every test pins `now`, so nothing depends on the wall clock
"""

from __future__ import annotations

import datetime
from fractions import Fraction

from django.test import SimpleTestCase

from tasks.ai_engine.priority import (
    DEFAULT_LOOKAHEAD_HOURS,
    calc_priority,
    compute_urgency,
    hours_remaining,
    parse_due_date,
    task_priority,
)
from tasks.models import Task


FIXED_NOW = datetime.datetime(2024, 1, 15, 12, 0, 0, tzinfo=datetime.timezone.utc)


def hours_from_now(hours: float) -> datetime.datetime:
    return FIXED_NOW + datetime.timedelta(hours=hours)


class TestCalcPriority(SimpleTestCase):
    """Tests for calc_priority()."""

    def test_important_task_due_in_one_hour(self) -> None:
        """0.6 * 1.0 + 0.4 * 1/2 = 0.8"""
        self.assertEqual(calc_priority(5, hours_from_now(1), now=FIXED_NOW), 0.8)

    def test_unimportant_task_without_deadline(self) -> None:
        """0.6 * 0.2 + 0.4 * 1/49 ≈ 0.128 -> 0.13"""
        self.assertEqual(calc_priority(1, None, now=FIXED_NOW), 0.13)

    def test_imminent_important_task_outranks_undated_unimportant_one(self) -> None:
        urgent = calc_priority(5, hours_from_now(1), now=FIXED_NOW)
        relaxed = calc_priority(1, None, now=FIXED_NOW)

        self.assertGreater(urgent, relaxed)

    def test_overdue_task_gets_full_urgency(self) -> None:
        """Overdue tasks clamp to 0 hours remaining: urgency contributes the full 0.4."""
        self.assertEqual(calc_priority(5, hours_from_now(-3), now=FIXED_NOW), 1.0)
        self.assertEqual(calc_priority(1, hours_from_now(-3), now=FIXED_NOW), 0.52)

    def test_overdue_equals_due_right_now(self) -> None:
        for importance in range(1, 6):
            self.assertEqual(
                calc_priority(importance, hours_from_now(-500), now=FIXED_NOW),
                calc_priority(importance, FIXED_NOW, now=FIXED_NOW),
            )

    def test_missing_deadline_behaves_like_lookahead_horizon(self) -> None:
        self.assertEqual(
            calc_priority(3, None, now=FIXED_NOW),
            calc_priority(3, hours_from_now(DEFAULT_LOOKAHEAD_HOURS), now=FIXED_NOW),
        )
        self.assertEqual(calc_priority(3, None, now=FIXED_NOW), 0.37)

    def test_monotonically_non_increasing_as_deadline_moves_away(self) -> None:
        offsets = [-10, 0, 0.5, 1, 2, 5, 12, 24, 48, 100, 1000, 10000]
        for importance in range(1, 6):
            scores = [calc_priority(importance, hours_from_now(h), now=FIXED_NOW) for h in offsets]
            for earlier, later in zip(scores, scores[1:]):
                self.assertGreaterEqual(earlier, later, f"importance={importance}: {scores}")

    def test_result_always_within_unit_interval(self) -> None:
        importances = [None, -5, 0, 1, 2, 3, 4, 5, 6, 100, 2.5, "abc", float("nan")]
        offsets = [-1e6, -1, 0, 1, 48, 1e6]
        for importance in importances:
            for hours in offsets + [None]:
                due = hours_from_now(hours) if hours is not None else None
                score = calc_priority(importance, due, now=FIXED_NOW)
                self.assertGreaterEqual(score, 0.0)
                self.assertLessEqual(score, 1.0)

    def test_same_inputs_give_same_output(self) -> None:
        due = hours_from_now(7)
        first = calc_priority(4, due, now=FIXED_NOW)
        for _ in range(5):
            self.assertEqual(calc_priority(4, due, now=FIXED_NOW), first)

    def test_result_has_two_decimal_places(self) -> None:
        score = calc_priority(4, hours_from_now(7), now=FIXED_NOW)
        self.assertEqual(score, round(score, 2))

    # -----------------------------------------------------------------------
    # Importance Clamping
    # -----------------------------------------------------------------------

    def test_importance_above_range_is_clamped_to_five(self) -> None:
        self.assertEqual(
            calc_priority(10, None, now=FIXED_NOW),
            calc_priority(5, None, now=FIXED_NOW),
        )

    def test_importance_below_range_is_clamped_to_one(self) -> None:
        self.assertEqual(
            calc_priority(0, None, now=FIXED_NOW),
            calc_priority(1, None, now=FIXED_NOW),
        )

    def test_huge_integer_importance_is_clamped(self) -> None:
        self.assertEqual(
            calc_priority(10 ** 400, None, now=FIXED_NOW),
            calc_priority(5, None, now=FIXED_NOW),
        )
        self.assertEqual(
            calc_priority(-(10 ** 400), None, now=FIXED_NOW),
            calc_priority(1, None, now=FIXED_NOW),
        )

    def test_missing_or_invalid_importance_defaults_to_three(self) -> None:
        expected = calc_priority(3, None, now=FIXED_NOW)
        for importance in (None, "abc", True, float("nan"), object(), Fraction(10 ** 400)):
            self.assertEqual(calc_priority(importance, None, now=FIXED_NOW), expected, repr(importance))

    def test_numeric_string_importance_is_accepted(self) -> None:
        self.assertEqual(
            calc_priority("5", None, now=FIXED_NOW),
            calc_priority(5, None, now=FIXED_NOW),
        )

    # -----------------------------------------------------------------------
    # Due Date Inputs
    # -----------------------------------------------------------------------

    def test_iso_string_due_date(self) -> None:
        self.assertEqual(calc_priority(5, "2024-01-15T13:00:00Z", now=FIXED_NOW), 0.8)

    def test_naive_datetime_is_treated_as_utc(self) -> None:
        naive = datetime.datetime(2024, 1, 15, 13, 0, 0)
        self.assertEqual(calc_priority(5, naive, now=FIXED_NOW), 0.8)

    def test_date_only_means_midnight_utc(self) -> None:
        # Midnight of the same day is already 12 hours in the past
        self.assertEqual(calc_priority(5, datetime.date(2024, 1, 15), now=FIXED_NOW), 1.0)

    def test_unparseable_due_date_counts_as_no_deadline(self) -> None:
        expected = calc_priority(4, None, now=FIXED_NOW)
        for bad in ("not a date", "", "2024-02-30", 12345):
            self.assertEqual(calc_priority(4, bad, now=FIXED_NOW), expected, repr(bad))

    def test_now_defaults_to_current_time(self) -> None:
        """Without `now`, a deadline far in the past still gives full urgency."""
        long_ago = datetime.datetime(2000, 1, 1, tzinfo=datetime.timezone.utc)
        self.assertEqual(calc_priority(5, long_ago), 1.0)


class TestUrgencyHelpers(SimpleTestCase):
    """Tests for hours_remaining(), compute_urgency() and parse_due_date()."""

    def test_hours_remaining_never_negative(self) -> None:
        self.assertEqual(hours_remaining(hours_from_now(-2), now=FIXED_NOW), 0.0)

    def test_hours_remaining_for_future_deadline(self) -> None:
        self.assertAlmostEqual(hours_remaining(hours_from_now(5.5), now=FIXED_NOW), 5.5)

    def test_hours_remaining_without_deadline(self) -> None:
        self.assertEqual(hours_remaining(None, now=FIXED_NOW), DEFAULT_LOOKAHEAD_HOURS)

    def test_urgency_is_one_when_due_now(self) -> None:
        self.assertEqual(compute_urgency(FIXED_NOW, now=FIXED_NOW), 1.0)

    def test_urgency_halves_one_hour_out(self) -> None:
        self.assertAlmostEqual(compute_urgency(hours_from_now(1), now=FIXED_NOW), 0.5)

    def test_parse_due_date_variants(self) -> None:
        self.assertIsNone(parse_due_date(None))
        self.assertIsNone(parse_due_date("   "))
        self.assertEqual(parse_due_date("2024-01-16"), datetime.datetime(2024, 1, 16, tzinfo=datetime.timezone.utc))
        self.assertEqual(parse_due_date(FIXED_NOW), FIXED_NOW)


class TestTaskPriority(SimpleTestCase):
    """Tests for task_priority(), which prefers the stored score."""

    def test_uses_stored_score_when_present(self) -> None:
        task = Task(title="Stored", importance=1, due_date=None, ai_priority_score=0.99)
        self.assertEqual(task_priority(task, now=FIXED_NOW), 0.99)

    def test_computes_score_when_missing(self) -> None:
        task = Task(title="Computed", importance=5, due_date=hours_from_now(1), ai_priority_score=None)
        self.assertEqual(task_priority(task, now=FIXED_NOW), 0.8)
