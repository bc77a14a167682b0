# tasks/tests/test_suggester.py

from __future__ import annotations

import json
from unittest.mock import patch

from django.test import SimpleTestCase

from tasks.ai_engine.suggester import (
    DEFAULT_DESCRIPTION,
    DEFAULT_TITLE,
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    local_suggestion,
    suggest_task,
)
from tasks.tests.fakes import FakeModelClient, failing_client, unconfigured_client


class TestLocalSuggestion(SimpleTestCase):
    """Drafts cut from the transcript when no model answers."""

    def test_single_sentence_without_terminator(self) -> None:
        result = suggest_task("Buy milk and eggs tomorrow morning", client=unconfigured_client())

        self.assertEqual(result, {
            "title": "Buy milk and eggs tomorrow morning",
            "description": "Buy milk and eggs tomorrow morning",
        })

    def test_title_stops_at_first_sentence_terminator(self) -> None:
        cases = {
            "Call the dentist. Ask about the invoice.": "Call the dentist",
            "Urgent! Fix the roof before it rains": "Urgent",
            "Did I pay rent? Check the bank app": "Did I pay rent",
            "Pick up parcel\nIt is at the post office": "Pick up parcel",
        }
        for transcript, title in cases.items():
            self.assertEqual(local_suggestion(transcript)["title"], title, transcript)

    def test_description_keeps_whole_transcript(self) -> None:
        result = local_suggestion("  Call the dentist. Ask about the invoice.  ")

        self.assertEqual(result["description"], "Call the dentist. Ask about the invoice.")

    def test_title_is_truncated_to_limit(self) -> None:
        transcript = "word " * 40

        result = local_suggestion(transcript)

        self.assertLessEqual(len(result["title"]), TITLE_MAX_LENGTH)
        self.assertTrue(transcript.startswith(result["title"]))

    def test_description_is_truncated_to_limit(self) -> None:
        transcript = "x" * 1000

        result = local_suggestion(transcript)

        self.assertEqual(len(result["description"]), DESCRIPTION_MAX_LENGTH)
        self.assertEqual(len(result["title"]), TITLE_MAX_LENGTH)

    def test_empty_transcript_uses_generic_labels(self) -> None:
        for transcript in ("", "   ", None):
            self.assertEqual(
                local_suggestion(transcript),
                {"title": DEFAULT_TITLE, "description": DEFAULT_DESCRIPTION},
            )

    def test_leading_terminator_gives_default_title(self) -> None:
        result = local_suggestion(". then something")

        self.assertEqual(result["title"], DEFAULT_TITLE)
        self.assertEqual(result["description"], ". then something")


class TestModelSuggestion(SimpleTestCase):

    def test_uses_model_title_and_description(self) -> None:
        client = FakeModelClient(responses=[{"title": "Buy groceries", "description": "Milk and eggs"}])

        result = suggest_task("I need to get milk and eggs", client=client)

        self.assertEqual(result, {"title": "Buy groceries", "description": "Milk and eggs"})
        self.assertEqual(client.call_count, 1)
        self.assertIn("I need to get milk and eggs", client.calls[0][1])

    def test_fenced_model_output_is_accepted(self) -> None:
        payload = json.dumps({"title": "Call mom", "description": "Sunday evening"})
        client = FakeModelClient(responses=[f"```json\n{payload}\n```"])

        self.assertEqual(suggest_task("call mom on sunday", client=client)["title"], "Call mom")

    def test_model_output_is_truncated(self) -> None:
        client = FakeModelClient(responses=[{"title": "T" * 200, "description": "D" * 1000}])

        result = suggest_task("anything", client=client)

        self.assertEqual(len(result["title"]), TITLE_MAX_LENGTH)
        self.assertEqual(len(result["description"]), DESCRIPTION_MAX_LENGTH)

    def test_empty_model_description_gets_default_label(self) -> None:
        client = FakeModelClient(responses=[{"title": "Water plants", "description": ""}])

        result = suggest_task("water the plants", client=client)

        self.assertEqual(result["description"], DEFAULT_DESCRIPTION)

    def test_bad_shapes_fall_back_to_local_draft(self) -> None:
        transcript = "Renew passport. Book appointment online"
        expected = local_suggestion(transcript)
        for response in (
            "not json at all",
            "[1, 2, 3]",
            {"description": "no title"},
            {"title": "   ", "description": "blank title"},
            {"title": 42, "description": "numeric title"},
            {"title": "Renew", "description": None},
        ):
            client = FakeModelClient(responses=[response])
            self.assertEqual(suggest_task(transcript, client=client), expected, repr(response))

    def test_deeply_nested_model_output_falls_back_to_local_draft(self) -> None:
        client = FakeModelClient(responses=["[" * 100000 + "]" * 100000])

        result = suggest_task("Buy milk", client=client)

        self.assertEqual(result, local_suggestion("Buy milk"))

    def test_model_error_falls_back_to_local_draft(self) -> None:
        transcript = "Fix the bike. The chain is loose"

        result = suggest_task(transcript, client=failing_client())

        self.assertEqual(result, local_suggestion(transcript))

    def test_blank_transcript_skips_model(self) -> None:
        client = FakeModelClient(responses=[{"title": "x", "description": "y"}])

        result = suggest_task("   ", client=client)

        self.assertEqual(client.call_count, 0)
        self.assertEqual(result["title"], DEFAULT_TITLE)

    def test_defaults_to_shared_client(self) -> None:
        with patch("tasks.ai_engine.suggester.get_llm_client", return_value=unconfigured_client()) as factory:
            result = suggest_task("Buy milk and eggs tomorrow morning")

        factory.assert_called_once()
        self.assertEqual(result["title"], "Buy milk and eggs tomorrow morning")
