# tasks/tests/test_json_extract.py

import json

from django.test import SimpleTestCase

from tasks.ai_engine.json_extract import extract_json, extract_json_object, strip_code_fence


class TestStripCodeFence(SimpleTestCase):

    def test_plain_text_is_only_trimmed(self) -> None:
        self.assertEqual(strip_code_fence('  {"a": 1}  '), '{"a": 1}')

    def test_json_fence_is_removed(self) -> None:
        self.assertEqual(strip_code_fence('```json\n{"a": 1}\n```'), '{"a": 1}')

    def test_bare_fence_is_removed(self) -> None:
        self.assertEqual(strip_code_fence('```\n{"a": 1}\n```'), '{"a": 1}')

    def test_upper_case_language_tag(self) -> None:
        self.assertEqual(strip_code_fence('```JSON {"a": 1}```'), '{"a": 1}')

    def test_missing_closing_fence_is_tolerated(self) -> None:
        self.assertEqual(strip_code_fence('```json\n{"a": 1}'), '{"a": 1}')

    def test_fence_in_the_middle_is_not_a_wrapper(self) -> None:
        text = 'see ```code``` here'
        self.assertEqual(strip_code_fence(text), text)


class TestExtractJson(SimpleTestCase):

    def test_parses_plain_json(self) -> None:
        self.assertEqual(extract_json('{"summary": "ok", "advice": []}'), {"summary": "ok", "advice": []})

    def test_parses_fenced_json(self) -> None:
        payload = {"summary": "Focus", "focus": [{"id": "a"}]}
        text = f"```json\n{json.dumps(payload, indent=2)}\n```"
        self.assertEqual(extract_json(text), payload)

    def test_recovers_object_wrapped_in_prose(self) -> None:
        text = 'Here is your plan: {"summary": "ok"} Hope it helps!'
        self.assertEqual(extract_json(text), {"summary": "ok"})

    def test_non_object_json_is_returned_as_is(self) -> None:
        self.assertEqual(extract_json("[1, 2, 3]"), [1, 2, 3])

    def test_empty_input_raises(self) -> None:
        for text in ("", "   ", None):
            with self.assertRaises(ValueError):
                extract_json(text)

    def test_garbage_raises_value_error(self) -> None:
        with self.assertRaises(ValueError):
            extract_json("definitely not json")

    def test_broken_object_raises_value_error(self) -> None:
        with self.assertRaises(ValueError):
            extract_json('```json\n{"summary": "unterminated\n```')

    def test_deeply_nested_json_raises_value_error(self) -> None:
        for text in (
            "[" * 100000 + "]" * 100000,
            'Plan: {"a": ' + "[" * 100000 + "]" * 100000 + "}",
        ):
            with self.assertRaises(ValueError):
                extract_json(text)


class TestExtractJsonObject(SimpleTestCase):

    def test_accepts_object(self) -> None:
        self.assertEqual(extract_json_object('{"title": "x"}'), {"title": "x"})

    def test_rejects_array(self) -> None:
        with self.assertRaises(ValueError):
            extract_json_object("[1, 2]")

    def test_rejects_scalar(self) -> None:
        with self.assertRaises(ValueError):
            extract_json_object('"just a string"')
