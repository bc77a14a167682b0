# tasks/tests/__init__.py
"""
Task App Test Suite
===================

Unit and integration tests for the tasks application.

Modules:
--------
- test_priority: Priority score math (importance, urgency, clamping)
- test_json_extract: Recovery of JSON from wrapped model output
- test_llm_client: OpenAI wrapper configuration and error mapping
- test_plan_cache: Task-list hashing and the two-tier plan cache
- test_orchestration: Today plan pipeline (cache, model, validation, fallback)
- test_suggester: Transcript-to-task drafts
- test_services: Task store write paths and score refresh
- test_api: HTTP endpoints

Running Tests:
--------------
    # Run all task tests
    python manage.py test tasks

    # Or through pytest from the repository root
    pytest backend/tasks
"""
