from django.apps import AppConfig


class TasksConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'tasks'

    def ready(self):
        # Build the shared model client once, at startup
        from .ai_engine.llm_client import get_llm_client
        get_llm_client()
