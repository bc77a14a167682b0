import uuid

import django.core.validators
import django.db.models.deletion
import django.db.models.expressions
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Task",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=200, verbose_name="title")),
                ("description", models.TextField(blank=True, null=True, verbose_name="description")),
                (
                    "importance",
                    models.PositiveSmallIntegerField(
                        default=3,
                        help_text="How much the task matters (1=low to 5=high).",
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(5),
                        ],
                        verbose_name="importance",
                    ),
                ),
                (
                    "due_date",
                    models.DateTimeField(blank=True, help_text="The deadline for the task.", null=True, verbose_name="due date"),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("TODO", "To do"), ("IN_PROGRESS", "In progress"), ("DONE", "Done")],
                        default="TODO",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                (
                    "source",
                    models.CharField(
                        default="manual",
                        help_text="Where the task came from (manual, voice).",
                        max_length=20,
                        verbose_name="source",
                    ),
                ),
                (
                    "ai_priority_score",
                    models.FloatField(
                        blank=True,
                        help_text="Priority computed from importance and due date.",
                        null=True,
                        verbose_name="priority score",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tasks",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="user",
                    ),
                ),
            ],
            options={
                "verbose_name": "Task",
                "verbose_name_plural": "Tasks",
                "ordering": [
                    django.db.models.expressions.OrderBy(
                        django.db.models.expressions.F("ai_priority_score"),
                        descending=True,
                        nulls_last=True,
                    ),
                    "-created_at",
                ],
            },
        ),
        migrations.CreateModel(
            name="TodayPlanCacheEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("tasks_hash", models.CharField(max_length=64, verbose_name="tasks hash")),
                ("summary", models.TextField(verbose_name="summary")),
                ("advice", models.JSONField(default=list, verbose_name="advice")),
                ("focus", models.JSONField(default=list, verbose_name="focus")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="today_plan_cache",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="user",
                    ),
                ),
            ],
            options={
                "verbose_name": "Today plan cache entry",
                "verbose_name_plural": "Today plan cache entries",
            },
        ),
    ]
