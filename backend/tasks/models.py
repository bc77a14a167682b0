import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class Task(models.Model):
    """
    Represents a personal task for the user.

    `ai_priority_score` is a denormalized copy of calc_priority() taken at the
    last write that touched `importance` or `due_date`. It is refreshed by
    tasks.services, never by the model itself.
    """

    class Status(models.TextChoices):
        TODO = "TODO", _("To do")
        IN_PROGRESS = "IN_PROGRESS", _("In progress")
        DONE = "DONE", _("Done")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='tasks',
        verbose_name=_("user")
    )

    title = models.CharField(max_length=200, verbose_name=_("title"))
    description = models.TextField(null=True, blank=True, verbose_name=_("description"))

    importance = models.PositiveSmallIntegerField(
        default=3,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        verbose_name=_("importance"),
        help_text=_("How much the task matters (1=low to 5=high).")
    )
    due_date = models.DateTimeField(
        null=True, blank=True,
        verbose_name=_("due date"),
        help_text=_("The deadline for the task.")
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.TODO,
        verbose_name=_("status")
    )
    source = models.CharField(
        max_length=20,
        default="manual",
        verbose_name=_("source"),
        help_text=_("Where the task came from (manual, voice).")
    )
    ai_priority_score = models.FloatField(
        null=True, blank=True,
        verbose_name=_("priority score"),
        help_text=_("Priority computed from importance and due date.")
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        verbose_name = _("Task")
        verbose_name_plural = _("Tasks")
        # Highest priority first, unscored tasks last, newest first on ties
        ordering = [models.F('ai_priority_score').desc(nulls_last=True), '-created_at']

    def __str__(self):
        return f"Task for {self.user.email}: {self.title}"


class TodayPlanCacheEntry(models.Model):
    """
    The last successfully generated today plan for a user.

    At most one row per user. The row is only valid while `tasks_hash`
    matches the hash of the user's current task list; stale rows are simply
    overwritten by the next successful generation.
    """
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="today_plan_cache",
        verbose_name=_("user")
    )
    tasks_hash = models.CharField(max_length=64, verbose_name=_("tasks hash"))
    summary = models.TextField(verbose_name=_("summary"))
    advice = models.JSONField(default=list, verbose_name=_("advice"))
    focus = models.JSONField(default=list, verbose_name=_("focus"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        verbose_name = _("Today plan cache entry")
        verbose_name_plural = _("Today plan cache entries")

    def __str__(self):
        return f"Today plan for user {self.user_id} ({self.tasks_hash[:8]})"
