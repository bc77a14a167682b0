# tasks/serializers.py

from rest_framework import serializers
from .models import Task
from . import services
import logging

logger = logging.getLogger(__name__)

class TaskSerializer(serializers.ModelSerializer):
    # Accepts any casing ("done", "Done"); stored upper-case
    status = serializers.CharField(required=False, max_length=20)

    class Meta:
        model = Task
        # explicit whitelist: only user-truth fields + system-read fields required by UI
        fields = [
            'id', 'title', 'description', 'due_date', 'importance', 'status',
            'source', 'ai_priority_score', 'created_at', 'updated_at'
        ]
        read_only_fields = [
            'id', 'ai_priority_score', 'created_at', 'updated_at'
        ]
        extra_kwargs = {
            'description': {'allow_blank': True, 'trim_whitespace': False},
            'source': {'required': False},
        }

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("Title is required.")
        return value

    def validate_importance(self, value):
        if not (1 <= value <= 5):
            raise serializers.ValidationError("importance must be an integer between 1 and 5.")
        return value

    def validate_status(self, value):
        normalized = value.strip().upper()
        if normalized not in Task.Status.values:
            raise serializers.ValidationError(
                f"status must be one of: {', '.join(Task.Status.values)}."
            )
        return normalized

    def validate(self, attrs):
        if self.instance is not None and not attrs:
            raise serializers.ValidationError("At least one field must be provided.")
        return attrs

    def create(self, validated_data):
        """
        Persist the task through the task store so the priority score is
        computed on the way in.
        """
        user = self.context['request'].user
        if not user or not user.is_authenticated:
            raise serializers.ValidationError("Authentication required to create a task.")
        return services.create_task(user, **validated_data)

    def update(self, instance, validated_data):
        # `source` is fixed at creation time
        validated_data.pop('source', None)
        return services.update_task(instance, validated_data)


class SuggestionRequestSerializer(serializers.Serializer):
    transcript = serializers.CharField(allow_blank=False, trim_whitespace=True, max_length=10000)

    def to_internal_value(self, data):
        # CharField would coerce numbers to strings; a transcript must be text
        if isinstance(data, dict) and 'transcript' in data and not isinstance(data['transcript'], str):
            raise serializers.ValidationError({'transcript': ["A valid string is required."]})
        return super().to_internal_value(data)


class TodayPlanQuerySerializer(serializers.Serializer):
    regenerate = serializers.BooleanField(required=False, default=False)
