from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from . import services
from .ai_engine.orchestrator import PlanOrchestrator
from .ai_engine.suggester import suggest_task
from .models import Task
from .serializers import SuggestionRequestSerializer, TaskSerializer, TodayPlanQuerySerializer


class TaskOwnerPermission(permissions.BasePermission):
    """
    Custom permission to only allow owners of a Task to view, edit, or delete it.
    """
    def has_object_permission(self, request, view, obj):
        return obj.user == request.user

class TaskListCreateView(generics.ListCreateAPIView):
    """
    GET: List the authenticated user's tasks, highest priority first.
    POST: Create a new task (priority score computed on write).
    """
    serializer_class = TaskSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        # ensure user only sees own tasks
        return Task.objects.filter(user=self.request.user)

list_create_view=TaskListCreateView.as_view()

class TaskRetrieveUpdateDestroyView(generics.RetrieveUpdateDestroyAPIView):
    """
    GET, PUT, PATCH, DELETE for a specific task instance.
    Used for marking tasks as done (PATCH status=DONE).
    """
    serializer_class = TaskSerializer
    permission_classes = [permissions.IsAuthenticated, TaskOwnerPermission]

    # Ensures the user can only access tasks they own.
    def get_queryset(self):
        return Task.objects.filter(user=self.request.user)

    def perform_destroy(self, instance):
        services.delete_task(self.request.user, instance.id)

retrieve_update_destroy_view=TaskRetrieveUpdateDestroyView.as_view()


class TodayPlanView(APIView):
    """
    GET: The user's plan for today.
    ?regenerate=true skips the cache and asks the model again.
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        query = TodayPlanQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        tasks = services.list_tasks(request.user)
        plan = PlanOrchestrator().generate(
            tasks,
            request.user.pk,
            force_regenerate=query.validated_data['regenerate'],
        )
        return Response(plan.as_dict())

today_plan_view=TodayPlanView.as_view()


class TaskSuggestionView(APIView):
    """
    POST {"transcript": "..."}: Draft a task (title, description) from free text.
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        payload = SuggestionRequestSerializer(data=request.data)
        payload.is_valid(raise_exception=True)

        suggestion = suggest_task(payload.validated_data['transcript'])
        return Response(suggestion, status=status.HTTP_200_OK)

suggestion_view=TaskSuggestionView.as_view()
