from django.urls import path
from .views import list_create_view
from .views import retrieve_update_destroy_view
from .views import suggestion_view
from .views import today_plan_view

urlpatterns=[
    # GET and POST (List tasks and Create new task)
    path('',list_create_view,name="create-list-view"),

    # GET (?regenerate=true to bypass the cache)
    path('today/',today_plan_view,name="today-plan"),

    # POST transcript -> task draft
    path('suggest/',suggestion_view,name="task-suggest"),

    # GET, PUT, PATCH, DELETE (Detail and Manipulation)
    path('<uuid:pk>/',retrieve_update_destroy_view,name="task-detail")

]
