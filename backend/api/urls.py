from django.urls import path,include

urlpatterns=[
    path('v1/tasks/',include('tasks.urls'))
]
