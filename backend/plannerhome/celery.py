import os
from dotenv import load_dotenv
load_dotenv()  # same .env as settings.py
from celery import Celery

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'plannerhome.settings')

app = Celery('plannerhome')

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
# - namespace='CELERY' means all celery-related configuration keys
#   should have a `CELERY_` prefix.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Plan warm-up lives in tasks.ai_engine, not in a tasks.py module,
# so it has to be named explicitly.
app.autodiscover_tasks(['tasks.ai_engine'], related_name='celery_tasks')
