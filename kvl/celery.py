"""
Celery application.
In dev and tests tasks run eagerly; production points the broker at Redis.
"""

import os
from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "kvl.settings_dev")

app = Celery("kvl")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
