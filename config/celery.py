import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("stablemate")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Retry notifications that never reached the messaging pipeline
    "redispatch-undelivered-notifications": {
        "task": "notifications.redispatch_undelivered_notifications",
        "schedule": crontab(minute="*/10"),
        "options": {"expires": 540},
    },
}

app.conf.timezone = os.environ.get("DJANGO_TIME_ZONE", "UTC")
