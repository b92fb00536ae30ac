import os

from celery import Celery
from celery.schedules import crontab

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'proconnect.settings')
app = Celery('proconnect')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()

# Drop read notifications past the retention window once a day
app.conf.beat_schedule = {
    'purge-read-notifications': {
        'task': 'network.tasks.purge_read_notifications',
        'schedule': crontab(hour=3, minute=0),
    },
}
