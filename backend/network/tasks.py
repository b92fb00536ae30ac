"""Background tasks for notification delivery and retention."""
import logging
from datetime import timedelta

from celery import shared_task
from django.conf import settings
from django.utils import timezone

from network.models import Notification
from network.realtime import send_to_user

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_kwargs={'max_retries': 3},
)
def push_notification(self, notification_id):
    """Push a stored notification to the recipient's live sockets."""
    from network.serializers import NotificationSerializer

    try:
        notification = Notification.objects.select_related(
            'sender__profile', 'related_user__profile', 'related_post', 'related_job'
        ).get(pk=notification_id)
    except Notification.DoesNotExist:
        logger.info("Notification %s no longer exists; nothing to push", notification_id)
        return False

    payload = dict(NotificationSerializer(notification).data)
    send_to_user(notification.recipient_id, 'notification', payload)
    return True


@shared_task
def purge_read_notifications(days=None):
    """Delete read notifications older than the retention window."""
    if days is None:
        days = settings.NOTIFICATION_RETENTION_DAYS
    cutoff = timezone.now() - timedelta(days=days)
    deleted, _ = Notification.objects.filter(is_read=True, created_at__lt=cutoff).delete()
    logger.info("Purged %s read notifications older than %s days", deleted, days)
    return deleted
