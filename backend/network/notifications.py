"""
Notification fan-out.

``notify`` is called from inside the view's ``transaction.atomic`` block, so the
notification row commits or rolls back together with the action that caused
it. The real-time push is queued only after the commit succeeds.
"""
import logging

from django.db import transaction

from network.models import Notification

logger = logging.getLogger(__name__)

# notification_type -> (title, message template, action url template)
TEMPLATES = {
    'connection_request': (
        'New connection request',
        '{sender} wants to connect with you',
        '/network/requests',
    ),
    'connection_accepted': (
        'Connection accepted',
        '{sender} accepted your connection request',
        '/profile/{sender_id}',
    ),
    'post_like': (
        'New like',
        '{sender} liked your post',
        '/posts/{post_id}',
    ),
    'post_comment': (
        'New comment',
        '{sender} commented on your post',
        '/posts/{post_id}',
    ),
    'post_share': (
        'Post shared',
        '{sender} shared your post',
        '/posts/{post_id}',
    ),
    'mention': (
        'You were mentioned',
        '{sender} mentioned you in a post',
        '/posts/{post_id}',
    ),
    'job_match': (
        'New job application',
        '{sender} applied to {job_title}',
        '/jobs/{job_id}',
    ),
    'message': (
        'New message',
        '{sender} sent you a message',
        '/messages/{sender_id}',
    ),
    'profile_view': (
        'Profile view',
        '{sender} viewed your profile',
        '/profile/{sender_id}',
    ),
}


def _display_name(user):
    name = f"{user.first_name} {user.last_name}".strip()
    return name or user.email


def notify(recipient, sender, notification_type, post=None, job=None, related_user=None):
    """Write one notification for ``recipient`` about an action by ``sender``.

    Returns the created ``Notification`` or ``None`` when the action is
    self-directed.
    """
    if recipient is None or sender is None or recipient.pk == sender.pk:
        return None

    title, message_template, url_template = TEMPLATES[notification_type]
    context = {
        'sender': _display_name(sender),
        'sender_id': sender.pk,
        'post_id': post.pk if post else '',
        'job_id': job.pk if job else '',
        'job_title': job.title if job else 'your job',
    }
    notification = Notification.objects.create(
        recipient=recipient,
        sender=sender,
        notification_type=notification_type,
        title=title[:100],
        message=message_template.format(**context)[:300],
        related_post=post,
        related_job=job,
        related_user=related_user,
        action_url=url_template.format(**context),
    )
    logger.debug("Notification %s (%s) queued for user %s", notification.pk, notification_type, recipient.pk)

    notification_id = notification.pk
    transaction.on_commit(lambda: _enqueue_push(notification_id))
    return notification


def _enqueue_push(notification_id):
    from network.tasks import push_notification

    try:
        push_notification.delay(notification_id)
    except Exception as exc:
        # Broker outages must not surface as request failures
        logger.warning("Could not enqueue push for notification %s: %s", notification_id, exc)
