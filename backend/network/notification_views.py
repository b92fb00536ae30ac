"""
Notification inbox endpoints.
"""
import logging

from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from network.feed import paginate, parse_pagination
from network.models import Notification
from network.serializers import NotificationSerializer

logger = logging.getLogger(__name__)


def _get_own_notification(user, notification_id):
    notification = get_object_or_404(Notification, pk=notification_id)
    if notification.recipient_id != user.pk:
        raise PermissionDenied('Not authorized to access this notification.')
    return notification


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_notifications(request):
    """
    The caller's notifications, newest first.

    Query params: ``unread=true`` to only return unread items, ``page``, ``limit``.
    ``unread_count`` always counts every unread notification.
    """
    page, limit = parse_pagination(request, default_limit=20)
    qs = Notification.objects.filter(recipient=request.user)
    if str(request.query_params.get('unread', '')).lower() == 'true':
        qs = qs.filter(is_read=False)

    qs = qs.select_related(
        'sender__profile', 'related_user__profile', 'related_post', 'related_job'
    ).order_by('-created_at', '-id')
    notifications, meta = paginate(qs, page, limit)
    unread_count = Notification.objects.filter(recipient=request.user, is_read=False).count()

    return Response(
        {
            'notifications': NotificationSerializer(notifications, many=True).data,
            'unread_count': unread_count,
            **meta,
        }
    )


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def mark_notification_read(request, notification_id):
    notification = _get_own_notification(request.user, notification_id)
    notification.mark_read()
    return Response({'message': 'Notification marked as read'})


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def mark_all_read(request):
    updated = Notification.objects.filter(recipient=request.user, is_read=False).update(
        is_read=True, read_at=timezone.now()
    )
    return Response({'message': 'All notifications marked as read', 'updated': updated})


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def delete_notification(request, notification_id):
    notification = _get_own_notification(request.user, notification_id)
    notification.delete()
    return Response({'message': 'Notification deleted'})


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def clear_notifications(request):
    deleted, _ = Notification.objects.filter(recipient=request.user).delete()
    logger.info("Cleared %s notifications for account %s", deleted, request.user.pk)
    return Response({'message': f"Deleted {deleted} notifications", 'deleted': deleted})
