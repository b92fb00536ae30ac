"""
Direct messages between two accounts.

A conversation is identified by ``pair_key(a, b)``, so both participants
derive the same id without storing a conversation row.
"""
import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count, Max, OuterRef, Q, Subquery
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from network.feed import paginate, parse_pagination
from network.models import Message, pair_key
from network.realtime import publish_to_user
from network.serializers import MessageCreateSerializer, MessageSerializer, UserSummarySerializer

logger = logging.getLogger(__name__)
User = get_user_model()


def _mark_read(conversation_id, reader):
    return Message.objects.filter(
        conversation_id=conversation_id, recipient=reader, read_at__isnull=True
    ).update(read_at=timezone.now())


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def send_message(request):
    """
    Store a message and push it to the recipient's live sockets.

    Request Body:
    {
        "recipient": 42,
        "content": "Hello!",
        "message_type": "text"
    }

    The message is durable once this returns; live delivery is best effort.
    """
    serializer = MessageCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    recipient = get_object_or_404(User, pk=data['recipient'], is_active=True)

    with transaction.atomic():
        message = Message.objects.create(
            sender=request.user,
            recipient=recipient,
            content=data['content'],
            message_type=data['message_type'],
            file_url=data.get('file_url') or '',
            file_name=data.get('file_name') or '',
            file_size=data.get('file_size'),
        )
        message = Message.objects.select_related('sender__profile', 'recipient__profile').get(pk=message.pk)
        payload = dict(MessageSerializer(message).data)
        transaction.on_commit(lambda: publish_to_user(recipient.pk, 'receive_message', payload))

    logger.info("Message %s sent in conversation %s", message.pk, message.conversation_id)
    return Response({'message': payload}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def conversation_with_user(request, user_id):
    """One page of the conversation with ``user_id``, oldest first within the page.

    Messages addressed to the caller are marked read.
    """
    other = get_object_or_404(User, pk=user_id)
    page, limit = parse_pagination(request, default_limit=50)
    conversation_id = pair_key(request.user.pk, other.pk)

    qs = (
        Message.objects.filter(conversation_id=conversation_id)
        .select_related('sender__profile', 'recipient__profile')
        .order_by('-created_at', '-id')
    )
    messages, meta = paginate(qs, page, limit)
    messages.reverse()
    _mark_read(conversation_id, request.user)

    return Response(
        {
            'messages': MessageSerializer(messages, many=True).data,
            'conversation_id': conversation_id,
            **meta,
        }
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_conversations(request):
    """Every conversation the caller is part of, most recent activity first."""
    user = request.user
    mine = Message.objects.filter(Q(sender=user) | Q(recipient=user))
    latest = mine.filter(conversation_id=OuterRef('conversation_id')).order_by('-created_at', '-id')

    rows = (
        mine.values('conversation_id')
        .annotate(
            last_message_id=Subquery(latest.values('id')[:1]),
            last_at=Max('created_at'),
            unread_count=Count('id', filter=Q(recipient=user, read_at__isnull=True)),
        )
        .order_by('-last_at')
    )
    rows = list(rows)
    last_messages = Message.objects.select_related('sender__profile', 'recipient__profile').in_bulk(
        [row['last_message_id'] for row in rows]
    )

    conversations = []
    for row in rows:
        last = last_messages.get(row['last_message_id'])
        if last is None:
            continue
        other = last.recipient if last.sender_id == user.pk else last.sender
        conversations.append({
            'conversation_id': row['conversation_id'],
            'other_user': UserSummarySerializer(other).data,
            'last_message': {
                'id': last.pk,
                'content': last.content,
                'message_type': last.message_type,
                'created_at': last.created_at,
                'sender': 'me' if last.sender_id == user.pk else 'other',
            },
            'unread_count': row['unread_count'],
        })
    return Response({'conversations': conversations})


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def mark_conversation_read(request, conversation_id):
    updated = _mark_read(conversation_id, request.user)
    return Response({'message': 'Messages marked as read', 'updated': updated})


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def delete_conversation(request, conversation_id):
    """Delete the conversation's messages the caller took part in."""
    deleted, _ = Message.objects.filter(
        Q(sender=request.user) | Q(recipient=request.user),
        conversation_id=conversation_id,
    ).delete()
    logger.info("Account %s deleted %s messages from %s", request.user.pk, deleted, conversation_id)
    return Response({'message': f"Deleted {deleted} messages", 'deleted': deleted})
