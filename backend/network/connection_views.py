"""
Connection requests and the symmetric connection graph.
"""
import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from network.exceptions import Conflict
from network.feed import paginate, parse_pagination
from network.models import Connection, pair_key
from network.notifications import notify
from network.serializers import ConnectionRequestSerializer, ConnectionSerializer, UserCardSerializer, UserSummarySerializer

logger = logging.getLogger(__name__)
User = get_user_model()

ACTIONS = ('accept', 'decline')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def send_connection_request(request):
    """
    Ask another account to connect.

    Request Body:
    {
        "user_id": 42,
        "message": "Hi, we met at the meetup"
    }

    Only one request can ever exist for a pair of accounts, whichever side
    sent it and whatever state it is in.
    """
    serializer = ConnectionRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    target_id = serializer.validated_data['user_id']

    if target_id == request.user.pk:
        raise ValidationError({'user_id': 'You cannot connect to yourself.'})
    target = get_object_or_404(User, pk=target_id, is_active=True)

    if Connection.objects.filter(pair_key=pair_key(request.user.pk, target.pk)).exists():
        raise Conflict('Connection request already exists or you are already connected.')

    try:
        with transaction.atomic():
            connection = Connection.objects.create(
                requester=request.user,
                recipient=target,
                message=serializer.validated_data.get('message', '').strip(),
            )
            notify(target, request.user, 'connection_request', related_user=request.user)
    except IntegrityError:
        raise Conflict('Connection request already exists or you are already connected.')

    logger.info("Connection request %s: %s -> %s", connection.pk, request.user.pk, target.pk)
    connection = Connection.objects.select_related('requester__profile', 'recipient__profile').get(pk=connection.pk)
    return Response(
        {
            'message': 'Connection request sent successfully',
            'request': ConnectionSerializer(connection).data,
        },
        status=status.HTTP_201_CREATED,
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def received_requests(request):
    """Pending requests addressed to the caller, newest first."""
    requests = (
        Connection.objects.filter(recipient=request.user, status=Connection.STATUS_PENDING)
        .select_related('requester__profile', 'recipient__profile')
        .order_by('-created_at', '-id')
    )
    return Response({'requests': ConnectionSerializer(requests, many=True).data})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sent_requests(request):
    """Pending requests the caller has sent, newest first."""
    requests = (
        Connection.objects.filter(requester=request.user, status=Connection.STATUS_PENDING)
        .select_related('requester__profile', 'recipient__profile')
        .order_by('-created_at', '-id')
    )
    return Response({'requests': ConnectionSerializer(requests, many=True).data})


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def respond_to_request(request, request_id, action):
    """Accept or decline a pending request addressed to the caller."""
    if action not in ACTIONS:
        raise ValidationError({'action': f"Invalid action. Use one of: {', '.join(ACTIONS)}."})

    with transaction.atomic():
        connection = get_object_or_404(
            Connection.objects.select_for_update().select_related('requester__profile', 'recipient__profile'),
            pk=request_id,
        )
        if connection.recipient_id != request.user.pk:
            raise PermissionDenied('Not authorized to respond to this request.')
        if connection.status != Connection.STATUS_PENDING:
            raise ValidationError({'status': 'Connection request already processed.'})

        if action == 'accept':
            connection.status = Connection.STATUS_ACCEPTED
            connection.save()
            # Symmetric relation: one add links both profiles
            connection.recipient.profile.connections.add(connection.requester.profile)
            notify(connection.requester, request.user, 'connection_accepted', related_user=request.user)
            message = 'Connection request accepted'
        else:
            connection.status = Connection.STATUS_DECLINED
            connection.save()
            message = 'Connection request declined'

    logger.info("Connection request %s %sed by %s", connection.pk, action, request.user.pk)
    return Response({'message': message, 'request': ConnectionSerializer(connection).data})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_connections(request):
    page, limit = parse_pagination(request, default_limit=20)
    connected = (
        User.objects.filter(profile__in=request.user.profile.connections.all())
        .select_related('profile')
        .order_by('first_name', 'last_name', 'id')
    )
    users, meta = paginate(connected, page, limit)
    return Response(
        {
            'connections': UserCardSerializer(users, many=True).data,
            'total_connections': meta['total'],
            **meta,
        }
    )


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def remove_connection(request, user_id):
    """Drop an accepted connection from both sides."""
    other = get_object_or_404(User.objects.select_related('profile'), pk=user_id)

    with transaction.atomic():
        request.user.profile.connections.remove(other.profile)
        Connection.objects.filter(
            pair_key=pair_key(request.user.pk, other.pk),
            status=Connection.STATUS_ACCEPTED,
        ).update(status=Connection.STATUS_DECLINED)

    logger.info("Connection between %s and %s removed", request.user.pk, other.pk)
    return Response({'message': 'Connection removed successfully'})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def mutual_connections(request, user_id):
    other = get_object_or_404(User.objects.select_related('profile'), pk=user_id)
    mine = set(request.user.profile.connection_user_ids())
    theirs = set(other.profile.connection_user_ids())

    mutual = (
        User.objects.filter(pk__in=mine & theirs)
        .filter(~Q(pk__in=[request.user.pk, other.pk]))
        .select_related('profile')
        .order_by('first_name', 'last_name', 'id')
    )
    data = UserSummarySerializer(mutual, many=True).data
    return Response({'mutual_connections': data, 'count': len(data)})
