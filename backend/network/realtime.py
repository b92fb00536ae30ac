"""
Real-time delivery over the channel layer.

Each account has a channel-layer group (``user_<id>``). Any backend instance
can publish to that group; with the Redis layer configured the event reaches
the socket wherever it is attached. ``registry`` only remembers which accounts
have a socket on *this* process.
"""
import logging
import threading
from urllib.parse import parse_qs

from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from channels.layers import get_channel_layer
from channels.middleware import BaseMiddleware
from django.contrib.auth.models import AnonymousUser

from network.authentication import resolve_user
from network.tokens import InvalidToken

logger = logging.getLogger(__name__)

RELAY_EVENT_TYPE = 'relay.event'


def user_group_name(user_id):
    return f"user_{user_id}"


class ConnectionRegistry:
    """Local map of account id -> channel names attached to this process."""

    def __init__(self):
        self._lock = threading.Lock()
        self._channels_by_user = {}
        self._user_by_channel = {}

    def attach(self, user_id, channel_name):
        user_id = str(user_id)
        with self._lock:
            previous = self._user_by_channel.get(channel_name)
            if previous and previous != user_id:
                self._remove(previous, channel_name)
            self._channels_by_user.setdefault(user_id, set()).add(channel_name)
            self._user_by_channel[channel_name] = user_id

    def detach(self, channel_name):
        """Forget a channel; returns the account id it belonged to, if any."""
        with self._lock:
            user_id = self._user_by_channel.pop(channel_name, None)
            if user_id is not None:
                self._remove(user_id, channel_name)
            return user_id

    def _remove(self, user_id, channel_name):
        channels = self._channels_by_user.get(user_id)
        if channels is None:
            return
        channels.discard(channel_name)
        if not channels:
            del self._channels_by_user[user_id]

    def is_attached(self, user_id):
        with self._lock:
            return str(user_id) in self._channels_by_user

    def attached_user_ids(self):
        with self._lock:
            return set(self._channels_by_user)

    def clear(self):
        with self._lock:
            self._channels_by_user.clear()
            self._user_by_channel.clear()


registry = ConnectionRegistry()


def send_to_user(user_id, event, payload):
    """Publish ``event`` to every socket registered for ``user_id``.

    Raises whatever the channel layer raises; callers that must not fail use
    ``publish_to_user``.
    """
    channel_layer = get_channel_layer()
    if channel_layer is None:
        raise RuntimeError('No channel layer configured')
    async_to_sync(channel_layer.group_send)(
        user_group_name(user_id),
        {'type': RELAY_EVENT_TYPE, 'event': event, 'payload': payload},
    )


def publish_to_user(user_id, event, payload):
    """Best-effort publish. Returns False instead of raising when delivery fails."""
    try:
        send_to_user(user_id, event, payload)
    except Exception as exc:
        logger.warning("Real-time publish of %s to user %s failed: %s", event, user_id, exc)
        return False
    return True


@database_sync_to_async
def _user_for_token(token):
    try:
        user, _ = resolve_user(token)
    except InvalidToken as exc:
        logger.info("Rejected websocket token: %s", exc)
        return AnonymousUser()
    return user


class TokenAuthMiddleware(BaseMiddleware):
    """Populate ``scope['user']`` from a ``?token=`` query-string bearer credential."""

    async def __call__(self, scope, receive, send):
        scope = dict(scope)
        query = parse_qs(scope.get('query_string', b'').decode('latin-1'))
        token = (query.get('token') or [None])[0]
        scope['user'] = await _user_for_token(token) if token else AnonymousUser()
        return await super().__call__(scope, receive, send)
