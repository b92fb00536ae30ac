import logging

from asgiref.sync import async_to_sync
from channels.generic.websocket import JsonWebsocketConsumer

from network.realtime import registry, user_group_name

log = logging.getLogger(__name__)


def _account_id(value):
    """Integer account id from an int or a digit string, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


class RealtimeConsumer(JsonWebsocketConsumer):
    """
    Websocket side channel for live messages and notifications.

    Frames are JSON objects ``{"event": <name>, "data": {...}}``.
    Client events:
        join_user     {"user_id": ...} or the bare id   register this socket for the account
        send_message  {"receiver_id": ..., "message": {...}}
    Server events:
        joined, receive_message, notification, error
    """

    user_id = None

    def connect(self):
        self.accept()

    def disconnect(self, code):
        if self.user_id is not None:
            async_to_sync(self.channel_layer.group_discard)(user_group_name(self.user_id), self.channel_name)
        registry.detach(self.channel_name)
        log.debug("Socket %s closed (user=%s, code=%s)", self.channel_name, self.user_id, code)

    def receive_json(self, content, **kwargs):
        if not isinstance(content, dict):
            self._send_error('Frames must be JSON objects')
            return
        event = content.get('event')
        data = content.get('data')
        if event == 'join_user' and isinstance(data, (int, str)):
            # Bare account id
            data = {'user_id': data}
        if data is None:
            data = {}
        if not isinstance(data, dict):
            self._send_error('data must be a JSON object')
            return
        if event == 'join_user':
            self._join_user(data)
        elif event == 'send_message':
            self._send_message(data)
        else:
            self._send_error(f"Unknown event: {event}")

    def _join_user(self, data):
        user = self.scope.get('user')
        if user is None or not user.is_authenticated:
            self._send_error('Authentication required')
            return
        requested = data.get('user_id')
        if requested is not None and str(requested) != str(user.pk):
            self._send_error('Cannot join as another account')
            return

        if self.user_id is not None and self.user_id != user.pk:
            async_to_sync(self.channel_layer.group_discard)(user_group_name(self.user_id), self.channel_name)
        self.user_id = user.pk
        async_to_sync(self.channel_layer.group_add)(user_group_name(user.pk), self.channel_name)
        registry.attach(user.pk, self.channel_name)
        self.send_json({'event': 'joined', 'data': {'user_id': user.pk}})

    def _send_message(self, data):
        if self.user_id is None:
            self._send_error('Join before sending messages')
            return
        receiver_id = _account_id(data.get('receiver_id'))
        if receiver_id is None:
            self._send_error('receiver_id must be an account id')
            return
        if not registry.is_attached(receiver_id):
            log.debug("No local socket for user %s; relying on the channel layer", receiver_id)
        # Dropped by the layer when the receiver has no registered socket
        async_to_sync(self.channel_layer.group_send)(
            user_group_name(receiver_id),
            {'type': 'relay.event', 'event': 'receive_message', 'payload': data.get('message')},
        )

    def relay_event(self, event):
        self.send_json({'event': event['event'], 'data': event['payload']})

    def _send_error(self, message):
        self.send_json({'event': 'error', 'data': {'message': message}})
