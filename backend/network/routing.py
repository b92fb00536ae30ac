from django.urls import path

from network import consumers

websocket_urlpatterns = [
    path('ws/socket/', consumers.RealtimeConsumer.as_asgi()),
]
