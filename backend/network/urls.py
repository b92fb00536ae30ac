"""
URL configuration for the network API.
"""
from django.urls import path

from network import connection_views
from network import job_views
from network import message_views
from network import notification_views
from network import post_views
from network import views

urlpatterns = [
    path('health', views.health, name='health'),

    # Authentication
    path('auth/register', views.register_user, name='register'),
    path('auth/login', views.login_user, name='login'),
    path('auth/me', views.current_user, name='current-user'),
    path('auth/change-password', views.change_password, name='change-password'),

    # Profiles and the follow graph
    path('users/profile', views.update_profile, name='update-profile'),
    path('users/profile/<int:user_id>', views.profile_detail, name='profile-detail'),
    path('users/search', views.search_users, name='user-search'),
    path('users/suggestions', views.user_suggestions, name='user-suggestions'),
    path('users/<int:user_id>/posts', views.user_posts, name='user-posts'),
    path('users/<int:user_id>/follow', views.toggle_follow, name='user-follow'),

    # Posts
    path('posts', post_views.create_post, name='post-create'),
    path('posts/feed', post_views.post_feed, name='post-feed'),
    path('posts/hashtag/<str:tag>', post_views.posts_by_hashtag, name='posts-by-hashtag'),
    path('posts/<int:post_id>', post_views.post_detail, name='post-detail'),
    path('posts/<int:post_id>/like', post_views.toggle_like, name='post-like'),
    path('posts/<int:post_id>/comment', post_views.add_comment, name='post-comment'),
    path('posts/<int:post_id>/share', post_views.share_post, name='post-share'),

    # Connections
    path('connections', connection_views.list_connections, name='connection-list'),
    path('connections/request', connection_views.send_connection_request, name='connection-request'),
    path('connections/requests/received', connection_views.received_requests, name='connection-requests-received'),
    path('connections/requests/sent', connection_views.sent_requests, name='connection-requests-sent'),
    path(
        'connections/request/<int:request_id>/<str:action>',
        connection_views.respond_to_request,
        name='connection-respond',
    ),
    path('connections/mutual/<int:user_id>', connection_views.mutual_connections, name='connection-mutual'),
    path('connections/<int:user_id>', connection_views.remove_connection, name='connection-remove'),

    # Jobs
    path('jobs', job_views.jobs_list_create, name='job-list-create'),
    path('jobs/my/applications', job_views.my_applications, name='my-applications'),
    path('jobs/<int:job_id>', job_views.job_detail, name='job-detail'),
    path('jobs/<int:job_id>/apply', job_views.apply_to_job, name='job-apply'),
    path('jobs/<int:job_id>/applications', job_views.job_applications, name='job-applications'),
    path(
        'jobs/<int:job_id>/applications/<int:application_id>',
        job_views.update_application_status,
        name='job-application-status',
    ),

    # Messages
    path('messages', message_views.send_message, name='message-send'),
    path('messages/conversations', message_views.list_conversations, name='conversation-list'),
    path('messages/conversation/<int:user_id>', message_views.conversation_with_user, name='conversation-detail'),
    path(
        'messages/conversation/<str:conversation_id>',
        message_views.delete_conversation,
        name='conversation-delete',
    ),
    path('messages/read/<str:conversation_id>', message_views.mark_conversation_read, name='conversation-read'),

    # Notifications
    path('notifications', notification_views.list_notifications, name='notification-list'),
    path('notifications/read-all', notification_views.mark_all_read, name='notification-read-all'),
    path('notifications/clear-all', notification_views.clear_notifications, name='notification-clear-all'),
    path('notifications/<int:notification_id>', notification_views.delete_notification, name='notification-delete'),
    path('notifications/<int:notification_id>/read', notification_views.mark_notification_read, name='notification-read'),
]
