from datetime import timedelta
from unittest import mock

import pytest
from django.urls import reverse
from django.utils import timezone

from network.models import Notification
from network.notifications import notify
from network.tasks import purge_read_notifications, push_notification
from network.tests.fixtures import JobFactory, NotificationFactory, PostFactory, UserFactory


@pytest.mark.django_db
class TestNotify:
    def test_self_directed_action_creates_nothing(self, user):
        assert notify(user, user, 'post_like') is None
        assert not Notification.objects.exists()

    def test_text_is_denormalized_from_sender(self, user, other_user):
        post = PostFactory(author=user)
        notification = notify(user, other_user, 'post_comment', post=post)
        assert notification.title == 'New comment'
        assert notification.message == 'Grace Hopper commented on your post'
        assert notification.action_url == f'/posts/{post.pk}'
        assert notification.related_post == post

        # Renaming the sender later does not rewrite stored text
        other_user.first_name = 'Amazing'
        other_user.save()
        notification.refresh_from_db()
        assert notification.message.startswith('Grace Hopper')

    def test_job_notification_mentions_title(self, user, other_user):
        job = JobFactory(poster=user, title='Platform Engineer')
        notification = notify(user, other_user, 'job_match', job=job, related_user=other_user)
        assert notification.message == 'Grace Hopper applied to Platform Engineer'
        assert notification.related_job == job

    def test_push_is_enqueued_on_commit(self, user, other_user, django_capture_on_commit_callbacks):
        with mock.patch('network.tasks.push_notification.delay') as delay:
            with django_capture_on_commit_callbacks(execute=True):
                notification = notify(user, other_user, 'profile_view')
        delay.assert_called_once_with(notification.pk)

    def test_broker_failure_is_swallowed(self, user, other_user, django_capture_on_commit_callbacks):
        with mock.patch('network.tasks.push_notification.delay', side_effect=ConnectionError('no broker')):
            with django_capture_on_commit_callbacks(execute=True):
                notification = notify(user, other_user, 'profile_view')
        assert Notification.objects.filter(pk=notification.pk).exists()


@pytest.mark.django_db
class TestNotificationTasks:
    def test_push_sends_serialized_notification(self, user, other_user):
        notification = NotificationFactory(recipient=user, sender=other_user)
        with mock.patch('network.tasks.send_to_user') as send:
            assert push_notification(notification.pk) is True
        recipient_id, event, payload = send.call_args.args
        assert recipient_id == user.pk
        assert event == 'notification'
        assert payload['id'] == notification.pk
        assert payload['sender']['id'] == other_user.pk

    def test_push_for_deleted_notification_is_a_noop(self):
        with mock.patch('network.tasks.send_to_user') as send:
            assert push_notification(987654) is False
        send.assert_not_called()

    def test_purge_read_notifications(self, user, settings):
        settings.NOTIFICATION_RETENTION_DAYS = 30
        old_read = NotificationFactory(recipient=user, is_read=True)
        old_unread = NotificationFactory(recipient=user, is_read=False)
        recent_read = NotificationFactory(recipient=user, is_read=True)
        long_ago = timezone.now() - timedelta(days=45)
        Notification.objects.filter(pk__in=[old_read.pk, old_unread.pk]).update(created_at=long_ago)

        assert purge_read_notifications() == 1
        remaining = set(Notification.objects.values_list('pk', flat=True))
        assert remaining == {old_unread.pk, recent_read.pk}


@pytest.mark.django_db
class TestNotificationAPI:
    def test_list_with_unread_filter_and_count(self, client_for, user):
        NotificationFactory(recipient=user, is_read=True)
        unread = NotificationFactory(recipient=user)
        NotificationFactory()

        client = client_for(user)
        data = client.get(reverse('notification-list')).json()
        assert data['total'] == 2
        assert data['unread_count'] == 1

        data = client.get(reverse('notification-list'), {'unread': 'true'}).json()
        assert [n['id'] for n in data['notifications']] == [unread.pk]

    def test_mark_read_owner_only(self, client_for, user, other_user):
        notification = NotificationFactory(recipient=user)
        url = reverse('notification-read', kwargs={'notification_id': notification.pk})

        assert client_for(other_user).put(url).status_code == 403
        assert client_for(user).put(url).status_code == 200
        notification.refresh_from_db()
        assert notification.is_read is True
        assert notification.read_at is not None

    def test_mark_all_read(self, client_for, user):
        NotificationFactory.create_batch(3, recipient=user)
        other = NotificationFactory()
        resp = client_for(user).put(reverse('notification-read-all'))
        assert resp.json()['updated'] == 3
        assert not Notification.objects.filter(recipient=user, is_read=False).exists()
        other.refresh_from_db()
        assert other.is_read is False

    def test_delete_owner_only(self, client_for, user, other_user):
        notification = NotificationFactory(recipient=user)
        url = reverse('notification-delete', kwargs={'notification_id': notification.pk})
        assert client_for(other_user).delete(url).status_code == 403
        assert client_for(user).delete(url).status_code == 200
        assert not Notification.objects.filter(pk=notification.pk).exists()

    def test_clear_all(self, client_for, user):
        NotificationFactory.create_batch(2, recipient=user)
        keep = NotificationFactory()
        resp = client_for(user).delete(reverse('notification-clear-all'))
        assert resp.json()['deleted'] == 2
        assert list(Notification.objects.values_list('pk', flat=True)) == [keep.pk]

    def test_actions_produce_one_notification_each(self, client_for, user):
        author = UserFactory()
        post = PostFactory(author=author)
        client = client_for(user)
        client.post(reverse('post-like', kwargs={'post_id': post.pk}))
        client.post(reverse('post-comment', kwargs={'post_id': post.pk}), {'content': 'Nice'}, format='json')
        client.post(reverse('post-share', kwargs={'post_id': post.pk}))

        types = sorted(Notification.objects.filter(recipient=author).values_list('notification_type', flat=True))
        assert types == ['post_comment', 'post_like', 'post_share']
