"""
Profile, search, suggestion and follow endpoints.
"""
import pytest
from django.urls import reverse

from network.models import Profile
from network.tests.fixtures import PostFactory, UserFactory, connect


@pytest.mark.django_db
def test_every_account_gets_a_profile():
    user = UserFactory()
    assert Profile.objects.filter(user=user).count() == 1


@pytest.mark.django_db
class TestProfileDetail:
    def test_view_by_other_increments_profile_views(self, client_for, user, other_user):
        url = reverse('profile-detail', kwargs={'user_id': user.pk})
        resp = client_for(other_user).get(url)
        assert resp.status_code == 200
        assert resp.json()['user']['profile_views'] == 1

        client_for(other_user).get(url)
        user.profile.refresh_from_db()
        assert user.profile.profile_views == 2

    def test_own_view_does_not_count(self, client_for, user):
        url = reverse('profile-detail', kwargs={'user_id': user.pk})
        resp = client_for(user).get(url)
        assert resp.status_code == 200
        user.profile.refresh_from_db()
        assert user.profile.profile_views == 0

    def test_connection_and_follow_flags(self, client_for, user, other_user):
        connect(user, other_user)
        other_user.profile.following.add(user.profile)
        resp = client_for(other_user).get(reverse('profile-detail', kwargs={'user_id': user.pk}))
        data = resp.json()['user']
        assert data['is_connected'] is True
        assert data['is_following'] is True
        assert [c['id'] for c in data['connections']] == [other_user.pk]
        assert [f['id'] for f in data['followers']] == [other_user.pk]

    def test_contact_details_are_masked_unless_shared(self, client_for, user, other_user):
        user.profile.phone = '+1 555 123 4567'
        user.profile.save()
        url = reverse('profile-detail', kwargs={'user_id': user.pk})

        data = client_for(other_user).get(url).json()['user']
        assert data['email'] is None
        assert data['phone'] is None

        user.profile.show_email = True
        user.profile.show_phone = True
        user.profile.save()
        data = client_for(other_user).get(url).json()['user']
        assert data['email'] == user.email
        assert data['phone'] == '+1 555 123 4567'

    def test_private_profile_is_forbidden_to_others(self, client_for, user, other_user):
        user.profile.profile_visibility = 'private'
        user.profile.save()
        url = reverse('profile-detail', kwargs={'user_id': user.pk})

        resp = client_for(other_user).get(url)
        assert resp.status_code == 403
        assert resp.json()['error']['code'] == 'permission_denied'
        assert client_for(user).get(url).status_code == 200

    def test_connections_only_profile(self, client_for, user, other_user):
        user.profile.profile_visibility = 'connections'
        user.profile.save()
        url = reverse('profile-detail', kwargs={'user_id': user.pk})

        assert client_for(other_user).get(url).status_code == 403
        connect(user, other_user)
        assert client_for(other_user).get(url).status_code == 200

    def test_missing_profile_is_404(self, client_for, user):
        resp = client_for(user).get(reverse('profile-detail', kwargs={'user_id': 999999}))
        assert resp.status_code == 404
        assert resp.json()['error']['code'] == 'not_found'


@pytest.mark.django_db
class TestProfileUpdate:
    def test_update_fields_and_name(self, client_for, user):
        payload = {
            'name': 'Ada King',
            'headline': 'Analyst',
            'location': 'London',
            'skills': ['Math', 'Engines', 'Math'],
        }
        resp = client_for(user).put(reverse('update-profile'), payload, format='json')
        assert resp.status_code == 200
        data = resp.json()['user']
        assert data['name'] == 'Ada King'
        assert data['headline'] == 'Analyst'
        assert data['skills'] == ['Math', 'Engines']

    def test_sensitive_fields_are_ignored(self, client_for, user):
        original_email = user.email
        resp = client_for(user).put(
            reverse('update-profile'),
            {'email': 'hijack@example.com', 'is_admin': True, 'connections': [1, 2], 'bio': 'Hello'},
            format='json',
        )
        assert resp.status_code == 200
        user.refresh_from_db()
        assert user.email == original_email
        assert user.is_staff is False
        assert user.profile.connections.count() == 0
        assert user.profile.bio == 'Hello'

    def test_experience_list_is_replaced(self, client_for, user):
        url = reverse('update-profile')
        client_for(user).put(
            url,
            {'experience': [{'company': 'Acme', 'role': 'Engineer'}, {'company': 'Globex', 'role': 'Lead'}]},
            format='json',
        )
        assert user.profile.experience.count() == 2

        resp = client_for(user).put(url, {'experience': [{'company': 'Initech', 'role': 'CTO'}]}, format='json')
        assert resp.status_code == 200
        assert [e['company'] for e in resp.json()['user']['experience']] == ['Initech']
        assert user.profile.experience.count() == 1

    def test_invalid_phone_rejected(self, client_for, user):
        resp = client_for(user).put(reverse('update-profile'), {'phone': 'call me'}, format='json')
        assert resp.status_code == 400
        assert 'phone' in resp.json()['error']['details']


@pytest.mark.django_db
class TestSearchAndSuggestions:
    def test_search_by_text_location_and_skills(self, client_for, user):
        python_dev = UserFactory(first_name='Pat', profile__headline='Python developer', profile__location='Berlin',
                                 profile__skills=['Python', 'Django'])
        UserFactory(first_name='Sam', profile__headline='Designer', profile__location='Paris', profile__skills=['Figma'])

        client = client_for(user)
        resp = client.get(reverse('user-search'), {'q': 'python'})
        assert [u['id'] for u in resp.json()['users']] == [python_dev.pk]

        resp = client.get(reverse('user-search'), {'location': 'berl'})
        assert [u['id'] for u in resp.json()['users']] == [python_dev.pk]

        resp = client.get(reverse('user-search'), {'skills': 'figma,rust'})
        data = resp.json()
        assert data['total'] == 1
        assert data['users'][0]['skills'] == ['Figma']

    def test_search_orders_by_profile_views(self, client_for, user):
        quiet = UserFactory(profile__headline='Engineer', profile__profile_views=1)
        popular = UserFactory(profile__headline='Engineer', profile__profile_views=50)
        resp = client_for(user).get(reverse('user-search'), {'q': 'engineer'})
        assert [u['id'] for u in resp.json()['users']] == [popular.pk, quiet.pk]

    def test_suggestions_share_skill_or_location_and_exclude_network(self, client_for):
        me = UserFactory(profile__skills=['Python'], profile__location='Austin')
        same_skill = UserFactory(profile__skills=['python', 'Go'])
        same_city = UserFactory(profile__location='Austin')
        connected = UserFactory(profile__skills=['Python'])
        followed = UserFactory(profile__location='Austin')
        UserFactory(profile__skills=['Cobol'], profile__location='Oslo')
        connect(me, connected)
        me.profile.following.add(followed.profile)

        resp = client_for(me).get(reverse('user-suggestions'))
        assert resp.status_code == 200
        ids = {u['id'] for u in resp.json()['suggestions']}
        assert ids == {same_skill.pk, same_city.pk}

    def test_suggestions_are_capped_at_ten(self, client_for):
        me = UserFactory(profile__location='Denver')
        UserFactory.create_batch(12, profile__location='Denver')
        resp = client_for(me).get(reverse('user-suggestions'))
        assert len(resp.json()['suggestions']) == 10


@pytest.mark.django_db
class TestFollow:
    def test_follow_toggles(self, client_for, user, other_user):
        url = reverse('user-follow', kwargs={'user_id': other_user.pk})
        resp = client_for(user).post(url)
        assert resp.json()['is_following'] is True
        assert other_user.profile.followers.filter(pk=user.profile.pk).exists()

        resp = client_for(user).post(url)
        assert resp.json()['is_following'] is False
        assert not other_user.profile.followers.exists()

    def test_cannot_follow_self(self, client_for, user):
        resp = client_for(user).post(reverse('user-follow', kwargs={'user_id': user.pk}))
        assert resp.status_code == 400

    def test_follow_unknown_account(self, client_for, user):
        resp = client_for(user).post(reverse('user-follow', kwargs={'user_id': 424242}))
        assert resp.status_code == 404


@pytest.mark.django_db
class TestUserPosts:
    def test_visibility_filters_for_strangers_and_connections(self, client_for, user, other_user):
        public = PostFactory(author=user, visibility='public')
        connections_only = PostFactory(author=user, visibility='connections')
        private = PostFactory(author=user, visibility='private')
        url = reverse('user-posts', kwargs={'user_id': user.pk})

        ids = [p['id'] for p in client_for(other_user).get(url).json()['posts']]
        assert ids == [public.pk]

        connect(user, other_user)
        ids = {p['id'] for p in client_for(other_user).get(url).json()['posts']}
        assert ids == {public.pk, connections_only.pk}

        ids = {p['id'] for p in client_for(user).get(url).json()['posts']}
        assert ids == {public.pk, connections_only.pk, private.pk}
