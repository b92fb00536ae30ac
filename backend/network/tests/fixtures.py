"""
Test fixtures and factories for creating test data.
Uses factory_boy for consistent test data generation.
"""
import factory
from django.contrib.auth import get_user_model
from factory.django import DjangoModelFactory

from network.models import Comment, Connection, Job, JobApplication, Message, Notification, Post

User = get_user_model()

DEFAULT_PASSWORD = 'secret123'


class UserFactory(DjangoModelFactory):
    """Factory for accounts. The profile row is created by the post_save signal."""
    class Meta:
        model = User
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f'user{n}@example.com')
    username = factory.LazyAttribute(lambda obj: obj.email)
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    password = factory.django.Password(DEFAULT_PASSWORD)
    is_active = True

    @factory.post_generation
    def profile(obj, create, extracted, **kwargs):
        """``UserFactory(profile__headline='...')`` writes onto the signal-created profile."""
        if not create or not kwargs:
            return
        for field, value in kwargs.items():
            setattr(obj.profile, field, value)
        obj.profile.save()


class PostFactory(DjangoModelFactory):
    class Meta:
        model = Post

    author = factory.SubFactory(UserFactory)
    content = factory.Faker('sentence', nb_words=12)
    post_type = 'text'
    visibility = 'public'


class CommentFactory(DjangoModelFactory):
    class Meta:
        model = Comment

    post = factory.SubFactory(PostFactory)
    user = factory.SubFactory(UserFactory)
    content = factory.Faker('sentence', nb_words=6)


class ConnectionFactory(DjangoModelFactory):
    class Meta:
        model = Connection

    requester = factory.SubFactory(UserFactory)
    recipient = factory.SubFactory(UserFactory)
    status = Connection.STATUS_PENDING
    message = ''


class JobFactory(DjangoModelFactory):
    class Meta:
        model = Job

    title = factory.Faker('job')
    company = factory.Faker('company')
    description = factory.Faker('paragraph')
    location = 'Remote'
    job_type = 'full-time'
    experience = 'mid'
    skills = factory.LazyFunction(lambda: ['Python', 'Django'])
    poster = factory.SubFactory(UserFactory)
    is_active = True


class JobApplicationFactory(DjangoModelFactory):
    class Meta:
        model = JobApplication

    job = factory.SubFactory(JobFactory)
    applicant = factory.SubFactory(UserFactory)
    cover_letter = 'I would love to join.'


class MessageFactory(DjangoModelFactory):
    class Meta:
        model = Message

    sender = factory.SubFactory(UserFactory)
    recipient = factory.SubFactory(UserFactory)
    content = factory.Faker('sentence', nb_words=8)


class NotificationFactory(DjangoModelFactory):
    class Meta:
        model = Notification

    recipient = factory.SubFactory(UserFactory)
    sender = factory.SubFactory(UserFactory)
    notification_type = 'post_like'
    title = 'New like'
    message = 'Someone liked your post'


def connect(first, second):
    """Create an accepted connection and link both profiles."""
    connection = Connection.objects.create(requester=first, recipient=second, status=Connection.STATUS_ACCEPTED)
    first.profile.connections.add(second.profile)
    return connection
