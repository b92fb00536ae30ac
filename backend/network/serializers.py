"""
Serializers for accounts, posts, connections, jobs, messages and notifications.
"""
import re

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from network.models import (
    Comment, Connection, Education, Experience, Job, JobApplication,
    Message, Notification, Post, Profile,
)

User = get_user_model()

HASHTAG_RE = re.compile(r'#(\w+)')
HASHTAG_MAX_LENGTH = 100


def extract_hashtags(text):
    """Return lowercased hashtags found in ``text``, in order, without duplicates.

    >>> extract_hashtags("Hello #test")
    ['test']
    """
    seen = []
    for tag in HASHTAG_RE.findall(text or ''):
        tag = tag.lower()[:HASHTAG_MAX_LENGTH]
        if tag not in seen:
            seen.append(tag)
    return seen


def normalize_hashtags(tags):
    cleaned = []
    for tag in tags or []:
        tag = str(tag).strip().lstrip('#').lower()[:HASHTAG_MAX_LENGTH]
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


def split_name(name):
    parts = (name or '').split()
    first = parts[0] if parts else ''
    last = ' '.join(parts[1:]) if len(parts) > 1 else ''
    return first, last


def display_name(user):
    return f"{user.first_name} {user.last_name}".strip() or user.email


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

class UserSummarySerializer(serializers.ModelSerializer):
    """Small account card embedded in posts, messages, notifications, lists."""
    name = serializers.SerializerMethodField()
    headline = serializers.CharField(source='profile.headline', read_only=True)
    profile_photo = serializers.CharField(source='profile.profile_photo', read_only=True)
    location = serializers.CharField(source='profile.location', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'headline', 'profile_photo', 'location']
        read_only_fields = fields

    def get_name(self, obj):
        return display_name(obj)


class UserCardSerializer(UserSummarySerializer):
    """Search and suggestion result."""
    skills = serializers.ListField(source='profile.skills', read_only=True)
    followers_count = serializers.SerializerMethodField()

    class Meta(UserSummarySerializer.Meta):
        fields = UserSummarySerializer.Meta.fields + ['skills', 'followers_count']
        read_only_fields = fields

    def get_followers_count(self, obj):
        return obj.profile.followers.count()


class UserSerializer(serializers.ModelSerializer):
    """Account returned by the auth endpoints."""
    name = serializers.SerializerMethodField()
    headline = serializers.CharField(source='profile.headline', read_only=True)
    profile_photo = serializers.CharField(source='profile.profile_photo', read_only=True)
    is_admin = serializers.BooleanField(source='is_staff', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'headline', 'profile_photo', 'is_admin']
        read_only_fields = fields

    def get_name(self, obj):
        return display_name(obj)


class UserRegistrationSerializer(serializers.Serializer):
    name = serializers.CharField(required=True, max_length=50)
    email = serializers.EmailField(required=True)
    password = serializers.CharField(write_only=True, required=True)
    headline = serializers.CharField(required=False, allow_blank=True, max_length=120, default='')

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required.")
        return value

    def validate_email(self, value):
        return value.strip().lower()

    def validate_password(self, value):
        if len(value) < 6:
            raise serializers.ValidationError("Password must be at least 6 characters long.")
        validate_password(value)
        return value


class UserLoginSerializer(serializers.Serializer):
    email = serializers.EmailField(required=True)
    password = serializers.CharField(write_only=True, required=True)

    def validate_email(self, value):
        return value.strip().lower()


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True, required=True)
    new_password = serializers.CharField(write_only=True, required=True)

    def validate_new_password(self, value):
        if len(value) < 6:
            raise serializers.ValidationError("New password must be at least 6 characters long.")
        validate_password(value)
        return value


class ExperienceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Experience
        fields = ['id', 'company', 'role', 'years', 'description', 'start_date', 'end_date', 'current']
        read_only_fields = ['id']


class EducationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Education
        fields = ['id', 'school', 'degree', 'field', 'start_year', 'end_year', 'current']
        read_only_fields = ['id']


class ProfileSerializer(serializers.ModelSerializer):
    """Full profile view. Email and phone are masked by ``to_representation``
    according to the owner's privacy flags unless the viewer is the owner."""
    id = serializers.IntegerField(source='user.id', read_only=True)
    name = serializers.SerializerMethodField()
    email = serializers.EmailField(source='user.email', read_only=True)
    is_admin = serializers.BooleanField(source='user.is_staff', read_only=True)
    experience = ExperienceSerializer(many=True, read_only=True)
    education = EducationSerializer(many=True, read_only=True)
    connections = serializers.SerializerMethodField()
    followers = serializers.SerializerMethodField()
    following = serializers.SerializerMethodField()
    connections_count = serializers.SerializerMethodField()

    class Meta:
        model = Profile
        fields = [
            'id', 'name', 'email', 'headline', 'bio', 'location', 'skills', 'experience', 'education',
            'profile_photo', 'banner_image', 'website', 'phone', 'resume_url', 'is_verified', 'is_admin',
            'connections', 'followers', 'following', 'connections_count', 'profile_views',
            'profile_visibility', 'show_email', 'show_phone', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_name(self, obj):
        return obj.get_full_name()

    def _summaries(self, profiles):
        users = [p.user for p in profiles.select_related('user', 'user__profile')]
        return UserSummarySerializer(users, many=True).data

    def get_connections(self, obj):
        return self._summaries(obj.connections.all())

    def get_followers(self, obj):
        return self._summaries(obj.followers.all())

    def get_following(self, obj):
        return self._summaries(obj.following.all())

    def get_connections_count(self, obj):
        return obj.connections.count()

    def to_representation(self, instance):
        data = super().to_representation(instance)
        viewer = self.context.get('viewer')
        if viewer is None or viewer.pk != instance.user_id:
            if not instance.show_email:
                data['email'] = None
            if not instance.show_phone:
                data['phone'] = None
        return data


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """Writable profile fields. Identity, admin flag and social edges are not writable here."""
    name = serializers.CharField(required=False, max_length=50)
    experience = ExperienceSerializer(many=True, required=False)
    education = EducationSerializer(many=True, required=False)
    skills = serializers.ListField(
        child=serializers.CharField(max_length=50), required=False, allow_empty=True
    )

    class Meta:
        model = Profile
        fields = [
            'name', 'headline', 'bio', 'location', 'skills', 'experience', 'education',
            'profile_photo', 'banner_image', 'website', 'phone', 'resume_url',
            'profile_visibility', 'show_email', 'show_phone',
        ]

    def validate_phone(self, value):
        if value:
            cleaned = re.sub(r'[\s\-\(\)\.]', '', value)
            if not re.match(r'^\+?\d{7,15}$', cleaned):
                raise serializers.ValidationError("Please enter a valid phone number.")
        return value

    def validate_skills(self, value):
        skills = []
        for skill in value:
            skill = skill.strip()
            if skill and skill not in skills:
                skills.append(skill)
        return skills

    def update(self, instance, validated_data):
        name = validated_data.pop('name', None)
        experience = validated_data.pop('experience', None)
        education = validated_data.pop('education', None)

        if name is not None:
            user = instance.user
            user.first_name, user.last_name = split_name(name.strip())
            user.save(update_fields=['first_name', 'last_name'])

        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()

        # Nested lists are replaced wholesale when provided
        if experience is not None:
            instance.experience.all().delete()
            Experience.objects.bulk_create([Experience(profile=instance, **item) for item in experience])
        if education is not None:
            instance.education.all().delete()
            Education.objects.bulk_create([Education(profile=instance, **item) for item in education])
        return instance


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------

class CommentSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = Comment
        fields = ['id', 'user', 'content', 'created_at']
        read_only_fields = ['id', 'user', 'created_at']

    def validate_content(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Comment content is required.")
        return value


class PostSerializer(serializers.ModelSerializer):
    author = UserSummarySerializer(read_only=True)
    hashtags = serializers.SlugRelatedField(many=True, read_only=True, slug_field='name')
    comments = CommentSerializer(many=True, read_only=True)
    likes = serializers.PrimaryKeyRelatedField(many=True, read_only=True)
    likes_count = serializers.SerializerMethodField()
    comments_count = serializers.SerializerMethodField()
    shares_count = serializers.SerializerMethodField()
    is_liked = serializers.SerializerMethodField()

    class Meta:
        model = Post
        fields = [
            'id', 'author', 'content', 'post_type', 'images', 'link', 'hashtags', 'mentions',
            'likes', 'likes_count', 'comments', 'comments_count', 'shares_count', 'is_liked',
            'visibility', 'engagement_score', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_likes_count(self, obj):
        return len(obj.likes.all())

    def get_comments_count(self, obj):
        return len(obj.comments.all())

    def get_shares_count(self, obj):
        return len(obj.shares.all())

    def get_is_liked(self, obj):
        request = self.context.get('request')
        if not request or not request.user.is_authenticated:
            return False
        return any(u.pk == request.user.pk for u in obj.likes.all())


class PostCreateSerializer(serializers.Serializer):
    content = serializers.CharField(max_length=3000, allow_blank=True, trim_whitespace=True)
    post_type = serializers.ChoiceField(choices=Post.TYPE_CHOICES, default='text')
    images = serializers.ListField(child=serializers.CharField(max_length=500), required=False, default=list)
    link = serializers.DictField(required=False, default=dict)
    hashtags = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    mentions = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)
    visibility = serializers.ChoiceField(choices=Post.VISIBILITY_CHOICES, default='public')

    def validate_content(self, value):
        if not value or not value.strip():
            raise serializers.ValidationError("Post content is required.")
        return value.strip()

    def validate_link(self, value):
        allowed = {'url', 'title', 'description', 'image'}
        return {k: str(v) for k, v in value.items() if k in allowed and v is not None}

    def validate(self, data):
        if 'hashtags' in data and data['hashtags']:
            data['hashtags'] = normalize_hashtags(data['hashtags'])
        else:
            data['hashtags'] = extract_hashtags(data['content'])
        return data


# ---------------------------------------------------------------------------
# Connections
# ---------------------------------------------------------------------------

class ConnectionSerializer(serializers.ModelSerializer):
    requester = UserSummarySerializer(read_only=True)
    recipient = UserSummarySerializer(read_only=True)

    class Meta:
        model = Connection
        fields = ['id', 'requester', 'recipient', 'status', 'message', 'connected_at', 'created_at', 'updated_at']
        read_only_fields = fields


class ConnectionRequestSerializer(serializers.Serializer):
    user_id = serializers.IntegerField(required=True)
    message = serializers.CharField(max_length=300, required=False, allow_blank=True, default='')


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------

class JobApplicationSerializer(serializers.ModelSerializer):
    applicant = UserSummarySerializer(read_only=True)

    class Meta:
        model = JobApplication
        fields = ['id', 'applicant', 'cover_letter', 'resume_url', 'status', 'applied_at', 'updated_at']
        read_only_fields = ['id', 'applicant', 'status', 'applied_at', 'updated_at']


class JobSerializer(serializers.ModelSerializer):
    poster = UserSummarySerializer(read_only=True)
    skills = serializers.ListField(child=serializers.CharField(max_length=50), required=False)
    requirements = serializers.ListField(child=serializers.CharField(max_length=200), required=False)
    benefits = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    applications_count = serializers.SerializerMethodField()

    class Meta:
        model = Job
        fields = [
            'id', 'title', 'company', 'description', 'location', 'job_type', 'experience',
            'salary_min', 'salary_max', 'salary_currency', 'salary_period',
            'skills', 'requirements', 'benefits', 'poster', 'external_url', 'company_logo',
            'is_active', 'deadline', 'remote', 'featured', 'views', 'applications_count',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'poster', 'views', 'applications_count', 'created_at', 'updated_at']

    def get_applications_count(self, obj):
        return obj.applications.count()

    def validate(self, data):
        salary_min = data.get('salary_min', getattr(self.instance, 'salary_min', None))
        salary_max = data.get('salary_max', getattr(self.instance, 'salary_max', None))
        if salary_min is not None and salary_max is not None and salary_min > salary_max:
            raise serializers.ValidationError({'salary_min': "Minimum salary cannot exceed maximum salary."})
        return data


class ApplicationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=JobApplication.STATUS_CHOICES)


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

class MessageSerializer(serializers.ModelSerializer):
    sender = UserSummarySerializer(read_only=True)
    recipient = UserSummarySerializer(read_only=True)

    class Meta:
        model = Message
        fields = [
            'id', 'sender', 'recipient', 'content', 'message_type', 'file_url', 'file_name',
            'file_size', 'read_at', 'conversation_id', 'created_at',
        ]
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    recipient = serializers.IntegerField(required=True)
    content = serializers.CharField(max_length=1000)
    message_type = serializers.ChoiceField(choices=Message.TYPE_CHOICES, default='text')
    file_url = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    file_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    file_size = serializers.IntegerField(required=False, allow_null=True, min_value=0, default=None)

    def validate_content(self, value):
        if not value.strip():
            raise serializers.ValidationError("Message content is required.")
        return value


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

class NotificationSerializer(serializers.ModelSerializer):
    sender = UserSummarySerializer(read_only=True)
    related_user = UserSummarySerializer(read_only=True)
    related_post = serializers.SerializerMethodField()
    related_job = serializers.SerializerMethodField()

    class Meta:
        model = Notification
        fields = [
            'id', 'sender', 'notification_type', 'title', 'message', 'related_post', 'related_job',
            'related_user', 'is_read', 'read_at', 'action_url', 'created_at',
        ]
        read_only_fields = fields

    def get_related_post(self, obj):
        if not obj.related_post_id:
            return None
        return {'id': obj.related_post_id, 'content': obj.related_post.content[:200]}

    def get_related_job(self, obj):
        if not obj.related_job_id:
            return None
        return {'id': obj.related_job_id, 'title': obj.related_job.title, 'company': obj.related_job.company}
