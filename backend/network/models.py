# backend/network/models.py
from django.conf import settings
from django.db import models
from django.utils import timezone


def pair_key(first_id, second_id):
    """Order-independent key for two account ids.

    The ids are compared as strings, sorted and joined with an underscore, so
    ``pair_key(a, b) == pair_key(b, a)`` for every pair.
    """
    return '_'.join(sorted([str(first_id), str(second_id)]))


class Profile(models.Model):
    """Professional profile and social edges for an account.

    The Django ``User`` carries identity (email, name, password hash, admin
    flag); everything shown on the profile page lives here.
    """
    VISIBILITY_CHOICES = [
        ('public', 'Public'),
        ('connections', 'Connections only'),
        ('private', 'Private'),
    ]

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='profile')

    headline = models.CharField(max_length=120, blank=True)
    bio = models.TextField(max_length=2000, blank=True)
    location = models.CharField(max_length=100, blank=True)
    skills = models.JSONField(default=list, blank=True)
    profile_photo = models.CharField(max_length=500, blank=True)
    banner_image = models.CharField(max_length=500, blank=True)
    website = models.URLField(blank=True)
    phone = models.CharField(max_length=40, blank=True)
    resume_url = models.URLField(blank=True)
    is_verified = models.BooleanField(default=False)

    # Accepted connections are symmetric; following is one-directional.
    connections = models.ManyToManyField('self', symmetrical=True, blank=True)
    following = models.ManyToManyField('self', symmetrical=False, blank=True, related_name='followers')

    profile_views = models.PositiveIntegerField(default=0)

    # Privacy
    profile_visibility = models.CharField(max_length=20, choices=VISIBILITY_CHOICES, default='public')
    show_email = models.BooleanField(default=False)
    show_phone = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['location'], name='network_pro_locatio_idx'),
            models.Index(fields=['-profile_views'], name='network_pro_views_idx'),
        ]

    def __str__(self):
        return self.get_full_name() or self.user.email

    def get_full_name(self):
        return f"{self.user.first_name} {self.user.last_name}".strip()

    def connection_user_ids(self):
        return list(self.connections.values_list('user_id', flat=True))

    def following_user_ids(self):
        return list(self.following.values_list('user_id', flat=True))

    def is_connected_to(self, user):
        return self.connections.filter(user=user).exists()


class Experience(models.Model):
    profile = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name='experience')
    company = models.CharField(max_length=120)
    role = models.CharField(max_length=120)
    years = models.DecimalField(max_digits=4, decimal_places=1, default=0)
    description = models.TextField(blank=True)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    current = models.BooleanField(default=False)

    class Meta:
        ordering = ['-current', '-start_date', 'id']


class Education(models.Model):
    profile = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name='education')
    school = models.CharField(max_length=160)
    degree = models.CharField(max_length=120)
    field = models.CharField(max_length=120, blank=True)
    start_year = models.PositiveSmallIntegerField(null=True, blank=True)
    end_year = models.PositiveSmallIntegerField(null=True, blank=True)
    current = models.BooleanField(default=False)

    class Meta:
        ordering = ['-current', '-end_year', 'id']


class Connection(models.Model):
    """A connection request between two accounts.

    ``pair_key`` is unique, so a pair of accounts can only ever have one
    record regardless of who asked first or what state it is in.
    """
    STATUS_PENDING = 'pending'
    STATUS_ACCEPTED = 'accepted'
    STATUS_DECLINED = 'declined'
    STATUS_BLOCKED = 'blocked'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_ACCEPTED, 'Accepted'),
        (STATUS_DECLINED, 'Declined'),
        (STATUS_BLOCKED, 'Blocked'),
    ]

    requester = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='sent_connection_requests')
    recipient = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='received_connection_requests')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    message = models.CharField(max_length=300, blank=True)
    pair_key = models.CharField(max_length=64, unique=True, editable=False)
    connected_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['recipient', 'status'], name='network_con_recip_status_idx'),
            models.Index(fields=['requester', 'status'], name='network_con_reqst_status_idx'),
        ]

    def __str__(self):
        return f"Connection({self.requester_id} -> {self.recipient_id}, {self.status})"

    def save(self, *args, **kwargs):
        self.pair_key = pair_key(self.requester_id, self.recipient_id)
        if self.status == self.STATUS_ACCEPTED and not self.connected_at:
            self.connected_at = timezone.now()
        return super().save(*args, **kwargs)


class Hashtag(models.Model):
    name = models.CharField(max_length=100, unique=True)

    def __str__(self):
        return self.name


class Post(models.Model):
    TYPE_CHOICES = [
        ('text', 'Text'),
        ('image', 'Image'),
        ('link', 'Link'),
        ('job_share', 'Job share'),
    ]
    VISIBILITY_CHOICES = [
        ('public', 'Public'),
        ('connections', 'Connections'),
        ('private', 'Private'),
    ]

    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='posts')
    content = models.TextField(max_length=3000)
    post_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='text')
    images = models.JSONField(default=list, blank=True)
    link = models.JSONField(default=dict, blank=True)  # url, title, description, image
    hashtags = models.ManyToManyField(Hashtag, blank=True, related_name='posts')
    mentions = models.ManyToManyField(settings.AUTH_USER_MODEL, blank=True, related_name='mentioned_in_posts')
    likes = models.ManyToManyField(settings.AUTH_USER_MODEL, blank=True, related_name='liked_posts')
    visibility = models.CharField(max_length=20, choices=VISIBILITY_CHOICES, default='public')
    engagement_score = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='network_pos_created_idx'),
            models.Index(fields=['author', '-created_at'], name='network_pos_author_idx'),
            models.Index(fields=['engagement_score'], name='network_pos_score_idx'),
        ]

    def __str__(self):
        return f"Post({self.pk}) by {self.author_id}"

    def compute_engagement_score(self):
        return self.likes.count() + self.comments.count() + 2 * self.shares.count()

    @classmethod
    def refresh_engagement_score(cls, post_id):
        """Recompute ``likes + comments + 2 * shares`` for a post and persist it."""
        post = cls(pk=post_id)
        score = post.compute_engagement_score()
        cls.objects.filter(pk=post_id).update(engagement_score=score)
        return score

    def save(self, *args, **kwargs):
        # Never write back a stale in-memory score
        if self.pk:
            self.engagement_score = self.compute_engagement_score()
        return super().save(*args, **kwargs)


class Comment(models.Model):
    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name='comments')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='post_comments')
    content = models.CharField(max_length=500)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['created_at', 'id']


class Share(models.Model):
    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name='shares')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='post_shares')
    shared_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['shared_at', 'id']
        constraints = [
            models.UniqueConstraint(fields=['post', 'user'], name='unique_share_per_user'),
        ]


class Job(models.Model):
    TYPE_CHOICES = [
        ('full-time', 'Full-time'),
        ('part-time', 'Part-time'),
        ('contract', 'Contract'),
        ('internship', 'Internship'),
        ('freelance', 'Freelance'),
    ]
    EXPERIENCE_CHOICES = [
        ('entry', 'Entry Level'),
        ('mid', 'Mid Level'),
        ('senior', 'Senior Level'),
        ('executive', 'Executive'),
    ]
    SALARY_PERIOD_CHOICES = [
        ('hourly', 'Hourly'),
        ('daily', 'Daily'),
        ('monthly', 'Monthly'),
        ('yearly', 'Yearly'),
    ]

    title = models.CharField(max_length=100)
    company = models.CharField(max_length=100)
    description = models.TextField(max_length=5000)
    location = models.CharField(max_length=100)
    job_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    experience = models.CharField(max_length=20, choices=EXPERIENCE_CHOICES)
    salary_min = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    salary_max = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    salary_currency = models.CharField(max_length=3, default='USD')
    salary_period = models.CharField(max_length=10, choices=SALARY_PERIOD_CHOICES, default='yearly')
    skills = models.JSONField(default=list, blank=True)
    requirements = models.JSONField(default=list, blank=True)
    benefits = models.JSONField(default=list, blank=True)
    poster = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='posted_jobs')
    external_url = models.URLField(blank=True)
    company_logo = models.CharField(max_length=500, blank=True)
    is_active = models.BooleanField(default=True)
    deadline = models.DateTimeField(null=True, blank=True)
    remote = models.BooleanField(default=False)
    featured = models.BooleanField(default=False)
    views = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-featured', '-created_at']
        indexes = [
            models.Index(fields=['location'], name='network_job_locatio_idx'),
            models.Index(fields=['job_type'], name='network_job_type_idx'),
            models.Index(fields=['experience'], name='network_job_exp_idx'),
            models.Index(fields=['-created_at'], name='network_job_created_idx'),
            models.Index(fields=['is_active', '-featured', '-created_at'], name='network_job_listing_idx'),
        ]

    def __str__(self):
        return f"{self.title} @ {self.company}"

    def is_accepting_applications(self):
        if not self.is_active:
            return False
        if self.deadline and self.deadline < timezone.now():
            return False
        return True


class JobApplication(models.Model):
    STATUS_CHOICES = [
        ('applied', 'Applied'),
        ('reviewing', 'Reviewing'),
        ('shortlisted', 'Shortlisted'),
        ('interviewed', 'Interviewed'),
        ('rejected', 'Rejected'),
        ('hired', 'Hired'),
    ]

    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name='applications')
    applicant = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='job_applications')
    cover_letter = models.TextField(blank=True)
    resume_url = models.URLField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='applied')
    applied_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-applied_at']
        constraints = [
            models.UniqueConstraint(fields=['job', 'applicant'], name='unique_application_per_applicant'),
        ]

    @classmethod
    def valid_statuses(cls):
        return [value for value, _ in cls.STATUS_CHOICES]


class Message(models.Model):
    TYPE_CHOICES = [
        ('text', 'Text'),
        ('image', 'Image'),
        ('file', 'File'),
    ]

    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='sent_messages')
    recipient = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='received_messages')
    content = models.TextField(max_length=1000)
    message_type = models.CharField(max_length=10, choices=TYPE_CHOICES, default='text')
    file_url = models.CharField(max_length=500, blank=True)
    file_name = models.CharField(max_length=255, blank=True)
    file_size = models.PositiveIntegerField(null=True, blank=True)
    read_at = models.DateTimeField(null=True, blank=True)
    conversation_id = models.CharField(max_length=64, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['conversation_id', '-created_at'], name='network_msg_conv_idx'),
            models.Index(fields=['sender', 'recipient'], name='network_msg_pair_idx'),
        ]

    def save(self, *args, **kwargs):
        if not self.conversation_id:
            self.conversation_id = pair_key(self.sender_id, self.recipient_id)
        return super().save(*args, **kwargs)


class Notification(models.Model):
    TYPE_CHOICES = [
        ('connection_request', 'Connection request'),
        ('connection_accepted', 'Connection accepted'),
        ('post_like', 'Post like'),
        ('post_comment', 'Post comment'),
        ('post_share', 'Post share'),
        ('mention', 'Mention'),
        ('job_match', 'Job match'),
        ('message', 'Message'),
        ('profile_view', 'Profile view'),
    ]

    recipient = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications')
    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='sent_notifications')
    notification_type = models.CharField(max_length=30, choices=TYPE_CHOICES)
    title = models.CharField(max_length=100)
    message = models.CharField(max_length=300)

    # Related objects
    related_post = models.ForeignKey(Post, on_delete=models.CASCADE, null=True, blank=True, related_name='notifications')
    related_job = models.ForeignKey(Job, on_delete=models.CASCADE, null=True, blank=True, related_name='notifications')
    related_user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, null=True, blank=True, related_name='+'
    )

    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    action_url = models.CharField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['recipient', '-created_at'], name='network_ntf_recip_idx'),
            models.Index(fields=['recipient', 'is_read'], name='network_ntf_unread_idx'),
        ]

    def __str__(self):
        return f"{self.notification_type} for {self.recipient_id}"

    def mark_read(self):
        if not self.is_read:
            self.is_read = True
            self.read_at = timezone.now()
            self.save(update_fields=['is_read', 'read_at'])
