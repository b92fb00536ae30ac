from django.contrib import admin

from .models import (
    Comment, Connection, Education, Experience, Hashtag, Job, JobApplication,
    Message, Notification, Post, Profile, Share,
)


class ExperienceInline(admin.TabularInline):
    model = Experience
    extra = 0


class EducationInline(admin.TabularInline):
    model = Education
    extra = 0


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'headline', 'location', 'profile_visibility', 'profile_views', 'is_verified']
    list_filter = ['profile_visibility', 'is_verified']
    search_fields = ['user__email', 'user__first_name', 'user__last_name', 'headline', 'location']
    filter_horizontal = ['connections', 'following']
    inlines = [ExperienceInline, EducationInline]


@admin.register(Connection)
class ConnectionAdmin(admin.ModelAdmin):
    list_display = ['requester', 'recipient', 'status', 'connected_at', 'created_at']
    list_filter = ['status']
    search_fields = ['requester__email', 'recipient__email']
    readonly_fields = ['pair_key', 'created_at', 'updated_at']


@admin.register(Hashtag)
class HashtagAdmin(admin.ModelAdmin):
    search_fields = ['name']


class CommentInline(admin.TabularInline):
    model = Comment
    extra = 0


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ['id', 'author', 'post_type', 'visibility', 'engagement_score', 'created_at']
    list_filter = ['post_type', 'visibility']
    search_fields = ['content', 'author__email']
    readonly_fields = ['engagement_score', 'created_at', 'updated_at']
    filter_horizontal = ['hashtags', 'mentions', 'likes']
    inlines = [CommentInline]


@admin.register(Share)
class ShareAdmin(admin.ModelAdmin):
    list_display = ['post', 'user', 'shared_at']
    search_fields = ['user__email']


class JobApplicationInline(admin.TabularInline):
    model = JobApplication
    extra = 0


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ['title', 'company', 'location', 'job_type', 'experience', 'is_active', 'featured', 'views']
    list_filter = ['job_type', 'experience', 'is_active', 'featured', 'remote']
    search_fields = ['title', 'company', 'location']
    inlines = [JobApplicationInline]


@admin.register(JobApplication)
class JobApplicationAdmin(admin.ModelAdmin):
    list_display = ['job', 'applicant', 'status', 'applied_at']
    list_filter = ['status']
    search_fields = ['job__title', 'applicant__email']


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ['conversation_id', 'sender', 'recipient', 'message_type', 'read_at', 'created_at']
    list_filter = ['message_type']
    search_fields = ['conversation_id', 'sender__email', 'recipient__email']


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['recipient', 'notification_type', 'title', 'is_read', 'created_at']
    list_filter = ['notification_type', 'is_read']
    search_fields = ['recipient__email', 'title', 'message']
