import logging

from django.contrib.auth import get_user_model
from django.db.models.signals import m2m_changed, post_delete, post_save
from django.dispatch import receiver

from network.models import Comment, Post, Profile, Share

logger = logging.getLogger(__name__)


@receiver(post_save, sender=get_user_model())
def ensure_profile_exists(sender, instance, created, **kwargs):
    """Every account gets a profile the moment it is created."""
    if created:
        Profile.objects.get_or_create(user=instance)


@receiver(m2m_changed, sender=Post.likes.through)
def likes_changed(sender, instance, action, reverse, pk_set, **kwargs):
    if action == 'pre_clear' and reverse:
        # post_clear on the user side carries no pk_set
        instance._cleared_liked_post_ids = list(instance.liked_posts.values_list('pk', flat=True))
        return
    if action not in ('post_add', 'post_remove', 'post_clear'):
        return
    if not reverse:
        Post.refresh_engagement_score(instance.pk)
        return
    if action == 'post_clear':
        pk_set = getattr(instance, '_cleared_liked_post_ids', None)
        instance._cleared_liked_post_ids = None
    for post_id in pk_set or ():
        Post.refresh_engagement_score(post_id)


@receiver([post_save, post_delete], sender=Comment)
@receiver([post_save, post_delete], sender=Share)
def engagement_row_changed(sender, instance, **kwargs):
    Post.refresh_engagement_score(instance.post_id)
