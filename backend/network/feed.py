"""
Feed assembly and the page/limit pagination shared by the list endpoints.
"""
import math

from django.conf import settings
from django.db.models import Q
from rest_framework.exceptions import ValidationError

from network.models import Post

FEED_VISIBILITIES = ('public', 'connections')


def parse_pagination(request, default_limit=10):
    """Read ``page`` and ``limit`` from the query string.

    ``limit`` is capped at ``API_MAX_PAGE_SIZE``; non-numeric or non-positive
    values are rejected with a 400.
    """
    try:
        page = int(request.query_params.get('page', 1))
        limit = int(request.query_params.get('limit', default_limit))
    except (TypeError, ValueError):
        raise ValidationError({'page': 'page and limit must be integers.'})
    if page < 1 or limit < 1:
        raise ValidationError({'page': 'page and limit must be positive.'})
    return page, min(limit, settings.API_MAX_PAGE_SIZE)


def paginate(queryset, page, limit):
    """Slice ``queryset`` for ``page`` and return ``(items, meta)``."""
    total = queryset.count()
    offset = (page - 1) * limit
    items = list(queryset[offset:offset + limit])
    meta = {
        'total': total,
        'total_pages': math.ceil(total / limit) if limit else 0,
        'current_page': page,
    }
    return items, meta


def with_post_relations(queryset):
    return queryset.select_related('author__profile').prefetch_related(
        'hashtags', 'mentions', 'likes', 'shares', 'comments__user__profile'
    )


def feed_queryset(user):
    """Posts a user should see: their own network plus trending posts.

    Ordered newest first, then by engagement, then by id so pages do not
    reshuffle between equal keys.
    """
    profile = user.profile
    author_ids = set(profile.connection_user_ids())
    author_ids.update(profile.following_user_ids())
    author_ids.add(user.pk)

    trending = Q(engagement_score__gte=settings.FEED_TRENDING_THRESHOLD)
    return (
        Post.objects
        .filter(Q(author_id__in=author_ids) | trending)
        .filter(visibility__in=FEED_VISIBILITIES)
        .order_by('-created_at', '-engagement_score', '-id')
    )


def build_feed(user, page=1, limit=10):
    """Return one page of the feed as ``(posts, meta)``."""
    return paginate(with_post_relations(feed_queryset(user)), page, limit)
