"""
Post views: create, feed, engagement (like, comment, share), hashtag search.
"""
import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from network.exceptions import Conflict
from network.feed import build_feed, paginate, parse_pagination, with_post_relations
from network.models import Comment, Hashtag, Post, Share
from network.notifications import notify
from network.permissions import is_owner_or_admin
from network.serializers import CommentSerializer, PostCreateSerializer, PostSerializer

logger = logging.getLogger(__name__)
User = get_user_model()


def _load_post(post_id):
    return get_object_or_404(with_post_relations(Post.objects.all()), pk=post_id)


def can_view_post(user, post):
    if post.visibility == 'public' or is_owner_or_admin(user, post.author_id):
        return True
    if post.visibility == 'connections':
        return post.author.profile.is_connected_to(user)
    return False


def _get_visible_post(user, post_id):
    post = get_object_or_404(Post.objects.select_related('author__profile'), pk=post_id)
    if not can_view_post(user, post):
        raise PermissionDenied('You do not have access to this post.')
    return post


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def create_post(request):
    """
    Publish a post.

    Request Body:
    {
        "content": "Shipping today #launch",
        "post_type": "text",
        "images": [],
        "link": {"url": "...", "title": "..."},
        "hashtags": ["launch"],         # optional; extracted from content otherwise
        "mentions": [12, 15],
        "visibility": "public"
    }
    """
    serializer = PostCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    with transaction.atomic():
        post = Post.objects.create(
            author=request.user,
            content=data['content'],
            post_type=data['post_type'],
            images=data.get('images') or [],
            link=data.get('link') or {},
            visibility=data['visibility'],
        )
        tags = [Hashtag.objects.get_or_create(name=name)[0] for name in data['hashtags']]
        post.hashtags.set(tags)

        mentioned = list(
            User.objects.filter(pk__in=data.get('mentions') or [], is_active=True).exclude(pk=request.user.pk)
        )
        if mentioned:
            post.mentions.set(mentioned)
            for user in mentioned:
                notify(user, request.user, 'mention', post=post)

    logger.info("Post %s created by %s", post.pk, request.user.pk)
    post = _load_post(post.pk)
    return Response(
        {
            'message': 'Post created successfully',
            'post': PostSerializer(post, context={'request': request}).data,
        },
        status=status.HTTP_201_CREATED,
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def post_feed(request):
    """Posts from the caller's connections and follows plus trending posts."""
    page, limit = parse_pagination(request)
    posts, meta = build_feed(request.user, page, limit)
    return Response({'posts': PostSerializer(posts, many=True, context={'request': request}).data, **meta})


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def post_detail(request, post_id):
    """
    GET: Fetch a single post
    DELETE: Delete a post (author or admin)
    """
    post = _load_post(post_id)

    if request.method == 'GET':
        if not can_view_post(request.user, post):
            raise PermissionDenied('You do not have access to this post.')
        return Response({'post': PostSerializer(post, context={'request': request}).data})

    if not is_owner_or_admin(request.user, post.author_id):
        raise PermissionDenied('Not authorized to delete this post.')
    post.delete()
    logger.info("Post %s deleted by %s", post_id, request.user.pk)
    return Response({'message': 'Post deleted successfully'})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def toggle_like(request, post_id):
    """Like the post, or remove the like when already present."""
    post = _get_visible_post(request.user, post_id)

    with transaction.atomic():
        liked = post.likes.filter(pk=request.user.pk).exists()
        if liked:
            post.likes.remove(request.user)
        else:
            post.likes.add(request.user)
            notify(post.author, request.user, 'post_like', post=post)

    return Response(
        {
            'message': 'Post unliked' if liked else 'Post liked',
            'is_liked': not liked,
            'likes_count': post.likes.count(),
        }
    )


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def add_comment(request, post_id):
    post = _get_visible_post(request.user, post_id)
    serializer = CommentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    with transaction.atomic():
        comment = Comment.objects.create(post=post, user=request.user, content=serializer.validated_data['content'])
        notify(post.author, request.user, 'post_comment', post=post)

    comment = Comment.objects.select_related('user__profile').get(pk=comment.pk)
    return Response(
        {
            'message': 'Comment added successfully',
            'comment': CommentSerializer(comment).data,
            'comments_count': post.comments.count(),
        },
        status=status.HTTP_201_CREATED,
    )


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def share_post(request, post_id):
    """Share a post once per account."""
    post = _get_visible_post(request.user, post_id)

    if Share.objects.filter(post=post, user=request.user).exists():
        raise Conflict('Post already shared.')
    try:
        with transaction.atomic():
            Share.objects.create(post=post, user=request.user)
            notify(post.author, request.user, 'post_share', post=post)
    except IntegrityError:
        raise Conflict('Post already shared.')

    return Response(
        {
            'message': 'Post shared successfully',
            'shares_count': post.shares.count(),
        },
        status=status.HTTP_201_CREATED,
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def posts_by_hashtag(request, tag):
    """Public posts carrying ``tag``, newest first."""
    tag = tag.lstrip('#').lower()
    if not tag:
        raise ValidationError({'tag': 'Hashtag is required.'})
    page, limit = parse_pagination(request)

    posts = Post.objects.filter(hashtags__name=tag, visibility='public').order_by('-created_at', '-id')
    items, meta = paginate(with_post_relations(posts), page, limit)
    return Response(
        {
            'posts': PostSerializer(items, many=True, context={'request': request}).data,
            'hashtag': tag,
            **meta,
        }
    )
