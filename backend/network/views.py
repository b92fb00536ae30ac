"""
Account, authentication and profile views.
"""
import logging

from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.models import update_last_login
from django.db import connection as db_connection
from django.db import IntegrityError, transaction
from django.db.models import F, Q
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from network.feed import paginate, parse_pagination, with_post_relations
from network.models import Post, Profile
from network.permissions import is_admin
from network.serializers import (
    ChangePasswordSerializer,
    PostSerializer,
    ProfileSerializer,
    ProfileUpdateSerializer,
    UserCardSerializer,
    UserLoginSerializer,
    UserRegistrationSerializer,
    UserSerializer,
    split_name,
)
from network.tokens import issue_token

logger = logging.getLogger(__name__)
User = get_user_model()


def _validation_messages(errors):
    """Return a list of human-readable validation error messages.

    Example input:
      {"email": ["Enter a valid email address."], "password": ["This field is required."]}
    Output list:
      ["Email: Enter a valid email address.", "Password: This field is required."]
    """
    messages = []
    if isinstance(errors, dict):
        for field, err in errors.items():
            msg = str(err[0]) if isinstance(err, (list, tuple)) and err else str(err)
            if field == 'non_field_errors':
                messages.append(msg)
            else:
                messages.append(f"{str(field).replace('_', ' ').capitalize()}: {msg}")
    elif isinstance(errors, (list, tuple)):
        messages.extend(str(e) for e in errors if e)
    return messages


def _validation_error_response(errors):
    msgs = _validation_messages(errors)
    return Response(
        {
            'error': {
                'code': 'validation_error',
                'message': (msgs[0] if msgs else 'Validation error'),
                'messages': msgs,
                'details': errors,
            }
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


def _duplicate_email_response():
    return Response(
        {
            'error': {
                'code': 'conflict',
                'message': 'An account with this email already exists. Please log in instead.',
            }
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


def can_view_profile(viewer, profile):
    """Apply the owner's ``profile_visibility`` setting for ``viewer``."""
    if viewer.pk == profile.user_id or is_admin(viewer):
        return True
    if profile.profile_visibility == 'private':
        return False
    if profile.profile_visibility == 'connections':
        return profile.is_connected_to(viewer)
    return True


@api_view(['GET'])
@permission_classes([AllowAny])
@authentication_classes([])
def health(request):
    """Public liveness check: the process is up and the database answers."""
    try:
        with db_connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except Exception as exc:
        logger.error("Health check database ping failed: %s", exc)
        return Response({'status': 'error', 'database': 'unavailable'}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response({'status': 'ok', 'database': 'ok'}, status=status.HTTP_200_OK)


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

@api_view(['POST'])
@permission_classes([AllowAny])
@authentication_classes([])
def register_user(request):
    """
    Register a new account.

    Request Body:
    {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "password": "secret1",
        "headline": "Backend engineer"     # optional
    }

    Response (201):
    {
        "token": "<bearer token>",
        "user": {...},
        "message": "Registration successful"
    }
    """
    serializer = UserRegistrationSerializer(data=request.data)
    if not serializer.is_valid():
        return _validation_error_response(serializer.errors)

    data = serializer.validated_data
    email = data['email']
    if User.objects.filter(Q(username=email) | Q(email__iexact=email)).exists():
        return _duplicate_email_response()

    first_name, last_name = split_name(data['name'])
    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=email,
                email=email,
                password=data['password'],
                first_name=first_name,
                last_name=last_name,
            )
            headline = (data.get('headline') or '').strip()
            if headline:
                Profile.objects.filter(user=user).update(headline=headline)
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        return _duplicate_email_response()

    logger.info("Registered account %s", user.pk)
    user = User.objects.select_related('profile').get(pk=user.pk)
    return Response(
        {
            'token': issue_token(user),
            'user': UserSerializer(user).data,
            'message': 'Registration successful',
        },
        status=status.HTTP_201_CREATED,
    )


@api_view(['POST'])
@permission_classes([AllowAny])
@authentication_classes([])
def login_user(request):
    """
    Exchange email and password for a bearer token.

    Request Body:
    {
        "email": "jane@example.com",
        "password": "secret1"
    }
    """
    serializer = UserLoginSerializer(data=request.data)
    if not serializer.is_valid():
        return _validation_error_response(serializer.errors)

    email = serializer.validated_data['email']
    user = authenticate(request, username=email, password=serializer.validated_data['password'])
    if user is None:
        logger.info("Failed login for %s", email)
        return Response(
            {'error': {'code': 'invalid_credentials', 'message': 'Invalid email or password.'}},
            status=status.HTTP_400_BAD_REQUEST,
        )

    update_last_login(None, user)
    return Response(
        {
            'token': issue_token(user),
            'user': UserSerializer(user).data,
            'message': 'Login successful',
        }
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def current_user(request):
    """Return the authenticated account with its full profile."""
    profile = Profile.objects.select_related('user').prefetch_related('experience', 'education').get(
        user=request.user
    )
    return Response(
        {
            'user': UserSerializer(request.user).data,
            'profile': ProfileSerializer(profile, context={'viewer': request.user}).data,
        }
    )


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def change_password(request):
    serializer = ChangePasswordSerializer(data=request.data)
    if not serializer.is_valid():
        return _validation_error_response(serializer.errors)

    user = request.user
    if not user.check_password(serializer.validated_data['current_password']):
        return _validation_error_response({'current_password': ['Current password is incorrect.']})

    user.set_password(serializer.validated_data['new_password'])
    user.save(update_fields=['password'])
    logger.info("Password changed for account %s", user.pk)
    return Response({'message': 'Password changed successfully'})


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------

@api_view(['GET'])
@permission_classes([IsAuthenticated])
def profile_detail(request, user_id):
    """Fetch another account's profile.

    Views by anyone other than the owner increment ``profile_views``.
    """
    profile = get_object_or_404(
        Profile.objects.select_related('user').prefetch_related('experience', 'education'),
        user_id=user_id,
        user__is_active=True,
    )
    if not can_view_profile(request.user, profile):
        raise PermissionDenied('This profile is not visible to you.')

    if request.user.pk != profile.user_id:
        Profile.objects.filter(pk=profile.pk).update(profile_views=F('profile_views') + 1)
        profile.refresh_from_db(fields=['profile_views'])

    data = ProfileSerializer(profile, context={'viewer': request.user}).data
    data['is_connected'] = profile.is_connected_to(request.user)
    data['is_following'] = profile.followers.filter(user=request.user).exists()
    return Response({'user': data})


@api_view(['PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def update_profile(request):
    """Update the caller's own profile.

    Email, admin flag, password and the social edges are not writable here;
    ``experience`` and ``education`` replace the stored lists when given.
    """
    profile = request.user.profile
    serializer = ProfileUpdateSerializer(profile, data=request.data, partial=True)
    if not serializer.is_valid():
        return _validation_error_response(serializer.errors)

    with transaction.atomic():
        serializer.save()

    profile = Profile.objects.select_related('user').prefetch_related('experience', 'education').get(pk=profile.pk)
    return Response(
        {
            'message': 'Profile updated successfully',
            'user': ProfileSerializer(profile, context={'viewer': request.user}).data,
        }
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def search_users(request):
    """
    Search accounts.

    Query params: ``q`` (name, headline, skills, location), ``location``,
    ``skills`` (comma separated), ``page``, ``limit``.
    """
    page, limit = parse_pagination(request, default_limit=20)
    qs = User.objects.filter(is_active=True).select_related('profile')

    q = (request.query_params.get('q') or '').strip()
    if q:
        text = Q()
        for term in q.split():
            text &= (
                Q(first_name__icontains=term)
                | Q(last_name__icontains=term)
                | Q(profile__headline__icontains=term)
                | Q(profile__skills__icontains=term)
                | Q(profile__location__icontains=term)
            )
        qs = qs.filter(text)

    location = (request.query_params.get('location') or '').strip()
    if location:
        qs = qs.filter(profile__location__icontains=location)

    skills = [s.strip() for s in (request.query_params.get('skills') or '').split(',') if s.strip()]
    if skills:
        skill_match = Q()
        for skill in skills:
            skill_match |= Q(profile__skills__icontains=skill)
        qs = qs.filter(skill_match)

    qs = qs.order_by('-profile__profile_views', '-date_joined', 'id')
    users, meta = paginate(qs, page, limit)
    return Response({'users': UserCardSerializer(users, many=True).data, **meta})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_suggestions(request):
    """Up to ten accounts sharing a skill or location with the caller."""
    profile = request.user.profile
    exclude_ids = set(profile.connection_user_ids())
    exclude_ids.update(profile.following_user_ids())
    exclude_ids.add(request.user.pk)

    match = Q()
    for skill in profile.skills or []:
        match |= Q(profile__skills__icontains=skill)
    if profile.location:
        match |= Q(profile__location__iexact=profile.location)
    if not match:
        return Response({'suggestions': []})

    suggestions = (
        User.objects.filter(is_active=True)
        .filter(match)
        .exclude(pk__in=exclude_ids)
        .select_related('profile')
        .order_by('-profile__profile_views', 'id')
        .distinct()[:10]
    )
    return Response({'suggestions': UserCardSerializer(suggestions, many=True).data})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_posts(request, user_id):
    """Posts written by one account, newest first, filtered by post visibility."""
    author = get_object_or_404(User, pk=user_id, is_active=True)
    page, limit = parse_pagination(request)

    posts = Post.objects.filter(author=author)
    if author.pk != request.user.pk and not is_admin(request.user):
        visible = ['public']
        if author.profile.is_connected_to(request.user):
            visible.append('connections')
        posts = posts.filter(visibility__in=visible)

    items, meta = paginate(with_post_relations(posts.order_by('-created_at', '-id')), page, limit)
    serializer = PostSerializer(items, many=True, context={'request': request})
    return Response({'posts': serializer.data, **meta})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def toggle_follow(request, user_id):
    """Follow the account, or unfollow it when already following."""
    if user_id == request.user.pk:
        raise ValidationError({'user_id': 'You cannot follow yourself.'})
    target = get_object_or_404(User.objects.select_related('profile'), pk=user_id, is_active=True)

    me = request.user.profile
    if me.following.filter(pk=target.profile.pk).exists():
        me.following.remove(target.profile)
        is_following = False
        message = 'Unfollowed successfully'
    else:
        me.following.add(target.profile)
        is_following = True
        message = 'Following successfully'

    logger.info("Account %s %s account %s", request.user.pk, 'followed' if is_following else 'unfollowed', target.pk)
    return Response({'message': message, 'is_following': is_following})
