"""
Bearer credential issuing and verification.

Tokens are HS256-signed JWTs carrying the account id in ``sub``.
"""
from datetime import timedelta

import jwt
from django.conf import settings
from django.utils import timezone


class InvalidToken(Exception):
    """Raised when a bearer credential cannot be trusted."""


def issue_token(user):
    now = timezone.now()
    payload = {
        'sub': str(user.pk),
        'email': user.email,
        'iat': now,
        'exp': now + timedelta(days=settings.JWT_EXPIRATION_DAYS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token):
    """Return the token payload or raise ``InvalidToken``."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise InvalidToken('Token has expired') from exc
    except jwt.PyJWTError as exc:
        raise InvalidToken('Invalid authentication token') from exc
    if not payload.get('sub'):
        raise InvalidToken('Invalid token payload')
    return payload
