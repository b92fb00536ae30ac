"""
Ownership rules shared by the domain views.
"""


def is_admin(user):
    return bool(user and (user.is_staff or user.is_superuser))


def is_owner_or_admin(user, owner_id):
    """True when ``user`` owns the object (by owner id) or is an admin."""
    return is_admin(user) or owner_id == user.pk
