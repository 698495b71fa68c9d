"""Role and permission gates for function views.

Both gates deny by default. Anonymous visitors are sent to the login page
(401 JSON for API clients); signed-in users missing the role or permission
get a 403, as JSON for API clients and as the regular error page otherwise.
Superusers pass every gate.
"""

import logging
from functools import wraps

from django.conf import settings
from django.contrib.auth.views import redirect_to_login
from django.core.exceptions import PermissionDenied
from django.http import JsonResponse

from .http import expects_json

logger = logging.getLogger(__name__)

ROLE_DENIED_MESSAGE = "You do not have permission to access this resource."
PERMISSION_DENIED_MESSAGE = "You do not have permission to perform this action."


def user_has_any_role(user, roles):
    if not user.is_authenticated:
        return False
    if user.is_superuser:
        return True
    return user.has_any_role(roles)


def user_has_any_permission(user, permissions):
    if not user.is_authenticated:
        return False
    if user.is_superuser:
        return True
    return user.has_any_permission(permissions)


def unauthenticated(request, login_url=None):
    if expects_json(request):
        return JsonResponse({"message": "Unauthenticated."}, status=401)
    return redirect_to_login(request.get_full_path(), login_url or settings.LOGIN_URL)


def deny(request, message, **details):
    """Refuse the request: JSON 403 for API clients, PermissionDenied otherwise."""
    logger.info(
        "Access denied for %s on %s",
        getattr(request.user, "email", "anonymous"),
        request.path,
    )
    if expects_json(request):
        return JsonResponse({"message": message, **details}, status=403)
    raise PermissionDenied(message)


def role_required(*roles):
    """Require the user to hold at least one of ``roles``."""

    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if not request.user.is_authenticated:
                return unauthenticated(request)
            if not user_has_any_role(request.user, roles):
                return deny(request, ROLE_DENIED_MESSAGE, required_roles=list(roles))
            return view_func(request, *args, **kwargs)

        return wrapper

    return decorator


def any_permission_required(*permissions):
    """Require the user to hold at least one of ``permissions`` through a role."""

    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if not request.user.is_authenticated:
                return unauthenticated(request)
            if not user_has_any_permission(request.user, permissions):
                return deny(
                    request, PERMISSION_DENIED_MESSAGE, required_permissions=list(permissions)
                )
            return view_func(request, *args, **kwargs)

        return wrapper

    return decorator


def login_required_json(view_func):
    """Like ``login_required`` but answers API clients with a 401 body."""

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return unauthenticated(request)
        return view_func(request, *args, **kwargs)

    return wrapper
