"""Shared page props: the signed-in user, flash messages and form errors."""

from django.contrib import messages

from .pages import pop_errors


def user_props(user):
    roles = list(user.roles.filter(is_active=True).prefetch_related("permissions"))
    return {
        "id": str(user.pk),
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "status": user.status,
        "profile_picture": user.profile_picture or None,
        "roles": [
            {
                "id": role.pk,
                "name": role.name,
                "display_name": role.display_name,
                "permissions": [permission.name for permission in role.permissions.all()],
            }
            for role in roles
        ],
        "permissions": sorted({p.name for role in roles for p in role.permissions.all()}),
        "is_admin": user.is_superuser or any(role.name == "admin" for role in roles),
        "is_manager": any(role.name == "manager" for role in roles),
        "is_salesperson": any(role.name == "salesperson" for role in roles),
        "has_admin_access": user.has_admin_access(),
    }


def auth_props(request):
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return {"auth": {"user": None}}
    return {"auth": {"user": user_props(user)}}


def flash_props(request):
    flash = [
        {"type": message.level_tag, "message": str(message)}
        for message in messages.get_messages(request)
    ]
    return {"flash": flash, "errors": pop_errors(request)}
