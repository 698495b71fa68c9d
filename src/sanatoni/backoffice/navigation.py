"""Back office navigation, filtered by the signed-in user's roles and permissions."""

from django.conf import settings
from django.urls import NoReverseMatch, reverse

from sanatoni.core.access import user_has_any_permission, user_has_any_role
from sanatoni.core.models import ADMIN_ACCESS_ROLES

BACKOFFICE_PREFIX = "/admin/"


def resolve_nav_url(item):
    """Resolve a named URL; paths and absolute URLs pass through."""
    url = item.get("url", "")
    if not url:
        return "#"
    if url.startswith("/") or url.startswith("http"):
        return url
    try:
        return reverse(url)
    except NoReverseMatch:
        return url


def filter_nav_items(items, user, request):
    """
    Keep the items ``user`` may open.

    Each item can have:
    - 'permission': a permission name granted through the user's roles
    - 'roles': a list of role names, one of which the user must hold
    """
    filtered = []
    for item in items:
        roles = item.get("roles")
        if roles and not user_has_any_role(user, roles):
            continue

        permission = item.get("permission")
        if permission and not user_has_any_permission(user, [permission]):
            continue

        nav_item = item.copy()
        nav_item["resolved_url"] = resolve_nav_url(item)
        if nav_item["resolved_url"] == reverse("backoffice:dashboard"):
            nav_item["is_active"] = request.path == nav_item["resolved_url"]
        else:
            nav_item["is_active"] = request.path.startswith(nav_item["resolved_url"])
        filtered.append(nav_item)
    return filtered


def group_nav_by_section(items):
    sections = {}
    for item in items:
        sections.setdefault(item.get("section", "Main"), []).append(item)
    return [{"name": name, "items": entries} for name, entries in sections.items()]


def navigation_props(request):
    """Sidebar for back office pages; empty elsewhere and for customers."""
    user = getattr(request, "user", None)
    if not request.path.startswith(BACKOFFICE_PREFIX) or user is None:
        return {}
    if not user_has_any_role(user, ADMIN_ACCESS_ROLES):
        return {}
    items = filter_nav_items(getattr(settings, "BACKOFFICE_NAV", []), user, request)
    return {"navigation": group_nav_by_section(items)}
