"""Page responses: server-computed props handed to a client-side component.

Every page view answers with a page object::

    {"component": "Products/Index", "props": {...}, "url": "/products/"}

Client-side navigations (``X-Inertia: true``) receive it as JSON. A first
visit receives ``core/app.html`` with the page object embedded, from which
the client boots. Shared props from ``PAGE_PROPS_PROVIDERS`` are merged
under the view's own props.
"""

import logging
from functools import lru_cache

from django.conf import settings
from django.contrib import messages
from django.core.paginator import EmptyPage, PageNotAnInteger, Paginator
from django.core.serializers.json import DjangoJSONEncoder
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.utils.module_loading import import_string

from .http import expects_json, is_page_request, redirect_back

logger = logging.getLogger(__name__)

ERRORS_SESSION_KEY = "_errors"


@lru_cache(maxsize=None)
def get_props_providers():
    return [import_string(path) for path in getattr(settings, "PAGE_PROPS_PROVIDERS", [])]


def shared_props(request):
    props = {}
    for provider in get_props_providers():
        props.update(provider(request))
    return props


def build_page(request, component, props=None):
    return {
        "component": component,
        "props": {**shared_props(request), **(props or {})},
        "url": request.get_full_path(),
    }


def render_page(request, component, props=None, status=200):
    """Render a page component with its props."""
    page = build_page(request, component, props)
    if is_page_request(request) or expects_json(request):
        response = JsonResponse(page, status=status, encoder=DjangoJSONEncoder, safe=False)
        response["X-Inertia"] = "true"
        response["Vary"] = "X-Inertia"
        return response
    return render(request, "core/app.html", {"page": page}, status=status)


def paginate(request, queryset, per_page, serializer, page_param="page", many=False):
    """Paginate a queryset into a serializable dict.

    With ``many=True`` the serializer receives the whole page at once, for
    serializers that batch their lookups.
    """
    paginator = Paginator(queryset, per_page)
    try:
        page = paginator.page(request.GET.get(page_param, 1))
    except PageNotAnInteger:
        page = paginator.page(1)
    except EmptyPage:
        page = paginator.page(paginator.num_pages)

    return {
        "data": serializer(list(page.object_list)) if many else [serializer(obj) for obj in page.object_list],
        "current_page": page.number,
        "last_page": paginator.num_pages,
        "per_page": per_page,
        "total": paginator.count,
        "from": page.start_index() if paginator.count else None,
        "to": page.end_index() if paginator.count else None,
    }


def form_errors(form):
    """Field errors keyed with dotted names, e.g. ``shipping_address.city``."""
    errors = {}
    for field, messages in form.errors.items():
        if form.prefix and field != "__all__":
            key = f"{form.prefix}.{field}"
        else:
            key = field
        errors[key] = [str(message) for message in messages]
    return errors


def validation_error(request, errors, message="The given data was invalid.", fallback="/"):
    """422 for API clients; otherwise keep the errors for the next page and go back."""
    if expects_json(request):
        return JsonResponse({"message": message, "errors": errors}, status=422)
    request.session[ERRORS_SESSION_KEY] = {
        key: value[0] if isinstance(value, (list, tuple)) else value
        for key, value in errors.items()
    }
    return redirect_back(request, fallback)


def pop_errors(request):
    if not hasattr(request, "session"):
        return {}
    return request.session.pop(ERRORS_SESSION_KEY, {})


def flash_response(request, message, level=messages.SUCCESS, status=200, redirect_to=None, fallback="/", **data):
    """JSON body for API clients; otherwise a flash message and a redirect.

    Without ``redirect_to`` the browser goes back to the referring page.
    """
    if expects_json(request):
        return JsonResponse({"message": message, **data}, status=status, encoder=DjangoJSONEncoder)
    messages.add_message(request, level, message)
    if redirect_to:
        return redirect(redirect_to)
    return redirect_back(request, fallback)
