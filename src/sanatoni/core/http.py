"""Request and response helpers shared by every app."""

import json

from django.core.exceptions import BadRequest
from django.http import QueryDict
from django.shortcuts import redirect
from django.utils.http import url_has_allowed_host_and_scheme


def is_page_request(request):
    """True for client-side navigation requests made by the page runtime."""
    return request.headers.get("X-Inertia", "").lower() == "true"


def expects_json(request):
    """True for API clients that want a JSON body rather than a page."""
    if is_page_request(request):
        return False
    if request.headers.get("X-Requested-With") == "XMLHttpRequest":
        return True
    return "json" in request.headers.get("Accept", "")


def flatten(data, prefix=""):
    """Flatten nested dicts into Django form prefix keys.

    ``{"shipping_address": {"city": "Dhaka"}}`` becomes
    ``{"shipping_address-city": "Dhaka"}``.
    """
    flat = {}
    for key, value in data.items():
        name = f"{prefix}-{key}" if prefix else key
        if isinstance(value, dict):
            flat.update(flatten(value, name))
        else:
            flat[name] = value
    return flat


def request_json(request):
    """Decode a JSON request body into a dict."""
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except json.JSONDecodeError:
        raise BadRequest("Invalid JSON")
    if not isinstance(data, dict):
        raise BadRequest("Expected a JSON object")
    return data


def request_data(request):
    """Return submitted data as a QueryDict, from a JSON body or a form post.

    JSON lists become multi-valued keys so that multiple choice fields bind
    the same way they do for form posts.
    """
    if not (request.content_type or "").startswith("application/json"):
        return request.POST

    payload = QueryDict(mutable=True)
    for key, value in flatten(request_json(request)).items():
        if isinstance(value, list):
            payload.setlist(key, value)
        elif value is not None:
            payload[key] = value
    return payload


def client_ip(request):
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


def safe_next_url(request, url):
    if url and url_has_allowed_host_and_scheme(
        url, allowed_hosts={request.get_host()}, require_https=request.is_secure()
    ):
        return url
    return None


def redirect_back(request, fallback="/"):
    """Redirect to the referring page when it is on this site."""
    return redirect(safe_next_url(request, request.headers.get("Referer")) or fallback)
