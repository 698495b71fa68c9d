"""Locale resolution middleware."""

from django.utils import translation

from . import conf
from .detection import resolve_locale, url_locale_prefix


class LocalizationMiddleware:
    """
    Resolve the request locale and activate it.

    Runs after AuthenticationMiddleware so the user's saved language setting
    can take part in detection. The resolved locale is stored in the session
    so it sticks for the rest of the visit, exposed as
    ``request.LANGUAGE_CODE`` and echoed in the ``Content-Language`` header.

    With path based locale URLs, a leading ``/bn/`` segment is stripped from
    ``request.path_info`` before URL resolution.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        locale = resolve_locale(request)

        if conf.get_setting("URL_LOCALE_TYPE") == "path":
            self.strip_locale_prefix(request)

        translation.activate(locale)
        request.LANGUAGE_CODE = locale
        session_key = conf.get_setting("SESSION_KEY")
        if hasattr(request, "session") and request.session.get(session_key) != locale:
            request.session[session_key] = locale

        response = self.get_response(request)

        response.headers.setdefault("Content-Language", locale)
        return response

    @staticmethod
    def strip_locale_prefix(request):
        prefix = url_locale_prefix(request.path_info)
        if not prefix:
            return
        old_path_info = request.path_info
        new_path_info = old_path_info[len(prefix) + 1:] or "/"
        if not new_path_info.startswith("/"):
            new_path_info = "/" + new_path_info
        script_name = request.path[: len(request.path) - len(old_path_info)]
        request.path_info = new_path_info
        request.path = script_name + new_path_info
