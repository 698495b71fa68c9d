"""Locale detection strategies.

Each strategy inspects one signal on the request and returns a locale code or
``None``. ``resolve_locale`` runs them in the configured order and returns the
first supported locale, or the default locale when none match.
"""

import logging

from . import conf
from .models import LanguageSetting

logger = logging.getLogger(__name__)


def parse_accept_language(header):
    """Language tags from an Accept-Language header, highest quality first."""
    tags = []
    for position, part in enumerate(header.split(",")):
        piece = part.strip()
        if not piece:
            continue
        tag, _, params = piece.partition(";")
        quality = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                quality = float(params[2:])
            except ValueError:
                quality = 0.0
        if quality > 0:
            tags.append((quality, position, tag.strip()))
    tags.sort(key=lambda item: (-item[0], item[1]))
    return [tag for _, _, tag in tags]


def match_supported(tag):
    """Match a language tag exactly, then by its primary language part."""
    if not tag:
        return None
    tag = tag.replace("_", "-").lower()
    supported = {code.lower(): code for code in conf.get_supported_locales()}
    if tag in supported:
        return supported[tag]
    return supported.get(tag.split("-", 1)[0])


def from_user(request):
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None
    setting = LanguageSetting.default_for(user)
    return setting.locale if setting else None


def from_session(request):
    session = getattr(request, "session", None)
    if session is None:
        return None
    return session.get(conf.get_setting("SESSION_KEY"))


def from_cookie(request):
    return request.COOKIES.get(conf.get_setting("COOKIE_NAME"))


def from_header(request):
    header = request.headers.get("Accept-Language", "")
    for tag in parse_accept_language(header):
        locale = match_supported(tag)
        if locale:
            return locale
    return None


def url_locale_prefix(path):
    """The supported locale at the start of ``path``, if any."""
    segment = path.lstrip("/").split("/", 1)[0]
    return segment if conf.is_supported(segment) else None


def from_url(request):
    url_type = conf.get_setting("URL_LOCALE_TYPE")
    if url_type == "subdomain":
        host = request.get_host().split(":", 1)[0]
        label = host.split(".", 1)[0]
        return label if conf.is_supported(label) else None
    if url_type == "path":
        return url_locale_prefix(request.path_info)
    return None


def from_query(request):
    return request.GET.get(conf.get_setting("QUERY_PARAM"))


STRATEGIES = {
    "user": from_user,
    "session": from_session,
    "cookie": from_cookie,
    "header": from_header,
    "url": from_url,
    "query": from_query,
}


def resolve_locale(request, order=None):
    """Return the first supported locale found by the configured strategies."""
    for name in order or conf.get_setting("DETECTION_ORDER"):
        strategy = STRATEGIES.get(name)
        if strategy is None:
            logger.warning("Unknown locale detection strategy: %s", name)
            continue
        locale = strategy(request)
        if conf.is_supported(locale):
            return locale
    return conf.get_default_locale()
