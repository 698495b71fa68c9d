"""Translation lookup with database overrides, bundled files and caching.

Keys are dotted: ``store.cart_empty`` lives in the ``store`` group. Bundled
strings are read from ``lang/<locale>/<group>.json``; rows in the
``Translation`` table override them. Lookups are cached per locale, and each
locale carries a version number in its cache keys so a whole locale can be
invalidated at once.

Usage:
    from sanatoni.localization.services import TranslationService

    translations = TranslationService()
    translations.get("store.items_in_cart", replace={"count": 3})
"""

import json
import logging
from pathlib import Path

from django.core.cache import cache as default_cache
from django.utils import translation as django_translation

from . import conf
from .models import Translation

logger = logging.getLogger(__name__)

DEFAULT_LANG_DIR = Path(__file__).resolve().parent / "lang"


def flatten_keys(data, prefix=""):
    """Flatten nested translation dicts into dotted keys."""
    flat = {}
    for key, value in data.items():
        name = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            flat.update(flatten_keys(value, name))
        elif isinstance(value, str):
            flat[name] = value
    return flat


def replace_placeholders(text, replace):
    """Replace ``:name`` placeholders, longest names first."""
    if not replace:
        return text
    for search in sorted(replace, key=len, reverse=True):
        text = text.replace(f":{search}", str(replace[search]))
    return text


class TranslationService:
    """UI string lookup for the storefront and back office."""

    CACHE_PREFIX = "translations:"

    def __init__(self, cache=None, lang_dir=None, timeout=None):
        self.cache = cache or default_cache
        self.lang_dir = Path(lang_dir or conf.get_setting("LANG_DIR") or DEFAULT_LANG_DIR)
        self.timeout = timeout or conf.get_setting("TRANSLATION_CACHE_TIMEOUT")

    # Cache keys

    def _version(self, locale):
        return self.cache.get_or_set(f"{self.CACHE_PREFIX}{locale}:version", 1, None)

    def _cache_key(self, locale, name):
        return f"{self.CACHE_PREFIX}{locale}:v{self._version(locale)}:{name}"

    # Bundled files

    def file_translations_grouped(self, locale):
        """Translations from ``lang/<locale>/*.json`` keyed by group."""
        directory = self.lang_dir / locale
        grouped = {}
        if not directory.is_dir():
            return grouped
        for path in sorted(directory.glob("*.json")):
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError):
                logger.exception("Could not read translation file %s", path)
                continue
            grouped[path.stem] = flatten_keys(data)
        return grouped

    def file_translations(self, locale):
        return {
            f"{group}.{key}": value
            for group, entries in self.file_translations_grouped(locale).items()
            for key, value in entries.items()
        }

    def _from_files(self, key, locale):
        group, _, rest = key.partition(".")
        if not rest:
            return None
        return self.file_translations_grouped(locale).get(group, {}).get(rest)

    # Lookups

    def _resolve(self, key, locale):
        value = Translation.lookup(key, locale)
        if value is None:
            value = self._from_files(key, locale)
        default = conf.get_default_locale()
        if value is None and locale != default:
            value = Translation.lookup(key, default)
            if value is None:
                value = self._from_files(key, default)
        return value

    def get(self, key, locale=None, replace=None, fallback=None):
        """Translate ``key``; falls back to the default locale, then ``fallback`` or the key."""
        locale = locale or django_translation.get_language() or conf.get_default_locale()
        cache_key = self._cache_key(locale, key)
        value = self.cache.get(cache_key)
        if value is None:
            value = self._resolve(key, locale)
            if value is None:
                logger.debug("Missing translation %s for %s", key, locale)
            else:
                self.cache.set(cache_key, value, self.timeout)
        if value is None:
            value = fallback if fallback is not None else key
        return replace_placeholders(value, replace)

    def choice(self, key, number, locale=None, replace=None):
        """Pick the singular or plural form of ``one|many`` strings."""
        text = self.get(key, locale=locale)
        forms = text.split("|")
        chosen = forms[0] if number == 1 or len(forms) == 1 else forms[1]
        return replace_placeholders(chosen, {"count": number, **(replace or {})})

    def set(self, key, value, locale=None, group=""):
        locale = locale or django_translation.get_language() or conf.get_default_locale()
        translation = Translation.store(key, value, locale, group=group)
        self.clear_cache(locale)
        return translation

    def get_all(self, locale=None):
        """Every string for ``locale`` as a flat ``{dotted.key: value}`` dict."""
        locale = locale or django_translation.get_language() or conf.get_default_locale()
        cache_key = self._cache_key(locale, "all")
        result = self.cache.get(cache_key)
        if result is None:
            result = self.file_translations(locale)
            result.update(
                dict(Translation.objects.filter(locale=locale).values_list("key", "value"))
            )
            self.cache.set(cache_key, result, self.timeout)
        return result

    def get_all_grouped(self, locale=None):
        """Every string for ``locale`` as ``{group: {key: value}}``."""
        locale = locale or django_translation.get_language() or conf.get_default_locale()
        cache_key = self._cache_key(locale, "grouped")
        result = self.cache.get(cache_key)
        if result is None:
            result = self.file_translations_grouped(locale)
            for key, value in Translation.objects.filter(locale=locale).values_list("key", "value"):
                group, _, rest = key.partition(".")
                if rest:
                    result.setdefault(group, {})[rest] = value
            self.cache.set(cache_key, result, self.timeout)
        return result

    # Import / export

    def import_from_file(self, locale, path, group=None):
        """Load a JSON translation file into the database. Returns the count."""
        path = Path(path)
        if not path.exists():
            raise ValueError(f"Translation file not found: {path}")
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("Translation file must contain a JSON object")

        group = group or path.stem
        count = 0
        for key, value in flatten_keys(data).items():
            Translation.store(f"{group}.{key}", value, locale, group=group)
            count += 1

        self.clear_cache(locale)
        logger.info("Imported %d translations for %s from %s", count, locale, path)
        return count

    def export_to_file(self, locale, group=None, path=None):
        """Write database translations for ``locale`` to a JSON file."""
        rows = Translation.objects.filter(locale=locale)
        if group:
            rows = rows.filter(group=group)
        data = {}
        for key, value in rows.values_list("key", "value"):
            if group and key.startswith(f"{group}."):
                key = key[len(group) + 1:]
            data[key] = value

        path = Path(path) if path else self.lang_dir / locale / f"{group or 'all'}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True), encoding="utf-8")
        return path

    def missing_keys(self, locale, compare_locale=None):
        """Keys present for ``compare_locale`` but not for ``locale``."""
        compare_locale = compare_locale or conf.get_default_locale()
        reference = set(self.get_all(compare_locale))
        present = set(self.get_all(locale))
        return sorted(reference - present)

    def clear_cache(self, locale=None):
        locales = [locale] if locale else conf.get_supported_locales()
        for code in locales:
            version_key = f"{self.CACHE_PREFIX}{code}:version"
            try:
                self.cache.incr(version_key)
            except ValueError:
                self.cache.set(version_key, 2, None)
