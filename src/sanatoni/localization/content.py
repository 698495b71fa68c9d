"""Per-record translated fields.

Wrap any model instance to read and write its translated fields::

    fields = LocalizedFields(product)
    fields.set("name", "চা পাতা", locale="bn")
    fields.get("name", locale="bn")

A missing translation falls back to the record's own attribute, then to the
default locale's translation.
"""

from collections import defaultdict

from django.contrib.contenttypes.models import ContentType
from django.db.models.signals import post_delete
from django.utils import translation

from . import conf
from .models import LocalizableContent


def current_locale():
    return translation.get_language() or conf.get_default_locale()


class LocalizedFields:
    """Translated field access for one model instance."""

    def __init__(self, instance):
        self.instance = instance

    def _rows(self):
        return LocalizableContent.objects.for_object(self.instance)

    def _lookup(self, field, locale):
        return self._rows().filter(field=field, locale=locale).values_list("value", flat=True).first()

    def get(self, field, locale=None, default=None):
        locale = locale or current_locale()
        value = self._lookup(field, locale)
        if value:
            return value
        value = getattr(self.instance, field, None)
        if value:
            return value
        default_locale = conf.get_default_locale()
        if locale != default_locale:
            value = self._lookup(field, default_locale)
            if value:
                return value
        return default

    def set(self, field, value, locale=None):
        locale = locale or current_locale()
        row, _ = LocalizableContent.objects.update_or_create(
            content_type=ContentType.objects.get_for_model(self.instance),
            object_id=str(self.instance.pk),
            locale=locale,
            field=field,
            defaults={"value": value},
        )
        return row

    def set_many(self, values, locale=None):
        for field, value in values.items():
            self.set(field, value, locale=locale)

    def all(self, locale=None):
        locale = locale or current_locale()
        return dict(self._rows().filter(locale=locale).values_list("field", "value"))

    def available_locales(self):
        return sorted(set(self._rows().values_list("locale", flat=True)))

    def has(self, field, locale=None):
        return self._rows().filter(field=field, locale=locale or current_locale()).exists()

    def clear(self, locale=None):
        rows = self._rows()
        if locale:
            rows = rows.filter(locale=locale)
        rows.delete()


def localized_values(instances, locale=None):
    """Bulk lookup: ``{pk: {field: value}}`` for a list of same-model records."""
    locale = locale or current_locale()
    values = defaultdict(dict)
    for object_id, field, value in (
        LocalizableContent.objects.for_objects(instances)
        .filter(locale=locale)
        .values_list("object_id", "field", "value")
    ):
        values[object_id][field] = value
    return {obj.pk: values.get(str(obj.pk), {}) for obj in instances}


def _delete_localized_content(sender, instance, **kwargs):
    LocalizableContent.objects.for_object(instance).delete()


def register_localizable(model):
    """Delete a model's translated fields whenever one of its records is deleted."""
    post_delete.connect(
        _delete_localized_content,
        sender=model,
        dispatch_uid=f"localized_content_cleanup_{model._meta.label_lower}",
    )
    return model
