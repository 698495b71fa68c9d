"""Localization models: UI strings, per-record translations and user language settings."""

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models, transaction

from . import conf


class Translation(models.Model):
    """A UI string for one locale, overriding the bundled language files."""

    locale = models.CharField(max_length=10, db_index=True)
    key = models.CharField(max_length=255)
    value = models.TextField()
    group = models.CharField(max_length=100, blank=True, db_index=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["locale", "key"]
        constraints = [
            models.UniqueConstraint(fields=["locale", "key"], name="unique_translation_key"),
        ]

    def __str__(self):
        return f"[{self.locale}] {self.key}"

    @classmethod
    def lookup(cls, key, locale):
        return cls.objects.filter(locale=locale, key=key).values_list("value", flat=True).first()

    @classmethod
    def store(cls, key, value, locale, group=""):
        if not group and "." in key:
            group = key.split(".", 1)[0]
        translation, _ = cls.objects.update_or_create(
            locale=locale, key=key, defaults={"value": value, "group": group}
        )
        return translation


class LocalizableContentQuerySet(models.QuerySet):
    def for_object(self, obj):
        return self.filter(
            content_type=ContentType.objects.get_for_model(obj),
            object_id=str(obj.pk),
        )

    def for_objects(self, objects):
        objects = list(objects)
        if not objects:
            return self.none()
        return self.filter(
            content_type=ContentType.objects.get_for_model(objects[0]),
            object_id__in=[str(obj.pk) for obj in objects],
        )


class LocalizableContent(models.Model):
    """Translated value of one field of any record, for one locale."""

    content_type = models.ForeignKey(ContentType, on_delete=models.CASCADE)
    object_id = models.CharField(max_length=64)
    content_object = GenericForeignKey("content_type", "object_id")
    locale = models.CharField(max_length=10)
    field = models.CharField(max_length=100)
    value = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = LocalizableContentQuerySet.as_manager()

    class Meta:
        verbose_name_plural = "localizable content"
        indexes = [
            models.Index(fields=["content_type", "object_id", "locale"], name="localized_object_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["content_type", "object_id", "locale", "field"],
                name="unique_localized_field",
            ),
        ]

    def __str__(self):
        return f"{self.content_type.model}#{self.object_id} {self.field} [{self.locale}]"


class LanguageSetting(models.Model):
    """A user's preferences for one locale; at most one is the default."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="language_settings",
    )
    locale = models.CharField(max_length=10)
    is_default = models.BooleanField(default=False)
    timezone = models.CharField(max_length=64, blank=True)
    date_format = models.CharField(max_length=32, blank=True)
    currency = models.CharField(max_length=3, blank=True)
    rtl = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-is_default", "locale"]
        constraints = [
            models.UniqueConstraint(fields=["user", "locale"], name="unique_user_locale"),
        ]

    def __str__(self):
        return f"{self.user} [{self.locale}]"

    @classmethod
    def for_user(cls, user, locale=None):
        """Get or create the user's settings for ``locale`` with locale defaults."""
        locale = locale or conf.get_default_locale()
        meta = conf.get_supported().get(locale, {})
        setting, _ = cls.objects.get_or_create(
            user=user,
            locale=locale,
            defaults={
                "timezone": settings.TIME_ZONE,
                "date_format": meta.get("date_format", ""),
                "currency": meta.get("currency", ""),
                "rtl": meta.get("direction") == "rtl",
            },
        )
        return setting

    @classmethod
    def default_for(cls, user):
        return cls.objects.filter(user=user, is_default=True).first()

    @transaction.atomic
    def set_as_default(self):
        type(self).objects.filter(user=self.user).exclude(pk=self.pk).update(is_default=False)
        self.is_default = True
        self.save(update_fields=["is_default", "updated_at"])
        return self
