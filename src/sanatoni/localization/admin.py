from django.contrib import admin

from .models import LanguageSetting, LocalizableContent, Translation


@admin.register(Translation)
class TranslationAdmin(admin.ModelAdmin):
    list_display = ["key", "locale", "group", "updated_at"]
    list_filter = ["locale", "group"]
    search_fields = ["key", "value"]


@admin.register(LocalizableContent)
class LocalizableContentAdmin(admin.ModelAdmin):
    list_display = ["content_type", "object_id", "field", "locale"]
    list_filter = ["locale", "content_type"]


@admin.register(LanguageSetting)
class LanguageSettingAdmin(admin.ModelAdmin):
    list_display = ["user", "locale", "is_default", "currency"]
    list_filter = ["locale", "is_default"]
