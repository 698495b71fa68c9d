"""Language switching and per-user language settings."""

import logging

from django.http import JsonResponse
from django.shortcuts import redirect
from django.utils.decorators import method_decorator
from django.views import View

from sanatoni.core.access import login_required_json
from sanatoni.core.http import expects_json, request_data, safe_next_url
from sanatoni.core.pages import form_errors, validation_error

from . import conf
from .forms import LanguageSettingsForm, LanguageSwitchForm
from .models import LanguageSetting
from .utils import available_locales, locale_direction, localized_url, set_locale

logger = logging.getLogger(__name__)


class SwitchLanguageView(View):
    """Switch the active language for the session, cookie and signed-in user."""

    def post(self, request):
        form = LanguageSwitchForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form))

        locale = form.cleaned_data["locale"]
        set_locale(request, locale)
        if request.user.is_authenticated:
            LanguageSetting.for_user(request.user, locale).set_as_default()

        target = safe_next_url(request, form.cleaned_data.get("redirect")) or safe_next_url(
            request, request.headers.get("Referer")
        )
        if expects_json(request):
            response = JsonResponse({
                "success": True,
                "locale": locale,
                "direction": locale_direction(locale),
                "redirect": target,
            })
        else:
            response = redirect(target or localized_url("/", locale))

        response.set_cookie(
            conf.get_setting("COOKIE_NAME"),
            locale,
            max_age=conf.get_setting("COOKIE_AGE"),
            samesite="Lax",
        )
        return response


def available_languages(request):
    return JsonResponse({
        "languages": available_locales(),
        "current": request.LANGUAGE_CODE if hasattr(request, "LANGUAGE_CODE") else conf.get_default_locale(),
        "default": conf.get_default_locale(),
    })


def setting_props(setting):
    return {
        "locale": setting.locale,
        "is_default": setting.is_default,
        "timezone": setting.timezone,
        "date_format": setting.date_format,
        "currency": setting.currency,
        "rtl": setting.rtl,
    }


@method_decorator(login_required_json, name="dispatch")
class LanguageSettingsView(View):
    """Read and update the signed-in user's language preferences."""

    def get(self, request):
        settings = [
            setting_props(setting)
            for setting in LanguageSetting.objects.filter(user=request.user)
        ]
        default = LanguageSetting.default_for(request.user)
        return JsonResponse({
            "settings": settings,
            "default": setting_props(default) if default else None,
            "available_languages": available_locales(),
        })

    def post(self, request):
        form = LanguageSettingsForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form))

        data = form.cleaned_data
        setting = LanguageSetting.for_user(request.user, data["locale"])
        for field in ("timezone", "date_format", "currency"):
            if data.get(field):
                setattr(setting, field, data[field])
        setting.rtl = data["rtl"]
        setting.save()
        setting.set_as_default()
        set_locale(request, setting.locale)
        logger.info("Updated language settings for %s: %s", request.user.email, setting.locale)

        return JsonResponse({"success": True, "setting": setting_props(setting)})
