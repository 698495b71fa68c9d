import zoneinfo

from django import forms

from . import conf


def locale_choices():
    return [(code, meta.get("name", code)) for code, meta in conf.get_supported().items()]


class LanguageSwitchForm(forms.Form):
    locale = forms.ChoiceField(choices=locale_choices)
    redirect = forms.CharField(required=False)


class LanguageSettingsForm(forms.Form):
    locale = forms.ChoiceField(choices=locale_choices)
    timezone = forms.CharField(max_length=64, required=False)
    date_format = forms.CharField(max_length=32, required=False)
    currency = forms.CharField(max_length=3, required=False)
    rtl = forms.BooleanField(required=False)

    def clean_timezone(self):
        value = self.cleaned_data["timezone"]
        if value and value not in zoneinfo.available_timezones():
            raise forms.ValidationError("Unknown timezone.")
        return value
