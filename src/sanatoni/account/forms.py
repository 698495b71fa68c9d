"""Customer account forms."""

from django import forms
from django.contrib.auth import get_user_model

from sanatoni.localization import conf

from .models import CustomerAddress

User = get_user_model()

PROFILE_PICTURE_MAX_SIZE = 2 * 1024 * 1024
PROFILE_PICTURE_TYPES = ("image/jpeg", "image/png", "image/gif")


class ProfileForm(forms.ModelForm):
    profile_picture = forms.ImageField(required=False)

    class Meta:
        model = User
        fields = ["name", "email", "phone"]

    def clean_email(self):
        email = self.cleaned_data["email"].strip().lower()
        if User.objects.filter(email__iexact=email).exclude(pk=self.instance.pk).exists():
            raise forms.ValidationError("The email has already been taken.")
        return email

    def clean_profile_picture(self):
        picture = self.cleaned_data.get("profile_picture")
        if not picture:
            return picture
        if picture.size > PROFILE_PICTURE_MAX_SIZE:
            raise forms.ValidationError("The profile picture may not be greater than 2048 kilobytes.")
        if getattr(picture, "content_type", None) not in PROFILE_PICTURE_TYPES:
            raise forms.ValidationError("The profile picture must be a file of type: jpeg, png, jpg, gif.")
        return picture


class SettingsForm(forms.Form):
    newsletter = forms.BooleanField(required=False)
    notifications = forms.BooleanField(required=False)
    language = forms.ChoiceField(required=False, choices=())

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["language"].choices = [("", "")] + [
            (code, meta.get("name", code)) for code, meta in conf.get_supported().items()
        ]

    def preferences(self):
        """Only the submitted keys, for merging over the stored preferences."""
        return {
            name: value
            for name, value in self.cleaned_data.items()
            if name in self.data and value not in ("", None)
        }


class PasswordConfirmForm(forms.Form):
    """Asks for the current password before a destructive account action."""

    password = forms.CharField(strip=False)

    def __init__(self, *args, user=None, **kwargs):
        self.user = user
        super().__init__(*args, **kwargs)

    def clean_password(self):
        password = self.cleaned_data["password"]
        if not self.user.check_password(password):
            raise forms.ValidationError("The password is incorrect.")
        return password


class AddressForm(forms.ModelForm):
    class Meta:
        model = CustomerAddress
        fields = [
            "label",
            "name",
            "phone",
            "address_line_1",
            "address_line_2",
            "city",
            "district",
            "division",
            "postal_code",
            "is_default",
        ]
