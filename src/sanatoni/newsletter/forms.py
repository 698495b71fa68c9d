from django import forms

from .models import NewsletterSubscriber


class SubscribeForm(forms.Form):
    email = forms.EmailField(max_length=255)
    name = forms.CharField(max_length=255, required=False)

    def clean_email(self):
        email = self.cleaned_data["email"].strip().lower()
        if NewsletterSubscriber.objects.subscribed().filter(email__iexact=email).exists():
            raise forms.ValidationError("This email is already subscribed to our newsletter.")
        return email


class UnsubscribeForm(forms.Form):
    email = forms.EmailField(max_length=255)
    token = forms.CharField(max_length=64, required=False)
    reason = forms.CharField(max_length=500, required=False)

    def clean(self):
        cleaned = super().clean()
        email = cleaned.get("email")
        if not email:
            return cleaned
        self.subscriber = NewsletterSubscriber.objects.filter(email__iexact=email).first()
        if self.subscriber is None:
            self.add_error("email", "Email address not found in our newsletter list.")
        elif not self.subscriber.is_subscribed:
            self.add_error("email", "This email is already unsubscribed from our newsletter.")
        elif cleaned.get("token") and not self.subscriber.token_matches(cleaned["token"]):
            self.add_error("token", "Invalid unsubscribe token.")
        return cleaned
