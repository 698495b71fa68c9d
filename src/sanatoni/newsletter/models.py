"""Newsletter subscribers."""

from django.db import models
from django.utils import timezone
from django.utils.crypto import constant_time_compare, get_random_string


def unsubscribe_token():
    return get_random_string(64)


class SubscriberQuerySet(models.QuerySet):
    def subscribed(self):
        return self.filter(status=NewsletterSubscriber.Status.SUBSCRIBED)

    def unsubscribed(self):
        return self.filter(status=NewsletterSubscriber.Status.UNSUBSCRIBED)


class NewsletterSubscriber(models.Model):
    class Status(models.TextChoices):
        SUBSCRIBED = "subscribed", "Subscribed"
        UNSUBSCRIBED = "unsubscribed", "Unsubscribed"
        PENDING_VERIFICATION = "pending_verification", "Pending verification"

    email = models.EmailField(unique=True)
    name = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=30, choices=Status.choices, default=Status.SUBSCRIBED)
    verification_token = models.CharField(max_length=64, blank=True)
    verified_at = models.DateTimeField(null=True, blank=True)
    subscribed_at = models.DateTimeField(default=timezone.now)
    unsubscribed_at = models.DateTimeField(null=True, blank=True)
    unsubscribe_token = models.CharField(max_length=64, default=unsubscribe_token, editable=False)
    preferences = models.JSONField(default=dict, blank=True)
    source = models.CharField(max_length=50, default="website_footer")
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = SubscriberQuerySet.as_manager()

    class Meta:
        ordering = ["-subscribed_at", "-pk"]

    def __str__(self):
        return self.email

    @property
    def is_subscribed(self):
        return self.status == self.Status.SUBSCRIBED

    def token_matches(self, token):
        return bool(token) and constant_time_compare(token, self.unsubscribe_token)

    def unsubscribe(self, reason=""):
        self.status = self.Status.UNSUBSCRIBED
        self.unsubscribed_at = timezone.now()
        if reason:
            self.preferences = {**(self.preferences or {}), "unsubscribe_reason": reason}
        self.save(update_fields=["status", "unsubscribed_at", "preferences", "updated_at"])

    def resubscribe(self):
        self.status = self.Status.SUBSCRIBED
        self.subscribed_at = timezone.now()
        self.unsubscribed_at = None
        self.unsubscribe_token = unsubscribe_token()
        self.save(update_fields=["status", "subscribed_at", "unsubscribed_at", "unsubscribe_token", "updated_at"])
