from django.contrib import admin

from .models import NewsletterSubscriber


@admin.register(NewsletterSubscriber)
class NewsletterSubscriberAdmin(admin.ModelAdmin):
    list_display = ["email", "name", "status", "source", "subscribed_at", "unsubscribed_at"]
    list_filter = ["status", "source"]
    search_fields = ["email", "name"]
