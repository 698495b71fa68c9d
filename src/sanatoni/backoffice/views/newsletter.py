"""Newsletter subscriber management."""

import logging

from django.db.models import Q
from django.shortcuts import get_object_or_404
from django.urls import reverse
from django.views import View

from sanatoni.core.pages import flash_response, paginate, render_page
from sanatoni.newsletter.models import NewsletterSubscriber

from ..mixins import BackofficeMixin
from ..props import choice_options

logger = logging.getLogger(__name__)

PER_PAGE = 20


def subscriber_props(subscriber):
    return {
        "id": subscriber.pk,
        "email": subscriber.email,
        "name": subscriber.name,
        "status": subscriber.status,
        "source": subscriber.source,
        "preferences": subscriber.preferences,
        "subscribed_at": subscriber.subscribed_at,
        "unsubscribed_at": subscriber.unsubscribed_at,
    }


class SubscriberListView(BackofficeMixin, View):
    required_permissions = ("view_newsletter",)

    def get(self, request):
        subscribers = NewsletterSubscriber.objects.all()
        filters = {key: request.GET.get(key, "") for key in ("search", "status")}
        if filters["search"]:
            subscribers = subscribers.filter(
                Q(email__icontains=filters["search"]) | Q(name__icontains=filters["search"])
            )
        if filters["status"] in NewsletterSubscriber.Status.values:
            subscribers = subscribers.filter(status=filters["status"])

        return render_page(request, "Admin/Newsletter/Subscribers/Index", {
            "subscribers": paginate(request, subscribers, PER_PAGE, subscriber_props),
            "filters": filters,
            "statusOptions": choice_options(NewsletterSubscriber.Status.choices),
            "stats": {
                "total": NewsletterSubscriber.objects.count(),
                "subscribed": NewsletterSubscriber.objects.subscribed().count(),
                "unsubscribed": NewsletterSubscriber.objects.unsubscribed().count(),
            },
        })


class SubscriberDetailView(BackofficeMixin, View):
    required_permissions = ("view_newsletter",)
    method_permissions = {"delete": ("delete_newsletter",)}

    def dispatch(self, request, *args, **kwargs):
        self.subscriber = get_object_or_404(NewsletterSubscriber, pk=kwargs["pk"])
        return super().dispatch(request, *args, **kwargs)

    def get(self, request, pk):
        return render_page(request, "Admin/Newsletter/Subscribers/Show", {
            "subscriber": subscriber_props(self.subscriber),
        })

    def delete(self, request, pk):
        email = self.subscriber.email
        self.subscriber.delete()
        logger.info("Newsletter subscriber %s removed by %s", email, request.user.email)
        return flash_response(
            request,
            "Subscriber deleted successfully.",
            redirect_to=reverse("backoffice:subscriber-list"),
        )
