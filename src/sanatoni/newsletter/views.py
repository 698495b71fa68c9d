"""Newsletter subscribe and unsubscribe views."""

import logging

from django.urls import reverse
from django.views import View

from sanatoni.core.http import client_ip, request_data
from sanatoni.core.pages import flash_response, form_errors, render_page, validation_error

from .forms import SubscribeForm, UnsubscribeForm
from .models import NewsletterSubscriber

logger = logging.getLogger(__name__)

SUBSCRIBED_MESSAGE = (
    "Thank you for subscribing! You will receive updates about our sacred products and special offers."
)
UNSUBSCRIBED_MESSAGE = "You have been successfully unsubscribed from our newsletter."


class SubscribeView(View):
    def post(self, request):
        form = SubscribeForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form))

        email = form.cleaned_data["email"]
        subscriber = NewsletterSubscriber.objects.filter(email__iexact=email).first()
        if subscriber is not None:
            subscriber.resubscribe()
        else:
            subscriber = NewsletterSubscriber.objects.create(
                email=email,
                name=form.cleaned_data["name"],
                ip_address=client_ip(request),
                user_agent=request.headers.get("User-Agent", ""),
            )
        logger.info("Newsletter subscription for %s", subscriber.email)
        return flash_response(request, SUBSCRIBED_MESSAGE, status=201)


class UnsubscribeView(View):
    """Unsubscribe page; a valid link from an email unsubscribes straight away."""

    def get(self, request):
        email = request.GET.get("email", "")
        token = request.GET.get("token", "")
        unsubscribed = False
        if email and token:
            subscriber = NewsletterSubscriber.objects.subscribed().filter(email__iexact=email).first()
            if subscriber is not None and subscriber.token_matches(token):
                subscriber.unsubscribe()
                logger.info("Newsletter unsubscribe link used for %s", subscriber.email)
                unsubscribed = True
        return render_page(request, "Newsletter/Unsubscribe", {
            "email": email,
            "token": token,
            "unsubscribed": unsubscribed,
            "message": UNSUBSCRIBED_MESSAGE if unsubscribed else None,
        })

    def post(self, request):
        form = UnsubscribeForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("newsletter:unsubscribe"))

        form.subscriber.unsubscribe(form.cleaned_data["reason"])
        logger.info("Newsletter unsubscribe for %s", form.subscriber.email)
        return flash_response(
            request,
            f"{UNSUBSCRIBED_MESSAGE} We respect your decision and wish you well on your spiritual journey.",
            redirect_to=reverse("home"),
        )
