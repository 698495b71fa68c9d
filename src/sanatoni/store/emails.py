"""Transactional order emails.

Emails are queued with ``transaction.on_commit`` so a rolled back order never
produces one. Delivery failures are logged; they never fail the request.
"""

import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.db import transaction
from django.template.loader import render_to_string
from django.utils.html import strip_tags

logger = logging.getLogger(__name__)


def email_context(order, **extra):
    store = getattr(settings, "STORE", {})
    return {
        "order": order,
        "items": list(order.items.all()),
        "site_name": store.get("SITE_NAME", settings.SITE_NAME),
        "site_url": settings.SITE_URL,
        "support_email": store.get("SUPPORT_EMAIL", settings.DEFAULT_FROM_EMAIL),
        "support_phone": store.get("SUPPORT_PHONE", ""),
        "currency_symbol": store.get("CURRENCY_SYMBOL", "৳"),
        **extra,
    }


def send_templated_email(subject, template_name, context, to):
    """Render an HTML template and send it with a plain text alternative."""
    html = render_to_string(template_name, context)
    message = EmailMultiAlternatives(
        subject=subject,
        body=strip_tags(html),
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=to,
    )
    message.attach_alternative(html, "text/html")
    message.send()


def send_order_confirmation(order):
    recipient = order.customer_email
    if not recipient:
        logger.warning("Order %s has no customer email, skipping confirmation", order.order_number)
        return False
    try:
        send_templated_email(
            f"Order Confirmation - {order.order_number}",
            "store/emails/order_confirmation.html",
            email_context(order),
            [recipient],
        )
    except Exception:
        logger.exception(
            "Failed to send order confirmation email for order %s to %s",
            order.order_number,
            recipient,
        )
        return False
    logger.info("Sent order confirmation for %s", order.order_number)
    return True


def send_order_status_update(order, previous_status, comment=""):
    recipient = order.customer_email
    if not recipient:
        return False
    labels = dict(order.Status.choices)
    try:
        send_templated_email(
            f"Order Update - {order.order_number}",
            "store/emails/order_status_update.html",
            email_context(
                order,
                previous_status=labels.get(previous_status, previous_status),
                new_status=order.get_status_display(),
                comment=comment,
            ),
            [recipient],
        )
    except Exception:
        logger.exception(
            "Failed to send status update email for order %s (%s -> %s)",
            order.order_number,
            previous_status,
            order.status,
        )
        return False
    logger.info("Sent status update for %s: %s -> %s", order.order_number, previous_status, order.status)
    return True


def queue_order_confirmation(order):
    transaction.on_commit(lambda: send_order_confirmation(order))


def queue_order_status_update(order, previous_status, comment=""):
    transaction.on_commit(lambda: send_order_status_update(order, previous_status, comment))
