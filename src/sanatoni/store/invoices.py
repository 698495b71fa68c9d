"""Invoice rendering."""

from django.conf import settings
from django.http import HttpResponse
from django.template.loader import render_to_string
from django.utils import timezone

from .models import Invoice


def invoice_context(order, invoice):
    store = getattr(settings, "STORE", {})
    return {
        "order": order,
        "invoice": invoice,
        "items": list(order.items.all()),
        "site_name": store.get("SITE_NAME", settings.SITE_NAME),
        "support_email": store.get("SUPPORT_EMAIL", settings.DEFAULT_FROM_EMAIL),
        "support_phone": store.get("SUPPORT_PHONE", ""),
        "currency_symbol": store.get("CURRENCY_SYMBOL", "৳"),
        "generated_at": timezone.now(),
    }


def render_invoice(order, download=False):
    """HTML invoice for ``order``, creating its invoice record on first use."""
    invoice = Invoice.for_order(order)
    html = render_to_string("store/invoices/invoice.html", invoice_context(order, invoice))
    response = HttpResponse(html, content_type="text/html; charset=utf-8")
    if download:
        response["Content-Disposition"] = f'attachment; filename="invoice-{order.order_number}.html"'
    return response
