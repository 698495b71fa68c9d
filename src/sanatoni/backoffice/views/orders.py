"""Order management."""

import logging

from django.contrib import messages
from django.db.models import Q, Sum
from django.shortcuts import get_object_or_404
from django.urls import reverse
from django.views import View

from sanatoni.core.http import request_data
from sanatoni.core.pages import flash_response, form_errors, paginate, render_page, validation_error
from sanatoni.promotions.pricing import round_money
from sanatoni.store.exceptions import StoreError
from sanatoni.store.invoices import render_invoice
from sanatoni.store.models import Order
from sanatoni.store.props import order_props
from sanatoni.store.services import change_order_status, order_stats

from ..forms import OrderFilterForm, OrderStatusForm
from ..mixins import BackofficeMixin
from ..props import choice_options

logger = logging.getLogger(__name__)

ORDERS_PER_PAGE = 15


def filter_orders(params, queryset=None):
    orders = queryset if queryset is not None else Order.objects.all()
    form = OrderFilterForm(params)
    if not form.is_valid():
        return orders, {}
    filters = {key: value for key, value in form.cleaned_data.items() if value}

    if filters.get("status"):
        orders = orders.filter(status=filters["status"])
    if filters.get("payment_method"):
        orders = orders.filter(payment_method=filters["payment_method"])
    if filters.get("search"):
        term = filters["search"]
        orders = orders.filter(
            Q(order_number__icontains=term)
            | Q(guest_email__icontains=term)
            | Q(user__name__icontains=term)
            | Q(user__email__icontains=term)
        )
    if filters.get("date_from"):
        orders = orders.filter(created_at__date__gte=filters["date_from"])
    if filters.get("date_to"):
        orders = orders.filter(created_at__date__lte=filters["date_to"])
    return orders, filters


class OrderListView(BackofficeMixin, View):
    required_permissions = ("view_orders",)

    def get(self, request):
        orders, filters = filter_orders(request.GET)
        orders = orders.select_related("user").prefetch_related("items").order_by("-created_at")

        stats = order_stats(Order.objects.all())
        stats["total_revenue"] = round_money(
            Order.objects.exclude(status=Order.Status.CANCELLED).aggregate(total=Sum("total"))["total"]
        )
        return render_page(request, "Admin/Orders/Index", {
            "orders": paginate(request, orders, ORDERS_PER_PAGE, order_props),
            "orderStats": stats,
            "filters": {key: str(value) for key, value in filters.items()},
            "statusOptions": choice_options(Order.Status.choices),
            "paymentMethodOptions": choice_options(Order.PaymentMethod.choices),
        })


class OrderDetailView(BackofficeMixin, View):
    required_permissions = ("view_orders",)
    method_permissions = {"delete": ("delete_orders",)}

    def get_order(self, pk):
        return get_object_or_404(
            Order.objects.select_related("user", "shipping_zone").prefetch_related(
                "items__product", "status_history__changed_by"
            ),
            pk=pk,
        )

    def get(self, request, pk):
        order = self.get_order(pk)
        return render_page(request, "Admin/Orders/Show", {
            "order": order_props(order, detail=True),
            "statusOptions": choice_options(Order.Status.choices),
        })

    def delete(self, request, pk):
        order = self.get_order(pk)
        if order.status != Order.Status.CANCELLED:
            return flash_response(request, "Only cancelled orders can be deleted.", messages.ERROR, status=422)
        number = order.order_number
        order.delete()
        logger.info("Order %s deleted by %s", number, request.user.email)
        return flash_response(
            request,
            f"Order {number} deleted successfully.",
            redirect_to=reverse("backoffice:order-list"),
        )


class OrderStatusView(BackofficeMixin, View):
    """Move an order through its lifecycle with an optional comment."""

    required_permissions = ("process_orders",)

    def post(self, request, pk):
        order = get_object_or_404(Order, pk=pk)
        form = OrderStatusForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:order-list"))

        status = form.cleaned_data["status"]
        if order.status == status:
            return flash_response(
                request, f"Order status is already {order.get_status_display()}", messages.INFO
            )
        try:
            change_order_status(
                order,
                status,
                changed_by=request.user,
                comment=form.cleaned_data["comment"],
            )
        except StoreError as error:
            return flash_response(request, str(error), messages.ERROR, status=422)

        order.refresh_from_db()
        return flash_response(
            request,
            f"Order status updated to {order.get_status_display()}",
            order=order_props(order),
        )

    put = post
    patch = post


class OrderInvoiceView(BackofficeMixin, View):
    required_permissions = ("view_orders",)

    def get(self, request, pk):
        order = get_object_or_404(Order.objects.prefetch_related("items"), pk=pk)
        return render_invoice(order, download=request.GET.get("download") == "1")
