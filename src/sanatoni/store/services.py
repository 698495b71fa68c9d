"""Order placement and order lifecycle services."""

import logging
from datetime import timedelta
from typing import NamedTuple

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from sanatoni.catalog.models import Product
from sanatoni.promotions.models import Coupon, CouponUsage, FlashSale

from .emails import queue_order_confirmation, queue_order_status_update
from .exceptions import (
    EmptyCartError,
    InsufficientStockError,
    OrderNotCancellableError,
    ProductUnavailableError,
    ShippingUnavailableError,
)
from .models import Order, OrderItem, OrderStatusHistory, ShippingZone, store_setting

logger = logging.getLogger(__name__)


def locked_products(product_ids):
    return {
        product.pk: product
        for product in Product.objects.select_for_update().filter(pk__in=list(product_ids))
    }


def adjust_stock(product, delta):
    product.stock_quantity = F("stock_quantity") + delta
    product.save(update_fields=["stock_quantity", "updated_at"])
    product.refresh_from_db(fields=["stock_quantity"])
    product.refresh_stock_status()
    product.save(update_fields=["stock_status"])


def product_snapshot(product):
    return {
        "name": product.name,
        "description": product.short_description or product.description,
        "price": str(product.price),
        "image": product.primary_image,
        "sku": product.sku,
    }


def shipping_quote(cart, address):
    """Shipping zone, cost and total for delivering the cart to ``address``."""
    zone = ShippingZone.find_for_address(address)
    if zone is None:
        raise ShippingUnavailableError()
    summary = cart.summary()
    return {
        "shippingZone": {"id": zone.pk, "name": zone.name},
        "shippingCost": zone.shipping_cost,
        "deliveryTimeRange": zone.delivery_time_range,
        "total": summary.total + zone.shipping_cost,
    }


def place_order(
    cart,
    *,
    customer_name,
    customer_email,
    customer_phone,
    shipping_address,
    billing_address=None,
    notes="",
):
    """Turn the cart into a pending cash-on-delivery order.

    Stock is checked and decremented under row locks, coupon and flash sale
    usage is recorded, and the cart is emptied. The confirmation email goes
    out once the transaction commits.
    """
    lines = cart.lines()
    if not lines:
        raise EmptyCartError()

    zone = ShippingZone.find_for_address(shipping_address)
    if zone is None:
        raise ShippingUnavailableError()

    shipping_address = {"name": customer_name, **shipping_address}
    user = cart.user
    summary = cart.summary(lines, email=customer_email)
    delivery_days = zone.delivery_time_max or store_setting("DEFAULT_DELIVERY_DAYS", 7)

    with transaction.atomic():
        products = locked_products(line.product.pk for line in lines)

        order = Order.objects.create(
            order_number=Order.generate_order_number(),
            user=user,
            guest_email="" if user else customer_email,
            customer_phone=customer_phone,
            status=Order.Status.PENDING,
            subtotal=summary.subtotal,
            discount_amount=summary.discount,
            shipping_cost=zone.shipping_cost,
            total=summary.total + zone.shipping_cost,
            coupon_code=summary.coupon.code if summary.coupon else "",
            shipping_address=shipping_address,
            billing_address=billing_address or shipping_address,
            notes=notes or "",
            payment_method=Order.PaymentMethod.COD,
            shipping_zone=zone,
            estimated_delivery_date=timezone.now() + timedelta(days=delivery_days),
        )

        flash_sale_ids = set()
        for line in lines:
            product = products.get(line.product.pk)
            if product is None or not product.is_active or product.status != Product.Status.PUBLISHED:
                raise ProductUnavailableError(line.product)
            if not product.has_stock(line.quantity):
                raise InsufficientStockError(product, line.quantity, product.stock_quantity)

            OrderItem.objects.create(
                order=order,
                product=product,
                quantity=line.quantity,
                price=line.unit_price,
                subtotal=line.line_total,
                product_snapshot=product_snapshot(product),
                flash_sale=line.price.flash_sale,
            )
            if product.tracks_inventory:
                adjust_stock(product, -line.quantity)
            if line.price.flash_sale is not None:
                flash_sale_ids.add(line.price.flash_sale.pk)

        if flash_sale_ids:
            FlashSale.objects.filter(pk__in=flash_sale_ids).update(used_count=F("used_count") + 1)

        if summary.coupon is not None and summary.discount > 0:
            CouponUsage.objects.create(
                coupon=summary.coupon,
                order=order,
                user=user,
                customer_email=user.email if user else customer_email,
                discount_amount=summary.discount,
            )
            Coupon.objects.filter(pk=summary.coupon.pk).update(used_count=F("used_count") + 1)

        OrderStatusHistory.objects.create(
            order=order,
            from_status="",
            to_status=Order.Status.PENDING,
            comment="Order placed successfully",
            changed_by=user,
        )

        cart.clear()
        cart.remove_coupon()
        queue_order_confirmation(order)

    logger.info(
        "Order %s placed: %d lines, total %s", order.order_number, len(lines), order.total
    )
    return order


def change_order_status(order, status, *, changed_by=None, comment="", notify=True):
    """Move ``order`` to ``status``, keeping stock in step.

    Cancelling restocks tracked products; reactivating a cancelled order takes
    the stock again and fails as a whole when any product is short.
    Returns False when the order already has that status.
    """
    with transaction.atomic():
        order = Order.objects.select_for_update().get(pk=order.pk)
        previous = order.status
        if previous == status:
            return False

        items = list(order.items.filter(product__isnull=False))
        products = locked_products(item.product_id for item in items)

        if status == Order.Status.CANCELLED:
            for item in items:
                product = products[item.product_id]
                if product.tracks_inventory:
                    adjust_stock(product, item.quantity)
        elif previous == Order.Status.CANCELLED:
            for item in items:
                product = products[item.product_id]
                if product.tracks_inventory and product.stock_quantity < item.quantity:
                    raise InsufficientStockError(product, item.quantity, product.stock_quantity)
            for item in items:
                product = products[item.product_id]
                if product.tracks_inventory:
                    adjust_stock(product, -item.quantity)

        order.status = status
        order.delivered_at = timezone.now() if status == Order.Status.DELIVERED else None
        order.save(update_fields=["status", "delivered_at", "updated_at"])

        OrderStatusHistory.objects.create(
            order=order,
            from_status=previous,
            to_status=status,
            comment=comment,
            changed_by=changed_by,
        )
        if notify:
            queue_order_status_update(order, previous, comment)

    logger.info("Order %s status changed: %s -> %s", order.order_number, previous, status)
    return True


def cancel_order(order, user):
    if not order.can_be_cancelled():
        raise OrderNotCancellableError(order)
    return change_order_status(
        order,
        Order.Status.CANCELLED,
        changed_by=user,
        comment="Order cancelled by customer",
    )


class ReorderResult(NamedTuple):
    added: int
    unavailable: list

    @property
    def message(self):
        message = f"Added {self.added} items to cart."
        if self.unavailable:
            message += " Some items were unavailable: " + ", ".join(self.unavailable)
        return message


def reorder(order, cart):
    """Put the order's items back into the cart, reporting what cannot be added."""
    added = 0
    unavailable = []
    for item in order.items.select_related("product"):
        product = item.product
        if product is None or product.status != Product.Status.PUBLISHED or not product.is_active:
            unavailable.append(item.product_name)
            continue
        if not product.has_stock(item.quantity):
            unavailable.append(f"{product.name} (insufficient stock)")
            continue
        try:
            cart.add(product, item.quantity)
        except InsufficientStockError:
            unavailable.append(f"{product.name} (insufficient stock)")
            continue
        added += 1
    return ReorderResult(added, unavailable)


def find_order_for_tracking(order_number, email):
    """Order matching the number and its customer's or guest's email."""
    order = (
        Order.objects.select_related("user")
        .filter(order_number=(order_number or "").strip())
        .first()
    )
    if order is None or not email:
        return None
    if (order.customer_email or "").lower() != email.strip().lower():
        return None
    return order


def order_stats(orders):
    return {
        status: orders.filter(status=status).count()
        for status, _label in Order.Status.choices
    } | {"total": orders.count()}
