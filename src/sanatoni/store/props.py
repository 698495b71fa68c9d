"""Store serializers and the shared cart count prop."""

from sanatoni.catalog.props import product_props

from .cart import Cart


def cart_props(request):
    if not hasattr(request, "session"):
        return {"cart": {"count": 0}}
    return {"cart": {"count": Cart(request).count()}}


def cart_line_props(line):
    return {
        "id": line.item.pk,
        "quantity": line.quantity,
        "unit_price": line.unit_price,
        "original_price": line.price.original_price,
        "line_total": line.line_total,
        "product": product_props(line.product, flash_sale=line.price.flash_sale),
    }


def shipping_zone_props(zone):
    return {
        "id": zone.pk,
        "name": zone.name,
        "description": zone.description,
        "areas": zone.areas,
        "shipping_cost": zone.shipping_cost,
        "is_active": zone.is_active,
        "delivery_time_min": zone.delivery_time_min,
        "delivery_time_max": zone.delivery_time_max,
        "delivery_time_range": zone.delivery_time_range,
    }


def order_item_props(item):
    return {
        "id": item.pk,
        "product_id": item.product_id,
        "product_name": item.product_name,
        "product_slug": item.product.slug if item.product_id else None,
        "quantity": item.quantity,
        "price": item.price,
        "subtotal": item.subtotal,
        "snapshot": item.product_snapshot,
    }


def status_history_props(entry):
    return {
        "id": entry.pk,
        "from_status": entry.from_status or None,
        "to_status": entry.to_status,
        "formatted_change": entry.formatted_change,
        "comment": entry.comment,
        "changed_by": entry.changed_by.get_display_name() if entry.changed_by_id else None,
        "created_at": entry.created_at,
    }


def order_props(order, detail=False):
    data = {
        "id": order.pk,
        "order_number": order.order_number,
        "status": order.status,
        "status_label": order.get_status_display(),
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "subtotal": order.subtotal,
        "discount_amount": order.discount_amount,
        "shipping_cost": order.shipping_cost,
        "total": order.total,
        "coupon_code": order.coupon_code or None,
        "customer_name": order.customer_name,
        "customer_email": order.customer_email,
        "item_count": order.item_count,
        "can_be_cancelled": order.can_be_cancelled(),
        "created_at": order.created_at,
    }
    if detail:
        data.update({
            "customer_phone": order.customer_phone,
            "shipping_address": order.shipping_address,
            "billing_address": order.billing_address,
            "notes": order.notes,
            "shipping_zone": order.shipping_zone.name if order.shipping_zone_id else None,
            "estimated_delivery_date": order.estimated_delivery_date,
            "delivered_at": order.delivered_at,
            "items": [order_item_props(item) for item in order.items.all()],
            "status_history": [status_history_props(entry) for entry in order.status_history.all()],
            "invoice_number": getattr(getattr(order, "invoice", None), "invoice_number", None),
        })
    return data
