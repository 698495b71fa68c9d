"""Promotion lookups used by pricing, the storefront and the back office."""

import logging
from typing import NamedTuple

from django.db.models import Sum
from django.utils import timezone

from .models import Coupon, FlashSale

logger = logging.getLogger(__name__)


class ProductPrice(NamedTuple):
    """What a product costs right now and why."""

    unit_price: object
    original_price: object
    flash_sale: FlashSale | None


def flash_sales_by_product(product_ids, now=None):
    """Best running flash sale for each product id, by discount percentage."""
    best = {}
    sales = (
        FlashSale.objects.running(now)
        .filter(products__pk__in=list(product_ids))
        .prefetch_related("products")
        .distinct()
        .order_by("-discount_percentage", "end_date")
    )
    wanted = set(product_ids)
    for sale in sales:
        for product in sale.products.all():
            if product.pk in wanted and product.pk not in best:
                best[product.pk] = sale
    return best


def price_for(product, flash_sale=None):
    """Lowest of the list price, the sale price and the flash sale price."""
    price = product.display_price
    if flash_sale is not None:
        sale_price = flash_sale.discounted_price(product.price)
        if sale_price < price:
            return ProductPrice(sale_price, product.price, flash_sale)
    return ProductPrice(price, product.price, None)


def current_price(product, now=None):
    sale = flash_sales_by_product([product.pk], now).get(product.pk)
    return price_for(product, sale)


def refresh_flash_sale_statuses(now=None):
    """Move sales between scheduled, active and expired. Returns the number changed."""
    now = now or timezone.now()
    changed = 0
    for sale in FlashSale.objects.exclude(status=FlashSale.Status.EXPIRED):
        if sale.refresh_status(now):
            changed += 1
    if changed:
        logger.info("Refreshed status of %d flash sales", changed)
    return changed


def expire_coupons(now=None):
    changed = 0
    for coupon in Coupon.objects.filter(status=Coupon.Status.ACTIVE):
        if coupon.refresh_status(now):
            changed += 1
    return changed


def flash_sale_stats():
    sales = FlashSale.objects.all()
    return {
        "total": sales.count(),
        "active": sales.filter(status=FlashSale.Status.ACTIVE).count(),
        "scheduled": sales.filter(status=FlashSale.Status.SCHEDULED).count(),
        "expired": sales.filter(status=FlashSale.Status.EXPIRED).count(),
        "total_usage": sales.aggregate(total=Sum("used_count"))["total"] or 0,
    }
