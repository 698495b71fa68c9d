"""Shopping cart for signed-in users and guests.

Guests are identified by a random token kept in the session, so the cart
survives the session key rotation that happens at login and can then be
merged into the user's own cart.
"""

import logging
from typing import NamedTuple

from django.db import transaction
from django.utils.crypto import get_random_string

from sanatoni.catalog.models import Product
from sanatoni.promotions.models import Coupon, CouponCheck
from sanatoni.promotions.pricing import ZERO, round_money
from sanatoni.promotions.services import ProductPrice, flash_sales_by_product, price_for

from .exceptions import InsufficientStockError, ProductUnavailableError
from .models import CartItem

logger = logging.getLogger(__name__)

CART_TOKEN_SESSION_KEY = "cart_token"
COUPON_SESSION_KEY = "applied_coupon"
MAX_QUANTITY = 99


class CartLine(NamedTuple):
    item: CartItem
    product: Product
    quantity: int
    price: ProductPrice

    @property
    def unit_price(self):
        return self.price.unit_price

    @property
    def line_total(self):
        return round_money(self.price.unit_price * self.quantity)


class CartSummary(NamedTuple):
    item_count: int
    unique_items: int
    subtotal: object
    discount: object
    total: object
    coupon: Coupon | None

    def as_props(self):
        return {
            "itemCount": self.item_count,
            "uniqueItems": self.unique_items,
            "subtotal": self.subtotal,
            "discount": self.discount,
            "total": self.total,
            "appliedCoupon": {
                "code": self.coupon.code,
                "discount_amount": self.discount,
                "discount_type": self.coupon.type,
            } if self.coupon else None,
        }


def clamp_quantity(quantity):
    return max(1, min(int(quantity), MAX_QUANTITY))


class Cart:
    """The current request's cart."""

    def __init__(self, request):
        self.request = request
        self.session = request.session
        user = getattr(request, "user", None)
        self.user = user if user is not None and user.is_authenticated else None

    @property
    def token(self):
        token = self.session.get(CART_TOKEN_SESSION_KEY)
        if not token:
            token = get_random_string(40)
            self.session[CART_TOKEN_SESSION_KEY] = token
        return token

    def items(self):
        if self.user is not None:
            items = CartItem.objects.filter(user=self.user)
        else:
            token = self.session.get(CART_TOKEN_SESSION_KEY)
            if not token:
                return CartItem.objects.none()
            items = CartItem.objects.filter(user__isnull=True, cart_token=token)
        return items.select_related("product", "product__category").prefetch_related("product__images")

    def owns(self, item):
        return item.belongs_to(self.user, self.session.get(CART_TOKEN_SESSION_KEY))

    def _owner_fields(self):
        if self.user is not None:
            return {"user": self.user}
        return {"user": None, "cart_token": self.token}

    def add(self, product, quantity=1):
        """Add ``quantity`` of ``product``, accumulating onto an existing line."""
        if not product.is_active or product.status != Product.Status.PUBLISHED:
            raise ProductUnavailableError(product)

        owner = self._owner_fields()
        item = CartItem.objects.filter(product=product, **owner).first()
        if item is None:
            item = CartItem(product=product, quantity=0, **owner)
        item.quantity = clamp_quantity(item.quantity + quantity)

        if not product.has_stock(item.quantity):
            raise InsufficientStockError(product, item.quantity, product.stock_quantity)

        item.save()
        return item

    def update(self, item, quantity):
        quantity = clamp_quantity(quantity)
        if not item.product.has_stock(quantity):
            raise InsufficientStockError(item.product, quantity, item.product.stock_quantity)
        item.quantity = quantity
        item.save(update_fields=["quantity", "updated_at"])
        return item

    def remove(self, item):
        item.delete()

    def clear(self):
        self.items().delete()

    def count(self):
        return sum(self.items().values_list("quantity", flat=True))

    def contains(self, product):
        return self.items().filter(product=product).exists()

    def lines(self):
        items = list(self.items())
        sales = flash_sales_by_product([item.product_id for item in items])
        return [
            CartLine(item, item.product, item.quantity, price_for(item.product, sales.get(item.product_id)))
            for item in items
        ]

    # Coupons

    def coupon(self):
        applied = self.session.get(COUPON_SESSION_KEY)
        if not applied:
            return None
        return Coupon.find(applied.get("code"))

    def apply_coupon(self, code, email=None):
        coupon = Coupon.find(code)
        if coupon is None:
            return CouponCheck(False, "Invalid coupon code.")

        lines = self.lines()
        subtotal = sum((line.line_total for line in lines), ZERO)
        check = coupon.validate_for_cart(lines, subtotal, self.user, email)
        if check.valid:
            self.session[COUPON_SESSION_KEY] = {
                "code": coupon.code,
                "discount_type": coupon.type,
                "discount_value": str(coupon.value),
            }
        return check

    def remove_coupon(self):
        self.session.pop(COUPON_SESSION_KEY, None)

    def summary(self, lines=None, email=None):
        """Totals for the cart; a coupon that no longer validates is dropped."""
        lines = self.lines() if lines is None else lines
        subtotal = sum((line.line_total for line in lines), ZERO)
        discount = ZERO

        coupon = self.coupon()
        if coupon is not None:
            check = coupon.validate_for_cart(lines, subtotal, self.user, email)
            if check.valid:
                discount = coupon.calculate_discount(subtotal, coupon.applicable_total(lines))
            else:
                logger.info("Dropping coupon %s from cart: %s", coupon.code, check.message)
                coupon = None
        if coupon is None:
            self.remove_coupon()

        return CartSummary(
            item_count=sum(line.quantity for line in lines),
            unique_items=len(lines),
            subtotal=subtotal,
            discount=discount,
            total=max(ZERO, subtotal - discount),
            coupon=coupon,
        )


def merge_guest_cart(cart_token, user):
    """Move a guest cart into ``user``'s cart, summing shared products.

    Returns the number of guest lines merged.
    """
    if not cart_token or user is None or not user.is_authenticated:
        return 0

    with transaction.atomic():
        guest_items = list(
            CartItem.objects.select_for_update().filter(user__isnull=True, cart_token=cart_token)
        )
        existing = {
            item.product_id: item
            for item in CartItem.objects.select_for_update().filter(
                user=user, product_id__in=[item.product_id for item in guest_items]
            )
        }
        for guest_item in guest_items:
            user_item = existing.get(guest_item.product_id)
            if user_item is not None:
                user_item.quantity = clamp_quantity(user_item.quantity + guest_item.quantity)
                user_item.save(update_fields=["quantity", "updated_at"])
                guest_item.delete()
            else:
                guest_item.user = user
                guest_item.cart_token = ""
                guest_item.save(update_fields=["user", "cart_token", "updated_at"])

    if guest_items:
        logger.info("Merged %d guest cart items into cart of user %s", len(guest_items), user.pk)
    return len(guest_items)
