"""Promotion models: flash sales and coupons."""

from typing import NamedTuple

from django.conf import settings
from django.db import models
from django.db.models import F, Q
from django.utils import timezone
from django.utils.crypto import get_random_string

from .pricing import ZERO, apply_percentage_discount, percent_of, round_money, to_decimal

CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


class FlashSaleQuerySet(models.QuerySet):
    def running(self, now=None):
        """Sales that are active, inside their window and under their usage cap."""
        now = now or timezone.now()
        return self.filter(
            status=FlashSale.Status.ACTIVE,
            start_date__lte=now,
            end_date__gt=now,
        ).filter(Q(max_usage__isnull=True) | Q(used_count__lt=F("max_usage")))

    def featured(self):
        return self.filter(is_featured=True)


class FlashSale(models.Model):
    """Time-boxed percentage discount on a set of products."""

    class Status(models.TextChoices):
        SCHEDULED = "scheduled", "Scheduled"
        ACTIVE = "active", "Active"
        INACTIVE = "inactive", "Inactive"
        EXPIRED = "expired", "Expired"

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    discount_percentage = models.DecimalField(max_digits=5, decimal_places=2)
    products = models.ManyToManyField("catalog.Product", related_name="flash_sales", blank=True)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.SCHEDULED)
    is_featured = models.BooleanField(default=False)
    max_usage = models.PositiveIntegerField(null=True, blank=True)
    used_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = FlashSaleQuerySet.as_manager()

    class Meta:
        ordering = ["-start_date"]

    def __str__(self):
        return self.name

    def usage_exhausted(self):
        return self.max_usage is not None and self.used_count >= self.max_usage

    def is_active(self, now=None):
        now = now or timezone.now()
        return (
            self.status == self.Status.ACTIVE
            and self.start_date <= now < self.end_date
            and not self.usage_exhausted()
        )

    def is_scheduled(self, now=None):
        now = now or timezone.now()
        return self.status == self.Status.SCHEDULED and now < self.start_date

    def is_expired(self, now=None):
        now = now or timezone.now()
        return now >= self.end_date or self.usage_exhausted()

    def has_started(self, now=None):
        return (now or timezone.now()) >= self.start_date

    def time_remaining(self, now=None):
        """Seconds until the sale ends, or None when it is not running."""
        now = now or timezone.now()
        if not self.is_active(now):
            return None
        return max(0, int((self.end_date - now).total_seconds()))

    def discounted_price(self, price):
        return apply_percentage_discount(price, self.discount_percentage)

    def usage_percentage(self):
        if not self.max_usage:
            return 0
        return round(self.used_count / self.max_usage * 100, 1)

    def computed_status(self, now=None):
        """Status implied by the dates and usage, keeping a manual deactivation."""
        now = now or timezone.now()
        if now >= self.end_date or (self.has_started(now) and self.usage_exhausted()):
            return self.Status.EXPIRED
        if self.status == self.Status.INACTIVE:
            return self.Status.INACTIVE
        if now < self.start_date:
            return self.Status.SCHEDULED
        return self.Status.ACTIVE

    def refresh_status(self, now=None, save=True):
        status = self.computed_status(now)
        changed = status != self.status
        self.status = status
        if changed and save:
            self.save(update_fields=["status", "updated_at"])
        return changed


class CouponCheck(NamedTuple):
    """Result of validating a coupon against a cart."""

    valid: bool
    message: str = ""


class Coupon(models.Model):
    """Discount code with usage limits, a validity window and optional restrictions."""

    class Type(models.TextChoices):
        PERCENTAGE = "percentage", "Percentage"
        FIXED = "fixed", "Fixed amount"

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        INACTIVE = "inactive", "Inactive"
        EXPIRED = "expired", "Expired"

    code = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.PERCENTAGE)
    value = models.DecimalField(max_digits=10, decimal_places=2)
    minimum_order_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    products = models.ManyToManyField("catalog.Product", related_name="coupons", blank=True)
    categories = models.ManyToManyField("catalog.Category", related_name="coupons", blank=True)
    usage_limit = models.PositiveIntegerField(null=True, blank=True)
    used_count = models.PositiveIntegerField(default=0)
    per_customer_limit = models.PositiveIntegerField(null=True, blank=True)
    valid_from = models.DateTimeField(default=timezone.now)
    valid_until = models.DateTimeField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.code

    def save(self, *args, **kwargs):
        self.code = self.code.strip().upper()
        super().save(*args, **kwargs)

    @classmethod
    def generate_code(cls, prefix="COUP"):
        while True:
            code = prefix + get_random_string(8, CODE_ALPHABET)
            if not cls.objects.filter(code=code).exists():
                return code

    @classmethod
    def find(cls, code):
        return cls.objects.filter(code=(code or "").strip().upper()).first()

    def usage_exhausted(self):
        return self.usage_limit is not None and self.used_count >= self.usage_limit

    def invalid_reason(self, subtotal=None, now=None):
        """Why the coupon cannot be used right now, or an empty string."""
        now = now or timezone.now()
        if self.status != self.Status.ACTIVE:
            return "This coupon is no longer active."
        if self.valid_from and now < self.valid_from:
            return "This coupon is not yet valid."
        if self.valid_until and now > self.valid_until:
            return "This coupon has expired."
        if self.usage_exhausted():
            return "This coupon has reached its usage limit."
        if (
            subtotal is not None
            and self.minimum_order_amount
            and to_decimal(subtotal) < self.minimum_order_amount
        ):
            symbol = getattr(settings, "STORE", {}).get("CURRENCY_SYMBOL", "৳")
            return (
                f"Minimum order amount of {symbol}{self.minimum_order_amount} "
                "required for this coupon."
            )
        return ""

    def is_valid(self, subtotal=None, now=None):
        return not self.invalid_reason(subtotal, now)

    def is_restricted(self):
        return self.products.exists() or self.categories.exists()

    def applies_to(self, product):
        if not self.is_restricted():
            return True
        if self.products.filter(pk=product.pk).exists():
            return True
        return product.category_id is not None and self.categories.filter(pk=product.category_id).exists()

    def applicable_total(self, lines):
        """Sum of the cart lines the coupon applies to."""
        if not self.is_restricted():
            return sum((line.line_total for line in lines), ZERO)
        product_ids = set(self.products.values_list("pk", flat=True))
        category_ids = set(self.categories.values_list("pk", flat=True))
        return sum(
            (
                line.line_total
                for line in lines
                if line.product.pk in product_ids or line.product.category_id in category_ids
            ),
            ZERO,
        )

    def times_used_by(self, user=None, email=None):
        usages = self.usages.all()
        if user is not None and user.is_authenticated:
            return usages.filter(user=user).count()
        if email:
            return usages.filter(customer_email__iexact=email).count()
        return 0

    def validate_for_cart(self, lines, subtotal, user=None, email=None):
        reason = self.invalid_reason(subtotal)
        if reason:
            return CouponCheck(False, reason)

        if self.is_restricted() and self.applicable_total(lines) <= 0:
            return CouponCheck(False, "This coupon is not applicable to items in your cart.")

        if self.per_customer_limit and self.times_used_by(user, email) >= self.per_customer_limit:
            return CouponCheck(
                False, "You have already used this coupon the maximum number of times."
            )

        return CouponCheck(True)

    def calculate_discount(self, subtotal, applicable_total=None):
        """Discount for an order; fixed amounts never exceed the discountable base."""
        subtotal = to_decimal(subtotal)
        if not self.is_valid(subtotal):
            return ZERO
        base = subtotal if applicable_total is None else to_decimal(applicable_total)
        if self.type == self.Type.PERCENTAGE:
            return min(percent_of(base, self.value), base)
        return round_money(min(self.value, base))

    def refresh_status(self, now=None):
        now = now or timezone.now()
        expired = (self.valid_until and now > self.valid_until) or self.usage_exhausted()
        if expired and self.status != self.Status.EXPIRED:
            self.status = self.Status.EXPIRED
            self.save(update_fields=["status", "updated_at"])
            return True
        return False


class CouponUsage(models.Model):
    coupon = models.ForeignKey(Coupon, on_delete=models.CASCADE, related_name="usages")
    order = models.ForeignKey(
        "store.Order",
        on_delete=models.CASCADE,
        related_name="coupon_usages",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="coupon_usages",
    )
    customer_email = models.EmailField(blank=True)
    discount_amount = models.DecimalField(max_digits=10, decimal_places=2, default=ZERO)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.coupon.code} on {self.order_id}"
