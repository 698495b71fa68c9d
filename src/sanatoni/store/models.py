"""Store models: carts, wishlists, shipping zones, orders and invoices."""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.crypto import get_random_string

from sanatoni.promotions.pricing import ZERO

NUMBER_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"


def store_setting(name, default=None):
    return getattr(settings, "STORE", {}).get(name, default)


class CartItem(models.Model):
    """A product line in a signed-in user's cart or a guest's session cart."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="cart_items",
    )
    cart_token = models.CharField(max_length=64, blank=True, db_index=True)
    product = models.ForeignKey("catalog.Product", on_delete=models.CASCADE, related_name="cart_items")
    quantity = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "product"],
                condition=models.Q(user__isnull=False),
                name="unique_user_cart_product",
            ),
            models.UniqueConstraint(
                fields=["cart_token", "product"],
                condition=models.Q(user__isnull=True),
                name="unique_guest_cart_product",
            ),
        ]

    def __str__(self):
        return f"{self.quantity} × {self.product}"

    def belongs_to(self, user=None, cart_token=None):
        if user is not None and user.is_authenticated:
            return self.user_id == user.pk
        return self.user_id is None and bool(cart_token) and self.cart_token == cart_token


class Wishlist(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="wishlist")
    product = models.ForeignKey("catalog.Product", on_delete=models.CASCADE, related_name="wishlisted_by")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "product"], name="unique_wishlist_product"),
        ]

    def __str__(self):
        return f"{self.user} ♥ {self.product}"


class ShippingZone(models.Model):
    """Delivery area with a flat shipping cost and a delivery window in days."""

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    areas = models.JSONField(default=list, blank=True)
    shipping_cost = models.DecimalField(max_digits=10, decimal_places=2, default=ZERO)
    is_active = models.BooleanField(default=True)
    delivery_time_min = models.PositiveIntegerField(default=1)
    delivery_time_max = models.PositiveIntegerField(default=7)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["pk"]

    def __str__(self):
        return self.name

    def matches_area(self, area):
        """True when ``area`` contains one of the zone's areas, ignoring case."""
        area = (area or "").strip().lower()
        if not area:
            return False
        return any(
            zone_area.lower() in area
            for zone_area in self.areas or []
            if zone_area
        )

    def covers(self, address):
        return any(
            self.matches_area(address.get(field))
            for field in ("city", "district", "division", "postal_code")
        )

    @property
    def delivery_time_range(self):
        if self.delivery_time_min == self.delivery_time_max:
            unit = "day" if self.delivery_time_min == 1 else "days"
            return f"{self.delivery_time_min} {unit}"
        return f"{self.delivery_time_min}-{self.delivery_time_max} days"

    @classmethod
    def find_for_address(cls, address):
        """The first active zone covering the address, else the first active zone."""
        zones = list(cls.objects.filter(is_active=True).order_by("pk"))
        for zone in zones:
            if zone.covers(address):
                return zone
        return zones[0] if zones else None


class Order(models.Model):
    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        PROCESSING = "processing", "Processing"
        SHIPPED = "shipped", "Shipped"
        DELIVERED = "delivered", "Delivered"
        CANCELLED = "cancelled", "Cancelled"

    class PaymentMethod(models.TextChoices):
        COD = "cod", "Cash on Delivery"

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", "Pending"
        PAID = "paid", "Paid"
        REFUNDED = "refunded", "Refunded"

    CANCELLABLE_STATUSES = (Status.PENDING, Status.PROCESSING)

    order_number = models.CharField(max_length=32, unique=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    guest_email = models.EmailField(blank=True)
    customer_phone = models.CharField(max_length=20, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    shipping_cost = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    total = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    coupon_code = models.CharField(max_length=50, blank=True)
    shipping_address = models.JSONField(default=dict)
    billing_address = models.JSONField(default=dict)
    notes = models.TextField(blank=True)
    payment_method = models.CharField(
        max_length=20, choices=PaymentMethod.choices, default=PaymentMethod.COD
    )
    payment_status = models.CharField(
        max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )
    shipping_zone = models.ForeignKey(
        ShippingZone,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    estimated_delivery_date = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="order_status_created_idx"),
        ]

    def __str__(self):
        return self.order_number

    @classmethod
    def generate_order_number(cls):
        """``ORD-<year>-<6 random>``, retried until unused."""
        prefix = store_setting("ORDER_NUMBER_PREFIX", "ORD")
        year = timezone.now().year
        while True:
            number = f"{prefix}-{year}-{get_random_string(6, NUMBER_ALPHABET)}"
            if not cls.objects.filter(order_number=number).exists():
                return number

    def can_be_cancelled(self):
        return self.status in self.CANCELLABLE_STATUSES

    def is_completed(self):
        return self.status == self.Status.DELIVERED

    @property
    def customer_email(self):
        if self.user_id:
            return self.user.email
        return self.guest_email

    @property
    def customer_name(self):
        if self.user_id and self.user.name:
            return self.user.name
        return (self.shipping_address or {}).get("name") or "Guest Customer"

    @property
    def item_count(self):
        return sum(item.quantity for item in self.items.all())

    def belongs_to(self, user):
        return user.is_authenticated and self.user_id == user.pk


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(
        "catalog.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )
    quantity = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=10, decimal_places=2)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    product_snapshot = models.JSONField(default=dict)
    flash_sale = models.ForeignKey(
        "promotions.FlashSale",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )

    class Meta:
        ordering = ["pk"]

    def __str__(self):
        return f"{self.quantity} × {self.product_name}"

    @property
    def product_name(self):
        return self.product_snapshot.get("name") or (self.product.name if self.product_id else "")


class OrderStatusHistory(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="status_history")
    from_status = models.CharField(max_length=20, blank=True)
    to_status = models.CharField(max_length=20)
    comment = models.TextField(blank=True)
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at", "-pk"]
        verbose_name_plural = "order status history"

    def __str__(self):
        return f"{self.order} {self.formatted_change}"

    @property
    def formatted_change(self):
        labels = dict(Order.Status.choices)
        to_label = labels.get(self.to_status, self.to_status)
        if not self.from_status:
            return to_label
        return f"{labels.get(self.from_status, self.from_status)} → {to_label}"


class Invoice(models.Model):
    order = models.OneToOneField(Order, on_delete=models.CASCADE, related_name="invoice")
    invoice_number = models.CharField(max_length=32, unique=True)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    shipping_cost = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    total = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    generated_at = models.DateTimeField(default=timezone.now)
    is_sent = models.BooleanField(default=False)
    sent_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-generated_at"]

    def __str__(self):
        return self.invoice_number

    @classmethod
    def generate_invoice_number(cls):
        """``INV-<year>-<6 digit sequence>``."""
        prefix = store_setting("INVOICE_NUMBER_PREFIX", "INV")
        year = timezone.now().year
        start = f"{prefix}-{year}-"
        last = (
            cls.objects.filter(invoice_number__startswith=start)
            .order_by("-invoice_number")
            .values_list("invoice_number", flat=True)
            .first()
        )
        sequence = int(last.rsplit("-", 1)[1]) + 1 if last else 1
        return f"{start}{sequence:06d}"

    @classmethod
    def for_order(cls, order):
        invoice = cls.objects.filter(order=order).first()
        if invoice:
            return invoice
        return cls.objects.create(
            order=order,
            invoice_number=cls.generate_invoice_number(),
            subtotal=order.subtotal,
            discount_amount=order.discount_amount,
            shipping_cost=order.shipping_cost,
            total=order.total,
        )
