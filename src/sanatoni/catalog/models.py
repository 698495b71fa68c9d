"""Catalog models: categories, products and product images."""

from decimal import Decimal

from django.db import models
from django.utils.crypto import get_random_string
from django.utils.text import slugify

SKU_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"


def unique_slug(model, value, instance_pk=None, field="slug"):
    """Slugify ``value`` and append -2, -3 ... until it is free."""
    base = slugify(value)[:240] or get_random_string(8).lower()
    slug = base
    counter = 2
    existing = model.objects.all()
    if instance_pk is not None:
        existing = existing.exclude(pk=instance_pk)
    while existing.filter(**{field: slug}).exists():
        slug = f"{base}-{counter}"
        counter += 1
    return slug


class CategoryQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def roots(self):
        return self.filter(parent__isnull=True)


class Category(models.Model):
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    description = models.TextField(blank=True)
    image = models.CharField(max_length=255, blank=True)
    icon = models.CharField(max_length=100, blank=True)
    parent = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="children",
    )
    is_active = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)
    meta_title = models.CharField(max_length=255, blank=True)
    meta_description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CategoryQuerySet.as_manager()

    class Meta:
        ordering = ["sort_order", "name"]
        verbose_name_plural = "categories"

    def __str__(self):
        return self.full_name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = unique_slug(Category, self.name, self.pk)
        super().save(*args, **kwargs)

    @property
    def full_name(self):
        if self.parent_id:
            return f"{self.parent.name} > {self.name}"
        return self.name


class ProductQuerySet(models.QuerySet):
    def published(self):
        return self.filter(is_active=True, status=Product.Status.PUBLISHED)

    def featured(self):
        return self.filter(featured=True)

    def low_stock(self, threshold):
        return self.filter(manage_stock=True, stock_quantity__gt=0, stock_quantity__lte=threshold)


class Product(models.Model):
    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"
        ARCHIVED = "archived", "Archived"

    class StockStatus(models.TextChoices):
        IN_STOCK = "in_stock", "In stock"
        OUT_OF_STOCK = "out_of_stock", "Out of stock"
        ON_BACKORDER = "on_backorder", "On backorder"

    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    description = models.TextField(blank=True)
    short_description = models.TextField(blank=True)
    sku = models.CharField(max_length=64, unique=True, blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    sale_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    manage_stock = models.BooleanField(default=True)
    stock_quantity = models.IntegerField(default=0)
    allow_backorders = models.BooleanField(default=False)
    stock_status = models.CharField(
        max_length=20, choices=StockStatus.choices, default=StockStatus.IN_STOCK
    )
    featured = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    weight = models.DecimalField(max_digits=8, decimal_places=3, null=True, blank=True)
    dimensions = models.JSONField(default=dict, blank=True)
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )
    main_image = models.CharField(max_length=255, blank=True)
    specifications = models.JSONField(default=dict, blank=True)
    meta_title = models.CharField(max_length=255, blank=True)
    meta_description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProductQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = unique_slug(Product, self.name, self.pk)
        if not self.sku:
            self.sku = self.generate_sku()
        super().save(*args, **kwargs)

    @staticmethod
    def generate_sku():
        while True:
            sku = "PRD-" + get_random_string(8, SKU_ALPHABET)
            if not Product.objects.filter(sku=sku).exists():
                return sku

    def is_on_sale(self):
        return self.sale_price is not None and 0 < self.sale_price < self.price

    @property
    def display_price(self):
        return self.sale_price if self.is_on_sale() else self.price

    # Inventory

    @property
    def tracks_inventory(self):
        """Stock is checked and decremented only for managed, non-backorder products."""
        return self.manage_stock and not self.allow_backorders

    def has_stock(self, quantity=1):
        if not self.tracks_inventory:
            return True
        return self.stock_quantity >= quantity

    @property
    def in_stock(self):
        return self.has_stock(1)

    def refresh_stock_status(self):
        if not self.manage_stock:
            return
        if self.stock_quantity > 0:
            self.stock_status = self.StockStatus.IN_STOCK
        elif self.allow_backorders:
            self.stock_status = self.StockStatus.ON_BACKORDER
        else:
            self.stock_status = self.StockStatus.OUT_OF_STOCK

    @property
    def primary_image(self):
        if self.main_image:
            return self.main_image
        images = list(self.images.all())
        for image in images:
            if image.is_primary:
                return image.image_path
        return images[0].image_path if images else None

    def discount_percentage(self):
        if not self.is_on_sale():
            return 0
        return int((self.price - self.sale_price) / self.price * Decimal(100))


class ProductImage(models.Model):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="images")
    image_path = models.CharField(max_length=255)
    alt_text = models.CharField(max_length=255, blank=True)
    is_primary = models.BooleanField(default=False)
    sort_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["sort_order", "id"]

    def __str__(self):
        return self.image_path
