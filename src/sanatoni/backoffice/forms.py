"""Back office forms."""

from decimal import Decimal

from django import forms
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.utils import timezone

from sanatoni.catalog.models import Category, Product
from sanatoni.content.models import BlogCategory, BlogPost, MediaFile, Page, PageSection, PublishStatus
from sanatoni.core.models import Role
from sanatoni.promotions.models import Coupon, FlashSale
from sanatoni.reviews.models import ProductReview
from sanatoni.store.models import Order, ShippingZone

User = get_user_model()

MAX_FLASH_DISCOUNT = Decimal("99.99")


class StringListField(forms.Field):
    """A list of non-blank strings, posted as a repeated key or a JSON array.

    With ``split_commas`` each value may also hold a comma-separated list.
    """

    widget = forms.MultipleHiddenInput

    def __init__(self, *, split_commas=False, **kwargs):
        self.split_commas = split_commas
        super().__init__(**kwargs)

    def to_python(self, value):
        if not value:
            return []
        if isinstance(value, str):
            value = [value]
        items = []
        for item in value:
            items.extend(str(item).split(",") if self.split_commas else [str(item)])
        return [item.strip() for item in items if item.strip()]

    def validate(self, value):
        if self.required and not value:
            raise forms.ValidationError(self.error_messages["required"], code="required")


# Orders


class OrderStatusForm(forms.Form):
    status = forms.ChoiceField(choices=Order.Status.choices)
    comment = forms.CharField(max_length=255, required=False)


class OrderFilterForm(forms.Form):
    status = forms.ChoiceField(choices=[("", "")] + Order.Status.choices, required=False)
    payment_method = forms.CharField(required=False)
    search = forms.CharField(required=False)
    date_from = forms.DateField(required=False)
    date_to = forms.DateField(required=False)


# Catalog


class ProductForm(forms.ModelForm):
    class Meta:
        model = Product
        fields = [
            "name",
            "description",
            "short_description",
            "price",
            "sale_price",
            "category",
            "manage_stock",
            "stock_quantity",
            "allow_backorders",
            "featured",
            "is_active",
            "status",
            "weight",
            "meta_title",
            "meta_description",
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["category"].required = True
        self.fields["category"].queryset = Category.objects.active()
        self.fields["description"].required = True

    def clean(self):
        cleaned = super().clean()
        price = cleaned.get("price")
        sale_price = cleaned.get("sale_price")
        if price is not None and sale_price is not None and sale_price >= price:
            self.add_error("sale_price", "The sale price must be less than the price.")
        if cleaned.get("stock_quantity") is not None and cleaned["stock_quantity"] < 0:
            self.add_error("stock_quantity", "The stock quantity must be at least 0.")
        return cleaned

    def save(self, commit=True):
        product = super().save(commit=False)
        if self.instance.pk and "name" in self.changed_data:
            product.slug = ""
        if product.manage_stock:
            product.refresh_stock_status()
        else:
            product.stock_status = Product.StockStatus.IN_STOCK
        if commit:
            product.save()
        return product


class CategoryForm(forms.ModelForm):
    class Meta:
        model = Category
        fields = [
            "name",
            "description",
            "image",
            "icon",
            "parent",
            "is_active",
            "sort_order",
            "meta_title",
            "meta_description",
        ]

    def clean_parent(self):
        parent = self.cleaned_data.get("parent")
        if parent is not None and self.instance.pk and parent.pk == self.instance.pk:
            raise forms.ValidationError("A category cannot be its own parent.")
        return parent


class ShippingZoneForm(forms.ModelForm):
    areas = StringListField()

    class Meta:
        model = ShippingZone
        fields = [
            "name",
            "description",
            "areas",
            "shipping_cost",
            "delivery_time_min",
            "delivery_time_max",
            "is_active",
        ]

    def clean_name(self):
        name = self.cleaned_data["name"].strip()
        if ShippingZone.objects.filter(name__iexact=name).exclude(pk=self.instance.pk).exists():
            raise forms.ValidationError("The name has already been taken.")
        return name

    def clean_shipping_cost(self):
        cost = self.cleaned_data["shipping_cost"]
        if cost < 0:
            raise forms.ValidationError("The shipping cost must be at least 0.")
        return cost

    def clean(self):
        cleaned = super().clean()
        low = cleaned.get("delivery_time_min")
        high = cleaned.get("delivery_time_max")
        for name, value in (("delivery_time_min", low), ("delivery_time_max", high)):
            if value is not None and not 1 <= value <= 365:
                self.add_error(name, "Delivery time must be between 1 and 365 days.")
        if low is not None and high is not None and high < low:
            self.add_error(
                "delivery_time_max",
                "The maximum delivery time must be greater than or equal to the minimum.",
            )
        return cleaned


class AreaTestForm(forms.Form):
    test_address = forms.CharField(max_length=255)


# Promotions


class FlashSaleForm(forms.ModelForm):
    products = forms.ModelMultipleChoiceField(queryset=Product.objects.filter(is_active=True))

    class Meta:
        model = FlashSale
        fields = [
            "name",
            "description",
            "discount_percentage",
            "products",
            "start_date",
            "end_date",
            "max_usage",
            "is_featured",
        ]

    def clean_discount_percentage(self):
        value = self.cleaned_data["discount_percentage"]
        if not 0 <= value <= MAX_FLASH_DISCOUNT:
            raise forms.ValidationError("The discount percentage must be between 0 and 99.99.")
        return value

    def clean_start_date(self):
        start = self.cleaned_data["start_date"]
        sale = self.instance
        if sale.pk is None:
            if start <= timezone.now():
                raise forms.ValidationError("The start date must be a date after now.")
        elif sale.used_count > 0 and sale.has_started():
            # locked once the sale has been used
            return sale.start_date
        return start

    def clean_max_usage(self):
        value = self.cleaned_data.get("max_usage")
        if value is not None and value < 1:
            raise forms.ValidationError("The max usage must be at least 1.")
        return value

    def clean(self):
        cleaned = super().clean()
        start = cleaned.get("start_date")
        end = cleaned.get("end_date")
        if start and end and end <= start:
            self.add_error("end_date", "The end date must be a date after start date.")
        return cleaned

    def save(self, commit=True):
        sale = super().save(commit=False)
        if sale.pk is None:
            sale.status = FlashSale.Status.SCHEDULED
            sale.used_count = 0
        sale.refresh_status(save=False)
        if commit:
            sale.save()
            self.save_m2m()
        return sale


class CouponForm(forms.ModelForm):
    class Meta:
        model = Coupon
        fields = [
            "name",
            "description",
            "code",
            "type",
            "value",
            "minimum_order_amount",
            "products",
            "categories",
            "usage_limit",
            "per_customer_limit",
            "valid_from",
            "valid_until",
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["products"].required = False
        self.fields["categories"].required = False
        self.fields["valid_from"].required = True

    def clean_code(self):
        code = self.cleaned_data["code"].strip().upper()
        if Coupon.objects.filter(code=code).exclude(pk=self.instance.pk).exists():
            raise forms.ValidationError("The code has already been taken.")
        return code

    def clean_value(self):
        value = self.cleaned_data["value"]
        if value < 0:
            raise forms.ValidationError("The value must be at least 0.")
        return value

    def clean_usage_limit(self):
        limit = self.cleaned_data.get("usage_limit")
        if limit is not None and self.instance.pk and limit < self.instance.used_count:
            raise forms.ValidationError("Usage limit cannot be less than current usage count.")
        return limit

    def clean(self):
        cleaned = super().clean()
        if cleaned.get("type") == Coupon.Type.PERCENTAGE and (cleaned.get("value") or 0) > 100:
            self.add_error("value", "Percentage discount cannot exceed 100%")
        valid_from = cleaned.get("valid_from")
        valid_until = cleaned.get("valid_until")
        if valid_from and valid_until and valid_until <= valid_from:
            self.add_error("valid_until", "The valid until must be a date after valid from.")
        return cleaned


class CouponValidationForm(forms.Form):
    code = forms.CharField()
    user_id = forms.ModelChoiceField(queryset=User.objects.all(), required=False)
    customer_email = forms.EmailField(required=False)
    order_total = forms.DecimalField(min_value=0, max_digits=12, decimal_places=2)
    product_ids = forms.ModelMultipleChoiceField(queryset=Product.objects.all(), required=False)


# Users


class UserCreateForm(forms.ModelForm):
    password = forms.CharField(strip=False, min_length=8)
    roles = forms.ModelMultipleChoiceField(queryset=Role.objects.filter(is_active=True), required=False)

    class Meta:
        model = User
        fields = ["name", "email", "phone", "status"]

    def clean_email(self):
        email = self.cleaned_data["email"].strip().lower()
        if User.objects.filter(email__iexact=email).exists():
            raise forms.ValidationError("The email has already been taken.")
        return email

    def clean_password(self):
        password = self.cleaned_data["password"]
        validate_password(password)
        return password

    def save(self, commit=True):
        user = super().save(commit=False)
        user.set_password(self.cleaned_data["password"])
        if commit:
            user.save()
        return user


class UserUpdateForm(forms.ModelForm):
    roles = forms.ModelMultipleChoiceField(queryset=Role.objects.filter(is_active=True), required=False)

    class Meta:
        model = User
        fields = ["name", "email", "phone", "status"]

    def clean_email(self):
        email = self.cleaned_data["email"].strip().lower()
        if User.objects.filter(email__iexact=email).exclude(pk=self.instance.pk).exists():
            raise forms.ValidationError("The email has already been taken.")
        return email


class UserStatusForm(forms.Form):
    status = forms.ChoiceField(choices=User.Status.choices)


# Content


class BlogPostForm(forms.ModelForm):
    tags = StringListField(split_commas=True, required=False)

    class Meta:
        model = BlogPost
        fields = [
            "title",
            "slug",
            "excerpt",
            "content",
            "featured_image",
            "category",
            "status",
            "published_at",
            "meta_title",
            "meta_description",
            "meta_keywords",
            "is_featured",
            "allow_comments",
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["category"].required = True
        self.fields["slug"].required = False
        if self.instance.pk:
            self.initial["tags"] = list(self.instance.tags.values_list("name", flat=True))

    def clean_excerpt(self):
        excerpt = self.cleaned_data.get("excerpt", "")
        if len(excerpt) > 500:
            raise forms.ValidationError("The excerpt may not be greater than 500 characters.")
        return excerpt

    def clean(self):
        cleaned = super().clean()
        if cleaned.get("status") == PublishStatus.SCHEDULED:
            published_at = cleaned.get("published_at")
            if not published_at or published_at <= timezone.now():
                self.add_error("published_at", "A scheduled post needs a publication date in the future.")
        return cleaned


class BlogCategoryForm(forms.ModelForm):
    class Meta:
        model = BlogCategory
        fields = ["name", "slug", "description", "meta_title", "meta_description", "is_active", "sort_order"]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["slug"].required = False

    def clean_name(self):
        name = self.cleaned_data["name"].strip()
        if BlogCategory.objects.filter(name__iexact=name).exclude(pk=self.instance.pk).exists():
            raise forms.ValidationError("The name has already been taken.")
        return name


class BulkPostActionForm(forms.Form):
    ACTIONS = [
        ("publish", "Publish"),
        ("unpublish", "Unpublish"),
        ("delete", "Delete"),
        ("change_category", "Change category"),
    ]

    action = forms.ChoiceField(choices=ACTIONS)
    post_ids = forms.ModelMultipleChoiceField(queryset=BlogPost.objects.all())
    category_id = forms.ModelChoiceField(queryset=BlogCategory.objects.all(), required=False)

    def clean(self):
        cleaned = super().clean()
        if cleaned.get("action") == "change_category" and not cleaned.get("category_id"):
            self.add_error("category_id", "The category is required when changing category.")
        return cleaned


class BulkReviewForm(forms.Form):
    review_ids = forms.ModelMultipleChoiceField(queryset=ProductReview.objects.all())


class PageForm(forms.ModelForm):
    class Meta:
        model = Page
        fields = [
            "title",
            "slug",
            "content",
            "excerpt",
            "meta_title",
            "meta_description",
            "meta_keywords",
            "status",
            "published_at",
            "template",
            "is_homepage",
            "sort_order",
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["slug"].required = False
        self.fields["template"].required = False

    def clean_template(self):
        return self.cleaned_data.get("template") or "default"


class SectionForm(forms.Form):
    type = forms.ChoiceField(choices=PageSection.Type.choices)
    name = forms.CharField(max_length=255, required=False)
    sort_order = forms.IntegerField(min_value=0, required=False)
    is_active = forms.NullBooleanField(required=False)


class MediaUploadForm(forms.Form):
    files = forms.FileField()


class MediaUpdateForm(forms.ModelForm):
    class Meta:
        model = MediaFile
        fields = ["original_name", "alt_text", "title", "description"]


class BulkMediaActionForm(forms.Form):
    action = forms.ChoiceField(choices=[("delete", "Delete"), ("generate_thumbnails", "Generate thumbnails")])
    ids = forms.ModelMultipleChoiceField(queryset=MediaFile.objects.all())


SEO_MODELS = {
    "page": Page,
    "product": Product,
    "blog_post": BlogPost,
    "blog_category": BlogCategory,
}


class SeoTargetForm(forms.Form):
    model_type = forms.ChoiceField(choices=[(name, name) for name in SEO_MODELS])
    model_id = forms.IntegerField()

    def target(self):
        model = SEO_MODELS[self.cleaned_data["model_type"]]
        return model.objects.filter(pk=self.cleaned_data["model_id"]).first()


class SeoSettingsForm(SeoTargetForm):
    meta_title = forms.CharField(max_length=255, required=False)
    meta_description = forms.CharField(max_length=500, required=False)
    meta_keywords = forms.CharField(max_length=255, required=False)
    og_title = forms.CharField(max_length=255, required=False)
    og_description = forms.CharField(max_length=500, required=False)
    og_image = forms.CharField(required=False)
    og_type = forms.CharField(required=False)
    twitter_card = forms.CharField(required=False)
    twitter_title = forms.CharField(max_length=255, required=False)
    twitter_description = forms.CharField(max_length=500, required=False)
    twitter_image = forms.CharField(required=False)
    canonical_url = forms.URLField(required=False)

    def settings(self):
        """Submitted override fields only."""
        return {
            name: value
            for name, value in self.cleaned_data.items()
            if name not in ("model_type", "model_id") and name in self.data
        }


class SeoOptimizeForm(forms.Form):
    title = forms.CharField(required=False, strip=False)
    description = forms.CharField(required=False, strip=False)


class SeoPreviewForm(forms.Form):
    url = forms.URLField()
