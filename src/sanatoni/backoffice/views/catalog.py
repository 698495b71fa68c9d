"""Product, category and shipping zone management."""

import logging

from django.contrib import messages
from django.db.models import Count, Q
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.urls import reverse
from django.views import View

from sanatoni.catalog.models import Category, Product
from sanatoni.catalog.services import search_filter
from sanatoni.core.http import request_data
from sanatoni.core.pages import flash_response, form_errors, paginate, render_page, validation_error
from sanatoni.store.models import ShippingZone
from sanatoni.store.props import shipping_zone_props

from ..forms import AreaTestForm, CategoryForm, ProductForm, ShippingZoneForm
from ..mixins import BackofficeMixin
from ..props import category_admin_props, choice_options, product_admin_props

logger = logging.getLogger(__name__)

PRODUCTS_PER_PAGE = 20


def category_options():
    return [{"value": category.pk, "label": category.name} for category in Category.objects.active()]


# Products


class ProductListView(BackofficeMixin, View):
    required_permissions = ("view_products",)
    method_permissions = {"post": ("create_products",)}

    def get(self, request):
        products = Product.objects.select_related("category").prefetch_related("images")
        filters = {key: request.GET.get(key, "") for key in ("search", "category", "status", "stock_status")}
        if filters["search"]:
            products = products.filter(search_filter(filters["search"]))
        if filters["category"]:
            products = products.filter(category_id=filters["category"])
        if filters["status"]:
            products = products.filter(status=filters["status"])
        if filters["stock_status"]:
            products = products.filter(stock_status=filters["stock_status"])

        return render_page(request, "Admin/Products/Index", {
            "products": paginate(request, products.order_by("-created_at"), PRODUCTS_PER_PAGE, product_admin_props),
            "filters": filters,
            "categories": category_options(),
            "statusOptions": choice_options(Product.Status.choices),
            "stockStatusOptions": choice_options(Product.StockStatus.choices),
        })

    def post(self, request):
        form = ProductForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:product-list"))
        product = form.save()
        logger.info("Product %s created by %s", product.sku, request.user.email)
        return flash_response(
            request,
            "Product created successfully.",
            status=201,
            redirect_to=reverse("backoffice:product-detail", args=[product.pk]),
            product=product_admin_props(product),
        )


class ProductDetailView(BackofficeMixin, View):
    required_permissions = ("view_products",)
    method_permissions = {
        "post": ("edit_products",),
        "put": ("edit_products",),
        "patch": ("edit_products",),
        "delete": ("delete_products",),
    }

    def dispatch(self, request, *args, **kwargs):
        self.product = get_object_or_404(Product.objects.select_related("category"), pk=kwargs["pk"])
        return super().dispatch(request, *args, **kwargs)

    def get(self, request, pk):
        return render_page(request, "Admin/Products/Edit", {
            "product": product_admin_props(self.product),
            "categories": category_options(),
            "statusOptions": choice_options(Product.Status.choices),
        })

    def post(self, request, pk):
        form = ProductForm(request_data(request), instance=self.product)
        if not form.is_valid():
            return validation_error(
                request, form_errors(form), fallback=reverse("backoffice:product-detail", args=[pk])
            )
        product = form.save()
        return flash_response(request, "Product updated successfully.", product=product_admin_props(product))

    put = post
    patch = post

    def delete(self, request, pk):
        name = self.product.name
        self.product.delete()
        logger.info("Product %s deleted by %s", name, request.user.email)
        return flash_response(
            request, "Product deleted successfully.", redirect_to=reverse("backoffice:product-list")
        )


# Categories


class CategoryListView(BackofficeMixin, View):
    required_permissions = ("view_categories",)
    method_permissions = {"post": ("create_categories",)}

    def get(self, request):
        categories = Category.objects.select_related("parent").annotate(total_products=Count("products"))
        search = request.GET.get("search", "")
        if search:
            categories = categories.filter(Q(name__icontains=search) | Q(description__icontains=search))
        return render_page(request, "Admin/Categories/Index", {
            "categories": [
                category_admin_props(category, category.total_products)
                for category in categories.order_by("sort_order", "name")
            ],
            "parentOptions": category_options(),
            "filters": {"search": search},
        })

    def post(self, request):
        form = CategoryForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:category-list"))
        category = form.save()
        return flash_response(
            request,
            "Category created successfully.",
            status=201,
            redirect_to=reverse("backoffice:category-list"),
            category=category_admin_props(category),
        )


class CategoryDetailView(BackofficeMixin, View):
    required_permissions = ("view_categories",)
    method_permissions = {
        "post": ("edit_categories",),
        "put": ("edit_categories",),
        "patch": ("edit_categories",),
        "delete": ("delete_categories",),
    }

    def dispatch(self, request, *args, **kwargs):
        self.category = get_object_or_404(Category, pk=kwargs["pk"])
        return super().dispatch(request, *args, **kwargs)

    def get(self, request, pk):
        return render_page(request, "Admin/Categories/Edit", {
            "category": category_admin_props(self.category, self.category.products.count()),
            "parentOptions": [
                option for option in category_options() if option["value"] != self.category.pk
            ],
        })

    def post(self, request, pk):
        form = CategoryForm(request_data(request), instance=self.category)
        if not form.is_valid():
            return validation_error(
                request, form_errors(form), fallback=reverse("backoffice:category-detail", args=[pk])
            )
        category = form.save()
        return flash_response(request, "Category updated successfully.", category=category_admin_props(category))

    put = post
    patch = post

    def delete(self, request, pk):
        if self.category.products.exists():
            return flash_response(
                request, "Cannot delete category that has products.", messages.ERROR, status=422
            )
        self.category.delete()
        return flash_response(
            request, "Category deleted successfully.", redirect_to=reverse("backoffice:category-list")
        )


# Shipping zones


class ShippingZoneListView(BackofficeMixin, View):
    required_permissions = ("view_orders",)
    method_permissions = {"post": ("edit_orders",)}

    def get(self, request):
        zones = ShippingZone.objects.annotate(orders_count=Count("orders"))
        search = request.GET.get("search", "")
        status = request.GET.get("status", "")
        if search:
            zones = zones.filter(Q(name__icontains=search) | Q(description__icontains=search))
        if status == "active":
            zones = zones.filter(is_active=True)
        elif status == "inactive":
            zones = zones.filter(is_active=False)

        data = []
        for zone in zones.order_by("name"):
            props = shipping_zone_props(zone)
            props["orders_count"] = zone.orders_count
            data.append(props)
        return render_page(request, "Admin/ShippingZones/Index", {
            "shippingZones": data,
            "filters": {"search": search, "status": status},
        })

    def post(self, request):
        form = ShippingZoneForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:shipping-zone-list"))
        zone = form.save()
        logger.info("Shipping zone %s created", zone.name)
        return flash_response(
            request,
            "Shipping zone created successfully.",
            status=201,
            redirect_to=reverse("backoffice:shipping-zone-list"),
            shippingZone=shipping_zone_props(zone),
        )


class ShippingZoneDetailView(BackofficeMixin, View):
    required_permissions = ("view_orders",)
    method_permissions = {
        "post": ("edit_orders",),
        "put": ("edit_orders",),
        "patch": ("edit_orders",),
        "delete": ("edit_orders",),
    }

    def dispatch(self, request, *args, **kwargs):
        self.zone = get_object_or_404(ShippingZone, pk=kwargs["pk"])
        return super().dispatch(request, *args, **kwargs)

    def get(self, request, pk):
        return render_page(request, "Admin/ShippingZones/Edit", {"shippingZone": shipping_zone_props(self.zone)})

    def post(self, request, pk):
        form = ShippingZoneForm(request_data(request), instance=self.zone)
        if not form.is_valid():
            return validation_error(
                request, form_errors(form), fallback=reverse("backoffice:shipping-zone-detail", args=[pk])
            )
        zone = form.save()
        return flash_response(
            request, "Shipping zone updated successfully.", shippingZone=shipping_zone_props(zone)
        )

    put = post
    patch = post

    def delete(self, request, pk):
        self.zone.delete()
        return flash_response(
            request,
            "Shipping zone deleted successfully.",
            redirect_to=reverse("backoffice:shipping-zone-list"),
        )


class ShippingZoneToggleView(BackofficeMixin, View):
    required_permissions = ("edit_orders",)

    def post(self, request, pk):
        zone = get_object_or_404(ShippingZone, pk=pk)
        zone.is_active = not zone.is_active
        zone.save(update_fields=["is_active", "updated_at"])
        state = "activated" if zone.is_active else "deactivated"
        return flash_response(
            request,
            f"Shipping zone '{zone.name}' has been {state}.",
            shippingZone=shipping_zone_props(zone),
        )


class ShippingZoneTestView(BackofficeMixin, View):
    """Which zone would serve an address."""

    required_permissions = ("view_orders",)

    def post(self, request):
        form = AreaTestForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:shipping-zone-list"))
        address = form.cleaned_data["test_address"]
        zone = ShippingZone.find_for_address({"city": address})
        return JsonResponse({
            "success": True,
            "test_address": address,
            "matched_zone": shipping_zone_props(zone) if zone else None,
            "message": f"Address matches zone: {zone.name}" if zone else "No shipping zone found for this address",
        })
