"""Flash sale and coupon management."""

import logging

from django.contrib import messages
from django.db.models import Q, Sum
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.urls import reverse
from django.utils import timezone
from django.views import View

from sanatoni.catalog.models import Category, Product
from sanatoni.core.access import any_permission_required
from sanatoni.core.http import request_data
from sanatoni.core.pages import flash_response, form_errors, paginate, render_page, validation_error
from sanatoni.promotions.models import Coupon, CouponUsage, FlashSale
from sanatoni.promotions.pricing import round_money
from sanatoni.promotions.services import expire_coupons, flash_sale_stats, refresh_flash_sale_statuses

from ..forms import CouponForm, CouponValidationForm, FlashSaleForm
from ..mixins import BackofficeMixin
from ..props import choice_options, coupon_props, flash_sale_admin_props

logger = logging.getLogger(__name__)

PER_PAGE = 15

PROMOTION_PERMISSIONS = {
    "post": ("edit_promotions",),
    "put": ("edit_promotions",),
    "patch": ("edit_promotions",),
    "delete": ("delete_promotions",),
}


def product_options():
    return [
        {"value": product.pk, "label": product.name, "price": product.price}
        for product in Product.objects.filter(is_active=True).order_by("name")
    ]


# Flash sales


class FlashSaleListView(BackofficeMixin, View):
    required_permissions = ("view_promotions",)
    method_permissions = {"post": ("create_promotions",)}

    def get(self, request):
        refresh_flash_sale_statuses()
        sales = FlashSale.objects.prefetch_related("products")
        search = request.GET.get("search", "")
        status = request.GET.get("status", "")
        if search:
            sales = sales.filter(Q(name__icontains=search) | Q(description__icontains=search))
        if status:
            sales = sales.filter(status=status)

        return render_page(request, "Admin/FlashSales/Index", {
            "flashSales": paginate(request, sales.order_by("-created_at"), PER_PAGE, flash_sale_admin_props),
            "stats": flash_sale_stats(),
            "filters": {"search": search, "status": status},
            "statusOptions": choice_options(FlashSale.Status.choices),
            "products": product_options(),
        })

    def post(self, request):
        form = FlashSaleForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:flash-sale-list"))
        sale = form.save()
        logger.info("Flash sale %s created by %s", sale.name, request.user.email)
        return flash_response(
            request,
            "Flash sale created successfully.",
            status=201,
            redirect_to=reverse("backoffice:flash-sale-list"),
            flashSale=flash_sale_admin_props(sale, detail=True),
        )


class FlashSaleDetailView(BackofficeMixin, View):
    required_permissions = ("view_promotions",)
    method_permissions = PROMOTION_PERMISSIONS

    def dispatch(self, request, *args, **kwargs):
        self.sale = get_object_or_404(FlashSale, pk=kwargs["pk"])
        return super().dispatch(request, *args, **kwargs)

    def get(self, request, pk):
        sale = self.sale
        sale.refresh_status()
        products = sale.products.select_related("category")
        return render_page(request, "Admin/FlashSales/Show", {
            "flashSale": flash_sale_admin_props(sale, detail=True),
            "products": [
                {
                    "id": product.pk,
                    "name": product.name,
                    "price": product.price,
                    "sale_price": sale.discounted_price(product.price),
                    "category": product.category.name if product.category_id else None,
                }
                for product in products
            ],
            "analytics": {
                "time_remaining": sale.time_remaining(),
                "usage_percentage": sale.usage_percentage(),
                "total_products": products.count(),
                "is_active": sale.is_active(),
            },
            "productOptions": product_options(),
        })

    def post(self, request, pk):
        form = FlashSaleForm(request_data(request), instance=self.sale)
        if not form.is_valid():
            return validation_error(
                request, form_errors(form), fallback=reverse("backoffice:flash-sale-detail", args=[pk])
            )
        sale = form.save()
        return flash_response(
            request, "Flash sale updated successfully.", flashSale=flash_sale_admin_props(sale, detail=True)
        )

    put = post
    patch = post

    def delete(self, request, pk):
        if self.sale.used_count > 0:
            return flash_response(
                request, "Cannot delete flash sale that has been used.", messages.ERROR, status=422
            )
        self.sale.delete()
        return flash_response(
            request, "Flash sale deleted successfully.", redirect_to=reverse("backoffice:flash-sale-list")
        )


class FlashSaleToggleView(BackofficeMixin, View):
    """Switch a sale between active and inactive."""

    required_permissions = ("edit_promotions",)

    def post(self, request, pk):
        sale = get_object_or_404(FlashSale, pk=pk)
        if sale.status in (FlashSale.Status.ACTIVE, FlashSale.Status.SCHEDULED):
            sale.status = FlashSale.Status.INACTIVE
        else:
            if sale.is_expired():
                return flash_response(request, "Cannot activate expired flash sale.", messages.ERROR, status=422)
            if sale.usage_exhausted():
                return flash_response(
                    request, "Cannot activate flash sale that has reached usage limit.", messages.ERROR, status=422
                )
            sale.status = FlashSale.Status.ACTIVE
            sale.refresh_status(save=False)
        sale.save(update_fields=["status", "updated_at"])
        return flash_response(
            request,
            f"Flash sale status updated to {sale.get_status_display()}.",
            flashSale=flash_sale_admin_props(sale),
        )


@any_permission_required("view_promotions")
def running_flash_sales(request):
    """Running sales with their products."""
    sales = FlashSale.objects.running().prefetch_related("products").order_by("-is_featured", "end_date")
    return JsonResponse({
        "flash_sales": [
            {
                **flash_sale_admin_props(sale),
                "products": [
                    {
                        "id": product.pk,
                        "name": product.name,
                        "slug": product.slug,
                        "price": product.price,
                        "sale_price": sale.discounted_price(product.price),
                    }
                    for product in sale.products.all()
                ],
            }
            for sale in sales
        ]
    })


# Coupons


class CouponListView(BackofficeMixin, View):
    required_permissions = ("view_promotions",)
    method_permissions = {"post": ("create_promotions",)}

    def get(self, request):
        expire_coupons()
        coupons = Coupon.objects.all()
        filters = {key: request.GET.get(key, "") for key in ("search", "status", "type")}
        if filters["search"]:
            coupons = coupons.filter(
                Q(name__icontains=filters["search"]) | Q(code__icontains=filters["search"])
            )
        if filters["status"]:
            coupons = coupons.filter(status=filters["status"])
        if filters["type"]:
            coupons = coupons.filter(type=filters["type"])

        all_coupons = Coupon.objects.all()
        stats = {
            "total": all_coupons.count(),
            "active": all_coupons.filter(status=Coupon.Status.ACTIVE).count(),
            "expired": all_coupons.filter(status=Coupon.Status.EXPIRED).count(),
            "total_usage": all_coupons.aggregate(total=Sum("used_count"))["total"] or 0,
            "total_discount_given": round_money(CouponUsage.objects.aggregate(total=Sum("discount_amount"))["total"]),
        }
        return render_page(request, "Admin/Coupons/Index", {
            "coupons": paginate(request, coupons.order_by("-created_at"), PER_PAGE, coupon_props),
            "stats": stats,
            "filters": filters,
            "statusOptions": choice_options(Coupon.Status.choices),
            "typeOptions": choice_options(Coupon.Type.choices),
            "products": product_options(),
            "categories": [{"value": c.pk, "label": c.name} for c in Category.objects.active()],
        })

    def post(self, request):
        form = CouponForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:coupon-list"))
        coupon = form.save()
        logger.info("Coupon %s created by %s", coupon.code, request.user.email)
        return flash_response(
            request,
            "Coupon created successfully.",
            status=201,
            redirect_to=reverse("backoffice:coupon-list"),
            coupon=coupon_props(coupon, detail=True),
        )


class CouponDetailView(BackofficeMixin, View):
    required_permissions = ("view_promotions",)
    method_permissions = PROMOTION_PERMISSIONS

    def dispatch(self, request, *args, **kwargs):
        self.coupon = get_object_or_404(Coupon, pk=kwargs["pk"])
        return super().dispatch(request, *args, **kwargs)

    def get(self, request, pk):
        return render_page(request, "Admin/Coupons/Show", {
            "coupon": coupon_props(self.coupon, detail=True),
            "typeOptions": choice_options(Coupon.Type.choices),
        })

    def post(self, request, pk):
        form = CouponForm(request_data(request), instance=self.coupon)
        if not form.is_valid():
            return validation_error(
                request, form_errors(form), fallback=reverse("backoffice:coupon-detail", args=[pk])
            )
        coupon = form.save()
        return flash_response(request, "Coupon updated successfully.", coupon=coupon_props(coupon, detail=True))

    put = post
    patch = post

    def delete(self, request, pk):
        if self.coupon.used_count > 0:
            return flash_response(request, "Cannot delete coupon that has been used.", messages.ERROR, status=422)
        self.coupon.delete()
        return flash_response(
            request, "Coupon deleted successfully.", redirect_to=reverse("backoffice:coupon-list")
        )


class CouponToggleView(BackofficeMixin, View):
    required_permissions = ("edit_promotions",)

    def post(self, request, pk):
        coupon = get_object_or_404(Coupon, pk=pk)
        if coupon.status == Coupon.Status.ACTIVE:
            coupon.status = Coupon.Status.INACTIVE
        else:
            if coupon.valid_until and coupon.valid_until < timezone.now():
                return flash_response(request, "Cannot activate expired coupon.", messages.ERROR, status=422)
            if coupon.usage_exhausted():
                return flash_response(
                    request, "Cannot activate coupon that has reached usage limit.", messages.ERROR, status=422
                )
            coupon.status = Coupon.Status.ACTIVE
        coupon.save(update_fields=["status", "updated_at"])
        return flash_response(
            request,
            f"Coupon status updated to {coupon.get_status_display()}.",
            coupon=coupon_props(coupon),
        )


class CouponValidateView(BackofficeMixin, View):
    """Check a code against a customer and a set of products."""

    required_permissions = ("view_promotions",)

    def post(self, request):
        form = CouponValidationForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:coupon-list"))
        data = form.cleaned_data

        coupon = Coupon.find(data["code"])
        if coupon is None:
            return JsonResponse({"valid": False, "message": "Invalid coupon code."}, status=404)

        if not coupon.is_valid(data["order_total"]):
            return JsonResponse({"valid": False, "message": "This coupon is not valid or has expired."})

        user = data.get("user_id")
        email = data.get("customer_email")
        if (user or email) and coupon.per_customer_limit:
            used = coupon.times_used_by(user, email)
            if used >= coupon.per_customer_limit:
                return JsonResponse({
                    "valid": False,
                    "message": "You have reached the usage limit for this coupon.",
                })

        products = data.get("product_ids") or []
        if products and not any(coupon.applies_to(product) for product in products):
            return JsonResponse({
                "valid": False,
                "message": "This coupon is not applicable to the selected products.",
            })

        return JsonResponse({
            "valid": True,
            "coupon": coupon_props(coupon),
            "discount_amount": coupon.calculate_discount(data["order_total"]),
            "message": "Coupon is valid.",
        })


@any_permission_required("create_promotions", "edit_promotions")
def generate_coupon_code(request):
    prefix = (request.GET.get("prefix") or "COUP").strip().upper()[:10]
    return JsonResponse({"code": Coupon.generate_code(prefix)})
