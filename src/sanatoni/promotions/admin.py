from django.contrib import admin

from .models import Coupon, CouponUsage, FlashSale


@admin.register(FlashSale)
class FlashSaleAdmin(admin.ModelAdmin):
    list_display = ["name", "discount_percentage", "start_date", "end_date", "status", "used_count"]
    list_filter = ["status", "is_featured"]
    filter_horizontal = ["products"]


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = ["code", "name", "type", "value", "status", "used_count", "valid_until"]
    list_filter = ["status", "type"]
    search_fields = ["code", "name"]
    filter_horizontal = ["products", "categories"]


@admin.register(CouponUsage)
class CouponUsageAdmin(admin.ModelAdmin):
    list_display = ["coupon", "order", "customer_email", "discount_amount", "created_at"]
