from django.contrib import admin

from .models import CartItem, Invoice, Order, OrderItem, OrderStatusHistory, ShippingZone, Wishlist


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ["product", "quantity", "price", "subtotal", "product_snapshot", "flash_sale"]


class OrderStatusHistoryInline(admin.TabularInline):
    model = OrderStatusHistory
    extra = 0
    readonly_fields = ["from_status", "to_status", "comment", "changed_by", "created_at"]


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ["order_number", "user", "guest_email", "status", "total", "created_at"]
    list_filter = ["status", "payment_method", "payment_status"]
    search_fields = ["order_number", "guest_email", "user__email", "user__name"]
    inlines = [OrderItemInline, OrderStatusHistoryInline]


@admin.register(ShippingZone)
class ShippingZoneAdmin(admin.ModelAdmin):
    list_display = ["name", "shipping_cost", "delivery_time_min", "delivery_time_max", "is_active"]
    list_filter = ["is_active"]


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ["invoice_number", "order", "total", "generated_at", "is_sent"]
    search_fields = ["invoice_number", "order__order_number"]


@admin.register(CartItem)
class CartItemAdmin(admin.ModelAdmin):
    list_display = ["product", "user", "cart_token", "quantity", "updated_at"]


@admin.register(Wishlist)
class WishlistAdmin(admin.ModelAdmin):
    list_display = ["user", "product", "created_at"]
