from django.contrib import admin

from .models import CustomerAddress


@admin.register(CustomerAddress)
class CustomerAddressAdmin(admin.ModelAdmin):
    list_display = ["name", "user", "city", "district", "is_default"]
    list_filter = ["is_default", "division"]
    search_fields = ["name", "user__email", "city", "phone"]
