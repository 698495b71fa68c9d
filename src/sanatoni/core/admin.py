from django.contrib import admin

from .models import Permission, Role, User, UserRole


class UserRoleInline(admin.TabularInline):
    model = UserRole
    fk_name = "user"
    extra = 0
    autocomplete_fields = ["role"]


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ["email", "name", "status", "is_staff", "last_login"]
    list_filter = ["status", "is_staff", "roles"]
    search_fields = ["email", "name", "phone"]
    exclude = ["password", "user_permissions", "groups"]
    inlines = [UserRoleInline]


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ["name", "display_name", "is_active"]
    search_fields = ["name", "display_name"]
    filter_horizontal = ["permissions"]


@admin.register(Permission)
class PermissionAdmin(admin.ModelAdmin):
    list_display = ["name", "display_name", "group"]
    list_filter = ["group"]
    search_fields = ["name", "display_name"]
