"""Access control for back office views."""

from sanatoni.core.access import PERMISSION_DENIED_MESSAGE, deny, user_has_any_permission
from sanatoni.core.mixins import RoleRequiredMixin
from sanatoni.core.models import ADMIN, ADMIN_ACCESS_ROLES


class BackofficeMixin(RoleRequiredMixin):
    """
    Admins and managers, optionally narrowed to a permission per area.

    ``required_permissions`` applies to every method unless
    ``method_permissions`` names the method.

    Example:
        class CouponListView(BackofficeMixin, View):
            required_permissions = ("view_promotions",)
            method_permissions = {"post": ("create_promotions",)}
    """

    required_roles = ADMIN_ACCESS_ROLES
    required_permissions = ()
    method_permissions = {}

    def get_required_permissions(self):
        return self.method_permissions.get(self.request.method.lower(), self.required_permissions)

    def dispatch(self, request, *args, **kwargs):
        if request.user.is_authenticated and self.test_func():
            permissions = self.get_required_permissions()
            if permissions and not user_has_any_permission(request.user, permissions):
                return deny(
                    request,
                    PERMISSION_DENIED_MESSAGE,
                    required_permissions=list(permissions),
                )
        return super().dispatch(request, *args, **kwargs)


class AdminOnlyMixin(BackofficeMixin):
    required_roles = (ADMIN,)
