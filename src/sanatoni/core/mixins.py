"""View mixins for role and permission based access control.

Provides three levels of access:
- CustomerMixin: Authenticated users
- RoleRequiredMixin: Users holding one of ``required_roles``
- PermissionRequiredMixin: Users granted one of ``required_permissions``
"""

from django.contrib.auth.mixins import LoginRequiredMixin, UserPassesTestMixin

from .access import (
    PERMISSION_DENIED_MESSAGE,
    ROLE_DENIED_MESSAGE,
    deny,
    unauthenticated,
    user_has_any_permission,
    user_has_any_role,
)


class CustomerMixin(LoginRequiredMixin):
    """Authenticated customer access."""

    def handle_no_permission(self):
        return unauthenticated(self.request, self.get_login_url())


class RoleRequiredMixin(LoginRequiredMixin, UserPassesTestMixin):
    """
    Users holding at least one of ``required_roles``.

    Example:
        class DashboardView(RoleRequiredMixin, View):
            required_roles = ("admin", "manager")
    """

    required_roles = ()
    permission_denied_message = ROLE_DENIED_MESSAGE

    def test_func(self):
        return user_has_any_role(self.request.user, self.required_roles)

    def handle_no_permission(self):
        if not self.request.user.is_authenticated:
            return unauthenticated(self.request, self.get_login_url())
        return deny(
            self.request,
            self.get_permission_denied_message(),
            required_roles=list(self.required_roles),
        )


class PermissionRequiredMixin(LoginRequiredMixin, UserPassesTestMixin):
    """
    Users granted at least one of ``required_permissions`` through their roles.

    Example:
        class OrderStatusView(PermissionRequiredMixin, View):
            required_permissions = ("process_orders",)
    """

    required_permissions = ()
    permission_denied_message = PERMISSION_DENIED_MESSAGE

    def test_func(self):
        return user_has_any_permission(self.request.user, self.required_permissions)

    def handle_no_permission(self):
        if not self.request.user.is_authenticated:
            return unauthenticated(self.request, self.get_login_url())
        return deny(
            self.request,
            self.get_permission_denied_message(),
            required_permissions=list(self.required_permissions),
        )
