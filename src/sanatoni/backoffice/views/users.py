"""User and role management, restricted to admins."""

import logging

from django.contrib import messages
from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q
from django.shortcuts import get_object_or_404
from django.urls import reverse
from django.views import View

from sanatoni.core.http import request_data
from sanatoni.core.models import Role
from sanatoni.core.pages import flash_response, form_errors, paginate, render_page, validation_error

from ..forms import UserCreateForm, UserStatusForm, UserUpdateForm
from ..mixins import AdminOnlyMixin
from ..props import choice_options, role_props, user_admin_props

logger = logging.getLogger(__name__)

User = get_user_model()

USERS_PER_PAGE = 15


def role_options():
    return [role_props(role) for role in Role.objects.filter(is_active=True).order_by("name")]


class UserListView(AdminOnlyMixin, View):
    def get(self, request):
        users = User.objects.prefetch_related("roles")
        filters = {key: request.GET.get(key, "") for key in ("search", "role", "status")}
        if filters["search"]:
            users = users.filter(
                Q(name__icontains=filters["search"])
                | Q(email__icontains=filters["search"])
                | Q(phone__icontains=filters["search"])
            )
        if filters["role"]:
            users = users.filter(roles__name=filters["role"]).distinct()
        if filters["status"]:
            users = users.filter(status=filters["status"])

        return render_page(request, "Admin/Users/Index", {
            "users": paginate(request, users.order_by("-date_joined"), USERS_PER_PAGE, user_admin_props),
            "roles": role_options(),
            "filters": filters,
            "statusOptions": choice_options(User.Status.choices),
        })

    def post(self, request):
        form = UserCreateForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:user-list"))
        with transaction.atomic():
            user = form.save()
            for role in form.cleaned_data["roles"]:
                user.assign_role(role, assigned_by=request.user)
        logger.info("User %s created by %s", user.email, request.user.email)
        return flash_response(
            request,
            "User created successfully.",
            status=201,
            redirect_to=reverse("backoffice:user-list"),
            user=user_admin_props(user),
        )


class UserDetailView(AdminOnlyMixin, View):
    def dispatch(self, request, *args, **kwargs):
        self.subject = get_object_or_404(User, pk=kwargs["pk"])
        return super().dispatch(request, *args, **kwargs)

    def get(self, request, pk):
        return render_page(request, "Admin/Users/Edit", {
            "user": user_admin_props(self.subject),
            "roles": role_options(),
            "statusOptions": choice_options(User.Status.choices),
        })

    def post(self, request, pk):
        form = UserUpdateForm(request_data(request), instance=self.subject)
        if not form.is_valid():
            return validation_error(
                request, form_errors(form), fallback=reverse("backoffice:user-detail", args=[pk])
            )
        with transaction.atomic():
            user = form.save()
            if "roles" in form.data:
                user.sync_roles([role.name for role in form.cleaned_data["roles"]], assigned_by=request.user)
        return flash_response(request, "User updated successfully.", user=user_admin_props(user))

    put = post
    patch = post

    def delete(self, request, pk):
        if self.subject.pk == request.user.pk:
            return flash_response(request, "You cannot delete your own account.", messages.ERROR, status=422)
        email = self.subject.email
        self.subject.delete()
        logger.info("User %s deleted by %s", email, request.user.email)
        return flash_response(request, "User deleted successfully.", redirect_to=reverse("backoffice:user-list"))


class UserRolesView(AdminOnlyMixin, View):
    """Replace a user's roles."""

    def post(self, request, pk):
        user = get_object_or_404(User, pk=pk)
        names = request_data(request).getlist("roles")
        known = set(Role.objects.filter(name__in=names, is_active=True).values_list("name", flat=True))
        unknown = [name for name in names if name not in known]
        if unknown:
            return validation_error(
                request,
                {"roles": [f"Unknown role: {', '.join(unknown)}"]},
                fallback=reverse("backoffice:user-detail", args=[pk]),
            )
        user.sync_roles(known, assigned_by=request.user)
        logger.info("Roles of %s set to %s by %s", user.email, sorted(known), request.user.email)
        return flash_response(request, "User roles updated successfully.", user=user_admin_props(user))


class UserStatusView(AdminOnlyMixin, View):
    def post(self, request, pk):
        user = get_object_or_404(User, pk=pk)
        form = UserStatusForm(request_data(request))
        if not form.is_valid():
            return validation_error(
                request, form_errors(form), fallback=reverse("backoffice:user-detail", args=[pk])
            )
        if user.pk == request.user.pk and form.cleaned_data["status"] != User.Status.ACTIVE:
            return flash_response(
                request, "You cannot deactivate your own account.", messages.ERROR, status=422
            )
        user.status = form.cleaned_data["status"]
        user.save(update_fields=["status"])
        return flash_response(
            request,
            f"User status updated to {user.get_status_display()}.",
            user=user_admin_props(user),
        )
