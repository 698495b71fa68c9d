"""Customer account views: dashboard, profile, settings and address book."""

import logging
import os

from django.contrib import messages
from django.contrib.auth import logout, update_session_auth_hash
from django.contrib.auth.forms import PasswordChangeForm
from django.core.files.storage import default_storage
from django.db.models import Sum
from django.http import JsonResponse
from django.shortcuts import get_object_or_404, redirect
from django.urls import reverse
from django.utils.crypto import get_random_string
from django.views import View

from sanatoni.catalog.props import products_props
from sanatoni.core.access import deny
from sanatoni.core.http import request_data
from sanatoni.core.mixins import CustomerMixin
from sanatoni.core.pages import flash_response, form_errors, render_page, validation_error
from sanatoni.core.props import user_props
from sanatoni.promotions.pricing import round_money
from sanatoni.store.models import Order, Wishlist
from sanatoni.store.props import order_props

from .forms import AddressForm, PasswordConfirmForm, ProfileForm, SettingsForm
from .models import CustomerAddress

logger = logging.getLogger(__name__)


def address_props(address):
    return {
        "id": address.pk,
        "label": address.label,
        "is_default": address.is_default,
        "full_address": address.full_address,
        **address.as_dict(),
    }


def store_profile_picture(user, upload):
    """Save an uploaded picture under ``profile-pictures/``, replacing the old one."""
    delete_profile_picture(user)
    extension = os.path.splitext(upload.name)[1].lower()
    path = default_storage.save(f"profile-pictures/{get_random_string(20)}{extension}", upload)
    user.profile_picture = path
    return path


def delete_profile_picture(user):
    if user.profile_picture and default_storage.exists(user.profile_picture):
        default_storage.delete(user.profile_picture)
    user.profile_picture = ""


class CustomerDashboardView(CustomerMixin, View):
    """Customer dashboard with order, wishlist and cart stats."""

    def get(self, request):
        user = request.user
        orders = Order.objects.filter(user=user)
        wishlist = (
            Wishlist.objects.filter(user=user)
            .select_related("product", "product__category")
            .prefetch_related("product__images")
        )
        return render_page(request, "Customer/Dashboard", {
            "stats": {
                "orders": orders.count(),
                "pending_orders": orders.filter(
                    status__in=[Order.Status.PENDING, Order.Status.PROCESSING]
                ).count(),
                "total_spent": round_money(orders.exclude(status=Order.Status.CANCELLED).aggregate(
                    total=Sum("total")
                )["total"]),
                "wishlist_count": wishlist.count(),
                "cart_count": user.cart_items.aggregate(total=Sum("quantity"))["total"] or 0,
                "addresses_count": user.addresses.count(),
            },
            "recentOrders": [
                order_props(order) for order in orders.prefetch_related("items")[:5]
            ],
            "recentWishlist": products_props(entry.product for entry in wishlist[:5]),
        })


class ProfileView(CustomerMixin, View):
    def get(self, request):
        return render_page(request, "Customer/Profile/Show", {"user": user_props(request.user)})


class ProfileEditView(CustomerMixin, View):
    """Edit name, email, phone and profile picture."""

    def get(self, request):
        return render_page(request, "Customer/Profile/Edit", {"user": user_props(request.user)})

    def post(self, request):
        user = request.user
        form = ProfileForm(request_data(request), request.FILES, instance=user)
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("account:profile-edit"))

        user = form.save(commit=False)
        picture = form.cleaned_data.get("profile_picture")
        if picture:
            store_profile_picture(user, picture)
        user.save()
        logger.info("User %s updated their profile", user.email)
        return flash_response(
            request,
            "Profile updated successfully.",
            redirect_to=reverse("account:profile"),
            user=user_props(user),
        )


class ProfilePictureDeleteView(CustomerMixin, View):
    def post(self, request):
        user = request.user
        if user.profile_picture:
            delete_profile_picture(user)
            user.save(update_fields=["profile_picture"])
        return JsonResponse({"message": "Profile picture deleted successfully."})

    delete = post


class PasswordChangeView(CustomerMixin, View):
    def get(self, request):
        return render_page(request, "Customer/Password")

    def post(self, request):
        form = PasswordChangeForm(request.user, request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("account:password"))
        user = form.save()
        update_session_auth_hash(request, user)
        return flash_response(
            request, "Password changed successfully.", redirect_to=reverse("account:profile")
        )


class SettingsView(CustomerMixin, View):
    """Account preferences: newsletter, notifications and language."""

    def get(self, request):
        return render_page(request, "Customer/Settings", {
            "user": user_props(request.user),
            "preferences": request.user.preferences or {},
        })

    def post(self, request):
        data = request_data(request)
        form = SettingsForm(data)
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("account:settings"))

        user = request.user
        user.preferences = {**(user.preferences or {}), **form.preferences()}
        user.save(update_fields=["preferences"])
        return flash_response(
            request, "Settings updated successfully.", preferences=user.preferences
        )


class DeactivateAccountView(CustomerMixin, View):
    def post(self, request):
        form = PasswordConfirmForm(request_data(request), user=request.user)
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("account:settings"))

        user = request.user
        user.status = user.Status.INACTIVE
        user.save(update_fields=["status"])
        logout(request)
        logger.info("User %s deactivated their account", user.email)
        return flash_response(
            request,
            "Your account has been deactivated successfully.",
            messages.INFO,
            redirect_to=reverse("login"),
        )


class DeleteAccountView(CustomerMixin, View):
    def post(self, request):
        form = PasswordConfirmForm(request_data(request), user=request.user)
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("account:settings"))

        user = request.user
        delete_profile_picture(user)
        logout(request)
        email = user.email
        user.delete()
        logger.info("User %s deleted their account", email)
        return flash_response(
            request,
            "Your account has been deleted successfully.",
            messages.INFO,
            redirect_to=reverse("home"),
        )

    delete = post


# Addresses


class AddressListView(CustomerMixin, View):
    def get(self, request):
        addresses = CustomerAddress.objects.filter(user=request.user)
        return render_page(request, "Customer/Addresses/Index", {
            "addresses": [address_props(address) for address in addresses],
        })

    def post(self, request):
        form = AddressForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("account:address-list"))

        address = form.save(commit=False)
        address.user = request.user
        make_default = address.is_default or not request.user.addresses.exists()
        address.is_default = False
        address.save()
        if make_default:
            address.set_as_default()
        return flash_response(
            request,
            "Address added successfully.",
            redirect_to=reverse("account:address-list"),
            address=address_props(address),
        )


class AddressMixin(CustomerMixin):
    """Loads ``self.address``, refusing addresses of other customers."""

    def dispatch(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return self.handle_no_permission()
        self.address = get_object_or_404(CustomerAddress, pk=kwargs["pk"])
        if self.address.user_id != request.user.pk:
            return deny(request, "Unauthorized action.")
        return super().dispatch(request, *args, **kwargs)


class AddressDetailView(AddressMixin, View):
    def get(self, request, pk):
        return render_page(request, "Customer/Addresses/Edit", {"address": address_props(self.address)})

    def post(self, request, pk):
        form = AddressForm(request_data(request), instance=self.address)
        if not form.is_valid():
            return validation_error(
                request, form_errors(form), fallback=reverse("account:address-detail", args=[pk])
            )
        make_default = form.cleaned_data["is_default"]
        address = form.save()
        if make_default:
            address.set_as_default()
        return flash_response(
            request,
            "Address updated successfully.",
            redirect_to=reverse("account:address-list"),
            address=address_props(address),
        )

    put = post

    def delete(self, request, pk):
        if self.address.is_default and request.user.addresses.count() > 1:
            return JsonResponse(
                {"message": "Cannot delete default address. Please set another address as default first."},
                status=422,
            )
        self.address.delete()
        return JsonResponse({"message": "Address deleted successfully."})


class AddressSetDefaultView(AddressMixin, View):
    def post(self, request, pk):
        self.address.set_as_default()
        return flash_response(request, "Default address updated successfully.")
