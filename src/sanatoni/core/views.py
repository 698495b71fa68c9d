"""Core views: health check and authentication."""

import logging

from django.contrib import messages
from django.contrib.auth import login, logout
from django.db import connection
from django.http import JsonResponse
from django.shortcuts import redirect
from django.urls import reverse
from django.views import View

from .forms import LoginForm, RegistrationForm
from .http import request_data, safe_next_url
from .pages import form_errors, render_page, validation_error

logger = logging.getLogger(__name__)


def health_check(request):
    """Health check endpoint for container orchestration."""
    try:
        # Check database connection
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")

        return JsonResponse({"status": "healthy", "database": "connected"})
    except Exception as e:
        logger.exception("Health check failed")
        return JsonResponse(
            {"status": "unhealthy", "error": str(e)},
            status=503,
        )


def home_url_for(user):
    """Where a user lands after signing in."""
    if user.has_admin_access():
        return reverse("backoffice:dashboard")
    return reverse("account:dashboard")


class LoginView(View):
    """Sign in with email and password."""

    def get(self, request):
        if request.user.is_authenticated:
            return redirect(home_url_for(request.user))
        return render_page(request, "Auth/Login", {
            "canRegister": True,
            "next": request.GET.get("next", ""),
        })

    def post(self, request):
        data = request_data(request)
        form = LoginForm(data, request=request)
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("login"))

        login(request, form.user, backend="sanatoni.core.backends.EmailBackend")
        if not form.cleaned_data.get("remember"):
            request.session.set_expiry(0)

        if form.user.has_admin_access():
            return redirect("backoffice:dashboard")
        next_url = safe_next_url(request, data.get("next") or request.GET.get("next"))
        return redirect(next_url or home_url_for(form.user))


class RegisterView(View):
    """Create a customer account and sign in."""

    def get(self, request):
        if request.user.is_authenticated:
            return redirect(home_url_for(request.user))
        return render_page(request, "Auth/Register")

    def post(self, request):
        form = RegistrationForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("register"))

        user = form.save()
        logger.info("Registered customer %s", user.email)
        login(request, user, backend="sanatoni.core.backends.EmailBackend")
        messages.success(request, "Welcome to Sanatoni Mart!")
        return redirect("account:dashboard")


class LogoutView(View):
    def post(self, request):
        logout(request)
        return redirect("home")


class DashboardRedirectView(View):
    """Send each user to the dashboard that matches their role."""

    def get(self, request):
        if not request.user.is_authenticated:
            return redirect("login")
        return redirect(home_url_for(request.user))
