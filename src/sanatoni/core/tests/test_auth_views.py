"""Tests for sign in, registration and role-based redirects."""

import pytest
from django.urls import reverse


@pytest.mark.django_db
class TestLogin:
    def test_customer_lands_on_account_dashboard(self, client, customer):
        response = client.post(reverse("login"), {"email": customer.email, "password": "testpass123"})
        assert response.status_code == 302
        assert response.url == reverse("account:dashboard")

    def test_admin_lands_on_backoffice(self, client, admin_user):
        response = client.post(reverse("login"), {"email": admin_user.email, "password": "testpass123"})
        assert response.url == reverse("backoffice:dashboard")

    def test_login_records_ip(self, client, customer):
        client.post(reverse("login"), {"email": customer.email, "password": "testpass123"})
        customer.refresh_from_db()
        assert customer.last_login_ip == "127.0.0.1"

    def test_wrong_password(self, client, customer):
        response = client.post(
            reverse("login"),
            {"email": customer.email, "password": "nope"},
            HTTP_ACCEPT="application/json",
        )
        assert response.status_code == 422
        assert "email" in response.json()["errors"]

    def test_suspended_user_cannot_sign_in(self, client, customer):
        customer.status = "suspended"
        customer.save()
        response = client.post(
            reverse("login"),
            {"email": customer.email, "password": "testpass123"},
            HTTP_ACCEPT="application/json",
        )
        assert response.status_code == 422

    def test_safe_next_url(self, client, customer):
        response = client.post(
            reverse("login"),
            {"email": customer.email, "password": "testpass123", "next": "/cart/"},
        )
        assert response.url == "/cart/"

    def test_external_next_url_is_ignored(self, client, customer):
        response = client.post(
            reverse("login"),
            {"email": customer.email, "password": "testpass123", "next": "https://evil.example.com/"},
        )
        assert response.url == reverse("account:dashboard")


@pytest.mark.django_db
class TestRegister:
    def test_registers_and_signs_in(self, client, django_user_model):
        response = client.post(reverse("register"), {
            "name": "Karim Ahmed",
            "email": "Karim@Example.com",
            "phone": "01711111111",
            "password": "Lotus-Temple-42",
            "password_confirmation": "Lotus-Temple-42",
        })
        assert response.status_code == 302
        user = django_user_model.objects.get(email="karim@example.com")
        assert user.check_password("Lotus-Temple-42")
        assert client.session["_auth_user_id"] == str(user.pk)

    def test_duplicate_email(self, client, customer):
        response = client.post(
            reverse("register"),
            {
                "name": "Other",
                "email": customer.email.upper(),
                "password": "Lotus-Temple-42",
                "password_confirmation": "Lotus-Temple-42",
            },
            HTTP_ACCEPT="application/json",
        )
        assert response.status_code == 422
        assert response.json()["errors"]["email"] == ["The email has already been taken."]

    def test_password_confirmation_mismatch(self, client):
        response = client.post(
            reverse("register"),
            {
                "name": "Other",
                "email": "other@example.com",
                "password": "Lotus-Temple-42",
                "password_confirmation": "Lotus-Temple-43",
            },
            HTTP_ACCEPT="application/json",
        )
        assert "password_confirmation" in response.json()["errors"]


@pytest.mark.django_db
class TestDashboardRedirect:
    def test_anonymous(self, client):
        assert client.get(reverse("dashboard")).url == reverse("login")

    def test_manager(self, manager_client):
        assert manager_client.get(reverse("dashboard")).url == reverse("backoffice:dashboard")


@pytest.mark.django_db
def test_health_check(client):
    response = client.get(reverse("health_check"))
    assert response.json() == {"status": "healthy", "database": "connected"}
