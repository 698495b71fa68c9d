"""Tests for user and role management."""

import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse

from sanatoni.core.models import Role

JSON = {"HTTP_ACCEPT": "application/json"}
PAGE = {"HTTP_X_INERTIA": "true"}

User = get_user_model()


def post_json(client, url, data=None, method="post"):
    return getattr(client, method)(url, data or {}, content_type="application/json", **JSON)


@pytest.mark.django_db
class TestUserManagement:
    def test_list_filters_by_role(self, admin_client, manager_user, customer):
        props = admin_client.get(reverse("backoffice:user-list"), {"role": "manager"}, **PAGE).json()["props"]
        assert [row["email"] for row in props["users"]["data"]] == ["manager@sanatonimart.com"]
        assert {role["name"] for role in props["roles"]} == {"admin", "manager", "salesperson"}

    def test_create_with_roles(self, admin_client, admin_user, roles):
        response = post_json(admin_client, reverse("backoffice:user-list"), {
            "name": "Priya Saha",
            "email": "Priya@SanatoniMart.com",
            "password": "Lotus-Garden-42",
            "status": "active",
            "roles": [roles["salesperson"].pk],
        })
        assert response.status_code == 201
        user = User.objects.get(email="priya@sanatonimart.com")
        assert user.check_password("Lotus-Garden-42")
        assert user.role_names() == ["salesperson"]
        assert user.role_assignments.get().assigned_by == admin_user

    def test_create_rejects_taken_email_and_weak_password(self, admin_client, customer):
        response = post_json(admin_client, reverse("backoffice:user-list"), {
            "name": "Someone",
            "email": "customer@example.com",
            "password": "short",
            "status": "active",
        })
        errors = response.json()["errors"]
        assert errors["email"] == ["The email has already been taken."]
        assert "password" in errors

    def test_update_syncs_roles(self, admin_client, manager_user, roles):
        url = reverse("backoffice:user-detail", args=[manager_user.pk])
        response = post_json(admin_client, url, {
            "name": "Store Manager",
            "email": "manager@sanatonimart.com",
            "status": "active",
            "roles": [roles["admin"].pk],
        }, method="put")
        assert response.status_code == 200
        assert manager_user.role_names() == ["admin"]

    def test_update_without_roles_keeps_them(self, admin_client, manager_user):
        url = reverse("backoffice:user-detail", args=[manager_user.pk])
        post_json(admin_client, url, {
            "name": "Renamed Manager",
            "email": "manager@sanatonimart.com",
            "status": "active",
        }, method="put")
        manager_user.refresh_from_db()
        assert manager_user.name == "Renamed Manager"
        assert manager_user.role_names() == ["manager"]

    def test_replace_roles(self, admin_client, customer, roles):
        url = reverse("backoffice:user-roles", args=[customer.pk])
        response = post_json(admin_client, url, {"roles": ["manager", "salesperson"]})
        assert response.json()["message"] == "User roles updated successfully."
        assert sorted(customer.role_names()) == ["manager", "salesperson"]

    def test_unknown_role_is_rejected(self, admin_client, customer, roles):
        url = reverse("backoffice:user-roles", args=[customer.pk])
        response = post_json(admin_client, url, {"roles": ["manager", "wizard"]})
        assert response.status_code == 422
        assert response.json()["errors"]["roles"] == ["Unknown role: wizard"]
        assert customer.role_names() == []

    def test_change_status(self, admin_client, customer):
        url = reverse("backoffice:user-status", args=[customer.pk])
        response = post_json(admin_client, url, {"status": "suspended"})
        assert response.json()["message"] == "User status updated to Suspended."
        customer.refresh_from_db()
        assert customer.status == User.Status.SUSPENDED

    def test_cannot_deactivate_self(self, admin_client, admin_user):
        url = reverse("backoffice:user-status", args=[admin_user.pk])
        response = post_json(admin_client, url, {"status": "inactive"})
        assert response.status_code == 422
        assert response.json()["message"] == "You cannot deactivate your own account."

    def test_cannot_delete_self(self, admin_client, admin_user):
        response = admin_client.delete(reverse("backoffice:user-detail", args=[admin_user.pk]), **JSON)
        assert response.status_code == 422
        assert response.json()["message"] == "You cannot delete your own account."

    def test_delete(self, admin_client, customer):
        response = admin_client.delete(reverse("backoffice:user-detail", args=[customer.pk]), **JSON)
        assert response.json()["message"] == "User deleted successfully."
        assert not User.objects.filter(pk=customer.pk).exists()

    def test_inactive_roles_are_not_offered(self, admin_client, roles):
        Role.objects.filter(name="salesperson").update(is_active=False)
        props = admin_client.get(reverse("backoffice:user-list"), **PAGE).json()["props"]
        assert [role["name"] for role in props["roles"]] == ["admin", "manager"]
