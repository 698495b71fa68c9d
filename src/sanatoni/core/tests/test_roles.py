"""Tests for roles, permissions and role-based user helpers."""

import pytest
from django.core.management import call_command

from sanatoni.core.models import Permission, Role, UserRole
from sanatoni.core.roles import PERMISSION_GROUPS, seed_roles_and_permissions


@pytest.mark.django_db
class TestSeedRoles:
    def test_creates_every_permission(self, roles):
        expected = sum(len(entries) for entries in PERMISSION_GROUPS.values())
        assert Permission.objects.count() == expected

    def test_admin_gets_all_permissions(self, roles):
        assert roles["admin"].permissions.count() == Permission.objects.count()

    def test_manager_has_no_user_or_settings_permissions(self, roles):
        names = set(roles["manager"].permissions.values_list("name", flat=True))
        assert "view_products" in names
        assert "process_orders" in names
        assert "view_users" not in names
        assert "edit_settings" not in names

    def test_salesperson_permissions(self, roles):
        names = set(roles["salesperson"].permissions.values_list("name", flat=True))
        assert names == {
            "view_orders", "edit_orders", "process_orders",
            "view_customers", "edit_customers",
            "view_products", "view_categories",
            "view_reports",
        }

    def test_rerun_is_idempotent(self, roles):
        seed_roles_and_permissions()
        assert Role.objects.count() == 3

    def test_command_creates_staff_accounts(self, django_user_model):
        call_command("seed_roles", "--with-users", "--password", "s3cret-pass")
        admin = django_user_model.objects.get(email="admin@sanatonimart.com")
        assert admin.is_admin()
        assert admin.check_password("s3cret-pass")


@pytest.mark.django_db
class TestUserRoles:
    def test_assign_role(self, customer, roles):
        customer.assign_role("manager")
        assert customer.is_manager()
        assert customer.has_admin_access()

    def test_assign_role_twice_keeps_one_row(self, customer, roles):
        customer.assign_role("manager")
        customer.assign_role("manager")
        assert UserRole.objects.filter(user=customer).count() == 1

    def test_remove_role(self, manager_user):
        manager_user.remove_role("manager")
        assert not manager_user.has_admin_access()

    def test_sync_roles_replaces_assignments(self, manager_user):
        manager_user.sync_roles(["salesperson"])
        assert manager_user.role_names() == ["salesperson"]

    def test_has_any_and_all_roles(self, customer, roles):
        customer.assign_role("salesperson")
        assert customer.has_any_role(["admin", "salesperson"])
        assert not customer.has_all_roles(["admin", "salesperson"])

    def test_inactive_role_grants_nothing(self, manager_user, roles):
        roles["manager"].is_active = False
        roles["manager"].save()
        assert not manager_user.is_manager()
        assert not manager_user.has_permission("view_products")

    def test_permissions_come_from_roles(self, salesperson_user):
        assert salesperson_user.has_permission("process_orders")
        assert not salesperson_user.has_permission("delete_products")
        assert salesperson_user.has_any_permission(["delete_products", "view_orders"])

    def test_role_permission_names_are_sorted_and_unique(self, customer, roles):
        customer.assign_role("manager")
        customer.assign_role("salesperson")
        names = customer.role_permission_names()
        assert names == sorted(set(names))

    def test_role_permission_helpers(self, roles):
        role = Role.objects.create(name="editor", display_name="Editor")
        role.give_permission_to("edit_blog", "view_blog")
        assert role.has_permission("edit_blog")
        role.sync_permissions(["view_blog"])
        assert not role.has_permission("edit_blog")


@pytest.mark.django_db
class TestUserManager:
    def test_email_is_normalized(self, django_user_model):
        user = django_user_model.objects.create_user(email="Someone@EXAMPLE.com", password="x")
        assert user.email == "Someone@example.com"
        assert user.name == "Someone"

    def test_email_required(self, django_user_model):
        with pytest.raises(ValueError):
            django_user_model.objects.create_user(email="", password="x")

    def test_create_superuser(self, django_user_model):
        user = django_user_model.objects.create_superuser(email="root@example.com", password="x")
        assert user.is_superuser
        assert user.has_admin_access()
