"""Tests for back office access control, navigation and the dashboard."""

import pytest
from django.urls import reverse

from sanatoni.catalog.models import Product
from sanatoni.core.access import PERMISSION_DENIED_MESSAGE, ROLE_DENIED_MESSAGE
from sanatoni.core.models import Permission
from sanatoni.store.models import Order
from sanatoni.store.services import change_order_status

JSON = {"HTTP_ACCEPT": "application/json"}
PAGE = {"HTTP_X_INERTIA": "true"}


@pytest.mark.django_db
class TestBackofficeAccess:
    def test_anonymous_api_client_is_unauthenticated(self, client):
        response = client.get(reverse("backoffice:dashboard"), **JSON)
        assert response.status_code == 401
        assert response.json() == {"message": "Unauthenticated."}

    def test_anonymous_browser_is_sent_to_login(self, client):
        response = client.get(reverse("backoffice:dashboard"))
        assert response.status_code == 302
        assert response.url == "/login/?next=/admin/"

    def test_customer_is_refused(self, customer_client, roles):
        response = customer_client.get(reverse("backoffice:dashboard"), **JSON)
        assert response.status_code == 403
        assert response.json() == {
            "message": ROLE_DENIED_MESSAGE,
            "required_roles": ["admin", "manager"],
        }

    def test_customer_browser_gets_forbidden_page(self, customer_client, roles):
        response = customer_client.get(reverse("backoffice:dashboard"))
        assert response.status_code == 403

    def test_salesperson_is_refused(self, salesperson_client):
        response = salesperson_client.get(reverse("backoffice:order-list"), **JSON)
        assert response.status_code == 403

    def test_manager_is_admitted(self, manager_client):
        response = manager_client.get(reverse("backoffice:dashboard"), **PAGE)
        assert response.status_code == 200
        assert response.json()["component"] == "Admin/Dashboard"

    def test_manager_cannot_manage_users(self, manager_client):
        response = manager_client.get(reverse("backoffice:user-list"), **JSON)
        assert response.status_code == 403
        assert response.json()["required_roles"] == ["admin"]

    def test_superuser_without_roles_is_admitted(self, client, make_user):
        superuser = make_user(email="root@sanatonimart.com", is_superuser=True, is_staff=True)
        client.force_login(superuser)
        assert client.get(reverse("backoffice:user-list"), **PAGE).status_code == 200

    def test_method_permission_narrows_access(self, manager_client, roles, product):
        roles["manager"].permissions.remove(Permission.objects.get(name="delete_products"))
        url = reverse("backoffice:product-detail", args=[product.pk])

        assert manager_client.get(url, **PAGE).status_code == 200
        response = manager_client.delete(url, **JSON)
        assert response.status_code == 403
        assert response.json() == {
            "message": PERMISSION_DENIED_MESSAGE,
            "required_permissions": ["delete_products"],
        }
        assert Product.objects.filter(pk=product.pk).exists()

    def test_inactive_role_grants_nothing(self, manager_client, roles):
        roles["manager"].is_active = False
        roles["manager"].save()
        assert manager_client.get(reverse("backoffice:dashboard"), **JSON).status_code == 403


@pytest.mark.django_db
class TestNavigation:
    def sections(self, response):
        return {section["name"]: section["items"] for section in response.json()["props"]["navigation"]}

    def test_manager_sees_store_sections_without_administration(self, manager_client):
        sections = self.sections(manager_client.get(reverse("backoffice:order-list"), **PAGE))
        assert list(sections) == ["Main", "Sales", "Catalog", "Content"]
        orders = next(item for item in sections["Sales"] if item["label"] == "Orders")
        assert orders["resolved_url"] == "/admin/orders/"
        assert orders["is_active"] is True
        dashboard = sections["Main"][0]
        assert dashboard["is_active"] is False

    def test_admin_sees_users(self, admin_client):
        sections = self.sections(admin_client.get(reverse("backoffice:dashboard"), **PAGE))
        assert [item["label"] for item in sections["Administration"]] == ["Users"]
        assert sections["Main"][0]["is_active"] is True

    def test_storefront_pages_carry_no_navigation(self, manager_client):
        response = manager_client.get(reverse("store:cart"), **PAGE)
        assert "navigation" not in response.json()["props"]


@pytest.mark.django_db
class TestDashboard:
    def test_stats(self, manager_client, order, make_product):
        make_product(name="Conch Shell", stock=2)
        change_order_status(order, Order.Status.DELIVERED, notify=False)

        props = manager_client.get(reverse("backoffice:dashboard"), **PAGE).json()["props"]
        stats = props["stats"]
        assert stats["total_orders"] == 1
        assert stats["pending_orders"] == 0
        assert stats["total_revenue"] == "360.00"
        assert stats["monthly_revenue"] == "360.00"
        assert stats["total_products"] == 2
        assert stats["low_stock_products"] == 2
        assert props["userStats"]["manager_users"] == 1
        assert len(props["salesData"]) == 6
        assert props["salesData"][-1]["revenue"] == 360.0
        assert len(props["weeklySales"]) == 7
        assert props["weeklySales"][-1]["orders"] == 1
        assert props["topCategories"] == [{"name": "Puja Items", "products_count": 2}]
        assert props["recentOrders"][0]["customer_name"] == "Guest"
        assert props["orderStatusDistribution"]["delivered"] == 1
        assert props["orderStatusDistribution"]["pending"] == 0
