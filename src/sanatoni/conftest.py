"""Shared pytest fixtures for Sanatoni Mart tests."""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.contrib.sessions.backends.db import SessionStore
from django.core.cache import cache
from django.test import RequestFactory
from django.utils import translation

User = get_user_model()


@pytest.fixture(autouse=True)
def clear_cache():
    """Translation and sitemap lookups are cached; start every test empty."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def default_locale():
    """Requests activate their locale on the thread; reset it around each test."""
    translation.activate("en")
    yield
    translation.deactivate()


@pytest.fixture
def roles(db):
    """Seed the permission catalogue and the admin, manager and salesperson roles."""
    from sanatoni.core.roles import seed_roles_and_permissions

    return seed_roles_and_permissions()


@pytest.fixture
def make_user(db):
    def factory(email="customer@example.com", password="testpass123", role=None, **extra):
        extra.setdefault("name", email.split("@")[0].title())
        user = User.objects.create_user(email=email, password=password, **extra)
        if role:
            user.assign_role(role)
        return user

    return factory


@pytest.fixture
def customer(make_user):
    """Create a customer without any back office role."""
    return make_user(email="customer@example.com", name="Rahim Uddin", phone="01700000001")


@pytest.fixture
def admin_user(make_user, roles):
    """Create a user holding the admin role."""
    return make_user(email="admin@sanatonimart.com", name="Store Admin", role="admin")


@pytest.fixture
def manager_user(make_user, roles):
    return make_user(email="manager@sanatonimart.com", name="Store Manager", role="manager")


@pytest.fixture
def salesperson_user(make_user, roles):
    return make_user(email="sales@sanatonimart.com", name="Sales Person", role="salesperson")


@pytest.fixture
def customer_client(client, customer):
    client.force_login(customer)
    return client


@pytest.fixture
def manager_client(client, manager_user):
    client.force_login(manager_user)
    return client


@pytest.fixture
def make_request(db):
    """Build a request carrying a session, for services that take a request."""
    factory = RequestFactory()

    def build(user=None, path="/", session=None):
        request = factory.get(path)
        request.session = session if session is not None else SessionStore()
        request.user = user or AnonymousUser()
        return request

    return build


@pytest.fixture
def category(db):
    from sanatoni.catalog.models import Category

    return Category.objects.create(name="Puja Items", description="Items for daily worship")


@pytest.fixture
def make_product(db, category):
    from sanatoni.catalog.models import Product

    def factory(name="Brass Diya", price="100.00", stock=10, **extra):
        extra.setdefault("category", category)
        extra.setdefault("status", Product.Status.PUBLISHED)
        return Product.objects.create(
            name=name,
            price=Decimal(price),
            stock_quantity=stock,
            **extra,
        )

    return factory


@pytest.fixture
def product(make_product):
    """Create a published product with ten units in stock."""
    return make_product()


@pytest.fixture
def shipping_zone(db):
    """Create the Dhaka delivery zone."""
    from sanatoni.store.models import ShippingZone

    return ShippingZone.objects.create(
        name="Inside Dhaka",
        areas=["Dhaka", "Gulshan", "Dhanmondi"],
        shipping_cost=Decimal("60.00"),
        delivery_time_min=1,
        delivery_time_max=3,
    )


@pytest.fixture
def outside_zone(db):
    from sanatoni.store.models import ShippingZone

    return ShippingZone.objects.create(
        name="Outside Dhaka",
        areas=["Chattogram", "Sylhet"],
        shipping_cost=Decimal("120.00"),
        delivery_time_min=3,
        delivery_time_max=7,
    )


@pytest.fixture
def address():
    return {
        "phone": "01700000001",
        "address_line_1": "House 12, Road 5",
        "address_line_2": "",
        "city": "Dhaka",
        "district": "Dhaka",
        "division": "Dhaka",
        "postal_code": "1209",
    }
