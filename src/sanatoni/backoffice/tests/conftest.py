"""Fixtures for back office tests."""

import pytest
from django.test import Client

from sanatoni.store.cart import Cart
from sanatoni.store.services import place_order


@pytest.fixture
def admin_client(db, admin_user):
    """A second client signed in as the admin, independent of ``client``."""
    client = Client()
    client.force_login(admin_user)
    return client


@pytest.fixture
def salesperson_client(client, salesperson_user):
    client.force_login(salesperson_user)
    return client


@pytest.fixture
def order(make_request, product, shipping_zone, address):
    """A pending guest order for three units of ``product``."""
    cart = Cart(make_request())
    cart.add(product, 3)
    return place_order(
        cart,
        customer_name="Rahim Uddin",
        customer_email="guest@example.com",
        customer_phone="01700000001",
        shipping_address=address,
    )
