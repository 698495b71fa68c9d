"""Fixtures for cart and order tests."""

from decimal import Decimal

import pytest

from sanatoni.promotions.models import Coupon
from sanatoni.store.cart import Cart


@pytest.fixture
def guest_cart(make_request):
    return Cart(make_request())


@pytest.fixture
def customer_cart(make_request, customer):
    return Cart(make_request(user=customer))


@pytest.fixture
def coupon(db):
    """Ten percent off any order of at least 100."""
    return Coupon.objects.create(
        code="PUJA10",
        name="Puja ten percent",
        type=Coupon.Type.PERCENTAGE,
        value=Decimal("10.00"),
        minimum_order_amount=Decimal("100.00"),
    )


@pytest.fixture
def place(shipping_zone, address):
    """Place an order from ``cart`` with sensible customer details."""
    from sanatoni.store.services import place_order

    def run(cart, email="guest@example.com", **extra):
        return place_order(
            cart,
            customer_name=extra.pop("customer_name", "Rahim Uddin"),
            customer_email=email,
            customer_phone="01700000001",
            shipping_address=extra.pop("shipping_address", address),
            **extra,
        )

    return run
