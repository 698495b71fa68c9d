"""Fixtures for product review tests."""

import pytest

from sanatoni.reviews.models import ProductReview


@pytest.fixture
def reviewer(make_user):
    return make_user(email="priya@example.com", name="Priya Das")


@pytest.fixture
def make_review(db, product, reviewer):
    def factory(user=None, rating=5, status=ProductReview.Status.APPROVED, **extra):
        extra.setdefault("product", product)
        extra.setdefault("comment", "Beautiful finish and fast delivery.")
        return ProductReview.objects.create(user=user or reviewer, rating=rating, status=status, **extra)

    return factory


@pytest.fixture
def delivered_order(make_request, customer, product, shipping_zone, address):
    """A delivered order of ``product`` placed by ``customer``."""
    from sanatoni.store.cart import Cart
    from sanatoni.store.models import Order
    from sanatoni.store.services import change_order_status, place_order

    cart = Cart(make_request(user=customer))
    cart.add(product, 1)
    order = place_order(
        cart,
        customer_name="Rahim Uddin",
        customer_email=customer.email,
        customer_phone="01700000001",
        shipping_address=address,
    )
    change_order_status(order, Order.Status.DELIVERED, notify=False)
    return order
