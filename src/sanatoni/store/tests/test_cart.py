"""Tests for the guest and customer cart."""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from sanatoni.catalog.models import Product
from sanatoni.promotions.models import Coupon, FlashSale
from sanatoni.store.cart import COUPON_SESSION_KEY, MAX_QUANTITY, Cart, merge_guest_cart
from sanatoni.store.exceptions import InsufficientStockError, ProductUnavailableError
from sanatoni.store.models import CartItem


@pytest.mark.django_db
class TestCartContents:
    def test_guest_cart_uses_session_token(self, guest_cart, product):
        item = guest_cart.add(product, 2)
        assert item.user is None
        assert item.cart_token == guest_cart.session["cart_token"]
        assert guest_cart.count() == 2

    def test_adding_again_accumulates(self, customer_cart, product):
        customer_cart.add(product, 2)
        customer_cart.add(product, 3)
        assert CartItem.objects.get().quantity == 5

    def test_quantity_is_capped(self, customer_cart, make_product):
        product = make_product(stock=500)
        customer_cart.add(product, 80)
        item = customer_cart.add(product, 80)
        assert item.quantity == MAX_QUANTITY

    def test_insufficient_stock(self, customer_cart, make_product):
        product = make_product(stock=3)
        customer_cart.add(product, 2)
        with pytest.raises(InsufficientStockError) as excinfo:
            customer_cart.add(product, 2)
        assert str(excinfo.value) == "Insufficient stock for Brass Diya. Only 3 items available."
        assert CartItem.objects.get().quantity == 2

    def test_draft_product_unavailable(self, customer_cart, make_product):
        with pytest.raises(ProductUnavailableError):
            customer_cart.add(make_product(status=Product.Status.DRAFT))

    def test_backorder_product_ignores_stock(self, customer_cart, make_product):
        product = make_product(stock=0, allow_backorders=True)
        assert customer_cart.add(product, 5).quantity == 5

    def test_update_checks_stock(self, customer_cart, make_product):
        product = make_product(stock=4)
        item = customer_cart.add(product, 1)
        with pytest.raises(InsufficientStockError):
            customer_cart.update(item, 5)
        assert customer_cart.update(item, 4).quantity == 4

    def test_carts_are_isolated(self, make_request, customer, product):
        Cart(make_request(user=customer)).add(product)
        assert Cart(make_request()).count() == 0

    def test_guest_without_token_has_empty_cart(self, guest_cart):
        assert list(guest_cart.items()) == []
        assert "cart_token" not in guest_cart.session


@pytest.mark.django_db
class TestCartTotals:
    def test_summary_uses_sale_price(self, customer_cart, make_product):
        customer_cart.add(make_product(price="200.00", sale_price=Decimal("150.00")), 2)
        summary = customer_cart.summary()
        assert summary.subtotal == Decimal("300.00")
        assert summary.total == Decimal("300.00")
        assert summary.item_count == 2

    def test_flash_sale_beats_sale_price(self, customer_cart, make_product):
        product = make_product(price="200.00", sale_price=Decimal("180.00"))
        now = timezone.now()
        sale = FlashSale.objects.create(
            name="Rath Yatra",
            discount_percentage=Decimal("25.00"),
            start_date=now - timedelta(hours=1),
            end_date=now + timedelta(hours=5),
            status=FlashSale.Status.ACTIVE,
        )
        sale.products.add(product)
        customer_cart.add(product, 1)
        line = customer_cart.lines()[0]
        assert line.unit_price == Decimal("150.00")
        assert line.price.flash_sale == sale

    def test_percentage_coupon(self, customer_cart, product, coupon):
        customer_cart.add(product, 2)
        assert customer_cart.apply_coupon("puja10").valid
        summary = customer_cart.summary()
        assert summary.discount == Decimal("20.00")
        assert summary.total == Decimal("180.00")
        assert summary.as_props()["appliedCoupon"]["code"] == "PUJA10"

    def test_unknown_coupon(self, customer_cart, product):
        customer_cart.add(product)
        check = customer_cart.apply_coupon("NOPE")
        assert not check.valid
        assert check.message == "Invalid coupon code."

    def test_minimum_order_amount(self, customer_cart, make_product, coupon):
        customer_cart.add(make_product(price="50.00"))
        check = customer_cart.apply_coupon("PUJA10")
        assert check.message == "Minimum order amount of ৳100.00 required for this coupon."

    def test_coupon_dropped_when_no_longer_valid(self, customer_cart, product, coupon):
        customer_cart.add(product, 2)
        customer_cart.apply_coupon("PUJA10")
        item = customer_cart.items().get()
        customer_cart.remove(item)
        summary = customer_cart.summary()
        assert summary.coupon is None
        assert COUPON_SESSION_KEY not in customer_cart.session

    def test_fixed_coupon_never_exceeds_subtotal(self, customer_cart, make_product):
        Coupon.objects.create(code="BIG", name="Big", type=Coupon.Type.FIXED, value=Decimal("500.00"))
        customer_cart.add(make_product(price="120.00"))
        customer_cart.apply_coupon("BIG")
        summary = customer_cart.summary()
        assert summary.discount == Decimal("120.00")
        assert summary.total == Decimal("0.00")

    def test_restricted_coupon_applies_to_matching_lines(self, customer_cart, make_product):
        from sanatoni.catalog.models import Category

        books = Category.objects.create(name="Books")
        gita = make_product(name="Gita", price="300.00", category=books)
        customer_cart.add(gita)
        customer_cart.add(make_product(name="Diya", price="100.00"))
        coupon = Coupon.objects.create(code="BOOKS20", name="Books", value=Decimal("20.00"))
        coupon.categories.add(books)
        assert customer_cart.apply_coupon("BOOKS20").valid
        assert customer_cart.summary().discount == Decimal("60.00")

    def test_restricted_coupon_without_matching_lines(self, customer_cart, product, make_product):
        coupon = Coupon.objects.create(code="ONLY", name="Only", value=Decimal("20.00"))
        coupon.products.add(make_product(name="Other"))
        customer_cart.add(product)
        assert customer_cart.apply_coupon("ONLY").message == (
            "This coupon is not applicable to items in your cart."
        )


@pytest.mark.django_db
class TestMergeGuestCart:
    def test_moves_and_sums_lines(self, make_request, customer, product, make_product):
        other = make_product(name="Incense")
        Cart(make_request(user=customer)).add(product, 1)
        guest = Cart(make_request())
        guest.add(product, 2)
        guest.add(other, 1)

        assert merge_guest_cart(guest.token, customer) == 2
        assert CartItem.objects.get(user=customer, product=product).quantity == 3
        assert CartItem.objects.get(user=customer, product=other).cart_token == ""
        assert not CartItem.objects.filter(user__isnull=True).exists()

    def test_login_merges_guest_cart(self, client, customer, product):
        client.post("/cart/", {"product_id": product.pk, "quantity": 2})
        client.post("/login/", {"email": customer.email, "password": "testpass123"})
        assert CartItem.objects.get(user=customer).quantity == 2

    def test_anonymous_user_is_ignored(self, make_request):
        assert merge_guest_cart("token", make_request().user) == 0
