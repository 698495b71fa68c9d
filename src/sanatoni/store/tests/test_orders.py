"""Tests for order placement, status changes and reordering."""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.core import mail
from django.utils import timezone

from sanatoni.catalog.models import Product
from sanatoni.promotions.models import Coupon, CouponUsage, FlashSale
from sanatoni.store.exceptions import (
    EmptyCartError,
    InsufficientStockError,
    OrderNotCancellableError,
    ShippingUnavailableError,
)
from sanatoni.store.models import CartItem, Invoice, Order, ShippingZone
from sanatoni.store.services import (
    cancel_order,
    change_order_status,
    find_order_for_tracking,
    reorder,
    shipping_quote,
)


@pytest.mark.django_db
class TestShippingZones:
    def test_matches_area_case_insensitively(self, shipping_zone):
        assert shipping_zone.covers({"city": "gulshan-2"})
        assert not shipping_zone.covers({"city": "Sylhet"})

    def test_first_active_zone_is_fallback(self, shipping_zone, outside_zone):
        assert ShippingZone.find_for_address({"city": "Rangpur"}) == shipping_zone

    def test_matching_zone_wins(self, shipping_zone, outside_zone):
        assert ShippingZone.find_for_address({"city": "Sylhet"}) == outside_zone

    def test_partial_terms_do_not_match_longer_areas(self, db):
        cantonment = ShippingZone.objects.create(
            name="Savar Cantonment", areas=["savar cantonment"], shipping_cost=Decimal("90.00")
        )
        dhaka = ShippingZone.objects.create(
            name="Greater Dhaka", areas=["dhaka", "savar"], shipping_cost=Decimal("60.00")
        )
        assert not cantonment.covers({"city": "Savar"})
        assert ShippingZone.find_for_address({"city": "Savar"}) == dhaka

    def test_short_terms_do_not_match(self, shipping_zone, outside_zone):
        assert not outside_zone.covers({"city": "a"})
        assert ShippingZone.find_for_address({"city": "Dhaka", "division": "a"}) == shipping_zone

    def test_inactive_zones_are_skipped(self, shipping_zone):
        shipping_zone.is_active = False
        shipping_zone.save()
        assert ShippingZone.find_for_address({"city": "Dhaka"}) is None

    @pytest.mark.parametrize("low,high,expected", [(1, 1, "1 day"), (2, 2, "2 days"), (1, 3, "1-3 days")])
    def test_delivery_time_range(self, low, high, expected):
        zone = ShippingZone(name="Z", delivery_time_min=low, delivery_time_max=high)
        assert zone.delivery_time_range == expected

    def test_quote(self, customer_cart, product, shipping_zone):
        customer_cart.add(product, 2)
        quote = shipping_quote(customer_cart, {"city": "Dhaka"})
        assert quote["shippingCost"] == Decimal("60.00")
        assert quote["total"] == Decimal("260.00")
        assert quote["deliveryTimeRange"] == "1-3 days"

    def test_quote_without_zones(self, customer_cart, product):
        customer_cart.add(product)
        with pytest.raises(ShippingUnavailableError):
            shipping_quote(customer_cart, {"city": "Dhaka"})


@pytest.mark.django_db
class TestPlaceOrder:
    def test_guest_order(self, guest_cart, product, place, django_capture_on_commit_callbacks):
        guest_cart.add(product, 3)
        with django_capture_on_commit_callbacks(execute=True):
            order = place(guest_cart)

        assert order.order_number.startswith(f"ORD-{timezone.now().year}-")
        assert order.status == Order.Status.PENDING
        assert order.payment_method == Order.PaymentMethod.COD
        assert order.guest_email == "guest@example.com"
        assert order.subtotal == Decimal("300.00")
        assert order.shipping_cost == Decimal("60.00")
        assert order.total == Decimal("360.00")
        assert order.billing_address == order.shipping_address
        assert order.shipping_address["name"] == "Rahim Uddin"

        item = order.items.get()
        assert item.product_snapshot["name"] == "Brass Diya"
        assert item.subtotal == Decimal("300.00")

        product.refresh_from_db()
        assert product.stock_quantity == 7
        assert not CartItem.objects.exists()

        history = order.status_history.get()
        assert history.to_status == Order.Status.PENDING
        assert history.comment == "Order placed successfully"

        assert len(mail.outbox) == 1
        assert mail.outbox[0].subject == f"Order Confirmation - {order.order_number}"
        assert mail.outbox[0].to == ["guest@example.com"]

    def test_customer_order_uses_account_email(self, customer_cart, customer, product, place):
        customer_cart.add(product)
        order = place(customer_cart, email="other@example.com")
        assert order.user == customer
        assert order.guest_email == ""
        assert order.customer_email == customer.email

    def test_stock_reaching_zero_marks_out_of_stock(self, guest_cart, make_product, place):
        product = make_product(stock=2)
        guest_cart.add(product, 2)
        place(guest_cart)
        product.refresh_from_db()
        assert product.stock_quantity == 0
        assert product.stock_status == Product.StockStatus.OUT_OF_STOCK

    def test_backorder_stock_untouched(self, guest_cart, make_product, place):
        product = make_product(stock=0, allow_backorders=True)
        guest_cart.add(product, 4)
        place(guest_cart)
        product.refresh_from_db()
        assert product.stock_quantity == 0

    def test_empty_cart(self, guest_cart, place):
        with pytest.raises(EmptyCartError):
            place(guest_cart)

    def test_stock_sold_meanwhile_rolls_back(self, guest_cart, product, place):
        guest_cart.add(product, 5)
        Product.objects.filter(pk=product.pk).update(stock_quantity=2)
        with pytest.raises(InsufficientStockError):
            place(guest_cart)
        assert not Order.objects.exists()
        assert CartItem.objects.count() == 1

    def test_no_shipping_zone(self, guest_cart, product, address):
        from sanatoni.store.services import place_order

        guest_cart.add(product)
        with pytest.raises(ShippingUnavailableError):
            place_order(
                guest_cart,
                customer_name="A",
                customer_email="a@example.com",
                customer_phone="1",
                shipping_address=address,
            )

    def test_coupon_usage_recorded(self, customer_cart, customer, product, coupon, place):
        customer_cart.add(product, 2)
        customer_cart.apply_coupon("PUJA10")
        order = place(customer_cart)

        assert order.coupon_code == "PUJA10"
        assert order.discount_amount == Decimal("20.00")
        assert order.total == Decimal("240.00")
        usage = CouponUsage.objects.get()
        assert usage.user == customer
        assert usage.discount_amount == Decimal("20.00")
        coupon.refresh_from_db()
        assert coupon.used_count == 1

    def test_per_customer_limit(self, customer_cart, product, coupon, place):
        coupon.per_customer_limit = 1
        coupon.save()
        customer_cart.add(product, 2)
        customer_cart.apply_coupon("PUJA10")
        place(customer_cart)

        customer_cart.add(product, 2)
        check = customer_cart.apply_coupon("PUJA10")
        assert check.message == "You have already used this coupon the maximum number of times."

    def test_flash_sale_usage_counted(self, guest_cart, product, place):
        now = timezone.now()
        sale = FlashSale.objects.create(
            name="Diwali",
            discount_percentage=Decimal("50.00"),
            start_date=now - timedelta(hours=1),
            end_date=now + timedelta(hours=1),
            status=FlashSale.Status.ACTIVE,
        )
        sale.products.add(product)
        guest_cart.add(product, 2)
        order = place(guest_cart)

        item = order.items.get()
        assert item.price == Decimal("50.00")
        assert item.flash_sale == sale
        sale.refresh_from_db()
        assert sale.used_count == 1


@pytest.fixture
def order(guest_cart, product, place):
    guest_cart.add(product, 3)
    return place(guest_cart)


@pytest.mark.django_db
class TestOrderStatus:
    def test_cancel_restocks(self, order, product, customer):
        assert change_order_status(order, Order.Status.CANCELLED, comment="Customer called")
        product.refresh_from_db()
        assert product.stock_quantity == 10
        entry = order.status_history.first()
        assert entry.from_status == Order.Status.PENDING
        assert entry.to_status == Order.Status.CANCELLED
        assert entry.comment == "Customer called"

    def test_same_status_is_noop(self, order):
        assert not change_order_status(order, Order.Status.PENDING)
        assert order.status_history.count() == 1

    def test_reactivating_takes_stock_again(self, order, product):
        change_order_status(order, Order.Status.CANCELLED)
        change_order_status(order, Order.Status.PROCESSING)
        product.refresh_from_db()
        assert product.stock_quantity == 7

    def test_reactivating_without_stock_fails(self, order, product):
        change_order_status(order, Order.Status.CANCELLED)
        Product.objects.filter(pk=product.pk).update(stock_quantity=1)
        with pytest.raises(InsufficientStockError):
            change_order_status(order, Order.Status.PROCESSING)
        order.refresh_from_db()
        assert order.status == Order.Status.CANCELLED

    def test_delivered_sets_timestamp(self, order):
        change_order_status(order, Order.Status.DELIVERED)
        order.refresh_from_db()
        assert order.delivered_at is not None
        assert order.is_completed()

    def test_status_email_includes_comment(self, order, django_capture_on_commit_callbacks):
        mail.outbox.clear()
        with django_capture_on_commit_callbacks(execute=True):
            change_order_status(order, Order.Status.SHIPPED, comment="Handed to courier")
        assert mail.outbox[0].subject == f"Order Update - {order.order_number}"
        assert "Handed to courier" in mail.outbox[0].body

    def test_customer_cannot_cancel_shipped_order(self, order, customer):
        change_order_status(order, Order.Status.SHIPPED)
        order.refresh_from_db()
        with pytest.raises(OrderNotCancellableError):
            cancel_order(order, customer)


@pytest.mark.django_db
class TestReorderAndTracking:
    def test_reorder_reports_unavailable(self, order, product, customer_cart):
        Product.objects.filter(pk=product.pk).update(status=Product.Status.ARCHIVED)
        result = reorder(order, customer_cart)
        assert result.added == 0
        assert result.message == "Added 0 items to cart. Some items were unavailable: Brass Diya"

    def test_reorder_adds_items(self, order, customer_cart):
        result = reorder(order, customer_cart)
        assert result.added == 1
        assert customer_cart.count() == 3

    def test_tracking_requires_matching_email(self, order):
        assert find_order_for_tracking(order.order_number, "GUEST@example.com") == order
        assert find_order_for_tracking(order.order_number, "someone@example.com") is None
        assert find_order_for_tracking("ORD-0000-XXXXXX", "guest@example.com") is None


@pytest.mark.django_db
class TestInvoice:
    def test_sequential_numbers(self, order, guest_cart, product, place):
        first = Invoice.for_order(order)
        guest_cart.add(product)
        second = Invoice.for_order(place(guest_cart))
        year = timezone.now().year
        assert first.invoice_number == f"INV-{year}-000001"
        assert second.invoice_number == f"INV-{year}-000002"
        assert Invoice.for_order(order) == first
