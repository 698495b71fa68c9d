"""Tests for flash sale and coupon rules."""

from datetime import timedelta
from decimal import Decimal

import pytest

from sanatoni.promotions.models import Coupon, FlashSale
from sanatoni.promotions.pricing import apply_percentage_discount, percent_of, round_money


class TestPricing:
    @pytest.mark.parametrize(
        "amount,expected",
        [("10.005", "10.01"), ("10.004", "10.00"), (7, "7.00"), (None, "0.00")],
    )
    def test_round_money_rounds_half_up(self, amount, expected):
        assert round_money(amount) == Decimal(expected)

    def test_percentages(self):
        assert percent_of("199.99", "15") == Decimal("30.00")
        assert apply_percentage_discount("199.99", "15") == Decimal("169.99")


@pytest.mark.django_db
class TestFlashSale:
    def test_running_sale(self, make_sale, now):
        sale = make_sale(max_usage=10, used_count=4)
        assert sale.is_active(now)
        assert sale.time_remaining(now) == 24 * 3600
        assert sale.usage_percentage() == 40.0
        assert sale.discounted_price(Decimal("250.00")) == Decimal("200.00")

    def test_used_up_sale_is_not_active(self, make_sale, now):
        sale = make_sale(max_usage=5, used_count=5)
        assert not sale.is_active(now)
        assert sale.time_remaining(now) is None
        assert sale.computed_status(now) == FlashSale.Status.EXPIRED

    @pytest.mark.parametrize(
        "start,end,status,expected",
        [
            (2, 24, FlashSale.Status.ACTIVE, FlashSale.Status.SCHEDULED),
            (-1, 24, FlashSale.Status.SCHEDULED, FlashSale.Status.ACTIVE),
            (-48, -1, FlashSale.Status.ACTIVE, FlashSale.Status.EXPIRED),
            (-1, 24, FlashSale.Status.INACTIVE, FlashSale.Status.INACTIVE),
            (-48, -1, FlashSale.Status.INACTIVE, FlashSale.Status.EXPIRED),
        ],
    )
    def test_computed_status(self, make_sale, now, start, end, status, expected):
        sale = make_sale(start=start, end=end, status=status)
        assert sale.computed_status(now) == expected

    def test_sale_ends_at_its_end_date(self, make_sale, now):
        sale = make_sale()
        assert not sale.is_active(sale.end_date)
        assert sale.is_expired(sale.end_date)
        assert sale.computed_status(sale.end_date) == FlashSale.Status.EXPIRED
        assert not FlashSale.objects.running(sale.end_date).exists()
        assert FlashSale.objects.running(sale.end_date - timedelta(seconds=1)).get() == sale

    def test_refresh_status_saves_change(self, make_sale, now):
        sale = make_sale(start=1, status=FlashSale.Status.SCHEDULED)
        assert not sale.refresh_status(now)
        assert sale.refresh_status(now + timedelta(hours=2))
        sale.refresh_from_db()
        assert sale.status == FlashSale.Status.ACTIVE

    def test_running_queryset(self, make_sale):
        running = make_sale(name="Running")
        make_sale(name="Later", start=5, status=FlashSale.Status.SCHEDULED)
        make_sale(name="Off", status=FlashSale.Status.INACTIVE)
        make_sale(name="Spent", max_usage=1, used_count=1)
        assert list(FlashSale.objects.running()) == [running]


@pytest.mark.django_db
class TestCoupon:
    def test_code_is_normalised(self):
        coupon = Coupon.objects.create(code=" welcome ", name="Welcome", value=Decimal("5.00"))
        assert coupon.code == "WELCOME"
        assert Coupon.find("welcome") == coupon

    def test_generated_codes(self):
        code = Coupon.generate_code(prefix="PUJA")
        assert code.startswith("PUJA")
        assert len(code) == 12

    @pytest.mark.parametrize(
        "changes,reason",
        [
            ({"status": Coupon.Status.INACTIVE}, "This coupon is no longer active."),
            ({"valid_from_hours": 2}, "This coupon is not yet valid."),
            ({"valid_until_hours": -1}, "This coupon has expired."),
            ({"usage_limit": 3, "used_count": 3}, "This coupon has reached its usage limit."),
        ],
    )
    def test_invalid_reasons(self, now, changes, reason):
        changes = dict(changes)
        coupon = Coupon(code="X", name="X", value=Decimal("10.00"), valid_from=now - timedelta(days=2))
        if "valid_from_hours" in changes:
            coupon.valid_from = now + timedelta(hours=changes.pop("valid_from_hours"))
        if "valid_until_hours" in changes:
            coupon.valid_until = now + timedelta(hours=changes.pop("valid_until_hours"))
        for field, value in changes.items():
            setattr(coupon, field, value)
        assert coupon.invalid_reason(now=now) == reason
        assert not coupon.is_valid(now=now)

    def test_percentage_discount(self):
        coupon = Coupon(code="P", name="P", type=Coupon.Type.PERCENTAGE, value=Decimal("12.50"))
        assert coupon.calculate_discount(Decimal("80.00")) == Decimal("10.00")

    def test_fixed_discount_is_capped(self):
        coupon = Coupon(code="F", name="F", type=Coupon.Type.FIXED, value=Decimal("100.00"))
        assert coupon.calculate_discount(Decimal("40.00")) == Decimal("40.00")
        assert coupon.calculate_discount(Decimal("400.00")) == Decimal("100.00")

    def test_no_discount_below_minimum(self):
        coupon = Coupon(
            code="M", name="M", value=Decimal("10.00"), minimum_order_amount=Decimal("500.00")
        )
        assert coupon.calculate_discount(Decimal("499.99")) == Decimal("0.00")

    def test_refresh_status_expires(self, now):
        coupon = Coupon.objects.create(
            code="OLD", name="Old", value=Decimal("5.00"),
            valid_from=now - timedelta(days=10), valid_until=now - timedelta(days=1),
        )
        assert coupon.refresh_status(now)
        assert coupon.status == Coupon.Status.EXPIRED
        assert not coupon.refresh_status(now)

    def test_applies_to_restricted_category(self, category, make_product):
        from sanatoni.catalog.models import Category

        coupon = Coupon.objects.create(code="CAT", name="Cat", value=Decimal("5.00"))
        product = make_product()
        other = make_product(name="Gita", category=Category.objects.create(name="Books"))
        assert coupon.applies_to(other)

        coupon.categories.add(category)
        assert coupon.applies_to(product)
        assert not coupon.applies_to(other)
