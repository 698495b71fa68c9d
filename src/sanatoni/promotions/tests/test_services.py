"""Tests for promotion pricing lookups and status maintenance."""

from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command

from sanatoni.promotions.models import Coupon, FlashSale
from sanatoni.promotions.services import (
    current_price,
    expire_coupons,
    flash_sale_stats,
    flash_sales_by_product,
    price_for,
    refresh_flash_sale_statuses,
)


@pytest.mark.django_db
class TestPricing:
    def test_best_sale_wins(self, make_sale, product):
        small = make_sale(name="Small", discount="10.00")
        big = make_sale(name="Big", discount="40.00")
        small.products.add(product)
        big.products.add(product)
        assert flash_sales_by_product([product.pk]) == {product.pk: big}

    def test_sale_price_beats_weaker_flash_sale(self, make_sale, make_product):
        product = make_product(price="100.00", sale_price=Decimal("80.00"))
        sale = make_sale(discount="10.00")
        sale.products.add(product)
        price = current_price(product)
        assert price.unit_price == Decimal("80.00")
        assert price.flash_sale is None

    def test_flash_sale_price(self, make_sale, product):
        sale = make_sale(discount="25.00")
        sale.products.add(product)
        price = price_for(product, sale)
        assert price.unit_price == Decimal("75.00")
        assert price.original_price == Decimal("100.00")
        assert price.flash_sale == sale


@pytest.mark.django_db
class TestStatusMaintenance:
    def test_refresh_flash_sales(self, make_sale, now):
        make_sale(name="Due", start=-1, status=FlashSale.Status.SCHEDULED)
        make_sale(name="Over", start=-48, end=-1)
        make_sale(name="Fine")
        assert refresh_flash_sale_statuses(now) == 2
        assert FlashSale.objects.get(name="Due").status == FlashSale.Status.ACTIVE
        assert FlashSale.objects.get(name="Over").status == FlashSale.Status.EXPIRED

    def test_expire_coupons(self, now):
        Coupon.objects.create(code="USED", name="Used", value=Decimal("5.00"), usage_limit=1, used_count=1)
        Coupon.objects.create(code="LIVE", name="Live", value=Decimal("5.00"))
        assert expire_coupons(now) == 1
        assert Coupon.objects.get(code="LIVE").status == Coupon.Status.ACTIVE

    def test_command(self, make_sale):
        make_sale(start=-48, end=-1)
        out = StringIO()
        call_command("refresh_promotions", stdout=out)
        out = out.getvalue()
        assert "Flash sales updated: 1" in out
        assert "Coupons expired: 0" in out

    def test_stats(self, make_sale):
        make_sale(used_count=3)
        make_sale(start=2, status=FlashSale.Status.SCHEDULED, used_count=1)
        stats = flash_sale_stats()
        assert stats == {"total": 2, "active": 1, "scheduled": 1, "expired": 0, "total_usage": 4}


@pytest.mark.django_db
class TestFlashSaleViews:
    PAGE = {"HTTP_X_INERTIA": "true"}

    def test_list_shows_running_sales(self, client, make_sale):
        make_sale(name="Regular")
        make_sale(name="Featured", is_featured=True)
        make_sale(name="Later", start=3, status=FlashSale.Status.SCHEDULED)
        props = client.get("/flash-sales/", **self.PAGE).json()["props"]
        assert [sale["name"] for sale in props["flashSales"]] == ["Featured", "Regular"]
        assert props["featuredSale"]["name"] == "Featured"

    def test_detail(self, client, make_sale, product):
        sale = make_sale(discount="50.00")
        sale.products.add(product)
        props = client.get(f"/flash-sales/{sale.pk}/", **self.PAGE).json()["props"]
        assert props["flashSale"]["discount_percentage"] == "50.00"
        assert props["products"][0]["name"] == "Brass Diya"

    def test_detail_of_ended_sale_redirects(self, client, make_sale):
        sale = make_sale(start=-48, end=-1)
        response = client.get(f"/flash-sales/{sale.pk}/")
        assert response.status_code == 302
        assert response.url == "/flash-sales/"

    def test_unknown_sale(self, client, db):
        assert client.get("/flash-sales/999/").status_code == 404
