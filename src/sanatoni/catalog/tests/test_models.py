"""Tests for catalog models: slugs, SKUs, pricing and stock."""

from decimal import Decimal

import pytest

from sanatoni.catalog.models import Category, Product


@pytest.mark.django_db
class TestCategory:
    def test_slug_generated_and_unique(self):
        first = Category.objects.create(name="Puja Items")
        second = Category.objects.create(name="Puja Items")
        assert first.slug == "puja-items"
        assert second.slug == "puja-items-2"

    def test_full_name_includes_parent(self, category):
        child = Category.objects.create(name="Diyas", parent=category)
        assert child.full_name == "Puja Items > Diyas"


@pytest.mark.django_db
class TestProduct:
    def test_sku_generated(self, product):
        assert product.sku.startswith("PRD-")
        assert len(product.sku) == 12

    def test_sale_price_below_price_is_on_sale(self, make_product):
        product = make_product(price="200.00", sale_price=Decimal("150.00"))
        assert product.is_on_sale()
        assert product.display_price == Decimal("150.00")
        assert product.discount_percentage() == 25

    def test_sale_price_above_price_is_ignored(self, make_product):
        product = make_product(price="200.00", sale_price=Decimal("250.00"))
        assert not product.is_on_sale()
        assert product.display_price == Decimal("200.00")

    def test_has_stock(self, make_product):
        product = make_product(stock=2)
        assert product.has_stock(2)
        assert not product.has_stock(3)

    def test_backorders_are_not_tracked(self, make_product):
        product = make_product(stock=0, allow_backorders=True)
        assert not product.tracks_inventory
        assert product.has_stock(50)

    def test_unmanaged_stock(self, make_product):
        product = make_product(stock=0, manage_stock=False)
        assert product.in_stock

    @pytest.mark.parametrize(
        "stock,backorders,expected",
        [
            (5, False, Product.StockStatus.IN_STOCK),
            (0, False, Product.StockStatus.OUT_OF_STOCK),
            (0, True, Product.StockStatus.ON_BACKORDER),
        ],
    )
    def test_refresh_stock_status(self, make_product, stock, backorders, expected):
        product = make_product(stock=stock, allow_backorders=backorders)
        product.refresh_stock_status()
        assert product.stock_status == expected

    def test_primary_image_prefers_main_image(self, product):
        product.images.create(image_path="products/a.jpg")
        product.images.create(image_path="products/b.jpg", is_primary=True)
        assert product.primary_image == "products/b.jpg"
        product.main_image = "products/main.jpg"
        assert product.primary_image == "products/main.jpg"

    def test_low_stock(self, make_product):
        low = make_product(name="Low", stock=3)
        make_product(name="Plenty", stock=50)
        make_product(name="Empty", stock=0)
        assert list(Product.objects.low_stock(10)) == [low]
