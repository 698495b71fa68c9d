"""Tests for storefront catalog pages and product search."""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.urls import reverse
from django.utils import timezone

from sanatoni.catalog.models import Category, Product
from sanatoni.localization.content import LocalizedFields
from sanatoni.promotions.models import FlashSale

PAGE = {"HTTP_X_INERTIA": "true"}


def props(response):
    return response.json()["props"]


@pytest.fixture
def running_sale(product):
    now = timezone.now()
    sale = FlashSale.objects.create(
        name="Durga Puja Sale",
        discount_percentage=Decimal("30.00"),
        start_date=now - timedelta(hours=1),
        end_date=now + timedelta(days=1),
        status=FlashSale.Status.ACTIVE,
    )
    sale.products.add(product)
    return sale


@pytest.mark.django_db
class TestHome:
    def test_first_visit_renders_app_shell(self, client, product):
        response = client.get(reverse("home"))
        assert response.status_code == 200
        assert b"Welcome" in response.content

    def test_page_props(self, client, make_product):
        make_product(name="Featured Lamp", featured=True)
        make_product(name="Draft Lamp", status=Product.Status.DRAFT)
        data = props(client.get(reverse("home"), **PAGE))
        assert [p["name"] for p in data["featuredProducts"]] == ["Featured Lamp"]
        assert data["stats"]["total_products"] == 1

    def test_active_flash_sale(self, client, running_sale):
        data = props(client.get(reverse("home"), **PAGE))
        assert data["activeFlashSale"]["name"] == "Durga Puja Sale"
        assert data["flashSaleProducts"][0]["display_price"] == "70.00"


@pytest.mark.django_db
class TestProductList:
    def test_filters_by_price_and_search(self, client, make_product):
        make_product(name="Brass Diya", price="100.00")
        make_product(name="Silver Diya", price="900.00")
        make_product(name="Sandalwood Incense", price="50.00")
        data = props(client.get(reverse("catalog:product-list"), {"search": "diya", "max_price": "500"}, **PAGE))
        assert [p["name"] for p in data["products"]["data"]] == ["Brass Diya"]

    @pytest.mark.parametrize("value", ["NaN", "Infinity", "-inf", "cheap"])
    def test_unusable_price_bounds_are_ignored(self, client, make_product, value):
        make_product(name="Brass Diya", price="100.00")
        response = client.get(reverse("catalog:product-list"), {"min_price": value, "max_price": value}, **PAGE)
        assert response.status_code == 200
        assert [p["name"] for p in props(response)["products"]["data"]] == ["Brass Diya"]

    def test_category_filter_includes_children(self, client, category, make_product):
        child = Category.objects.create(name="Diyas", parent=category)
        make_product(name="Child Product", category=child)
        other = Category.objects.create(name="Books")
        make_product(name="Gita", category=other)
        data = props(client.get(reverse("catalog:product-list"), {"category": category.slug}, **PAGE))
        assert [p["name"] for p in data["products"]["data"]] == ["Child Product"]

    def test_sort_by_price(self, client, make_product):
        make_product(name="B", price="300.00")
        make_product(name="A", price="100.00")
        data = props(client.get(reverse("catalog:product-list"), {"sort": "price"}, **PAGE))
        assert [p["name"] for p in data["products"]["data"]] == ["A", "B"]

    def test_category_counts_only_published(self, client, category, make_product):
        make_product()
        make_product(name="Hidden", status=Product.Status.DRAFT)
        data = props(client.get(reverse("catalog:product-list"), **PAGE))
        assert data["categories"][0]["products_count"] == 1


@pytest.mark.django_db
class TestProductDetail:
    def test_unpublished_is_404(self, client, make_product):
        draft = make_product(name="Draft", status=Product.Status.DRAFT)
        response = client.get(reverse("catalog:product-detail", args=[draft.slug]))
        assert response.status_code == 404

    def test_detail_and_related(self, client, product, make_product):
        related = make_product(name="Another Diya")
        data = props(client.get(reverse("catalog:product-detail", args=[product.slug]), **PAGE))
        assert data["product"]["sku"] == product.sku
        assert [p["id"] for p in data["relatedProducts"]] == [related.pk]

    def test_translated_name(self, client, product):
        LocalizedFields(product).set("name", "পিতলের প্রদীপ", locale="bn")
        response = client.get(
            reverse("catalog:product-detail", args=[product.slug]), HTTP_ACCEPT_LANGUAGE="bn", **PAGE
        )
        assert props(response)["product"]["name"] == "পিতলের প্রদীপ"

    def test_flash_sale_price(self, client, running_sale, product):
        data = props(client.get(reverse("catalog:product-detail", args=[product.slug]), **PAGE))
        assert data["product"]["is_on_sale"]
        assert data["product"]["flash_sale"]["id"] == running_sale.pk


@pytest.mark.django_db
class TestRecentlyViewed:
    def test_viewing_products_tracks_history(self, client, make_product):
        first = make_product(name="First")
        second = make_product(name="Second")
        client.get(reverse("catalog:product-detail", args=[first.slug]))
        client.get(reverse("catalog:product-detail", args=[second.slug]))
        response = client.get(reverse("catalog:recently-viewed"))
        assert [p["id"] for p in response.json()["products"]] == [second.pk, first.pk]

    def test_track_view_and_clear(self, client, product):
        client.post(reverse("catalog:track-view", args=[product.pk]))
        assert len(client.get(reverse("catalog:recently-viewed")).json()["products"]) == 1
        client.delete(reverse("catalog:recently-viewed"))
        assert client.get(reverse("catalog:recently-viewed")).json()["products"] == []


@pytest.mark.django_db
class TestSearch:
    def test_short_terms_return_nothing(self, client, product):
        assert client.get(reverse("catalog:product-search"), {"q": "b"}).json()["products"] == []

    def test_matches_name(self, client, product):
        response = client.get(reverse("catalog:product-search"), {"q": "brass"})
        assert response.json()["products"][0]["id"] == product.pk
