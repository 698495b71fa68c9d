"""Tests for request parsing and page response helpers."""

import json

import pytest
from django import forms
from django.test import RequestFactory

from sanatoni.core.http import flatten, request_data
from sanatoni.core.pages import form_errors, paginate


class AddressForm(forms.Form):
    city = forms.CharField()


@pytest.fixture
def rf():
    return RequestFactory()


class TestRequestData:
    def test_flatten_nested_dicts(self):
        assert flatten({"shipping_address": {"city": "Dhaka"}, "name": "A"}) == {
            "shipping_address-city": "Dhaka",
            "name": "A",
        }

    def test_json_body_becomes_querydict(self, rf):
        request = rf.post(
            "/",
            data=json.dumps({"ids": [1, 2], "shipping_address": {"city": "Dhaka"}, "notes": None}),
            content_type="application/json",
        )
        data = request_data(request)
        assert data.getlist("ids") == [1, 2]
        assert data["shipping_address-city"] == "Dhaka"
        assert "notes" not in data

    def test_form_post_passes_through(self, rf):
        request = rf.post("/", data={"name": "A"})
        assert request_data(request)["name"] == "A"


class TestFormErrors:
    def test_prefixed_fields_use_dotted_keys(self):
        form = AddressForm({}, prefix="shipping_address")
        assert not form.is_valid()
        assert "shipping_address.city" in form_errors(form)


@pytest.mark.django_db
class TestPaginate:
    def test_out_of_range_page_returns_last(self, rf, make_product):
        from sanatoni.catalog.models import Product

        for index in range(5):
            make_product(name=f"Incense {index}")
        request = rf.get("/", {"page": "9"})
        result = paginate(request, Product.objects.order_by("pk"), 2, lambda p: p.pk)
        assert result["current_page"] == 3
        assert result["last_page"] == 3
        assert result["total"] == 5
        assert len(result["data"]) == 1

    def test_empty_queryset(self, rf):
        from sanatoni.catalog.models import Product

        result = paginate(rf.get("/"), Product.objects.none(), 10, lambda p: p.pk)
        assert result["data"] == []
        assert result["from"] is None
