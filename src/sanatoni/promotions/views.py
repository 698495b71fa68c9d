"""Public flash sale pages."""

from django.shortcuts import get_object_or_404, redirect
from django.views import View

from sanatoni.catalog.props import products_props
from sanatoni.core.pages import render_page

from .models import FlashSale


def flash_sale_props(sale):
    return {
        "id": sale.pk,
        "name": sale.name,
        "description": sale.description,
        "discount_percentage": sale.discount_percentage,
        "start_date": sale.start_date,
        "end_date": sale.end_date,
        "status": sale.status,
        "is_featured": sale.is_featured,
        "time_remaining": sale.time_remaining(),
        "max_usage": sale.max_usage,
        "used_count": sale.used_count,
        "usage_percentage": sale.usage_percentage(),
    }


class FlashSaleListView(View):
    """Running flash sales, featured ones first."""

    def get(self, request):
        sales = list(FlashSale.objects.running().order_by("-is_featured", "end_date"))
        featured = next((sale for sale in sales if sale.is_featured), None)
        return render_page(request, "FlashSales/Index", {
            "flashSales": [flash_sale_props(sale) for sale in sales],
            "featuredSale": flash_sale_props(featured) if featured else None,
        })


class FlashSaleDetailView(View):
    def get(self, request, pk):
        sale = get_object_or_404(FlashSale, pk=pk)
        if not sale.is_active():
            return redirect("promotions:flash-sale-list")
        products = sale.products.published().select_related("category").prefetch_related("images")
        return render_page(request, "FlashSales/Show", {
            "flashSale": flash_sale_props(sale),
            "products": products_props(products),
        })
