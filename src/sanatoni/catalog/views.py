"""Storefront catalog views."""

from django.conf import settings
from django.db.models import F
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views import View
from django.views.decorators.http import require_POST

from sanatoni.core.pages import paginate, render_page
from sanatoni.promotions.models import FlashSale
from sanatoni.reviews.services import rating_summary

from .models import Category, Product
from .props import category_props, flash_sale_summary, products_props
from .services import (
    autocomplete,
    categories_with_counts,
    clear_recently_viewed,
    filter_products,
    recently_viewed,
    related_products,
    remember_product,
)


def per_page():
    return settings.STORE.get("PRODUCTS_PER_PAGE", 12)


def filter_values(request):
    return {
        key: request.GET.get(key, "")
        for key in ("category", "min_price", "max_price", "search", "sort", "order")
    }


class HomeView(View):
    """Storefront home page."""

    def get(self, request):
        published = Product.objects.published().select_related("category").prefetch_related("images")

        flash_sale = FlashSale.objects.running().order_by("-is_featured", "end_date").first()
        flash_products = []
        if flash_sale:
            flash_products = products_props(
                flash_sale.products.published().select_related("category").prefetch_related("images")[:6]
            )

        categories = [
            category_props(category, category.products_count)
            for category in categories_with_counts().order_by("-products_count")[:8]
        ]

        return render_page(request, "Welcome", {
            "featuredProducts": products_props(published.featured()[:8]),
            "newArrivals": products_props(published.order_by("-created_at")[:8]),
            "specialOffers": products_props(
                published.filter(sale_price__gt=0, sale_price__lt=F("price"))[:6]
            ),
            "activeFlashSale": flash_sale_summary(flash_sale),
            "flashSaleProducts": flash_products,
            "categories": categories,
            "stats": {
                "total_products": published.count(),
                "categories": Category.objects.active().count(),
            },
        })


class ProductListView(View):
    """Product listing with filters, sorting and pagination."""

    def get(self, request):
        products = filter_products(request.GET)
        return render_page(request, "Products/Index", {
            "products": paginate(request, products, per_page(), products_props, many=True),
            "categories": [
                category_props(category, category.products_count)
                for category in categories_with_counts()
            ],
            "filters": filter_values(request),
        })


class ProductDetailView(View):
    def get(self, request, slug):
        product = get_object_or_404(
            Product.objects.published().select_related("category").prefetch_related("images"),
            slug=slug,
        )
        remember_product(request, product)
        return render_page(request, "Products/Show", {
            "product": products_props([product], detail=True)[0],
            "relatedProducts": products_props(related_products(product)),
            "recentlyViewed": products_props(recently_viewed(request, limit=8, exclude=product.pk)),
            "reviewStats": rating_summary(product),
        })


class CategoryProductsView(View):
    def get(self, request, slug):
        category = get_object_or_404(Category.objects.active(), slug=slug)
        params = request.GET.copy()
        params["category"] = str(category.pk)
        products = filter_products(params)
        return render_page(request, "Products/Category", {
            "category": category_props(category),
            "subcategories": [category_props(child) for child in category.children.active()],
            "products": paginate(request, products, per_page(), products_props, many=True),
            "filters": filter_values(request),
        })


def product_search(request):
    """Autocomplete suggestions for the search box."""
    term = request.GET.get("q", "").strip()
    results = products_props(autocomplete(term))
    return JsonResponse({"products": results, "query": term})


class RecentlyViewedView(View):
    def get(self, request):
        limit = request.GET.get("limit", "10")
        limit = min(int(limit), 20) if limit.isdigit() else 10
        return JsonResponse({"products": products_props(recently_viewed(request, limit=limit))})

    def delete(self, request):
        clear_recently_viewed(request)
        return JsonResponse({"success": True})


@require_POST
def track_product_view(request, pk):
    product = get_object_or_404(Product.objects.published(), pk=pk)
    remember_product(request, product)
    return JsonResponse({"success": True})
