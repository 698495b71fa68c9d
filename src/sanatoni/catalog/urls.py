from django.urls import path

from . import views

app_name = "catalog"

urlpatterns = [
    path("products/", views.ProductListView.as_view(), name="product-list"),
    path("products/<slug:slug>/", views.ProductDetailView.as_view(), name="product-detail"),
    path("categories/<slug:slug>/products/", views.CategoryProductsView.as_view(), name="category-products"),
    path("search/products/", views.product_search, name="product-search"),
    path("api/products/recently-viewed/", views.RecentlyViewedView.as_view(), name="recently-viewed"),
    path("api/products/<int:pk>/track-view/", views.track_product_view, name="track-view"),
]
