from django.urls import path

from .views import catalog, content, dashboard, media, newsletter, orders, promotions, reviews, seo, users

app_name = "backoffice"

urlpatterns = [
    path("", dashboard.DashboardView.as_view(), name="dashboard"),
    # Orders
    path("orders/", orders.OrderListView.as_view(), name="order-list"),
    path("orders/<int:pk>/", orders.OrderDetailView.as_view(), name="order-detail"),
    path("orders/<int:pk>/status/", orders.OrderStatusView.as_view(), name="order-status"),
    path("orders/<int:pk>/invoice/", orders.OrderInvoiceView.as_view(), name="order-invoice"),
    # Catalog
    path("products/", catalog.ProductListView.as_view(), name="product-list"),
    path("products/<int:pk>/", catalog.ProductDetailView.as_view(), name="product-detail"),
    path("categories/", catalog.CategoryListView.as_view(), name="category-list"),
    path("categories/<int:pk>/", catalog.CategoryDetailView.as_view(), name="category-detail"),
    path("shipping-zones/", catalog.ShippingZoneListView.as_view(), name="shipping-zone-list"),
    path("shipping-zones/test-area/", catalog.ShippingZoneTestView.as_view(), name="shipping-zone-test"),
    path("shipping-zones/<int:pk>/", catalog.ShippingZoneDetailView.as_view(), name="shipping-zone-detail"),
    path("shipping-zones/<int:pk>/toggle/", catalog.ShippingZoneToggleView.as_view(), name="shipping-zone-toggle"),
    # Reviews
    path("reviews/", reviews.ReviewListView.as_view(), name="review-list"),
    path("reviews/statistics/", reviews.ReviewStatisticsView.as_view(), name="review-statistics"),
    path(
        "reviews/bulk-approve/", reviews.ReviewBulkView.as_view(action="approve"), name="review-bulk-approve"
    ),
    path("reviews/bulk-reject/", reviews.ReviewBulkView.as_view(action="reject"), name="review-bulk-reject"),
    path("reviews/<int:pk>/", reviews.ReviewDetailView.as_view(), name="review-detail"),
    path("reviews/<int:pk>/approve/", reviews.ReviewModerationView.as_view(action="approve"), name="review-approve"),
    path("reviews/<int:pk>/reject/", reviews.ReviewModerationView.as_view(action="reject"), name="review-reject"),
    # Promotions
    path("flash-sales/", promotions.FlashSaleListView.as_view(), name="flash-sale-list"),
    path("flash-sales/running/", promotions.running_flash_sales, name="flash-sale-running"),
    path("flash-sales/<int:pk>/", promotions.FlashSaleDetailView.as_view(), name="flash-sale-detail"),
    path("flash-sales/<int:pk>/toggle/", promotions.FlashSaleToggleView.as_view(), name="flash-sale-toggle"),
    path("coupons/", promotions.CouponListView.as_view(), name="coupon-list"),
    path("coupons/validate/", promotions.CouponValidateView.as_view(), name="coupon-validate"),
    path("coupons/generate-code/", promotions.generate_coupon_code, name="coupon-generate-code"),
    path("coupons/<int:pk>/", promotions.CouponDetailView.as_view(), name="coupon-detail"),
    path("coupons/<int:pk>/toggle/", promotions.CouponToggleView.as_view(), name="coupon-toggle"),
    # Users
    path("users/", users.UserListView.as_view(), name="user-list"),
    path("users/<uuid:pk>/", users.UserDetailView.as_view(), name="user-detail"),
    path("users/<uuid:pk>/roles/", users.UserRolesView.as_view(), name="user-roles"),
    path("users/<uuid:pk>/status/", users.UserStatusView.as_view(), name="user-status"),
    # Blog
    path("blog/posts/", content.PostListView.as_view(), name="post-list"),
    path("blog/posts/bulk-action/", content.PostBulkActionView.as_view(), name="post-bulk"),
    path("blog/posts/<int:pk>/", content.PostDetailView.as_view(), name="post-detail"),
    path("blog/posts/<int:pk>/duplicate/", content.PostDuplicateView.as_view(), name="post-duplicate"),
    path("blog/statistics/", content.blog_statistics, name="blog-statistics"),
    path("blog/categories/", content.BlogCategoryListView.as_view(), name="blog-category-list"),
    path("blog/categories/<int:pk>/", content.BlogCategoryDetailView.as_view(), name="blog-category-detail"),
    # Pages
    path("pages/", content.PageListView.as_view(), name="page-list"),
    path("pages/import/", content.PageImportView.as_view(), name="page-import"),
    path("pages/<int:pk>/", content.PageDetailView.as_view(), name="page-detail"),
    path("pages/<int:pk>/duplicate/", content.PageDuplicateView.as_view(), name="page-duplicate"),
    path("pages/<int:pk>/export/", content.export_page, name="page-export"),
    path("pages/<int:page_pk>/sections/", content.SectionListView.as_view(), name="section-list"),
    path("pages/<int:page_pk>/sections/reorder/", content.SectionReorderView.as_view(), name="section-reorder"),
    path("pages/<int:page_pk>/sections/<int:pk>/", content.SectionDetailView.as_view(), name="section-detail"),
    path(
        "pages/<int:page_pk>/sections/<int:pk>/duplicate/",
        content.SectionDuplicateView.as_view(),
        name="section-duplicate",
    ),
    # Media
    path("media/", media.MediaListView.as_view(), name="media-list"),
    path("media/bulk-action/", media.MediaBulkActionView.as_view(), name="media-bulk"),
    path("media/select/", media.media_selection, name="media-select"),
    path("media/<int:pk>/", media.MediaDetailView.as_view(), name="media-detail"),
    # Newsletter
    path("newsletter/subscribers/", newsletter.SubscriberListView.as_view(), name="subscriber-list"),
    path(
        "newsletter/subscribers/<int:pk>/", newsletter.SubscriberDetailView.as_view(), name="subscriber-detail"
    ),
    # SEO
    path("seo/", seo.SeoDashboardView.as_view(), name="seo-index"),
    path("seo/analyze/", seo.SeoAnalyzeView.as_view(), name="seo-analyze"),
    path("seo/settings/", seo.SeoSettingsView.as_view(), name="seo-settings"),
    path("seo/generate-sitemap/", seo.SitemapGenerateView.as_view(), name="seo-sitemap"),
    path("seo/preview-meta/", seo.SeoPreviewView.as_view(), name="seo-preview"),
    path("seo/optimize/", seo.SeoOptimizeView.as_view(), name="seo-optimize"),
]
