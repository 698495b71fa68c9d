from django.urls import path

from . import views

app_name = "reviews"

urlpatterns = [
    path("products/<int:product_pk>/reviews/", views.ProductReviewsView.as_view(), name="product-reviews"),
    path("products/<int:product_pk>/reviews/stats/", views.review_stats, name="product-review-stats"),
    path("reviews/<int:pk>/vote/", views.ReviewVoteView.as_view(), name="vote"),
]
