"""Product review moderation."""

import logging

from django.db.models import Q
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.urls import reverse
from django.views import View

from sanatoni.core.http import request_data
from sanatoni.core.pages import flash_response, form_errors, paginate, render_page, validation_error
from sanatoni.reviews.models import ProductReview
from sanatoni.reviews.props import review_admin_props
from sanatoni.reviews.services import bulk_approve, bulk_reject

from ..forms import BulkReviewForm
from ..mixins import BackofficeMixin
from ..props import choice_options
from ..services import review_counts, review_statistics

logger = logging.getLogger(__name__)

PER_PAGE = 15


class ReviewListView(BackofficeMixin, View):
    required_permissions = ("view_products",)

    def get(self, request):
        reviews = ProductReview.objects.select_related("product", "user", "approved_by")
        filters = {
            key: request.GET.get(key, "")
            for key in ("search", "status", "rating", "product_id", "verified_only")
        }
        if filters["search"]:
            term = filters["search"]
            reviews = reviews.filter(
                Q(title__icontains=term)
                | Q(comment__icontains=term)
                | Q(product__name__icontains=term)
                | Q(user__name__icontains=term)
                | Q(user__email__icontains=term)
            )
        if filters["status"] in ProductReview.Status.values:
            reviews = reviews.filter(status=filters["status"])
        if filters["rating"].isdigit():
            reviews = reviews.filter(rating=int(filters["rating"]))
        if filters["product_id"].isdigit():
            reviews = reviews.filter(product_id=int(filters["product_id"]))
        if filters["verified_only"] in ("1", "true"):
            reviews = reviews.verified_purchase()

        return render_page(request, "Admin/Reviews/Index", {
            "reviews": paginate(request, reviews, PER_PAGE, review_admin_props),
            "filters": filters,
            "statusOptions": choice_options(ProductReview.Status.choices),
            "stats": review_counts(),
        })


class ReviewDetailView(BackofficeMixin, View):
    required_permissions = ("view_products",)
    method_permissions = {"delete": ("delete_products",)}

    def dispatch(self, request, *args, **kwargs):
        self.review = get_object_or_404(
            ProductReview.objects.select_related("product", "user", "approved_by"), pk=kwargs["pk"]
        )
        return super().dispatch(request, *args, **kwargs)

    def get(self, request, pk):
        return render_page(request, "Admin/Reviews/Show", {
            "review": review_admin_props(self.review, detail=True),
        })

    def delete(self, request, pk):
        product_name = self.review.product.name
        self.review.delete()
        logger.info("Review %s deleted by %s", pk, request.user.email)
        return flash_response(
            request,
            f"Review for '{product_name}' deleted successfully.",
            redirect_to=reverse("backoffice:review-list"),
        )


class ReviewModerationView(BackofficeMixin, View):
    """Approve or reject one review."""

    required_permissions = ("edit_products",)
    action = None

    def post(self, request, pk):
        review = get_object_or_404(ProductReview.objects.select_related("product", "user"), pk=pk)
        if self.action == "approve":
            review.approve(request.user)
        else:
            review.reject()
        logger.info("Review %s %s by %s", review.pk, review.status, request.user.email)
        return flash_response(
            request,
            f"Review {review.status} successfully.",
            review=review_admin_props(review),
        )


class ReviewBulkView(BackofficeMixin, View):
    required_permissions = ("edit_products",)
    action = None

    def post(self, request):
        form = BulkReviewForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:review-list"))

        ids = [review.pk for review in form.cleaned_data["review_ids"]]
        if self.action == "approve":
            count = bulk_approve(ids, request.user)
            verb = "approved"
        else:
            count = bulk_reject(ids)
            verb = "rejected"
        return flash_response(
            request,
            f"{count} reviews {verb} successfully.",
            redirect_to=reverse("backoffice:review-list"),
            count=count,
        )


class ReviewStatisticsView(BackofficeMixin, View):
    required_permissions = ("view_products",)

    def get(self, request):
        return JsonResponse(review_statistics())
