"""Storefront review views: listing, submission and helpful votes."""

from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views import View

from sanatoni.catalog.models import Product
from sanatoni.core.access import unauthenticated
from sanatoni.core.http import request_data
from sanatoni.core.mixins import CustomerMixin
from sanatoni.core.pages import flash_response, form_errors, paginate, validation_error

from .exceptions import ReviewError
from .forms import ReviewForm, ReviewListForm, VoteForm
from .models import ProductReview
from .props import review_props
from .services import approved_reviews, cast_vote, rating_summary, remove_vote, submit_review

REVIEWS_PER_PAGE = 10


def published_product(pk):
    return get_object_or_404(Product.objects.published(), pk=pk)


class ProductReviewsView(View):
    """Approved reviews of a product; signed-in customers post new ones here."""

    def get(self, request, product_pk):
        product = published_product(product_pk)
        form = ReviewListForm(request.GET)
        filters = form.cleaned_data if form.is_valid() else {}
        reviews = approved_reviews(product, rating=filters.get("rating"), sort=filters.get("sort") or "newest")
        page = paginate(
            request,
            reviews,
            filters.get("per_page") or REVIEWS_PER_PAGE,
            lambda review: review_props(review, request.user),
        )
        return JsonResponse({"reviews": page, "stats": rating_summary(product)})

    def post(self, request, product_pk):
        if not request.user.is_authenticated:
            return unauthenticated(request)
        product = published_product(product_pk)
        form = ReviewForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form))

        try:
            review = submit_review(request.user, product, **form.cleaned_data)
        except ReviewError as error:
            return validation_error(request, {"review": [str(error)]}, message=str(error))
        return flash_response(
            request,
            "Review submitted successfully! It will be visible after approval.",
            status=201,
            review=review_props(review),
        )


def review_stats(request, product_pk):
    return JsonResponse(rating_summary(published_product(product_pk)))


class ReviewVoteView(CustomerMixin, View):
    """Mark an approved review helpful or not, or take the vote back."""

    def dispatch(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return self.handle_no_permission()
        self.review = get_object_or_404(ProductReview.objects.approved(), pk=kwargs["pk"])
        return super().dispatch(request, *args, **kwargs)

    def post(self, request, pk):
        form = VoteForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form))
        try:
            count = cast_vote(request.user, self.review, form.cleaned_data["is_helpful"])
        except ReviewError as error:
            return validation_error(request, {"review": [str(error)]}, message=str(error))
        return flash_response(
            request,
            "Vote recorded successfully.",
            helpful_votes_count=count,
            user_vote=form.cleaned_data["is_helpful"],
        )

    def delete(self, request, pk):
        if not remove_vote(request.user, self.review):
            return flash_response(request, "No vote found to remove.", messages.ERROR, status=404)
        return flash_response(
            request,
            "Vote removed successfully.",
            helpful_votes_count=self.review.helpful_votes,
            user_vote=None,
        )
