"""Tests for review submission, helpful votes and rating summaries."""

import pytest

from sanatoni.reviews.exceptions import AlreadyReviewedError, OwnReviewVoteError
from sanatoni.reviews.models import ProductReview
from sanatoni.reviews.services import (
    approved_reviews,
    bulk_approve,
    bulk_reject,
    cast_vote,
    rating_summary,
    remove_vote,
    submit_review,
)


@pytest.mark.django_db
class TestSubmitReview:
    def test_new_review_waits_for_approval(self, customer, product):
        review = submit_review(customer, product, rating=4, comment="Lovely brass work.", title="Nice")
        assert review.status == ProductReview.Status.PENDING
        assert not review.is_verified_purchase
        assert rating_summary(product)["total_reviews"] == 0

    def test_delivered_order_marks_verified_purchase(self, customer, product, delivered_order):
        review = submit_review(customer, product, rating=5, comment="Exactly as pictured.")
        assert review.is_verified_purchase
        assert review.verified_purchase_data["order_number"] == delivered_order.order_number

    def test_pending_order_is_not_a_verified_purchase(self, customer, product, make_request, address, shipping_zone):
        from sanatoni.store.cart import Cart
        from sanatoni.store.services import place_order

        cart = Cart(make_request(user=customer))
        cart.add(product, 1)
        place_order(
            cart,
            customer_name="Rahim Uddin",
            customer_email=customer.email,
            customer_phone="01700000001",
            shipping_address=address,
        )
        review = submit_review(customer, product, rating=3, comment="Still waiting on it.")
        assert review.verified_purchase_data is None

    def test_one_review_per_product(self, customer, product):
        submit_review(customer, product, rating=4, comment="Lovely brass work.")
        with pytest.raises(AlreadyReviewedError):
            submit_review(customer, product, rating=1, comment="Changed my mind.")


@pytest.mark.django_db
class TestVotes:
    def test_vote_counts_helpful_only(self, make_review, customer, make_user):
        review = make_review()
        assert cast_vote(customer, review, True) == 1
        assert cast_vote(make_user(email="other@example.com"), review, False) == 1
        assert review.unhelpful_votes() == 1

    def test_changing_a_vote_replaces_it(self, make_review, customer):
        review = make_review()
        cast_vote(customer, review, True)
        assert cast_vote(customer, review, False) == 0
        assert review.votes.count() == 1
        assert review.vote_of(customer) is False

    def test_cannot_vote_on_own_review(self, make_review, reviewer):
        with pytest.raises(OwnReviewVoteError):
            cast_vote(reviewer, make_review(), True)

    def test_remove_vote(self, make_review, customer):
        review = make_review()
        assert remove_vote(customer, review) is False
        cast_vote(customer, review, True)
        assert remove_vote(customer, review) is True
        review.refresh_from_db()
        assert review.helpful_votes == 0


@pytest.mark.django_db
class TestListingAndSummary:
    def test_only_approved_reviews_are_listed(self, make_review, make_user, product):
        shown = make_review()
        make_review(user=make_user(email="a@example.com"), status=ProductReview.Status.PENDING)
        make_review(user=make_user(email="b@example.com"), status=ProductReview.Status.REJECTED)
        assert list(approved_reviews(product)) == [shown]

    def test_sorting_and_rating_filter(self, make_review, make_user, product):
        low = make_review(rating=2)
        high = make_review(user=make_user(email="a@example.com"), rating=5)
        assert list(approved_reviews(product, sort="rating_low")) == [low, high]
        assert list(approved_reviews(product, sort="rating_high")) == [high, low]
        assert list(approved_reviews(product, rating=2)) == [low]

    def test_summary(self, make_review, make_user, product):
        make_review(rating=5)
        make_review(user=make_user(email="a@example.com"), rating=4)
        make_review(user=make_user(email="b@example.com"), rating=4, verified_purchase_data={"order_id": 1})
        make_review(user=make_user(email="c@example.com"), rating=1, status=ProductReview.Status.PENDING)

        summary = rating_summary(product)
        assert summary["average_rating"] == 4.3
        assert summary["total_reviews"] == 3
        assert summary["breakdown"] == {"5": 1, "4": 2, "3": 0, "2": 0, "1": 0}
        assert summary["verified_purchases_count"] == 1

    def test_summary_without_reviews(self, product):
        summary = rating_summary(product)
        assert summary["average_rating"] == 0
        assert list(summary["breakdown"]) == ["5", "4", "3", "2", "1"]


@pytest.mark.django_db
class TestModeration:
    def test_bulk_approve_skips_rejected(self, make_review, make_user, manager_user):
        pending = make_review(status=ProductReview.Status.PENDING)
        rejected = make_review(user=make_user(email="a@example.com"), status=ProductReview.Status.REJECTED)

        assert bulk_approve([pending.pk, rejected.pk], manager_user) == 1
        pending.refresh_from_db()
        assert pending.status == ProductReview.Status.APPROVED
        assert pending.approved_by == manager_user
        rejected.refresh_from_db()
        assert rejected.status == ProductReview.Status.REJECTED

    def test_bulk_reject_clears_approval(self, make_review, manager_user):
        review = make_review(status=ProductReview.Status.PENDING)
        review.approve(manager_user)
        assert bulk_reject([review.pk]) == 1
        review.refresh_from_db()
        assert review.status == ProductReview.Status.REJECTED
        assert review.approved_by is None
