"""Review submission, helpful votes, moderation and rating summaries."""

import logging

from django.db import transaction
from django.db.models import Avg, Count, Q
from django.utils import timezone

from sanatoni.store.models import Order, OrderItem

from .exceptions import AlreadyReviewedError, OwnReviewVoteError
from .models import MAX_RATING, MIN_RATING, ProductReview, ReviewHelpfulVote

logger = logging.getLogger(__name__)

SORTS = {
    "newest": ("-created_at", "-pk"),
    "oldest": ("created_at", "pk"),
    "rating_high": ("-rating", "-created_at"),
    "rating_low": ("rating", "-created_at"),
    "helpful": ("-helpful_votes", "-created_at"),
}


def purchase_record(user, product):
    """Details of a delivered order containing ``product``, or None."""
    item = (
        OrderItem.objects.filter(
            order__user=user,
            order__status=Order.Status.DELIVERED,
            product=product,
        )
        .select_related("order")
        .order_by("-order__created_at")
        .first()
    )
    if item is None:
        return None
    return {
        "order_id": item.order_id,
        "order_number": item.order.order_number,
        "order_date": item.order.created_at.isoformat(),
    }


def submit_review(user, product, *, rating, comment, title=""):
    """Create a pending review; one review per customer and product."""
    if ProductReview.objects.filter(user=user, product=product).exists():
        raise AlreadyReviewedError()
    review = ProductReview.objects.create(
        user=user,
        product=product,
        rating=rating,
        title=title,
        comment=comment,
        verified_purchase_data=purchase_record(user, product),
    )
    logger.info("Review %s submitted for %s by %s", review.pk, product.sku, user.email)
    return review


@transaction.atomic
def cast_vote(user, review, is_helpful):
    if review.user_id == user.pk:
        raise OwnReviewVoteError()
    ReviewHelpfulVote.objects.update_or_create(
        user=user, review=review, defaults={"is_helpful": is_helpful}
    )
    return review.refresh_helpful_votes()


@transaction.atomic
def remove_vote(user, review):
    """Delete the user's vote; returns False when there was none."""
    deleted, _ = ReviewHelpfulVote.objects.filter(user=user, review=review).delete()
    if not deleted:
        return False
    review.refresh_helpful_votes()
    return True


def approved_reviews(product, rating=None, sort="newest"):
    reviews = product.reviews.approved().select_related("user")
    if rating:
        reviews = reviews.filter(rating=rating)
    return reviews.order_by(*SORTS.get(sort, SORTS["newest"]))


def rating_summary(product):
    """Average rating, review count and per-star breakdown of approved reviews."""
    reviews = product.reviews.approved()
    totals = reviews.aggregate(
        average=Avg("rating"),
        total=Count("pk"),
        verified=Count("pk", filter=Q(verified_purchase_data__isnull=False)),
    )
    counts = dict(reviews.order_by().values("rating").annotate(n=Count("pk")).values_list("rating", "n"))
    return {
        "average_rating": round(totals["average"] or 0, 1),
        "total_reviews": totals["total"],
        "breakdown": {str(star): counts.get(star, 0) for star in range(MAX_RATING, MIN_RATING - 1, -1)},
        "verified_purchases_count": totals["verified"],
    }


def bulk_approve(review_ids, approver):
    """Approve the pending reviews among ``review_ids``."""
    updated = ProductReview.objects.pending().filter(pk__in=review_ids).update(
        status=ProductReview.Status.APPROVED,
        approved_at=timezone.now(),
        approved_by=approver,
        updated_at=timezone.now(),
    )
    logger.info("%d reviews approved by %s", updated, approver.email)
    return updated


def bulk_reject(review_ids):
    return ProductReview.objects.filter(
        pk__in=review_ids,
        status__in=[ProductReview.Status.PENDING, ProductReview.Status.APPROVED],
    ).update(
        status=ProductReview.Status.REJECTED,
        approved_at=None,
        approved_by=None,
        updated_at=timezone.now(),
    )
