"""Serializers for product reviews."""


def review_props(review, user=None):
    data = {
        "id": review.pk,
        "product_id": review.product_id,
        "rating": review.rating,
        "title": review.title,
        "comment": review.comment,
        "status": review.status,
        "reviewer_name": review.reviewer_name,
        "helpful_votes": review.helpful_votes,
        "is_verified_purchase": review.is_verified_purchase,
        "created_at": review.created_at,
        "created_at_formatted": f"{review.created_at:%B} {review.created_at.day}, {review.created_at.year}",
    }
    if user is not None:
        data["user_vote"] = review.vote_of(user)
    return data


def review_admin_props(review, detail=False):
    data = review_props(review)
    data.update({
        "product": {"id": review.product_id, "name": review.product.name, "slug": review.product.slug},
        "user": {"id": str(review.user_id), "name": review.user.name, "email": review.user.email},
        "verified_purchase_data": review.verified_purchase_data,
        "approved_at": review.approved_at,
        "approved_by": review.approved_by.name if review.approved_by_id else None,
    })
    if detail:
        data["unhelpful_votes"] = review.unhelpful_votes()
        data["votes"] = [
            {"user": vote.user.name, "is_helpful": vote.is_helpful, "created_at": vote.created_at}
            for vote in review.votes.select_related("user")
        ]
    return data
