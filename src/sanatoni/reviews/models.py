"""Product reviews with moderation and helpful votes."""

from django.conf import settings
from django.db import models
from django.utils import timezone

MIN_RATING = 1
MAX_RATING = 5


class ReviewQuerySet(models.QuerySet):
    def approved(self):
        return self.filter(status=ProductReview.Status.APPROVED)

    def pending(self):
        return self.filter(status=ProductReview.Status.PENDING)

    def rejected(self):
        return self.filter(status=ProductReview.Status.REJECTED)

    def verified_purchase(self):
        return self.filter(verified_purchase_data__isnull=False)


class ProductReview(models.Model):
    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="reviews")
    product = models.ForeignKey("catalog.Product", on_delete=models.CASCADE, related_name="reviews")
    rating = models.PositiveSmallIntegerField()
    title = models.CharField(max_length=255, blank=True)
    comment = models.TextField()
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    helpful_votes = models.PositiveIntegerField(default=0)
    verified_purchase_data = models.JSONField(null=True, blank=True)
    approved_at = models.DateTimeField(null=True, blank=True)
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ReviewQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at", "-pk"]
        constraints = [
            models.UniqueConstraint(fields=["user", "product"], name="unique_review_per_product"),
        ]
        indexes = [
            models.Index(fields=["product", "status"], name="review_product_status_idx"),
        ]

    def __str__(self):
        return f"{self.rating}/5 for {self.product}"

    @property
    def is_verified_purchase(self):
        return bool(self.verified_purchase_data)

    @property
    def reviewer_name(self):
        return self.user.name if self.user_id else "Anonymous"

    def approve(self, approver=None):
        self.status = self.Status.APPROVED
        self.approved_at = timezone.now()
        self.approved_by = approver
        self.save(update_fields=["status", "approved_at", "approved_by", "updated_at"])

    def reject(self):
        self.status = self.Status.REJECTED
        self.approved_at = None
        self.approved_by = None
        self.save(update_fields=["status", "approved_at", "approved_by", "updated_at"])

    def refresh_helpful_votes(self):
        """Store the number of helpful votes on the review."""
        self.helpful_votes = self.votes.filter(is_helpful=True).count()
        self.save(update_fields=["helpful_votes", "updated_at"])
        return self.helpful_votes

    def unhelpful_votes(self):
        return self.votes.filter(is_helpful=False).count()

    def vote_of(self, user):
        """The user's vote as True/False, or None when they have not voted."""
        if not user.is_authenticated:
            return None
        vote = self.votes.filter(user=user).first()
        return vote.is_helpful if vote else None


class ReviewHelpfulVote(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="review_votes")
    review = models.ForeignKey(ProductReview, on_delete=models.CASCADE, related_name="votes")
    is_helpful = models.BooleanField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "review"], name="unique_review_vote"),
        ]

    def __str__(self):
        return f"{'Helpful' if self.is_helpful else 'Not helpful'} vote on review {self.review_id}"
