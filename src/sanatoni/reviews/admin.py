from django.contrib import admin

from .models import ProductReview, ReviewHelpfulVote


class ReviewHelpfulVoteInline(admin.TabularInline):
    model = ReviewHelpfulVote
    extra = 0


@admin.register(ProductReview)
class ProductReviewAdmin(admin.ModelAdmin):
    list_display = ["product", "user", "rating", "status", "helpful_votes", "created_at"]
    list_filter = ["status", "rating"]
    search_fields = ["title", "comment", "product__name", "user__email"]
    raw_id_fields = ["user", "product", "approved_by"]
    inlines = [ReviewHelpfulVoteInline]
