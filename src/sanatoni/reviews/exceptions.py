"""Review exceptions."""


class ReviewError(Exception):
    """Base exception for review submission and voting."""


class AlreadyReviewedError(ReviewError):
    def __init__(self, message="You have already reviewed this product."):
        super().__init__(message)


class OwnReviewVoteError(ReviewError):
    def __init__(self, message="You cannot vote on your own review."):
        super().__init__(message)
