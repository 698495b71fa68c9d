"""Back office dashboard statistics."""

from datetime import timedelta

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db.models import Avg, Count, Q, Sum
from django.utils import timezone

from sanatoni.catalog.models import Category, Product
from sanatoni.core.models import ADMIN, MANAGER, SALESPERSON
from sanatoni.promotions.pricing import round_money
from sanatoni.reviews.models import MAX_RATING, MIN_RATING, ProductReview
from sanatoni.store.models import Order

User = get_user_model()

REVENUE_STATUSES = (Order.Status.SHIPPED, Order.Status.DELIVERED)


def revenue(orders):
    return round_money(orders.filter(status__in=REVENUE_STATUSES).aggregate(total=Sum("total"))["total"])


def month_start(moment, months_back=0):
    year, month = moment.year, moment.month - months_back
    while month <= 0:
        month += 12
        year -= 1
    return moment.replace(year=year, month=month, day=1, hour=0, minute=0, second=0, microsecond=0)


def business_stats(now=None):
    now = timezone.localtime(now)
    threshold = settings.STORE.get("LOW_STOCK_THRESHOLD", 10)
    this_month = Order.objects.filter(created_at__gte=month_start(now))
    return {
        "total_revenue": revenue(Order.objects.all()),
        "monthly_revenue": revenue(this_month),
        "total_orders": Order.objects.count(),
        "pending_orders": Order.objects.filter(status=Order.Status.PENDING).count(),
        "total_products": Product.objects.count(),
        "active_products": Product.objects.filter(is_active=True).count(),
        "total_categories": Category.objects.count(),
        "low_stock_products": Product.objects.filter(is_active=True).low_stock(threshold).count(),
    }


def user_stats():
    def with_role(name):
        return User.objects.filter(roles__name=name).distinct().count()

    return {
        "total_users": User.objects.count(),
        "active_users": User.objects.filter(status=User.Status.ACTIVE).count(),
        "admin_users": with_role(ADMIN),
        "manager_users": with_role(MANAGER),
        "salesperson_users": with_role(SALESPERSON),
    }


def monthly_sales(months=6, now=None):
    """Revenue and order counts per calendar month, oldest first."""
    now = timezone.localtime(now)
    series = []
    for offset in range(months - 1, -1, -1):
        start = month_start(now, offset)
        end = month_start(now, offset - 1) if offset else None
        orders = Order.objects.filter(created_at__gte=start)
        if end is not None:
            orders = orders.filter(created_at__lt=end)
        series.append({
            "month": start.strftime("%b %Y"),
            "revenue": float(revenue(orders)),
            "orders": orders.count(),
        })
    return series


def weekly_sales(days=7, now=None):
    now = timezone.localtime(now)
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    series = []
    for offset in range(days - 1, -1, -1):
        start = today - timedelta(days=offset)
        orders = Order.objects.filter(created_at__gte=start, created_at__lt=start + timedelta(days=1))
        series.append({
            "date": f"{start:%b} {start.day}",
            "day": start.strftime("%a"),
            "revenue": float(revenue(orders)),
            "orders": orders.count(),
        })
    return series


def top_categories(limit=5):
    categories = Category.objects.annotate(
        active_products=Count("products", filter=Q(products__is_active=True))
    ).order_by("-active_products", "name")[:limit]
    return [
        {"name": category.name, "products_count": category.active_products}
        for category in categories
    ]


def recent_orders(limit=5):
    return [
        {
            "id": order.pk,
            "order_number": order.order_number,
            "total": order.total,
            "status": order.status,
            "customer_name": order.user.name if order.user_id else "Guest",
            "created_at": order.created_at,
        }
        for order in Order.objects.select_related("user").order_by("-created_at")[:limit]
    ]


def order_status_distribution():
    counts = dict(Order.objects.values_list("status").annotate(count=Count("pk")))
    return {status: counts.get(status, 0) for status, _label in Order.Status.choices}


def review_counts():
    approved = Q(status=ProductReview.Status.APPROVED)
    totals = ProductReview.objects.aggregate(
        total=Count("pk"),
        pending=Count("pk", filter=Q(status=ProductReview.Status.PENDING)),
        approved=Count("pk", filter=approved),
        rejected=Count("pk", filter=Q(status=ProductReview.Status.REJECTED)),
        average=Avg("rating", filter=approved),
        votes=Sum("helpful_votes"),
    )
    return {
        "total": totals["total"],
        "pending": totals["pending"],
        "approved": totals["approved"],
        "rejected": totals["rejected"],
        "avg_rating": round(totals["average"] or 0, 2),
        "total_votes": totals["votes"] or 0,
    }


def review_statistics(now=None):
    """Moderation figures, rating distribution and monthly review trends."""
    now = timezone.localtime(now)
    reviews = ProductReview.objects.all()
    approved = reviews.approved()
    this_month, last_month = month_start(now), month_start(now, 1)
    counts = review_counts()
    distribution = dict(approved.order_by().values("rating").annotate(n=Count("pk")).values_list("rating", "n"))

    top_rated = (
        Product.objects.annotate(
            average_rating=Avg("reviews__rating", filter=Q(reviews__status=ProductReview.Status.APPROVED)),
            reviews_count=Count("reviews", filter=Q(reviews__status=ProductReview.Status.APPROVED)),
        )
        .filter(reviews_count__gt=0)
        .order_by("-average_rating", "-reviews_count", "name")[:6]
    )

    trends = []
    for offset in range(5, -1, -1):
        start = month_start(now, offset)
        month = reviews.filter(created_at__gte=start)
        if offset:
            month = month.filter(created_at__lt=month_start(now, offset - 1))
        trends.append({
            "month": start.strftime("%b %Y"),
            "reviews": month.count(),
            "average_rating": round(month.aggregate(average=Avg("rating"))["average"] or 0, 2),
        })

    return {
        "total_reviews": counts["total"],
        "pending_reviews": counts["pending"],
        "approved_reviews": counts["approved"],
        "rejected_reviews": counts["rejected"],
        "average_rating": counts["avg_rating"],
        "total_helpful_votes": counts["total_votes"],
        "verified_reviews": reviews.verified_purchase().count(),
        "reviews_this_month": reviews.filter(created_at__gte=this_month).count(),
        "reviews_last_month": reviews.filter(created_at__gte=last_month, created_at__lt=this_month).count(),
        "rating_distribution": {
            str(star): distribution.get(star, 0) for star in range(MAX_RATING, MIN_RATING - 1, -1)
        },
        "top_rated_products": [
            {
                "id": product.pk,
                "name": product.name,
                "slug": product.slug,
                "average_rating": round(product.average_rating, 2),
                "reviews_count": product.reviews_count,
            }
            for product in top_rated
        ],
        "recent_activity": [
            {
                "id": review.pk,
                "product": review.product.name,
                "reviewer_name": review.reviewer_name,
                "rating": review.rating,
                "status": review.status,
                "created_at": review.created_at,
            }
            for review in reviews.select_related("product", "user")[:10]
        ],
        "monthly_trends": trends,
    }
