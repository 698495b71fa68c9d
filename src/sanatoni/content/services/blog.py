"""Blog services: tags, excerpts, related posts, search, scheduling and statistics."""

import calendar
import html
import logging
import math
import re
from collections import Counter
from datetime import timedelta

from django.db import transaction
from django.db.models import Count, Q, Sum
from django.db.models.functions import ExtractMonth, ExtractYear
from django.utils import timezone
from django.utils.html import strip_tags
from django.utils.text import slugify

from ..models import WORDS_PER_MINUTE, BlogCategory, BlogPost, BlogTag, PublishStatus

logger = logging.getLogger(__name__)

TAG_STOP_WORDS = frozenset(
    "the a an and or but in on at to for of with by this that these those is are was were be "
    "been being have has had do does did will would could should may might must can it he she "
    "we they you i me us him her them my your his its our their".split()
)


def published_posts():
    return BlogPost.objects.published().select_related("category", "author").prefetch_related("tags")


def sync_tags(post, tag_names):
    """Replace the post's tags, creating unknown ones by slug."""
    tags = []
    for name in tag_names:
        name = name.strip()
        if not name:
            continue
        tag, _ = BlogTag.objects.get_or_create(slug=slugify(name), defaults={"name": name})
        tags.append(tag)
    post.tags.set(tags)
    return tags


def parse_tag_names(value):
    if isinstance(value, (list, tuple)):
        return [str(name) for name in value]
    return [name for name in (value or "").split(",")]


def generate_excerpt(content, max_length=200):
    """Plain-text excerpt cut at a word boundary when one falls in the last 20%."""
    text = " ".join(html.unescape(strip_tags(content or "")).split())
    if len(text) <= max_length:
        return text
    excerpt = text[:max_length]
    last_space = excerpt.rfind(" ")
    if last_space > max_length * 0.8:
        excerpt = excerpt[:last_space]
    return excerpt + "..."


def reading_time(content):
    return max(1, math.ceil(len(strip_tags(content or "").split()) / WORDS_PER_MINUTE))


def related_posts(post, limit=5):
    """Posts sharing tags first, then the same category, then the latest."""
    others = published_posts().exclude(pk=post.pk)
    related = []
    seen = set()

    def extend(queryset):
        for candidate in queryset:
            if candidate.pk not in seen:
                seen.add(candidate.pk)
                related.append(candidate)

    tag_ids = list(post.tags.values_list("pk", flat=True))
    if tag_ids:
        extend(others.filter(tags__in=tag_ids).distinct().order_by("-published_at"))
        if len(related) >= limit:
            return related[:limit]

    if post.category_id:
        extend(others.filter(category_id=post.category_id).order_by("-published_at"))
        if len(related) >= limit:
            return related[:limit]

    extend(others.order_by("-published_at")[: limit + len(related)])
    return related[:limit]


def popular_posts(limit=10, days=30):
    since = timezone.now() - timedelta(days=days)
    return list(published_posts().filter(published_at__gte=since).order_by("-views_count")[:limit])


def featured_posts(limit=5):
    return list(published_posts().featured().order_by("-published_at")[:limit])


def search_posts(term, category_id=None, tag_id=None, date_from=None, date_to=None):
    posts = published_posts()
    if term:
        posts = posts.filter(
            Q(title__icontains=term)
            | Q(excerpt__icontains=term)
            | Q(content__icontains=term)
            | Q(tags__name__icontains=term)
        ).distinct()
    if category_id:
        posts = posts.filter(category_id=category_id)
    if tag_id:
        posts = posts.filter(tags__pk=tag_id)
    if date_from:
        posts = posts.filter(published_at__gte=date_from)
    if date_to:
        posts = posts.filter(published_at__lte=date_to)
    return posts.order_by("-published_at")


def archive():
    """Published post counts grouped by year and month, newest first."""
    rows = (
        BlogPost.objects.published()
        .annotate(year=ExtractYear("published_at"), month=ExtractMonth("published_at"))
        .values("year", "month")
        .annotate(count=Count("pk"))
        .order_by("-year", "-month")
    )
    years = {}
    for row in rows:
        entry = years.setdefault(row["year"], {"year": row["year"], "months": [], "total": 0})
        entry["months"].append({
            "month": row["month"],
            "name": calendar.month_name[row["month"]],
            "count": row["count"],
        })
        entry["total"] += row["count"]
    return list(years.values())


def statistics():
    now = timezone.now()
    published = BlogPost.objects.published()
    return {
        "total_posts": published.count(),
        "draft_posts": BlogPost.objects.filter(status=PublishStatus.DRAFT).count(),
        "scheduled_posts": BlogPost.objects.filter(status=PublishStatus.SCHEDULED).count(),
        "total_categories": BlogCategory.objects.count(),
        "total_tags": BlogTag.objects.count(),
        "total_views": BlogPost.objects.aggregate(total=Sum("views_count"))["total"] or 0,
        "posts_this_month": published.filter(
            published_at__year=now.year, published_at__month=now.month
        ).count(),
        "most_viewed_post": published.order_by("-views_count").first(),
        "latest_post": published.order_by("-published_at").first(),
    }


def schedule_post(post, publish_at):
    post.status = PublishStatus.SCHEDULED
    post.published_at = publish_at
    post.save(update_fields=["status", "published_at", "updated_at"])
    return post


@transaction.atomic
def publish_scheduled_posts():
    """Publish scheduled posts whose publication time has passed."""
    due = list(BlogPost.objects.due_for_publishing().select_for_update())
    for post in due:
        post.status = PublishStatus.PUBLISHED
        post.save(update_fields=["status", "updated_at"])
        logger.info("Published scheduled post %s", post.slug)
    return len(due)


def generate_tags_from_content(content, max_tags=10):
    words = re.findall(r"\b[a-z]{3,}\b", strip_tags(content or "").lower())
    counts = Counter(word for word in words if word not in TAG_STOP_WORDS)
    return [word.capitalize() for word, _ in counts.most_common(max_tags)]
