from datetime import timedelta

import pytest
from django.utils import timezone

from sanatoni.content.models import BlogCategory, BlogPost, Page, PublishStatus


@pytest.fixture
def blog_category(db):
    return BlogCategory.objects.create(name="Festivals", description="Festival guides")


@pytest.fixture
def make_post(db, blog_category):
    def factory(title="Durga Puja Shopping List", days_ago=1, **extra):
        extra.setdefault("category", blog_category)
        extra.setdefault("status", PublishStatus.PUBLISHED)
        extra.setdefault("content", "<p>Order early so everything arrives before Mahalaya.</p>")
        if extra["status"] != PublishStatus.DRAFT:
            extra.setdefault("published_at", timezone.now() - timedelta(days=days_ago))
        return BlogPost.objects.create(title=title, **extra)

    return factory


@pytest.fixture
def make_page(db):
    def factory(title="About Us", **extra):
        extra.setdefault("status", PublishStatus.PUBLISHED)
        extra.setdefault("content", "<p>Sanatoni Mart serves families across Bangladesh.</p>")
        return Page.objects.create(title=title, **extra)

    return factory
