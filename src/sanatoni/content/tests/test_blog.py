"""Tests for blog models, services, commands and pages."""

from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.urls import reverse
from django.utils import timezone

from sanatoni.content.models import TAG_COLORS, BlogCategory, BlogPost, BlogTag, PublishStatus
from sanatoni.content.services import blog

PAGE = {"HTTP_X_INERTIA": "true"}


@pytest.mark.django_db
class TestBlogModels:
    def test_excerpt_and_publish_date_are_filled(self, blog_category):
        post = BlogPost.objects.create(
            title="Aarti at Home",
            content="<p>The flame is circled <b>clockwise</b>.</p>",
            status=PublishStatus.PUBLISHED,
        )
        assert post.slug == "aarti-at-home"
        assert post.excerpt == "The flame is circled clockwise."
        assert post.published_at is not None
        assert post.is_published

    def test_reading_time(self, make_post):
        post = make_post(content="<p>" + "word " * 401 + "</p>")
        assert post.reading_time == 3
        assert make_post(title="Short", content="").reading_time == 1

    def test_future_post_is_not_published(self, make_post):
        post = make_post(published_at=timezone.now() + timedelta(days=1))
        assert not post.is_published
        assert not BlogPost.objects.published().exists()

    def test_tag_color_is_stable(self):
        tag = BlogTag(name="Diwali")
        assert tag.effective_color in TAG_COLORS
        assert tag.effective_color == BlogTag(name="Diwali").effective_color
        assert BlogTag(name="Diwali", color="#000000").effective_color == "#000000"

    def test_previous_and_next(self, make_post):
        older = make_post(title="Older", days_ago=3)
        middle = make_post(title="Middle", days_ago=2)
        newer = make_post(title="Newer", days_ago=1)
        assert middle.previous_post() == older
        assert middle.next_post() == newer

    def test_increment_views(self, make_post):
        post = make_post()
        post.increment_views()
        post.increment_views()
        assert post.views_count == 2

    def test_category_meta_defaults(self, blog_category):
        assert blog_category.effective_meta_title == "Festivals"
        assert blog_category.effective_meta_description == "Festival guides"


class TestBlogText:
    def test_short_excerpt_is_plain_text(self):
        assert blog.generate_excerpt("<p>Fish &amp; rice</p>") == "Fish & rice"

    def test_long_excerpt_cuts_at_word(self):
        text = "brass " * 50
        excerpt = blog.generate_excerpt(text, max_length=50)
        assert excerpt.endswith("...")
        assert len(excerpt) <= 53
        assert not excerpt[:-3].endswith(" ")

    def test_generated_tags_skip_stop_words(self):
        tags = blog.generate_tags_from_content("The diya and the diya and the incense", max_tags=2)
        assert tags == ["Diya", "Incense"]


@pytest.mark.django_db
class TestBlogServices:
    def test_sync_tags_reuses_by_slug(self, make_post):
        BlogTag.objects.create(name="Durga Puja")
        post = make_post()
        tags = blog.sync_tags(post, ["durga puja", "Sweets", " "])
        assert [tag.name for tag in tags] == ["Durga Puja", "Sweets"]
        assert BlogTag.objects.count() == 2

    def test_related_posts_prefer_shared_tags(self, make_post, blog_category):
        post = make_post(title="Main")
        tagged = make_post(title="Tagged", category=None, days_ago=5)
        same_category = make_post(title="Same category", days_ago=2)
        make_post(title="Draft", status=PublishStatus.DRAFT)
        blog.sync_tags(post, ["Diwali"])
        blog.sync_tags(tagged, ["Diwali"])
        assert blog.related_posts(post, limit=2) == [tagged, same_category]

    def test_search_matches_tags(self, make_post):
        post = make_post(title="Lamps")
        make_post(title="Other")
        blog.sync_tags(post, ["Kartik"])
        assert list(blog.search_posts("kartik")) == [post]

    def test_archive(self, make_post):
        make_post(title="One", days_ago=0)
        make_post(title="Two", days_ago=0)
        archive = blog.archive()
        assert archive[0]["total"] == 2
        assert archive[0]["months"][0]["count"] == 2

    def test_statistics(self, make_post):
        make_post(views_count=5)
        make_post(title="Draft", status=PublishStatus.DRAFT)
        stats = blog.statistics()
        assert stats["total_posts"] == 1
        assert stats["draft_posts"] == 1
        assert stats["total_views"] == 5

    def test_publish_scheduled_command(self, make_post):
        due = make_post(title="Due", status=PublishStatus.SCHEDULED)
        later = make_post(title="Later", status=PublishStatus.SCHEDULED)
        blog.schedule_post(later, timezone.now() + timedelta(days=2))

        out = StringIO()
        call_command("publish_scheduled_posts", stdout=out)
        assert "Published 1 scheduled posts" in out.getvalue()
        due.refresh_from_db()
        later.refresh_from_db()
        assert due.status == PublishStatus.PUBLISHED
        assert later.status == PublishStatus.SCHEDULED

    def test_seed_blog_is_idempotent(self):
        call_command("seed_blog", stdout=StringIO())
        call_command("seed_blog", stdout=StringIO())
        assert BlogCategory.objects.count() == 5
        assert BlogPost.objects.published().count() == 5
        assert BlogPost.objects.get(slug="caring-for-brass-items").tags.count() == 3


@pytest.mark.django_db
class TestBlogPages:
    def test_index_filters_by_tag(self, client, make_post):
        tagged = make_post(title="Diwali Lamps")
        make_post(title="Other")
        blog.sync_tags(tagged, ["Diwali"])
        props = client.get(reverse("content:blog-index"), {"tag": "diwali"}, **PAGE).json()["props"]
        assert [post["title"] for post in props["posts"]["data"]] == ["Diwali Lamps"]
        assert props["popularTags"][0]["name"] == "Diwali"

    def test_sidebar_counts_published_posts(self, client, make_post):
        make_post()
        make_post(title="Draft", status=PublishStatus.DRAFT)
        props = client.get(reverse("content:blog-index"), **PAGE).json()["props"]
        assert props["categories"][0]["posts_count"] == 1

    def test_post_detail_counts_views(self, client, make_post):
        post = make_post()
        props = client.get(reverse("content:post-detail", args=[post.slug]), **PAGE).json()["props"]
        assert props["post"]["views_count"] == 1
        assert props["seo"]["meta"]["title"] == "Durga Puja Shopping List"
        assert props["seo"]["structuredData"]["@type"] == "Article"

    def test_draft_post_is_hidden(self, client, make_post):
        post = make_post(status=PublishStatus.DRAFT)
        assert client.get(reverse("content:post-detail", args=[post.slug])).status_code == 404

    def test_inactive_category(self, client, blog_category):
        blog_category.is_active = False
        blog_category.save()
        assert client.get(reverse("content:blog-category", args=[blog_category.slug])).status_code == 404

    def test_tag_page(self, client, make_post):
        post = make_post()
        (tag,) = blog.sync_tags(post, ["Sweets"])
        props = client.get(reverse("content:blog-tag", args=[tag.slug]), **PAGE).json()["props"]
        assert props["currentTag"]["slug"] == "sweets"
        assert props["posts"]["total"] == 1
