"""Tests for blog, page, section, media and SEO management."""

import io
import json
from datetime import timedelta

import pytest
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from django.utils import timezone
from PIL import Image

from sanatoni.content.models import BlogCategory, BlogPost, MediaFile, Page, PageSection, PublishStatus, SeoSetting

JSON = {"HTTP_ACCEPT": "application/json"}
PAGE = {"HTTP_X_INERTIA": "true"}


def post_json(client, url, data=None, method="post"):
    return getattr(client, method)(url, data or {}, content_type="application/json", **JSON)


def png_upload(name="banner.png", size=(320, 160)):
    buffer = io.BytesIO()
    Image.new("RGB", size, "saddlebrown").save(buffer, format="PNG")
    return SimpleUploadedFile(name, buffer.getvalue(), content_type="image/png")


@pytest.fixture
def blog_category(db):
    return BlogCategory.objects.create(name="Festivals", description="Festival guides")


@pytest.fixture
def post(blog_category):
    return BlogPost.objects.create(
        title="Durga Puja Shopping List",
        content="<p>Order early so everything arrives before Mahalaya.</p>",
        category=blog_category,
        status=PublishStatus.PUBLISHED,
        published_at=timezone.now() - timedelta(days=1),
    )


@pytest.fixture
def page(db):
    return Page.objects.create(
        title="About Us",
        content="<p>Sanatoni Mart serves families across Bangladesh.</p>",
        status=PublishStatus.PUBLISHED,
    )


@pytest.mark.django_db
class TestBlogPosts:
    def test_create_with_tags(self, manager_client, manager_user, blog_category):
        response = post_json(manager_client, reverse("backoffice:post-list"), {
            "title": "Lighting the Diwali Diya",
            "content": "<p>Place the diya facing east.</p>",
            "category": blog_category.pk,
            "status": "published",
            "tags": "Diwali, Lamps",
            "allow_comments": True,
        })
        assert response.status_code == 201
        post = BlogPost.objects.get()
        assert post.author == manager_user
        assert post.slug == "lighting-the-diwali-diya"
        assert post.published_at is not None
        assert sorted(post.tags.values_list("slug", flat=True)) == ["diwali", "lamps"]

    def test_scheduled_post_needs_future_date(self, manager_client, blog_category):
        response = post_json(manager_client, reverse("backoffice:post-list"), {
            "title": "Next Year",
            "content": "<p>Soon.</p>",
            "category": blog_category.pk,
            "status": "scheduled",
        })
        assert response.status_code == 422
        assert response.json()["errors"]["published_at"] == [
            "A scheduled post needs a publication date in the future."
        ]

    def test_update_keeps_tags_unless_sent(self, manager_client, post, blog_category):
        post.tags.create(name="Puja", slug="puja")
        url = reverse("backoffice:post-detail", args=[post.pk])
        response = post_json(manager_client, url, {
            "title": post.title,
            "slug": post.slug,
            "content": "<p>Updated list.</p>",
            "category": blog_category.pk,
            "status": "published",
        }, method="put")
        assert response.status_code == 200
        assert list(post.tags.values_list("slug", flat=True)) == ["puja"]

        post_json(manager_client, url, {
            "title": post.title,
            "slug": post.slug,
            "content": "<p>Updated list.</p>",
            "category": blog_category.pk,
            "status": "published",
            "tags": [],
        }, method="put")
        assert not post.tags.exists()

    def test_bulk_publish_and_change_category(self, manager_client, blog_category):
        drafts = [
            BlogPost.objects.create(title=f"Draft {n}", content="<p>x</p>", category=blog_category)
            for n in range(2)
        ]
        ids = [draft.pk for draft in drafts]
        response = post_json(manager_client, reverse("backoffice:post-bulk"), {"action": "publish", "post_ids": ids})
        assert response.json() == {"message": "2 posts published successfully.", "count": 2}
        assert all(draft.published_at for draft in BlogPost.objects.filter(pk__in=ids))

        recipes = BlogCategory.objects.create(name="Recipes")
        response = post_json(
            manager_client, reverse("backoffice:post-bulk"), {"action": "change_category", "post_ids": ids}
        )
        assert response.json()["errors"]["category_id"] == ["The category is required when changing category."]

        response = post_json(manager_client, reverse("backoffice:post-bulk"), {
            "action": "change_category",
            "post_ids": ids,
            "category_id": recipes.pk,
        })
        assert response.json()["message"] == "2 posts moved to Recipes."
        assert BlogPost.objects.filter(category=recipes).count() == 2

    def test_bulk_delete(self, manager_client, post):
        bulk = reverse("backoffice:post-bulk")
        response = post_json(manager_client, bulk, {"action": "delete", "post_ids": [post.pk]})
        assert response.json()["count"] == 1
        assert not BlogPost.objects.exists()

    def test_duplicate(self, manager_client, manager_user, post):
        post.tags.create(name="Puja", slug="puja")
        response = post_json(manager_client, reverse("backoffice:post-duplicate", args=[post.pk]))
        assert response.status_code == 201
        copy = BlogPost.objects.get(title="Durga Puja Shopping List (Copy)")
        assert copy.status == PublishStatus.DRAFT
        assert copy.author == manager_user
        assert list(copy.tags.values_list("slug", flat=True)) == ["puja"]

    def test_statistics(self, manager_client, post):
        data = manager_client.get(reverse("backoffice:blog-statistics"), **JSON).json()
        assert data["total_posts"] == 1
        assert data["latest_post"]["title"] == "Durga Puja Shopping List"
        assert data["archive"][0]["total"] == 1

    def test_list_filters_by_status(self, manager_client, post, blog_category):
        BlogPost.objects.create(title="Unfinished", content="<p>x</p>", category=blog_category)
        props = manager_client.get(reverse("backoffice:post-list"), {"status": "draft"}, **PAGE).json()["props"]
        assert [row["title"] for row in props["posts"]["data"]] == ["Unfinished"]
        assert props["stats"]["draft_posts"] == 1


@pytest.mark.django_db
class TestBlogCategories:
    def test_create(self, manager_client):
        response = post_json(manager_client, reverse("backoffice:blog-category-list"), {
            "name": "Temple Guides",
            "is_active": True,
            "sort_order": 1,
        })
        assert response.status_code == 201
        assert BlogCategory.objects.get().slug == "temple-guides"

    def test_name_is_unique(self, manager_client, blog_category):
        response = post_json(manager_client, reverse("backoffice:blog-category-list"), {
            "name": "festivals",
            "sort_order": 0,
        })
        assert response.json()["errors"]["name"] == ["The name has already been taken."]

    def test_category_with_posts_is_kept(self, manager_client, post, blog_category):
        url = reverse("backoffice:blog-category-detail", args=[blog_category.pk])
        response = manager_client.delete(url, **JSON)
        assert response.status_code == 422
        assert response.json()["message"] == "Cannot delete category with existing posts."

        post.delete()
        assert manager_client.delete(url, **JSON).status_code == 200


@pytest.mark.django_db
class TestPages:
    def test_create_with_settings(self, manager_client, manager_user):
        response = post_json(manager_client, reverse("backoffice:page-list"), {
            "title": "Shipping Policy",
            "content": "<p>We deliver across Bangladesh.</p>",
            "status": "published",
            "sort_order": 3,
            "settings": {"layout": "wide"},
        })
        assert response.status_code == 201
        page = Page.objects.get()
        assert page.slug == "shipping-policy"
        assert page.template == "default"
        assert page.settings == {"layout": "wide"}
        assert page.created_by == manager_user

    def test_update_leaves_settings_unless_sent(self, manager_client, page):
        Page.objects.filter(pk=page.pk).update(settings={"layout": "wide"})
        url = reverse("backoffice:page-detail", args=[page.pk])
        response = post_json(manager_client, url, {
            "title": "About Sanatoni Mart",
            "slug": page.slug,
            "status": "published",
            "sort_order": 0,
        }, method="put")
        assert response.status_code == 200
        page.refresh_from_db()
        assert page.title == "About Sanatoni Mart"
        assert page.settings == {"layout": "wide"}

    def test_editor_includes_sections(self, manager_client, page):
        PageSection.objects.create(page=page, type="text", content={"content": "Hello"}, sort_order=1)
        props = manager_client.get(reverse("backoffice:page-detail", args=[page.pk]), **PAGE).json()["props"]
        assert props["page"]["sections"][0]["type"] == "text"
        assert "hero" in props["sectionTypes"]

    def test_duplicate_copies_sections(self, manager_client, page):
        PageSection.objects.create(page=page, type="hero", content={"title": "Welcome"}, sort_order=1)
        Page.objects.filter(pk=page.pk).update(is_homepage=True)
        response = post_json(manager_client, reverse("backoffice:page-duplicate", args=[page.pk]))
        assert response.status_code == 201
        copy = Page.objects.get(title="About Us (Copy)")
        assert copy.status == PublishStatus.DRAFT
        assert copy.is_homepage is False
        assert copy.sections.get().content == {"title": "Welcome"}

    def test_export_and_import(self, manager_client, page):
        PageSection.objects.create(page=page, type="faq", content={"faqs": [{"question": "COD?"}]}, sort_order=1)
        response = manager_client.get(reverse("backoffice:page-export", args=[page.pk]))
        assert response["Content-Disposition"] == 'attachment; filename="page-about-us.json"'
        exported = response.json()
        assert exported["page"]["slug"] == "about-us"

        upload = SimpleUploadedFile("page.json", json.dumps(exported).encode(), content_type="application/json")
        response = manager_client.post(reverse("backoffice:page-import"), {"file": upload}, **JSON)
        assert response.status_code == 201
        imported = Page.objects.exclude(pk=page.pk).get()
        assert imported.slug == "about-us-2"
        assert imported.status == PublishStatus.DRAFT
        assert imported.sections.get().content == {"faqs": [{"question": "COD?", "answer": ""}]}

    def test_import_rejects_other_documents(self, manager_client):
        response = post_json(manager_client, reverse("backoffice:page-import"), {"title": "Not an export"})
        assert response.status_code == 422
        assert response.json()["errors"]["file"] == ["The file must be a valid page export."]

    def test_delete(self, manager_client, page):
        response = manager_client.delete(reverse("backoffice:page-detail", args=[page.pk]), **JSON)
        assert response.json()["message"] == "Page deleted successfully."
        assert not Page.objects.exists()


@pytest.mark.django_db
class TestSections:
    def test_add(self, manager_client, page):
        url = reverse("backoffice:section-list", args=[page.pk])
        response = post_json(manager_client, url, {"type": "hero", "content": {"title": "Shubho Diwali"}})
        assert response.status_code == 201
        section = page.sections.get()
        assert section.name == "Hero Section"
        assert section.sort_order == 1
        assert section.content == {"title": "Shubho Diwali"}
        assert section.is_active is True

    def test_unknown_type_is_invalid(self, manager_client, page):
        response = post_json(manager_client, reverse("backoffice:section-list", args=[page.pk]), {"type": "carousel"})
        assert response.status_code == 422
        assert "type" in response.json()["errors"]

    def test_update(self, manager_client, page):
        section = PageSection.objects.create(page=page, type="text", name="Intro", content={"content": "Hi"})
        url = reverse("backoffice:section-detail", args=[page.pk, section.pk])
        response = post_json(manager_client, url, {"is_active": False, "content": {"content": "Hello"}}, method="patch")
        assert response.status_code == 200
        section.refresh_from_db()
        assert section.is_active is False
        assert section.content == {"content": "Hello"}
        assert section.name == "Intro"

    def test_section_of_another_page_is_not_found(self, manager_client, page):
        other = Page.objects.create(title="Contact")
        section = PageSection.objects.create(page=other, type="text")
        url = reverse("backoffice:section-detail", args=[page.pk, section.pk])
        assert post_json(manager_client, url, {"name": "x"}).status_code == 404

    def test_reorder_and_list(self, manager_client, page):
        first = PageSection.objects.create(page=page, type="hero", sort_order=1)
        second = PageSection.objects.create(page=page, type="text", sort_order=2)
        response = post_json(
            manager_client,
            reverse("backoffice:section-reorder", args=[page.pk]),
            {"section_ids": [second.pk, first.pk]},
        )
        assert response.json()["message"] == "Sections reordered successfully."

        data = manager_client.get(reverse("backoffice:section-list", args=[page.pk]), **JSON).json()
        assert [row["id"] for row in data["sections"]] == [second.pk, first.pk]

    def test_reorder_requires_ids(self, manager_client, page):
        response = post_json(manager_client, reverse("backoffice:section-reorder", args=[page.pk]), {})
        assert response.status_code == 422

    def test_duplicate(self, manager_client, page):
        section = PageSection.objects.create(page=page, type="cta", name="Shop now", sort_order=4)
        url = reverse("backoffice:section-duplicate", args=[page.pk, section.pk])
        response = post_json(manager_client, url)
        assert response.status_code == 201
        assert response.json()["section"]["name"] == "Shop now (Copy)"
        assert response.json()["section"]["sort_order"] == 5


@pytest.mark.django_db
class TestMediaLibrary:
    def test_upload_reports_rejected_files(self, manager_client, manager_user):
        rejected = SimpleUploadedFile("setup.exe", b"MZ", content_type="application/x-msdownload")
        response = manager_client.post(
            reverse("backoffice:media-list"), {"files": [png_upload(), rejected]}, **JSON
        )
        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "1 files uploaded successfully. 1 files were rejected."
        assert data["errors"] == {"setup.exe": "File type not allowed: application/x-msdownload"}
        media = MediaFile.objects.get()
        assert media.uploaded_by == manager_user
        assert set(media.thumbnails) == {"thumb", "medium", "large"}
        assert default_storage.exists(media.path)

    def test_nothing_uploaded(self, manager_client):
        rejected = SimpleUploadedFile("setup.exe", b"MZ", content_type="application/x-msdownload")
        response = manager_client.post(reverse("backoffice:media-list"), {"files": [rejected]}, **JSON)
        assert response.status_code == 422
        assert response.json()["message"] == "No files were uploaded."

    def test_no_files(self, manager_client):
        response = manager_client.post(reverse("backoffice:media-list"), {}, **JSON)
        assert response.json()["errors"]["files"] == ["Select at least one file to upload."]

    def test_update_and_delete(self, manager_client):
        manager_client.post(reverse("backoffice:media-list"), {"files": [png_upload()]}, **JSON)
        media = MediaFile.objects.get()
        url = reverse("backoffice:media-detail", args=[media.pk])

        response = post_json(manager_client, url, {"original_name": "banner.png", "alt_text": "Diya banner"}, "patch")
        assert response.json()["media"]["alt_text"] == "Diya banner"

        manager_client.delete(url, **JSON)
        assert not MediaFile.objects.exists()
        assert not default_storage.exists(media.path)

    def test_bulk_actions(self, manager_client):
        manager_client.post(
            reverse("backoffice:media-list"),
            {"files": [png_upload("one.png"), png_upload("two.png")]},
            **JSON,
        )
        ids = list(MediaFile.objects.values_list("pk", flat=True))

        bulk = reverse("backoffice:media-bulk")
        response = post_json(manager_client, bulk, {"action": "generate_thumbnails", "ids": ids})
        assert response.json()["message"] == "Thumbnails generated for 2 images."

        response = post_json(manager_client, bulk, {"action": "delete", "ids": ids})
        assert response.json()["count"] == 2
        assert not MediaFile.objects.exists()

    def test_selection_lists_images(self, manager_client):
        manager_client.post(reverse("backoffice:media-list"), {"files": [png_upload()]}, **JSON)
        data = manager_client.get(reverse("backoffice:media-select"), {"search": "banner"}, **JSON).json()
        assert data["media"][0]["original_name"] == "banner.png"
        assert "thumbs" in data["media"][0]["thumbnail"]


@pytest.mark.django_db
class TestSeoTools:
    def test_dashboard(self, manager_client, page, post):
        props = manager_client.get(reverse("backoffice:seo-index"), **PAGE).json()["props"]
        assert props["overview"]["total_items"] == 2
        assert props["pages"][0]["title"] == "About Us"

    def test_analyze(self, manager_client, page):
        url = reverse("backoffice:seo-analyze")
        response = post_json(manager_client, url, {"model_type": "page", "model_id": page.pk})
        data = response.json()
        assert data["meta_tags"]["title"] == "About Us"
        assert "percentage" in data["analysis"]

    def test_analyze_unknown_record(self, manager_client):
        response = post_json(manager_client, reverse("backoffice:seo-analyze"), {"model_type": "page", "model_id": 999})
        assert response.status_code == 404

    def test_settings_store_only_submitted_fields(self, manager_client, page):
        url = reverse("backoffice:seo-settings")
        post_json(manager_client, url, {
            "model_type": "page",
            "model_id": page.pk,
            "meta_title": "About Sanatoni Mart, Dhaka's Puja Store",
            "og_type": "article",
        })
        response = post_json(manager_client, url, {
            "model_type": "page",
            "model_id": page.pk,
            "meta_description": "Who we are.",
            "structured_data": {"@type": "AboutPage"},
        })
        assert response.json()["message"] == "SEO settings updated successfully."
        setting = SeoSetting.for_object(page)
        assert setting.meta_title == "About Sanatoni Mart, Dhaka's Puja Store"
        assert setting.meta_description == "Who we are."
        assert setting.og_type == "article"
        assert setting.structured_data == {"@type": "AboutPage"}

    def test_generate_sitemap(self, manager_client, page, post):
        data = post_json(manager_client, reverse("backoffice:seo-sitemap")).json()
        assert data["success"] is True
        assert data["urls_count"] == 2
        with default_storage.open("sitemap.xml") as sitemap:
            xml = sitemap.read().decode()
        assert "/pages/about-us/" in xml
        assert "/blog/durga-puja-shopping-list/" in xml

    def test_preview(self, manager_client, page):
        url = reverse("backoffice:seo-preview")
        data = post_json(manager_client, url, {"url": "https://sanatonimart.com/pages/about-us/"}).json()
        assert data["meta_tags"]["title"] == "About Us"

        response = post_json(manager_client, url, {"url": "https://sanatonimart.com/pages/missing/"})
        assert response.status_code == 404
        assert response.json()["message"] == "No content found for this URL."

    def test_optimize(self, manager_client):
        title = "Handcrafted Brass Diya Set for Diwali and Every Evening Aarti at Home"
        data = post_json(manager_client, reverse("backoffice:seo-optimize"), {"title": title}).json()
        assert data["title"]["original"] == title
        assert data["title"]["length"] <= 60
        assert data["title"]["optimized"].endswith("...")
        assert data["description"]["optimized"] == ""
