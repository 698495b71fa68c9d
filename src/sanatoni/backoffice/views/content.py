"""Blog, page and page section management."""

import json
import logging

from django.contrib import messages
from django.core.exceptions import BadRequest
from django.db import transaction
from django.db.models import Count, Q
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.urls import reverse
from django.utils import timezone
from django.views import View

from sanatoni.content.exceptions import ContentError
from sanatoni.content.models import BlogCategory, BlogPost, BlogTag, Page, PageSection, PublishStatus
from sanatoni.content.props import page_props, section_props, tag_props
from sanatoni.content.services import blog
from sanatoni.content.services import pages as page_builder
from sanatoni.core.access import (
    PERMISSION_DENIED_MESSAGE,
    any_permission_required,
    deny,
    user_has_any_permission,
)
from sanatoni.core.http import request_data, request_json
from sanatoni.core.pages import flash_response, form_errors, paginate, render_page, validation_error

from ..forms import BlogCategoryForm, BlogPostForm, BulkPostActionForm, PageForm, SectionForm
from ..mixins import BackofficeMixin
from ..props import blog_category_admin_props, choice_options, post_admin_props

logger = logging.getLogger(__name__)

PER_PAGE = 15


def structured_value(request, name, default=None):
    """A dict or list field, from a JSON body or a JSON-encoded form field."""
    if (request.content_type or "").startswith("application/json"):
        value = request_json(request).get(name, default)
    else:
        raw = request.POST.get(name)
        if raw in (None, ""):
            return default
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            raise BadRequest(f"Invalid JSON in {name}")
    return value


def blog_category_options():
    return [{"value": category.pk, "label": category.name} for category in BlogCategory.objects.active()]


# Blog posts


class PostListView(BackofficeMixin, View):
    required_permissions = ("view_blog",)
    method_permissions = {"post": ("create_blog",)}

    def get(self, request):
        posts = BlogPost.objects.select_related("category", "author").prefetch_related("tags")
        filters = {key: request.GET.get(key, "") for key in ("search", "category", "status", "tag")}
        if filters["search"]:
            posts = posts.search(filters["search"])
        if filters["category"]:
            posts = posts.filter(category_id=filters["category"])
        if filters["status"]:
            posts = posts.filter(status=filters["status"])
        if filters["tag"]:
            posts = posts.filter(tags__slug=filters["tag"])

        stats = blog.statistics()
        stats.pop("most_viewed_post")
        stats.pop("latest_post")
        return render_page(request, "Admin/Blog/Posts/Index", {
            "posts": paginate(request, posts.order_by("-created_at").distinct(), PER_PAGE, post_admin_props),
            "filters": filters,
            "categories": blog_category_options(),
            "tags": [tag_props(tag) for tag in BlogTag.objects.order_by("name")],
            "statusOptions": choice_options(PublishStatus.choices),
            "stats": stats,
        })

    def post(self, request):
        form = BlogPostForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:post-list"))
        with transaction.atomic():
            post = form.save(commit=False)
            post.author = request.user
            post.save()
            blog.sync_tags(post, form.cleaned_data["tags"])
        logger.info("Blog post %s created by %s", post.slug, request.user.email)
        return flash_response(
            request,
            "Blog post created successfully.",
            status=201,
            redirect_to=reverse("backoffice:post-detail", args=[post.pk]),
            post=post_admin_props(post, detail=True),
        )


class PostDetailView(BackofficeMixin, View):
    required_permissions = ("view_blog",)
    method_permissions = {
        "post": ("edit_blog",),
        "put": ("edit_blog",),
        "patch": ("edit_blog",),
        "delete": ("delete_blog",),
    }

    def dispatch(self, request, *args, **kwargs):
        self.post_object = get_object_or_404(
            BlogPost.objects.select_related("category", "author"), pk=kwargs["pk"]
        )
        return super().dispatch(request, *args, **kwargs)

    def get(self, request, pk):
        return render_page(request, "Admin/Blog/Posts/Edit", {
            "post": post_admin_props(self.post_object, detail=True),
            "categories": blog_category_options(),
            "statusOptions": choice_options(PublishStatus.choices),
        })

    def post(self, request, pk):
        form = BlogPostForm(request_data(request), instance=self.post_object)
        if not form.is_valid():
            return validation_error(
                request, form_errors(form), fallback=reverse("backoffice:post-detail", args=[pk])
            )
        with transaction.atomic():
            post = form.save()
            if "tags" in form.data:
                blog.sync_tags(post, form.cleaned_data["tags"])
        return flash_response(request, "Blog post updated successfully.", post=post_admin_props(post, detail=True))

    put = post
    patch = post

    def delete(self, request, pk):
        title = self.post_object.title
        self.post_object.delete()
        logger.info("Blog post %r deleted by %s", title, request.user.email)
        return flash_response(
            request, "Blog post deleted successfully.", redirect_to=reverse("backoffice:post-list")
        )


class PostBulkActionView(BackofficeMixin, View):
    """Publish, unpublish, delete or recategorize several posts at once."""

    required_permissions = ("edit_blog",)

    def post(self, request):
        form = BulkPostActionForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:post-list"))

        action = form.cleaned_data["action"]
        posts = BlogPost.objects.filter(pk__in=[post.pk for post in form.cleaned_data["post_ids"]])
        count = posts.count()

        if action == "publish":
            now = timezone.now()
            posts.filter(published_at__isnull=True).update(published_at=now)
            posts.update(status=PublishStatus.PUBLISHED, updated_at=now)
            message = f"{count} posts published successfully."
        elif action == "unpublish":
            posts.update(status=PublishStatus.DRAFT, updated_at=timezone.now())
            message = f"{count} posts unpublished successfully."
        elif action == "delete":
            if not user_has_any_permission(request.user, ["delete_blog"]):
                return deny(request, PERMISSION_DENIED_MESSAGE, required_permissions=["delete_blog"])
            posts.delete()
            message = f"{count} posts deleted successfully."
        else:
            posts.update(category=form.cleaned_data["category_id"], updated_at=timezone.now())
            message = f"{count} posts moved to {form.cleaned_data['category_id'].name}."

        logger.info("Bulk %s on %d blog posts by %s", action, count, request.user.email)
        return flash_response(request, message, count=count)


class PostDuplicateView(BackofficeMixin, View):
    required_permissions = ("create_blog",)

    def post(self, request, pk):
        original = get_object_or_404(BlogPost, pk=pk)
        with transaction.atomic():
            copy = BlogPost.objects.create(
                title=f"{original.title} (Copy)",
                content=original.content,
                excerpt=original.excerpt,
                featured_image=original.featured_image,
                gallery_images=original.gallery_images,
                category=original.category,
                status=PublishStatus.DRAFT,
                meta_title=original.meta_title,
                meta_description=original.meta_description,
                meta_keywords=original.meta_keywords,
                allow_comments=original.allow_comments,
                author=request.user,
            )
            copy.tags.set(original.tags.all())
        return flash_response(
            request,
            "Blog post duplicated successfully.",
            status=201,
            redirect_to=reverse("backoffice:post-detail", args=[copy.pk]),
            post=post_admin_props(copy),
        )


@any_permission_required("view_blog")
def blog_statistics(request):
    stats = blog.statistics()
    most_viewed = stats.pop("most_viewed_post")
    latest = stats.pop("latest_post")
    return JsonResponse({
        **stats,
        "most_viewed_post": post_admin_props(most_viewed) if most_viewed else None,
        "latest_post": post_admin_props(latest) if latest else None,
        "archive": blog.archive(),
    })


# Blog categories


class BlogCategoryListView(BackofficeMixin, View):
    required_permissions = ("view_blog",)
    method_permissions = {"post": ("create_blog",)}

    def get(self, request):
        categories = BlogCategory.objects.annotate(total_posts=Count("posts"))
        search = request.GET.get("search", "")
        if search:
            categories = categories.filter(Q(name__icontains=search) | Q(description__icontains=search))
        return render_page(request, "Admin/Blog/Categories/Index", {
            "categories": [blog_category_admin_props(category) for category in categories],
            "filters": {"search": search},
        })

    def post(self, request):
        form = BlogCategoryForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:blog-category-list"))
        category = form.save()
        return flash_response(
            request,
            "Blog category created successfully.",
            status=201,
            redirect_to=reverse("backoffice:blog-category-list"),
            category=blog_category_admin_props(category),
        )


class BlogCategoryDetailView(BackofficeMixin, View):
    required_permissions = ("edit_blog",)
    method_permissions = {"delete": ("delete_blog",)}

    def dispatch(self, request, *args, **kwargs):
        self.category = get_object_or_404(BlogCategory, pk=kwargs["pk"])
        return super().dispatch(request, *args, **kwargs)

    def post(self, request, pk):
        form = BlogCategoryForm(request_data(request), instance=self.category)
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:blog-category-list"))
        category = form.save()
        return flash_response(
            request, "Blog category updated successfully.", category=blog_category_admin_props(category)
        )

    put = post
    patch = post

    def delete(self, request, pk):
        if self.category.posts.exists():
            return flash_response(
                request, "Cannot delete category with existing posts.", messages.ERROR, status=422
            )
        self.category.delete()
        return flash_response(
            request,
            "Blog category deleted successfully.",
            redirect_to=reverse("backoffice:blog-category-list"),
        )


# Pages


class PageListView(BackofficeMixin, View):
    required_permissions = ("view_content",)
    method_permissions = {"post": ("create_content",)}

    def get(self, request):
        pages = Page.objects.select_related("created_by").annotate(sections_count=Count("sections"))
        filters = {key: request.GET.get(key, "") for key in ("search", "status", "template")}
        if filters["search"]:
            pages = pages.filter(Q(title__icontains=filters["search"]) | Q(content__icontains=filters["search"]))
        if filters["status"]:
            pages = pages.filter(status=filters["status"])
        if filters["template"]:
            pages = pages.filter(template=filters["template"])

        def serialize(page):
            return {**page_props(page), "sections_count": page.sections_count}

        return render_page(request, "Admin/Pages/Index", {
            "pages": paginate(request, pages.order_by("sort_order", "title"), PER_PAGE, serialize),
            "filters": filters,
            "statusOptions": choice_options(PublishStatus.choices),
            "sectionTypes": page_builder.SECTION_TYPES,
        })

    def post(self, request):
        form = PageForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:page-list"))
        page = form.save(commit=False)
        page.settings = structured_value(request, "settings", {}) or {}
        page.created_by = request.user
        page.save()
        logger.info("Page %s created by %s", page.slug, request.user.email)
        return flash_response(
            request,
            "Page created successfully.",
            status=201,
            redirect_to=reverse("backoffice:page-detail", args=[page.pk]),
            page=page_props(page),
        )


class PageDetailView(BackofficeMixin, View):
    required_permissions = ("view_content",)
    method_permissions = {
        "post": ("edit_content",),
        "put": ("edit_content",),
        "patch": ("edit_content",),
        "delete": ("delete_content",),
    }

    def dispatch(self, request, *args, **kwargs):
        self.page = get_object_or_404(Page, pk=kwargs["pk"])
        return super().dispatch(request, *args, **kwargs)

    def get(self, request, pk):
        return render_page(request, "Admin/Pages/Edit", {
            "page": page_props(self.page, sections=self.page.sections.order_by("sort_order")),
            "sectionTypes": page_builder.SECTION_TYPES,
            "statusOptions": choice_options(PublishStatus.choices),
        })

    def post(self, request, pk):
        form = PageForm(request_data(request), instance=self.page)
        if not form.is_valid():
            return validation_error(
                request, form_errors(form), fallback=reverse("backoffice:page-detail", args=[pk])
            )
        page = form.save(commit=False)
        settings = structured_value(request, "settings")
        if settings is not None:
            page.settings = settings
        page.save()
        return flash_response(request, "Page updated successfully.", page=page_props(page))

    put = post
    patch = post

    def delete(self, request, pk):
        title = self.page.title
        self.page.delete()
        logger.info("Page %r deleted by %s", title, request.user.email)
        return flash_response(request, "Page deleted successfully.", redirect_to=reverse("backoffice:page-list"))


class PageDuplicateView(BackofficeMixin, View):
    required_permissions = ("create_content",)

    @transaction.atomic
    def post(self, request, pk):
        original = get_object_or_404(Page, pk=pk)
        copy = Page.objects.create(
            title=f"{original.title} (Copy)",
            content=original.content,
            excerpt=original.excerpt,
            meta_title=original.meta_title,
            meta_description=original.meta_description,
            meta_keywords=original.meta_keywords,
            status=PublishStatus.DRAFT,
            template=original.template,
            settings=original.settings,
            is_homepage=False,
            sort_order=original.sort_order,
            created_by=request.user,
        )
        for section in original.sections.order_by("sort_order"):
            PageSection.objects.create(
                page=copy,
                type=section.type,
                name=section.name,
                content=section.content,
                settings=section.settings,
                sort_order=section.sort_order,
                is_active=section.is_active,
            )
        return flash_response(
            request,
            "Page duplicated successfully.",
            status=201,
            redirect_to=reverse("backoffice:page-detail", args=[copy.pk]),
            page=page_props(copy),
        )


@any_permission_required("view_content")
def export_page(request, pk):
    page = get_object_or_404(Page, pk=pk)
    response = JsonResponse(page_builder.export_page(page))
    response["Content-Disposition"] = f'attachment; filename="page-{page.slug}.json"'
    return response


class PageImportView(BackofficeMixin, View):
    """Create a draft page from an exported JSON document or uploaded file."""

    required_permissions = ("create_content",)

    def post(self, request):
        upload = request.FILES.get("file")
        try:
            data = json.load(upload) if upload else request_json(request)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return validation_error(
                request, {"file": ["The file must be a valid page export."]}, fallback=reverse("backoffice:page-list")
            )
        if not isinstance(data.get("page"), dict):
            return validation_error(
                request, {"file": ["The file must be a valid page export."]}, fallback=reverse("backoffice:page-list")
            )
        try:
            page = page_builder.import_page(data, user=request.user)
        except (ContentError, KeyError) as error:
            return validation_error(request, {"file": [str(error)]}, fallback=reverse("backoffice:page-list"))
        return flash_response(
            request,
            "Page imported successfully.",
            status=201,
            redirect_to=reverse("backoffice:page-detail", args=[page.pk]),
            page=page_props(page),
        )


# Page sections


class SectionListView(BackofficeMixin, View):
    required_permissions = ("view_content",)
    method_permissions = {"post": ("edit_content",)}

    def get(self, request, page_pk):
        page = get_object_or_404(Page, pk=page_pk)
        return JsonResponse({
            "sections": [section_props(section) for section in page.sections.order_by("sort_order")],
        })

    def post(self, request, page_pk):
        page = get_object_or_404(Page, pk=page_pk)
        form = SectionForm(request_data(request))
        if not form.is_valid():
            return validation_error(
                request, form_errors(form), fallback=reverse("backoffice:page-detail", args=[page_pk])
            )
        is_active = form.cleaned_data["is_active"]
        section = page_builder.create_section(
            page,
            form.cleaned_data["type"],
            content=structured_value(request, "content", {}),
            settings=structured_value(request, "settings", {}),
            name=form.cleaned_data["name"],
            sort_order=form.cleaned_data["sort_order"],
            is_active=True if is_active is None else is_active,
        )
        return flash_response(request, "Section added successfully.", status=201, section=section_props(section))


class SectionDetailView(BackofficeMixin, View):
    required_permissions = ("edit_content",)

    def dispatch(self, request, *args, **kwargs):
        self.section = get_object_or_404(PageSection, pk=kwargs["pk"], page_id=kwargs["page_pk"])
        return super().dispatch(request, *args, **kwargs)

    def post(self, request, page_pk, pk):
        data = request_data(request)
        form = SectionForm({"type": self.section.type, **data.dict()})
        if not form.is_valid():
            return validation_error(
                request, form_errors(form), fallback=reverse("backoffice:page-detail", args=[page_pk])
            )
        section = page_builder.update_section(
            self.section,
            content=structured_value(request, "content"),
            settings=structured_value(request, "settings"),
            name=form.cleaned_data["name"] if "name" in data else None,
            sort_order=form.cleaned_data["sort_order"],
            is_active=form.cleaned_data["is_active"],
        )
        return flash_response(request, "Section updated successfully.", section=section_props(section))

    put = post
    patch = post

    def delete(self, request, page_pk, pk):
        self.section.delete()
        return flash_response(request, "Section deleted successfully.")


class SectionReorderView(BackofficeMixin, View):
    required_permissions = ("edit_content",)

    def post(self, request, page_pk):
        page = get_object_or_404(Page, pk=page_pk)
        section_ids = request_data(request).getlist("section_ids")
        if not section_ids:
            return validation_error(
                request,
                {"section_ids": ["The section ids field is required."]},
                fallback=reverse("backoffice:page-detail", args=[page_pk]),
            )
        page_builder.reorder_sections(page, section_ids)
        return flash_response(request, "Sections reordered successfully.")


class SectionDuplicateView(BackofficeMixin, View):
    required_permissions = ("edit_content",)

    def post(self, request, page_pk, pk):
        section = get_object_or_404(PageSection, pk=pk, page_id=page_pk)
        copy = page_builder.duplicate_section(section)
        return flash_response(request, "Section duplicated successfully.", status=201, section=section_props(copy))
