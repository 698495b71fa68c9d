"""SEO dashboard, analysis, overrides, sitemap generation and meta previews."""

import logging
from urllib.parse import urlparse

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.http import Http404, JsonResponse
from django.template.loader import render_to_string
from django.urls import Resolver404, resolve, reverse
from django.views import View

from sanatoni.catalog.models import Product
from sanatoni.content.models import BlogCategory, BlogPost, Page
from sanatoni.content.services import seo
from sanatoni.core.http import request_data
from sanatoni.core.pages import form_errors, render_page, validation_error

from ..forms import SeoOptimizeForm, SeoPreviewForm, SeoSettingsForm, SeoTargetForm
from ..mixins import BackofficeMixin
from .content import structured_value

logger = logging.getLogger(__name__)

LOW_SCORE = 70
SITEMAP_PATH = "sitemap.xml"

# URL name -> model looked up by the ``slug`` URL argument
PREVIEW_ROUTES = {
    "content:page-detail": Page,
    "content:post-detail": BlogPost,
    "content:blog-category": BlogCategory,
    "catalog:product-detail": Product,
}


def scored_item(obj, model_type):
    return {
        "id": obj.pk,
        "type": model_type,
        "title": getattr(obj, "title", None) or getattr(obj, "name", ""),
        "url": seo.canonical_url(obj),
        "seo_score": seo.analyze_seo_score(obj),
    }


def get_target(form):
    target = form.target()
    if target is None:
        raise Http404("No record matches the given type and id.")
    return target


class SeoDashboardView(BackofficeMixin, View):
    required_permissions = ("edit_content",)

    def get(self, request):
        pages = [scored_item(page, "page") for page in Page.objects.published()]
        products = [
            scored_item(product, "product")
            for product in Product.objects.published().order_by("-updated_at")[:10]
        ]
        posts = [
            scored_item(post, "blog_post")
            for post in BlogPost.objects.published().order_by("-published_at")[:10]
        ]

        items = pages + products + posts
        percentages = [item["seo_score"]["percentage"] for item in items]
        overview = {
            "average_score": round(sum(percentages) / len(percentages), 1) if percentages else 0,
            "total_items": len(items),
            "issues_count": sum(len(item["seo_score"]["issues"]) for item in items),
            "low_score_items": sum(1 for percentage in percentages if percentage < LOW_SCORE),
        }
        return render_page(request, "Admin/Seo/Index", {
            "pages": pages,
            "products": products,
            "blogPosts": posts,
            "overview": overview,
        })


class SeoAnalyzeView(BackofficeMixin, View):
    required_permissions = ("edit_content",)

    def post(self, request):
        form = SeoTargetForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:seo-index"))
        target = get_target(form)
        return JsonResponse({
            "analysis": seo.analyze_seo_score(target),
            "meta_tags": seo.generate_meta_tags(target),
            "structured_data": seo.generate_structured_data(target),
        })


class SeoSettingsView(BackofficeMixin, View):
    """Store SEO overrides for a page, product, post or blog category."""

    required_permissions = ("edit_content",)

    def post(self, request):
        form = SeoSettingsForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:seo-index"))
        target = get_target(form)
        data = form.settings()
        structured_data = structured_value(request, "structured_data")
        if structured_data is not None:
            data["structured_data"] = structured_data
        seo.update_seo_settings(target, data)
        logger.info("SEO settings updated for %s %s", form.cleaned_data["model_type"], target.pk)
        return JsonResponse({
            "success": True,
            "message": "SEO settings updated successfully.",
            "analysis": seo.analyze_seo_score(target),
        })


class SitemapGenerateView(BackofficeMixin, View):
    """Write the sitemap to storage for crawlers that fetch a static file."""

    required_permissions = ("edit_content",)

    def post(self, request):
        entries = seo.sitemap_entries()
        xml = render_to_string("content/sitemap.xml", {"entries": entries})
        if default_storage.exists(SITEMAP_PATH):
            default_storage.delete(SITEMAP_PATH)
        path = default_storage.save(SITEMAP_PATH, ContentFile(xml.encode("utf-8")))
        logger.info("Sitemap written to %s with %d urls", path, len(entries))
        return JsonResponse({
            "success": True,
            "message": "Sitemap generated successfully.",
            "urls_count": len(entries),
            "sitemap_url": default_storage.url(path),
        })


class SeoPreviewView(BackofficeMixin, View):
    """Meta tags the site would emit for a URL."""

    required_permissions = ("edit_content",)

    def post(self, request):
        form = SeoPreviewForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:seo-index"))

        url = form.cleaned_data["url"]
        try:
            match = resolve(urlparse(url).path or "/")
        except Resolver404:
            match = None

        obj = None
        if match is not None and match.view_name in PREVIEW_ROUTES:
            obj = PREVIEW_ROUTES[match.view_name].objects.filter(slug=match.kwargs.get("slug")).first()
        if obj is None:
            return JsonResponse({"success": False, "message": "No content found for this URL."}, status=404)

        return JsonResponse({
            "success": True,
            "url": url,
            "meta_tags": seo.generate_meta_tags(obj),
            "analysis": seo.analyze_seo_score(obj),
        })


class SeoOptimizeView(BackofficeMixin, View):
    required_permissions = ("edit_content",)

    def post(self, request):
        form = SeoOptimizeForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:seo-index"))
        title = form.cleaned_data["title"]
        description = form.cleaned_data["description"]
        optimized_title = seo.optimize_title(title) if title else ""
        optimized_description = seo.optimize_description(description) if description else ""
        return JsonResponse({
            "title": {
                "original": title,
                "optimized": optimized_title,
                "length": len(optimized_title),
            },
            "description": {
                "original": description,
                "optimized": optimized_description,
                "length": len(optimized_description),
            },
            "keywords": seo.generate_keywords(f"{title} {description}"),
        })
