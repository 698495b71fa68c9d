"""Public blog, CMS page and sitemap views."""

from django.db.models import Count, Q
from django.http import Http404
from django.shortcuts import get_object_or_404, render
from django.views import View
from django.views.decorators.cache import cache_page

from sanatoni.core.access import user_has_any_permission
from sanatoni.core.pages import paginate, render_page

from .models import BlogCategory, BlogPost, BlogTag, Page, PublishStatus
from .props import blog_category_props, page_props, post_props, seo_props, tag_props
from .services import blog
from .services.seo import sitemap_entries

POSTS_PER_PAGE = 12


def sidebar_props():
    categories = BlogCategory.objects.active().annotate(
        published_count=Count(
            "posts",
            filter=Q(posts__status=PublishStatus.PUBLISHED),
        )
    )
    popular_tags = BlogTag.objects.annotate(
        published_count=Count("posts", filter=Q(posts__status=PublishStatus.PUBLISHED))
    ).filter(published_count__gt=0).order_by("-published_count", "name")[:20]
    return {
        "categories": [blog_category_props(category, category.published_count) for category in categories],
        "popularTags": [tag_props(tag) for tag in popular_tags],
    }


class BlogIndexView(View):
    """Published posts with search, category and tag filters."""

    def get(self, request):
        filters = {key: request.GET.get(key, "") for key in ("search", "category", "tag")}
        posts = blog.published_posts().order_by("-published_at")
        if filters["search"]:
            posts = posts.search(filters["search"])
        if filters["category"]:
            posts = posts.filter(category__slug=filters["category"])
        if filters["tag"]:
            posts = posts.filter(tags__slug=filters["tag"])

        return render_page(request, "Blog/Index", {
            "posts": paginate(request, posts.distinct(), POSTS_PER_PAGE, post_props),
            "featuredPosts": [post_props(post) for post in blog.featured_posts(limit=3)],
            "filters": filters,
            **sidebar_props(),
        })


class BlogPostView(View):
    def get(self, request, slug):
        post = get_object_or_404(blog.published_posts(), slug=slug)
        post.increment_views()
        previous_post = post.previous_post()
        next_post = post.next_post()
        return render_page(request, "Blog/Show", {
            "post": post_props(post, detail=True),
            "relatedPosts": [post_props(related) for related in blog.related_posts(post, limit=3)],
            "previousPost": post_props(previous_post) if previous_post else None,
            "nextPost": post_props(next_post) if next_post else None,
            "seo": seo_props(post),
        })


class BlogCategoryView(View):
    def get(self, request, slug):
        category = get_object_or_404(BlogCategory.objects.active(), slug=slug)
        posts = blog.published_posts().filter(category=category).order_by("-published_at")
        return render_page(request, "Blog/Index", {
            "posts": paginate(request, posts, POSTS_PER_PAGE, post_props),
            "currentCategory": blog_category_props(category),
            "filters": {"category": category.slug},
            "seo": seo_props(category),
            **sidebar_props(),
        })


class BlogTagView(View):
    def get(self, request, slug):
        tag = get_object_or_404(BlogTag, slug=slug)
        posts = blog.published_posts().filter(tags=tag).order_by("-published_at")
        return render_page(request, "Blog/Index", {
            "posts": paginate(request, posts, POSTS_PER_PAGE, post_props),
            "currentTag": tag_props(tag),
            "filters": {"tag": tag.slug},
            **sidebar_props(),
        })


class PageView(View):
    """A published CMS page with its active sections.

    Content staff may preview unpublished pages with ``?preview``.
    """

    def get(self, request, slug):
        page = get_object_or_404(Page, slug=slug)
        previewing = "preview" in request.GET and user_has_any_permission(
            request.user, ["view_content", "edit_content"]
        )
        if not previewing and not Page.objects.published().filter(pk=page.pk).exists():
            raise Http404("Page not found")
        return render_page(request, "Page/Show", {
            "page": page_props(page, sections=page.active_sections()),
            "seo": seo_props(page),
            "preview": previewing,
        })


@cache_page(60 * 60)
def sitemap(request):
    return render(
        request,
        "content/sitemap.xml",
        {"entries": sitemap_entries()},
        content_type="application/xml",
    )
