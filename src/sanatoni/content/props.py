"""Serializers turning blog, page and media records into page props."""

from sanatoni.catalog.props import products_props

from .services import media as media_service
from .services import pages as page_builder
from .services import seo


def blog_category_props(category, posts_count=None):
    data = {
        "id": category.pk,
        "name": category.name,
        "slug": category.slug,
        "description": category.description,
    }
    if posts_count is not None:
        data["posts_count"] = posts_count
    return data


def tag_props(tag):
    return {"id": tag.pk, "name": tag.name, "slug": tag.slug, "color": tag.effective_color}


def author_props(user):
    if user is None:
        return None
    return {"id": str(user.pk), "name": user.name}


def post_props(post, detail=False):
    data = {
        "id": post.pk,
        "title": post.title,
        "slug": post.slug,
        "excerpt": post.excerpt,
        "featured_image": post.featured_image or None,
        "status": post.status,
        "published_at": post.published_at,
        "is_featured": post.is_featured,
        "views_count": post.views_count,
        "reading_time": post.reading_time,
        "category": blog_category_props(post.category) if post.category_id else None,
        "tags": [tag_props(tag) for tag in post.tags.all()],
        "author": author_props(post.author),
    }
    if detail:
        data.update({
            "content": post.content,
            "gallery_images": post.gallery_images,
            "allow_comments": post.allow_comments,
            "meta_title": post.meta_title,
            "meta_description": post.meta_description,
            "meta_keywords": post.meta_keywords,
        })
    return data


def section_props(section):
    data = {
        "id": section.pk,
        "type": section.type,
        "name": section.name,
        "content": section.content,
        "settings": section.settings,
        "sort_order": section.sort_order,
        "is_active": section.is_active,
    }
    if section.type == "products":
        data["products"] = products_props(page_builder.products_for_section(section.content))
    return data


def page_props(page, sections=None):
    data = {
        "id": page.pk,
        "title": page.title,
        "slug": page.slug,
        "excerpt": page.excerpt,
        "status": page.status,
        "template": page.template,
        "is_homepage": page.is_homepage,
        "published_at": page.published_at,
        "updated_at": page.updated_at,
    }
    if sections is not None:
        data.update({
            "content": page.content,
            "settings": page.settings,
            "sections": [section_props(section) for section in sections],
        })
    return data


def media_props(media):
    return {
        "id": media.pk,
        "filename": media.filename,
        "original_name": media.original_name,
        "mime_type": media.mime_type,
        "size": media.size,
        "formatted_size": media.formatted_size,
        "url": media_service.media_url(media),
        "alt_text": media.alt_text,
        "title": media.title,
        "description": media.description,
        "metadata": media.metadata,
        "is_image": media.is_image,
        "uploaded_by": author_props(media.uploaded_by),
        "created_at": media.created_at,
    }


def seo_props(obj):
    return {
        "meta": seo.generate_meta_tags(obj),
        "structuredData": seo.generate_structured_data(obj),
    }
