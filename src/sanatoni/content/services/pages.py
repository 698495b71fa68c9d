"""Page builder: section catalogue, section editing, page export and import."""

import logging

from django.db import transaction
from django.db.models import Max

from sanatoni.catalog.models import Category, Product

from ..exceptions import InvalidSectionTypeError
from ..models import Page, PageSection, PublishStatus

logger = logging.getLogger(__name__)

COLUMN_OPTIONS = [2, 3, 4, 5, 6]

SECTION_TYPES = {
    "hero": {
        "name": "Hero Section",
        "description": "Large banner with background image, title, and call-to-action",
        "fields": {
            "title": {"type": "text", "required": True},
            "subtitle": {"type": "text"},
            "background_image": {"type": "image"},
            "background_video": {"type": "video"},
            "overlay_opacity": {"type": "range", "min": 0, "max": 100, "default": 50},
            "text_color": {"type": "color", "default": "#ffffff"},
            "button_text": {"type": "text"},
            "button_url": {"type": "url"},
            "height": {
                "type": "select",
                "options": {"small": "400px", "medium": "600px", "large": "800px", "fullscreen": "100vh"},
                "default": "medium",
            },
        },
    },
    "text": {
        "name": "Text Content",
        "description": "Rich text content with formatting options",
        "fields": {
            "title": {"type": "text"},
            "content": {"type": "wysiwyg", "required": True},
            "alignment": {"type": "select", "options": ["left", "center", "right"], "default": "left"},
            "background_color": {"type": "color"},
            "text_color": {"type": "color"},
        },
    },
    "image": {
        "name": "Image Block",
        "description": "Single image with optional caption and link",
        "fields": {
            "image": {"type": "image", "required": True},
            "alt_text": {"type": "text", "required": True},
            "caption": {"type": "text"},
            "link_url": {"type": "url"},
            "size": {"type": "select", "options": ["small", "medium", "large", "full"], "default": "medium"},
            "alignment": {"type": "select", "options": ["left", "center", "right"], "default": "center"},
        },
    },
    "gallery": {
        "name": "Image Gallery",
        "description": "Multiple images in a grid layout",
        "fields": {
            "title": {"type": "text"},
            "images": {"type": "image_multiple", "required": True},
            "columns": {"type": "select", "options": COLUMN_OPTIONS, "default": 3},
            "spacing": {"type": "select", "options": ["none", "small", "medium", "large"], "default": "medium"},
            "lightbox": {"type": "boolean", "default": True},
        },
    },
    "products": {
        "name": "Product Showcase",
        "description": "Display selected products or categories",
        "fields": {
            "title": {"type": "text"},
            "display_type": {
                "type": "select",
                "options": ["featured", "category", "specific", "latest"],
                "default": "featured",
            },
            "category_id": {"type": "select_category"},
            "product_ids": {"type": "select_products"},
            "limit": {"type": "number", "min": 1, "max": 20, "default": 8},
            "columns": {"type": "select", "options": COLUMN_OPTIONS, "default": 4},
            "show_price": {"type": "boolean", "default": True},
            "show_description": {"type": "boolean", "default": False},
        },
    },
    "testimonials": {
        "name": "Testimonials",
        "description": "Customer testimonials and reviews",
        "fields": {
            "title": {"type": "text"},
            "testimonials": {
                "type": "repeater",
                "fields": {
                    "name": {"type": "text", "required": True},
                    "content": {"type": "textarea", "required": True},
                    "rating": {"type": "select", "options": [1, 2, 3, 4, 5], "default": 5},
                    "avatar": {"type": "image"},
                    "position": {"type": "text"},
                    "company": {"type": "text"},
                },
            },
            "layout": {"type": "select", "options": ["grid", "slider"], "default": "grid"},
            "columns": {"type": "select", "options": [1, 2, 3], "default": 2},
        },
    },
    "cta": {
        "name": "Call to Action",
        "description": "Prominent call-to-action section",
        "fields": {
            "title": {"type": "text", "required": True},
            "description": {"type": "textarea"},
            "button_text": {"type": "text", "required": True},
            "button_url": {"type": "url", "required": True},
            "background_color": {"type": "color", "default": "#f3f4f6"},
            "text_color": {"type": "color", "default": "#1f2937"},
            "button_color": {"type": "color", "default": "#3b82f6"},
            "style": {
                "type": "select",
                "options": ["centered", "left-aligned", "right-aligned"],
                "default": "centered",
            },
        },
    },
    "faq": {
        "name": "FAQ Section",
        "description": "Frequently asked questions with collapsible answers",
        "fields": {
            "title": {"type": "text"},
            "faqs": {
                "type": "repeater",
                "fields": {
                    "question": {"type": "text", "required": True},
                    "answer": {"type": "wysiwyg", "required": True},
                },
            },
            "style": {"type": "select", "options": ["accordion", "tabs"], "default": "accordion"},
        },
    },
    "contact": {
        "name": "Contact Form",
        "description": "Contact form with customizable fields",
        "fields": {
            "title": {"type": "text"},
            "description": {"type": "textarea"},
            "fields": {
                "type": "select_multiple",
                "options": ["name", "email", "phone", "subject", "message"],
                "default": ["name", "email", "message"],
            },
            "success_message": {
                "type": "text",
                "default": "Thank you for your message. We will get back to you soon.",
            },
            "button_text": {"type": "text", "default": "Send Message"},
        },
    },
    "custom": {
        "name": "Custom HTML",
        "description": "Custom HTML content for advanced layouts",
        "fields": {
            "html": {"type": "code", "required": True, "language": "html"},
            "css": {"type": "code", "language": "css"},
            "js": {"type": "code", "language": "javascript"},
        },
    },
}


def section_type(name):
    try:
        return SECTION_TYPES[name]
    except KeyError:
        raise InvalidSectionTypeError(name) from None


# Content normalisation per section type


def _products_content(content):
    display_type = content.get("display_type")
    if display_type == "category" and content.get("category_id"):
        category = Category.objects.filter(pk=content["category_id"]).first()
        content["category_name"] = category.name if category else None
    elif display_type == "specific" and content.get("product_ids"):
        content["selected_products"] = list(
            Product.objects.filter(pk__in=content["product_ids"]).values("id", "name")
        )
    return content


def _gallery_content(content):
    if isinstance(content.get("images"), list):
        content["images"] = [
            {
                "id": image.get("id"),
                "url": image.get("url", ""),
                "alt": image.get("alt", ""),
                "caption": image.get("caption", ""),
            }
            for image in content["images"]
        ]
    return content


def _testimonials_content(content):
    if isinstance(content.get("testimonials"), list):
        content["testimonials"] = [
            {
                "name": item.get("name", ""),
                "content": item.get("content", ""),
                "rating": min(5, max(1, int(item.get("rating") or 5))),
                "avatar": item.get("avatar"),
                "position": item.get("position", ""),
                "company": item.get("company", ""),
            }
            for item in content["testimonials"]
        ]
    return content


def _faq_content(content):
    if isinstance(content.get("faqs"), list):
        content["faqs"] = [
            {"question": faq.get("question", ""), "answer": faq.get("answer", "")}
            for faq in content["faqs"]
        ]
    return content


CONTENT_PROCESSORS = {
    "products": _products_content,
    "gallery": _gallery_content,
    "testimonials": _testimonials_content,
    "faq": _faq_content,
}


def process_content(type, content):
    content = dict(content or {})
    processor = CONTENT_PROCESSORS.get(type)
    return processor(content) if processor else content


def next_sort_order(page):
    return (page.sections.aggregate(highest=Max("sort_order"))["highest"] or 0) + 1


# Section editing


def create_section(page, type, content=None, settings=None, name="", sort_order=None, is_active=True):
    definition = section_type(type)
    return PageSection.objects.create(
        page=page,
        type=type,
        name=name or definition["name"],
        content=process_content(type, content),
        settings=settings or {},
        sort_order=next_sort_order(page) if sort_order is None else sort_order,
        is_active=is_active,
    )


def update_section(section, content=None, settings=None, name=None, sort_order=None, is_active=None):
    section.content = process_content(section.type, section.content if content is None else content)
    if settings is not None:
        section.settings = settings
    if name is not None:
        section.name = name
    if sort_order is not None:
        section.sort_order = sort_order
    if is_active is not None:
        section.is_active = is_active
    section.save()
    return section


@transaction.atomic
def reorder_sections(page, section_ids):
    """Assign sort orders 1..n following ``section_ids``; foreign ids are ignored."""
    for index, section_id in enumerate(section_ids, start=1):
        page.sections.filter(pk=section_id).update(sort_order=index)


def duplicate_section(section):
    copy = PageSection.objects.create(
        page=section.page,
        type=section.type,
        name=f"{section.name} (Copy)",
        content=section.content,
        settings=section.settings,
        sort_order=next_sort_order(section.page),
        is_active=section.is_active,
    )
    return copy


def products_for_section(content, limit=None):
    limit = limit or content.get("limit") or 8
    products = Product.objects.published().select_related("category").prefetch_related("images")
    display_type = content.get("display_type", "featured")
    if display_type == "featured":
        products = products.featured()
    elif display_type == "category" and content.get("category_id"):
        products = products.filter(category_id=content["category_id"])
    elif display_type == "specific" and content.get("product_ids"):
        products = products.filter(pk__in=content["product_ids"])
    elif display_type == "latest":
        products = products.order_by("-created_at")
    return list(products[: int(limit)])


# Export and import

PAGE_EXPORT_FIELDS = ["title", "slug", "content", "meta_title", "meta_description", "template", "settings"]
SECTION_EXPORT_FIELDS = ["type", "name", "content", "settings", "sort_order"]


def export_page(page):
    return {
        "page": {field: getattr(page, field) for field in PAGE_EXPORT_FIELDS},
        "sections": [
            {field: getattr(section, field) for field in SECTION_EXPORT_FIELDS}
            for section in page.sections.all()
        ],
    }


@transaction.atomic
def import_page(data, user=None):
    """Create a draft page with its sections from ``export_page`` output."""
    page_data = {
        field: value for field, value in data["page"].items() if field in PAGE_EXPORT_FIELDS
    }
    if Page.objects.filter(slug=page_data.get("slug")).exists():
        page_data.pop("slug")
    page = Page.objects.create(
        **page_data,
        status=PublishStatus.DRAFT,
        created_by=user if user is not None and user.is_authenticated else None,
    )
    for section in data.get("sections", []):
        create_section(
            page,
            section["type"],
            content=section.get("content"),
            settings=section.get("settings"),
            name=section.get("name", ""),
            sort_order=section.get("sort_order"),
        )
    logger.info("Imported page %s with %d sections", page.slug, page.sections.count())
    return page
