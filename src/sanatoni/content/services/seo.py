"""SEO meta tags, structured data, score analysis and sitemap data."""

import re
from collections import Counter

from django.conf import settings
from django.db import transaction
from django.templatetags.static import static
from django.urls import reverse
from django.utils.html import strip_tags
from django.utils.text import Truncator

from sanatoni.catalog.models import Category, Product

from ..models import BlogCategory, BlogPost, Page, SeoSetting, plain_text

TITLE_MIN, TITLE_MAX = 30, 60
DESCRIPTION_MIN, DESCRIPTION_MAX = 120, 160
CONTENT_MIN_WORDS = 300
MAX_SCORE = 100

STOP_WORDS = frozenset(
    "the and or but in on at to for of with by a an is are was were be been have has had "
    "do does did will would should could can may might must this that these those".split()
)

SEO_FIELDS = [
    "meta_title",
    "meta_description",
    "meta_keywords",
    "og_title",
    "og_description",
    "og_image",
    "og_type",
    "twitter_card",
    "twitter_title",
    "twitter_description",
    "twitter_image",
    "canonical_url",
    "structured_data",
]

GRADES = [(90, "A+"), (80, "A"), (70, "B"), (60, "C"), (50, "D")]


def absolute_url(path):
    return settings.SITE_URL.rstrip("/") + path


def limit(text, length):
    return Truncator(text).chars(length, truncate="...")


def canonical_url(obj):
    if isinstance(obj, Page):
        if obj.is_homepage:
            return absolute_url(reverse("home"))
        return absolute_url(reverse("content:page-detail", args=[obj.slug]))
    if isinstance(obj, BlogPost):
        return absolute_url(reverse("content:post-detail", args=[obj.slug]))
    if isinstance(obj, Product):
        return absolute_url(reverse("catalog:product-detail", args=[obj.slug]))
    if isinstance(obj, BlogCategory):
        return absolute_url(reverse("content:blog-category", args=[obj.slug]))
    if isinstance(obj, Category):
        return absolute_url(reverse("catalog:category-products", args=[obj.slug]))
    return absolute_url("/")


def default_title(obj):
    return getattr(obj, "title", None) or getattr(obj, "name", None) or f"{type(obj).__name__} #{obj.pk}"


def default_description(obj):
    if isinstance(obj, (Page, BlogPost)):
        return limit(plain_text(obj.content or obj.excerpt), DESCRIPTION_MAX)
    if isinstance(obj, Product):
        return limit(plain_text(obj.description), DESCRIPTION_MAX)
    if isinstance(obj, (BlogCategory, Category)):
        return obj.description or ""
    return ""


def default_keywords(obj):
    if isinstance(obj, (Page, BlogPost)):
        content = obj.content
    elif isinstance(obj, Product):
        content = obj.description
    else:
        content = ""
    if not content:
        return ""
    return ", ".join(generate_keywords(content, 5))


def default_image(obj):
    if isinstance(obj, Product) and obj.primary_image:
        return obj.primary_image
    if isinstance(obj, BlogPost) and obj.featured_image:
        return obj.featured_image
    return absolute_url(static("images/default-og-image.jpg"))


def default_og_type(obj):
    if isinstance(obj, Product):
        return "product"
    if isinstance(obj, BlogPost):
        return "article"
    return "website"


def _pick(*values):
    for value in values:
        if value:
            return value
    return ""


def generate_meta_tags(obj, overrides=None):
    """Meta, Open Graph and Twitter tags for ``obj``.

    Precedence for each tag: explicit override, stored SEO setting, then a
    default derived from the record itself.
    """
    overrides = overrides or {}
    seo = SeoSetting.for_object(obj)
    title = default_title(obj)
    description = default_description(obj)
    image = default_image(obj)
    meta_title = seo.meta_title if seo else ""
    meta_description = seo.meta_description if seo else ""

    return {
        "title": _pick(overrides.get("title"), meta_title, title),
        "description": _pick(overrides.get("description"), meta_description, description),
        "keywords": _pick(overrides.get("keywords"), seo and seo.meta_keywords, default_keywords(obj)),
        "canonical": _pick(overrides.get("canonical"), seo and seo.canonical_url, canonical_url(obj)),
        "og:title": _pick(overrides.get("og_title"), seo and seo.effective_og_title, title),
        "og:description": _pick(
            overrides.get("og_description"), seo and seo.effective_og_description, description
        ),
        "og:image": _pick(overrides.get("og_image"), seo and seo.og_image, image),
        "og:type": _pick(overrides.get("og_type"), seo and seo.og_type, default_og_type(obj)),
        "og:url": _pick(overrides.get("og_url"), canonical_url(obj)),
        "twitter:card": _pick(overrides.get("twitter_card"), seo and seo.twitter_card, "summary_large_image"),
        "twitter:title": _pick(
            overrides.get("twitter_title"), seo and seo.effective_twitter_title, title
        ),
        "twitter:description": _pick(
            overrides.get("twitter_description"), seo and seo.effective_twitter_description, description
        ),
        "twitter:image": _pick(overrides.get("twitter_image"), seo and seo.effective_twitter_image, image),
    }


def default_structured_data(obj):
    data = {"@context": "https://schema.org/"}
    if isinstance(obj, Product):
        data.update({
            "@type": "Product",
            "name": obj.name,
            "description": plain_text(obj.description),
            "image": default_image(obj),
            "offers": {
                "@type": "Offer",
                "price": str(obj.display_price),
                "priceCurrency": "BDT",
                "availability": (
                    "https://schema.org/InStock" if obj.in_stock else "https://schema.org/OutOfStock"
                ),
            },
        })
    elif isinstance(obj, BlogPost):
        data.update({
            "@type": "Article",
            "headline": obj.title,
            "description": obj.excerpt or limit(plain_text(obj.content), 200),
            "image": obj.featured_image,
            "author": {
                "@type": "Person",
                "name": obj.author.name if obj.author_id and obj.author.name else "Anonymous",
            },
            "publisher": {"@type": "Organization", "name": settings.SITE_NAME},
            "datePublished": obj.published_at.isoformat() if obj.published_at else None,
            "dateModified": obj.updated_at.isoformat() if obj.updated_at else None,
        })
    elif isinstance(obj, Page):
        data.update({
            "@type": "WebPage",
            "name": obj.title,
            "description": limit(plain_text(obj.content), 200),
            "url": canonical_url(obj),
        })
    else:
        data.update({"@type": "Thing", "name": default_title(obj)})
    return data


def generate_structured_data(obj):
    seo = SeoSetting.for_object(obj)
    if seo and seo.structured_data:
        return seo.structured_data
    return default_structured_data(obj)


@transaction.atomic
def update_seo_settings(obj, data):
    """Create or update the SEO overrides stored for ``obj``."""
    seo = SeoSetting.for_object(obj, create=True)
    for field in SEO_FIELDS:
        if field in data:
            value = data[field]
            setattr(seo, field, value if value is not None else seo._meta.get_field(field).get_default())
    seo.save()
    return seo


# Text helpers


def optimize_title(title, max_length=TITLE_MAX):
    """Shorten ``title`` at a word boundary when one falls in the last 30%."""
    if len(title) <= max_length:
        return title
    cut = title[: max_length - 3]
    last_space = cut.rfind(" ")
    if last_space > max_length * 0.7:
        return cut[:last_space] + "..."
    return title[: max_length - 3] + "..."


def optimize_description(description, max_length=DESCRIPTION_MAX):
    """Shorten ``description`` preferring a sentence end, then a word boundary."""
    if len(description) <= max_length:
        return description
    cut = description[: max_length - 3]
    sentence_end = max(cut.rfind("."), cut.rfind("!"), cut.rfind("?"))
    if sentence_end > max_length * 0.7:
        return cut[: sentence_end + 1]
    last_space = cut.rfind(" ")
    if last_space > max_length * 0.7:
        return cut[:last_space] + "..."
    return description[: max_length - 3] + "..."


def generate_keywords(content, max_keywords=10):
    """Most frequent words of three or more letters, stop words excluded."""
    words = re.findall(r"\b[a-z]{3,}\b", strip_tags(content or "").lower())
    counts = Counter(word for word in words if word not in STOP_WORDS)
    return [word for word, _ in counts.most_common(max_keywords)]


def grade_for(percentage):
    for threshold, grade in GRADES:
        if percentage >= threshold:
            return grade
    return "F"


def analyze_seo_score(obj):
    """Score ``obj`` out of 100 with the issues and suggestions behind the score."""
    score = 0
    issues = []
    suggestions = []
    tags = generate_meta_tags(obj)

    title = tags["title"]
    if not title:
        issues.append("Meta title is missing")
    elif len(title) < TITLE_MIN:
        issues.append(f"Meta title is too short (less than {TITLE_MIN} characters)")
    elif len(title) > TITLE_MAX:
        issues.append(f"Meta title is too long (more than {TITLE_MAX} characters)")
    else:
        score += 20

    description = tags["description"]
    if not description:
        issues.append("Meta description is missing")
    elif len(description) < DESCRIPTION_MIN:
        issues.append(f"Meta description is too short (less than {DESCRIPTION_MIN} characters)")
    elif len(description) > DESCRIPTION_MAX:
        issues.append(f"Meta description is too long (more than {DESCRIPTION_MAX} characters)")
    else:
        score += 20

    if tags["keywords"]:
        score += 10
    else:
        suggestions.append("Consider adding meta keywords")

    if tags["og:image"]:
        score += 10
    else:
        suggestions.append("Add Open Graph image for better social media sharing")
    if tags["og:title"] and tags["og:description"]:
        score += 5

    if tags["canonical"]:
        score += 10
    else:
        suggestions.append("Set canonical URL to avoid duplicate content issues")

    if generate_structured_data(obj):
        score += 15
    else:
        suggestions.append("Add structured data markup for better search engine understanding")

    if isinstance(obj, (Page, BlogPost)):
        word_count = len(plain_text(obj.content).split())
        if word_count >= CONTENT_MIN_WORDS:
            score += 10
        elif word_count > 0:
            score += 5
            suggestions.append(f"Content should be at least {CONTENT_MIN_WORDS} words for better SEO")
        else:
            issues.append("Content is empty or too short")
    else:
        score += 10

    percentage = round(score / MAX_SCORE * 100, 1)
    return {
        "score": score,
        "max_score": MAX_SCORE,
        "percentage": percentage,
        "grade": grade_for(percentage),
        "issues": issues,
        "suggestions": suggestions,
    }


# Sitemap


def sitemap_entries():
    """URLs for published pages, published posts and active products."""
    entries = []
    for page in Page.objects.published():
        entries.append({
            "url": canonical_url(page),
            "lastmod": page.updated_at,
            "changefreq": "weekly",
            "priority": "1.0" if page.is_homepage else "0.8",
        })
    for post in BlogPost.objects.published():
        entries.append({
            "url": canonical_url(post),
            "lastmod": post.updated_at,
            "changefreq": "monthly",
            "priority": "0.7",
        })
    for product in Product.objects.published():
        entries.append({
            "url": canonical_url(product),
            "lastmod": product.updated_at,
            "changefreq": "weekly",
            "priority": "0.9",
        })
    return entries
