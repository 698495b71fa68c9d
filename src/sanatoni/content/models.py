"""Content models: blog, CMS pages with sections, media library and SEO overrides."""

import math
import zlib

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models
from django.db.models import F
from django.utils import timezone
from django.utils.html import strip_tags

from sanatoni.catalog.models import unique_slug

WORDS_PER_MINUTE = 200
EXCERPT_LENGTH = 200

TAG_COLORS = [
    "#3B82F6",
    "#EF4444",
    "#10B981",
    "#F59E0B",
    "#8B5CF6",
    "#EC4899",
    "#06B6D4",
    "#84CC16",
    "#F97316",
    "#6366F1",
]


def plain_text(html):
    return " ".join(strip_tags(html or "").split())


class PublishStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    PUBLISHED = "published", "Published"
    SCHEDULED = "scheduled", "Scheduled"


# Blog


class BlogCategoryQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)


class BlogCategory(models.Model):
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    description = models.TextField(blank=True)
    meta_title = models.CharField(max_length=255, blank=True)
    meta_description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BlogCategoryQuerySet.as_manager()

    class Meta:
        ordering = ["sort_order", "name"]
        verbose_name_plural = "blog categories"

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = unique_slug(BlogCategory, self.name, self.pk)
        super().save(*args, **kwargs)

    @property
    def effective_meta_title(self):
        return self.meta_title or self.name

    @property
    def effective_meta_description(self):
        return self.meta_description or self.description[:160]

    @property
    def posts_count(self):
        return self.posts.published().count()


class BlogTag(models.Model):
    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=120, unique=True, blank=True)
    color = models.CharField(max_length=7, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = unique_slug(BlogTag, self.name, self.pk)
        super().save(*args, **kwargs)

    @property
    def effective_color(self):
        """Stored color, else a stable palette color derived from the name."""
        if self.color:
            return self.color
        return TAG_COLORS[zlib.crc32(self.name.encode()) % len(TAG_COLORS)]


class BlogPostQuerySet(models.QuerySet):
    def published(self):
        return self.filter(status=PublishStatus.PUBLISHED, published_at__lte=timezone.now())

    def featured(self):
        return self.filter(is_featured=True)

    def due_for_publishing(self):
        return self.filter(status=PublishStatus.SCHEDULED, published_at__lte=timezone.now())

    def search(self, term):
        return self.filter(
            models.Q(title__icontains=term)
            | models.Q(content__icontains=term)
            | models.Q(excerpt__icontains=term)
        )


class BlogPost(models.Model):
    Status = PublishStatus

    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    content = models.TextField()
    excerpt = models.TextField(blank=True)
    featured_image = models.CharField(max_length=255, blank=True)
    gallery_images = models.JSONField(default=list, blank=True)
    category = models.ForeignKey(
        BlogCategory,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="posts",
    )
    tags = models.ManyToManyField(BlogTag, blank=True, related_name="posts")
    status = models.CharField(max_length=20, choices=PublishStatus.choices, default=PublishStatus.DRAFT)
    published_at = models.DateTimeField(null=True, blank=True)
    meta_title = models.CharField(max_length=255, blank=True)
    meta_description = models.TextField(blank=True)
    meta_keywords = models.CharField(max_length=255, blank=True)
    views_count = models.PositiveIntegerField(default=0)
    is_featured = models.BooleanField(default=False)
    allow_comments = models.BooleanField(default=True)
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="blog_posts",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BlogPostQuerySet.as_manager()

    class Meta:
        ordering = ["-published_at", "-created_at"]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = unique_slug(BlogPost, self.title, self.pk)
        if not self.excerpt and self.content:
            self.excerpt = plain_text(self.content)[:EXCERPT_LENGTH]
        if self.status == PublishStatus.PUBLISHED and not self.published_at:
            self.published_at = timezone.now()
        super().save(*args, **kwargs)

    @property
    def is_published(self):
        return (
            self.status == PublishStatus.PUBLISHED
            and self.published_at is not None
            and self.published_at <= timezone.now()
        )

    @property
    def reading_time(self):
        """Minutes to read at 200 words per minute, at least one."""
        return max(1, math.ceil(len(plain_text(self.content).split()) / WORDS_PER_MINUTE))

    @property
    def effective_meta_title(self):
        return self.meta_title or self.title

    @property
    def effective_meta_description(self):
        return self.meta_description or self.excerpt[:160]

    def increment_views(self):
        BlogPost.objects.filter(pk=self.pk).update(views_count=F("views_count") + 1)
        self.refresh_from_db(fields=["views_count"])

    def previous_post(self):
        return (
            BlogPost.objects.published()
            .filter(published_at__lt=self.published_at)
            .order_by("-published_at")
            .first()
        )

    def next_post(self):
        return (
            BlogPost.objects.published()
            .filter(published_at__gt=self.published_at)
            .order_by("published_at")
            .first()
        )


# Pages


class PageQuerySet(models.QuerySet):
    def published(self):
        return self.filter(status=PublishStatus.PUBLISHED).filter(
            models.Q(published_at__isnull=True) | models.Q(published_at__lte=timezone.now())
        )


class Page(models.Model):
    Status = PublishStatus

    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    content = models.TextField(blank=True)
    excerpt = models.TextField(blank=True)
    meta_title = models.CharField(max_length=255, blank=True)
    meta_description = models.TextField(blank=True)
    meta_keywords = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, choices=PublishStatus.choices, default=PublishStatus.DRAFT)
    published_at = models.DateTimeField(null=True, blank=True)
    template = models.CharField(max_length=100, default="default")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    settings = models.JSONField(default=dict, blank=True)
    is_homepage = models.BooleanField(default=False)
    sort_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PageQuerySet.as_manager()

    class Meta:
        ordering = ["sort_order", "title"]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = unique_slug(Page, self.title, self.pk)
        if self.status == PublishStatus.PUBLISHED and not self.published_at:
            self.published_at = timezone.now()
        super().save(*args, **kwargs)
        if self.is_homepage:
            Page.objects.filter(is_homepage=True).exclude(pk=self.pk).update(is_homepage=False)

    @property
    def effective_meta_title(self):
        return self.meta_title or self.title

    @property
    def effective_meta_description(self):
        return self.meta_description or plain_text(self.content)[:160]

    def active_sections(self):
        return self.sections.filter(is_active=True)


class PageSection(models.Model):
    class Type(models.TextChoices):
        HERO = "hero", "Hero Section"
        TEXT = "text", "Text Content"
        IMAGE = "image", "Image Block"
        GALLERY = "gallery", "Image Gallery"
        PRODUCTS = "products", "Product Showcase"
        TESTIMONIALS = "testimonials", "Testimonials"
        CTA = "cta", "Call to Action"
        FAQ = "faq", "FAQ Section"
        CONTACT = "contact", "Contact Form"
        CUSTOM = "custom", "Custom HTML"

    page = models.ForeignKey(Page, on_delete=models.CASCADE, related_name="sections")
    type = models.CharField(max_length=20, choices=Type.choices)
    name = models.CharField(max_length=255, blank=True)
    content = models.JSONField(default=dict, blank=True)
    settings = models.JSONField(default=dict, blank=True)
    sort_order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["sort_order", "id"]

    def __str__(self):
        return self.name or self.get_type_display()


# Media library


class MediaFile(models.Model):
    filename = models.CharField(max_length=255)
    original_name = models.CharField(max_length=255)
    mime_type = models.CharField(max_length=100)
    size = models.PositiveBigIntegerField(default=0)
    path = models.CharField(max_length=500)
    alt_text = models.CharField(max_length=255, blank=True)
    title = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="media_files",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.original_name

    @property
    def is_image(self):
        return self.mime_type.startswith("image/")

    @property
    def is_video(self):
        return self.mime_type.startswith("video/")

    @property
    def is_audio(self):
        return self.mime_type.startswith("audio/")

    @property
    def is_document(self):
        return not (self.is_image or self.is_video or self.is_audio)

    @property
    def formatted_size(self):
        size = float(self.size)
        for unit in ("B", "KB", "MB", "GB"):
            if size < 1024 or unit == "GB":
                break
            size /= 1024
        return f"{round(size, 2):g} {unit}"

    @property
    def thumbnails(self):
        return self.metadata.get("thumbnails", {})


# SEO


class SeoSettingQuerySet(models.QuerySet):
    def for_object(self, obj):
        return self.filter(
            content_type=ContentType.objects.get_for_model(obj),
            object_id=str(obj.pk),
        )


class SeoSetting(models.Model):
    """SEO overrides for any record (product, post, page, category)."""

    content_type = models.ForeignKey(ContentType, on_delete=models.CASCADE)
    object_id = models.CharField(max_length=64)
    content_object = GenericForeignKey("content_type", "object_id")
    meta_title = models.CharField(max_length=255, blank=True)
    meta_description = models.TextField(blank=True)
    meta_keywords = models.CharField(max_length=255, blank=True)
    og_title = models.CharField(max_length=255, blank=True)
    og_description = models.TextField(blank=True)
    og_image = models.CharField(max_length=500, blank=True)
    og_type = models.CharField(max_length=50, default="website")
    twitter_card = models.CharField(max_length=50, default="summary_large_image")
    twitter_title = models.CharField(max_length=255, blank=True)
    twitter_description = models.TextField(blank=True)
    twitter_image = models.CharField(max_length=500, blank=True)
    canonical_url = models.CharField(max_length=500, blank=True)
    structured_data = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = SeoSettingQuerySet.as_manager()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["content_type", "object_id"], name="unique_seo_object"),
        ]

    def __str__(self):
        return f"SEO {self.content_type.model}#{self.object_id}"

    @classmethod
    def for_object(cls, obj, create=False):
        if create:
            setting, _ = cls.objects.get_or_create(
                content_type=ContentType.objects.get_for_model(obj),
                object_id=str(obj.pk),
            )
            return setting
        return cls.objects.for_object(obj).first()

    @property
    def effective_og_title(self):
        return self.og_title or self.meta_title

    @property
    def effective_og_description(self):
        return self.og_description or self.meta_description

    @property
    def effective_twitter_title(self):
        return self.twitter_title or self.effective_og_title

    @property
    def effective_twitter_description(self):
        return self.twitter_description or self.effective_og_description

    @property
    def effective_twitter_image(self):
        return self.twitter_image or self.og_image
