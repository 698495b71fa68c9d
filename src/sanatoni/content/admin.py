from django.contrib import admin

from .models import BlogCategory, BlogPost, BlogTag, MediaFile, Page, PageSection, SeoSetting


@admin.register(BlogCategory)
class BlogCategoryAdmin(admin.ModelAdmin):
    list_display = ["name", "slug", "is_active", "sort_order"]
    list_filter = ["is_active"]
    prepopulated_fields = {"slug": ["name"]}


@admin.register(BlogTag)
class BlogTagAdmin(admin.ModelAdmin):
    list_display = ["name", "slug", "color"]
    search_fields = ["name"]


@admin.register(BlogPost)
class BlogPostAdmin(admin.ModelAdmin):
    list_display = ["title", "category", "status", "published_at", "is_featured", "views_count"]
    list_filter = ["status", "is_featured", "category"]
    search_fields = ["title", "content"]
    filter_horizontal = ["tags"]
    date_hierarchy = "published_at"


class PageSectionInline(admin.StackedInline):
    model = PageSection
    extra = 0


@admin.register(Page)
class PageAdmin(admin.ModelAdmin):
    list_display = ["title", "slug", "status", "is_homepage", "sort_order"]
    list_filter = ["status", "is_homepage"]
    search_fields = ["title", "slug"]
    inlines = [PageSectionInline]


@admin.register(MediaFile)
class MediaFileAdmin(admin.ModelAdmin):
    list_display = ["original_name", "mime_type", "size", "uploaded_by", "created_at"]
    search_fields = ["original_name", "alt_text"]


@admin.register(SeoSetting)
class SeoSettingAdmin(admin.ModelAdmin):
    list_display = ["content_type", "object_id", "meta_title", "updated_at"]
    list_filter = ["content_type"]
