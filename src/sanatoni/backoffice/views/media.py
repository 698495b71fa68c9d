"""Media library management."""

import logging

from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.urls import reverse
from django.views import View

from sanatoni.content.exceptions import MediaValidationError
from sanatoni.content.models import MediaFile
from sanatoni.content.props import media_props
from sanatoni.content.services import media as media_service
from sanatoni.core.access import any_permission_required
from sanatoni.core.http import request_data
from sanatoni.core.pages import flash_response, form_errors, paginate, render_page, validation_error

from ..forms import BulkMediaActionForm, MediaUpdateForm
from ..mixins import BackofficeMixin

logger = logging.getLogger(__name__)

MEDIA_PER_PAGE = 24
SELECTION_LIMIT = 50


class MediaListView(BackofficeMixin, View):
    required_permissions = ("view_content",)
    method_permissions = {"post": ("create_content",)}

    def get(self, request):
        filters = {key: request.GET.get(key, "") for key in ("type", "search")}
        files = media_service.media_files(type=filters["type"], search=filters["search"])
        return render_page(request, "Admin/Media/Index", {
            "media": paginate(request, files, MEDIA_PER_PAGE, media_props),
            "filters": filters,
            "typeOptions": list(media_service.TYPE_FILTERS),
        })

    def post(self, request):
        uploads = request.FILES.getlist("files") or request.FILES.getlist("file")
        if not uploads:
            return validation_error(
                request, {"files": ["Select at least one file to upload."]}, fallback=reverse("backoffice:media-list")
            )
        uploaded, errors = media_service.upload_files(uploads, user=request.user)
        if not uploaded:
            return validation_error(
                request,
                {"files": list(errors.values())},
                message="No files were uploaded.",
                fallback=reverse("backoffice:media-list"),
            )
        message = f"{len(uploaded)} files uploaded successfully."
        if errors:
            message += f" {len(errors)} files were rejected."
        return flash_response(
            request,
            message,
            status=201,
            media=[media_props(media) for media in uploaded],
            errors=errors,
        )


class MediaDetailView(BackofficeMixin, View):
    required_permissions = ("view_content",)
    method_permissions = {
        "post": ("edit_content",),
        "put": ("edit_content",),
        "patch": ("edit_content",),
        "delete": ("delete_content",),
    }

    def dispatch(self, request, *args, **kwargs):
        self.media = get_object_or_404(MediaFile.objects.select_related("uploaded_by"), pk=kwargs["pk"])
        return super().dispatch(request, *args, **kwargs)

    def get(self, request, pk):
        return JsonResponse({"media": media_props(self.media)})

    def post(self, request, pk):
        form = MediaUpdateForm(request_data(request), instance=self.media)
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:media-list"))
        media = form.save()
        return flash_response(request, "Media updated successfully.", media=media_props(media))

    put = post
    patch = post

    def delete(self, request, pk):
        media_service.delete_file(self.media)
        return flash_response(request, "Media deleted successfully.")


class MediaBulkActionView(BackofficeMixin, View):
    required_permissions = ("edit_content",)

    def post(self, request):
        form = BulkMediaActionForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("backoffice:media-list"))

        files = form.cleaned_data["ids"]
        if form.cleaned_data["action"] == "delete":
            count = media_service.bulk_delete([media.pk for media in files])
            return flash_response(request, f"{count} files deleted successfully.", count=count)

        count = 0
        for media in files:
            if not media.is_image:
                continue
            try:
                media_service.generate_thumbnails(media)
            except (MediaValidationError, OSError):
                logger.exception("Thumbnail generation failed for media file %s", media.pk)
                continue
            count += 1
        level = messages.SUCCESS if count else messages.WARNING
        return flash_response(request, f"Thumbnails generated for {count} images.", level, count=count)


@any_permission_required("view_content")
def media_selection(request):
    """Compact listing for the media picker."""
    files = media_service.media_files(
        type=request.GET.get("type") or "image",
        search=request.GET.get("search"),
    )[:SELECTION_LIMIT]
    return JsonResponse({
        "media": [
            {
                "id": media.pk,
                "url": media_service.media_url(media),
                "thumbnail": media.thumbnails.get("thumb", {}).get("url") or media_service.media_url(media),
                "alt_text": media.alt_text,
                "original_name": media.original_name,
                "mime_type": media.mime_type,
            }
            for media in files
        ]
    })
