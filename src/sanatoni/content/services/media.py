"""Media library: validated uploads, image metadata, thumbnails and deletion."""

import io
import logging
import os
import posixpath

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.db.models import Q
from django.utils import timezone
from django.utils.crypto import get_random_string
from django.utils.text import slugify
from PIL import ExifTags, Image, UnidentifiedImageError

from ..exceptions import MediaValidationError
from ..models import MediaFile

logger = logging.getLogger(__name__)

IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")
VIDEO_TYPES = ("video/mp4", "video/avi", "video/mov", "video/webm")
DOCUMENT_TYPES = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
)
ALLOWED_TYPES = IMAGE_TYPES + VIDEO_TYPES + DOCUMENT_TYPES

TYPE_FILTERS = {
    "image": IMAGE_TYPES,
    "video": VIDEO_TYPES,
    "document": DOCUMENT_TYPES,
}

THUMBNAIL_SIZES = {
    "thumb": (150, 150),
    "medium": (300, 300),
    "large": (800, 600),
}

DEFAULTS = {
    "MAX_FILE_SIZE": 10 * 1024 * 1024,
    "MAX_IMAGE_WIDTH": 2048,
    "MAX_IMAGE_HEIGHT": 2048,
}


def media_setting(name):
    return getattr(settings, "MEDIA_LIBRARY", {}).get(name, DEFAULTS[name])


def storage_directory(mime_type, now=None):
    now = now or timezone.now()
    if mime_type in IMAGE_TYPES:
        kind = "images"
    elif mime_type in VIDEO_TYPES:
        kind = "videos"
    elif mime_type in DOCUMENT_TYPES:
        kind = "documents"
    else:
        kind = "other"
    return f"media/{kind}/{now:%Y/%m}"


def unique_filename(original_name, now=None):
    """``<slug>-<Y-m-d-H-i-s>-<random>.<ext>`` for an uploaded file name."""
    now = now or timezone.now()
    name, extension = os.path.splitext(original_name)
    slug = slugify(name) or "file"
    return f"{slug}-{now:%Y-%m-%d-%H-%M-%S}-{get_random_string(8)}{extension.lower()}"


def _open_image(upload):
    upload.seek(0)
    try:
        image = Image.open(upload)
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise MediaValidationError("Invalid image file") from exc
    finally:
        upload.seek(0)
    return image


def validate_upload(upload):
    """Reject oversized files, disallowed types and oversized images."""
    max_size = media_setting("MAX_FILE_SIZE")
    if upload.size > max_size:
        raise MediaValidationError(
            f"File size exceeds maximum allowed size of {max_size // (1024 * 1024)}MB"
        )
    mime_type = getattr(upload, "content_type", None)
    if mime_type not in ALLOWED_TYPES:
        raise MediaValidationError(f"File type not allowed: {mime_type}")
    if mime_type in IMAGE_TYPES:
        width, height = _open_image(upload).size
        max_width = media_setting("MAX_IMAGE_WIDTH")
        max_height = media_setting("MAX_IMAGE_HEIGHT")
        if width > max_width or height > max_height:
            raise MediaValidationError(
                f"Image dimensions exceed maximum allowed size of {max_width}x{max_height}"
            )


def image_metadata(upload):
    """Dimensions plus camera, date taken and orientation from EXIF."""
    image = _open_image(upload)
    metadata = {"dimensions": {"width": image.width, "height": image.height}}
    if image.format in ("JPEG", "TIFF"):
        exif = image.getexif()
        values = {
            "camera": exif.get(ExifTags.Base.Model),
            "date_taken": exif.get_ifd(ExifTags.IFD.Exif).get(ExifTags.Base.DateTimeOriginal),
            "orientation": exif.get(ExifTags.Base.Orientation),
        }
        values = {key: value for key, value in values.items() if value}
        if values:
            metadata["exif"] = values
    return metadata


def upload_file(upload, user=None):
    """Validate and store ``upload``, returning the new media record."""
    validate_upload(upload)
    mime_type = upload.content_type
    filename = unique_filename(upload.name)
    metadata = image_metadata(upload) if mime_type in IMAGE_TYPES else {}
    path = default_storage.save(posixpath.join(storage_directory(mime_type), filename), upload)

    media = MediaFile.objects.create(
        filename=posixpath.basename(path),
        original_name=upload.name,
        mime_type=mime_type,
        size=upload.size,
        path=path,
        metadata=metadata,
        uploaded_by=user if user is not None and user.is_authenticated else None,
    )
    if media.is_image:
        generate_thumbnails(media)
    logger.info("Uploaded media file %s (%s)", media.path, media.mime_type)
    return media


def upload_files(uploads, user=None):
    """Upload each file; a rejected file is logged and skipped."""
    uploaded = []
    errors = {}
    for upload in uploads:
        try:
            uploaded.append(upload_file(upload, user))
        except MediaValidationError as exc:
            logger.warning("Rejected upload %s: %s", upload.name, exc)
            errors[upload.name] = str(exc)
    return uploaded, errors


def thumbnail_path(path, size_name):
    directory, filename = posixpath.split(path)
    name, extension = posixpath.splitext(filename)
    return posixpath.join(directory, "thumbs", f"{name}-{size_name}{extension}")


def generate_thumbnails(media, sizes=None):
    """Write aspect-preserving thumbnails next to the image and record them."""
    if not media.is_image:
        raise MediaValidationError("File is not an image")
    sizes = sizes or THUMBNAIL_SIZES
    thumbnails = {}

    with default_storage.open(media.path, "rb") as source:
        original = Image.open(source)
        original.load()

    for name, (width, height) in sizes.items():
        image = original.copy()
        image.thumbnail((width, height))
        buffer = io.BytesIO()
        try:
            image.save(buffer, format=original.format or "PNG")
        except (OSError, ValueError):
            logger.exception("Thumbnail %s failed for media file %s", name, media.pk)
            continue
        path = thumbnail_path(media.path, name)
        if default_storage.exists(path):
            default_storage.delete(path)
        saved = default_storage.save(path, ContentFile(buffer.getvalue()))
        thumbnails[name] = {
            "path": saved,
            "width": image.width,
            "height": image.height,
            "url": default_storage.url(saved),
        }

    media.metadata = {**media.metadata, "thumbnails": thumbnails}
    media.save(update_fields=["metadata", "updated_at"])
    return thumbnails


def delete_file(media):
    """Remove the stored file, its thumbnails and the record."""
    paths = [media.path] + [thumb["path"] for thumb in media.thumbnails.values()]
    for path in paths:
        if default_storage.exists(path):
            default_storage.delete(path)
    media.delete()
    logger.info("Deleted media file %s", media.path)


def bulk_delete(media_ids):
    deleted = 0
    for media in MediaFile.objects.filter(pk__in=media_ids):
        delete_file(media)
        deleted += 1
    return deleted


def update_metadata(media, alt_text=None, title=None, description=None):
    for field, value in (("alt_text", alt_text), ("title", title), ("description", description)):
        if value is not None:
            setattr(media, field, value)
    media.save()
    return media


def media_files(type=None, search=None, uploaded_by=None):
    files = MediaFile.objects.select_related("uploaded_by")
    if type in TYPE_FILTERS:
        files = files.filter(mime_type__in=TYPE_FILTERS[type])
    if search:
        files = files.filter(Q(original_name__icontains=search) | Q(alt_text__icontains=search))
    if uploaded_by:
        files = files.filter(uploaded_by_id=uploaded_by)
    return files.order_by("-created_at")


def media_url(media):
    return default_storage.url(media.path)
