"""Tests for the media library."""

import io
from datetime import datetime

import pytest
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

from sanatoni.content.exceptions import MediaValidationError
from sanatoni.content.models import MediaFile
from sanatoni.content.services import media


def image_upload(name="Brass Diya.png", size=(1000, 500), format="PNG", content_type="image/png"):
    buffer = io.BytesIO()
    Image.new("RGB", size, "gold").save(buffer, format=format)
    return SimpleUploadedFile(name, buffer.getvalue(), content_type=content_type)


class TestNaming:
    def test_unique_filename(self):
        now = datetime(2024, 10, 9, 8, 7, 6)
        name = media.unique_filename("Brass Diya.PNG", now=now)
        assert name.startswith("brass-diya-2024-10-09-08-07-06-")
        assert name.endswith(".png")

    @pytest.mark.parametrize(
        "mime_type,kind",
        [("image/png", "images"), ("video/mp4", "videos"), ("application/pdf", "documents"), ("text/csv", "other")],
    )
    def test_storage_directory(self, mime_type, kind):
        assert media.storage_directory(mime_type, now=datetime(2024, 3, 1)) == f"media/{kind}/2024/03"

    @pytest.mark.parametrize("size,expected", [(512, "512 B"), (2048, "2 KB"), (1572864, "1.5 MB")])
    def test_formatted_size(self, size, expected):
        assert MediaFile(size=size).formatted_size == expected


class TestValidation:
    def test_rejects_disallowed_type(self):
        upload = SimpleUploadedFile("run.sh", b"echo", content_type="text/x-sh")
        with pytest.raises(MediaValidationError, match="File type not allowed"):
            media.validate_upload(upload)

    def test_rejects_large_files(self, settings):
        settings.MEDIA_LIBRARY = {"MAX_FILE_SIZE": 10}
        with pytest.raises(MediaValidationError, match="exceeds maximum allowed size"):
            media.validate_upload(image_upload())

    def test_rejects_large_images(self, settings):
        settings.MEDIA_LIBRARY = {"MAX_IMAGE_WIDTH": 800}
        with pytest.raises(MediaValidationError, match="800x2048"):
            media.validate_upload(image_upload())

    def test_rejects_corrupt_images(self):
        upload = SimpleUploadedFile("fake.png", b"not really a png", content_type="image/png")
        with pytest.raises(MediaValidationError, match="Invalid image file"):
            media.validate_upload(upload)


@pytest.mark.django_db
class TestUpload:
    def test_image_upload_with_thumbnails(self, admin_user):
        record = media.upload_file(image_upload(), user=admin_user)

        assert record.original_name == "Brass Diya.png"
        assert record.path.startswith("media/images/")
        assert record.uploaded_by == admin_user
        assert record.metadata["dimensions"] == {"width": 1000, "height": 500}
        assert default_storage.exists(record.path)

        thumbs = record.thumbnails
        assert set(thumbs) == {"thumb", "medium", "large"}
        assert (thumbs["thumb"]["width"], thumbs["thumb"]["height"]) == (150, 75)
        assert (thumbs["large"]["width"], thumbs["large"]["height"]) == (800, 400)
        assert all(default_storage.exists(thumb["path"]) for thumb in thumbs.values())

    def test_document_upload(self):
        record = media.upload_file(
            SimpleUploadedFile("catalogue.pdf", b"%PDF-1.4", content_type="application/pdf")
        )
        assert record.is_document
        assert record.metadata == {}
        assert record.path.startswith("media/documents/")

    def test_batch_collects_errors(self):
        bad = SimpleUploadedFile("run.sh", b"echo", content_type="text/x-sh")
        uploaded, errors = media.upload_files([image_upload(size=(20, 20)), bad])
        assert len(uploaded) == 1
        assert errors == {"run.sh": "File type not allowed: text/x-sh"}

    def test_delete_removes_files(self):
        record = media.upload_file(image_upload(size=(200, 200)))
        paths = [record.path] + [thumb["path"] for thumb in record.thumbnails.values()]
        media.delete_file(record)
        assert not MediaFile.objects.exists()
        assert not any(default_storage.exists(path) for path in paths)

    def test_listing_filters(self):
        image = media.upload_file(image_upload(size=(20, 20)))
        media.upload_file(SimpleUploadedFile("catalogue.pdf", b"%PDF", content_type="application/pdf"))
        assert list(media.media_files(type="image")) == [image]
        assert list(media.media_files(search="brass")) == [image]

    def test_update_metadata(self):
        record = media.upload_file(image_upload(size=(20, 20)))
        media.update_metadata(record, alt_text="Brass diya", title=None)
        record.refresh_from_db()
        assert record.alt_text == "Brass diya"
        assert record.title == ""
