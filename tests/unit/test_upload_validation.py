#!/usr/bin/env python3
"""
Unit tests for upload descriptors and their validation.
"""

import io

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from entity_assets.constants import DEFAULT_IMAGE_MIME_MAP
from entity_assets.enums import UploadStatus
from entity_assets.exceptions import UnsupportedTypeError, UploadError
from entity_assets.models.upload_model import UploadedAsset
from entity_assets.utils.upload_validation import assert_valid_upload, detect_extension


def _upload(status=UploadStatus.OK, size=10, media_type="image/jpeg", name="a.jpg"):
    return UploadedAsset(
        status=status,
        size=size,
        media_type=media_type,
        client_filename=name,
        stream=io.BytesIO(b"x" * (size or 0)),
    )


@pytest.mark.unit
@pytest.mark.upload
class TestAssertValidUpload:
    def test_ok_upload_passes(self):
        assert_valid_upload(_upload())

    @pytest.mark.parametrize(
        "status",
        [
            UploadStatus.INI_SIZE,
            UploadStatus.FORM_SIZE,
            UploadStatus.PARTIAL,
            UploadStatus.NO_TMP_DIR,
            UploadStatus.CANT_WRITE,
            UploadStatus.EXTENSION,
        ],
    )
    def test_transport_errors(self, status):
        with pytest.raises(UploadError) as exc_info:
            assert_valid_upload(_upload(status=status))
        assert exc_info.value.status == int(status)

    def test_empty_payload(self):
        with pytest.raises(UploadError, match="empty"):
            assert_valid_upload(_upload(size=0))


@pytest.mark.unit
@pytest.mark.upload
class TestDetectExtension:
    @pytest.mark.parametrize(
        "media_type, extension",
        [
            ("image/jpeg", "jpg"),
            ("image/png", "png"),
            ("image/gif", "gif"),
            ("image/webp", "webp"),
            ("IMAGE/JPEG", "jpg"),
            ("image/png; charset=binary", "png"),
        ],
    )
    def test_allowed_types(self, media_type, extension):
        upload = _upload(media_type=media_type)
        assert detect_extension(upload, DEFAULT_IMAGE_MIME_MAP) == extension

    @pytest.mark.parametrize("media_type", ["image/tiff", "application/pdf", None, ""])
    def test_rejected_types(self, media_type):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            detect_extension(_upload(media_type=media_type), DEFAULT_IMAGE_MIME_MAP)
        assert exc_info.value.media_type == media_type

    def test_client_extension_is_ignored(self):
        spoofed = _upload(media_type="application/x-msdownload", name="photo.jpg")

        with pytest.raises(UnsupportedTypeError):
            detect_extension(spoofed, DEFAULT_IMAGE_MIME_MAP)


@pytest.mark.unit
@pytest.mark.upload
class TestUploadedAsset:
    def test_no_file_sentinel(self):
        upload = UploadedAsset.no_file()

        assert upload.is_empty_selection
        assert upload.status == UploadStatus.NO_FILE

    def test_from_path(self, tmp_path):
        path = tmp_path / "upload.tmp"
        path.write_bytes(b"12345")

        upload = UploadedAsset.from_path(path, "application/pdf", "doc.pdf")

        assert upload.size == 5
        assert upload.source == str(path)
        with upload.open() as handle:
            assert handle.read() == b"12345"

    def test_open_rewinds_stream(self):
        upload = _upload(size=3)
        upload.stream.read()

        with upload.open() as handle:
            assert handle.read() == b"xxx"
        assert not upload.stream.closed

    def test_open_without_payload(self):
        upload = UploadedAsset(status=UploadStatus.OK, size=1, media_type="image/png")

        with pytest.raises(FileNotFoundError):
            with upload.open():
                pass

    def test_from_upload_file(self):
        upload_file = UploadFile(
            file=io.BytesIO(b"%PDF-1.4"),
            filename="Report.pdf",
            headers=Headers({"content-type": "application/pdf"}),
        )

        upload = UploadedAsset.from_upload_file(upload_file)

        assert upload.status == UploadStatus.OK
        assert upload.size == 8
        assert upload.media_type == "application/pdf"
        assert upload.client_filename == "Report.pdf"
        assert upload.stream is upload_file.file

    def test_from_upload_file_without_filename(self):
        upload_file = UploadFile(file=io.BytesIO(b""), filename="")

        assert UploadedAsset.from_upload_file(upload_file).is_empty_selection
