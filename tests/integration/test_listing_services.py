#!/usr/bin/env python3
"""
Integration tests for the read-only image and document listings.
"""

import os

import pytest


def _touch(storage_root, relative_path, content=b"x", mtime=None):
    path = storage_root / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.mark.integration
@pytest.mark.image
class TestImageListing:
    def test_main_image_with_mtime(self, services, storage_root):
        _touch(storage_root, "product/000123/000123-main-original.webp", mtime=1700000000)

        listing = services.images.get_images(123, "product")

        assert listing.path == "product/000123"
        assert listing.main.file == "000123-main-original.webp"
        assert listing.main.time == 1700000000
        assert listing.gallery == []

    def test_missing_main_image_has_no_time(self, services):
        listing = services.images.get_images(7, "news")

        assert listing.main.file == "000007-main-original.webp"
        assert listing.main.time is None

    def test_gallery_listed_in_index_order(self, services, storage_root):
        folder = "product/000001"
        _touch(storage_root, f"{folder}/000001-gallery-010-original.webp", mtime=300)
        _touch(storage_root, f"{folder}/000001-gallery-002-original.webp", mtime=200)
        _touch(storage_root, f"{folder}/000001-gallery-001-original.webp", mtime=100)
        # other formats and sizes are not listed
        _touch(storage_root, f"{folder}/000001-gallery-001-original.jpg")
        _touch(storage_root, f"{folder}/000001-gallery-001-300x200.webp")
        _touch(storage_root, f"{folder}/000001-gallery-003-original.webp__tmp")

        listing = services.images.get_images(1, "product", gallery=True)

        assert [(image.file, image.time) for image in listing.gallery] == [
            ("000001-gallery-001-original.webp", 100),
            ("000001-gallery-002-original.webp", 200),
            ("000001-gallery-010-original.webp", 300),
        ]

    def test_gallery_only_when_requested(self, services, storage_root):
        _touch(storage_root, "product/000001/000001-gallery-001-original.webp")

        assert services.images.get_images(1, "product").gallery == []

    def test_lists_uploaded_images(self, services, make_upload):
        services.image_upload.upload(make_upload("main.jpg"), 4, "product")
        services.image_upload.upload_multiple(
            [make_upload("g1.jpg"), make_upload("g2.jpg")], 4, "product"
        )

        listing = services.images.get_images(4, "product", gallery=True)

        assert listing.main.time is not None
        assert [image.file for image in listing.gallery] == [
            "000004-gallery-001-original.webp",
            "000004-gallery-002-original.webp",
        ]


@pytest.mark.integration
class TestFileListing:
    def test_documents_sorted_with_sizes(self, services, storage_root):
        _touch(storage_root, "articles/000002/files/zeta.pdf", b"12345")
        _touch(storage_root, "articles/000002/files/alpha.docx", b"12")

        listing = services.files.get_files(2, "articles")

        assert listing.path == "articles/000002/files"
        assert [(item.file, item.size) for item in listing.files] == [
            ("alpha.docx", 2),
            ("zeta.pdf", 5),
        ]

    def test_hidden_and_extensionless_names_skipped(self, services, storage_root):
        _touch(storage_root, "articles/000002/files/.upload-abc123")
        _touch(storage_root, "articles/000002/files/README")
        _touch(storage_root, "articles/000002/files/offer.pdf")

        listing = services.files.get_files(2, "articles")

        assert [item.file for item in listing.files] == ["offer.pdf"]

    def test_missing_folder(self, services):
        listing = services.files.get_files(99, "articles")

        assert listing.files == []

    def test_lists_uploaded_document(self, services, make_document_upload):
        services.file_upload.upload(make_document_upload("Price List.pdf"), 5, "articles")

        listing = services.files.get_files(5, "articles")

        assert [(item.file, item.size) for item in listing.files] == [
            ("price-list.pdf", len(b"%PDF-1.4 sample document")),
        ]
