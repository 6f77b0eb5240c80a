#!/usr/bin/env python3
"""
Unit tests for building and parsing on-disk asset names.
"""

import pytest

from entity_assets.exceptions import InvalidNameError
from entity_assets.utils.filename_utils import (
    base_name,
    build_document_filename,
    build_gallery_filename,
    build_main_filename,
    client_base_name,
    ensure_plain_filename,
    gallery_original_glob,
    is_gallery_filename,
    is_gallery_original,
    is_main_filename,
    parse_gallery_filename,
    replace_extension,
    slugify,
    temporary_name,
)


@pytest.mark.unit
class TestImageFilenames:
    """Main and gallery naming."""

    def test_build_main_filename(self):
        assert build_main_filename("000123", "webp") == "000123-main-original.webp"

    def test_build_gallery_filename_pads_index(self):
        assert (
            build_gallery_filename("000123", 7, "jpg")
            == "000123-gallery-007-original.jpg"
        )

    def test_parse_gallery_original(self):
        parsed = parse_gallery_filename("000123-gallery-012-original.webp")

        assert parsed is not None
        assert parsed.prefix == "000123-gallery-"
        assert parsed.index == 12
        assert parsed.variant == "-original"
        assert parsed.extension == "webp"
        assert parsed.filename == "000123-gallery-012-original.webp"

    def test_parse_size_variant(self):
        parsed = parse_gallery_filename("000123-gallery-003-300x200.jpg")

        assert parsed.index == 3
        assert parsed.variant == "-300x200"
        assert parsed.with_index(1) == "000123-gallery-001-300x200.jpg"

    def test_parse_without_variant(self):
        parsed = parse_gallery_filename("000123-gallery-004.png")

        assert parsed.variant == ""
        assert parsed.with_index(2) == "000123-gallery-002.png"

    def test_parse_build_are_inverse(self):
        name = build_gallery_filename("000042", 5, "webp")
        assert parse_gallery_filename(name).filename == name

    @pytest.mark.parametrize(
        "name",
        [
            "000123-main-original.jpg",
            "000123-gallery-01-original.jpg",
            "000123-gallery-001-original.webp__tmp",
            "report.pdf",
            ".renumber-journal.json",
        ],
    )
    def test_non_gallery_names(self, name):
        assert parse_gallery_filename(name) is None
        assert not is_gallery_filename(name)

    def test_is_gallery_original(self):
        assert is_gallery_original("000001-gallery-001-original.jpg")
        assert not is_gallery_original("000001-gallery-001-300x200.jpg")

    def test_is_main_filename(self):
        assert is_main_filename("000001-main-original.webp")
        assert not is_main_filename("000001-gallery-001-original.webp")

    def test_gallery_original_glob(self):
        assert gallery_original_glob("000001") == "000001-gallery-*-original.*"
        assert (
            gallery_original_glob("000001", "webp")
            == "000001-gallery-*-original.webp"
        )


@pytest.mark.unit
class TestNameHelpers:
    def test_replace_extension(self):
        assert replace_extension("000001-main-original.jpg", "webp") == (
            "000001-main-original.webp"
        )
        assert replace_extension("archive.tar.gz", ".zip") == "archive.tar.zip"

    def test_replace_extension_without_extension(self):
        assert replace_extension("README", "webp") == "README"

    def test_base_name(self):
        assert base_name("000001-main-original.jpg") == "000001-main-original"

    def test_temporary_name(self):
        assert temporary_name("a-gallery-001-original.jpg") == (
            "a-gallery-001-original.jpg__tmp"
        )

    def test_ensure_plain_filename(self):
        assert ensure_plain_filename("report.pdf") == "report.pdf"
        with pytest.raises(InvalidNameError):
            ensure_plain_filename("../000002/report.pdf")


@pytest.mark.unit
class TestDocumentFilenames:
    """Slugified document names."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Annual Report", "Annual-Report"),
            ("Výroční zpráva 2024", "Vyrocni-zprava-2024"),
            ("  --hello__world--  ", "hello-world"),
            ("...", ""),
        ],
    )
    def test_slugify(self, text, expected):
        assert slugify(text) == expected

    def test_client_base_name_strips_directories_and_extension(self):
        assert client_base_name("C:\\Users\\me\\Annual Report.PDF") == "Annual Report"
        assert client_base_name("docs/notes.v2.txt") == "notes.v2"
        assert client_base_name(None) == ""

    def test_build_document_filename_is_lower_case(self):
        assert build_document_filename("Annual Report.PDF", "pdf") == "annual-report.pdf"

    def test_extension_comes_from_argument_not_client(self):
        assert build_document_filename("invoice.exe", "pdf") == "invoice.pdf"

    @pytest.mark.parametrize("client_filename", ["", "....pdf", "***.pdf", None])
    def test_empty_slug_is_rejected(self, client_filename):
        with pytest.raises(InvalidNameError):
            build_document_filename(client_filename, "pdf")
