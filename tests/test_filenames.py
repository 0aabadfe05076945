import re
import sys
from pathlib import Path

import pytest

from conftest import JPEG_BYTES, PNG_BYTES
from tmplink.utils.filenames import (
    infer_file_name,
    is_placeholder_name,
    sanitize_file_name,
    snippet_file_name,
    sniff_image_extension,
)
from tmplink.utils.filesystem import resolve_clipboard_path
from tmplink.utils.formatting import format_bytes


@pytest.mark.parametrize("raw, expected", [
    ("Image (800×600).png", "Image_800x600.png"),
    ("3×4 grid.png", "3x4_grid.png"),
    ("  my  [draft] {v2}.txt ", "my_draft_v2.txt"),
    ("__a__b__", "a_b"),
    ("résumé.pdf", "rsum.pdf"),
    ("tab\tand\nnewline.md", "tab_and_newline.md"),
    ("already-safe_name.tar.gz", "already-safe_name.tar.gz"),
    ("日本語", "upload"),
    ("(((  )))", "upload"),
])
def test_sanitize_file_name(raw, expected):
    assert sanitize_file_name(raw) == expected


@pytest.mark.parametrize("raw", [
    "Image (1920 × 1080)",
    "[draft]   {copy} (1).png",
    "a    b\t\tc",
    " _ leading and trailing _ ",
    "weird ✕ sign ⨯ too.jpg",
])
def test_sanitized_names_are_clean(raw):
    name = sanitize_file_name(raw)

    assert re.fullmatch(r"[A-Za-z0-9._-]+", name)
    assert not any(ch in name for ch in "()[]{}×✕✖⨯")
    assert "__" not in name
    assert not name.startswith("_")
    assert not name.endswith("_")


@pytest.mark.parametrize("name, expected", [
    ("Image", True),
    ("clipboard-paste", True),
    ("Image (1280×720)", True),
    ("Image (3).tiff", True),
    ("report.pdf", False),
    ("Imagery.png", False),
    ("photo (1).png", False),
])
def test_is_placeholder_name(name, expected):
    assert is_placeholder_name(name) is expected


def test_sniff_image_extension():
    assert sniff_image_extension(PNG_BYTES[:4]) == ".png"
    assert sniff_image_extension(JPEG_BYTES[:4]) == ".jpg"
    assert sniff_image_extension(b"GIF8") is None


@pytest.mark.parametrize("name, content, expected", [
    ("Image", PNG_BYTES, "Image.png"),
    ("Image (1×1)", JPEG_BYTES, "Image (1×1).jpg"),
    ("clip", b"GIF89a....", "clip.png"),
    ("clip", b"\x89P", "clip.png"),
    ("report.pdf", PNG_BYTES, "report.pdf"),
    ("Image (1).PNG", PNG_BYTES, "Image (1).PNG"),
    ("Image (2).jpeg", JPEG_BYTES, "Image (2).jpeg"),
    ("Image (3).tiff", b"II*\x00rest", "Image (3).tiff"),
    ("Image (4).tiff", PNG_BYTES, "Image (4).tiff.png"),
])
def test_infer_file_name(name, content, expected):
    assert infer_file_name(name, content) == expected


def test_snippet_file_name():
    assert snippet_file_name(1700000000000) == "snippet_1700000000000.txt"
    assert re.fullmatch(r"snippet_\d{13}\.txt", snippet_file_name())


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX paths")
def test_resolve_clipboard_path_decodes_file_uri():
    assert resolve_clipboard_path("file:///tmp/My%20File%20%281%29.txt") == Path("/tmp/My File (1).txt")
    assert resolve_clipboard_path("/tmp/plain name.txt") == Path("/tmp/plain name.txt")


@pytest.mark.parametrize("name", ["a#b.png", "what?.txt", "50% off.pdf"])
def test_resolve_clipboard_path_keeps_reserved_characters(name, tmp_path):
    target = tmp_path / name
    target.write_bytes(b"x")

    resolved = resolve_clipboard_path("file://" + str(target).replace("%", "%25"))

    assert resolved == target
    assert resolved.exists()


def test_resolve_clipboard_path_localhost_authority():
    assert resolve_clipboard_path("file://localhost/tmp/a%20b.txt") == Path("/tmp/a b.txt")


def test_resolve_clipboard_path_makes_relative_absolute(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert resolve_clipboard_path("notes.txt") == tmp_path / "notes.txt"


@pytest.mark.parametrize("size, expected", [
    (0, "0 Bytes"),
    (512, "512 Bytes"),
    (1536, "1.5 KB"),
    (1024 * 1024, "1 MB"),
    (100 * 1024 * 1024, "100 MB"),
])
def test_format_bytes(size, expected):
    assert format_bytes(size) == expected
