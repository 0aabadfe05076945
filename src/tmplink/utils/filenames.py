"""File name helpers for clipboard uploads.

Clipboard managers hand out names like ``Image (1280×720)`` for screenshots
that never had a real file behind them. The upload endpoint only keeps names
made of ``[A-Za-z0-9._-]``, so every name is sanitized before upload and
placeholder names get an extension guessed from the content.
"""

import os
import re
import time
from typing import Optional

PNG_MAGIC = b"\x89PNG"
JPEG_MAGIC = b"\xff\xd8\xff"

DEFAULT_NAME = "upload"

_MULTIPLY_RE = re.compile("[×✕✖⨯]")
_BRACKETS_RE = re.compile(r"[()\[\]{}]")
_WHITESPACE_RE = re.compile(r"\s+")
_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9._-]")
_UNDERSCORES_RE = re.compile(r"_+")


def sanitize_file_name(name: str) -> str:
    sanitized = _MULTIPLY_RE.sub("x", name)
    sanitized = _BRACKETS_RE.sub("", sanitized)
    sanitized = _WHITESPACE_RE.sub("_", sanitized)
    sanitized = _UNSAFE_RE.sub("", sanitized)
    sanitized = _UNDERSCORES_RE.sub("_", sanitized)
    sanitized = sanitized.strip("_")
    return sanitized or DEFAULT_NAME


def is_placeholder_name(name: str) -> bool:
    """True for names a clipboard image temp file typically gets."""
    _, ext = os.path.splitext(name)
    return not ext or (name.startswith("Image") and "(" in name)


def sniff_image_extension(head: bytes) -> Optional[str]:
    if head[:4] == PNG_MAGIC:
        return ".png"
    if head[:3] == JPEG_MAGIC:
        return ".jpg"
    return None


def infer_file_name(name: str, content: bytes) -> str:
    """Append an image extension to placeholder names based on magic bytes.

    Names that already look like regular files are returned untouched. Content
    that is neither PNG nor JPEG only gets ``.png`` when the name had no
    extension at all.
    """
    if not is_placeholder_name(name):
        return name

    _, ext = os.path.splitext(name)
    lowered = name.lower()
    detected = sniff_image_extension(content[:4]) if len(content) >= 4 else None

    if detected == ".png":
        return name if lowered.endswith(".png") else name + ".png"
    if detected == ".jpg":
        if lowered.endswith(".jpg") or lowered.endswith(".jpeg"):
            return name
        return name + ".jpg"
    if not ext:
        return name + ".png"
    return name


def snippet_file_name(now_millis: Optional[int] = None) -> str:
    if now_millis is None:
        now_millis = int(time.time() * 1000)
    return f"snippet_{now_millis}.txt"
