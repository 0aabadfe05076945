from tmplink.utils.filenames import (
    infer_file_name,
    is_placeholder_name,
    sanitize_file_name,
    snippet_file_name,
    sniff_image_extension,
)
from tmplink.utils.filesystem import FileStat, LocalFileSystem, resolve_clipboard_path
from tmplink.utils.formatting import format_bytes

__all__ = [
    'FileStat',
    'LocalFileSystem',
    'format_bytes',
    'infer_file_name',
    'is_placeholder_name',
    'resolve_clipboard_path',
    'sanitize_file_name',
    'snippet_file_name',
    'sniff_image_extension',
]
