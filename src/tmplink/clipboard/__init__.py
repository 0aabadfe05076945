from tmplink.clipboard.base import ClipboardBackend
from tmplink.clipboard.factory import get_clipboard, get_clipboard_class

__all__ = [
    'ClipboardBackend',
    'get_clipboard',
    'get_clipboard_class',
]
