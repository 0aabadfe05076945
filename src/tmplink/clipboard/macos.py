import logging
from typing import Optional

try:
    from AppKit import NSPasteboard, NSPasteboardTypeString, NSPasteboardTypePNG, NSPasteboardTypeTIFF, NSPasteboardTypeFileURL
    from Foundation import NSURL
    HAS_APPKIT = True
except ImportError:
    HAS_APPKIT = False

from tmplink.clipboard.base import ClipboardBackend
from tmplink.errors import ClipboardUnavailable
from tmplink.models.snapshot import ClipboardSnapshot
from tmplink.utils.file_manager import FileManager

logger = logging.getLogger(__name__)


class MacOSClipboard(ClipboardBackend):

    def __init__(self, file_manager: Optional[FileManager] = None):
        self.file_manager = file_manager or FileManager()

    def read(self) -> ClipboardSnapshot:
        if not HAS_APPKIT:
            raise ClipboardUnavailable(
                "AppKit is not available. Install pyobjc-framework-Cocoa.")

        pasteboard = NSPasteboard.generalPasteboard()
        types = pasteboard.types() or []

        if NSPasteboardTypeFileURL in types:
            result = self._get_file(pasteboard)
            if result:
                return result

        # TIFF is what screenshots land as when PNG is not offered
        for pb_type in (NSPasteboardTypePNG, NSPasteboardTypeTIFF):
            if pb_type in types:
                result = self._get_image(pasteboard, pb_type)
                if result:
                    return result

        if NSPasteboardTypeString in types:
            text = pasteboard.stringForType_(NSPasteboardTypeString)
            if text:
                return ClipboardSnapshot(text=str(text))

        return ClipboardSnapshot()

    def _get_file(self, pasteboard) -> Optional[ClipboardSnapshot]:
        file_urls = pasteboard.readObjectsForClasses_options_([NSURL], None)
        if not file_urls:
            return None

        paths = [str(url.path()) for url in file_urls if url.isFileURL()]
        if not paths:
            return None
        if len(paths) > 1:
            logger.warning(
                f"{len(paths)} files on the clipboard, only the first one is uploaded")
        return ClipboardSnapshot(file_path=paths[0])

    def _get_image(self, pasteboard, pb_type) -> Optional[ClipboardSnapshot]:
        data = pasteboard.dataForType_(pb_type)
        if not data:
            return None
        path = self.file_manager.save_image(bytes(data))
        if path is None:
            return None
        return ClipboardSnapshot(file_path=str(path))

    def _write_text(self, text: str) -> bool:
        if not HAS_APPKIT:
            return False

        pasteboard = NSPasteboard.generalPasteboard()
        pasteboard.clearContents()
        return bool(pasteboard.setString_forType_(text, NSPasteboardTypeString))
