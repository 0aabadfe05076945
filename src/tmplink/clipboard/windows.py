import io
import logging
import time
from typing import List, Optional

import win32clipboard as wc
import win32con
from PIL import ImageGrab

from tmplink.clipboard.base import ClipboardBackend
from tmplink.models.snapshot import ClipboardSnapshot
from tmplink.utils.file_manager import FileManager

logger = logging.getLogger(__name__)


class WindowsClipboard(ClipboardBackend):

    def __init__(self, file_manager: Optional[FileManager] = None):
        self.file_manager = file_manager or FileManager()

    def read(self) -> ClipboardSnapshot:
        imagegrab_result = self._from_imagegrab()
        if imagegrab_result is not None:
            return imagegrab_result

        with self._opened():
            if wc.IsClipboardFormatAvailable(win32con.CF_HDROP):
                files = wc.GetClipboardData(win32con.CF_HDROP)
                if isinstance(files, str):
                    files = [files]
                snapshot = self._first_file(list(files or []))
                if snapshot is not None:
                    return snapshot

            if wc.IsClipboardFormatAvailable(wc.CF_UNICODETEXT):
                text = wc.GetClipboardData(wc.CF_UNICODETEXT)
                if text:
                    return ClipboardSnapshot(text=text)

        return ClipboardSnapshot()

    def _from_imagegrab(self) -> Optional[ClipboardSnapshot]:
        try:
            clipboard_data = ImageGrab.grabclipboard()
        except OSError:
            return None

        if clipboard_data is None:
            return None

        if isinstance(clipboard_data, (list, tuple)):
            return self._first_file(list(clipboard_data))

        if hasattr(clipboard_data, "save"):
            output = io.BytesIO()
            clipboard_data.save(output, format="PNG")
            path = self.file_manager.save_image(output.getvalue())
            if path is not None:
                return ClipboardSnapshot(file_path=str(path))

        return None

    def _first_file(self, paths: List[str]) -> Optional[ClipboardSnapshot]:
        paths = [p for p in paths if p]
        if not paths:
            return None
        if len(paths) > 1:
            logger.warning(
                f"{len(paths)} files on the clipboard, only the first one is uploaded")
        return ClipboardSnapshot(file_path=paths[0])

    def _opened(self):
        return _OpenClipboard()

    def _write_text(self, text: str) -> bool:
        with self._opened():
            wc.EmptyClipboard()
            wc.SetClipboardData(wc.CF_UNICODETEXT, text)
        return True


class _OpenClipboard:
    """Open the clipboard, retrying briefly while another process holds it."""

    def __enter__(self):
        last_error = None
        for _ in range(3):
            try:
                wc.OpenClipboard()
                return self
            except Exception as e:
                last_error = e
                time.sleep(0.05)
        raise last_error

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            wc.CloseClipboard()
        except Exception:
            pass
