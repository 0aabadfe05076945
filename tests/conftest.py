import sys
from pathlib import Path
from typing import List, Optional, Tuple

import pytest

# Make src importable without an install
REPO_ROOT = Path(__file__).resolve().parent.parent
SRC = REPO_ROOT / "src"
sys.path.insert(0, str(SRC))

from tmplink.clipboard.base import ClipboardBackend  # noqa: E402
from tmplink.models.snapshot import ClipboardSnapshot  # noqa: E402
from tmplink.services.notifier import Notifier  # noqa: E402
from tmplink.utils.filesystem import FileStat  # noqa: E402

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 24


class FakeClipboard(ClipboardBackend):

    def __init__(self, snapshot: Optional[ClipboardSnapshot] = None, read_error: Optional[Exception] = None,
                 write_ok: bool = True):
        self.snapshot = snapshot or ClipboardSnapshot()
        self.read_error = read_error
        self.write_ok = write_ok
        self.reads = 0
        self.written: List[str] = []

    def read(self) -> ClipboardSnapshot:
        self.reads += 1
        if self.read_error is not None:
            raise self.read_error
        return self.snapshot

    def _write_text(self, text: str) -> bool:
        if not self.write_ok:
            raise OSError("clipboard locked")
        self.written.append(text)
        return True


class RecordingNotifier(Notifier):

    def __init__(self):
        self.calls: List[Tuple[str, str, Optional[str]]] = []

    def _send(self, kind, title, message):
        self.calls.append((kind, title, message))


class FakeFileSystem:
    """Reports a fixed size without keeping that many bytes around."""

    def __init__(self, size: int, content: bytes = b"hello", is_directory: bool = False):
        self.size = size
        self.content = content
        self.is_directory = is_directory
        self.reads = 0

    def exists(self, path) -> bool:
        return True

    def stat(self, path) -> FileStat:
        return FileStat(is_directory=self.is_directory, size=self.size)

    def read_all(self, path) -> bytes:
        self.reads += 1
        return self.content


@pytest.fixture
def notifier():
    return RecordingNotifier()
