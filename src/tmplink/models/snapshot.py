from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ClipboardSnapshot:
    """Point-in-time read of the clipboard: a file reference, a text, or nothing."""
    file_path: Optional[str] = None
    text: Optional[str] = None

    @property
    def has_file(self) -> bool:
        return bool(self.file_path)

    @property
    def has_text(self) -> bool:
        return bool(self.text and self.text.strip())

    @property
    def is_empty(self) -> bool:
        return not self.has_file and not self.has_text
