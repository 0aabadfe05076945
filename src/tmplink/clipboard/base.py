import logging
from abc import ABC, abstractmethod

from tmplink.models.snapshot import ClipboardSnapshot

logger = logging.getLogger(__name__)


class ClipboardBackend(ABC):
    """Platform clipboard access used by the upload pipeline."""

    @abstractmethod
    def read(self) -> ClipboardSnapshot:
        pass

    @abstractmethod
    def _write_text(self, text: str) -> bool:
        pass

    def write(self, text: str) -> bool:
        try:
            return self._write_text(text)
        except Exception as e:
            logger.warning(f"Clipboard write failed: {e}")
            return False
