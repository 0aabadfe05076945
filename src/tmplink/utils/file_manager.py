import io
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError
from ulid import ULID

logger = logging.getLogger(__name__)

PASSTHROUGH_FORMATS = ("PNG", "JPEG")
PNG_MODES = ("1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA")


class FileManager:
    """Backs raw clipboard image data with a temporary file.

    Screenshots copied straight to the clipboard have no file behind them.
    They are written out as ``Image (<W>x<H>)`` without an extension, the same
    placeholder shape desktop clipboards use, so the upload pipeline infers
    the extension from the bytes. Formats other than PNG and JPEG (BMP, TIFF,
    WebP) are re-encoded as PNG first.
    """

    def __init__(self, base_dir: Optional[Path] = None):
        if base_dir is None:
            base_dir = Path(tempfile.gettempdir()) / ".tmplink_temp"
        self.base_dir = base_dir

    def save_image(self, payload: bytes) -> Optional[Path]:
        name, payload = self._prepare_image(payload)
        try:
            run_dir = self.base_dir / str(ULID())
            run_dir.mkdir(parents=True, exist_ok=True)
            file_path = run_dir / name
            file_path.write_bytes(payload)
            logger.info(f"Saved clipboard image to {file_path}")
            return file_path
        except OSError as e:
            logger.error(f"Failed to save clipboard image: {e}")
            return None

    def cleanup_all_files(self):
        try:
            if self.base_dir.exists():
                shutil.rmtree(self.base_dir)
                logger.info(f"Cleaned up temp folder {self.base_dir}")
        except OSError as e:
            logger.error(f"Cleanup all error: {e}")

    @staticmethod
    def _prepare_image(payload: bytes) -> Tuple[str, bytes]:
        """Name the image by its size; anything but PNG or JPEG is re-encoded as PNG."""
        try:
            with Image.open(io.BytesIO(payload)) as image:
                width, height = image.size
                if image.format not in PASSTHROUGH_FORMATS:
                    if image.mode not in PNG_MODES:
                        image = image.convert("RGBA")
                    buffer = io.BytesIO()
                    image.save(buffer, format="PNG")
                    payload = buffer.getvalue()
        except (UnidentifiedImageError, OSError, ValueError) as e:
            logger.warning(f"Could not decode clipboard image: {e}")
            return "Image", payload
        return f"Image ({width}×{height})", payload
