"""QR code rendering strategies for share links.

``LocalQrRenderer`` draws the code with ``qrcode`` and Pillow and returns a
PNG data URL. ``RemoteQrRenderer`` hands the link to a rendering endpoint and
returns the image URL. Which one runs is picked by ``UploadConfig.qr_mode``.
"""

import base64
import io
from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import urlencode

import qrcode
from qrcode.image.pil import PilImage

from tmplink.config import DEFAULT_QR_ENDPOINT


class QrRenderer(ABC):

    @abstractmethod
    def render(self, link: str) -> str:
        """Return an image payload (data URL or external URL) encoding ``link``."""


class LocalQrRenderer(QrRenderer):

    def __init__(self, size: int = 180, margin: int = 1) -> None:
        self.size = size
        self.margin = margin

    def _build(self, link: str) -> qrcode.QRCode:
        qr = qrcode.QRCode(border=self.margin)
        qr.add_data(link)
        qr.make(fit=True)
        return qr

    def render(self, link: str) -> str:
        qr = self._build(link)
        modules = qr.modules_count + 2 * self.margin
        qr.box_size = max(1, self.size // modules)

        image = qr.make_image(image_factory=PilImage, fill_color="black", back_color="white")
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
        return f"data:image/png;base64,{encoded}"

    def render_ascii(self, link: str) -> str:
        buffer = io.StringIO()
        self._build(link).print_ascii(out=buffer, invert=True)
        return buffer.getvalue()


class RemoteQrRenderer(QrRenderer):

    def __init__(self, endpoint: str = DEFAULT_QR_ENDPOINT, size: int = 180) -> None:
        self.endpoint = endpoint
        self.size = size

    def render(self, link: str) -> str:
        query = urlencode({"size": f"{self.size}x{self.size}", "data": link})
        separator = "&" if "?" in self.endpoint else "?"
        return f"{self.endpoint}{separator}{query}"


def build_qr_renderer(mode: str, size: int = 180, endpoint: str = DEFAULT_QR_ENDPOINT) -> Optional[QrRenderer]:
    if mode == "local":
        return LocalQrRenderer(size=size)
    if mode == "remote":
        return RemoteQrRenderer(endpoint=endpoint, size=size)
    if mode == "none":
        return None
    raise ValueError(f"Unsupported QR mode: {mode!r}")
