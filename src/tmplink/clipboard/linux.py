import logging
import os
import shutil
import subprocess
from typing import Callable, List, Optional

from tmplink.clipboard.base import ClipboardBackend
from tmplink.errors import ClipboardUnavailable
from tmplink.models.snapshot import ClipboardSnapshot
from tmplink.utils.file_manager import FileManager

logger = logging.getLogger(__name__)


class LinuxClipboard(ClipboardBackend):
    _FILE_TARGETS = {"x-special/gnome-copied-files", "text/uri-list"}
    # Most preferred first
    _IMAGE_TARGETS = (
        "image/png",
        "image/jpeg",
        "image/jpg",
        "image/pjpeg",
        "image/webp",
        "image/bmp",
        "image/x-ms-bmp",
    )
    _TEXT_TARGETS = {
        "text/plain",
        "text/plain;charset=utf-8",
        "text/plain;charset=utf8",
        "utf8_string",
        "string",
    }

    def __init__(self, file_manager: Optional[FileManager] = None):
        self.file_manager = file_manager or FileManager()

    def read(self) -> ClipboardSnapshot:
        strategies = (
            self._from_wayland,
            self._from_xclip,
        )

        for strategy in strategies:
            result = strategy()
            if result is not None:
                return result

        if not self._has_wayland() and not shutil.which("xclip"):
            raise ClipboardUnavailable(
                "No clipboard tool found. Install wl-clipboard or xclip.")
        return ClipboardSnapshot()

    def _has_wayland(self) -> bool:
        return bool(os.environ.get("WAYLAND_DISPLAY")) and bool(shutil.which("wl-paste"))

    def _from_wayland(self) -> Optional[ClipboardSnapshot]:
        if not self._has_wayland():
            return None

        types = self._parse_type_list(
            self._run_command(["wl-paste", "--list-types"], timeout=1.5)
        )

        def reader(target: str) -> Optional[bytes]:
            command = ["wl-paste", "--type", target]
            if target.lower().startswith("text/"):
                command.append("--no-newline")
            return self._run_command(command, timeout=1.5)

        result = self._extract_from_types(types, reader)
        if result:
            return result

        text_bytes = self._run_command(
            ["wl-paste", "--no-newline"], timeout=1.5)
        if text_bytes:
            return self._build_text_snapshot(text_bytes)

        return None

    def _from_xclip(self) -> Optional[ClipboardSnapshot]:
        if not shutil.which("xclip"):
            return None

        types = self._parse_type_list(
            self._run_command(
                ["xclip", "-selection", "clipboard", "-t", "TARGETS", "-o"],
                timeout=1.5,
            )
        )

        def reader(target: str) -> Optional[bytes]:
            return self._run_command(
                ["xclip", "-selection", "clipboard", "-t", target, "-o"],
                timeout=1.5,
            )

        result = self._extract_from_types(types, reader)
        if result:
            return result

        text_bytes = self._run_command(
            ["xclip", "-selection", "clipboard", "-o"],
            timeout=1.5,
        )
        if text_bytes:
            return self._build_text_snapshot(text_bytes)

        return None

    def _extract_from_types(
        self,
        types: List[str],
        reader: Callable[[str], Optional[bytes]],
    ) -> Optional[ClipboardSnapshot]:
        if not types:
            return None

        lowered = [target.lower() for target in types]

        for target, target_lower in zip(types, lowered):
            if target_lower in self._FILE_TARGETS:
                data = reader(target)
                if data:
                    file_snapshot = self._build_file_snapshot(data)
                    if file_snapshot:
                        return file_snapshot

        offered = dict(zip(lowered, types))
        for image_target in self._IMAGE_TARGETS:
            if image_target in offered:
                data = reader(offered[image_target])
                if data:
                    path = self.file_manager.save_image(data)
                    if path is not None:
                        return ClipboardSnapshot(file_path=str(path))

        for target, target_lower in zip(types, lowered):
            if target_lower in self._TEXT_TARGETS:
                data = reader(target)
                if data:
                    return self._build_text_snapshot(data)

        return None

    def _build_file_snapshot(self, data: bytes) -> Optional[ClipboardSnapshot]:
        entries = self._parse_file_entries(data)
        if not entries:
            return None
        if len(entries) > 1:
            logger.warning(
                f"{len(entries)} files on the clipboard, only the first one is uploaded")
        return ClipboardSnapshot(file_path=entries[0])

    def _build_text_snapshot(self, payload: bytes) -> ClipboardSnapshot:
        return ClipboardSnapshot(text=payload.decode("utf-8", errors="ignore"))

    def _parse_type_list(self, data: Optional[bytes]) -> List[str]:
        if not data:
            return []
        text = data.decode("utf-8", errors="ignore")
        return [line.strip() for line in text.splitlines() if line.strip()]

    def _parse_file_entries(self, data: bytes) -> List[str]:
        text = data.decode("utf-8", errors="ignore")
        lines = [line.strip() for line in text.replace(
            "\r", "\n").split("\n") if line.strip()]
        # gnome-copied-files starts with the operation name
        if lines and lines[0].lower() in {"copy", "cut"}:
            lines = lines[1:]
        return [line for line in lines if not line.startswith("#")]

    def _run_command(self, command: List[str], timeout: float) -> Optional[bytes]:
        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
                timeout=timeout,
            )
            return result.stdout
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError):
            return None

    def _write_text(self, text: str) -> bool:
        if self._has_wayland() and shutil.which("wl-copy"):
            command = ["wl-copy"]
        elif shutil.which("xclip"):
            command = ["xclip", "-selection", "clipboard"]
        else:
            return False

        subprocess.run(
            command,
            input=text.encode("utf-8"),
            check=True,
            timeout=2.0,
        )
        return True
