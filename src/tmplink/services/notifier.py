import logging
import platform
import shutil
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional

logger = logging.getLogger(__name__)

SUCCESS = "success"
FAILURE = "failure"


class Notifier(ABC):
    """Fire-and-forget user notifications. Never raises."""

    def notify(self, kind: str, title: str, message: Optional[str] = None) -> None:
        try:
            self._send(kind, title, message)
        except Exception as e:
            logger.warning(f"Notification failed: {e}")

    @abstractmethod
    def _send(self, kind: str, title: str, message: Optional[str]) -> None:
        pass


class LogNotifier(Notifier):

    def _send(self, kind: str, title: str, message: Optional[str]) -> None:
        text = f"{title}: {message}" if message else title
        if kind == FAILURE:
            logger.error(text)
        else:
            logger.info(text)


class DesktopNotifier(Notifier):
    """Desktop toast via notify-send (Linux) or osascript (macOS).

    Falls back to logging on platforms without either tool.
    """

    def __init__(self, app_name: str = "tmplink") -> None:
        self.app_name = app_name
        self._fallback = LogNotifier()

    def _send(self, kind: str, title: str, message: Optional[str]) -> None:
        command = self._command(kind, title, message)
        if command is None:
            self._fallback.notify(kind, title, message)
            return

        subprocess.run(
            command,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=True,
            timeout=2.0,
        )

    def _command(self, kind: str, title: str, message: Optional[str]) -> Optional[List[str]]:
        system = platform.system()

        if system == "Linux" and shutil.which("notify-send"):
            urgency = "critical" if kind == FAILURE else "normal"
            command = ["notify-send", "--app-name", self.app_name, "--urgency", urgency, title]
            if message:
                command.append(message)
            return command

        if system == "Darwin" and shutil.which("osascript"):
            script = f"display notification {_applescript_str(message or '')} with title {_applescript_str(title)}"
            return ["osascript", "-e", script]

        return None


def _applescript_str(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
