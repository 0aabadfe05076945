import platform
from typing import Type

from tmplink.clipboard.base import ClipboardBackend


def get_clipboard_class() -> Type[ClipboardBackend]:
    system = platform.system()

    if system == "Windows":
        from tmplink.clipboard.windows import WindowsClipboard
        return WindowsClipboard
    elif system == "Linux":
        from tmplink.clipboard.linux import LinuxClipboard
        return LinuxClipboard
    elif system == "Darwin":
        from tmplink.clipboard.macos import MacOSClipboard
        return MacOSClipboard
    else:
        raise NotImplementedError(f"Platform '{system}' is not supported")


def get_clipboard(**kwargs) -> ClipboardBackend:
    clipboard_class = get_clipboard_class()
    return clipboard_class(**kwargs)
