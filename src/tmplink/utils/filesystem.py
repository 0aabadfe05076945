import re
from dataclasses import dataclass
from pathlib import Path
from typing import Union
from urllib.parse import unquote

PathLike = Union[str, Path]


@dataclass(frozen=True)
class FileStat:
    is_directory: bool
    size: int


class LocalFileSystem:
    """Filesystem capability used by the upload pipeline."""

    def exists(self, path: PathLike) -> bool:
        return Path(path).exists()

    def stat(self, path: PathLike) -> FileStat:
        p = Path(path)
        if p.is_dir():
            return FileStat(is_directory=True, size=0)
        return FileStat(is_directory=False, size=p.stat().st_size)

    def read_all(self, path: PathLike) -> bytes:
        return Path(path).read_bytes()


_FILE_PREFIXES = ("file://localhost/", "file://")
_WINDOWS_DRIVE = re.compile(r"^/[A-Za-z]:")


def resolve_clipboard_path(reference: str) -> Path:
    """Turn a clipboard file reference (plain path or file:// URI) into an absolute path.

    The prefix is stripped as text so ``#`` and ``?`` stay part of the path.
    """
    entry = reference.strip()
    for prefix in _FILE_PREFIXES:
        if entry.lower().startswith(prefix):
            entry = entry[len(prefix):]
            if prefix.endswith("/"):
                entry = "/" + entry
            break
    entry = unquote(entry)
    if _WINDOWS_DRIVE.match(entry):
        entry = entry[1:]
    return Path(entry).expanduser().absolute()
