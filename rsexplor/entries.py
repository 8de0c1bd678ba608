"""Directory entries: classification, ordering and directory scanning."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass, field
from typing import Iterator

MAX_FILES = 1000
DEFAULT_ROOT = "/storage/emulated/0"
PARENT = ".."

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".bmp"})
COMPRESSED_EXTENSIONS = frozenset({".zip", ".tar", ".gz", ".bz2", ".xz", ".rar"})


class ScanError(Exception):
    """A directory could not be resolved or opened."""


class OutsideRootError(ScanError):
    """A directory lies outside the browsable root."""


def _extension(filename: str) -> str | None:
    dot = filename.rfind(".")
    if dot < 0:
        return None
    return filename[dot:].lower()


def is_image_file(filename: str) -> bool:
    """True when the name ends in a known image extension (any case)."""
    return _extension(filename) in IMAGE_EXTENSIONS


def is_compressed_file(filename: str) -> bool:
    """True when the name ends in a known archive extension (any case)."""
    return _extension(filename) in COMPRESSED_EXTENSIONS


def is_hidden_file(filename: str) -> bool:
    """True when the last path component starts with a dot."""
    base = filename.rsplit("/", 1)[-1]
    return base.startswith(".")


@dataclass
class FileEntry:
    """One item shown in the file list."""

    name: str
    is_dir: bool = False
    is_exec: bool = False
    is_image: bool = False
    is_hidden: bool = False

    def kind_label(self) -> str:
        """Label shown in the status bar for this entry's type."""
        if self.is_dir:
            return "(目录)"
        if self.is_exec:
            return "(可执行)"
        if self.is_image:
            return "(图片)"
        return "(文件)"

    def icon(self) -> str:
        """Icon drawn in front of the name."""
        if self.is_dir:
            return "📁"
        if self.is_image:
            return "🖼️"
        if self.is_exec:
            return "⚙️"
        return " "

    def display_name(self, width: int, find_mode: bool = False) -> str:
        """Name cut to ``width`` characters; directories get a trailing slash
        outside search mode when it fits."""
        width = max(width, 0)
        shown = self.name[:width]
        if not find_mode and self.is_dir and len(shown) < width:
            shown += "/"
        return shown


@dataclass
class DirectoryListing:
    """The resolved path of a scanned directory and its sorted entries."""

    path: str
    entries: list[FileEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[FileEntry]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> FileEntry:
        return self.entries[index]


def sort_key(entry: FileEntry) -> tuple[bool, str]:
    """Directories first, then names compared without regard to case."""
    return (not entry.is_dir, entry.name.lower())


def _entry_for(name: str, full_path: str) -> FileEntry:
    entry = FileEntry(name=name, is_hidden=is_hidden_file(name))
    try:
        st = os.stat(full_path)
    except OSError:
        return entry
    entry.is_dir = stat.S_ISDIR(st.st_mode)
    entry.is_exec = bool(st.st_mode & stat.S_IXUSR)
    entry.is_image = is_image_file(name)
    return entry


def scan_directory(
    path: str, root: str = DEFAULT_ROOT, show_hidden: bool = False
) -> DirectoryListing:
    """Read ``path`` and return its entries, sorted.

    The path is resolved first and must lie under ``root``. Below the root
    a ``..`` entry is included. At most ``MAX_FILES`` entries are read.
    """
    try:
        resolved = os.path.realpath(path, strict=True)
    except OSError as exc:
        raise ScanError(f"路径解析失败: {path}") from exc

    root_resolved = os.path.realpath(root)
    if not resolved.startswith(root_resolved):
        raise OutsideRootError(f"超出访问范围: {resolved}")

    entries: list[FileEntry] = []
    if resolved != root_resolved:
        entries.append(FileEntry(name=PARENT, is_dir=True))

    try:
        with os.scandir(resolved) as it:
            for dirent in it:
                if len(entries) >= MAX_FILES:
                    break
                name = dirent.name
                if not show_hidden and name.startswith("."):
                    continue
                if name in (".", PARENT):
                    continue
                entries.append(_entry_for(name, os.path.join(resolved, name)))
    except OSError as exc:
        raise ScanError(f"无法打开目录: {resolved}") from exc

    entries.sort(key=sort_key)
    return DirectoryListing(path=resolved, entries=entries)