"""Browsing state: current listing, cursor, number jump, search mode and clipboard."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import NamedTuple

from rsexplor.entries import (
    DEFAULT_ROOT,
    FileEntry,
    ScanError,
    scan_directory,
)
from rsexplor.search import find_matches

COLUMNS = 2
MAX_NUMBER_DIGITS = 9
FIND_LOCATION = "find://results"


class Direction(Enum):
    """Cursor movement keys."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class ClipboardMode(IntEnum):
    """What a paste does with the clipboard path."""

    NONE = 0
    COPY = 1
    MOVE = 2


@dataclass
class Clipboard:
    """A path remembered for a later copy or move."""

    path: str = ""
    mode: ClipboardMode = ClipboardMode.NONE

    @property
    def is_empty(self) -> bool:
        return not self.path

    def set(self, path: str, mode: ClipboardMode) -> None:
        self.path = path
        self.mode = mode

    def clear(self) -> None:
        self.path = ""
        self.mode = ClipboardMode.NONE


class _Cell(NamedTuple):
    index: int
    column: int
    row: int
    entry: FileEntry


def _with_slash(path: str) -> str:
    return path if path.endswith("/") else path + "/"


class Browser:
    """The state behind the file list, independent of any terminal."""

    def __init__(
        self,
        root: str = DEFAULT_ROOT,
        start: str | None = None,
        show_hidden: bool = False,
    ) -> None:
        self.root = os.path.realpath(root)
        self.show_hidden = show_hidden
        self.directory = self.root
        self.entries: list[FileEntry] = []
        self.cursor = 0
        self.number_input = ""
        self.in_find_mode = False
        self.search_root = ""
        self.find_back_path = ""
        self.last_cursor_pos = 0
        self.clipboard = Clipboard()

        if start is None:
            start = os.getcwd()
        if not os.path.realpath(start).startswith(self.root):
            start = self.root
        self.scan(start)

    @property
    def current_dir(self) -> str:
        """Location shown in the path bar."""
        return FIND_LOCATION if self.in_find_mode else self.directory

    def _clamp_cursor(self) -> None:
        self.cursor = max(0, min(self.cursor, len(self.entries) - 1))

    def scan(self, path: str) -> None:
        """List ``path`` and make it the current directory.

        Raises ``ScanError`` (or ``OutsideRootError``) and leaves the state
        unchanged when the directory cannot be listed.
        """
        listing = scan_directory(path, self.root, self.show_hidden)
        self.directory = listing.path
        self.entries = list(listing.entries)
        self.in_find_mode = False
        self._clamp_cursor()

    def items_per_column(self) -> int:
        return (len(self.entries) + COLUMNS - 1) // COLUMNS

    def cells(self) -> list[_Cell]:
        """Entries laid out column by column."""
        per_column = self.items_per_column()
        if per_column == 0:
            return []
        return [
            _Cell(index, index // per_column, index % per_column, entry)
            for index, entry in enumerate(self.entries)
        ]

    def move(self, direction: Direction) -> None:
        count = len(self.entries)
        per_column = self.items_per_column()
        if direction is Direction.UP:
            if self.cursor > 0:
                self.cursor -= 1
        elif direction is Direction.DOWN:
            if self.cursor < count - 1:
                self.cursor += 1
        elif direction is Direction.LEFT:
            if self.cursor >= per_column:
                self.cursor -= per_column
        elif direction is Direction.RIGHT:
            if self.cursor + per_column < count:
                self.cursor += per_column

    def push_digit(self, ch: str) -> bool:
        """Append a digit to the pending number; other characters are ignored."""
        if len(ch) == 1 and ch.isdigit() and len(self.number_input) < MAX_NUMBER_DIGITS:
            self.number_input += ch
            return True
        return False

    def confirm_number(self) -> bool:
        """Jump to the typed item number, if any was typed.

        Returns False when no number was pending. Out-of-range numbers are
        dropped without moving the cursor.
        """
        if not self.number_input:
            return False
        target = int(self.number_input) - 1
        if 0 <= target < len(self.entries):
            self.cursor = target
        self.clear_number()
        return True

    def clear_number(self) -> None:
        self.number_input = ""

    def selected(self) -> FileEntry | None:
        if not self.entries:
            return None
        return self.entries[self.cursor]

    def selected_path(self) -> str | None:
        """Full path of the entry under the cursor."""
        entry = self.selected()
        if entry is None:
            return None
        if self.in_find_mode:
            if entry.name.startswith("./"):
                return self.search_root + entry.name[2:]
            return entry.name
        return os.path.join(self.directory, entry.name)

    def enter_search(self, keyword: str) -> int:
        """Replace the list with matches below the current directory.

        Returns the number of matches. An empty keyword raises ``ValueError``.
        """
        if not keyword:
            raise ValueError("empty search keyword")
        if not self.in_find_mode:
            self.find_back_path = _with_slash(self.directory)
            self.last_cursor_pos = self.cursor
        self.search_root = _with_slash(self.directory)
        self.entries = find_matches(self.directory, keyword)
        self.in_find_mode = True
        self._clamp_cursor()
        return len(self.entries)

    def leave_search(self) -> bool:
        """Return to the directory the search started from.

        Returns False when no search was active.
        """
        if not self.in_find_mode:
            return False
        self.in_find_mode = False
        back = self.find_back_path
        if back and os.path.exists(back) and back.startswith(self.root):
            try:
                self.scan(back)
            except ScanError:
                self.scan(self.root)
            else:
                self.cursor = self.last_cursor_pos
                self._clamp_cursor()
        else:
            self.scan(self.root)
        return True

    def _remember(self, mode: ClipboardMode) -> Clipboard:
        path = self.selected_path()
        if path is None:
            raise LookupError("nothing selected")
        self.clipboard.set(path, mode)
        return self.clipboard

    def copy_selected(self) -> Clipboard:
        """Put the selected path on the clipboard for copying."""
        return self._remember(ClipboardMode.COPY)

    def cut_selected(self) -> Clipboard:
        """Put the selected path on the clipboard for moving."""
        return self._remember(ClipboardMode.MOVE)

    def status_line(self) -> str:
        if self.in_find_mode:
            return (
                f"搜索: {self.search_root} | 找到 {len(self.entries)} 个项目"
                " | 数字+空格跳转"
            )
        entry = self.selected()
        if entry is None:
            return f"位置: {self.directory}"
        return f"位置: {self.directory} | {entry.name} {entry.kind_label()}"