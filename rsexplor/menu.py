"""Option menus driven one key at a time, independent of the terminal."""

from __future__ import annotations

from curses import KEY_DOWN, KEY_ENTER, KEY_UP
from enum import IntEnum
from typing import Sequence, Union

from rsexplor.entries import is_compressed_file

ESCAPE = 27
Key = Union[int, str]


class ExecChoice(IntEnum):
    """Entries of the menu shown for a non-image file."""

    CANCEL = 0
    EDIT = 1
    RUN = 2
    ARCHIVE = 3


class CompressChoice(IntEnum):
    """Entries of the archive sub-menu."""

    CANCEL = 0
    VIEW = 1
    EXTRACT_HERE = 2
    EXTRACT_TO_FOLDER = 3


EXEC_OPTIONS = ("取消", "使用 vi 打开", "用 bash 执行", "解压/查看")
COMPRESS_OPTIONS = ("取消", "查看内容", "解压到当前", "解压到新建文件夹")


def _code(key: Key) -> int:
    if isinstance(key, str):
        if len(key) != 1:
            raise ValueError(f"not a single key: {key!r}")
        return ord(key)
    return key


class Menu:
    """A vertical list of numbered options with one highlighted.

    Keys are fed through ``handle_key``; it returns the chosen index once
    the menu closes and ``None`` while it stays open. Option 0 is the
    cancel entry, chosen by Escape.
    """

    def __init__(self, options: Sequence[str]) -> None:
        if not options:
            raise ValueError("a menu needs at least one option")
        self.options = tuple(options)
        self.selected = 0

    @property
    def labels(self) -> list[str]:
        """Option lines as drawn: ``"1. text"`` and so on."""
        return [f"{number}. {text}" for number, text in enumerate(self.options, 1)]

    def handle_key(self, key: Key) -> int | None:
        code = _code(key)
        count = len(self.options)
        if code == KEY_UP:
            self.selected = (self.selected - 1) % count
        elif code == KEY_DOWN:
            self.selected = (self.selected + 1) % count
        elif ord("1") <= code <= ord("4"):
            index = code - ord("1")
            if index < count:
                self.selected = index
        elif code in (ord("\n"), KEY_ENTER):
            return self.selected
        elif code == ESCAPE:
            self.selected = 0
            return 0
        elif code == ord(" ") and self.selected == 0:
            return 0
        return None


def exec_menu(path: str) -> Menu:
    """Menu for a file: cancel, edit, run, plus archive handling for archives."""
    count = len(EXEC_OPTIONS) if is_compressed_file(path) else len(EXEC_OPTIONS) - 1
    return Menu(EXEC_OPTIONS[:count])


def compress_menu() -> Menu:
    """Sub-menu for an archive: cancel, view, extract here, extract to a folder."""
    return Menu(COMPRESS_OPTIONS)