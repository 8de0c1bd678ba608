"""Terminal front end: drawing the browser and dispatching keys."""

from __future__ import annotations

import argparse
import curses
import subprocess
import sys
import time
from contextlib import contextmanager
from typing import Iterator, Union

from rsexplor import actions
from rsexplor.browser import COLUMNS, Browser, ClipboardMode, Direction
from rsexplor.entries import DEFAULT_ROOT, FileEntry, ScanError
from rsexplor.menu import (
    ESCAPE,
    CompressChoice,
    ExecChoice,
    Menu,
    compress_menu,
    exec_menu,
)

Key = Union[int, str]

PAIR_DIR = 1
PAIR_FILE = 2
PAIR_EXEC = 3
PAIR_SELECTED = 4
PAIR_TITLE = 5
PAIR_STATUS = 6
PAIR_PATHBAR = 7
PAIR_MENU = 8
PAIR_NUMBER = 9
PAIR_IMAGE = 10
PAIR_WARNING = 11

_COLOR_PAIRS = {
    PAIR_DIR: (curses.COLOR_BLUE, curses.COLOR_BLACK),
    PAIR_FILE: (curses.COLOR_WHITE, curses.COLOR_BLACK),
    PAIR_EXEC: (curses.COLOR_GREEN, curses.COLOR_BLACK),
    PAIR_SELECTED: (curses.COLOR_BLACK, curses.COLOR_WHITE),
    PAIR_TITLE: (curses.COLOR_CYAN, curses.COLOR_BLACK),
    PAIR_STATUS: (curses.COLOR_YELLOW, curses.COLOR_BLACK),
    PAIR_PATHBAR: (curses.COLOR_MAGENTA, curses.COLOR_BLACK),
    PAIR_MENU: (curses.COLOR_GREEN, curses.COLOR_BLACK),
    PAIR_NUMBER: (curses.COLOR_YELLOW, curses.COLOR_BLACK),
    PAIR_IMAGE: (curses.COLOR_MAGENTA, curses.COLOR_BLACK),
    PAIR_WARNING: (curses.COLOR_RED, curses.COLOR_BLACK),
}

_ARROWS = {
    curses.KEY_UP: Direction.UP,
    curses.KEY_DOWN: Direction.DOWN,
    curses.KEY_LEFT: Direction.LEFT,
    curses.KEY_RIGHT: Direction.RIGHT,
}

_MENU_RIGHT = 30
_LIST_TOP = 4
_PATH_LABEL = " 路径: "
_TITLE = " 文件浏览器 "
_INPUT_LIMIT = 255


def _quiet(fn, *args):
    """Call a curses function, ignoring failures from an uninitialised or
    too small terminal."""
    try:
        return fn(*args)
    except curses.error:
        return None


def _acs(name: str, fallback: str):
    return getattr(curses, name, fallback)


def _pair(number: int) -> int:
    try:
        return curses.color_pair(number)
    except curses.error:
        return 0


def _entry_pair(entry: FileEntry) -> int:
    if entry.is_dir:
        return PAIR_DIR
    if entry.is_exec:
        return PAIR_EXEC
    if entry.is_image:
        return PAIR_IMAGE
    return PAIR_FILE


def _init_colors() -> None:
    try:
        curses.start_color()
        for number, (fg, bg) in _COLOR_PAIRS.items():
            curses.init_pair(number, fg, bg)
    except curses.error:
        pass


class App:
    """Draws a ``Browser`` on a curses window and reacts to key presses."""

    def __init__(self, stdscr, browser: Browser) -> None:
        self.stdscr = stdscr
        self.browser = browser
        self.awaiting_c_prefix = False
        self.message_delay = 1.0

    # -- geometry and low-level drawing ---------------------------------

    @property
    def height(self) -> int:
        return self.stdscr.getmaxyx()[0]

    @property
    def width(self) -> int:
        return self.stdscr.getmaxyx()[1]

    def _put(self, y: int, x: int, text: str, attr: int = 0) -> None:
        if y < 0 or x < 0 or y >= self.height or x >= self.width:
            return
        try:
            self.stdscr.addstr(y, x, text, attr)
        except curses.error:
            pass

    def _char(self, y: int, x: int, ch, attr: int = 0) -> None:
        if y < 0 or x < 0 or y >= self.height or x >= self.width:
            return
        try:
            self.stdscr.addch(y, x, ch, attr)
        except curses.error:
            pass

    def _clear_line(self, y: int) -> None:
        try:
            self.stdscr.move(y, 0)
            self.stdscr.clrtoeol()
        except curses.error:
            pass

    @contextmanager
    def _suspended(self) -> Iterator[None]:
        """Hand the terminal to a child program for the duration."""
        _quiet(curses.def_prog_mode)
        _quiet(curses.endwin)
        try:
            yield
        finally:
            _quiet(curses.reset_prog_mode)
            self.stdscr.refresh()

    # -- screen parts ---------------------------------------------------

    def _draw_path_bar(self) -> None:
        attr = _pair(PAIR_PATHBAR)
        hline = _acs("ACS_HLINE", "-")
        for x in range(self.width):
            self._char(1, x, hline, attr)
        self._char(1, 0, _acs("ACS_LTEE", "+"), attr)
        self._char(1, self.width - 1, _acs("ACS_RTEE", "+"), attr)
        self._put(0, 2, _PATH_LABEL, attr)
        self._put(
            0, 2 + len(_PATH_LABEL), self.browser.current_dir, attr | curses.A_BOLD
        )

    def _draw_border(self) -> None:
        attr = _pair(PAIR_TITLE)
        w, h = self.width, self.height
        hline = _acs("ACS_HLINE", "-")
        vline = _acs("ACS_VLINE", "|")
        for x in range(w):
            self._char(2, x, hline, attr)
            self._char(h - 3, x, hline, attr)
        for y in range(3, h - 3):
            self._char(y, 0, vline, attr)
            self._char(y, w - 1, vline, attr)
        self._char(2, 0, _acs("ACS_ULCORNER", "+"), attr)
        self._char(2, w - 1, _acs("ACS_URCORNER", "+"), attr)
        self._char(h - 3, 0, _acs("ACS_LLCORNER", "+"), attr)
        self._char(h - 3, w - 1, _acs("ACS_LRCORNER", "+"), attr)
        self._put(2, 2, _TITLE, attr)

    def _draw_file_list(self) -> None:
        column_span = self.width // COLUMNS
        col_width = column_span - 6
        find_mode = self.browser.in_find_mode
        for cell in self.browser.cells():
            y = cell.row + _LIST_TOP
            x = cell.column * column_span + 2
            self._put(y, x, f"{cell.index + 1:2d} ", _pair(PAIR_NUMBER))
            if cell.index == self.browser.cursor:
                attr = _pair(PAIR_SELECTED)
            else:
                attr = _pair(_entry_pair(cell.entry))
            name = cell.entry.display_name(col_width, find_mode)
            self._put(y, x + 3, f"{cell.entry.icon()} {name}", attr)

    def _draw_status_bar(self) -> None:
        attr = _pair(PAIR_STATUS)
        y = self.height - 1
        self._put(y, 0, self.browser.status_line().ljust(self.width - 1), attr)
        if self.browser.number_input:
            self._put(y, self.width - 10, f"输入: {self.browser.number_input}", attr)

    def render(self) -> None:
        """Redraw the whole screen."""
        self.stdscr.clear()
        self._draw_path_bar()
        self._draw_border()
        self._draw_file_list()
        self._draw_status_bar()
        self.stdscr.refresh()

    # -- interaction helpers --------------------------------------------

    def show_message(self, msg: str) -> None:
        """Show ``msg`` on the bottom line for a moment."""
        self._put(self.height - 1, 0, msg.ljust(self.width), _pair(PAIR_EXEC))
        self.stdscr.refresh()
        if self.message_delay > 0:
            time.sleep(self.message_delay)

    def prompt_input(self, prompt: str) -> str:
        """Read a line typed on the bottom line after ``prompt``."""
        _quiet(curses.echo)
        _quiet(curses.curs_set, 1)
        y = self.height - 1
        attr = _pair(PAIR_EXEC)
        self._put(y, 0, " " * self.width, attr)
        self._put(y, 0, prompt, attr)
        self.stdscr.refresh()
        try:
            raw = self.stdscr.getstr(y, min(len(prompt), self.width - 1), _INPUT_LIMIT)
        except curses.error:
            raw = b""
        finally:
            _quiet(curses.noecho)
            _quiet(curses.curs_set, 0)
        if isinstance(raw, bytes):
            return raw.decode("utf-8", errors="replace")
        return str(raw)

    def _drain_input(self) -> None:
        self.stdscr.nodelay(True)
        try:
            while self.stdscr.getch() != -1:
                pass
        finally:
            self.stdscr.nodelay(False)

    def _draw_menu(self, menu: Menu, top: int) -> None:
        count = len(menu.options)
        attr = _pair(PAIR_MENU)
        vline = _acs("ACS_VLINE", "|")
        for i in range(count):
            self._char(top + i, 0, vline, attr)
            self._char(top + i, _MENU_RIGHT, vline, attr)
        self._char(top, 0, _acs("ACS_ULCORNER", "+"), attr)
        self._char(top, _MENU_RIGHT, _acs("ACS_URCORNER", "+"), attr)
        bottom = top + count
        self._char(bottom, 0, _acs("ACS_LLCORNER", "+"), attr)
        self._char(bottom, _MENU_RIGHT, _acs("ACS_LRCORNER", "+"), attr)
        hline = _acs("ACS_HLINE", "-")
        for x in range(1, _MENU_RIGHT):
            self._char(bottom, x, hline, attr)
        for i, label in enumerate(menu.labels):
            label_attr = 0
            if i == menu.selected:
                label_attr |= curses.A_REVERSE
            if i == 0:
                label_attr |= _pair(PAIR_WARNING)
            self._put(top + i + 1, 2, label, label_attr)

    def run_menu(self, menu: Menu) -> int:
        """Show ``menu`` above the status line and return the chosen index."""
        count = len(menu.options)
        top = self.height - count - 2
        self._drain_input()
        while True:
            self._draw_menu(menu, top)
            self.stdscr.refresh()
            choice = menu.handle_key(self.stdscr.getch())
            if choice is not None:
                break
        for i in range(count + 2):
            self._clear_line(top + i)
        return choice

    def _rescan(self) -> None:
        if self.browser.in_find_mode:
            return
        try:
            self.browser.scan(self.browser.directory)
        except ScanError as exc:
            self.show_message(str(exc))
            _quiet(curses.beep)

    # -- key actions -----------------------------------------------------

    def _search(self) -> None:
        keyword = self.prompt_input("搜索当前目录及子目录 (如: *.txt): ")
        if not keyword:
            return
        found = self.browser.enter_search(keyword)
        self.show_message("找到结果，按ESC返回" if found else "无匹配结果")

    def _combination(self, ch: int) -> None:
        self.awaiting_c_prefix = False
        try:
            if ch == ord("c"):
                self.browser.copy_selected()
                self.show_message("已复制到剪贴板")
            elif ch == ord("v"):
                self.browser.cut_selected()
                self.show_message("已剪切到剪贴板")
            elif ch == ord("p"):
                self._paste()
            else:
                self.show_message("未知组合键")
        except LookupError as exc:
            self.show_message(str(exc))

    def _paste(self) -> None:
        clipboard = self.browser.clipboard
        if clipboard.is_empty:
            self.show_message("剪贴板为空")
            return
        try:
            mode = actions.paste(clipboard, self.browser.directory)
        except (subprocess.CalledProcessError, OSError, ValueError):
            self.show_message("操作失败")
            return
        self.show_message("复制成功" if mode is ClipboardMode.COPY else "移动成功")
        self._rescan()

    def _archive(self, path: str) -> None:
        choice = self.run_menu(compress_menu())
        if choice == CompressChoice.VIEW:
            with self._suspended():
                actions.view_archive(path)
        elif choice == CompressChoice.EXTRACT_HERE:
            with self._suspended():
                actions.extract_here(path)
            self._rescan()
        elif choice == CompressChoice.EXTRACT_TO_FOLDER:
            try:
                with self._suspended():
                    actions.extract_to_new_folder(path, self.browser.directory)
            except (subprocess.CalledProcessError, OSError):
                self.show_message("操作失败")
            self._rescan()

    def _open_selected(self) -> None:
        self.browser.clear_number()
        entry = self.browser.selected()
        path = self.browser.selected_path()
        if entry is None or path is None:
            return
        if entry.is_dir:
            try:
                self.browser.scan(path)
            except ScanError as exc:
                self.show_message(str(exc))
                _quiet(curses.beep)
                return
            self.browser.cursor = 0
        elif entry.is_image:
            with self._suspended():
                actions.open_image(path)
        else:
            menu = exec_menu(path)
            choice = self.run_menu(menu)
            if choice == ExecChoice.EDIT:
                with self._suspended():
                    actions.run_editor(path)
            elif choice == ExecChoice.RUN:
                with self._suspended():
                    actions.run_script(path)
            elif choice == ExecChoice.ARCHIVE and len(menu.options) > ExecChoice.ARCHIVE:
                self._archive(path)

    def handle_key(self, ch: Key) -> bool:
        """React to one key press; returns False when the program should quit."""
        if isinstance(ch, str):
            ch = ord(ch)
        if ord("0") <= ch <= ord("9"):
            self.browser.push_digit(chr(ch))
            return True
        if ch == ord(" ") and self.browser.number_input:
            self.browser.confirm_number()
            return True
        if ch in (ord("f"), ord("F")):
            self._search()
            return True
        if self.awaiting_c_prefix:
            self._combination(ch)
            return True
        if ch == ord("C"):
            self.awaiting_c_prefix = True
            self.show_message("等待组合键: c=复制 p=粘贴 v=移动")
            return True
        if ch == ESCAPE and self.browser.in_find_mode:
            self.browser.leave_search()
            return True
        if ch in _ARROWS:
            self.browser.move(_ARROWS[ch])
        elif ch in (ord("\n"), curses.KEY_ENTER):
            self._open_selected()
        elif ch == ord("q"):
            return False
        return True

    def run(self) -> int:
        """Main loop: draw, read a key, react, until the user quits."""
        _quiet(curses.curs_set, 0)
        _init_colors()
        while True:
            self.render()
            if not self.handle_key(self.stdscr.getch()):
                return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="rsexplor", description="Two-column terminal file browser."
    )
    parser.add_argument("start", nargs="?", default=None, help="directory to open")
    parser.add_argument("--root", default=DEFAULT_ROOT, help="top directory allowed")
    parser.add_argument(
        "--show-hidden", action="store_true", help="list names starting with a dot"
    )
    args = parser.parse_args(argv)
    try:
        browser = Browser(root=args.root, start=args.start, show_hidden=args.show_hidden)
    except ScanError as exc:
        print(f"rsexplor: {exc}", file=sys.stderr)
        return 1
    try:
        return curses.wrapper(lambda stdscr: App(stdscr, browser).run())
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(main())