import curses

import pytest

from rsexplor.browser import Browser, ClipboardMode
from rsexplor.ui import App, main


class FakeScreen:
    def __init__(self, keys=(), typed=b"", height=30, width=200):
        self.h = height
        self.w = width
        self.keys = [ord(k) if isinstance(k, str) else k for k in keys]
        self.typed = typed
        self.no_delay = False
        self.cursor = (0, 0)
        self.clear()

    def clear(self):
        self.grid = [[" "] * self.w for _ in range(self.h)]

    def getmaxyx(self):
        return (self.h, self.w)

    def addstr(self, y, x, text, attr=0):
        for offset, ch in enumerate(text):
            if x + offset < self.w:
                self.grid[y][x + offset] = ch

    def addch(self, y, x, ch, attr=0):
        self.grid[y][x] = ch if isinstance(ch, str) else "#"

    def move(self, y, x):
        self.cursor = (y, x)

    def clrtoeol(self):
        y, x = self.cursor
        for i in range(x, self.w):
            self.grid[y][i] = " "

    def refresh(self):
        pass

    def nodelay(self, flag):
        self.no_delay = flag

    def getch(self):
        if self.no_delay:
            return -1
        if not self.keys:
            raise RuntimeError("no more keys")
        return self.keys.pop(0)

    def getstr(self, y, x, n):
        return self.typed

    def text_at(self, y):
        return "".join(self.grid[y]).rstrip()


@pytest.fixture
def root(tmp_path):
    base = tmp_path / "root"
    base.mkdir()
    (base / "sub").mkdir()
    (base / "sub" / "notes.md").write_text("x")
    (base / "note.txt").write_text("x")
    (base / "other.bin").write_text("x")
    return base


def make_app(root, **screen_args):
    screen = FakeScreen(**screen_args)
    browser = Browser(root=str(root), start=str(root))
    app = App(screen, browser)
    app.message_delay = 0
    return app, screen


def test_render_shows_path_and_entries(root):
    app, screen = make_app(root)
    app.render()
    assert app.browser.directory in screen.text_at(0)
    listed = "\n".join(screen.text_at(y) for y in range(4, 8))
    assert "sub/" in listed
    assert "note.txt" in listed


def test_render_shows_pending_number(root):
    app, screen = make_app(root)
    app.handle_key("2")
    app.render()
    assert "输入: 2" in screen.text_at(screen.h - 1)


def test_number_then_space_moves_cursor(root):
    app, _ = make_app(root)
    assert app.handle_key("3") is True
    app.handle_key(" ")
    assert app.browser.cursor == 2
    assert app.browser.number_input == ""


def test_arrow_moves_cursor(root):
    app, _ = make_app(root)
    app.handle_key(curses.KEY_DOWN)
    assert app.browser.cursor == 1


def test_q_quits(root):
    app, _ = make_app(root)
    assert app.handle_key("q") is False


def test_enter_directory(root):
    app, _ = make_app(root)
    assert app.browser.selected().name == "sub"
    app.handle_key("\n")
    assert app.browser.directory == str((root / "sub").resolve())
    assert app.browser.cursor == 0
    assert app.browser.entries[0].name == ".."


def test_enter_file_and_cancel_menu(root):
    app, _ = make_app(root, keys=[27])
    app.handle_key(curses.KEY_DOWN)
    assert app.handle_key("\n") is True
    assert app.browser.directory == str(root.resolve())
    assert app.browser.cursor == 1


def test_copy_combination_fills_clipboard(root):
    app, _ = make_app(root)
    app.handle_key("C")
    assert app.awaiting_c_prefix is True
    app.handle_key("c")
    assert app.awaiting_c_prefix is False
    assert app.browser.clipboard.mode is ClipboardMode.COPY
    assert app.browser.clipboard.path == str(root.resolve() / "sub")


def test_cut_combination_sets_move_mode(root):
    app, _ = make_app(root)
    app.handle_key("C")
    app.handle_key("v")
    assert app.browser.clipboard.mode is ClipboardMode.MOVE


def test_paste_with_empty_clipboard(root):
    app, screen = make_app(root)
    app.handle_key("C")
    app.handle_key("p")
    assert "剪贴板为空" in screen.text_at(screen.h - 1)


def test_unknown_combination(root):
    app, screen = make_app(root)
    app.handle_key("C")
    app.handle_key("x")
    assert "未知组合键" in screen.text_at(screen.h - 1)
    assert app.awaiting_c_prefix is False


def test_search_and_escape(root):
    app, screen = make_app(root, typed=b"note")
    app.handle_key("f")
    assert app.browser.in_find_mode is True
    assert len(app.browser.entries) == 2
    assert "找到结果，按ESC返回" in screen.text_at(screen.h - 1)
    app.handle_key(27)
    assert app.browser.in_find_mode is False
    assert app.browser.directory == str(root.resolve())


def test_search_with_no_keyword_does_nothing(root):
    app, _ = make_app(root, typed=b"")
    app.handle_key("F")
    assert app.browser.in_find_mode is False
    assert len(app.browser.entries) == 3


def test_prompt_input_decodes_and_shows_prompt(root):
    app, screen = make_app(root, typed="笔记".encode("utf-8"))
    assert app.prompt_input("搜索: ") == "笔记"
    assert screen.text_at(screen.h - 1).startswith("搜索:")


def test_run_menu_down_then_enter(root):
    from rsexplor.menu import exec_menu

    app, screen = make_app(root, keys=[curses.KEY_DOWN, "\n"])
    assert app.run_menu(exec_menu("a.txt")) == 1
    assert screen.text_at(screen.h - 3) == ""


def test_run_menu_escape_cancels(root):
    from rsexplor.menu import compress_menu

    app, _ = make_app(root, keys=[curses.KEY_DOWN, 27])
    assert app.run_menu(compress_menu()) == 0


def test_run_loop_quits(root):
    app, _ = make_app(root, keys=[curses.KEY_DOWN, "q"])
    assert app.run() == 0
    assert app.browser.cursor == 1


def test_main_rejects_missing_root(tmp_path):
    assert main(["--root", str(tmp_path / "missing")]) == 1