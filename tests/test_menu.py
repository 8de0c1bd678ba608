from curses import KEY_DOWN, KEY_ENTER, KEY_UP

import pytest

from rsexplor.menu import (
    CompressChoice,
    ExecChoice,
    Menu,
    compress_menu,
    exec_menu,
)


def test_exec_menu_for_plain_file_has_three_options():
    menu = exec_menu("/tmp/notes.txt")
    assert menu.options == ("取消", "使用 vi 打开", "用 bash 执行")


def test_exec_menu_for_archive_adds_archive_option():
    menu = exec_menu("/tmp/bundle.ZIP")
    assert len(menu.options) == 4
    assert menu.options[ExecChoice.ARCHIVE] == "解压/查看"


def test_compress_menu_options():
    menu = compress_menu()
    assert menu.options == ("取消", "查看内容", "解压到当前", "解压到新建文件夹")


def test_labels_are_numbered_from_one():
    assert compress_menu().labels[0] == "1. 取消"
    assert compress_menu().labels[3] == "4. 解压到新建文件夹"


def test_empty_menu_rejected():
    with pytest.raises(ValueError):
        Menu([])


def test_up_wraps_to_last():
    menu = exec_menu("a.sh")
    assert menu.handle_key(KEY_UP) is None
    assert menu.selected == len(menu.options) - 1


def test_down_wraps_to_first():
    menu = exec_menu("a.sh")
    for _ in range(len(menu.options)):
        menu.handle_key(KEY_DOWN)
    assert menu.selected == 0


def test_enter_returns_selected():
    menu = exec_menu("a.sh")
    menu.handle_key(KEY_DOWN)
    assert menu.handle_key("\n") == ExecChoice.EDIT


def test_key_enter_code_also_confirms():
    menu = compress_menu()
    menu.handle_key(KEY_DOWN)
    menu.handle_key(KEY_DOWN)
    assert menu.handle_key(KEY_ENTER) == CompressChoice.EXTRACT_HERE


def test_digit_selects_without_closing():
    menu = exec_menu("a.sh")
    assert menu.handle_key("3") is None
    assert menu.selected == ExecChoice.RUN
    assert menu.handle_key("\n") == ExecChoice.RUN


def test_digit_beyond_visible_options_ignored():
    menu = exec_menu("a.sh")
    menu.handle_key("2")
    assert menu.handle_key("4") is None
    assert menu.selected == 1


def test_digit_four_selects_archive_option():
    menu = exec_menu("x.tar")
    menu.handle_key("4")
    assert menu.handle_key("\n") == ExecChoice.ARCHIVE


def test_escape_cancels():
    menu = compress_menu()
    menu.handle_key("3")
    assert menu.handle_key(27) == CompressChoice.CANCEL
    assert menu.selected == 0


def test_space_cancels_only_on_first_option():
    menu = compress_menu()
    menu.handle_key(KEY_DOWN)
    assert menu.handle_key(" ") is None
    menu.handle_key(KEY_UP)
    assert menu.handle_key(" ") == 0


def test_other_keys_leave_menu_open():
    menu = compress_menu()
    menu.handle_key(KEY_DOWN)
    assert menu.handle_key("x") is None
    assert menu.selected == 1


def test_multi_character_string_rejected():
    with pytest.raises(ValueError):
        compress_menu().handle_key("ab")