"""External programs started on files: editor, shell, image viewer, archives, clipboard paste."""

from __future__ import annotations

import os
import shlex
import subprocess
import sys

from rsexplor.browser import Clipboard, ClipboardMode

_NOT_FOUND = 127


def _is_zip(path: str) -> bool:
    return path.lower().endswith(".zip") and "." in os.path.basename(path)


def _pause(message: str) -> None:
    print(message, end="", flush=True)
    try:
        input()
    except EOFError:
        pass


def _run(argv: list[str], **kwargs) -> int:
    """Run ``argv`` in the foreground and return its exit status."""
    try:
        return subprocess.run(argv, check=False, **kwargs).returncode
    except FileNotFoundError as exc:
        print(f"无法启动 {argv[0]}: {exc}", file=sys.stderr)
        return _NOT_FOUND


def list_archive_command(path: str) -> list[str]:
    """Command that lists the members of an archive."""
    if _is_zip(path):
        return ["unzip", "-l", path]
    return ["tar", "-tf", path]


def extract_command(path: str, option: str = "") -> list[str]:
    """Command that extracts an archive into the working directory.

    ``option`` holds extra flags for the extracting tool, split like a shell would.
    """
    extra = shlex.split(option)
    if _is_zip(path):
        return ["unzip", *extra, path]
    return ["tar", *extra, "-xf", path]


def new_folder_for(path: str, current_dir: str) -> str:
    """Folder in ``current_dir`` named after the archive, without its last extension."""
    name = os.path.basename(path)
    dot = name.rfind(".")
    if dot > 0:
        name = name[:dot]
    return os.path.join(current_dir, name)


def extract_to_folder_command(path: str, current_dir: str) -> list[str]:
    """Command that extracts an archive into its own new folder."""
    folder = new_folder_for(path, current_dir)
    if _is_zip(path):
        return ["unzip", path, "-d", folder]
    return ["tar", "-xf", path, "-C", folder]


def paste_command(source: str, dest_dir: str, mode: ClipboardMode) -> list[str]:
    """Command that copies or moves ``source`` into ``dest_dir``."""
    target = dest_dir if dest_dir.endswith("/") else dest_dir + "/"
    if mode is ClipboardMode.COPY:
        return ["cp", "-r", source, target]
    if mode is ClipboardMode.MOVE:
        return ["mv", source, target]
    raise ValueError("clipboard holds no operation")


def run_editor(path: str) -> int:
    """Open ``path`` in vi and wait for it; returns the editor's exit status."""
    print("使用VI编辑器打开文件...\n输入:q退出编辑器\n")
    status = _run(["vi", path])
    if status >= 0:
        _pause("\n编辑器已退出，按任意键返回...")
    else:
        _pause("\n编辑器异常终止，按任意键返回...")
    return status


def run_script(path: str) -> int:
    """Run ``path`` with bash and wait for it; returns the script's exit status."""
    status = _run(["bash", path])
    if status >= 0:
        _pause(f"\n脚本执行完成，返回码: {status}\n按任意键继续...")
    else:
        _pause("\n脚本异常终止\n按任意键继续...")
    return status


def open_image(path: str) -> bool:
    """Hand an image to termux-open; returns whether it succeeded."""
    print(f"正在查看图片: {path}")
    ok = _run(["termux-open", path]) == 0
    if not ok:
        print("无法打开图片，请确保已安装termux-api")
    _pause("按任意键继续...")
    return ok


def view_archive(path: str) -> int:
    """Page through an archive's member list with less; returns the lister's status."""
    print("=== 压缩文件内容 ===")
    argv = list_archive_command(path)
    try:
        lister = subprocess.Popen(argv, stdout=subprocess.PIPE)
    except FileNotFoundError as exc:
        print(f"无法启动 {argv[0]}: {exc}", file=sys.stderr)
        status = _NOT_FOUND
    else:
        try:
            _run(["less"], stdin=lister.stdout)
        finally:
            if lister.stdout is not None:
                lister.stdout.close()
            status = lister.wait()
    _pause("\n按任意键继续...")
    return status


def extract_here(path: str) -> int:
    """Extract an archive next to itself; returns the tool's exit status."""
    argv = extract_command(path, "")
    print(f"正在解压: {shlex.join(argv)}")
    status = _run(argv, cwd=os.path.dirname(path) or None)
    _pause(f"\n返回码: {status}\n按任意键继续...")
    return status


def extract_to_new_folder(path: str, current_dir: str) -> str:
    """Extract an archive into a new folder in ``current_dir``; returns that folder.

    Raises ``subprocess.CalledProcessError`` when extraction fails.
    """
    folder = new_folder_for(path, current_dir)
    os.makedirs(folder, exist_ok=True)
    print(f"正在解压到: {folder}")
    argv = extract_to_folder_command(path, current_dir)
    status = _run(argv)
    _pause("\n操作完成, 按任意键继续...")
    if status != 0:
        raise subprocess.CalledProcessError(status, argv)
    return folder


def paste(clipboard: Clipboard, dest_dir: str) -> ClipboardMode:
    """Copy or move the clipboard path into ``dest_dir``.

    Raises ``LookupError`` for an empty clipboard and
    ``subprocess.CalledProcessError`` when the operation fails.
    """
    if clipboard.is_empty:
        raise LookupError("剪贴板为空")
    argv = paste_command(clipboard.path, dest_dir, clipboard.mode)
    subprocess.run(argv, check=True, capture_output=True)
    return clipboard.mode