"""Name search below a directory, limited in depth like ``find -maxdepth``."""

from __future__ import annotations

import fnmatch
import os
import stat
from typing import Iterator

from rsexplor.entries import MAX_FILES, FileEntry, is_hidden_file, is_image_file

DEFAULT_MAX_DEPTH = 3


def relative_name(path: str, search_root: str) -> str:
    """Show ``path`` relative to ``search_root`` as ``./...``.

    Paths outside the root are returned unchanged.
    """
    prefix = search_root if search_root.endswith("/") else search_root + "/"
    if path.startswith(prefix):
        return "./" + path[len(prefix):]
    return path


def _pattern(keyword: str) -> str:
    return f"*{keyword}*".lower()


def _matches(name: str, pattern: str) -> bool:
    return fnmatch.fnmatchcase(name.lower(), pattern)


def _walk(directory: str, depth: int, max_depth: int) -> Iterator[tuple[str, str]]:
    """Yield ``(path, name)`` in pre-order; unreadable directories are skipped."""
    try:
        with os.scandir(directory) as it:
            children = sorted(it, key=lambda d: d.name)
    except OSError:
        return
    for child in children:
        path = os.path.join(directory, child.name)
        yield path, child.name
        if depth < max_depth:
            try:
                descend = child.is_dir(follow_symlinks=False)
            except OSError:
                descend = False
            if descend:
                yield from _walk(path, depth + 1, max_depth)


def iter_matches(
    root: str, keyword: str, max_depth: int = DEFAULT_MAX_DEPTH
) -> Iterator[str]:
    """Yield paths under ``root`` whose name contains ``keyword``.

    Matching ignores case and accepts shell wildcards in ``keyword``. The
    root itself counts at depth 0 and is yielded when its name matches.
    A missing or unreadable root yields nothing.
    """
    if not keyword:
        raise ValueError("empty search keyword")
    if max_depth < 0:
        raise ValueError("max_depth must not be negative")
    if not os.path.exists(root):
        return
    pattern = _pattern(keyword)
    root_name = os.path.basename(root.rstrip("/")) or "/"
    if _matches(root_name, pattern):
        yield root
    if max_depth == 0:
        return
    for path, name in _walk(root, 1, max_depth):
        if _matches(name, pattern):
            yield path


def _entry_for(path: str, search_root: str) -> FileEntry:
    entry = FileEntry(
        name=relative_name(path, search_root), is_hidden=is_hidden_file(path)
    )
    try:
        st = os.stat(path)
    except OSError:
        return entry
    entry.is_dir = stat.S_ISDIR(st.st_mode)
    entry.is_exec = bool(st.st_mode & stat.S_IXUSR)
    entry.is_image = is_image_file(path)
    return entry


def find_matches(
    root: str,
    keyword: str,
    max_depth: int = DEFAULT_MAX_DEPTH,
    limit: int = MAX_FILES,
) -> list[FileEntry]:
    """Search below ``root`` and return at most ``limit`` entries named
    relative to it."""
    results: list[FileEntry] = []
    if limit <= 0:
        return results
    for path in iter_matches(root, keyword, max_depth):
        results.append(_entry_for(path, root))
        if len(results) >= limit:
            break
    return results