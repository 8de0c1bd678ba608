# rsexplor

A small terminal file browser that shows a directory in two numbered columns.
It is meant for phone terminals such as Termux and keeps browsing inside a
single root directory (by default the shared storage, `/storage/emulated/0`).
Messages and menus on screen are in Chinese.

## Install

    pip install .

## Run

    rsexplor [START] [--root ROOT] [--show-hidden]

- `START` is the directory to open. Without it the browser opens in the current
  directory. If the directory lies outside the root, the browser opens in the
  root.
- `--root ROOT` sets the top directory. You cannot browse above it. The default
  is `/storage/emulated/0`.
- `--show-hidden` also lists names that start with a dot.

If the starting directory cannot be listed, the command prints the error and
exits with status 1.

## Keys

| Key                | Action                                                            |
|--------------------|-------------------------------------------------------------------|
| Arrow keys         | Move the cursor. Left and right jump between the two columns.     |
| Digits, then Space | Jump to the item with that number (up to nine digits)             |
| Enter              | Open a directory, view an image, or show the action menu          |
| `f` / `F`          | Search the current directory and up to three levels below it      |
| Esc                | Leave the search results and return to where you were             |
| `C` then `c`       | Put the selected item on the clipboard for copying                |
| `C` then `v`       | Put the selected item on the clipboard for moving                 |
| `C` then `p`       | Paste the clipboard into the current directory (`cp -r` or `mv`)  |
| `q`                | Quit                                                              |

Directories are listed first and files after them. Each group is sorted by name,
ignoring case. Below the root, a `..` entry leads one level up. At most 1000
entries are listed.

A search matches names that contain the keyword, ignoring case. The keyword may
hold shell wildcards such as `*.txt`. Results are named relative to the
directory you searched from, for example `./sub/file.txt`.

## Action menu

Pressing Enter on an item that is neither a directory nor an image opens a menu
with these entries: cancel, open in `vi`, or run with `bash`. Archives (`.zip`,
`.tar`, `.gz`, `.bz2`, `.xz`, `.rar`) get a fourth entry, which opens a
sub-menu with these choices:

- list the contents with `unzip -l` or `tar -tf`, paged through `less`
- extract the archive into the directory that holds it
- extract it into a new folder in the current directory. The folder is named
  after the archive, with its last extension removed.

Choose an entry with the arrow keys and Enter, or press its number. Esc cancels
the menu.

Images (`.jpg`, `.jpeg`, `.png`, `.gif`, `.bmp`) open with `termux-open`.

## Using it as a library

You can use the browsing logic without the terminal interface:

    from rsexplor.browser import Browser, Direction

    browser = Browser("/storage/emulated/0", None, False)
    browser.move(Direction.DOWN)
    print(browser.selected_path())
    print(browser.status_line())

Other entry points:

- `rsexplor.entries.scan_directory` lists a directory. It raises `ScanError`, or
  `OutsideRootError` when the directory lies outside the root.
- `rsexplor.search.find_matches` and `iter_matches` run the search.
- `rsexplor.menu.Menu` handles the menus one key at a time.
- `rsexplor.actions` builds and runs the external commands. Examples are
  `extract_command`, `paste_command`, `run_editor` and `paste`.
- `rsexplor.ui.App` draws a `Browser` on a curses window.

## Limits

The browser does not create, rename or delete files. It copies and moves only
through the clipboard. Archive listing and extraction rely on the external
`tar` and `unzip` tools.

## Requirements

Python 3.10 or later on a POSIX system with curses. The actions call `vi`,
`bash`, `cp`, `mv`, `tar`, `unzip`, `less` and `termux-open`. An action works
only when the programs it uses are on the `PATH`.