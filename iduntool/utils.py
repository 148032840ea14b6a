"""Utility functions for iduntool"""

import glob as _glob
import os as _os
import re as _re


DRIVE_RE = _re.compile(r'[A-Za-z]:')

# bytes 1 and 2 are the jump target, anything goes there
TOOL_HEADER = {
    0: 0x4c,
    3: 0xcb,
    4: 0x06,
    5: 0x10,
    6: 0x40,
    7: 0x00,
}
TOOL_HEADER_SIZE = 8


def is_drive_spec(name: str) -> bool:
    """Check if name is a drive spec like 'a:'"""
    return DRIVE_RE.fullmatch(name) is not None


def expand_arguments(args: list[str]) -> list[str]:
    """Expand glob patterns in arguments

    Arguments which match files are replaced by the sorted matches,
    others are passed as they are.

    Example:
        expand_arguments(["*.koa", "x*"])
        => ["a.koa", "b.koa", "x*"]
    """
    result = []
    for arg in args:
        matches = _glob.glob(arg)
        if matches:
            result.extend(sorted(matches))
        else:
            result.append(arg)
    return result


def has_tool_header(path: str) -> bool:
    """Check if file starts with the device tool header

    Missing or unreadable file is not a tool.
    """
    try:
        with open(path, 'rb') as tool_file:
            header = tool_file.read(TOOL_HEADER_SIZE)
    except OSError:
        return False
    if len(header) < TOOL_HEADER_SIZE:
        return False
    return all(header[pos] == val for pos, val in TOOL_HEADER.items())


def file_suffix(file_name: str) -> str:
    """Lowercase extension of file name, empty string if there is none"""
    base_name = _os.path.basename(file_name)
    if '.' not in base_name:
        return ''
    return base_name.rsplit('.', 1)[1].lower()


def quote_argument(arg: str) -> str:
    """Quote argument for the device shell"""
    arg = arg.replace('\\', '\\\\').replace('"', '\\"')
    return f'"{arg}"'


def relative_to_cwd(path: str, cwd: str = None) -> str:
    """Return path relative to cwd if it is under cwd, else path unchanged"""
    if cwd is None:
        cwd = _os.getcwd()
    cwd = cwd.rstrip(_os.sep) + _os.sep
    if path.startswith(cwd) and len(path) > len(cwd):
        return path[len(cwd):]
    return path
