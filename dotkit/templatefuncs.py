"""General template functions: file inclusion, paths, commands and stat."""

import os
import posixpath
import re
import shutil
import stat as stat_module
import subprocess
from pathlib import Path
from typing import Any

from dotkit.util import TemplateError, run_command

_MODE_DIR = 1 << 31
_MODE_DEVICE = 1 << 26
_MODE_NAMED_PIPE = 1 << 25
_MODE_SOCKET = 1 << 24
_MODE_SETUID = 1 << 23
_MODE_SETGID = 1 << 22
_MODE_CHAR_DEVICE = 1 << 21
_MODE_STICKY = 1 << 20


def include(
    filename: str,
    source_dir: "str | os.PathLike[str]",
    home_dir: "str | os.PathLike[str]",
) -> str:
    """Return the contents of ``filename``, relative to ``source_dir`` unless absolute."""
    if posixpath.isabs(filename):
        path = Path(os.path.normpath(filename))
    else:
        path = Path(source_dir, filename)
    try:
        return path.read_bytes().decode()
    except OSError as exc:
        raise TemplateError(str(exc)) from exc


def join_path(*args: str) -> str:
    """Join non-empty elements with the path separator and clean the result."""
    parts = [arg for arg in args if arg]
    if not parts:
        return ""
    joined = os.sep.join(parts)
    if os.sep == "/":
        joined = re.sub("/+", "/", joined)
    return os.path.normpath(joined)


def look_path(file: str) -> str:
    """Return the full path of executable ``file``, or ``""`` if not found."""
    return shutil.which(file) or ""


def output(name: str, *args: str) -> str:
    """Run ``name`` with ``args`` and return its standard output."""
    try:
        return run_command([name, *args]).decode()
    except (subprocess.CalledProcessError, OSError) as exc:
        raise TemplateError(str(exc)) from exc


def _file_mode(st_mode: int) -> int:
    mode = stat_module.S_IMODE(st_mode) & 0o777
    if stat_module.S_ISDIR(st_mode):
        mode |= _MODE_DIR
    elif stat_module.S_ISFIFO(st_mode):
        mode |= _MODE_NAMED_PIPE
    elif stat_module.S_ISSOCK(st_mode):
        mode |= _MODE_SOCKET
    elif stat_module.S_ISBLK(st_mode):
        mode |= _MODE_DEVICE
    elif stat_module.S_ISCHR(st_mode):
        mode |= _MODE_DEVICE | _MODE_CHAR_DEVICE
    if st_mode & stat_module.S_ISUID:
        mode |= _MODE_SETUID
    if st_mode & stat_module.S_ISGID:
        mode |= _MODE_SETGID
    if st_mode & stat_module.S_ISVTX:
        mode |= _MODE_STICKY
    return mode


def stat(name: str) -> dict[str, Any] | None:
    """Return information about ``name``, or ``None`` if it does not exist."""
    try:
        info = os.stat(name)
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise TemplateError(str(exc)) from exc
    return {
        "name": os.path.basename(os.path.normpath(name)),
        "size": info.st_size,
        "mode": _file_mode(info.st_mode),
        "perm": stat_module.S_IMODE(info.st_mode) & 0o777,
        "modTime": int(info.st_mtime),
        "isDir": stat_module.S_ISDIR(info.st_mode),
    }