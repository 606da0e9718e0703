import os
import stat as stat_module
import sys

import pytest

from dotkit import templatefuncs
from dotkit.util import TemplateError


def test_include_relative(tmp_path):
    (tmp_path / "part.txt").write_text("included\n")
    assert templatefuncs.include("part.txt", tmp_path, "/home/user") == "included\n"


def test_include_absolute(tmp_path):
    path = tmp_path / "abs.txt"
    path.write_text("absolute")
    assert templatefuncs.include(str(path), "/nonexistent", "/home/user") == "absolute"


def test_include_missing(tmp_path):
    with pytest.raises(TemplateError):
        templatefuncs.include("missing.txt", tmp_path, "/home/user")


def test_join_path():
    assert templatefuncs.join_path("a", "", "b") == os.path.join("a", "b")
    assert templatefuncs.join_path() == ""
    assert templatefuncs.join_path("a", "..", "b") == "b"


def test_look_path_missing():
    assert templatefuncs.look_path("definitely-not-a-real-command-xyz") == ""


def test_look_path_found(tmp_path, monkeypatch):
    exe = tmp_path / "mytool"
    exe.write_text("#!/bin/sh\n")
    exe.chmod(0o755)
    monkeypatch.setenv("PATH", str(tmp_path))
    assert templatefuncs.look_path("mytool") == str(exe)


def test_output():
    result = templatefuncs.output(sys.executable, "-c", "print('hi')")
    assert result.strip() == "hi"


def test_output_failure():
    with pytest.raises(TemplateError):
        templatefuncs.output(sys.executable, "-c", "raise SystemExit(3)")


def test_stat_file(tmp_path):
    path = tmp_path / "file"
    path.write_bytes(b"abc")
    info = templatefuncs.stat(str(path))
    st = os.stat(path)
    assert info["name"] == "file"
    assert info["size"] == 3
    assert info["isDir"] is False
    assert info["perm"] == stat_module.S_IMODE(st.st_mode) & 0o777
    assert info["mode"] & 0o777 == info["perm"]
    assert info["modTime"] == int(st.st_mtime)


def test_stat_dir(tmp_path):
    info = templatefuncs.stat(str(tmp_path))
    assert info["isDir"] is True
    assert info["mode"] & (1 << 31)


def test_stat_missing(tmp_path):
    assert templatefuncs.stat(str(tmp_path / "missing")) is None