import hashlib
import io
import tarfile

import pytest

from dotkit.upgrade import (
    ReleaseAsset,
    archive_asset_name,
    extract_executable,
    install_command,
    libc_from_output,
    package_arch,
    package_type,
    parse_checksums,
    release_asset_by_name,
    release_asset_by_suffix,
    verify_checksum,
)


def _make_tar_gz(members: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as archive:
        for name, contents in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(contents)
            archive.addfile(info, io.BytesIO(contents))
    return buffer.getvalue()


def test_checksums_round_trip():
    data = b"binary contents"
    digest = hashlib.sha256(data).hexdigest()
    text = f"{digest}  tool.tar.gz\n{'0' * 64}  other.deb\n"
    checksums = parse_checksums(text.encode())
    assert checksums["tool.tar.gz"] == hashlib.sha256(data).digest()
    assert checksums["other.deb"] == bytes(32)
    verify_checksum(checksums, "tool.tar.gz", data)


def test_parse_checksums_rejects_bad_line():
    with pytest.raises(ValueError, match="cannot parse checksum"):
        parse_checksums(b"nothex  name\n")


def test_verify_checksum_mismatch():
    checksums = {"a": bytes(32)}
    with pytest.raises(ValueError, match="a: checksum failed"):
        verify_checksum(checksums, "a", b"data")


def test_verify_checksum_missing():
    with pytest.raises(LookupError, match="b: checksum not found"):
        verify_checksum({}, "b", b"data")


@pytest.mark.parametrize(
    "os_release, expected",
    [
        ({"ID": "ubuntu"}, "deb"),
        ({"ID": "alpine"}, "apk"),
        ({"ID": "arch"}, "aur"),
        ({"ID": "rocky", "ID_LIKE": "rhel centos fedora"}, "rpm"),
        ({"ID": "pop", "ID_LIKE": "ubuntu debian"}, "deb"),
    ],
)
def test_package_type(os_release, expected):
    assert package_type(os_release) == expected


def test_package_type_unknown():
    with pytest.raises(ValueError, match="could not determine package type"):
        package_type({"ID": "unknown"})


@pytest.mark.parametrize(
    "ptype, goarch, expected",
    [
        ("rpm", "amd64", "x86_64"),
        ("rpm", "arm64", "aarch64"),
        ("deb", "386", "i386"),
        ("deb", "arm", "armel"),
        ("apk", "amd64", "amd64"),
        ("deb", "amd64", ""),
    ],
)
def test_package_arch(ptype, goarch, expected):
    assert package_arch(ptype, goarch) == expected


def test_release_asset_lookup():
    assets = [
        ReleaseAsset("tool_checksums.txt", "u1"),
        ReleaseAsset("tool_x86_64.rpm", "u2"),
        ReleaseAsset("tool_amd64.deb", "u3"),
    ]
    assert release_asset_by_name(assets, "tool_amd64.deb") == assets[2]
    assert release_asset_by_name(assets, "missing") is None
    assert release_asset_by_suffix(assets, "x86_64.rpm") == assets[1]
    assert release_asset_by_suffix(assets, ".apk") is None


@pytest.mark.parametrize(
    "output, expected",
    [
        (b"ldd (GNU libc) 2.31", "glibc"),
        (b"glibc 2.35", "glibc"),
        (b"musl libc (x86_64)\nVersion 1.2.2", "musl"),
        (b"something else", None),
    ],
)
def test_libc_from_output(output, expected):
    assert libc_from_output(output) == expected


def test_archive_asset_name():
    assert (
        archive_asset_name("tool", "2.7.0", "linux-glibc", "amd64")
        == "tool_2.7.0_linux-glibc_amd64.tar.gz"
    )


def test_extract_executable_round_trip():
    data = _make_tar_gz({"README.md": b"readme", "tool": b"\x7fELF executable"})
    assert extract_executable(data, "tool") == b"\x7fELF executable"


def test_extract_executable_missing():
    data = _make_tar_gz({"README.md": b"readme"})
    with pytest.raises(LookupError, match="tool: could not find header"):
        extract_executable(data, "tool")


@pytest.mark.parametrize(
    "ptype, use_sudo, expected",
    [
        ("apk", False, ["apk", "--allow-untrusted", "/tmp/p"]),
        ("deb", True, ["sudo", "dpkg", "-i", "/tmp/p"]),
        ("rpm", False, ["rpm", "-U", "/tmp/p"]),
    ],
)
def test_install_command(ptype, use_sudo, expected):
    assert install_command(ptype, "/tmp/p", use_sudo) == expected


def test_install_command_unknown():
    with pytest.raises(ValueError):
        install_command("", "/tmp/p", False)