"""Helpers for upgrading to a released version: assets, checksums and packages."""

import gzip
import hashlib
import io
import os
import re
import tarfile
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

METHOD_REPLACE_EXECUTABLE = "replace-executable"
METHOD_SNAP_REFRESH = "snap-refresh"
METHOD_UPGRADE_PACKAGE = "upgrade-package"
METHOD_SUDO_PREFIX = "sudo-"

LIBC_TYPE_GLIBC = "glibc"
LIBC_TYPE_MUSL = "musl"

PACKAGE_TYPE_NONE = ""
PACKAGE_TYPE_APK = "apk"
PACKAGE_TYPE_AUR = "aur"
PACKAGE_TYPE_DEB = "deb"
PACKAGE_TYPE_RPM = "rpm"

_PACKAGE_TYPE_BY_ID = {
    "alpine": PACKAGE_TYPE_APK,
    "amzn": PACKAGE_TYPE_RPM,
    "arch": PACKAGE_TYPE_AUR,
    "centos": PACKAGE_TYPE_RPM,
    "fedora": PACKAGE_TYPE_RPM,
    "opensuse": PACKAGE_TYPE_RPM,
    "debian": PACKAGE_TYPE_DEB,
    "rhel": PACKAGE_TYPE_RPM,
    "sles": PACKAGE_TYPE_RPM,
    "ubuntu": PACKAGE_TYPE_DEB,
}

_ARCH_REPLACEMENTS = {
    PACKAGE_TYPE_DEB: {
        "386": "i386",
        "arm": "armel",
    },
    PACKAGE_TYPE_RPM: {
        "amd64": "x86_64",
        "386": "i686",
        "arm": "armfp",
        "arm64": "aarch64",
    },
}

_CHECKSUM_RE = re.compile(r"([0-9a-f]{64})\s+(\S+)")
_GLIBC_RE = re.compile(rb"(?i)glibc|gnu libc")
_MUSL_RE = re.compile(rb"(?i)musl")


@dataclass(frozen=True)
class ReleaseAsset:
    """A downloadable file attached to a release."""

    name: str
    browser_download_url: str = ""


def _quote(value: Any) -> str:
    if value is None:
        return '""'
    text = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{text}"'


def parse_checksums(data: bytes | str) -> dict[str, bytes]:
    """Parse a checksums file of ``<sha256 hex>  <name>`` lines."""
    text = data.decode() if isinstance(data, bytes) else data
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    checksums: dict[str, bytes] = {}
    for line in lines:
        if line.endswith("\r"):
            line = line[:-1]
        m = _CHECKSUM_RE.fullmatch(line)
        if m is None:
            raise ValueError(f"{_quote(line)}: cannot parse checksum")
        checksums[m.group(2)] = bytes.fromhex(m.group(1))
    return checksums


def verify_checksum(checksums: Mapping[str, bytes], name: str, data: bytes) -> None:
    """Raise unless the SHA-256 of ``data`` matches the checksum recorded for ``name``."""
    if name not in checksums:
        raise LookupError(f"{name}: checksum not found")
    expected = checksums[name]
    actual = hashlib.sha256(data).digest()
    if actual != expected:
        raise ValueError(
            f"{name}: checksum failed (want {expected.hex()}, got {actual.hex()})"
        )


def package_type(os_release: Mapping[str, Any]) -> str:
    """Return the distribution's package type from its os-release fields."""
    os_id = os_release.get("ID")
    if isinstance(os_id, str) and os_id in _PACKAGE_TYPE_BY_ID:
        return _PACKAGE_TYPE_BY_ID[os_id]
    id_likes = os_release.get("ID_LIKE")
    if isinstance(id_likes, str):
        for like in id_likes.split(" "):
            if like in _PACKAGE_TYPE_BY_ID:
                return _PACKAGE_TYPE_BY_ID[like]
    raise ValueError(
        f"could not determine package type (ID={_quote(os_id)}, "
        f"ID_LIKE={_quote(id_likes)})"
    )


def package_arch(package_type: str, goarch: str) -> str:
    """Return the architecture name a package type uses for ``goarch``.

    Package types with their own naming map unknown architectures to ``""``.
    """
    replacements = _ARCH_REPLACEMENTS.get(package_type)
    if replacements is None:
        return goarch
    return replacements.get(goarch, "")


def release_asset_by_name(assets: Iterable[ReleaseAsset], name: str) -> ReleaseAsset | None:
    """Return the first asset called ``name``, or ``None``."""
    return next((asset for asset in assets if asset.name == name), None)


def release_asset_by_suffix(
    assets: Iterable[ReleaseAsset], suffix: str
) -> ReleaseAsset | None:
    """Return the first asset whose name ends with ``suffix``, or ``None``."""
    return next((asset for asset in assets if asset.name.endswith(suffix)), None)


def libc_from_output(output: bytes | str) -> str | None:
    """Recognise the C library from tool output such as ``ldd --version``."""
    data = output.encode() if isinstance(output, str) else output
    if _GLIBC_RE.search(data):
        return LIBC_TYPE_GLIBC
    if _MUSL_RE.search(data):
        return LIBC_TYPE_MUSL
    return None


def archive_asset_name(repo: str, version: Any, goos: str, goarch: str) -> str:
    """Return the name of the release archive for a platform."""
    return f"{repo}_{version}_{goos}_{goarch}.tar.gz"


def extract_executable(data: bytes, name: str) -> bytes:
    """Return the contents of the member ``name`` of a gzipped tar archive."""
    with gzip.GzipFile(fileobj=io.BytesIO(data)) as gz:
        with tarfile.open(fileobj=gz, mode="r|") as archive:
            for member in archive:
                if member.name != name:
                    continue
                extracted = archive.extractfile(member)
                if extracted is None:
                    return b""
                return extracted.read()
    raise LookupError(f"{name}: could not find header")


def install_command(
    package_type: str, package_path: "str | os.PathLike[str]", use_sudo: bool = False
) -> list[str]:
    """Return the command that installs a package.

    For AUR systems ``package_path`` is the package name given to pacman.
    """
    path = os.fspath(package_path)
    if package_type == PACKAGE_TYPE_APK:
        command = ["apk", "--allow-untrusted", path]
    elif package_type == PACKAGE_TYPE_DEB:
        command = ["dpkg", "-i", path]
    elif package_type == PACKAGE_TYPE_RPM:
        command = ["rpm", "-U", path]
    elif package_type == PACKAGE_TYPE_AUR:
        command = ["pacman", "-S", path]
    else:
        raise ValueError(f"{_quote(package_type)}: unsupported package type")
    return ["sudo", *command] if use_sudo else command