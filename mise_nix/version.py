"""Version checks for nixhub releases."""

import re

_VERSION = re.compile(r"^v?\d+(\.\d+)*([-+][0-9A-Za-z.+-]+)?$")

_OS_MARKERS = {
    "linux": ("linux",),
    "darwin": ("macos", "darwin"),
}

_ARCH_MARKERS = {
    "x86_64": ("x86-64", "x86_64", "amd64"),
    "aarch64": ("arm64", "aarch64"),
}


def is_valid(version: str | None) -> bool:
    """Check whether a release version looks like a real version number.

    Examples:
        >>> is_valid("1.2.3")
        True
        >>> is_valid("v2.0.0-rc1")
        True
        >>> is_valid("unstable-2024-01-01")
        False
    """
    if not version:
        return False
    return bool(_VERSION.match(version))


def is_compatible(platforms_summary: str | None, os_name: str, arch: str) -> bool:
    """Check whether a release's platform summary covers the current platform.

    Examples:
        >>> is_compatible("Linux and macOS", "linux", "x86_64")
        True
        >>> is_compatible("Linux only", "darwin", "aarch64")
        False
        >>> is_compatible("macOS (ARM64)", "darwin", "x86_64")
        False
    """
    if not platforms_summary:
        return True

    summary = platforms_summary.lower()

    os_markers = _OS_MARKERS.get(os_name, (os_name,))
    if not any(marker in summary for marker in os_markers):
        return False

    mentions_arch = any(
        marker in summary for markers in _ARCH_MARKERS.values() for marker in markers
    )
    if not mentions_arch:
        return True
    return any(marker in summary for marker in _ARCH_MARKERS.get(arch, (arch,)))
