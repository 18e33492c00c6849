"""Decide whether a string is a flake reference, and which kind.

Checks run in order; the first matching syntax wins. Local paths are
tested before the owner/repo shorthand because "./dir#pkg" and
"../dir#pkg" also have an owner/repo shape.

A bare "name#attribute" is never accepted: it cannot be told apart from a
plain package name that contains a literal '#'. Write "./name#attribute"
for a flake in a subdirectory.
"""

import re

from mise_nix.constants import ATTRIBUTE_SEPARATOR
from mise_nix.exceptions import FlakeFormatError
from mise_nix.flake.types import ReferenceKind

_KIND_PATTERNS: tuple[tuple[ReferenceKind, re.Pattern[str]], ...] = (
    (ReferenceKind.MARKETPLACE_INSTALL, re.compile(r"^vscode\+install=vscode-extensions\..")),
    (ReferenceKind.MARKETPLACE_PACKAGE, re.compile(r"^vscode-extensions\..")),
    (ReferenceKind.HOSTED, re.compile(r"^(github|gitlab):")),
    (ReferenceKind.CUSTOM_PREFIXED, re.compile(r"^(github|gitlab|ssh|https)\+")),
    (ReferenceKind.GIT_URL, re.compile(r"^git\+(https|ssh)://")),
    (ReferenceKind.PATH_URI, re.compile(r"^path:")),
    (ReferenceKind.FILE_URI, re.compile(r"^file:")),
    (ReferenceKind.REGISTRY, re.compile(r"^nixpkgs#")),
    (ReferenceKind.LOCAL_PATH, re.compile(r"^(\.\./|\./|/).*#")),
    (ReferenceKind.OWNER_REPO, re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+#")),
)

_MARKETPLACE_KINDS = (ReferenceKind.MARKETPLACE_INSTALL, ReferenceKind.MARKETPLACE_PACKAGE)


def classify_kind(value: object) -> ReferenceKind:
    """Return the syntax family of ``value`` without validating it.

    Examples:
        >>> classify_kind("github:NixOS/nixpkgs#hello")
        <ReferenceKind.HOSTED: 'hosted'>
        >>> classify_kind("nixos/nixpkgs#hello")
        <ReferenceKind.OWNER_REPO: 'owner-repo'>
        >>> classify_kind("my-flake#pkg")
        <ReferenceKind.UNRECOGNIZED: 'unrecognized'>
    """
    if not isinstance(value, str) or not value:
        return ReferenceKind.UNRECOGNIZED

    for kind, pattern in _KIND_PATTERNS:
        if pattern.match(value):
            return kind
    return ReferenceKind.UNRECOGNIZED


def check_attribute(value: str) -> None:
    """Raise FlakeFormatError if ``value`` has a '#' with nothing after it."""
    _locator, sep, attribute = value.partition(ATTRIBUTE_SEPARATOR)
    if sep and not attribute:
        raise FlakeFormatError(
            "Invalid flake reference format. Expected 'flake_url#attribute', "
            f"but attribute is empty after '#'. Got: {value}"
        )


def is_reference(value: object) -> bool:
    """Check whether ``value`` is a flake reference.

    Raises:
        FlakeFormatError: If ``value`` uses a recognized syntax but ends in an
            empty attribute (e.g., "github:owner/repo#")

    Examples:
        >>> is_reference("github:owner/repo#pkg")
        True
        >>> is_reference("./my-flake#pkg")
        True
        >>> is_reference("./my-flake")
        False
        >>> is_reference("hello")
        False
    """
    kind = classify_kind(value)
    if kind is ReferenceKind.UNRECOGNIZED:
        return False
    if kind not in _MARKETPLACE_KINDS:
        check_attribute(value)  # type: ignore[arg-type]
    return True


def is_local(value: object) -> bool:
    """Check whether ``value`` is a flake reference on the local filesystem.

    Examples:
        >>> is_local("./flake#default")
        True
        >>> is_local("path:/srv/flake")
        True
        >>> is_local("github:foo/bar#baz")
        False
    """
    if not is_reference(value):
        return False

    from mise_nix.flake.parse import parse_reference

    return parse_reference(value).is_local  # type: ignore[arg-type]
