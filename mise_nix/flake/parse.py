"""Parse flake references into a locator and an attribute.

Supported input formats:

| Input                                   | Normalized form                          |
|-----------------------------------------|------------------------------------------|
| `github:owner/repo#pkg`                 | `github:owner/repo#pkg`                  |
| `github:owner/repo/v1.2.0#pkg`          | `github:owner/repo/v1.2.0#pkg`           |
| `owner/repo#pkg`                        | `github:owner/repo#pkg`                  |
| `github+owner/repo#pkg`                 | `github:owner/repo#pkg`                  |
| `gitlab+group/sub/project#pkg`          | `gitlab:group/sub/project#pkg`           |
| `ssh+host/repo.git#pkg`                 | `git+ssh://git@host/repo.git#pkg`        |
| `https+host/repo.git#pkg`               | `git+https://host/repo.git#pkg`          |
| `./flake`                               | `./flake#default`                        |
| `vscode+install=vscode-extensions.a.b`  | `nixpkgs#a.b`                            |
| `vscode-extensions.a.b`                 | `nixpkgs#vscode-extensions.a.b`          |
"""

import re

from mise_nix.constants import (
    ATTRIBUTE_SEPARATOR,
    DEFAULT_ATTRIBUTE,
    DEFAULT_GIT_USER,
    NIXPKGS_LOCATOR,
)
from mise_nix.flake.classify import check_attribute, classify_kind
from mise_nix.flake.types import FlakeReference, ReferenceKind

_MARKETPLACE_INSTALL_PREFIX = "vscode+install=vscode-extensions."
_OWNER_REPO = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")
_HAS_USER = re.compile(r"^[A-Za-z0-9_.-]+@")


def convert_custom_git_prefix(locator: str) -> str:
    """Rewrite the ssh+/https+/github+/gitlab+ shorthands to nix flake URLs.

    Locators without a custom prefix are returned unchanged.

    Examples:
        >>> convert_custom_git_prefix("ssh+example.com/repo.git")
        'git+ssh://git@example.com/repo.git'
        >>> convert_custom_git_prefix("ssh+me@example.com/repo.git")
        'git+ssh://me@example.com/repo.git'
        >>> convert_custom_git_prefix("https+example.com/repo.git")
        'git+https://example.com/repo.git'
        >>> convert_custom_git_prefix("gitlab+group/subgroup/project")
        'gitlab:group/subgroup/project'
    """
    if locator.startswith("ssh+"):
        path = locator[len("ssh+"):]
        if not _HAS_USER.match(path):
            path = f"{DEFAULT_GIT_USER}@{path}"
        return f"git+ssh://{path}"

    if locator.startswith("https+"):
        return f"git+https://{locator[len('https+'):]}"

    if locator.startswith("github+"):
        return f"github:{locator[len('github+'):]}"

    if locator.startswith("gitlab+"):
        return f"gitlab:{locator[len('gitlab+'):]}"

    return locator


def parse_reference(raw: str) -> FlakeReference:
    """Parse a flake reference into its normalized components.

    Hosted locators that carry a ref (``github:owner/repo/branch`` or
    ``github:owner/repo?ref=v1.0``) are kept as written; nix understands
    them natively.

    Args:
        raw: The reference string

    Returns:
        FlakeReference with locator and attribute filled in

    Raises:
        FlakeFormatError: If ``raw`` has a '#' with an empty attribute

    Examples:
        >>> parse_reference("owner/repo#pkg").normalized
        'github:owner/repo#pkg'
        >>> parse_reference("github:owner/repo").attribute
        'default'
    """
    kind = classify_kind(raw)

    if kind is ReferenceKind.MARKETPLACE_INSTALL:
        extension = raw[len(_MARKETPLACE_INSTALL_PREFIX):]
        return FlakeReference(raw=raw, kind=kind, locator=NIXPKGS_LOCATOR, attribute=extension)

    if kind is ReferenceKind.MARKETPLACE_PACKAGE:
        return FlakeReference(raw=raw, kind=kind, locator=NIXPKGS_LOCATOR, attribute=raw)

    check_attribute(raw)
    locator, sep, attribute = raw.partition(ATTRIBUTE_SEPARATOR)
    if not sep:
        attribute = DEFAULT_ATTRIBUTE

    locator = convert_custom_git_prefix(locator)

    # owner/repo -> github:owner/repo, but not ./dir or ../dir
    if _OWNER_REPO.match(locator) and not locator.startswith("."):
        locator = f"github:{locator}"

    return FlakeReference(raw=raw, kind=kind, locator=locator, attribute=attribute)
