"""Type definitions for flake references."""

from dataclasses import dataclass
from enum import Enum

from mise_nix.constants import ATTRIBUTE_SEPARATOR

# Locator prefixes that mark a reference as living on the local filesystem
LOCAL_LOCATOR_PREFIXES = (".", "/", "path:", "file:")


class ReferenceKind(Enum):
    """Syntax family a raw reference string belongs to."""

    HOSTED = "hosted"  # github:owner/repo, gitlab:group/project
    CUSTOM_PREFIXED = "custom-prefixed"  # github+, gitlab+, ssh+, https+
    GIT_URL = "git-url"  # git+https://, git+ssh://
    PATH_URI = "path-uri"  # path:/some/dir
    FILE_URI = "file-uri"  # file:/some/dir
    LOCAL_PATH = "local-path"  # ./flake#pkg, ../flake#pkg, /abs/flake#pkg
    OWNER_REPO = "owner-repo"  # owner/repo#pkg
    REGISTRY = "registry"  # nixpkgs#hello
    MARKETPLACE_INSTALL = "marketplace-install"  # vscode+install=vscode-extensions.x.y
    MARKETPLACE_PACKAGE = "marketplace-package"  # vscode-extensions.x.y
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class FlakeReference:
    """A parsed flake reference.

    Attributes:
        raw: The string the reference was parsed from
        kind: Syntax family of ``raw``
        locator: Normalized flake URL (e.g., "github:owner/repo")
        attribute: Output selected within the flake (e.g., "hello")
    """

    raw: str
    kind: ReferenceKind
    locator: str
    attribute: str

    @property
    def normalized(self) -> str:
        """Canonical ``locator#attribute`` form used for building."""
        return f"{self.locator}{ATTRIBUTE_SEPARATOR}{self.attribute}"

    @property
    def is_local(self) -> bool:
        """True when the locator points at the local filesystem."""
        return self.locator.startswith(LOCAL_LOCATOR_PREFIXES)

    @property
    def is_hosted(self) -> bool:
        """True for github:/gitlab: locators, however they were written."""
        if self.kind in (ReferenceKind.HOSTED, ReferenceKind.OWNER_REPO):
            return True
        if self.kind is ReferenceKind.CUSTOM_PREFIXED:
            return self.locator.startswith(("github:", "gitlab:"))
        return False

    @property
    def is_git_url(self) -> bool:
        """True for git+https:// and git+ssh:// locators."""
        if self.kind is ReferenceKind.GIT_URL:
            return True
        if self.kind is ReferenceKind.CUSTOM_PREFIXED:
            return self.locator.startswith("git+")
        return False
