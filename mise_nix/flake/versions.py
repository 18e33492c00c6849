"""Version listing for flake references.

Flakes have no registry of released versions; walking a repository's git
history is not attempted. Remote flakes expose "latest" and local flakes
expose "local", which the builder treats as "build whatever is there".
"""

from mise_nix.constants import LATEST_VERSION, LOCAL_VERSION
from mise_nix.flake.parse import parse_reference
from mise_nix.flake.types import FlakeReference


def get_versions(reference: str | FlakeReference) -> list[str]:
    """Return the installable versions for a flake reference.

    Examples:
        >>> get_versions("github:owner/repo#pkg")
        ['latest']
        >>> get_versions("../flake#pkg")
        ['local']
    """
    parsed = parse_reference(reference) if isinstance(reference, str) else reference

    if parsed.is_hosted or parsed.is_git_url:
        return [LATEST_VERSION]
    if parsed.is_local:
        return [LOCAL_VERSION]
    return [LATEST_VERSION]
