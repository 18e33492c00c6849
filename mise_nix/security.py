"""Security checks run before any flake is built."""

from mise_nix.exceptions import SecurityError

_FORBIDDEN_CHARS = ("\x00", "\n", "\r")


def validate_local_flake(reference: str, is_local: bool, allow_local: bool) -> None:
    """Refuse references that must not be handed to `nix build`.

    Args:
        reference: The raw reference string
        is_local: Whether the reference points at the local filesystem
        allow_local: Whether local flakes were explicitly allowed

    Raises:
        SecurityError: If the reference contains control characters, or is
            local while local flakes are disabled
    """
    if any(char in reference for char in _FORBIDDEN_CHARS):
        raise SecurityError(f"Flake reference contains control characters: {reference!r}")

    if is_local and not allow_local:
        raise SecurityError(
            f"Local flake '{reference}' is not allowed. "
            "Local flakes can run arbitrary code at build time; "
            "set MISE_NIX_ALLOW_LOCAL_FLAKES=true to build them."
        )
