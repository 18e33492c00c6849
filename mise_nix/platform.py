"""Platform helpers: OS/arch names and the environment nix builds run with."""

from mise_nix.config import BackendConfig

_OS_ALIASES = {
    "linux": "linux",
    "darwin": "darwin",
    "macos": "darwin",
    "osx": "darwin",
    "windows": "windows",
    "win32": "windows",
}

_ARCH_ALIASES = {
    "x86_64": "x86_64",
    "x86-64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
}


def normalize_os(name: str) -> str:
    """Normalize an OS name to linux, darwin or windows.

    Examples:
        >>> normalize_os("Darwin")
        'darwin'
        >>> normalize_os("macOS")
        'darwin'
        >>> normalize_os("Linux")
        'linux'
    """
    key = (name or "").strip().lower()
    return _OS_ALIASES.get(key, key)


def normalize_arch(name: str) -> str:
    """Normalize a CPU architecture name to x86_64 or aarch64.

    Examples:
        >>> normalize_arch("amd64")
        'x86_64'
        >>> normalize_arch("ARM64")
        'aarch64'
    """
    key = (name or "").strip().lower()
    return _ARCH_ALIASES.get(key, key)


def get_env_prefix(config: BackendConfig) -> dict[str, str]:
    """Environment variables to set for `nix build`."""
    env: dict[str, str] = {}
    if config.allow_unfree:
        env["NIXPKGS_ALLOW_UNFREE"] = "1"
    if config.allow_insecure:
        env["NIXPKGS_ALLOW_INSECURE"] = "1"
    return env


def get_impure_flag(config: BackendConfig, is_local: bool = False) -> list[str]:
    """Return ["--impure"] when the build must read the environment or local files.

    nixpkgs only honours NIXPKGS_ALLOW_* variables under impure evaluation.
    """
    if is_local or get_env_prefix(config):
        return ["--impure"]
    return []
