"""mise-nix: Nix flake backend for mise."""

__version__ = "0.4.0"
