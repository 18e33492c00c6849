"""Command-line interface for mise-nix."""
