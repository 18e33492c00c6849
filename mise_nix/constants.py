"""Centralized constants for mise-nix."""

# Attribute used when a reference has no explicit '#attribute'
DEFAULT_ATTRIBUTE = "default"

# Separator between a flake locator and its attribute
ATTRIBUTE_SEPARATOR = "#"

# Version tokens that never pin a revision
LATEST_VERSION = "latest"
LOCAL_VERSION = "local"
UNPINNED_VERSIONS = ("", LATEST_VERSION, LOCAL_VERSION)

# User prepended to ssh+ references that do not name one
DEFAULT_GIT_USER = "git"

# Cache layout under the mise cache root
TOOL_CACHE_PREFIX = "nix-"
BREADCRUMB_FILENAME = "last_cwd"
EXEC_ENV_GLOB = "**/nix-*/exec_env_*"

# Flake that marketplace syntaxes resolve against
NIXPKGS_LOCATOR = "nixpkgs"
NIXPKGS_GITHUB = "github:NixOS/nixpkgs"

DEFAULT_NIXHUB_URL = "https://www.nixhub.io"
