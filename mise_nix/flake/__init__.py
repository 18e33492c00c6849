"""Flake reference handling: classification, parsing, versions and builds."""

from mise_nix.flake.build import (
    BuildOutcome,
    FlakeBuilder,
    inject_version,
    parse_out_paths,
)
from mise_nix.flake.classify import (
    check_attribute,
    classify_kind,
    is_local,
    is_reference,
)
from mise_nix.flake.parse import (
    convert_custom_git_prefix,
    parse_reference,
)
from mise_nix.flake.types import (
    FlakeReference,
    ReferenceKind,
)
from mise_nix.flake.versions import get_versions

__all__ = [
    # Types
    "FlakeReference",
    "ReferenceKind",
    # Classification
    "classify_kind",
    "check_attribute",
    "is_reference",
    "is_local",
    # Parsing
    "convert_custom_git_prefix",
    "parse_reference",
    # Versions
    "get_versions",
    # Building
    "BuildOutcome",
    "FlakeBuilder",
    "inject_version",
    "parse_out_paths",
]
