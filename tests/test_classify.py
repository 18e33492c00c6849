"""Tests for flake reference classification."""

import pytest

from mise_nix.exceptions import FlakeFormatError
from mise_nix.flake import ReferenceKind, classify_kind, is_local, is_reference, parse_reference


class TestIsReference:
    """Test is_reference for every supported syntax."""

    @pytest.mark.parametrize(
        "value",
        [
            "github:owner/repo#pkg",
            "github:owner/repo",
            "gitlab:group/project#pkg",
            "git+https://example.com/repo.git#pkg",
            "git+ssh://git@example.com/repo.git#pkg",
            "path:/some/path#pkg",
            "file:/some/path#pkg",
            "nixpkgs#hello",
            "./my-flake#pkg",
            "../my-flake#pkg",
            "/abs/path/flake#tool",
            "nixos/nixpkgs#hello",
            "github+owner/repo#pkg",
            "gitlab+group/sub/project#pkg",
            "ssh+example.com/repo.git#pkg",
            "https+example.com/repo.git#pkg",
            "vscode+install=vscode-extensions.ms-python.python",
            "vscode-extensions.golang.go",
        ],
    )
    def test_accepts_known_syntaxes(self, value):
        """Every documented syntax is a reference."""
        assert is_reference(value) is True

    @pytest.mark.parametrize(
        "value",
        ["", "hello", "nodejs", "./my-flake", "/abs/path/flake", "owner/repo", "1.2.3"],
    )
    def test_rejects_plain_names_and_paths_without_attribute(self, value):
        """Package names and paths without '#' are not references."""
        assert is_reference(value) is False

    @pytest.mark.parametrize("value", ["vscode+install=vscode-extensions.", "vscode-extensions."])
    def test_rejects_marketplace_without_extension(self, value):
        """A marketplace prefix with nothing after it names no package."""
        assert is_reference(value) is False
        assert classify_kind(value) is ReferenceKind.UNRECOGNIZED

    def test_rejects_bare_name_with_attribute(self):
        """'name#attr' is ambiguous with a package name containing '#'."""
        assert is_reference("my-flake#package") is False

    @pytest.mark.parametrize("value", [None, 42, ["github:o/r#p"]])
    def test_rejects_non_strings(self, value):
        """Non-string input is never a reference."""
        assert is_reference(value) is False

    def test_empty_attribute_raises(self):
        """A recognized syntax ending in '#' is a format error."""
        with pytest.raises(FlakeFormatError):
            is_reference("github:owner/repo#")


class TestClassifyKind:
    """Test kind detection and its ordering."""

    @pytest.mark.parametrize(
        "value,kind",
        [
            ("github:o/r#p", ReferenceKind.HOSTED),
            ("gitlab+g/p#x", ReferenceKind.CUSTOM_PREFIXED),
            ("git+ssh://host/r#p", ReferenceKind.GIT_URL),
            ("path:/x#p", ReferenceKind.PATH_URI),
            ("file:/x#p", ReferenceKind.FILE_URI),
            ("nixpkgs#hello", ReferenceKind.REGISTRY),
            ("./dir#p", ReferenceKind.LOCAL_PATH),
            ("../dir#p", ReferenceKind.LOCAL_PATH),
            ("owner/repo#p", ReferenceKind.OWNER_REPO),
            ("vscode+install=vscode-extensions.a.b", ReferenceKind.MARKETPLACE_INSTALL),
            ("vscode-extensions.a.b", ReferenceKind.MARKETPLACE_PACKAGE),
            ("hello", ReferenceKind.UNRECOGNIZED),
        ],
    )
    def test_kinds(self, value, kind):
        """Each syntax maps to its kind."""
        assert classify_kind(value) is kind

    def test_relative_path_is_not_owner_repo(self):
        """'../dir#p' has an owner/repo shape but is a local path."""
        assert classify_kind("../dir#p") is ReferenceKind.LOCAL_PATH


class TestIsLocal:
    """Test local reference detection."""

    @pytest.mark.parametrize(
        "value",
        ["./flake#default", "../flake#pkg", "/abs/path/flake#tool", "path:/srv/flake", "file:/srv/flake#x"],
    )
    def test_local(self, value):
        """Paths and path:/file: URIs are local."""
        assert is_local(value) is True

    @pytest.mark.parametrize(
        "value",
        ["github:foo/bar#baz", "owner/repo#pkg", "git+https://h/r#p", "nixpkgs#hello", "hello", ""],
    )
    def test_not_local(self, value):
        """Remote references and non-references are not local."""
        assert is_local(value) is False


class TestClosure:
    """Normalized forms are references themselves."""

    @pytest.mark.parametrize(
        "value",
        [
            "github:owner/repo",
            "owner/repo#pkg",
            "github+owner/repo/sub#pkg",
            "gitlab+group/sub/project#x",
            "ssh+example.com/repo.git#pkg",
            "https+example.com/repo.git#pkg",
            "path:/srv/flake",
            "./flake#default",
            "nixpkgs#hello",
            "vscode+install=vscode-extensions.foo.bar",
            "vscode-extensions.foo.bar",
            "vscode+install=vscode-extensions.x",
        ],
    )
    def test_normalized_form_is_reference(self, value):
        """parse(s).normalized is accepted by the classifier."""
        normalized = parse_reference(value).normalized
        assert is_reference(normalized) is True
        assert parse_reference(normalized).normalized == normalized
