"""Build flake references with `nix build`.

A requested version is injected into the reference before building:

| Locator                     | Version  | Built reference                          |
|-----------------------------|----------|------------------------------------------|
| `github:o/r#pkg`            | `v2.0.0` | `github:o/r/v2.0.0#pkg`                  |
| `github:o/r/v1.0.0#pkg`     | `v2.0.0` | `github:o/r/v2.0.0#pkg`                  |
| `git+https://h/r?ref=x#pkg` | `abc123` | `git+https://h/r?rev=abc123#pkg`         |
| `./flake#pkg`               | `local`  | `./flake#pkg`                            |

Other locator kinds (path:, file:, local paths, nixpkgs) are built as-is.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field

from mise_nix import output
from mise_nix.config import BackendConfig
from mise_nix.constants import ATTRIBUTE_SEPARATOR, UNPINNED_VERSIONS
from mise_nix.exceptions import BuildError, NotAFlakeReferenceError
from mise_nix.flake.classify import is_reference
from mise_nix.flake.parse import parse_reference
from mise_nix.flake.types import FlakeReference
from mise_nix.platform import get_env_prefix, get_impure_flag
from mise_nix.runner import Runner, SubprocessRunner
from mise_nix.security import validate_local_flake

# Short hex-only segments ("abc", "cafe") are kept; they are usually branch
# or directory names rather than commits
_HEX_SEGMENT = re.compile(r"^[a-fA-F0-9]{7,40}$")
_SEMVER_SEGMENT = re.compile(r"^v?\d+\.\d+\.\d+")
_REVISION_PARAMS = ("ref", "rev")

SecurityValidator = Callable[[str, bool, bool], None]


@dataclass
class BuildOutcome:
    """Result of a successful build."""

    outputs: list[str] = field(default_factory=list)
    reference: str = ""

    @property
    def primary(self) -> str:
        """The first output path (the package itself)."""
        return self.outputs[0]


def _split_query(locator: str) -> tuple[str, list[str]]:
    """Split a locator into its base and the query params other than ref/rev."""
    base, _sep, query = locator.partition("?")
    params = [
        param for param in query.split("&")
        if param and param.split("=", 1)[0] not in _REVISION_PARAMS
    ]
    return base, params


def _inject_hosted(locator: str, version: str) -> str:
    base, params = _split_query(locator)
    scheme, _sep, path = base.partition(":")
    segments = path.split("/")

    # Drop a commit or tag already pinned after owner/repo
    if len(segments) > 2 and (
        _HEX_SEGMENT.match(segments[-1]) or _SEMVER_SEGMENT.match(segments[-1])
    ):
        segments = segments[:-1]

    pinned = f"{scheme}:{'/'.join(segments)}/{version}"
    if params:
        pinned += "?" + "&".join(params)
    return pinned


def _inject_git_url(locator: str, version: str) -> str:
    base, params = _split_query(locator)
    params.append(f"rev={version}")
    return f"{base}?{'&'.join(params)}"


def inject_version(parsed: FlakeReference, version: str | None) -> str:
    """Return the reference to build for ``parsed`` pinned at ``version``.

    "latest", "local", "" and None leave the reference untouched.

    Examples:
        >>> inject_version(parse_reference("github:owner/repo#pkg"), "v2.0.0")
        'github:owner/repo/v2.0.0#pkg'
        >>> inject_version(parse_reference("git+https://example.com/repo?ref=main#pkg"), "abc123")
        'git+https://example.com/repo?rev=abc123#pkg'
        >>> inject_version(parse_reference("github:owner/repo#pkg"), "latest")
        'github:owner/repo#pkg'
    """
    if version is None or version in UNPINNED_VERSIONS:
        return parsed.normalized

    if parsed.is_hosted:
        locator = _inject_hosted(parsed.locator, version)
    elif parsed.is_git_url:
        locator = _inject_git_url(parsed.locator, version)
    else:
        return parsed.normalized

    return f"{locator}{ATTRIBUTE_SEPARATOR}{parsed.attribute}"


def parse_out_paths(stdout: str) -> list[str]:
    """Split `nix build --print-out-paths` output into store paths."""
    return [line.strip() for line in stdout.splitlines() if line.strip()]


class FlakeBuilder:
    """Builds flake references through a Runner.

    Args:
        config: Backend settings (nix binary, unfree/insecure switches)
        runner: Process runner; defaults to SubprocessRunner
        validator: Security check called with (reference, is_local, allow_local)
    """

    def __init__(
        self,
        config: BackendConfig,
        runner: Runner | None = None,
        validator: SecurityValidator = validate_local_flake,
    ) -> None:
        self.config = config
        self.runner = runner or SubprocessRunner()
        self.validator = validator

    def build_command(self, reference: str, is_local: bool = False) -> list[str]:
        return [
            self.config.nix_binary,
            "--extra-experimental-features",
            "nix-command flakes",
            "build",
            *get_impure_flag(self.config, is_local),
            "--no-link",
            "--print-out-paths",
            reference,
        ]

    def run_build(self, reference: str, is_local: bool = False) -> list[str]:
        """Run `nix build` for an already-resolved reference.

        Raises:
            BuildError: If nix is missing, exits non-zero or prints no paths
        """
        output.step(f"Building flake {reference}...")
        env = get_env_prefix(self.config) or None

        try:
            result = self.runner.run(self.build_command(reference, is_local), env=env)
        except FileNotFoundError:
            raise BuildError(
                f"nix executable not found: {self.config.nix_binary}", reference
            )

        if not result.ok:
            raise BuildError(
                f"nix build failed for flake {reference} (exit code {result.returncode})",
                reference,
                stderr=result.stderr,
            )

        outputs = parse_out_paths(result.stdout)
        if not outputs:
            raise BuildError(f"No outputs returned by nix build for flake: {reference}", reference)
        return outputs

    def build(self, raw: str, version: str | None = None) -> BuildOutcome:
        """Build a flake reference, optionally pinned to a version.

        Args:
            raw: The reference as the user wrote it
            version: Tag, branch or commit to pin, or "latest"/"local"

        Returns:
            BuildOutcome with the store paths and the reference that was built

        Raises:
            NotAFlakeReferenceError: If ``raw`` is not a flake reference
            SecurityError: If the security check refuses ``raw``
            BuildError: If the build fails or produces nothing
        """
        if not is_reference(raw):
            raise NotAFlakeReferenceError(f"Invalid flake reference: {raw}")

        parsed = parse_reference(raw)
        self.validator(raw, parsed.is_local, self.config.allow_local_flakes)

        build_ref = inject_version(parsed, version)
        if build_ref == parsed.normalized and version and version not in UNPINNED_VERSIONS:
            output.info(f"Version '{version}' cannot be pinned for {parsed.locator}; building as-is")

        outputs = self.run_build(build_ref, parsed.is_local)
        return BuildOutcome(outputs=outputs, reference=build_ref)
