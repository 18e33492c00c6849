"""Backend hooks called by mise: list versions, install, exec env.

A tool is either a flake reference itself ("github:owner/repo#pkg"), a
plain nixpkgs package name ("hello") whose versions come from nixhub, or a
plain name installed from a flake given as the version
("mytool@gitlab+group/repo#default").
"""

import os
import platform as host_platform
import shutil
from pathlib import Path

from mise_nix import output
from mise_nix.cache import CacheStore, CwdTracker, FileCacheStore
from mise_nix.config import BackendConfig, load_config
from mise_nix.constants import LATEST_VERSION, NIXPKGS_GITHUB
from mise_nix.exceptions import BuildError, ValidationError
from mise_nix.flake import BuildOutcome, FlakeBuilder, get_versions, is_local, is_reference
from mise_nix.nixhub import NixhubClient, Release
from mise_nix.platform import normalize_arch, normalize_os
from mise_nix.plugins import is_marketplace_plugin
from mise_nix.runner import Runner
from mise_nix.version import is_compatible, is_valid


def reconcile_install_symlink(store_path: str, install_path: Path) -> bool:
    """Point ``install_path`` at ``store_path`` unless it already does.

    Returns:
        True if the link was (re)created, False if it was already correct
    """
    store_path = store_path.strip()
    try:
        current_target = os.readlink(install_path).strip()
    except OSError:
        current_target = ""

    if current_target == store_path:
        return False

    if install_path.is_symlink() or install_path.is_file():
        install_path.unlink()
    elif install_path.is_dir():
        shutil.rmtree(install_path)

    install_path.parent.mkdir(parents=True, exist_ok=True)
    install_path.symlink_to(store_path)
    return True


class Backend:
    """The nix backend for mise.

    Args:
        config: Settings; loaded from the environment when omitted
        runner: Process runner used for `nix build`
        store: Cache store for working-directory breadcrumbs
        nixhub: nixhub client for plain package names
        os_type: Host OS name (any spelling normalize_os understands)
        arch_type: Host CPU architecture
    """

    def __init__(
        self,
        config: BackendConfig | None = None,
        *,
        runner: Runner | None = None,
        store: CacheStore | None = None,
        nixhub: NixhubClient | None = None,
        os_type: str | None = None,
        arch_type: str | None = None,
    ) -> None:
        self.config = config or load_config()
        self.builder = FlakeBuilder(self.config, runner)
        self.store = store or FileCacheStore(self.config.cache_dir)
        self.nixhub = nixhub or NixhubClient(self.config.nixhub_url)
        self.os_type = normalize_os(os_type or host_platform.system())
        self.arch_type = normalize_arch(arch_type or host_platform.machine())

    @staticmethod
    def effective_reference(tool: str, version: str | None) -> str | None:
        """Return the flake reference to build: the tool, else the version."""
        if is_reference(tool):
            return tool
        if version and is_reference(version):
            return version
        return None

    def track_working_directory(self, tool: str) -> bool:
        """Sweep cached exec envs if the working directory changed.

        Failures are reported and otherwise ignored.
        """
        tracker = CwdTracker(self.store)
        try:
            return tracker.observe(tool, self.config.current_dir)
        except (OSError, UnicodeError) as e:
            output.warn(f"Could not update exec-env cache for {tool}: {e}")
            return False

    def compatible_releases(self, tool: str) -> list[Release]:
        """nixhub releases of ``tool`` for this platform, newest first."""
        result = self.nixhub.fetch_metadata(tool)
        if not result.ok:
            return []
        return [
            release
            for release in result.releases
            if is_valid(release.version)
            and is_compatible(release.platforms_summary, self.os_type, self.arch_type)
        ]

    def list_versions(self, tool: str, requested_version: str | None = None) -> list[str]:
        """List installable versions of ``tool``, oldest first.

        Raises:
            ValidationError: If ``tool`` is empty
            FlakeFormatError: If ``tool`` is a flake reference with an empty attribute
        """
        if not tool:
            raise ValidationError("Tool name cannot be empty")

        self.track_working_directory(tool)

        # Editor plugins follow nixpkgs and have no versions of their own
        if is_marketplace_plugin(tool):
            return [LATEST_VERSION]

        if is_reference(tool):
            return get_versions(tool)

        # Flakes have no version list; the requested reference is the version
        if requested_version and is_reference(requested_version):
            return [requested_version]

        versions = [release.version for release in self.compatible_releases(tool)]
        versions.reverse()
        return versions

    def _build_release(self, tool: str, version: str) -> BuildOutcome:
        releases = self.compatible_releases(tool)
        if not releases:
            raise BuildError(f"Package '{tool}' not found on nixhub for {self.os_type}/{self.arch_type}", tool)

        if version in ("", LATEST_VERSION):
            release = releases[0]
        else:
            matches = [r for r in releases if r.version == version]
            if not matches:
                raise BuildError(f"Version '{version}' of '{tool}' not found on nixhub", tool)
            release = matches[0]

        build = release.build_for(self.os_type, self.arch_type)
        if build is None or not build.commit_hash or not build.attribute_path:
            raise BuildError(
                f"'{tool}' {release.version} has no build for {self.os_type}/{self.arch_type}", tool
            )

        return self.builder.build(f"{NIXPKGS_GITHUB}#{build.attribute_path}", build.commit_hash)

    def install(self, tool: str, version: str, install_path: Path) -> BuildOutcome:
        """Build ``tool`` at ``version`` and link ``install_path`` to the result.

        Raises:
            ValidationError: If ``tool`` is empty
            SecurityError: If the reference is refused
            BuildError: If nothing could be built
        """
        if not tool:
            raise ValidationError("Tool name cannot be empty")

        reference = self.effective_reference(tool, version)
        if reference is None:
            outcome = self._build_release(tool, version)
        elif reference == tool:
            outcome = self.builder.build(tool, version)
        else:
            outcome = self.builder.build(reference)

        reconcile_install_symlink(outcome.primary, install_path)
        output.info(f"Installed {outcome.reference} -> {outcome.primary}")
        return outcome

    def exec_env(self, tool: str, version: str, install_path: Path) -> dict[str, str]:
        """Environment variables for running ``tool``.

        Local flakes are rebuilt from the current directory first, and the
        install symlink is moved if the store path changed.
        """
        reference = self.effective_reference(tool, version)

        if reference is not None and is_local(reference):
            try:
                outcome = self.builder.build(reference)
            except BuildError as e:
                output.warn(f"Could not rebuild {reference}: {e}")
            else:
                reconcile_install_symlink(outcome.primary, install_path)

        bin_path = install_path.resolve() / "bin"
        if bin_path.is_dir():
            return {"PATH": str(bin_path)}
        return {"PATH": str(install_path / "bin")}
