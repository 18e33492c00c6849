"""Working-directory tracking for local flake installs.

mise caches the environment computed by the exec-env hook per tool. A local
flake ("./flake#pkg") builds something different in every directory, so
when the working directory changes the cached environments must go, which
makes mise call exec-env again and re-point the install symlink.

Layout under the mise cache root:

    <cache_root>/nix-<tool>/last_cwd      last working directory seen for <tool>
    <cache_root>/nix-*/exec_env_*         cached environments, for every tool

All tools' cached environments are removed, not just the current tool's:
mise may only call list-versions for one tool while every nix tool's cached
environment is stale.
"""

import shutil
from pathlib import Path
from typing import Protocol

from mise_nix.constants import BREADCRUMB_FILENAME, EXEC_ENV_GLOB, TOOL_CACHE_PREFIX


class CacheStore(Protocol):
    """Storage for breadcrumbs and cached exec-env entries."""

    def read_breadcrumb(self, tool: str) -> str | None:
        ...

    def write_breadcrumb(self, tool: str, current_dir: str) -> None:
        ...

    def sweep_exec_env(self) -> int:
        ...


class FileCacheStore:
    """CacheStore backed by mise's cache directory."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def tool_dir(self, tool: str) -> Path:
        # "/" in a tool name (e.g., "owner/repo#pkg") nests directories
        return self.root / f"{TOOL_CACHE_PREFIX}{tool}"

    def breadcrumb_path(self, tool: str) -> Path:
        return self.tool_dir(tool) / BREADCRUMB_FILENAME

    def read_breadcrumb(self, tool: str) -> str | None:
        """Return the recorded directory, or None if nothing was recorded."""
        path = self.breadcrumb_path(tool)
        try:
            with open(path, encoding="utf-8", errors="surrogateescape") as f:
                return f.read()
        except FileNotFoundError:
            return None

    def write_breadcrumb(self, tool: str, current_dir: str) -> None:
        path = self.breadcrumb_path(tool)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", errors="surrogateescape") as f:
            f.write(current_dir)

    def sweep_exec_env(self) -> int:
        """Delete every tool's cached exec-env entries.

        Entries that vanish mid-sweep (another process got there first)
        are skipped.

        Returns:
            Number of entries removed by this call
        """
        if not self.root.is_dir():
            return 0

        removed = 0
        for entry in sorted(self.root.glob(EXEC_ENV_GLOB), reverse=True):
            try:
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
            except FileNotFoundError:
                continue
            removed += 1
        return removed


class CwdTracker:
    """Invalidates cached exec-env entries when the working directory changes."""

    def __init__(self, store: CacheStore) -> None:
        self.store = store

    def observe(self, tool: str, current_dir: str) -> bool:
        """Record ``current_dir`` for ``tool``, sweeping caches if it changed.

        Args:
            tool: Tool name as given to mise
            current_dir: Working directory reported by the host process

        Returns:
            True if the directory changed and caches were swept

        Raises:
            OSError: If the cache cannot be swept or the breadcrumb written
            UnicodeError: If a store cannot represent ``current_dir``
        """
        last_dir = self.store.read_breadcrumb(tool) or ""
        if last_dir == current_dir:
            return False

        self.store.sweep_exec_env()
        self.store.write_breadcrumb(tool, current_dir)
        return True
