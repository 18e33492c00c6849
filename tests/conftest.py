"""Test configuration and fixtures."""

import os
from collections.abc import Mapping, Sequence
from pathlib import Path

import pytest

from mise_nix.config import BackendConfig
from mise_nix.runner import RunResult


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "e2e: end-to-end tests requiring nix or network")
    config.addinivalue_line("markers", "network: tests that make real network requests")


@pytest.fixture(autouse=True)
def skip_e2e_in_ci(request):
    """Auto-skip E2E tests in CI based on SKIP_E2E env var."""
    if request.node.get_closest_marker("e2e"):
        if os.environ.get("SKIP_E2E", "").lower() in ("1", "true", "yes"):
            pytest.skip("E2E tests skipped in CI (SKIP_E2E=1)")


class FakeRunner:
    """Runner that records commands and replays canned results."""

    def __init__(self, stdout: str = "/nix/store/abc-pkg\n", returncode: int = 0, stderr: str = ""):
        self.result = RunResult(stdout=stdout, returncode=returncode, stderr=stderr)
        self.calls: list[tuple[list[str], Mapping[str, str] | None]] = []
        self.missing = False

    def run(self, args: Sequence[str], *, env: Mapping[str, str] | None = None) -> RunResult:
        self.calls.append((list(args), env))
        if self.missing:
            raise FileNotFoundError(args[0])
        return self.result

    @property
    def last_reference(self) -> str:
        return self.calls[-1][0][-1]


class MemoryCacheStore:
    """In-memory CacheStore that counts sweeps."""

    def __init__(self) -> None:
        self.breadcrumbs: dict[str, str] = {}
        self.exec_env_entries: set[str] = set()
        self.sweeps = 0

    def read_breadcrumb(self, tool: str) -> str | None:
        return self.breadcrumbs.get(tool)

    def write_breadcrumb(self, tool: str, current_dir: str) -> None:
        self.breadcrumbs[tool] = current_dir

    def sweep_exec_env(self) -> int:
        self.sweeps += 1
        removed = len(self.exec_env_entries)
        self.exec_env_entries.clear()
        return removed


@pytest.fixture
def runner():
    """A FakeRunner printing one store path."""
    return FakeRunner()


@pytest.fixture
def memory_store():
    return MemoryCacheStore()


@pytest.fixture
def config(tmp_path: Path):
    """A BackendConfig rooted in tmp_path with local flakes allowed."""
    return BackendConfig(
        cache_dir=tmp_path / "cache",
        current_dir=str(tmp_path / "project"),
        allow_local_flakes=True,
    )


@pytest.fixture
def make_runner():
    """Factory for FakeRunners with custom output."""
    return FakeRunner
