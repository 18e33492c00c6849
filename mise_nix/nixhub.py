"""Package metadata from nixhub.io.

nixhub indexes which nixpkgs commit shipped which version of a package.
Lookups never raise: a missing package or a network problem comes back as
``MetadataResult(ok=False)`` so callers fall through to an empty version
list.
"""

from dataclasses import dataclass, field
from typing import Any

import httpx

from mise_nix.constants import DEFAULT_NIXHUB_URL
from mise_nix.platform import normalize_arch, normalize_os

_DATA_QUERY = {"_data": "routes/_nixhub.packages.$pkg._index"}


@dataclass
class PlatformBuild:
    """A release as built for one platform."""

    os: str
    arch: str
    attribute_path: str
    commit_hash: str


@dataclass
class Release:
    """One version of a package as listed by nixhub."""

    version: str
    platforms_summary: str = ""
    platforms: list[PlatformBuild] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Release":
        platforms = [
            PlatformBuild(
                os=str(p.get("os", "")),
                arch=str(p.get("arch", "")),
                attribute_path=str(p.get("attribute_path", "")),
                commit_hash=str(p.get("commit_hash", "")),
            )
            for p in data.get("platforms") or []
            if isinstance(p, dict)
        ]
        return cls(
            version=str(data.get("version", "")),
            platforms_summary=str(data.get("platforms_summary") or ""),
            platforms=platforms,
        )

    def build_for(self, os_name: str, arch: str) -> PlatformBuild | None:
        """Return the platform build matching ``os_name``/``arch``, if any."""
        for build in self.platforms:
            if normalize_os(build.os) == os_name and normalize_arch(build.arch) == arch:
                return build
        return None


@dataclass
class MetadataResult:
    """Outcome of a metadata lookup."""

    ok: bool
    data: dict[str, Any] | None = None
    status_code: int | None = None

    @property
    def releases(self) -> list[Release]:
        return releases_from_data(self.data)


def releases_from_data(data: dict[str, Any] | None) -> list[Release]:
    """Extract releases from a nixhub response body."""
    if not data or not isinstance(data.get("releases"), list):
        return []
    return [Release.from_dict(item) for item in data["releases"] if isinstance(item, dict)]


class NixhubClient:
    """Client for the nixhub package endpoint.

    Args:
        base_url: nixhub root URL
        client: Optional preconfigured httpx.Client (used by tests)
    """

    def __init__(self, base_url: str = DEFAULT_NIXHUB_URL, client: httpx.Client | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client

    def package_url(self, tool: str) -> str:
        return f"{self.base_url}/packages/{tool}"

    def _get(self, client: httpx.Client, tool: str) -> httpx.Response:
        return client.get(self.package_url(tool), params=_DATA_QUERY)

    def fetch_metadata(self, tool: str) -> MetadataResult:
        """Fetch release metadata for a nixpkgs package name."""
        try:
            if self._client is not None:
                response = self._get(self._client, tool)
            else:
                with httpx.Client(follow_redirects=True, timeout=30.0) as client:
                    response = self._get(client, tool)

            if response.status_code == 404:
                return MetadataResult(ok=False, status_code=404)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            return MetadataResult(ok=False, status_code=e.response.status_code)
        except (httpx.RequestError, ValueError):
            return MetadataResult(ok=False)

        if not isinstance(data, dict):
            return MetadataResult(ok=False, status_code=response.status_code)
        return MetadataResult(ok=True, data=data, status_code=response.status_code)
