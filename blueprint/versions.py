"""Best-effort latest-version lookup against the pub.dev API.

Used by ``blueprint init --latest-versions`` to refresh the bundled
dependency constraints before ``pubspec.yaml`` is rendered.  Every failure
(offline, timeout, unknown package, malformed payload) degrades to the
bundled constraint; a lookup never aborts generation.

Typical usage::

    client = PubVersionClient()
    overrides = client.latest_constraints(["dio", "provider"])
    # {"dio": "^5.4.0", "provider": "^6.1.1"}
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import httpx
from pydantic import BaseModel, Field

from blueprint import __version__

logger = logging.getLogger(__name__)


class VersionLookup(BaseModel):
    """Outcome of a single package lookup."""

    package: str
    version: str | None = Field(default=None, description="Latest published version")
    success: bool = Field(default=True)
    error: str | None = Field(default=None)

    @property
    def constraint(self) -> str | None:
        return f"^{self.version}" if self.version else None


class PubVersionClient:
    """Synchronous client for ``GET {base_url}/{package}``."""

    def __init__(
        self,
        base_url: str = "https://pub.dev/api/packages",
        timeout: float = 10.0,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)),
            headers={"User-Agent": f"blueprint/{__version__}"},
            transport=self._transport,
        )

    def lookup(self, package: str, client: httpx.Client | None = None) -> VersionLookup:
        """Fetch the latest version of *package*.

        Returns a failed ``VersionLookup`` instead of raising.
        """
        try:
            if client is None:
                with self._client() as own_client:
                    response = own_client.get(f"/{package}")
            else:
                response = client.get(f"/{package}")
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException:
            return VersionLookup(
                package=package,
                success=False,
                error=f"timed out after {self.timeout}s",
            )
        except httpx.HTTPStatusError as exc:
            return VersionLookup(
                package=package,
                success=False,
                error=f"HTTP {exc.response.status_code}",
            )
        except httpx.HTTPError as exc:
            return VersionLookup(package=package, success=False, error=str(exc) or type(exc).__name__)
        except ValueError as exc:
            return VersionLookup(package=package, success=False, error=f"invalid JSON ({exc})")

        version = None
        if isinstance(data, dict) and isinstance(data.get("latest"), dict):
            version = data["latest"].get("version")
        if not isinstance(version, str) or not version:
            return VersionLookup(package=package, success=False, error="no latest version in payload")
        return VersionLookup(package=package, version=version)

    def latest_constraints(self, packages: Iterable[str]) -> dict[str, str]:
        """Return caret constraints for every package that could be resolved.

        Packages whose lookup failed are simply absent from the result, so the
        caller keeps its bundled constraint for them.
        """
        constraints: dict[str, str] = {}
        names = sorted(set(packages))
        if not names:
            return constraints
        with self._client() as client:
            for name in names:
                result = self.lookup(name, client)
                if result.constraint:
                    constraints[name] = result.constraint
                    logger.debug("%s: %s", name, result.constraint)
                else:
                    logger.debug("%s: keeping bundled constraint (%s)", name, result.error)
        logger.info("Fetched %d/%d latest versions from pub.dev", len(constraints), len(names))
        return constraints
