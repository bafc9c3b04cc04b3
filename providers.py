"""Release API clients for the Paper, Purpur and Vanilla distribution families."""

from abc import ABC, abstractmethod

import httpx

from config import Config


class ProviderError(Exception):
    """A provider API call returned something that cannot be used."""


class DownloadNotFoundError(ProviderError):
    """No download artifact exists for the requested version."""


class InvalidResponseError(ProviderError):
    """The API answered with a body that is not the expected JSON shape."""


def fetch_json(url: str, timeout: float) -> dict:
    """GET ``url`` and return the decoded JSON object."""
    response = httpx.get(url, timeout=timeout)
    response.raise_for_status()
    try:
        data = response.json()
    except ValueError as e:
        raise InvalidResponseError(f"{url} did not return JSON") from e
    if not isinstance(data, dict):
        raise InvalidResponseError(f"{url} did not return a JSON object")
    return data


def dig(data: dict, *keys: str):
    """Walk nested objects, returning None as soon as a level is missing."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def require_url(value, description: str) -> str:
    """Return ``value`` if it is a usable URL string.

    Missing or empty values mean there is nothing to download; any other
    non-string is a malformed response.
    """
    if value is None or value == "":
        raise DownloadNotFoundError(f"no {description} found")
    if not isinstance(value, str):
        raise InvalidResponseError(f"{description} is not a string: {value!r}")
    return value


def sort_versions_descending(versions: list[str]) -> list[str]:
    """Sort version strings newest-first by plain string comparison.

    This is not semantic ordering: "1.9" sorts above "1.21". Callers only
    rely on which versions are present.
    """
    return sorted(versions, reverse=True)


class Provider(ABC):
    """One distribution family and where its versions live in the manifest."""

    name: str
    group: str
    map_name: str

    def __init__(self, timeout: float):
        self.timeout = timeout

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @property
    def header(self) -> str:
        return self.display_name

    @abstractmethod
    def list_versions(self) -> list[str]:
        """Return every version the API currently offers."""

    @abstractmethod
    def resolve_download_url(self, version: str) -> str:
        """Return the download URL of the latest build for ``version``."""


class PaperProvider(Provider):
    """Projects served by the PaperMC Fill v3 API (paper, folia, velocity, waterfall)."""

    def __init__(self, project: str, group: str, map_name: str, api_url: str, timeout: float):
        super().__init__(timeout)
        self.name = project
        self.group = group
        self.map_name = map_name
        self.api_url = api_url

    def list_versions(self) -> list[str]:
        """Flatten the per-major version groups into one list.

        The response looks like:
        {"project": {...}, "versions": {"1.21": ["1.21.4", "1.21.3"], "1.20": [...]}}
        """
        data = fetch_json(f"{self.api_url}/projects/{self.name}", self.timeout)
        groups = data.get("versions")
        if not isinstance(groups, dict):
            raise InvalidResponseError(f"No version list for {self.name}")

        versions: list[str] = []
        for group_versions in groups.values():
            if isinstance(group_versions, list):
                versions.extend(v for v in group_versions if isinstance(v, str))

        return sort_versions_descending(versions)

    def resolve_download_url(self, version: str) -> str:
        url = f"{self.api_url}/projects/{self.name}/versions/{version}/builds/latest"
        data = fetch_json(url, self.timeout)

        return require_url(
            dig(data, "downloads", "server:default", "url"),
            f"server:default download for {self.name} {version}",
        )


class PurpurProvider(Provider):
    name = "purpur"
    group = "SERVER"
    map_name = "PURPUR"

    def __init__(self, api_url: str, timeout: float):
        super().__init__(timeout)
        self.api_url = api_url

    def list_versions(self) -> list[str]:
        data = fetch_json(f"{self.api_url}/purpur", self.timeout)
        versions = data.get("versions")
        if not isinstance(versions, list):
            raise InvalidResponseError("No version list for purpur")
        return sort_versions_descending([v for v in versions if isinstance(v, str)])

    def resolve_download_url(self, version: str) -> str:
        """Build the download URL from the latest build id.

        The id is trusted as returned; the artifact itself is not checked.
        """
        data = fetch_json(f"{self.api_url}/purpur/{version}", self.timeout)
        latest = dig(data, "builds", "latest")
        if latest is None or latest == "":
            raise DownloadNotFoundError(f"no latest build found for version {version}")
        if not isinstance(latest, str):
            raise InvalidResponseError(f"latest build of {version} is not a string: {latest!r}")
        return f"{self.api_url}/purpur/{version}/{latest}/download"


class VanillaProvider(Provider):
    name = "vanilla"
    group = "SERVER"
    map_name = "VANILLA"
    header = "Vanilla (Releases only)"

    def __init__(self, manifest_url: str, timeout: float):
        super().__init__(timeout)
        self.manifest_url = manifest_url
        self._version_manifest: dict | None = None

    def version_manifest(self) -> dict:
        """Fetch the Mojang version manifest once per provider instance."""
        if self._version_manifest is None:
            self._version_manifest = fetch_json(self.manifest_url, self.timeout)
        return self._version_manifest

    def _entries(self) -> list[dict]:
        entries = self.version_manifest().get("versions")
        if not isinstance(entries, list):
            raise InvalidResponseError("No version list in the Vanilla manifest")
        return [entry for entry in entries if isinstance(entry, dict)]

    def list_versions(self) -> list[str]:
        """Return release ids only, newest first as listed upstream."""
        return [
            entry["id"]
            for entry in self._entries()
            if entry.get("type") == "release" and isinstance(entry.get("id"), str) and entry["id"]
        ]

    def resolve_download_url(self, version: str) -> str:
        version_url = next(
            (entry.get("url") for entry in self._entries() if entry.get("id") == version),
            None,
        )
        version_url = require_url(version_url, f"metadata URL for version {version}")

        data = fetch_json(version_url, self.timeout)
        return require_url(
            dig(data, "downloads", "server", "url"),
            f"server download for version {version}",
        )


def build_providers(config: Config) -> list[Provider]:
    """Create the enabled providers in run order."""
    available: dict[str, Provider] = {
        "paper": PaperProvider("paper", "SERVER", "PAPER", config.paper_api_url, config.request_timeout),
        "folia": PaperProvider("folia", "SERVER", "FOLIA", config.paper_api_url, config.request_timeout),
        "velocity": PaperProvider("velocity", "PROXY", "VELOCITY", config.paper_api_url, config.request_timeout),
        "waterfall": PaperProvider("waterfall", "PROXY", "WATERFALL", config.paper_api_url, config.request_timeout),
        "purpur": PurpurProvider(config.purpur_api_url, config.request_timeout),
        "vanilla": VanillaProvider(config.vanilla_manifest_url, config.request_timeout),
    }
    return [available[name] for name in config.providers]
