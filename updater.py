"""Merge fetched download URLs into a provider's version map."""

from dataclasses import dataclass, field
from enum import Enum

import httpx

from logging_setup import get_logger
from manifest import version_to_key
from providers import Provider, ProviderError


# Errors that skip a single version (or a whole listing) instead of aborting
RECOVERABLE_ERRORS = (httpx.HTTPError, ProviderError)


class MergeOutcome(Enum):
    ADDED = "added"
    UPDATED = "updated"
    UP_TO_DATE = "up_to_date"


OUTCOME_MESSAGES = {
    MergeOutcome.ADDED: "Added missing version.",
    MergeOutcome.UPDATED: "Updated download URL.",
    MergeOutcome.UP_TO_DATE: "Already up to date.",
}


@dataclass
class ProviderResult:
    provider: str
    added: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    up_to_date: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    listing_error: str | None = None

    @property
    def changed(self) -> bool:
        return bool(self.added or self.updated)


def upsert(version_map: dict, version: str, url: str) -> MergeOutcome:
    """Insert or update the entry for ``version`` in place.

    Only ``url`` is ever written; other fields of an existing entry
    (``snapshot`` and anything unknown) are kept.
    """
    key = version_to_key(version)
    entry = version_map.get(key)

    if entry is None:
        version_map[key] = {"url": url}
        return MergeOutcome.ADDED

    if entry.get("url") != url:
        version_map[key] = {**entry, "url": url}
        return MergeOutcome.UPDATED

    return MergeOutcome.UP_TO_DATE


def update_version_map(provider: Provider, version_map: dict) -> tuple[dict, ProviderResult]:
    """Refresh ``version_map`` from ``provider``'s API.

    Works on a copy: the caller's map is left alone and the refreshed map is
    returned together with what happened to each version.
    """
    logger = get_logger()
    name = provider.display_name
    result = ProviderResult(provider=provider.name)
    updated_map = {key: dict(entry) for key, entry in version_map.items()}

    logger.info("== Checking %s ==", provider.header)
    try:
        versions = provider.list_versions()
    except RECOVERABLE_ERRORS as e:
        logger.warning("%s: Error loading versions: %s", name, e)
        result.listing_error = str(e)
        return updated_map, result

    logger.debug("%s: %d versions available", name, len(versions))

    for version in versions:
        try:
            url = provider.resolve_download_url(version)
        except RECOVERABLE_ERRORS as e:
            logger.warning("%s %s: Error: %s", name, version, e)
            result.failed.append(version)
            continue

        outcome = upsert(updated_map, version, url)
        logger.info("%s %s: %s", name, version, OUTCOME_MESSAGES[outcome])

        if outcome is MergeOutcome.ADDED:
            result.added.append(version)
        elif outcome is MergeOutcome.UPDATED:
            result.updated.append(version)
        else:
            result.up_to_date.append(version)

    return updated_map, result


def update_manifest(manifest: dict, providers: list[Provider]) -> tuple[dict, list[ProviderResult]]:
    """Run every provider in order and return the refreshed manifest."""
    refreshed = dict(manifest)
    results = []

    for provider in providers:
        group = dict(refreshed[provider.group])
        group[provider.map_name], result = update_version_map(
            provider, group[provider.map_name]
        )
        refreshed[provider.group] = group
        results.append(result)

    return refreshed, results
