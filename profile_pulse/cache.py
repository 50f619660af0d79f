"""
Cache management for Profile Pulse.

Stores the raw API responses of a fetch cycle per username to avoid
hitting the GitHub API on every run. Reports are always recomputed from
the cached responses.
"""

import gzip
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from profile_pulse.config import get_cache_dir, get_cache_ttl

# Bump when the shape of cached snapshots changes
CACHE_VERSION = "1.0"


def _get_cache_path(username: str) -> Path:
    """Get the cache file path for a username."""
    return get_cache_dir() / f"{username.lower()}.json.gz"


def is_cache_valid(
    entry: dict[str, Any], expected_version: str = CACHE_VERSION
) -> bool:
    """
    Check if a cache entry is still valid based on TTL and data version.

    Args:
        entry: Cache entry dict with cache_metadata and analysis_version.
        expected_version: Expected analysis_version string.

    Returns:
        True if cache is valid (within TTL and version matches), False otherwise.
    """
    if entry.get("analysis_version") != expected_version:
        return False

    metadata = entry.get("cache_metadata")
    if not metadata or "fetched_at" not in metadata:
        return False

    try:
        fetched_at = datetime.fromisoformat(metadata["fetched_at"])
        ttl_seconds = metadata.get("ttl_seconds", get_cache_ttl())

        # Make fetched_at timezone-aware if it isn't
        if fetched_at.tzinfo is None:
            fetched_at = fetched_at.replace(tzinfo=timezone.utc)

        age_seconds = (datetime.now(timezone.utc) - fetched_at).total_seconds()
        return age_seconds < ttl_seconds
    except (ValueError, TypeError):
        return False


def load_cache(username: str) -> dict[str, Any] | None:
    """
    Load the cached snapshot for a username.

    Returns:
        The raw snapshot dict, or None if missing, expired or corrupted.
    """
    cache_path = _get_cache_path(username)
    if not cache_path.exists():
        return None

    try:
        with gzip.open(cache_path, "rt", encoding="utf-8") as f:
            entry = json.load(f)
    except (json.JSONDecodeError, OSError):
        # Corrupted cache - treat as a miss
        return None

    if not isinstance(entry, dict) or not is_cache_valid(entry):
        return None

    snapshot = entry.get("snapshot")
    return snapshot if isinstance(snapshot, dict) else None


def save_cache(username: str, snapshot: dict[str, Any]) -> None:
    """
    Save a raw snapshot to the cache.

    Args:
        username: GitHub login the snapshot belongs to.
        snapshot: Raw responses as returned by GitHubClient.fetch_snapshot().
    """
    cache_dir = get_cache_dir()
    cache_dir.mkdir(parents=True, exist_ok=True)

    entry = {
        "analysis_version": CACHE_VERSION,
        "cache_metadata": {
            "fetched_at": datetime.now(timezone.utc).isoformat(),
            "ttl_seconds": get_cache_ttl(),
            "source": "github",
        },
        "snapshot": snapshot,
    }
    with gzip.open(_get_cache_path(username), "wt", encoding="utf-8") as f:
        json.dump(entry, f, ensure_ascii=False)


def clear_cache(username: str | None = None) -> int:
    """
    Clear the cache for one or all usernames.

    Args:
        username: Specific username to clear, or None to clear all.

    Returns:
        Number of cache files cleared.
    """
    cache_dir = get_cache_dir()
    if not cache_dir.exists():
        return 0

    if username:
        cache_path = _get_cache_path(username)
        if cache_path.exists():
            cache_path.unlink()
            return 1
        return 0

    cleared = 0
    for cache_file in cache_dir.glob("*.json.gz"):
        cache_file.unlink()
        cleared += 1
    return cleared
