"""
Core analysis flow for Profile Pulse.

Fetches (or loads from cache) one snapshot of an account and hands it to
the analytics engine in profile_pulse.report.
"""

from typing import Any

from rich.console import Console

from profile_pulse.cache import load_cache, save_cache
from profile_pulse.config import is_cache_enabled
from profile_pulse.github import GitHubClient
from profile_pulse.payloads import ProfileSnapshot, parse_snapshot

console = Console(stderr=True)

SECONDARY_KEYS = ("events", "issues", "pulls", "calendar")


def missing_resources(raw: dict[str, Any], has_token: bool) -> list[str]:
    """
    List the secondary resources that failed to fetch.

    Without a token the contribution calendar is never requested, so its
    absence does not count as a failure.
    """
    missing = [key for key in SECONDARY_KEYS if raw.get(key) is None]
    if not has_token and "calendar" in missing:
        missing.remove("calendar")
    return missing


def fetch_profile(
    username: str,
    client: GitHubClient | None = None,
    use_cache: bool = True,
) -> ProfileSnapshot:
    """
    Get the snapshot for a username, from cache when possible.

    Only complete snapshots are cached. When a secondary resource could
    not be fetched the snapshot is still analyzed, but the next run
    fetches again.

    Args:
        username: GitHub login.
        client: Client to fetch with; a default GitHubClient otherwise.
        use_cache: If False, always fetch and do not touch the cache.

    Raises:
        ValueError: If the account or repositories cannot be fetched.
        httpx.HTTPError: On transport errors for the primary requests.
    """
    console.print(f"Analyzing [bold cyan]{username}[/bold cyan]...")
    caching = use_cache and is_cache_enabled()

    raw = load_cache(username) if caching else None
    if raw is not None:
        console.print(f"[dim]Loaded {username} from cache.[/dim]")
    else:
        client = client or GitHubClient()
        raw = client.fetch_snapshot(username)
        if caching:
            missing = missing_resources(raw, bool(client.token))
            if missing:
                console.print(
                    f"[dim]Not caching {username}: missing {', '.join(missing)}.[/dim]"
                )
            else:
                save_cache(username, raw)

    return parse_snapshot(raw)
