"""
Pooled HTTP client shared by every GitHub request of a run.

The secondary fetches run in worker threads and all go through the one
``httpx.Client`` returned here, so connections to api.github.com are reused
across REST and GraphQL calls.
"""

import httpx

from profile_pulse.config import get_request_timeout, get_verify_ssl

API_VERSION = "2022-11-28"
USER_AGENT = "profile-pulse"

# Sent with every request; the token is added per request by GitHubClient
BASE_HEADERS = {
    "Accept": "application/vnd.github+json",
    "User-Agent": USER_AGENT,
    "X-GitHub-Api-Version": API_VERSION,
}

MAX_CONNECTIONS = 10  # at least the four concurrent secondary fetches
MAX_KEEPALIVE = 6
KEEPALIVE_EXPIRY = 30.0

_http_client: httpx.Client | None = None
_http_client_verify_ssl: bool | None = None


def _build_client(verify_ssl: bool) -> httpx.Client:
    return httpx.Client(
        verify=verify_ssl,
        timeout=get_request_timeout(),
        headers=BASE_HEADERS,
        follow_redirects=True,
        limits=httpx.Limits(
            max_connections=MAX_CONNECTIONS,
            max_keepalive_connections=MAX_KEEPALIVE,
            keepalive_expiry=KEEPALIVE_EXPIRY,
        ),
    )


def _get_http_client() -> httpx.Client:
    """
    Return the shared client, building it on first use.

    A client built under a different ``--insecure`` setting, or one that
    was already closed, is replaced.
    """
    global _http_client, _http_client_verify_ssl
    verify_ssl = get_verify_ssl()

    stale = (
        _http_client is None
        or _http_client.is_closed
        or _http_client_verify_ssl != verify_ssl
    )
    if stale:
        close_http_client()
        _http_client = _build_client(verify_ssl)
        _http_client_verify_ssl = verify_ssl
    return _http_client


def close_http_client():
    """Release the shared client's connections at the end of a run."""
    global _http_client, _http_client_verify_ssl
    if _http_client is not None and not _http_client.is_closed:
        _http_client.close()
    _http_client = None
    _http_client_verify_ssl = None
