"""
GitHub fetch client for Profile Pulse.

Collects the raw REST and GraphQL responses for one account. The account
and repository requests must succeed; the secondary requests (events,
issue and PR searches, contribution calendar) run concurrently and any of
them may fail without aborting the cycle.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import httpx
from dotenv import load_dotenv
from rich.console import Console

from profile_pulse.config import get_page_size
from profile_pulse.http_client import _get_http_client

# Load environment variables from .env file
load_dotenv()
console = Console(stderr=True)

GITHUB_API = "https://api.github.com"
GITHUB_GRAPHQL_API = "https://api.github.com/graphql"

CONTRIBUTION_CALENDAR_QUERY = """
query($login: String!) {
  user(login: $login) {
    contributionsCollection {
      contributionCalendar {
        totalContributions
        weeks {
          contributionDays {
            date
            contributionCount
          }
        }
      }
    }
  }
}
"""


class GitHubClient:
    """Read-only client for the public GitHub API."""

    def __init__(self, token: str | None = None):
        """
        Initialize the client.

        Args:
            token: GitHub Personal Access Token. If not provided, reads from
                   GITHUB_TOKEN environment variable. Without a token the REST
                   calls run unauthenticated and the contribution calendar
                   (GraphQL only) is skipped.
        """
        self.token = token or os.getenv("GITHUB_TOKEN") or None

    def _headers(self) -> dict[str, str]:
        """Per-request headers; the shared client carries the rest."""
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def _get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        not_found: str | None = None,
    ) -> Any:
        """
        GET a REST resource and decode its JSON body.

        Raises:
            ValueError: On 404 (resource missing) or 403 (rate limited).
            httpx.HTTPStatusError: On any other error status.
        """
        client = _get_http_client()
        response = client.get(
            f"{GITHUB_API}{path}", params=params, headers=self._headers()
        )

        if response.status_code == 404:
            raise ValueError(not_found or f"GitHub resource not found: {path}")
        if response.status_code == 403:
            raise ValueError("Rate limit exceeded or access denied")
        response.raise_for_status()
        return response.json()

    def fetch_account(self, username: str) -> dict[str, Any]:
        return self._get(
            f"/users/{username}", not_found=f"User '{username}' not found"
        )

    def fetch_repositories(self, username: str) -> list[dict[str, Any]]:
        """
        Fetch the account's repositories, most starred first.

        The users endpoint cannot sort by stars, so one page of recently
        updated repositories is sorted locally.
        """
        repos = self._get(
            f"/users/{username}/repos",
            params={"per_page": get_page_size(), "sort": "updated"},
            not_found=f"User '{username}' not found",
        )
        if not isinstance(repos, list):
            raise ValueError(f"Unexpected repository payload for {username}")
        return sorted(
            repos,
            key=lambda repo: repo.get("stargazers_count") or 0,
            reverse=True,
        )

    def fetch_events(self, username: str) -> list[dict[str, Any]]:
        return self._get(
            f"/users/{username}/events/public", params={"per_page": get_page_size()}
        )

    def _search(self, username: str, kind: str) -> dict[str, Any]:
        params = {"q": f"author:{username} type:{kind}", "per_page": get_page_size()}
        return self._get("/search/issues", params=params)

    def search_issues(self, username: str) -> dict[str, Any]:
        return self._search(username, "issue")

    def search_pulls(self, username: str) -> dict[str, Any]:
        return self._search(username, "pr")

    def fetch_contribution_calendar(self, username: str) -> dict[str, Any] | None:
        """
        Fetch the last year's contribution calendar through GraphQL.

        Returns:
            The ``contributionCalendar`` object, or None without a token or
            when the user has no calendar.

        Raises:
            httpx.HTTPStatusError: If the API returns an error.
        """
        if not self.token:
            return None

        client = _get_http_client()
        response = client.post(
            GITHUB_GRAPHQL_API,
            json={
                "query": CONTRIBUTION_CALENDAR_QUERY,
                "variables": {"login": username},
            },
            headers=self._headers(),
        )
        response.raise_for_status()
        data = response.json()

        if "errors" in data:
            raise httpx.HTTPStatusError(
                f"GitHub API Errors: {data['errors']}",
                request=response.request,
                response=response,
            )

        user = (data.get("data") or {}).get("user") or {}
        collection = user.get("contributionsCollection") or {}
        return collection.get("contributionCalendar")

    def fetch_snapshot(self, username: str) -> dict[str, Any]:
        """
        Fetch every resource needed for one analysis cycle.

        Args:
            username: GitHub login.

        Returns:
            Raw responses keyed by ``account``, ``repositories``, ``events``,
            ``issues``, ``pulls`` and ``calendar``. Failed secondary
            resources are None.

        Raises:
            ValueError: If the user does not exist or access is denied.
            httpx.HTTPError: If the account or repository request fails.
        """
        raw: dict[str, Any] = {
            "account": self.fetch_account(username),
            "repositories": self.fetch_repositories(username),
        }

        fetchers = {
            "events": self.fetch_events,
            "issues": self.search_issues,
            "pulls": self.search_pulls,
            "calendar": self.fetch_contribution_calendar,
        }
        with ThreadPoolExecutor(max_workers=len(fetchers)) as executor:
            futures = {
                key: executor.submit(fetch, username) for key, fetch in fetchers.items()
            }
            for key, future in futures.items():
                try:
                    raw[key] = future.result()
                except (httpx.HTTPError, ValueError) as e:
                    console.print(
                        f"[dim]Note: Could not fetch {key} for {username}: {e}[/dim]"
                    )
                    raw[key] = None

        return raw
