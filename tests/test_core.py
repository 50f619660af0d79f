"""
Tests for the core fetch flow.
"""

from unittest.mock import MagicMock, patch

import pytest

import profile_pulse.config
from profile_pulse.cache import load_cache, save_cache
from profile_pulse.config import set_cache_dir
from profile_pulse.core import fetch_profile, missing_resources

RAW = {
    "account": {"login": "octocat", "name": "The Octocat"},
    "repositories": [{"id": 1, "name": "hello-world", "language": "Go"}],
    "events": [],
    "issues": {"total_count": 0, "items": []},
    "pulls": {"total_count": 0, "items": []},
    "calendar": None,
}


@pytest.fixture(autouse=True)
def temp_cache_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(profile_pulse.config, "_CACHE_DIR", None)
    set_cache_dir(tmp_path)
    return tmp_path


@pytest.fixture
def client():
    fake = MagicMock()
    fake.token = None
    fake.fetch_snapshot.return_value = RAW
    return fake


def test_fetch_profile_fetches_and_caches(client):
    """Test that a cache miss fetches and stores the raw snapshot."""
    snapshot = fetch_profile("octocat", client=client)

    client.fetch_snapshot.assert_called_once_with("octocat")
    assert snapshot.account.display_name == "The Octocat"
    assert snapshot.repositories[0].name == "hello-world"
    assert snapshot.issues.total_count == 0
    assert snapshot.calendar is None
    assert load_cache("octocat") == RAW


def test_fetch_profile_uses_cache(client):
    """Test that a valid cache entry skips the network."""
    save_cache("octocat", RAW)

    snapshot = fetch_profile("octocat", client=client)

    client.fetch_snapshot.assert_not_called()
    assert snapshot.account.login == "octocat"


def test_fetch_profile_without_cache(client):
    """Test that use_cache=False neither reads nor writes the cache."""
    save_cache("octocat", {**RAW, "account": {"login": "stale"}})

    snapshot = fetch_profile("octocat", client=client, use_cache=False)

    client.fetch_snapshot.assert_called_once_with("octocat")
    assert snapshot.account.login == "octocat"
    assert load_cache("octocat")["account"]["login"] == "stale"


def test_fetch_profile_cache_disabled_in_config(client):
    """Test that cache.enabled = false skips the cache."""
    with patch("profile_pulse.core.is_cache_enabled", return_value=False):
        fetch_profile("octocat", client=client)

    assert load_cache("octocat") is None


def test_fetch_profile_propagates_errors(client):
    client.fetch_snapshot.side_effect = ValueError("User 'ghost' not found")

    with pytest.raises(ValueError, match="not found"):
        fetch_profile("ghost", client=client)

    assert load_cache("ghost") is None


def test_fetch_profile_default_client():
    """Test that a GitHubClient is created when none is given."""
    with patch("profile_pulse.core.GitHubClient") as mock_client_class:
        mock_client_class.return_value.fetch_snapshot.return_value = RAW

        snapshot = fetch_profile("octocat", use_cache=False)

    mock_client_class.assert_called_once_with()
    assert snapshot.account.login == "octocat"


class TestPartialSnapshots:
    """Test caching when secondary resources failed to fetch."""

    @pytest.mark.parametrize("key", ["events", "issues", "pulls"])
    def test_failed_resource_is_not_cached(self, client, key):
        client.fetch_snapshot.return_value = {**RAW, key: None}

        snapshot = fetch_profile("octocat", client=client)

        assert snapshot.account.login == "octocat"
        assert load_cache("octocat") is None

    def test_failed_calendar_with_token_is_not_cached(self, client):
        client.token = "t"

        fetch_profile("octocat", client=client)

        assert load_cache("octocat") is None

    def test_calendar_with_token_is_cached(self, client):
        client.token = "t"
        calendar = {"totalContributions": 0, "weeks": []}
        client.fetch_snapshot.return_value = {**RAW, "calendar": calendar}

        fetch_profile("octocat", client=client)

        assert load_cache("octocat")["calendar"] == calendar

    def test_next_run_fetches_again(self, client):
        client.fetch_snapshot.return_value = {**RAW, "issues": None}
        fetch_profile("octocat", client=client)

        client.fetch_snapshot.return_value = RAW
        snapshot = fetch_profile("octocat", client=client)

        assert client.fetch_snapshot.call_count == 2
        assert snapshot.issues is not None
        assert load_cache("octocat") == RAW


def test_missing_resources():
    incomplete = {**RAW, "events": None, "pulls": None}

    assert missing_resources(RAW, has_token=False) == []
    assert missing_resources(RAW, has_token=True) == ["calendar"]
    assert missing_resources(incomplete, has_token=False) == ["events", "pulls"]
