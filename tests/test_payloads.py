"""
Tests for payload parsing.
"""

import pytest

from profile_pulse.payloads import (
    Account,
    CalendarDay,
    parse_account,
    parse_calendar,
    parse_events,
    parse_repositories,
    parse_search_result,
    parse_snapshot,
)


class TestParseAccount:
    """Test parsing of /users/{login} responses."""

    def test_full_account(self):
        data = {
            "login": "octocat",
            "name": "The Octocat",
            "created_at": "2011-01-25T18:44:36Z",
            "public_repos": 8,
            "followers": 100,
            "following": 9,
            "bio": None,
            "blog": "github.blog",
        }

        account = parse_account(data)

        assert account.login == "octocat"
        assert account.display_name == "The Octocat"
        assert account.public_repos == 8
        assert account.bio is None
        assert account.blog_url == "https://github.blog"

    def test_missing_counts_default_to_zero(self):
        account = parse_account({"login": "x", "followers": "many"})

        assert account.followers == 0
        assert account.public_repos == 0
        assert account.display_name == "x"

    def test_blog_with_scheme_is_kept(self):
        assert Account("x", blog="http://a.dev").blog_url == "http://a.dev"
        assert Account("x").blog_url is None

    @pytest.mark.parametrize("data", [None, [], {}, {"login": ""}, {"login": 3}])
    def test_invalid_account_raises(self, data):
        with pytest.raises(ValueError):
            parse_account(data)


class TestParseRepositories:
    """Test parsing of repository lists."""

    def test_malformed_entries_are_dropped(self):
        data = [
            {"id": 1, "name": "good", "language": "Go", "stargazers_count": 4},
            "not a repo",
            {"id": 2},
            {"id": 3, "name": "topics", "topics": ["cli", 5, "api"]},
        ]

        repos = parse_repositories(data)

        assert [repo.name for repo in repos] == ["good", "topics"]
        assert repos[0].stargazers_count == 4
        assert repos[1].topics == ("cli", "api")
        assert repos[1].language is None

    def test_null_counts_default_to_zero(self):
        repos = parse_repositories([{"name": "x", "stargazers_count": None}])

        assert repos[0].stargazers_count == 0
        assert repos[0].fork is False

    def test_non_list_raises(self):
        with pytest.raises(ValueError):
            parse_repositories({"message": "Not Found"})


class TestParseEvents:
    """Test parsing of public events."""

    def test_push_commits_are_extracted(self):
        data = [
            {
                "type": "PushEvent",
                "payload": {"commits": [{"message": "fix"}, {"sha": "abc"}, "junk"]},
            },
            {"type": "WatchEvent", "payload": {}},
            {"payload": {}},
        ]

        events = parse_events(data)

        assert len(events) == 2
        assert [c.message for c in events[0].commits] == ["fix", ""]
        assert events[1].commits == ()

    def test_non_list_yields_no_events(self):
        assert parse_events(None) == ()
        assert parse_events({"message": "error"}) == ()


class TestParseSearchResult:
    """Test parsing of issue and pull request searches."""

    def test_pull_request_merge_state(self):
        merged = {"merged_at": "2024-01-01T00:00:00Z"}
        data = {
            "total_count": 3,
            "items": [
                {"state": "closed", "pull_request": merged},
                {"state": "closed", "pull_request": {"merged_at": None}},
                {"state": "open"},
            ],
        }

        result = parse_search_result(data)

        assert result.total_count == 3
        assert [item.merged_at for item in result.items] == [
            "2024-01-01T00:00:00Z",
            None,
            None,
        ]

    def test_absent_result(self):
        assert parse_search_result(None) is None
        assert parse_search_result([]) is None

    def test_missing_items(self):
        result = parse_search_result({"total_count": 5})

        assert result.total_count == 5
        assert result.items == ()


class TestParseCalendar:
    """Test parsing of the GraphQL contribution calendar."""

    def test_contribution_days_shape(self):
        data = {
            "totalContributions": 7,
            "weeks": [
                {"contributionDays": [{"date": "2024-01-07", "contributionCount": 7}]}
            ],
        }

        calendar = parse_calendar(data)

        assert calendar.total_contributions == 7
        assert calendar.weeks == ((CalendarDay("2024-01-07", 7),),)

    def test_plain_list_weeks_and_junk_days(self):
        data = {"weeks": [[{"date": "2024-01-07"}, "junk"], "junk"]}

        calendar = parse_calendar(data)

        assert calendar.total_contributions == 0
        assert calendar.weeks == ((CalendarDay("2024-01-07", None),),)

    def test_absent_calendar(self):
        assert parse_calendar(None) is None
        assert parse_calendar({"weeks": None}) is None


class TestParseSnapshot:
    """Test assembling a full snapshot."""

    def test_secondary_payloads_may_be_missing(self):
        snapshot = parse_snapshot(
            {"account": {"login": "octocat"}, "repositories": [], "issues": None}
        )

        assert snapshot.account.login == "octocat"
        assert snapshot.repositories == ()
        assert snapshot.events == ()
        assert snapshot.issues is None
        assert snapshot.pulls is None
        assert snapshot.calendar is None

    def test_repositories_are_required(self):
        with pytest.raises(ValueError):
            parse_snapshot({"account": {"login": "octocat"}})
