"""
Aggregation of repository, event and search payloads into profile counts.
"""

import math
from collections.abc import Mapping
from types import MappingProxyType
from typing import NamedTuple

from profile_pulse.payloads import Event, IssueOrPRSearchResult, Repository

PUSH_EVENT = "PushEvent"

CI_TOPICS = frozenset({"ci", "cd", "github-actions", "travis", "jenkins", "circleci"})
TEST_TOPICS = frozenset({"testing", "jest", "mocha", "cypress", "test"})

TECH_STACK_LANGUAGES = 5
TECH_STACK_TOPICS = 10
TECH_STACK_LIMIT = 8


class Aggregate(NamedTuple):
    """Cumulative counts derived from one profile snapshot."""

    total_stars: int
    total_forks: int
    languages: Mapping[str, int]  # read-only; language -> non-fork repositories
    estimated_commits: int
    tech_stack: tuple[str, ...]
    has_ci: bool
    has_tests: bool
    issues_opened: int
    issues_closed: int
    pull_requests_created: int
    pull_requests_merged: int
    avg_commit_message_length: int
    commit_frequency: int  # number of push events in the feed
    top_repository: Repository | None = None

    @property
    def language_diversity(self) -> int:
        return len(self.languages)


def round_half_up(value: float) -> int:
    """Round .5 up, unlike the banker's rounding of round()."""
    return math.floor(value + 0.5)


def count_languages(repositories: tuple[Repository, ...]) -> dict[str, int]:
    """
    Count repositories per primary language.

    Forks are skipped so borrowed code does not inflate a language.
    Insertion order follows the first repository seen for each language.
    """
    languages: dict[str, int] = {}
    for repo in repositories:
        if repo.language and not repo.fork:
            languages[repo.language] = languages.get(repo.language, 0) + 1
    return languages


def top_languages(
    languages: Mapping[str, int], limit: int = 5
) -> list[tuple[str, float]]:
    """
    Return the most used languages with their share of repositories.

    Sorted by count descending; ties keep first-seen order. Percentages are
    rounded to one decimal.
    """
    total = sum(languages.values())
    if total == 0:
        return []

    ranked = sorted(languages.items(), key=lambda item: item[1], reverse=True)
    return [(name, round(count / total * 100, 1)) for name, count in ranked[:limit]]


def push_events(events: tuple[Event, ...]) -> list[Event]:
    return [event for event in events if event.type == PUSH_EVENT]


def estimate_commits(events: tuple[Event, ...]) -> int:
    """
    Count commits carried by push events.

    The public event feed only covers recent activity (about 90 days and
    at most one page), so this is a lower bound, not a commit history.
    """
    return sum(len(event.commits) for event in push_events(events))


def average_commit_message_length(events: tuple[Event, ...]) -> int:
    messages = [
        commit.message for event in push_events(events) for commit in event.commits
    ]
    if not messages:
        return 0
    return round_half_up(sum(len(message) for message in messages) / len(messages))


def detect_tech_stack(
    repositories: tuple[Repository, ...], languages: Mapping[str, int]
) -> list[str]:
    """
    Combine the top languages with the first repository topics.

    Up to 5 languages (most frequent first) are followed by the first 10
    topic labels across all repositories. Exact duplicates are dropped and
    the result is capped at 8 entries.
    """
    ranked = [name for name, _ in top_languages(languages, TECH_STACK_LANGUAGES)]
    all_topics = [topic for repo in repositories for topic in repo.topics]

    stack: list[str] = []
    for label in ranked + all_topics[:TECH_STACK_TOPICS]:
        if label not in stack:
            stack.append(label)
    return stack[:TECH_STACK_LIMIT]


def has_topic(
    repositories: tuple[Repository, ...], vocabulary: frozenset[str]
) -> bool:
    """Check whether any repository carries one of the topics (case-insensitive)."""
    return any(
        topic.lower() in vocabulary for repo in repositories for topic in repo.topics
    )


def count_closed_issues(issues: IssueOrPRSearchResult | None) -> int:
    if issues is None:
        return 0
    return sum(1 for item in issues.items if item.state == "closed")


def count_merged_pulls(pulls: IssueOrPRSearchResult | None) -> int:
    if pulls is None:
        return 0
    return sum(
        1 for item in pulls.items if item.state == "closed" and item.merged_at
    )


def find_top_repository(repositories: tuple[Repository, ...]) -> Repository | None:
    """Repository with the most stars; the first one wins on ties."""
    top = None
    for repo in repositories:
        if top is None or repo.stargazers_count > top.stargazers_count:
            top = repo
    return top


def aggregate(
    repositories: tuple[Repository, ...],
    events: tuple[Event, ...] = (),
    issues: IssueOrPRSearchResult | None = None,
    pulls: IssueOrPRSearchResult | None = None,
) -> Aggregate:
    """
    Fold a snapshot's repositories, events and search results into counts.

    Absent search results count as zero. Empty inputs give a zeroed
    aggregate; this function does not raise.
    """
    languages = count_languages(repositories)

    return Aggregate(
        total_stars=sum(repo.stargazers_count for repo in repositories),
        total_forks=sum(repo.forks_count for repo in repositories),
        languages=MappingProxyType(languages),
        estimated_commits=estimate_commits(events),
        tech_stack=tuple(detect_tech_stack(repositories, languages)),
        has_ci=has_topic(repositories, CI_TOPICS),
        has_tests=has_topic(repositories, TEST_TOPICS),
        issues_opened=issues.total_count if issues is not None else 0,
        issues_closed=count_closed_issues(issues),
        pull_requests_created=pulls.total_count if pulls is not None else 0,
        pull_requests_merged=count_merged_pulls(pulls),
        avg_commit_message_length=average_commit_message_length(events),
        commit_frequency=len(push_events(events)),
        top_repository=find_top_repository(repositories),
    )
