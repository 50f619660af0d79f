"""
Assembly of the analytics report handed to the presentation layer.
"""

import random
from datetime import date
from collections.abc import Mapping
from typing import Any, NamedTuple

from profile_pulse.aggregator import aggregate, top_languages
from profile_pulse.heatmap import ContributionDay, Heatmap, build_heatmap
from profile_pulse.payloads import Account, ProfileSnapshot, Repository
from profile_pulse.scorer import score


class AnalyticsReport(NamedTuple):
    """The result of one profile analysis cycle."""

    account: Account
    repository_count: int
    total_stars: int
    total_forks: int
    languages: Mapping[str, int]
    top_languages: tuple[tuple[str, float], ...]
    language_diversity: int
    estimated_commits: int
    avg_commit_message_length: int
    commit_frequency: int
    issues_opened: int
    issues_closed: int
    pull_requests_created: int
    pull_requests_merged: int
    has_ci: bool
    has_tests: bool
    tech_stack: tuple[str, ...]
    top_repository: Repository | None
    code_quality_score: int
    quality_level: str
    commit_quality: str
    activity_level: str
    issue_management: str
    pr_success_rate: int | None
    tech_diversity: str
    best_practices: str
    contribution_streak: int
    heatmap: Heatmap

    @property
    def pr_success_rate_label(self) -> str:
        if self.pr_success_rate is None:
            return "N/A"
        return f"{self.pr_success_rate}%"


def build_report(
    snapshot: ProfileSnapshot,
    today: date | None = None,
    rng: random.Random | None = None,
) -> AnalyticsReport:
    """
    Turn one fetched snapshot into an AnalyticsReport.

    Secondary data (events, issue and PR searches, contribution calendar)
    may be absent; the corresponding fields fall back to zero and the
    heatmap to synthetic data.

    Args:
        snapshot: Data fetched for the account in this cycle.
        today: End of the synthetic heatmap window (defaults to today).
        rng: Random source for the synthetic heatmap.

    Raises:
        ValueError: If the snapshot has no account or no repository list.
    """
    if snapshot.account is None:
        raise ValueError("Cannot build a report without account data.")
    if snapshot.repositories is None:
        raise ValueError("Cannot build a report without repository data.")

    stats = aggregate(
        snapshot.repositories, snapshot.events, snapshot.issues, snapshot.pulls
    )
    card = score(stats)
    heatmap = build_heatmap(snapshot.calendar, today=today, rng=rng)

    return AnalyticsReport(
        account=snapshot.account,
        repository_count=len(snapshot.repositories),
        total_stars=stats.total_stars,
        total_forks=stats.total_forks,
        languages=stats.languages,
        top_languages=tuple(top_languages(stats.languages)),
        language_diversity=stats.language_diversity,
        estimated_commits=stats.estimated_commits,
        avg_commit_message_length=stats.avg_commit_message_length,
        commit_frequency=stats.commit_frequency,
        issues_opened=stats.issues_opened,
        issues_closed=stats.issues_closed,
        pull_requests_created=stats.pull_requests_created,
        pull_requests_merged=stats.pull_requests_merged,
        has_ci=stats.has_ci,
        has_tests=stats.has_tests,
        tech_stack=stats.tech_stack,
        top_repository=stats.top_repository,
        code_quality_score=card.code_quality_score,
        quality_level=card.quality_level,
        commit_quality=card.commit_quality,
        activity_level=card.activity_level,
        issue_management=card.issue_management,
        pr_success_rate=card.pr_success_rate,
        tech_diversity=card.tech_diversity,
        best_practices=card.best_practices,
        contribution_streak=card.contribution_streak,
        heatmap=heatmap,
    )


def _day_to_dict(day: ContributionDay | None) -> dict[str, Any] | None:
    if day is None:
        return None
    return {"date": day.date.isoformat(), "count": day.count, "level": day.level}


def _repository_to_dict(repo: Repository | None) -> dict[str, Any] | None:
    if repo is None:
        return None
    return repo._asdict() | {"topics": list(repo.topics)}


def _heatmap_to_dict(heatmap: Heatmap) -> dict[str, Any]:
    return {
        "totalContributions": heatmap.total_contributions,
        "isSynthetic": heatmap.is_synthetic,
        "monthLabels": [
            {"week": index, "label": label} for index, label in heatmap.month_labels
        ],
        "weeks": [[_day_to_dict(day) for day in week] for week in heatmap.weeks],
    }


def report_to_dict(report: AnalyticsReport) -> dict[str, Any]:
    """Convert a report into a JSON-serializable dict."""
    return {
        "user": report.account._asdict(),
        "stats": {
            "totalStars": report.total_stars,
            "totalForks": report.total_forks,
            "languages": dict(report.languages),
            "topLanguages": [
                {"name": name, "percentage": percentage}
                for name, percentage in report.top_languages
            ],
            "totalCommits": report.estimated_commits,
            "contributionStreak": report.contribution_streak,
            "topRepo": _repository_to_dict(report.top_repository),
            "techStack": list(report.tech_stack),
        },
        "analytics": {
            "avgCommitMessageLength": report.avg_commit_message_length,
            "commitFrequency": report.commit_frequency,
            "issuesOpened": report.issues_opened,
            "issuesClosed": report.issues_closed,
            "pullRequestsCreated": report.pull_requests_created,
            "pullRequestsMerged": report.pull_requests_merged,
            "hasCI": report.has_ci,
            "hasTests": report.has_tests,
            "languageDiversity": report.language_diversity,
            "codeQualityScore": report.code_quality_score,
        },
        "insights": {
            "qualityLevel": report.quality_level,
            "commitQuality": report.commit_quality,
            "activityLevel": report.activity_level,
            "issueManagement": report.issue_management,
            "prSuccessRate": report.pr_success_rate_label,
            "techDiversity": report.tech_diversity,
            "bestPractices": report.best_practices,
        },
        "heatmap": _heatmap_to_dict(report.heatmap),
    }
