"""
Composite quality score and categorical labels for a profile.

The labels are computed here rather than in the presentation layer so they
can be tested without rendering anything.
"""

from typing import NamedTuple

from profile_pulse.aggregator import Aggregate, round_half_up

MAX_SCORE = 100
MAX_STREAK = 99


class Scorecard(NamedTuple):
    """Score and display labels derived from an Aggregate."""

    code_quality_score: int
    quality_level: str
    commit_quality: str
    activity_level: str
    issue_management: str
    pr_success_rate: int | None  # percent, None when no PRs were created
    tech_diversity: str
    best_practices: str
    contribution_streak: int


def compute_code_quality_score(
    total_stars: int, pull_requests_merged: int, language_diversity: int
) -> int:
    """
    Weighted proxy for code quality, bounded to 0..100.

    Merged pull requests weigh 0.4, stars and language diversity 0.3 each,
    and the sum is divided by 10. This is a heuristic favouring merged
    collaboration over diversity over raw popularity, not a measurement of
    the code itself.
    """
    raw = 0.3 * total_stars + 0.4 * pull_requests_merged + 0.3 * language_diversity
    return max(0, min(round_half_up(raw / 10), MAX_SCORE))


def quality_level(score: int) -> str:
    """
    Scoring:
    - 80+: Excellent
    - 60-79: Good
    - 40-59: Fair
    - <40: Needs Work
    """
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Good"
    if score >= 40:
        return "Fair"
    return "Needs Work"


def commit_quality_label(avg_commit_message_length: int) -> str:
    return "Descriptive" if avg_commit_message_length > 30 else "Brief"


def activity_level_label(push_count: int) -> str:
    if push_count > 10:
        return "Very Active"
    if push_count > 5:
        return "Active"
    return "Moderate"


def issue_management_label(issues_closed: int, issues_opened: int) -> str:
    # Closing exactly 70% or less is still "Good".
    if issues_closed > issues_opened * 0.7:
        return "Excellent"
    return "Good"


def pr_success_rate(
    pull_requests_merged: int, pull_requests_created: int
) -> int | None:
    """Merged share of created pull requests in percent, or None without PRs."""
    if pull_requests_created == 0:
        return None
    return round_half_up(pull_requests_merged / pull_requests_created * 100)


def tech_diversity_label(language_diversity: int) -> str:
    if language_diversity > 5:
        return "Polyglot"
    if language_diversity > 2:
        return "Multi-tech"
    return "Focused"


def best_practices_label(has_ci: bool, has_tests: bool) -> str:
    if has_ci and has_tests:
        return "Advanced"
    if has_ci or has_tests:
        return "Good"
    return "Basic"


def contribution_streak(push_count: int, total_stars: int) -> int:
    """Rough streak estimate from recent pushes and popularity, capped at 99."""
    return min(push_count * 2 + total_stars // 10, MAX_STREAK)


def score(stats: Aggregate) -> Scorecard:
    """Derive the quality score and every label from an aggregate."""
    code_quality_score = compute_code_quality_score(
        stats.total_stars, stats.pull_requests_merged, stats.language_diversity
    )

    return Scorecard(
        code_quality_score=code_quality_score,
        quality_level=quality_level(code_quality_score),
        commit_quality=commit_quality_label(stats.avg_commit_message_length),
        activity_level=activity_level_label(stats.commit_frequency),
        issue_management=issue_management_label(
            stats.issues_closed, stats.issues_opened
        ),
        pr_success_rate=pr_success_rate(
            stats.pull_requests_merged, stats.pull_requests_created
        ),
        tech_diversity=tech_diversity_label(stats.language_diversity),
        best_practices=best_practices_label(stats.has_ci, stats.has_tests),
        contribution_streak=contribution_streak(
            stats.commit_frequency, stats.total_stars
        ),
    )
