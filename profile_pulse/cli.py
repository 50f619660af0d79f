"""
Command-line interface for Profile Pulse.
"""

import json
import math
import random
from datetime import datetime, timezone

import httpx
import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from profile_pulse.cache import clear_cache
from profile_pulse.config import set_cache_dir, set_page_size, set_verify_ssl
from profile_pulse.core import fetch_profile
from profile_pulse.handle import extract_username
from profile_pulse.heatmap import Heatmap
from profile_pulse.http_client import close_http_client
from profile_pulse.payloads import Repository
from profile_pulse.report import AnalyticsReport, build_report, report_to_dict

# --- Typer App ---
app = typer.Typer()
console = Console()

LEVEL_STYLES = ("grey23", "green4", "green3", "green1", "bright_green")
WEEKDAY_LABELS = ("", "Mon", "", "Wed", "", "Fri", "")

# --- Helper Functions ---


def _score_color(score: int) -> str:
    if score >= 80:
        return "green"
    if score >= 40:
        return "yellow"
    return "red"


def format_updated(updated_at: str, now: datetime | None = None) -> str:
    """Describe how long ago a repository was updated."""
    try:
        updated = datetime.fromisoformat(updated_at.replace("Z", "+00:00"))
    except ValueError:
        return "Updated at unknown time"
    if updated.tzinfo is None:
        updated = updated.replace(tzinfo=timezone.utc)

    now = now or datetime.now(timezone.utc)
    diff_days = math.ceil(abs((now - updated).total_seconds()) / 86400)

    if diff_days == 1:
        return "Updated yesterday"
    if diff_days < 7:
        return f"Updated {diff_days} days ago"
    if diff_days < 30:
        return f"Updated {math.ceil(diff_days / 7)} weeks ago"
    if diff_days < 365:
        return f"Updated {math.ceil(diff_days / 30)} months ago"
    return f"Updated {math.ceil(diff_days / 365)} years ago"


def display_profile(report: AnalyticsReport):
    """Display identity, headline stats and top languages."""
    account = report.account
    console.print(f"\n👤 [bold cyan]{account.display_name}[/bold cyan] (@{account.login})")
    if account.bio:
        console.print(f"   {account.bio}")

    details = []
    if account.company:
        details.append(f"🏢 {account.company}")
    if account.location:
        details.append(f"📍 {account.location}")
    if account.email:
        details.append(f"✉️  {account.email}")
    if account.blog_url:
        details.append(f"🔗 [link={account.blog_url}]{account.blog}[/link]")
    if account.created_at:
        joined = account.created_at[:7]
        details.append(f"📅 Joined {joined}")
    if details:
        console.print("   " + " • ".join(details))

    stats_table = Table(show_header=True, header_style="bold magenta")
    for column in ("Repositories", "Stars", "Forks", "Followers", "Following"):
        stats_table.add_column(column, justify="center")
    stats_table.add_row(
        str(account.public_repos),
        str(report.total_stars),
        str(report.total_forks),
        str(account.followers),
        str(account.following),
    )
    console.print(stats_table)

    if report.top_languages:
        languages_table = Table(title="Top Languages", show_header=False)
        languages_table.add_column("Language", style="cyan")
        languages_table.add_column("Share", justify="right")
        for name, percentage in report.top_languages:
            languages_table.add_row(name, f"{percentage:.1f}%")
        console.print(languages_table)

    if report.tech_stack:
        console.print("🧰 Tech stack: " + ", ".join(report.tech_stack))


def display_analytics(report: AnalyticsReport):
    """Display the quality score and developer insights."""
    color = _score_color(report.code_quality_score)
    console.print(
        f"\n🏆 Code Quality Score: [{color}]{report.code_quality_score}%[/{color}] "
        f"({report.quality_level})"
    )

    table = Table(
        title="Developer Analytics", show_header=True, header_style="bold magenta"
    )
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", justify="right")
    table.add_row("Estimated commits (recent)", str(report.estimated_commits))
    table.add_row("Avg commit message length", str(report.avg_commit_message_length))
    table.add_row("Recent pushes", str(report.commit_frequency))
    table.add_row("Issues opened", str(report.issues_opened))
    table.add_row("Issues closed", str(report.issues_closed))
    table.add_row("PRs created", str(report.pull_requests_created))
    table.add_row("PRs merged", str(report.pull_requests_merged))
    table.add_row("Languages used", str(report.language_diversity))
    table.add_row("CI/CD", "✓" if report.has_ci else "✗")
    table.add_row("Testing", "✓" if report.has_tests else "✗")
    table.add_row("Contribution streak", f"{report.contribution_streak} days")
    console.print(table)

    insights = Table(title="Developer Insights", show_header=False)
    insights.add_column("Insight", style="cyan")
    insights.add_column("Label")
    insights.add_row("Commit Quality", report.commit_quality)
    insights.add_row("Activity Level", report.activity_level)
    insights.add_row("Issue Management", report.issue_management)
    insights.add_row("PR Success Rate", report.pr_success_rate_label)
    insights.add_row("Tech Diversity", report.tech_diversity)
    insights.add_row("Best Practices", report.best_practices)
    console.print(insights)


def render_heatmap(heatmap: Heatmap) -> list[Text]:
    """Render the heatmap as lines of text: month labels, then Sun..Sat rows."""
    width = len(heatmap.weeks)
    header = [" "] * width
    for index, label in heatmap.month_labels:
        for offset, char in enumerate(label):
            if index + offset < width:
                header[index + offset] = char

    lines = [Text("    " + "".join(header), style="dim")]
    for weekday in range(7):
        line = Text(f"{WEEKDAY_LABELS[weekday]:<4}", style="dim")
        for week in heatmap.weeks:
            day = week[weekday]
            if day is None:
                line.append(" ")
            else:
                line.append("■", style=LEVEL_STYLES[day.level])
        lines.append(line)
    return lines


def display_heatmap(heatmap: Heatmap):
    console.print(
        f"\n📅 [bold]{heatmap.total_contributions}[/bold] contributions in the last year"
    )
    if heatmap.is_synthetic:
        console.print("[dim]   (contribution calendar unavailable - showing sample data)[/dim]")
    for line in render_heatmap(heatmap):
        console.print(line)

    legend = Text("    Less ", style="dim")
    for style in LEVEL_STYLES:
        legend.append("■", style=style)
    legend.append(" More", style="dim")
    console.print(legend)


def display_repositories(repositories: tuple[Repository, ...], limit: int = 10):
    """Display the most starred repositories."""
    if not repositories:
        console.print("\n[dim]No public repositories.[/dim]")
        return

    table = Table(title=f"Top Repositories ({len(repositories)} repos)")
    table.add_column("Repository", style="cyan", no_wrap=True)
    table.add_column("Language")
    table.add_column("★", justify="right")
    table.add_column("Forks", justify="right")
    table.add_column("Updated", justify="left")
    for repo in repositories[:limit]:
        name = f"{repo.name} [dim](fork)[/dim]" if repo.fork else repo.name
        table.add_row(
            name,
            repo.language or "-",
            str(repo.stargazers_count),
            str(repo.forks_count),
            format_updated(repo.updated_at),
        )
    console.print(table)


# --- Commands ---


@app.command()
def analyze(
    target: str = typer.Argument(
        ...,
        help="GitHub username, @username, or profile URL (e.g. 'octocat', 'https://github.com/octocat').",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the report as JSON instead of tables.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Also list the top repositories.",
    ),
    seed: int | None = typer.Option(
        None,
        "--seed",
        help="Seed for the sample heatmap shown when no contribution calendar is available.",
    ),
    no_cache: bool = typer.Option(
        False,
        "--no-cache",
        help="Always fetch fresh data and do not write the cache.",
    ),
    cache_dir: str | None = typer.Option(
        None,
        "--cache-dir",
        help="Cache directory (default: ~/.cache/profile-pulse).",
    ),
    page_size: int | None = typer.Option(
        None,
        "--page-size",
        help="Items per list request (1-100).",
    ),
    insecure: bool = typer.Option(
        False,
        "--insecure",
        help="Disable SSL certificate verification for HTTPS requests.",
    ),
):
    """Analyze a GitHub profile."""
    set_verify_ssl(not insecure)
    if cache_dir:
        set_cache_dir(cache_dir)
    if page_size is not None:
        set_page_size(page_size)

    username = extract_username(target)
    if username is None:
        console.print(f"[red]Error: Could not find a GitHub username in '{target}'.[/red]")
        raise typer.Exit(code=1)

    rng = random.Random(seed) if seed is not None else None
    try:
        snapshot = fetch_profile(username, use_cache=not no_cache)
        report = build_report(snapshot, rng=rng)
    except httpx.HTTPError as e:
        console.print(f"[red]HTTP Error: {e}[/red]")
        raise typer.Exit(code=1) from e
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e
    finally:
        close_http_client()

    if as_json:
        print(json.dumps(report_to_dict(report), indent=2, ensure_ascii=False))
        return

    display_profile(report)
    display_analytics(report)
    display_heatmap(report.heatmap)
    if verbose:
        display_repositories(snapshot.repositories)


@app.command(name="clear-cache")
def clear_cache_command(
    username: str | None = typer.Argument(
        None, help="Username to clear. Clears every cached profile if omitted."
    ),
    cache_dir: str | None = typer.Option(
        None,
        "--cache-dir",
        help="Cache directory (default: ~/.cache/profile-pulse).",
    ),
):
    """Clear cached profile data."""
    if cache_dir:
        set_cache_dir(cache_dir)
    cleared = clear_cache(username)
    if cleared:
        console.print(f"[green]✨ Cleared {cleared} cache file(s).[/green]")
    else:
        console.print("[dim]No cache files to clear.[/dim]")


if __name__ == "__main__":
    app()
