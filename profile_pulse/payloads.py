"""
Typed shapes for the GitHub payloads consumed by the analytics engine.

The parsers are lenient: secondary payloads that are missing or have the
wrong shape become ``None`` (absent) or empty tuples, and individual
malformed records are dropped instead of failing the whole batch. Only the
account and the repository list are required.
"""

from typing import Any, NamedTuple


class Account(NamedTuple):
    """Public profile of a GitHub account."""

    login: str
    created_at: str = ""
    public_repos: int = 0
    followers: int = 0
    following: int = 0
    name: str | None = None
    bio: str | None = None
    location: str | None = None
    company: str | None = None
    email: str | None = None
    blog: str | None = None
    avatar_url: str | None = None
    html_url: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.login

    @property
    def blog_url(self) -> str | None:
        """Blog link with a scheme, or None when no blog is set."""
        if not self.blog:
            return None
        if self.blog.startswith("http"):
            return self.blog
        return f"https://{self.blog}"


class Repository(NamedTuple):
    """Snapshot of a repository owned by the account."""

    id: int
    name: str
    language: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    watchers_count: int = 0
    topics: tuple[str, ...] = ()
    fork: bool = False
    updated_at: str = ""
    description: str | None = None
    html_url: str | None = None
    size: int = 0
    open_issues_count: int = 0


class PushCommit(NamedTuple):
    message: str


class Event(NamedTuple):
    """A public activity event. Only push events carry commits."""

    type: str
    commits: tuple[PushCommit, ...] = ()


class SearchItem(NamedTuple):
    """One issue or pull request from a search result."""

    state: str
    merged_at: str | None = None


class IssueOrPRSearchResult(NamedTuple):
    total_count: int
    items: tuple[SearchItem, ...] = ()


class CalendarDay(NamedTuple):
    """A raw calendar day. Values are validated by the heatmap builder."""

    date: Any
    contribution_count: Any


class ContributionCalendar(NamedTuple):
    total_contributions: int
    weeks: tuple[tuple[CalendarDay, ...], ...] = ()


class ProfileSnapshot(NamedTuple):
    """
    Everything fetched for one account in one cycle.

    ``issues``, ``pulls`` and ``calendar`` are None when the corresponding
    fetch failed or was skipped; ``events`` is empty in that case.
    """

    account: Account
    repositories: tuple[Repository, ...]
    events: tuple[Event, ...] = ()
    issues: IssueOrPRSearchResult | None = None
    pulls: IssueOrPRSearchResult | None = None
    calendar: ContributionCalendar | None = None


# --- Parsing helpers ---


def _as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value


def _as_str(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def parse_account(data: Any) -> Account:
    """
    Parse a ``/users/{login}`` response.

    Raises:
        ValueError: If the payload is not an account record.
    """
    if not isinstance(data, dict) or not _as_str(data.get("login")):
        raise ValueError("Account payload is missing or has no login.")

    return Account(
        login=data["login"],
        created_at=data.get("created_at") or "",
        public_repos=_as_int(data.get("public_repos")),
        followers=_as_int(data.get("followers")),
        following=_as_int(data.get("following")),
        name=_as_str(data.get("name")),
        bio=_as_str(data.get("bio")),
        location=_as_str(data.get("location")),
        company=_as_str(data.get("company")),
        email=_as_str(data.get("email")),
        blog=_as_str(data.get("blog")),
        avatar_url=_as_str(data.get("avatar_url")),
        html_url=_as_str(data.get("html_url")),
    )


def parse_repository(data: Any) -> Repository | None:
    """Parse one repository record, or return None if it is malformed."""
    if not isinstance(data, dict) or not _as_str(data.get("name")):
        return None

    topics = data.get("topics") or []
    if not isinstance(topics, list):
        topics = []

    return Repository(
        id=_as_int(data.get("id")),
        name=data["name"],
        language=_as_str(data.get("language")),
        stargazers_count=_as_int(data.get("stargazers_count")),
        forks_count=_as_int(data.get("forks_count")),
        watchers_count=_as_int(data.get("watchers_count")),
        topics=tuple(topic for topic in topics if isinstance(topic, str)),
        fork=bool(data.get("fork", False)),
        updated_at=data.get("updated_at") or "",
        description=_as_str(data.get("description")),
        html_url=_as_str(data.get("html_url")),
        size=_as_int(data.get("size")),
        open_issues_count=_as_int(data.get("open_issues_count")),
    )


def parse_repositories(data: Any) -> tuple[Repository, ...]:
    """
    Parse a repository list, dropping malformed entries.

    Raises:
        ValueError: If the payload is not a list.
    """
    if not isinstance(data, list):
        raise ValueError("Repository payload is missing or is not a list.")

    repositories = (parse_repository(item) for item in data)
    return tuple(repo for repo in repositories if repo is not None)


def parse_event(data: Any) -> Event | None:
    if not isinstance(data, dict) or not isinstance(data.get("type"), str):
        return None

    payload = data.get("payload") or {}
    raw_commits = payload.get("commits") if isinstance(payload, dict) else None
    if not isinstance(raw_commits, list):
        raw_commits = []

    commits = tuple(
        PushCommit(commit.get("message") or "")
        for commit in raw_commits
        if isinstance(commit, dict)
    )
    return Event(type=data["type"], commits=commits)


def parse_events(data: Any) -> tuple[Event, ...]:
    """Parse an event list; anything other than a list yields no events."""
    if not isinstance(data, list):
        return ()

    events = (parse_event(item) for item in data)
    return tuple(event for event in events if event is not None)


def parse_search_result(data: Any) -> IssueOrPRSearchResult | None:
    """Parse a ``/search/issues`` response, or None if it is absent."""
    if not isinstance(data, dict):
        return None

    raw_items = data.get("items")
    if not isinstance(raw_items, list):
        raw_items = []

    items = []
    for item in raw_items:
        if not isinstance(item, dict):
            continue
        pull_request = item.get("pull_request")
        merged_at = None
        if isinstance(pull_request, dict):
            merged_at = _as_str(pull_request.get("merged_at"))
        items.append(SearchItem(state=item.get("state") or "", merged_at=merged_at))

    return IssueOrPRSearchResult(
        total_count=_as_int(data.get("total_count")), items=tuple(items)
    )


def parse_calendar(data: Any) -> ContributionCalendar | None:
    """
    Parse a GraphQL ``contributionCalendar`` object.

    Weeks may be given either as ``{"contributionDays": [...]}`` objects or
    as plain lists of day records. Non-dict day records are dropped here;
    field-level validation happens when the heatmap is built.
    """
    if not isinstance(data, dict):
        return None

    raw_weeks = data.get("weeks")
    if not isinstance(raw_weeks, list):
        return None

    weeks = []
    for raw_week in raw_weeks:
        if isinstance(raw_week, dict):
            raw_week = raw_week.get("contributionDays")
        if not isinstance(raw_week, list):
            continue
        weeks.append(
            tuple(
                CalendarDay(day.get("date"), day.get("contributionCount"))
                for day in raw_week
                if isinstance(day, dict)
            )
        )

    return ContributionCalendar(
        total_contributions=_as_int(data.get("totalContributions")),
        weeks=tuple(weeks),
    )


def parse_snapshot(raw: dict[str, Any]) -> ProfileSnapshot:
    """
    Build a ProfileSnapshot from the raw responses of one fetch cycle.

    Args:
        raw: Mapping with the keys ``account``, ``repositories``, ``events``,
            ``issues``, ``pulls`` and ``calendar``. Only the first two are
            required.

    Raises:
        ValueError: If the account or repository payload is missing.
    """
    return ProfileSnapshot(
        account=parse_account(raw.get("account")),
        repositories=parse_repositories(raw.get("repositories")),
        events=parse_events(raw.get("events")),
        issues=parse_search_result(raw.get("issues")),
        pulls=parse_search_result(raw.get("pulls")),
        calendar=parse_calendar(raw.get("calendar")),
    )
