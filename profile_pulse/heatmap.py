"""
Contribution heatmap construction.

Turns a GitHub contribution calendar (or, when none is available, a
synthetic year of activity) into Sunday-first week buckets of classified
days, plus the month labels that go above the grid.
"""

import math
import random
from datetime import date, timedelta
from typing import Any, NamedTuple

from profile_pulse.payloads import ContributionCalendar

DAYS_PER_WEEK = 7
MAX_WEEKS = 53
WINDOW_DAYS = 365

MONTH_NAMES = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

# Synthetic activity model
WEEKDAY_INTENSITY = 0.7
WEEKEND_INTENSITY = 0.3
# Spring boost, summer dip, quieter December
MONTH_MULTIPLIERS = (1.0, 1.0, 1.2, 1.2, 1.2, 0.8, 0.8, 0.8, 1.0, 1.0, 1.0, 0.9)
CYCLE_DAYS = 60
GAP_DAYS = 10  # first days of each cycle are quiet
STREAK_START = 30
STREAK_DAYS = 12
GAP_MULTIPLIER = 0.25
STREAK_MULTIPLIER = 1.6
IDLE_PROBABILITY = 0.2
MAX_DAILY_DRAW = 10


class ContributionDay(NamedTuple):
    date: date
    count: int
    level: int  # 0-4


Week = tuple[ContributionDay | None, ...]


class Heatmap(NamedTuple):
    """Week-bucketed contribution grid for one year."""

    weeks: tuple[Week, ...]
    month_labels: tuple[tuple[int, str], ...]  # (week index, month name)
    total_contributions: int
    is_synthetic: bool


def contribution_level(count: int) -> int:
    """
    Classify a daily contribution count into an intensity level.

    Levels (closed intervals):
    - 0: 0
    - 1: 1-2
    - 2: 3-4
    - 3: 5-8
    - 4: 9+
    """
    if count <= 0:
        return 0
    if count <= 2:
        return 1
    if count <= 4:
        return 2
    if count <= 8:
        return 3
    return 4


def sunday_index(day: date) -> int:
    """Day of week with Sunday as 0."""
    return (day.weekday() + 1) % DAYS_PER_WEEK


def _parse_day(raw_date: Any, raw_count: Any) -> ContributionDay | None:
    if isinstance(raw_date, date):
        day = raw_date
    elif isinstance(raw_date, str):
        try:
            day = date.fromisoformat(raw_date[:10])
        except ValueError:
            return None
    else:
        return None

    if isinstance(raw_count, bool) or not isinstance(raw_count, int):
        return None
    if raw_count < 0:
        return None

    return ContributionDay(day, raw_count, contribution_level(raw_count))


def days_from_calendar(calendar: ContributionCalendar) -> list[ContributionDay]:
    """Flatten a calendar into classified days, skipping malformed records."""
    days = []
    for week in calendar.weeks:
        for raw_day in week:
            day = _parse_day(raw_day.date, raw_day.contribution_count)
            if day is not None:
                days.append(day)
    return days


def synthetic_intensity(day: date) -> float:
    """Expected relative activity for a day in the synthetic model."""
    weekday = sunday_index(day)
    intensity = WEEKEND_INTENSITY if weekday in (0, 6) else WEEKDAY_INTENSITY
    intensity *= MONTH_MULTIPLIERS[day.month - 1]

    phase = day.timetuple().tm_yday % CYCLE_DAYS
    if phase < GAP_DAYS:
        intensity *= GAP_MULTIPLIER
    elif STREAK_START <= phase < STREAK_START + STREAK_DAYS:
        intensity *= STREAK_MULTIPLIER
    return intensity


def generate_synthetic_days(
    today: date, rng: random.Random | None = None
) -> list[ContributionDay]:
    """
    Generate a plausible year of activity ending on ``today``.

    One day is produced for each date from 365 days before ``today``
    through ``today``. Pass a seeded ``random.Random`` to get a
    reproducible sequence.
    """
    if rng is None:
        rng = random.Random()

    start = today - timedelta(days=WINDOW_DAYS)
    days = []
    for offset in range(WINDOW_DAYS + 1):
        day = start + timedelta(days=offset)
        if rng.random() < IDLE_PROBABILITY:
            count = 0
        else:
            draw = rng.random() * synthetic_intensity(day)
            count = math.floor(draw * MAX_DAILY_DRAW)
        days.append(ContributionDay(day, count, contribution_level(count)))
    return days


def group_into_weeks(days: list[ContributionDay]) -> tuple[Week, ...]:
    """
    Bucket days into Sunday-first weeks of exactly 7 slots.

    Slots before the first day and after the last day are None. A new
    bucket starts on every Sunday after the first day, and also whenever
    the input jumps to a later week without passing a Sunday. Only the
    most recent 53 buckets are kept.
    """
    weeks: list[list[ContributionDay | None]] = []
    current: list[ContributionDay | None] | None = None
    previous: ContributionDay | None = None

    for day in days:
        weekday = sunday_index(day.date)
        starts_week = (
            current is None
            or weekday == 0
            or weekday <= sunday_index(previous.date)
            or (day.date - previous.date).days >= DAYS_PER_WEEK
        )
        if starts_week:
            current = [None] * DAYS_PER_WEEK
            weeks.append(current)
        current[weekday] = day
        previous = day

    return tuple(tuple(week) for week in weeks[-MAX_WEEKS:])


def month_labels(weeks: tuple[Week, ...]) -> tuple[tuple[int, str], ...]:
    """
    Place one label per month above the week where that month begins.

    A week is labelled when its first day falls on day 1-7 of a month whose
    label has not been placed yet.
    """
    labels = []
    placed = set()
    for index, week in enumerate(weeks):
        first_day = next((day for day in week if day is not None), None)
        if first_day is None:
            continue
        month = first_day.date.month
        if first_day.date.day <= DAYS_PER_WEEK and month not in placed:
            placed.add(month)
            labels.append((index, MONTH_NAMES[month - 1]))
    return tuple(labels)


def build_heatmap(
    calendar: ContributionCalendar | None,
    today: date | None = None,
    rng: random.Random | None = None,
) -> Heatmap:
    """
    Build the contribution heatmap.

    Uses the real calendar when it has at least one valid day; otherwise
    falls back to synthetic data for the year ending ``today``.

    Args:
        calendar: Contribution calendar, or None when it was not fetched.
        today: Last day of the synthetic window. Defaults to the current date.
        rng: Random source for the synthetic fallback.
    """
    days = days_from_calendar(calendar) if calendar is not None else []
    is_synthetic = not days

    if is_synthetic:
        days = generate_synthetic_days(today or date.today(), rng)
        total = sum(day.count for day in days)
    else:
        total = calendar.total_contributions or sum(day.count for day in days)

    weeks = group_into_weeks(days)
    return Heatmap(
        weeks=weeks,
        month_labels=month_labels(weeks),
        total_contributions=total,
        is_synthetic=is_synthetic,
    )
