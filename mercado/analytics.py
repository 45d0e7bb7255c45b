"""Spending statistics derived from saved shopping lists.

Every function here is pure and recomputes from its input on each call.
Nothing depends on the store or on the in-progress list state.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .models import Item, Session, display_date


@dataclass(frozen=True)
class TrendPoint:
    label: str  # DD/MM, for the chart axis
    full_date: str  # DD/MM/YYYY
    total: float
    timestamp: int


@dataclass(frozen=True)
class SpendDelta:
    """Latest saved list compared with the one before it."""

    latest: Session
    previous: Session
    delta: float
    percent_change: float | None  # None when previous.total is 0

    @property
    def is_up(self) -> bool:
        return self.delta > 0


@dataclass(frozen=True)
class CategoryShare:
    category: str
    total: float
    percentage: float | None  # None when nothing was spent
    item_count: int


@dataclass(frozen=True)
class SpendingSummary:
    total_spent: float
    average_per_session: float | None
    session_count: int
    last_total: float | None
    delta: SpendDelta | None
    trend: list[TrendPoint] = field(default_factory=list)
    categories: list[CategoryShare] = field(default_factory=list)


def total_spent(sessions: Iterable[Session]) -> float:
    return sum((s.total for s in sessions), 0.0)


def average_per_session(sessions: Sequence[Session]) -> float | None:
    """Mean list total, or None when there are no lists."""
    if not sessions:
        return None
    return total_spent(sessions) / len(sessions)


def chronological(sessions: Iterable[Session]) -> list[Session]:
    """Sort oldest first. Equal timestamps keep their input order."""
    return sorted(sessions, key=lambda s: s.timestamp)


def trend(sessions: Iterable[Session]) -> list[TrendPoint]:
    """Project lists to chart points in chronological order."""
    return [
        TrendPoint(
            label=display_date(s.timestamp, "%d/%m"),
            full_date=display_date(s.timestamp),
            total=s.total,
            timestamp=s.timestamp,
        )
        for s in chronological(sessions)
    ]


def period_over_period_delta(sessions: Iterable[Session]) -> SpendDelta | None:
    """Compare the two chronologically latest lists.

    The input order is ignored; lists are always sorted by timestamp first.

    Returns:
        None when fewer than two lists exist.
    """
    ordered = chronological(sessions)
    if len(ordered) < 2:
        return None
    previous, latest = ordered[-2], ordered[-1]
    delta = latest.total - previous.total
    percent_change = (
        delta / previous.total * 100 if previous.total != 0 else None
    )
    return SpendDelta(
        latest=latest,
        previous=previous,
        delta=delta,
        percent_change=percent_change,
    )


def category_breakdown(
    sessions: Sequence[Session], limit: int | None = None
) -> list[CategoryShare]:
    """Sum item prices per category across all lists.

    Categories are grouped by exact string match, so "Frutas" and "frutas"
    are separate entries. Entries follow the order in which each category
    first appears.

    Args:
        sessions: Saved lists.
        limit: Keep only the first ``limit`` categories.
    """
    grand_total = total_spent(sessions)
    totals: dict[str, float] = {}
    counts: dict[str, int] = {}
    for session in sessions:
        for item in session.items:
            totals[item.category] = totals.get(item.category, 0.0) + item.price
            counts[item.category] = counts.get(item.category, 0) + 1

    shares = [
        CategoryShare(
            category=cat,
            total=cat_total,
            percentage=(cat_total / grand_total * 100) if grand_total != 0 else None,
            item_count=counts[cat],
        )
        for cat, cat_total in totals.items()
    ]
    if limit is not None:
        shares = shares[:limit]
    return shares


def current_list_total(items: Iterable[Item]) -> float:
    return sum((i.price for i in items), 0.0)


def summarize(sessions: Sequence[Session]) -> SpendingSummary:
    """Everything the finances view shows, in one pass over the lists."""
    ordered = chronological(sessions)
    return SpendingSummary(
        total_spent=total_spent(sessions),
        average_per_session=average_per_session(sessions),
        session_count=len(sessions),
        last_total=ordered[-1].total if ordered else None,
        delta=period_over_period_delta(sessions),
        trend=trend(sessions),
        categories=category_breakdown(sessions),
    )
