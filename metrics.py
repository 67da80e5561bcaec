"""
Month-over-month metrics derived from the decoded time series.
"""

import logging
from datetime import datetime

from models import ChartPoint, DerivedMetrics, InsufficientData, TimeSeriesRow

logger = logging.getLogger(__name__)

DEFAULT_CHART_WINDOW = 12


def pct_change(current: float, previous: float) -> float:
    """Percent change from previous to current; 0 when previous is not positive."""
    if previous > 0:
        return (current - previous) / previous * 100
    return 0.0


def sort_history(rows: list[TimeSeriesRow]) -> list[TimeSeriesRow]:
    # Periods are zero-padded YYYY-MM so string order is chronological
    history = sorted(rows, key=lambda r: r.period)
    duplicates = sorted({a.period for a, b in zip(history, history[1:]) if a.period == b.period})
    if duplicates:
        logger.warning("Duplicate periods in time series: %s", ", ".join(duplicates))
    return history


def derive_metrics(rows: list[TimeSeriesRow]) -> DerivedMetrics | InsufficientData:
    """Compare the latest period's month-to-date counters with the one before it."""
    if len(rows) < 2:
        return InsufficientData(f"at least two periods are required, got {len(rows)}")

    history = sort_history(rows)
    current, previous = history[-1], history[-2]

    return DerivedMetrics(
        current_transactions=current.transactions_to_date,
        current_users=current.users_to_date,
        current_volume=current.volume_to_date,
        transactions_delta=pct_change(current.transactions_to_date, previous.transactions_to_date),
        users_delta=pct_change(current.users_to_date, previous.users_to_date),
        volume_delta=pct_change(current.volume_to_date, previous.volume_to_date),
        history=tuple(history),
    )


def period_label(period: str) -> str:
    """Short chart label for a period, e.g. "2024-07" -> "Jul 24"."""
    try:
        return datetime.strptime(period, "%Y-%m").strftime("%b %y")
    except ValueError:
        return period


def chart_window(history: list[TimeSeriesRow] | tuple[TimeSeriesRow, ...],
                 size: int = DEFAULT_CHART_WINDOW) -> list[ChartPoint]:
    """Trailing ``size`` periods of a sorted history, shaped for bar charts."""
    if size <= 0:
        return []
    return [
        ChartPoint(
            label=period_label(row.period),
            period=row.period,
            transactions=row.transactions,
            users=row.active_users,
            volume=row.total_volume,
            source_volume=row.source_volume,
            destination_volume=row.destination_volume,
        )
        for row in list(history)[-size:]
    ]


def volume_totals(points: list[ChartPoint]) -> dict:
    source = sum(p.source_volume for p in points)
    destination = sum(p.destination_volume for p in points)
    return {
        "source": source,
        "destination": destination,
        "total": source + destination,
    }
