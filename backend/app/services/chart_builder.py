"""
Chart / Timeline Builder
Turns completed runs into a trend-chart series over a trailing window
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from app.adapters.storage import RunRecord


@dataclass
class ChartPoint:
    date_label: str  # "Oct 17"
    score: float
    full_timestamp: str  # ISO 8601
    is_current_period: bool
    time_label: Optional[str] = None  # "6:32 PM", only when a day has several runs
    run_id: Optional[UUID] = None


def format_date_label(day: date) -> str:
    return f"{day:%b} {day.day}"


def format_time_label(moment: datetime) -> str:
    """12-hour clock label rounded to the nearest minute"""
    if moment.second >= 30:
        moment = moment + timedelta(minutes=1)
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


def _run_points(day_runs: List[RunRecord], today: date) -> List[ChartPoint]:
    label_times = len(day_runs) > 1
    return [
        ChartPoint(
            date_label=format_date_label(run.created_at.date()),
            score=run.total_score,
            full_timestamp=run.created_at.isoformat(),
            is_current_period=run.created_at.date() == today,
            time_label=format_time_label(run.created_at) if label_times else None,
            run_id=run.id,
        )
        for run in day_runs
    ]


def build_chart_data(
    runs: Iterable[RunRecord],
    now: Optional[datetime] = None,
    window_days: int = 30,
) -> List[ChartPoint]:
    """
    Build chart points for the trailing `window_days` calendar days.

    Runs are grouped by the calendar date of their stored (UTC) timestamp;
    no timezone conversion is applied.

    - One day with runs: one point per run, so single-day users still see
      their intraday re-scans instead of a flat single point.
    - Several days: every day in the window gets points; days with runs
      get one point per run, empty days a single zero-score point.
    """
    now = now or datetime.utcnow()
    today = now.date()
    first_day = today - timedelta(days=window_days - 1)

    by_day: Dict[date, List[RunRecord]] = defaultdict(list)
    for run in runs:
        run_day = run.created_at.date()
        if first_day <= run_day <= today:
            by_day[run_day].append(run)

    if not by_day:
        return []

    for day_runs in by_day.values():
        day_runs.sort(key=lambda r: (r.created_at, str(r.id)))

    if len(by_day) == 1:
        (only_runs,) = by_day.values()
        return _run_points(only_runs, today)

    points: List[ChartPoint] = []
    for offset in range(window_days):
        day = first_day + timedelta(days=offset)
        day_runs = by_day.get(day)

        if day_runs:
            points.extend(_run_points(day_runs, today))
        else:
            points.append(
                ChartPoint(
                    date_label=format_date_label(day),
                    score=0.0,
                    full_timestamp=datetime.combine(day, datetime.min.time()).isoformat(),
                    is_current_period=day == today,
                )
            )

    return points
