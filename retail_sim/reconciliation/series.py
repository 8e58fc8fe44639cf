"""
Season-long awareness / intent / demand series.

With the full week history the series reads each week's own snapshot.
Without it, only the two snapshots of the transition contribute and every
other week is zero-filled; the series is flagged ``complete=False`` so the
caller can tell a partial series from a quiet season.
"""

from __future__ import annotations

from typing import Iterable, Optional

from retail_sim.models.state import SEASON_WEEKS, GameWeekState
from retail_sim.models.summary import DemandSeries, DemandSeriesPoint


def build_demand_series(
    prev: GameWeekState,
    next_state: GameWeekState,
    all_weeks: Optional[Iterable[GameWeekState]] = None,
    season_weeks: int = SEASON_WEEKS,
) -> DemandSeries:
    """Build one point per week ``1..season_weeks``.

    When ``all_weeks`` holds several snapshots for the same week, the last
    one wins.
    """
    if all_weeks is not None:
        by_week = {s.week_number: s for s in all_weeks}
        complete = True
    else:
        by_week = {prev.week_number: prev, next_state.week_number: next_state}
        complete = False

    points: list[DemandSeriesPoint] = []
    for week in range(1, season_weeks + 1):
        state = by_week.get(week)
        if state is None:
            points.append(DemandSeriesPoint(week=week))
            continue
        points.append(
            DemandSeriesPoint(
                week=week,
                awareness=state.awareness,
                intent=state.intent,
                total_demand=state.total_demand(),
            )
        )
    return DemandSeries(points=points, complete=complete)
