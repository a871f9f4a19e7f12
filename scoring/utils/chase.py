"""
Chase and projection math.

Target-driven figures for a chasing innings, innings-completion status
and the naive full-innings projection, computed once per recalculation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from scoring.config import BALLS_PER_OVER, MAX_WICKETS
from scoring.rules.icc import projected_total, required_run_rate


@dataclass(frozen=True)
class ChaseFigures:
    target: Optional[int] = None
    runs_needed: Optional[int] = None
    remaining_balls: Optional[int] = None  # None = unlimited innings
    required_run_rate: Optional[float] = None
    is_all_out: bool = False
    is_overs_finished: bool = False
    target_reached: bool = False

    @property
    def is_complete(self) -> bool:
        """True once no further ball can be bowled in this innings."""
        return self.is_all_out or self.is_overs_finished or self.target_reached


def chase_figures(
    runs: int,
    legal_balls: int,
    overs_limit: Optional[int],
    target: Optional[int] = None,
    wickets: int = 0,
) -> ChaseFigures:
    """Runs needed, required rate and completion status for the innings so far.

    The required rate is only defined while runs are still needed and
    balls remain. A finished chase has no balls remaining.
    """
    balls_left: Optional[int] = None
    if overs_limit is not None:
        balls_left = max(0, overs_limit * BALLS_PER_OVER - legal_balls)

    target = target or None
    runs_needed = target - runs if target is not None else None

    is_all_out = wickets >= MAX_WICKETS
    is_overs_finished = balls_left == 0
    target_reached = runs_needed is not None and runs_needed <= 0

    if target is not None and (is_all_out or is_overs_finished or target_reached):
        balls_left = 0

    rrr = None
    if runs_needed is not None and runs_needed > 0 and balls_left:
        rrr = required_run_rate(runs_needed, balls_left)

    return ChaseFigures(
        target=target,
        runs_needed=runs_needed,
        remaining_balls=balls_left,
        required_run_rate=rrr,
        is_all_out=is_all_out,
        is_overs_finished=is_overs_finished,
        target_reached=target_reached,
    )


def projection(runs: int, legal_balls: int, overs_limit: Optional[int]) -> Optional[int]:
    """Projected full-innings total, or None when the innings has no over limit."""
    if overs_limit is None:
        return None
    return projected_total(runs, legal_balls, overs_limit)
