"""
ICC scoring rules.

Pure, stateless answers to "what does this one delivery mean": legality,
run attribution, strike rotation, over arithmetic and rate math. The
innings recalculator consults these for every ball it folds.
"""

from __future__ import annotations

import math
from typing import Optional

from scoring.config import BALLS_PER_OVER
from scoring.data.ball_event import BallEvent, WicketType

FREE_HIT_DISMISSALS = frozenset({
    WicketType.RUN_OUT,
    WicketType.STUMPED,
    WicketType.HIT_WICKET,
    WicketType.OBSTRUCTING,
})


def is_legal_delivery(ball: BallEvent) -> bool:
    """A legal delivery counts towards the six-ball over.

    Wides and no-balls are never legal.
    """
    return ball.is_legal and not ball.is_wide and not ball.is_no_ball


def counts_toward_balls_faced(ball: BallEvent) -> bool:
    """Wides are not a ball faced. No-balls are."""
    return not ball.is_wide


def batter_runs(ball: BallEvent) -> int:
    return ball.runs_off_bat


def bowler_runs(ball: BallEvent) -> int:
    """Runs charged to the bowler.

    Byes, leg-byes and penalties are not charged. Wides and no-balls,
    including any runs taken off them, are.
    """
    extras = ball.extras
    return max(0, ball.total_runs - extras.byes - extras.leg_byes - extras.penalty)


def wicket_credited_to_bowler(ball: BallEvent) -> bool:
    if ball.wicket is None:
        return False
    return ball.wicket.credited_to_bowler


def running_runs(ball: BallEvent) -> int:
    """Runs physically run between the wickets on this delivery.

    The automatic single for a wide or no-ball and any penalty runs are
    not running runs. Anything left in the total after those and the
    recorded bat/bye/leg-bye runs was run as well (e.g. runs on a wide).
    """
    extras = ball.extras
    automatic = (1 if ball.is_wide else 0) + (1 if ball.is_no_ball else 0) + extras.penalty
    recorded = ball.runs_off_bat + extras.byes + extras.leg_byes
    additional = max(0, ball.total_runs - recorded - automatic)
    return recorded + additional


def should_rotate_strike(ball: BallEvent) -> bool:
    """Odd running runs swap the batters; a wicket ball never rotates."""
    if ball.wicket is not None:
        return False
    return running_runs(ball) % 2 == 1


def is_over_complete(legal_balls_in_over: int) -> bool:
    return legal_balls_in_over >= BALLS_PER_OVER


def is_wicket_allowed_on_free_hit(kind: Optional[str]) -> bool:
    return WicketType.parse(kind) in FREE_HIT_DISMISSALS


def format_overs(legal_balls: int) -> str:
    """Legal balls to the canonical ``overs.balls`` string, e.g. 15 -> '2.3'."""
    overs, balls = divmod(legal_balls, BALLS_PER_OVER)
    return f"{overs}.{balls}"


def parse_overs(overs_str: str) -> int:
    """Inverse of :func:`format_overs`. Missing parts count as zero."""
    overs_part, _, balls_part = (overs_str or "").strip().partition(".")
    overs = int(overs_part) if overs_part else 0
    balls = int(balls_part) if balls_part else 0
    return overs * BALLS_PER_OVER + balls


def run_rate(runs: int, legal_balls: int) -> float:
    if legal_balls <= 0:
        return 0.0
    return runs / legal_balls * BALLS_PER_OVER


def required_run_rate(runs_needed: int, balls_remaining: int) -> Optional[float]:
    if balls_remaining <= 0:
        return None
    return runs_needed / balls_remaining * BALLS_PER_OVER


def projected_total(runs: int, legal_balls: int, total_overs: int) -> int:
    """Linear extrapolation of the current run rate over the full innings.

    Rounds half up. Not wicket-adjusted.
    """
    if legal_balls <= 0:
        return 0
    return int(math.floor(run_rate(runs, legal_balls) * total_overs + 0.5))


def ball_badge(ball: BallEvent) -> tuple[str, str]:
    """Scoreboard badge for a delivery as ``(value, type)``."""
    extras = ball.extras
    if ball.wicket is not None:
        return "W", "wicket"
    if ball.runs_off_bat == 6:
        return "6", "six"
    if ball.runs_off_bat == 4:
        return "4", "four"
    if ball.is_wide:
        total = ball.total_runs or extras.wides
        return (f"Wd{total}" if total > 1 else "Wd"), "wide"
    if ball.is_no_ball:
        total = ball.total_runs or (extras.no_balls + ball.runs_off_bat)
        return (f"Nb{total}" if total > 1 else "Nb"), "noball"
    if extras.leg_byes > 0:
        return f"{extras.leg_byes}lb", "legbye"
    if extras.byes > 0:
        return f"{extras.byes}b", "bye"
    if ball.runs_off_bat == 0:
        return "·", "dot"
    return str(ball.runs_off_bat), "run"
