"""
Innings Recalculation Engine.

Folds the complete ball-by-ball log of an innings into a single immutable
InningsSnapshot. The snapshot is rebuilt from scratch on every call; a
corrected ball log simply yields a different, still-correct snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, replace
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from scoring.config import MAX_WICKETS, InningsConfig
from scoring.data.ball_event import BallEvent
from scoring.rules.dismissal import format_dismissal
from scoring.rules.icc import (
    ball_badge,
    batter_runs,
    bowler_runs,
    counts_toward_balls_faced,
    format_overs,
    is_legal_delivery,
    is_over_complete,
    run_rate,
    should_rotate_strike,
    wicket_credited_to_bowler,
)
from scoring.utils.chase import chase_figures, projection

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Snapshot types
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class Partnership:
    runs: int = 0
    balls: int = 0
    overs: str = "0.0"


@dataclass(frozen=True)
class ExtrasTotals:
    wides: int = 0
    no_balls: int = 0
    byes: int = 0
    leg_byes: int = 0
    penalty: int = 0

    @property
    def total(self) -> int:
        return self.wides + self.no_balls + self.byes + self.leg_byes + self.penalty


@dataclass(frozen=True)
class FallOfWicket:
    wicket: int
    runs: int
    overs: str
    batter_id: str
    batter_name: str = ""
    dismissal: str = ""


@dataclass(frozen=True)
class BattingFigures:
    batter_id: str
    name: str = ""
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    dots: int = 0
    strike_rate: Optional[float] = None  # None until a ball is faced
    not_out: bool = True
    dismissal: str = ""


@dataclass(frozen=True)
class BowlingFigures:
    bowler_id: str
    name: str = ""
    balls: int = 0
    overs: str = "0.0"
    runs_conceded: int = 0
    wickets: int = 0
    maidens: int = 0
    dots: int = 0
    wides: int = 0
    no_balls: int = 0
    economy: Optional[float] = None
    average: Optional[float] = None
    strike_rate: Optional[float] = None


@dataclass(frozen=True)
class DeliveryRecord:
    sequence: int
    badge: str
    badge_type: str
    runs_off_bat: int
    total_runs: int
    is_legal: bool
    is_wicket: bool = False
    free_hit: bool = False


@dataclass(frozen=True)
class OverRecord:
    number: int  # 1-based
    bowler_id: str
    deliveries: tuple[DeliveryRecord, ...] = ()
    total_runs: int = 0
    legal_balls: int = 0
    is_complete: bool = False
    score_at_end: int = 0  # Team score after the latest delivery of this over
    wickets_at_end: int = 0


@dataclass(frozen=True)
class LastBallSummary:
    runs: int
    is_wicket: bool
    is_boundary: bool


@dataclass(frozen=True)
class InningsSnapshot:
    """Complete statistical state of an innings at the end of its ball log.

    The batting and bowling mappings are read-only views and are left out
    of the hash.
    """

    total_runs: int = 0
    total_wickets: int = 0
    legal_balls: int = 0
    overs: str = "0.0"
    balls_in_current_over: int = 0

    current_run_rate: float = 0.0
    required_run_rate: Optional[float] = None
    target: Optional[int] = None
    runs_needed: Optional[int] = None
    remaining_balls: Optional[int] = None
    projected_total: Optional[int] = None

    is_all_out: bool = False
    is_innings_complete: bool = False
    target_reached: bool = False

    partnership: Partnership = field(default_factory=Partnership)
    extras: ExtrasTotals = field(default_factory=ExtrasTotals)
    fall_of_wickets: tuple[FallOfWicket, ...] = ()
    batting: Mapping[str, BattingFigures] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )
    bowling: Mapping[str, BowlingFigures] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )
    overs_history: tuple[OverRecord, ...] = ()
    current_over: tuple[DeliveryRecord, ...] = ()

    striker_id: str = ""
    non_striker_id: str = ""
    bowler_id: str = ""  # Empty once an over completes until the next bowler appears
    last_over_bowler_id: str = ""
    next_ball_free_hit: bool = False
    last_ball: Optional[LastBallSummary] = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-serialisable representation."""
        d = asdict(replace(self, batting={}, bowling={}))
        d["batting"] = {k: asdict(v) for k, v in self.batting.items()}
        d["bowling"] = {k: asdict(v) for k, v in self.bowling.items()}
        d["extras"]["total"] = self.extras.total
        return d


# ----------------------------------------------------------------------
# Running accumulators (private to a single recalculation)
# ----------------------------------------------------------------------


@dataclass
class _BatterTally:
    batter_id: str
    name: str = ""
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    dots: int = 0
    dismissal: Optional[str] = None

    def freeze(self) -> BattingFigures:
        return BattingFigures(
            batter_id=self.batter_id,
            name=self.name,
            runs=self.runs,
            balls=self.balls,
            fours=self.fours,
            sixes=self.sixes,
            dots=self.dots,
            strike_rate=(self.runs / self.balls * 100) if self.balls > 0 else None,
            not_out=self.dismissal is None,
            dismissal=self.dismissal or "",
        )


@dataclass
class _BowlerTally:
    bowler_id: str
    name: str = ""
    balls: int = 0
    runs_conceded: int = 0
    wickets: int = 0
    maidens: int = 0
    dots: int = 0
    wides: int = 0
    no_balls: int = 0

    def freeze(self) -> BowlingFigures:
        return BowlingFigures(
            bowler_id=self.bowler_id,
            name=self.name,
            balls=self.balls,
            overs=format_overs(self.balls),
            runs_conceded=self.runs_conceded,
            wickets=self.wickets,
            maidens=self.maidens,
            dots=self.dots,
            wides=self.wides,
            no_balls=self.no_balls,
            economy=run_rate(self.runs_conceded, self.balls) if self.balls > 0 else None,
            average=self.runs_conceded / self.wickets if self.wickets > 0 else None,
            strike_rate=self.balls / self.wickets if self.wickets > 0 else None,
        )


@dataclass
class _OverTally:
    number: int
    bowler_id: str
    deliveries: list[DeliveryRecord] = field(default_factory=list)
    bowlers: set[str] = field(default_factory=set)
    total_runs: int = 0
    bowler_runs: int = 0
    legal_balls: int = 0
    score_at_end: int = 0
    wickets_at_end: int = 0

    def freeze(self) -> OverRecord:
        return OverRecord(
            number=self.number,
            bowler_id=self.bowler_id,
            deliveries=tuple(self.deliveries),
            total_runs=self.total_runs,
            legal_balls=self.legal_balls,
            is_complete=is_over_complete(self.legal_balls),
            score_at_end=self.score_at_end,
            wickets_at_end=self.wickets_at_end,
        )


# ----------------------------------------------------------------------
# Recalculator
# ----------------------------------------------------------------------


class InningsRecalculator:
    """Folds a sorted ball sequence through the ICC rule primitives.

    One instance serves exactly one recalculation. Use
    :func:`recalculate_innings` rather than driving this directly.
    """

    def __init__(
        self,
        config: InningsConfig,
        player_names: Optional[Mapping[str, str]] = None,
    ):
        self._config = config
        self._names = player_names or {}

        self._total_runs = 0
        self._total_wickets = 0
        self._legal_balls = 0
        self._partnership_runs = 0
        self._partnership_balls = 0
        self._over_number = 1
        self._legal_balls_in_over = 0

        self._extras = {"wides": 0, "no_balls": 0, "byes": 0, "leg_byes": 0, "penalty": 0}
        self._batters: dict[str, _BatterTally] = {}
        self._bowlers: dict[str, _BowlerTally] = {}
        self._overs: dict[int, _OverTally] = {}
        self._fall_of_wickets: list[FallOfWicket] = []

        self._striker = config.current_striker_id or ""
        self._non_striker = config.current_non_striker_id or ""
        self._next_ball_free_hit = False
        self._last_ball: Optional[BallEvent] = None
        self._last_ball_ended_over = False
        self._last_over_bowler = ""

    def process_ball(self, ball: BallEvent) -> None:
        """Apply a single delivery to the running accumulators."""
        is_legal = is_legal_delivery(ball)
        is_free_hit = ball.free_hit or self._next_ball_free_hit
        # The sixth legal ball belongs to the over it completes
        over_number = self._over_number

        self._heal_strike_pointers(ball)

        self._total_runs += ball.total_runs
        self._extras["wides"] += ball.extras.wides
        self._extras["no_balls"] += ball.extras.no_balls
        self._extras["byes"] += ball.extras.byes
        self._extras["leg_byes"] += ball.extras.leg_byes
        self._extras["penalty"] += ball.extras.penalty

        end_of_over = False
        if is_legal:
            self._legal_balls += 1
            self._partnership_balls += 1
            self._legal_balls_in_over += 1
            end_of_over = is_over_complete(self._legal_balls_in_over)

        self._credit_batter(ball)
        charged = self._charge_bowler(ball, is_legal)

        if ball.wicket is not None:
            self._record_wicket(ball)
        else:
            self._partnership_runs += ball.total_runs
            if should_rotate_strike(ball):
                self._swap_strike()

        if end_of_over:
            self._swap_strike()

        self._record_delivery(ball, over_number, is_legal, is_free_hit, charged)

        if end_of_over:
            self._legal_balls_in_over = 0
            self._over_number += 1
            self._last_over_bowler = ball.bowler

        self._next_ball_free_hit = ball.is_no_ball or (is_free_hit and not is_legal)
        self._last_ball = ball
        self._last_ball_ended_over = end_of_over

    # -- per-ball steps ------------------------------------------------

    def _heal_strike_pointers(self, ball: BallEvent) -> None:
        # Last write wins: the ball record is more trustworthy than the match pointers
        if ball.striker and ball.striker != self._striker:
            if self._striker:
                logger.debug(
                    "Ball %d: striker %s replaces %s", ball.sequence, ball.striker, self._striker
                )
            self._striker = ball.striker
        if ball.non_striker and ball.non_striker != self._non_striker:
            if self._non_striker:
                logger.debug(
                    "Ball %d: non-striker %s replaces %s",
                    ball.sequence, ball.non_striker, self._non_striker,
                )
            self._non_striker = ball.non_striker

    def _credit_batter(self, ball: BallEvent) -> None:
        # A wide is not a ball faced and never credits personal runs, so
        # running runs on a wide (run out or not) stay team-only. Leg-byes
        # and byes are never part of runs_off_bat.
        if not counts_toward_balls_faced(ball):
            return
        tally = self._batter(ball.striker)
        runs = batter_runs(ball)
        tally.runs += runs
        tally.balls += 1
        if runs == 4:
            tally.fours += 1
        elif runs == 6:
            tally.sixes += 1
        elif runs == 0:
            tally.dots += 1

    def _charge_bowler(self, ball: BallEvent, is_legal: bool) -> int:
        tally = self._bowler(ball.bowler)
        if is_legal:
            tally.balls += 1
        if ball.is_wide:
            tally.wides += 1
        if ball.is_no_ball:
            tally.no_balls += 1

        charged = bowler_runs(ball)
        if ball.is_no_ball and ball.wicket is not None and ball.wicket.is_run_out:
            # Runs attempted on a no-ball run-out are not the bowler's
            charged = min(charged, ball.extras.no_balls + ball.runs_off_bat)

        tally.runs_conceded += charged
        if is_legal and charged == 0:
            tally.dots += 1
        if wicket_credited_to_bowler(ball):
            tally.wickets += 1
        return charged

    def _record_wicket(self, ball: BallEvent) -> None:
        wicket = ball.wicket
        self._total_wickets += 1
        if self._total_wickets > MAX_WICKETS:
            logger.warning(
                "Ball %d: wicket %d exceeds %d; ball log is inconsistent",
                ball.sequence, self._total_wickets, MAX_WICKETS,
            )

        dismissed_id = wicket.dismissed_player_id or ball.striker
        dismissal = format_dismissal(
            wicket.kind,
            self._name(ball.bowler),
            self._name(wicket.fielder_id) if wicket.fielder_id else None,
        )
        self._batter(dismissed_id).dismissal = dismissal

        self._fall_of_wickets.append(
            FallOfWicket(
                wicket=self._total_wickets,
                runs=self._total_runs,
                overs=format_overs(self._legal_balls),
                batter_id=dismissed_id,
                batter_name=self._name(dismissed_id),
                dismissal=dismissal,
            )
        )

        self._partnership_runs = 0
        self._partnership_balls = 0

        # The incoming batter is unknown until the next ball names them
        if dismissed_id == self._striker:
            self._striker = ""
        elif dismissed_id == self._non_striker:
            self._non_striker = ""

    def _record_delivery(
        self,
        ball: BallEvent,
        over_number: int,
        is_legal: bool,
        is_free_hit: bool,
        charged: int,
    ) -> None:
        over = self._overs.get(over_number)
        if over is None:
            over = _OverTally(number=over_number, bowler_id=ball.bowler)
            self._overs[over_number] = over

        badge, badge_type = ball_badge(ball)
        over.deliveries.append(
            DeliveryRecord(
                sequence=ball.sequence,
                badge=badge,
                badge_type=badge_type,
                runs_off_bat=ball.runs_off_bat,
                total_runs=ball.total_runs,
                is_legal=is_legal,
                is_wicket=ball.wicket is not None,
                free_hit=is_free_hit,
            )
        )
        over.bowlers.add(ball.bowler)
        over.total_runs += ball.total_runs
        over.bowler_runs += charged
        over.score_at_end = self._total_runs
        over.wickets_at_end = self._total_wickets
        if is_legal:
            over.legal_balls += 1
            if is_over_complete(over.legal_balls) and over.bowler_runs == 0 and len(over.bowlers) == 1:
                self._bowler(ball.bowler).maidens += 1

    # -- helpers -------------------------------------------------------

    def _swap_strike(self) -> None:
        self._striker, self._non_striker = self._non_striker, self._striker

    def _name(self, player_id: Optional[str]) -> str:
        if not player_id:
            return ""
        return self._names.get(player_id, "")

    def _batter(self, batter_id: str) -> _BatterTally:
        tally = self._batters.get(batter_id)
        if tally is None:
            tally = _BatterTally(batter_id=batter_id, name=self._name(batter_id))
            self._batters[batter_id] = tally
        return tally

    def _bowler(self, bowler_id: str) -> _BowlerTally:
        tally = self._bowlers.get(bowler_id)
        if tally is None:
            tally = _BowlerTally(bowler_id=bowler_id, name=self._name(bowler_id))
            self._bowlers[bowler_id] = tally
        return tally

    # -- finalisation --------------------------------------------------

    def snapshot(self) -> InningsSnapshot:
        """Derive rates and chase figures and freeze the accumulators."""
        cfg = self._config
        chase = chase_figures(
            self._total_runs, self._legal_balls, cfg.overs_limit, cfg.target,
            wickets=self._total_wickets,
        )

        current_over = self._overs.get(self._over_number)
        last = self._last_ball

        # A completed over needs a new bowler, whatever the match document says
        if self._last_ball_ended_over:
            bowler_id = ""
        else:
            bowler_id = cfg.current_bowler_id or (last.bowler if last else "")

        return InningsSnapshot(
            total_runs=self._total_runs,
            total_wickets=self._total_wickets,
            legal_balls=self._legal_balls,
            overs=format_overs(self._legal_balls),
            balls_in_current_over=self._legal_balls_in_over,
            current_run_rate=run_rate(self._total_runs, self._legal_balls),
            required_run_rate=chase.required_run_rate,
            target=chase.target,
            runs_needed=chase.runs_needed,
            remaining_balls=chase.remaining_balls,
            projected_total=projection(
                self._total_runs, self._legal_balls, cfg.overs_limit
            ),
            is_all_out=chase.is_all_out,
            is_innings_complete=chase.is_complete,
            target_reached=chase.target_reached,
            partnership=Partnership(
                runs=self._partnership_runs,
                balls=self._partnership_balls,
                overs=format_overs(self._partnership_balls),
            ),
            extras=ExtrasTotals(**self._extras),
            fall_of_wickets=tuple(self._fall_of_wickets),
            batting=MappingProxyType({k: t.freeze() for k, t in self._batters.items()}),
            bowling=MappingProxyType({k: t.freeze() for k, t in self._bowlers.items()}),
            overs_history=tuple(
                self._overs[n].freeze() for n in sorted(self._overs)
            ),
            current_over=tuple(current_over.deliveries) if current_over else (),
            striker_id=self._striker,
            non_striker_id=self._non_striker,
            bowler_id=bowler_id,
            last_over_bowler_id=self._last_over_bowler,
            next_ball_free_hit=self._next_ball_free_hit,
            last_ball=LastBallSummary(
                runs=last.total_runs,
                is_wicket=last.wicket is not None,
                is_boundary=last.is_boundary,
            ) if last else None,
        )


def recalculate_innings(
    balls: Iterable[BallEvent],
    config: Optional[InningsConfig] = None,
    player_names: Optional[Mapping[str, str]] = None,
) -> InningsSnapshot:
    """Rebuild the innings snapshot from its complete ball log.

    Balls may arrive in any order; they are sorted by sequence number
    before folding. The result depends only on the arguments, so calling
    this twice with the same log yields equal snapshots.

    Args:
        balls: Every delivery of the innings so far
        config: Over limit, target and current-pointer hints
        player_names: Player id -> display name; unknown ids get ""

    Returns:
        The innings snapshot
    """
    config = config or InningsConfig()
    ordered = sorted(balls, key=lambda b: b.sequence)

    calc = InningsRecalculator(config, player_names)
    for ball in ordered:
        calc.process_ball(ball)
    snapshot = calc.snapshot()

    logger.debug(
        "Recalculated innings: %d/%d in %s overs from %d deliveries",
        snapshot.total_runs, snapshot.total_wickets, snapshot.overs, len(ordered),
    )
    return snapshot
