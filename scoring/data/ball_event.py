"""
Ball-by-ball event data model.

Defines the canonical delivery record produced by the scoring UI and
consumed by the innings recalculation engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class WicketType(Enum):
    BOWLED = "bowled"
    CAUGHT = "caught"
    CAUGHT_AND_BOWLED = "caught-and-bowled"
    LBW = "lbw"
    RUN_OUT = "run-out"
    STUMPED = "stumped"
    HIT_WICKET = "hit-wicket"
    OBSTRUCTING = "obstructing-the-field"
    RETIRED = "retired"

    @classmethod
    def parse(cls, kind: Optional[str]) -> Optional["WicketType"]:
        """Normalise a dismissal kind string; None for unknown kinds."""
        if not kind:
            return None
        key = kind.strip().lower().replace("_", "-").replace(" ", "-")
        key = WICKET_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return None

    @property
    def credited_to_bowler_by_default(self) -> bool:
        return self in BOWLER_CREDITED_WICKETS


WICKET_ALIASES = {
    "c&b": "caught-and-bowled",
    "c-&-b": "caught-and-bowled",
    "runout": "run-out",
    "obstructing-field": "obstructing-the-field",
    "hitwicket": "hit-wicket",
    "retired-hurt": "retired",
    "retired-out": "retired",
}

BOWLER_CREDITED_WICKETS = frozenset({
    WicketType.BOWLED,
    WicketType.CAUGHT,
    WicketType.CAUGHT_AND_BOWLED,
    WicketType.LBW,
    WicketType.STUMPED,
    WicketType.HIT_WICKET,
})


@dataclass(frozen=True)
class Extras:
    """Extras conceded on a single delivery."""
    wides: int = 0
    no_balls: int = 0
    byes: int = 0
    leg_byes: int = 0
    penalty: int = 0

    @property
    def total(self) -> int:
        return self.wides + self.no_balls + self.byes + self.leg_byes + self.penalty


@dataclass(frozen=True)
class Wicket:
    """Dismissal recorded on a delivery."""
    kind: str
    dismissed_player_id: str
    fielder_id: Optional[str] = None
    credited_to_bowler: bool = False

    @property
    def wicket_type(self) -> Optional[WicketType]:
        return WicketType.parse(self.kind)

    @property
    def is_run_out(self) -> bool:
        return self.wicket_type == WicketType.RUN_OUT


@dataclass(frozen=True)
class BallEvent:
    """A single delivery in an innings."""

    sequence: int  # Total order key within the innings
    striker: str
    non_striker: str
    bowler: str

    runs_off_bat: int = 0
    extras: Extras = field(default_factory=Extras)
    total_runs: int = 0  # runs_off_bat + all extras
    is_legal: bool = True

    wicket: Optional[Wicket] = None
    free_hit: bool = False

    @property
    def is_wide(self) -> bool:
        return self.extras.wides > 0

    @property
    def is_no_ball(self) -> bool:
        return self.extras.no_balls > 0

    @property
    def is_boundary(self) -> bool:
        return self.runs_off_bat in (4, 6)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BallEvent":
        """Build an event from a stored ball document.

        Accepts snake_case keys as well as the camelCase keys written by
        the scoring UI (``batsmanId``, ``runsOffBat``, ``legByes``...).
        """
        raw_extras = _pick(data, "extras") or {}
        extras = Extras(
            wides=_int(_pick(raw_extras, "wides")),
            no_balls=_int(_pick(raw_extras, "no_balls", "noBalls")),
            byes=_int(_pick(raw_extras, "byes")),
            leg_byes=_int(_pick(raw_extras, "leg_byes", "legByes")),
            penalty=_int(_pick(raw_extras, "penalty")),
        )
        runs_off_bat = _int(_pick(data, "runs_off_bat", "runsOffBat"))

        total_runs = _pick(data, "total_runs", "totalRuns")
        if total_runs is None:
            total_runs = runs_off_bat + extras.total

        wicket = None
        raw_wicket = _pick(data, "wicket")
        if raw_wicket:
            kind = str(_pick(raw_wicket, "kind", "type") or "")
            parsed = WicketType.parse(kind)
            credited = _pick(raw_wicket, "credited_to_bowler", "creditedToBowler")
            if credited is None:
                credited = parsed.credited_to_bowler_by_default if parsed else False
            wicket = Wicket(
                kind=kind,
                dismissed_player_id=str(
                    _pick(raw_wicket, "dismissed_player_id", "dismissedPlayerId") or ""
                ),
                fielder_id=_pick(raw_wicket, "fielder_id", "fielderId") or None,
                credited_to_bowler=bool(credited),
            )

        is_legal = _pick(data, "is_legal", "isLegal")
        return cls(
            sequence=_int(_pick(data, "sequence")),
            striker=str(_pick(data, "striker", "batsmanId") or ""),
            non_striker=str(_pick(data, "non_striker", "nonStrikerId") or ""),
            bowler=str(_pick(data, "bowler", "bowlerId") or ""),
            runs_off_bat=runs_off_bat,
            extras=extras,
            total_runs=_int(total_runs),
            is_legal=True if is_legal is None else bool(is_legal),
            wicket=wicket,
            free_hit=bool(_pick(data, "free_hit", "freeHit")),
        )


def _pick(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _int(value: Any) -> int:
    if value is None or value == "":
        return 0
    return int(value)


@dataclass
class MatchInfo:
    """Pre-match metadata."""

    match_id: str
    format: str  # t20, odi, test
    team_a: str
    team_b: str
    venue: str = ""
    date: str = ""
    season: str = ""
    batting_team: str = ""
    bowling_team: str = ""
