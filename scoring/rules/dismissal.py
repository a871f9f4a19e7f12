"""
Scorecard dismissal phrases.

Maps a dismissal kind plus the bowler and fielder names to the phrase
printed in the batting card, e.g. ``c Smith b Jones`` or ``run out (Patel)``.
"""

from __future__ import annotations

from typing import Callable, Optional

from scoring.data.ball_event import WicketType

_Formatter = Callable[[str, Optional[str]], str]

DISMISSAL_FORMATS: dict[WicketType, _Formatter] = {
    WicketType.BOWLED: lambda b, f: f"b {b}",
    WicketType.CAUGHT: lambda b, f: f"c {f} b {b}" if f else f"c b {b}",
    WicketType.CAUGHT_AND_BOWLED: lambda b, f: f"c & b {b}",
    WicketType.LBW: lambda b, f: f"lbw b {b}",
    WicketType.RUN_OUT: lambda b, f: f"run out ({f})" if f else "run out",
    WicketType.STUMPED: lambda b, f: f"st {f} b {b}" if f else f"st b {b}",
    WicketType.HIT_WICKET: lambda b, f: f"hit wicket b {b}",
    WicketType.OBSTRUCTING: lambda b, f: "obstructing the field",
    WicketType.RETIRED: lambda b, f: "retired",
}


def format_dismissal(
    kind: Optional[str], bowler_name: str, fielder_name: Optional[str] = None
) -> str:
    """Canonical scorecard phrase. Unknown kinds use the bowled phrasing."""
    wicket_type = WicketType.parse(kind)
    formatter = DISMISSAL_FORMATS.get(wicket_type, DISMISSAL_FORMATS[WicketType.BOWLED])
    return formatter(bowler_name, fielder_name or None).strip()
