"""
Innings Scoring Engine entry point.

Replays a ball log through the recalculation engine and prints the
resulting scorecard:
Ball Log → Recalculator → Innings Snapshot → Scorecard / JSON

Supports three sources:
1. Cricsheet CSV: one innings of a historical match
2. JSON ball log: balls exported from the scoring store
3. Demo: a short synthetic innings

Usage:
    python -m scoring.orchestrator --csv data/cricsheet/1234567.csv --innings 2 --target 171
    python -m scoring.orchestrator --json match_balls.json --overs 20
    python -m scoring.orchestrator --demo
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional

from scoring.config import FORMAT_OVERS, EngineConfig, InningsConfig, MatchFormat
from scoring.data.ball_event import BallEvent, Extras, Wicket
from scoring.state.innings import InningsSnapshot, recalculate_innings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("scoring.orchestrator")


def demo_balls() -> list[BallEvent]:
    """Two overs covering the awkward cases: wide, no-ball, leg-byes, a run-out."""
    return [
        BallEvent(1, "Bat_1", "Bat_2", "Bowl_1", runs_off_bat=1, total_runs=1),
        BallEvent(2, "Bat_2", "Bat_1", "Bowl_1", runs_off_bat=4, total_runs=4),
        BallEvent(3, "Bat_2", "Bat_1", "Bowl_1", extras=Extras(wides=1), total_runs=1, is_legal=False),
        BallEvent(4, "Bat_2", "Bat_1", "Bowl_1"),
        BallEvent(5, "Bat_2", "Bat_1", "Bowl_1", extras=Extras(leg_byes=2), total_runs=2),
        BallEvent(6, "Bat_2", "Bat_1", "Bowl_1", runs_off_bat=6, total_runs=6),
        BallEvent(7, "Bat_2", "Bat_1", "Bowl_1", runs_off_bat=1, total_runs=1),
        BallEvent(8, "Bat_2", "Bat_1", "Bowl_2"),
        BallEvent(
            9, "Bat_2", "Bat_1", "Bowl_2",
            extras=Extras(no_balls=1), total_runs=3, is_legal=False,
            wicket=Wicket("run-out", "Bat_1", fielder_id="Fld_1"),
        ),
        BallEvent(10, "Bat_2", "Bat_3", "Bowl_2", runs_off_bat=2, total_runs=2, free_hit=True),
        BallEvent(
            11, "Bat_2", "Bat_3", "Bowl_2",
            wicket=Wicket("caught", "Bat_2", fielder_id="Fld_2", credited_to_bowler=True),
        ),
        BallEvent(12, "Bat_4", "Bat_3", "Bowl_2", runs_off_bat=1, total_runs=1),
    ]


DEMO_NAMES = {
    "Bat_1": "Rahman", "Bat_2": "Hossain", "Bat_3": "Islam", "Bat_4": "Ahmed",
    "Bowl_1": "Khan", "Bowl_2": "Chowdhury", "Fld_1": "Sarkar", "Fld_2": "Das",
}


def render_scorecard(snapshot: InningsSnapshot, title: str = "") -> str:
    """Plain-text scorecard for the terminal."""
    lines = []
    if title:
        lines.append(title)
        lines.append("=" * 60)
    lines.append(
        f"{snapshot.total_runs}/{snapshot.total_wickets} ({snapshot.overs} ov)  "
        f"RR {snapshot.current_run_rate:.2f}"
    )
    if snapshot.target is not None:
        rrr = (
            f"{snapshot.required_run_rate:.2f}"
            if snapshot.required_run_rate is not None else "-"
        )
        lines.append(
            f"Target {snapshot.target}  Need {snapshot.runs_needed} "
            f"from {snapshot.remaining_balls} balls  RRR {rrr}"
        )
    elif snapshot.projected_total is not None:
        lines.append(f"Projected {snapshot.projected_total}")
    if snapshot.is_innings_complete:
        if snapshot.target_reached:
            lines.append("Innings complete: target reached")
        elif snapshot.is_all_out:
            lines.append("Innings complete: all out")
        else:
            lines.append("Innings complete: overs finished")
    lines.append("")

    lines.append(f"{'Batter':<20}{'':<26}{'R':>5}{'B':>5}{'4s':>4}{'6s':>4}{'SR':>8}")
    for bat in snapshot.batting.values():
        status = bat.dismissal if not bat.not_out else "not out"
        sr = f"{bat.strike_rate:.1f}" if bat.strike_rate is not None else "-"
        lines.append(
            f"{(bat.name or bat.batter_id):<20}{status:<26}"
            f"{bat.runs:>5}{bat.balls:>5}{bat.fours:>4}{bat.sixes:>4}{sr:>8}"
        )
    ex = snapshot.extras
    lines.append(
        f"Extras {ex.total} (w {ex.wides}, nb {ex.no_balls}, b {ex.byes}, "
        f"lb {ex.leg_byes}, pen {ex.penalty})"
    )
    if snapshot.fall_of_wickets:
        fow = ", ".join(
            f"{w.wicket}-{w.runs} ({w.batter_name or w.batter_id}, {w.overs})"
            for w in snapshot.fall_of_wickets
        )
        lines.append(f"Fall of wickets: {fow}")
    lines.append("")

    lines.append(f"{'Bowler':<20}{'O':>6}{'M':>4}{'R':>5}{'W':>4}{'Econ':>8}")
    for bowl in snapshot.bowling.values():
        econ = f"{bowl.economy:.2f}" if bowl.economy is not None else "-"
        lines.append(
            f"{(bowl.name or bowl.bowler_id):<20}{bowl.overs:>6}{bowl.maidens:>4}"
            f"{bowl.runs_conceded:>5}{bowl.wickets:>4}{econ:>8}"
        )
    lines.append("")
    lines.append(
        f"Partnership {snapshot.partnership.runs} ({snapshot.partnership.balls})"
    )
    for over in snapshot.overs_history[-3:]:
        lines.append(
            f"Over {over.number}: {' '.join(d.badge for d in over.deliveries)}"
            f"  ({over.total_runs})"
        )
    return "\n".join(lines)


def run(
    balls: list[BallEvent],
    config: InningsConfig,
    player_names: Optional[dict[str, str]] = None,
    output: str = "text",
    title: str = "",
) -> InningsSnapshot:
    snapshot = recalculate_innings(balls, config, player_names)
    if output == "json":
        print(json.dumps(snapshot.to_dict(), indent=2))
    else:
        print(render_scorecard(snapshot, title))
    return snapshot


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Cricket Innings Scoring Engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m scoring.orchestrator --demo
  python -m scoring.orchestrator --csv data/cricsheet/1234567.csv --innings 2 --target 171
  python -m scoring.orchestrator --json match_balls.json --output json
        """,
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--csv", type=str, help="Cricsheet ball-by-ball CSV file (also looked up under SCORING_DATA_DIR)")
    source.add_argument("--json", type=str, help="JSON ball log exported from the scoring store (also looked up under SCORING_DATA_DIR)")
    source.add_argument("--demo", action="store_true", help="Replay a synthetic innings")

    parser.add_argument("--innings", type=int, default=1, help="Innings number to load from a CSV")
    parser.add_argument("--format", type=str, choices=["t20", "odi", "test"], help="Match format (sets the over limit)")
    parser.add_argument("--overs", type=int, help="Over limit, overrides --format")
    parser.add_argument("--target", type=int, help="Target for a chasing innings")
    parser.add_argument("--output", type=str, choices=["text", "json"], default="text", help="Output style")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    config = EngineConfig.from_env()
    logging.getLogger().setLevel(logging.DEBUG if args.verbose else config.log_level)

    match_format = MatchFormat(args.format) if args.format else config.default_format
    names: dict[str, str] = {}
    title = ""

    try:
        if args.csv:
            from scoring.data.cricsheet_loader import load_innings_from_csv

            info, balls = load_innings_from_csv(config.resolve_path(args.csv), innings=args.innings)
            if not args.format:
                match_format = MatchFormat(info.format)
            title = f"{info.batting_team} innings v {info.bowling_team} ({info.match_id})"
        elif args.json:
            from scoring.data.ball_log import load_ball_log

            balls, names = load_ball_log(config.resolve_path(args.json))
        else:
            balls, names = demo_balls(), DEMO_NAMES
            title = "Demo innings"
    except (OSError, ValueError, KeyError) as e:
        logger.error("Could not load ball log: %s", e)
        return 1

    overs_limit = args.overs if args.overs is not None else FORMAT_OVERS.get(match_format)
    innings_config = InningsConfig(overs_limit=overs_limit, target=args.target)

    run(balls, innings_config, names, output=args.output, title=title)
    return 0


if __name__ == "__main__":
    sys.exit(main())
