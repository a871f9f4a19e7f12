"""
Cricsheet.org data loader.

Loads historical ball-by-ball innings from Cricsheet CSV files so they
can be replayed through the innings recalculation engine.

Data source: https://cricsheet.org/downloads/
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Optional

from scoring.data.ball_event import BallEvent, Extras, MatchInfo, Wicket, WicketType

logger = logging.getLogger(__name__)


def load_innings_from_csv(
    csv_path: Path, innings: int = 1
) -> tuple[MatchInfo, list[BallEvent]]:
    """Load one innings of a match from a Cricsheet CSV file.

    Cricsheet CSV format has columns:
    match_id, season, start_date, venue, innings, ball, batting_team,
    bowling_team, striker, non_striker, bowler, runs_off_bat, extras,
    wides, noballs, byes, legbyes, penalty, wicket_type, player_dismissed

    Row order is the delivery order, so it becomes the sequence number.

    Returns:
        Tuple of (MatchInfo, list of BallEvents in order)
    """
    with open(csv_path, "r", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        rows = list(reader)

    if not rows:
        raise ValueError(f"Empty CSV file: {csv_path}")

    first = rows[0]
    match_id = first.get("match_id") or csv_path.stem
    teams = []
    for row in rows:
        if row["batting_team"] not in teams:
            teams.append(row["batting_team"])
        if len(teams) == 2:
            break

    innings_rows = [row for row in rows if int(row["innings"]) == innings]
    if not innings_rows:
        raise ValueError(f"No deliveries for innings {innings} in {csv_path}")

    match_info = MatchInfo(
        match_id=str(match_id),
        format=_infer_format(rows),
        team_a=teams[0] if len(teams) > 0 else "",
        team_b=teams[1] if len(teams) > 1 else "",
        venue=first.get("venue", ""),
        date=first.get("start_date", ""),
        season=first.get("season", ""),
        batting_team=innings_rows[0]["batting_team"],
        bowling_team=innings_rows[0]["bowling_team"],
    )

    events = [_row_to_event(seq, row) for seq, row in enumerate(innings_rows, start=1)]

    logger.info(
        "Loaded match %s innings %d: %s batting, %d deliveries",
        match_id, innings, match_info.batting_team, len(events),
    )
    return match_info, events


def load_matches_from_directory(
    directory: Path,
    innings: int = 1,
    match_format: Optional[str] = None,
    max_matches: Optional[int] = None,
) -> list[tuple[MatchInfo, list[BallEvent]]]:
    """Load one innings of every match in a directory of Cricsheet CSV files.

    Args:
        directory: Path to directory containing CSV files
        innings: Innings number to load from each match
        match_format: Filter by format (t20, odi, test)
        max_matches: Maximum number of matches to load

    Returns:
        List of (MatchInfo, BallEvents) tuples
    """
    csv_files = sorted(directory.glob("*.csv"))
    if not csv_files:
        logger.warning("No CSV files found in %s", directory)
        return []

    matches = []
    for csv_file in csv_files:
        if max_matches and len(matches) >= max_matches:
            break
        try:
            info, events = load_innings_from_csv(csv_file, innings=innings)
        except (ValueError, KeyError) as e:
            logger.warning("Failed to load %s: %s", csv_file.name, e)
            continue
        if match_format and info.format != match_format:
            continue
        matches.append((info, events))

    logger.info("Loaded %d matches from %s", len(matches), directory)
    return matches


def _row_to_event(sequence: int, row: dict) -> BallEvent:
    runs_off_bat = _int(row.get("runs_off_bat"))
    extras = Extras(
        wides=_int(row.get("wides")),
        no_balls=_int(row.get("noballs")),
        byes=_int(row.get("byes")),
        leg_byes=_int(row.get("legbyes")),
        penalty=_int(row.get("penalty")),
    )

    wicket = None
    wicket_type_str = (row.get("wicket_type") or "").strip()
    if wicket_type_str:
        wicket_type = WicketType.parse(wicket_type_str)
        wicket = Wicket(
            kind=wicket_type.value if wicket_type else wicket_type_str,
            dismissed_player_id=(row.get("player_dismissed") or "").strip()
            or row.get("striker", ""),
            credited_to_bowler=(
                wicket_type.credited_to_bowler_by_default if wicket_type else False
            ),
        )

    return BallEvent(
        sequence=sequence,
        striker=row.get("striker", ""),
        non_striker=row.get("non_striker", ""),
        bowler=row.get("bowler", ""),
        runs_off_bat=runs_off_bat,
        extras=extras,
        total_runs=runs_off_bat + extras.total,
        is_legal=extras.wides == 0 and extras.no_balls == 0,
        wicket=wicket,
    )


def _int(value: Optional[str]) -> int:
    if value is None or str(value).strip() == "":
        return 0
    return int(float(value))


def _infer_format(rows: list[dict]) -> str:
    """Infer match format from ball-by-ball data."""
    max_over = 0
    innings_set = set()
    for row in rows:
        ball_str = row.get("ball", "0")
        if "." in ball_str:
            over = int(ball_str.split(".")[0])
        else:
            over = int(float(ball_str))
        max_over = max(max_over, over)
        innings_set.add(int(row.get("innings", 1)))

    if len(innings_set) > 2:
        return "test"
    if max_over > 20:
        return "odi"
    return "t20"
