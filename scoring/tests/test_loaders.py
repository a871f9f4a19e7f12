"""Tests for the Cricsheet CSV and JSON ball-log loaders."""

from __future__ import annotations

import csv
import json
from pathlib import Path

import pytest

from scoring.data.ball_event import BallEvent, WicketType
from scoring.data.ball_log import load_ball_log
from scoring.data.cricsheet_loader import load_innings_from_csv, load_matches_from_directory

CRICSHEET_COLUMNS = [
    "match_id", "season", "start_date", "venue", "innings", "ball",
    "batting_team", "bowling_team", "striker", "non_striker", "bowler",
    "runs_off_bat", "extras", "wides", "noballs", "byes", "legbyes",
    "penalty", "wicket_type", "player_dismissed",
]


def cricsheet_row(innings: int, ball: str, striker: str, non_striker: str, bowler: str, **kwargs) -> dict:
    row = {col: "" for col in CRICSHEET_COLUMNS}
    row.update(
        match_id="1001",
        season="2024",
        start_date="2024-04-01",
        venue="Test Ground",
        innings=str(innings),
        ball=ball,
        batting_team="Thunder" if innings == 1 else "Strikers",
        bowling_team="Strikers" if innings == 1 else "Thunder",
        striker=striker,
        non_striker=non_striker,
        bowler=bowler,
        runs_off_bat="0",
        extras="0",
    )
    row.update({k: str(v) for k, v in kwargs.items()})
    return row


def write_csv(path: Path, rows: list[dict]) -> Path:
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CRICSHEET_COLUMNS)
        writer.writeheader()
        writer.writerows(rows)
    return path


@pytest.fixture
def match_csv(tmp_path: Path) -> Path:
    rows = [
        cricsheet_row(1, "0.1", "Smith", "Jones", "Khan", runs_off_bat=4),
        cricsheet_row(1, "0.2", "Smith", "Jones", "Khan", extras=1, wides=1),
        cricsheet_row(1, "0.2", "Smith", "Jones", "Khan", extras=2, legbyes=2),
        cricsheet_row(1, "0.3", "Smith", "Jones", "Khan",
                      wicket_type="caught and bowled", player_dismissed="Smith"),
        cricsheet_row(1, "0.4", "Patel", "Jones", "Khan",
                      runs_off_bat=1, wicket_type="run out", player_dismissed="Jones"),
        cricsheet_row(2, "0.1", "Ali", "Shah", "Brown", runs_off_bat=6),
    ]
    return write_csv(tmp_path / "1001.csv", rows)


class TestCricsheetLoader:
    def test_loads_first_innings(self, match_csv: Path):
        info, balls = load_innings_from_csv(match_csv)
        assert info.match_id == "1001"
        assert info.batting_team == "Thunder"
        assert info.bowling_team == "Strikers"
        assert info.format == "t20"
        assert [b.sequence for b in balls] == [1, 2, 3, 4, 5]

    def test_extras_and_legality(self, match_csv: Path):
        _, balls = load_innings_from_csv(match_csv)
        wide = balls[1]
        assert wide.extras.wides == 1
        assert wide.total_runs == 1
        assert not wide.is_legal
        leg_bye = balls[2]
        assert leg_bye.extras.leg_byes == 2
        assert leg_bye.is_legal

    def test_wickets(self, match_csv: Path):
        _, balls = load_innings_from_csv(match_csv)
        cab = balls[3].wicket
        assert cab is not None
        assert cab.wicket_type == WicketType.CAUGHT_AND_BOWLED
        assert cab.credited_to_bowler
        ro = balls[4].wicket
        assert ro is not None
        assert ro.is_run_out
        assert ro.dismissed_player_id == "Jones"
        assert not ro.credited_to_bowler

    def test_second_innings(self, match_csv: Path):
        info, balls = load_innings_from_csv(match_csv, innings=2)
        assert info.batting_team == "Strikers"
        assert len(balls) == 1
        assert balls[0].runs_off_bat == 6

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "empty.csv"
        path.write_text(",".join(CRICSHEET_COLUMNS) + "\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_innings_from_csv(path)

    def test_missing_innings(self, match_csv: Path):
        with pytest.raises(ValueError):
            load_innings_from_csv(match_csv, innings=3)

    def test_directory_skips_bad_files(self, tmp_path: Path, match_csv: Path):
        (tmp_path / "broken.csv").write_text("", encoding="utf-8")
        matches = load_matches_from_directory(tmp_path)
        assert len(matches) == 1
        assert matches[0][0].match_id == "1001"

    def test_directory_format_filter(self, tmp_path: Path, match_csv: Path):
        assert load_matches_from_directory(tmp_path, match_format="odi") == []


class TestBallFromDict:
    def test_snake_case_document(self):
        ball = BallEvent.from_dict({
            "sequence": 3,
            "striker": "A",
            "non_striker": "B",
            "bowler": "X",
            "runs_off_bat": 2,
            "extras": {"no_balls": 1},
            "total_runs": 3,
            "is_legal": False,
        })
        assert ball.sequence == 3
        assert ball.extras.no_balls == 1
        assert ball.total_runs == 3
        assert not ball.is_legal
        assert ball.wicket is None

    def test_camel_case_document(self):
        ball = BallEvent.from_dict({
            "sequence": 7,
            "batsmanId": "A",
            "nonStrikerId": "B",
            "bowlerId": "X",
            "runsOffBat": 0,
            "extras": {"wides": 0, "noBalls": 0, "byes": 0, "legByes": 2, "penalty": 0},
            "totalRuns": 2,
            "isLegal": True,
            "wicket": {"type": "run-out", "dismissedPlayerId": "A", "fielderId": "F",
                       "creditedToBowler": False},
        })
        assert ball.striker == "A"
        assert ball.extras.leg_byes == 2
        assert ball.wicket is not None
        assert ball.wicket.kind == "run-out"
        assert ball.wicket.fielder_id == "F"
        assert not ball.wicket.credited_to_bowler

    def test_defaults(self):
        ball = BallEvent.from_dict({
            "sequence": 1, "striker": "A", "non_striker": "B", "bowler": "X",
            "runs_off_bat": 1, "extras": {"byes": 1},
            "wicket": {"kind": "lbw", "dismissed_player_id": "A"},
        })
        assert ball.total_runs == 2
        assert ball.is_legal
        assert ball.wicket.credited_to_bowler


class TestBallLog:
    def test_list_document(self, tmp_path: Path):
        path = tmp_path / "balls.json"
        path.write_text(json.dumps([
            {"sequence": 2, "striker": "A", "non_striker": "B", "bowler": "X", "runs_off_bat": 4, "total_runs": 4},
            {"sequence": 1, "striker": "A", "non_striker": "B", "bowler": "X"},
        ]), encoding="utf-8")
        balls, players = load_ball_log(path)
        assert len(balls) == 2
        assert players == {}

    def test_object_with_players(self, tmp_path: Path):
        path = tmp_path / "match.json"
        path.write_text(json.dumps({
            "players": {"A": "Alpha"},
            "balls": [{"sequence": 1, "striker": "A", "non_striker": "B", "bowler": "X"}],
        }), encoding="utf-8")
        balls, players = load_ball_log(path)
        assert players == {"A": "Alpha"}
        assert balls[0].striker == "A"

    def test_rejects_non_list(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"balls": "nope"}), encoding="utf-8")
        with pytest.raises(ValueError):
            load_ball_log(path)
