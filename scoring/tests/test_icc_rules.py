"""Tests for the ICC scoring rule primitives."""

from __future__ import annotations

from typing import Optional

import pytest

from scoring.data.ball_event import BallEvent, Extras, Wicket
from scoring.rules.icc import (
    ball_badge,
    batter_runs,
    bowler_runs,
    counts_toward_balls_faced,
    format_overs,
    is_legal_delivery,
    is_over_complete,
    is_wicket_allowed_on_free_hit,
    parse_overs,
    projected_total,
    required_run_rate,
    run_rate,
    running_runs,
    should_rotate_strike,
    wicket_credited_to_bowler,
)


def make_ball(
    runs: int = 0,
    wides: int = 0,
    no_balls: int = 0,
    byes: int = 0,
    leg_byes: int = 0,
    penalty: int = 0,
    total: Optional[int] = None,
    wicket: Optional[Wicket] = None,
    is_legal: bool = True,
) -> BallEvent:
    extras = Extras(wides=wides, no_balls=no_balls, byes=byes, leg_byes=leg_byes, penalty=penalty)
    return BallEvent(
        sequence=1,
        striker="A",
        non_striker="B",
        bowler="X",
        runs_off_bat=runs,
        extras=extras,
        total_runs=runs + extras.total if total is None else total,
        is_legal=is_legal,
        wicket=wicket,
    )


class TestLegality:
    def test_normal_delivery_is_legal(self):
        assert is_legal_delivery(make_ball(runs=1))

    def test_wide_and_no_ball_are_not_legal(self):
        assert not is_legal_delivery(make_ball(wides=1))
        assert not is_legal_delivery(make_ball(no_balls=1))

    def test_upstream_flag_respected(self):
        assert not is_legal_delivery(make_ball(is_legal=False))

    def test_byes_and_leg_byes_are_legal(self):
        assert is_legal_delivery(make_ball(byes=2))
        assert is_legal_delivery(make_ball(leg_byes=1))

    def test_balls_faced(self):
        assert counts_toward_balls_faced(make_ball())
        assert counts_toward_balls_faced(make_ball(no_balls=1))
        assert not counts_toward_balls_faced(make_ball(wides=1))

    def test_over_complete(self):
        assert not is_over_complete(5)
        assert is_over_complete(6)


class TestAttribution:
    def test_batter_runs_verbatim(self):
        assert batter_runs(make_ball(runs=4)) == 4
        assert batter_runs(make_ball(leg_byes=2)) == 0

    def test_byes_and_leg_byes_not_charged_to_bowler(self):
        assert bowler_runs(make_ball(byes=2)) == 0
        assert bowler_runs(make_ball(leg_byes=4)) == 0

    def test_wide_running_runs_charged_to_bowler(self):
        assert bowler_runs(make_ball(wides=1, total=3)) == 3

    def test_no_ball_with_bat_runs(self):
        assert bowler_runs(make_ball(runs=4, no_balls=1)) == 5

    def test_leg_bye_off_no_ball(self):
        assert bowler_runs(make_ball(no_balls=1, leg_byes=1)) == 1

    def test_penalty_not_charged(self):
        assert bowler_runs(make_ball(penalty=5)) == 0

    def test_wicket_credit_reads_flag(self):
        bowled = make_ball(wicket=Wicket("bowled", "A", credited_to_bowler=True))
        run_out = make_ball(wicket=Wicket("run-out", "A", credited_to_bowler=False))
        assert wicket_credited_to_bowler(bowled)
        assert not wicket_credited_to_bowler(run_out)
        assert not wicket_credited_to_bowler(make_ball())


class TestStrikeRotation:
    @pytest.mark.parametrize("runs,expected", [(0, False), (1, True), (2, False), (3, True), (4, False), (6, False)])
    def test_bat_runs(self, runs: int, expected: bool):
        assert should_rotate_strike(make_ball(runs=runs)) is expected

    def test_wicket_never_rotates(self):
        ball = make_ball(runs=1, wicket=Wicket("run-out", "B"))
        assert not should_rotate_strike(ball)

    def test_plain_wide_does_not_rotate(self):
        assert running_runs(make_ball(wides=1)) == 0
        assert not should_rotate_strike(make_ball(wides=1))

    def test_wide_with_one_run_rotates(self):
        assert running_runs(make_ball(wides=1, total=2)) == 1
        assert should_rotate_strike(make_ball(wides=1, total=2))
        assert should_rotate_strike(make_ball(wides=2))

    def test_no_ball_with_single(self):
        assert should_rotate_strike(make_ball(runs=1, no_balls=1))
        assert not should_rotate_strike(make_ball(runs=4, no_balls=1))

    def test_byes_and_leg_byes_rotate_on_odd(self):
        assert should_rotate_strike(make_ball(leg_byes=1))
        assert should_rotate_strike(make_ball(byes=3))
        assert not should_rotate_strike(make_ball(byes=4))

    def test_penalty_runs_do_not_rotate(self):
        assert not should_rotate_strike(make_ball(penalty=5))


class TestOversFormat:
    def test_format(self):
        assert format_overs(0) == "0.0"
        assert format_overs(5) == "0.5"
        assert format_overs(6) == "1.0"
        assert format_overs(15) == "2.3"
        assert format_overs(120) == "20.0"

    def test_parse(self):
        assert parse_overs("2.3") == 15
        assert parse_overs("20.0") == 120
        assert parse_overs("4") == 24
        assert parse_overs("") == 0

    def test_roundtrip(self):
        for n in range(0, 600):
            assert parse_overs(format_overs(n)) == n


class TestRates:
    def test_run_rate(self):
        assert run_rate(0, 0) == 0.0
        assert run_rate(12, 6) == pytest.approx(12.0)
        assert run_rate(7, 9) == pytest.approx(4.6667, abs=1e-3)

    def test_required_run_rate(self):
        assert required_run_rate(30, 18) == pytest.approx(10.0)
        assert required_run_rate(30, 0) is None
        assert required_run_rate(30, -3) is None

    def test_projected_total(self):
        assert projected_total(0, 0, 20) == 0
        assert projected_total(45, 60, 20) == 90
        assert projected_total(50, 36, 20) == 167

    def test_projected_total_rounds_half_up(self):
        # 3 runs off 4 balls is 4.5 an over
        assert projected_total(3, 4, 1) == 5


class TestFreeHit:
    def test_allowed_dismissals(self):
        assert is_wicket_allowed_on_free_hit("run-out")
        assert is_wicket_allowed_on_free_hit("stumped")
        assert is_wicket_allowed_on_free_hit("hit_wicket")
        assert is_wicket_allowed_on_free_hit("obstructing-field")

    def test_disallowed_dismissals(self):
        assert not is_wicket_allowed_on_free_hit("bowled")
        assert not is_wicket_allowed_on_free_hit("caught")
        assert not is_wicket_allowed_on_free_hit(None)


class TestBallBadge:
    def test_badges(self):
        assert ball_badge(make_ball(wicket=Wicket("bowled", "A"))) == ("W", "wicket")
        assert ball_badge(make_ball(runs=6)) == ("6", "six")
        assert ball_badge(make_ball(runs=4)) == ("4", "four")
        assert ball_badge(make_ball(wides=1)) == ("Wd", "wide")
        assert ball_badge(make_ball(wides=1, total=3)) == ("Wd3", "wide")
        assert ball_badge(make_ball(no_balls=1)) == ("Nb", "noball")
        assert ball_badge(make_ball(runs=2, no_balls=1)) == ("Nb3", "noball")
        assert ball_badge(make_ball(leg_byes=2)) == ("2lb", "legbye")
        assert ball_badge(make_ball(byes=1)) == ("1b", "bye")
        assert ball_badge(make_ball()) == ("·", "dot")
        assert ball_badge(make_ball(runs=2)) == ("2", "run")
