"""
JSON ball-log loader.

Reads a ball log exported from the scoring store: a JSON list of ball
documents, or an object with a ``balls`` list and optional ``players``
id -> name mapping.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from scoring.data.ball_event import BallEvent

logger = logging.getLogger(__name__)


def load_ball_log(path: Path) -> tuple[list[BallEvent], dict[str, str]]:
    """Load ball events and player display names from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    players: dict[str, str] = {}
    if isinstance(data, dict):
        players = {str(k): str(v) for k, v in (data.get("players") or {}).items()}
        data = data.get("balls")

    if not isinstance(data, list):
        raise ValueError(f"Expected a list of balls in {path}")

    balls = [BallEvent.from_dict(doc) for doc in data]
    logger.info("Loaded %d deliveries from %s", len(balls), path)
    return balls, players
