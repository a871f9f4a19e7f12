"""
Configuration management for the Innings Scoring Engine.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


BALLS_PER_OVER = 6
MAX_WICKETS = 10


class MatchFormat(Enum):
    T20 = "t20"
    ODI = "odi"
    TEST = "test"


# Format-specific constants
FORMAT_OVERS: dict[MatchFormat, Optional[int]] = {
    MatchFormat.T20: 20,
    MatchFormat.ODI: 50,
    MatchFormat.TEST: None,  # Unlimited
}


@dataclass(frozen=True)
class InningsConfig:
    """Static configuration for recalculating one innings.

    The current-pointer ids are hints from the match document. They seed
    the strike position and are corrected from the ball stream.
    """
    overs_limit: Optional[int] = 20  # None = unlimited (Tests)
    target: Optional[int] = None  # Only for a chasing innings
    current_striker_id: str = ""
    current_non_striker_id: str = ""
    current_bowler_id: str = ""

    @classmethod
    def for_format(
        cls, match_format: MatchFormat, target: Optional[int] = None
    ) -> "InningsConfig":
        return cls(overs_limit=FORMAT_OVERS.get(match_format), target=target)


@dataclass
class EngineConfig:
    """Top-level engine configuration."""
    default_format: MatchFormat = MatchFormat.T20
    log_level: str = "INFO"
    data_dir: Path = field(default_factory=lambda: Path("data"))  # Base for relative input paths

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Load configuration from environment variables."""
        fmt = os.getenv("SCORING_DEFAULT_FORMAT", "t20").lower()
        try:
            default_format = MatchFormat(fmt)
        except ValueError:
            default_format = MatchFormat.T20
        return cls(
            default_format=default_format,
            log_level=_log_level(os.getenv("SCORING_LOG_LEVEL", os.getenv("LOG_LEVEL", "INFO"))),
            data_dir=Path(os.getenv("SCORING_DATA_DIR", "data")),
        )

    def resolve_path(self, path: str) -> Path:
        """Resolve a relative input path, trying data_dir when it is not found as given."""
        candidate = Path(path)
        if candidate.is_absolute() or candidate.exists():
            return candidate
        in_data_dir = self.data_dir / candidate
        return in_data_dir if in_data_dir.exists() else candidate


def _log_level(name: str) -> str:
    """Upper-cased level name, or INFO when logging does not know it."""
    level = name.strip().upper()
    if isinstance(logging.getLevelName(level), int):
        return level
    return "INFO"
