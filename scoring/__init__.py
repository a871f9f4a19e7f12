"""
Cricket Innings Scoring Engine

Rebuilds the complete statistical state of a cricket innings from its
ball-by-ball log: score, wickets, overs, partnership, extras, batting and
bowling figures, fall of wickets, strike position and run-rate projections.
"""

__version__ = "0.1.0"
