"""
Validation of round payloads at the write boundary.

Score maps are free-form JSON objects from the client. Everything that
reaches the store must be a mapping of non-empty team names to finite
numbers, so aggregation never has to guard against malformed entries.
"""
import math
from numbers import Real
from typing import Any, Dict, Union

from .errors import ValidationFailure

Score = Union[int, float]
ScoreMap = Dict[str, Score]

# Range of the INTEGER column holding round numbers
ROUND_MIN = -2**31
ROUND_MAX = 2**31 - 1


def is_valid_round(number: int) -> bool:
    return ROUND_MIN <= number <= ROUND_MAX


def parse_round_number(value: Any) -> int:
    """
    Coerce a round identifier to int.

    Accepts ints, integral floats (``3.0``) and digit strings (``"3"``).
    Booleans are rejected even though they subclass int.
    """
    number = _coerce_round(value)
    if not is_valid_round(number):
        raise ValidationFailure("Invalid round payload", "round is out of range")
    return number


def _coerce_round(value: Any) -> int:
    if value is None:
        raise ValidationFailure("Invalid round payload", "round is required")
    if isinstance(value, bool):
        raise ValidationFailure("Invalid round payload", "round must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
        raise ValidationFailure("Invalid round payload", "round must be an integer")
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ValidationFailure("Invalid round payload", "round must be an integer")


def validate_score_map(value: Any, field: str) -> ScoreMap:
    """Return a clean copy of a team -> score mapping or raise ValidationFailure."""
    if value is None:
        raise ValidationFailure("Invalid round payload", f"{field} is required")
    if not isinstance(value, dict):
        raise ValidationFailure("Invalid round payload", f"{field} must be an object of team scores")

    scores: ScoreMap = {}
    for team, score in value.items():
        if not isinstance(team, str) or not team.strip():
            raise ValidationFailure("Invalid round payload", f"{field} has an empty team name")
        if isinstance(score, bool) or not isinstance(score, Real):
            raise ValidationFailure("Invalid round payload", f"{field}.{team} must be a number")
        try:
            finite = math.isfinite(score)
        except OverflowError:
            # ints too large for a float
            raise ValidationFailure("Invalid round payload", f"{field}.{team} is out of range")
        if not finite:
            raise ValidationFailure("Invalid round payload", f"{field}.{team} must be finite")
        scores[team] = score
    return scores
