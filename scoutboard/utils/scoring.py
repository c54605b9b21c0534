# scoutboard/utils/scoring.py
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

ANSWER_LETTERS = ("A", "B", "C", "D")


def normalize_letter(value: str | None) -> str | None:
    """
    Returns "A".."D" for a valid selection, None for "no answer".
    Raises ValueError for anything else.
    """
    if value is None:
        return None
    letter = str(value).strip().upper()
    if not letter:
        return None
    if letter not in ANSWER_LETTERS:
        raise ValueError(f"Invalid answer {value!r}, expected one of {', '.join(ANSWER_LETTERS)}")
    return letter


def format_percentage(score: int, total: int) -> str:
    """
    score/total*100 to one decimal place, as stored on results ("50.0").
    Halves round up: 1/16 -> "6.3".
    """
    if total <= 0:
        return "0.0"
    value = Decimal(int(score) * 100) / Decimal(int(total))
    return str(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
