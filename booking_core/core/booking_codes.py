"""Booking code generator - sequential MMYY-NNN codes per appointment month."""

from datetime import date, datetime
from typing import Iterable, Optional, Union

SEQUENCE_WIDTH = 3


def code_prefix(appointment_date: Union[date, datetime]) -> str:
    """Month/year prefix of the appointment's own start date, e.g. ``0325-``."""
    return f"{appointment_date:%m%y}-"


def parse_sequence(code: str, prefix: str) -> Optional[int]:
    """Numeric suffix of ``code`` under ``prefix``, or None if it does not parse."""
    if not code or not code.startswith(prefix):
        return None
    suffix = code[len(prefix):]
    return int(suffix) if suffix.isascii() and suffix.isdigit() else None


def next_code(
    appointment_date: Union[date, datetime], existing_codes: Iterable[Optional[str]]
) -> str:
    """Returns the next code for the appointment's month.

    Takes the highest sequence among codes sharing the month prefix (0 if
    none) and adds one. Pure: the same inputs always give the same code.
    """
    prefix = code_prefix(appointment_date)
    sequences = [parse_sequence(code, prefix) for code in existing_codes if code]
    highest = max((s for s in sequences if s is not None), default=0)
    return f"{prefix}{highest + 1:0{SEQUENCE_WIDTH}d}"
