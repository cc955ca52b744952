"""Assorted utility helpers."""
from __future__ import annotations

import math
from datetime import date, datetime
from typing import Optional


def nz(x, default=0.0):
    """Return a finite float for ``x`` or a fallback value.

    Scenario fields arrive from form widgets and parsed free text, where empty
    values appear as ``None``, ``""`` or ``NaN``.  This mirrors the spreadsheet
    ``NZ()`` function so later math never sees a missing or non-finite value.
    """

    if x is None or isinstance(x, bool):
        return default if x is None else float(x)
    try:
        val = float(x)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(val):
        return default
    return val


def parse_iso_date(value) -> Optional[date]:
    """Best effort ISO date parsing; anything unreadable becomes ``None``."""

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def fmt_money(value: float, decimals: int = 0) -> str:
    """Format a dollar figure the way the derivation trail shows it."""

    return f"${value:,.{decimals}f}"
