"""Compact display formatting for derivation text.

Only used to render numbers into strings; engine arithmetic never goes
through these helpers. Negative values keep their sign in front of the
abbreviated magnitude ("-$480K"); NaN renders as "n/a" and infinities
as "∞".
"""

from __future__ import annotations

import math
from typing import Optional


def _non_finite(n: float) -> Optional[str]:
    if math.isnan(n):
        return "n/a"
    if math.isinf(n):
        return "-∞" if n < 0 else "∞"
    return None


def _abbreviate(n: float) -> str:
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1_000:
        return f"{n / 1_000:.0f}K"
    return f"{round(n):,}"


def fmt_money(n: float) -> str:
    """$1.2M / $45K / $950"""
    special = _non_finite(n)
    if special is not None:
        return special
    body = _abbreviate(abs(n))
    sign = "-" if n < 0 and body != "0" else ""
    return f"{sign}${body}"


def fmt_count(n: float) -> str:
    """1.2M / 45K / 950"""
    special = _non_finite(n)
    if special is not None:
        return special
    body = _abbreviate(abs(n))
    sign = "-" if n < 0 and body != "0" else ""
    return f"{sign}{body}"


def fmt_pct(n: float) -> str:
    return f"{n:g}%"
