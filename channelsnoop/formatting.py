"""Human-readable formatting of durations, counts, sizes and timestamps."""

from __future__ import annotations

from datetime import datetime

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_YI = 100_000_000
_WAN = 10_000
_MEBIBYTE = 1024 * 1024


def _tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b > 0) else -quotient


def _trem(a: int, b: int) -> int:
    """Remainder matching truncating division (sign follows the dividend)."""
    return a - b * _tdiv(a, b)


def format_duration(milliseconds: float) -> str:
    """Render a millisecond duration as ``MM:SS`` or ``HH:MM:SS`` when an hour or longer."""
    total = int(milliseconds / 1000)
    hours = _tdiv(total, 3600)
    minutes = _tdiv(_trem(total, 3600), 60)
    secs = _trem(total, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def format_number(num: float) -> str:
    """Abbreviate large counts with 亿 (1e8) or 万 (1e4)."""
    if num >= _YI:
        return f"{num / _YI:.1f}亿"
    if num >= _WAN:
        return f"{num / _WAN:.1f}万"
    return f"{num:.0f}"


def format_size(size: float) -> str:
    """Render a byte count in mebibytes with two decimals."""
    return f"{size / _MEBIBYTE:.2f} MB"


def format_timestamp(seconds: float) -> str:
    """Render Unix seconds (fraction dropped) as local ``YYYY-MM-DD HH:MM:SS``."""
    return datetime.fromtimestamp(int(seconds)).strftime(TIMESTAMP_FORMAT)