"""Human-readable display strings for listing entries."""

import html
import math
from datetime import datetime
from typing import Optional, Union
from urllib.parse import quote

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")

TIMESTAMP_FORMAT = "%d %b %Y %H:%M"


def format_size(size: Union[int, float, None]) -> str:
    """
    Format a byte count using base-1024 units.

    Args:
        size: Byte count; None, negative or non-finite values are unknown

    Returns:
        Display string such as "512 B" or "1.5 KB", or "" when unknown
    """
    if size is None or isinstance(size, bool):
        return ""
    try:
        value = float(size)
    except (TypeError, ValueError):
        return ""
    if not math.isfinite(value) or value < 0:
        return ""
    if value == 0:
        return "0 B"

    exponent = 0
    while value >= 1024 and exponent < len(SIZE_UNITS) - 1:
        value /= 1024
        exponent += 1

    decimals = 0 if value >= 10 or exponent == 0 else 1
    return f"{value:.{decimals}f} {SIZE_UNITS[exponent]}"


def format_timestamp(moment: Optional[datetime]) -> str:
    """Format a modification time as "18 Oct 2026 14:05", or "" when absent."""
    if moment is None:
        return ""
    return moment.strftime(TIMESTAMP_FORMAT)


def format_child_count(count: Optional[int]) -> str:
    if count is None:
        return ""
    return f"{count} item" if count == 1 else f"{count} items"


def escape_html(value: Optional[str]) -> str:
    """Escape & < > " ' for embedding into markup."""
    return html.escape(value or "", quote=True)


def quote_segment(name: str) -> str:
    """Percent-encode a single path segment for embedding into a link target."""
    return quote(name, safe="")
