"""Small text formatters shared by the views and report writers."""


def format_signed_currency(value: float) -> str:
    """Whole-dollar amount with an explicit sign, e.g. ``+$120`` or ``-$45``.

    Zero is ``+$0``.
    """
    sign = "+" if value >= 0 else "-"
    return f"{sign}${abs(value):.0f}"


def format_signed_amount(value: float) -> str:
    """Signed amount with cents, e.g. ``+$1200.50``."""
    sign = "+" if value >= 0 else "-"
    return f"{sign}${abs(value):.2f}"


def format_signed_int(value: int) -> str:
    """``+3``, ``+0`` or ``-2``."""
    if value >= 0:
        return f"+{value}"
    return str(value)


def format_signed_points(value: float) -> str:
    """Ratio delta in percentage points, e.g. ``+2.5 pts``."""
    sign = "+" if value >= 0 else "-"
    return f"{sign}{abs(value) * 100:.1f} pts"


def format_days_label(days: int) -> str:
    """``today``, ``in 5d`` or ``3d overdue``."""
    if days == 0:
        return "today"
    if days < 0:
        return f"{-days}d overdue"
    return f"in {days}d"


def truncate(text: str, limit: int) -> str:
    """Cut ``text`` to ``limit`` characters and mark the cut with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[:limit] + "…"
