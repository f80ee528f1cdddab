"""Calendar date parsing and layout rendering for field values.

Three named layouts are supported: DD-MM-YYYY, MM-DD-YYYY and YYYY-MM-DD.
"""

from datetime import date, datetime

# Named layout -> strptime/strftime pattern. Order is the parse fallback order.
DATE_LAYOUTS: dict[str, str] = {
    "DD-MM-YYYY": "%d-%m-%Y",
    "MM-DD-YYYY": "%m-%d-%Y",
    "YYYY-MM-DD": "%Y-%m-%d",
}

DEFAULT_DATE_LAYOUT = "DD-MM-YYYY"


def parse_calendar_date(value: object, layout: str | None = None) -> date | None:
    """Parse value as a calendar date; return None when it is not one.

    Accepts date/datetime instances, ISO-8601 date or datetime strings, then
    the preferred layout (if given), then each named layout in order.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    candidates = [layout] if layout in DATE_LAYOUTS else []
    candidates += [name for name in DATE_LAYOUTS if name != layout]
    for name in candidates:
        try:
            return datetime.strptime(text, DATE_LAYOUTS[name]).date()
        except ValueError:
            continue
    return None


def format_calendar_date(value: date, layout: str | None = None) -> str:
    """Render a date using a named layout (unknown or None -> DD-MM-YYYY)."""
    pattern = DATE_LAYOUTS.get(layout or DEFAULT_DATE_LAYOUT, DATE_LAYOUTS[DEFAULT_DATE_LAYOUT])
    # strftime pads %Y inconsistently across platforms for years < 1000.
    return pattern.replace("%d", f"{value.day:02d}").replace(
        "%m", f"{value.month:02d}"
    ).replace("%Y", f"{value.year:04d}")
