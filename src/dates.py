"""Birth date normalization for free-form genealogical date strings."""

import re

MONTHS = {
    "JAN": 1, "JANUARY": 1,
    "FEB": 2, "FEBRUARY": 2,
    "MAR": 3, "MARCH": 3,
    "APR": 4, "APRIL": 4,
    "MAY": 5,
    "JUN": 6, "JUNE": 6,
    "JUL": 7, "JULY": 7,
    "AUG": 8, "AUGUST": 8,
    "SEP": 9, "SEPT": 9, "SEPTEMBER": 9,
    "OCT": 10, "OCTOBER": 10,
    "NOV": 11, "NOVEMBER": 11,
    "DEC": 12, "DECEMBER": 12,
}

QUALIFIERS = re.compile(
    r"^(ABT\.?|ABOUT|BEF\.?|BEFORE|AFT\.?|AFTER|EST\.?|CAL\.?|FROM|TO|BET\.?|AND|CIRCA|CA\.?|AROUND):?\s*",
    flags=re.IGNORECASE,
)

# (pattern, order of the year/month/day groups). "mon" is a month name.
PATTERNS = [
    (re.compile(r"^(\d{4})-(\d{2})-(\d{2})$"), ("year", "month", "day")),  # 1839-08-29
    (re.compile(r"^(\d{1,2})\s+([A-Za-z]+)\.?\s*(\d{4})$"), ("day", "mon", "year")),  # 25 NOV 1954
    (re.compile(r"^([A-Za-z]+)\.?,?\s*(\d{4})$"), ("mon", "year")),  # NOV 1954, May, 1837
    (re.compile(r"^(\d{4})$"), ("year",)),  # 1698
    (re.compile(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{4})$"), ("month", "day", "year")),  # 01/27/1920
    (re.compile(r"^(\d{1,2})\s+(\d{1,2})\s+(\d{4})$"), ("month", "day", "year")),  # 04 05 1911
    (re.compile(r"^([A-Za-z]+)\.?\s*(\d{1,2}),?\s*(\d{4})$"), ("mon", "day", "year")),  # April 17, 1850
]


def _clean(date_str: str) -> str:
    s = date_str.strip().strip("()").rstrip("?")
    return QUALIFIERS.sub("", s).strip()


def parse_date_string(date_str: str | None) -> str | None:
    """
    Parse a free-form date string into ISO format (YYYY-MM-DD).
    Returns None if the date cannot be parsed.

    Missing month or day default to 01; "00" components (as in "1746-00-00")
    are treated as missing. Handles inputs like:
    - "25 NOV 1954", "02 May1838", "11 Aug. 1968"
    - "JAN 1905", "(May, 1837)", "1698", "(1789?)"
    - "ABOUT 1905", "(About:1746-00-00)", "(around 1855)"
    - "(01-27-1920)", "(1/15/1957)", "(04 05 1911)"
    - "(SEPT. 17,1910)", "(April 17, 1850)", "(Oct.12,1929)"
    """
    if not date_str:
        return None

    s = _clean(date_str)
    if not s:
        return None

    for pattern, order in PATTERNS:
        match = pattern.match(s)
        if not match:
            continue

        parts = dict(zip(order, match.groups()))
        if "mon" in parts:
            month = MONTHS.get(parts["mon"].upper().rstrip("."))
            if month is None:
                continue
        else:
            month = int(parts.get("month") or 1) or 1
        day = int(parts.get("day") or 1) or 1
        year = int(parts["year"])

        if 1 <= month <= 12 and 1 <= day <= 31:
            return f"{year:04d}-{month:02d}-{day:02d}"

    return None


def birth_year(iso_date: str | None) -> int | None:
    if not iso_date:
        return None
    try:
        return int(iso_date[:4])
    except ValueError:
        return None
