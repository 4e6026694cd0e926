"""
Date range parsing for résumé entries.

Turns free text such as "Jan. 2020 - Present", "fevrier 2020 - aout 2022",
"de 03/2018 à 11/2020" or "Q2 2020 to Q1 2023" into a validated
DateRangeResult. Patterns are tried in table order; the first one that both
matches and converts wins. Dates are always normalized to the first day of
the month.
"""

import logging
import re
import unicodedata
from datetime import date
from typing import NamedTuple, Optional, Pattern, Tuple

from resume_pipeline.core.schemas import DateRangeResult

logger = logging.getLogger(__name__)


NO_MATCH_MESSAGE = "No matching date pattern found"
EMPTY_MESSAGE = "Empty date text"

MIN_YEAR = 1950
LONG_TENURE_MONTHS = 600  # 50 years
SHORT_TENURE_DAYS = 7


# ===== MONTH NAMES =====
# Keys are lower-case with diacritics stripped ("fevrier", "aout", "decembre").

MONTHS = {
    # English
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sept": 9, "sep": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
    # French
    "janvier": 1, "janv": 1,
    "fevrier": 2, "fevr": 2, "fev": 2,
    "mars": 3,
    "avril": 4, "avr": 4,
    "mai": 5,
    "juin": 6,
    "juillet": 7, "juil": 7,
    "aout": 8,
    "septembre": 9,
    "octobre": 10,
    "novembre": 11,
    "decembre": 12,
}


# ===== PATTERN TABLE =====

_MONTH = r"([^\W\d_]{3,9})"
_YEAR = r"(\d{4}|'\d{2})"
_SEP = r"\s*-\s*"
_PRESENT_EN = r"(?:present|current|now)"
_PRESENT_FR = r"(?:aujourd'hui|actuel(?:le(?:ment)?)?|maintenant)"
_FR_MONTH = (
    r"(janvier|janv|f[ée]vrier|f[ée]vr|f[ée]v|mars|avril|avr|mai|juin|juillet|juil"
    r"|ao[uû]t|septembre|sept|octobre|oct|novembre|nov|d[ée]cembre|d[ée]c)"
)


class DatePattern(NamedTuple):
    name: str
    locale: str
    regex: Pattern
    # Group indices for (start month, start year, end month, end year); -1 = absent
    groups: Tuple[int, int, int, int]
    quarter: bool = False


DATE_PATTERNS: Tuple[DatePattern, ...] = (
    DatePattern(
        "MONTH_YEAR_TO_MONTH_YEAR", "en",  # "January 2020 - December 2022"
        re.compile(_MONTH + r"\s+" + _YEAR + _SEP + _MONTH + r"\s+" + _YEAR),
        (1, 2, 3, 4),
    ),
    DatePattern(
        "MM_YYYY_TO_MM_YYYY", "any",  # "01/2020 - 12/2022", "01/20 - 12/22"
        re.compile(r"(\d{1,2})/(\d{4}|\d{2})" + _SEP + r"(\d{1,2})/(\d{4}|\d{2})"),
        (1, 2, 3, 4),
    ),
    DatePattern(
        "YYYY_MM_TO_YYYY_MM", "any",  # "2020-01 - 2022-12", "2019.06 - 2021.08"
        re.compile(r"(\d{4})[-.]?(\d{2})" + _SEP + r"(\d{4})[-.]?(\d{2})"),
        (2, 1, 4, 3),
    ),
    DatePattern(
        "MONTH_YEAR_TO_PRESENT", "en",  # "January 2020 - Present"
        re.compile(_MONTH + r"\s+" + _YEAR + _SEP + _PRESENT_EN),
        (1, 2, -1, -1),
    ),
    DatePattern(
        "FRENCH_MONTH_YEAR_TO_MONTH_YEAR", "fr",  # "janvier 2020 - décembre 2022"
        re.compile(_FR_MONTH + r"\s+" + _YEAR + _SEP + _FR_MONTH + r"\s+" + _YEAR),
        (1, 2, 3, 4),
    ),
    DatePattern(
        "FRENCH_MONTH_YEAR_TO_PRESENT", "fr",  # "janvier 2020 - Aujourd'hui"
        re.compile(_MONTH + r"\s+" + _YEAR + _SEP + _PRESENT_FR),
        (1, 2, -1, -1),
    ),
    DatePattern(
        "FRENCH_DU_AU", "fr",  # "du janvier 2020 au décembre 2022"
        re.compile(r"\bdu\s+" + _MONTH + r"\s+" + _YEAR + r"\s+au\s+" + _MONTH + r"\s+" + _YEAR),
        (1, 2, 3, 4),
    ),
    DatePattern(
        "FRENCH_DE_A", "fr",  # "de 01/2020 à 12/2022"
        re.compile(r"\bde\s+(\d{1,2})/(\d{4})\s+[àa]\s+(\d{1,2})/(\d{4})"),
        (1, 2, 3, 4),
    ),
    DatePattern(
        "MM_YYYY_TO_PRESENT", "any",  # "03/2018 - Present", "de 03/2018 à aujourd'hui"
        re.compile(
            r"(\d{1,2})/(\d{4})(?:" + _SEP + r"|\s+[àa]\s+)(?:" + _PRESENT_EN + "|" + _PRESENT_FR + ")"
        ),
        (1, 2, -1, -1),
    ),
    DatePattern(
        "YEAR_TO_YEAR", "any",  # "2020 - 2022"
        re.compile(r"(\d{4})" + _SEP + r"(\d{4})"),
        (-1, 1, -1, 2),
    ),
    DatePattern(
        "YEAR_TO_PRESENT", "any",  # "2020 - Present"
        re.compile(r"(\d{4})" + _SEP + r"(?:" + _PRESENT_EN + "|" + _PRESENT_FR + ")"),
        (-1, 1, -1, -1),
    ),
    DatePattern(
        "QUARTER_TO_QUARTER", "en",  # "Q1 2020 - Q4 2022"
        re.compile(r"\bq(\d)\s+" + _YEAR + _SEP + r"q(\d)\s+" + _YEAR),
        (1, 2, 3, 4),
        quarter=True,
    ),
)

ONGOING_RE = re.compile(r"\b" + r"(?:" + _PRESENT_EN + "|" + _PRESENT_FR + r")" + r"(?!\w)")

_DASHES_RE = re.compile(r"[‐-―−]")
_CONNECTOR_RE = re.compile(r"\b(?:to|till|til)\b")
_PUNCT_RE = re.compile(r"[,.]")
_WS_RE = re.compile(r"\s+")


class DateConversionError(ValueError):
    """A pattern matched structurally but its captures are not a real date."""


# ===== HELPERS =====

def strip_accents(s: str) -> str:
    """Remove combining diacritics: "février" -> "fevrier"."""
    decomposed = unicodedata.normalize("NFKD", s)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def normalize_date_text(text: str) -> str:
    """Lower-case and canonicalize separators so the pattern table stays small."""
    s = text.lower()
    s = s.replace("’", "'").replace("‘", "'")
    s = _DASHES_RE.sub("-", s)
    # Periods carry no information here ("Jan." / "2019.06" both survive removal)
    s = _PUNCT_RE.sub("", s)
    s = _CONNECTOR_RE.sub(" - ", s)
    return _WS_RE.sub(" ", s).strip()


def lookup_month(name: str) -> Optional[int]:
    """
    Resolve an English or French month name (full or abbreviated) to 1..12.

    Tolerates missing diacritics and truncated forms ("janu", "septem").
    Ambiguous prefixes ("jui") and anything else return None.
    """
    key = strip_accents(name.lower().strip())
    if key in MONTHS:
        return MONTHS[key]
    if len(key) < 3:
        return None
    found = {MONTHS[k] for k in MONTHS if k.startswith(key)}
    if len(found) == 1:
        return found.pop()
    return None


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start to end (negative when end precedes start)."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if months > 0 and end.day < start.day:
        months -= 1
    elif months < 0 and end.day > start.day:
        months += 1
    return months


def _convert_year(token: Optional[str], today: date) -> int:
    if token is None:
        raise DateConversionError("Year is required")
    token = token.lstrip("'")
    year = int(token)
    if len(token) <= 2:
        year += 2000 if year < 50 else 1900
    if year < MIN_YEAR or year > today.year + 1:
        raise DateConversionError(f"Year out of reasonable range: {year}")
    return year


def _convert_month(token: Optional[str], quarter: bool) -> int:
    if token is None:
        return 1
    if quarter:
        q = int(token)
        if not 1 <= q <= 4:
            raise DateConversionError(f"Invalid quarter: Q{q}")
        return (q - 1) * 3 + 1
    if token.isdigit():
        month = int(token)
        if not 1 <= month <= 12:
            raise DateConversionError(f"Invalid month number: {month}")
        return month
    month = lookup_month(token)
    if month is None:
        raise DateConversionError(f"Unknown month name: {token}")
    return month


def _group(match: "re.Match", index: int) -> Optional[str]:
    return match.group(index) if index != -1 else None


def _convert(match: "re.Match", pattern: DatePattern, ongoing: bool, today: date) -> Tuple[date, Optional[date]]:
    sm, sy, em, ey = (_group(match, i) for i in pattern.groups)
    start = date(_convert_year(sy, today), _convert_month(sm, pattern.quarter), 1)
    if ongoing or ey is None:
        return start, None
    end = date(_convert_year(ey, today), _convert_month(em, pattern.quarter), 1)
    return start, end


def _validate(start: date, end: Optional[date], message: str, today: date) -> DateRangeResult:
    problems = []
    warnings = []
    if start > today:
        problems.append("Start date is in the future")
    if end is not None:
        if end < start:
            problems.append("End date is before start date")
        if end > today:
            problems.append("End date is in the future")
        months = months_between(start, end)
        if months > LONG_TENURE_MONTHS:
            warnings.append(f"Position duration seems unreasonably long ({months} months)")
        days = (end - start).days
        if 0 <= days < SHORT_TENURE_DAYS:
            warnings.append(f"Position duration seems very short ({days} days)")

    notes = problems + warnings
    if notes:
        message = f"{message}; Validation warnings: {', '.join(notes)}"
    return DateRangeResult(start_date=start, end_date=end, is_valid=not problems, message=message)


# ===== PUBLIC API =====

def is_ongoing(text: str) -> bool:
    """True when the text says the position is still held (present, actuel...)."""
    return bool(ONGOING_RE.search(normalize_date_text(text)))


def parse_date_range(text: Optional[str], today: Optional[date] = None) -> DateRangeResult:
    """
    Parse a free-text date range.

    Args:
        text: Fragment containing a date range, e.g. "Sept. 2019 till March 2022"
        today: Reference date for range and future checks (defaults to date.today())

    Returns:
        DateRangeResult. Never raises for malformed text: failures come back
        with is_valid=False and a message.
    """
    if text is None or not text.strip():
        return DateRangeResult(is_valid=False, message=EMPTY_MESSAGE)

    today = today or date.today()
    cleaned = normalize_date_text(text)
    ongoing = bool(ONGOING_RE.search(cleaned))

    for pattern in DATE_PATTERNS:
        match = pattern.regex.search(cleaned)
        if not match:
            continue
        try:
            start, end = _convert(match, pattern, ongoing, today)
        except (DateConversionError, ValueError) as e:
            logger.debug("Pattern %s matched %r but failed to convert: %s", pattern.name, cleaned, e)
            continue
        return _validate(start, end, f"Parsed with pattern: {pattern.name}", today)

    logger.debug("No date pattern matched %r", cleaned)
    return DateRangeResult(is_valid=False, message=NO_MATCH_MESSAGE)
