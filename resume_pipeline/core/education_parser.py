"""
Education parsing for the education section.

Entries are three-line blocks:

    Master of Science in Computer Science      <- degree
    Stanford University                        <- institution
    Graduated: June 2019                       <- graduation token

followed by optional detail lines that are consumed until the next block.
Degree and institution are swapped when the block lists the school first.
"""

import logging
import re
from datetime import date
from typing import List, Optional, Sequence

from resume_pipeline.core.date_parser import lookup_month
from resume_pipeline.core.schemas import EducationEntry

logger = logging.getLogger(__name__)


# ===== DEGREE KEYWORDS =====

DEGREE_KEYWORDS = {
    "bachelor",
    "master",
    "associate of",
    "b.s.",
    "b.a.",
    "m.s.",
    "m.a.",
    "mba",
    "m.b.a.",
    "ph.d",
    "phd",
    "doctorate",
    "diploma",
    "degree",
    "bsc",
    "msc",
    # French
    "licence",
    "mastère",
    "doctorat",
    "diplôme",
    "ingénieur",
    "baccalauréat",
    "bts",
    "dut",
}

# ===== INSTITUTION KEYWORDS =====

INSTITUTION_KEYWORDS = {
    "university",
    "college",
    "institute",
    "school",
    "academy",
    "polytechnic",
    # French
    "université",
    "école",
    "ecole",
    "institut",
    "lycée",
    "faculté",
    "iut",
}

# ===== GRADUATION LINE =====

_GRAD_PREFIX = r"(?:(?:graduated|graduation|obtenu en|obtenu le|diplômée? en)\s*:?\s*)?"
_GRAD_TOKEN = r"(?:[^\W\d_]{3,9}\.?\s+\d{4}|\d{1,2}/\d{4}|\d{4})"
_GRAD_ONGOING = r"(?:present|current|now|aujourd'hui|aujourd’hui|actuel(?:le)?|en cours)"

GRAD_LINE_RE = re.compile(
    r"^" + _GRAD_PREFIX
    + r"(?P<first>" + _GRAD_TOKEN + r")"
    + r"(?:\s*(?:[-–—]|to|à)\s*(?P<last>" + _GRAD_TOKEN + "|" + _GRAD_ONGOING + r"))?$",
    re.IGNORECASE,
)
ONGOING_RE = re.compile(r"^" + _GRAD_ONGOING + r"$", re.IGNORECASE)
MM_YYYY_RE = re.compile(r"^(\d{1,2})/(\d{4})$")
MONTH_YEAR_RE = re.compile(r"^([^\W\d_]{3,9})\.?\s+(\d{4})$")
YEAR_RE = re.compile(r"^\d{4}$")

BULLET_RE = re.compile(r"^[\s•●\-*→>]+")


def has_degree_keyword(text: str) -> bool:
    """
    Check if text names a degree.

    Args:
        text: Text to check

    Returns:
        True if a degree keyword is found (case-insensitive)
    """
    text_lower = text.lower()
    for keyword in DEGREE_KEYWORDS:
        if re.search(r"(?<!\w)" + re.escape(keyword) + r"(?!\w)", text_lower):
            return True
    return False


def is_institution_keyword(text: str) -> bool:
    """
    Check if text contains institution-specific keywords.

    Args:
        text: Text to check

    Returns:
        True if institution keyword found
    """
    text_lower = text.lower()
    for keyword in INSTITUTION_KEYWORDS:
        if re.search(r"(?<!\w)" + re.escape(keyword) + r"(?!\w)", text_lower):
            return True
    return False


def _is_graduation_line(line: str) -> bool:
    m = GRAD_LINE_RE.match(line)
    if not m:
        return False
    # "Stanford 2019" is not a graduation line; the leading word must be a month
    return all(
        token is None or ONGOING_RE.match(token) or parse_graduation_date(token) is not None
        for token in (m.group("first"), m.group("last"))
    )


def parse_graduation_date(token: Optional[str]) -> Optional[date]:
    """
    Parse a single graduation token.

    Examples:
        "06/2019" -> 2019-06-01
        "June 2019", "juin 2019", "sept. 2019" -> first of that month
        "2019" -> 2019-01-01
        "Present", "Aujourd'hui" -> None
    """
    if not token:
        return None
    cleaned = re.sub(r"\s+", " ", token.strip())
    if ONGOING_RE.match(cleaned):
        return None
    try:
        m = MM_YYYY_RE.match(cleaned)
        if m:
            return date(int(m.group(2)), int(m.group(1)), 1)
        m = MONTH_YEAR_RE.match(cleaned)
        if m:
            month = lookup_month(m.group(1))
            return date(int(m.group(2)), month, 1) if month else None
        if YEAR_RE.match(cleaned):
            return date(int(cleaned), 1, 1)
    except ValueError as e:
        logger.debug("Unparseable graduation date %r: %s", token, e)
    return None


def graduation_date_from_line(line: str) -> Optional[date]:
    """Graduation date of a graduation line; for a range the end is used."""
    m = GRAD_LINE_RE.match(line.strip())
    if not m:
        return None
    return parse_graduation_date(m.group("last") or m.group("first"))


def _clean(line: str) -> str:
    return BULLET_RE.sub("", line).strip()


def _starts_block(lines: Sequence[str], i: int) -> bool:
    return (
        i + 2 < len(lines)
        and _is_graduation_line(lines[i + 2])
        and not _is_graduation_line(lines[i])
        and not _is_graduation_line(lines[i + 1])
    )


def parse_education(section_text: Optional[str]) -> List[EducationEntry]:
    """
    Parse an education section into entries, in document order.

    Args:
        section_text: Body of the education section

    Returns:
        List of EducationEntry; lines that do not form a degree / institution /
        graduation block are ignored
    """
    if not section_text or not section_text.strip():
        return []

    lines = [l.strip() for l in section_text.splitlines() if l.strip()]
    entries: List[EducationEntry] = []

    i = 0
    while i < len(lines):
        if not _starts_block(lines, i):
            i += 1
            continue

        degree, institution = _clean(lines[i]), _clean(lines[i + 1])
        if is_institution_keyword(degree) and has_degree_keyword(institution) and not has_degree_keyword(degree):
            degree, institution = institution, degree

        entries.append(EducationEntry(
            institution=institution,
            degree=degree,
            graduation_date=graduation_date_from_line(lines[i + 2]),
        ))

        # Trailing details run until the next block
        i += 3
        while i < len(lines) and not _starts_block(lines, i):
            i += 1

    logger.debug("Parsed %d education entries", len(entries))
    return entries
