"""
Work experience parsing for the experience section.

Deterministic, rule-based: date-range lines anchor entries, the lines just
above an anchor carry job title and company, the lines after it carry the
description. When a section has no date lines at all, entries are segmented
on lines that look like job titles instead.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence, Tuple

from resume_pipeline.core.date_parser import parse_date_range
from resume_pipeline.core.schemas import WorkExperienceEntry

logger = logging.getLogger(__name__)


# ===== DATE LINES =====
# Structural detection only; parse_date_range() does the actual conversion.

_MONTH_WORD = r"[^\W\d_]{3,9}\.?"
_RANGE_SEP = r"\s*(?:[-–—]|to|till|until|au|à)\s*"
_ONGOING = r"(?:present|current|now|aujourd'hui|aujourd’hui|actuel(?:le(?:ment)?)?|maintenant)"

DATE_LINE_PATTERNS = (
    # "Jan 2020 - Dec 2022", "janvier 2020 - Aujourd'hui", "Sept. 2019 till March 2022"
    re.compile(_MONTH_WORD + r",?\s+\d{4}" + _RANGE_SEP + r"(?:" + _MONTH_WORD + r",?\s+\d{4}|" + _ONGOING + r")", re.IGNORECASE),
    # "01/2020 - 12/2022", "01/2020 - Present", "de 03/2018 à 11/2020"
    re.compile(r"\d{1,2}/\d{2,4}" + _RANGE_SEP + r"(?:\d{1,2}/\d{2,4}|" + _ONGOING + r")", re.IGNORECASE),
    # "2020-01 - 2022-12", "2019.06 - 2021.08"
    re.compile(r"\d{4}[-.]\d{2}" + _RANGE_SEP + r"\d{4}[-.]\d{2}"),
    # "du janvier 2020 au décembre 2022"
    re.compile(r"\bdu\s+" + _MONTH_WORD + r"\s+\d{4}\s+au\s+" + _MONTH_WORD + r"\s+\d{4}", re.IGNORECASE),
    # "2018 - 2020", "2020 - Present"
    re.compile(r"\b\d{4}" + _RANGE_SEP + r"(?:\d{4}\b|" + _ONGOING + r")", re.IGNORECASE),
    # "Q1 2020 - Q4 2022"
    re.compile(r"\bQ[1-4]\s+\d{4}" + _RANGE_SEP + r"Q[1-4]\s+\d{4}", re.IGNORECASE),
)

YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")

# ===== TITLE / COMPANY SIGNALS =====

JOB_TITLE_KEYWORDS = (
    # English
    "engineer", "developer", "manager", "director", "analyst", "consultant",
    "lead", "senior", "junior", "principal", "staff", "architect", "specialist",
    "coordinator", "supervisor", "executive", "officer", "administrator", "intern",
    # French
    "ingénieur", "développeur", "responsable", "directeur", "analyste",
    "chef", "architecte", "spécialiste", "coordinateur", "superviseur",
    "chargé", "attaché", "gérant", "stagiaire",
)

COMPANY_INDICATORS = (
    "inc", "corp", "corporation", "company", "ltd", "limited", "llc", "group", "plc",
    "sarl", "sas", "sa", "eurl", "société", "entreprise", "groupe", "gmbh", "ag",
)
COMPANY_INDICATOR_RE = re.compile(
    r"(?<!\w)(?:" + "|".join(re.escape(c) for c in COMPANY_INDICATORS) + r")(?!\w)", re.IGNORECASE
)

TITLE_CASE_RE = re.compile(r"^[A-Z][a-z]+(?:\s+[A-Z][a-z]*)*$")

# "Title at Company", "Title chez Company", "Title | Company", "Title - Company", "Title, Company"
TITLE_COMPANY_SPLIT_RE = re.compile(r"\s+(?:at|chez|@)\s+|\s*\|\s*|\s+[-–—]\s+|,\s+", re.IGNORECASE)

# ===== DESCRIPTION SIGNALS =====

BULLET_RE = re.compile(r"^[•\-*+▪◦·●○■–]\s*")
ACTION_VERBS = (
    # English
    "developed", "led", "managed", "built", "designed", "implemented", "created",
    "delivered", "improved", "increased", "reduced", "launched", "maintained",
    "collaborated", "coordinated", "supervised", "responsible", "worked", "optimized",
    "migrated", "automated", "conducted", "established", "drove", "owned", "architected",
    "mentored", "deployed", "wrote", "analyzed", "contributed", "participated",
    # French
    "développé", "développement", "géré", "gestion", "dirigé", "conçu", "conception",
    "mis", "mise", "réalisé", "réalisation", "participé", "participation", "encadré",
    "encadrement", "piloté", "pilotage", "assuré", "créé", "optimisé", "migré", "animé",
)
ACTION_VERB_RE = re.compile(
    r"^(?:" + "|".join(re.escape(v) for v in ACTION_VERBS) + r")(?!\w)", re.IGNORECASE
)

MAX_HEADER_LINES = 3
MAX_TITLE_CHARS = 80
SENTENCE_MIN_WORDS = 6
_TRIM_CHARS = " \t|,;:-–—"


@dataclass
class _RawEntry:
    header_lines: List[str] = field(default_factory=list)
    date_line: Optional[str] = None
    description_lines: List[str] = field(default_factory=list)


# ===== LINE CLASSIFIERS =====

def find_date_range(line: str) -> Optional[re.Match]:
    for pattern in DATE_LINE_PATTERNS:
        m = pattern.search(line)
        if m:
            return m
    return None


def is_date_line(line: str) -> bool:
    return find_date_range(line) is not None


def is_description_line(line: str) -> bool:
    """Bullets and lines opening with an action verb ("Developed...", "Gestion de...")."""
    stripped = line.strip()
    return bool(BULLET_RE.match(stripped) or ACTION_VERB_RE.match(stripped))


def _is_sentence(line: str) -> bool:
    stripped = line.strip()
    return stripped.endswith(".") and len(stripped.split()) >= SENTENCE_MIN_WORDS


def has_job_title_keyword(line: str) -> bool:
    lowered = line.lower()
    return any(k in lowered for k in JOB_TITLE_KEYWORDS)


def has_company_indicator(line: str) -> bool:
    return bool(COMPANY_INDICATOR_RE.search(line))


def looks_like_job_title(line: str) -> bool:
    """Job-title keyword, or a short Title-Case line."""
    stripped = line.strip()
    if has_job_title_keyword(stripped):
        return True
    return bool(TITLE_CASE_RE.match(stripped)) and len(stripped) < 60


def _clean(text: str) -> str:
    text = BULLET_RE.sub("", text.strip())
    return re.sub(r"\s+", " ", text).strip(_TRIM_CHARS)


# ===== TITLE / COMPANY RESOLUTION =====

def split_title_company(line: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Split a one-line header into (title, company).

    Examples:
        "Software Engineer at Google" -> ("Software Engineer", "Google")
        "Ingénieur Logiciel chez Google" -> ("Ingénieur Logiciel", "Google")
        "Google Inc. | Software Engineer" -> ("Software Engineer", "Google Inc.")
    """
    cleaned = _clean(line)
    parts = TITLE_COMPANY_SPLIT_RE.split(cleaned, maxsplit=1)
    if len(parts) < 2:
        return (cleaned or None), None
    left, right = _clean(parts[0]), _clean(parts[1])
    if has_company_indicator(left) or (has_job_title_keyword(right) and not has_job_title_keyword(left)):
        left, right = right, left
    return (left or None), (right or None)


def _title_score(line: str) -> int:
    score = 0
    if has_job_title_keyword(line):
        score += 2
    if TITLE_CASE_RE.match(line):
        score += 1
    if has_company_indicator(line):
        score -= 2
    return score


def _company_score(line: str) -> int:
    score = 0
    if has_company_indicator(line):
        score += 2
    if has_job_title_keyword(line):
        score -= 2
    return score


def resolve_title_company(header_lines: Sequence[str], date_line: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Pick job title and company from the 0-3 header lines of an entry."""
    lines = [_clean(l) for l in header_lines if _clean(l)]
    residue = _date_residue(date_line) if date_line else ""

    if not lines:
        if not residue:
            return None, None
        return split_title_company(residue)

    if len(lines) == 1:
        title, company = split_title_company(lines[0])
        if company is None and residue:
            company = residue
        return title, company

    if len(lines) == 2:
        first, second = lines
        if has_company_indicator(first) and has_job_title_keyword(second):
            return second, first
        return first, second

    # Three lines: best title, then best company among the others (earliest wins ties)
    title_idx = max(range(len(lines)), key=lambda i: (_title_score(lines[i]), -i))
    rest = [i for i in range(len(lines)) if i != title_idx]
    company_idx = max(rest, key=lambda i: (_company_score(lines[i]), -i))
    return lines[title_idx], lines[company_idx]


def _date_residue(date_line: str) -> str:
    m = find_date_range(date_line)
    if not m:
        return _clean(date_line)
    return _clean(date_line[:m.start()] + " " + date_line[m.end():])


# ===== SEGMENTATION =====

def _header_lines_above(lines: Sequence[str], date_idx: int, floor: int) -> List[int]:
    picked: List[int] = []
    i = date_idx - 1
    while i >= floor and len(picked) < MAX_HEADER_LINES:
        line = lines[i].strip()
        if not line or is_date_line(line) or is_description_line(line) or _is_sentence(line):
            break
        picked.append(i)
        i -= 1
    return sorted(picked)


def split_by_date_lines(lines: Sequence[str], date_indices: Sequence[int]) -> List[_RawEntry]:
    headers: List[List[int]] = []
    for k, idx in enumerate(date_indices):
        floor = date_indices[k - 1] + 1 if k > 0 else 0
        headers.append(_header_lines_above(lines, idx, floor))

    entries = []
    for k, idx in enumerate(date_indices):
        if k + 1 < len(date_indices):
            nxt = headers[k + 1]
            stop = nxt[0] if nxt else date_indices[k + 1]
        else:
            stop = len(lines)
        description = [
            lines[i].strip() for i in range(idx + 1, stop)
            if lines[i].strip() and is_description_line(lines[i])
        ]
        entries.append(_RawEntry(
            header_lines=[lines[i] for i in headers[k]],
            date_line=lines[idx].strip(),
            description_lines=description,
        ))
    return entries


def split_by_job_titles(lines: Sequence[str]) -> List[_RawEntry]:
    """Segment undated text on lines that look like job titles."""
    entries: List[_RawEntry] = []
    current: Optional[_RawEntry] = None
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        has_company = current is not None and len(current.header_lines) > 1
        starts_entry = has_job_title_keyword(line) or (
            looks_like_job_title(line) and (current is None or has_company)
        )
        if starts_entry and not is_description_line(line):
            current = _RawEntry(header_lines=[line])
            entries.append(current)
        elif current is None:
            continue
        elif current.date_line is None and YEAR_RE.search(line):
            current.date_line = line
        elif not has_company and not is_description_line(line):
            current.header_lines.append(line)
        elif is_description_line(line):
            current.description_lines.append(line)
    return entries


# ===== PUBLIC API =====

def _to_entry(raw: _RawEntry, today: Optional[date]) -> Optional[WorkExperienceEntry]:
    title, company = resolve_title_company(raw.header_lines, raw.date_line)
    if not title or not company or len(title) > MAX_TITLE_CHARS:
        logger.debug("Dropped experience entry without title/company: %r", raw.header_lines)
        return None

    start = end = None
    if raw.date_line:
        result = parse_date_range(raw.date_line, today=today)
        if result.is_valid:
            start, end = result.start_date, result.end_date
        else:
            logger.debug("Unusable date line %r: %s", raw.date_line, result.message)

    return WorkExperienceEntry(
        job_title=title,
        company=company,
        start_date=start,
        end_date=end,
        description="\n".join(raw.description_lines),
    )


def parse_work_experience(section_text: Optional[str], today: Optional[date] = None) -> List[WorkExperienceEntry]:
    """
    Parse an experience section into entries.

    Args:
        section_text: Body of the experience section
        today: Reference date for date validation (defaults to date.today())

    Returns:
        Entries ordered most recent first; entries without a usable start
        date keep their relative order at the end
    """
    if not section_text or not section_text.strip():
        return []

    today = today or date.today()
    lines = section_text.splitlines()
    date_indices = [i for i, line in enumerate(lines) if is_date_line(line)]

    if date_indices:
        raw_entries = split_by_date_lines(lines, date_indices)
    else:
        raw_entries = split_by_job_titles(lines)

    entries = [e for e in (_to_entry(raw, today) for raw in raw_entries) if e is not None]
    entries.sort(key=lambda e: (e.start_date is None, -(e.start_date.toordinal() if e.start_date else 0)))
    logger.debug("Parsed %d experience entries from %d candidates", len(entries), len(raw_entries))
    return entries
