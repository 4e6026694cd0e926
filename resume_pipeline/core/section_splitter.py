"""
Section splitting for résumé text.

Finds section headers (single-line, bulleted, indented, or broken across
two or three lines), scores each candidate, validates it against the lines
around it, and cuts the text into a map of canonical section key -> body.

Pipeline:
1. preprocess_text()            normalize whitespace and OCR artifacts
2. detect_header_candidates()   keyword-table matching per line
3. validate_candidates()        company names, job-entry neighbours, content fit
4. resolve_overlaps()           one header per line range
5. extract_sections()           bodies between consecutive headers
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from resume_pipeline.core.header_confidence import (
    MIN_CONTENT_SCORE,
    MIN_FINAL_CONFIDENCE,
    MULTI_LINE_THRESHOLD,
    SINGLE_LINE_THRESHOLD,
    HeaderConfidence,
    has_company_suffix,
    is_all_caps,
)
from resume_pipeline.core.text_normalization import preprocess_text

logger = logging.getLogger(__name__)


# ===== SECTION KEYWORDS =====
# Surface forms, lower-case. Canonical keys come from SECTION_KEY_RULES.

SECTION_KEYWORDS = (
    # English
    "experience", "experiences", "work experience", "professional experience",
    "employment history", "employment", "work history", "career history",
    "education", "academic background", "academic history",
    "skills", "technical skills", "key skills", "competencies", "core competencies",
    "summary", "professional summary", "profile", "objective", "career objective",
    "about", "about me",
    "certifications", "certification", "projects", "achievements", "awards", "honors",
    "publications", "languages", "interests", "hobbies", "references",
    "contact", "contact information", "personal information", "personal info", "personal details",
    # French
    "expérience professionnelle", "expériences professionnelles", "expériences",
    "expérience", "historique professionnel", "parcours professionnel",
    "formation", "formations", "éducation", "parcours académique", "diplômes",
    "compétences", "compétences techniques", "savoir-faire",
    "profil", "profil professionnel", "à propos", "résumé", "objectif",
    "projets", "réalisations", "distinctions", "langues",
    "centres d'intérêt", "loisirs", "références", "coordonnées",
    "informations personnelles",
)

# Ordered (substring, key); first hit wins, default "summary".
# Personal and contact rules come first: "information" contains "formation".
SECTION_KEY_RULES = (
    ("personal", "personal"),
    ("personnelle", "personal"),
    ("contact", "contact"),
    ("coordonnées", "contact"),
    ("summary", "summary"),
    ("profil", "summary"),
    ("objective", "summary"),
    ("objectif", "summary"),
    ("about", "summary"),
    ("à propos", "summary"),
    ("résumé", "summary"),
    ("experience", "experience"),
    ("expérience", "experience"),
    ("employment", "experience"),
    ("career", "experience"),
    ("work", "experience"),
    ("parcours professionnel", "experience"),
    ("historique professionnel", "experience"),
    ("education", "education"),
    ("éducation", "education"),
    ("formation", "education"),
    ("academic", "education"),
    ("parcours académique", "education"),
    ("diplôme", "education"),
    ("skill", "skills"),
    ("compétence", "skills"),
    ("competenc", "skills"),
    ("savoir-faire", "skills"),
    ("certification", "certifications"),
    ("project", "projects"),
    ("projet", "projects"),
    ("achievement", "achievements"),
    ("réalisation", "achievements"),
    ("award", "awards"),
    ("honor", "awards"),
    ("distinction", "awards"),
    ("publication", "publications"),
    ("language", "languages"),
    ("langue", "languages"),
    ("interest", "interests"),
    ("intérêt", "interests"),
    ("hobb", "interests"),
    ("loisir", "interests"),
    ("reference", "references"),
    ("référence", "references"),
)

CONNECTORS = frozenset({"and", "&", "et", "de", "des", "du", "of", "the", "my", "en", "la", "le", "les"})

_TOKEN_RE = re.compile(r"[^\W\d_]+(?:[-'][^\W\d_]+)*")

KEYWORD_VOCABULARY = frozenset(
    token for keyword in SECTION_KEYWORDS for token in _TOKEN_RE.findall(keyword)
)

# Longest first so "work experience" wins over "experience"
_KEYWORD_PATTERNS = tuple(
    (keyword, re.compile(r"(?<!\w)" + re.escape(keyword) + r"(?!\w)"))
    for keyword in sorted(SECTION_KEYWORDS, key=len, reverse=True)
)

BULLET_RE = re.compile(r"^[•\-*+]\s+")
INDENT_RE = re.compile(r"^\s{3,}\S")
DIGIT_RE = re.compile(r"\d")

# Job-entry signals used to reject header-looking lines inside an experience entry
JOB_ENTRY_DATE_RE = re.compile(
    r"\d{4}\s*[-–]\s*(?:\d{4}|present|current|aujourd'hui|actuel)", re.IGNORECASE
)
JOB_ENTRY_TITLE_RE = re.compile(
    r"engineer|developer|manager|director|ingénieur|développeur|responsable|directeur",
    re.IGNORECASE,
)

MAX_SINGLE_LINE_HEADER = 50
MAX_MULTI_LINE_PART = 30
MAX_MULTI_LINE_TEXT = 60
CONTENT_WINDOW = 10
NEIGHBOUR_WINDOW = 2


@dataclass
class HeaderCandidate:
    text: str
    start: int  # first line index
    end: int  # last line index (inclusive)
    style: str  # single-line | multi-line | bulleted | indented
    confidence: float
    keyword: str

    @property
    def key(self) -> str:
        return normalize_section_key(self.keyword)

    @property
    def span(self) -> int:
        return self.end - self.start + 1


# ===== KEYWORD HELPERS =====

def normalize_section_key(keyword: str) -> str:
    """
    Map a matched keyword to its canonical section key.

    Examples:
        "Expérience professionnelle" -> "experience"
        "Formation" -> "education"
        "Compétences techniques" -> "skills"
        "À propos" -> "summary"
    """
    lowered = keyword.lower()
    for fragment, key in SECTION_KEY_RULES:
        if fragment in lowered:
            return key
    return "summary"


def find_keyword(text: str) -> Optional[Tuple[str, int, int]]:
    """Longest section keyword found at word boundaries: (keyword, start, end)."""
    lowered = text.lower()
    for keyword, pattern in _KEYWORD_PATTERNS:
        m = pattern.search(lowered)
        if m:
            return keyword, m.start(), m.end()
    return None


def _keys_in(text: str) -> set:
    lowered = text.lower()
    return {normalize_section_key(kw) for kw, pattern in _KEYWORD_PATTERNS if pattern.search(lowered)}


def is_pure_header_text(text: str) -> bool:
    """True when text is made only of section vocabulary and connectors ("Éducation et formation")."""
    tokens = _TOKEN_RE.findall(text.lower())
    if not tokens:
        return False
    return all(t in KEYWORD_VOCABULARY or t in CONNECTORS for t in tokens)


def _strip_label(text: str) -> str:
    return text.strip().rstrip(":").strip()


def _header_keyword(text: str) -> Optional[str]:
    """Keyword if text reads as a header: exact keyword, or short all-caps line containing one."""
    lowered = text.lower()
    if lowered in SECTION_KEYWORDS:
        return lowered
    if len(text) < MAX_SINGLE_LINE_HEADER and is_all_caps(text):
        found = find_keyword(text)
        if found:
            return found[0]
    return None


# ===== STAGE 2: DETECTION =====

def _check_single_line(line: str, index: int) -> Optional[HeaderCandidate]:
    raw = line.rstrip()
    if BULLET_RE.match(raw.lstrip()):
        content = _strip_label(BULLET_RE.sub("", raw.lstrip(), count=1))
        style = "bulleted"
    elif INDENT_RE.match(raw):
        content = _strip_label(raw)
        style = "indented"
    else:
        content = _strip_label(raw)
        style = "single-line"

    keyword = _header_keyword(content)
    if keyword is None:
        return None

    if style == "single-line":
        confidence = HeaderConfidence.single_line(content, keyword)
    else:
        confidence = HeaderConfidence.decorated(content, keyword)
    if confidence <= SINGLE_LINE_THRESHOLD:
        return None
    return HeaderCandidate(content, index, index, style, confidence, keyword)


def _check_multi_line(lines: Sequence[str], index: int) -> Optional[HeaderCandidate]:
    for size in (2, 3):
        if index + size > len(lines):
            break
        parts = [_strip_label(lines[i]) for i in range(index, index + size)]
        if any(not p or len(p) >= MAX_MULTI_LINE_PART or DIGIT_RE.search(p) for p in parts):
            break
        combo = " ".join(parts)
        found = find_keyword(combo)
        if not found or not is_pure_header_text(combo):
            continue
        # "SKILLS" directly above "EDUCATION" is two headers, not one
        if len(_keys_in(combo)) > 1:
            continue
        keyword, kw_start, kw_end = found
        spans_break = kw_start < len(parts[0]) < kw_end
        rest = " ".join(parts[1:])
        confidence = HeaderConfidence.multi_line(parts[0], rest, spans_break)
        if confidence > MULTI_LINE_THRESHOLD:
            return HeaderCandidate("\n".join(parts), index, index + size - 1, "multi-line", confidence, keyword)
    return None


def detect_header_candidates(lines: Sequence[str]) -> List[HeaderCandidate]:
    """All header candidates above their style's detection threshold."""
    candidates: List[HeaderCandidate] = []
    for i, line in enumerate(lines):
        if not line.strip():
            continue
        single = _check_single_line(line, i)
        if single:
            candidates.append(single)
        multi = _check_multi_line(lines, i)
        if multi:
            candidates.append(multi)
    return candidates


# ===== STAGE 3: VALIDATION =====

def _has_job_entry_neighbours(candidate: HeaderCandidate, lines: Sequence[str]) -> bool:
    lo = max(0, candidate.start - NEIGHBOUR_WINDOW)
    hi = min(len(lines), candidate.end + NEIGHBOUR_WINDOW + 1)
    for i in range(lo, hi):
        if candidate.start <= i <= candidate.end:
            continue
        if JOB_ENTRY_DATE_RE.search(lines[i]) or JOB_ENTRY_TITLE_RE.search(lines[i]):
            return True
    return False


def _content_lines(candidate: HeaderCandidate, lines: Sequence[str]) -> List[str]:
    out = []
    for line in lines[candidate.end + 1:]:
        if line.strip():
            out.append(line.strip().lower())
            if len(out) >= CONTENT_WINDOW:
                break
    return out


def _context_score(candidate: HeaderCandidate, lines: Sequence[str]) -> float:
    before = lines[max(0, candidate.start - 3):candidate.start]
    after = lines[candidate.end + 1:candidate.end + 5]
    has_before = any(len(l.strip()) > 10 for l in before)
    has_after = any(len(l.strip()) > 5 for l in after)
    return HeaderConfidence.context(has_before, has_after)


def validate_candidate(candidate: HeaderCandidate, lines: Sequence[str]) -> Optional[float]:
    """
    Re-score a candidate against its surroundings.

    Returns:
        Final confidence, or None when the candidate is rejected
    """
    if has_company_suffix(candidate.text):
        logger.debug("Rejected header %r: company name", candidate.text)
        return None

    # Lines made only of section vocabulary are headers whatever surrounds them
    if not is_pure_header_text(candidate.text) and _has_job_entry_neighbours(candidate, lines):
        logger.debug("Rejected header %r: inside a job entry", candidate.text)
        return None

    content_score = HeaderConfidence.content(candidate.key, _content_lines(candidate, lines))
    if content_score < MIN_CONTENT_SCORE:
        logger.debug("Rejected header %r: content score %.2f", candidate.text, content_score)
        return None

    multiplier = 0.7 + 0.3 * content_score
    multiplier *= 0.8 + 0.2 * _context_score(candidate, lines)

    if candidate.end >= len(lines) - 2:
        multiplier *= 0.7
    if candidate.style == "multi-line" and len(candidate.text) > MAX_MULTI_LINE_TEXT:
        multiplier *= 0.6

    final = candidate.confidence * multiplier
    if final < MIN_FINAL_CONFIDENCE:
        logger.debug("Rejected header %r: final confidence %.2f", candidate.text, final)
        return None
    return min(final, 1.0)


def validate_candidates(candidates: Sequence[HeaderCandidate], lines: Sequence[str]) -> List[HeaderCandidate]:
    validated = []
    for candidate in candidates:
        final = validate_candidate(candidate, lines)
        if final is not None:
            candidate.confidence = final
            validated.append(candidate)
    return validated


# ===== STAGE 4: OVERLAPS =====

def _overlaps(a: HeaderCandidate, b: HeaderCandidate) -> bool:
    return a.start <= b.end and a.end >= b.start


def resolve_overlaps(candidates: Sequence[HeaderCandidate]) -> List[HeaderCandidate]:
    """
    Keep at most one header per line range.

    A multi-line header absorbs the single-line candidates inside it that
    share its section key. The rest is greedy by confidence, then span
    length, then position.
    """
    multi = [c for c in candidates if c.style == "multi-line"]
    pool = [
        c for c in candidates
        if c.style == "multi-line"
        or not any(_overlaps(c, m) and m.key == c.key for m in multi)
    ]

    accepted: List[HeaderCandidate] = []
    for candidate in sorted(pool, key=lambda c: (-c.confidence, -c.span, c.start)):
        if any(_overlaps(candidate, kept) for kept in accepted):
            continue
        accepted.append(candidate)
    return sorted(accepted, key=lambda c: c.start)


# ===== STAGE 5: EXTRACTION =====

def extract_sections(headers: Sequence[HeaderCandidate], lines: Sequence[str]) -> Dict[str, str]:
    """
    Cut the lines at the headers.

    Text before the first header becomes "summary" unless an explicit summary
    header exists. Repeated keys are joined with a blank line; empty bodies
    are dropped.
    """
    if not headers:
        body = "\n".join(lines).strip()
        return {"summary": body} if body else {}

    sections: Dict[str, str] = {}
    preamble = "\n".join(lines[:headers[0].start]).strip()
    if preamble:
        sections["summary"] = preamble
    explicit_summary = False

    for i, header in enumerate(headers):
        stop = headers[i + 1].start if i + 1 < len(headers) else len(lines)
        body = "\n".join(lines[header.end + 1:stop]).strip()
        if not body:
            continue
        key = header.key
        if key == "summary" and not explicit_summary:
            # An explicit summary replaces the preamble
            explicit_summary = True
            sections["summary"] = body
        elif key in sections:
            sections[key] = f"{sections[key]}\n\n{body}"
        else:
            sections[key] = body

    return sections


# ===== PUBLIC API =====

def split_into_lines(text: Optional[str]) -> List[str]:
    """Preprocessed lines of text (empty list for blank input)."""
    if not text or not text.strip():
        return []
    return preprocess_text(text).split("\n")


def detect_headers(lines: Sequence[str]) -> List[HeaderCandidate]:
    """Validated, non-overlapping headers in document order."""
    candidates = detect_header_candidates(lines)
    validated = validate_candidates(candidates, lines)
    headers = resolve_overlaps(validated)
    logger.debug(
        "Header detection: %d candidates, %d validated, %d kept",
        len(candidates), len(validated), len(headers),
    )
    return headers


def split_text_into_sections(text: Optional[str]) -> Dict[str, str]:
    """
    Split résumé text into canonical sections.

    Args:
        text: Raw résumé text (any line endings, possibly OCR'd)

    Returns:
        Dict of canonical key ("experience", "education", "skills",
        "summary", ...) to section body. Empty dict for blank input; all
        text under "summary" when no header is found.
    """
    lines = split_into_lines(text)
    if not lines:
        return {}
    headers = detect_headers(lines)
    return extract_sections(headers, lines)
