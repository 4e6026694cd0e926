"""
Confidence scoring for section header candidates.

Header detection produces candidates with a confidence in [0, 1]. This module
keeps every scoring rule in one place so the splitter only has to ask.

Confidence Scale:
  1.0   = Exact keyword line ("EXPERIENCE", "Formation")
  0.8   = Upper-case line containing a keyword, or a clean multi-line header
  0.6   = Threshold: candidates must beat it (multi-line: 0.7)
  <0.4  = Discarded after context validation
"""

import re
from typing import Iterable


# ===== THRESHOLDS =====

SINGLE_LINE_THRESHOLD = 0.6
MULTI_LINE_THRESHOLD = 0.7
MIN_CONTENT_SCORE = 0.3
MIN_FINAL_CONFIDENCE = 0.4
NEUTRAL_CONTENT_SCORE = 0.5


def _word_re(words: Iterable[str]) -> "re.Pattern":
    alternation = "|".join(re.escape(w) for w in sorted(words, key=len, reverse=True))
    return re.compile(r"(?<!\w)(?:" + alternation + r")(?!\w)", re.IGNORECASE)


COMPANY_SUFFIXES = ("inc", "corp", "ltd", "llc", "sarl", "sas", "gmbh", "ag", "plc", "srl")
COMPANY_SUFFIX_RE = _word_re(COMPANY_SUFFIXES)

YEAR_RE = re.compile(r"\d{4}")

# ===== CONTENT SIGNALS =====

EXPERIENCE_TITLE_RE = re.compile(
    r"engineer|developer|manager|analyst|consultant|director|ingénieur|développeur"
    r"|responsable|chef|directeur|architect|lead",
    re.IGNORECASE,
)
EXPERIENCE_EMPLOYER_RE = _word_re(("inc", "corp", "ltd", "llc", "sarl", "sas", "gmbh"))
EXPERIENCE_ACTION_RE = re.compile(
    r"developed|managed|\bled\b|implemented|designed|built|delivered"
    r"|développé|géré|dirigé|implémenté|conçu|réalisé",
    re.IGNORECASE,
)

EDUCATION_DEGREE_RE = re.compile(
    r"bachelor|master|phd|ph\.d|diploma|degree|licence|doctorat|diplôme|\bbts\b|\bdut\b"
    r"|\bm\.?sc\b|\bb\.?sc\b|\bmba\b|baccalauréat|ingénieur",
    re.IGNORECASE,
)
EDUCATION_SCHOOL_RE = re.compile(
    r"university|college|school|institute|université|école|ecole|institut|lycée",
    re.IGNORECASE,
)
EDUCATION_GRAD_RE = re.compile(r"\d{4}|graduated|diplômé", re.IGNORECASE)

SKILLS_TECH_RE = re.compile(
    r"java|python|javascript|sql|aws|docker|react|angular|spring|kubernetes|git",
    re.IGNORECASE,
)
SKILLS_CATEGORY_RE = re.compile(
    r"programming|languages|frameworks|databases|tools|programmation|langages|outils",
    re.IGNORECASE,
)


def has_company_suffix(text: str) -> bool:
    """True when text carries a legal-entity token (Inc., GmbH, SARL...) as a whole word."""
    return bool(COMPANY_SUFFIX_RE.search(text))


def is_all_caps(text: str) -> bool:
    letters = [c for c in text if c.isalpha()]
    return bool(letters) and all(c.isupper() for c in letters)


class HeaderConfidence:
    """Central place for all header confidence logic."""

    @staticmethod
    def single_line(text: str, keyword: str) -> float:
        """
        Confidence for a plain one-line header.

        Base 0.5; exact keyword +0.4; all caps +0.2; short (<30) +0.1;
        company suffix -0.3.
        """
        confidence = 0.5
        if text.lower() == keyword:
            confidence += 0.4
        if is_all_caps(text):
            confidence += 0.2
        if len(text) < 30:
            confidence += 0.1
        if has_company_suffix(text):
            confidence -= 0.3
        return min(confidence, 1.0)

    @staticmethod
    def decorated(content: str, keyword: str) -> float:
        """Confidence for a bulleted or indented header (content excludes the decoration)."""
        confidence = 0.6
        if content.lower() == keyword:
            confidence += 0.3
        if len(content) < 25:
            confidence += 0.1
        if has_company_suffix(content):
            confidence -= 0.3
        return min(confidence, 1.0)

    @staticmethod
    def multi_line(first_line: str, rest_lines: str, spans_break: bool) -> float:
        """
        Confidence for a header broken across lines ("EXPÉRIENCE" / "PROFESSIONNELLE").

        Args:
            first_line: First physical line of the header
            rest_lines: Remaining lines joined with a space
            spans_break: The matched keyword straddles the line break
        """
        confidence = 0.6
        if len(first_line) < 20 and len(rest_lines) < 30:
            confidence += 0.2
        if spans_break:
            confidence += 0.2
        if has_company_suffix(first_line) or has_company_suffix(rest_lines):
            confidence -= 0.3
        return min(confidence, 1.0)

    # ===== CONTENT VALIDATORS =====
    # Each scores one lower-cased body line in [0, 1]; 0.3 is the floor.

    @staticmethod
    def experience_content(line: str) -> float:
        score = 0.3
        if EXPERIENCE_TITLE_RE.search(line):
            score += 0.3
        if YEAR_RE.search(line) or EXPERIENCE_EMPLOYER_RE.search(line):
            score += 0.2
        if EXPERIENCE_ACTION_RE.search(line):
            score += 0.3
        return min(score, 1.0)

    @staticmethod
    def education_content(line: str) -> float:
        score = 0.3
        if EDUCATION_DEGREE_RE.search(line):
            score += 0.4
        if EDUCATION_SCHOOL_RE.search(line):
            score += 0.3
        if EDUCATION_GRAD_RE.search(line):
            score += 0.2
        return min(score, 1.0)

    @staticmethod
    def skills_content(line: str) -> float:
        score = 0.3
        if SKILLS_TECH_RE.search(line):
            score += 0.4
        if SKILLS_CATEGORY_RE.search(line):
            score += 0.3
        # comma-separated lists
        if len(line.split(",")) > 2:
            score += 0.3
        return min(score, 1.0)

    @classmethod
    def content(cls, section_key: str, lines: Iterable[str]) -> float:
        """
        Mean content score of body lines for the given canonical section.

        Sections without a dedicated validator score neutral (0.5) per line.
        Returns 0.0 when there are no lines.
        """
        validators = {
            "experience": cls.experience_content,
            "education": cls.education_content,
            "skills": cls.skills_content,
        }
        validator = validators.get(section_key)
        scores = [validator(line) if validator else NEUTRAL_CONTENT_SCORE for line in lines]
        if not scores:
            return 0.0
        # Rounded so a run of floor scores averages to exactly 0.3
        return round(sum(scores) / len(scores), 4)

    @staticmethod
    def context(has_content_before: bool, has_content_after: bool) -> float:
        """Base 0.5; substantive text shortly before +0.2, after +0.3."""
        score = 0.5
        if has_content_before:
            score += 0.2
        if has_content_after:
            score += 0.3
        return min(score, 1.0)

