"""
Hybrid anonymization of résumé text.

Primary strategy is section removal: personal sections (summary, contact,
interests...) are dropped whole, professional sections are kept and scrubbed
of leaked emails, phone numbers and LinkedIn URLs. Output is plain text with
canonical upper-case headers, ready for downstream parsing.
"""

import logging
import re
from typing import Dict, List, Optional

from resume_pipeline.core.personal_info import EMAIL_RE, LINKEDIN_URL_RE, iter_phone_numbers
from resume_pipeline.core.schemas import AnonymizationConfig, AnonymizationResult, AnonymizationStats
from resume_pipeline.core.section_splitter import split_text_into_sections
from resume_pipeline.core.settings import get_settings

logger = logging.getLogger(__name__)


PROFESSIONAL_SECTIONS = frozenset({
    "experience", "education", "skills", "certifications",
    "projects", "achievements", "publications", "awards",
})

PERSONAL_SECTIONS = frozenset({
    "summary", "profile", "objective", "about", "contact",
    "personal", "interests", "hobbies", "references",
})

SECTION_ORDER = (
    "professional_summary", "experience", "education", "skills",
    "certifications", "projects", "achievements", "awards", "publications",
)

EMAIL_PLACEHOLDER = "[EMAIL_REMOVED]"
PHONE_PLACEHOLDER = "[PHONE_REMOVED]"
LINKEDIN_PLACEHOLDER = "[LINKEDIN_REMOVED]"
NO_PROFESSIONAL_CONTENT = "No professional content found after anonymization."


class InvalidAnonymizationConfig(TypeError):
    """Raised when anonymize() is given something other than an AnonymizationConfig."""


# ===== FALLBACK SPLITTING =====
# Used only when the main splitter returns one oversized summary.

FALLBACK_HEADERS = (
    (re.compile(r"(?i)(?:work\s+experience|professional\s+experience|experience|exp[ée]rience(?:\s+professionnelle)?)"), "experience"),
    (re.compile(r"(?i)(?:education|academic\s+background|formation|[ée]ducation)"), "education"),
    (re.compile(r"(?i)(?:skills|technical\s+skills|comp[ée]tences)"), "skills"),
    (re.compile(r"(?i)(?:summary|profile|profil|objective|about)"), "summary"),
)

# ===== LINE / SENTENCE CLASSIFIERS =====

PERSONAL_LINE_RE = re.compile(
    r"@|linkedin|years old|\bborn\b|\blive in\b|\bliving in\b|\bbased in\b"
    r"|love hiking|love playing|free time|hobbies|guitar|photography",
    re.IGNORECASE,
)
NAME_ONLY_RE = re.compile(r"^[^\W\d_]+\s+[^\W\d_]+$")
BARE_HEADER_RE = re.compile(r"^(?:summary|profile|experience|education|skills|about)$", re.IGNORECASE)

PROFESSIONAL_LINE_RE = re.compile(
    # roles
    r"engineer|developer|manager|analyst|director|consultant|senior|\blead\b"
    # work history
    r"|\d{4}\s*[-–]\s*(?:\d{4}|present|current)"
    r"|developed|\bled\b|managed|implemented|microservices|\bteam\b"
    # education
    r"|university|college|degree|bachelor|master|\bphd\b|\bgpa\b|\bmit\b|computer science"
    # technical skills
    r"|java|python|javascript|react|spring|\baws\b|docker|\bsql\b"
    # employers
    r"|\bcorp\b|\binc\b|\bltd\b|\bllc\b|\bsarl\b|\bsas\b"
    # French
    r"|ingénieur|développeur|université|diplôme",
    re.IGNORECASE,
)
YEARS_OF_EXPERIENCE_RE = re.compile(r"experience.*\d+.*years|\d+.*years.*experience", re.IGNORECASE)

SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
PERSONAL_SENTENCE_RE = re.compile(
    r"years old|\bborn\b|\bmarried\b|\blive in\b|\bbased in\b|\bfrom\b|@|\+?\d[\d ()-]{6,}",
    re.IGNORECASE,
)
PROFESSIONAL_SENTENCE_RE = re.compile(
    r"experience|skilled|expertise|developer|engineer|manager|professional|specializ|focus",
    re.IGNORECASE,
)
MIN_SENTENCE_CHARS = 10
MIN_LINE_CHARS = 5


def is_professional_line(line: str) -> bool:
    """
    Classify a line of unstructured text as professional content.

    Lines with personal signals (contact details, age, residence, hobbies, a
    bare "First Last" name) are rejected first; bare section words are
    rejected; then any role, employer, education or technology signal accepts.
    """
    stripped = line.strip()
    if len(stripped) < MIN_LINE_CHARS:
        return False
    if PERSONAL_LINE_RE.search(stripped) or next(iter_phone_numbers(stripped), None):
        return False
    if NAME_ONLY_RE.match(stripped) or BARE_HEADER_RE.match(stripped):
        return False
    return bool(PROFESSIONAL_LINE_RE.search(stripped) or YEARS_OF_EXPERIENCE_RE.search(stripped))


def is_professional_sentence(sentence: str) -> bool:
    if len(sentence) < MIN_SENTENCE_CHARS:
        return False
    if PERSONAL_SENTENCE_RE.search(sentence):
        return False
    return bool(PROFESSIONAL_SENTENCE_RE.search(sentence))


def _fallback_split(text: str) -> Dict[str, str]:
    sections: Dict[str, List[str]] = {}
    current = "summary"
    for line in text.split("\n"):
        stripped = line.strip()
        header = next((key for pattern, key in FALLBACK_HEADERS if pattern.fullmatch(stripped)), None)
        if header:
            current = header
            continue
        if stripped:
            sections.setdefault(current, []).append(stripped)
    return {key: "\n".join(body) for key, body in sections.items()}


def _extract_professional_content(text: str, stats: AnonymizationStats) -> Dict[str, str]:
    # Some extractors hand over literal "\n" sequences
    lines = text.replace("\\n", "\n").split("\n")
    kept = [line.strip() for line in lines if is_professional_line(line)]
    stats.anonymized_items.append("FALLBACK: Extracted professional content only")
    if kept:
        return {"experience": "\n".join(kept)}
    stats.anonymized_items.append("FALLBACK: No professional content detected")
    return {"experience": NO_PROFESSIONAL_CONTENT}


def _is_degenerate(sections: Dict[str, str], min_chars: int) -> bool:
    return list(sections) == ["summary"] and len(sections["summary"]) > min_chars


def fallback_section_detection(text: str, stats: AnonymizationStats) -> Dict[str, str]:
    """Simple keyword-line splitting, then line classification as a last resort."""
    sections = _fallback_split(text)
    stats.anonymized_items.append("FALLBACK: Used simple section detection")
    if len(sections) <= 1:
        sections = _extract_professional_content(text, stats)
    logger.info("Section split degenerate, fallback produced %s", sorted(sections))
    return sections


# ===== SCRUBBING =====

def scrub_text(content: str, config: AnonymizationConfig, stats: AnonymizationStats) -> str:
    """Replace leaked contact details with placeholders, logging each one."""
    if config.remove_leaked_emails:
        while True:
            m = EMAIL_RE.search(content)
            if not m:
                break
            stats.anonymized_items.append(f"EMAIL: {m.group(0)}")
            content = content[:m.start()] + EMAIL_PLACEHOLDER + content[m.end():]

    if config.remove_leaked_phones:
        while True:
            m = next(iter_phone_numbers(content), None)
            if m is None:
                break
            stats.anonymized_items.append(f"PHONE: {m.group(0).strip()}")
            content = content[:m.start()] + PHONE_PLACEHOLDER + content[m.end():]

    if config.remove_leaked_social_media:
        while True:
            m = LINKEDIN_URL_RE.search(content)
            if not m:
                break
            stats.anonymized_items.append(f"LINKEDIN: {m.group(0)}")
            content = content[:m.start()] + LINKEDIN_PLACEHOLDER + content[m.end():]

    return content


def extract_professional_summary(summary: str, stats: AnonymizationStats) -> str:
    """Keep professional sentences of a summary, record the rest as removed."""
    kept = []
    for sentence in SENTENCE_SPLIT_RE.split(summary):
        sentence = sentence.strip()
        if not sentence:
            continue
        if is_professional_sentence(sentence):
            kept.append(sentence)
        else:
            stats.removed_summary_elements.append(sentence)
    return ". ".join(kept)


def _should_keep(key: str, config: AnonymizationConfig) -> bool:
    if key in PROFESSIONAL_SECTIONS:
        return True
    if key in PERSONAL_SECTIONS:
        return False
    return config.keep_unknown_sections


def format_section_header(key: str) -> str:
    return key.upper().replace("_", " ")


def reconstruct_text(sections: Dict[str, str]) -> str:
    ordered = [key for key in SECTION_ORDER if key in sections]
    ordered += [key for key in sections if key not in SECTION_ORDER]
    blocks = []
    for key in ordered:
        content = sections[key].strip()
        if content:
            blocks.append(f"{format_section_header(key)}\n{content}")
    return "\n\n".join(blocks)


# ===== PUBLIC API =====

STANDARD = AnonymizationConfig.standard()


def anonymize(text: Optional[str], config: AnonymizationConfig = STANDARD) -> AnonymizationResult:
    """
    Produce a privacy-scrubbed version of résumé text.

    Args:
        text: Raw résumé text
        config: Which sections survive and what gets scrubbed (standard preset by default)

    Returns:
        AnonymizationResult with the reconstructed text and statistics

    Raises:
        InvalidAnonymizationConfig: config is not an AnonymizationConfig
    """
    if not isinstance(config, AnonymizationConfig):
        raise InvalidAnonymizationConfig(
            f"config must be an AnonymizationConfig, got {type(config).__name__}"
        )

    stats = AnonymizationStats()
    if not text or not text.strip():
        return AnonymizationResult(anonymized_text="", stats=stats)

    sections = split_text_into_sections(text)
    if _is_degenerate(sections, get_settings().fallback_min_chars):
        sections = fallback_section_detection(sections["summary"], stats)
    stats.original_sections = set(sections)

    kept: Dict[str, str] = {}
    for key, body in sections.items():
        if _should_keep(key, config):
            kept[key] = scrub_text(body, config, stats)
            stats.kept_sections.add(key)
        else:
            stats.removed_sections.add(key)
            stats.removed_character_count += len(body)

    if config.include_cleaned_summary and "summary" in sections:
        summary = scrub_text(extract_professional_summary(sections["summary"], stats), config, stats)
        if summary.strip():
            kept = {"professional_summary": summary, **kept}

    logger.info(
        "Anonymized resume: kept=%s removed=%s items=%d",
        sorted(stats.kept_sections), sorted(stats.removed_sections), len(stats.anonymized_items),
    )
    return AnonymizationResult(anonymized_text=reconstruct_text(kept), stats=stats)
