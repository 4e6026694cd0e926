"""
Personal information detection: name, email, phone, LinkedIn.

Deterministic regex extraction, first match wins. Phone candidates are
validated (7-15 digits once formatting is stripped) so that year ranges such
as "2015-2019" are never taken for phone numbers.
"""

import re
from typing import Iterator, Optional

from resume_pipeline.core.schemas import PersonalInfo


EMAIL_RE = re.compile(r"[\w.%+-]+@[\w.-]+\.[^\W\d_]{2,}")
PHONE_RE = re.compile(r"\+?\(?\d[\d ().-]{5,}\d")
LINKEDIN_RE = re.compile(r"linkedin\.com/in/([A-Za-z0-9-]+)", re.IGNORECASE)
LINKEDIN_URL_RE = re.compile(r"(?:https?://)?(?:www\.)?linkedin\.com/in/[A-Za-z0-9-]+/?", re.IGNORECASE)

PHONE_FORMATTING_RE = re.compile(r"[\s\-().+]")
YEAR_TOKEN_RE = re.compile(r"(?<!\d)(?:19|20)\d{2}(?!\d)")

MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 15


def is_valid_phone_number(value: Optional[str]) -> bool:
    """
    Check a phone number the way form validation does.

    Formatting characters (spaces, dashes, dots, parentheses, +) are ignored;
    what remains must be 7-15 digits.
    """
    if not value or not value.strip():
        return False
    digits = PHONE_FORMATTING_RE.sub("", value)
    return digits.isdigit() and MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS


def _looks_like_date_range(candidate: str) -> bool:
    # "2015-2019", "2019.06 - 2021.08", "2018 - 2020 (2"
    return len(YEAR_TOKEN_RE.findall(candidate)) >= 2


def iter_phone_numbers(text: str) -> Iterator[re.Match]:
    """Yield regex matches in text that are plausible phone numbers."""
    for m in PHONE_RE.finditer(text):
        candidate = m.group(0).strip()
        if not is_valid_phone_number(candidate):
            continue
        if _looks_like_date_range(candidate):
            continue
        yield m


def extract_name(text: str) -> Optional[str]:
    """First non-blank line."""
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return None


def extract_email(text: str) -> Optional[str]:
    m = EMAIL_RE.search(text)
    return m.group(0) if m else None


def extract_phone_number(text: str) -> Optional[str]:
    for m in iter_phone_numbers(text):
        return m.group(0).strip()
    return None


def extract_linkedin_url(text: Optional[str]) -> Optional[str]:
    """
    Find a LinkedIn profile reference and return it as a canonical URL.

    Example:
        "My profile is on linkedin.com/in/johndoe" -> "https://www.linkedin.com/in/johndoe"
    """
    if not text:
        return None
    m = LINKEDIN_RE.search(text)
    if not m:
        return None
    return f"https://www.linkedin.com/in/{m.group(1)}"


def detect_personal_info(text: Optional[str]) -> PersonalInfo:
    """
    Extract name, email and phone from résumé text.

    Args:
        text: Raw résumé text

    Returns:
        PersonalInfo with None for anything not found
    """
    if not text or not text.strip():
        return PersonalInfo()
    return PersonalInfo(
        name=extract_name(text),
        email=extract_email(text),
        phone=extract_phone_number(text),
    )
