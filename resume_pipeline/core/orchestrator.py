"""
Manual (rule-based) parsing: raw résumé text -> Candidate.

Orchestrates section splitting, personal info detection, the per-section
extractors and career timeline analysis. Nothing in here raises for
malformed text; problems surface as warnings on the ParseResult.
"""

import logging
from datetime import date
from typing import List, Optional

from resume_pipeline.core.career_timeline import analyze_career_timeline
from resume_pipeline.core.education_parser import parse_education
from resume_pipeline.core.personal_info import detect_personal_info
from resume_pipeline.core.schemas import CareerAnalysis, Candidate, DateRangeResult, ParseResult
from resume_pipeline.core.section_splitter import split_text_into_sections
from resume_pipeline.core.skills import extract_skills
from resume_pipeline.core.work_experience import parse_work_experience

logger = logging.getLogger(__name__)


def parse_resume(text: Optional[str], today: Optional[date] = None) -> ParseResult:
    """
    Parse résumé text into a Candidate plus diagnostics.

    Args:
        text: Raw résumé text (possibly edited by a reviewer)
        today: Reference date for date validation and ongoing positions

    Returns:
        ParseResult with candidate, career analysis over the extracted work
        history, detected section keys and warnings
    """
    if not text or not text.strip():
        return ParseResult(
            candidate=Candidate(),
            career_analysis=CareerAnalysis(),
            warnings=["Empty resume text"],
        )

    today = today or date.today()
    warnings: List[str] = []

    info = detect_personal_info(text)
    sections = split_text_into_sections(text)

    experience_text = sections.get("experience", "")
    experiences = parse_work_experience(experience_text, today=today)
    if not experience_text:
        warnings.append("No experience section detected")
    elif not experiences:
        warnings.append("Experience section found but no entries could be extracted")

    education_text = sections.get("education", "")
    educations = parse_education(education_text)
    if not education_text:
        warnings.append("No education section detected")
    elif not educations:
        warnings.append("Education section found but no entries could be extracted")

    skills = extract_skills(sections.get("skills", ""))
    if not skills:
        # Fall back to searching the whole text
        skills = extract_skills(text)
        if skills:
            warnings.append("Skills found outside a skills section")

    undated = sum(1 for e in experiences if e.start_date is None)
    if undated:
        warnings.append(f"{undated} experience entr{'y' if undated == 1 else 'ies'} without a parsable date")

    career = analyze_career_timeline(
        (
            DateRangeResult(start_date=e.start_date, end_date=e.end_date, is_valid=True)
            for e in experiences
            if e.start_date is not None
        ),
        today=today,
    )

    candidate = Candidate(
        name=info.name,
        email=info.email,
        phone=info.phone,
        skills=skills,
        work_experiences=experiences,
        educations=educations,
    )
    logger.info(
        "Parsed resume: sections=%s experiences=%d educations=%d",
        sorted(sections), len(experiences), len(educations),
    )
    return ParseResult(
        candidate=candidate,
        career_analysis=career,
        sections=list(sections),
        warnings=warnings,
    )


def parse_candidate_from_text(text: Optional[str], today: Optional[date] = None) -> Candidate:
    return parse_resume(text, today=today).candidate
