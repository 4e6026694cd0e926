from datetime import date
from typing import List, Literal, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, model_validator


PresetName = Literal["standard", "conservative", "aggressive"]


class WorkExperienceEntry(BaseModel):
    """One position extracted from the experience section."""
    job_title: str
    company: str
    start_date: Optional[date] = None  # None = no parsable date, sorts last
    end_date: Optional[date] = None  # None = ongoing (or unparsed)
    description: str = ""

    @model_validator(mode="after")
    def _check_date_order(self) -> "WorkExperienceEntry":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not precede start_date")
        return self


class EducationEntry(BaseModel):
    """Education entry in candidate profile."""
    institution: str
    degree: str
    graduation_date: Optional[date] = None  # None if unparseable


class Candidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    skills: str = ""  # comma-joined, dictionary spelling
    work_experiences: List[WorkExperienceEntry] = Field(default_factory=list)
    educations: List[EducationEntry] = Field(default_factory=list)


class PersonalInfo(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class DateRangeResult(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_valid: bool = False
    message: str = Field(default="", description="Diagnostics; may carry warnings even when valid")


class CareerGap(BaseModel):
    start: date
    end: date
    months: int


class CareerOverlap(BaseModel):
    start: date
    end: date
    months: int


class CareerAnalysis(BaseModel):
    total_experience_months: int = 0
    career_start_date: Optional[date] = None
    career_end_date: Optional[date] = None  # None = currently employed
    has_gaps: bool = False
    has_overlaps: bool = False
    gaps: List[CareerGap] = Field(default_factory=list)
    overlaps: List[CareerOverlap] = Field(default_factory=list)


class AnonymizationConfig(BaseModel):
    """Switches for the hybrid anonymizer. Use the presets rather than building by hand."""
    model_config = ConfigDict(frozen=True)

    include_cleaned_summary: bool = False
    remove_leaked_emails: bool = True
    remove_leaked_phones: bool = True
    remove_leaked_social_media: bool = True
    keep_unknown_sections: bool = False

    @classmethod
    def standard(cls) -> "AnonymizationConfig":
        return cls()

    @classmethod
    def conservative(cls) -> "AnonymizationConfig":
        return cls(include_cleaned_summary=True, keep_unknown_sections=True)

    @classmethod
    def aggressive(cls) -> "AnonymizationConfig":
        return cls(include_cleaned_summary=False, keep_unknown_sections=False)

    @classmethod
    def from_preset(cls, name: str) -> "AnonymizationConfig":
        presets = {
            "standard": cls.standard,
            "conservative": cls.conservative,
            "aggressive": cls.aggressive,
        }
        if name not in presets:
            raise ValueError(f"Unknown anonymization preset: {name!r}")
        return presets[name]()


class AnonymizationStats(BaseModel):
    original_sections: Set[str] = Field(default_factory=set)
    kept_sections: Set[str] = Field(default_factory=set)
    removed_sections: Set[str] = Field(default_factory=set)
    anonymized_items: List[str] = Field(default_factory=list)
    removed_summary_elements: List[str] = Field(default_factory=list)
    removed_character_count: int = 0

    @property
    def anonymization_ratio(self) -> float:
        if not self.original_sections:
            return 0.0
        return len(self.removed_sections) / len(self.original_sections)


class AnonymizationResult(BaseModel):
    anonymized_text: str
    stats: AnonymizationStats


class ParseResult(BaseModel):
    """Everything one manual parsing pass produces."""
    candidate: Candidate
    career_analysis: CareerAnalysis
    sections: List[str] = Field(default_factory=list, description="Canonical section keys detected")
    warnings: List[str] = Field(default_factory=list)


# ===== HTTP payloads =====

class ResumeExtractResponse(BaseModel):
    raw_text: str
    filename: Optional[str] = None


class ResumeParseRequest(BaseModel):
    raw_text: str = Field(..., description="Resume text, original or edited by a reviewer")
    anonymize: bool = Field(default=False, description="Run the hybrid anonymizer before parsing")
    preset: PresetName = "standard"


class ResumeAnonymizeRequest(BaseModel):
    raw_text: str
    preset: Optional[PresetName] = None  # falls back to settings


class AnonymizeResponse(BaseModel):
    anonymized_text: str
    stats: AnonymizationStats
    anonymization_ratio: float


class ParseResponse(BaseModel):
    candidate: Candidate
    career_analysis: CareerAnalysis
    sections: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    anonymized: bool = False
