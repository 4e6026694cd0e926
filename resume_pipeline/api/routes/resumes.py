from fastapi import APIRouter, File, HTTPException, UploadFile

from resume_pipeline.core.anonymizer import anonymize
from resume_pipeline.core.document_extractor import DocumentExtractionError, extract_text
from resume_pipeline.core.orchestrator import parse_resume
from resume_pipeline.core.schemas import (
    AnonymizationConfig,
    AnonymizeResponse,
    ParseResponse,
    ResumeAnonymizeRequest,
    ResumeExtractResponse,
    ResumeParseRequest,
)
from resume_pipeline.core.settings import get_settings

router = APIRouter(prefix="/resumes", tags=["resumes"])


@router.post(
    "/upload",
    response_model=ResumeExtractResponse,
    summary="Extract Resume Text",
    description="Extract raw text from a resume file (DOCX, PDF, or TXT) for review before parsing.",
    responses={
        400: {"description": "Empty file uploaded"},
        413: {"description": "File too large"},
        415: {"description": "Unsupported file format"},
        422: {"description": "File has no extractable text"},
    },
)
async def upload_resume(
    file: UploadFile = File(..., description="Resume file (DOCX, PDF, or TXT format)")
):
    """
    Extract text from an uploaded resume.

    **Supported formats:**
    - DOCX (.docx)
    - PDF (.pdf) - Text-layer extraction only, OCR not supported
    - TXT (.txt, .md)
    """
    raw = await file.read()
    if not raw:
        raise HTTPException(status_code=400, detail="Empty file uploaded.")

    max_bytes = get_settings().max_upload_bytes
    if len(raw) > max_bytes:
        raise HTTPException(status_code=413, detail=f"File exceeds the {max_bytes} byte upload limit.")

    try:
        text = extract_text(raw, file.content_type, file.filename)
    except DocumentExtractionError as e:
        raise HTTPException(status_code=415 if e.unsupported else 422, detail=str(e)) from e

    return ResumeExtractResponse(raw_text=text, filename=file.filename)


@router.post(
    "/parse",
    response_model=ParseResponse,
    summary="Parse Resume Text",
    description="Rule-based extraction of candidate, work history and education from resume text, optionally anonymized first.",
    responses={400: {"description": "Empty resume text"}},
)
def parse_resume_text(request: ResumeParseRequest):
    """
    Parse resume text into a candidate profile.

    **Returns:**
    - **candidate**: name, email, phone, skills, work experiences, educations
    - **career_analysis**: total months of experience, gaps and overlaps
    - **sections**: canonical section keys detected
    - **warnings**: anything the parser had to skip
    """
    if not request.raw_text.strip():
        raise HTTPException(status_code=400, detail="raw_text is empty.")

    text = request.raw_text
    if request.anonymize:
        text = anonymize(text, AnonymizationConfig.from_preset(request.preset)).anonymized_text

    result = parse_resume(text)
    return ParseResponse(
        candidate=result.candidate,
        career_analysis=result.career_analysis,
        sections=result.sections,
        warnings=result.warnings,
        anonymized=request.anonymize,
    )


@router.post(
    "/anonymize",
    response_model=AnonymizeResponse,
    summary="Anonymize Resume Text",
    description="Remove personal sections and scrub leaked contact details from resume text.",
    responses={400: {"description": "Empty resume text"}},
)
def anonymize_resume_text(request: ResumeAnonymizeRequest):
    if not request.raw_text.strip():
        raise HTTPException(status_code=400, detail="raw_text is empty.")

    preset = request.preset or get_settings().default_anonymization_preset
    result = anonymize(request.raw_text, AnonymizationConfig.from_preset(preset))
    return AnonymizeResponse(
        anonymized_text=result.anonymized_text,
        stats=result.stats,
        anonymization_ratio=result.stats.anonymization_ratio,
    )
