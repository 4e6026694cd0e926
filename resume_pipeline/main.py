from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from resume_pipeline.api.routes.resumes import router as resumes_router
from resume_pipeline.core.logging_config import setup_logging
from resume_pipeline.core.settings import get_settings

setup_logging()

app = FastAPI(
    title="Resume Pipeline (Resume Text Understanding Service)",
    description="Deterministic resume parsing: section splitting, date ranges, work history and education extraction, hybrid anonymization",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

app.include_router(resumes_router)

@app.get("/", tags=["health"])
def root():
    return {"service": "resume-pipeline", "status": "running"}

@app.get("/health", tags=["health"])
def health():
    settings = get_settings()
    return {
        "status": "ok",
        "default_anonymization_preset": settings.default_anonymization_preset,
        "max_upload_bytes": settings.max_upload_bytes,
    }

def custom_openapi():
    """Generate OpenAPI schema with custom settings."""
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="Resume Pipeline API",
        version="0.1.0",
        description="Rule-based resume parsing and anonymization API",
        routes=app.routes,
    )
    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi
