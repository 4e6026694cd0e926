import logging.config

from resume_pipeline.core.settings import get_settings


def build_logging_config(level: str) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
            },
        },
        "handlers": {
            "default": {
                "level": level,
                "formatter": "standard",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "": {  # root logger
                "handlers": ["default"],
                "level": level,
                "propagate": True,
            },
            "pdfminer": {
                "level": "WARNING",
                "propagate": False,
            },
            "resume_pipeline": {
                "level": level,
                "propagate": True,
            },
        },
    }


def setup_logging() -> None:
    """Configure logging for the service."""
    logging.config.dictConfig(build_logging_config(get_settings().log_level.upper()))
