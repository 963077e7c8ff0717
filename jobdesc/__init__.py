"""jobdesc — job posting content extraction and Markdown conversion."""

from jobdesc.errors import (
    EmptyDescription,
    ExtractionError,
    FetchFailed,
    GenericRedirectDetected,
    ManualInputRequired,
)
from jobdesc.scraper import extract, fetch_job_description

__all__ = [
    "extract",
    "fetch_job_description",
    "ExtractionError",
    "ManualInputRequired",
    "FetchFailed",
    "GenericRedirectDetected",
    "EmptyDescription",
]
