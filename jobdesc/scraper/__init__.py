"""Scraper package — job page fetch & Markdown extraction."""

from jobdesc.scraper.extractor import extract, fetch_job_description
from jobdesc.scraper.fetcher import fetch_page
from jobdesc.scraper.models import CandidateOrigin, ExtractionCandidate, FetchedPage

__all__ = [
    "extract",
    "fetch_job_description",
    "fetch_page",
    "FetchedPage",
    "ExtractionCandidate",
    "CandidateOrigin",
]
