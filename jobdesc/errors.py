"""Typed failures of a single fetch-and-extract attempt.

Every error here is terminal and user-facing: the message is meant to be shown
as-is.  Nothing is retried internally; retry policy belongs to the caller.
"""

from __future__ import annotations


class ExtractionError(RuntimeError):
    """Base class for all job-description fetch/extraction failures."""


class ManualInputRequired(ExtractionError):
    """Raised when the URL cannot be fetched (non-http(s) scheme)."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__("Job description must be provided manually for this job.")


class FetchFailed(ExtractionError):
    """Raised when the HTTP layer fails.  The ``httpx`` error is chained."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        super().__init__(f"Failed to retrieve job description: {reason}")


class GenericRedirectDetected(ExtractionError):
    """Raised when the site redirected a job link to a generic listing page."""

    def __init__(self, original_url: str, effective_url: str) -> None:
        self.original_url = original_url
        self.effective_url = effective_url
        super().__init__(
            "The site redirected to a generic careers page. Some job boards rely on "
            "query parameters that are stripped when accessed without a browser "
            "session. Try using a direct job posting link (e.g., a 'View job' or "
            "'Print view' URL) or copy the job description text and paste it manually."
        )


class EmptyDescription(ExtractionError):
    """Raised when every extraction strategy came back empty."""

    def __init__(self) -> None:
        super().__init__("Job description appears to be empty.")
