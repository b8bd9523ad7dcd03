"""Data models and error types for website enrichment."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List


def utc_now_iso() -> str:
    """Current UTC instant as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class EnrichmentResult:
    """Structured company profile derived from a website.

    Created fresh per successful run and never mutated; callers own persistence.
    """

    summary: str
    bullets: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)
    signals: List[str] = field(default_factory=list)
    sources: List[str] = field(default_factory=list)
    timestamp: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> dict:
        """Convert to the JSON response body."""
        return {
            "summary": self.summary,
            "bullets": list(self.bullets),
            "keywords": list(self.keywords),
            "signals": list(self.signals),
            "sources": list(self.sources),
            "timestamp": self.timestamp,
        }


class EnrichmentError(Exception):
    """Base class for enricher failures."""


class BadModelResponse(EnrichmentError):
    """The model reply could not be parsed into a JSON object."""


class PipelineError(Exception):
    """A classified enrichment pipeline failure carrying a user-facing message."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(PipelineError):
    """Client-correctable: bad input, unreachable site, or thin content."""

    status_code = 400


class InternalFaultError(PipelineError):
    """Server-side: missing configuration, model failure, unparseable reply."""

    status_code = 500
