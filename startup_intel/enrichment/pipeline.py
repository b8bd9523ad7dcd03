"""Enrichment pipeline: fetch -> extract -> enrich, with failure classification."""

import time

import structlog

from .enricher import StructuredEnricher
from .interfaces import BadRequestError, EnrichmentResult, InternalFaultError
from ..config.settings import settings
from ..extraction.text_extractor import TextExtractor
from ..ingestion.fetcher import PageFetcher, is_valid_url, normalize_url
from ..ingestion.interfaces import FetcherInterface, FetchError

logger = structlog.get_logger()

THIN_CONTENT_MESSAGE = "Failed to extract meaningful content from the website."
GENERIC_ENRICH_ERROR = "Failed to enrich company data"


class EnrichmentPipeline:
    """Run one enrichment request end to end.

    Steps are strictly sequential and nothing is retried. Every failure is
    logged and re-raised as either BadRequestError (client-correctable) or
    InternalFaultError (server-side).
    """

    def __init__(
        self,
        fetcher: FetcherInterface = None,
        extractor: TextExtractor = None,
        enricher: StructuredEnricher = None,
        min_content_chars: int = None,
    ):
        self.fetcher = fetcher or PageFetcher()
        self.extractor = extractor or TextExtractor()
        self.enricher = enricher or StructuredEnricher()
        self.min_content_chars = (
            min_content_chars if min_content_chars is not None else settings.min_content_chars
        )

    async def run(self, url: str) -> EnrichmentResult:
        start_time = time.time()

        if not isinstance(url, str) or not url.strip():
            logger.warning("enrich_rejected", reason="missing_url")
            raise BadRequestError("Missing required field: url")
        if not is_valid_url(url):
            logger.warning("enrich_rejected", reason="invalid_url", url=url)
            raise BadRequestError(f"Invalid URL: {url}")

        url = normalize_url(url)

        try:
            html = await self.fetcher.fetch(url)
        except FetchError as e:
            logger.warning("enrich_fetch_failed", url=url, error=e.message)
            raise BadRequestError(e.message)

        text = self.extractor.extract(html)
        if len(text.strip()) < self.min_content_chars:
            logger.warning("enrich_thin_content", url=url, chars=len(text.strip()))
            raise BadRequestError(THIN_CONTENT_MESSAGE)

        try:
            result = await self.enricher.enrich(text, url)
        except Exception as e:
            logger.error("enrich_model_failed", url=url, error=str(e), error_type=type(e).__name__)
            raise InternalFaultError(str(e) or GENERIC_ENRICH_ERROR)

        logger.info(
            "enrich_succeeded",
            url=url,
            chars=len(text),
            elapsed_ms=int((time.time() - start_time) * 1000)
        )
        return result
