"""LLM-powered structured company profile from website text."""

import json
import re
from typing import Any, List

import structlog

from .interfaces import BadModelResponse, EnrichmentResult
from ..extraction.llm_client import LLMClient

logger = structlog.get_logger()

MIN_BULLETS = 3
MIN_KEYWORDS = 5
MIN_SIGNALS = 2

PLACEHOLDER_SUMMARY = "No summary available for this company."

# Filler entries appended, in order, when the model returns too few items
FALLBACK_BULLETS = [
    "Company information extracted from the public website",
    "Product and service details available on the company website",
    "Further details may be available on other pages of the site",
]
FALLBACK_KEYWORDS = [
    "Technology",
    "Startup",
    "Software",
    "Innovation",
    "Business",
]
FALLBACK_SIGNALS = [
    "Company website is active and reachable",
    "Public company information available online",
]

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def parse_model_reply(reply: str) -> dict:
    """Parse a model reply into a dict.

    Tries a direct parse first, then the first {...} span in the reply.
    Raises BadModelResponse when neither yields a JSON object.
    """
    try:
        data = json.loads(reply)
    except (TypeError, json.JSONDecodeError):
        match = _JSON_OBJECT.search(reply or "")
        if not match:
            raise BadModelResponse("Model response did not contain a JSON object")
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise BadModelResponse(f"Failed to parse model response as JSON: {e.msg}")

    if not isinstance(data, dict):
        raise BadModelResponse("Model response JSON is not an object")
    return data


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str) and item.strip()]


def _pad(values: List[str], minimum: int, filler: List[str]) -> List[str]:
    deficit = minimum - len(values)
    if deficit <= 0:
        return values
    return values + filler[:deficit]


def repair_shape(data: dict) -> dict:
    """Coerce and pad a parsed reply so it meets the minimum field counts. Never raises."""
    summary = data.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        summary = PLACEHOLDER_SUMMARY

    return {
        "summary": summary,
        "bullets": _pad(_string_list(data.get("bullets")), MIN_BULLETS, FALLBACK_BULLETS),
        "keywords": _pad(_string_list(data.get("keywords")), MIN_KEYWORDS, FALLBACK_KEYWORDS),
        "signals": _pad(_string_list(data.get("signals")), MIN_SIGNALS, FALLBACK_SIGNALS),
    }


class StructuredEnricher:
    """Turn extracted website text into an EnrichmentResult via the LLM."""

    ENRICHMENT_PROMPT = """Analyze the following content from a company website and produce a structured profile.

WEBSITE URL: {url}

WEBSITE CONTENT:
{content}

Return ONLY a valid JSON object (no markdown, no explanation) with exactly these fields:
{{
  "summary": "1-2 sentence summary of what the company does",
  "bullets": ["3-6 bullet points describing what they do"],
  "keywords": ["5-10 relevant keywords"],
  "signals": ["2-4 inferred signals about recent activity, e.g. careers page active, recent product launch"]
}}"""

    SYSTEM_PROMPT = (
        "You are a venture research analyst. You read company websites and "
        "summarize them accurately. Only use information present in the content. "
        "Always respond with a single JSON object."
    )

    TEMPERATURE = 0.3

    def __init__(self, llm_client: LLMClient = None):
        self.llm_client = llm_client or LLMClient()

    async def enrich(self, text: str, source_url: str) -> EnrichmentResult:
        """Summarize page text into a repaired EnrichmentResult.

        Raises ConfigurationError before any network call when no credential
        is configured, BadModelResponse when the reply is not JSON, and lets
        model call failures propagate.
        """
        self.llm_client.ensure_configured()

        prompt = self.ENRICHMENT_PROMPT.format(url=source_url, content=text)
        reply = await self.llm_client.complete(
            prompt=prompt,
            system=self.SYSTEM_PROMPT,
            temperature=self.TEMPERATURE,
            json_mode=True
        )

        try:
            data = parse_model_reply(reply)
        except BadModelResponse:
            logger.warning("model_reply_unparseable", url=source_url, reply=(reply or "")[:200])
            raise

        repaired = repair_shape(data)
        result = EnrichmentResult(
            summary=repaired["summary"],
            bullets=repaired["bullets"],
            keywords=repaired["keywords"],
            signals=repaired["signals"],
            sources=[source_url],
        )

        logger.info(
            "enrichment_complete",
            url=source_url,
            bullets=len(result.bullets),
            keywords=len(result.keywords),
            signals=len(result.signals)
        )
        return result
