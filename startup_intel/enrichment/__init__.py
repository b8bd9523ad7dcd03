"""Website enrichment - structured company profiles from a single page fetch."""

from .interfaces import (
    EnrichmentResult, EnrichmentError, BadModelResponse,
    PipelineError, BadRequestError, InternalFaultError
)
from .enricher import StructuredEnricher, parse_model_reply, repair_shape
from .pipeline import EnrichmentPipeline

__all__ = [
    "EnrichmentResult", "EnrichmentError", "BadModelResponse",
    "PipelineError", "BadRequestError", "InternalFaultError",
    "StructuredEnricher", "parse_model_reply", "repair_shape",
    "EnrichmentPipeline",
]
