"""Data ingestion - fetching company websites."""

from .interfaces import FetchError, UnreachableUrl, FetchNotOk, FetcherInterface
from .fetcher import PageFetcher, normalize_url, is_valid_url

__all__ = [
    "FetchError", "UnreachableUrl", "FetchNotOk", "FetcherInterface",
    "PageFetcher", "normalize_url", "is_valid_url"
]
