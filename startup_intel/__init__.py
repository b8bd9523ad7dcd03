"""Startup Intel - company research catalog and website enrichment service."""

__version__ = "0.1.0"
