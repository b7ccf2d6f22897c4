"""Deterministic structured-content extraction."""

from lightpoint.extraction.extractor import PatternExtractor

__all__ = ["PatternExtractor"]
