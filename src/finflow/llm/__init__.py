"""Gemini gateways."""
from .schemas import InsightReport, ExtractedRecord, FALLBACK_INSIGHT
from .insights import InsightGateway
from .extractor import ExtractionGateway

__all__ = ["InsightReport", "ExtractedRecord", "FALLBACK_INSIGHT", "InsightGateway", "ExtractionGateway"]
