"""Schemas for word2html."""

from word2html.schemas.cleaning import CleanResult
from word2html.schemas.sections import SectionMarker

__all__ = ["CleanResult", "SectionMarker"]
