"""word2html: normalize word-processor HTML into clean semantic HTML."""

from word2html.cleaner import CleanOptions, clean_document, clean_html
from word2html.exceptions import FetchError, InputError, ParseError, Word2htmlError
from word2html.schemas import CleanResult, SectionMarker
from word2html.sections import detect_section_markers

__all__ = [
    "CleanOptions",
    "CleanResult",
    "FetchError",
    "InputError",
    "ParseError",
    "SectionMarker",
    "Word2htmlError",
    "clean_document",
    "clean_html",
    "detect_section_markers",
]
