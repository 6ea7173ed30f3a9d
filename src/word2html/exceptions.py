"""Custom exceptions for word2html."""


class Word2htmlError(Exception):
    """Base exception for word2html operations."""


class ParseError(Word2htmlError):
    """The HTML parser backend is missing or unknown."""


class InputError(Word2htmlError):
    """Input HTML could not be read."""


class FetchError(InputError):
    """Error while fetching input HTML from a URL."""
