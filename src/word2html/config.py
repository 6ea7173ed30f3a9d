"""Local configuration for word2html."""

from __future__ import annotations

import os
from typing import Final

DEFAULT_PARSER = "html5lib"
DEFAULT_FETCH_TIMEOUT_S = 10.0
DEFAULT_FETCH_MAX_RETRIES = 2
DEFAULT_FETCH_BACKOFF_S = 0.5
DEFAULT_USER_AGENT = "word2html/0.1"

WORD2HTML_PARSER = os.getenv("WORD2HTML_PARSER", DEFAULT_PARSER)
WORD2HTML_VERBOSE = os.getenv("WORD2HTML_VERBOSE", "false").lower() in {"1", "true", "yes"}
WORD2HTML_FETCH_TIMEOUT_S = float(os.getenv("WORD2HTML_FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S)))
WORD2HTML_FETCH_MAX_RETRIES = int(os.getenv("WORD2HTML_FETCH_MAX_RETRIES", str(DEFAULT_FETCH_MAX_RETRIES)))
WORD2HTML_FETCH_BACKOFF_S = float(os.getenv("WORD2HTML_FETCH_BACKOFF_S", str(DEFAULT_FETCH_BACKOFF_S)))
WORD2HTML_USER_AGENT = os.getenv("WORD2HTML_USER_AGENT", DEFAULT_USER_AGENT)

# Iteration caps for the fixed-point passes.
NESTING_REPAIR_MAX_ITERATIONS: Final[int] = 10
EMPTY_TAG_MAX_ITERATIONS: Final[int] = 5

# Reversed-document detection thresholds.
REORDER_MIN_CONTENT_BEFORE_LAST_H1: Final[int] = 5
REORDER_TAIL_FRACTION: Final[float] = 0.1
REORDER_TAIL_MIN_CHILDREN: Final[int] = 10
REORDER_CONTENT_FRACTION: Final[float] = 0.3
REORDER_CONTENT_MIN: Final[int] = 10

# Legacy <b> wrapper heuristics.
BOLD_WRAPPER_MAX_CONTEXT: Final[int] = 50
BOLD_WRAPPER_MIN_CONTENT: Final[int] = 100
