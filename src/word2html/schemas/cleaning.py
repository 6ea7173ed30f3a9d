"""Result model for a cleaning run."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CleanResult(BaseModel):
    """Cleaned HTML together with what the pipeline did to produce it.

    Attributes:
        html: The formatted, cleaned HTML.
        reordered: Whether the document was detected as upside down and reversed.
        stages: Names of the pipeline stages that ran, in order.
        top_level_tags: Tag names of the output's top-level elements, in order.
    """

    html: str
    reordered: bool = False
    stages: list[str] = Field(default_factory=list)
    top_level_tags: list[str] = Field(default_factory=list)
