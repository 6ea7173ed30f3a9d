"""Section marker model for cleaned documents."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

SectionKind = Literal["key_takeaways", "faq", "read_also", "sources"]


class SectionMarker(BaseModel):
    """A recognized section boundary in cleaned HTML.

    Attributes:
        kind: Which section the element opens.
        tag: Tag name of the marker element.
        index: Position of the element among the document's top-level elements.
        text: Normalized text of the marker element.
    """

    kind: SectionKind
    tag: str
    index: int
    text: str
