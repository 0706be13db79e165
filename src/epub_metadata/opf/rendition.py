from __future__ import annotations

from enum import StrEnum
from typing import Self

from epub_metadata.opf.base import BaseMutableOpfModel


class RenditionValue(StrEnum):
    """A closed set of values for one of the rendition:* properties."""

    @classmethod
    def from_value(cls, value: str | None) -> Self | None:
        """
        Return the member whose value is exactly `value`, or None if there
        isn't one. Unknown values are not an error.
        """
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class RenditionLayout(RenditionValue):
    reflowable = "reflowable"
    pre_paginated = "pre-paginated"


class RenditionFlow(RenditionValue):
    paginated = "paginated"
    scrolled_continuous = "scrolled-continuous"
    scrolled_doc = "scrolled-doc"
    auto = "auto"


class RenditionOrientation(RenditionValue):
    landscape = "landscape"
    portrait = "portrait"
    auto = "auto"


class RenditionSpread(RenditionValue):
    none = "none"
    landscape = "landscape"
    portrait = "portrait"
    both = "both"
    auto = "auto"


class Rendition(BaseMutableOpfModel):
    """
    Presentation hints for the publication.

    https://www.w3.org/TR/epub-33/#sec-rendering-control
    """

    layout: RenditionLayout | None = None
    flow: RenditionFlow | None = None
    orientation: RenditionOrientation | None = None
    spread: RenditionSpread | None = None
    viewport: str | None = None
