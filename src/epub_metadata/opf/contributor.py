from __future__ import annotations

from enum import StrEnum

from frozendict import frozendict

from epub_metadata.opf.base import BaseOpfModel
from epub_metadata.opf.constants import OpfTags


class Contributor(BaseOpfModel):
    """A person or organization credited in a <dc:creator>, <dc:contributor> or <dc:publisher>."""

    name: str
    role: str | None = None
    sort_as: str | None = None


class ContributorRole(StrEnum):
    """
    The MARC relator codes that get their own list in the metadata.

    https://www.loc.gov/marc/relators/relaterm.html
    """

    AUTHOR = "aut"
    TRANSLATOR = "trl"
    ARTIST = "art"
    EDITOR = "edt"
    ILLUSTRATOR = "ill"
    COLORIST = "clr"
    NARRATOR = "nrt"
    PUBLISHER = "pbl"


class ContributorBucket(StrEnum):
    """The list in the metadata record a contributor is filed under."""

    AUTHORS = "authors"
    TRANSLATORS = "translators"
    ARTISTS = "artists"
    EDITORS = "editors"
    ILLUSTRATORS = "illustrators"
    COLORISTS = "colorists"
    NARRATORS = "narrators"
    PUBLISHERS = "publishers"
    CONTRIBUTORS = "contributors"

    @classmethod
    def for_role(cls, role: str | None, element_name: str) -> ContributorBucket:
        """
        Pick the bucket for a contributor.

        A role always decides, through ROLE_BUCKETS, and unknown roles go to
        the generic contributors list. Only when there is no role at all
        does the element itself matter: creators are authors, publishers
        are publishers, everyone else is a contributor.
        """
        if role is not None:
            return ROLE_BUCKETS.get(role, cls.CONTRIBUTORS)
        return ELEMENT_BUCKETS.get(element_name, cls.CONTRIBUTORS)


ROLE_BUCKETS: frozendict[str, ContributorBucket] = frozendict(
    {
        ContributorRole.AUTHOR: ContributorBucket.AUTHORS,
        ContributorRole.TRANSLATOR: ContributorBucket.TRANSLATORS,
        ContributorRole.ARTIST: ContributorBucket.ARTISTS,
        ContributorRole.EDITOR: ContributorBucket.EDITORS,
        ContributorRole.ILLUSTRATOR: ContributorBucket.ILLUSTRATORS,
        ContributorRole.COLORIST: ContributorBucket.COLORISTS,
        ContributorRole.NARRATOR: ContributorBucket.NARRATORS,
        ContributorRole.PUBLISHER: ContributorBucket.PUBLISHERS,
    }
)

ELEMENT_BUCKETS: frozendict[str, ContributorBucket] = frozendict(
    {
        OpfTags.CREATOR: ContributorBucket.AUTHORS,
        OpfTags.PUBLISHER: ContributorBucket.PUBLISHERS,
    }
)
