from __future__ import annotations

from collections.abc import Generator

from pydantic import Field

from epub_metadata.opf.base import BaseMutableOpfModel, BaseOpfModel
from epub_metadata.opf.contributor import Contributor, ContributorBucket
from epub_metadata.opf.rendition import Rendition


class Subject(BaseOpfModel):
    name: str
    scheme: str | None = None
    code: str | None = None


class Metadata(BaseMutableOpfModel):
    """
    Publication metadata read from the <metadata> element of a package document.

    Every contributor list keeps document order.
    """

    title: str | None = None
    identifier: str | None = None
    rendition: Rendition = Field(default_factory=Rendition)

    languages: list[str] = Field(default_factory=list)
    description: str | None = None
    published: str | None = None
    modified: str | None = None
    rights: str | None = None
    source: str | None = None
    subjects: list[Subject] = Field(default_factory=list)

    authors: list[Contributor] = Field(default_factory=list)
    translators: list[Contributor] = Field(default_factory=list)
    artists: list[Contributor] = Field(default_factory=list)
    editors: list[Contributor] = Field(default_factory=list)
    illustrators: list[Contributor] = Field(default_factory=list)
    colorists: list[Contributor] = Field(default_factory=list)
    narrators: list[Contributor] = Field(default_factory=list)
    publishers: list[Contributor] = Field(default_factory=list)
    contributors: list[Contributor] = Field(default_factory=list)

    def add_contributor(
        self, contributor: Contributor, bucket: ContributorBucket
    ) -> None:
        self.bucket(bucket).append(contributor)

    def bucket(self, bucket: ContributorBucket) -> list[Contributor]:
        contributors: list[Contributor] = getattr(self, bucket.value)
        return contributors

    def contributors_by_bucket(
        self,
    ) -> Generator[tuple[ContributorBucket, list[Contributor]], None, None]:
        for bucket in ContributorBucket:
            yield bucket, self.bucket(bucket)
