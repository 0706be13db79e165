from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from lxml import etree

from epub_metadata.opf.constants import (
    OpfAttributes,
    OpfNamespaces,
    OpfProperties,
    OpfTags,
)
from epub_metadata.opf.contributor import Contributor, ContributorBucket
from epub_metadata.opf.element import OpfElement
from epub_metadata.opf.metadata import Metadata, Subject
from epub_metadata.opf.rendition import (
    RenditionFlow,
    RenditionLayout,
    RenditionOrientation,
    RenditionSpread,
    RenditionValue,
)
from epub_metadata.service.logging.configuration import LogLevel
from epub_metadata.util.log import LoggerMixin, log_elapsed_time, pluralize
from epub_metadata.util.xmlparser import XMLProcessor

if TYPE_CHECKING:
    from lxml.etree import _Element, _ElementTree


class MetadataParser(XMLProcessor[Metadata], LoggerMixin):
    """Read the <metadata> element of an OPF package document into a Metadata record.

    Each parse_* / set_* method stands on its own: none of them reads
    anything another one wrote, so they can be called in any order. None
    of them raise on missing or unexpected data; absent data stays absent.
    """

    NAMESPACES = OpfNamespaces.NAMESPACES

    # Metadata field, property name and the values that property may take.
    RENDITION_PROPERTIES: tuple[tuple[str, str, type[RenditionValue]], ...] = (
        ("layout", OpfProperties.LAYOUT, RenditionLayout),
        ("flow", OpfProperties.FLOW, RenditionFlow),
        ("orientation", OpfProperties.ORIENTATION, RenditionOrientation),
        ("spread", OpfProperties.SPREAD, RenditionSpread),
    )

    CONTRIBUTOR_TAGS = (OpfTags.CREATOR, OpfTags.CONTRIBUTOR, OpfTags.PUBLISHER)

    @property
    def xpath_expression(self) -> str:
        # Package documents are expected to use the OPF namespace, but
        # plenty in the wild don't declare it.
        return "/*[local-name()='package']"

    @log_elapsed_time(
        log_level=LogLevel.debug,
        message_prefix="Parsing package metadata",
        skip_start=True,
    )
    def parse(self, xml: str | bytes | _ElementTree) -> Metadata:
        """Parse a whole package document.

        :param xml: The package document markup, or a tree that has
            already been parsed.
        """
        try:
            metadata = self.process_first(xml)
        except etree.XMLSyntaxError as e:
            # Even in recover mode lxml gives up on a document with no
            # markup at all.
            self.log.warning(f"Document could not be parsed as XML: {e}")
            return Metadata()
        if metadata is None:
            self.log.warning("Document has no <package> element.")
            return Metadata()
        return metadata

    def process_one(
        self, tag: _Element, namespaces: dict[str, str] | None
    ) -> Metadata:
        package = OpfElement(tag)
        metadata = Metadata()

        metadata_element = package.first(OpfTags.METADATA)
        if metadata_element is None:
            self.log.warning("Package document has no <metadata> element.")
            return metadata

        epub_version = self.parse_epub_version(package.attributes)

        metadata.title = self.parse_main_title(metadata_element, epub_version)
        metadata.identifier = self.parse_unique_identifier(
            metadata_element, package.attributes
        )
        self.set_rendition_properties(metadata_element, metadata)

        metadata.languages = self.parse_languages(metadata_element)
        metadata.description = self.parse_description(metadata_element)
        metadata.published = self.parse_published(metadata_element)
        metadata.modified = self.parse_modified(metadata_element)
        metadata.rights = self.parse_rights(metadata_element)
        metadata.source = self.parse_source(metadata_element)
        metadata.subjects = self.parse_subjects(metadata_element, epub_version)

        elements = metadata_element.children(*self.CONTRIBUTOR_TAGS)
        for element in elements:
            self.parse_contributor(element, metadata_element, metadata, epub_version)
        self.log.debug(f"Found {pluralize(len(elements), 'contributor')}.")

        return metadata

    def parse_epub_version(self, package_attributes: Mapping[str, str]) -> float | None:
        """The version declared on <package>, or None if it's missing or not a number."""
        version = package_attributes.get(OpfAttributes.VERSION)
        if version is None:
            return None
        try:
            return float(version)
        except ValueError:
            self.log.debug(f"Ignoring unparseable package version {version!r}.")
            return None

    def set_rendition_properties(
        self, metadata_element: OpfElement, metadata: Metadata
    ) -> None:
        """Fill in metadata.rendition from the rendition:* properties.

        The first element carrying each property wins. A value outside the
        property's vocabulary leaves the field unset.
        """
        rendition = metadata.rendition
        for field, property_name, values in self.RENDITION_PROPERTIES:
            raw = self._property_value(metadata_element, property_name)
            if raw is None:
                continue
            value = values.from_value(raw)
            if value is None:
                self.log.debug(f"Ignoring unknown {property_name} value {raw!r}.")
            setattr(rendition, field, value)

        viewport = self._property_value(metadata_element, OpfProperties.VIEWPORT)
        if viewport is not None:
            rendition.viewport = viewport

    def parse_main_title(
        self, metadata_element: OpfElement, epub_version: float | None
    ) -> str | None:
        """Get the main title of the publication.

        With several titles in an EPUB 3 document, the main one is the
        first title refined with title-type 'main'. If none of them is,
        there is no main title, even though titles exist.
        """
        titles = metadata_element.children(OpfTags.TITLE)
        if not titles:
            return None

        if len(titles) == 1 or epub_version != 3:
            return titles[0].text

        for title in titles:
            if self._is_main_title(title, metadata_element):
                return title.text

        self.log.debug(
            f"None of the {len(titles)} titles is refined as the main title."
        )
        return None

    def _is_main_title(self, title: OpfElement, metadata_element: OpfElement) -> bool:
        title_id = title.attributes.get(OpfAttributes.ID)
        if title_id is None:
            return False
        return any(
            meta.text == OpfProperties.MAIN_TITLE
            for meta in self._refinements(
                metadata_element, OpfProperties.TITLE_TYPE, title_id
            )
        )

    def parse_unique_identifier(
        self, metadata_element: OpfElement, package_attributes: Mapping[str, str]
    ) -> str | None:
        """Get the identifier named by the package's unique-identifier attribute.

        Falls back to the first <dc:identifier> when there is only one, or
        when none of them has the named id.
        """
        identifiers = metadata_element.children(OpfTags.IDENTIFIER)
        if not identifiers:
            return None

        unique_id = package_attributes.get(OpfAttributes.UNIQUE_IDENTIFIER)
        if len(identifiers) > 1 and unique_id is not None:
            for identifier in identifiers:
                if identifier.attributes.get(OpfAttributes.ID) == unique_id:
                    return identifier.text
            self.log.debug(
                f"No <dc:identifier> has the unique-identifier id {unique_id!r}."
            )

        return identifiers[0].text

    def create_contributor(
        self,
        element: OpfElement,
        metadata_element: OpfElement,
        epub_version: float | None,
    ) -> Contributor:
        """Build a Contributor from a <dc:creator>, <dc:contributor> or <dc:publisher>.

        In EPUB 3 a <meta property="role"> refining the element takes
        precedence over its opf:role attribute.
        """
        attributes = element.attributes
        role = attributes.get(OpfAttributes.ROLE)
        sort_as = attributes.get(OpfAttributes.FILE_AS)

        element_id = attributes.get(OpfAttributes.ID)
        if epub_version == 3 and element_id is not None:
            refined_role = self._first_refinement(
                metadata_element, OpfProperties.ROLE, element_id
            )
            if refined_role is not None:
                role = refined_role.text

        return Contributor(name=element.text, role=role, sort_as=sort_as)

    def parse_contributor(
        self,
        element: OpfElement,
        metadata_element: OpfElement,
        metadata: Metadata,
        epub_version: float | None,
    ) -> None:
        """Build a Contributor and file it under the list its role calls for."""
        contributor = self.create_contributor(element, metadata_element, epub_version)
        bucket = ContributorBucket.for_role(contributor.role, element.name)
        metadata.add_contributor(contributor, bucket)

    def parse_languages(self, metadata_element: OpfElement) -> list[str]:
        return [
            language.text
            for language in metadata_element.children(OpfTags.LANGUAGE)
            if language.text
        ]

    def parse_description(self, metadata_element: OpfElement) -> str | None:
        return self._first_text(metadata_element, OpfTags.DESCRIPTION)

    def parse_published(self, metadata_element: OpfElement) -> str | None:
        """The publication date, as written.

        EPUB 2 documents may carry several <dc:date> elements told apart by
        opf:event; the 'publication' one is preferred.
        """
        dates = metadata_element.children(OpfTags.DATE)
        for date in dates:
            if (
                date.attributes.get(OpfAttributes.EVENT)
                == OpfProperties.PUBLICATION_EVENT
            ):
                return date.text
        return dates[0].text if dates else None

    def parse_modified(self, metadata_element: OpfElement) -> str | None:
        return self._property_value(metadata_element, OpfProperties.MODIFIED)

    def parse_rights(self, metadata_element: OpfElement) -> str | None:
        return self._first_text(metadata_element, OpfTags.RIGHTS)

    def parse_source(self, metadata_element: OpfElement) -> str | None:
        return self._first_text(metadata_element, OpfTags.SOURCE)

    def parse_subjects(
        self, metadata_element: OpfElement, epub_version: float | None
    ) -> list[Subject]:
        subjects = []
        for element in metadata_element.children(OpfTags.SUBJECT):
            if not element.text:
                continue

            attributes = element.attributes
            scheme = attributes.get(OpfAttributes.AUTHORITY)
            code = attributes.get(OpfAttributes.TERM)

            element_id = attributes.get(OpfAttributes.ID)
            if epub_version == 3 and element_id is not None:
                authority = self._first_refinement(
                    metadata_element, OpfProperties.AUTHORITY, element_id
                )
                if authority is not None:
                    scheme = authority.text
                term = self._first_refinement(
                    metadata_element, OpfProperties.TERM, element_id
                )
                if term is not None:
                    code = term.text

            subjects.append(Subject(name=element.text, scheme=scheme, code=code))
        return subjects

    @staticmethod
    def _first_text(metadata_element: OpfElement, name: str) -> str | None:
        element = metadata_element.first(name)
        return element.text if element is not None else None

    @staticmethod
    def _property_value(
        metadata_element: OpfElement, property_name: str
    ) -> str | None:
        """Text of the first element in the tree carrying property=`property_name`."""
        matches = metadata_element.all_with_attributes(
            {OpfAttributes.PROPERTY: property_name}
        )
        return matches[0].text if matches else None

    @staticmethod
    def _refinements(
        metadata_element: OpfElement, property_name: str, element_id: str
    ) -> list[OpfElement]:
        """Every <meta> with the given property that refines the element with id `element_id`."""
        return metadata_element.all_with_attributes(
            {
                OpfAttributes.PROPERTY: property_name,
                OpfAttributes.REFINES: f"#{element_id}",
            },
            name=OpfTags.META,
        )

    @classmethod
    def _first_refinement(
        cls, metadata_element: OpfElement, property_name: str, element_id: str
    ) -> OpfElement | None:
        refinements = cls._refinements(metadata_element, property_name, element_id)
        return refinements[0] if refinements else None
