from __future__ import annotations

from collections.abc import Mapping
from functools import cached_property
from typing import TYPE_CHECKING

from lxml import etree

from epub_metadata.core.exceptions import EpubMetadataValueError
from epub_metadata.opf.constants import OpfNamespaces
from epub_metadata.util.xmlparser import XMLParser

if TYPE_CHECKING:
    from lxml.etree import _Element


def _split_clark(name: str) -> tuple[str | None, str]:
    """Split a '{namespace}local' name into its namespace and local part."""
    if name.startswith("{"):
        namespace, _, local = name[1:].partition("}")
        return namespace, local
    return None, name


def qualified_element_name(tag: str) -> str:
    """Name an element the way it is written in a package document.

    Dublin Core elements become 'dc:title', OPF and un-namespaced elements
    keep their bare local name. A recovering parser leaves undeclared
    prefixes in the tag itself, so 'dc:title' passes through unchanged.
    """
    namespace, local = _split_clark(tag)
    if namespace is None or namespace == OpfNamespaces.OPF:
        return local
    prefix = OpfNamespaces.PREFIXES.get(namespace)
    return f"{prefix}:{local}" if prefix else local


def qualified_attribute_name(name: str) -> str:
    """Name an attribute the way it is written in a package document ('opf:role')."""
    namespace, local = _split_clark(name)
    if namespace is None:
        return local
    prefix = OpfNamespaces.PREFIXES.get(namespace)
    return f"{prefix}:{local}" if prefix else local


class OpfElement(XMLParser):
    """Read-only query interface over one element of a package document.

    Children keep document order, and every query returns elements in
    document order.
    """

    NAMESPACES = OpfNamespaces.NAMESPACES

    def __init__(self, element: _Element) -> None:
        if not isinstance(element, etree._Element) or not isinstance(
            element.tag, str
        ):
            raise EpubMetadataValueError(
                f"Expected an XML element, got {element!r} instead."
            )
        self.element = element

    def __repr__(self) -> str:
        return f"<OpfElement {self.name}>"

    @cached_property
    def name(self) -> str:
        return qualified_element_name(self.element.tag)

    @property
    def text(self) -> str:
        """The element's text content, trimmed. Empty if there is none.

        This is every text node under the element joined together, so
        comments and inline markup don't cut the text short.
        """
        return str(self.element.xpath("string()")).strip()

    @cached_property
    def attributes(self) -> dict[str, str]:
        return {
            qualified_attribute_name(key): value
            for key, value in self.element.attrib.items()
        }

    def children(self, *names: str) -> list[OpfElement]:
        """All direct children with any of the given names, in document order."""
        return [
            OpfElement(child)
            for child in self.element.iterchildren(tag=etree.Element)
            if qualified_element_name(child.tag) in names
        ]

    def first(self, name: str) -> OpfElement | None:
        for child in self.element.iterchildren(tag=etree.Element):
            if qualified_element_name(child.tag) == name:
                return OpfElement(child)
        return None

    def all_with_attributes(
        self, attributes: Mapping[str, str], name: str | None = None
    ) -> list[OpfElement]:
        """All descendants whose attributes match every name/value pair.

        :param attributes: Attribute names, written as they are in the
            document ('property', 'opf:role'), mapped to the exact value
            each must have.
        :param name: If given, only descendants with this element name
            are returned.
        """
        predicates = []
        variables = {}
        for index, (attribute, value) in enumerate(attributes.items()):
            variable = f"v{index}"
            predicates.append(f"@{attribute}=${variable}")
            variables[variable] = value

        expression = ".//*"
        if predicates:
            expression += "[" + " and ".join(predicates) + "]"

        matches = [
            OpfElement(element)
            for element in self._xpath(self.element, expression, **variables)
        ]
        if name is None:
            return matches
        return [match for match in matches if match.name == name]
