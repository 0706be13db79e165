import pytest
from lxml import etree

from epub_metadata.core.exceptions import EpubMetadataValueError
from epub_metadata.opf.element import (
    OpfElement,
    qualified_attribute_name,
    qualified_element_name,
)
from tests.fixtures.opf import OpfMetadataFixture


@pytest.mark.parametrize(
    "tag, expected",
    [
        ("{http://purl.org/dc/elements/1.1/}title", "dc:title"),
        ("{http://purl.org/dc/terms/}modified", "dcterms:modified"),
        ("{http://www.idpf.org/2007/opf}meta", "meta"),
        ("meta", "meta"),
        ("dc:title", "dc:title"),
        ("{http://example.com/unknown}thing", "thing"),
    ],
)
def test_qualified_element_name(tag: str, expected: str):
    assert qualified_element_name(tag) == expected


@pytest.mark.parametrize(
    "name, expected",
    [
        ("{http://www.idpf.org/2007/opf}role", "opf:role"),
        ("{http://www.w3.org/XML/1998/namespace}lang", "xml:lang"),
        ("id", "id"),
        ("{http://example.com/unknown}thing", "thing"),
    ],
)
def test_qualified_attribute_name(name: str, expected: str):
    assert qualified_attribute_name(name) == expected


class TestOpfElement:
    def test_not_an_element(self):
        comment = etree.Comment("just a comment")
        with pytest.raises(EpubMetadataValueError) as excinfo:
            OpfElement(comment)
        assert "Expected an XML element" in str(excinfo.value)

        with pytest.raises(EpubMetadataValueError):
            OpfElement("<dc:title/>")  # type: ignore[arg-type]

    def test_name_text_and_attributes(self, opf_metadata_fixture: OpfMetadataFixture):
        metadata = opf_metadata_fixture.metadata(
            '<dc:creator id="c1" opf:role="aut" xml:lang="en">\n  Jane Doe\n</dc:creator>'
        )
        assert metadata.name == "metadata"

        creator = metadata.first("dc:creator")
        assert creator is not None
        assert creator.name == "dc:creator"
        assert creator.text == "Jane Doe"
        assert creator.attributes == {
            "id": "c1",
            "opf:role": "aut",
            "xml:lang": "en",
        }
        assert repr(creator) == "<OpfElement dc:creator>"

    def test_text_missing(self, opf_metadata_fixture: OpfMetadataFixture):
        metadata = opf_metadata_fixture.metadata("<dc:title/>")
        title = metadata.first("dc:title")
        assert title is not None
        assert title.text == ""

    def test_text_around_comments_and_markup(
        self, opf_metadata_fixture: OpfMetadataFixture
    ):
        metadata = opf_metadata_fixture.metadata(
            "<dc:title><!-- note -->Moby Dick</dc:title>"
            "<dc:description>A <b>whaling</b> voyage.<!-- end --></dc:description>"
        )
        title = metadata.first("dc:title")
        assert title is not None
        assert title.text == "Moby Dick"

        description = metadata.first("dc:description")
        assert description is not None
        assert description.text == "A whaling voyage."

    def test_children(self, opf_metadata_fixture: OpfMetadataFixture):
        metadata = opf_metadata_fixture.metadata(
            "<dc:title>One</dc:title>"
            "<!-- a comment -->"
            "<dc:creator>Two</dc:creator>"
            "<dc:title>Three</dc:title>"
            "<dc-metadata><dc:title>Nested</dc:title></dc-metadata>"
        )
        assert [e.text for e in metadata.children("dc:title")] == ["One", "Three"]
        assert [e.text for e in metadata.children("dc:title", "dc:creator")] == [
            "One",
            "Two",
            "Three",
        ]
        assert metadata.children("dc:language") == []

    def test_first(self, opf_metadata_fixture: OpfMetadataFixture):
        metadata = opf_metadata_fixture.metadata(
            "<!-- a comment --><dc:title>One</dc:title><dc:title>Two</dc:title>"
        )
        first = metadata.first("dc:title")
        assert first is not None
        assert first.text == "One"
        assert metadata.first("dc:language") is None

    def test_all_with_attributes(self, opf_metadata_fixture: OpfMetadataFixture):
        metadata = opf_metadata_fixture.metadata(
            '<meta property="role" refines="#c1">aut</meta>'
            '<meta property="role" refines="#c2">ill</meta>'
            '<link property="role" refines="#c1" href="x"/>'
            '<dc-metadata><meta property="role" refines="#c1">edt</meta></dc-metadata>'
        )
        matches = metadata.all_with_attributes(
            {"property": "role", "refines": "#c1"}
        )
        assert [m.name for m in matches] == ["meta", "link", "meta"]

        metas = metadata.all_with_attributes(
            {"property": "role", "refines": "#c1"}, name="meta"
        )
        assert [m.text for m in metas] == ["aut", "edt"]

        assert metadata.all_with_attributes({"property": "nothing"}) == []

    def test_all_with_attributes_namespaced(
        self, opf_metadata_fixture: OpfMetadataFixture
    ):
        metadata = opf_metadata_fixture.metadata(
            '<dc:creator opf:role="aut">One</dc:creator>'
            '<dc:creator role="aut">Two</dc:creator>'
        )
        [match] = metadata.all_with_attributes({"opf:role": "aut"})
        assert match.text == "One"

    def test_all_with_attributes_quotes(
        self, opf_metadata_fixture: OpfMetadataFixture
    ):
        # Values are bound as XPath variables rather than spliced into the
        # expression, so quotes in them are harmless.
        metadata = opf_metadata_fixture.metadata(
            "<meta property=\"it's &quot;quoted&quot;\">value</meta>"
        )
        [match] = metadata.all_with_attributes({"property": "it's \"quoted\""})
        assert match.text == "value"

    def test_all_with_no_attributes(self, opf_metadata_fixture: OpfMetadataFixture):
        metadata = opf_metadata_fixture.metadata(
            "<dc:title>One</dc:title><dc-metadata><meta>Two</meta></dc-metadata>"
        )
        assert [m.name for m in metadata.all_with_attributes({})] == [
            "dc:title",
            "dc-metadata",
            "meta",
        ]
