from __future__ import annotations


class OpfNamespaces:
    OPF = "http://www.idpf.org/2007/opf"
    DC = "http://purl.org/dc/elements/1.1/"
    DCTERMS = "http://purl.org/dc/terms/"
    XML = "http://www.w3.org/XML/1998/namespace"

    # Prefixes used when naming elements and attributes. Elements in the
    # OPF namespace are named without a prefix, the way they appear in a
    # package document that declares OPF as its default namespace.
    PREFIXES = {
        OPF: "opf",
        DC: "dc",
        DCTERMS: "dcterms",
        XML: "xml",
    }

    NAMESPACES = {prefix: uri for uri, prefix in PREFIXES.items()}


class OpfTags:
    PACKAGE = "package"
    METADATA = "metadata"
    META = "meta"

    TITLE = "dc:title"
    IDENTIFIER = "dc:identifier"
    CREATOR = "dc:creator"
    CONTRIBUTOR = "dc:contributor"
    PUBLISHER = "dc:publisher"
    LANGUAGE = "dc:language"
    DESCRIPTION = "dc:description"
    DATE = "dc:date"
    RIGHTS = "dc:rights"
    SOURCE = "dc:source"
    SUBJECT = "dc:subject"


class OpfAttributes:
    ID = "id"
    PROPERTY = "property"
    REFINES = "refines"
    VERSION = "version"
    UNIQUE_IDENTIFIER = "unique-identifier"

    ROLE = "opf:role"
    FILE_AS = "opf:file-as"
    AUTHORITY = "opf:authority"
    TERM = "opf:term"
    EVENT = "opf:event"


class OpfProperties:
    LAYOUT = "rendition:layout"
    FLOW = "rendition:flow"
    ORIENTATION = "rendition:orientation"
    SPREAD = "rendition:spread"
    VIEWPORT = "rendition:viewport"

    TITLE_TYPE = "title-type"
    ROLE = "role"
    AUTHORITY = "authority"
    TERM = "term"
    MODIFIED = "dcterms:modified"

    MAIN_TITLE = "main"
    PUBLICATION_EVENT = "publication"
