from collections.abc import Callable

import docx
import pytest
from docx.opc.constants import CONTENT_TYPE as CT
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.opc.package import OpcPackage
from docx.opc.packuri import PackURI
from docx.opc.part import Part, XmlPart
from docx.oxml.ns import nsdecls
from docx.oxml.parser import parse_xml
from lxml import etree

from docx_codegen.config import SerializeSettings
from docx_codegen.core.context import TraversalContext
from docx_codegen.core.document_graph import DocumentGraph

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"

HEADER_XML = (
    f'<w:hdr {nsdecls("w", "r")}><w:p><w:r><w:t>Header</w:t></w:r></w:p></w:hdr>'
)


@pytest.fixture
def make_element() -> Callable[[str], etree._Element]:
    """Parse a WordprocessingML fragment; ``w`` and ``r`` prefixes are declared."""

    def _make_element(xml: str) -> etree._Element:
        tag_end = xml.index(">")
        if xml[tag_end - 1] == "/":
            tag_end -= 1
        declared = f'{xml[:tag_end]} {nsdecls("w", "r")}{xml[tag_end:]}'
        return parse_xml(declared)

    return _make_element


@pytest.fixture
def settings() -> SerializeSettings:
    return SerializeSettings()


@pytest.fixture
def make_context(settings: SerializeSettings) -> Callable[..., TraversalContext]:
    def _make_context(graph: DocumentGraph = None, **overrides: object) -> TraversalContext:
        effective = settings
        if overrides:
            effective = SerializeSettings(**overrides)
        return TraversalContext(settings=effective, graph=graph)

    return _make_context


@pytest.fixture
def default_package():
    """The package of python-docx's default template document."""
    return docx.Document().part.package


def _document_part(package: OpcPackage) -> XmlPart:
    element = parse_xml(
        f'<w:document {nsdecls("w", "r")}><w:body><w:p><w:r><w:t>Body</w:t></w:r></w:p></w:body></w:document>'
    )
    return XmlPart(PackURI("/word/document.xml"), CT.WML_DOCUMENT_MAIN, element, package)


def _header_part(package: OpcPackage, index: int) -> XmlPart:
    return XmlPart(PackURI(f"/word/header{index}.xml"), CT.WML_HEADER, parse_xml(HEADER_XML), package)


@pytest.fixture
def shared_image_package() -> OpcPackage:
    """
    package -> document -> header1 -> image
                        -> header2 -> image (same part)
    """
    package = OpcPackage()
    document = _document_part(package)
    header1 = _header_part(package, 1)
    header2 = _header_part(package, 2)
    image = Part(PackURI("/word/media/image1.png"), "image/png", PNG_BYTES, package)

    package.load_rel(RT.OFFICE_DOCUMENT, document, "rId1")
    document.load_rel(RT.HEADER, header1, "rId2")
    document.load_rel(RT.HEADER, header2, "rId3")
    header1.load_rel(RT.IMAGE, image, "rId1")
    header2.load_rel(RT.IMAGE, image, "rId1")
    return package


@pytest.fixture
def linked_package() -> OpcPackage:
    """A document with one external hyperlink and one external image link."""
    package = OpcPackage()
    document = _document_part(package)
    package.load_rel(RT.OFFICE_DOCUMENT, document, "rId1")
    document.load_rel(RT.HYPERLINK, "https://example.com/", "rId5", is_external=True)
    document.load_rel(RT.IMAGE, "images/remote.png", "rId6", is_external=True)
    return package
