import pytest
from docx.opc.constants import CONTENT_TYPE as CT
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.opc.package import OpcPackage
from docx.opc.packuri import PackURI
from docx.opc.part import Part

from docx_codegen.core.document_graph import DocumentGraph, ExternalRelationship, PartKey


def test_shared_part_is_stored_once(shared_image_package) -> None:
    graph = DocumentGraph.from_package(shared_image_package)

    package_children = graph.package_children()

    assert [c.relationship_id for c in package_children] == ["rId1"]
    assert len(graph) == 4
    document = graph.node(package_children[0].key)
    header1 = graph.node(document.children[0].key)
    header2 = graph.node(document.children[1].key)
    assert header1.children[0].key == header2.children[0].key


def test_children_keep_relationship_order_and_ids(shared_image_package) -> None:
    graph = DocumentGraph.from_package(shared_image_package)
    document = graph.node(graph.package_children()[0].key)

    assert [(c.relationship_id, str(c.key)) for c in document.children] == [
        ("rId2", "/word/header1.xml"),
        ("rId3", "/word/header2.xml"),
    ]


def test_part_types_come_from_content_types(shared_image_package) -> None:
    graph = DocumentGraph.from_package(shared_image_package)
    graph.package_children()

    types = {node.partname: node.type_name for node in graph}

    assert types == {
        "/word/document.xml": "MainDocumentPart",
        "/word/header1.xml": "HeaderPart",
        "/word/header2.xml": "HeaderPart",
        "/word/media/image1.png": "ImagePart",
    }


def test_external_relationships_are_split_by_kind(linked_package) -> None:
    graph = DocumentGraph.from_package(linked_package)
    document = graph.node(graph.package_children()[0].key)

    assert [(h.relationship_id, h.target) for h in document.hyperlinks] == [("rId5", "https://example.com/")]
    assert not document.hyperlinks[0].is_relative
    assert [(e.relationship_id, e.target) for e in document.external_relationships] == [
        ("rId6", "images/remote.png")
    ]
    assert document.external_relationships[0].is_relative
    assert document.children == []


def test_root_element_of_loaded_xml_part(shared_image_package) -> None:
    graph = DocumentGraph.from_package(shared_image_package)
    document = graph.node(graph.package_children()[0].key)

    root = document.root_element()

    assert root is document.part.element
    assert graph.node(document.children[0].key).root_element().tag.endswith("}hdr")


def test_raw_xml_parts_are_parsed_when_enabled() -> None:
    package = OpcPackage()
    blob = (
        b'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        b'<w:webSettings xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
        b"<w:optimizeForBrowser/></w:webSettings>"
    )
    part = Part(PackURI("/word/webSettings.xml"), CT.WML_WEB_SETTINGS, blob, package)

    parsed = DocumentGraph.from_part(part).add_part(part)
    assert parsed.root_element(parse_xml_parts=True).tag.endswith("}webSettings")

    raw = DocumentGraph.from_part(part).add_part(part)
    assert raw.root_element(parse_xml_parts=False) is None


def test_unparsable_xml_falls_back_to_raw_bytes(caplog) -> None:
    part = Part(PackURI("/word/webSettings.xml"), CT.WML_WEB_SETTINGS, b"<w:webSettings", OpcPackage())

    node = DocumentGraph.from_part(part).add_part(part)

    assert node.root_element() is None
    assert "could not be parsed" in caplog.text
    assert node.read_payload() == b"<w:webSettings"


def test_binary_parts_have_no_root() -> None:
    part = Part(PackURI("/word/media/image1.png"), "image/png", b"\x89PNG", OpcPackage())

    node = DocumentGraph.from_part(part).add_part(part)

    assert node.type_name == "ImagePart"
    assert node.root_element() is None


def test_part_keys_compare_canonically() -> None:
    assert PartKey.from_partname("/Word/Document.XML") == PartKey.from_partname("/word/document.xml")
    assert PartKey.from_partname("word/document.xml") == PartKey.from_partname("/word/document.xml")
    assert len({PartKey.from_partname("/a/../word/x.xml"), PartKey.from_partname("/word/x.xml")}) == 1


def test_default_template_package_builds(default_package) -> None:
    graph = DocumentGraph.from_package(default_package)

    types = [graph.node(c.key).type_name for c in graph.package_children()]
    main = next(node for node in graph if node.type_name == "MainDocumentPart")

    assert "MainDocumentPart" in types
    assert "StyleDefinitionsPart" in [graph.node(c.key).type_name for c in main.children]


@pytest.mark.parametrize(
    "target, relative",
    [
        ("https://example.com/", False),
        ("mailto:someone@example.com", False),
        ("urn:isbn:0451450523", False),
        ("news:comp.lang.python", False),
        ("file:///C:/docs/report.docx", False),
        ("images/remote.png", True),
        ("../shared/logo.png", True),
        ("C:\\docs\\report.docx", True),
    ],
)
def test_relative_targets_have_no_scheme(target: str, relative: bool) -> None:
    relationship = ExternalRelationship(relationship_id="rId1", relationship_type=RT.HYPERLINK, target=target)

    assert relationship.is_relative is relative
