import logging
from collections import Counter

import pytest
from lxml import etree

from docx_codegen.config import AliasOrder, NamespaceAliasOptions, SerializeSettings
from docx_codegen.converters.element_builder import (
    build_element_statements,
    owned_namespace_declarations,
)
from docx_codegen.core.code_model import (
    AssignStatement,
    BlankLine,
    CommentStatement,
    ExpressionStatement,
    StatementCollection,
    VariableDeclaration,
    comment,
)
from docx_codegen.core.context import TraversalContext
from docx_codegen.core.handlers import USE_DEFAULT, ElementHandler, ElementOverride
from docx_codegen.exceptions import ArgumentContractError


def _declarations(statements) -> list[VariableDeclaration]:
    return [s for s in statements if isinstance(s, VariableDeclaration)]


def _calls(statements, method: str) -> list[ExpressionStatement]:
    return [
        s for s in statements
        if isinstance(s, ExpressionStatement) and s.expression.method.name == method
    ]


def _assignments(statements) -> list[AssignStatement]:
    return [s for s in statements if isinstance(s, AssignStatement)]


def test_declarations_match_occurrences_and_names_are_unique(make_element, make_context) -> None:
    element = make_element(
        "<w:body>"
        "<w:p><w:r><w:t>one</w:t></w:r><w:r><w:t>two</w:t></w:r></w:p>"
        "<w:p><w:r><w:t>three</w:t></w:r></w:p>"
        "</w:body>"
    )

    statements, name = build_element_statements(element, make_context())

    declarations = _declarations(statements)
    per_type = Counter(d.type_ref.name for d in declarations)
    assert name == "body"
    assert per_type == {"W.Body": 1, "W.Paragraph": 2, "W.Run": 3, "W.Text": 3}
    assert len({d.name for d in declarations}) == len(declarations)


def test_leaf_text_is_constructed_from_its_text(make_element, make_context) -> None:
    element = make_element('<w:t xml:space="preserve"> spaced </w:t>')

    statements, name = build_element_statements(element, make_context())

    construction = _declarations(statements)[0]
    assert construction.initializer.arguments[0].value == " spaced "
    space = _assignments(statements)[0]
    assert space.target.name == "Space"
    assert space.value.name == "Preserve"
    assert space.value.target.type_ref.name == "SpaceProcessingModeValues"


def test_children_are_appended_in_document_order(make_element, make_context) -> None:
    element = make_element("<w:r><w:t>a</w:t><w:br/><w:t>b</w:t></w:r>")

    statements, name = build_element_statements(element, make_context())

    appended = [c.expression.arguments[0].name for c in _calls(statements, "Append")]
    assert appended == ["text", "break", "text1"]
    assert all(c.expression.method.target.name == name for c in _calls(statements, "Append"))


def test_absent_scalar_properties_are_skipped(make_element, make_context) -> None:
    element = make_element('<w:pgMar w:top="1440" w:left="1800"/>')

    statements, _ = build_element_statements(element, make_context())

    assigned = {a.target.name: a.value.value for a in _assignments(statements)}
    assert assigned == {"Top": 1440, "Left": 1800}


def test_three_scalar_properties_with_one_absent(make_element, make_context) -> None:
    element = make_element('<w:pgSz w:w="12240" w:h="15840"/>')

    statements, _ = build_element_statements(element, make_context())

    assert len(_assignments(statements)) == 2


def test_on_off_values_become_booleans(make_element, make_context) -> None:
    element = make_element('<w:b w:val="0"/>')

    statements, _ = build_element_statements(element, make_context())

    assert _assignments(statements)[0].value.value is False


def test_complex_properties_are_declared_before_the_element(make_element, make_context) -> None:
    element = make_element('<w:p w:rsidR="00A1B2C3" w:rsidRDefault="00D4E5F6"><w:r/></w:p>')

    statements, name = build_element_statements(element, make_context())

    declarations = _declarations(statements)
    assert [d.type_ref.name for d in declarations[:3]] == ["HexBinaryValue", "HexBinaryValue", "W.Paragraph"]
    inner_texts = [a for a in _assignments(statements) if a.target.name == "InnerText"]
    assert [a.value.value for a in inner_texts] == ["00A1B2C3", "00D4E5F6"]
    attached = {
        a.target.name: a.value.name
        for a in _assignments(statements)
        if getattr(a.target.target, "name", None) == name
    }
    assert attached == {
        "RsidParagraphAddition": declarations[0].name,
        "RsidRunAdditionDefault": declarations[1].name,
    }


def test_invalid_enum_value_is_commented_and_siblings_continue(make_element, make_context) -> None:
    element = make_element(
        '<w:pPr><w:jc w:val="sideways"/><w:spacing w:after="200" w:lineRule="auto"/></w:pPr>'
    )

    statements, _ = build_element_statements(element, make_context())

    comments = [s for s in statements if isinstance(s, CommentStatement)]
    assert len(comments) == 1
    assert "'Val' property for variable `justification`" in comments[0].text
    assert "'sideways'" in comments[0].text
    assigned = [a.target.name for a in _assignments(statements)]
    assert "After" in assigned
    assert "LineRule" in assigned


def test_context_decides_the_element_type(make_element, make_context) -> None:
    element = make_element('<w:tblPr><w:jc w:val="center"/></w:tblPr>')

    statements, _ = build_element_statements(element, make_context())

    assert _declarations(statements)[1].type_ref.name == "W.TableJustification"


def test_unknown_element_uses_three_argument_constructor(make_element, make_context) -> None:
    element = make_element(
        '<w:p><w15:custom xmlns:w15="http://schemas.microsoft.com/office/word/2012/wordml" '
        'w15:flag="1">note</w15:custom></w:p>'
    )

    statements, _ = build_element_statements(element, make_context())

    unknown = _declarations(statements)[1]
    assert unknown.type_ref.name == "OpenXmlUnknownElement"
    assert [a.value for a in unknown.initializer.arguments] == [
        "w15",
        "custom",
        "http://schemas.microsoft.com/office/word/2012/wordml",
    ]
    set_attribute = _calls(statements, "SetAttribute")[0]
    attribute = set_attribute.expression.arguments[0]
    assert [a.value for a in attribute.arguments] == [
        "w15",
        "flag",
        "http://schemas.microsoft.com/office/word/2012/wordml",
        "1",
    ]
    inner_text = [a for a in _assignments(statements) if a.target.name == "InnerText"]
    assert inner_text[0].value.value == "note"


def test_ignoring_unknown_elements_keeps_siblings(make_element, make_context) -> None:
    element = make_element(
        '<w:p><w:r><w:t>before</w:t></w:r>'
        '<w15:custom xmlns:w15="http://schemas.microsoft.com/office/word/2012/wordml"/>'
        '<w:r><w:t>after</w:t></w:r></w:p>'
    )

    statements, _ = build_element_statements(element, make_context(ignore_unknown_elements=True))

    type_names = [d.type_ref.name for d in _declarations(statements)]
    assert "OpenXmlUnknownElement" not in type_names
    assert type_names.count("W.Run") == 2
    appended = [c.expression.arguments[0].name for c in _calls(statements, "Append")]
    assert "openXmlUnknownElement" not in appended
    assert appended.count("run") + appended.count("run1") == 2


def test_ignored_root_produces_nothing(make_element, make_context) -> None:
    element = make_element(
        '<w15:custom xmlns:w15="http://schemas.microsoft.com/office/word/2012/wordml"/>'
    )

    statements, name = build_element_statements(element, make_context(ignore_unknown_elements=True))

    assert list(statements) == []
    assert name == ""


def test_misc_nodes_are_built_or_ignored(make_element, make_context) -> None:
    element = make_element("<w:body><w:p/></w:body>")
    element.insert(0, etree.Comment(" generated "))

    statements, _ = build_element_statements(element, make_context())
    misc = _declarations(statements)[1]
    assert misc.type_ref.name == "OpenXmlMiscNode"
    assert misc.initializer.arguments[0].name == "Comment"
    assert misc.initializer.arguments[1].value == "<!-- generated -->"

    statements, _ = build_element_statements(element, make_context(ignore_misc_node_types=["Comment"]))
    assert "OpenXmlMiscNode" not in [d.type_ref.name for d in _declarations(statements)]


def test_markup_compatibility_attributes_block(make_element, make_context) -> None:
    element = make_element(
        '<w:document xmlns:mc="http://schemas.openxmlformats.org/markup-compatibility/2006" '
        'xmlns:w14="http://schemas.microsoft.com/office/word/2010/wordml" mc:Ignorable="w14"/>'
    )

    statements, name = build_element_statements(element, make_context())

    block = _declarations(statements)[0]
    assert block.type_ref.name == "MarkupCompatibilityAttributes"
    assignments = _assignments(statements)
    assert assignments[0].target.name == "Ignorable"
    assert assignments[0].value.value == "w14"
    assert any(a.target.name == "MCAttributes" and a.value.name == block.name for a in assignments)
    assert not _calls(statements, "SetAttribute")


def test_namespace_declarations_only_on_declaring_node(make_element, make_context) -> None:
    element = make_element("<w:body><w:p/></w:body>")

    statements, name = build_element_statements(element, make_context())

    declared = [
        (c.expression.arguments[0].value, c.expression.method.target.name)
        for c in _calls(statements, "AddNamespaceDeclaration")
    ]
    assert ("w", "body") in declared
    assert all(target == "body" for _, target in declared)
    assert owned_namespace_declarations(element[0]) == []


def test_alias_order_none_leaves_type_names_bare(make_element) -> None:
    settings = SerializeSettings(namespace_alias_options=NamespaceAliasOptions(order=AliasOrder.NONE))
    element = make_element("<w:p/>")

    statements, _ = build_element_statements(element, TraversalContext(settings=settings))

    assert _declarations(statements)[0].type_ref.name == "Paragraph"


def test_element_ends_with_blank_line_before_children(make_element, make_context) -> None:
    element = make_element("<w:p/>")

    statements, _ = build_element_statements(element, make_context())

    assert isinstance(statements[-1], BlankLine)


class _CommentingHandler(ElementHandler):
    def build_element_statements(self, element, context):
        statements = StatementCollection()
        statements.add(comment("bookmark dropped"))
        return ElementOverride(statements, "")


class _DecliningHandler(ElementHandler):
    def build_element_statements(self, element, context):
        return USE_DEFAULT


def test_element_override_replaces_default_output(make_element) -> None:
    settings = SerializeSettings(
        handlers={"DocumentFormat.OpenXml.Wordprocessing.BookmarkStart": _CommentingHandler()}
    )
    element = make_element('<w:p><w:bookmarkStart w:id="0" w:name="_GoBack"/><w:r/></w:p>')

    statements, _ = build_element_statements(element, TraversalContext(settings=settings))

    assert [s.text for s in statements if isinstance(s, CommentStatement)] == ["bookmark dropped"]
    assert "W.BookmarkStart" not in [d.type_ref.name for d in _declarations(statements)]
    assert len(_calls(statements, "Append")) == 1


@pytest.mark.parametrize("handler", [_DecliningHandler(), ElementHandler()])
def test_declining_handler_falls_through_to_default(make_element, handler) -> None:
    settings = SerializeSettings(handlers={"DocumentFormat.OpenXml.Wordprocessing.Paragraph": handler})
    element = make_element("<w:p/>")

    statements, name = build_element_statements(element, TraversalContext(settings=settings))

    assert name == "paragraph"
    assert _declarations(statements)[0].type_ref.name == "W.Paragraph"


def test_missing_element_is_a_contract_violation(make_context) -> None:
    with pytest.raises(ArgumentContractError):
        build_element_statements(None, make_context())


def test_unrepresentable_content_is_logged(make_element, make_context, caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="docx_codegen.converters.element_builder")
    element = make_element(
        '<w:p><x:custom xmlns:x="urn:example:x" xmlns="urn:example:default">lead<w:r/></x:custom></w:p>'
    )

    statements, _ = build_element_statements(element, make_context())

    assert "Default namespace urn:example:default" in caplog.text
    assert "mixed-content text" in caplog.text
    declared = [c.expression.arguments[0].value for c in _calls(statements, "AddNamespaceDeclaration")]
    assert "x" in declared
    assert not [a for a in _assignments(statements) if a.target.name == "InnerText"]
