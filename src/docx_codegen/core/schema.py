"""
Static schema registry for OpenXML elements and parts.

Instead of reflecting over element classes at generation time, every element
variant the generator knows about is described once here: its tag, the type
name it is constructed with, the namespace that type lives in, and an ordered
list of property schemas (scalar, complex or enumeration).  Enumeration member
sets come from python-docx's ``BaseXmlEnum`` classes where python-docx has one.

Elements that are not registered are treated as unknown elements and are
reconstructed generically from their prefix, local name and namespace URI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Type

from docx.enum.base import BaseXmlEnum
from docx.enum.dml import MSO_THEME_COLOR_INDEX
from docx.enum.section import WD_HEADER_FOOTER_INDEX, WD_ORIENTATION, WD_SECTION_START
from docx.enum.style import WD_STYLE_TYPE
from docx.enum.table import (
    WD_CELL_VERTICAL_ALIGNMENT,
    WD_ROW_HEIGHT_RULE,
    WD_TABLE_ALIGNMENT,
)
from docx.enum.text import (
    WD_COLOR_INDEX,
    WD_LINE_SPACING,
    WD_PARAGRAPH_ALIGNMENT,
    WD_TAB_ALIGNMENT,
    WD_TAB_LEADER,
    WD_UNDERLINE,
)
from docx.opc.constants import CONTENT_TYPE as CT
from docx.oxml.ns import nsmap as docx_nsmap

from .naming import to_pascal_case

# Symbolic namespaces of the generated object model
OPENXML = "DocumentFormat.OpenXml"
PACKAGING = "DocumentFormat.OpenXml.Packaging"
WORDPROCESSING = "DocumentFormat.OpenXml.Wordprocessing"
DRAWING = "DocumentFormat.OpenXml.Drawing"
DRAWING_WORDPROCESSING = "DocumentFormat.OpenXml.Drawing.Wordprocessing"
PICTURES = "DocumentFormat.OpenXml.Drawing.Pictures"
WORD_2010 = "DocumentFormat.OpenXml.Office2010.Word"
SYSTEM = "System"
SYSTEM_IO = "System.IO"
SYSTEM_XML = "System.Xml"

# Aliases applied to namespaces whose type names collide with each other
NAMESPACE_ALIASES: Dict[str, str] = {
    WORDPROCESSING: "W",
    DRAWING: "A",
    DRAWING_WORDPROCESSING: "Wp",
    PICTURES: "Pic",
    WORD_2010: "W14",
}

NSMAP: Dict[str, str] = dict(
    docx_nsmap,
    mc="http://schemas.openxmlformats.org/markup-compatibility/2006",
    o="urn:schemas-microsoft-com:office:office",
    v="urn:schemas-microsoft-com:vml",
    w10="urn:schemas-microsoft-com:office:word",
    w15="http://schemas.microsoft.com/office/word/2012/wordml",
    wp14="http://schemas.microsoft.com/office/word/2010/wordprocessingDrawing",
    wps="http://schemas.microsoft.com/office/word/2010/wordprocessingShape",
    wpg="http://schemas.microsoft.com/office/word/2010/wordprocessingGroup",
)

MC_NAMESPACE = NSMAP["mc"]


def qn(name: str) -> str:
    """Clark notation for a prefixed name; unprefixed names are returned as-is."""
    if ":" not in name:
        return name
    prefix, local = name.split(":", 1)
    return f"{{{NSMAP[prefix]}}}{local}"


class PropertyKind(Enum):
    """How a property value is reconstructed."""
    SCALAR = "scalar"
    COMPLEX = "complex"
    ENUM = "enum"


class ValueType(Enum):
    """Value types of scalar and complex properties."""
    STRING = "string"
    INT = "int"
    UINT = "uint"
    LONG = "long"
    DOUBLE = "double"
    BOOL = "bool"
    # complex types, built through their inner text
    HEX_BINARY = "hex_binary"
    STRING_LIST = "string_list"
    BASE64_BINARY = "base64_binary"


COMPLEX_VALUE_TYPES: Dict[ValueType, Tuple[str, Tuple[str, ...]]] = {
    ValueType.HEX_BINARY: ("HexBinaryValue", ()),
    ValueType.STRING_LIST: ("ListValue", ("StringValue",)),
    ValueType.BASE64_BINARY: ("Base64BinaryValue", ()),
}


class ElementKind(Enum):
    """Construction idiom of a registered element."""
    STANDARD = "standard"
    LEAF_TEXT = "leaf_text"


@dataclass(frozen=True)
class EnumSchema:
    """An enumeration type and the XML values it accepts."""

    type_name: str
    values: Tuple[str, ...]
    namespace: str = WORDPROCESSING

    @classmethod
    def from_xml_enum(
        cls,
        enum_cls: Type[BaseXmlEnum],
        type_name: str,
        namespace: str = WORDPROCESSING,
        extra: Iterable[str] = (),
        exclude: Iterable[str] = (),
    ) -> EnumSchema:
        """
        Build a schema whose members are the XML values of a python-docx enum.

        ``exclude`` drops values python-docx accepts that the schema type does not.
        """
        skipped = {"UNMAPPED", *exclude}
        values = [
            member.xml_value
            for member in enum_cls
            if isinstance(member.xml_value, str) and member.xml_value not in skipped
        ]
        values.extend(v for v in extra if v not in values)
        return cls(type_name=type_name, values=tuple(values), namespace=namespace)

    @property
    def full_name(self) -> str:
        return f"{self.namespace}.{self.type_name}"

    def member_name(self, xml_value: str) -> Optional[str]:
        """Field name for ``xml_value``, or None when the value is not a member."""
        if xml_value not in self.values:
            return None
        return to_pascal_case(xml_value)


@dataclass(frozen=True)
class PropertySchema:
    """One attribute-backed property of an element."""

    name: str
    attribute: str
    kind: PropertyKind = PropertyKind.SCALAR
    value_type: ValueType = ValueType.STRING
    enum: Optional[EnumSchema] = None

    @property
    def clark_name(self) -> str:
        return qn(self.attribute)

    @property
    def complex_type(self) -> Tuple[str, Tuple[str, ...]]:
        """(type name, generic type arguments) of a complex property value."""
        return COMPLEX_VALUE_TYPES[self.value_type]


@dataclass(frozen=True)
class ElementSchema:
    """Static description of one element variant."""

    tag: str
    type_name: str
    namespace: str = WORDPROCESSING
    kind: ElementKind = ElementKind.STANDARD
    properties: Tuple[PropertySchema, ...] = ()

    @property
    def clark_name(self) -> str:
        return qn(self.tag)

    @property
    def full_name(self) -> str:
        return f"{self.namespace}.{self.type_name}"

    @property
    def scalar_properties(self) -> List[PropertySchema]:
        return [p for p in self.properties if p.kind is PropertyKind.SCALAR]

    @property
    def complex_properties(self) -> List[PropertySchema]:
        return [p for p in self.properties if p.kind is PropertyKind.COMPLEX]

    @property
    def enum_properties(self) -> List[PropertySchema]:
        return [p for p in self.properties if p.kind is PropertyKind.ENUM]

    @property
    def declared_attributes(self) -> FrozenSet[str]:
        return frozenset(p.clark_name for p in self.properties)


@dataclass(frozen=True)
class PartSchema:
    """Static description of a part (or package) type."""

    type_name: str
    content_types: Tuple[str, ...] = ()
    root_tag: Optional[str] = None
    root_property: Optional[str] = None
    add_routines: FrozenSet[str] = frozenset()
    opaque_payload: bool = False
    namespace: str = PACKAGING

    @property
    def full_name(self) -> str:
        return f"{self.namespace}.{self.type_name}"

    @property
    def has_root(self) -> bool:
        return self.root_tag is not None and self.root_property is not None

    def custom_add_routine(self, part_type_name: str) -> Optional[str]:
        """Name of the dedicated ``Add<PartType>`` routine this owner exposes, if any."""
        wanted = f"Add{part_type_name}".lower()
        for routine in self.add_routines:
            if routine.lower() == wanted:
                return routine
        return None


# Markup compatibility attribute block

MC_ATTRIBUTES_TYPE = "MarkupCompatibilityAttributes"
MC_ATTRIBUTES: Tuple[Tuple[str, str], ...] = (
    ("Ignorable", qn("mc:Ignorable")),
    ("ProcessContent", qn("mc:ProcessContent")),
    ("PreserveElements", qn("mc:PreserveElements")),
    ("PreserveAttributes", qn("mc:PreserveAttributes")),
    ("MustUnderstand", qn("mc:MustUnderstand")),
)

UNKNOWN_ELEMENT_TYPE = "OpenXmlUnknownElement"
MISC_NODE_TYPE = "OpenXmlMiscNode"
XML_NODE_TYPE = "XmlNodeType"
ATTRIBUTE_TYPE = "OpenXmlAttribute"


# Enumerations

def _values(type_name: str, *values: str, namespace: str = WORDPROCESSING) -> EnumSchema:
    return EnumSchema(type_name=type_name, values=tuple(values), namespace=namespace)


JUSTIFICATION_VALUES = EnumSchema.from_xml_enum(
    WD_PARAGRAPH_ALIGNMENT, "JustificationValues", extra=("start", "end", "lowKashida")
)
TABLE_JUSTIFICATION_VALUES = EnumSchema.from_xml_enum(
    WD_TABLE_ALIGNMENT, "TableRowAlignmentValues", extra=("start", "end")
)
LINE_SPACING_RULE_VALUES = EnumSchema.from_xml_enum(WD_LINE_SPACING, "LineSpacingRuleValues")
TAB_STOP_VALUES = EnumSchema.from_xml_enum(WD_TAB_ALIGNMENT, "TabStopValues")
TAB_LEADER_VALUES = EnumSchema.from_xml_enum(WD_TAB_LEADER, "TabStopLeaderCharValues")
UNDERLINE_VALUES = EnumSchema.from_xml_enum(WD_UNDERLINE, "UnderlineValues")
HIGHLIGHT_VALUES = EnumSchema.from_xml_enum(
    WD_COLOR_INDEX,
    "HighlightColorValues",
    extra=("none", "lightGray", "darkGray"),
    exclude=("default",),
)
THEME_COLOR_VALUES = EnumSchema.from_xml_enum(
    MSO_THEME_COLOR_INDEX, "ThemeColorValues", extra=("none",)
)
PAGE_ORIENTATION_VALUES = EnumSchema.from_xml_enum(WD_ORIENTATION, "PageOrientationValues")
SECTION_MARK_VALUES = EnumSchema.from_xml_enum(WD_SECTION_START, "SectionMarkValues")
HEADER_FOOTER_VALUES = EnumSchema.from_xml_enum(WD_HEADER_FOOTER_INDEX, "HeaderFooterValues")
STYLE_VALUES = EnumSchema.from_xml_enum(WD_STYLE_TYPE, "StyleValues")
HEIGHT_RULE_VALUES = EnumSchema.from_xml_enum(WD_ROW_HEIGHT_RULE, "HeightRuleValues")
VERTICAL_ALIGNMENT_VALUES = EnumSchema.from_xml_enum(
    WD_CELL_VERTICAL_ALIGNMENT, "TableVerticalAlignmentValues"
)
SPACE_PROCESSING_VALUES = _values(
    "SpaceProcessingModeValues", "default", "preserve", namespace=OPENXML
)
FONT_HINT_VALUES = _values("FontTypeHintValues", "default", "eastAsia", "cs")
THEME_FONT_VALUES = _values(
    "ThemeFontValues",
    "majorEastAsia", "majorBidi", "majorAscii", "majorHAnsi",
    "minorEastAsia", "minorBidi", "minorAscii", "minorHAnsi",
)
VERTICAL_POSITION_VALUES = _values("VerticalPositionValues", "baseline", "superscript", "subscript")
BREAK_VALUES = _values("BreakValues", "page", "column", "textWrapping")
BREAK_CLEAR_VALUES = _values("BreakTextRestartLocationValues", "none", "left", "right", "all")
FIELD_CHAR_VALUES = _values("FieldCharValues", "begin", "separate", "end")
PROOFING_ERROR_VALUES = _values("ProofingErrorValues", "spellStart", "spellEnd", "gramStart", "gramEnd")
DOC_GRID_VALUES = _values("DocGridValues", "default", "lines", "linesAndChars", "snapToChars")
TABLE_WIDTH_UNIT_VALUES = _values("TableWidthUnitValues", "nil", "pct", "dxa", "auto")
MERGED_CELL_VALUES = _values("MergedCellValues", "restart", "continue")
BORDER_VALUES = _values(
    "BorderValues",
    "nil", "none", "single", "thick", "double", "dotted", "dashed", "dotDash",
    "dotDotDash", "triple", "thinThickSmallGap", "thickThinSmallGap",
    "thinThickThinSmallGap", "wave", "doubleWave", "dashSmallGap", "outset", "inset",
)
PRESET_ZOOM_VALUES = _values("PresetZoomValues", "none", "fullPage", "bestFit", "textFit")
CHARACTER_SPACING_VALUES = _values(
    "CharacterSpacingValues",
    "doNotCompress", "compressPunctuation", "compressPunctuationAndJapaneseKana",
)
MULTI_LEVEL_VALUES = _values("MultiLevelValues", "singleLevel", "multilevel", "hybridMultilevel")
LEVEL_JUSTIFICATION_VALUES = _values(
    "LevelJustificationValues", "left", "center", "right", "start", "end"
)
DOCUMENT_CONFORMANCE_VALUES = _values("DocumentConformance", "transitional", "strict")


# Property shortcuts

def _scalar(name: str, attribute: str, value_type: ValueType = ValueType.STRING) -> PropertySchema:
    return PropertySchema(name=name, attribute=attribute, value_type=value_type)


def _hex(name: str, attribute: str) -> PropertySchema:
    return PropertySchema(
        name=name, attribute=attribute, kind=PropertyKind.COMPLEX, value_type=ValueType.HEX_BINARY
    )


def _list(name: str, attribute: str) -> PropertySchema:
    return PropertySchema(
        name=name, attribute=attribute, kind=PropertyKind.COMPLEX, value_type=ValueType.STRING_LIST
    )


def _enum(name: str, attribute: str, enum: EnumSchema) -> PropertySchema:
    return PropertySchema(name=name, attribute=attribute, kind=PropertyKind.ENUM, enum=enum)


def _int(name: str, attribute: str) -> PropertySchema:
    return _scalar(name, attribute, ValueType.INT)


def _uint(name: str, attribute: str) -> PropertySchema:
    return _scalar(name, attribute, ValueType.UINT)


def _long(name: str, attribute: str) -> PropertySchema:
    return _scalar(name, attribute, ValueType.LONG)


def _bool(name: str, attribute: str) -> PropertySchema:
    return _scalar(name, attribute, ValueType.BOOL)


def _el(tag: str, type_name: str, *properties: PropertySchema, **kwargs) -> ElementSchema:
    return ElementSchema(tag=tag, type_name=type_name, properties=tuple(properties), **kwargs)


def _on_off(tag: str, type_name: str) -> ElementSchema:
    return _el(tag, type_name, _bool("Val", "w:val"))


def _string_val(tag: str, type_name: str) -> ElementSchema:
    return _el(tag, type_name, _scalar("Val", "w:val"))


def _border(tag: str, type_name: str) -> ElementSchema:
    return _el(
        tag,
        type_name,
        _scalar("Color", "w:color"),
        _scalar("ThemeTint", "w:themeTint"),
        _scalar("ThemeShade", "w:themeShade"),
        _uint("Size", "w:sz"),
        _uint("Space", "w:space"),
        _bool("Shadow", "w:shadow"),
        _bool("Frame", "w:frame"),
        _enum("Val", "w:val", BORDER_VALUES),
        _enum("ThemeColor", "w:themeColor", THEME_COLOR_VALUES),
    )


_PARAGRAPH_IDS = (
    _hex("ParagraphId", "w14:paraId"),
    _hex("TextId", "w14:textId"),
)


_ELEMENTS: Tuple[ElementSchema, ...] = (
    # document structure
    _el("w:document", "Document", _enum("Conformance", "w:conformance", DOCUMENT_CONFORMANCE_VALUES)),
    _el("w:body", "Body"),
    _el(
        "w:p",
        "Paragraph",
        _hex("RsidParagraphMarkRevision", "w:rsidRPr"),
        _hex("RsidParagraphAddition", "w:rsidR"),
        _hex("RsidParagraphDeletion", "w:rsidDel"),
        _hex("RsidParagraphProperties", "w:rsidP"),
        _hex("RsidRunAdditionDefault", "w:rsidRDefault"),
        *_PARAGRAPH_IDS,
    ),
    _el("w:pPr", "ParagraphProperties"),
    _string_val("w:pStyle", "ParagraphStyleId"),
    _on_off("w:keepNext", "KeepNext"),
    _on_off("w:keepLines", "KeepLines"),
    _on_off("w:pageBreakBefore", "PageBreakBefore"),
    _on_off("w:widowControl", "WidowControl"),
    _on_off("w:contextualSpacing", "ContextualSpacing"),
    _on_off("w:bidi", "BiDi"),
    _on_off("w:snapToGrid", "SnapToGrid"),
    _on_off("w:suppressAutoHyphens", "SuppressAutoHyphens"),
    _el("w:numPr", "NumberingProperties"),
    _el("w:ilvl", "NumberingLevelReference", _int("Val", "w:val")),
    _el("w:numId", "NumberingId", _int("Val", "w:val")),
    _el(
        "w:spacing",
        "SpacingBetweenLines",
        _scalar("Before", "w:before"),
        _int("BeforeLines", "w:beforeLines"),
        _bool("BeforeAutoSpacing", "w:beforeAutospacing"),
        _scalar("After", "w:after"),
        _int("AfterLines", "w:afterLines"),
        _bool("AfterAutoSpacing", "w:afterAutospacing"),
        _scalar("Line", "w:line"),
        _enum("LineRule", "w:lineRule", LINE_SPACING_RULE_VALUES),
    ),
    _el(
        "w:ind",
        "Indentation",
        _scalar("Left", "w:left"),
        _int("LeftChars", "w:leftChars"),
        _scalar("Start", "w:start"),
        _scalar("Right", "w:right"),
        _int("RightChars", "w:rightChars"),
        _scalar("End", "w:end"),
        _scalar("Hanging", "w:hanging"),
        _int("HangingChars", "w:hangingChars"),
        _scalar("FirstLine", "w:firstLine"),
        _int("FirstLineChars", "w:firstLineChars"),
    ),
    _el("w:jc", "Justification", _enum("Val", "w:val", JUSTIFICATION_VALUES)),
    _el("w:outlineLvl", "OutlineLevel", _int("Val", "w:val")),
    _el("w:tabs", "Tabs"),
    _el(
        "w:tab",
        "TabStop",
        _enum("Val", "w:val", TAB_STOP_VALUES),
        _enum("Leader", "w:leader", TAB_LEADER_VALUES),
        _int("Position", "w:pos"),
    ),
    _el("w:pBdr", "ParagraphBorders"),
    _border("w:top", "TopBorder"),
    _border("w:left", "LeftBorder"),
    _border("w:start", "StartBorder"),
    _border("w:bottom", "BottomBorder"),
    _border("w:right", "RightBorder"),
    _border("w:end", "EndBorder"),
    _border("w:between", "BetweenBorder"),
    _border("w:insideH", "InsideHorizontalBorder"),
    _border("w:insideV", "InsideVerticalBorder"),
    _el(
        "w:shd",
        "Shading",
        _scalar("Val", "w:val"),
        _scalar("Color", "w:color"),
        _scalar("Fill", "w:fill"),
        _enum("ThemeColor", "w:themeColor", THEME_COLOR_VALUES),
        _enum("ThemeFill", "w:themeFill", THEME_COLOR_VALUES),
    ),
    # runs
    _el(
        "w:r",
        "Run",
        _hex("RsidRunProperties", "w:rsidRPr"),
        _hex("RsidRunDeletion", "w:rsidDel"),
        _hex("RsidRunAddition", "w:rsidR"),
    ),
    _el("w:rPr", "RunProperties"),
    _string_val("w:rStyle", "RunStyle"),
    _el(
        "w:rFonts",
        "RunFonts",
        _scalar("Ascii", "w:ascii"),
        _scalar("HighAnsi", "w:hAnsi"),
        _scalar("EastAsia", "w:eastAsia"),
        _scalar("ComplexScript", "w:cs"),
        _enum("Hint", "w:hint", FONT_HINT_VALUES),
        _enum("AsciiTheme", "w:asciiTheme", THEME_FONT_VALUES),
        _enum("HighAnsiTheme", "w:hAnsiTheme", THEME_FONT_VALUES),
        _enum("EastAsiaTheme", "w:eastAsiaTheme", THEME_FONT_VALUES),
        _enum("ComplexScriptTheme", "w:cstheme", THEME_FONT_VALUES),
    ),
    _on_off("w:b", "Bold"),
    _on_off("w:bCs", "BoldComplexScript"),
    _on_off("w:i", "Italic"),
    _on_off("w:iCs", "ItalicComplexScript"),
    _on_off("w:caps", "Caps"),
    _on_off("w:smallCaps", "SmallCaps"),
    _on_off("w:strike", "Strike"),
    _on_off("w:dstrike", "DoubleStrike"),
    _on_off("w:vanish", "Vanish"),
    _on_off("w:noProof", "NoProof"),
    _on_off("w:webHidden", "WebHidden"),
    _on_off("w:rtl", "RightToLeftText"),
    _el(
        "w:color",
        "Color",
        _scalar("Val", "w:val"),
        _scalar("ThemeTint", "w:themeTint"),
        _scalar("ThemeShade", "w:themeShade"),
        _enum("ThemeColor", "w:themeColor", THEME_COLOR_VALUES),
    ),
    _string_val("w:sz", "FontSize"),
    _string_val("w:szCs", "FontSizeComplexScript"),
    _el("w:kern", "Kern", _uint("Val", "w:val")),
    _el(
        "w:u",
        "Underline",
        _scalar("Color", "w:color"),
        _enum("Val", "w:val", UNDERLINE_VALUES),
        _enum("ThemeColor", "w:themeColor", THEME_COLOR_VALUES),
    ),
    _el("w:highlight", "Highlight", _enum("Val", "w:val", HIGHLIGHT_VALUES)),
    _el("w:vertAlign", "VerticalTextAlignment", _enum("Val", "w:val", VERTICAL_POSITION_VALUES)),
    _el(
        "w:lang",
        "Languages",
        _scalar("Val", "w:val"),
        _scalar("EastAsia", "w:eastAsia"),
        _scalar("Bidi", "w:bidi"),
    ),
    _el(
        "w:t",
        "Text",
        _enum("Space", "xml:space", SPACE_PROCESSING_VALUES),
        kind=ElementKind.LEAF_TEXT,
    ),
    _el(
        "w:delText",
        "DeletedText",
        _enum("Space", "xml:space", SPACE_PROCESSING_VALUES),
        kind=ElementKind.LEAF_TEXT,
    ),
    _el(
        "w:instrText",
        "FieldCode",
        _enum("Space", "xml:space", SPACE_PROCESSING_VALUES),
        kind=ElementKind.LEAF_TEXT,
    ),
    _el(
        "w:delInstrText",
        "DeletedFieldCode",
        _enum("Space", "xml:space", SPACE_PROCESSING_VALUES),
        kind=ElementKind.LEAF_TEXT,
    ),
    _el(
        "w:br",
        "Break",
        _enum("Type", "w:type", BREAK_VALUES),
        _enum("Clear", "w:clear", BREAK_CLEAR_VALUES),
    ),
    _el("w:cr", "CarriageReturn"),
    _el("w:lastRenderedPageBreak", "LastRenderedPageBreak"),
    _el("w:softHyphen", "SoftHyphen"),
    _el("w:noBreakHyphen", "NoBreakHyphen"),
    _el(
        "w:fldChar",
        "FieldChar",
        _bool("Dirty", "w:dirty"),
        _bool("FieldLock", "w:fldLock"),
        _enum("FieldCharType", "w:fldCharType", FIELD_CHAR_VALUES),
    ),
    _el("w:fldSimple", "SimpleField", _scalar("Instruction", "w:instr"), _bool("Dirty", "w:dirty")),
    _el(
        "w:hyperlink",
        "Hyperlink",
        _scalar("Id", "r:id"),
        _scalar("Anchor", "w:anchor"),
        _scalar("Tooltip", "w:tooltip"),
        _bool("History", "w:history"),
    ),
    _el(
        "w:bookmarkStart",
        "BookmarkStart",
        _scalar("Name", "w:name"),
        _scalar("Id", "w:id"),
        _int("ColumnFirst", "w:colFirst"),
        _int("ColumnLast", "w:colLast"),
    ),
    _el("w:bookmarkEnd", "BookmarkEnd", _scalar("Id", "w:id")),
    _el("w:proofErr", "ProofError", _enum("Type", "w:type", PROOFING_ERROR_VALUES)),
    _el("w:commentRangeStart", "CommentRangeStart", _scalar("Id", "w:id")),
    _el("w:commentRangeEnd", "CommentRangeEnd", _scalar("Id", "w:id")),
    _el("w:commentReference", "CommentReference", _scalar("Id", "w:id")),
    # sections
    _el(
        "w:sectPr",
        "SectionProperties",
        _hex("RsidRPr", "w:rsidRPr"),
        _hex("RsidDel", "w:rsidDel"),
        _hex("RsidR", "w:rsidR"),
        _hex("RsidSect", "w:rsidSect"),
    ),
    _el(
        "w:pgSz",
        "PageSize",
        _uint("Width", "w:w"),
        _uint("Height", "w:h"),
        _uint("Code", "w:code"),
        _enum("Orient", "w:orient", PAGE_ORIENTATION_VALUES),
    ),
    _el(
        "w:pgMar",
        "PageMargin",
        _int("Top", "w:top"),
        _uint("Right", "w:right"),
        _int("Bottom", "w:bottom"),
        _uint("Left", "w:left"),
        _uint("Header", "w:header"),
        _uint("Footer", "w:footer"),
        _uint("Gutter", "w:gutter"),
    ),
    _el(
        "w:cols",
        "Columns",
        _scalar("Space", "w:space"),
        _int("ColumnCount", "w:num"),
        _bool("EqualWidth", "w:equalWidth"),
        _bool("Separator", "w:sep"),
    ),
    _el(
        "w:docGrid",
        "DocGrid",
        _int("LinePitch", "w:linePitch"),
        _int("CharacterSpace", "w:charSpace"),
        _enum("Type", "w:type", DOC_GRID_VALUES),
    ),
    _el("w:type", "SectionType", _enum("Val", "w:val", SECTION_MARK_VALUES)),
    _el(
        "w:headerReference",
        "HeaderReference",
        _scalar("Id", "r:id"),
        _enum("Type", "w:type", HEADER_FOOTER_VALUES),
    ),
    _el(
        "w:footerReference",
        "FooterReference",
        _scalar("Id", "r:id"),
        _enum("Type", "w:type", HEADER_FOOTER_VALUES),
    ),
    _on_off("w:titlePg", "TitlePage"),
    _el("w:pgNumType", "PageNumberType", _int("Start", "w:start")),
    # tables
    _el("w:tbl", "Table"),
    _el("w:tblPr", "TableProperties"),
    _string_val("w:tblStyle", "TableStyle"),
    _el(
        "w:tblW",
        "TableWidth",
        _scalar("Width", "w:w"),
        _enum("Type", "w:type", TABLE_WIDTH_UNIT_VALUES),
    ),
    _el(
        "w:tblLook",
        "TableLook",
        _hex("Val", "w:val"),
        _bool("FirstRow", "w:firstRow"),
        _bool("LastRow", "w:lastRow"),
        _bool("FirstColumn", "w:firstColumn"),
        _bool("LastColumn", "w:lastColumn"),
        _bool("NoHorizontalBand", "w:noHBand"),
        _bool("NoVerticalBand", "w:noVBand"),
    ),
    _el("w:tblBorders", "TableBorders"),
    _el("w:tblGrid", "TableGrid"),
    _el("w:gridCol", "GridColumn", _scalar("Width", "w:w")),
    _el(
        "w:tr",
        "TableRow",
        _hex("RsidTableRowMarkRevision", "w:rsidRPr"),
        _hex("RsidTableRowAddition", "w:rsidR"),
        _hex("RsidTableRowDeletion", "w:rsidDel"),
        _hex("RsidTableRowProperties", "w:rsidTr"),
        *_PARAGRAPH_IDS,
    ),
    _el("w:trPr", "TableRowProperties"),
    _el(
        "w:trHeight",
        "TableRowHeight",
        _uint("Val", "w:val"),
        _enum("HeightType", "w:hRule", HEIGHT_RULE_VALUES),
    ),
    _on_off("w:tblHeader", "TableHeader"),
    _on_off("w:cantSplit", "CantSplit"),
    _el("w:tc", "TableCell"),
    _el("w:tcPr", "TableCellProperties"),
    _el(
        "w:tcW",
        "TableCellWidth",
        _scalar("Width", "w:w"),
        _enum("Type", "w:type", TABLE_WIDTH_UNIT_VALUES),
    ),
    _el("w:gridSpan", "GridSpan", _int("Val", "w:val")),
    _el("w:vMerge", "VerticalMerge", _enum("Val", "w:val", MERGED_CELL_VALUES)),
    _el("w:vAlign", "TableCellVerticalAlignment", _enum("Val", "w:val", VERTICAL_ALIGNMENT_VALUES)),
    _el("w:tcBorders", "TableCellBorders"),
    # styles
    _el("w:styles", "Styles"),
    _el("w:docDefaults", "DocDefaults"),
    _el("w:rPrDefault", "RunPropertiesDefault"),
    _el("w:pPrDefault", "ParagraphPropertiesDefault"),
    _el(
        "w:latentStyles",
        "LatentStyles",
        _bool("DefaultLockedState", "w:defLockedState"),
        _int("DefaultUiPriority", "w:defUIPriority"),
        _bool("DefaultSemiHidden", "w:defSemiHidden"),
        _bool("DefaultUnhideWhenUsed", "w:defUnhideWhenUsed"),
        _bool("DefaultPrimaryStyle", "w:defQFormat"),
        _int("Count", "w:count"),
    ),
    _el(
        "w:lsdException",
        "LatentStyleExceptionInfo",
        _scalar("Name", "w:name"),
        _bool("Locked", "w:locked"),
        _int("UiPriority", "w:uiPriority"),
        _bool("SemiHidden", "w:semiHidden"),
        _bool("UnhideWhenUsed", "w:unhideWhenUsed"),
        _bool("PrimaryStyle", "w:qFormat"),
    ),
    _el(
        "w:style",
        "Style",
        _scalar("StyleId", "w:styleId"),
        _bool("Default", "w:default"),
        _bool("CustomStyle", "w:customStyle"),
        _enum("Type", "w:type", STYLE_VALUES),
    ),
    _string_val("w:name", "StyleName"),
    _string_val("w:basedOn", "BasedOn"),
    _string_val("w:next", "NextParagraphStyle"),
    _string_val("w:link", "LinkedStyle"),
    _el("w:uiPriority", "UIPriority", _int("Val", "w:val")),
    _on_off("w:semiHidden", "SemiHidden"),
    _on_off("w:unhideWhenUsed", "UnhideWhenUsed"),
    _on_off("w:qFormat", "PrimaryStyle"),
    _on_off("w:locked", "Locked"),
    _el("w:rsid", "Rsid", _hex("Val", "w:val")),
    # settings
    _el("w:settings", "Settings"),
    _el("w:zoom", "Zoom", _scalar("Percent", "w:percent"), _enum("Val", "w:val", PRESET_ZOOM_VALUES)),
    _el("w:defaultTabStop", "DefaultTabStop", _int("Val", "w:val")),
    _el(
        "w:characterSpacingControl",
        "CharacterSpacingControl",
        _enum("Val", "w:val", CHARACTER_SPACING_VALUES),
    ),
    _el("w:compat", "Compatibility"),
    _el(
        "w:compatSetting",
        "CompatibilitySetting",
        _scalar("Name", "w:name"),
        _scalar("Uri", "w:uri"),
        _scalar("Val", "w:val"),
    ),
    _el("w:rsids", "Rsids"),
    _el("w:rsidRoot", "RsidRoot", _hex("Val", "w:val")),
    _el(
        "w:themeFontLang",
        "ThemeFontLanguages",
        _scalar("Val", "w:val"),
        _scalar("EastAsia", "w:eastAsia"),
        _scalar("Bidi", "w:bidi"),
    ),
    _string_val("w:decimalSymbol", "DecimalSymbol"),
    _string_val("w:listSeparator", "ListSeparator"),
    # headers, footers, comments
    _el("w:hdr", "Header"),
    _el("w:ftr", "Footer"),
    _el("w:comments", "Comments"),
    _el(
        "w:comment",
        "Comment",
        _scalar("Id", "w:id"),
        _scalar("Author", "w:author"),
        _scalar("Date", "w:date"),
        _scalar("Initials", "w:initials"),
    ),
    # numbering
    _el("w:numbering", "Numbering"),
    _el(
        "w:abstractNum",
        "AbstractNum",
        _int("AbstractNumberId", "w:abstractNumId"),
        _list("RestartNumberingAfterBreak", "w15:restartNumberingAfterBreak"),
    ),
    _el("w:nsid", "Nsid", _hex("Val", "w:val")),
    _el("w:multiLevelType", "MultiLevelType", _enum("Val", "w:val", MULTI_LEVEL_VALUES)),
    _el("w:tmpl", "TemplateCode", _hex("Val", "w:val")),
    _el(
        "w:lvl",
        "Level",
        _int("LevelIndex", "w:ilvl"),
        _hex("TemplateCode", "w:tplc"),
        _bool("Tentative", "w:tentative"),
    ),
    _el("w:start", "StartNumberingValue", _int("Val", "w:val")),
    _string_val("w:numFmt", "NumberingFormat"),
    _string_val("w:lvlText", "LevelText"),
    _el("w:lvlJc", "LevelJustification", _enum("Val", "w:val", LEVEL_JUSTIFICATION_VALUES)),
    _el("w:num", "NumberingInstance", _int("NumberID", "w:numId")),
    _el("w:abstractNumId", "AbstractNumId", _int("Val", "w:val")),
    # drawing
    _el("w:drawing", "Drawing"),
    _el(
        "wp:inline",
        "Inline",
        _uint("DistanceFromTop", "distT"),
        _uint("DistanceFromBottom", "distB"),
        _uint("DistanceFromLeft", "distL"),
        _uint("DistanceFromRight", "distR"),
        namespace=DRAWING_WORDPROCESSING,
    ),
    _el(
        "wp:extent",
        "Extent",
        _long("Cx", "cx"),
        _long("Cy", "cy"),
        namespace=DRAWING_WORDPROCESSING,
    ),
    _el(
        "wp:docPr",
        "DocProperties",
        _uint("Id", "id"),
        _scalar("Name", "name"),
        _scalar("Description", "descr"),
        namespace=DRAWING_WORDPROCESSING,
    ),
    _el("a:graphic", "Graphic", namespace=DRAWING),
    _el("a:graphicData", "GraphicData", _scalar("Uri", "uri"), namespace=DRAWING),
    _el("pic:pic", "Picture", namespace=PICTURES),
    _el("a:blip", "Blip", _scalar("Embed", "r:embed"), _scalar("Link", "r:link"), namespace=DRAWING),
    _el("a:off", "Offset", _long("X", "x"), _long("Y", "y"), namespace=DRAWING),
    _el("a:t", "Text", kind=ElementKind.LEAF_TEXT, namespace=DRAWING),
    # theme
    _el("a:theme", "Theme", _scalar("Name", "name"), namespace=DRAWING),
    _el("a:themeElements", "ThemeElements", namespace=DRAWING),
    _el("a:clrScheme", "ColorScheme", _scalar("Name", "name"), namespace=DRAWING),
    _el("a:fontScheme", "FontScheme", _scalar("Name", "name"), namespace=DRAWING),
    _el("a:fmtScheme", "FormatScheme", _scalar("Name", "name"), namespace=DRAWING),
    _el("a:srgbClr", "RgbColorModelHex", _hex("Val", "val"), namespace=DRAWING),
    _el(
        "a:sysClr",
        "SystemColor",
        _scalar("Val", "val"),
        _hex("LastColor", "lastClr"),
        namespace=DRAWING,
    ),
)

# Elements whose type depends on the element that contains them
_CONTEXT_ELEMENTS: Tuple[Tuple[str, ElementSchema], ...] = (
    ("w:r", _el("w:tab", "TabChar")),
    ("w:pPr", _el("w:rPr", "ParagraphMarkRunProperties")),
    ("w:rPrDefault", _el("w:rPr", "RunPropertiesBaseStyle")),
    ("w:pPrDefault", _el("w:pPr", "ParagraphPropertiesBaseStyle")),
    ("w:style", _el("w:rPr", "StyleRunProperties")),
    ("w:style", _el("w:pPr", "StyleParagraphProperties")),
    ("w:lvl", _el("w:pPr", "PreviousParagraphProperties")),
    ("w:lvl", _el("w:rPr", "NumberingSymbolRunProperties")),
    ("w:tblPr", _el("w:jc", "TableJustification", _enum("Val", "w:val", TABLE_JUSTIFICATION_VALUES))),
    ("w:rPr", _el("w:spacing", "Spacing", _int("Val", "w:val"))),
    (
        "a:xfrm",
        _el("a:ext", "Extents", _long("Cx", "cx"), _long("Cy", "cy"), namespace=DRAWING),
    ),
)


_element_registry: Dict[str, ElementSchema] = {}
_context_registry: Dict[Tuple[str, str], ElementSchema] = {}


def register_element_schema(schema: ElementSchema, parent_tag: Optional[str] = None) -> None:
    """Add (or replace) an element schema, optionally only for one parent element."""
    if parent_tag is None:
        _element_registry[schema.clark_name] = schema
    else:
        _context_registry[(qn(parent_tag), schema.clark_name)] = schema


for _schema in _ELEMENTS:
    register_element_schema(_schema)
for _parent, _schema in _CONTEXT_ELEMENTS:
    register_element_schema(_schema, _parent)
del _schema, _parent


def element_schema_for(tag: str, parent_tag: Optional[str] = None) -> Optional[ElementSchema]:
    """Schema for an element given its Clark-notation tag and its parent's tag."""
    if parent_tag is not None:
        schema = _context_registry.get((parent_tag, tag))
        if schema is not None:
            return schema
    return _element_registry.get(tag)


# Parts

_MEDIA_ROUTINES = frozenset(
    {"AddImagePart", "AddEmbeddedObjectPart", "AddEmbeddedPackagePart", "AddCustomXmlPart"}
)

PACKAGE_SCHEMA = PartSchema(
    type_name="WordprocessingDocument",
    add_routines=frozenset(
        {
            "AddMainDocumentPart",
            "AddCoreFilePropertiesPart",
            "AddExtendedFilePropertiesPart",
            "AddCustomFilePropertiesPart",
            "AddDigitalSignatureOriginPart",
            "AddThumbnailPart",
        }
    ),
)

EXTENDED_PART_SCHEMA = PartSchema(type_name="ExtendedPart")
IMAGE_PART_SCHEMA = PartSchema(type_name="ImagePart")

_PARTS: Tuple[PartSchema, ...] = (
    PartSchema(
        type_name="MainDocumentPart",
        content_types=(
            CT.WML_DOCUMENT_MAIN,
            "application/vnd.ms-word.document.macroEnabled.main+xml",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.template.main+xml",
            "application/vnd.ms-word.template.macroEnabledTemplate.main+xml",
        ),
        root_tag="w:document",
        root_property="Document",
        add_routines=_MEDIA_ROUTINES | {"AddFontPart"},
    ),
    PartSchema(
        type_name="StyleDefinitionsPart",
        content_types=(CT.WML_STYLES,),
        root_tag="w:styles",
        root_property="Styles",
    ),
    PartSchema(
        type_name="StylesWithEffectsPart",
        content_types=("application/vnd.ms-word.stylesWithEffects+xml",),
        root_tag="w:styles",
        root_property="Styles",
    ),
    PartSchema(
        type_name="NumberingDefinitionsPart",
        content_types=(CT.WML_NUMBERING,),
        root_tag="w:numbering",
        root_property="Numbering",
        add_routines=frozenset({"AddImagePart"}),
    ),
    PartSchema(
        type_name="DocumentSettingsPart",
        content_types=(CT.WML_SETTINGS,),
        root_tag="w:settings",
        root_property="Settings",
        add_routines=frozenset({"AddImagePart"}),
    ),
    PartSchema(
        type_name="WebSettingsPart",
        content_types=(CT.WML_WEB_SETTINGS,),
        root_tag="w:webSettings",
        root_property="WebSettings",
    ),
    PartSchema(
        type_name="FontTablePart",
        content_types=(CT.WML_FONT_TABLE,),
        root_tag="w:fonts",
        root_property="Fonts",
        add_routines=frozenset({"AddFontPart"}),
    ),
    PartSchema(
        type_name="HeaderPart",
        content_types=(CT.WML_HEADER,),
        root_tag="w:hdr",
        root_property="Header",
        add_routines=_MEDIA_ROUTINES,
    ),
    PartSchema(
        type_name="FooterPart",
        content_types=(CT.WML_FOOTER,),
        root_tag="w:ftr",
        root_property="Footer",
        add_routines=_MEDIA_ROUTINES,
    ),
    PartSchema(
        type_name="FootnotesPart",
        content_types=(CT.WML_FOOTNOTES,),
        root_tag="w:footnotes",
        root_property="Footnotes",
        add_routines=_MEDIA_ROUTINES,
    ),
    PartSchema(
        type_name="EndnotesPart",
        content_types=(CT.WML_ENDNOTES,),
        root_tag="w:endnotes",
        root_property="Endnotes",
        add_routines=_MEDIA_ROUTINES,
    ),
    PartSchema(
        type_name="WordprocessingCommentsPart",
        content_types=(CT.WML_COMMENTS,),
        root_tag="w:comments",
        root_property="Comments",
        add_routines=_MEDIA_ROUTINES,
    ),
    PartSchema(
        type_name="GlossaryDocumentPart",
        content_types=(CT.WML_DOCUMENT_GLOSSARY,),
        root_tag="w:glossaryDocument",
        root_property="GlossaryDocument",
        add_routines=_MEDIA_ROUTINES,
    ),
    PartSchema(
        type_name="ThemePart",
        content_types=(CT.OFC_THEME,),
        root_tag="a:theme",
        root_property="Theme",
        add_routines=frozenset({"AddImagePart"}),
    ),
    PartSchema(type_name="CoreFilePropertiesPart", content_types=(CT.OPC_CORE_PROPERTIES,)),
    PartSchema(type_name="ExtendedFilePropertiesPart", content_types=(CT.OFC_EXTENDED_PROPERTIES,)),
    PartSchema(type_name="CustomFilePropertiesPart", content_types=(CT.OFC_CUSTOM_PROPERTIES,)),
    PartSchema(type_name="CustomXmlPart", content_types=("application/xml", "text/xml")),
    PartSchema(
        type_name="CustomXmlPropertiesPart",
        content_types=(CT.OFC_CUSTOM_XML_PROPERTIES,),
    ),
    PartSchema(
        type_name="EmbeddedPackagePart",
        content_types=(
            CT.OFC_PACKAGE,
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            "application/vnd.openxmlformats-officedocument.presentationml.presentation",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        ),
        opaque_payload=True,
    ),
    PartSchema(type_name="EmbeddedObjectPart", content_types=(CT.OFC_OLE_OBJECT,)),
    PartSchema(
        type_name="FontPart",
        content_types=(
            "application/vnd.openxmlformats-officedocument.obfuscatedFont",
            "application/x-fontdata",
            "application/x-font-ttf",
        ),
    ),
)

_part_registry: Dict[str, PartSchema] = {}


def register_part_schema(schema: PartSchema) -> None:
    """Add (or replace) a part schema for each of its content types."""
    for content_type in schema.content_types:
        _part_registry[content_type] = schema


for _part_schema in _PARTS:
    register_part_schema(_part_schema)
del _part_schema


def part_schema_for(content_type: str) -> PartSchema:
    """Part schema for a content type; images and unregistered types have fallbacks."""
    schema = _part_registry.get(content_type)
    if schema is not None:
        return schema
    if content_type.startswith("image/"):
        return IMAGE_PART_SCHEMA
    return EXTENDED_PART_SCHEMA
