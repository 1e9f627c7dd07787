from .core import OrgWiki
from .parser import (
    Element,
    ElementTree,
    NodeKind,
    ParseErrorData,
    ParseErrorKind,
    Parser,
    ParseResult,
    parse,
    print_tree,
)
from .writer import HTMLWriter, TreeWriter, XMLWriter, to_html, to_text, to_xml

__all__ = (
    "OrgWiki",
    "Element",
    "ElementTree",
    "NodeKind",
    "ParseErrorData",
    "ParseErrorKind",
    "Parser",
    "ParseResult",
    "parse",
    "print_tree",
    "TreeWriter",
    "XMLWriter",
    "HTMLWriter",
    "to_html",
    "to_text",
    "to_xml",
)
