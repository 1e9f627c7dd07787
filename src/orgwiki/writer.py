# Writing parse trees out as XML, HTML or plain text
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import io
import urllib.parse
from typing import Optional, TextIO

from .common import escape_attr, escape_text, is_url
from .parser import Element, ElementTree, NodeKind

INDENT = "  "


class TreeWriter:
    """Receives start/text/end events from write_tree() and writes markup
    to ``out``."""

    def __init__(self, out: TextIO) -> None:
        self.out = out

    def write(self, s: str) -> None:
        self.out.write(s)

    def start_element(self, node: Element) -> None:
        raise NotImplementedError

    def text(self, node: Element) -> None:
        raise NotImplementedError

    def end_element(self, node: Element) -> None:
        raise NotImplementedError


class XMLWriter(TreeWriter):
    """Writes each node as a tag named after its kind, with all its
    attributes.  TEXT nodes only write their content."""

    def start_element(self, node: Element) -> None:
        if node.kind == NodeKind.TEXT:
            return
        attrs = " ".join(
            '{}="{}"'.format(k, escape_attr(v)) for k, v in node.attrs.items()
        )
        if attrs:
            self.write("<{} {}>".format(node.kind.tag, attrs))
        else:
            self.write("<{}>".format(node.kind.tag))

    def text(self, node: Element) -> None:
        self.write(escape_text(node.text))

    def end_element(self, node: Element) -> None:
        if node.kind == NodeKind.TEXT:
            return
        self.write("</{}>".format(node.kind.tag))


class HTMLWriter(TreeWriter):
    """Writes an HTML fragment.  HEADER becomes h1..hN, PARAGRAPH p and
    LINK a; DOCUMENT and TEXT have no tag of their own.

    If ``page_url_fmt`` is given (for example "/view/{}"), link targets
    that are not URLs are taken to be page titles and formatted into it."""

    def __init__(self, out: TextIO, page_url_fmt: Optional[str] = None) -> None:
        super().__init__(out)
        self.page_url_fmt = page_url_fmt

    def link_url(self, target: str) -> str:
        if self.page_url_fmt is None or not target or is_url(target):
            return target
        return self.page_url_fmt.format(urllib.parse.quote(target))

    def html_tag(self, node: Element) -> tuple[str, dict[str, str]]:
        kind = node.kind
        if kind == NodeKind.LINK:
            return "a", {"href": self.link_url(node.attrs.get("link", ""))}
        elif kind == NodeKind.PARAGRAPH:
            return "p", {}
        elif kind == NodeKind.HEADER:
            return "h" + node.attrs.get("level", ""), {}
        elif kind in (NodeKind.DOCUMENT, NodeKind.TEXT):
            return "", {}
        raise RuntimeError("unimplemented {}".format(kind))

    def start_element(self, node: Element) -> None:
        tag, attrs = self.html_tag(node)
        if not tag:
            return
        parts = [tag]
        for k, v in attrs.items():
            if not v:
                continue
            parts.append('{}="{}"'.format(k, escape_attr(v)))
        self.write("<{}>".format(" ".join(parts)))

    def text(self, node: Element) -> None:
        self.write(escape_text(node.text))

    def end_element(self, node: Element) -> None:
        tag, _ = self.html_tag(node)
        if not tag:
            return
        self.write("</{}>".format(tag))


class TextWriter(TreeWriter):
    """Writes only the text, one line per header or paragraph."""

    def start_element(self, node: Element) -> None:
        pass

    def text(self, node: Element) -> None:
        self.write(node.text)

    def end_element(self, node: Element) -> None:
        if node.kind in NodeKind.HEADER | NodeKind.PARAGRAPH:
            self.write("\n")


WRITERS: dict[str, type[TreeWriter]] = {
    "xml": XMLWriter,
    "html": HTMLWriter,
    "text": TextWriter,
}


def get_writer(fmt: str, out: TextIO, **kwargs) -> TreeWriter:
    """Returns a writer for the output format ``fmt``.  Keyword arguments
    are passed to the writer class."""
    if fmt not in WRITERS:
        raise ValueError(
            "unknown output format {!r}, expected one of {}".format(
                fmt, ", ".join(sorted(WRITERS))
            )
        )
    return WRITERS[fmt](out, **kwargs)


def write_tree(
    tree: Optional[ElementTree],
    w: TreeWriter,
    pretty: bool = False,
    node: Optional[Element] = None,
) -> None:
    """Writes the tree (or the subtree at ``node``) with ``w``.  If
    ``pretty`` is True, nodes that contain no text are written one child
    per indented line.  Nothing is written for an empty document."""
    if tree is None:
        return

    def recurse(node: Element, level: int) -> None:
        if node.kind == NodeKind.TEXT:
            w.text(node)
        w.write(INDENT * level)
        w.start_element(node)
        children = tree.children_of(node)
        # Once a node has text among its children it is inline content
        # and is never broken over lines.
        has_text = any(child.kind == NodeKind.TEXT for child in children)

        seen_text = False
        for child in children:
            if seen_text and child.text:
                w.write(" ")
            if child.text:
                seen_text = True
            elif child.kind != NodeKind.TEXT:
                seen_text = False
            if pretty and not has_text:
                w.write("\n")
                recurse(child, level + 1)
                w.write(INDENT * level)
            else:
                recurse(child, 0)
        if pretty and not has_text and node.kind != NodeKind.TEXT:
            w.write("\n")
        w.end_element(node)

    recurse(tree.root if node is None else node, 0)


def to_xml(tree: Optional[ElementTree], pretty: bool = False) -> str:
    """Converts the parse tree to XML."""
    out = io.StringIO()
    write_tree(tree, XMLWriter(out), pretty)
    return out.getvalue()


def to_html(
    tree: Optional[ElementTree],
    pretty: bool = False,
    page_url_fmt: Optional[str] = None,
) -> str:
    """Converts the parse tree to an HTML fragment."""
    out = io.StringIO()
    write_tree(tree, HTMLWriter(out, page_url_fmt=page_url_fmt), pretty)
    return out.getvalue()


def to_text(
    tree: Optional[ElementTree], node: Optional[Element] = None
) -> str:
    """Converts the parse tree (or the subtree at ``node``) to plain
    text."""
    out = io.StringIO()
    write_tree(tree, TextWriter(out), node=node)
    return out.getvalue().strip()
