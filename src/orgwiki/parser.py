# Recursive-descent parser for the line-oriented wiki markup
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org
import enum
from collections.abc import Iterator
from typing import Literal, NamedTuple, Optional, TypedDict, Union, overload

from .common import (
    BULLET_BYTE,
    CLOSE_BRACKET_BYTE,
    CR_BYTE,
    NEWLINE_BYTE,
    OPEN_BRACKET_BYTE,
    SOURCE_ENCODING,
    SPACE_BYTE,
)
from .logging_utils import logger
from .scanner import ByteScanner, Position, ScannerSource, make_scanner


@enum.unique
class NodeKind(enum.Flag):
    """Node types in the parse tree."""

    # Root node of the tree.  There is exactly one per parsed document.
    DOCUMENT = enum.auto()

    # A "* title" line.  Attribute "level" is the number of bullet
    # characters.  The title is in a single TEXT child (which may be
    # followed by LINK and TEXT children if the title contains links).
    HEADER = enum.auto()

    # A run of non-blank, non-header lines.  Children are TEXT and LINK.
    PARAGRAPH = enum.auto()

    # Literal text.  Content is in ``text``.  TEXT nodes opened at the
    # start of a paragraph line also carry the line's indentation in
    # attribute "level".
    TEXT = enum.auto()

    # A [[target]] or [[target][text]] link.  Attribute "link" is the
    # target; the display text is in TEXT children (possibly one empty
    # TEXT node).
    LINK = enum.auto()

    @property
    def tag(self) -> str:
        """Name used for the kind in serialized output, e.g. "Paragraph"."""
        assert self.name is not None
        return self.name.capitalize()


# Node kinds that may hold literal text while they are the cursor.  LINK
# nodes accumulate their target before it is moved into "link".
TEXT_HOLDER_KIND_FLAGS = NodeKind.TEXT | NodeKind.LINK


class ParseErrorKind(str, enum.Enum):
    """Recoverable problems found while parsing.  None of them stops the
    parse; they are collected as ParseErrorData records."""

    UNEXPECTED_CLOSE_BRACKET = "UnexpectedCloseBracket"
    UNEXPECTED_OPEN_BRACKET = "UnexpectedOpenBracket"
    WRONG_CONTEXT_BRACKET = "WrongContextBracket"
    MALFORMED_HEADER_BULLET = "MalformedHeaderBullet"
    UNEXPECTED_END_OF_INPUT = "UnexpectedEndOfInput"
    UNEXPECTED_CHARACTER = "UnexpectedCharacter"


class ParseErrorData(TypedDict):
    kind: ParseErrorKind
    msg: str
    called_from: str
    line: int
    column: int
    offset: int


class LinkState(enum.Enum):
    """States of the link bracket state machine."""

    START = enum.auto()  # after the opening "["
    LINK = enum.auto()  # inside the target brackets
    MIDDLE = enum.auto()  # after the target's closing "]"
    TEXT = enum.auto()  # inside the display text brackets
    END = enum.auto()  # after the display text's closing "]"


class Element:
    """Node in the parse tree.  Nodes live in an ElementTree arena and
    refer to their parent and children by index."""

    __slots__ = (
        "kind",
        "index",
        "parent",
        "children",
        "attrs",
        "text",
        "loc",
        "_buf",
    )

    def __init__(
        self, kind: NodeKind, index: int, parent: Optional[int], loc: int
    ) -> None:
        assert isinstance(kind, NodeKind)
        assert isinstance(index, int)
        self.kind = kind
        self.index = index
        self.parent = parent
        self.children: list[int] = []
        self.attrs: dict[str, str] = {}
        self.text = ""
        self.loc = loc  # line where the node was opened
        self._buf = bytearray()

    def __str__(self) -> str:
        return "<{}{} {!r} {}>".format(
            self.kind.name, self.attrs, self.text, self.children
        )

    def __repr__(self) -> str:
        return self.__str__()

    def append_byte(self, c: int) -> None:
        self._buf.append(c)

    def flush_text(self) -> None:
        """Decodes bytes accumulated so far and appends them to ``text``."""
        if self._buf:
            self.text += self._buf.decode(SOURCE_ENCODING, "replace")
            self._buf.clear()

    def take_text(self) -> str:
        """Returns the accumulated text and clears it."""
        self.flush_text()
        text = self.text
        self.text = ""
        return text


class ElementTree:
    """Arena holding all nodes of one parsed document.  Node 0 is the
    DOCUMENT root."""

    __slots__ = ("nodes",)

    def __init__(self) -> None:
        self.nodes: list[Element] = []

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, index: int) -> Element:
        return self.nodes[index]

    def __iter__(self) -> Iterator[Element]:
        return self.walk(self.root)

    @property
    def root(self) -> Element:
        return self.nodes[0]

    def add(
        self, kind: NodeKind, parent: Optional[int], loc: int
    ) -> Element:
        """Creates a node and appends it as the last child of ``parent``."""
        node = Element(kind, len(self.nodes), parent, loc)
        self.nodes.append(node)
        if parent is not None:
            self.nodes[parent].children.append(node.index)
        return node

    def children_of(self, node: Element) -> list[Element]:
        return [self.nodes[i] for i in node.children]

    def parent_of(self, node: Element) -> Optional[Element]:
        if node.parent is None:
            return None
        return self.nodes[node.parent]

    def walk(self, node: Element) -> Iterator[Element]:
        """Yields ``node`` and its descendants in document order."""
        yield node
        for index in node.children:
            yield from self.walk(self.nodes[index])

    def find_all(
        self, target_kinds: NodeKind, start: Optional[Element] = None
    ) -> Iterator[Element]:
        """Finds nodes below ``start`` (default: the root) whose kind is in
        ``target_kinds``, which may combine several kinds with "|"."""
        for node in self.walk(self.root if start is None else start):
            if node.kind in target_kinds:
                yield node


class ParseResult(NamedTuple):
    tree: Optional[ElementTree]
    errors: list[ParseErrorData]


class Parser:
    """Single-pass parser from markup bytes to an ElementTree.  The parser
    keeps a cursor (``current``, a node index) that moves down when an
    element is opened and back up when it is closed.  An instance handles
    one parse at a time; use separate instances for concurrent parses."""

    def __init__(self) -> None:
        self.tree: Optional[ElementTree] = None
        self.current: Optional[int] = None
        self.position = Position()
        self.errors: list[ParseErrorData] = []

    @property
    def root(self) -> Optional[Element]:
        if self.tree is None:
            return None
        return self.tree.root

    @property
    def node(self) -> Element:
        """The node at the cursor."""
        assert self.tree is not None and self.current is not None
        return self.tree[self.current]

    def _open(self, kind: NodeKind) -> Element:
        """Appends a new node of the given kind to the current node and
        moves the cursor to it."""
        assert self.tree is not None
        node = self.tree.add(kind, self.current, self.position.line)
        self.current = node.index
        return node

    def _close(self) -> None:
        """Moves the cursor to the parent of the current node."""
        node = self.node
        assert node.parent is not None, "cannot close the document root"
        node.flush_text()
        self.current = node.parent

    def _is_inside(self, kind_flags: NodeKind) -> bool:
        """Returns True if the current node or any of its ancestors is of
        the given kind."""
        assert self.tree is not None
        index = self.current
        while index is not None:
            node = self.tree[index]
            if node.kind in kind_flags:
                return True
            index = node.parent
        return False

    def _parent_kind(self, node: Element) -> Optional[NodeKind]:
        assert self.tree is not None
        parent = self.tree.parent_of(node)
        return None if parent is None else parent.kind

    def _open_if_absent(self, kind: NodeKind) -> None:
        if not self._is_inside(kind):
            self._open(kind)

    def _close_if_present(self, kind: NodeKind) -> None:
        """Closes nodes up to and including the innermost one of the given
        kind.  Does nothing if there is no such node."""
        if not self._is_inside(kind):
            return
        while self.node.kind != kind:
            self._close()
        self._close()

    def _report(
        self, kind: ParseErrorKind, called_from: str, msg: str
    ) -> None:
        """Records a recoverable parse error at the current position."""
        pos = self.position
        self.errors.append(
            {
                "kind": kind,
                "msg": msg,
                "called_from": called_from,
                "line": pos.line,
                "column": pos.column,
                "offset": pos.offset,
            }
        )
        logger.debug(
            "%s: %s at line %d, column %d",
            called_from,
            msg,
            pos.line,
            pos.column,
        )

    def parse(self, source: ScannerSource) -> Optional[ElementTree]:
        """Parses a document.  Returns None (and leaves ``tree`` unset) if
        the source is empty.  Errors found during parsing are in
        ``errors`` afterwards."""
        r = make_scanner(source)
        self.tree = None
        self.current = None
        self.position.reset()
        self.errors = []

        if r.read_byte() is None:
            return None
        r.unread_byte()
        self.tree = ElementTree()
        self.current = self.tree.add(NodeKind.DOCUMENT, None, 1).index
        while True:
            if r.read_byte() is None:
                break
            r.unread_byte()
            self._parse_line(r)

        # Close whatever is still open (normally an unterminated paragraph)
        # so that all text buffers get flushed.
        while self.node.parent is not None:
            self._close()
        self.node.flush_text()
        return self.tree

    def _parse_line(self, r: ByteScanner) -> None:
        """Parses a line that may be a header, paragraph text or blank."""
        level = 0
        while True:
            c = r.read_byte()
            if c is None:
                return
            if c == BULLET_BYTE and level == 0:
                self._close_if_present(NodeKind.PARAGRAPH)
                r.unread_byte()
                self._parse_header(r)
            elif c == SPACE_BYTE:
                level += 1
                self.position.next_column()
            elif c == NEWLINE_BYTE:
                self._close_if_present(NodeKind.PARAGRAPH)
                self.position.next_line()
                break
            elif c == CR_BYTE:
                self.position.next_column()
            else:
                self._open_if_absent(NodeKind.PARAGRAPH)
                r.unread_byte()
                text = self._open(NodeKind.TEXT)
                text.attrs["level"] = str(level)
                self._parse_text_line(r)
                self._close()

    def _parse_text_line(self, r: ByteScanner) -> None:
        """Scans text into the current node up to the end of the line.
        Opens LINK nodes for "[" and stops before a "]" that closes one."""
        while True:
            c = r.read_byte()
            if c is None:
                return
            if c == NEWLINE_BYTE:
                self.position.next_line()
                return
            if c == CR_BYTE:
                self.position.next_column()
                continue
            node = self.node
            if c == CLOSE_BRACKET_BYTE:
                if node.kind == NodeKind.LINK or (
                    node.kind == NodeKind.TEXT
                    and self._parent_kind(node) == NodeKind.LINK
                ):
                    r.unread_byte()
                    return
                self._report(
                    ParseErrorKind.UNEXPECTED_CLOSE_BRACKET,
                    "parse_text_line",
                    "unexpected ]",
                )
                self.position.next_column()
                return
            if c == OPEN_BRACKET_BYTE:
                if (
                    node.kind == NodeKind.TEXT
                    and self._parent_kind(node) != NodeKind.LINK
                ):
                    self.position.next_column()
                    self._close()
                    self._parse_link(r)
                    self._open(NodeKind.TEXT)
                else:
                    # The bracket is dropped, not kept as text.
                    self._report(
                        ParseErrorKind.WRONG_CONTEXT_BRACKET,
                        "parse_text_line",
                        "unexpected [ in {}".format(node.kind.tag),
                    )
                    self.position.next_column()
                continue
            assert node.kind in TEXT_HOLDER_KIND_FLAGS
            self.position.next_column()
            node.append_byte(c)

    def _parse_header(self, r: ByteScanner) -> None:
        """Parses a header line.  Format is "* Header1", "** Header2" etc."""
        self._open(NodeKind.HEADER)
        try:
            self._parse_header_bullet(r)
            self._open(NodeKind.TEXT)
            try:
                self._parse_text_line(r)
            finally:
                self._close()
        finally:
            self._close()

    def _parse_header_bullet(self, r: ByteScanner) -> None:
        """Consumes the bullet characters and the space after them, and sets
        the "level" of the current HEADER node."""
        header = self.node
        level = 0
        try:
            while True:
                c = r.read_byte()
                if c is None:
                    self._report(
                        ParseErrorKind.UNEXPECTED_END_OF_INPUT,
                        "parse_header_bullet",
                        "unexpected end of input",
                    )
                    return
                if c == BULLET_BYTE:
                    level += 1
                    self.position.next_column()
                elif c == SPACE_BYTE:
                    self.position.next_column()
                    break
                else:
                    self.position.next_column()
                    self._report(
                        ParseErrorKind.MALFORMED_HEADER_BULLET,
                        "parse_header_bullet",
                        "* or space expected",
                    )
                    return
        finally:
            header.attrs["level"] = str(level)

    def _parse_link(self, r: ByteScanner) -> None:
        """Parses a link.  Format is [[link]] or [[link][text]].  The first
        "[" has already been consumed."""
        state = LinkState.START
        link = self._open(NodeKind.LINK)
        link.attrs["link"] = ""
        try:
            while True:
                c = r.read_byte()
                if c is None:
                    self._report(
                        ParseErrorKind.UNEXPECTED_END_OF_INPUT,
                        "parse_link",
                        "unexpected end of input",
                    )
                    return
                if c == OPEN_BRACKET_BYTE:
                    self.position.next_column()
                    if state == LinkState.START:
                        state = LinkState.LINK
                    elif state == LinkState.MIDDLE:
                        state = LinkState.TEXT
                    else:
                        self._report(
                            ParseErrorKind.UNEXPECTED_OPEN_BRACKET,
                            "parse_link",
                            "unexpected [",
                        )
                        return
                elif c == CLOSE_BRACKET_BYTE:
                    self.position.next_column()
                    if state == LinkState.LINK:
                        state = LinkState.MIDDLE
                    elif state == LinkState.TEXT:
                        state = LinkState.END
                    elif state == LinkState.MIDDLE:
                        break
                    elif state == LinkState.END:
                        return
                    else:
                        self._report(
                            ParseErrorKind.UNEXPECTED_CLOSE_BRACKET,
                            "parse_link",
                            "unexpected ]",
                        )
                        return
                elif c == SPACE_BYTE:
                    self.position.next_column()
                elif state == LinkState.LINK:
                    r.unread_byte()
                    self._parse_text_line(r)
                    link.attrs["link"] += link.take_text()
                elif state == LinkState.TEXT:
                    r.unread_byte()
                    self._open(NodeKind.TEXT)
                    self._parse_text_line(r)
                    self._close()
                else:
                    self.position.next_column()
                    self._report(
                        ParseErrorKind.UNEXPECTED_CHARACTER,
                        "parse_link",
                        "unexpected character {!r}".format(chr(c)),
                    )
                    return

            # [[target]] has no display text; give it an empty one
            if not link.children:
                self._open(NodeKind.TEXT)
                self._close()
        finally:
            self._close()


def parse(source: ScannerSource) -> ParseResult:
    """Parses ``source`` with a fresh Parser and returns the tree (None for
    an empty document) together with the errors found."""
    p = Parser()
    tree = p.parse(source)
    return ParseResult(tree, p.errors)


@overload
def print_tree(
    tree: Optional[ElementTree],
    node: Optional[Element] = ...,
    indent: int = ...,
    *,
    ret_value: Literal[True],
) -> str: ...


@overload
def print_tree(
    tree: Optional[ElementTree],
    node: Optional[Element] = ...,
    indent: int = ...,
    ret_value: Literal[False] = ...,
) -> None: ...


def print_tree(
    tree: Optional[ElementTree],
    node: Optional[Element] = None,
    indent: int = 0,
    ret_value: bool = False,
) -> Union[str, None]:
    """Prints the parse tree for debugging purposes."""
    assert isinstance(indent, int)
    parts: list[str] = []
    if tree is not None:
        if node is None:
            node = tree.root
        parts.append("{}{}".format(" " * indent, node.kind.name))
        for k, v in node.attrs.items():
            parts.append("{}    {}={}".format(" " * indent, k, v))
        if node.text:
            parts.append("{}    {!r}".format(" " * indent, node.text))
        for child in tree.children_of(node):
            parts.append(print_tree(tree, child, indent + 2, ret_value=True))

    if ret_value:
        return "\n".join(parts)
    print("\n".join(parts))
    return None
