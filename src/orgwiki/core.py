# Context object for parsing and rendering wiki pages
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import logging
from typing import Optional, TypedDict

from lru import LRU

from .logging_utils import logger
from .parser import ElementTree, ParseErrorData, ParseErrorKind, Parser
from .scanner import ScannerSource
from .writer import to_html, to_text, to_xml

# Parse errors after which part of the input was left out of the tree.
# The others only drop a single bracket or stop a line early.
TRUNCATING_ERROR_KINDS = frozenset(
    [
        ParseErrorKind.UNEXPECTED_END_OF_INPUT,
        ParseErrorKind.UNEXPECTED_CHARACTER,
        ParseErrorKind.UNEXPECTED_OPEN_BRACKET,
    ]
)


class ErrorMessageData(TypedDict):
    msg: str
    trace: str
    title: Optional[str]
    called_from: str
    line: int
    column: int


class CollatedErrorReturnData(TypedDict):
    errors: list[ErrorMessageData]
    warnings: list[ErrorMessageData]
    debugs: list[ErrorMessageData]


class OrgWiki:
    """Context for parsing and rendering the markup of wiki pages.  Call
    start_page() before working on a page; messages collected while
    parsing the page are kept in ``errors``, ``warnings`` and ``debugs``
    until the next start_page().

    ``cache_size`` is the number of rendered pages kept by render()
    (0 disables the cache).  ``page_url_fmt`` is used for links to other
    pages in HTML output, e.g. "/view/{}"."""

    def __init__(
        self,
        quiet: bool = False,
        cache_size: int = 128,
        page_url_fmt: Optional[str] = None,
    ) -> None:
        assert isinstance(cache_size, int) and cache_size >= 0
        self.title: Optional[str] = None
        self.errors: list[ErrorMessageData] = []
        self.warnings: list[ErrorMessageData] = []
        self.debugs: list[ErrorMessageData] = []
        self.page_url_fmt = page_url_fmt
        self.render_cache: Optional[LRU] = (
            LRU(cache_size) if cache_size > 0 else None
        )
        if not quiet:
            logger.setLevel(logging.DEBUG)

    def start_page(self, title: str) -> None:
        """Starts a new page.  This saves the title for error messages and
        clears the self.errors, self.warnings and self.debugs lists."""
        assert isinstance(title, str)
        self.title = title
        self.errors = []
        self.warnings = []
        self.debugs = []

    def _fmt_errmsg(
        self, level: int, kind: str, msg: str, trace: Optional[str]
    ) -> None:
        loc = self.title or "ERROR_TITLE"
        if trace:
            msg += "\n" + trace
        logger.log(level, "%s: %s: %s", loc, kind, msg)

    def _message(
        self,
        msg: str,
        trace: Optional[str],
        sortid: str,
        line: int,
        column: int,
    ) -> ErrorMessageData:
        assert isinstance(msg, str)
        assert isinstance(trace, (str, type(None)))
        assert isinstance(sortid, str)
        return {
            "msg": msg,
            "trace": trace or "",
            "title": self.title or "ERROR_TITLE",
            "called_from": sortid,
            "line": line,
            "column": column,
        }

    def error(
        self,
        msg: str,
        trace: Optional[str] = None,
        sortid: str = "XYZunsorted",
        line: int = 0,
        column: int = 0,
    ) -> None:
        """Logs an error message.  The error is also saved in
        self.errors."""
        self.errors.append(self._message(msg, trace, sortid, line, column))
        self._fmt_errmsg(logging.ERROR, "ERROR", msg, trace)

    def warning(
        self,
        msg: str,
        trace: Optional[str] = None,
        sortid: str = "XYZunsorted",
        line: int = 0,
        column: int = 0,
    ) -> None:
        """Logs a warning message.  The warning is also saved in
        self.warnings."""
        self.warnings.append(self._message(msg, trace, sortid, line, column))
        self._fmt_errmsg(logging.WARNING, "WARNING", msg, trace)

    def debug(
        self,
        msg: str,
        trace: Optional[str] = None,
        sortid: str = "XYZunsorted",
        line: int = 0,
        column: int = 0,
    ) -> None:
        """Logs a debug message.  The message is also saved in
        self.debugs."""
        self.debugs.append(self._message(msg, trace, sortid, line, column))
        self._fmt_errmsg(logging.DEBUG, "DEBUG", msg, trace)

    def to_return(self) -> CollatedErrorReturnData:
        """Returns a dictionary with errors, warnings, and debug messages
        from the context.  The value is JSON-compatible."""
        return {
            "errors": self.errors,
            "warnings": self.warnings,
            "debugs": self.debugs,
        }

    def _collect(self, err: ParseErrorData) -> None:
        trace = "at line {}, column {}".format(err["line"], err["column"])
        msg = "{}: {}".format(err["kind"].value, err["msg"])
        if err["kind"] in TRUNCATING_ERROR_KINDS:
            report = self.warning
        else:
            report = self.debug
        report(
            msg,
            trace=trace,
            sortid=err["called_from"],
            line=err["line"],
            column=err["column"],
        )

    def parse(self, text: ScannerSource) -> Optional[ElementTree]:
        """Parses page markup into a tree.  Returns None for an empty
        page."""
        p = Parser()
        tree = p.parse(text)
        for err in p.errors:
            self._collect(err)
        return tree

    def to_xml(self, tree: Optional[ElementTree], pretty: bool = False) -> str:
        return to_xml(tree, pretty)

    def to_html(
        self, tree: Optional[ElementTree], pretty: bool = False
    ) -> str:
        return to_html(tree, pretty, page_url_fmt=self.page_url_fmt)

    def to_text(self, tree: Optional[ElementTree]) -> str:
        return to_text(tree)

    def render(self, text: str) -> str:
        """Parses the markup of the current page and returns it as an HTML
        fragment.  Results are cached by page title and markup, so a cache
        hit does not report the page's parse errors again."""
        assert isinstance(text, str)
        key = (self.title, text)
        if self.render_cache is not None and key in self.render_cache:
            logger.debug("render cache hit for %s", self.title)
            return self.render_cache[key]
        html = self.to_html(self.parse(text))
        if self.render_cache is not None:
            self.render_cache[key] = html
        return html

    def clear_cache(self) -> None:
        if self.render_cache is not None:
            self.render_cache.clear()
