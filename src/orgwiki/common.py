# Some definitions used for both parsing and writing wiki markup
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import html
import re

# Bytes with a special meaning to the scanner.  The scanner works on raw
# bytes, so these are ints rather than one-character strings.
BULLET_BYTE: int = ord("*")
SPACE_BYTE: int = ord(" ")
NEWLINE_BYTE: int = ord("\n")
CR_BYTE: int = ord("\r")
OPEN_BRACKET_BYTE: int = ord("[")
CLOSE_BRACKET_BYTE: int = ord("]")

# Text accumulated from the input is decoded with this encoding once a node
# is closed.  Invalid sequences are replaced rather than reported.
SOURCE_ENCODING = "utf-8"

# Link targets that start with a URL scheme are external and never mapped
# through a page URL format.
URL_SCHEME_RE: re.Pattern[str] = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")


def is_url(target: str) -> bool:
    """Returns True if the link target looks like an absolute URL rather
    than the name of a wiki page."""
    return URL_SCHEME_RE.match(target) is not None


def escape_text(text: str) -> str:
    return html.escape(text, quote=False)


def escape_attr(value: str) -> str:
    return html.escape(value, quote=True)
