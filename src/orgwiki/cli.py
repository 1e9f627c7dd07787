# Command-line renderer for wiki markup files
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import argparse
import sys
from pathlib import Path
from typing import Optional

from .core import OrgWiki
from .logging_utils import logger
from .writer import WRITERS, get_writer, write_tree


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="orgwiki",
        description="Convert wiki markup to XML, HTML or plain text",
    )
    parser.add_argument(
        "path", nargs="?", help="markup file, standard input if omitted"
    )
    parser.add_argument(
        "--format",
        choices=sorted(WRITERS),
        default="html",
        help="output format (default: html)",
    )
    parser.add_argument(
        "--pretty", action="store_true", help="indent nested elements"
    )
    parser.add_argument(
        "--page-url",
        metavar="FMT",
        help='URL format for links to pages in HTML, e.g. "/view/{}"',
    )
    parser.add_argument(
        "--quiet", action="store_true", help="don't log parse errors"
    )
    args = parser.parse_args(argv)

    if args.path is None:
        source = sys.stdin.buffer.read()
        title = "<stdin>"
    else:
        path = Path(args.path)
        if not path.is_file():
            logger.error(f"markup file {path} doesn't exist")
            return 1
        source = path.read_bytes()
        title = path.stem

    wiki = OrgWiki(quiet=args.quiet, cache_size=0)
    wiki.start_page(title)
    tree = wiki.parse(source)
    kwargs = {}
    if args.format == "html" and args.page_url:
        kwargs["page_url_fmt"] = args.page_url
    write_tree(tree, get_writer(args.format, sys.stdout, **kwargs), args.pretty)
    if tree is not None:
        sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
