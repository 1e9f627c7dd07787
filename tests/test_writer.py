# Tests for writing parse trees as XML, HTML and text
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import io
import unittest

from orgwiki.parser import ElementTree, parse
from orgwiki.writer import (
    HTMLWriter,
    TextWriter,
    XMLWriter,
    get_writer,
    to_html,
    to_text,
    to_xml,
    write_tree,
)


class WriterTests(unittest.TestCase):
    def tree(self, text: str) -> ElementTree:
        tree, _ = parse(text)
        assert tree is not None
        return tree

    def test_empty_document(self):
        tree, _ = parse("")
        self.assertEqual(to_xml(tree), "")
        self.assertEqual(to_xml(tree, pretty=True), "")
        self.assertEqual(to_html(tree), "")
        self.assertEqual(to_text(tree), "")

    def test_header_html(self):
        self.assertEqual(to_html(self.tree("* T\n")), "<h1>T</h1>")

    def test_header_levels_html(self):
        self.assertEqual(
            to_html(self.tree("* A\n** B\n*** C\n")),
            "<h1>A</h1><h2>B</h2><h3>C</h3>",
        )

    def test_header_xml(self):
        self.assertEqual(
            to_xml(self.tree("* H\n")),
            '<Document><Header level="1">H</Header></Document>',
        )

    def test_paragraph_spacing(self):
        self.assertEqual(to_html(self.tree("a\nb\n")), "<p>a b</p>")
        self.assertEqual(
            to_xml(self.tree("a\nb\n")),
            "<Document><Paragraph>a b</Paragraph></Document>",
        )

    def test_two_paragraphs_html(self):
        self.assertEqual(
            to_html(self.tree("a\n\nb\n")), "<p>a</p><p>b</p>"
        )

    def test_header_and_paragraph_pretty_xml(self):
        tree = self.tree(
            "* Header1\n"
            "** Header2\n"
            "How are you\n"
            "doing?\n"
            "\n"
            "Next paragraph.\n"
        )
        self.assertEqual(
            to_xml(tree, pretty=True),
            "<Document>\n"
            '  <Header level="1">Header1</Header>\n'
            '  <Header level="2">Header2</Header>\n'
            "  <Paragraph>How are you doing?</Paragraph>\n"
            "  <Paragraph>Next paragraph.</Paragraph>\n"
            "</Document>",
        )

    def test_link_pretty_xml(self):
        tree = self.tree("Link to [[hello]] or [[http://www][www]].")
        self.assertEqual(
            to_xml(tree, pretty=True),
            "<Document>\n"
            '  <Paragraph>Link to <Link link="hello"></Link> or '
            '<Link link="http://www">www</Link>.</Paragraph>\n'
            "</Document>",
        )

    def test_link_html(self):
        tree = self.tree("Link to [[hello]] or [[http://www][www]].")
        self.assertEqual(
            to_html(tree),
            '<p>Link to <a href="hello"></a> or '
            '<a href="http://www">www</a>.</p>',
        )

    def test_link_page_url(self):
        tree = self.tree("[[hello][hi]] [[Front Page][fp]] [[http://w][w]]")
        self.assertEqual(
            to_html(tree, page_url_fmt="/view/{}"),
            '<p><a href="/view/hello">hi</a> '
            '<a href="/view/Front%20Page">fp</a> '
            '<a href="http://w">w</a></p>',
        )

    def test_link_text_spacing(self):
        tree = self.tree("see [[x][y]] now\n")
        self.assertEqual(
            to_html(tree), '<p>see <a href="x">y</a> now</p>'
        )

    def test_empty_href_omitted(self):
        tree = self.tree("[[][t]]")
        self.assertEqual(to_html(tree), "<p><a>t</a></p>")
        self.assertEqual(
            to_xml(tree),
            '<Document><Paragraph><Link link="">t</Link></Paragraph>'
            "</Document>",
        )

    def test_pretty_html(self):
        tree = self.tree("* A\nb\n")
        self.assertEqual(
            to_html(tree, pretty=True), "\n  <h1>A</h1>\n  <p>b</p>\n"
        )

    def test_escaping(self):
        tree = self.tree("a < b & c\n")
        self.assertEqual(to_html(tree), "<p>a &lt; b &amp; c</p>")
        tree = self.tree('[[a"b][x]]')
        self.assertEqual(
            to_html(tree), '<p><a href="a&quot;b">x</a></p>'
        )

    def test_text(self):
        tree = self.tree("* T\nbody\n\nnext [[x][link]]\n")
        self.assertEqual(to_text(tree), "T\nbody\nnext link")

    def test_write_subtree(self):
        tree = self.tree("* T\nbody\n")
        para = tree.children_of(tree.root)[1]
        out = io.StringIO()
        write_tree(tree, XMLWriter(out), node=para)
        self.assertEqual(out.getvalue(), "<Paragraph>body</Paragraph>")

    def test_get_writer(self):
        out = io.StringIO()
        self.assertIsInstance(get_writer("xml", out), XMLWriter)
        self.assertIsInstance(get_writer("text", out), TextWriter)
        w = get_writer("html", out, page_url_fmt="/p/{}")
        self.assertIsInstance(w, HTMLWriter)
        self.assertEqual(w.link_url("Main"), "/p/Main")
        with self.assertRaises(ValueError):
            get_writer("pdf", out)
