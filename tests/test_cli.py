# Tests for the command-line renderer
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import io
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

from orgwiki.cli import main


class CliTests(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = Path(self.tmpdir.name) / "Main.txt"
        self.path.write_text("* T\nsee [[Other]]\n", encoding="utf-8")

    def tearDown(self):
        self.tmpdir.cleanup()

    def run_main(self, argv):
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            ret = main(argv)
        return ret, out.getvalue()

    def test_xml(self):
        ret, out = self.run_main([str(self.path), "--format", "xml", "--quiet"])
        self.assertEqual(ret, 0)
        self.assertEqual(
            out,
            '<Document><Header level="1">T</Header><Paragraph>see '
            '<Link link="Other"></Link></Paragraph></Document>\n',
        )

    def test_html_page_url(self):
        ret, out = self.run_main(
            [str(self.path), "--page-url", "/view/{}", "--quiet"]
        )
        self.assertEqual(ret, 0)
        self.assertEqual(
            out, '<h1>T</h1><p>see <a href="/view/Other"></a></p>\n'
        )

    def test_pretty(self):
        ret, out = self.run_main(
            [str(self.path), "--format", "xml", "--pretty", "--quiet"]
        )
        self.assertEqual(ret, 0)
        self.assertTrue(out.startswith("<Document>\n  <Header"))

    def test_stdin(self):
        stdin = SimpleNamespace(buffer=io.BytesIO(b"a\nb\n"))
        with patch("sys.stdin", stdin):
            ret, out = self.run_main(["--format", "text", "--quiet"])
        self.assertEqual(ret, 0)
        self.assertEqual(out, "a b\n\n")

    def test_empty_input(self):
        self.path.write_bytes(b"")
        ret, out = self.run_main([str(self.path), "--quiet"])
        self.assertEqual(ret, 0)
        self.assertEqual(out, "")

    def test_missing_file(self):
        ret, out = self.run_main(
            [str(Path(self.tmpdir.name) / "nope.txt"), "--quiet"]
        )
        self.assertEqual(ret, 1)
        self.assertEqual(out, "")
