# Tests for the byte scanner and position tracking
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import io
import unittest

from orgwiki.parser import parse
from orgwiki.scanner import BytesScanner, ByteScanner, Position, make_scanner


class ScannerTests(unittest.TestCase):
    def test_read_unread(self):
        r = BytesScanner(b"ab")
        self.assertEqual(r.read_byte(), ord("a"))
        r.unread_byte()
        self.assertEqual(r.read_byte(), ord("a"))
        self.assertEqual(r.read_byte(), ord("b"))
        self.assertTrue(r.at_end())
        self.assertIsNone(r.read_byte())
        self.assertIsNone(r.read_byte())

    def test_single_level_pushback(self):
        r = BytesScanner(b"ab")
        r.read_byte()
        r.unread_byte()
        with self.assertRaises(AssertionError):
            r.unread_byte()

    def test_unread_at_end(self):
        r = BytesScanner(b"")
        self.assertIsNone(r.read_byte())
        with self.assertRaises(AssertionError):
            r.unread_byte()

    def test_make_scanner_str(self):
        r = make_scanner("ä")
        self.assertEqual(r.read_byte(), 0xC3)
        self.assertEqual(r.read_byte(), 0xA4)
        self.assertIsNone(r.read_byte())

    def test_make_scanner_files(self):
        r = make_scanner(io.BytesIO(b"x"))
        self.assertEqual(r.read_byte(), ord("x"))
        r = make_scanner(io.StringIO("y"))
        self.assertEqual(r.read_byte(), ord("y"))

    def test_make_scanner_passthrough(self):
        r = BytesScanner(b"z")
        self.assertIsInstance(r, ByteScanner)
        self.assertIs(make_scanner(r), r)

    def test_make_scanner_bad_type(self):
        with self.assertRaises(TypeError):
            make_scanner(42)

    def test_custom_scanner(self):
        class ListScanner:
            def __init__(self, data):
                self.data = list(data)
                self.pos = 0

            def read_byte(self):
                if self.pos >= len(self.data):
                    return None
                self.pos += 1
                return self.data[self.pos - 1]

            def unread_byte(self):
                self.pos -= 1

        tree, errors = parse(ListScanner(b"* H\n"))
        self.assertEqual(errors, [])
        self.assertEqual(len(tree), 3)

    def test_position(self):
        pos = Position()
        self.assertEqual((pos.offset, pos.line, pos.column), (0, 1, 0))
        pos.next_column()
        pos.next_column()
        self.assertEqual((pos.offset, pos.line, pos.column), (2, 1, 2))
        pos.next_line()
        self.assertEqual((pos.offset, pos.line, pos.column), (3, 2, 0))
        pos.reset()
        self.assertEqual(pos, Position())
