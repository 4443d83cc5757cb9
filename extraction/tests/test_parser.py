"""
Unit tests for parser.py

Tests tree-sitter parser initialization, byte parsing, encoding
normalization and file parsing.
"""

import codecs
import os
import tempfile
import unittest

from extraction.errors import FileParseError
from extraction.parser import (
    count_error_nodes,
    create_parser,
    iter_descendants,
    node_text,
    normalize_source,
    parse_bytes,
    parse_file,
)


class TestParserInitialization(unittest.TestCase):
    """Test parser creation and initialization."""

    def test_create_parser(self):
        """Test that create_parser returns a parser with a language set."""
        parser = create_parser()
        self.assertIsNotNone(parser)
        self.assertIsNotNone(parser.language)


class TestParseBytes(unittest.TestCase):
    """Test parsing raw bytes of C# code."""

    def test_parse_class(self):
        tree = parse_bytes(b"namespace App { public class Foo { public void Bar() {} } }")
        self.assertEqual(tree.root_node.type, "compilation_unit")
        self.assertFalse(tree.root_node.has_error)

    def test_parse_empty(self):
        tree = parse_bytes(b"")
        self.assertEqual(tree.root_node.type, "compilation_unit")
        self.assertEqual(count_error_nodes(tree), 0)

    def test_rejects_str(self):
        with self.assertRaises(TypeError):
            parse_bytes("class Foo {}")

    def test_syntax_errors_are_counted(self):
        tree = parse_bytes(b"class Foo { void Bar( { }")
        self.assertTrue(tree.root_node.has_error)
        self.assertGreater(count_error_nodes(tree), 0)


class TestNormalizeSource(unittest.TestCase):
    """Test source encoding normalization."""

    def test_plain_utf8_is_unchanged(self):
        raw = "class Café {}".encode("utf-8")
        self.assertEqual(normalize_source(raw), raw)

    def test_utf8_bom_is_stripped(self):
        raw = codecs.BOM_UTF8 + b"class Foo {}"
        self.assertEqual(normalize_source(raw), b"class Foo {}")

    def test_utf16_with_bom_is_converted(self):
        raw = "class Foo {}".encode("utf-16")
        self.assertEqual(normalize_source(raw), b"class Foo {}")

    def test_invalid_utf8_raises(self):
        with self.assertRaises(FileParseError) as ctx:
            normalize_source(b"class Foo { \xc3\x28 }", "Bad.cs")
        self.assertEqual(ctx.exception.file_path, "Bad.cs")


class TestParseFile(unittest.TestCase):
    """Test parsing C# files from disk."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def write(self, name, data):
        path = os.path.join(self.tmpdir.name, name)
        with open(path, "wb") as f:
            f.write(data)
        return path

    def test_parse_file(self):
        path = self.write("Foo.cs", b"class Foo {}")
        tree, error_count = parse_file(path)
        self.assertEqual(tree.root_node.type, "compilation_unit")
        self.assertEqual(error_count, 0)

    def test_parse_file_with_bom(self):
        path = self.write("Foo.cs", codecs.BOM_UTF8 + b"class Foo {}")
        tree, error_count = parse_file(path)
        self.assertEqual(error_count, 0)
        self.assertFalse(tree.root_node.has_error)

    def test_missing_file(self):
        with self.assertRaises(FileParseError):
            parse_file(os.path.join(self.tmpdir.name, "Missing.cs"))

    def test_syntax_errors_tolerated_by_default(self):
        path = self.write("Broken.cs", b"class Foo { void Bar( { }")
        tree, error_count = parse_file(path)
        self.assertTrue(tree.root_node.has_error)
        self.assertEqual(error_count, count_error_nodes(tree))
        self.assertGreater(error_count, 0)

    def test_syntax_errors_rejected_on_request(self):
        path = self.write("Broken.cs", b"class Foo { void Bar( { }")
        with self.assertRaises(FileParseError) as ctx:
            parse_file(path, reject_syntax_errors=True)
        self.assertIn("syntax error", ctx.exception.reason)


class TestNodeHelpers(unittest.TestCase):
    """Test node text and traversal helpers."""

    def test_node_text_of_none(self):
        self.assertEqual(node_text(None), "")

    def test_iter_descendants_is_preorder(self):
        tree = parse_bytes(b"class A { class B {} } class C {}")
        names = [
            node_text(n.child_by_field_name("name"))
            for n in iter_descendants(tree.root_node)
            if n.type == "class_declaration"
        ]
        self.assertEqual(names, ["A", "B", "C"])


if __name__ == "__main__":
    unittest.main()
