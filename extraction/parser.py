"""
Tree-sitter parser initialization and file parsing utilities.

This module provides functions to initialize the C# parser and parse source files.
"""

import codecs
import logging
from typing import Iterator, Tuple
import tree_sitter_c_sharp as tscsharp
from tree_sitter import Language, Parser, Tree, Node

from extraction.directives import iter_active_children
from extraction.errors import FileParseError

# Configure logging
logger = logging.getLogger(__name__)

# Module-level language constant
CSHARP_LANGUAGE = Language(tscsharp.language())

_UTF16_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)


def create_parser() -> Parser:
    """Create and configure a tree-sitter parser for C#.

    Returns:
        A Parser instance configured with the C# language.

    Example:
        >>> parser = create_parser()
        >>> tree = parser.parse(b"class Foo {}")
    """
    parser = Parser(CSHARP_LANGUAGE)
    logger.debug("Created tree-sitter C# parser")
    return parser


def parse_bytes(source: bytes) -> Tree:
    """Parse raw bytes of UTF-8 encoded C# source code.

    Args:
        source: UTF-8 encoded bytes of C# source code.

    Returns:
        A Tree object representing the parsed AST.

    Raises:
        TypeError: If source is not bytes.

    Example:
        >>> tree = parse_bytes(b"class Foo {}")
        >>> tree.root_node.type
        'compilation_unit'
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")

    parser = create_parser()
    tree = parser.parse(source)

    logger.debug("Parsed %d bytes of C# code", len(source))
    return tree


def normalize_source(raw: bytes, file_path: str = "<memory>") -> bytes:
    """Return source bytes as BOM-less UTF-8.

    C# sources are commonly saved as UTF-8 with a BOM, and occasionally as
    UTF-16 with a BOM. Anything else must already be valid UTF-8.

    Raises:
        FileParseError: If the bytes cannot be decoded.
    """
    try:
        if raw.startswith(codecs.BOM_UTF8):
            return raw[len(codecs.BOM_UTF8):].decode("utf-8").encode("utf-8")
        if raw.startswith(_UTF16_BOMS):
            return raw.decode("utf-16").encode("utf-8")
        raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FileParseError(file_path, f"invalid text encoding ({e.reason})", e) from e
    return raw


def count_error_nodes(tree: Tree) -> int:
    """Count ERROR and MISSING nodes in a parsed tree."""
    if not tree.root_node.has_error:
        return 0

    count = 0
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            count += 1
        if node.has_error:
            stack.extend(node.children)
    return count


def node_text(node: Node) -> str:
    """Decode the source text spanned by a node."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def parse_file(file_path: str, reject_syntax_errors: bool = False) -> Tuple[Tree, int]:
    """Parse a C# source file from disk.

    Args:
        file_path: Path to the .cs file.
        reject_syntax_errors: Treat a tree containing syntax errors as a
            parse failure instead of extracting what tree-sitter recovered.

    Returns:
        A tuple of (Tree, error_count) where:
        - Tree is the parsed AST
        - error_count is the number of ERROR and MISSING nodes in it

    Raises:
        FileParseError: If the file cannot be read, decoded, or (with
            ``reject_syntax_errors``) contains syntax errors.

    Example:
        >>> tree, error_count = parse_file("Repo.cs")
        >>> error_count
        0
    """
    try:
        with open(file_path, "rb") as f:
            raw = f.read()
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise FileParseError(file_path, f"cannot read file ({e.strerror or e})", e) from e

    source_bytes = normalize_source(raw, file_path)
    tree = parse_bytes(source_bytes)

    error_count = count_error_nodes(tree)
    if error_count:
        if reject_syntax_errors:
            raise FileParseError(file_path, f"{error_count} syntax error node(s)")
        logger.warning("File %s contains syntax errors (%d error nodes)", file_path, error_count)

    logger.debug("Successfully parsed file: %s", file_path)
    return tree, error_count


def iter_descendants(node: Node) -> Iterator[Node]:
    """Yield every named descendant of ``node`` in document (pre-)order.

    Code in inactive ``#if`` branches is skipped.
    """
    stack = list(reversed(list(iter_active_children(node))))
    while stack:
        current = stack.pop()
        yield current
        if current.named_child_count:
            stack.extend(reversed(list(iter_active_children(current))))
