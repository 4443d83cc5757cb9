"""
Documentation comment association and summary extraction.

C# documentation comments are ``///`` lines or ``/** ... */`` blocks written
directly above a declaration and holding XML markup. tree-sitter exposes them
as ``comment`` siblings preceding the declaration node, so association is a
backwards walk over siblings. The walk runs once per file and its result is
kept in a :class:`TriviaIndex` that every declaration of that file shares.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional

from tree_sitter import Node

from extraction.config import (
    COMMENT_NODE,
    DOC_ROOT_ELEMENT,
    MEMBER_DECLARATION_TYPES,
    MULTI_LINE_DOC_PREFIX,
    MULTI_LINE_DOC_SUFFIX,
    SINGLE_LINE_DOC_PREFIX,
    SUMMARY_ELEMENT,
)
from extraction.parser import iter_descendants, node_text

logger = logging.getLogger(__name__)


def is_single_line_doc_comment(comment_text: str) -> bool:
    stripped = comment_text.strip()
    return stripped.startswith(SINGLE_LINE_DOC_PREFIX) and not stripped.startswith("////")


def is_multi_line_doc_comment(comment_text: str) -> bool:
    stripped = comment_text.strip()
    return stripped.startswith(MULTI_LINE_DOC_PREFIX) and not stripped.startswith("/**/")


def is_doc_comment(comment_text: str) -> bool:
    """Check if a comment is a C# documentation comment (``///`` or ``/**``)."""
    return is_single_line_doc_comment(comment_text) or is_multi_line_doc_comment(comment_text)


def clean_doc_comment(comment_text: str) -> str:
    """Strip documentation comment markers, leaving the XML markup.

    Removes ``///`` at the start of each line, the ``/**`` and ``*/``
    delimiters, and the leading ``*`` of block comment continuation lines.

    Args:
        comment_text: Raw comment block text, possibly spanning many lines.

    Returns:
        The markup text with surrounding whitespace removed.
    """
    lines = comment_text.splitlines()
    last = len(lines) - 1
    cleaned_lines = []

    for idx, line in enumerate(lines):
        stripped = line.strip()

        if stripped.startswith(SINGLE_LINE_DOC_PREFIX):
            stripped = stripped[len(SINGLE_LINE_DOC_PREFIX):]
        else:
            if idx == 0 and stripped.startswith(MULTI_LINE_DOC_PREFIX):
                stripped = stripped[len(MULTI_LINE_DOC_PREFIX):]
            elif stripped.startswith("*") and not stripped.startswith(MULTI_LINE_DOC_SUFFIX):
                stripped = stripped[1:]
            if idx == last and stripped.rstrip().endswith(MULTI_LINE_DOC_SUFFIX):
                stripped = stripped.rstrip()[:-len(MULTI_LINE_DOC_SUFFIX)]

        cleaned_lines.append(stripped.strip())

    return "\n".join(cleaned_lines).strip()


def parse_summary(markup: str) -> Optional[str]:
    """Return the trimmed text of the first ``<summary>`` element.

    The markup is wrapped in a synthetic root element so that documentation
    with several top-level elements (``<summary>`` followed by ``<param>``)
    is still well-formed.

    Returns:
        The summary text, or None when there is no summary element or the
        markup is not well-formed XML.
    """
    try:
        root = ET.fromstring(f"<{DOC_ROOT_ELEMENT}>{markup}</{DOC_ROOT_ELEMENT}>")
    except (ET.ParseError, ValueError) as e:
        logger.debug("Ignoring malformed documentation markup: %s", e)
        return None

    summary = root.find(f".//{SUMMARY_ELEMENT}")
    if summary is None:
        return None
    return "".join(summary.itertext()).strip()


def _is_trivia(node: Node) -> bool:
    return node.type == COMMENT_NODE or node.type.startswith("preproc_")


def get_leading_comments(node: Node) -> List[Node]:
    """Collect the comment nodes that form a declaration's leading trivia.

    Walks backward over comment and preprocessor siblings. Comments that start
    on the line where the previous real sibling ends belong to that sibling
    (``int x; // note``) and are dropped.

    Args:
        node: A declaration node.

    Returns:
        Comment nodes in source order.
    """
    comments = []
    sibling = node.prev_sibling

    while sibling is not None and _is_trivia(sibling):
        if sibling.type == COMMENT_NODE:
            comments.append(sibling)
        sibling = sibling.prev_sibling

    comments.reverse()

    if sibling is not None:
        anchor_row = sibling.end_point.row
        comments = [c for c in comments if c.start_point.row > anchor_row]
    return comments


def first_doc_block(comments: List[Node]) -> Optional[str]:
    """Return the text of the first documentation block among ``comments``.

    A block is one ``/** */`` comment or a run of ``///`` comments on
    consecutive lines.
    """
    for idx, comment in enumerate(comments):
        text = node_text(comment)
        if not is_doc_comment(text):
            continue
        if is_multi_line_doc_comment(text):
            return text

        block = [text]
        last_row = comment.end_point.row
        for following in comments[idx + 1:]:
            following_text = node_text(following)
            if not is_single_line_doc_comment(following_text):
                break
            if following.start_point.row - last_row > 1:
                break
            block.append(following_text)
            last_row = following.end_point.row
        return "\n".join(block)
    return None


class TriviaIndex:
    """Documentation blocks of one file, keyed by declaration node identity."""

    def __init__(self, blocks: Optional[Dict[int, str]] = None):
        self._blocks: Dict[int, str] = dict(blocks or {})

    def add(self, node: Node, block: str) -> None:
        self._blocks[node.id] = block

    def get(self, node: Node) -> Optional[str]:
        return self._blocks.get(node.id)

    def __contains__(self, node: Node) -> bool:
        return node.id in self._blocks

    def __len__(self) -> int:
        return len(self._blocks)


def build_trivia_index(root: Node) -> TriviaIndex:
    """Index the leading documentation block of every member declaration.

    Args:
        root: Root node of a parsed file.

    Returns:
        A TriviaIndex holding only declarations that have a documentation block.
    """
    index = TriviaIndex()
    for node in iter_descendants(root):
        if node.type not in MEMBER_DECLARATION_TYPES:
            continue
        block = first_doc_block(get_leading_comments(node))
        if block is not None:
            index.add(node, block)
    logger.debug("Indexed %d documentation blocks", len(index))
    return index


def summary_for(node: Node, trivia_index: TriviaIndex) -> Optional[str]:
    """Look up a declaration's documentation and extract its summary.

    Missing documentation and malformed markup both yield None.
    """
    block = trivia_index.get(node)
    if block is None:
        return None
    return parse_summary(clean_doc_comment(block))
