"""
Conditional compilation (``#if``/``#elif``/``#else``) branch selection.

The C# grammar wraps code guarded by ``#if`` in a ``preproc_if`` node whose
``alternative`` chain holds the ``#elif`` and ``#else`` branches. Only one
branch is live. The extractor parses with no preprocessor symbols defined,
the same as a default Roslyn parse, so ``#if DEBUG`` is false and its
``#else`` branch is the one kept.
"""

import logging
import re
from typing import AbstractSet, Iterable, Iterator, List, Optional

from tree_sitter import Node

from extraction.config import PREPROC_ALTERNATIVE_NODES, PREPROC_ELSE_NODE, PREPROC_IF_NODE

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"\s*(\|\||&&|==|!=|!|\(|\)|[A-Za-z_][A-Za-z0-9_]*)")


class _ConditionParser:
    """Recursive descent over a directive condition.

    Precedence, lowest first: ``||``, ``&&``, ``==``/``!=``, ``!``.
    """

    def __init__(self, tokens: List[str], defined: AbstractSet[str]):
        self.tokens = tokens
        self.pos = 0
        self.defined = defined

    def _peek(self) -> Optional[str]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _take(self) -> str:
        token = self._peek()
        if token is None:
            raise ValueError("unexpected end of condition")
        self.pos += 1
        return token

    def parse(self) -> bool:
        value = self._or()
        if self._peek() is not None:
            raise ValueError(f"unexpected token {self._peek()!r}")
        return value

    def _or(self) -> bool:
        value = self._and()
        while self._peek() == "||":
            self._take()
            value = self._and() or value
        return value

    def _and(self) -> bool:
        value = self._equality()
        while self._peek() == "&&":
            self._take()
            value = self._equality() and value
        return value

    def _equality(self) -> bool:
        value = self._unary()
        while self._peek() in ("==", "!="):
            op = self._take()
            right = self._unary()
            value = (value == right) if op == "==" else (value != right)
        return value

    def _unary(self) -> bool:
        if self._peek() == "!":
            self._take()
            return not self._unary()
        return self._primary()

    def _primary(self) -> bool:
        token = self._take()
        if token == "(":
            value = self._or()
            if self._take() != ")":
                raise ValueError("unbalanced parentheses")
            return value
        if token == "true":
            return True
        if token == "false":
            return False
        if token in ("||", "&&", "==", "!=", ")"):
            raise ValueError(f"unexpected token {token!r}")
        return token in self.defined


def tokenize_condition(text: str) -> List[str]:
    tokens = []
    pos = 0
    text = text.split("//", 1)[0].rstrip()
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise ValueError(f"cannot tokenize {text[pos:]!r}")
        tokens.append(match.group(1))
        pos = match.end()
    return tokens


def evaluate_condition(text: str, defined: AbstractSet[str] = frozenset()) -> bool:
    """Evaluate a ``#if``/``#elif`` condition.

    Args:
        text: Condition source, e.g. ``"DEBUG && !NET48"``.
        defined: Preprocessor symbols considered defined.

    Returns:
        The truth value. Conditions that cannot be parsed count as false.
    """
    try:
        return _ConditionParser(tokenize_condition(text), defined).parse()
    except ValueError as e:
        logger.debug("Treating unparsable directive condition %r as false: %s", text, e)
        return False


def _alternative(directive: Node) -> Optional[Node]:
    alternative = directive.child_by_field_name("alternative")
    if alternative is not None:
        return alternative
    for child in directive.named_children:
        if child.type in PREPROC_ALTERNATIVE_NODES:
            return child
    return None


def active_branch(directive: Node, defined: AbstractSet[str] = frozenset()) -> List[Node]:
    """Return the named nodes of the live branch of a ``preproc_if`` chain.

    Empty when no branch is live (``#if`` false with no ``#else``).
    """
    branch: Optional[Node] = directive
    while branch is not None:
        condition = branch.child_by_field_name("condition")
        alternative = _alternative(branch)
        live = branch.type == PREPROC_ELSE_NODE or condition is None or evaluate_condition(
            condition.text.decode("utf-8", errors="replace"), defined
        )
        if live:
            skipped = {n.id for n in (condition, alternative) if n is not None}
            return [c for c in branch.named_children if c.id not in skipped]
        branch = alternative
    return []


def expand_directives(nodes: Iterable[Node]) -> Iterator[Node]:
    """Yield ``nodes`` with every ``preproc_if`` replaced by its live branch."""
    for node in nodes:
        if node.type == PREPROC_IF_NODE:
            yield from expand_directives(active_branch(node))
        else:
            yield node


def iter_active_children(node: Node) -> Iterator[Node]:
    """Yield the named children of ``node`` that survive conditional compilation."""
    return expand_directives(node.named_children)
