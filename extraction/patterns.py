"""
Wildcard matching and namespace include/exclude filtering.

Patterns use ``*`` as a multi-character wildcard. Matching is deliberately
loose: literal segments must appear in order, but only the final segment is
anchored (to the end of the text, and only when the pattern does not end in
``*``). ``"App*"`` therefore matches ``"MyApp.Core"``.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

logger = logging.getLogger(__name__)

WILDCARD: str = "*"


def wildcard_match(text: str, pattern: str) -> bool:
    """Check whether ``text`` matches a wildcard ``pattern``.

    Args:
        text: The namespace (or any string) to test.
        pattern: Pattern where ``*`` matches any run of characters.

    Returns:
        True if every literal segment occurs in order and, for patterns not
        ending in ``*``, the text ends with the last segment.
    """
    if pattern == WILDCARD:
        return True

    parts = pattern.split(WILDCARD)
    pos = 0
    for part in parts:
        if not part:
            continue
        idx = text.find(part, pos)
        if idx == -1:
            return False
        pos = idx + len(part)

    if not pattern.endswith(WILDCARD):
        return text.endswith(parts[-1])
    return True


def is_namespace_included(
    namespace: str,
    include_patterns: Sequence[str],
    exclude_patterns: Sequence[str],
) -> bool:
    """Decide whether a namespace passes the include/exclude filter.

    An empty include list includes everything. Any matching exclude pattern
    excludes the namespace, whatever the include patterns say.
    """
    included = not include_patterns or any(
        wildcard_match(namespace, p) for p in include_patterns
    )
    excluded = any(wildcard_match(namespace, p) for p in exclude_patterns)
    return included and not excluded


@dataclass(frozen=True)
class NamespaceFilter:
    """Include/exclude pattern pair applied to every declaration."""

    include: Tuple[str, ...] = ()
    exclude: Tuple[str, ...] = ()

    @classmethod
    def from_patterns(
        cls,
        include: Iterable[str] = (),
        exclude: Iterable[str] = (),
    ) -> "NamespaceFilter":
        return cls(include=tuple(include or ()), exclude=tuple(exclude or ()))

    @property
    def is_open(self) -> bool:
        """True when the filter lets every namespace through."""
        return not self.include and not self.exclude

    def included(self, namespace: str) -> bool:
        result = is_namespace_included(namespace, self.include, self.exclude)
        if not result:
            logger.debug("Namespace '%s' filtered out", namespace)
        return result
