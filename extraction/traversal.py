"""
AST traversal and entity extraction logic.

This module walks a parsed C# file, resolves the namespace of every class and
interface declaration, applies the namespace filter, and hands the surviving
declarations to the member analyzer.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set

from tree_sitter import Node, Tree

from extraction.config import CLASS_NODE, INTERFACE_NODE, NAMESPACE_NODES
from extraction.docs import build_trivia_index
from extraction.members import analyze_class, analyze_interface, get_declaration_name, reclassify_bases
from extraction.models import ClassEntity, InterfaceEntity
from extraction.parser import iter_descendants, node_text
from extraction.patterns import NamespaceFilter

logger = logging.getLogger(__name__)

_OPEN_FILTER = NamespaceFilter()


@dataclass
class FileEntities:
    """Entities found in one file, in source order."""

    classes: List[ClassEntity] = field(default_factory=list)
    interfaces: List[InterfaceEntity] = field(default_factory=list)
    filtered_out: int = 0
    # Every interface declared in the file, filtered out or not
    interface_names: Set[str] = field(default_factory=set)


def extract_namespace_name(node: Node) -> str:
    """Extract the literal name of a namespace declaration node."""
    return node_text(node.child_by_field_name("name")).strip()


def _file_scoped_namespace_before(node: Node) -> Optional[Node]:
    """Find a file-scoped namespace declared as a preceding sibling.

    Some grammar versions emit ``namespace X;`` as a childless node and leave
    the declarations that follow it at the compilation unit level.
    """
    sibling = node.prev_named_sibling
    while sibling is not None:
        if sibling.type == "file_scoped_namespace_declaration":
            return sibling
        sibling = sibling.prev_named_sibling
    return None


def resolve_namespace(node: Node) -> str:
    """Resolve the namespace a declaration lives in.

    Returns the literal name of the nearest enclosing namespace declaration
    (block or file-scoped), or "" for the global namespace. Names of outer
    namespaces are not prepended.
    """
    current = node
    while current.parent is not None:
        parent = current.parent
        if parent.type in NAMESPACE_NODES:
            return extract_namespace_name(parent)
        if parent.parent is None:
            scoped = _file_scoped_namespace_before(current)
            if scoped is not None:
                return extract_namespace_name(scoped)
        current = parent
    return ""


def extract_entities_from_tree(
    tree: Tree,
    file_path: str = "<memory>",
    namespace_filter: NamespaceFilter = _OPEN_FILTER,
    resolve_interface_bases: bool = True,
) -> FileEntities:
    """Extract all class and interface entities from a parsed C# AST.

    This is the main entry point for per-file extraction. Nested declarations
    are included; classes and interfaces are each kept in document order.

    Args:
        tree: The parsed AST tree.
        file_path: Path used in log messages.
        namespace_filter: Include/exclude patterns applied per declaration.
        resolve_interface_bases: Move a first base-list entry naming an
            interface declared in this file from ``extends`` to ``implements``.

    Returns:
        The file's entities plus the number of declarations filtered out.
    """
    root = tree.root_node
    trivia_index = build_trivia_index(root)
    entities = FileEntities()

    for node in iter_descendants(root):
        if node.type not in (CLASS_NODE, INTERFACE_NODE):
            continue

        if node.type == INTERFACE_NODE:
            entities.interface_names.add(get_declaration_name(node))

        namespace = resolve_namespace(node)
        if not namespace_filter.included(namespace):
            entities.filtered_out += 1
            continue

        if node.type == CLASS_NODE:
            entities.classes.append(analyze_class(node, namespace, trivia_index))
        else:
            entities.interfaces.append(analyze_interface(node, namespace, trivia_index))

    if resolve_interface_bases and entities.interface_names:
        entities.classes = [
            reclassify_bases(entity, entities.interface_names) for entity in entities.classes
        ]

    logger.debug(
        "Extracted %d classes and %d interfaces from %s",
        len(entities.classes),
        len(entities.interfaces),
        file_path,
    )
    return entities
