"""
Member analysis for class and interface declarations.

Turns a ``class_declaration`` or ``interface_declaration`` node into the
structural record used by the diagram viewer: attributes, methods,
dependencies and the inheritance split. Only direct members are considered;
nested types are extracted as entities of their own.
"""

import dataclasses
import logging
from typing import AbstractSet, Iterator, List, Optional, Tuple

from tree_sitter import Node

from extraction.config import (
    BASE_LIST_NODE,
    BASE_LIST_SKIP_TYPES,
    CONSTRUCTOR_NODE,
    DECLARATION_LIST_NODE,
    FIELD_NODE,
    METHOD_NODE,
    PARAMETER_ARRAY_NODE,
    PARAMETER_LIST_NODE,
    PARAMETER_NODES,
    PRIMARY_CONSTRUCTOR_BASE_NODE,
    PROPERTY_NODE,
    VARIABLE_DECLARATION_NODE,
    VARIABLE_DECLARATOR_NODE,
)
from extraction.directives import iter_active_children
from extraction.docs import TriviaIndex, summary_for
from extraction.models import ClassEntity, InterfaceEntity, MethodEntity
from extraction.parser import node_text

logger = logging.getLogger(__name__)


def _child_of_type(node: Node, node_type: str) -> Optional[Node]:
    for child in node.named_children:
        if child.type == node_type:
            return child
    return None


def _field_or_type(node: Node, field_name: str, node_type: str) -> Optional[Node]:
    """Find a child by grammar field, falling back to the first child of a type."""
    child = node.child_by_field_name(field_name)
    if child is not None:
        return child
    return _child_of_type(node, node_type)


def get_declaration_name(node: Node) -> str:
    """Return the identifier of a declaration, or "" if it has none."""
    return node_text(node.child_by_field_name("name")).strip()


def iter_members(node: Node, member_type: str) -> Iterator[Node]:
    """Yield direct members of a type declaration with the given node type.

    Members inside ``#if`` blocks count when their branch is live.
    """
    body = _field_or_type(node, "body", DECLARATION_LIST_NODE)
    if body is None:
        return
    for child in iter_active_children(body):
        if child.type == member_type:
            yield child


def get_field_variables(field_node: Node) -> Tuple[str, List[str]]:
    """Split a field declaration into its declared type and variable names.

    ``private int x, y;`` yields ``("int", ["x", "y"])``.
    """
    declaration = _child_of_type(field_node, VARIABLE_DECLARATION_NODE)
    if declaration is None:
        logger.debug("Field at line %d has no variable declaration", field_node.start_point.row + 1)
        return "", []

    type_node = declaration.child_by_field_name("type")
    if type_node is None:
        type_node = next(
            (c for c in declaration.named_children if c.type != VARIABLE_DECLARATOR_NODE),
            None,
        )
    type_text = node_text(type_node).strip()

    names = []
    for declarator in declaration.named_children:
        if declarator.type != VARIABLE_DECLARATOR_NODE:
            continue
        name_node = declarator.child_by_field_name("name")
        if name_node is None:
            name_node = _child_of_type(declarator, "identifier")
        name = node_text(name_node).strip()
        if name:
            names.append(name)
    return type_text, names


def _parameter_type(param: Node) -> str:
    type_node = param.child_by_field_name("type")
    if type_node is None and param.type == PARAMETER_ARRAY_NODE:
        type_node = next(
            (c for c in param.named_children if c.type not in ("attribute_list", "identifier")),
            None,
        )
    return node_text(type_node).strip()


def get_parameter_types(owner: Node) -> List[str]:
    """Return the declared type text of every parameter of a constructor.

    ``params T[] xs`` is either wrapped in a ``parameter_array`` node or, in
    newer grammars, spelled inline with its ``type`` field on the parameter
    list itself. Parameters without a type contribute an empty string.
    """
    params = _field_or_type(owner, "parameters", PARAMETER_LIST_NODE)
    if params is None:
        return []

    types = []
    cursor = params.walk()
    if not cursor.goto_first_child():
        return types
    while True:
        child = cursor.node
        if child.type in PARAMETER_NODES:
            types.append(_parameter_type(child))
        elif cursor.field_name == "type":
            types.append(node_text(child).strip())
        if not cursor.goto_next_sibling():
            break
    return types


def get_base_types(node: Node) -> List[str]:
    """Return the entries of a declaration's base-type list in source order."""
    base_list = _child_of_type(node, BASE_LIST_NODE)
    if base_list is None:
        return []

    entries = []
    for child in base_list.named_children:
        if child.type in BASE_LIST_SKIP_TYPES:
            continue
        if child.type == PRIMARY_CONSTRUCTOR_BASE_NODE:
            type_node = child.child_by_field_name("type")
            child = type_node if type_node is not None else child.named_children[0]
        text = node_text(child).strip()
        if text:
            entries.append(text)
    return entries


def split_base_types(base_types: List[str]) -> Tuple[Optional[str], Optional[Tuple[str, ...]]]:
    """Split a base-type list into ``(extends, implements)``.

    The split is positional: the first entry is taken as the base class even
    when it actually names an interface.
    """
    if not base_types:
        return None, None
    rest = tuple(base_types[1:])
    return base_types[0], (rest or None)


def simple_type_name(type_text: str) -> str:
    """Reduce a type spelling to its bare identifier.

    ``App.Models.IRepo<int>`` and ``global::App.IRepo`` both become ``IRepo``.
    """
    bare = type_text.split("<", 1)[0].strip()
    bare = bare.rsplit("::", 1)[-1]
    return bare.rsplit(".", 1)[-1].strip()


def reclassify_bases(entity: ClassEntity, interface_names: AbstractSet[str]) -> ClassEntity:
    """Move an ``extends`` entry that names a known interface into ``implements``.

    The positional split cannot tell ``class Repo : IRepo`` from a real base
    class. When the first entry matches an interface declared anywhere in the
    extracted sources it is treated as an implemented contract instead.
    Entries naming unknown types keep their positional meaning.
    """
    if entity.extends is None or simple_type_name(entity.extends) not in interface_names:
        return entity
    return dataclasses.replace(
        entity,
        extends=None,
        implements=(entity.extends,) + tuple(entity.implements or ()),
    )


def collect_attributes(node: Node) -> List[str]:
    """Format fields then properties as ``"name: type"`` entries."""
    attributes = []
    for field_node in iter_members(node, FIELD_NODE):
        type_text, names = get_field_variables(field_node)
        attributes.extend(f"{name}: {type_text}" for name in names)

    for prop in iter_members(node, PROPERTY_NODE):
        name = get_declaration_name(prop)
        if not name:
            continue
        attributes.append(f"{name}: {node_text(prop.child_by_field_name('type')).strip()}")
    return attributes


def collect_methods(node: Node, trivia_index: TriviaIndex) -> List[MethodEntity]:
    methods = []
    for method in iter_members(node, METHOD_NODE):
        name = get_declaration_name(method)
        if not name:
            logger.debug("Skipping unnamed method at line %d", method.start_point.row + 1)
            continue
        methods.append(MethodEntity(name=name, summary=summary_for(method, trivia_index)))
    return methods


def collect_dependencies(node: Node) -> List[str]:
    """Collect distinct non-blank field and constructor parameter types.

    Order is first appearance: field types, then constructor parameters
    (primary constructor first, then declared constructors).
    """
    seen = {}
    for field_node in iter_members(node, FIELD_NODE):
        type_text, _ = get_field_variables(field_node)
        seen.setdefault(type_text, None)

    if _child_of_type(node, PARAMETER_LIST_NODE) is not None:
        for type_text in get_parameter_types(node):
            seen.setdefault(type_text, None)

    for ctor in iter_members(node, CONSTRUCTOR_NODE):
        for type_text in get_parameter_types(ctor):
            seen.setdefault(type_text, None)

    return [dep for dep in seen if dep.strip()]


def analyze_class(node: Node, namespace: str, trivia_index: TriviaIndex) -> ClassEntity:
    """Build the structural record of a class declaration.

    Args:
        node: A ``class_declaration`` node.
        namespace: Resolved namespace of the declaration.
        trivia_index: Documentation index of the file holding ``node``.

    Returns:
        The ClassEntity for the declaration.
    """
    extends, implements = split_base_types(get_base_types(node))
    entity = ClassEntity(
        name=get_declaration_name(node),
        namespace=namespace,
        summary=summary_for(node, trivia_index),
        attributes=tuple(collect_attributes(node)),
        methods=tuple(collect_methods(node, trivia_index)),
        dependencies=tuple(collect_dependencies(node)),
        extends=extends,
        implements=implements,
    )
    logger.debug(
        "Analyzed class %s (%d attributes, %d methods, %d dependencies)",
        entity.name,
        len(entity.attributes),
        len(entity.methods),
        len(entity.dependencies),
    )
    return entity


def analyze_interface(node: Node, namespace: str, trivia_index: TriviaIndex) -> InterfaceEntity:
    """Build the structural record of an interface declaration.

    Interfaces only carry their methods; attributes, dependencies and
    inheritance are not tracked.
    """
    entity = InterfaceEntity(
        name=get_declaration_name(node),
        namespace=namespace,
        methods=tuple(collect_methods(node, trivia_index)),
    )
    logger.debug("Analyzed interface %s (%d methods)", entity.name, len(entity.methods))
    return entity
