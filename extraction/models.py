"""
Data models for extracted C# entities.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Iterable, List, Tuple


@dataclass(frozen=True)
class MethodEntity:
    """A method declared by a class or interface.

    Attributes:
        name: Method identifier.
        summary: Plain-text ``<summary>`` documentation, or None.
    """

    name: str
    summary: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "summary": self.summary}


@dataclass(frozen=True)
class ClassEntity:
    """Structural record of a single class declaration.

    Attributes:
        name: Class identifier.
        namespace: Literal name of the enclosing namespace, "" for the global one.
        summary: Plain-text ``<summary>`` documentation, or None.
        attributes: ``"name: type"`` entries, fields first then properties.
        methods: Methods in source order.
        dependencies: Distinct non-blank field and constructor parameter types.
        extends: First base-list entry, or None.
        implements: Remaining base-list entries, or None when there are none.
    """

    name: str
    namespace: str = ""
    summary: Optional[str] = None
    attributes: Tuple[str, ...] = ()
    methods: Tuple[MethodEntity, ...] = ()
    dependencies: Tuple[str, ...] = ()
    extends: Optional[str] = None
    implements: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        if self.implements is not None and len(self.implements) == 0:
            object.__setattr__(self, "implements", None)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the class to its wire representation.

        ``summary``, ``implements`` and ``extends`` are always present and
        hold None when absent.
        """
        return {
            "name": self.name,
            "namespace": self.namespace,
            "summary": self.summary,
            "attributes": list(self.attributes),
            "methods": [method.to_dict() for method in self.methods],
            "dependencies": list(self.dependencies),
            "implements": list(self.implements) if self.implements else None,
            "extends": self.extends,
        }


@dataclass(frozen=True)
class InterfaceEntity:
    """Structural record of a single interface declaration.

    Attributes:
        name: Interface identifier.
        namespace: Literal name of the enclosing namespace, "" for the global one.
        methods: Methods in source order.
    """

    name: str
    namespace: str = ""
    methods: Tuple[MethodEntity, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "namespace": self.namespace,
            "methods": [method.to_dict() for method in self.methods],
        }


@dataclass
class ExtractionResult:
    """The assembled model of one extraction run."""

    classes: List[ClassEntity] = field(default_factory=list)
    interfaces: List[InterfaceEntity] = field(default_factory=list)

    def extend(
        self,
        classes: Iterable[ClassEntity],
        interfaces: Iterable[InterfaceEntity],
    ) -> None:
        """Append entities of one file, preserving order."""
        self.classes.extend(classes)
        self.interfaces.extend(interfaces)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "classes": [entity.to_dict() for entity in self.classes],
            "interfaces": [entity.to_dict() for entity in self.interfaces],
        }
