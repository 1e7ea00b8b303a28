"""Graph data models.

TypeNode, Member and ClassRelation describe the class graph handed to
the diagram generators. Graph owns the nodes and the relation list.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, Iterator, List, Optional


class TypeKind(Enum):
    CLASS = "class"
    INTERFACE = "interface"
    STRUCT = "struct"
    RECORD = "record"
    RECORD_STRUCT = "record struct"
    ENUM = "enum"


class Visibility(IntEnum):
    """Member accessibility, ordered so that a floor is a plain ``>=``."""

    PRIVATE = 0
    PROTECTED = 1
    INTERNAL = 2
    PUBLIC = 3

    @classmethod
    def parse(cls, value: "str | Visibility") -> "Visibility":
        """Look up a level by name ("public", "Protected", ...)."""
        if isinstance(value, Visibility):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValueError(
                f"Unknown visibility: {value!r}. "
                f"Expected one of: {', '.join(v.name.lower() for v in cls)}"
            ) from None


class MemberForm(Enum):
    PROPERTY = "property"
    METHOD = "method"


class RelationType(Enum):
    INHERITANCE = "inheritance"
    IMPLEMENTATION = "implementation"
    DEPENDENCY = "dependency"


class GraphError(ValueError):
    """Raised when a Graph invariant would be broken."""


@dataclass
class Member:
    """A property or method of a type node.

    ``type_text`` is the declared signature, kept verbatim for rendering.
    For methods it is the return type; parameters are not inspected.
    """

    name: str
    visibility: Visibility
    form: MemberForm
    type_text: str = ""
    container_name: Optional[str] = None  # "List" for "List<Order>?"
    dependencies: List[str] = field(default_factory=list)


@dataclass
class TypeNode:
    """One logical (post-merge) declared type."""

    name: str
    kind: TypeKind
    qualified_name: str = ""
    namespace: str = ""
    base_type: Optional[str] = None
    interfaces: List[str] = field(default_factory=list)
    members: List[Member] = field(default_factory=list)
    enum_values: List[str] = field(default_factory=list)

    @property
    def properties(self) -> List[Member]:
        return [m for m in self.members if m.form is MemberForm.PROPERTY]

    @property
    def methods(self) -> List[Member]:
        return [m for m in self.members if m.form is MemberForm.METHOD]


@dataclass(frozen=True)
class ClassRelation:
    """Directed edge: ``source`` depends on / derives from ``target``."""

    source: TypeNode
    target: TypeNode
    relation_type: RelationType

    @property
    def key(self) -> tuple:
        return (self.source.name, self.target.name, self.relation_type)


class Graph:
    """Insertion-ordered type nodes plus the relation list between them.

    Nodes are added while declarations are projected; relations are
    computed once, afterwards, by ``set_relations``.
    """

    def __init__(self) -> None:
        self._nodes: Dict[str, TypeNode] = {}
        self._relations: List[ClassRelation] = []

    def add_node(self, node: TypeNode) -> None:
        if node.name in self._nodes:
            raise GraphError(f"Duplicate type node: {node.name}")
        self._nodes[node.name] = node

    def get_node(self, name: str) -> Optional[TypeNode]:
        return self._nodes.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._nodes

    def __iter__(self) -> Iterator[TypeNode]:
        return iter(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def nodes(self) -> List[TypeNode]:
        return list(self._nodes.values())

    @property
    def relations(self) -> List[ClassRelation]:
        return list(self._relations)

    @property
    def is_empty(self) -> bool:
        return not self._nodes

    def set_relations(self, relations: List[ClassRelation]) -> None:
        """Replace the relation list. Both endpoints must be nodes of this graph."""
        for rel in relations:
            for end in (rel.source, rel.target):
                if self._nodes.get(end.name) is not end:
                    raise GraphError(f"Relation endpoint is not a node of this graph: {end.name}")
        self._relations = list(relations)

    def to_dict(self) -> dict:
        """Plain-data view: ``{"nodes": [...], "edges": [...]}``."""
        return {
            "nodes": [
                {
                    "name": n.name,
                    "kind": n.kind.value,
                    "base_type": n.base_type,
                    "interfaces": list(n.interfaces),
                    "members": [
                        {
                            "name": m.name,
                            "form": m.form.value,
                            "visibility": m.visibility.name.lower(),
                            "type": m.type_text,
                            "container": m.container_name,
                            "dependencies": list(m.dependencies),
                        }
                        for m in n.members
                    ],
                    "enum_values": list(n.enum_values),
                }
                for n in self._nodes.values()
            ],
            "edges": [
                {"from": r.source.name, "to": r.target.name, "kind": r.relation_type.value}
                for r in self._relations
            ],
        }


@dataclass
class Diagnostic:
    """A non-fatal problem recorded during a build."""

    file_path: str
    line: int
    message: str
    severity: str = "warning"  # "warning" | "error"
    source: str = "parse"  # "parse" | "merge" | "signature"


@dataclass
class BuildResult:
    """Summary of a graph build run."""

    graph: Graph
    diagnostics: List[Diagnostic] = field(default_factory=list)
    files_processed: int = 0
    files_failed: int = 0
    fragments_seen: int = 0
    elapsed_seconds: float = 0.0

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == "error"]
