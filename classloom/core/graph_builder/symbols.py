"""DeclarationIndex — symbol lookup over every declaration parsed in a run.

Stands in for a compiler's semantic model: a base-list entry or signature
name that matches a declared type resolves to that type's kind and
namespace. Anything else (library types, type parameters) stays
unresolved and is handled heuristically by the callers.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from ..ast_parser.models import TypeFragment


@dataclass(frozen=True)
class SymbolInfo:
    name: str
    kind: str  # fragment kind_text: "class" | "interface" | ...
    namespace: str
    qualified_name: str


class DeclarationIndex:
    """Name → SymbolInfo lookup built once per build run.

    Attributes:
        by_name: First declaration seen for each simple name.
        by_qualified: Declarations indexed by qualified name.
    """

    __slots__ = ("by_name", "by_qualified")

    def __init__(self) -> None:
        self.by_name: Dict[str, SymbolInfo] = {}
        self.by_qualified: Dict[str, SymbolInfo] = {}

    @classmethod
    def from_fragments(cls, fragments: Iterable[TypeFragment]) -> "DeclarationIndex":
        index = cls()
        for fragment in fragments:
            index.add(fragment)
        return index

    def add(self, fragment: TypeFragment) -> None:
        info = SymbolInfo(
            name=fragment.name,
            kind=fragment.kind_text,
            namespace=fragment.namespace,
            qualified_name=fragment.qualified_name,
        )
        self.by_name.setdefault(info.name, info)
        self.by_qualified.setdefault(info.qualified_name, info)

    def lookup(self, name: str, qualifier: str = "") -> Optional[SymbolInfo]:
        """Resolve a simple name, preferring an exact qualified match.

        A qualifier that matches no declaration means the name refers to
        something outside the parsed sources, so no symbol is returned.
        """
        if qualifier:
            full = f"{qualifier}.{name}"
            exact = self.by_qualified.get(full)
            if exact is not None:
                return exact
            # partially qualified: Models.Order inside namespace App
            suffix = f".{full}"
            for qn, info in self.by_qualified.items():
                if qn.endswith(suffix):
                    return info
            return None
        return self.by_name.get(name)

    def __len__(self) -> int:
        return len(self.by_qualified)
