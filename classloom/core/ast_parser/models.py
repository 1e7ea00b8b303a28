"""AST Parser data models.

Defines the declaration fragments handed to the graph builder.
These are pure data containers with no parsing logic.
"""

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass
class BaseEntry:
    """One entry of a type's base list (``class Foo : Bar, IBaz``)."""

    text: str  # "Repository<User>"
    name: str  # "Repository"
    qualifier: str = ""  # "System.Collections" for "System.Collections.IList"


@dataclass
class MemberDecl:
    """A property or method as written in source."""

    name: str
    form: str  # "property" | "method"
    modifiers: List[str] = field(default_factory=list)
    type_text: str = ""  # property type or method return type, verbatim
    start_line: int = 0


@dataclass
class TypeFragment:
    """One physical type declaration.

    Several fragments share a qualified_name when the type is declared
    ``partial`` across files or blocks.
    """

    name: str
    kind_text: str  # "class" | "interface" | "struct" | "record" | "record struct" | "enum"
    file_path: str
    namespace: str = ""
    containing_types: Tuple[str, ...] = ()
    modifiers: List[str] = field(default_factory=list)
    base_entries: List[BaseEntry] = field(default_factory=list)
    members: List[MemberDecl] = field(default_factory=list)
    enum_values: List[str] = field(default_factory=list)
    start_line: int = 0

    @property
    def qualified_name(self) -> str:
        parts = []
        if self.namespace:
            parts.append(self.namespace)
        parts.extend(self.containing_types)
        parts.append(self.name)
        return ".".join(parts)

    @property
    def is_partial(self) -> bool:
        return "partial" in self.modifiers


@dataclass
class ParseError:
    """An error encountered during parsing."""

    file_path: str
    line: int
    message: str
    severity: str = "warning"  # "warning" | "error"


@dataclass
class ParseResult:
    """Complete parse output for a single file."""

    file_path: str
    language: str
    fragments: List[TypeFragment]
    errors: List[ParseError] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return any(e.severity == "error" for e in self.errors)
