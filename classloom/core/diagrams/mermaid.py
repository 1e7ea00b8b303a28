"""Deterministic Mermaid generator for class diagrams.

Takes a built Graph and produces ``classDiagram`` syntax, wrapped in a
markdown code fence by default.
"""

import logging
from typing import List

from ..graph_builder.models import ClassRelation, Graph, Member, RelationType, TypeKind, TypeNode, Visibility

logger = logging.getLogger(__name__)

_TYPE_ANNOTATIONS = {
    TypeKind.INTERFACE: "<<interface>>",
    TypeKind.RECORD: "<<record>>",
    TypeKind.STRUCT: "<<struct>>",
    TypeKind.RECORD_STRUCT: "<<record struct>>",
    TypeKind.ENUM: "<<enumeration>>",
}

_VISIBILITY_MARKERS = {
    Visibility.PUBLIC: "+",
    Visibility.PROTECTED: "#",
    Visibility.INTERNAL: "~",
    Visibility.PRIVATE: "-",
}


def type_string(type_text: str) -> str:
    """Mermaid-safe type text: generics use ``~`` (List~Order~), empty is ``void``."""
    if not type_text:
        return "void"
    return type_text.replace("<", "~").replace(">", "~")


def visibility_marker(visibility: Visibility) -> str:
    return _VISIBILITY_MARKERS.get(visibility, "")


class MermaidGenerator:
    """Render a Graph as a Mermaid class diagram."""

    def __init__(self, render_markdown: bool = True):
        self.render_markdown = render_markdown

    def generate(self, graph: Graph) -> str:
        body = ["classDiagram", ""]
        for node in graph:
            body.append(self.generate_class(node))
        body.append("")
        for relation in graph.relations:
            body.append(self.generate_relation(relation))

        text = "\n".join(body) + "\n"
        logger.debug(f"Rendered {len(graph)} classes, {len(graph.relations)} relations")
        if not self.render_markdown:
            return text
        return f"```mermaid\n{text}```\n"

    def generate_class(self, node: TypeNode) -> str:
        lines = [f"class {node.name} {{"]

        annotation = _TYPE_ANNOTATIONS.get(node.kind)
        if annotation:
            lines.append(f"  {annotation}")

        if node.kind is TypeKind.ENUM:
            lines.extend(f"  {value}" for value in node.enum_values)
        else:
            lines.extend(self.generate_property(p) for p in node.properties)
            lines.extend(self.generate_method(m) for m in node.methods)

        lines.append("}")
        return "\n".join(lines)

    @staticmethod
    def generate_property(member: Member) -> str:
        return f"  {visibility_marker(member.visibility)}{type_string(member.type_text)} {member.name}"

    @staticmethod
    def generate_method(member: Member) -> str:
        return f"  {visibility_marker(member.visibility)}{member.name}() {type_string(member.type_text)}"

    @staticmethod
    def generate_relation(relation: ClassRelation) -> str:
        """Target on the left, source on the right, for every relation type."""
        source, target = relation.source.name, relation.target.name
        if relation.relation_type is RelationType.INHERITANCE:
            return f"{target} <|-- {source}"
        if relation.relation_type is RelationType.IMPLEMENTATION:
            return f"{target} <|.. {source} : implements"
        return f"{target} <-- {source}"


def generate_class_diagram(graph: Graph, render_markdown: bool = True) -> str:
    return MermaidGenerator(render_markdown=render_markdown).generate(graph)
