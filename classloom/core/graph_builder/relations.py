"""Relation detection for inheritance, implementation and dependency edges.

Runs once, after every node is in the graph. Names that do not resolve
to a node (library types, type parameters, types outside the parsed
sources) are skipped; that is the common case, not an error.

Output order: grouped by source node in insertion order; within a node,
inheritance, then implementation, then dependency; within a kind,
first-seen order.
"""

import logging
from typing import List, Set, Tuple

from .models import ClassRelation, Graph, RelationType, TypeNode

logger = logging.getLogger(__name__)


# ── Inheritance ──────────────────────────────────────────────────────


def detect_inheritance(node: TypeNode, graph: Graph) -> List[ClassRelation]:
    """Edge to the node's base type, when that type is a node."""
    if not node.base_type:
        return []
    target = graph.get_node(node.base_type)
    if target is None or target is node:
        return []
    return [ClassRelation(node, target, RelationType.INHERITANCE)]


# ── Implementation ───────────────────────────────────────────────────


def detect_implementation(node: TypeNode, graph: Graph) -> List[ClassRelation]:
    """Edges to every implemented interface that is a node."""
    edges = []
    for iface_name in node.interfaces:
        target = graph.get_node(iface_name)
        if target is None or target is node:
            continue
        edges.append(ClassRelation(node, target, RelationType.IMPLEMENTATION))
    return edges


# ── Dependencies ─────────────────────────────────────────────────────


def detect_dependencies(node: TypeNode, graph: Graph) -> List[ClassRelation]:
    """One edge per distinct node referenced from member signatures."""
    edges = []
    seen: Set[str] = set()
    for member in node.members:
        for dep_name in member.dependencies:
            if dep_name in seen:
                continue
            target = graph.get_node(dep_name)
            if target is None or target is node:
                continue
            seen.add(dep_name)
            edges.append(ClassRelation(node, target, RelationType.DEPENDENCY))
    return edges


# ── All relations ────────────────────────────────────────────────────


def build_relations(graph: Graph, suppress_dependencies: bool = False) -> List[ClassRelation]:
    """Compute the ordered, deduplicated relation list for a graph."""
    relations: List[ClassRelation] = []
    seen: Set[Tuple] = set()

    for node in graph:
        candidates = detect_inheritance(node, graph) + detect_implementation(node, graph)
        if not suppress_dependencies:
            candidates += detect_dependencies(node, graph)

        for rel in candidates:
            if rel.key in seen:
                continue
            seen.add(rel.key)
            relations.append(rel)

    logger.debug(f"Relation detection: {len(relations)} edges over {len(graph)} nodes")
    return relations
