# Classloom Graph Builder - class graph construction from C# declarations
# Relation types: inheritance, implementation, dependency

from .builder import GraphBuilder, build_graph
from .classifier import BaseListClassifier, BaseRole, Classification
from .models import (
    BuildResult,
    ClassRelation,
    Diagnostic,
    Graph,
    GraphError,
    Member,
    MemberForm,
    RelationType,
    TypeKind,
    TypeNode,
    Visibility,
)
from .projector import DeclarationProjector
from .relations import build_relations
from .signature import SignatureAnalyzer, SignatureInfo, SignatureSyntaxError, analyze_signature

__all__ = [
    "GraphBuilder",
    "build_graph",
    "BaseListClassifier",
    "BaseRole",
    "Classification",
    "BuildResult",
    "ClassRelation",
    "Diagnostic",
    "Graph",
    "GraphError",
    "Member",
    "MemberForm",
    "RelationType",
    "TypeKind",
    "TypeNode",
    "Visibility",
    "DeclarationProjector",
    "build_relations",
    "SignatureAnalyzer",
    "SignatureInfo",
    "SignatureSyntaxError",
    "analyze_signature",
]
