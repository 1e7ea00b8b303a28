"""Declaration projection — merge partial fragments into one TypeNode."""

import logging
from typing import List, Optional, Sequence

from ..ast_parser.models import MemberDecl, TypeFragment
from .classifier import BaseListClassifier, BaseRole
from .models import Diagnostic, Member, MemberForm, TypeKind, TypeNode, Visibility
from .signature import SignatureAnalyzer, SignatureSyntaxError

logger = logging.getLogger(__name__)

KIND_BY_TEXT = {
    "class": TypeKind.CLASS,
    "interface": TypeKind.INTERFACE,
    "struct": TypeKind.STRUCT,
    "record": TypeKind.RECORD,
    "record struct": TypeKind.RECORD_STRUCT,
    "enum": TypeKind.ENUM,
}


def member_visibility(modifiers: Sequence[str], parent_kind: TypeKind) -> Visibility:
    """Map C# access modifiers to a Visibility.

    ``protected internal`` and ``private protected`` count as Protected.
    Without an access modifier, interface members are public and
    everything else is private.
    """
    mods = set(modifiers)
    if "public" in mods:
        return Visibility.PUBLIC
    if "protected" in mods:
        return Visibility.PROTECTED
    if "internal" in mods:
        return Visibility.INTERNAL
    if "private" in mods:
        return Visibility.PRIVATE
    if parent_kind is TypeKind.INTERFACE:
        return Visibility.PUBLIC
    return Visibility.PRIVATE


class DeclarationProjector:
    """Build one TypeNode from every fragment of a logical type.

    Fragments are processed in order: base lists feed the base type
    (first base candidate wins) and interface list, members are
    appended fragment by fragment in declaration order.
    """

    def __init__(
        self,
        analyzer: SignatureAnalyzer,
        classifier: BaseListClassifier,
        min_visibility: Visibility = Visibility.PUBLIC,
        diagnostics: Optional[List[Diagnostic]] = None,
    ):
        self.analyzer = analyzer
        self.classifier = classifier
        self.min_visibility = min_visibility
        self.diagnostics = diagnostics if diagnostics is not None else []

    def project(self, fragments: Sequence[TypeFragment]) -> TypeNode:
        if not fragments:
            raise ValueError("project() needs at least one fragment")

        first = fragments[0]
        kind = KIND_BY_TEXT[first.kind_text]
        node = TypeNode(
            name=first.name,
            kind=kind,
            qualified_name=first.qualified_name,
            namespace=first.namespace,
        )

        if kind is TypeKind.ENUM:
            node.enum_values = list(first.enum_values)
            return node

        base_origin: Optional[TypeFragment] = None
        for fragment in fragments:
            base_origin = self._apply_base_list(node, fragment, base_origin)
            for decl in fragment.members:
                member = self._project_member(decl, kind, fragment)
                if member is not None:
                    node.members.append(member)

        return node

    def _apply_base_list(
        self,
        node: TypeNode,
        fragment: TypeFragment,
        base_origin: Optional[TypeFragment],
    ) -> Optional[TypeFragment]:
        for entry in fragment.base_entries:
            result = self.classifier.classify(entry)
            if result is None:
                continue

            if result.role is BaseRole.INTERFACE:
                if result.name not in node.interfaces:
                    node.interfaces.append(result.name)
                continue

            if node.base_type is None:
                node.base_type = result.name
                base_origin = fragment
            elif result.name != node.base_type and fragment is not base_origin:
                self._report(
                    fragment.file_path, fragment.start_line,
                    f"Partial declaration of {node.qualified_name} names base type "
                    f"{result.name}; keeping {node.base_type}",
                    source="merge",
                )
        return base_origin

    def _project_member(
        self, decl: MemberDecl, parent_kind: TypeKind, fragment: TypeFragment
    ) -> Optional[Member]:
        visibility = member_visibility(decl.modifiers, parent_kind)
        if visibility < self.min_visibility:
            return None

        try:
            container, dependencies = self.analyzer.analyze(decl.type_text)
        except SignatureSyntaxError as e:
            self._report(fragment.file_path, decl.start_line, str(e), source="signature")
            container, dependencies = None, []

        return Member(
            name=decl.name,
            visibility=visibility,
            form=MemberForm(decl.form),
            type_text=decl.type_text,
            container_name=container,
            dependencies=dependencies,
        )

    def _report(self, file_path: str, line: int, message: str, source: str) -> None:
        logger.warning(f"{file_path}:{line}: {message}")
        self.diagnostics.append(Diagnostic(
            file_path=file_path, line=line, message=message,
            severity="warning", source=source,
        ))
