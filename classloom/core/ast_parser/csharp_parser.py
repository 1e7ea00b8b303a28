"""C# AST parser using tree-sitter.

Walks the tree-sitter AST to extract classes, interfaces, structs, records,
record structs and enums as declaration fragments, together with their
base lists, properties, methods and enum values.
"""

import logging
from typing import List, Optional, Tuple

import tree_sitter
import tree_sitter_c_sharp

from .models import BaseEntry, MemberDecl, ParseError, ParseResult, TypeFragment

logger = logging.getLogger(__name__)

_CSHARP_LANGUAGE = tree_sitter.Language(tree_sitter_c_sharp.language())

_TYPE_DECLARATIONS = {
    "class_declaration": "class",
    "interface_declaration": "interface",
    "struct_declaration": "struct",
    "record_declaration": "record",
    "record_struct_declaration": "record struct",
}


def split_type_name(text: str) -> Tuple[str, str]:
    """Split a type reference into (qualifier, bare name).

    Generic arguments and the ``global::`` alias are stripped:
      "System.Collections.Generic.IList<User>" -> ("System.Collections.Generic", "IList")
      "Repository<T>"                          -> ("", "Repository")
    """
    head = text.split("<", 1)[0].strip()
    if "::" in head:
        head = head.split("::", 1)[1]
    qualifier, _, name = head.rpartition(".")
    return qualifier.strip(), name.strip()


def _first_error_line(root: tree_sitter.Node) -> int:
    """1-based line of the first ERROR or MISSING node, depth first."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            return node.start_point.row + 1
        if node.has_error:
            stack.extend(reversed(node.children))
    return root.start_point.row + 1


class CSharpParser:
    """tree-sitter based C# parser.

    Extracts one TypeFragment per type declaration, nested types included:
    - class / interface / struct / record / record struct declarations
    - enum declarations (value names only)
    - property and method members (methods carry their return type)
    - record positional parameters as properties

    Syntax errors do not stop extraction: tree-sitter recovers, the
    declarations it could read are kept, and the first broken line is
    reported as a warning.
    """

    language = "csharp"

    def __init__(self):
        self._parser = tree_sitter.Parser(_CSHARP_LANGUAGE)

    def parse_file(self, file_path: str, project_root: str = "") -> ParseResult:
        """Read and parse one .cs file.

        Paths in the result are relative to ``project_root`` when the file
        lies under it. An unreadable file yields an empty result carrying
        one error.
        """
        rel_path = file_path
        if project_root and file_path.startswith(project_root):
            rel_path = file_path[len(project_root):].lstrip("/\\")

        try:
            with open(file_path, "r", encoding="utf-8-sig", errors="replace") as f:
                source_text = f.read()
        except OSError as e:
            logger.error(f"Cannot read {file_path}: {e}")
            return ParseResult(
                file_path=rel_path,
                language=self.language,
                fragments=[],
                errors=[ParseError(file_path=rel_path, line=0, message=str(e), severity="error")],
            )
        return self.parse_source(source_text, rel_path)

    def parse_source(self, source_text: str, file_path: str) -> ParseResult:
        source = source_text.encode("utf-8")
        tree = self._parser.parse(source)
        result = ParseResult(file_path=file_path, language=self.language, fragments=[])

        if tree.root_node.has_error:
            line = _first_error_line(tree.root_node)
            result.errors.append(ParseError(
                file_path=file_path,
                line=line,
                message=f"Syntax error near line {line}; declarations after it may be incomplete",
            ))

        try:
            result.fragments = self.extract_fragments(tree, source, file_path)
        except Exception as e:
            logger.error(f"Failed to extract declarations from {file_path}: {e}")
            result.errors.append(ParseError(
                file_path=file_path, line=0,
                message=f"Declaration extraction failed: {e}", severity="error",
            ))
        return result

    def extract_fragments(
        self, tree: tree_sitter.Tree, source: bytes, file_path: str
    ) -> List[TypeFragment]:
        """Extract declaration fragments from the C# AST."""
        fragments: List[TypeFragment] = []
        self._walk_declarations(tree.root_node, source, file_path, "", (), fragments)
        return fragments

    # =========================================================================
    # Recursive declaration walker
    # =========================================================================

    def _walk_declarations(
        self,
        node: tree_sitter.Node,
        source: bytes,
        file_path: str,
        namespace: str,
        containing: Tuple[str, ...],
        fragments: List[TypeFragment],
    ) -> None:
        """Recursively walk AST nodes to extract type declarations."""
        for child in node.children:
            if child.type == "namespace_declaration":
                ns_name = self._extract_namespace_name(child, source)
                full_ns = f"{namespace}.{ns_name}" if namespace else ns_name
                self._walk_declarations(child, source, file_path, full_ns, containing, fragments)

            elif child.type == "file_scoped_namespace_declaration":
                ns_name = self._extract_namespace_name(child, source)
                namespace = f"{namespace}.{ns_name}" if namespace else ns_name
                # Older grammars nest the declarations, newer ones make them siblings
                self._walk_declarations(child, source, file_path, namespace, containing, fragments)

            elif child.type == "declaration_list":
                self._walk_declarations(child, source, file_path, namespace, containing, fragments)

            elif child.type in _TYPE_DECLARATIONS:
                self._extract_type(child, source, file_path, namespace, containing, fragments)

            elif child.type == "enum_declaration":
                self._extract_enum(child, source, file_path, namespace, containing, fragments)

    # =========================================================================
    # Type-level extractors
    # =========================================================================

    def _extract_type(
        self,
        node: tree_sitter.Node,
        source: bytes,
        file_path: str,
        namespace: str,
        containing: Tuple[str, ...],
        fragments: List[TypeFragment],
    ) -> None:
        """Extract a class/interface/struct/record declaration and its members."""
        name = self._get_child_text(node, "name", source)
        if not name:
            return

        kind_text = _TYPE_DECLARATIONS[node.type]
        if node.type == "record_declaration" and any(c.type == "struct" for c in node.children):
            kind_text = "record struct"

        fragment = TypeFragment(
            name=name,
            kind_text=kind_text,
            file_path=file_path,
            namespace=namespace,
            containing_types=containing,
            modifiers=self._extract_modifiers(node, source),
            base_entries=self._extract_base_entries(node, source),
            start_line=node.start_point.row + 1,
        )
        fragments.append(fragment)

        # Positional record parameters: record Person(string Name, int Age)
        if kind_text in ("record", "record struct"):
            params = self._get_child_by_type(node, "parameter_list")
            if params:
                fragment.members.extend(self._extract_record_parameters(params, source))

        body = node.child_by_field_name("body") or self._get_child_by_type(node, "declaration_list")
        if not body:
            return

        nested = containing + (name,)
        for child in body.children:
            if child.type == "property_declaration":
                prop = self._extract_property(child, source)
                if prop:
                    fragment.members.append(prop)

            elif child.type == "method_declaration":
                method = self._extract_method(child, source)
                if method:
                    fragment.members.append(method)

            elif child.type in _TYPE_DECLARATIONS:
                self._extract_type(child, source, file_path, namespace, nested, fragments)

            elif child.type == "enum_declaration":
                self._extract_enum(child, source, file_path, namespace, nested, fragments)

    def _extract_enum(
        self,
        node: tree_sitter.Node,
        source: bytes,
        file_path: str,
        namespace: str,
        containing: Tuple[str, ...],
        fragments: List[TypeFragment],
    ) -> None:
        """Extract an enum declaration and its value names."""
        name = self._get_child_text(node, "name", source)
        if not name:
            return

        values: List[str] = []
        body = node.child_by_field_name("body") or self._get_child_by_type(node, "enum_member_declaration_list")
        if body:
            for child in body.children:
                if child.type != "enum_member_declaration":
                    continue
                value_node = child.child_by_field_name("name") or self._get_child_by_type(child, "identifier")
                if value_node:
                    values.append(self._text(value_node, source))

        fragments.append(TypeFragment(
            name=name,
            kind_text="enum",
            file_path=file_path,
            namespace=namespace,
            containing_types=containing,
            modifiers=self._extract_modifiers(node, source),
            enum_values=values,
            start_line=node.start_point.row + 1,
        ))

    # =========================================================================
    # Member extractors
    # =========================================================================

    def _extract_property(self, node: tree_sitter.Node, source: bytes) -> Optional[MemberDecl]:
        name = self._get_child_text(node, "name", source)
        if not name:
            return None
        return MemberDecl(
            name=name,
            form="property",
            modifiers=self._extract_modifiers(node, source),
            type_text=self._get_child_text(node, "type", source) or "",
            start_line=node.start_point.row + 1,
        )

    def _extract_method(self, node: tree_sitter.Node, source: bytes) -> Optional[MemberDecl]:
        name = self._get_child_text(node, "name", source)
        if not name:
            return None
        # "returns" in current grammars, "type" in older ones
        return_type = (
            self._get_child_text(node, "returns", source)
            or self._get_child_text(node, "type", source)
            or ""
        )
        return MemberDecl(
            name=name,
            form="method",
            modifiers=self._extract_modifiers(node, source),
            type_text=return_type,
            start_line=node.start_point.row + 1,
        )

    def _extract_record_parameters(self, params: tree_sitter.Node, source: bytes) -> List[MemberDecl]:
        """Positional record parameters compile to public properties."""
        members = []
        for child in params.children:
            if child.type != "parameter":
                continue
            name = self._get_child_text(child, "name", source)
            if not name:
                continue
            members.append(MemberDecl(
                name=name,
                form="property",
                modifiers=["public"],
                type_text=self._get_child_text(child, "type", source) or "",
                start_line=child.start_point.row + 1,
            ))
        return members

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _text(node: tree_sitter.Node, source: bytes) -> str:
        return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    @staticmethod
    def _get_child_text(node: tree_sitter.Node, field_name: str, source: bytes) -> Optional[str]:
        child = node.child_by_field_name(field_name)
        if child:
            return source[child.start_byte:child.end_byte].decode("utf-8", errors="replace")
        return None

    @staticmethod
    def _get_child_by_type(node: tree_sitter.Node, type_name: str) -> Optional[tree_sitter.Node]:
        for child in node.children:
            if child.type == type_name:
                return child
        return None

    @staticmethod
    def _extract_namespace_name(node: tree_sitter.Node, source: bytes) -> str:
        name_node = node.child_by_field_name("name")
        if name_node:
            return source[name_node.start_byte:name_node.end_byte].decode("utf-8", errors="replace")
        return ""

    @staticmethod
    def _extract_modifiers(node: tree_sitter.Node, source: bytes) -> List[str]:
        """Extract modifier keywords (public, static, partial, etc.)."""
        modifiers = []
        for child in node.children:
            if child.type == "modifier":
                text = source[child.start_byte:child.end_byte].decode("utf-8", errors="replace").strip()
                modifiers.append(text)
        return modifiers

    def _extract_base_entries(self, node: tree_sitter.Node, source: bytes) -> List[BaseEntry]:
        """Extract the base list entries in source order.

        ``record Dog(string Name) : Animal(Name)`` yields the bare ``Animal``
        type, without the constructor arguments.
        """
        base_list = self._get_child_by_type(node, "base_list")
        if not base_list:
            return []

        entries = []
        for child in base_list.named_children:
            type_node = child
            if child.type == "primary_constructor_base_type":
                type_node = child.child_by_field_name("type") or (
                    child.named_children[0] if child.named_children else None
                )
            elif child.type in ("argument_list", "comment"):
                continue
            if type_node is None:
                continue

            text = self._text(type_node, source).strip()
            if not text:
                continue
            qualifier, name = split_type_name(text)
            if name:
                entries.append(BaseEntry(text=text, name=name, qualifier=qualifier))
        return entries
