"""Signature analysis — type references found in a member's declared type.

Parses the verbatim type text of a property or method return
(``Dictionary<string, List<Order>>?``) into a small type tree, then
unwraps nullable, array, pointer and generic wrappers to collect the
type names it refers to.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, NamedTuple, Optional, Tuple

from .constants import DEFAULT_SYSTEM_NAMESPACES, PRIMITIVE_TYPES

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"\s*(?:(::)|(@?[^\W\d]\w*)|(\S))")

# Modifiers that may precede a return type
_TYPE_PREFIXES = frozenset({"ref", "readonly", "scoped"})


class SignatureSyntaxError(ValueError):
    """Raised when type text cannot be parsed."""


@dataclass
class TypeRef:
    """One node of a parsed type expression.

    kind is "name", "generic", "nullable", "array", "pointer" or "tuple".
    Wrapper kinds keep their element in ``args[0]``.
    """

    kind: str
    name: str = ""
    qualifier: str = ""
    args: List["TypeRef"] = field(default_factory=list)
    # generic arguments attached to qualifier segments: Outer<T>.Inner
    qualifier_args: List["TypeRef"] = field(default_factory=list)


class SignatureInfo(NamedTuple):
    container_name: Optional[str]
    dependencies: List[str]


# ── Parsing ──────────────────────────────────────────────────────────


def _tokenize(text: str) -> List[str]:
    tokens = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if not match:
            break
        token = match.group(1) or match.group(2) or match.group(3)
        if token is None:
            break
        tokens.append(token.lstrip("@") if token.startswith("@") and len(token) > 1 else token)
        pos = match.end()
    return tokens


class _Parser:
    """Recursive-descent parser over the token list."""

    def __init__(self, text: str):
        self._text = text
        self._tokens = _tokenize(text)
        self._pos = 0

    def parse(self) -> TypeRef:
        while self._peek() in _TYPE_PREFIXES:
            self._pos += 1
        ref = self._type()
        if self._peek() is not None:
            raise self._error(f"unexpected {self._peek()!r}")
        return ref

    def _peek(self) -> Optional[str]:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _take(self, expected: Optional[str] = None) -> str:
        token = self._peek()
        if token is None:
            raise self._error("unexpected end of type")
        if expected is not None and token != expected:
            raise self._error(f"expected {expected!r}, got {token!r}")
        self._pos += 1
        return token

    def _error(self, message: str) -> SignatureSyntaxError:
        return SignatureSyntaxError(f"Cannot parse type {self._text!r}: {message}")

    def _type(self) -> TypeRef:
        if self._peek() == "(":
            ref = self._tuple()
        else:
            ref = self._name()

        while True:
            token = self._peek()
            if token == "?":
                self._pos += 1
                ref = TypeRef("nullable", args=[ref])
            elif token == "*":
                self._pos += 1
                ref = TypeRef("pointer", args=[ref])
            elif token == "[":
                self._pos += 1
                while self._peek() == ",":
                    self._pos += 1
                self._take("]")
                ref = TypeRef("array", args=[ref])
            else:
                return ref

    def _tuple(self) -> TypeRef:
        self._take("(")
        elements = []
        while True:
            elements.append(self._type())
            # optional element name: (int Count, Order Last)
            token = self._peek()
            if token is not None and _is_identifier(token):
                self._pos += 1
            if self._peek() == ",":
                self._pos += 1
                continue
            self._take(")")
            return TypeRef("tuple", args=elements)

    def _name(self) -> TypeRef:
        segments: List[str] = []
        qualifier_args: List[TypeRef] = []
        args: List[TypeRef] = []
        is_generic = False

        while True:
            token = self._take()
            if not _is_identifier(token):
                raise self._error(f"expected a type name, got {token!r}")
            if segments and (args or is_generic):
                qualifier_args.extend(args)
                args, is_generic = [], False
            segments.append(token)

            if self._peek() == "<":
                is_generic = True
                args = self._type_arguments()

            if self._peek() in (".", "::"):
                self._pos += 1
                continue
            break

        name = segments[-1]
        qualifier = ".".join(s for s in segments[:-1] if s != "global")
        return TypeRef(
            "generic" if is_generic else "name",
            name=name,
            qualifier=qualifier,
            args=args,
            qualifier_args=qualifier_args,
        )

    def _type_arguments(self) -> List[TypeRef]:
        self._take("<")
        args = []
        # unbound generic: Dictionary<,>
        while self._peek() == ",":
            self._pos += 1
        if self._peek() == ">":
            self._pos += 1
            return args
        while True:
            args.append(self._type())
            if self._peek() == ",":
                self._pos += 1
                continue
            self._take(">")
            return args


def _is_identifier(token: str) -> bool:
    return token[0].isalpha() or token[0] == "_"


def parse_signature(text: str) -> TypeRef:
    """Parse C# type text into a TypeRef tree.

    Raises:
        SignatureSyntaxError: If the text is not a type expression
    """
    if not text or not text.strip():
        raise SignatureSyntaxError("Cannot parse empty type")
    return _Parser(text).parse()


# ── Analysis ─────────────────────────────────────────────────────────


def is_primitive(name: str) -> bool:
    return name.lower() in PRIMITIVE_TYPES


def namespace_matches(namespace: str, prefixes: Iterable[str]) -> bool:
    """Segment-aware prefix match: "System.IO" matches "System", "Systemic" does not."""
    return any(namespace == p or namespace.startswith(p + ".") for p in prefixes)


class SignatureAnalyzer:
    """Extract the container name and referenced type names of a signature.

    With ``exclude_system`` set, candidates whose namespace starts with one
    of ``system_namespaces`` are dropped. The namespace comes from the
    qualifier written in the signature or, failing that, from the
    resolver. Names known only by text get a plain string prefix check,
    so an undeclared ``SystemClock`` is dropped along with ``System`` types.
    """

    def __init__(
        self,
        exclude_system: bool = False,
        system_namespaces: Iterable[str] = DEFAULT_SYSTEM_NAMESPACES,
        resolver=None,
    ):
        self.exclude_system = exclude_system
        self.system_namespaces: Tuple[str, ...] = tuple(system_namespaces)
        self.resolver = resolver

    def analyze(self, signature: Optional[str]) -> SignatureInfo:
        """Analyze one declared type.

        Raises:
            SignatureSyntaxError: If the signature cannot be parsed
        """
        if not signature or not signature.strip():
            return SignatureInfo(None, [])

        ref = parse_signature(signature)
        container = self._container_name(ref)
        candidates: List[Tuple[str, str]] = []
        self._collect(ref, candidates, top=True)

        dependencies: List[str] = []
        for name, qualifier in candidates:
            if name in dependencies or is_primitive(name):
                continue
            if self.exclude_system and self._is_system(name, qualifier):
                continue
            dependencies.append(name)
        return SignatureInfo(container, dependencies)

    def _container_name(self, ref: TypeRef) -> Optional[str]:
        while ref.kind in ("nullable", "array", "pointer"):
            ref = ref.args[0]
        return ref.name if ref.kind == "generic" else None

    def _collect(self, ref: TypeRef, out: List[Tuple[str, str]], top: bool) -> None:
        if ref.kind in ("nullable", "array", "pointer"):
            self._collect(ref.args[0], out, top)
        elif ref.kind == "tuple":
            for element in ref.args:
                self._collect(element, out, top=False)
        elif ref.kind == "generic":
            # the generic's own name is a container, never a dependency
            for arg in ref.qualifier_args + ref.args:
                self._collect(arg, out, top=False)
        else:
            for arg in ref.qualifier_args:
                self._collect(arg, out, top=False)
            out.append((ref.name, ref.qualifier))

    def _is_system(self, name: str, qualifier: str) -> bool:
        if qualifier:
            return namespace_matches(qualifier, self.system_namespaces)
        if self.resolver is not None:
            symbol = self.resolver.lookup(name)
            if symbol is not None:
                return namespace_matches(symbol.namespace, self.system_namespaces)
        return any(name.startswith(p) for p in self.system_namespaces)


def analyze_signature(signature: Optional[str], **options) -> SignatureInfo:
    """Convenience wrapper: ``SignatureAnalyzer(**options).analyze(signature)``."""
    return SignatureAnalyzer(**options).analyze(signature)
