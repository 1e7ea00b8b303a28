"""Base-list classification: base type vs. implemented interface.

Two strategies behind one interface: ``SymbolStrategy`` uses the kind of
the resolved declaration, ``NamingStrategy`` falls back to the C#
convention that interface names are ``I`` followed by an uppercase letter.
"""

import logging
from enum import Enum
from typing import Iterable, NamedTuple, Optional

from ..ast_parser.models import BaseEntry
from .signature import namespace_matches
from .symbols import DeclarationIndex, SymbolInfo

logger = logging.getLogger(__name__)


class BaseRole(Enum):
    BASE_TYPE = "base_type"
    INTERFACE = "interface"


class Classification(NamedTuple):
    role: BaseRole
    name: str


class NamingStrategy:
    """``IFoo`` is an interface, anything else a base type candidate."""

    def classify(self, entry: BaseEntry) -> Optional[Classification]:
        name = entry.name
        if len(name) > 1 and name[0] == "I" and name[1].isupper():
            return Classification(BaseRole.INTERFACE, name)
        return Classification(BaseRole.BASE_TYPE, name)


class SymbolStrategy:
    """Classify by the resolved declaration kind.

    Returns None when no symbol was found, so the caller can fall back
    to another strategy.
    """

    def classify(self, entry: BaseEntry, symbol: Optional[SymbolInfo]) -> Optional[Classification]:
        if symbol is None:
            return None
        if symbol.kind == "interface":
            return Classification(BaseRole.INTERFACE, entry.name)
        return Classification(BaseRole.BASE_TYPE, entry.name)


class BaseListClassifier:
    """Try symbolic classification first, then the naming heuristic.

    Entries are looked up in ``resolver`` on every call and never
    modified. Without a resolver only the heuristic runs.

    With ``exclude_system`` set, entries whose resolved namespace falls
    under ``system_namespaces`` are dropped (classify returns None).
    """

    def __init__(
        self,
        resolver: Optional[DeclarationIndex] = None,
        exclude_system: bool = False,
        system_namespaces: Iterable[str] = (),
    ):
        self.resolver = resolver
        self._symbolic = SymbolStrategy()
        self._heuristic = NamingStrategy()
        self.exclude_system = exclude_system
        self.system_namespaces = tuple(system_namespaces)

    def classify(self, entry: BaseEntry) -> Optional[Classification]:
        symbol = self.resolver.lookup(entry.name, entry.qualifier) if self.resolver is not None else None
        if symbol is not None:
            if self.exclude_system and namespace_matches(symbol.namespace, self.system_namespaces):
                logger.debug(f"Dropping base entry {entry.text} from system namespace")
                return None
            result = self._symbolic.classify(entry, symbol)
            if result is not None:
                return result
        return self._heuristic.classify(entry)
