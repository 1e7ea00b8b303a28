"""Graph Builder — turns parsed declarations into a class graph.

One GraphBuilder instance is one run: it owns the partial-type
accumulator and the diagnostics list, and is discarded afterwards.
Create a new instance for every independent build.

Pipeline:
  parse files → index declarations → filter → group partial fragments →
  project one TypeNode per logical type → build relations once
"""

import logging
import time
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

from ..ast_parser import parse_file
from ..ast_parser.models import ParseResult, TypeFragment
from .classifier import BaseListClassifier
from .models import BuildResult, Diagnostic, Graph, GraphError
from .projector import DeclarationProjector
from .relations import build_relations
from .signature import SignatureAnalyzer
from .symbols import DeclarationIndex

if TYPE_CHECKING:
    from ..config.config_loader import GraphConfig

logger = logging.getLogger(__name__)


class GraphBuilder:
    """Build a Graph from C# source files.

    Diagnostics for unreadable files, duplicate declarations and
    unparseable signatures are collected on ``diagnostics`` and returned
    with the BuildResult; none of them abort the run.
    """

    def __init__(self, config: Optional["GraphConfig"] = None):
        if config is None:
            from ..config.config_loader import GraphConfig
            config = GraphConfig()
        self.config = config
        self.diagnostics: List[Diagnostic] = []
        self._used = False

    # ── Public entry points ──────────────────────────────────────────────

    def build(self, files: Iterable[str], project_root: str = "") -> BuildResult:
        """Parse ``files`` and build the graph.

        Args:
            files: Source file paths
            project_root: Prefix stripped from paths in diagnostics
        """
        self._claim()
        results: List[ParseResult] = []
        for file_path in files:
            try:
                results.append(parse_file(file_path, project_root))
            except ValueError as e:
                self._record(file_path, 0, str(e), severity="error", source="parse")
        return self._build(results)

    def build_from_results(self, results: Iterable[ParseResult]) -> BuildResult:
        """Build the graph from already-parsed files."""
        self._claim()
        return self._build(results)

    def _build(self, results: Iterable[ParseResult]) -> BuildResult:
        start = time.time()
        results = list(results)
        result = BuildResult(graph=Graph(), diagnostics=self.diagnostics)
        result.files_failed = sum(1 for d in self.diagnostics if d.severity == "error")

        fragments: List[TypeFragment] = []
        for parse_result in results:
            for err in parse_result.errors:
                self._record(err.file_path, err.line, err.message, severity=err.severity, source="parse")
            if parse_result.failed:
                result.files_failed += 1
                continue
            result.files_processed += 1
            fragments.extend(parse_result.fragments)
        result.fragments_seen = len(fragments)

        index = DeclarationIndex.from_fragments(fragments)

        groups = self._group_fragments(f for f in fragments if self._accepts(f))
        projector = self._make_projector(index)

        for qualified_name, group in groups.items():
            group = self._check_duplicates(qualified_name, group)
            first = group[0]
            existing = result.graph.get_node(first.name)
            if existing is not None:
                self._record(
                    first.file_path, first.start_line,
                    f"Type {qualified_name} skipped: name {first.name} already used by "
                    f"{existing.qualified_name}",
                    source="merge",
                )
                continue

            try:
                node = projector.project(group)
                result.graph.add_node(node)
            except (GraphError, KeyError, ValueError) as e:
                self._record(
                    first.file_path, first.start_line,
                    f"Failed to build type {qualified_name}: {e}",
                    severity="error", source="merge",
                )

        result.graph.set_relations(
            build_relations(result.graph, suppress_dependencies=self.config.ignore_dependencies)
        )
        result.elapsed_seconds = time.time() - start
        self._log_result(result)
        return result

    # ── Private helpers ──────────────────────────────────────────────────

    def _claim(self) -> None:
        if self._used:
            raise RuntimeError("GraphBuilder runs once; create a new instance per build")
        self._used = True

    def _make_projector(self, index: DeclarationIndex) -> DeclarationProjector:
        cfg = self.config
        analyzer = SignatureAnalyzer(
            exclude_system=cfg.exclude_system_types,
            system_namespaces=cfg.system_namespaces,
            resolver=index if cfg.use_symbols else None,
        )
        classifier = BaseListClassifier(
            resolver=index if cfg.use_symbols else None,
            exclude_system=cfg.exclude_system_types,
            system_namespaces=cfg.system_namespaces,
        )
        return DeclarationProjector(
            analyzer,
            classifier,
            min_visibility=cfg.min_visibility,
            diagnostics=self.diagnostics,
        )

    def _accepts(self, fragment: TypeFragment) -> bool:
        """Type-name and namespace allow-lists; empty lists accept everything."""
        if self.config.type_names and fragment.name not in self.config.type_names:
            return False
        if self.config.namespaces and fragment.namespace not in self.config.namespaces:
            return False
        return True

    @staticmethod
    def _group_fragments(fragments: Iterable[TypeFragment]) -> Dict[str, List[TypeFragment]]:
        groups: Dict[str, List[TypeFragment]] = {}
        for fragment in fragments:
            groups.setdefault(fragment.qualified_name, []).append(fragment)
        return groups

    def _check_duplicates(self, qualified_name: str, group: List[TypeFragment]) -> List[TypeFragment]:
        """Drop fragments that redeclare a type without ``partial``."""
        if len(group) == 1 or all(f.is_partial for f in group):
            return group

        kept = [group[0]]
        for fragment in group[1:]:
            if fragment.is_partial and kept[0].is_partial:
                kept.append(fragment)
                continue
            self._record(
                fragment.file_path, fragment.start_line,
                f"Duplicate declaration of {qualified_name} ignored (not partial)",
                source="merge",
            )
        return kept

    def _record(
        self, file_path: str, line: int, message: str,
        severity: str = "warning", source: str = "parse",
    ) -> None:
        log = logger.error if severity == "error" else logger.warning
        log(f"{file_path}:{line}: {message}")
        self.diagnostics.append(Diagnostic(
            file_path=file_path, line=line, message=message,
            severity=severity, source=source,
        ))

    def _log_result(self, result: BuildResult) -> None:
        graph = result.graph
        if graph.is_empty:
            logger.info(
                f"Graph build complete: no types matched the filters "
                f"({result.files_processed} files, {result.fragments_seen} declarations)"
            )
            return
        logger.info(
            f"Graph build complete: {result.files_processed} files, "
            f"{len(graph)} types, {len(graph.relations)} relations, "
            f"{len(result.diagnostics)} diagnostics in {result.elapsed_seconds:.2f}s"
        )


def build_graph(
    files: Iterable[str],
    config: Optional["GraphConfig"] = None,
    project_root: str = "",
) -> BuildResult:
    """Build a graph with a fresh GraphBuilder."""
    return GraphBuilder(config).build(files, project_root)
