import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .core.ast_parser import collect_source_files
from .core.config import ConfigError, load_config
from .core.diagrams import MermaidGenerator
from .core.graph_builder import GraphBuilder, Visibility


def setup_logging(log_level: str = "INFO") -> None:
    """Configure application logging.

    Logs go to stderr so ``--output -`` can write the diagram to stdout.
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="classloom",
        description="Generate a Mermaid class diagram from C# source code.",
    )
    parser.add_argument(
        "--path", "-p",
        required=True,
        help="Folder containing the .cs files (searched recursively)",
    )
    parser.add_argument(
        "--output", "-o",
        default="output.md",
        help="Output file, or '-' for stdout (default: output.md)",
    )
    parser.add_argument(
        "--namespace", "-ns",
        dest="namespaces",
        nargs="+",
        action="extend",
        help="Only include types declared in these namespaces",
    )
    parser.add_argument(
        "--type-names", "-t",
        dest="type_names",
        nargs="+",
        action="extend",
        help="Only include these type names",
    )
    parser.add_argument(
        "--ignore-dependency",
        dest="ignore_dependencies",
        action="store_const",
        const=True,
        help="Skip dependency arrows",
    )
    parser.add_argument(
        "--min-visibility",
        choices=[v.name.lower() for v in Visibility],
        help="Lowest member visibility to include (default: public)",
    )
    parser.add_argument(
        "--exclude-system",
        dest="exclude_system_types",
        action="store_const",
        const=True,
        help="Drop references to types from system namespaces",
    )
    parser.add_argument(
        "--system-namespace",
        dest="system_namespaces",
        nargs="+",
        action="extend",
        help="Namespace prefixes treated as system (default: System Microsoft)",
    )
    parser.add_argument(
        "--exclude",
        nargs="+",
        action="extend",
        help="Glob patterns for files or folders to skip",
    )
    parser.add_argument(
        "--no-symbols",
        dest="use_symbols",
        action="store_const",
        const=False,
        help="Classify base lists by naming convention only",
    )
    parser.add_argument(
        "--config",
        help="YAML config file (default: $CLASSLOOM_CONFIG or ./classloom.yaml)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print every diagnostic collected during the build",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for classloom."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        config = load_config(
            args.config,
            type_names=args.type_names,
            namespaces=args.namespaces,
            min_visibility=args.min_visibility,
            ignore_dependencies=args.ignore_dependencies,
            exclude_system_types=args.exclude_system_types,
            system_namespaces=args.system_namespaces,
            use_symbols=args.use_symbols,
            exclude=args.exclude,
        )
    except ConfigError as e:
        parser.error(str(e))

    input_path = os.path.abspath(args.path)
    if not os.path.isdir(input_path):
        print(f"Input path is not a directory: {input_path}", file=sys.stderr)
        return 1

    files = collect_source_files(input_path, exclude=config.exclude)
    logger.info(f"Found {len(files)} source files under {input_path}")

    result = GraphBuilder(config).build(files, project_root=input_path)
    text = MermaidGenerator().generate(result.graph)

    if args.output == "-":
        sys.stdout.write(text)
    else:
        output = Path(args.output).resolve()
        try:
            output.write_text(text, encoding="utf-8")
        except OSError as e:
            print(f"Cannot write {output}: {e}", file=sys.stderr)
            return 1
        print(f"Diagram generated at: {output}")

    if result.graph.is_empty:
        print("No types matched the filters.", file=sys.stderr)

    if args.verbose and result.diagnostics:
        print(f"{len(result.diagnostics)} diagnostics:", file=sys.stderr)
        for d in result.diagnostics:
            print(f"  [{d.severity}] {d.file_path}:{d.line}: {d.message}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
