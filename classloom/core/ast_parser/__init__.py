"""Classloom AST Parser — tree-sitter based declaration extraction.

Public API:
    parse_file(path, project_root) → ParseResult
    parse_source(source, file_path, language) → ParseResult
    detect_language(file_path) → str | None
    collect_source_files(root, exclude) → list[str]
"""

from .models import BaseEntry, MemberDecl, ParseError, ParseResult, TypeFragment
from .utils import (
    collect_source_files,
    detect_language,
    get_parser,
    is_excluded,
    is_supported_file,
    should_skip_directory,
)

__all__ = [
    "parse_file",
    "parse_source",
    "detect_language",
    "collect_source_files",
    "is_excluded",
    "is_supported_file",
    "should_skip_directory",
    "BaseEntry",
    "MemberDecl",
    "ParseError",
    "ParseResult",
    "TypeFragment",
]


def parse_file(file_path: str, project_root: str = "") -> ParseResult:
    """Parse a source file into declaration fragments.

    Args:
        file_path: Absolute path to the source file
        project_root: Project root for computing relative paths

    Returns:
        ParseResult containing the extracted fragments

    Raises:
        ValueError: If the file extension has no registered parser
    """
    language = detect_language(file_path)
    if not language:
        raise ValueError(f"No parser for file: {file_path}")
    return get_parser(language).parse_file(file_path, project_root)


def parse_source(source_text: str, file_path: str, language: str | None = None) -> ParseResult:
    """Parse source code string into declaration fragments.

    Args:
        source_text: Source code as string
        file_path: Relative file path (for metadata)
        language: Language identifier. If None, detected from file_path.
    """
    if language is None:
        language = detect_language(file_path)
    if not language:
        raise ValueError(f"No parser for file: {file_path}")
    return get_parser(language).parse_source(source_text, file_path)
