"""AST Parser utilities.

Language detection, parser registry, and source file discovery.
"""

import fnmatch
import os
from typing import Dict, Iterable, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .csharp_parser import CSharpParser

# Extension → language mapping
SUPPORTED_EXTENSIONS: Dict[str, str] = {
    ".cs": "csharp",
}

# Directories to skip during file walking
SKIP_DIRECTORIES = frozenset({
    ".git",
    ".vs",
    ".idea",
    "node_modules",
    "TestResults",
    "artifacts",
    # C# / .NET build output
    "bin",
    "obj",
    "packages",
})

# Parser registry, lazy-loaded to avoid import overhead
_parser_registry: Dict[str, "CSharpParser"] = {}


def detect_language(file_path: str) -> Optional[str]:
    """Detect programming language from file extension.

    Returns:
        Language identifier string or None if unsupported
    """
    _, ext = os.path.splitext(file_path)
    return SUPPORTED_EXTENSIONS.get(ext.lower())


def get_parser(language: str) -> "CSharpParser":
    """Get a parser instance for the given language.

    Raises:
        ValueError: If language is not supported
    """
    if language not in _parser_registry:
        if language == "csharp":
            from .csharp_parser import CSharpParser
            _parser_registry["csharp"] = CSharpParser()
        else:
            raise ValueError(
                f"Unsupported language: {language}. "
                f"Supported: {sorted(set(SUPPORTED_EXTENSIONS.values()))}"
            )

    return _parser_registry[language]


def should_skip_directory(dir_name: str) -> bool:
    """Check if a directory should be skipped during file walking."""
    return dir_name in SKIP_DIRECTORIES or dir_name.startswith(".")


def is_supported_file(file_path: str) -> bool:
    """Check if a file has a supported language extension."""
    return detect_language(file_path) is not None


def is_excluded(rel_path: str, patterns: Iterable[str]) -> bool:
    """Check a project-relative path against fnmatch-style exclude globs.

    Patterns match either the whole path or any single path component,
    so ``"Migrations"`` excludes every file under a Migrations folder.
    """
    normalized = rel_path.replace("\\", "/")
    parts = normalized.split("/")
    for pattern in patterns:
        if fnmatch.fnmatch(normalized, pattern):
            return True
        if any(fnmatch.fnmatch(part, pattern) for part in parts):
            return True
    return False


def collect_source_files(root_dir: str, exclude: Iterable[str] = ()) -> List[str]:
    """Walk a directory tree and collect supported source files.

    Returns absolute paths in a stable (sorted) order so that partial
    declarations merge the same way on every run.
    """
    patterns = list(exclude)
    files = []
    for dirpath, dirnames, filenames in os.walk(root_dir):
        dirnames[:] = sorted(d for d in dirnames if not should_skip_directory(d))

        for fname in sorted(filenames):
            if not is_supported_file(fname):
                continue
            full_path = os.path.join(dirpath, fname)
            rel_path = os.path.relpath(full_path, root_dir)
            if patterns and is_excluded(rel_path, patterns):
                continue
            files.append(os.path.abspath(full_path))

    return files
