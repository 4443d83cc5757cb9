"""
Structural extraction engine

Tree-sitter-based C# source code parser and structural model extractor.
Extracts classes and interfaces with their members, documentation summaries,
dependencies and inheritance for class-diagram viewers.
"""

from extraction.errors import (
    ArchLensError,
    FileParseError,
    InputNotFoundError,
    UnsupportedInputKindError,
)
from extraction.models import ClassEntity, ExtractionResult, InterfaceEntity, MethodEntity
from extraction.parser import create_parser, parse_file, parse_bytes, count_error_nodes
from extraction.patterns import NamespaceFilter, is_namespace_included, wildcard_match
from extraction.directives import active_branch, evaluate_condition, iter_active_children
from extraction.docs import TriviaIndex, build_trivia_index, summary_for
from extraction.members import analyze_class, analyze_interface, reclassify_bases
from extraction.traversal import extract_entities_from_tree, resolve_namespace
from extraction.extractor import (
    extract_file,
    extract_files,
    extract_directory,
    extract_input,
    iter_extract_files,
    discover_csharp_files,
    resolve_search_directory,
    ExtractionStats,
    FileExtraction,
)
from extraction.serialization import to_json, to_wire_dict, write_json

__all__ = [
    # Errors
    "ArchLensError",
    "FileParseError",
    "InputNotFoundError",
    "UnsupportedInputKindError",
    # Data models
    "ClassEntity",
    "InterfaceEntity",
    "MethodEntity",
    "ExtractionResult",
    "ExtractionStats",
    "FileExtraction",
    # Low-level parsing
    "create_parser",
    "parse_file",
    "parse_bytes",
    "count_error_nodes",
    # Filtering
    "NamespaceFilter",
    "is_namespace_included",
    "wildcard_match",
    # Conditional compilation
    "active_branch",
    "evaluate_condition",
    "iter_active_children",
    # Mid-level extraction
    "TriviaIndex",
    "build_trivia_index",
    "summary_for",
    "analyze_class",
    "analyze_interface",
    "reclassify_bases",
    "extract_entities_from_tree",
    "resolve_namespace",
    # High-level orchestration
    "extract_file",
    "extract_files",
    "extract_directory",
    "extract_input",
    "iter_extract_files",
    "discover_csharp_files",
    "resolve_search_directory",
    # Output
    "to_json",
    "to_wire_dict",
    "write_json",
]
