"""
High-level orchestrator for C# structural extraction.

This module provides the main entry points for extracting the class and
interface model from single files, file lists, directory trees, or the
directory of a .csproj/.sln file.
"""

import contextvars
import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Dict, Any, Sequence, Set, Tuple, Union

from core.structured_logging import file_scope
from extraction.config import (
    CSHARP_EXTENSIONS,
    PROJECT_EXTENSIONS,
    SKIPPED_DIRECTORIES,
    DEFAULT_CONTINUE_ON_ERROR,
    DEFAULT_MAX_WORKERS,
    DEFAULT_REJECT_SYNTAX_ERRORS,
    DEFAULT_RESOLVE_INTERFACE_BASES,
)
from extraction.errors import FileParseError, InputNotFoundError, UnsupportedInputKindError
from extraction.members import reclassify_bases
from extraction.models import ClassEntity, ExtractionResult, InterfaceEntity
from extraction.parser import parse_file
from extraction.patterns import NamespaceFilter
from extraction.traversal import extract_entities_from_tree

logger = logging.getLogger(__name__)


@dataclass
class FileExtraction:
    """Entities and diagnostics for a single source file."""

    file_path: str
    classes: List[ClassEntity] = field(default_factory=list)
    interfaces: List[InterfaceEntity] = field(default_factory=list)
    parse_error_count: int = 0
    filtered_out: int = 0
    interface_names: Set[str] = field(default_factory=set)


class ExtractionStats:
    """Statistics for an extraction operation."""

    def __init__(self):
        self.files_discovered = 0
        self.files_processed = 0
        self.files_failed = 0
        self.classes_extracted = 0
        self.interfaces_extracted = 0
        self.declarations_filtered = 0
        self.parse_errors = 0
        self.failed_files: List[str] = []

    def record(self, extraction: FileExtraction) -> None:
        """Account for one successfully extracted file."""
        self.files_processed += 1
        self.classes_extracted += len(extraction.classes)
        self.interfaces_extracted += len(extraction.interfaces)
        self.declarations_filtered += extraction.filtered_out
        self.parse_errors += extraction.parse_error_count

    def record_failure(self, file_path: str) -> None:
        self.files_failed += 1
        self.failed_files.append(file_path)

    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to dictionary."""
        return {
            "files_discovered": self.files_discovered,
            "files_processed": self.files_processed,
            "files_failed": self.files_failed,
            "classes_extracted": self.classes_extracted,
            "interfaces_extracted": self.interfaces_extracted,
            "declarations_filtered": self.declarations_filtered,
            "parse_errors": self.parse_errors,
            "failed_files": list(self.failed_files),
        }

    def __str__(self) -> str:
        """String representation of stats."""
        return (
            f"ExtractionStats(processed={self.files_processed}, "
            f"failed={self.files_failed}, classes={self.classes_extracted}, "
            f"interfaces={self.interfaces_extracted}, "
            f"filtered={self.declarations_filtered}, parse_errors={self.parse_errors})"
        )


def resolve_search_directory(input_path: str) -> str:
    """Resolve the directory to search for C# sources.

    Args:
        input_path: A directory, or a .csproj/.sln file.

    Returns:
        The directory itself, or the directory containing the project file.

    Raises:
        InputNotFoundError: If the path does not exist.
        UnsupportedInputKindError: If the path is a file of another kind.
    """
    if not os.path.isdir(input_path) and not os.path.isfile(input_path):
        raise InputNotFoundError(input_path)

    if os.path.isdir(input_path):
        return os.path.abspath(input_path)

    ext = os.path.splitext(input_path)[1].lower()
    if ext not in PROJECT_EXTENSIONS:
        raise UnsupportedInputKindError(input_path)
    return os.path.dirname(os.path.abspath(input_path))


def discover_csharp_files(directory: str) -> List[str]:
    """Recursively discover all C# source files in a directory.

    Hidden directories and build output directories (bin, obj, ...) are
    skipped.

    Args:
        directory: Root directory to search.

    Returns:
        Sorted list of absolute paths to .cs files.
    """
    cs_files = []
    directory = os.path.abspath(directory)

    logger.debug("Discovering C# files in %s", directory)

    for root, dirs, files in os.walk(directory):
        dirs[:] = [d for d in dirs if not d.startswith('.') and d not in SKIPPED_DIRECTORIES]

        for file in files:
            ext = os.path.splitext(file)[1].lower()
            if ext in CSHARP_EXTENSIONS:
                cs_files.append(os.path.join(root, file))

    logger.info("Found %d C# files.", len(cs_files))
    return sorted(cs_files)


def extract_file(
    file_path: str,
    namespace_filter: Optional[NamespaceFilter] = None,
    reject_syntax_errors: bool = DEFAULT_REJECT_SYNTAX_ERRORS,
    resolve_interface_bases: bool = DEFAULT_RESOLVE_INTERFACE_BASES,
) -> FileExtraction:
    """Extract classes and interfaces from a single C# source file.

    Args:
        file_path: Path to the .cs file.
        namespace_filter: Include/exclude patterns; None lets everything through.
        reject_syntax_errors: Fail the file when tree-sitter reports syntax errors.
        resolve_interface_bases: Reclassify a first base entry naming an
            interface declared in the same file as implemented.

    Returns:
        The file's entities with parse diagnostics.

    Raises:
        FileParseError: If the file cannot be read or parsed.
    """
    namespace_filter = namespace_filter or NamespaceFilter()

    with file_scope(file_path):
        tree, error_count = parse_file(file_path, reject_syntax_errors=reject_syntax_errors)
        entities = extract_entities_from_tree(
            tree,
            file_path,
            namespace_filter,
            resolve_interface_bases=resolve_interface_bases,
        )

    return FileExtraction(
        file_path=file_path,
        classes=entities.classes,
        interfaces=entities.interfaces,
        parse_error_count=error_count,
        filtered_out=entities.filtered_out,
        interface_names=entities.interface_names,
    )


def _handle_failure(
    file_path: str,
    error: BaseException,
    stats: ExtractionStats,
    continue_on_error: bool,
) -> None:
    stats.record_failure(file_path)
    if isinstance(error, FileParseError):
        logger.error("Skipping file: %s", error)
    else:
        logger.error(
            "Unexpected error processing %s: %s",
            file_path,
            error,
            exc_info=(type(error), error, error.__traceback__),
        )
    if not continue_on_error:
        raise error


def iter_extract_files(
    files: Iterable[str],
    namespace_filter: Optional[NamespaceFilter] = None,
    continue_on_error: bool = DEFAULT_CONTINUE_ON_ERROR,
    reject_syntax_errors: bool = DEFAULT_REJECT_SYNTAX_ERRORS,
    stats: Optional[ExtractionStats] = None,
    resolve_interface_bases: bool = DEFAULT_RESOLVE_INTERFACE_BASES,
) -> Iterator[FileExtraction]:
    """Stream per-file extraction results in file order.

    Files that fail are logged and skipped unless ``continue_on_error`` is
    False, in which case the first failure is raised. Interface reclassification
    only sees the interfaces of the file being extracted.
    """
    stats = stats if stats is not None else ExtractionStats()

    for file_path in files:
        try:
            extraction = extract_file(
                file_path,
                namespace_filter,
                reject_syntax_errors,
                resolve_interface_bases,
            )
        except Exception as e:
            _handle_failure(file_path, e, stats, continue_on_error)
            continue
        stats.record(extraction)
        yield extraction


def _extract_parallel(
    files: Sequence[str],
    namespace_filter: NamespaceFilter,
    reject_syntax_errors: bool,
    resolve_interface_bases: bool,
    max_workers: int,
) -> List[Union[FileExtraction, BaseException]]:
    """Extract files on a thread pool, returning outcomes in input order."""
    outcomes: List[Union[FileExtraction, BaseException, None]] = [None] * len(files)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_index = {
            executor.submit(
                contextvars.copy_context().run,
                extract_file,
                file_path,
                namespace_filter,
                reject_syntax_errors,
                resolve_interface_bases,
            ): i
            for i, file_path in enumerate(files)
        }

        for future in as_completed(future_to_index):
            index = future_to_index[future]
            try:
                outcomes[index] = future.result()
            except Exception as e:
                outcomes[index] = e

    return outcomes


def extract_files(
    files: Sequence[str],
    include_patterns: Iterable[str] = (),
    exclude_patterns: Iterable[str] = (),
    continue_on_error: bool = DEFAULT_CONTINUE_ON_ERROR,
    max_workers: int = DEFAULT_MAX_WORKERS,
    reject_syntax_errors: bool = DEFAULT_REJECT_SYNTAX_ERRORS,
    resolve_interface_bases: bool = DEFAULT_RESOLVE_INTERFACE_BASES,
) -> Tuple[ExtractionResult, ExtractionStats]:
    """Extract and assemble the model for a list of C# files.

    Entities are ordered by position of their file in ``files``, then by
    source order within the file, whatever ``max_workers`` is.

    Args:
        files: Source file paths, in output order.
        include_patterns: Namespace patterns to include (empty includes all).
        exclude_patterns: Namespace patterns to exclude; exclusion wins.
        continue_on_error: If True, skip files that fail instead of raising.
        max_workers: Number of extraction threads; 1 extracts sequentially.
        reject_syntax_errors: Fail files whose tree contains syntax errors.
        resolve_interface_bases: After assembly, move a class's first base
            entry into ``implements`` when it names an interface declared in
            any of the files. False keeps the purely positional split.

    Returns:
        A tuple of (result, stats).
    """
    namespace_filter = NamespaceFilter.from_patterns(include_patterns, exclude_patterns)
    stats = ExtractionStats()
    stats.files_discovered = len(files)
    result = ExtractionResult()
    interface_names: Set[str] = set()

    if max_workers > 1 and len(files) > 1:
        logger.info("Extracting %d files with %d workers", len(files), max_workers)
        outcomes = _extract_parallel(
            files,
            namespace_filter,
            reject_syntax_errors,
            resolve_interface_bases,
            max_workers,
        )
        extractions = []
        for file_path, outcome in zip(files, outcomes):
            if isinstance(outcome, BaseException):
                _handle_failure(file_path, outcome, stats, continue_on_error)
                continue
            stats.record(outcome)
            extractions.append(outcome)
    else:
        extractions = iter_extract_files(
            files,
            namespace_filter,
            continue_on_error=continue_on_error,
            reject_syntax_errors=reject_syntax_errors,
            stats=stats,
            resolve_interface_bases=resolve_interface_bases,
        )

    for extraction in extractions:
        result.extend(extraction.classes, extraction.interfaces)
        interface_names.update(extraction.interface_names)

    if resolve_interface_bases and interface_names:
        result.classes = [reclassify_bases(entity, interface_names) for entity in result.classes]

    logger.info("Extraction complete: %s", stats)
    return result, stats


def extract_directory(
    directory: str,
    include_patterns: Iterable[str] = (),
    exclude_patterns: Iterable[str] = (),
    continue_on_error: bool = DEFAULT_CONTINUE_ON_ERROR,
    max_workers: int = DEFAULT_MAX_WORKERS,
    reject_syntax_errors: bool = DEFAULT_REJECT_SYNTAX_ERRORS,
    resolve_interface_bases: bool = DEFAULT_RESOLVE_INTERFACE_BASES,
) -> Tuple[ExtractionResult, ExtractionStats]:
    """Extract the model from every C# file under a directory tree.

    Raises:
        InputNotFoundError: If directory does not exist.

    Example:
        >>> result, stats = extract_directory("src/", include_patterns=["App.*"])
        >>> print(f"{stats.classes_extracted} classes from {stats.files_processed} files")
    """
    if not os.path.isdir(directory):
        raise InputNotFoundError(directory)

    files = discover_csharp_files(directory)
    if not files:
        logger.warning("No C# files found in %s", directory)

    return extract_files(
        files,
        include_patterns,
        exclude_patterns,
        continue_on_error=continue_on_error,
        max_workers=max_workers,
        reject_syntax_errors=reject_syntax_errors,
        resolve_interface_bases=resolve_interface_bases,
    )


def extract_input(
    input_path: str,
    include_patterns: Iterable[str] = (),
    exclude_patterns: Iterable[str] = (),
    continue_on_error: bool = DEFAULT_CONTINUE_ON_ERROR,
    max_workers: int = DEFAULT_MAX_WORKERS,
    reject_syntax_errors: bool = DEFAULT_REJECT_SYNTAX_ERRORS,
    resolve_interface_bases: bool = DEFAULT_RESOLVE_INTERFACE_BASES,
) -> Tuple[ExtractionResult, ExtractionStats]:
    """Extract the model for a directory, .csproj or .sln input.

    Raises:
        InputNotFoundError: If the input path does not exist.
        UnsupportedInputKindError: If the input is an unsupported file.
    """
    search_dir = resolve_search_directory(input_path)
    logger.info("Searching %s", search_dir)
    return extract_directory(
        search_dir,
        include_patterns,
        exclude_patterns,
        continue_on_error=continue_on_error,
        max_workers=max_workers,
        reject_syntax_errors=reject_syntax_errors,
        resolve_interface_bases=resolve_interface_bases,
    )
