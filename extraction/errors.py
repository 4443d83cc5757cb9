"""
Error kinds raised by the extraction engine.

Input errors are fatal and abort a run before any file is read. File parse
errors are recoverable: the orchestrator logs them and moves on to the next
file. Documentation markup problems never surface as exceptions.
"""

from typing import Optional


class ArchLensError(Exception):
    """Base class for extraction errors."""


class InputNotFoundError(ArchLensError, FileNotFoundError):
    """Raised when the input path does not exist."""

    def __init__(self, input_path: str):
        self.input_path = input_path
        super().__init__(f"Input path not found: {input_path}")


class UnsupportedInputKindError(ArchLensError, ValueError):
    """Raised when the input file is not a directory, .csproj or .sln."""

    def __init__(self, input_path: str):
        self.input_path = input_path
        super().__init__(
            f"Input must be a directory, .csproj, or .sln file: {input_path}"
        )


class FileParseError(ArchLensError):
    """Raised when a single source file cannot be turned into a syntax tree.

    Attributes:
        file_path: Path of the offending file.
        reason: Short human readable cause.
    """

    def __init__(self, file_path: str, reason: str, cause: Optional[BaseException] = None):
        self.file_path = file_path
        self.reason = reason
        self.cause = cause
        super().__init__(f"Cannot parse {file_path}: {reason}")
