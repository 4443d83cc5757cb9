"""
Configuration constants for C# structural extraction.

Defines the tree-sitter node type strings used for entity extraction.
"""

from typing import Set

# Declarations that become entities
CLASS_NODE: str = "class_declaration"
INTERFACE_NODE: str = "interface_declaration"

# Namespace declaration node types (block and file-scoped forms)
NAMESPACE_NODES: Set[str] = {
    "namespace_declaration",
    "file_scoped_namespace_declaration",
}

# Member node types inspected by the member analyzer
FIELD_NODE: str = "field_declaration"
PROPERTY_NODE: str = "property_declaration"
METHOD_NODE: str = "method_declaration"
CONSTRUCTOR_NODE: str = "constructor_declaration"

# Sub-nodes of members
VARIABLE_DECLARATION_NODE: str = "variable_declaration"
VARIABLE_DECLARATOR_NODE: str = "variable_declarator"
PARAMETER_LIST_NODE: str = "parameter_list"
PARAMETER_NODES: Set[str] = {"parameter", "parameter_array"}
BASE_LIST_NODE: str = "base_list"
PRIMARY_CONSTRUCTOR_BASE_NODE: str = "primary_constructor_base_type"
DECLARATION_LIST_NODE: str = "declaration_list"

# Base-list children that are not base types
BASE_LIST_SKIP_TYPES: Set[str] = {
    "argument_list",
    "comment",
}

# Every declaration that can carry leading documentation trivia
MEMBER_DECLARATION_TYPES: Set[str] = {
    "namespace_declaration",
    "file_scoped_namespace_declaration",
    "class_declaration",
    "interface_declaration",
    "struct_declaration",
    "record_declaration",
    "record_struct_declaration",
    "enum_declaration",
    "enum_member_declaration",
    "delegate_declaration",
    "method_declaration",
    "constructor_declaration",
    "destructor_declaration",
    "property_declaration",
    "indexer_declaration",
    "field_declaration",
    "event_declaration",
    "event_field_declaration",
    "operator_declaration",
    "conversion_operator_declaration",
}

# Conditional compilation nodes; the grammar wraps the guarded code in them
PREPROC_IF_NODE: str = "preproc_if"
PREPROC_ELSE_NODE: str = "preproc_else"
PREPROC_ALTERNATIVE_NODES: Set[str] = {
    "preproc_elif",
    "preproc_else",
}

# Wrapper node older grammars emit for `params T[] xs`; newer ones inline it
PARAMETER_ARRAY_NODE: str = "parameter_array"

# Comment node type (includes //, ///, /* */, /** */)
COMMENT_NODE: str = "comment"

# Single-line documentation comment prefix; "////" is an ordinary comment
SINGLE_LINE_DOC_PREFIX: str = "///"

# Multi-line documentation comment delimiters; "/**/" is an ordinary comment
MULTI_LINE_DOC_PREFIX: str = "/**"
MULTI_LINE_DOC_SUFFIX: str = "*/"

# XML element holding the plain-text summary
SUMMARY_ELEMENT: str = "summary"

# Synthetic root wrapped around documentation markup before parsing
DOC_ROOT_ELEMENT: str = "doc"

# C# source file extensions
CSHARP_EXTENSIONS: Set[str] = {
    ".cs",
}

# Project files whose containing directory is searched
PROJECT_EXTENSIONS: Set[str] = {
    ".csproj",
    ".sln",
}

# Directories never searched for sources
SKIPPED_DIRECTORIES: Set[str] = {
    "bin",
    "obj",
    "packages",
    "node_modules",
    "TestResults",
    "artifacts",
}

# Extraction policy defaults
DEFAULT_CONTINUE_ON_ERROR: bool = True
DEFAULT_REJECT_SYNTAX_ERRORS: bool = False
DEFAULT_MAX_WORKERS: int = 1
DEFAULT_RESOLVE_INTERFACE_BASES: bool = True
