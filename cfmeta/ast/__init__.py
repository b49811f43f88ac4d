"""
AST-Based Custom Function Analysis

Tree-sitter based extraction of custom function metadata from TypeScript
and JavaScript sources.
"""

from cfmeta.ast.models import (
    Accepted,
    ExtractionResult,
    Failed,
    FunctionMetadata,
    FunctionOptions,
    ParameterMetadata,
    ResultMetadata,
    Skipped,
)
from cfmeta.ast.parser import ASTParser, ParsedSource, get_parser
from cfmeta.ast.extractor import CustomFunctionExtractor, extract_file, extract_source

__all__ = [
    # Models
    "FunctionMetadata",
    "ParameterMetadata",
    "ResultMetadata",
    "FunctionOptions",
    "ExtractionResult",
    "Accepted",
    "Skipped",
    "Failed",
    # Parser
    "ASTParser",
    "ParsedSource",
    "get_parser",
    # Extraction
    "CustomFunctionExtractor",
    "extract_file",
    "extract_source",
]
