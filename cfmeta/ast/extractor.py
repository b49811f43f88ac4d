"""
Custom Function Extractor

Walks a parsed TypeScript/JavaScript tree and turns every top-level function
tagged @customfunction into FunctionMetadata. Untagged functions are
reported as skipped; unsupported type shapes are reported as errors.
"""

from typing import Optional

from tree_sitter import Node, Tree

from cfmeta.ast.jsdoc import classify
from cfmeta.ast.models import (
    Accepted,
    ExtractionResult,
    Failed,
    FunctionMetadata,
    FunctionOptions,
    Outcome,
    ParameterMetadata,
    ResultMetadata,
    Skipped,
)
from cfmeta.ast.parser import get_parser
from cfmeta.ast.types import (
    Reference,
    TypeShape,
    is_streaming_handler,
    node_text,
    resolve_result,
    resolve_type,
    shape_from_node,
)
from cfmeta.configs.logging import get_logger

logger = get_logger("extractor")

# function_signature covers overload signatures and `declare function`
FUNCTION_DECLARATIONS = (
    "function_declaration",
    "generator_function_declaration",
    "function_signature",
)
# Statements that may wrap a top-level declaration
DECLARATION_WRAPPERS = ("export_statement", "ambient_declaration")
PARAMETER_NODES = ("required_parameter", "optional_parameter")


class CustomFunctionExtractor:
    """Extracts custom function metadata from a tree-sitter tree."""

    def extract(self, tree: Tree, source_path: str = "<source>") -> ExtractionResult:
        """
        Extract metadata for every top-level function in the tree.

        Args:
            tree: Parsed AST tree
            source_path: Name used in log messages and the result

        Returns:
            ExtractionResult with functions, skipped names and errors in
            source order
        """
        result = ExtractionResult(source_path=source_path)
        logger.debug(f"Extracting custom functions from {source_path}")

        for node in self.walk_tree(tree.root_node, FUNCTION_DECLARATIONS):
            if not self.is_top_level(node):
                continue
            outcome = self.analyze_declaration(node)
            if outcome is not None:
                result.add(outcome)

        logger.debug(
            f"{source_path}: {len(result.functions)} functions, "
            f"{len(result.skipped)} skipped, {len(result.errors)} errors"
        )
        return result

    def analyze_declaration(self, node: Node) -> Optional[Outcome]:
        """
        Build the outcome for a single function declaration.

        Returns:
            Accepted, Skipped or Failed; None for an anonymous declaration
        """
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None
        name = node_text(name_node)

        doc = classify(self.doc_comments(node))
        if not doc.is_custom_function:
            logger.debug(f"Skipping {name}: no @customfunction tag")
            return Skipped(name)

        params = self.extract_parameters(node)
        handler: Optional[Reference] = None
        last_shape = params[-1][1] if params else None
        if isinstance(last_shape, Reference) and is_streaming_handler(last_shape):
            handler = last_shape
            params = params[:-1]

        errors: list[str] = []
        parameters = []
        for param_name, shape in params:
            resolved = resolve_type(shape)
            if shape is None:
                logger.debug(f"{name}: parameter {param_name} has no type, using any")
            errors.extend(resolved.errors)
            parameters.append(
                ParameterMetadata(
                    name=param_name,
                    type=resolved.type,
                    dimensionality=resolved.dimensionality,
                    description=doc.param_descriptions.get(param_name, ""),
                )
            )

        return_shape = shape_from_node(node.child_by_field_name("return_type"))
        if return_shape is None and handler is None:
            logger.debug(f"{name}: no return type specified, using any")
        result = resolve_result(return_shape, handler)
        errors.extend(result.errors)

        if errors:
            for error in errors:
                logger.debug(f"{name}: {error}")
            return Failed(name, tuple(errors))

        is_streaming = handler is not None
        return Accepted(
            FunctionMetadata(
                name=name,
                help_url=doc.help_url,
                description=doc.description,
                parameters=tuple(parameters),
                result=ResultMetadata(type=result.type, dimensionality=result.dimensionality),
                options=FunctionOptions(cancelable=is_streaming, stream=is_streaming),
            )
        )

    def extract_parameters(self, node: Node) -> list[tuple[str, Optional[TypeShape]]]:
        """Extract (name, type shape) pairs in declaration order."""
        params_node = node.child_by_field_name("parameters")
        if params_node is None:
            return []

        params = []
        for child in params_node.named_children:
            if child.type not in PARAMETER_NODES:
                continue
            pattern = child.child_by_field_name("pattern")
            if pattern is None:
                continue
            if pattern.type == "rest_pattern" and pattern.named_children:
                pattern = pattern.named_children[0]
            params.append(
                (node_text(pattern), shape_from_node(child.child_by_field_name("type")))
            )
        return params

    def doc_comments(self, node: Node) -> list[str]:
        """
        Collect the comments directly preceding a declaration.

        For exported or ambient functions the comments precede the outermost
        wrapping statement.

        Returns:
            Comment texts in source order
        """
        anchor = self.statement_of(node)

        comments = []
        sibling = anchor.prev_sibling
        while sibling is not None and sibling.type == "comment":
            comments.append(node_text(sibling))
            sibling = sibling.prev_sibling
        comments.reverse()
        return comments

    # Helper methods for AST traversal

    def statement_of(self, node: Node) -> Node:
        """Climb from a declaration through its export/declare wrappers."""
        while node.parent is not None and node.parent.type in DECLARATION_WRAPPERS:
            node = node.parent
        return node

    def is_top_level(self, node: Node) -> bool:
        """Check that a declaration sits directly in the program (optionally exported or declared)."""
        parent = self.statement_of(node).parent
        return parent is not None and parent.type == "program"

    def walk_tree(self, node: Node, type_names: tuple[str, ...]) -> list[Node]:
        """
        Walk the tree depth-first and find all nodes of the given types.

        Uses an explicit stack, so arbitrarily deep trees do not hit the
        interpreter's recursion limit.

        Args:
            node: Starting node
            type_names: Node types to find

        Returns:
            Matching nodes in document order
        """
        results = []
        stack = [node]
        while stack:
            current = stack.pop()
            if current.type in type_names:
                results.append(current)
            stack.extend(reversed(current.children))
        return results


def extract_file(file_path: str) -> ExtractionResult:
    """
    Parse a source file and extract its custom function metadata.

    Raises:
        SourceReadError: The file could not be read
    """
    parsed = get_parser().parse_file(file_path)
    return CustomFunctionExtractor().extract(parsed.tree, source_path=parsed.path)


def extract_source(source: str, language: str = "typescript") -> ExtractionResult:
    """Extract custom function metadata from source text."""
    tree = get_parser().parse(source, language)
    return CustomFunctionExtractor().extract(tree)
