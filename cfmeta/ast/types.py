"""
Signature Analysis

Maps TypeScript type annotations to the semantic type and dimensionality
the host application understands.

Tree-sitter type nodes are first reduced to a small closed set of shapes:

    Primitive(kind)          number, string, boolean, any, void, ...
    Reference(name, args)    Foo, Array<T>, Promise<T>, CustomFunctions.StreamingHandler<T>
    ArrayOf(element)         T[]
    Other(kind)              unions, literals, object types, tuples, ...

and resolved with plain pattern matching over those shapes. Promise and the
streaming handlers are recognized views over Reference, only meaningful in
result position.
"""

from dataclasses import dataclass
from typing import Optional, Union

from tree_sitter import Node

from cfmeta.ast.models import MATRIX, SCALAR

ARRAY = "Array"
PROMISE = "Promise"
# The second name is the pre-namespace spelling still found in older projects
STREAMING_HANDLERS = ("CustomFunctions.StreamingHandler", "IStreamingCustomFunctionHandler")

TYPE_MAPPINGS = {
    "number": "number",
    "string": "string",
    "boolean": "boolean",
}


# =============================================================================
# Shapes
# =============================================================================


@dataclass(frozen=True)
class Primitive:
    kind: str
    text: str


@dataclass(frozen=True)
class Reference:
    name: str
    arguments: tuple["TypeShape", ...]
    text: str


@dataclass(frozen=True)
class ArrayOf:
    element: "TypeShape"
    text: str


@dataclass(frozen=True)
class Other:
    kind: str  # tree-sitter node type
    text: str


TypeShape = Union[Primitive, Reference, ArrayOf, Other]


def node_text(node: Node) -> str:
    """Extract the source text of a node."""
    return node.text.decode("utf-8") if node.text is not None else ""


def _type_children(node: Node) -> list[Node]:
    return [child for child in node.named_children if child.type != "comment"]


def shape_from_node(node: Optional[Node]) -> Optional[TypeShape]:
    """
    Reduce a tree-sitter type node to a TypeShape.

    Args:
        node: A type node or a type_annotation wrapper; None when the
            declaration has no annotation

    Returns:
        TypeShape, or None for a missing annotation
    """
    if node is None:
        return None

    if node.type == "type_annotation":
        children = _type_children(node)
        if not children:
            return None
        node = children[0]

    text = node_text(node)

    if node.type == "predefined_type":
        return Primitive(kind=text, text=text)

    if node.type in ("type_identifier", "nested_type_identifier", "identifier"):
        return Reference(name="".join(text.split()), arguments=(), text=text)

    if node.type == "generic_type":
        name_node = node.child_by_field_name("name")
        args_node = node.child_by_field_name("type_arguments")
        arguments: tuple = ()
        if args_node is not None:
            arguments = tuple(shape_from_node(c) for c in _type_children(args_node))
        name = "".join(node_text(name_node).split()) if name_node is not None else text
        return Reference(name=name, arguments=arguments, text=text)

    if node.type == "array_type":
        children = _type_children(node)
        element = shape_from_node(children[0]) if children else None
        if element is None:
            return Other(kind=node.type, text=text)
        return ArrayOf(element=element, text=text)

    return Other(kind=node.type, text=text)


# =============================================================================
# Resolution
# =============================================================================


@dataclass(frozen=True)
class ResolvedType:
    """Semantic type and dimensionality; type is None when resolution failed."""

    type: Optional[str]
    dimensionality: str = SCALAR
    errors: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


def is_array_reference(shape: Optional[TypeShape]) -> bool:
    """True for Array<T> with exactly one type argument."""
    return (
        isinstance(shape, Reference)
        and shape.name == ARRAY
        and len(shape.arguments) == 1
    )


def unwrap_async(shape: Optional[TypeShape]) -> Optional[TypeShape]:
    """Return T for Promise<T>; None for anything else, including Promise<A, B>."""
    if (
        isinstance(shape, Reference)
        and shape.name == PROMISE
        and len(shape.arguments) == 1
    ):
        return shape.arguments[0]
    return None


def is_streaming_handler(shape: Optional[TypeShape]) -> bool:
    """True when the shape names one of the streaming handler types."""
    return isinstance(shape, Reference) and shape.name in STREAMING_HANDLERS


def resolve_type(shape: Optional[TypeShape]) -> ResolvedType:
    """
    Map a parameter or result shape to (type, dimensionality).

    Rules, in order:
    1. No annotation is "any"/scalar.
    2. A reference other than Array is invalid.
    3. Array<T> is matrix of T; Array<Array<T>> is also matrix of T.
    4. T[][] is matrix of T; T[] alone is invalid.
    5. The element kind must be number, string or boolean.

    Dimensionality is matrix for any reference or array shape, even when
    an error is reported.
    """
    if shape is None:
        return ResolvedType("any", SCALAR)

    is_matrix = isinstance(shape, (Reference, ArrayOf))
    dimensionality = MATRIX if is_matrix else SCALAR
    kind: Optional[TypeShape] = shape

    if isinstance(shape, Reference):
        if shape.name != ARRAY:
            return ResolvedType(None, dimensionality, (f"Invalid type: {shape.name}",))
        if is_array_reference(shape):
            inner = shape.arguments[0]
            if isinstance(inner, Reference):
                if not is_array_reference(inner):
                    return ResolvedType(
                        None, dimensionality, (f"Invalid type array: {inner.text}",)
                    )
                kind = inner.arguments[0]
            else:
                kind = inner

    elif isinstance(shape, ArrayOf):
        inner = shape.element
        if not isinstance(inner, ArrayOf):
            return ResolvedType(
                None, dimensionality, (f"Invalid array type node: {inner.text}",)
            )
        # A third level (T[][][]) leaves an ArrayOf here and fails the mapping
        kind = inner.element

    mapped = TYPE_MAPPINGS.get(kind.kind) if isinstance(kind, Primitive) else None
    if mapped is None:
        return ResolvedType(None, dimensionality, ("Type doesn't match mappings",))
    return ResolvedType(mapped, dimensionality)


def resolve_result(
    return_shape: Optional[TypeShape],
    handler: Optional[Reference] = None,
) -> ResolvedType:
    """
    Resolve the result of a function.

    Args:
        return_shape: The declared return type, None if not annotated
        handler: The streaming handler reference when the last parameter
            is one; the result then comes from its type argument

    Returns:
        ResolvedType for the result. Streaming contract violations are
        reported as errors.
    """
    if handler is not None:
        if len(handler.arguments) != 1:
            return ResolvedType(
                None,
                SCALAR,
                (
                    f"The '{handler.name}' needs to be passed in a single result type "
                    f"(e.g., '{handler.name}<number>')",
                ),
            )
        if return_shape is not None and return_shape.text.strip() != "void":
            return ResolvedType(
                None,
                SCALAR,
                (
                    "A streaming function should not have a return type. Instead, its "
                    f"type should be based purely on what's inside \"{handler.name}<T>\".",
                ),
            )
        return resolve_type(handler.arguments[0])

    inner = unwrap_async(return_shape)
    if inner is not None:
        return resolve_type(inner)
    return resolve_type(return_shape)
