"""
Tests for the custom function extractor.

Runs the tree walker, tag classifier and signature analysis together on
real TypeScript and JavaScript sources.
"""

import pytest

from cfmeta.ast.extractor import CustomFunctionExtractor, extract_file, extract_source
from cfmeta.ast.models import Accepted, Failed, Skipped
from cfmeta.ast.parser import get_parser
from cfmeta.exceptions import SourceReadError


class TestEndToEnd:
    def test_typed_and_untyped_functions(self):
        source = """
/** @customfunction */
function typed(x: number): number {
    return x;
}

/** @customfunction */
function untyped(x) {
    return x;
}
"""
        result = extract_source(source)

        assert result.ok
        assert [f.name for f in result.functions] == ["typed", "untyped"]

        typed, untyped = result.functions
        assert typed.parameters[0].type == "number"
        assert typed.parameters[0].dimensionality == "scalar"
        assert typed.result.type == "number"
        assert typed.result.dimensionality == "scalar"

        assert untyped.parameters[0].type == "any"
        assert untyped.parameters[0].dimensionality == "scalar"
        assert untyped.result.type == "any"
        assert untyped.result.dimensionality == "scalar"

    def test_full_record(self):
        source = """
/**
 * Adds two numbers.
 * @customfunction
 * @helpurl https://example.com/add
 * @param first - First number
 * @param second Second number
 */
function add(first: number, second: Array<number>): Promise<number> {
    return Promise.resolve(first);
}
"""
        [func] = extract_source(source).functions
        assert func.to_dict() == {
            "name": "add",
            "id": "add",
            "helpurl": "https://example.com/add",
            "description": "Adds two numbers.",
            "parameters": [
                {"name": "first", "description": "First number", "type": "number", "dimensionality": "scalar"},
                {"name": "second", "description": "Second number", "type": "number", "dimensionality": "matrix"},
            ],
            "result": {"type": "number", "dimensionality": "scalar"},
            "options": {"sync": False, "cancelable": False, "stream": False},
        }

    def test_description_omitted_when_absent(self):
        [func] = extract_source("/** @customfunction */\nfunction f(): string { return ''; }").functions
        assert func.description is None
        assert "description" not in func.to_dict()

    def test_undocumented_parameter_has_empty_description(self):
        source = """
/**
 * @customfunction
 * @param a The a
 */
function f(a: number, b: number): number { return a + b; }
"""
        [func] = extract_source(source).functions
        assert [p.description for p in func.parameters] == ["The a", ""]


class TestTreeWalker:
    """Test which declarations are visited."""

    def test_source_order_preserved(self):
        source = """
/** @customfunction */
function zeta(): number { return 1; }
/** @customfunction */
function alpha(): number { return 1; }
/** @customfunction */
function mid(): number { return 1; }
"""
        result = extract_source(source)
        assert [f.name for f in result.functions] == ["zeta", "alpha", "mid"]

    def test_exported_function_included(self):
        source = """
/** @customfunction */
export function exported(x: number): number { return x; }
"""
        result = extract_source(source)
        assert [f.name for f in result.functions] == ["exported"]

    def test_nested_function_ignored(self):
        source = """
/** @customfunction */
function outer(): number {
    /** @customfunction */
    function inner(): number { return 1; }
    return inner();
}
"""
        result = extract_source(source)
        assert [f.name for f in result.functions] == ["outer"]
        assert result.skipped == []

    def test_namespace_function_ignored(self):
        source = """
namespace Tools {
    /** @customfunction */
    export function hidden(): number { return 1; }
}
"""
        result = extract_source(source)
        assert result.functions == []
        assert result.skipped == []

    def test_class_methods_and_arrow_functions_ignored(self):
        source = """
class Calc {
    /** @customfunction */
    add(a: number): number { return a; }
}
/** @customfunction */
const double = (x: number): number => x * 2;
"""
        result = extract_source(source)
        assert result.functions == []
        assert result.skipped == []

    def test_deeply_nested_expression(self):
        body = " + ".join(["1"] * 3000)
        source = f"/** @customfunction */\nfunction deep(): number {{ return {body}; }}\n"
        result = extract_source(source)
        assert [f.name for f in result.functions] == ["deep"]
        assert result.errors == []

    def test_walk_tree_document_order(self):
        tree = get_parser().parse("function a() { function b() {} }\nfunction c() {}")
        nodes = CustomFunctionExtractor().walk_tree(tree.root_node, ("function_declaration",))
        assert [n.child_by_field_name("name").text for n in nodes] == [b"a", b"b", b"c"]

    def test_overload_signature_carries_doc(self):
        source = """
/**
 * Doubles a number.
 * @customfunction
 */
function twice(x: number): number;
function twice(x: any): any { return x * 2; }
"""
        result = extract_source(source)
        [func] = result.functions
        assert func.name == "twice"
        assert func.parameters[0].type == "number"
        assert func.result.type == "number"
        assert func.result.dimensionality == "scalar"
        assert result.skipped == ["twice"]
        assert result.errors == []

    def test_ambient_declaration(self):
        source = """
/** @customfunction */
declare function host(x: number): number;
declare function untagged(): void;
"""
        result = extract_source(source)
        assert [f.name for f in result.functions] == ["host"]
        assert result.skipped == ["untagged"]

    def test_ambient_module_function_ignored(self):
        source = """
declare module "tools" {
    /** @customfunction */
    function hidden(): number;
}
"""
        result = extract_source(source)
        assert result.functions == []
        assert result.skipped == []


class TestSkipping:
    def test_untagged_function_skipped(self):
        source = """
/** Just a helper. */
function helper(x: number): number { return x; }

// @customfunction in a line comment does not count
function lineComment(): number { return 1; }

function bare(): number { return 1; }
"""
        result = extract_source(source)
        assert result.ok
        assert result.functions == []
        assert result.skipped == ["helper", "lineComment", "bare"]

    def test_skipped_function_with_bad_types_is_not_an_error(self):
        result = extract_source("function helper(x: Date): Map<string, number> { return null; }")
        assert result.ok
        assert result.skipped == ["helper"]

    def test_doc_comment_belongs_to_next_declaration_only(self):
        source = """
/** @customfunction */
function first(): number { return 1; }
function second(): number { return 2; }
"""
        result = extract_source(source)
        assert [f.name for f in result.functions] == ["first"]
        assert result.skipped == ["second"]


class TestErrors:
    def test_single_level_array_is_error(self):
        source = """
/** @customfunction */
function f(values: number[]): number { return 0; }
"""
        result = extract_source(source)
        assert not result.ok
        assert result.functions == []
        assert result.errors == ["Invalid array type node: number"]

    def test_errors_collected_in_order(self):
        source = """
/** @customfunction */
function f(a: Date, b: number[]): boolean[] { return []; }

/** @customfunction */
function g(c: any): number { return 1; }
"""
        result = extract_source(source)
        assert result.errors == [
            "Invalid type: Date",
            "Invalid array type node: number",
            "Invalid array type node: boolean",
            "Type doesn't match mappings",
        ]

    def test_valid_functions_still_listed_alongside_errors(self):
        source = """
/** @customfunction */
function good(x: number): number { return x; }

/** @customfunction */
function bad(x: number): Promise<number, string> { return null; }
"""
        result = extract_source(source)
        assert [f.name for f in result.functions] == ["good"]
        assert result.errors == ["Invalid type: Promise"]
        assert not result.ok


class TestStreaming:
    def test_streaming_function(self):
        source = """
/**
 * @customfunction
 * @param amount How much to add
 */
function increment(amount: number, handler: CustomFunctions.StreamingHandler<number>): void {
}
"""
        [func] = extract_source(source).functions
        assert [p.name for p in func.parameters] == ["amount"]
        assert func.result.type == "number"
        assert func.result.dimensionality == "scalar"
        assert func.options.stream
        assert func.options.cancelable
        assert not func.options.synchronous

    def test_legacy_handler_name(self):
        source = """
/** @customfunction */
function ticks(handler: IStreamingCustomFunctionHandler<string[][]>) {
}
"""
        [func] = extract_source(source).functions
        assert func.parameters == ()
        assert func.result.type == "string"
        assert func.result.dimensionality == "matrix"
        assert func.options.stream

    def test_handler_with_two_arguments_is_error(self):
        source = """
/** @customfunction */
function f(handler: CustomFunctions.StreamingHandler<number, string>): void {}
"""
        result = extract_source(source)
        assert result.functions == []
        assert len(result.errors) == 1
        assert "single result type" in result.errors[0]

    def test_handler_without_argument_is_error(self):
        source = """
/** @customfunction */
function f(handler: CustomFunctions.StreamingHandler): void {}
"""
        result = extract_source(source)
        assert result.functions == []
        assert len(result.errors) == 1

    def test_streaming_with_return_type_is_error(self):
        source = """
/** @customfunction */
function f(handler: CustomFunctions.StreamingHandler<number>): number { return 1; }
"""
        result = extract_source(source)
        assert result.functions == []
        assert "should not have a return type" in result.errors[0]

    def test_handler_not_last_is_regular_parameter(self):
        source = """
/** @customfunction */
function f(handler: CustomFunctions.StreamingHandler<number>, x: number): number { return x; }
"""
        result = extract_source(source)
        assert result.errors == ["Invalid type: CustomFunctions.StreamingHandler"]


class TestAnalyzeDeclaration:
    """Test the per-declaration outcome directly."""

    def _outcome(self, source: str):
        tree = get_parser().parse(source, "typescript")
        extractor = CustomFunctionExtractor()
        [node] = extractor.walk_tree(tree.root_node, ("function_declaration",))
        return extractor.analyze_declaration(node)

    def test_accepted(self):
        outcome = self._outcome("/** @customfunction */\nfunction f(): number { return 1; }")
        assert isinstance(outcome, Accepted)
        assert outcome.metadata.name == "f"

    def test_skipped(self):
        outcome = self._outcome("function f(): number { return 1; }")
        assert outcome == Skipped("f")

    def test_failed(self):
        outcome = self._outcome("/** @customfunction */\nfunction f(x: string[]): number { return 1; }")
        assert outcome == Failed("f", ("Invalid array type node: string",))


class TestExtractFile:
    def test_typescript_file(self, sample_ts_file):
        result = extract_file(str(sample_ts_file))
        assert result.ok
        assert result.source_path == str(sample_ts_file)
        assert [f.name for f in result.functions] == ["add", "increment"]
        assert result.skipped == ["helper"]

        add, increment = result.functions
        assert add.help_url == "https://example.com/help/add"
        assert add.description == "Adds two numbers."
        assert increment.options.stream
        assert [p.name for p in increment.parameters] == ["incrementBy"]

    def test_javascript_file(self, sample_js_file):
        [func] = extract_file(str(sample_js_file)).functions
        assert func.name == "echo"
        assert func.parameters[0].type == "any"
        assert func.parameters[0].description == "Anything"
        assert func.result.type == "any"

    def test_missing_file(self, temp_dir):
        with pytest.raises(SourceReadError):
            extract_file(str(temp_dir / "missing.ts"))
