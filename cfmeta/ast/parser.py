"""
Tree-sitter Parser Wrapper

Handles language detection and tree-sitter parsing of TypeScript and
JavaScript sources.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import tree_sitter_typescript
from tree_sitter import Language, Parser, Tree

from cfmeta.configs.logging import get_logger
from cfmeta.exceptions import ParseError, SourceReadError

logger = get_logger("parser")

DEFAULT_LANGUAGE = "typescript"

# Supported languages and their tree-sitter grammar getters
LANGUAGE_MODULES = {
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
}

# File extension to language mapping
EXTENSION_TO_LANGUAGE = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".js": "typescript",  # Use TS parser for JS (superset)
    ".mjs": "typescript",
    ".cjs": "typescript",
    ".jsx": "tsx",
}


@dataclass
class ParsedSource:
    """A parsed source file."""

    path: str
    source: str
    language: str
    tree: Tree


class ASTParser:
    """
    Tree-sitter based parser for TypeScript and JavaScript.

    Lazily initializes parsers for each language on first use.
    """

    def __init__(self):
        self._parsers: dict[str, Parser] = {}
        self._languages: dict[str, Language] = {}

    def _get_language(self, lang_name: str) -> Language:
        """Get or create Language object for a language."""
        if lang_name in self._languages:
            return self._languages[lang_name]

        getter = LANGUAGE_MODULES.get(lang_name)
        if getter is None:
            raise ParseError(f"Unsupported language: {lang_name}")

        try:
            language = Language(getter())
        except Exception as e:
            raise ParseError(
                f"Failed to load the {lang_name} grammar", {"error": str(e)}
            ) from e
        self._languages[lang_name] = language
        return language

    def _get_parser(self, lang_name: str) -> Parser:
        """Get or create Parser for a language."""
        if lang_name in self._parsers:
            return self._parsers[lang_name]

        parser = Parser(self._get_language(lang_name))
        self._parsers[lang_name] = parser
        return parser

    def detect_language(self, file_path: str) -> Optional[str]:
        """
        Detect language from file extension.

        Args:
            file_path: Path to the source file

        Returns:
            Language name or None if the extension is not recognized
        """
        ext = Path(file_path).suffix.lower()
        return EXTENSION_TO_LANGUAGE.get(ext)

    def parse(self, source: str, language: str = DEFAULT_LANGUAGE) -> Tree:
        """
        Parse source code into an AST.

        Syntax errors do not fail the parse; tree-sitter returns a tree with
        ERROR nodes in the affected places.

        Args:
            source: Source code as string
            language: Language name (typescript, tsx)

        Returns:
            Tree-sitter Tree
        """
        parser = self._get_parser(language)
        return parser.parse(source.encode("utf-8"))

    def parse_file(self, file_path: str) -> ParsedSource:
        """
        Read and parse a file.

        Unrecognized extensions are parsed with the TypeScript grammar.

        Args:
            file_path: Path to the source file

        Returns:
            ParsedSource with the tree and the decoded source

        Raises:
            SourceReadError: The file could not be read or decoded
        """
        language = self.detect_language(file_path)
        if language is None:
            logger.debug(f"Unknown extension for {file_path}, parsing as {DEFAULT_LANGUAGE}")
            language = DEFAULT_LANGUAGE

        try:
            content = Path(file_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(f"Failed to read file {file_path}", {"error": str(e)}) from e

        tree = self.parse(content, language)
        if tree.root_node.has_error:
            logger.warning(f"{file_path} has syntax errors; affected declarations may be missed")

        return ParsedSource(path=file_path, source=content, language=language, tree=tree)


# Global parser instance (lazy singleton)
_parser: Optional[ASTParser] = None


def get_parser() -> ASTParser:
    """Get the global ASTParser instance."""
    global _parser
    if _parser is None:
        _parser = ASTParser()
    return _parser
