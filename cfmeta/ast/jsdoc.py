"""
JSDoc Tag Classification

Parses the fixed JSDoc tag grammar custom functions are annotated with and
reduces a declaration's doc blocks to a DocTags record. Works on raw comment
text so it can be tested without a syntax tree.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

CUSTOM_FUNCTION_TAG = "customfunction"  # Matched case-insensitively
HELPURL_TAG = "helpurl"  # Matched case-insensitively
PARAM_TAGS = ("param", "arg", "argument")

_TAG_RE = re.compile(r"^@(\w+)\s*(.*)$")
_NAME_RE = re.compile(r"[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*")


@dataclass
class JSDocTag:
    """A single @tag and the text that follows it."""

    name: str
    text: str = ""


@dataclass
class JSDocBlock:
    """One parsed /** ... */ comment."""

    description: str = ""
    tags: list[JSDocTag] = field(default_factory=list)


@dataclass
class DocTags:
    """What the classifier needs to know about a declaration."""

    is_custom_function: bool = False
    help_url: str = ""
    param_descriptions: dict[str, str] = field(default_factory=dict)
    description: Optional[str] = None


def is_jsdoc_comment(text: str) -> bool:
    """Check whether a comment is a /** doc comment */ (not /**/)."""
    return text.startswith("/**") and not text.startswith("/**/")


def _comment_lines(text: str) -> list[str]:
    """Strip the comment delimiters and the leading '*' margin of each line."""
    body = text[3:]
    if body.endswith("*/"):
        body = body[:-2]

    lines = []
    for line in body.splitlines():
        line = line.strip()
        if line.startswith("*"):
            line = line[1:]
        lines.append(line.strip())
    return lines


def parse_jsdoc(text: str) -> JSDocBlock:
    """
    Parse a JSDoc comment into its description and tags.

    A tag starts with '@name' at the beginning of a line and its text runs
    until the next tag. Everything before the first tag is the description.

    Args:
        text: Full comment text including the /** */ delimiters

    Returns:
        JSDocBlock with description and tags in source order
    """
    description_lines: list[str] = []
    tag_parts: list[tuple[str, list[str]]] = []

    for line in _comment_lines(text):
        match = _TAG_RE.match(line)
        if match:
            tag_parts.append((match.group(1), [match.group(2)]))
        elif tag_parts:
            tag_parts[-1][1].append(line)
        else:
            description_lines.append(line)

    return JSDocBlock(
        description="\n".join(description_lines).strip(),
        tags=[JSDocTag(name, "\n".join(lines).strip()) for name, lines in tag_parts],
    )


def _skip_type_expression(text: str) -> str:
    """Drop a leading {type} expression, honouring nested braces."""
    if not text.startswith("{"):
        return text
    depth = 0
    for i, char in enumerate(text):
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[i + 1 :].lstrip()
    # Unterminated type expression swallows the rest of the tag
    return ""


def parse_param_tag(text: str) -> Optional[tuple[str, str]]:
    """
    Split @param tag text into (name, description).

    Accepted forms:
        {type} name - description
        name description
        [name] description
        {type} [name=default] description

    Returns:
        (name, description) or None if the tag carries no parameter name
    """
    rest = _skip_type_expression(text)

    if rest.startswith("["):
        end = rest.find("]")
        if end == -1:
            return None
        name = rest[1:end].split("=", 1)[0].strip()
        rest = rest[end + 1 :]
        if not _NAME_RE.fullmatch(name):
            return None
    else:
        match = _NAME_RE.match(rest)
        if not match:
            return None
        name = match.group(0)
        rest = rest[match.end() :]

    rest = _skip_type_expression(rest.lstrip())

    comment = rest.lstrip()
    if comment.startswith("-"):
        comment = comment[1:]
    return name, comment.strip()


def classify(comments: Iterable[str]) -> DocTags:
    """
    Reduce the doc comments attached to a declaration to a DocTags record.

    Args:
        comments: Comment texts preceding the declaration, in source order.
            Comments that are not JSDoc are ignored.

    Returns:
        DocTags; is_custom_function is False when no @customfunction tag
        is present in any block
    """
    blocks = [parse_jsdoc(c) for c in comments if is_jsdoc_comment(c)]
    doc_tags = DocTags()

    if blocks and blocks[0].description:
        doc_tags.description = blocks[0].description

    for block in blocks:
        for tag in block.tags:
            tag_name = tag.name.lower()
            if tag_name == CUSTOM_FUNCTION_TAG:
                doc_tags.is_custom_function = True
            elif tag_name == HELPURL_TAG:
                if tag.text:
                    doc_tags.help_url = tag.text
            elif tag.name in PARAM_TAGS:
                parsed = parse_param_tag(tag.text)
                if parsed:
                    name, description = parsed
                    doc_tags.param_descriptions[name] = description

    return doc_tags
