"""
functions.json Manifest

Serializes extracted metadata into the descriptor the host application
reads when registering custom functions.
"""

import json
from pathlib import Path
from typing import Iterable, Optional

from cfmeta.ast.models import ExtractionResult, FunctionMetadata
from cfmeta.configs.logging import get_logger
from cfmeta.exceptions import CfmetaError, OutputWriteError

logger = get_logger("manifest")


def build_manifest(functions: Iterable[FunctionMetadata]) -> dict:
    """Build the root functions.json object."""
    return {"functions": [f.to_dict() for f in functions]}


def write_manifest(
    result: ExtractionResult,
    output_path: str,
    indent: Optional[int] = None,
) -> Path:
    """
    Write functions.json for an extraction result.

    The manifest is all-or-nothing: a result with any error is never written.

    Args:
        result: Extraction result to serialize
        output_path: Destination file
        indent: JSON indentation; None writes compact JSON

    Returns:
        Path that was written

    Raises:
        CfmetaError: The result contains errors
        OutputWriteError: The file could not be written
    """
    if not result.ok:
        raise CfmetaError(
            f"Refusing to write manifest for {result.source_path}",
            {"errors": len(result.errors)},
        )

    path = Path(output_path)
    separators = (",", ":") if indent is None else None
    content = json.dumps(build_manifest(result.functions), indent=indent, separators=separators)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise OutputWriteError(f"Failed to write {path}", {"error": str(e)}) from e

    logger.debug(f"Wrote {len(result.functions)} functions to {path}")
    return path
