"""
Data Models for Custom Function Metadata

Structured representations of the metadata extracted from @customfunction
declarations, plus the per-declaration outcomes the extractor collects.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

SCALAR = "scalar"
MATRIX = "matrix"


@dataclass(frozen=True)
class ParameterMetadata:
    """Represents one emitted function parameter."""

    name: str
    type: Optional[str]  # number, string, boolean, any (None when unresolved)
    dimensionality: str = SCALAR
    description: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "type": self.type,
            "dimensionality": self.dimensionality,
        }


@dataclass(frozen=True)
class ResultMetadata:
    """Represents the function result."""

    type: Optional[str] = "any"
    dimensionality: str = SCALAR

    def to_dict(self) -> dict:
        return {"type": self.type, "dimensionality": self.dimensionality}


@dataclass(frozen=True)
class FunctionOptions:
    """Invocation options the host application reads."""

    synchronous: bool = False  # Never set by the extractor
    cancelable: bool = False
    stream: bool = False

    def to_dict(self) -> dict:
        return {
            "sync": self.synchronous,
            "cancelable": self.cancelable,
            "stream": self.stream,
        }


@dataclass(frozen=True)
class FunctionMetadata:
    """Complete metadata for one custom function."""

    name: str  # Also used as the id
    help_url: str = ""
    description: Optional[str] = None
    parameters: tuple[ParameterMetadata, ...] = ()
    result: ResultMetadata = field(default_factory=ResultMetadata)
    options: FunctionOptions = field(default_factory=FunctionOptions)

    def to_dict(self) -> dict:
        """Serialize using the field names functions.json expects."""
        data: dict = {
            "name": self.name,
            "id": self.name,
            "helpurl": self.help_url,
        }
        if self.description is not None:
            data["description"] = self.description
        data["parameters"] = [p.to_dict() for p in self.parameters]
        data["result"] = self.result.to_dict()
        data["options"] = self.options.to_dict()
        return data


# =============================================================================
# Declaration outcomes
# =============================================================================


@dataclass(frozen=True)
class Accepted:
    """A custom function whose metadata was built."""

    metadata: FunctionMetadata


@dataclass(frozen=True)
class Skipped:
    """A top-level function without the @customfunction tag."""

    name: str


@dataclass(frozen=True)
class Failed:
    """A custom function with unsupported or malformed types."""

    name: str
    errors: tuple[str, ...]


Outcome = Union[Accepted, Skipped, Failed]


@dataclass
class ExtractionResult:
    """Everything found in one source file, in source order."""

    source_path: str
    functions: list[FunctionMetadata] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when no hard error was recorded."""
        return not self.errors

    def add(self, outcome: Outcome) -> None:
        """Route a declaration outcome into the matching sequence."""
        if isinstance(outcome, Accepted):
            self.functions.append(outcome.metadata)
        elif isinstance(outcome, Skipped):
            self.skipped.append(outcome.name)
        else:
            self.errors.extend(outcome.errors)
