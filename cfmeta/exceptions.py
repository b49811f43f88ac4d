"""
cfmeta Exception Hierarchy

Operational failures (configuration, I/O, parser setup). Problems found in
the analysed source are not exceptions: they are recorded on the
ExtractionResult and reported at the end of the run.

Usage:
    from cfmeta.exceptions import CfmetaError, SourceReadError

    try:
        parsed = get_parser().parse_file(path)
    except SourceReadError as e:
        logger.error(f"Cannot read source: {e}")
"""


class CfmetaError(Exception):
    """Base exception for all cfmeta errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(CfmetaError):
    """Error in cfmeta configuration."""

    pass


# =============================================================================
# Source Errors
# =============================================================================


class SourceError(CfmetaError):
    """Base class for errors handling the input source file."""

    pass


class SourceReadError(SourceError):
    """The source file could not be read."""

    pass


class ParseError(SourceError):
    """The tree-sitter grammar could not be loaded or run."""

    pass


# =============================================================================
# Output Errors
# =============================================================================


class OutputWriteError(CfmetaError):
    """The functions.json manifest could not be written."""

    pass
