"""
cfmeta - Custom function metadata extractor.

Reads an annotated TypeScript/JavaScript source file, finds the functions
tagged with @customfunction and writes the functions.json descriptor a host
application loads when registering them.
"""

__version__ = "1.0.0"
