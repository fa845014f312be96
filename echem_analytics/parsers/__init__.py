"""Parsers for electrochemistry file formats."""

from pathlib import Path

from ..types import ParsedData, SourceFile
from .base import BaseParser, detect_technique, extract_units
from .biologic import BioLogicMPRParser, BioLogicMPTParser
from .gamry import GamryDTAParser
from .generic import DelimitedTextParser
from .registry import ParserRegistry, default_registry


def load_file(file_path: str | Path, registry: ParserRegistry | None = None) -> ParsedData:
    """Load an electrochemistry file, dispatching on extension and content.

    Supported formats:
    - .mpt: BioLogic text export
    - .mpr: BioLogic binary (placeholder only)
    - .dta: Gamry
    - anything else: generic delimited text

    Args:
        file_path: Path to the file
        registry: Parser registry to use (default: default_registry())

    Returns:
        ParsedData

    Raises:
        UnsupportedFormatError: If no parser could handle the file
    """
    return load_file_bytes(Path(file_path).read_bytes(), Path(file_path).name, registry)


def load_file_bytes(
    content: bytes, filename: str, registry: ParserRegistry | None = None
) -> ParsedData:
    """Load an electrochemistry file from bytes.

    Args:
        content: File contents as bytes
        filename: Original filename (used for format detection)
        registry: Parser registry to use (default: default_registry())

    Returns:
        ParsedData
    """
    if registry is None:
        registry = default_registry()
    return registry.parse_file(SourceFile(name=filename, content=content))


__all__ = [
    "load_file",
    "load_file_bytes",
    "BaseParser",
    "BioLogicMPTParser",
    "BioLogicMPRParser",
    "GamryDTAParser",
    "DelimitedTextParser",
    "ParserRegistry",
    "default_registry",
    "detect_technique",
    "extract_units",
]
