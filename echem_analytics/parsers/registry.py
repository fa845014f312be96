"""Ordered parser registry with fall-through dispatch."""

import logging
from typing import Iterable

from ..config import MAX_FILE_SIZE_MB
from ..exceptions import InvalidInputError, UnsupportedFormatError
from ..types import ParsedData, SourceFile
from .base import BaseParser
from .biologic import BioLogicMPRParser, BioLogicMPTParser
from .gamry import GamryDTAParser
from .generic import DelimitedTextParser

logger = logging.getLogger(__name__)


class ParserRegistry:
    """Immutable, ordered collection of parsers.

    Format-specific parsers come first; a catch-all parser, when present,
    must be last so specific formats get first refusal.
    """

    def __init__(self, parsers: Iterable[BaseParser], max_file_size_mb: float = MAX_FILE_SIZE_MB):
        self._parsers = tuple(parsers)
        self.max_file_size_mb = max_file_size_mb

    @property
    def parsers(self) -> tuple[BaseParser, ...]:
        return self._parsers

    def supported_formats(self) -> list[str]:
        """Human-readable labels of every registered format."""
        return [label for parser in self._parsers for label in parser.formats]

    def parse_file(self, source: SourceFile) -> ParsedData:
        """Parse *source* with the first claiming parser that succeeds.

        Raises:
            InvalidInputError: If the file exceeds the size limit
            UnsupportedFormatError: If no parser claims the file, or every
                claiming parser fails
        """
        if source.size > self.max_file_size_mb * 1024 * 1024:
            raise InvalidInputError(
                f"{source.name} is {source.size} bytes, limit is {self.max_file_size_mb} MB"
            )

        attempted = []
        failures = {}
        last_error = None
        for parser in self._parsers:
            if not parser.can_parse(source):
                continue

            attempted.append(parser.name)
            logger.debug("Trying %s for %s", parser.name, source.name)
            try:
                parsed = parser.parse(source)
            except Exception as e:
                logger.warning("Parser %s failed for %s: %s", parser.name, source.name, e)
                failures[parser.name] = str(e)
                last_error = e
                continue

            logger.info(
                "Parsed %s with %s (%d rows, technique %s)",
                source.name, parser.name, parsed.row_count, parsed.technique.value,
            )
            return parsed

        raise UnsupportedFormatError(source.name, tuple(attempted), failures) from last_error


def default_registry() -> ParserRegistry:
    """Registry with every built-in parser, generic fallback last."""
    return ParserRegistry(
        [
            BioLogicMPTParser(),
            BioLogicMPRParser(),
            GamryDTAParser(),
            DelimitedTextParser(),
        ]
    )
