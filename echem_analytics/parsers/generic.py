"""Generic delimited-text parser (CSV / TSV / TXT), the universal fallback."""

import csv
import logging

from ..exceptions import CorruptDataError
from ..types import DataTable, ParsedData, SourceFile
from .base import BaseParser, detect_technique, extract_units, is_number, parse_row, unique_columns

logger = logging.getLogger(__name__)

DELIMITERS = ("\t", ",", ";")


def detect_delimiter(header_line: str) -> str:
    """Most frequent candidate delimiter in the header line (comma when none)."""
    counts = {d: header_line.count(d) for d in DELIMITERS}
    best = max(DELIMITERS, key=lambda d: counts[d])
    return best if counts[best] else ","


class DelimitedTextParser(BaseParser):
    """Delimited text with a header row followed by numeric rows.

    Claims every file, so it must be registered last. Text without a single
    numeric data token is rejected rather than returned as zeros.
    """

    name = "generic-delimited"
    instrument = "Generic"
    formats = (".csv (Generic)", ".txt (Generic)")

    def can_parse(self, source: SourceFile) -> bool:
        return True

    def parse(self, source: SourceFile) -> ParsedData:
        if not source.content:
            raise CorruptDataError(f"{source.name} is empty")
        if b"\x00" in source.content:
            raise CorruptDataError(f"{source.name} looks like a binary file")

        text = source.text()
        lines = [
            line for line in text.splitlines()
            if line.strip() and not line.lstrip().startswith("#")
        ]
        if not lines:
            raise CorruptDataError(f"No header row found in {source.name}")

        delimiter = detect_delimiter(lines[0])
        reader = csv.reader(lines, delimiter=delimiter)

        header = next(reader)
        while header and not header[-1].strip():
            header.pop()
        columns = unique_columns([c.strip() for c in header])
        if not columns or not all(columns):
            raise CorruptDataError(f"Invalid header row in {source.name}")

        rows = []
        dropped = 0
        has_numeric = False
        for tokens in reader:
            # Tolerate trailing delimiters
            while len(tokens) > len(columns) and not tokens[-1].strip():
                tokens.pop()
            row = parse_row(tokens, len(columns))
            if row is None:
                dropped += 1
                continue
            rows.append(row)
            has_numeric = has_numeric or any(is_number(t.strip()) for t in tokens)

        if dropped:
            logger.debug("Dropped %d rows with mismatched column count in %s", dropped, source.name)
        # Zero-substituted text is not data
        if not has_numeric:
            raise CorruptDataError(f"No numeric data rows found in {source.name}")

        return ParsedData(
            technique=detect_technique(columns, text),
            instrument=self.instrument,
            metadata={"delimiter": delimiter},
            data=DataTable(columns=tuple(columns), rows=tuple(rows)),
            units=extract_units(columns),
        )
