"""Gamry .DTA file parser."""

import logging
import re

from ..exceptions import CorruptDataError
from ..types import DataTable, ParsedData, SourceFile, to_pint_unit
from .base import BaseParser, detect_technique, parse_row, unique_columns

logger = logging.getLogger(__name__)

# Main curve tables; OCVCURVE pre-measurement tables are excluded
CURVE_PATTERN = re.compile(r"^(Z?CURVE)(\d*)\s+TABLE\b")
ANY_TABLE_PATTERN = re.compile(r"^\w*CURVE\d*\s+TABLE\b")

# Second column of a header line when the line is KEY<TAB>TYPE<TAB>VALUE
FIELD_TYPES = {
    "LABEL", "QUANT", "IQUANT", "POTEN", "SELECTOR", "TOGGLE", "ONEPARAM",
    "TWOPARAM", "DATE", "TIME", "PSTAT", "STRING", "ENUM",
}

CYCLE_COLUMN = "Cycle"


def parse_header(lines: list[str]) -> dict[str, str]:
    """Extract metadata from the header lines before the first table."""
    metadata = {}
    for line in lines:
        if "\t" not in line:
            continue
        parts = [p.strip() for p in line.split("\t")]
        key = parts[0]
        if not key or key.startswith("#"):
            continue
        if len(parts) >= 3 and parts[1] in FIELD_TYPES:
            value = parts[2]
        elif len(parts) >= 2:
            value = parts[1]
        else:
            continue
        if value:
            metadata[key] = value
    return metadata


def find_curve_lines(lines: list[str]) -> list[tuple[int, int | None]]:
    """Find all main CURVE markers and their optional numbers."""
    curves = []
    for i, line in enumerate(lines):
        match = CURVE_PATTERN.match(line.strip())
        if match:
            num = int(match.group(2)) if match.group(2) else None
            curves.append((i, num))
    return curves


def _cells(line: str) -> list[str]:
    """Tab-separated cells; Gamry table rows carry a leading tab."""
    cells = [c.strip() for c in line.rstrip("\r\n").split("\t")]
    if cells and cells[0] == "":
        cells = cells[1:]
    return cells


def read_curve_at_line(
    lines: list[str], start_line: int, end_line: int | None = None
) -> tuple[list[str], list[str], list[tuple[float, ...]]]:
    """Read (columns, units, rows) of the curve table starting at a marker line."""
    if end_line is None:
        end_line = len(lines)
    if start_line + 2 >= end_line:
        raise CorruptDataError(f"Truncated curve table at line {start_line}")

    columns = unique_columns([c for c in _cells(lines[start_line + 1]) if c])
    unit_tokens = _cells(lines[start_line + 2])

    units = []
    for i in range(len(columns)):
        token = unit_tokens[i] if i < len(unit_tokens) else ""
        units.append(token.split()[0] if token.split() else "")

    rows = []
    dropped = 0
    for line in lines[start_line + 3 : end_line]:
        stripped = line.strip()
        if not stripped:
            continue
        if ANY_TABLE_PATTERN.match(stripped):
            break
        row = parse_row(stripped.split("\t"), len(columns))
        if row is None:
            dropped += 1
            continue
        rows.append(row)

    if dropped:
        logger.debug("Dropped %d rows in curve at line %d", dropped, start_line)
    return columns, units, rows


class GamryDTAParser(BaseParser):
    """Gamry Framework data file (.DTA)."""

    name = "gamry-dta"
    instrument = "Gamry"
    extensions = (".dta",)
    formats = (".dta (Gamry)",)

    def parse(self, source: SourceFile) -> ParsedData:
        text = source.text()
        lines = text.splitlines()

        curve_lines = find_curve_lines(lines)
        if not curve_lines:
            raise CorruptDataError(f"No CURVE markers found in {source.name}")

        first_table = next(i for i, line in enumerate(lines) if ANY_TABLE_PATTERN.match(line.strip()))
        metadata = parse_header(lines[:first_table])

        columns: list[str] | None = None
        units: list[str] = []
        rows: list[tuple[float, ...]] = []
        for i, (line_idx, curve_num) in enumerate(curve_lines):
            end_line = curve_lines[i + 1][0] if i + 1 < len(curve_lines) else None
            try:
                curve_columns, curve_units, curve_rows = read_curve_at_line(lines, line_idx, end_line)
            except CorruptDataError as e:
                logger.debug("Skipping curve at line %d: %s", line_idx, e)
                continue

            if columns is None:
                columns, units = curve_columns, curve_units
            elif curve_columns != columns:
                logger.debug("Skipping curve at line %d: columns differ from first curve", line_idx)
                continue

            if CYCLE_COLUMN in columns:
                rows.extend(curve_rows)
            else:
                cycle = float(curve_num if curve_num is not None else 0)
                rows.extend(row + (cycle,) for row in curve_rows)

        if not columns:
            raise CorruptDataError(f"No data columns found in {source.name}")

        # Classify on the recorded columns, before the synthetic cycle column
        technique = detect_technique(columns, text)
        unit_map = {
            col: unit for col, unit in zip(columns, units) if unit and to_pint_unit(unit) is not None
        }
        if CYCLE_COLUMN not in columns:
            columns = columns + [CYCLE_COLUMN]

        return ParsedData(
            technique=technique,
            instrument=self.instrument,
            metadata=metadata,
            data=DataTable(columns=tuple(columns), rows=tuple(rows)),
            units=unit_map,
        )
