"""BioLogic EC-Lab parsers: .mpt text exports and .mpr binary placeholder."""

import logging
import re

from ..exceptions import CorruptDataError
from ..types import DataTable, ParsedData, SourceFile, Technique
from .base import BaseParser, detect_technique, extract_units, parse_row, unique_columns

logger = logging.getLogger(__name__)

MPT_MAGIC = "EC-Lab ASCII FILE"
HEADER_COUNT_PREFIX = "Nb header lines"

# Tokens that identify the column-title row of the data region
SIGNATURE_TOKENS = {"mode", "Ewe/V", "Ecell/V", "control/V", "freq/Hz"}

# EC-Lab technique abbreviations used in exported file names
FILENAME_TECHNIQUES = {
    "CV": Technique.CV,
    "CVA": Technique.CV,
    "LSV": Technique.LSV,
    "CA": Technique.CA,
    "CP": Technique.CP,
    "OCV": Technique.OCV,
    "PEIS": Technique.EIS,
    "GEIS": Technique.EIS,
    "GCPL": Technique.BATTERY,
    "MB": Technique.BATTERY,
}


def extract_technique_from_filename(filename: str) -> Technique | None:
    """Extract technique from an EC-Lab file name (e.g. 'run_02_CV_C01.mpr')."""
    base = re.sub(r"\.mp[rt]$", "", filename, flags=re.I)
    base = re.sub(r"_C\d+$", "", base)

    # Multi-technique pattern: _XX_TECHNIQUE at end
    match = re.search(r"_(\d{2})_([A-Z]+)$", base)
    if match and match.group(2) in FILENAME_TECHNIQUES:
        return FILENAME_TECHNIQUES[match.group(2)]

    for part in base.split("_"):
        if part in FILENAME_TECHNIQUES:
            return FILENAME_TECHNIQUES[part]

    return None


def _declared_header_count(lines: list[str]) -> int:
    for line in lines:
        if line.startswith(HEADER_COUNT_PREFIX):
            try:
                return int(line.split(":", 1)[1].strip())
            except (IndexError, ValueError):
                return 0
    return 0


def _is_column_row(line: str) -> bool:
    if "\t" not in line:
        return False
    for token in line.split("\t"):
        token = token.strip()
        if token in SIGNATURE_TOKENS or token.lower().startswith("time"):
            return True
    return False


def split_sections(lines: list[str]) -> tuple[list[str], list[str], list[str]]:
    """Split MPT lines into (header, settings, data) regions.

    EC-Lab counts the column-title row inside the declared header lines, so
    the search for it starts at the last declared header line.
    """
    header_count = min(_declared_header_count(lines), len(lines))

    data_start = None
    for i in range(max(header_count - 1, 0), len(lines)):
        if _is_column_row(lines[i]):
            data_start = i
            break
    if data_start is None:
        data_start = header_count

    header_end = min(header_count, data_start)
    return lines[:header_end], lines[header_end:data_start], lines[data_start:]


def parse_header(header: list[str]) -> dict[str, str]:
    """'key : value' header lines -> dict (split at the first colon)."""
    metadata = {}
    for line in header:
        if ":" in line:
            key, _, value = line.partition(":")
            if key.strip():
                metadata[key.strip()] = value.strip()
    return metadata


def parse_settings(settings: list[str]) -> dict[str, str]:
    """Tab-separated key/value settings lines -> dict."""
    result = {}
    for line in settings:
        if not line.strip() or line.startswith(HEADER_COUNT_PREFIX):
            continue
        parts = [p.strip() for p in line.split("\t") if p.strip()]
        if len(parts) >= 2:
            result[parts[0]] = parts[1]
    return result


def parse_data(data: list[str]) -> tuple[list[str], list[tuple[float, ...]]]:
    """Column row plus numeric rows from the data region."""
    non_empty = [line for line in data if line.strip()]
    if not non_empty:
        return [], []

    columns = unique_columns([c.strip() for c in non_empty[0].split("\t") if c.strip()])

    rows = []
    dropped = 0
    for line in non_empty[1:]:
        row = parse_row(line.strip().split("\t"), len(columns))
        if row is None:
            dropped += 1
            continue
        rows.append(row)

    if dropped:
        logger.debug("Dropped %d MPT rows with mismatched column count", dropped)
    return columns, rows


class BioLogicMPTParser(BaseParser):
    """BioLogic EC-Lab text export (.mpt)."""

    name = "biologic-mpt"
    instrument = "BioLogic"
    extensions = (".mpt",)
    formats = (".mpt (BioLogic Text)",)

    def can_parse(self, source: SourceFile) -> bool:
        if source.extension in self.extensions:
            return True
        return source.head().startswith(MPT_MAGIC)

    def parse(self, source: SourceFile) -> ParsedData:
        text = source.text()
        lines = text.splitlines()

        header, settings, data = split_sections(lines)
        columns, rows = parse_data(data)
        if not columns:
            raise CorruptDataError(f"No data columns found in {source.name}")

        metadata = parse_header(header)
        metadata["settings"] = parse_settings(settings)

        return ParsedData(
            technique=detect_technique(columns, text),
            instrument=self.instrument,
            metadata=metadata,
            data=DataTable(columns=tuple(columns), rows=tuple(rows)),
            units=extract_units(columns),
        )


class BioLogicMPRParser(BaseParser):
    """BioLogic EC-Lab binary file (.mpr).

    The binary layout is not decoded: a placeholder table is returned with a
    comment asking for a text (.mpt) export.
    """

    name = "biologic-mpr"
    instrument = "BioLogic"
    extensions = (".mpr",)
    formats = (".mpr (BioLogic Binary)",)

    PLACEHOLDER_COLUMNS = ("time", "voltage", "current")

    def parse(self, source: SourceFile) -> ParsedData:
        comments = (
            ".mpr files require binary parsing. Please convert to .mpt format or use "
            "BioLogic EC-Lab software to export as text. "
            f"File: {source.name}, Size: {source.size} bytes"
        )
        return ParsedData(
            technique=extract_technique_from_filename(source.name) or Technique.OTHER,
            instrument=self.instrument,
            metadata={"comments": comments},
            data=DataTable(columns=self.PLACEHOLDER_COLUMNS, rows=()),
            units={},
        )
