"""Data types for echem_analytics."""

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import numpy as np
import pint
import polars as pl

from .config import SNIFF_BYTES
from .exceptions import InvalidInputError

# Initialize unit registry
ureg = pint.UnitRegistry()

# Vendor unit spellings that pint does not understand as written
UNIT_ALIASES = {
    "Ohm": "ohm",
    "Ohm.cm": "ohm * centimeter",
    "deg": "degree",
    "°": "degree",
    "°C": "degC",
    "%": "percent",
}

_DOT_PRODUCT = re.compile(r"(?<=[A-Za-z])\.(?=[A-Za-z])")
_UNIT_TOKEN = re.compile(r"^[A-Za-z°%Ωµ][A-Za-z0-9°%Ωµ.*^/ ²³-]*$")


class Technique(str, Enum):
    """Electrochemical experiment classification."""

    CV = "CV"
    LSV = "LSV"
    CA = "CA"
    CP = "CP"
    OCV = "OCV"
    EIS = "EIS"
    BATTERY = "Battery"
    TAFEL = "Tafel"
    OTHER = "Other"


def to_pint_unit(token: str) -> pint.Unit | None:
    """Resolve a vendor unit token (e.g. "mA", "Ohm", "mA.h") to a pint unit.

    Returns None when the token is not a recognisable unit.
    """
    token = token.strip()
    if not _UNIT_TOKEN.match(token):
        return None

    expression = UNIT_ALIASES.get(token, _DOT_PRODUCT.sub("*", token))
    try:
        return ureg.parse_units(expression)
    except (pint.errors.PintError, AttributeError, SyntaxError, TypeError, ValueError, KeyError):
        return None


def convert_units(value, source_unit: str, target_unit: str):
    """Convert a value (scalar or array) from source unit to target unit using pint.

    Args:
        value: The numeric value(s) to convert
        source_unit: Unit token (e.g., "mA")
        target_unit: Target unit token (e.g., "A")

    Returns:
        Converted value(s)
    """
    if not source_unit or not target_unit or source_unit == target_unit:
        return value

    source = to_pint_unit(source_unit)
    target = to_pint_unit(target_unit)
    if source is None or target is None:
        raise InvalidInputError(f"Cannot convert between '{source_unit}' and '{target_unit}'")
    try:
        return ureg.Quantity(value, source).to(target).magnitude
    except pint.errors.DimensionalityError as e:
        raise InvalidInputError(str(e)) from e


def _freeze(mapping: Mapping) -> MappingProxyType:
    """Read-only copy of a mapping, nested mappings included."""
    return MappingProxyType(
        {k: _freeze(v) if isinstance(v, Mapping) else v for k, v in mapping.items()}
    )


@dataclass(frozen=True)
class SourceFile:
    """An instrument export handed over by an upload collaborator."""

    name: str
    content: bytes

    @classmethod
    def from_path(cls, path: str | Path, name: str | None = None) -> "SourceFile":
        path = Path(path)
        return cls(name=name or path.name, content=path.read_bytes())

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        """Lower-case suffix including the dot (e.g. '.mpt')."""
        return Path(self.name).suffix.lower()

    def text(self) -> str:
        """Decode content as UTF-8, falling back to Latin-1 (never fails)."""
        try:
            return self.content.decode("utf-8-sig")
        except UnicodeDecodeError:
            return self.content.decode("latin-1")

    def head(self, n_bytes: int = SNIFF_BYTES) -> str:
        """First bytes of the file as text, for content sniffing."""
        return self.content[:n_bytes].decode("utf-8-sig", errors="ignore")


@dataclass(frozen=True)
class DataTable:
    """Ordered, uniquely named columns and numeric rows in acquisition order."""

    columns: tuple[str, ...] = ()
    rows: tuple[tuple[float, ...], ...] = ()

    def __post_init__(self):
        columns = tuple(str(c) for c in self.columns)
        if len(set(columns)) != len(columns):
            raise InvalidInputError(f"Column names must be unique: {columns}")

        rows = tuple(tuple(float(v) for v in row) for row in self.rows)
        for i, row in enumerate(rows):
            if len(row) != len(columns):
                raise InvalidInputError(
                    f"Row {i} has {len(row)} values, expected {len(columns)}"
                )

        object.__setattr__(self, "columns", columns)
        object.__setattr__(self, "rows", rows)

    def __len__(self) -> int:
        return len(self.rows)

    def column(self, name: str) -> np.ndarray:
        """Values of one column as a read-only float array."""
        if name not in self.columns:
            raise KeyError(f"Unknown column: {name}")
        idx = self.columns.index(name)
        values = np.array([row[idx] for row in self.rows], dtype=float)
        values.setflags(write=False)
        return values

    def to_dataframe(self) -> pl.DataFrame:
        """Polars view of the table (one Float64 column per column name)."""
        schema = {name: pl.Float64 for name in self.columns}
        if not self.rows:
            return pl.DataFrame(schema=schema)
        return pl.DataFrame([list(row) for row in self.rows], schema=schema, orient="row")


@dataclass(frozen=True)
class ParsedData:
    """Uniform result of parsing any supported instrument file.

    Immutable: metadata and units are read-only mappings, the table is frozen.
    """

    technique: Technique
    instrument: str
    data: DataTable
    metadata: Mapping[str, Any] = field(default_factory=dict)
    units: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "technique", Technique(self.technique))
        object.__setattr__(self, "metadata", _freeze(self.metadata))
        object.__setattr__(self, "units", MappingProxyType(dict(self.units)))

    @property
    def columns(self) -> tuple[str, ...]:
        return self.data.columns

    @property
    def row_count(self) -> int:
        return len(self.data.rows)

    @property
    def column_count(self) -> int:
        return len(self.data.columns)

    def column(self, name: str, unit: str | None = None) -> np.ndarray:
        """Extract a column, optionally converted to another unit.

        Args:
            name: Column name as it appears in the file
            unit: Target unit (e.g. "A" for a "<I>/mA" column)

        Returns:
            Column values as a float array
        """
        values = self.data.column(name)
        if unit is None:
            return values

        source_unit = self.units.get(name)
        if source_unit is None:
            raise InvalidInputError(f"No unit recorded for column '{name}'")
        converted = np.array(convert_units(values, source_unit, unit), dtype=float)
        converted.setflags(write=False)
        return converted
