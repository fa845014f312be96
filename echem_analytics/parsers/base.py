"""Parser contract and helpers shared by all format parsers."""

import re
from abc import ABC, abstractmethod

from ..types import ParsedData, SourceFile, Technique, to_pint_unit


class BaseParser(ABC):
    """Abstract parser that turns one instrument file format into ParsedData."""

    #: Short identifier used in logs and error messages.
    name: str = ""
    #: Vendor / source label stored in ParsedData.instrument.
    instrument: str = ""
    #: Lower-case extensions (with dot) this parser claims.
    extensions: tuple[str, ...] = ()
    #: Human-readable format labels, e.g. ".mpt (BioLogic Text)".
    formats: tuple[str, ...] = ()

    def can_parse(self, source: SourceFile) -> bool:
        """Fast check whether this parser should attempt the file."""
        return source.extension in self.extensions

    @abstractmethod
    def parse(self, source: SourceFile) -> ParsedData:
        """Parse *source*; raise CorruptDataError when the content is malformed."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


# --- Numeric tokens ---

def parse_float(token: str) -> float:
    """Parse a numeric token, substituting 0.0 when it is not a number."""
    try:
        return float(token)
    except ValueError:
        return 0.0


def is_number(token: str) -> bool:
    try:
        float(token)
    except ValueError:
        return False
    return True


def parse_row(tokens: list[str], n_columns: int) -> tuple[float, ...] | None:
    """Parse a tokenized data line, or None when its length does not match."""
    if len(tokens) != n_columns:
        return None
    return tuple(parse_float(t.strip()) for t in tokens)


def unique_columns(names: list[str]) -> list[str]:
    """Make column names unique by suffixing repeats: 'I', 'I (2)', ..."""
    seen: dict[str, int] = {}
    result = []
    for name in names:
        if name in seen:
            seen[name] += 1
            candidate = f"{name} ({seen[name]})"
            while candidate in seen:
                seen[name] += 1
                candidate = f"{name} ({seen[name]})"
            seen[candidate] = 1
            result.append(candidate)
        else:
            seen[name] = 1
            result.append(name)
    return result


# --- Units ---

_SLASH_UNIT = re.compile(r"^(?P<name>.+)/\s*(?P<unit>[^/()]+?)\s*$")
_BRACKET_UNIT = re.compile(r"^(?P<name>.+?)\s*[\(\[]\s*(?P<unit>[^\(\)\[\]]+?)\s*[\)\]]$")


def extract_unit(column: str) -> str | None:
    """Unit token encoded in a column name ("Ewe/V", "Time (s)", "I [A]")."""
    for pattern in (_SLASH_UNIT, _BRACKET_UNIT):
        match = pattern.match(column.strip())
        if match:
            unit = match.group("unit")
            if to_pint_unit(unit) is not None:
                return unit
    return None


def extract_units(columns: list[str] | tuple[str, ...]) -> dict[str, str]:
    """Map column name -> unit for every column whose unit is derivable."""
    units = {}
    for column in columns:
        unit = extract_unit(column)
        if unit is not None:
            units[column] = unit
    return units


# --- Technique detection ---

EIS_COLUMNS = {
    "freq/hz", "re(z)/ohm", "-im(z)/ohm", "|z|/ohm", "phase(z)/deg",
    "freq", "zreal", "zimag", "zmod", "zphz", "frequency", "z'", "-z''",
}
BATTERY_COLUMNS = {
    "q charge/discharge/ma.h", "(q-qo)/ma.h", "capacity/ma.h", "q discharge/ma.h",
    "q charge/ma.h", "half cycle", "energy charge/w.h", "energy discharge/w.h",
    "capacity", "charge capacity", "discharge capacity",
}
TAFEL_COLUMNS = {"log(|<i>|/ma)", "log(<i>/ma)", "log(|i|)", "log(i)", "log|i|"}
POTENTIAL_COLUMNS = {"ewe/v", "ecell/v", "control/v", "vf", "v", "e", "potential", "voltage", "e/v"}
CURRENT_COLUMNS = {"<i>/ma", "i/ma", "im", "i", "current", "i/a", "<i>/a"}
CYCLE_COLUMNS = {"cycle number", "cycle"}


def _classify_columns(columns) -> Technique | None:
    normalized = {c.strip().lower() for c in columns}

    if normalized & EIS_COLUMNS:
        return Technique.EIS
    if normalized & BATTERY_COLUMNS:
        return Technique.BATTERY
    if normalized & TAFEL_COLUMNS:
        return Technique.TAFEL
    if normalized & POTENTIAL_COLUMNS and normalized & CURRENT_COLUMNS and normalized & CYCLE_COLUMNS:
        return Technique.CV
    return None


# Ordered: first match wins
TEXT_PATTERNS: list[tuple[re.Pattern, Technique]] = [
    (re.compile(r"impedance spectroscopy|\bP?G?EIS\b|^TAG\s+EIS(POT|GALV)", re.I | re.M), Technique.EIS),
    (re.compile(r"galvanostatic cycling|\bGCPL\b|battery capacity|\bbattery\b", re.I), Technique.BATTERY),
    (re.compile(r"tafel", re.I), Technique.TAFEL),
    (re.compile(r"cyclic voltammetry|^TAG\s+CV\b", re.I | re.M), Technique.CV),
    (re.compile(r"linear sweep voltammetry|^TAG\s+LSV\b", re.I | re.M), Technique.LSV),
    (re.compile(r"chronoamperometry|^TAG\s+CHRONOA\b", re.I | re.M), Technique.CA),
    (re.compile(r"chronopotentiometry|^TAG\s+CHRONOP\b", re.I | re.M), Technique.CP),
    (re.compile(r"open circuit (voltage|potential)|^TAG\s+CORPOT\b", re.I | re.M), Technique.OCV),
]


def detect_technique(columns, text: str = "") -> Technique:
    """Classify the experiment from column names, then raw text.

    Always returns a Technique; Technique.OTHER when nothing matches.
    """
    technique = _classify_columns(columns)
    if technique is not None:
        return technique

    for pattern, technique in TEXT_PATTERNS:
        if pattern.search(text):
            return technique

    return Technique.OTHER
