import dataclasses

import numpy as np
import polars as pl
import pytest

from echem_analytics.exceptions import InvalidInputError
from echem_analytics.types import DataTable, ParsedData, SourceFile, Technique, convert_units, to_pint_unit


def _parsed():
    return ParsedData(
        technique="CV",
        instrument="BioLogic",
        data=DataTable(columns=("time/s", "<I>/mA"), rows=((0.0, 1.0), (1.0, 2.5))),
        metadata={"Run on channel": "1", "settings": {"Ei (V)": "0.0"}},
        units={"time/s": "s", "<I>/mA": "mA"},
    )


def test_row_length_must_match_columns():
    with pytest.raises(InvalidInputError):
        DataTable(columns=("a", "b"), rows=((1.0, 2.0), (3.0,)))


def test_columns_must_be_unique():
    with pytest.raises(InvalidInputError):
        DataTable(columns=("a", "a"), rows=())


def test_parsed_data_is_immutable():
    parsed = _parsed()
    assert parsed.technique is Technique.CV

    with pytest.raises(dataclasses.FrozenInstanceError):
        parsed.instrument = "Gamry"
    with pytest.raises(TypeError):
        parsed.metadata["new"] = "value"
    with pytest.raises(TypeError):
        parsed.metadata["settings"]["Ei (V)"] = "1.0"
    with pytest.raises(TypeError):
        parsed.units["time/s"] = "ms"


def test_column_extraction_and_conversion():
    parsed = _parsed()
    np.testing.assert_array_equal(parsed.column("time/s"), [0.0, 1.0])
    np.testing.assert_allclose(parsed.column("<I>/mA", unit="A"), [1e-3, 2.5e-3])

    with pytest.raises(KeyError):
        parsed.column("missing")

    unitless = ParsedData(technique="CV", instrument="x", data=DataTable(("a",), ((1.0,),)))
    with pytest.raises(InvalidInputError):
        unitless.column("a", unit="V")


def test_to_dataframe():
    df = _parsed().data.to_dataframe()
    assert isinstance(df, pl.DataFrame)
    assert df.columns == ["time/s", "<I>/mA"]
    assert df.height == 2
    assert df["<I>/mA"].to_list() == [1.0, 2.5]

    empty = DataTable(columns=("a", "b")).to_dataframe()
    assert empty.shape == (0, 2)


def test_convert_units_vendor_tokens():
    assert convert_units(1500.0, "Ohm", "kohm") == pytest.approx(1.5)
    assert convert_units(2.0, "mA.h", "A*h") == pytest.approx(0.002)
    with pytest.raises(InvalidInputError):
        convert_units(1.0, "V", "A")


def test_to_pint_unit_rejects_non_units():
    assert to_pint_unit("mA") is not None
    assert to_pint_unit("") is None
    assert to_pint_unit("#") is None
    assert to_pint_unit("|<I>|/mA") is None


def test_source_file_properties(tmp_path):
    path = tmp_path / "Run.MPT"
    path.write_bytes("Ewe/V\n1.0\n".encode("latin-1"))

    source = SourceFile.from_path(path)
    assert source.name == "Run.MPT"
    assert source.extension == ".mpt"
    assert source.size == len(path.read_bytes())
    assert source.text().startswith("Ewe/V")


def test_source_file_text_falls_back_to_latin1():
    source = SourceFile(name="x.txt", content="T/°C\n".encode("latin-1"))
    assert source.text() == "T/°C\n"


def test_extracted_columns_are_read_only():
    parsed = _parsed()
    for values in (parsed.data.column("time/s"), parsed.column("time/s"), parsed.column("<I>/mA", unit="A")):
        with pytest.raises(ValueError):
            values[0] = 99.0
