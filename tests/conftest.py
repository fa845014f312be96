"""Shared pytest fixtures for echem_analytics tests.

Synthetic instrument exports mirroring the layout of real BioLogic, Gamry
and spreadsheet files.
"""

import pytest

from echem_analytics.types import SourceFile


# ============================================================================
# File content fixtures
# ============================================================================

MPT_TEXT = "\n".join(
    [
        "EC-Lab ASCII FILE",
        "Nb header lines : 8",
        "",
        "Cyclic Voltammetry",
        "",
        "Run on channel : 1",
        "Acquisition started on : 01/23/2024 10:11:12",
        "mode\tox/red\terror\ttime/s\tcontrol/V\tEwe/V\t<I>/mA\tcycle number",
        "2\t1\t0\t0.0\t0.1\t0.1\t0.001\t1",
        "2\t1\t0\t0.5\t0.2\t0.2\t0.002\t1",
        "2\t0\t0\t1.0\t0.3\tbad\t0.003\t1",
        "2\t0\t0\t1.5\t0.2",
        "",
    ]
)

# Header, then a separate settings region, then data
MPT_EIS_TEXT = "\r\n".join(
    [
        "EC-Lab ASCII FILE",
        "Nb header lines : 3",
        "Technique : PEIS",
        "Ei (V)\t0.0",
        "fi\t100 kHz",
        "freq/Hz\tRe(Z)/Ohm\t-Im(Z)/Ohm",
        "1000\t10.5\t0.2",
        "100\t11.0\t1.5",
    ]
)

DTA_TEXT = "\n".join(
    [
        "EXPLAIN",
        "TAG\tCV",
        "TITLE\tLABEL\tCyclic Voltammetry\tTest &Identifier",
        "DATE\tLABEL\t1/23/2024\tDate",
        "AREA\tQUANT\t1.0\tSample &Area (cm^2)",
        "OCVCURVE\tTABLE\t2",
        "\tPt\tT\tVf\tVm\tAch\tOver",
        "\t#\ts\tV vs. Ref.\tV\tV\tbits",
        "\t0\t0.1\t0.5\t0.5\t0\t...........",
        "\t1\t0.2\t0.5\t0.5\t0\t...........",
        "EOC\tQUANT\t0.5\tOpen Circuit (V)",
        "CURVE1\tTABLE\t2",
        "\tPt\tT\tVf\tIm\tOver",
        "\t#\ts\tV vs. Ref.\tA\tbits",
        "\t0\t0.0\t0.1\t1e-6\t...........",
        "\t1\t0.1\t0.2\t2e-6\t...........",
        "CURVE2\tTABLE\t2",
        "\tPt\tT\tVf\tIm\tOver",
        "\t#\ts\tV vs. Ref.\tA\tbits",
        "\t0\t0.2\t0.3\t3e-6\t...........",
        "\t1\t0.3\t0.2\t4e-6\t...........",
        "",
    ]
)

CSV_TEXT = "time (s),Potential (V),Current (A)\n0,0.1,1e-3\n1,0.2,2e-3\n2,0.3,3e-3\n"


def make_source(name: str, text: str) -> SourceFile:
    return SourceFile(name=name, content=text.encode("utf-8"))


@pytest.fixture
def mpt_source():
    return make_source("sample_CV.mpt", MPT_TEXT)


@pytest.fixture
def mpt_eis_source():
    return make_source("impedance.mpt", MPT_EIS_TEXT)


@pytest.fixture
def dta_source():
    return make_source("CV_run.DTA", DTA_TEXT)


@pytest.fixture
def csv_source():
    return make_source("export.csv", CSV_TEXT)


@pytest.fixture
def mpr_source():
    return SourceFile(name="sample_02_CV_C01.mpr", content=b"BIO-LOGIC MODULAR FILE\x00\x01\x02")
