"""Sets up fixtures general to the entire test suite of this package.

This file is read during the collection phase of pytest when running anything
inside this directory.
"""

import numpy as np
import pytest

from rgeana.calib import CalibrationParams
from rgeana.data import RunInfo, SchemaRegistry
from rgeana.io.read import MemoryReader
from rgeana.utils.globals import (
    CALORIMETER_BANK,
    CHERENKOV_BANK,
    ECIN_LYR,
    ECOU_LYR,
    FMT_BANK,
    FTOF1B_LYR,
    FTOF_ID,
    HTCC_ID,
    NSECTORS,
    PARTICLE_BANK,
    PCAL_LYR,
    SCINTILLATOR_BANK,
    TRACK_BANK,
)

# Banks which every event provides, possibly empty
EVENT_BANKS = (
    PARTICLE_BANK,
    TRACK_BANK,
    CALORIMETER_BANK,
    CHERENKOV_BANK,
    SCINTILLATOR_BANK,
)


def make_bank(name, rows):
    """Builds the columns of one bank from a list of rows.

    Fields which are not specified in a row are set to 0.

    Parameters
    ----------
    name : str
        Name of the bank
    rows : List[dict]
        Values of each row, keyed by field name

    Returns
    -------
    Dict[str, List[float]]
        Values of each field of the bank
    """
    schema = SchemaRegistry.default()[name]
    return {f.name: [row.get(f.name, 0) for row in rows] for f in schema.fields}


def make_event(particles=(), tracks=(), calorimeter=(), cherenkov=(),
               scintillator=(), fmt=None):
    """Builds one event in the nested form consumed by the memory reader.

    Parameters
    ----------
    particles, tracks, calorimeter, cherenkov, scintillator : List[dict]
        Rows of each of the core banks
    fmt : List[dict], optional
        Rows of the FMT tracks. If `None`, the bank is not provided.

    Returns
    -------
    Dict[str, Dict[str, List[float]]]
        Event
    """
    rows = (particles, tracks, calorimeter, cherenkov, scintillator)
    event = {name: make_bank(name, r) for name, r in zip(EVENT_BANKS, rows)}
    if fmt is not None:
        event[FMT_BANK] = make_bank(FMT_BANK, fmt)

    return event


def make_candidate(pindex, pid=11, charge=-1, status=-2110,
                   momentum=(0.5, 0.0, 3.0), vertex=(0.0, 0.0, -3.0),
                   sector=1, chi2=20.0, ndf=10, energies=(0.5, 0.2, 0.06),
                   nphe_htcc=10.0, tof=20.0):
    """Builds the rows of every bank associated with one particle.

    The defaults describe an electron which passes every cut given the
    `calibration` fixture (sampling fraction of 0.25).

    Returns
    -------
    Dict[str, List[dict]]
        Rows of each bank, keyed by the arguments of :func:`make_event`
    """
    rows = {
        "particles": [{
            "pid": pid, "charge": charge, "status": status, "beta": 1.0,
            "px": momentum[0], "py": momentum[1], "pz": momentum[2],
            "vx": vertex[0], "vy": vertex[1], "vz": vertex[2],
        }],
        "tracks": [{
            "index": pindex, "pindex": pindex, "sector": sector,
            "chi2": chi2, "NDF": ndf, "q": charge,
        }],
        "calorimeter": [
            {"pindex": pindex, "layer": layer, "energy": e, "sector": sector}
            for layer, e in zip((PCAL_LYR, ECIN_LYR, ECOU_LYR), energies)
            if e > 0
        ],
        "cherenkov": [],
        "scintillator": [],
    }
    if nphe_htcc > 0:
        rows["cherenkov"].append(
            {"pindex": pindex, "detector": HTCC_ID, "nphe": nphe_htcc}
        )
    if tof is not None:
        rows["scintillator"].append({
            "pindex": pindex, "detector": FTOF_ID, "layer": FTOF1B_LYR,
            "time": tof,
        })

    return rows


def merge_candidates(*candidates, fmt=None):
    """Merges the rows of several candidates into one event."""
    merged = {}
    for candidate in candidates:
        for key, rows in candidate.items():
            merged.setdefault(key, []).extend(rows)

    return make_event(**merged, fmt=fmt)


@pytest.fixture(name="make_event")
def fixture_make_event():
    """Exposes the event builder to the tests."""
    return make_event


@pytest.fixture(name="make_candidate")
def fixture_make_candidate():
    """Exposes the candidate builder to the tests."""
    return make_candidate


@pytest.fixture(name="merge_candidates")
def fixture_merge_candidates():
    """Exposes the candidate merger to the tests."""
    return merge_candidates


@pytest.fixture(name="sf_params")
def fixture_sf_params():
    """Sampling fraction coefficients with a flat mean of 0.25 and a flat
    width of 0.02 in every sector.
    """
    params = np.zeros((NSECTORS, 4, 2))
    params[:, 0] = 1.0
    params[:, 1] = (0.25, 0.02)

    return params


@pytest.fixture(name="calibration")
def fixture_calibration(sf_params):
    """Sampling fraction calibration built from the flat coefficients."""
    return CalibrationParams(sf_params)


@pytest.fixture(name="sf_file")
def fixture_sf_file(tmp_path, sf_params):
    """Writes the flat coefficients to a sampling fraction file.

    Parameters
    ----------
    tmp_path : str
       Generic pytest fixture used to handle temporary test files
    sf_params : np.ndarray
       Flat sampling fraction coefficients
    """
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    path = data_dir / "sf_params_012016.txt"
    np.savetxt(path, sf_params.reshape(-1, 2))

    return str(path)


@pytest.fixture(name="run_info")
def fixture_run_info():
    """Run information of a known 10.4 GeV run."""
    return RunInfo(run=12016, beam_energy=10.3894)


@pytest.fixture(name="registry")
def fixture_registry():
    """Registry of the CLAS12 bank schemas."""
    return SchemaRegistry.default()


@pytest.fixture(name="physics_events")
def fixture_physics_events():
    """A few events: one with an electron and two pions, one without any
    track and one without an electron.
    """
    def pip(pindex):
        return make_candidate(
            pindex, pid=211, charge=1, status=2210, momentum=(0.3, 0.2, 2.0),
            energies=(0.02, 0.0, 0.0), nphe_htcc=0.0, tof=21.0,
        )

    electron = make_candidate(0)
    pim = make_candidate(
        2, pid=-211, charge=-1, status=2210, momentum=(-0.2, 0.1, 1.5),
        energies=(0.0, 0.0, 0.0), nphe_htcc=0.0, tof=None,
    )

    return [
        merge_candidates(electron, pip(1), pim),
        make_event(),
        merge_candidates(pip(0)),
    ]


@pytest.fixture(name="memory_reader")
def fixture_memory_reader(physics_events):
    """Memory reader which serves the physics events."""
    return MemoryReader(physics_events)
