"""Module with a data class object which represents the run information.

The run number is extracted from the input file name, the beam energy is
looked up from the run number.
"""

import os
import re
from dataclasses import dataclass

from rgeana.utils.errors import BadFilenameFormat, UnimplementedBeamEnergy
from rgeana.utils.globals import BEAM_ENERGIES, MC_BEAM_ENERGY, MC_RUN_PREFIX

from .base import DataBase

__all__ = ["RunInfo"]

# Input files are named <text><run_no>.root
_FILENAME_PATTERN = re.compile(r"(\d+)\.root$")


@dataclass(eq=False)
class RunInfo(DataBase):
    """Run information shared by every event of an input file.

    Attributes
    ----------
    run : int
        Run number
    beam_energy : float
        Beam energy in GeV
    """

    run: int = -1
    beam_energy: float = -1.0

    @property
    def is_simulation(self):
        """Whether the run number corresponds to a simulated run."""
        return is_simulation_run(self.run)


def run_from_filename(file_name):
    """Extracts the run number from a file name.

    Parameters
    ----------
    file_name : str
        Path to the input file, formatted as `<text><run_no>.root`

    Returns
    -------
    int
        Run number
    """
    match = _FILENAME_PATTERN.search(os.path.basename(file_name))
    if match is None:
        raise BadFilenameFormat(file_name)

    return int(match.group(1))


def is_simulation_run(run):
    """Checks whether a run number belongs to simulation (999xxx)."""
    return run // 1000 == MC_RUN_PREFIX


def get_beam_energy(run, beam_energies=None, mc_beam_energy=None):
    """Returns the beam energy associated with a run.

    Parameters
    ----------
    run : int
        Run number
    beam_energies : Dict[int, float], optional
        Map from run number to beam energy. Defaults to the known runs.
    mc_beam_energy : float, optional
        Beam energy of simulated runs

    Returns
    -------
    float
        Beam energy in GeV
    """
    if is_simulation_run(run):
        return mc_beam_energy if mc_beam_energy is not None else MC_BEAM_ENERGY

    beam_energies = beam_energies if beam_energies is not None else BEAM_ENERGIES
    if run not in beam_energies:
        raise UnimplementedBeamEnergy(f"run {run}")

    return float(beam_energies[run])
