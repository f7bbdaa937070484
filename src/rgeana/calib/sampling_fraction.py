"""Sampling fraction calibration of the electromagnetic calorimeters.

The sampling fraction is the ratio of the energy deposited in the calorimeters
to the momentum of the particle. For electrons, it follows a curve of the
momentum which is parametrized per sector as

.. math::

    f(p) = c_0 \\left(c_1 + \\frac{c_2}{p} + \\frac{c_3}{p^2}\\right)

with one set of coefficients for the mean of the distribution and one for its
width. The coefficients are extracted upstream and stored in text files of
`NSECTORS * NSFPARAMS` rows with two columns (mean, sigma), sector-major.
"""

import os
from dataclasses import dataclass

import numpy as np

from rgeana.data.run_info import is_simulation_run
from rgeana.utils.errors import BadCalibrationFile, NoSamplingFractionFile
from rgeana.utils.globals import NSECTORS, NSFPARAMS
from rgeana.utils.logger import logger

__all__ = ["CalibrationParams", "sf_params_path"]


@dataclass(frozen=True)
class CalibrationParams:
    """Read-only sampling fraction curve coefficients for one run.

    The calorimeter layer dimension of the calibration is folded into a
    single curve which applies to the energy summed over all layers.

    Attributes
    ----------
    params : np.ndarray
        (NSECTORS, NSFPARAMS, 2) Curve coefficients, per sector, for the mean
        (last index 0) and the width (last index 1) of the sampling fraction
    """

    params: np.ndarray

    def __post_init__(self):
        params = np.array(self.params, dtype=np.float64)
        if params.shape != (NSECTORS, NSFPARAMS, 2):
            raise ValueError(
                f"Sampling fraction parameters must be of shape "
                f"{(NSECTORS, NSFPARAMS, 2)}, got {params.shape}."
            )

        # Never mutated once loaded
        params.setflags(write=False)
        object.__setattr__(self, "params", params)

    @classmethod
    def from_file(cls, file_path):
        """Loads the calibration from a sampling fraction text file.

        Parameters
        ----------
        file_path : str
            Path to the sampling fraction file

        Returns
        -------
        CalibrationParams
            Calibration coefficients
        """
        if not os.path.isfile(file_path):
            raise NoSamplingFractionFile(file_path)

        try:
            values = np.loadtxt(file_path, dtype=np.float64, ndmin=2)
        except ValueError as err:
            raise BadCalibrationFile(f"{file_path}: {err}") from err

        if values.shape != (NSECTORS * NSFPARAMS, 2):
            raise BadCalibrationFile(
                f"{file_path}: expected {NSECTORS * NSFPARAMS} rows of 2 "
                f"columns, got shape {values.shape}"
            )

        logger.info("Loaded sampling fraction parameters from %s", file_path)

        return cls(values.reshape(NSECTORS, NSFPARAMS, 2))

    def curve(self, sector, momentum):
        """Evaluates the mean and width of the sampling fraction.

        Parameters
        ----------
        sector : int
            Sector number, from 1 to NSECTORS
        momentum : float
            Momentum of the particle in GeV

        Returns
        -------
        float
            Expected sampling fraction
        float
            Width of the sampling fraction distribution
        """
        if sector < 1 or sector > NSECTORS:
            raise ValueError(f"Sector must be between 1 and {NSECTORS}, got {sector}.")
        if momentum <= 0.0:
            raise ValueError(f"Momentum must be positive, got {momentum}.")

        c = self.params[sector - 1]
        powers = np.array([1.0, 1.0 / momentum, 1.0 / momentum**2])
        values = c[0] * (powers @ c[1:])

        return float(values[0]), float(values[1])

    def band(self, sector, momentum, nsigma):
        """Returns the range of sampling fractions compatible with an electron.

        Parameters
        ----------
        sector : int
            Sector number, from 1 to NSECTORS
        momentum : float
            Momentum of the particle in GeV
        nsigma : float
            Half-width of the band in units of the distribution width

        Returns
        -------
        Tuple[float, float]
            Lower and upper bound of the band
        """
        mean, sigma = self.curve(sector, momentum)
        return mean - nsigma * abs(sigma), mean + nsigma * abs(sigma)


def sf_params_path(data_dir, run, file_name=None):
    """Returns the path to the sampling fraction file of a run.

    Parameters
    ----------
    data_dir : str
        Directory which contains the sampling fraction files
    run : int
        Run number
    file_name : str, optional
        Explicit file name, overrides the default naming convention

    Returns
    -------
    str
        Path to the sampling fraction file
    """
    if file_name is None:
        if is_simulation_run(run):
            file_name = "sf_params_mc.txt"
        else:
            file_name = f"sf_params_{run:06d}.txt"

    return os.path.join(data_dir, file_name)
