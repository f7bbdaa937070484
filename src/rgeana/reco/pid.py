"""Particle identification of reconstructed candidates.

A candidate is first tested against the electron hypothesis, based on the
tracking quality, the Cherenkov response and the calorimeter sampling
fraction. If it fails, the event builder hypothesis is looked up in the
table of supported species.
"""

import math
from dataclasses import dataclass

from rgeana.utils.globals import (
    CHI2NDF_CUT,
    ELEC_PID,
    FD_STATUS_MAX,
    FD_STATUS_MIN,
    FMTCUT_ANGLE,
    FMTCUT_RMAX,
    FMTCUT_RMIN,
    FMTCUT_Z0,
    HTCC_NPHE_MIN,
    NSECTORS,
    PCAL_ENERGY_MIN,
    SF_NSIGMA,
)

from .aggregate import CalorimeterEnergy
from .kinematics import to_rad

__all__ = [
    "ElectronCuts",
    "PidInputs",
    "Classification",
    "GeometricCut",
    "PidClassifier",
]

# PDG code given by the event builder to particles it could not identify
UNIDENTIFIED_PID = 0


@dataclass(frozen=True)
class ElectronCuts:
    """Thresholds of the electron hypothesis.

    Attributes
    ----------
    chi2ndf_cut : float
        Maximum track fit chi2 per degree of freedom
    htcc_nphe_min : float
        Minimum number of photoelectrons in the HTCC
    pcal_energy_min : float
        Minimum energy deposited in the PCAL (GeV)
    sf_nsigma : float
        Half-width of the sampling fraction band, in units of its width
    status_min : int
        Lower bound of the forward detector status range (inclusive)
    status_max : int
        Upper bound of the forward detector status range (exclusive)
    """

    chi2ndf_cut: float = CHI2NDF_CUT
    htcc_nphe_min: float = HTCC_NPHE_MIN
    pcal_energy_min: float = PCAL_ENERGY_MIN
    sf_nsigma: float = SF_NSIGMA
    status_min: int = FD_STATUS_MIN
    status_max: int = FD_STATUS_MAX


@dataclass(frozen=True)
class PidInputs:
    """Everything the classification of one candidate depends on.

    Attributes
    ----------
    pid : int
        PDG code assigned by the event builder
    charge : int
        Measured charge
    status : int
        Event builder status of the particle
    momentum : float
        Momentum magnitude in GeV
    sector : int
        Sector of the track, from 1 to 6
    chi2 : float
        Track fit chi2
    ndf : int
        Track fit number of degrees of freedom
    energy : CalorimeterEnergy
        Energy deposited in each calorimeter layer
    nphe_htcc : float
        Number of photoelectrons in the HTCC
    """

    pid: int
    charge: int
    status: int
    momentum: float
    sector: int
    chi2: float
    ndf: int
    energy: CalorimeterEnergy
    nphe_htcc: float


@dataclass(frozen=True)
class Classification:
    """Outcome of the classification of one candidate.

    Attributes
    ----------
    pid : int
        Final PDG code
    charge : int
        Charge of the assigned species
    mass : float
        Mass of the assigned species in GeV
    is_electron : bool
        Whether the candidate passed the electron hypothesis
    is_trigger : bool
        Whether the candidate is flagged as the trigger electron
    """

    pid: int
    charge: int
    mass: float
    is_electron: bool = False
    is_trigger: bool = False

    def apply(self, particle):
        """Copies the assigned identity onto a particle candidate.

        Parameters
        ----------
        particle : Particle
            Candidate to update
        """
        particle.pid = self.pid
        particle.charge = self.charge
        particle.mass = self.mass
        particle.is_trigger = self.is_trigger


class GeometricCut:
    """FMT geometric acceptance.

    The window of polar angles seen by the FMT depends on the position of the
    vertex along the beam axis:

    .. math::

        \\theta_{min/max} = 57.29 \\arctan\\left(\\frac{R_{min/max}}{z_0 - v_z}\\right)

    where the radii are those of the inner and outer FMT circles and z_0 is
    the position of the first FMT layer.
    """

    def __init__(
        self,
        r_min=FMTCUT_RMIN,
        r_max=FMTCUT_RMAX,
        z0=FMTCUT_Z0,
        angle_factor=FMTCUT_ANGLE,
    ):
        """Store the geometry of the FMT.

        Parameters
        ----------
        r_min : float, default FMTCUT_RMIN
            Radius of the inner FMT circle in cm
        r_max : float, default FMTCUT_RMAX
            Radius of the outer FMT circle in cm
        z0 : float, default FMTCUT_Z0
            Position of the first FMT layer along the beam axis in cm
        angle_factor : float, default FMTCUT_ANGLE
            Conversion factor of the arctangent to degrees
        """
        self.r_min = r_min
        self.r_max = r_max
        self.z0 = z0
        self.angle_factor = angle_factor

    def _limit(self, radius, vz):
        """Polar angle subtended by a circle of the FMT, in radians."""
        dz = self.z0 - vz
        ratio = radius / dz if dz != 0 else math.copysign(math.inf, radius)

        return to_rad(self.angle_factor * math.atan(ratio))

    def window(self, vz):
        """Returns the range of polar angles accepted for a vertex position.

        Parameters
        ----------
        vz : float
            Position of the vertex along the beam axis in cm

        Returns
        -------
        Tuple[float, float]
            Minimum and maximum polar angles in radians
        """
        return self._limit(self.r_min, vz), self._limit(self.r_max, vz)

    def passes(self, particle):
        """Checks whether a particle falls within the FMT acceptance.

        Parameters
        ----------
        particle : Particle
            Particle candidate

        Returns
        -------
        bool
            `True` if the polar angle of the particle is in the window
        """
        theta_min, theta_max = self.window(particle.vz)

        return theta_min <= particle.theta <= theta_max


class PidClassifier:
    """Assigns the final identity of particle candidates.

    The classification is a pure function of its inputs: the hypothesis
    table, the calibration and the cuts are fixed at construction and never
    modified. Whether an electron is flagged as the trigger is decided by
    the caller, which is the only one to know whether a trigger was already
    found in the event.
    """

    def __init__(self, pid_table, calibration, cuts=None, geometric_cut=None):
        """Store the classification inputs which are fixed for a run.

        Parameters
        ----------
        pid_table : PidTable
            Table of supported species
        calibration : CalibrationParams
            Sampling fraction calibration of the run
        cuts : ElectronCuts, optional
            Thresholds of the electron hypothesis
        geometric_cut : GeometricCut, optional
            Geometric acceptance to apply to the candidates, if any
        """
        self.pid_table = pid_table
        self.calibration = calibration
        self.cuts = cuts if cuts is not None else ElectronCuts()
        self.geometric_cut = geometric_cut

    def is_electron(self, inputs):
        """Checks whether a candidate is consistent with an electron.

        Parameters
        ----------
        inputs : PidInputs
            Classification inputs of the candidate

        Returns
        -------
        bool
            `True` if every requirement of the electron hypothesis is met
        """
        cuts = self.cuts
        if inputs.charge != -1:
            return False

        # Only tracks reconstructed in the forward detector
        if not cuts.status_min <= abs(inputs.status) < cuts.status_max:
            return False

        # Track fit quality
        if inputs.ndf > 0 and inputs.chi2 / inputs.ndf >= cuts.chi2ndf_cut:
            return False

        # Cherenkov response and minimum-ionizing rejection
        if inputs.nphe_htcc < cuts.htcc_nphe_min:
            return False
        if inputs.energy.pcal < cuts.pcal_energy_min:
            return False

        # Sampling fraction within the calibrated band of the sector
        if not 1 <= inputs.sector <= NSECTORS or inputs.momentum <= 0:
            return False

        low, high = self.calibration.band(
            inputs.sector, inputs.momentum, cuts.sf_nsigma
        )
        sampling_fraction = inputs.energy.total / inputs.momentum

        return low <= sampling_fraction <= high

    def classify(self, inputs, allow_trigger=False):
        """Assigns the final identity of a candidate.

        Parameters
        ----------
        inputs : PidInputs
            Classification inputs of the candidate
        allow_trigger : bool, default False
            Whether an electron may be flagged as the trigger of the event

        Returns
        -------
        Classification
            Assigned identity
        """
        if self.is_electron(inputs):
            hyp = self.pid_table[ELEC_PID]
            return Classification(
                hyp.pid, hyp.charge, hyp.mass, is_electron=True,
                is_trigger=allow_trigger,
            )

        # Candidates which the event builder could not identify keep their
        # measured charge
        if inputs.pid == UNIDENTIFIED_PID:
            return Classification(UNIDENTIFIED_PID, inputs.charge, 0.0)

        hyp = self.pid_table[inputs.pid]

        return Classification(hyp.pid, hyp.charge, hyp.mass)

    def accepts(self, particle):
        """Applies the geometric acceptance, if configured.

        Parameters
        ----------
        particle : Particle
            Particle candidate

        Returns
        -------
        bool
            `True` if the particle passes the cut or no cut is configured
        """
        if self.geometric_cut is None:
            return True

        return self.geometric_cut.passes(particle)
