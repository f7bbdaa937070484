"""Module with a data class object which represents a candidate particle."""

from dataclasses import dataclass

import numpy as np

from .base import DataBase

__all__ = ["Particle"]


@dataclass(eq=False)
class Particle(DataBase):
    """Per-track particle candidate, built for the duration of one event.

    Attributes
    ----------
    pindex : int
        Row of the particle bank this candidate was built from
    track_row : int
        Row of the track bank this candidate was built from
    charge : int
        Charge of the particle in units of the electron charge
    mass : float
        Mass of the particle in GeV, assigned by the classification
    pid : int
        PDG code of the particle. Holds the event builder hypothesis until
        the classification assigns the final one.
    vertex : np.ndarray
        (3) Vertex position in cm
    momentum : np.ndarray
        (3) Momentum in GeV
    beta : float
        Velocity of the particle as measured by the event builder
    is_valid : bool
        Whether the candidate passed the matching and tracking requirements
    is_trigger : bool
        Whether this candidate is the trigger electron of the event
    fmt_confirmed : bool
        Whether the track was confirmed by enough FMT layers
    """

    pindex: int = -1
    track_row: int = -1
    charge: int = 0
    mass: float = 0.0
    pid: int = 0
    vertex: np.ndarray = None
    momentum: np.ndarray = None
    beta: float = 0.0
    is_valid: bool = False
    is_trigger: bool = False
    fmt_confirmed: bool = False

    _vec_attrs = ("vertex", "momentum")
    _bool_attrs = ("is_valid", "is_trigger", "fmt_confirmed")

    def __str__(self):
        """Human-readable string representation of the particle object.

        Returns
        -------
        str
            Basic information about the particle properties
        """
        return (
            f"Particle(pindex={self.pindex}, pid={self.pid}, "
            f"charge={self.charge}, p={self.p:.3f}, valid={self.is_valid}, "
            f"trigger={self.is_trigger})"
        )

    @classmethod
    def invalid(cls, pindex=-1, track_row=-1):
        """Builds a candidate which failed the matching requirements.

        Parameters
        ----------
        pindex : int, default -1
            Particle bank row, if known
        track_row : int, default -1
            Track bank row

        Returns
        -------
        Particle
            Invalid particle candidate
        """
        return cls(pindex=pindex, track_row=track_row, is_valid=False)

    @property
    def px(self):
        """Momentum along the x axis."""
        return float(self.momentum[0])

    @property
    def py(self):
        """Momentum along the y axis."""
        return float(self.momentum[1])

    @property
    def pz(self):
        """Momentum along the z axis."""
        return float(self.momentum[2])

    @property
    def vx(self):
        """Vertex position along the x axis."""
        return float(self.vertex[0])

    @property
    def vy(self):
        """Vertex position along the y axis."""
        return float(self.vertex[1])

    @property
    def vz(self):
        """Vertex position along the z axis."""
        return float(self.vertex[2])

    @property
    def p(self):
        """Momentum magnitude."""
        return float(np.linalg.norm(self.momentum))

    @property
    def theta(self):
        """Polar angle of the momentum with respect to the beam axis."""
        return float(np.arctan2(np.hypot(self.px, self.py), self.pz))

    @property
    def phi(self):
        """Azimuthal angle of the momentum."""
        return float(np.arctan2(self.py, self.px))

    @property
    def energy(self):
        """Energy of the particle given its assigned mass."""
        return float(np.sqrt(self.p**2 + self.mass**2))
