"""Deep inelastic scattering kinematics.

The inclusive (DIS) variables are computed from the beam energy and the
scattered (trigger) electron. The semi-inclusive (SIDIS) variables describe
one hadron with respect to the virtual photon, defined as the difference
between the beam and the scattered electron momenta. The azimuthal angle
between the leptonic and hadronic planes follows the Trento convention.
"""

import math
from typing import NamedTuple

import numpy as np

from rgeana.utils.errors import AngleOutOfRange
from rgeana.utils.globals import PROT_MASS

__all__ = ["DISVariables", "SIDISVariables", "dis_variables", "sidis_variables"]


class DISVariables(NamedTuple):
    """Inclusive kinematics of one event."""

    q2: float
    nu: float
    xb: float
    yb: float
    w2: float


class SIDISVariables(NamedTuple):
    """Kinematics of one hadron with respect to the virtual photon."""

    zh: float
    pt2: float
    pl2: float
    phipq: float
    thetapq: float


def to_rad(angle):
    """Converts an angle from degrees to radians.

    Parameters
    ----------
    angle : float
        Angle in degrees, between -180 and 180

    Returns
    -------
    float
        Angle in radians
    """
    if not -180.0 <= angle <= 180.0:
        raise AngleOutOfRange(f"{angle} deg")

    return math.radians(angle)


def _ratio(num, den):
    """Divides two numbers, NaN if the denominator vanishes."""
    return num / den if den != 0 else math.nan


def _angle(u, v):
    """Angle between two vectors, 0 if either one vanishes."""
    norm = np.linalg.norm(u) * np.linalg.norm(v)
    if norm == 0:
        return 0.0

    return float(np.arccos(np.clip(np.dot(u, v) / norm, -1.0, 1.0)))


def beam_momentum(beam_energy):
    """Momentum of the beam electron, along the z axis."""
    return np.array([0.0, 0.0, beam_energy])


def virtual_photon(beam_energy, electron):
    """Three-momentum of the virtual photon.

    Parameters
    ----------
    beam_energy : float
        Beam energy in GeV
    electron : Particle
        Scattered electron

    Returns
    -------
    np.ndarray
        (3) Momentum transferred by the electron
    """
    return beam_momentum(beam_energy) - electron.momentum


def dis_variables(beam_energy, electron, target_mass=PROT_MASS):
    """Computes the inclusive kinematics of an event.

    Parameters
    ----------
    beam_energy : float
        Beam energy in GeV
    electron : Particle
        Scattered (trigger) electron
    target_mass : float, default PROT_MASS
        Mass of the struck nucleon in GeV

    Returns
    -------
    DISVariables
        Q2, nu, Bjorken x, Bjorken y and W2
    """
    e_out = electron.energy
    q2 = 4 * beam_energy * e_out * math.sin(electron.theta / 2) ** 2
    nu = beam_energy - e_out
    xb = _ratio(q2, 2 * target_mass * nu)
    yb = _ratio(nu, beam_energy)
    w2 = target_mass**2 + 2 * target_mass * nu - q2

    return DISVariables(q2, nu, xb, yb, w2)


def sidis_variables(beam_energy, electron, hadron):
    """Computes the kinematics of a hadron with respect to the virtual photon.

    Parameters
    ----------
    beam_energy : float
        Beam energy in GeV
    electron : Particle
        Scattered (trigger) electron
    hadron : Particle
        Particle of interest

    Returns
    -------
    SIDISVariables
        Energy fraction, transverse and longitudinal squared momenta, and
        the azimuthal and polar angles with respect to the virtual photon
    """
    nu = beam_energy - electron.energy
    q = virtual_photon(beam_energy, electron)
    p_h = hadron.momentum

    # Energy fraction
    zh = _ratio(hadron.energy, nu)

    # Momentum decomposition along the virtual photon direction
    q_norm = np.linalg.norm(q)
    if q_norm > 0:
        pl2 = float(np.dot(p_h, q) / q_norm) ** 2
    else:
        pl2 = 0.0
    pt2 = max(float(np.dot(p_h, p_h)) - pl2, 0.0)

    # Angle between the leptonic and the hadronic planes
    lepton_normal = np.cross(q, beam_momentum(beam_energy))
    hadron_normal = np.cross(q, p_h)
    phipq = _angle(lepton_normal, hadron_normal)
    if np.dot(lepton_normal, p_h) < 0:
        phipq = -phipq

    thetapq = _angle(p_h, q)

    return SIDISVariables(zh, pt2, pl2, phipq, thetapq)
