"""Module with the flat output record produced for each accepted particle."""

from dataclasses import dataclass, fields

import numpy as np

from .base import DataBase

__all__ = ["OutputRecord", "OUTPUT_VARS", "OUTPUT_LABELS"]


@dataclass(eq=False)
class OutputRecord(DataBase):
    """One accepted particle in one event.

    The attribute order is the column order of the output ntuple.

    Attributes
    ----------
    run_no : float
        Run number
    event_no : float
        Event number within the input file
    beam_energy : float
        Beam energy in GeV
    pid : float
        PDG code assigned to the particle
    charge : float
        Charge of the particle
    status : float
        Event builder status of the particle
    mass : float
        Mass assigned to the particle in GeV
    vx, vy, vz : float
        Vertex position in cm
    px, py, pz : float
        Momentum components in GeV
    p : float
        Momentum magnitude in GeV
    theta : float
        Polar angle in rad
    phi : float
        Azimuthal angle in rad
    beta : float
        Particle velocity
    chi2 : float
        Track fit chi2
    ndf : float
        Track fit number of degrees of freedom
    e_pcal, e_ecin, e_ecou : float
        Energy deposited in each calorimeter layer in GeV
    e_total : float
        Total energy deposited in the calorimeters in GeV
    dtof : float
        Time of flight difference with the trigger electron in ns
    nphe_ltcc, nphe_htcc : float
        Number of photoelectrons in each Cherenkov counter
    q2 : float
        Virtuality of the exchanged photon in GeV^2
    nu : float
        Energy transfer in GeV
    xb : float
        Bjorken x
    yb : float
        Bjorken y
    w2 : float
        Squared invariant mass of the hadronic final state in GeV^2
    zh : float
        Energy fraction carried by the hadron
    pt2 : float
        Squared hadron momentum transverse to the virtual photon in GeV^2
    pl2 : float
        Squared hadron momentum along the virtual photon in GeV^2
    phipq : float
        Angle between the leptonic and hadronic planes in rad
    thetapq : float
        Angle between the hadron and the virtual photon in rad
    """

    run_no: float = 0.0
    event_no: float = 0.0
    beam_energy: float = 0.0
    pid: float = 0.0
    charge: float = 0.0
    status: float = 0.0
    mass: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    vz: float = 0.0
    px: float = 0.0
    py: float = 0.0
    pz: float = 0.0
    p: float = 0.0
    theta: float = 0.0
    phi: float = 0.0
    beta: float = 0.0
    chi2: float = 0.0
    ndf: float = 0.0
    e_pcal: float = 0.0
    e_ecin: float = 0.0
    e_ecou: float = 0.0
    e_total: float = 0.0
    dtof: float = 0.0
    nphe_ltcc: float = 0.0
    nphe_htcc: float = 0.0
    q2: float = 0.0
    nu: float = 0.0
    xb: float = 0.0
    yb: float = 0.0
    w2: float = 0.0
    zh: float = 0.0
    pt2: float = 0.0
    pl2: float = 0.0
    phipq: float = 0.0
    thetapq: float = 0.0

    def as_array(self):
        """Returns the record as a flat array, in column order.

        Returns
        -------
        np.ndarray
            (36) Values of the record
        """
        return np.array([getattr(self, k) for k in OUTPUT_VARS], dtype=np.float32)


# Column names, in order
OUTPUT_VARS = tuple(f.name for f in fields(OutputRecord))

# Column titles with units, in order
OUTPUT_LABELS = (
    "N_{run}", "N_{event}", "E_{beam}", "pid", "charge (e)", "status",
    "mass (GeV)", "v_{x} (cm)", "v_{y} (cm)", "v_{z} (cm)", "p_{x} (GeV)",
    "p_{y} (GeV)", "p_{z} (GeV)", "p (GeV)", "#theta (rad)", "#phi (rad)",
    "#beta", "#chi^{2}", "NDF", "E_{PCAL} (GeV)", "E_{ECIN} (GeV)",
    "E_{ECOU} (GeV)", "E_{total} (GeV)", "#Delta_{TOF} (ns)", "Nphe_{LTCC}",
    "Nphe_{HTCC}", "Q^{2} (GeV^{2})", "#nu (GeV)", "x_{bjorken}",
    "y_{bjorken}", "W^{2} (GeV^{2})", "z_{h}", "p_{T}^{2} (GeV^{2})",
    "p_{L}^{2} (GeV^{2})", "#phi_{PQ} (rad)", "#theta_{PQ} (rad)",
)
