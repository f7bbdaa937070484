"""Module with the table of particle identity hypotheses.

The table is an owned, immutable mapping from integer PDG code to the charge,
mass and name of the corresponding species.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from .errors import UnsupportedPid
from .globals import (
    DEUT_MASS,
    ELEC_MASS,
    ETA_MASS,
    KAON_MASS,
    KZERO_MASS,
    MUON_MASS,
    NEUT_MASS,
    OMEGA_MASS,
    PHOT_MASS,
    PION_MASS,
    PIZERO_MASS,
    PROT_MASS,
)

__all__ = ["PidHypothesis", "PidTable"]


@dataclass(frozen=True)
class PidHypothesis:
    """Properties of one particle species.

    Attributes
    ----------
    pid : int
        PDG code
    charge : int
        Charge in units of the electron charge
    mass : float
        Mass in GeV
    name : str
        Human-readable name
    """

    pid: int
    charge: int
    mass: float
    name: str


# Species which may be assigned to a reconstructed particle
DEFAULT_HYPOTHESES = (
    PidHypothesis(-2212, -1, PROT_MASS, "antiproton"),
    PidHypothesis(-321, -1, KAON_MASS, "kaon-"),
    PidHypothesis(-211, -1, PION_MASS, "pi-"),
    PidHypothesis(-13, 1, MUON_MASS, "muon+"),
    PidHypothesis(-11, 1, ELEC_MASS, "positron"),
    PidHypothesis(11, -1, ELEC_MASS, "electron"),
    PidHypothesis(13, -1, MUON_MASS, "muon-"),
    PidHypothesis(22, 0, PHOT_MASS, "photon"),
    PidHypothesis(45, 1, DEUT_MASS, "deuteron"),
    PidHypothesis(111, 0, PIZERO_MASS, "pi0"),
    PidHypothesis(130, 0, KZERO_MASS, "K0 long"),
    PidHypothesis(211, 1, PION_MASS, "pi+"),
    PidHypothesis(221, 0, ETA_MASS, "eta"),
    PidHypothesis(223, 0, OMEGA_MASS, "omega"),
    PidHypothesis(310, 0, KZERO_MASS, "K0 short"),
    PidHypothesis(321, 1, KAON_MASS, "kaon+"),
    PidHypothesis(2112, 0, NEUT_MASS, "neutron"),
    PidHypothesis(2212, 1, PROT_MASS, "proton"),
)


class PidTable(Mapping):
    """Immutable mapping from PDG code to :class:`PidHypothesis`."""

    def __init__(self, hypotheses):
        """Store the hypotheses.

        Parameters
        ----------
        hypotheses : Iterable[PidHypothesis]
            Particle species to register
        """
        table = {}
        for hyp in hypotheses:
            if hyp.pid in table:
                raise ValueError(f"PID {hyp.pid} registered twice.")
            table[int(hyp.pid)] = hyp

        self._table = MappingProxyType(table)

    @classmethod
    def default(cls):
        """Builds the table of all supported species.

        Returns
        -------
        PidTable
            Default hypothesis table
        """
        return cls(DEFAULT_HYPOTHESES)

    def __getitem__(self, pid):
        try:
            return self._table[int(pid)]
        except KeyError as err:
            raise UnsupportedPid(f"pid {pid}") from err

    def __contains__(self, pid):
        return int(pid) in self._table

    def __iter__(self):
        return iter(self._table)

    def __len__(self):
        return len(self._table)

    def by_charge(self, charge):
        """Returns the PDG codes of all species of a given charge.

        Parameters
        ----------
        charge : int
            Charge of the species to look for

        Returns
        -------
        List[int]
            Sorted list of PDG codes
        """
        return sorted(k for k, v in self._table.items() if v.charge == charge)
