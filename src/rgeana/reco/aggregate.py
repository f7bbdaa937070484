"""Per-particle aggregation of detector measurements.

Three quantities are aggregated for each particle index:

- Energy deposited in each layer of the electromagnetic calorimeter
- Number of photoelectrons in each Cherenkov counter
- Time of flight, taken from the most precise detector which saw the particle
"""

import math
from dataclasses import dataclass
from typing import Callable, NamedTuple

import numpy as np

from rgeana.utils.errors import InvalidCalorimeterLayer, InvalidDetectorId
from rgeana.utils.globals import (
    CALORIMETER_BANK,
    ECIN_LYR,
    ECOU_LYR,
    FTOF1A_LYR,
    FTOF1B_LYR,
    FTOF2_LYR,
    FTOF_ID,
    HTCC_ID,
    LTCC_ID,
    NO_TIMING,
    PCAL_LYR,
    SCINTILLATOR_BANK,
)

__all__ = [
    "CalorimeterEnergy",
    "Photoelectrons",
    "TimingLevel",
    "DetectorAggregator",
    "DEFAULT_TIMING_LEVELS",
]


class CalorimeterEnergy(NamedTuple):
    """Energy deposited by one particle in each calorimeter layer (GeV)."""

    pcal: float = 0.0
    ecin: float = 0.0
    ecou: float = 0.0

    @property
    def total(self):
        """Total energy deposited in the calorimeters."""
        return math.fsum(self)


class Photoelectrons(NamedTuple):
    """Number of photoelectrons produced by one particle in each counter."""

    htcc: float = 0.0
    ltcc: float = 0.0


@dataclass(frozen=True)
class TimingLevel:
    """One level of the time-of-flight precedence list.

    Attributes
    ----------
    name : str
        Name of the detector layer (e.g. `FTOF1B`)
    bank : str
        Name of the bank which holds the hits of this level
    predicate : Callable[[BankContainer], np.ndarray]
        Function which returns the (N) boolean mask of bank rows which belong
        to this level
    accessor : Callable[[BankContainer, int], float]
        Function which returns the time measured by one row of the bank
    """

    name: str
    bank: str
    predicate: Callable
    accessor: Callable

    def match(self, bank, pindex):
        """Returns the first row of this level which belongs to a particle.

        Parameters
        ----------
        bank : BankContainer
            Bank which holds the hits of this level
        pindex : int
            Particle index

        Returns
        -------
        int
            Row index, or `None` if this level has no hit for the particle
        """
        mask = self.predicate(bank) & (bank.column("pindex") == pindex)
        rows = np.flatnonzero(mask)
        if not len(rows):
            return None

        return int(rows[0])


def _hit_time(bank, row):
    """Reads the time of one hit."""
    return bank.get_double("time", row)


def _ftof_layer(layer):
    """Selects the scintillator hits of one FTOF layer."""

    def predicate(bank):
        return (bank.column("detector") == FTOF_ID) & (bank.column("layer") == layer)

    return predicate


def _calorimeter_layer(layer):
    """Selects the calorimeter hits of one layer."""

    def predicate(bank):
        return bank.column("layer") == layer

    return predicate


# Time-of-flight sources, in order of decreasing precision
DEFAULT_TIMING_LEVELS = (
    TimingLevel("FTOF1B", SCINTILLATOR_BANK, _ftof_layer(FTOF1B_LYR), _hit_time),
    TimingLevel("FTOF1A", SCINTILLATOR_BANK, _ftof_layer(FTOF1A_LYR), _hit_time),
    TimingLevel("FTOF2", SCINTILLATOR_BANK, _ftof_layer(FTOF2_LYR), _hit_time),
    TimingLevel("PCAL", CALORIMETER_BANK, _calorimeter_layer(PCAL_LYR), _hit_time),
    TimingLevel("ECIN", CALORIMETER_BANK, _calorimeter_layer(ECIN_LYR), _hit_time),
    TimingLevel("ECOU", CALORIMETER_BANK, _calorimeter_layer(ECOU_LYR), _hit_time),
)


class DetectorAggregator:
    """Aggregates the measurements of the detector banks for one particle.

    Sums are computed with :func:`math.fsum`, which makes them independent
    of the order in which the hits are stored.
    """

    # Map from calorimeter layer ID to energy bucket
    _calorimeter_layers = {PCAL_LYR: "pcal", ECIN_LYR: "ecin", ECOU_LYR: "ecou"}

    # Map from Cherenkov detector ID to photoelectron bucket
    _cherenkov_ids = {HTCC_ID: "htcc", LTCC_ID: "ltcc"}

    def __init__(self, timing_levels=DEFAULT_TIMING_LEVELS):
        """Store the time-of-flight precedence list.

        Parameters
        ----------
        timing_levels : Sequence[TimingLevel], optional
            Time-of-flight sources, in order of decreasing precision
        """
        self.timing_levels = tuple(timing_levels)

    def deposited_energy(self, calorimeter, pindex):
        """Sums the energy deposited by one particle in each calorimeter layer.

        Parameters
        ----------
        calorimeter : BankContainer
            `REC::Calorimeter` bank of the current event
        pindex : int
            Particle index

        Returns
        -------
        CalorimeterEnergy
            Energy deposited in PCAL, ECIN and ECOU
        """
        hits = {k: [] for k in self._calorimeter_layers.values()}
        for row in calorimeter.rows_matching("pindex", pindex):
            layer = calorimeter.get_int("layer", row)
            if layer not in self._calorimeter_layers:
                raise InvalidCalorimeterLayer(f"layer {layer} in row {row}")

            hits[self._calorimeter_layers[layer]].append(
                calorimeter.get_double("energy", row)
            )

        return CalorimeterEnergy(**{k: math.fsum(v) for k, v in hits.items()})

    def photoelectrons(self, cherenkov, pindex):
        """Sums the photoelectrons produced by one particle in each counter.

        Parameters
        ----------
        cherenkov : BankContainer
            `REC::Cherenkov` bank of the current event
        pindex : int
            Particle index

        Returns
        -------
        Photoelectrons
            Number of photoelectrons in HTCC and LTCC
        """
        hits = {k: [] for k in self._cherenkov_ids.values()}
        for row in cherenkov.rows_matching("pindex", pindex):
            detector = cherenkov.get_int("detector", row)
            if detector not in self._cherenkov_ids:
                raise InvalidDetectorId(f"detector {detector} in row {row}")

            hits[self._cherenkov_ids[detector]].append(
                cherenkov.get_double("nphe", row)
            )

        return Photoelectrons(**{k: math.fsum(v) for k, v in hits.items()})

    def time_of_flight(self, banks, pindex):
        """Returns the most precise time of flight available for a particle.

        The precedence levels are evaluated in order and the first level with
        a hit for this particle index provides the time. Measurements from
        different levels are never combined.

        Parameters
        ----------
        banks : Dict[str, BankContainer]
            Banks of the current event, keyed by name
        pindex : int
            Particle index

        Returns
        -------
        float
            Time of flight in ns, or `NO_TIMING` if no level has a hit
        """
        for level in self.timing_levels:
            bank = banks[level.bank]
            row = level.match(bank, pindex)
            if row is not None:
                return level.accessor(bank, row)

        return NO_TIMING
