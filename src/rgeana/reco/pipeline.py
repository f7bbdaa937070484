"""Per-event reconstruction pipeline.

Each event goes through the following states:

1. The banks are filled from the row source
2. The track rows are scanned in stored order for the trigger electron, i.e.
   the first valid candidate which is classified as an electron and passes
   the geometric acceptance. Events without one are skipped.
3. The trigger electron is emitted, followed by every other valid candidate
   which passes the geometric acceptance, in stored order.
"""

from dataclasses import dataclass
from typing import NamedTuple

from rgeana.data import BankContainer, OutputRecord, Particle, SchemaRegistry
from rgeana.utils.errors import NoFMTBank
from rgeana.utils.globals import (
    CALORIMETER_BANK,
    CHERENKOV_BANK,
    FMT_BANK,
    NO_TIMING,
    PARTICLE_BANK,
    PIONM_PID,
    PIONP_PID,
    SCINTILLATOR_BANK,
    TRACK_BANK,
)
from rgeana.utils.logger import logger
from rgeana.utils.pid import PidTable

from .aggregate import CalorimeterEnergy, DetectorAggregator, Photoelectrons
from .builder import ParticleBuilder
from .kinematics import dis_variables, sidis_variables
from .pid import GeometricCut, PidClassifier, PidInputs

__all__ = ["EventPipeline", "PipelineCounters", "CORE_BANKS"]

# Banks read for every event
CORE_BANKS = (
    PARTICLE_BANK,
    TRACK_BANK,
    CALORIMETER_BANK,
    CHERENKOV_BANK,
    SCINTILLATOR_BANK,
)


@dataclass
class PipelineCounters:
    """Diagnostic counters, cumulative over a run.

    Attributes
    ----------
    trigger : int
        Number of trigger electrons found
    pion_plus : int
        Number of positive pions emitted
    pion_minus : int
        Number of negative pions emitted
    events_read : int
        Number of events processed
    events_skipped : int
        Number of events without the required banks or a trigger electron
    records : int
        Number of output records emitted
    """

    trigger: int = 0
    pion_plus: int = 0
    pion_minus: int = 0
    events_read: int = 0
    events_skipped: int = 0
    records: int = 0

    def summary(self):
        """Returns the end-of-run report of the particle counters."""
        return (
            f"e-  found: {self.trigger}\n"
            f"pi+ found: {self.pion_plus}\n"
            f"pi- found: {self.pion_minus}"
        )


class Candidate(NamedTuple):
    """Classified particle and the detector information it was built from."""

    particle: Particle
    status: int
    chi2: float
    ndf: int
    energy: CalorimeterEnergy
    nphe: Photoelectrons
    tof: float


class EventPipeline:
    """Turns the banks of one event into output records.

    The pipeline owns one :class:`BankContainer` per bank kind, reused from
    one event to the next.
    """

    def __init__(
        self,
        run_info,
        calibration,
        registry=None,
        pid_table=None,
        fmt_nlayers=0,
        fmt_cut=False,
        cuts=None,
    ):
        """Initialize the reconstruction stages.

        Parameters
        ----------
        run_info : RunInfo
            Run number and beam energy
        calibration : CalibrationParams
            Sampling fraction calibration of the run
        registry : SchemaRegistry, optional
            Registry of bank schemas. Defaults to the CLAS12 banks.
        pid_table : PidTable, optional
            Table of supported species. Defaults to all known species.
        fmt_nlayers : int, default 0
            Minimum number of FMT layers a track must have hit (0 to disable)
        fmt_cut : bool, default False
            Whether to apply the FMT geometric acceptance
        cuts : ElectronCuts, optional
            Thresholds of the electron hypothesis
        """
        self.run_info = run_info
        registry = registry if registry is not None else SchemaRegistry.default()
        pid_table = pid_table if pid_table is not None else PidTable.default()

        # Initialize the stages
        self.builder = ParticleBuilder(fmt_nlayers)
        self.aggregator = DetectorAggregator()
        self.classifier = PidClassifier(
            pid_table, calibration, cuts, GeometricCut() if fmt_cut else None
        )

        # Initialize one container per bank
        names = CORE_BANKS + ((FMT_BANK,) if self.builder.use_fmt else ())
        self.banks = {name: BankContainer(name, registry) for name in names}

        self.counters = PipelineCounters()

    def fill(self, source):
        """Loads the banks of the current event.

        Parameters
        ----------
        source : object
            Row source of the current event
        """
        for name, bank in self.banks.items():
            if name == FMT_BANK and not source.has_bank(FMT_BANK):
                raise NoFMTBank()
            bank.fill(source)

    def process_event(self, source, event_no):
        """Processes one event.

        Parameters
        ----------
        source : object
            Row source of the current event
        event_no : int
            Event number within the input

        Returns
        -------
        List[OutputRecord]
            Trigger electron record followed by one record per other
            accepted particle, empty if the event was skipped
        """
        self.fill(source)
        self.counters.events_read += 1

        # Skip events without the necessary banks
        particle, track = self.banks[PARTICLE_BANK], self.banks[TRACK_BANK]
        if particle.nrows == 0 or track.nrows == 0:
            logger.debug("Event %d has no particle or track, skipping.", event_no)
            self.counters.events_skipped += 1
            return []

        # Find the trigger electron
        trigger_row, trigger = self.find_trigger()
        if trigger is None:
            logger.debug("Event %d has no trigger electron, skipping.", event_no)
            self.counters.events_skipped += 1
            return []

        self.counters.trigger += 1
        records = [self.make_record(event_no, trigger, trigger)]

        # Process the other particles
        for row in range(track.nrows):
            if row == trigger_row:
                continue

            candidate = self.evaluate(row, allow_trigger=False)
            if candidate is None:
                continue

            records.append(self.make_record(event_no, candidate, trigger))
            if candidate.particle.pid == PIONP_PID:
                self.counters.pion_plus += 1
            elif candidate.particle.pid == PIONM_PID:
                self.counters.pion_minus += 1

        self.counters.records += len(records)

        return records

    def find_trigger(self):
        """Scans the track rows in stored order for the trigger electron.

        The first match is selected, not the best one.

        Returns
        -------
        int
            Track row of the trigger electron, `None` if not found
        Candidate
            Trigger electron candidate, `None` if not found
        """
        for row in range(self.banks[TRACK_BANK].nrows):
            candidate = self.evaluate(row, allow_trigger=True)
            if candidate is not None and candidate.particle.is_trigger:
                return row, candidate

        return None, None

    def evaluate(self, row, allow_trigger=False):
        """Builds, filters, aggregates and classifies one track row.

        Parameters
        ----------
        row : int
            Row of the track bank
        allow_trigger : bool, default False
            Whether an electron may be flagged as the trigger of the event

        Returns
        -------
        Candidate
            Classified candidate, `None` if it is invalid or outside of the
            geometric acceptance
        """
        banks = self.banks
        track = banks[TRACK_BANK]
        particle = self.builder.build(
            banks[PARTICLE_BANK], track, row, banks.get(FMT_BANK)
        )
        if not particle.is_valid or not self.classifier.accepts(particle):
            return None

        # Aggregate the detector information
        pindex = particle.pindex
        energy = self.aggregator.deposited_energy(banks[CALORIMETER_BANK], pindex)
        nphe = self.aggregator.photoelectrons(banks[CHERENKOV_BANK], pindex)
        tof = self.aggregator.time_of_flight(banks, pindex)

        # Fetch the tracking information
        status = banks[PARTICLE_BANK].get_int("status", pindex)
        chi2 = track.get_double("chi2", row)
        ndf = track.get_int("NDF", row)

        # Assign the identity
        inputs = PidInputs(
            pid=particle.pid,
            charge=particle.charge,
            status=status,
            momentum=particle.p,
            sector=track.get_int("sector", row),
            chi2=chi2,
            ndf=ndf,
            energy=energy,
            nphe_htcc=nphe.htcc,
        )
        self.classifier.classify(inputs, allow_trigger).apply(particle)

        return Candidate(particle, status, chi2, ndf, energy, nphe, tof)

    def make_record(self, event_no, candidate, trigger):
        """Flattens a candidate into an output record.

        Parameters
        ----------
        event_no : int
            Event number within the input
        candidate : Candidate
            Particle to store
        trigger : Candidate
            Trigger electron of the event

        Returns
        -------
        OutputRecord
            Flat output record
        """
        part, electron = candidate.particle, trigger.particle
        beam_energy = self.run_info.beam_energy
        dis = dis_variables(beam_energy, electron)
        sidis = sidis_variables(beam_energy, electron, part)

        # Time of flight relative to the trigger electron
        if candidate.tof == NO_TIMING or trigger.tof == NO_TIMING:
            dtof = NO_TIMING
        else:
            dtof = candidate.tof - trigger.tof

        return OutputRecord(
            run_no=self.run_info.run,
            event_no=event_no,
            beam_energy=beam_energy,
            pid=part.pid,
            charge=part.charge,
            status=candidate.status,
            mass=part.mass,
            vx=part.vx,
            vy=part.vy,
            vz=part.vz,
            px=part.px,
            py=part.py,
            pz=part.pz,
            p=part.p,
            theta=part.theta,
            phi=part.phi,
            beta=part.beta,
            chi2=candidate.chi2,
            ndf=candidate.ndf,
            e_pcal=candidate.energy.pcal,
            e_ecin=candidate.energy.ecin,
            e_ecou=candidate.energy.ecou,
            e_total=candidate.energy.total,
            dtof=dtof,
            nphe_ltcc=candidate.nphe.ltcc,
            nphe_htcc=candidate.nphe.htcc,
            **dis._asdict(),
            **sidis._asdict(),
        )
