"""Driver class.

Takes care of everything in one centralized place:
- Run information and calibration loading
- Data loading
- Per-event reconstruction
- Writing output to file
- End-of-run reporting
"""

import os

import yaml
from tqdm import tqdm

from .calib import CalibrationParams, sf_params_path
from .config import PipelineConfig
from .data import RunInfo
from .data.run_info import get_beam_energy, run_from_filename
from .io import reader_factory, writer_extension, writer_factory
from .reco import EventPipeline
from .utils.errors import InvalidEventCount, NoFMTBank
from .utils.globals import FMT_BANK
from .utils.logger import logger
from .utils.stopwatch import StopwatchManager
from .version import __version__

__all__ = ["Driver", "clamp_event_count", "output_file_name"]


def clamp_event_count(n_events, num_entries):
    """Clamps the requested number of events against the available entries.

    Parameters
    ----------
    n_events : int
        Requested number of events. -1 means all the entries.
    num_entries : int
        Number of entries in the input

    Returns
    -------
    int
        Number of events to process
    """
    if n_events == -1 or n_events > num_entries:
        return num_entries
    if n_events < 1:
        raise InvalidEventCount(f"got {n_events}")

    return n_events


def output_file_name(work_dir, run, tag, ext):
    """Builds the path to the output file of a run.

    Parameters
    ----------
    work_dir : str
        Directory where the output file is stored
    run : int
        Run number
    tag : str
        Tag of the tracking requirement (`dc` or `fmt<n>`)
    ext : str
        File extension

    Returns
    -------
    str
        Path to the output file
    """
    return os.path.join(work_dir, f"ntuples_{tag}_{run:06d}.{ext}")


class Driver:
    """Central driver of the ntuple production.

    Processes global configuration and runs the appropriate modules:
      1. Derive the run information and load the calibration
      2. Load the events one by one, in input order
      3. Reconstruct and identify the particles of each event
      4. Write the output records to file

    It takes a configuration dictionary of the form:

    .. code-block:: yaml

        base:
          <Base driver configuration>
        io:
          <Input/output configuration>
        calib:
          <Location of the sampling fraction files>
        pipeline:
          <Tracking requirement, geometric cut and electron ID cuts>
        run:
          <Run number and beam energy, derived from the input if absent>
    """

    def __init__(self, cfg, reader=None, writer=None, progress_callback=None):
        """Initializes the class attributes.

        Parameters
        ----------
        cfg : dict
            Global configuration dictionary
        reader : object, optional
            Reader to use instead of the one described in the configuration
        writer : object, optional
            Writer to use instead of the one described in the configuration
        progress_callback : Callable[[int, int], None], optional
            Function called every `progress_step` events with the number of
            events processed and the total. Defaults to a progress bar, unless
            the driver runs in debug mode.
        """
        # Initialize the timers
        self.watch = StopwatchManager()
        self.watch.initialize(["iteration", "read", "process", "write"])

        # Process the full configuration dictionary and store it
        base, io, calib, pipeline, run = self.process_config(**cfg)

        # Initialize the base driver configuration parameters
        self.initialize_base(**base, progress_callback=progress_callback)

        # Validate the pipeline configuration before touching the input
        self.pipeline_cfg = PipelineConfig.from_dict(pipeline)

        # Initialize the input
        self.reader = reader
        if self.reader is None:
            self.reader = reader_factory(io["reader"])
        self.n_events = clamp_event_count(self.n_events, len(self.reader))

        # Derive the run information, load the calibration
        self.run_info = self.initialize_run(**run)
        self.calibration = self.initialize_calib(**calib)

        # The tracking requirement needs the FMT tracks
        if self.pipeline_cfg.fmt_nlayers > 0 and not self.reader.has_bank(FMT_BANK):
            raise NoFMTBank()

        # Initialize the output
        self.writer = writer
        if self.writer is None:
            self.writer = self.initialize_writer(io["writer"])

        # Initialize the reconstruction pipeline
        self.pipeline = EventPipeline(
            self.run_info,
            self.calibration,
            registry=self.reader.registry,
            fmt_nlayers=self.pipeline_cfg.fmt_nlayers,
            fmt_cut=self.pipeline_cfg.fmt_cut,
            cuts=self.pipeline_cfg.cuts,
        )

    def process_config(self, io, base=None, calib=None, pipeline=None, run=None):
        """Reads the configuration and dumps it to the logger.

        Parameters
        ----------
        io : dict
            I/O configuration dictionary
        base : dict, optional
            Base driver configuration dictionary
        calib : dict, optional
            Calibration configuration dictionary
        pipeline : dict, optional
            Pipeline configuration dictionary
        run : dict, optional
            Run configuration dictionary

        Returns
        -------
        dict
            Processed configuration
        """
        base = base if base is not None else {}
        calib = calib if calib is not None else {}
        pipeline = pipeline if pipeline is not None else {}
        run = run if run is not None else {}

        # Set the verbosity of the logger
        verbosity = "debug" if base.get("debug", False) else base.get("verbosity", "info")
        logger.setLevel(verbosity.upper())

        # Rebuild global configuration dictionary
        self.cfg = {
            "base": base,
            "io": io,
            "calib": calib,
            "pipeline": pipeline,
            "run": run,
        }

        # Log the configuration, without the in-memory events
        logger.info("Release version: %s\n", __version__)
        dump_cfg = {k: v for k, v in self.cfg.items() if k != "io"}
        dump_cfg["io"] = {
            k: {kk: vv for kk, vv in v.items() if kk != "events"}
            if isinstance(v, dict)
            else v
            for k, v in io.items()
        }
        logger.debug(yaml.dump(dump_cfg, default_flow_style=None, sort_keys=False))

        return base, io, calib, pipeline, run

    def initialize_base(
        self,
        verbosity="info",
        n_events=-1,
        progress_step=1000,
        debug=False,
        work_dir="root_io",
        progress_callback=None,
    ):
        """Initialize the base driver parameters.

        Parameters
        ----------
        verbosity : str, default 'info'
            Verbosity level of the logger
        n_events : int, default -1
            Number of events to process. -1 means all the entries.
        progress_step : int, default 1000
            Number of events between two progress reports
        debug : bool, default False
            Debug mode: verbose logging and no progress bar
        work_dir : str, default 'root_io'
            Directory where the output file is stored
        progress_callback : Callable[[int, int], None], optional
            Function called every `progress_step` events
        """
        assert progress_step > 0, "The `progress_step` must be strictly positive."

        self.n_events = n_events
        self.progress_step = progress_step
        self.debug = debug
        self.work_dir = work_dir
        self.progress_callback = progress_callback

    def initialize_run(
        self, run_number=None, beam_energy=None, mc_beam_energy=None
    ):
        """Derive the run information.

        The run number is extracted from the name of the input file, unless it
        is provided explicitly. The beam energy is looked up from the run
        number, unless it is provided explicitly.

        Parameters
        ----------
        run_number : int, optional
            Run number
        beam_energy : float, optional
            Beam energy in GeV
        mc_beam_energy : float, optional
            Beam energy of simulated runs in GeV

        Returns
        -------
        RunInfo
            Run information
        """
        if run_number is None:
            file_paths = getattr(self.reader, "file_paths", None)
            if not file_paths:
                raise ValueError(
                    "The run number must be provided under `run.run_number` "
                    "when the input is not read from a file."
                )
            run_number = run_from_filename(file_paths[0])

        if beam_energy is None:
            beam_energy = get_beam_energy(run_number, mc_beam_energy=mc_beam_energy)

        run_info = RunInfo(run=int(run_number), beam_energy=float(beam_energy))

        logger.info(
            "Run number: %d, beam energy: %.4f GeV%s",
            run_info.run,
            run_info.beam_energy,
            " (simulation)" if run_info.is_simulation else "",
        )

        return run_info

    def initialize_calib(self, data_dir="data", file_name=None):
        """Load the sampling fraction calibration of the run.

        Parameters
        ----------
        data_dir : str, default 'data'
            Directory which contains the sampling fraction files
        file_name : str, optional
            Name of the sampling fraction file, overrides the default naming

        Returns
        -------
        CalibrationParams
            Sampling fraction calibration
        """
        path = sf_params_path(data_dir, self.run_info.run, file_name)

        return CalibrationParams.from_file(path)

    def initialize_writer(self, writer_cfg):
        """Initialize the output writer.

        If no output file name is provided, it is derived from the run number
        and the tracking requirement, inside the work directory.

        Parameters
        ----------
        writer_cfg : Union[str, dict]
            Writer configuration

        Returns
        -------
        object
            Writer object
        """
        if isinstance(writer_cfg, str):
            writer_cfg = {"name": writer_cfg}

        writer_cfg = dict(writer_cfg)
        if writer_cfg.get("file_name") is None:
            ext = writer_extension(writer_cfg)
            os.makedirs(self.work_dir, exist_ok=True)
            writer_cfg["file_name"] = output_file_name(
                self.work_dir, self.run_info.run, self.pipeline_cfg.output_tag, ext
            )

        return writer_factory(writer_cfg)

    def run(self):
        """Loop over the requested number of events, process them.

        Returns
        -------
        PipelineCounters
            Diagnostic counters of the run
        """
        logger.info("Processing %d events.", self.n_events)

        # Prepare the progress report
        progress_bar, callback = None, self.progress_callback
        if callback is None and not self.debug:
            progress_bar = tqdm(total=self.n_events, unit="event")

            def callback(done, total):
                progress_bar.update(done - progress_bar.n)

        try:
            for event in range(self.n_events):
                self.process(event)
                done = event + 1
                if callback is not None and (
                    done % self.progress_step == 0 or done == self.n_events
                ):
                    callback(done, self.n_events)

        except BaseException:
            # No partial output is valid once the run is aborted
            self.writer.close()
            if os.path.isfile(self.writer.file_name):
                os.remove(self.writer.file_name)
            raise

        finally:
            if progress_bar is not None:
                progress_bar.close()

        self.writer.close()

        # Print number of particles found to detect errors early
        counters = self.pipeline.counters
        logger.info("%s\n", counters.summary())
        logger.info("Wrote %d records to %s", counters.records, self.writer.file_name)
        for key, watch in self.watch.items():
            logger.debug(
                "Time spent in %s: %.3f s (wall), %.3f s (cpu)",
                key,
                watch.time_sum.wall,
                watch.time_sum.cpu,
            )

        return counters

    def process(self, event):
        """Process one event.

        Parameters
        ----------
        event : int
            Index of the event in the input

        Returns
        -------
        List[OutputRecord]
            Output records of the event
        """
        self.watch.start("iteration")

        self.watch.start("read")
        source = self.reader.read_event(event)
        self.watch.stop("read")

        self.watch.start("process")
        records = self.pipeline.process_event(source, event)
        self.watch.stop("process")

        self.watch.start("write")
        for record in records:
            self.writer.append(record)
        self.watch.stop("write")

        self.watch.stop("iteration")

        return records
