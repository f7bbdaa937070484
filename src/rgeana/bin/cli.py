#!/usr/bin/env python3
"""CLI entry point which turns one reconstructed file into an ntuple."""

import argparse
import sys
from typing import List, Optional

from rgeana.config import ConfigError, load_config_file
from rgeana.config.operations import apply_overrides
from rgeana.utils.errors import RecoError
from rgeana.utils.logger import logger
from rgeana.version import __version__


def main(
    infile: str,
    config: Optional[str],
    debug: bool,
    fmt_nlayers: Optional[int],
    fmt_cut: bool,
    n_events: Optional[int],
    work_dir: Optional[str],
    data_dir: Optional[str],
    output_format: Optional[str],
    config_overrides: Optional[List[str]],
):
    """Main driver of the ntuple production.

    Performs these basic functions:
    - Update the configuration with the command-line arguments
    - Run the driver on the input file

    Parameters
    ----------
    infile : str
        Path to the input file, formatted as `<text><run_no>.root`
    config : str, optional
        Path to the configuration file
    debug : bool
        Whether to activate the debug mode
    fmt_nlayers : int, optional
        Number of FMT layers a track must have hit
    fmt_cut : bool
        Whether to apply the FMT geometric acceptance
    n_events : int, optional
        Number of events to process
    work_dir : str, optional
        Directory where the output file is stored
    data_dir : str, optional
        Directory which contains the sampling fraction files
    output_format : str, optional
        Name of the output writer
    config_overrides : List[str], optional
        List of config overrides in the form "key.path=value"

    Returns
    -------
    PipelineCounters
        Diagnostic counters of the run
    """
    # Override the configuration with the command-line information. The
    # explicit `--set` overrides are applied last.
    overrides = []
    flag_mapping = {
        "base.debug": True if debug else None,
        "base.n_events": n_events,
        "base.work_dir": work_dir,
        "calib.data_dir": data_dir,
        "pipeline.fmt_nlayers": fmt_nlayers,
        "pipeline.fmt_cut": True if fmt_cut else None,
        "io.writer.name": output_format,
    }
    for key_path, value in flag_mapping.items():
        if value is not None:
            overrides.append(f"{key_path}={value}")

    overrides.extend(config_overrides or [])

    # Load the configuration file, merged with the defaults
    cfg = load_config_file(config)
    cfg["io"]["reader"]["file_keys"] = infile
    cfg = apply_overrides(cfg, overrides)

    # Run the main function
    from rgeana.main import run

    return run(cfg)


def cli(argv=None):
    """Main CLI entry point.

    Parameters
    ----------
    argv : List[str], optional
        Command-line arguments. Defaults to `sys.argv[1:]`.
    """
    parser = argparse.ArgumentParser(
        prog="rge-make-ntuples",
        description="Generate ntuples relevant to SIDIS analysis based on the "
        "reconstructed variables from CLAS12 RG-E data.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rge-make-ntuples recon_012933.root                   Tracked only by the DC
  rge-make-ntuples -f 3 -c recon_012933.root           Three FMT layers, FMT cut
  rge-make-ntuples -n 1000 -w out -d data recon_012933.root
  rge-make-ntuples --config rge.yaml --set pipeline.cuts.sf_nsigma=3.0 in.root
""",
    )

    # Add a version command
    parser.add_argument(
        "--version", "-v", action="version", version=f"rgeana {__version__}"
    )

    parser.add_argument(
        "-D", "--debug", action="store_true", help="Activate debug mode"
    )

    parser.add_argument(
        "-f",
        "--fmt-nlayers",
        type=int,
        metavar="FMTLYRS",
        help="Number of FMT layers the track should have hit. Options are 0 "
        "(tracked only by DC), 2 and 3. Default is 0.",
    )

    parser.add_argument(
        "-c", "--fmt-cut", action="store_true", help="Apply FMT geometry cut"
    )

    parser.add_argument(
        "-n", "--n-events", type=int, metavar="NEVENTS", help="Number of events"
    )

    parser.add_argument(
        "-w",
        "--work-dir",
        metavar="WORKDIR",
        help="Location where output files are stored. Default is root_io.",
    )

    parser.add_argument(
        "-d",
        "--data-dir",
        metavar="DATADIR",
        help="Location of the sampling fraction files. Default is data.",
    )

    parser.add_argument("--config", help="Path to the configuration file")

    # Add option to dynamically override any config parameter using dot notation
    # (e.g., --set pipeline.cuts.sf_nsigma=3.0)
    parser.add_argument(
        "--set",
        action="append",
        dest="config_overrides",
        metavar="KEY=VALUE",
        help="Override any config parameter using dot notation "
        "(e.g., --set pipeline.cuts.sf_nsigma=3.0). "
        "Can be used multiple times for multiple overrides.",
    )

    parser.add_argument(
        "--format",
        dest="output_format",
        choices=["root", "hdf5", "csv"],
        help="Format of the output file. Default is root.",
    )

    parser.add_argument(
        "infile", help="Input ROOT file. Expected file format: <text><run_no>.root"
    )

    # Parse the arguments, usage errors exit with status 2
    args = parser.parse_args(argv)

    try:
        main(
            infile=args.infile,
            config=args.config,
            debug=args.debug,
            fmt_nlayers=args.fmt_nlayers,
            fmt_cut=args.fmt_cut,
            n_events=args.n_events,
            work_dir=args.work_dir,
            data_dir=args.data_dir,
            output_format=args.output_format,
            config_overrides=args.config_overrides,
        )

    except (RecoError, ConfigError) as err:
        logger.error("Error: %s", err)
        sys.exit(1)


if __name__ == "__main__":
    cli()
