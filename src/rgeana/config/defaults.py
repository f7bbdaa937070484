"""Default configuration of a run.

Every configuration is merged on top of these values, so a run can be
configured from the command line alone.
"""

from rgeana.utils.globals import (
    CHI2NDF_CUT,
    FD_STATUS_MAX,
    FD_STATUS_MIN,
    HTCC_NPHE_MIN,
    MC_BEAM_ENERGY,
    PCAL_ENERGY_MIN,
    SF_NSIGMA,
)

__all__ = ["DEFAULT_CONFIG"]

DEFAULT_CONFIG = {
    "base": {
        "verbosity": "info",
        "n_events": -1,
        "progress_step": 1000,
        "debug": False,
        "work_dir": "root_io",
    },
    "io": {
        "reader": {
            "name": "root",
        },
        "writer": {
            "name": "root",
            "overwrite": True,
        },
    },
    "calib": {
        "data_dir": "data",
        "file_name": None,
    },
    "pipeline": {
        "fmt_nlayers": 0,
        "fmt_cut": False,
        "cuts": {
            "chi2ndf_cut": CHI2NDF_CUT,
            "htcc_nphe_min": HTCC_NPHE_MIN,
            "pcal_energy_min": PCAL_ENERGY_MIN,
            "sf_nsigma": SF_NSIGMA,
            "status_min": FD_STATUS_MIN,
            "status_max": FD_STATUS_MAX,
        },
    },
    "run": {
        "run_number": None,
        "beam_energy": None,
        "mc_beam_energy": MC_BEAM_ENERGY,
    },
}
