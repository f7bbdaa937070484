"""Builds particle candidates by matching rows across banks."""

import numpy as np

from rgeana.data import Particle
from rgeana.utils.errors import InvalidFMTLayers, NoFMTBank
from rgeana.utils.globals import FMT_MIN_LAYERS, FMT_NLAYERS
from rgeana.utils.logger import logger

__all__ = ["ParticleBuilder", "check_fmt_nlayers"]


def check_fmt_nlayers(fmt_nlayers):
    """Checks that a tracking-layer requirement is within bounds.

    Parameters
    ----------
    fmt_nlayers : int
        Minimum number of FMT layers a track must have hit. 0 disables the
        requirement, otherwise it must be between `FMT_MIN_LAYERS` and
        `FMT_NLAYERS`.

    Returns
    -------
    int
        Validated requirement
    """
    fmt_nlayers = int(fmt_nlayers)
    if fmt_nlayers != 0 and not FMT_MIN_LAYERS <= fmt_nlayers <= FMT_NLAYERS:
        raise InvalidFMTLayers(f"got {fmt_nlayers}")

    return fmt_nlayers


class ParticleBuilder:
    """Matches one track row to its particle row into a :class:`Particle`.

    The track bank points to the particle bank through its `pindex` field.
    If a tracking-layer requirement is configured, the FMT track which
    shares the same track `index` must have been fit with at least that many
    layers. Any missing link yields an invalid candidate, never an error.
    """

    def __init__(self, fmt_nlayers=0):
        """Store the tracking-layer requirement.

        Parameters
        ----------
        fmt_nlayers : int, default 0
            Minimum number of FMT layers a track must have hit (0 to disable)
        """
        self.fmt_nlayers = check_fmt_nlayers(fmt_nlayers)

    @property
    def use_fmt(self):
        """Whether the FMT tracks are required to build a candidate."""
        return self.fmt_nlayers > 0

    def build(self, particle, track, row, fmt=None):
        """Builds the particle candidate associated with one track row.

        Parameters
        ----------
        particle : BankContainer
            `REC::Particle` bank of the current event
        track : BankContainer
            `REC::Track` bank of the current event
        row : int
            Row of the track bank
        fmt : BankContainer, optional
            `FMT::Tracks` bank of the current event, required when the
            tracking-layer requirement is active

        Returns
        -------
        Particle
            Particle candidate, possibly flagged as invalid
        """
        pindex = track.get_int("pindex", row)
        if pindex < 0 or pindex >= particle.nrows:
            logger.debug(
                "Track row %d points to particle %d, which does not exist.",
                row,
                pindex,
            )
            return Particle.invalid(pindex, row)

        # Check the number of FMT layers which confirmed the track
        fmt_confirmed = False
        if self.use_fmt:
            if fmt is None:
                raise NoFMTBank()

            index = track.get_int("index", row)
            fmt_rows = fmt.rows_matching("index", index)
            nlayers = max((fmt.get_int("NDF", r) for r in fmt_rows), default=0)
            if nlayers < self.fmt_nlayers:
                logger.debug(
                    "Track row %d confirmed by %d FMT layers, %d required.",
                    row,
                    nlayers,
                    self.fmt_nlayers,
                )
                return Particle.invalid(pindex, row)

            fmt_confirmed = True

        # Copy the kinematics verbatim from the particle bank
        vertex = np.array(
            [particle.get_double(k, pindex) for k in ("vx", "vy", "vz")]
        )
        momentum = np.array(
            [particle.get_double(k, pindex) for k in ("px", "py", "pz")]
        )

        return Particle(
            pindex=pindex,
            track_row=row,
            charge=particle.get_int("charge", pindex),
            pid=particle.get_int("pid", pindex),
            vertex=vertex,
            momentum=momentum,
            beta=particle.get_double("beta", pindex),
            is_valid=True,
            fmt_confirmed=fmt_confirmed,
        )
