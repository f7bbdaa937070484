"""Validated, immutable configuration of the reconstruction pipeline."""

from dataclasses import dataclass, field, fields
from typing import Any, Dict

from rgeana.reco.builder import check_fmt_nlayers
from rgeana.reco.pid import ElectronCuts

from .errors import ConfigValidationError

__all__ = ["PipelineConfig"]


@dataclass(frozen=True)
class PipelineConfig:
    """Configuration of the reconstruction pipeline, fixed for a run.

    Attributes
    ----------
    fmt_nlayers : int
        Minimum number of FMT layers a track must have hit (0 to disable)
    fmt_cut : bool
        Whether to apply the FMT geometric acceptance
    cuts : ElectronCuts
        Thresholds of the electron hypothesis
    """

    fmt_nlayers: int = 0
    fmt_cut: bool = False
    cuts: ElectronCuts = field(default_factory=ElectronCuts)

    def __post_init__(self):
        object.__setattr__(self, "fmt_nlayers", check_fmt_nlayers(self.fmt_nlayers))
        object.__setattr__(self, "fmt_cut", bool(self.fmt_cut))

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "PipelineConfig":
        """Builds the pipeline configuration from the `pipeline` block.

        Parameters
        ----------
        cfg : Dict[str, Any]
            Pipeline configuration block

        Returns
        -------
        PipelineConfig
            Validated configuration
        """
        cfg = dict(cfg)
        cuts_cfg = cfg.pop("cuts", None) or {}
        allowed = {f.name for f in fields(cls)} - {"cuts"}
        _check_keys("pipeline", cfg, allowed)
        _check_keys("pipeline.cuts", cuts_cfg, {f.name for f in fields(ElectronCuts)})

        return cls(cuts=ElectronCuts(**cuts_cfg), **cfg)

    @property
    def output_tag(self) -> str:
        """Tag of the output file, which identifies the tracking requirement."""
        if self.fmt_nlayers == 0:
            return "dc"

        return f"fmt{self.fmt_nlayers}"


def _check_keys(block, cfg, allowed):
    """Raises if a configuration block holds unknown keys."""
    unknown = set(cfg).difference(allowed)
    if unknown:
        raise ConfigValidationError(
            f"Unknown key(s) in `{block}`: {sorted(unknown)}. Allowed keys: "
            f"{sorted(allowed)}"
        )
