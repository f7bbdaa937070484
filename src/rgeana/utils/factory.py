"""Builds IO objects from configuration blocks.

A configuration block names the class to build under `name`. Every other
key of the block is forwarded to the class as a keyword argument.
"""

from copy import deepcopy

from .logger import logger

__all__ = ["module_dict", "instantiate"]


def module_dict(module, pattern=None):
    """Maps the names under which the classes of a module may be requested.

    Each class is reachable through its class name and, if it defines one,
    its short `name` attribute (e.g. `csv` for the CSV writer).

    Parameters
    ----------
    module : module
        Module which exposes the classes
    pattern : str, optional
        Only keep the classes whose name contains this string

    Returns
    -------
    Dict[str, type]
        Map from requestable name to class
    """
    classes = {}
    for attr in getattr(module, "__all__", dir(module)):
        if attr.startswith("_"):
            continue

        cls = getattr(module, attr)
        if not isinstance(cls, type) or not cls.__module__.startswith(module.__name__):
            continue
        if pattern is not None and pattern not in cls.__name__:
            continue

        classes[attr] = cls
        short_name = getattr(cls, "name", "")
        if isinstance(short_name, str) and short_name:
            classes[short_name] = cls

    return classes


def instantiate(module_dict, cfg, **kwargs):
    """Builds the class requested by a configuration block.

    .. code-block:: yaml

        writer:
          name: csv
          file_name: ntuples.csv

    Parameters
    ----------
    module_dict : Dict[str, type]
        Map from requestable name to class
    cfg : Union[str, dict]
        Configuration block, or simply the name of the class
    **kwargs : dict, optional
        Arguments provided by the caller rather than the configuration

    Returns
    -------
    object
        Instance of the requested class
    """
    config = {"name": cfg} if isinstance(cfg, str) else deepcopy(cfg)
    if "name" not in config:
        raise KeyError("Could not find the name of the class under `name`.")

    class_name = config.pop("name")
    if class_name not in module_dict:
        raise ValueError(
            f"Could not find '{class_name}'. Available names: "
            f"{list(module_dict.keys())}"
        )

    overlap = set(config).intersection(kwargs)
    if overlap:
        raise KeyError(
            f"Argument(s) {sorted(overlap)} provided both in the configuration "
            "and by the caller. Ambiguous."
        )
    kwargs.update(config)

    cls = module_dict[class_name]
    try:
        return cls(**kwargs)

    except Exception:
        logger.error("Failed to instantiate %s with arguments: %s", cls.__name__, kwargs)
        raise
