"""Functions that instantiate IO tools from configuration blocks."""

from rgeana.utils.factory import instantiate, module_dict

from . import read, write

READER_DICT = module_dict(read)
WRITER_DICT = module_dict(write)

__all__ = ["reader_factory", "writer_factory", "writer_extension"]


def reader_factory(reader_cfg, **kwargs):
    """Instantiates reader based on type specified in configuration under
    `io.reader.name`. The name must match the name of a class under
    `rgeana.io.read`.

    Parameters
    ----------
    reader_cfg : dict
        Reader configuration dictionary
    **kwargs : dict, optional
        Additional parameters to pass to the reader

    Returns
    -------
    object
        Reader object
    """
    return instantiate(READER_DICT, reader_cfg, **kwargs)


def writer_factory(writer_cfg, **kwargs):
    """Instantiates writer based on type specified in configuration under
    `io.writer.name`. The name must match the name of a class under
    `rgeana.io.write`.

    Parameters
    ----------
    writer_cfg : dict
        Writer configuration dictionary
    **kwargs : dict, optional
        Additional parameters to pass to the writer

    Returns
    -------
    object
        Writer object
    """
    return instantiate(WRITER_DICT, writer_cfg, **kwargs)


def writer_extension(writer_cfg):
    """Returns the extension of the files produced by a writer.

    Parameters
    ----------
    writer_cfg : Union[str, dict]
        Writer configuration dictionary, or simply the name of the writer

    Returns
    -------
    str
        File extension, without the leading dot
    """
    name = writer_cfg if isinstance(writer_cfg, str) else writer_cfg["name"]
    if name not in WRITER_DICT:
        raise ValueError(
            f"Could not find writer '{name}'. Available names: "
            f"{list(WRITER_DICT.keys())}"
        )

    return WRITER_DICT[name].ext
