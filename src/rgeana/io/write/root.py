"""Module to write output records to a ROOT ntuple."""

import numpy as np
import uproot

from rgeana.utils.globals import TREE_NAME

from .base import WriterBase

__all__ = ["ROOTWriter"]


class ROOTWriter(WriterBase):
    """Writes output records to a flat tree in a ROOT file.

    The tree holds one single-precision branch per output column, the layout
    of an ntuple.

    Typical configuration should look like:

    .. code-block:: yaml

        io:
          ...
          writer:
            name: root
            file_name: output.root
    """

    name = "root"
    ext = "root"

    def __init__(
        self,
        file_name="output.root",
        overwrite=False,
        buffer_size=10000,
        tree_name=TREE_NAME,
    ):
        """Initialize the output file and its tree.

        Parameters
        ----------
        file_name : str, default 'output.root'
            Name of the output ROOT file
        overwrite : bool, default False
            If True, overwrite the output file if it already exists
        buffer_size : int, default 10000
            Number of records to accumulate before writing them to file
        tree_name : str, default 'data'
            Name of the output tree
        """
        super().__init__(file_name, overwrite, buffer_size)

        self.tree_name = tree_name
        self.out_file = uproot.recreate(self.file_name)
        self.tree = self.out_file.mktree(
            tree_name, {k: np.float32 for k in self.keys}, title=tree_name
        )

    def write(self, rows):
        """Extend the tree with the buffered records.

        Parameters
        ----------
        rows : List[np.ndarray]
            (36) Values of each record
        """
        data = np.vstack(rows)
        self.tree.extend(
            {k: np.ascontiguousarray(data[:, i]) for i, k in enumerate(self.keys)}
        )

    def finalize(self):
        """Close the output file."""
        self.out_file.close()
