"""Module to write output records to HDF5."""

import h5py
import numpy as np

from rgeana.data import OUTPUT_LABELS
from rgeana.utils.globals import TREE_NAME

from .base import WriterBase

__all__ = ["HDF5Writer"]


class HDF5Writer(WriterBase):
    """Writes output records to an HDF5 file.

    The records are stored in a resizable compound dataset with one named
    single-precision field per output column. The column titles are stored
    as an attribute of the dataset.

    Typical configuration should look like:

    .. code-block:: yaml

        io:
          ...
          writer:
            name: hdf5
            file_name: output.h5
    """

    name = "hdf5"
    ext = "h5"

    def __init__(
        self,
        file_name="output.h5",
        overwrite=False,
        buffer_size=10000,
        dataset_name=TREE_NAME,
    ):
        """Initialize the output file and its dataset.

        Parameters
        ----------
        file_name : str, default 'output.h5'
            Name of the output HDF5 file
        overwrite : bool, default False
            If True, overwrite the output file if it already exists
        buffer_size : int, default 10000
            Number of records to accumulate before writing them to file
        dataset_name : str, default 'data'
            Name of the dataset which holds the records
        """
        super().__init__(file_name, overwrite, buffer_size)

        self.dataset_name = dataset_name
        self.dtype = np.dtype([(k, np.float32) for k in self.keys])
        with h5py.File(self.file_name, "w") as out_file:
            dataset = out_file.create_dataset(
                dataset_name, (0,), maxshape=(None,), dtype=self.dtype
            )
            dataset.attrs["labels"] = list(OUTPUT_LABELS)

    def write(self, rows):
        """Append the buffered records to the dataset.

        Parameters
        ----------
        rows : List[np.ndarray]
            (36) Values of each record
        """
        data = np.array([tuple(row) for row in rows], dtype=self.dtype)
        with h5py.File(self.file_name, "a") as out_file:
            dataset = out_file[self.dataset_name]
            current_id = len(dataset)
            dataset.resize(current_id + len(data), axis=0)
            dataset[current_id:] = data
