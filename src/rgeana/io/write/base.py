"""Contains the output writer base class."""

import os

from rgeana.data import OUTPUT_VARS

__all__ = ["WriterBase"]


class WriterBase:
    """Parent writer class which provides common functions between all writers.

    Writers receive one :class:`OutputRecord` per accepted particle through
    :meth:`append` and never read them back. Records are buffered in memory
    and flushed to file every `buffer_size` records and on :meth:`close`.

    Attributes
    ----------
    name : str
        Name of the writer, as requested in the configuration
    ext : str
        Extension of the files produced by the writer
    file_name : str
        Path to the output file
    keys : Tuple[str]
        Names of the output columns, in order
    """

    name = ""
    ext = ""

    def __init__(self, file_name, overwrite=False, buffer_size=10000):
        """Check the output file path.

        Parameters
        ----------
        file_name : str
            Path to the output file
        overwrite : bool, default False
            If `True`, overwrite the output file if it already exists
        buffer_size : int, default 10000
            Number of records to accumulate before writing them to file
        """
        # Check that output file does not already exist, if requested
        if not overwrite and os.path.isfile(file_name):
            raise FileExistsError(f"File with name {file_name} already exists.")

        assert buffer_size > 0, "The `buffer_size` must be strictly positive."

        self.file_name = file_name
        self.buffer_size = buffer_size
        self.keys = OUTPUT_VARS
        self.buffer = []
        self.num_records = 0
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __len__(self):
        return self.num_records

    def append(self, record):
        """Append one record to the output.

        Parameters
        ----------
        record : OutputRecord
            Record of one accepted particle
        """
        if self.closed:
            raise ValueError(f"Cannot append to {self.file_name}, writer is closed.")

        self.buffer.append(record.as_array())
        self.num_records += 1
        if len(self.buffer) >= self.buffer_size:
            self.flush()

    def flush(self):
        """Write the buffered records to file."""
        if self.buffer:
            self.write(self.buffer)
            self.buffer = []

    def close(self):
        """Flush the remaining records and finalize the output file."""
        if self.closed:
            return

        self.flush()
        self.finalize()
        self.closed = True

    def write(self, rows):
        """Placeholder to be defined by the daughter class."""
        raise NotImplementedError

    def finalize(self):
        """Release the resources held by the writer, if any."""
