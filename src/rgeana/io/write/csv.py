"""Module to write output records to CSV."""

from .base import WriterBase

__all__ = ["CSVWriter"]


class CSVWriter(WriterBase):
    """Writes output records to a CSV file.

    The first line of the file holds the name of each column, followed by one
    line per record.

    Typical configuration should look like:

    .. code-block:: yaml

        io:
          ...
          writer:
            name: csv
            file_name: output.csv
    """

    name = "csv"
    ext = "csv"

    def __init__(self, file_name="output.csv", overwrite=False, buffer_size=10000):
        """Initialize the header of the output file.

        Parameters
        ----------
        file_name : str, default 'output.csv'
            Name of the output CSV file
        overwrite : bool, default False
            If True, overwrite the output file if it already exists
        buffer_size : int, default 10000
            Number of records to accumulate before writing them to file
        """
        super().__init__(file_name, overwrite, buffer_size)

        # Create a header and write it to file
        with open(self.file_name, "w", encoding="utf-8") as out_file:
            header_str = ",".join(self.keys)
            out_file.write(header_str + "\n")

    def write(self, rows):
        """Append the CSV file with the output.

        Parameters
        ----------
        rows : List[np.ndarray]
            (36) Values of each record
        """
        with open(self.file_name, "a", encoding="utf-8") as out_file:
            for row in rows:
                result_str = ",".join([str(v) for v in row])
                out_file.write(result_str + "\n")
