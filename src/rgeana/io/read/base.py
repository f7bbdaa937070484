"""Contains the data reader base class.

Data readers are used to extract specific entries from files and expose the
bank rows of each entry through a row source, consumed by the bank
containers downstream.
"""

import glob
import os

import numpy as np

from rgeana.data import FieldType, SchemaRegistry
from rgeana.utils.errors import SchemaMismatch
from rgeana.utils.globals import BANK_SEP
from rgeana.utils.logger import logger

__all__ = ["ReaderBase", "EventRows"]


class EventRows:
    """Row source of one event.

    Exposes, per bank, the ordered list of (name, type) pairs of the fields
    provided by the input and one array of values per field.

    Attributes
    ----------
    fields : Dict[str, List[Tuple[str, FieldType]]]
        Fields provided for each bank
    rows : Dict[str, Dict[str, np.ndarray]]
        Values of each field of each bank
    """

    def __init__(self, fields, rows):
        """Store the per-bank fields and rows.

        Parameters
        ----------
        fields : Dict[str, List[Tuple[str, FieldType]]]
            Fields provided for each bank
        rows : Dict[str, Dict[str, np.ndarray]]
            Values of each field of each bank
        """
        self.fields = fields
        self.rows = rows

    def has_bank(self, bank):
        """Checks whether the input provides a bank.

        Parameters
        ----------
        bank : str
            Name of the bank

        Returns
        -------
        bool
            `True` if the bank is part of the input
        """
        return bank in self.fields

    def get_schema(self, bank):
        """Returns the fields the input provides for a bank.

        Parameters
        ----------
        bank : str
            Name of the bank

        Returns
        -------
        List[Tuple[str, FieldType]]
            Ordered list of (name, type) pairs
        """
        if bank not in self.fields:
            raise SchemaMismatch(f"{bank} is not provided by the input")

        return self.fields[bank]

    def get_rows(self, bank):
        """Returns the values of each field of a bank for this event.

        Parameters
        ----------
        bank : str
            Name of the bank

        Returns
        -------
        Dict[str, np.ndarray]
            Values of each field
        """
        if bank not in self.rows:
            raise SchemaMismatch(f"{bank} is not provided by the input")

        return self.rows[bank]


class ReaderBase:
    """Parent reader class which provides common functions between all readers.

    This class provides these basic functions:
    1. Method to parse the requested file list or file list file into a list of
       paths to existing files (throws if nothing is found)
    2. Method to describe the fields of a set of `BANK::VAR` columns, using
       the schema registry for the declared fields
    3. Essential `__len__` and `__getitem__` methods. Must define the
       `read_event` function in the inheriting class for both of them to work.

    Attributes
    ----------
    name : str
        Name of the reader, as requested in the configuration
    num_entries : int
        Total number of entries in the input
    file_paths : List[str]
        List of files to read data from
    registry : SchemaRegistry
        Registry of bank schemas
    """

    name = ""
    num_entries = None
    file_paths = None
    registry = None

    def __len__(self):
        """Returns the number of entries in the input.

        Returns
        -------
        int
            Number of entries
        """
        return self.num_entries

    def __getitem__(self, idx):
        """Returns a specific entry in the input.

        Parameters
        ----------
        idx : int
            Integer entry ID to access

        Returns
        -------
        EventRows
            Row source of the entry
        """
        return self.read_event(idx)

    def read_event(self, idx):
        """Placeholder to be defined by the daughter class."""
        raise NotImplementedError

    def process_registry(self, registry=None):
        """Store the registry of bank schemas.

        Parameters
        ----------
        registry : SchemaRegistry, optional
            Registry of bank schemas. Defaults to the CLAS12 banks.
        """
        self.registry = registry if registry is not None else SchemaRegistry.default()

    def process_file_paths(self, file_keys, max_print_files=10):
        """Process list of files.

        Parameters
        ----------
        file_keys : Union[str, List[str]]
            Path or list of paths (or glob patterns) to the files to be read
        max_print_files : int, default 10
            Maximum number of loaded file names to be printed
        """
        assert file_keys is not None, "No input `file_keys` provided, abort."

        # If the file_keys points to a single text file, it must be a text
        # file containing a list of file paths. Parse it to a list.
        if isinstance(file_keys, str) and os.path.splitext(file_keys)[-1] == ".txt":
            assert os.path.isfile(file_keys), (
                "If the `file_keys` are specified as a single string, "
                "it must be the path to a text file with a file list."
            )
            with open(file_keys, "r", encoding="utf-8") as f:
                file_keys = f.read().splitlines()

        # Convert the file keys to a list of file paths with glob
        self.file_paths = []
        if isinstance(file_keys, str):
            file_keys = [file_keys]
        for file_key in file_keys:
            file_paths = glob.glob(file_key)
            if not file_paths:
                raise FileNotFoundError(
                    f"File key {file_key} yielded no compatible path."
                )
            self.file_paths.extend(file_paths)

        self.file_paths = sorted(self.file_paths)

        # Print out the list of loaded files
        num_files = len(self.file_paths)
        file_list = " - " + "\n - ".join(self.file_paths[:max_print_files])
        file_list += "\n ... \n" if num_files > max_print_files else "\n"
        logger.info("Will load %d file(s):\n%s", num_files, file_list)

    def describe_fields(self, bank, names, dtypes=None):
        """Describes the fields the input provides for one bank.

        Fields declared in the registry are given their declared type, since
        inputs may store every variable with a wider type. Other fields are
        given the type inferred from their values, if known.

        Parameters
        ----------
        bank : str
            Name of the bank
        names : List[str]
            Names of the variables provided for the bank
        dtypes : Dict[str, np.dtype], optional
            Type of the values of each variable

        Returns
        -------
        List[Tuple[str, FieldType]]
            Ordered list of (name, type) pairs
        """
        schema = self.registry[bank] if bank in self.registry else None
        fields = []
        for name in names:
            if schema is not None and name in schema:
                fields.append((name, schema.field(name).type))
            else:
                dtype = dtypes[name] if dtypes is not None else np.float64
                fields.append((name, FieldType.from_dtype(dtype)))

        return fields

    @staticmethod
    def split_address(address):
        """Splits a `BANK::VAR` identifier into its bank and variable names.

        Parameters
        ----------
        address : str
            Fully qualified field identifier

        Returns
        -------
        str
            Name of the bank
        str
            Name of the variable
        """
        bank, sep, var = address.rpartition(BANK_SEP)
        if not sep or not bank:
            raise ValueError(f"{address} is not a `BANK{BANK_SEP}VAR` identifier.")

        return bank, var
