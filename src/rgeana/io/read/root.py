"""Contains a reader class dedicated to loading banks from ROOT files."""

import awkward as ak
import numpy as np
import uproot

from rgeana.utils.errors import SchemaMismatch
from rgeana.utils.globals import BANK_SEP, TREE_NAME
from rgeana.utils.logger import logger

from .base import EventRows, ReaderBase

__all__ = ["ROOTReader"]


class ROOTReader(ReaderBase):
    """Class which reads detector banks stored in ROOT files.

    The files must contain one tree with one entry per event, and one
    variable-length branch per bank field, named `BANK::VAR`. Variables may
    be stored with a wider type than the one declared in the bank schema (the
    converters store every variable as a double), so the declared type is
    used for the registered fields.

    Typical configuration should look like:

    .. code-block:: yaml

        io:
          reader:
            name: root
            file_keys: /path/to/file_012016.root
            chunk_size: 1000
    """

    name = "root"

    def __init__(
        self,
        file_keys,
        tree_name=TREE_NAME,
        chunk_size=1000,
        registry=None,
        max_print_files=10,
    ):
        """Initalize the ROOT file reader.

        Parameters
        ----------
        file_keys : Union[str, List[str]]
            Path or list of paths to the ROOT files to be read
        tree_name : str, default 'data'
            Name of the tree which holds the banks
        chunk_size : int, default 1000
            Number of entries loaded in memory at once
        registry : SchemaRegistry, optional
            Registry of bank schemas. Defaults to the CLAS12 banks.
        max_print_files : int, default 10
            Maximum number of loaded file names to be printed
        """
        assert chunk_size > 0, "The `chunk_size` must be strictly positive."

        # Process the list of files
        self.process_registry(registry)
        self.process_file_paths(file_keys, max_print_files)
        self.tree_name = tree_name
        self.chunk_size = chunk_size

        # Loop over the input files, check that they share the same branches
        self.num_entries = 0
        self.file_offsets = np.empty(len(self.file_paths), dtype=np.int64)
        self.file_entries = np.empty(len(self.file_paths), dtype=np.int64)
        self.branches = None
        for i, path in enumerate(self.file_paths):
            with uproot.open(path) as in_file:
                if tree_name not in in_file:
                    raise KeyError(f"File {path} does not contain a `{tree_name}` tree.")

                tree = in_file[tree_name]
                branches = [k for k in tree.keys() if self.is_bank_branch(k)]
                if self.branches is None:
                    self.branches = branches
                elif set(branches) != set(self.branches):
                    raise SchemaMismatch(
                        f"{path} does not provide the same banks as "
                        f"{self.file_paths[0]}"
                    )

                self.file_offsets[i] = self.num_entries
                self.file_entries[i] = tree.num_entries
                self.num_entries += tree.num_entries

        logger.info("Total number of entries in the file(s): %d\n", self.num_entries)

        # Group the branches by bank, describe the fields of each bank
        self.bank_vars = {}
        for branch in self.branches:
            bank, var = self.split_address(branch)
            self.bank_vars.setdefault(bank, []).append(var)

        self.fields = {
            bank: self.describe_fields(bank, names)
            for bank, names in self.bank_vars.items()
        }

        # Currently loaded chunk
        self._chunk_key = None
        self._chunk = None

    def has_bank(self, bank):
        """Checks whether the input files provide a bank."""
        return bank in self.fields

    def is_bank_branch(self, branch):
        """Checks whether a branch holds a field of a registered bank.

        Other branches, e.g. the counters of variable-length arrays, are
        ignored.
        """
        if BANK_SEP not in branch:
            return False

        bank, _ = self.split_address(branch)

        return bank in self.registry

    def load_chunk(self, file_id, entry_start):
        """Loads one chunk of entries of one file in memory.

        Parameters
        ----------
        file_id : int
            Index of the file in the file list
        entry_start : int
            First entry of the chunk, within the file
        """
        entry_stop = min(entry_start + self.chunk_size, self.file_entries[file_id])
        wanted = set(self.branches)
        with uproot.open(self.file_paths[file_id]) as in_file:
            self._chunk = in_file[self.tree_name].arrays(
                filter_name=lambda name: name in wanted,
                entry_start=entry_start,
                entry_stop=entry_stop,
                library="ak",
            )

        self._chunk_key = (file_id, entry_start)

    def read_event(self, idx):
        """Returns the row source of one event.

        Parameters
        ----------
        idx : int
            Index of the event

        Returns
        -------
        EventRows
            Row source of the event
        """
        if idx < 0 or idx >= self.num_entries:
            raise IndexError(
                f"Entry {idx} out of range for {self.num_entries} entries."
            )

        # Find the file and the chunk which hold the entry, load it if needed
        file_id = int(np.searchsorted(self.file_offsets, idx, side="right") - 1)
        local_idx = idx - int(self.file_offsets[file_id])
        entry_start = (local_idx // self.chunk_size) * self.chunk_size
        if self._chunk_key != (file_id, entry_start):
            self.load_chunk(file_id, entry_start)

        # Extract the rows of each bank
        entry = local_idx - entry_start
        rows = {}
        for bank, names in self.bank_vars.items():
            rows[bank] = {
                var: ak.to_numpy(self._chunk[f"{bank}{BANK_SEP}{var}"][entry])
                for var in names
            }

        return EventRows(self.fields, rows)
