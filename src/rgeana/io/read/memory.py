"""Contains a reader class which serves events held in memory."""

import numpy as np

from rgeana.utils.logger import logger

from .base import EventRows, ReaderBase

__all__ = ["MemoryReader"]


class MemoryReader(ReaderBase):
    """Class which serves events provided as a list of dictionaries.

    Each event is a dictionary which either maps `BANK::VAR` identifiers
    onto sequences of values, or bank names onto dictionaries which map
    variable names onto sequences of values, e.g.

    .. code-block:: python

        {"REC::Track": {"index": [0], "pindex": [0], ...}, ...}

    A bank missing from an event is not provided by the input for that event.
    """

    name = "memory"

    def __init__(self, events, registry=None):
        """Store the events.

        Parameters
        ----------
        events : List[dict]
            List of events
        registry : SchemaRegistry, optional
            Registry of bank schemas. Defaults to the CLAS12 banks.
        """
        self.process_registry(registry)
        self.events = [self.normalize(event) for event in events]
        self.num_entries = len(self.events)

        logger.info("Total number of entries in memory: %d", self.num_entries)

    def has_bank(self, bank):
        """Checks whether any of the events provides a bank."""
        return any(bank in event for event in self.events)

    def normalize(self, event):
        """Converts an event into a map from bank name to columns.

        Parameters
        ----------
        event : dict
            Event, flat or nested

        Returns
        -------
        Dict[str, Dict[str, np.ndarray]]
            Columns of each bank
        """
        banks = {}
        for key, value in event.items():
            if isinstance(value, dict):
                columns = banks.setdefault(key, {})
                for var, values in value.items():
                    columns[var] = np.asarray(values)
            else:
                bank, var = self.split_address(key)
                banks.setdefault(bank, {})[var] = np.asarray(value)

        return banks

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
        banks = self.events[idx]
        fields = {
            bank: self.describe_fields(
                bank, list(columns), {k: v.dtype for k, v in columns.items()}
            )
            for bank, columns in banks.items()
        }

        return EventRows(fields, banks)
