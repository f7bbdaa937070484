"""Generic, schema-driven containers for detector banks.

A bank is one detector subsystem's per-event table of measurements. Rows are
hits or tracks, columns are named fields with a primitive type. A single
:class:`BankContainer` class serves every bank kind: its layout is given by
a :class:`BankSchema` fetched from an immutable :class:`SchemaRegistry`
built once at startup.
"""

from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType
from typing import Mapping, Tuple, Union

import numpy as np

from rgeana.utils.errors import (
    FieldNotFound,
    IndexOutOfRange,
    LossyConversion,
    SchemaMismatch,
    UnknownSchema,
)
from rgeana.utils.globals import (
    BANK_SEP,
    CALORIMETER_BANK,
    CHERENKOV_BANK,
    FMT_BANK,
    PARTICLE_BANK,
    SCINTILLATOR_BANK,
    TRACK_BANK,
)

__all__ = [
    "FieldType",
    "FieldValue",
    "BankField",
    "BankSchema",
    "SchemaRegistry",
    "BankContainer",
    "BANK_DEFINITIONS",
]


class FieldType(IntEnum):
    """Enumerates the primitive types a bank field can hold."""

    BYTE = 0
    SHORT = 1
    INT = 2
    FLOAT = 3

    @property
    def dtype(self):
        """Numpy type used to store values of this primitive type."""
        return _DTYPES[self]

    @classmethod
    def from_dtype(cls, dtype):
        """Infers the primitive type which stores a numpy type without loss.

        Parameters
        ----------
        dtype : np.dtype
            Numpy type of an array

        Returns
        -------
        FieldType
            Matching primitive type
        """
        dtype = np.dtype(dtype)
        if dtype.kind == "f":
            return cls.FLOAT
        if dtype.kind in ("i", "u", "b"):
            if dtype.itemsize == 1:
                return cls.BYTE
            if dtype.itemsize == 2:
                return cls.SHORT

            return cls.INT

        raise TypeError(f"No primitive field type can hold values of type {dtype}.")


_DTYPES = {
    FieldType.BYTE: np.dtype(np.int8),
    FieldType.SHORT: np.dtype(np.int16),
    FieldType.INT: np.dtype(np.int32),
    FieldType.FLOAT: np.dtype(np.float32),
}


@dataclass(frozen=True)
class FieldValue:
    """One value read from a bank, tagged with the primitive type it has.

    Conversion rules are total: every primitive type widens to a double,
    integer types widen to an int, and a float only converts to an integer
    when it is integral. A conversion which would lose information raises
    :class:`LossyConversion` instead of truncating.

    Attributes
    ----------
    type : FieldType
        Primitive type of the stored value
    value : Union[int, float]
        Stored value
    """

    type: FieldType
    value: Union[int, float]

    def as_double(self):
        """Returns the value as a float.

        Returns
        -------
        float
            Value widened to a double
        """
        return float(self.value)

    def as_int(self):
        """Returns the value as a signed integer.

        Returns
        -------
        int
            Value as an integer
        """
        if self.type == FieldType.FLOAT:
            value = float(self.value)
            if not value.is_integer():
                raise LossyConversion(f"{value} cannot be read as an integer")

        return int(self.value)

    def as_uint(self):
        """Returns the value as an unsigned integer.

        Returns
        -------
        int
            Value as a non-negative integer
        """
        value = self.as_int()
        if value < 0:
            raise LossyConversion(f"{value} cannot be read as an unsigned integer")

        return value


@dataclass(frozen=True)
class BankField:
    """Name and primitive type of one bank field.

    Attributes
    ----------
    name : str
        Name of the variable within the bank (e.g. `pindex`)
    type : FieldType
        Primitive type of the variable
    """

    name: str
    type: FieldType


@dataclass(frozen=True)
class BankSchema:
    """Immutable, named set of typed fields describing one bank kind.

    Attributes
    ----------
    name : str
        Name of the bank (e.g. `REC::Particle`)
    fields : Tuple[BankField]
        Ordered list of fields in the bank
    """

    name: str
    fields: Tuple[BankField, ...]

    def __post_init__(self):
        names = [f.name for f in self.fields]
        if len(set(names)) != len(names):
            raise ValueError(f"Bank {self.name} has duplicate field names.")

        # Frozen dataclass: bypass the setter to cache the name lookup
        object.__setattr__(
            self, "_lookup", MappingProxyType({f.name: f for f in self.fields})
        )

    def __len__(self):
        return len(self.fields)

    def __contains__(self, name):
        return self.local_name(name) in self._lookup

    def address(self, name):
        """Returns the `BANK::VAR` identifier of a field.

        Parameters
        ----------
        name : str
            Name of the variable within the bank

        Returns
        -------
        str
            Fully qualified field identifier
        """
        return f"{self.name}{BANK_SEP}{name}"

    def local_name(self, name):
        """Strips the bank prefix from a field identifier, if present.

        Parameters
        ----------
        name : str
            Either a `VAR` or a `BANK::VAR` identifier

        Returns
        -------
        str
            Name of the variable within the bank
        """
        prefix = f"{self.name}{BANK_SEP}"
        if name.startswith(prefix):
            return name[len(prefix) :]

        return name

    def field(self, name):
        """Fetches one field of the schema.

        Parameters
        ----------
        name : str
            Either a `VAR` or a `BANK::VAR` identifier

        Returns
        -------
        BankField
            Field description
        """
        try:
            return self._lookup[self.local_name(name)]
        except KeyError as err:
            raise FieldNotFound(f"{name} is not a field of {self.name}") from err

    def check(self, fields):
        """Checks that a list of (name, type) pairs matches the schema.

        Parameters
        ----------
        fields : List[Tuple[str, FieldType]]
            Fields provided by an external row source
        """
        if len(fields) != len(self.fields):
            raise SchemaMismatch(
                f"{self.name}: expected {len(self.fields)} fields, "
                f"got {len(fields)}"
            )

        for name, ftype in fields:
            local = self.local_name(name)
            if local not in self._lookup:
                raise SchemaMismatch(f"{self.name}: unexpected field {name}")
            if FieldType(ftype) != self._lookup[local].type:
                raise SchemaMismatch(
                    f"{self.name}: field {local} is of type "
                    f"{FieldType(ftype).name}, expected "
                    f"{self._lookup[local].type.name}"
                )


def _schema(name, *fields):
    """Builds a schema from (name, type) pairs."""
    return BankSchema(name, tuple(BankField(n, t) for n, t in fields))


B, S, I, F = FieldType.BYTE, FieldType.SHORT, FieldType.INT, FieldType.FLOAT

# Layout of the CLAS12 banks used by the reconstruction
BANK_DEFINITIONS = (
    _schema(
        PARTICLE_BANK,
        ("pid", I), ("px", F), ("py", F), ("pz", F), ("vx", F), ("vy", F),
        ("vz", F), ("vt", F), ("charge", B), ("beta", F), ("chi2pid", F),
        ("status", S),
    ),
    _schema(
        TRACK_BANK,
        ("index", S), ("pindex", S), ("detector", B), ("sector", B),
        ("status", S), ("q", B), ("chi2", F), ("NDF", S),
    ),
    _schema(
        CALORIMETER_BANK,
        ("index", S), ("pindex", S), ("detector", B), ("sector", B),
        ("layer", B), ("energy", F), ("time", F), ("path", F), ("chi2", F),
        ("x", F), ("y", F), ("z", F), ("lu", F), ("lv", F), ("lw", F),
        ("status", S),
    ),
    _schema(
        CHERENKOV_BANK,
        ("index", S), ("pindex", S), ("detector", B), ("sector", B),
        ("nphe", F), ("time", F), ("path", F), ("chi2", F), ("x", F),
        ("y", F), ("z", F), ("status", S),
    ),
    _schema(
        SCINTILLATOR_BANK,
        ("index", S), ("pindex", S), ("detector", B), ("sector", B),
        ("layer", B), ("component", S), ("energy", F), ("time", F),
        ("path", F), ("chi2", F), ("x", F), ("y", F), ("z", F),
        ("status", S),
    ),
    _schema(
        FMT_BANK,
        ("index", S), ("status", B), ("sector", B), ("Vtx0_x", F),
        ("Vtx0_y", F), ("Vtx0_z", F), ("p0_x", F), ("p0_y", F), ("p0_z", F),
        ("q", B), ("chi2", F), ("NDF", I),
    ),
)

del B, S, I, F


class SchemaRegistry(Mapping):
    """Immutable mapping from bank name to bank schema.

    Built once at startup and passed by reference to every consumer.
    """

    def __init__(self, schemas):
        """Store the schemas.

        Parameters
        ----------
        schemas : Iterable[BankSchema]
            Schemas to register
        """
        registry = {}
        for schema in schemas:
            if schema.name in registry:
                raise ValueError(f"Bank {schema.name} registered twice.")
            registry[schema.name] = schema

        self._schemas = MappingProxyType(registry)

    @classmethod
    def default(cls):
        """Builds the registry of all the CLAS12 banks used in this package.

        Returns
        -------
        SchemaRegistry
            Registry of default bank schemas
        """
        return cls(BANK_DEFINITIONS)

    def __getitem__(self, name):
        try:
            return self._schemas[name]
        except KeyError as err:
            raise UnknownSchema(f"{name} is not a registered bank") from err

    def __contains__(self, name):
        return name in self._schemas

    def __iter__(self):
        return iter(self._schemas)

    def __len__(self):
        return len(self._schemas)


def _cast_column(values, dtype, bank, name):
    """Converts the values of one field to its storage type without loss.

    Inputs may store every field with a wider type than the declared one.
    Integer fields only accept finite, integral values within the range of
    their type. Float fields only refuse finite values which overflow.

    Parameters
    ----------
    values : Sequence[Union[int, float]]
        Values provided by the input
    dtype : np.dtype
        Storage type of the field
    bank : str
        Name of the bank
    name : str
        Name of the field

    Returns
    -------
    np.ndarray
        Values stored with the declared type
    """
    src = np.asarray(values)
    if src.dtype.kind not in "biuf":
        raise SchemaMismatch(
            f"{bank}: field {name} holds non-numeric values of type {src.dtype}"
        )

    with np.errstate(invalid="ignore", over="ignore"):
        column = src.astype(dtype)
        if dtype.kind == "f":
            lossy = np.isinf(column) & np.isfinite(src)
        else:
            info = np.iinfo(dtype)
            lossy = (src < info.min) | (src > info.max)
            if src.dtype.kind == "f":
                lossy |= ~np.isfinite(src) | (src != np.trunc(src))

    if np.any(lossy):
        bad = src[lossy].ravel()[0]
        raise LossyConversion(
            f"{bank}: field {name} cannot store {bad} as {dtype.name}"
        )

    return column


class BankContainer:
    """Store of one detector bank's current-event rows.

    The container is bound to one schema at construction and re-populated
    once per event by :meth:`fill`. All field columns always share the same
    length, the row count of the bank.

    Attributes
    ----------
    schema : BankSchema
        Schema this container is bound to
    nrows : int
        Number of rows in the current event
    """

    def __init__(self, schema_id, registry):
        """Bind an empty container to a registered schema.

        Parameters
        ----------
        schema_id : str
            Name of the bank (e.g. `REC::Track`)
        registry : SchemaRegistry
            Registry of known bank schemas
        """
        self.schema = registry[schema_id]
        self.clear()

    @property
    def name(self):
        """Name of the bank this container holds."""
        return self.schema.name

    def __len__(self):
        return self.nrows

    def __repr__(self):
        return f"BankContainer({self.name}, nrows={self.nrows})"

    def clear(self):
        """Resets the container to zero rows."""
        self.nrows = 0
        self._data = {
            f.name: np.empty(0, dtype=f.type.dtype) for f in self.schema.fields
        }

    def fill(self, source):
        """Populates every field for the current event.

        Parameters
        ----------
        source : object
            Row source which exposes `get_schema(bank)`, returning a list of
            (name, FieldType) pairs, and `get_rows(bank)`, returning one
            sequence of values per field name for the current event
        """
        # Check the layout provided by the source against the schema
        self.schema.check(source.get_schema(self.name))

        # Load the rows, make sure every column has the same length
        rows = source.get_rows(self.name)
        data, nrows = {}, None
        for field in self.schema.fields:
            key = field.name
            if key not in rows:
                key = self.schema.address(field.name)
                if key not in rows:
                    raise SchemaMismatch(
                        f"{self.name}: no values provided for {field.name}"
                    )

            column = _cast_column(rows[key], field.type.dtype, self.name, field.name)
            if column.ndim != 1:
                raise SchemaMismatch(
                    f"{self.name}: field {field.name} is not one-dimensional"
                )
            if nrows is None:
                nrows = len(column)
            elif len(column) != nrows:
                raise SchemaMismatch(
                    f"{self.name}: field {field.name} has {len(column)} "
                    f"rows, expected {nrows}"
                )

            column.setflags(write=False)
            data[field.name] = column

        # Overwrite the previous event in one go
        self._data = data
        self.nrows = nrows or 0

    def column(self, name):
        """Returns the read-only column of values of one field.

        Parameters
        ----------
        name : str
            Either a `VAR` or a `BANK::VAR` identifier

        Returns
        -------
        np.ndarray
            (N) Values of the field for each row of the current event
        """
        return self._data[self.schema.field(name).name]

    def get(self, name, row):
        """Returns one value of the bank, tagged with its primitive type.

        Parameters
        ----------
        name : str
            Either a `VAR` or a `BANK::VAR` identifier
        row : int
            Row index

        Returns
        -------
        FieldValue
            Tagged value
        """
        field = self.schema.field(name)
        if row < 0 or row >= self.nrows:
            raise IndexOutOfRange(
                f"{self.name}::{field.name}[{row}] with {self.nrows} rows"
            )

        return FieldValue(field.type, self._data[field.name][row].item())

    def get_double(self, name, row):
        """Returns one value of the bank as a float."""
        return self.get(name, row).as_double()

    def get_int(self, name, row):
        """Returns one value of the bank as an integer."""
        return self.get(name, row).as_int()

    def get_uint(self, name, row):
        """Returns one value of the bank as a non-negative integer."""
        return self.get(name, row).as_uint()

    def rows_matching(self, name, value):
        """Returns the indexes of the rows for which a field has a value.

        Parameters
        ----------
        name : str
            Either a `VAR` or a `BANK::VAR` identifier
        value : int
            Value to match

        Returns
        -------
        np.ndarray
            (M) Row indexes, in stored order
        """
        return np.flatnonzero(self.column(name) == value)
