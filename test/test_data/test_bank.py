"""Tests for the schema-driven bank containers."""

import numpy as np
import pytest

from rgeana.data import (
    BankContainer,
    BankField,
    BankSchema,
    FieldType,
    FieldValue,
    SchemaRegistry,
)
from rgeana.io.read import EventRows, MemoryReader
from rgeana.utils.errors import (
    FieldNotFound,
    IndexOutOfRange,
    LossyConversion,
    SchemaMismatch,
    UnknownSchema,
)
from rgeana.utils.globals import CALORIMETER_BANK, PARTICLE_BANK, TRACK_BANK


class TestFieldValue:
    """Test the conversion rules of tagged field values."""

    @pytest.mark.parametrize("ftype", list(FieldType))
    def test_widen_to_double(self, ftype):
        """Every primitive type widens to a double."""
        assert FieldValue(ftype, 3).as_double() == 3.0

    @pytest.mark.parametrize("ftype", [FieldType.BYTE, FieldType.SHORT, FieldType.INT])
    def test_integer_to_int(self, ftype):
        """Integer types are read as integers without loss."""
        value = FieldValue(ftype, -12)
        assert value.as_int() == -12
        assert isinstance(value.as_int(), int)

    def test_integral_float_to_int(self):
        """An integral float can be read as an integer."""
        assert FieldValue(FieldType.FLOAT, 4.0).as_int() == 4

    def test_fractional_float_to_int(self):
        """A fractional float is never truncated."""
        with pytest.raises(LossyConversion):
            FieldValue(FieldType.FLOAT, 4.5).as_int()

    def test_negative_to_uint(self):
        """A negative value is never wrapped into an unsigned integer."""
        assert FieldValue(FieldType.SHORT, 7).as_uint() == 7
        with pytest.raises(LossyConversion):
            FieldValue(FieldType.SHORT, -7).as_uint()

    def test_from_dtype(self):
        """Primitive types are inferred from numpy types."""
        assert FieldType.from_dtype(np.int8) == FieldType.BYTE
        assert FieldType.from_dtype(np.uint8) == FieldType.BYTE
        assert FieldType.from_dtype(np.int16) == FieldType.SHORT
        assert FieldType.from_dtype(np.int64) == FieldType.INT
        assert FieldType.from_dtype(np.float64) == FieldType.FLOAT
        with pytest.raises(TypeError):
            FieldType.from_dtype(np.str_)


class TestSchemaRegistry:
    """Test the registry of bank schemas."""

    def test_default_banks(self, registry):
        """The default registry holds the six CLAS12 banks."""
        assert len(registry) == 6
        assert PARTICLE_BANK in registry
        assert "REC::Unknown" not in registry

    def test_unknown_schema(self, registry):
        """Fetching an unregistered bank raises."""
        with pytest.raises(UnknownSchema):
            registry["REC::Unknown"]

        with pytest.raises(UnknownSchema):
            BankContainer("REC::Unknown", registry)

    def test_duplicate_registration(self, registry):
        """A bank can only be registered once."""
        schema = registry[TRACK_BANK]
        with pytest.raises(ValueError):
            SchemaRegistry([schema, schema])

    def test_duplicate_fields(self):
        """A schema cannot hold two fields with the same name."""
        with pytest.raises(ValueError):
            BankSchema(
                "A::B",
                (BankField("x", FieldType.INT), BankField("x", FieldType.FLOAT)),
            )

    def test_field_lookup(self, registry):
        """Fields are found by local or fully qualified name."""
        schema = registry[TRACK_BANK]
        assert schema.field("pindex").type == FieldType.SHORT
        assert schema.field("REC::Track::NDF").type == FieldType.SHORT
        assert "REC::Track::chi2" in schema
        with pytest.raises(FieldNotFound):
            schema.field("energy")


class TestBankContainer:
    """Test filling and reading bank containers."""

    @pytest.fixture(name="calorimeter")
    def fixture_calorimeter(self, registry, make_event):
        """Calorimeter bank filled with three hits."""
        event = make_event(calorimeter=[
            {"pindex": 0, "layer": 1, "energy": 0.20},
            {"pindex": 0, "layer": 4, "energy": 0.05},
            {"pindex": 1, "layer": 1, "energy": 0.10},
        ])
        bank = BankContainer(CALORIMETER_BANK, registry)
        bank.fill(MemoryReader([event]).read_event(0))

        return bank

    def test_empty(self, registry):
        """A new container has no rows."""
        bank = BankContainer(TRACK_BANK, registry)
        assert bank.nrows == 0
        assert len(bank.column("pindex")) == 0
        with pytest.raises(IndexOutOfRange):
            bank.get("pindex", 0)

    def test_fill(self, calorimeter):
        """Every column has the length of the row count."""
        assert calorimeter.nrows == 3
        for field in calorimeter.schema.fields:
            column = calorimeter.column(field.name)
            assert len(column) == calorimeter.nrows
            assert column.dtype == field.type.dtype

    def test_typed_access(self, calorimeter):
        """Values are read through their tagged type."""
        assert calorimeter.get("layer", 1) == FieldValue(FieldType.BYTE, 4)
        assert calorimeter.get_int("pindex", 2) == 1
        assert calorimeter.get_double("energy", 0) == pytest.approx(0.20)
        with pytest.raises(LossyConversion):
            calorimeter.get_int("energy", 0)

    def test_out_of_range(self, calorimeter):
        """Accesses beyond the row count raise."""
        with pytest.raises(IndexOutOfRange):
            calorimeter.get("energy", 3)
        with pytest.raises(IndexOutOfRange):
            calorimeter.get("energy", -1)

    def test_unknown_field(self, calorimeter):
        """Accesses to fields outside the schema raise."""
        with pytest.raises(FieldNotFound):
            calorimeter.get("nphe", 0)

    def test_read_only(self, calorimeter):
        """Columns cannot be modified by consumers."""
        with pytest.raises(ValueError):
            calorimeter.column("energy")[0] = 1.0

    def test_rows_matching(self, calorimeter):
        """Rows are matched in stored order."""
        np.testing.assert_array_equal(calorimeter.rows_matching("pindex", 0), [0, 1])
        assert len(calorimeter.rows_matching("pindex", 5)) == 0

    def test_refill(self, calorimeter, make_event):
        """Filling a container replaces the previous event."""
        calorimeter.fill(MemoryReader([make_event()]).read_event(0))
        assert calorimeter.nrows == 0

    def test_missing_field(self, registry, make_event):
        """A source which lacks a field does not match the schema."""
        event = make_event(tracks=[{"pindex": 0}])
        del event[TRACK_BANK]["NDF"]
        bank = BankContainer(TRACK_BANK, registry)
        with pytest.raises(SchemaMismatch):
            bank.fill(MemoryReader([event]).read_event(0))

    def test_type_mismatch(self, registry, make_event):
        """A source which declares another field type does not match."""
        rows = make_event(tracks=[{"pindex": 0}])[TRACK_BANK]
        fields = [(k, FieldType.FLOAT) for k in rows]
        source = EventRows({TRACK_BANK: fields}, {TRACK_BANK: rows})
        bank = BankContainer(TRACK_BANK, registry)
        with pytest.raises(SchemaMismatch):
            bank.fill(source)

    def test_ragged_columns(self, registry, make_event):
        """Columns of different lengths are rejected."""
        event = make_event(tracks=[{"pindex": 0}, {"pindex": 1}])
        event[TRACK_BANK]["chi2"] = [1.0]
        bank = BankContainer(TRACK_BANK, registry)
        with pytest.raises(SchemaMismatch):
            bank.fill(MemoryReader([event]).read_event(0))

    def test_missing_bank(self, registry, make_event):
        """A bank absent from the source cannot be filled."""
        event = make_event()
        del event[TRACK_BANK]
        bank = BankContainer(TRACK_BANK, registry)
        with pytest.raises(SchemaMismatch):
            bank.fill(MemoryReader([event]).read_event(0))

    @pytest.mark.parametrize("layer", [257.0, 263, -129, 1.7, float("nan")])
    def test_byte_out_of_range(self, registry, make_event, layer):
        """Values which do not fit a BYTE field are never wrapped."""
        event = make_event(calorimeter=[{"pindex": 0, "layer": layer}])
        bank = BankContainer(CALORIMETER_BANK, registry)
        with pytest.raises(LossyConversion):
            bank.fill(MemoryReader([event]).read_event(0))

    @pytest.mark.parametrize("pindex", [40000, 0.5, float("inf")])
    def test_short_out_of_range(self, registry, make_event, pindex):
        """Values which do not fit a SHORT field are never wrapped."""
        event = make_event(tracks=[{"pindex": pindex}])
        bank = BankContainer(TRACK_BANK, registry)
        with pytest.raises(LossyConversion):
            bank.fill(MemoryReader([event]).read_event(0))

    def test_integral_doubles(self, registry, make_event):
        """Integral doubles are stored exactly in integer fields."""
        event = make_event(calorimeter=[{"pindex": 1.0, "layer": 4.0}])
        bank = BankContainer(CALORIMETER_BANK, registry)
        bank.fill(MemoryReader([event]).read_event(0))
        assert bank.column("layer").dtype == np.int8
        assert bank.get_int("layer", 0) == 4
        assert bank.get_int("pindex", 0) == 1

    def test_non_numeric(self, registry, make_event):
        """Non-numeric values do not match the schema."""
        event = make_event(calorimeter=[{"pindex": 0, "layer": "ECIN"}])
        bank = BankContainer(CALORIMETER_BANK, registry)
        with pytest.raises(SchemaMismatch):
            bank.fill(MemoryReader([event]).read_event(0))
