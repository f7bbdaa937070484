"""Test that the writer classes work as intended."""

import math
import os

import h5py
import numpy as np
import pytest

from rgeana.data import OUTPUT_LABELS, OUTPUT_VARS, OutputRecord
from rgeana.io import writer_extension, writer_factory
from rgeana.io.write import CSVWriter, HDF5Writer


@pytest.fixture(name="records")
def fixture_records():
    """A few output records."""
    return [
        OutputRecord(run_no=12016, event_no=i, pid=pid, p=1.5 * i, dtof=dtof)
        for i, (pid, dtof) in enumerate([(11, 0.0), (211, 1.0), (-211, math.inf)])
    ]


class TestCSVWriter:
    """Test the CSV writer."""

    def test_write(self, tmp_path, records):
        """The file holds a header and one line per record."""
        path = str(tmp_path / "out.csv")
        with CSVWriter(path, buffer_size=2) as writer:
            for record in records:
                writer.append(record)
            assert len(writer) == 3

        with open(path, "r", encoding="utf-8") as in_file:
            lines = in_file.read().splitlines()

        assert lines[0].split(",") == list(OUTPUT_VARS)
        assert len(lines) == 4
        values = lines[2].split(",")
        assert float(values[OUTPUT_VARS.index("pid")]) == 211
        assert float(values[OUTPUT_VARS.index("p")]) == 1.5
        assert math.isinf(float(lines[3].split(",")[OUTPUT_VARS.index("dtof")]))

    def test_overwrite(self, tmp_path):
        """Existing files are only overwritten on request."""
        path = tmp_path / "out.csv"
        path.write_text("old")
        with pytest.raises(FileExistsError):
            CSVWriter(str(path))

        CSVWriter(str(path), overwrite=True).close()
        assert path.read_text().startswith("run_no,")

    def test_closed(self, tmp_path, records):
        """Closed writers refuse new records."""
        writer = CSVWriter(str(tmp_path / "out.csv"))
        writer.close()
        writer.close()
        with pytest.raises(ValueError):
            writer.append(records[0])


class TestHDF5Writer:
    """Test the HDF5 writer."""

    def test_write(self, tmp_path, records):
        """Records are appended to a compound dataset."""
        path = str(tmp_path / "out.h5")
        with HDF5Writer(path, buffer_size=2) as writer:
            for record in records:
                writer.append(record)

        with h5py.File(path, "r") as in_file:
            data = in_file["data"][:]
            labels = list(in_file["data"].attrs["labels"])

        assert data.dtype.names == OUTPUT_VARS
        assert len(labels) == len(OUTPUT_LABELS)
        np.testing.assert_array_equal(data["pid"], [11, 211, -211])
        np.testing.assert_array_equal(data["event_no"], [0, 1, 2])
        assert np.isinf(data["dtof"][2])

    def test_empty(self, tmp_path):
        """A run without records produces an empty dataset."""
        path = str(tmp_path / "out.h5")
        HDF5Writer(path).close()
        with h5py.File(path, "r") as in_file:
            assert len(in_file["data"]) == 0


class TestROOTWriter:
    """Test the ROOT writer."""

    def test_write(self, tmp_path, records):
        """Records are stored as a flat tree, one branch per column."""
        uproot = pytest.importorskip("uproot")

        path = str(tmp_path / "out.root")
        with writer_factory({"name": "root", "file_name": path}) as writer:
            for record in records:
                writer.append(record)

        with uproot.open(path) as in_file:
            tree = in_file["data"]
            assert tree.num_entries == 3
            assert set(OUTPUT_VARS).issubset(tree.keys())
            np.testing.assert_array_equal(
                tree["pid"].array(library="np"), [11, 211, -211]
            )


class TestWriterFactory:
    """Test the instantiation of writers by name."""

    def test_extension(self):
        """Each writer knows the extension of its files."""
        assert writer_extension("root") == "root"
        assert writer_extension({"name": "hdf5"}) == "h5"
        assert writer_extension("csv") == "csv"
        with pytest.raises(ValueError):
            writer_extension("parquet")

    def test_factory(self, tmp_path):
        """Writers are instantiated by name."""
        path = str(tmp_path / "out.csv")
        writer = writer_factory({"name": "csv", "file_name": path})
        assert isinstance(writer, CSVWriter)
        writer.close()
        assert os.path.isfile(path)
