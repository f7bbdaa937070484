"""Tests for the sampling fraction calibration."""

import os

import numpy as np
import pytest

from rgeana.calib import CalibrationParams, sf_params_path
from rgeana.utils.errors import BadCalibrationFile, NoSamplingFractionFile


class TestCalibrationParams:
    """Test the calibration coefficients."""

    def test_shape(self, sf_params):
        """Coefficients are stored per sector, coefficient and moment."""
        calib = CalibrationParams(sf_params)
        assert calib.params.shape == (6, 4, 2)

        with pytest.raises(ValueError):
            CalibrationParams(np.zeros((6, 3, 2)))

    def test_read_only(self, calibration):
        """Coefficients cannot be modified once loaded."""
        with pytest.raises(ValueError):
            calibration.params[0, 0, 0] = 2.0

    def test_curve(self):
        """The curve is c0 * (c1 + c2 / p + c3 / p^2), per sector."""
        params = np.zeros((6, 4, 2))
        params[2] = [[2.0, 1.0], [0.1, 0.01], [0.2, 0.0], [0.4, 0.02]]
        calib = CalibrationParams(params)

        mean, sigma = calib.curve(3, 2.0)
        assert mean == pytest.approx(2.0 * (0.1 + 0.1 + 0.1))
        assert sigma == pytest.approx(0.01 + 0.005)
        assert calib.curve(1, 2.0) == (0.0, 0.0)

    def test_band(self, calibration):
        """The band is centered on the mean."""
        low, high = calibration.band(4, 1.5, 3.5)
        assert low == pytest.approx(0.18)
        assert high == pytest.approx(0.32)

    @pytest.mark.parametrize("sector, momentum", [(0, 1.0), (7, 1.0), (1, 0.0)])
    def test_invalid_inputs(self, calibration, sector, momentum):
        """Sectors are numbered from 1 to 6, momenta are positive."""
        with pytest.raises(ValueError):
            calibration.curve(sector, momentum)


class TestCalibrationFile:
    """Test the loading of sampling fraction files."""

    def test_load(self, sf_file, sf_params):
        """Files hold one row of (mean, sigma) per sector and coefficient."""
        calib = CalibrationParams.from_file(sf_file)
        np.testing.assert_allclose(calib.params, sf_params)

    def test_missing(self, tmp_path):
        """A missing file is fatal."""
        with pytest.raises(NoSamplingFractionFile):
            CalibrationParams.from_file(str(tmp_path / "sf_params_000001.txt"))

    def test_wrong_shape(self, tmp_path):
        """A file with the wrong number of rows is rejected."""
        path = tmp_path / "sf.txt"
        np.savetxt(path, np.zeros((12, 2)))
        with pytest.raises(BadCalibrationFile):
            CalibrationParams.from_file(str(path))

    def test_not_numeric(self, tmp_path):
        """A file which is not numeric is rejected."""
        path = tmp_path / "sf.txt"
        path.write_text("mean sigma\n" * 24)
        with pytest.raises(BadCalibrationFile):
            CalibrationParams.from_file(str(path))

    def test_path(self):
        """Files are named after the run, simulation has its own file."""
        assert sf_params_path("data", 12016) == os.path.join(
            "data", "sf_params_012016.txt"
        )
        assert sf_params_path("data", 999110) == os.path.join(
            "data", "sf_params_mc.txt"
        )
        assert sf_params_path("data", 12016, "custom.txt") == os.path.join(
            "data", "custom.txt"
        )
