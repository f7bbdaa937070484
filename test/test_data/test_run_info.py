"""Tests for the run_info data module."""

import pytest

from rgeana.data import RunInfo
from rgeana.data.run_info import get_beam_energy, is_simulation_run, run_from_filename
from rgeana.utils.errors import BadFilenameFormat, UnimplementedBeamEnergy
from rgeana.utils.globals import MC_BEAM_ENERGY


class TestRunInfoCreation:
    """Test RunInfo object creation."""

    def test_runinfo_default(self):
        """Test RunInfo creation with default values."""
        run_info = RunInfo()
        assert run_info.run == -1
        assert run_info.beam_energy == -1.0

    def test_runinfo_from_filename(self):
        """The run number is the number before the extension."""
        run = run_from_filename("/data/rge/recon_012016.root")
        run_info = RunInfo(run=run, beam_energy=get_beam_energy(run))
        assert run_info.run == 12016
        assert run_info.beam_energy == pytest.approx(10.3894)
        assert not run_info.is_simulation

    def test_runinfo_low_energy(self):
        """Runs of the low energy period have their own beam energy."""
        run = run_from_filename("out_12439.root")
        assert get_beam_energy(run) == pytest.approx(2.1864)


class TestRunNumber:
    """Test the extraction of run numbers and beam energies."""

    @pytest.mark.parametrize(
        "file_name", ["recon.root", "recon_012016.hipo", "012016.root.bak"]
    )
    def test_bad_filename(self, file_name):
        """File names which do not end with `<run_no>.root` are rejected."""
        with pytest.raises(BadFilenameFormat):
            run_from_filename(file_name)

    def test_directory_digits(self):
        """Digits in the directory name are ignored."""
        assert run_from_filename("/run_999/file_11983.root") == 11983

    def test_unknown_run(self):
        """Runs without a known beam energy are rejected."""
        with pytest.raises(UnimplementedBeamEnergy):
            get_beam_energy(1234)

    def test_custom_energies(self):
        """A custom beam energy table can be provided."""
        assert get_beam_energy(1234, {1234: 6.5}) == 6.5

    def test_simulation(self):
        """Simulated runs use the simulation beam energy."""
        assert is_simulation_run(999110)
        assert not is_simulation_run(12016)
        assert get_beam_energy(999110) == MC_BEAM_ENERGY
        assert get_beam_energy(999110, mc_beam_energy=2.2) == 2.2
        assert RunInfo(run=run_from_filename("sim_999110.root")).is_simulation
