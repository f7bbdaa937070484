"""Tests for the deep inelastic scattering kinematics."""

import math

import numpy as np
import pytest

from rgeana.data import Particle
from rgeana.reco import dis_variables, sidis_variables
from rgeana.reco.kinematics import to_rad, virtual_photon
from rgeana.utils.errors import AngleOutOfRange
from rgeana.utils.globals import ELEC_MASS, PION_MASS, PROT_MASS

BEAM_ENERGY = 10.0


@pytest.fixture(name="electron")
def fixture_electron():
    """Electron scattered in the x-z plane."""
    return Particle(momentum=[1.0, 0.0, 4.0], mass=ELEC_MASS)


def hadron(momentum):
    """Positive pion with a given momentum."""
    return Particle(momentum=momentum, mass=PION_MASS, charge=1, pid=211)


class TestAngles:
    """Test the angle conversion."""

    def test_to_rad(self):
        """Degrees are converted to radians."""
        assert to_rad(180.0) == pytest.approx(math.pi)
        assert to_rad(-90.0) == pytest.approx(-math.pi / 2)

    @pytest.mark.parametrize("angle", [180.1, -181.0, 360.0])
    def test_out_of_range(self, angle):
        """Angles beyond half a turn are rejected."""
        with pytest.raises(AngleOutOfRange):
            to_rad(angle)


class TestDIS:
    """Test the inclusive kinematics."""

    def test_values(self, electron):
        """Inclusive variables follow their definitions."""
        dis = dis_variables(BEAM_ENERGY, electron)
        e_out = math.sqrt(17.0 + ELEC_MASS**2)
        theta = math.atan2(1.0, 4.0)
        q2 = 4 * BEAM_ENERGY * e_out * math.sin(theta / 2) ** 2
        nu = BEAM_ENERGY - e_out

        assert dis.q2 == pytest.approx(q2)
        assert dis.nu == pytest.approx(nu)
        assert dis.xb == pytest.approx(q2 / (2 * PROT_MASS * nu))
        assert dis.yb == pytest.approx(nu / BEAM_ENERGY)
        assert dis.w2 == pytest.approx(PROT_MASS**2 + 2 * PROT_MASS * nu - q2)

    def test_no_energy_transfer(self):
        """Ratios are undefined when no energy is transferred."""
        electron = Particle(momentum=[0.0, 0.0, BEAM_ENERGY])
        dis = dis_variables(BEAM_ENERGY, electron)
        assert dis.q2 == 0.0
        assert dis.nu == 0.0
        assert math.isnan(dis.xb)
        assert dis.yb == 0.0

    def test_zero_beam_energy(self):
        """Bjorken y is undefined without beam."""
        electron = Particle(momentum=[0.0, 0.0, 0.0])
        assert math.isnan(dis_variables(0.0, electron).yb)


class TestSIDIS:
    """Test the kinematics of hadrons with respect to the virtual photon."""

    def test_along_photon(self, electron):
        """A hadron along the virtual photon has no transverse momentum."""
        q = virtual_photon(BEAM_ENERGY, electron)
        p_h = 0.5 * q / np.linalg.norm(q)
        sidis = sidis_variables(BEAM_ENERGY, electron, hadron(p_h))

        assert sidis.pt2 == pytest.approx(0.0, abs=1e-12)
        assert sidis.pl2 == pytest.approx(0.25)
        assert sidis.thetapq == pytest.approx(0.0, abs=1e-6)

    def test_decomposition(self, electron):
        """Transverse and longitudinal parts add up to the total momentum."""
        pion = hadron([0.3, -0.4, 2.0])
        sidis = sidis_variables(BEAM_ENERGY, electron, pion)
        nu = BEAM_ENERGY - electron.energy

        assert sidis.pt2 + sidis.pl2 == pytest.approx(pion.p**2)
        assert sidis.zh == pytest.approx(pion.energy / nu)
        q = virtual_photon(BEAM_ENERGY, electron)
        cos = np.dot(pion.momentum, q) / (pion.p * np.linalg.norm(q))
        assert sidis.thetapq == pytest.approx(math.acos(cos))

    def test_phipq_sign(self, electron):
        """Mirroring the hadron through the leptonic plane flips the angle."""
        up = sidis_variables(BEAM_ENERGY, electron, hadron([0.3, 0.4, 2.0]))
        down = sidis_variables(BEAM_ENERGY, electron, hadron([0.3, -0.4, 2.0]))

        assert up.phipq > 0
        assert down.phipq == pytest.approx(-up.phipq)
        assert abs(up.phipq) <= math.pi

    def test_phipq_in_plane(self, electron):
        """A hadron in the leptonic plane has an angle of 0 or pi."""
        q = virtual_photon(BEAM_ENERGY, electron)
        electron_side = sidis_variables(BEAM_ENERGY, electron, hadron([0.5, 0.0, 2.0]))
        far_side = sidis_variables(BEAM_ENERGY, electron, hadron(q - [0.5, 0.0, 0.0]))

        assert electron_side.phipq == pytest.approx(0.0, abs=1e-6)
        assert abs(far_side.phipq) == pytest.approx(math.pi)

    def test_zero_momentum(self, electron):
        """A hadron at rest does not define any angle."""
        sidis = sidis_variables(BEAM_ENERGY, electron, hadron([0.0, 0.0, 0.0]))
        assert sidis.pt2 == 0.0
        assert sidis.pl2 == 0.0
        assert sidis.phipq == 0.0
        assert sidis.thetapq == 0.0
