"""Gripper aperture -> pulse mapping"""
import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from lib.config_loader import parse_configuration
from lib.errors import ConfigurationError, GripperRangeError
from lib.robot.gripper import GripperCalibration, GripperController


@pytest.fixture
def gripper():
    return GripperController(GripperCalibration(open_pulse=500, closed_pulse=2500, max_aperture_mm=30.0), channel=5)


def test_fully_open_and_closed(gripper):
    assert gripper.aperture_to_pulse(30.0) == 500
    assert gripper.aperture_to_pulse(0.0) == 2500
    assert gripper.fully_open == 30.0


def test_linear_between_limits(gripper):
    assert gripper.aperture_to_pulse(15.0) == 1500
    assert gripper.aperture_to_pulse(7.5) == 2000


@pytest.mark.parametrize("aperture", [-5.0, 30.5, float("nan")])
def test_out_of_range_rejected(gripper, aperture):
    with pytest.raises(GripperRangeError):
        gripper.aperture_to_pulse(aperture)


def test_range_error_carries_request(gripper):
    with pytest.raises(GripperRangeError) as exc_info:
        gripper.aperture_to_pulse(-5.0)
    assert exc_info.value.aperture_mm == -5.0
    assert exc_info.value.max_aperture_mm == 30.0


def test_pulse_to_aperture(gripper):
    assert gripper.pulse_to_aperture(1500) == pytest.approx(15.0)
    assert gripper.pulse_to_aperture(gripper.aperture_to_pulse(12.0)) == pytest.approx(12.0)


def test_from_configuration():
    config = parse_configuration(
        "COM /dev/ttyUSB0\nBAUD 9600\nSPEED 500\n"
        "CHANNEL 0 1 2 3 4 7\nHOME 1500 1500 1500 1500 1500 600\n"
        "DEGREE 10 10 10 10 10 50\nWRIST lightweight\nDEFAULT 0 0 0 0 0 30\n"
        "GRIPPER 30\n"
    )
    gripper = GripperController.from_configuration(config)
    assert gripper.channel == 7
    assert gripper.calibration.open_pulse == 600
    assert gripper.calibration.closed_pulse == 2100
    assert gripper.aperture_to_pulse(30.0) == 600


@pytest.mark.parametrize("open_pulse, closed_pulse, max_aperture", [
    (400, 2000, 30.0),
    (1500, 1500, 30.0),
    (600, 2100, 0.0),
])
def test_invalid_calibration_rejected(open_pulse, closed_pulse, max_aperture):
    with pytest.raises(ConfigurationError):
        GripperCalibration(open_pulse, closed_pulse, max_aperture)
