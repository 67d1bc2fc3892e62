"""
Gripper Controller
Maps a gripper aperture (mm) to a pulse width on the gripper channel.

The map is linear between the fully-closed pulse (0 mm) and the fully-open
pulse (max aperture). Requests outside that range are rejected: driving the
gripper past an obstruction stalls the servo.
"""

import math
from dataclasses import dataclass

from lib.config_loader import GRIPPER_INDEX, PULSE_MAX, PULSE_MIN, RobotConfiguration
from lib.errors import ConfigurationError, GripperRangeError


@dataclass(frozen=True)
class GripperCalibration:
    open_pulse: int
    closed_pulse: int
    max_aperture_mm: float

    def __post_init__(self):
        for pulse in (self.open_pulse, self.closed_pulse):
            if not PULSE_MIN <= pulse <= PULSE_MAX:
                raise ConfigurationError(
                    f"Gripper pulse {pulse}us outside {PULSE_MIN}-{PULSE_MAX}us"
                )
        if self.open_pulse == self.closed_pulse:
            raise ConfigurationError("Gripper open and closed pulses must differ")
        if self.max_aperture_mm <= 0:
            raise ConfigurationError("Gripper aperture must be positive")

    @classmethod
    def from_configuration(cls, config: RobotConfiguration) -> 'GripperCalibration':
        """
        HOME holds the fully-open pulse; DEGREE holds the pulse change per mm
        of closing.
        """
        open_pulse = config.home[GRIPPER_INDEX]
        closed_pulse = int(round(
            open_pulse + config.gripper_max_aperture * config.degree[GRIPPER_INDEX]
        ))
        return cls(open_pulse, closed_pulse, config.gripper_max_aperture)


class GripperController:
    """Aperture to pulse conversion for one gripper channel."""

    def __init__(self, calibration: GripperCalibration, channel: int):
        self.calibration = calibration
        self.channel = channel

    @classmethod
    def from_configuration(cls, config: RobotConfiguration) -> 'GripperController':
        return cls(GripperCalibration.from_configuration(config), config.gripper_channel)

    @property
    def fully_open(self) -> float:
        return self.calibration.max_aperture_mm

    def aperture_to_pulse(self, aperture_mm: float) -> int:
        """
        Raises:
            GripperRangeError: aperture outside [0, max aperture]
        """
        cal = self.calibration
        if math.isnan(aperture_mm) or not 0.0 <= aperture_mm <= cal.max_aperture_mm:
            raise GripperRangeError(aperture_mm, cal.max_aperture_mm)

        ratio = aperture_mm / cal.max_aperture_mm
        return int(round(cal.closed_pulse + ratio * (cal.open_pulse - cal.closed_pulse)))

    def pulse_to_aperture(self, pulse_us: float) -> float:
        cal = self.calibration
        ratio = (pulse_us - cal.closed_pulse) / (cal.open_pulse - cal.closed_pulse)
        return ratio * cal.max_aperture_mm
