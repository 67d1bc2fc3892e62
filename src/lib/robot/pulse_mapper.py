"""
Pulse Mapper
Converts joint angles to servo pulse widths using the per-robot calibration:

    pulse = home + direction * angle_deg * pulse_per_degree

Direction multipliers come from the configuration (assembly sign, wrist
roll reversed for a heavy-duty wrist).
"""

import math
from typing import Dict, Sequence

from lib.config_loader import (
    NUM_JOINTS,
    PULSE_MAX,
    PULSE_MIN,
    RobotConfiguration,
)
from lib.errors import JointRangeError
from kinematics.ik_solver import JOINT_NAMES


class PulseMapper:
    """
    Maps joint angles (radians) to pulse widths in microseconds.

    Pulse Range: 500us - 2500us (standard servo range)
    """

    def __init__(self, config: RobotConfiguration):
        self.config = config

    def joint_to_pulse(self, joint: int, angle_rad: float) -> int:
        """
        Convert one joint angle to a pulse width.

        Args:
            joint: Joint index (0-4)
            angle_rad: Home-relative joint angle (radians)

        Returns:
            int: Pulse width in microseconds

        Raises:
            JointRangeError: result outside the controller's pulse range

        Example:
            home = 1500, direction = -1, 10us/deg, angle = 20°
            -> 1500 - 200 = 1300us
        """
        if not 0 <= joint < NUM_JOINTS:
            raise ValueError(f"Unknown joint: {joint}")

        pulse = (self.config.home[joint]
                 + self.config.joint_directions[joint]
                 * math.degrees(angle_rad)
                 * self.config.degree[joint])

        if not (PULSE_MIN <= pulse <= PULSE_MAX):
            raise JointRangeError(JOINT_NAMES[joint], pulse, PULSE_MIN, PULSE_MAX)

        return int(round(pulse))

    def pulse_to_angle(self, joint: int, pulse_us: float) -> float:
        """
        Convert a pulse width back to a joint angle (for display).

        Returns:
            float: Joint angle in radians
        """
        if not 0 <= joint < NUM_JOINTS:
            raise ValueError(f"Unknown joint: {joint}")

        degrees = ((pulse_us - self.config.home[joint])
                   / (self.config.joint_directions[joint] * self.config.degree[joint]))
        return math.radians(degrees)

    def map_joints(self, angles: Sequence[float]) -> Dict[int, int]:
        """
        Map all five joint angles to {channel: pulse}, in joint order.
        Nothing is returned unless every joint is in range.
        """
        if len(angles) != NUM_JOINTS:
            raise ValueError(f"Expected {NUM_JOINTS} joint angles, got {len(angles)}")

        return {
            self.config.channels[joint]: self.joint_to_pulse(joint, angle)
            for joint, angle in enumerate(angles)
        }

    def home_pulses(self) -> Dict[int, int]:
        """Home pulse for every channel, gripper included."""
        return dict(zip(self.config.channels, self.config.home))
