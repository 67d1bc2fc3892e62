"""
Unit Tests for PulseMapper

Joint angle -> pulse width conversion with per-robot calibration.
"""

import sys
import os
import math
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from lib.config_loader import parse_configuration
from lib.errors import JointRangeError
from lib.robot.pulse_mapper import PulseMapper


def make_config(wrist="lightweight", home="1500 1560 1500 1480 1500 600",
                degree="10 10.2 10 10 10 50", channels="0 1 6 3 4 5"):
    return parse_configuration(
        "COM /dev/ttyUSB0\n"
        "BAUD 9600\n"
        "SPEED 500\n"
        f"CHANNEL {channels}\n"
        f"HOME {home}\n"
        f"DEGREE {degree}\n"
        f"WRIST {wrist}\n"
        "DEFAULT 0 0 0 0 0 30\n"
    )


class TestPulseMapper(unittest.TestCase):

    def setUp(self):
        self.mapper = PulseMapper(make_config())

    def test_zero_angle_is_home_pulse(self):
        for joint, home in enumerate((1500, 1560, 1500, 1480, 1500)):
            self.assertEqual(self.mapper.joint_to_pulse(joint, 0.0), home)

    def test_reversed_joint(self):
        """Elbow: home 1500, 10us/deg, direction -1, 20 deg -> 1300us."""
        self.assertEqual(self.mapper.joint_to_pulse(2, math.radians(20)), 1300)

    def test_forward_joint_uses_its_calibration(self):
        """Shoulder: home 1560, 10.2us/deg, 10 deg -> 1662us."""
        self.assertEqual(self.mapper.joint_to_pulse(1, math.radians(10)), 1662)

    def test_result_is_rounded_integer(self):
        pulse = self.mapper.joint_to_pulse(0, math.radians(0.04))
        self.assertIsInstance(pulse, int)
        self.assertEqual(pulse, 1500)

    def test_heavy_duty_wrist_reverses_roll(self):
        heavy = PulseMapper(make_config(wrist="heavyduty"))
        angle = math.radians(30)
        light_offset = self.mapper.joint_to_pulse(4, angle) - 1500
        heavy_offset = heavy.joint_to_pulse(4, angle) - 1500
        self.assertEqual(light_offset, 300)
        self.assertEqual(heavy_offset, -300)

    def test_heavy_duty_wrist_keeps_other_joints(self):
        heavy = PulseMapper(make_config(wrist="heavyduty"))
        angle = math.radians(15)
        for joint in range(4):
            self.assertEqual(heavy.joint_to_pulse(joint, angle), self.mapper.joint_to_pulse(joint, angle))

    def test_out_of_range_rejected(self):
        with self.assertRaises(JointRangeError) as ctx:
            self.mapper.joint_to_pulse(0, math.radians(120))
        self.assertEqual(ctx.exception.joint, "base")
        self.assertAlmostEqual(ctx.exception.pulse_us, 2700)

    def test_nan_rejected(self):
        with self.assertRaises(JointRangeError):
            self.mapper.joint_to_pulse(3, float("nan"))

    def test_unknown_joint(self):
        with self.assertRaises(ValueError):
            self.mapper.joint_to_pulse(5, 0.0)

    def test_map_joints_by_channel(self):
        pulses = self.mapper.map_joints([0.0, 0.0, math.radians(20), 0.0, 0.0])
        self.assertEqual(list(pulses), [0, 1, 6, 3, 4])
        self.assertEqual(pulses[6], 1300)

    def test_map_joints_rejects_whole_request(self):
        with self.assertRaises(JointRangeError):
            self.mapper.map_joints([0.0, 0.0, 0.0, math.radians(150), 0.0])

    def test_map_joints_needs_five_angles(self):
        with self.assertRaises(ValueError):
            self.mapper.map_joints([0.0, 0.0, 0.0])

    def test_home_pulses_include_gripper(self):
        self.assertEqual(
            self.mapper.home_pulses(),
            {0: 1500, 1: 1560, 6: 1500, 3: 1480, 4: 1500, 5: 600},
        )

    def test_pulse_to_angle_inverts_mapping(self):
        for joint in range(5):
            angle = math.radians(-35)
            pulse = self.mapper.joint_to_pulse(joint, angle)
            self.assertAlmostEqual(self.mapper.pulse_to_angle(joint, pulse), angle, delta=math.radians(0.1))


if __name__ == '__main__':
    unittest.main(verbosity=2)
