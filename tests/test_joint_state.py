"""JointAngles value type"""
import sys
import os
import math

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from lib.robot.joint_state import JointAngles


def test_home_is_all_zero():
    home = JointAngles.home(30.0)
    assert home.joints == (0.0, 0.0, 0.0, 0.0, 0.0)
    assert home.gripper_mm == 30.0


def test_needs_five_joints():
    with pytest.raises(ValueError):
        JointAngles((0.0, 0.0, 0.0), 30.0)


def test_updates_return_new_values():
    state = JointAngles.home(30.0)
    moved = state.with_joints([0.1, 0.2, 0.3, 0.4, 0.5])
    gripped = moved.with_gripper(15)

    assert state.joints == (0.0,) * 5
    assert moved.joints == (0.1, 0.2, 0.3, 0.4, 0.5)
    assert gripped.joints == moved.joints
    assert gripped.gripper_mm == 15.0


def test_degrees_and_message():
    state = JointAngles((math.pi / 2, 0, 0, 0, -math.pi), 25.0)
    assert state.degrees()[0] == pytest.approx(90.0)
    assert state.degrees()[4] == pytest.approx(-180.0)
    assert state.to_message() == pytest.approx([math.pi / 2, 0, 0, 0, -math.pi, 0.025])
