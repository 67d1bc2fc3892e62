"""
Joint State
Commanded joint angles and gripper aperture of the arm.
"""

import math
from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple

NUM_JOINTS = 5


@dataclass(frozen=True)
class JointAngles:
    """
    Five joint angles (radians, home-relative) plus gripper aperture (mm).
    Order: base, shoulder, elbow, wrist pitch, wrist roll.
    """
    joints: Tuple[float, ...]
    gripper_mm: float

    def __post_init__(self):
        joints = tuple(float(a) for a in self.joints)
        if len(joints) != NUM_JOINTS:
            raise ValueError(f"Expected {NUM_JOINTS} joint angles, got {len(joints)}")
        object.__setattr__(self, "joints", joints)
        object.__setattr__(self, "gripper_mm", float(self.gripper_mm))

    @classmethod
    def home(cls, gripper_mm: float) -> 'JointAngles':
        return cls((0.0,) * NUM_JOINTS, gripper_mm)

    def with_joints(self, joints: Sequence[float]) -> 'JointAngles':
        return replace(self, joints=tuple(joints))

    def with_gripper(self, gripper_mm: float) -> 'JointAngles':
        return replace(self, gripper_mm=gripper_mm)

    def degrees(self) -> Tuple[float, ...]:
        return tuple(math.degrees(a) for a in self.joints)

    def to_message(self) -> List[float]:
        """Simulator payload: joint angles (radians) then gripper aperture (metres)."""
        return list(self.joints) + [self.gripper_mm / 1000.0]
