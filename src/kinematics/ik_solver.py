"""
5-DOF Inverse Kinematics Solver (decoupled wrist)

Analytical IK for the AL5D arm:
- q1: Base Yaw
- q2: Shoulder Pitch
- q3: Elbow Pitch
- q4: Wrist Pitch
- q5: Wrist Roll

Coordinate system (robot base frame):
- z up, y forward, x to the right
- Shoulder pivot at height d1 above the base origin
- Wrist frame z axis = approach direction (towards the gripper tip)

Joint angles are measured from the home configuration: upper arm vertical,
forearm horizontal pointing forward, approach horizontal forward and the
gripper's direction of motion along the base -x axis. All-zero joint angles
is the home pose.

Branch convention: elbow-up only (elbow bends downward, upper arm above the
shoulder-to-wrist line).
"""

import logging
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from kinematics.frame import Frame
from lib.errors import UnreachablePoseError

logger = logging.getLogger(__name__)


# Link lengths (mm)
BASE_HEIGHT = 70.0        # d1: base origin to shoulder pivot
SHOULDER_TO_ELBOW = 146.0  # a2
ELBOW_TO_WRIST = 187.0     # a3

# Geometric angles (from horizontal, elbow/wrist relative) of the home pose
HOME_GEOMETRY = (0.0, math.pi / 2, -math.pi / 2, 0.0, 0.0)

JOINT_NAMES = ("base", "shoulder", "elbow", "wrist_pitch", "wrist_roll")

_EPSILON = 1e-9


def wrap_angle(angle: float) -> float:
    """Wrap to (-pi, pi]."""
    wrapped = math.atan2(math.sin(angle), math.cos(angle))
    if wrapped == -math.pi:
        return math.pi
    return wrapped


def _rot_x(a: float) -> np.ndarray:
    c, s = math.cos(a), math.sin(a)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


def _rot_z(a: float) -> np.ndarray:
    c, s = math.cos(a), math.sin(a)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def _approach_basis(yaw: float, elevation: float) -> np.ndarray:
    # Orientation with zero wrist roll for a given base yaw and approach elevation
    return _rot_z(yaw) @ _rot_x(elevation - math.pi / 2)


@dataclass
class IKSolution:
    """Joint angles (radians) for one wrist pose."""
    theta1: float  # Base Yaw
    theta2: float  # Shoulder
    theta3: float  # Elbow
    theta4: float  # Wrist Pitch
    theta5: float  # Wrist Roll
    config_name: str = "Elbow Up"

    @property
    def angles(self) -> Tuple[float, float, float, float, float]:
        return (self.theta1, self.theta2, self.theta3, self.theta4, self.theta5)

    def to_dict(self) -> dict:
        """Angles in degrees, for reporting."""
        return {
            "theta1": math.degrees(self.theta1),
            "theta2": math.degrees(self.theta2),
            "theta3": math.degrees(self.theta3),
            "theta4": math.degrees(self.theta4),
            "theta5": math.degrees(self.theta5),
        }


class IKSolver:
    """
    Decoupled-wrist IK: base yaw from the wrist position, a planar 2-link
    solve for shoulder and elbow, then wrist pitch and roll from the desired
    orientation.
    """

    def __init__(self, d1: float = BASE_HEIGHT, a2: float = SHOULDER_TO_ELBOW,
                 a3: float = ELBOW_TO_WRIST):
        self.d1 = d1
        self.a2 = a2
        self.a3 = a3

    @property
    def max_reach(self) -> float:
        return self.a2 + self.a3

    @property
    def min_reach(self) -> float:
        return abs(self.a2 - self.a3)

    def forward_kinematics(self, theta1: float, theta2: float, theta3: float,
                           theta4: float, theta5: float) -> Frame:
        """
        Wrist frame for the given joint angles (radians, home-relative).

        Returns:
            Frame of the wrist relative to the robot base
        """
        shoulder = theta2 + HOME_GEOMETRY[1]
        elbow = theta3 + HOME_GEOMETRY[2]

        reach = self.a2 * math.cos(shoulder) + self.a3 * math.cos(shoulder + elbow)
        height = self.d1 + self.a2 * math.sin(shoulder) + self.a3 * math.sin(shoulder + elbow)

        position = np.array([-reach * math.sin(theta1), reach * math.cos(theta1), height])

        elevation = shoulder + elbow + theta4
        rotation = _approach_basis(theta1, elevation) @ _rot_z(theta5 + math.pi / 2)

        return Frame(rotation, position)

    def solve(self, pose: Frame) -> IKSolution:
        """
        Solve IK for a wrist pose.

        Args:
            pose: Wrist frame relative to the robot base (base and
                  end-effector offsets already removed by the caller)

        Returns:
            IKSolution (elbow-up branch)

        Raises:
            UnreachablePoseError: wrist point outside the 2-link workspace
        """
        x, y, z = (float(v) for v in pose.translation)
        rotation = pose.rotation
        approach = rotation[:, 2]

        # q1: Base Yaw
        reach = math.hypot(x, y)
        if reach > _EPSILON:
            theta1 = math.atan2(-x, y)
        elif math.hypot(approach[0], approach[1]) > _EPSILON:
            theta1 = math.atan2(-approach[0], approach[1])
        else:
            theta1 = 0.0

        # q2, q3: planar 2-link problem in the arm plane
        shoulder, elbow = self._solve_2link_ik(pose, reach, z - self.d1)

        # q4: Wrist Pitch = approach elevation - pitch of the first joints
        forward = np.array([-math.sin(theta1), math.cos(theta1), 0.0])
        lateral = np.array([math.cos(theta1), math.sin(theta1), 0.0])
        out_of_plane = float(approach @ lateral)
        if abs(out_of_plane) > 1e-6:
            logger.debug(f"[IKSolver] Approach leaves the arm plane by {out_of_plane:.4f}, projecting")
        elevation = math.atan2(float(approach[2]), float(approach @ forward))
        wrist = elevation - shoulder - elbow

        # q5: Wrist Roll about the approach axis
        residual = _approach_basis(theta1, elevation).T @ rotation
        roll = math.atan2(residual[1, 0], residual[0, 0]) - math.pi / 2

        solution = IKSolution(
            theta1=wrap_angle(theta1),
            theta2=wrap_angle(shoulder - HOME_GEOMETRY[1]),
            theta3=wrap_angle(elbow - HOME_GEOMETRY[2]),
            theta4=wrap_angle(wrist),
            theta5=wrap_angle(roll),
        )
        logger.debug(f"[IKSolver] Solution (deg): {solution.to_dict()}")
        return solution

    def _solve_2link_ik(self, pose: Frame, r: float, s: float) -> Tuple[float, float]:
        """
        2-Link planar IK (elbow-up).

        Args:
            pose: Requested target, for error reporting
            r: Horizontal distance from the base axis to the wrist
            s: Wrist height above the shoulder pivot

        Returns:
            (shoulder, elbow) geometric angles in radians: shoulder from
            horizontal, elbow relative to the upper arm
        """
        dist_sq = r * r + s * s
        dist = math.sqrt(dist_sq)

        if dist < _EPSILON:
            raise UnreachablePoseError(pose, "wrist point coincides with the shoulder pivot")

        # Elbow angle via Law of Cosines
        cos_elbow = (dist_sq - self.a2 ** 2 - self.a3 ** 2) / (2 * self.a2 * self.a3)
        if not -1.0 <= cos_elbow <= 1.0:
            raise UnreachablePoseError(
                pose,
                f"wrist distance {dist:.1f} mm outside [{self.min_reach:.1f}, {self.max_reach:.1f}] mm"
            )

        # Triangle base angle at the shoulder
        cos_alpha = (self.a2 ** 2 + dist_sq - self.a3 ** 2) / (2 * self.a2 * dist)
        if not -1.0 <= cos_alpha <= 1.0:
            raise UnreachablePoseError(pose, f"no shoulder triangle for wrist distance {dist:.1f} mm")

        beta = math.atan2(s, r)
        alpha = math.acos(cos_alpha)

        # Elbow Up: shoulder = beta + alpha, elbow bends down
        return beta + alpha, -math.acos(cos_elbow)

    def is_reachable(self, pose: Frame) -> bool:
        """Check the reachability test without raising."""
        try:
            self.solve(pose)
        except UnreachablePoseError:
            return False
        return True
