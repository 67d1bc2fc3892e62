"""
Robot Controller
Task-level motion executor: one transmitted command per request.

    move(frame)  -> IK -> pulse mapping -> ServoCommand -> transport
    go_home()    -> home pulses on every channel
    grasp(mm)    -> gripper pulse
    wait(ms)     -> fixed open-loop delay (the servos report no position)

A request is fully built and range-checked before anything is sent, and the
joint state only changes after a successful send. Failures are returned as
an unsuccessful MotionResult; callers must abort the sequence.
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Optional, Sequence

from kinematics.frame import Frame
from kinematics.ik_solver import IKSolver
from lib.command_logger import log_command
from lib.config_loader import RobotConfiguration, TransportKind
from lib.errors import MotionError
from lib.robot.gripper import GripperController
from lib.robot.joint_state import JointAngles
from lib.robot.pulse_mapper import PulseMapper
from lib.robot.serial_driver import SerialDriver
from lib.robot.sim_publisher import SimPublisher
from lib.robot.transport import ServoCommand, Transport

logger = logging.getLogger(__name__)


@dataclass
class MotionResult:
    """Result of one motion request."""
    success: bool
    operation: str
    joints: Optional[JointAngles] = None
    command: Optional[ServoCommand] = None
    error: Optional[MotionError] = None

    @property
    def error_message(self) -> Optional[str]:
        return str(self.error) if self.error else None

    def __bool__(self) -> bool:
        return self.success


def create_transport(config: RobotConfiguration) -> Transport:
    """Transport variant selected by the configuration."""
    if config.transport == TransportKind.SIMULATION:
        return SimPublisher()
    return SerialDriver(config.port, config.baud)


class RobotController:
    """
    Open-loop executor for the AL5D arm.
    """

    def __init__(self, config: RobotConfiguration, transport: Transport,
                 solver: Optional[IKSolver] = None, command_log: Optional[logging.Logger] = None):
        """
        Args:
            config: Loaded robot configuration
            transport: Serial or simulated command channel
            solver: IK solver (defaults to the AL5D link lengths)
            command_log: Optional audit logger for transmitted commands
        """
        self.config = config
        self.transport = transport
        self.solver = solver or IKSolver()
        self.mapper = PulseMapper(config)
        self.gripper = GripperController.from_configuration(config)
        self.command_log = command_log

        self._joint_state = JointAngles(config.default_joints, config.default_gripper_mm)

    @classmethod
    def from_configuration(cls, config: RobotConfiguration, **kwargs) -> 'RobotController':
        return cls(config, create_transport(config), **kwargs)

    # ─────────────────────────────────────────────────────────────────────
    # Connection
    # ─────────────────────────────────────────────────────────────────────

    def connect(self):
        """Open the transport. Raises TransmissionError."""
        self.transport.connect()

    def disconnect(self):
        self.transport.disconnect()

    def is_connected(self) -> bool:
        return self.transport.is_connected()

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.disconnect()
        return False

    @property
    def joint_state(self) -> JointAngles:
        """Last successfully transmitted joint state."""
        return self._joint_state

    # ─────────────────────────────────────────────────────────────────────
    # Motion requests
    # ─────────────────────────────────────────────────────────────────────

    def move(self, pose: Frame, speed: Optional[int] = None) -> MotionResult:
        """
        Move the wrist to `pose` (relative to the robot base).

        Returns:
            MotionResult; on IK or range failure nothing is transmitted
        """
        try:
            solution = self.solver.solve(pose)
            joints = self._joint_state.with_joints(solution.angles)
            command = ServoCommand.from_pulses(self.mapper.map_joints(joints.joints), self._speed(speed))
        except MotionError as e:
            return self._failed("move", e)

        return self._transmit("move", command, joints)

    def set_joint_angles(self, angles: Sequence[float], speed: Optional[int] = None) -> MotionResult:
        """Command the five joints directly (radians, home-relative)."""
        try:
            joints = self._joint_state.with_joints(angles)
            command = ServoCommand.from_pulses(self.mapper.map_joints(joints.joints), self._speed(speed))
        except MotionError as e:
            return self._failed("set_joint_angles", e)

        return self._transmit("set_joint_angles", command, joints)

    def go_home(self, speed: Optional[int] = None) -> MotionResult:
        """All channels to their calibrated home pulse (gripper fully open)."""
        joints = JointAngles.home(self.gripper.fully_open)
        command = ServoCommand.from_pulses(self.mapper.home_pulses(), self._speed(speed))
        return self._transmit("go_home", command, joints)

    def grasp(self, aperture_mm: float, speed: Optional[int] = None) -> MotionResult:
        """
        Set the gripper opening.

        Args:
            aperture_mm: Distance between the fingers (0 = fully closed)
        """
        try:
            pulse = self.gripper.aperture_to_pulse(aperture_mm)
        except MotionError as e:
            return self._failed("grasp", e)

        joints = self._joint_state.with_gripper(aperture_mm)
        command = ServoCommand.from_pulses({self.gripper.channel: pulse}, self._speed(speed))
        return self._transmit("grasp", command, joints)

    def wait(self, duration_ms: float):
        """
        Block for a fixed time to let the servos finish moving.
        Open loop: there is no position feedback and no early wake-up.
        """
        if math.isnan(duration_ms) or duration_ms < 0:
            raise ValueError(f"Wait duration must be non-negative, got {duration_ms}")
        time.sleep(duration_ms / 1000.0)

    # ─────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────

    def _speed(self, speed: Optional[int]) -> int:
        if speed is None:
            return self.config.speed
        if speed <= 0:
            raise ValueError(f"Speed must be positive, got {speed}")
        return int(speed)

    def _transmit(self, operation: str, command: ServoCommand, joints: JointAngles) -> MotionResult:
        try:
            self.transport.send(command, joints)
        except MotionError as e:
            return self._failed(operation, e)

        self._joint_state = joints
        log_command(self.command_log, operation, self.transport.name, command, joints)
        logger.info(f"[RobotController] {operation}: {command.to_ssc32()}")
        return MotionResult(success=True, operation=operation, joints=joints, command=command)

    def _failed(self, operation: str, error: MotionError) -> MotionResult:
        logger.error(f"[RobotController] {operation} rejected: {error}")
        return MotionResult(success=False, operation=operation, error=error)
