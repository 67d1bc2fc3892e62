# Robot Control Library
# Provides setpoint mapping, transports and the motion executor

from .joint_state import JointAngles
from .pulse_mapper import PulseMapper
from .gripper import GripperCalibration, GripperController
from .transport import ServoCommand, Transport
from .serial_driver import SerialDriver
from .sim_publisher import SimPublisher
from .robot_controller import MotionResult, RobotController, create_transport
