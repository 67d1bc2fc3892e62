"""
Task-level robot programming demo for the Lynxmotion AL5D arm.

Reads the configuration filename from the input file, loads the robot
calibration and runs a fixed sequence: home, a few wrist poses, an
approach / grasp / lift of an object, a drop above a tray, and home again.

Every pose is a wrist frame obtained by composing frames:
    T5 = inv(Z) * pose * inv(E)
Z: robot base frame, E: end-effector (gripper tip) offset from the wrist.
"""

import argparse
import logging
import os
import sys

from kinematics.frame import compose, invert, rotate_x, rotate_y, rotate_z, translate
from lib.command_logger import create_command_logger
from lib.config_loader import load_robot_configuration, read_input_file
from lib.errors import RobotError
from lib.robot.robot_controller import RobotController

logger = logging.getLogger(__name__)

DEFAULT_INPUT = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
                             "data", "robotProgrammingInput.txt")

GRASP_APERTURE_MM = 15.0  # width of a Lego block

# Demo scene (mm, degrees)
OBJECT_X, OBJECT_Y, OBJECT_Z = 0.0, 187.0, 0.0
OBJECT_THETA = -90.0
EXAMPLE_X, EXAMPLE_Y, EXAMPLE_Z = OBJECT_X, OBJECT_Y, 216.0
SIDE_X = 100.0
TRAY_X, TRAY_Y, TRAY_Z = 150.0, 100.0, 100.0
APPROACH_DISTANCE = 100.0


class SequenceAborted(Exception):
    pass


def _check(result):
    if not result:
        raise SequenceAborted(f"{result.operation} error ... quitting: {result.error_message}")


def run_demo(robot: RobotController, pause_ms: float = 3000):
    """
    Execute the demonstration sequence.

    Raises:
        SequenceAborted: first request that fails
    """
    effector_length = robot.config.effector_length

    E = translate(0.0, 0.0, effector_length)  # end-effector (gripper) frame
    Z = translate(0.0, 0.0, 0.0)              # robot base frame

    def move_to(label, pose):
        logger.info(f"[Demo] {label}")
        _check(robot.move(compose(invert(Z), pose, invert(E))))
        robot.wait(pause_ms)

    _check(robot.go_home())
    robot.wait(2000)

    # gripper frame aligned with the base frame, gripper pointing up
    move_to("align gripper with base frame",
            translate(EXAMPLE_X, EXAMPLE_Y, EXAMPLE_Z + effector_length))

    move_to("align gripper with base frame; rotate wrist 90 degrees",
            compose(translate(EXAMPLE_X, EXAMPLE_Y, EXAMPLE_Z + effector_length), rotate_z(90.0)))

    # same orientation as the home configuration, reached two ways
    move_to("home pose",
            compose(translate(EXAMPLE_X, EXAMPLE_Y + effector_length, EXAMPLE_Z),
                    rotate_z(90.0), rotate_y(90.0)))

    move_to("home pose, version 2",
            compose(translate(EXAMPLE_X, EXAMPLE_Y + effector_length, EXAMPLE_Z),
                    rotate_y(90.0), rotate_x(-90.0)))

    move_to("home pose 20 mm above the work surface",
            compose(translate(EXAMPLE_X, EXAMPLE_Y + effector_length, 20.0),
                    rotate_z(90.0), rotate_y(90.0)))

    # grasp an object from above
    object_grasp = compose(translate(OBJECT_X, OBJECT_Y, OBJECT_Z), rotate_y(180.0), rotate_z(OBJECT_THETA))
    object_approach = translate(0.0, 0.0, -APPROACH_DISTANCE)

    move_to("initial approach pose", compose(object_grasp, object_approach))

    _check(robot.grasp(robot.gripper.fully_open))
    robot.wait(1000)

    move_to("grasp pose", object_grasp)

    # never fully closed: the block stops the fingers and the servo stalls
    _check(robot.grasp(GRASP_APERTURE_MM))
    robot.wait(1000)

    move_to("approach pose", compose(object_grasp, object_approach))

    carry = compose(rotate_y(180.0), rotate_z(-90.0))
    move_to("example pose",
            compose(translate(EXAMPLE_X, EXAMPLE_Y, EXAMPLE_Z - effector_length), carry))

    move_to("horizontally right pose",
            compose(translate(EXAMPLE_X + SIDE_X, EXAMPLE_Y, EXAMPLE_Z - effector_length), carry))

    move_to("above the tray pose", compose(translate(TRAY_X, TRAY_Y, TRAY_Z), carry))

    _check(robot.grasp(robot.gripper.fully_open))
    robot.wait(1000)

    move_to("example pose",
            compose(translate(EXAMPLE_X, EXAMPLE_Y, EXAMPLE_Z - effector_length), carry))

    # leave the arm close to the controller's power-on pose
    _check(robot.go_home())


def main(argv=None):
    parser = argparse.ArgumentParser(description='AL5D task-level robot programming demo')
    parser.add_argument('input', nargs='?', default=DEFAULT_INPUT,
                        help='Input file naming the robot configuration file')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)

    try:
        config = load_robot_configuration(read_input_file(args.input))
        robot = RobotController.from_configuration(config, command_log=create_command_logger())
        with robot:
            run_demo(robot)
    except (RobotError, SequenceAborted) as e:
        logger.error(f"[Demo] {e}")
        return 1

    logger.info("[Demo] Sequence complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
