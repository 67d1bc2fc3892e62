"""
Robot Error Taxonomy

ConfigurationError is fatal at startup. Every MotionError is fatal to the
motion sequence that raised it: nothing is retried and nothing is partially
applied.
"""


class RobotError(Exception):
    """Base class for all arm control errors."""


class ConfigurationError(RobotError):
    """Missing, malformed or inconsistent robot configuration."""


class MotionError(RobotError):
    """A single motion request was rejected or could not be transmitted."""


class UnreachablePoseError(MotionError):
    """The IK reachability test failed for the requested wrist pose."""

    def __init__(self, pose, reason: str):
        self.pose = pose
        self.reason = reason
        position = pose.position
        super().__init__(
            f"Unreachable pose at ({position.x:.1f}, {position.y:.1f}, {position.z:.1f}) mm: {reason}"
        )


class GripperRangeError(MotionError):
    """Requested aperture lies outside the calibrated gripper range."""

    def __init__(self, aperture_mm: float, max_aperture_mm: float):
        self.aperture_mm = aperture_mm
        self.max_aperture_mm = max_aperture_mm
        super().__init__(
            f"Gripper aperture {aperture_mm} mm outside [0, {max_aperture_mm}] mm"
        )


class JointRangeError(MotionError):
    """A joint angle maps to a pulse width the servo controller cannot accept."""

    def __init__(self, joint: str, pulse_us: float, pulse_min: int, pulse_max: int):
        self.joint = joint
        self.pulse_us = pulse_us
        super().__init__(
            f"Joint '{joint}' pulse {pulse_us:.0f}us outside [{pulse_min}, {pulse_max}]us"
        )


class TransmissionError(MotionError):
    """The transport failed to deliver a command."""
