"""
Transport
Abstract command channel to the arm, plus the per-request servo command.

Implementations:
- SerialDriver: SSC-32U servo controller over a serial link
- SimPublisher: joint angles published on a message channel (simulator)
"""

import abc
from dataclasses import dataclass, field
from typing import Dict, Tuple

from lib.robot.joint_state import JointAngles


@dataclass
class ServoCommand:
    """
    One command line: {channel: (pulse_us, speed)} in transmission order.
    Built fresh for every motion request.
    """
    targets: Dict[int, Tuple[int, int]] = field(default_factory=dict)

    @classmethod
    def from_pulses(cls, pulses: Dict[int, int], speed: int) -> 'ServoCommand':
        return cls({channel: (int(pulse), int(speed)) for channel, pulse in pulses.items()})

    def to_ssc32(self) -> str:
        """'#<ch> P<pulse> S<speed>' groups, space separated, unterminated."""
        return " ".join(
            f"#{channel} P{pulse} S{speed}" for channel, (pulse, speed) in self.targets.items()
        )


class Transport(abc.ABC):
    """Single-writer command channel. send() raises TransmissionError on failure."""

    name = "transport"

    @abc.abstractmethod
    def connect(self):
        """Open the channel. Raises TransmissionError."""

    @abc.abstractmethod
    def disconnect(self):
        """Close the channel."""

    @abc.abstractmethod
    def is_connected(self) -> bool:
        pass

    @abc.abstractmethod
    def send(self, command: ServoCommand, joints: JointAngles):
        """
        Deliver one motion request.

        Args:
            command: Servo setpoints for the channels being moved
            joints: Complete joint state after the request
        """
