"""
Simulated transport: publishes joint angles for an arm simulator.

One multipart message per motion request:
  [topic, JSON payload]
  payload = [q1, q2, q3, q4, q5 (radians), gripper aperture (metres)]

Publishing is fire-and-forget; subscribers never acknowledge.
"""

import json
import logging
from typing import Optional

import zmq

from lib.errors import TransmissionError
from lib.robot.joint_state import JointAngles
from lib.robot.transport import ServoCommand, Transport

logger = logging.getLogger(__name__)

JOINT_COMMAND_TOPIC = "/lynxmotion_al5d/joints_positions/command"
DEFAULT_ENDPOINT = "tcp://*:5556"


class SimPublisher(Transport):
    """Owns one PUB socket bound to `endpoint`."""

    name = "simulation"

    def __init__(self, endpoint: str = DEFAULT_ENDPOINT, topic: str = JOINT_COMMAND_TOPIC,
                 context: Optional[zmq.Context] = None):
        """
        Args:
            endpoint: ZMQ endpoint to bind
            topic: Topic frame of every message
            context: Optional ZMQ context (default: process-wide instance)
        """
        self.endpoint = endpoint
        self.topic = topic
        self._context = context or zmq.Context.instance()
        self._socket = None

    def connect(self):
        """Bind the PUB socket. A second call on a bound publisher does nothing."""
        if self.is_connected():
            return
        try:
            self._socket = self._context.socket(zmq.PUB)
            self._socket.setsockopt(zmq.SNDHWM, 1)  # Only keep latest message
            self._socket.bind(self.endpoint)
        except zmq.ZMQError as e:
            logger.error(f"[SimPublisher] Failed to bind {self.endpoint}: {e}")
            self.disconnect()
            raise TransmissionError(f"Cannot bind publisher at {self.endpoint}: {e}") from e

        logger.info(f"[SimPublisher] Publishing '{self.topic}' on {self.endpoint}")

    def disconnect(self):
        if self._socket is not None:
            self._socket.close(linger=0)
            self._socket = None

    def is_connected(self) -> bool:
        return self._socket is not None

    def send(self, command: ServoCommand, joints: JointAngles):
        """Publish the full joint state. The servo command is not used."""
        if not self.is_connected():
            raise TransmissionError(f"Publisher at {self.endpoint} is not bound")

        payload = json.dumps(joints.to_message()).encode("utf-8")
        try:
            self._socket.send_multipart([self.topic.encode("utf-8"), payload], zmq.NOBLOCK)
        except zmq.ZMQError as e:
            logger.error(f"[SimPublisher] Failed to publish to {self.topic}: {e}")
            raise TransmissionError(f"Publish to {self.topic} failed: {e}") from e

        logger.debug(f"[SimPublisher] {self.topic} <- {joints.to_message()}")
