"""
Serial Driver for the SSC-32U Servo Controller
Writes one ASCII command line per motion request.
Protocol:
  #<ch> P<us> S<speed> [#<ch> P<us> S<speed> ...]<CR>
    ch    : servo channel (0-31)
    us    : pulse width (500-2500)
    speed : travel rate in us per second
No acknowledgement is returned by the controller.
"""

import logging

import serial

from lib.errors import TransmissionError
from lib.robot.joint_state import JointAngles
from lib.robot.transport import ServoCommand, Transport

logger = logging.getLogger(__name__)

LINE_TERMINATOR = "\r"


class SerialDriver(Transport):
    """
    Communicates with the SSC-32U via serial port.
    """

    name = "serial"

    def __init__(self, port, baudrate=9600, timeout=1.0):
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.ser = None

    def connect(self):
        """
        Open the serial port.

        Raises:
            TransmissionError: port cannot be opened
        """
        try:
            self.ser = serial.Serial(self.port, self.baudrate, timeout=self.timeout)
        except serial.SerialException as e:
            logger.error(f"[SerialDriver] Connection to {self.port} failed: {e}")
            raise TransmissionError(f"Cannot open serial port {self.port}: {e}") from e

        logger.info(f"[SerialDriver] Connected to {self.port} @ {self.baudrate}bps")

    def disconnect(self):
        """Disconnect serial port."""
        if self.ser and self.ser.is_open:
            self.ser.close()
            logger.info(f"[SerialDriver] Disconnected from {self.port}")
        self.ser = None

    def is_connected(self):
        return self.ser is not None and self.ser.is_open

    def send(self, command: ServoCommand, joints: JointAngles):
        """
        Write the command line and flush it.

        Raises:
            TransmissionError: port closed or write failed
        """
        if not command.targets:
            raise TransmissionError("Refusing to send an empty servo command")
        if not self.is_connected():
            raise TransmissionError(f"Serial port {self.port} is not open")

        line = f"{command.to_ssc32()}{LINE_TERMINATOR}"
        try:
            self.ser.write(line.encode("ascii"))
            self.ser.flush()
        except (serial.SerialException, OSError) as e:
            logger.error(f"[SerialDriver] Write failed: {e}")
            raise TransmissionError(f"Write to {self.port} failed: {e}") from e

        logger.debug(f"[SerialDriver] Sent: {line.strip()}")
