"""
Unit Tests for the SSC-32U SerialDriver

The serial port is replaced by a mock; tests check the bytes on the wire.
"""

import sys
import os
import unittest
from unittest.mock import MagicMock, patch

import serial

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from lib.errors import TransmissionError
from lib.robot.joint_state import JointAngles
from lib.robot.serial_driver import SerialDriver
from lib.robot.transport import ServoCommand


JOINTS = JointAngles.home(30.0)


class TestServoCommand(unittest.TestCase):

    def test_ssc32_format(self):
        command = ServoCommand.from_pulses({0: 1500, 1: 1400, 6: 1300}, 500)
        self.assertEqual(command.to_ssc32(), "#0 P1500 S500 #1 P1400 S500 #6 P1300 S500")

    def test_transmission_order_follows_insertion(self):
        command = ServoCommand.from_pulses({5: 600, 0: 1500}, 250)
        self.assertEqual(command.to_ssc32(), "#5 P600 S250 #0 P1500 S250")


class TestSerialDriver(unittest.TestCase):

    def setUp(self):
        patcher = patch("lib.robot.serial_driver.serial.Serial")
        self.serial_cls = patcher.start()
        self.addCleanup(patcher.stop)

        self.port = MagicMock()
        self.port.is_open = True
        self.serial_cls.return_value = self.port

        self.driver = SerialDriver("/dev/ttyUSB0", 9600)

    def test_connect_opens_port(self):
        self.driver.connect()
        self.serial_cls.assert_called_once_with("/dev/ttyUSB0", 9600, timeout=1.0)
        self.assertTrue(self.driver.is_connected())

    def test_connect_failure(self):
        self.serial_cls.side_effect = serial.SerialException("no such device")
        with self.assertRaises(TransmissionError):
            self.driver.connect()
        self.assertFalse(self.driver.is_connected())

    def test_send_writes_one_terminated_line(self):
        self.driver.connect()
        self.driver.send(ServoCommand.from_pulses({0: 1500, 1: 1400}, 500), JOINTS)

        self.port.write.assert_called_once_with(b"#0 P1500 S500 #1 P1400 S500\r")
        self.port.flush.assert_called_once()

    def test_send_without_connection(self):
        with self.assertRaises(TransmissionError):
            self.driver.send(ServoCommand.from_pulses({0: 1500}, 500), JOINTS)

    def test_send_empty_command(self):
        self.driver.connect()
        with self.assertRaises(TransmissionError):
            self.driver.send(ServoCommand(), JOINTS)
        self.port.write.assert_not_called()

    def test_write_failure(self):
        self.driver.connect()
        self.port.write.side_effect = serial.SerialException("device disconnected")
        with self.assertRaises(TransmissionError):
            self.driver.send(ServoCommand.from_pulses({0: 1500}, 500), JOINTS)

    def test_disconnect(self):
        self.driver.connect()
        self.driver.disconnect()
        self.port.close.assert_called_once()
        self.assertFalse(self.driver.is_connected())


if __name__ == '__main__':
    unittest.main(verbosity=2)
