"""Command audit log"""
import sys
import os
import logging

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from lib.command_logger import AuditFileHandler, create_file_logger, log_command
from lib.robot.joint_state import JointAngles
from lib.robot.transport import ServoCommand


def _close(logger):
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_file_logger_writes_to_log_dir(tmp_path):
    logger = create_file_logger("al5d.test.audit", "audit.log", log_dir=tmp_path / "logs")
    try:
        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()
        content = (tmp_path / "logs" / "audit.log").read_text(encoding="utf-8")
        assert "] hello" in content
        assert logger.propagate is False
    finally:
        _close(logger)


def test_file_logger_is_idempotent(tmp_path):
    first = create_file_logger("al5d.test.idempotent", "a.log", log_dir=tmp_path)
    try:
        second = create_file_logger("al5d.test.idempotent", "a.log", log_dir=tmp_path)
        assert first is second
        assert len(first.handlers) == 1
    finally:
        _close(first)


def test_rotated_backups_are_timestamped(tmp_path):
    handler = AuditFileHandler(str(tmp_path / "commands.log"), maxBytes=64, backupCount=2, encoding="utf-8")
    try:
        for i in range(6):
            handler.emit(logging.makeLogRecord({"msg": f"MOVE via=serial | #0 P15{i:02d} S500 | padding padding"}))
    finally:
        handler.close()

    backups = sorted(p.name for p in tmp_path.glob("commands-*.log"))
    assert 1 <= len(backups) <= 2
    assert all(name.startswith("commands-20") for name in backups)
    assert (tmp_path / "commands.log").exists()


def test_log_command_line():
    records = []

    class Collect(logging.Handler):
        def emit(self, record):
            records.append(record.getMessage())

    logger = logging.getLogger("al5d.test.collect")
    logger.setLevel(logging.INFO)
    handler = Collect()
    logger.addHandler(handler)
    try:
        command = ServoCommand.from_pulses({5: 1350}, 500)
        log_command(logger, "grasp", "serial", command, JointAngles.home(15.0))
    finally:
        logger.removeHandler(handler)

    assert records == [
        "GRASP via=serial | #5 P1350 S500 | joints_deg=[0.0 0.0 0.0 0.0 0.0] gripper_mm=15.0"
    ]


def test_log_command_without_logger():
    log_command(None, "move", "serial", ServoCommand(), JointAngles.home(30.0))
