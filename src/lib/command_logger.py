# Command Audit Log
# One line per command that reached a transport, written to logs/commands.log:
#   [2026-10-16T14:03:22] GRASP via=serial | #5 P1350 S500 | joints_deg=[...] gripper_mm=15.0
# Rejected requests never appear here; they go to the module loggers.
# Rotation: 5MB per file, 10 backups named commands-{yyyyMMddHHmmss}.log

import os
import logging
from datetime import datetime
from pathlib import Path
from logging.handlers import RotatingFileHandler

# Project root = 2 levels up from src/lib/
PROJECT_ROOT = Path(__file__).parent.parent.parent
LOG_DIR = PROJECT_ROOT / "logs"

COMMAND_LOGGER_NAME = "al5d.commands"
COMMAND_LOG_FILE = "commands.log"

MAX_BYTES = 5 * 1024 * 1024  # 5MB
BACKUP_COUNT = 10

AUDIT_FORMAT = "[%(asctime)s] %(message)s"
AUDIT_DATEFMT = "%Y-%m-%dT%H:%M:%S"


class AuditFileHandler(RotatingFileHandler):
    """Rotating handler whose backups carry the rotation time instead of .1, .2, ..."""

    def _backup_path(self):
        base = Path(self.baseFilename)
        stamp = datetime.now().strftime("%Y%m%d%H%M%S")
        candidate = base.with_name(f"{base.stem}-{stamp}.log")
        n = 1
        while candidate.exists():
            candidate = base.with_name(f"{base.stem}-{stamp}-{n}.log")
            n += 1
        return candidate

    def _prune_backups(self):
        base = Path(self.baseFilename)
        backups = sorted(base.parent.glob(f"{base.stem}-*.log"), key=lambda p: (p.stat().st_mtime, p.name))
        for old in backups[:max(0, len(backups) - self.backupCount)]:
            old.unlink()

    def doRollover(self):
        if self.stream:
            self.stream.close()
            self.stream = None
        if os.path.exists(self.baseFilename):
            os.replace(self.baseFilename, self._backup_path())
        if self.backupCount > 0:
            self._prune_backups()
        if not self.delay:
            self.stream = self._open()


def create_file_logger(name, filename, log_dir=LOG_DIR, max_bytes=MAX_BYTES, backup_count=BACKUP_COUNT):
    """Named audit logger writing to {log_dir}/{filename}.

    The logger does not propagate, so audit lines stay out of the console
    output. Calling it again for the same name returns the existing logger.
    """
    audit = logging.getLogger(name)
    if audit.handlers:
        return audit

    os.makedirs(log_dir, exist_ok=True)
    handler = AuditFileHandler(
        os.path.join(log_dir, filename),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(AUDIT_FORMAT, datefmt=AUDIT_DATEFMT))

    audit.setLevel(logging.INFO)
    audit.propagate = False
    audit.addHandler(handler)
    return audit


def create_command_logger(log_dir=LOG_DIR):
    return create_file_logger(COMMAND_LOGGER_NAME, COMMAND_LOG_FILE, log_dir=log_dir)


def format_command(operation, transport_name, command, joints):
    angles = " ".join(f"{a:.1f}" for a in joints.degrees())
    return (
        f"{operation.upper()} via={transport_name} | {command.to_ssc32()} | "
        f"joints_deg=[{angles}] gripper_mm={joints.gripper_mm:.1f}"
    )


def log_command(command_log, operation, transport_name, command, joints):
    """Record one transmitted request. No-op without an audit logger."""
    if command_log is None:
        return
    command_log.info(format_command(operation, transport_name, command, joints))
