"""
Robot configuration loader.
src/lib/config_loader.py

Reads the robot-specific calibration file (one key per line, values
separated by whitespace) into an immutable RobotConfiguration:

    COM      <serial port name>
    BAUD     <rate>
    SPEED    <us per second>
    CHANNEL  <c1> .. <c6>
    HOME     <h1> .. <h6>
    DEGREE   <d1> .. <d6>
    WRIST    <lightweight | heavyduty>
    DEFAULT  <j1> .. <j5> <gripper mm>

Optional keys: EFFECTOR <mm>, GRIPPER <max aperture mm>,
DIRECTION <s1> .. <s5>, TRANSPORT <serial | simulation>.

All six-entry keys follow the same joint order: base, shoulder, elbow,
wrist pitch, wrist roll, gripper.
"""

import logging
import math
import os
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

from lib.errors import ConfigurationError

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────────────────
# Constants
# ─────────────────────────────────────────────────────────────────────────────

NUM_JOINTS = 5
NUM_SERVOS = 6
WRIST_ROLL_INDEX = 4
GRIPPER_INDEX = 5

MAX_CHANNEL = 31          # SSC-32U has channels 0-31
PULSE_MIN = 500
PULSE_MAX = 2500

# Servo rotation sign per joint as assembled on the AL5D
ASSEMBLY_DIRECTIONS = (1, 1, -1, 1, 1)

DEFAULT_EFFECTOR_LENGTH = 100.0   # mm, wrist to gripper tip
DEFAULT_GRIPPER_APERTURE = 30.0   # mm, fully open

REQUIRED_KEYS = ("COM", "BAUD", "SPEED", "CHANNEL", "HOME", "DEGREE", "WRIST", "DEFAULT")
OPTIONAL_KEYS = ("EFFECTOR", "GRIPPER", "DIRECTION", "TRANSPORT")


class WristType(str, Enum):
    LIGHTWEIGHT = "lightweight"
    HEAVY_DUTY = "heavyduty"


class TransportKind(str, Enum):
    SERIAL = "serial"
    SIMULATION = "simulation"


def joint_directions(assembly, wrist: WristType) -> Tuple[int, ...]:
    """
    Direction multiplier per joint. The heavy-duty wrist reverses the
    mechanical coupling of the roll servo.
    """
    directions = list(assembly)
    if wrist == WristType.HEAVY_DUTY:
        directions[WRIST_ROLL_INDEX] = -directions[WRIST_ROLL_INDEX]
    return tuple(directions)


@dataclass(frozen=True)
class RobotConfiguration:
    """Per-robot calibration, read-only after loading."""
    port: str
    baud: int
    speed: int
    channels: Tuple[int, ...]
    home: Tuple[int, ...]
    degree: Tuple[float, ...]
    wrist: WristType
    default_joints: Tuple[float, ...]
    default_gripper_mm: float
    joint_directions: Tuple[int, ...]
    effector_length: float = DEFAULT_EFFECTOR_LENGTH
    gripper_max_aperture: float = DEFAULT_GRIPPER_APERTURE
    transport: TransportKind = TransportKind.SERIAL

    def __post_init__(self):
        for name, values, expected in (
            ("channels", self.channels, NUM_SERVOS),
            ("home", self.home, NUM_SERVOS),
            ("degree", self.degree, NUM_SERVOS),
            ("default_joints", self.default_joints, NUM_JOINTS),
            ("joint_directions", self.joint_directions, NUM_JOINTS),
        ):
            if len(values) != expected:
                raise ConfigurationError(f"{name} needs {expected} entries, got {len(values)}")

        if len(set(self.channels)) != NUM_SERVOS:
            raise ConfigurationError(f"Servo channels must be distinct: {self.channels}")
        for channel in self.channels:
            if not 0 <= channel <= MAX_CHANNEL:
                raise ConfigurationError(f"Channel {channel} outside 0-{MAX_CHANNEL}")
        for pulse in self.home:
            if not PULSE_MIN <= pulse <= PULSE_MAX:
                raise ConfigurationError(f"Home pulse {pulse}us outside {PULSE_MIN}-{PULSE_MAX}us")
        for value in self.degree[:NUM_JOINTS]:
            if value <= 0:
                raise ConfigurationError(f"Joint degree calibration must be positive, got {value}")
        if self.degree[GRIPPER_INDEX] == 0:
            raise ConfigurationError("Gripper calibration must be non-zero")
        for sign in self.joint_directions:
            if sign not in (1, -1):
                raise ConfigurationError(f"Direction multipliers must be +1 or -1, got {sign}")
        if self.baud <= 0 or self.speed <= 0:
            raise ConfigurationError("BAUD and SPEED must be positive")
        if self.effector_length < 0:
            raise ConfigurationError("EFFECTOR length must not be negative")
        if self.gripper_max_aperture <= 0:
            raise ConfigurationError("GRIPPER aperture must be positive")
        if not 0.0 <= self.default_gripper_mm <= self.gripper_max_aperture:
            raise ConfigurationError(
                f"DEFAULT gripper aperture {self.default_gripper_mm} mm outside "
                f"[0, {self.gripper_max_aperture}] mm"
            )

    @property
    def joint_channels(self) -> Tuple[int, ...]:
        return self.channels[:NUM_JOINTS]

    @property
    def gripper_channel(self) -> int:
        return self.channels[GRIPPER_INDEX]


# ─────────────────────────────────────────────────────────────────────────────
# Parsing helpers
# ─────────────────────────────────────────────────────────────────────────────

def _split_lines(text: str, source: str) -> Dict[str, List[str]]:
    entries = {}
    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, *values = line.split()
        key = key.upper()
        if key not in REQUIRED_KEYS and key not in OPTIONAL_KEYS:
            raise ConfigurationError(f"{source}:{line_no}: unknown key '{key}'")
        if key in entries:
            raise ConfigurationError(f"{source}:{line_no}: duplicate key '{key}'")
        if not values:
            raise ConfigurationError(f"{source}:{line_no}: key '{key}' has no value")
        entries[key] = values
    return entries


def _numbers(entries, key, count, cast, source):
    values = entries[key]
    if len(values) != count:
        raise ConfigurationError(f"{source}: {key} needs {count} values, got {len(values)}")
    try:
        numbers = tuple(cast(v) for v in values)
    except ValueError as e:
        raise ConfigurationError(f"{source}: {key} has a non-numeric value ({e})") from e
    if cast is float and not all(math.isfinite(v) for v in numbers):
        raise ConfigurationError(f"{source}: {key} values must be finite")
    return numbers


def _single(entries, key, cast, source):
    return _numbers(entries, key, 1, cast, source)[0]


def _enum_value(entries, key, enum_cls, source):
    values = entries[key]
    if len(values) != 1:
        raise ConfigurationError(f"{source}: {key} takes one value, got {len(values)}")
    try:
        return enum_cls(values[0].lower())
    except ValueError as e:
        allowed = " | ".join(m.value for m in enum_cls)
        raise ConfigurationError(f"{source}: {key} must be {allowed}, got '{values[0]}'") from e


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def parse_configuration(text: str, source: str = "<config>") -> RobotConfiguration:
    """Parse configuration text. Raises ConfigurationError."""
    entries = _split_lines(text, source)

    missing = [key for key in REQUIRED_KEYS if key not in entries]
    if missing:
        raise ConfigurationError(f"{source}: missing keys {', '.join(missing)}")

    com = entries["COM"]
    if len(com) != 1:
        raise ConfigurationError(f"{source}: COM takes one value, got {len(com)}")

    wrist = _enum_value(entries, "WRIST", WristType, source)

    default = _numbers(entries, "DEFAULT", NUM_JOINTS + 1, float, source)

    assembly = ASSEMBLY_DIRECTIONS
    if "DIRECTION" in entries:
        assembly = _numbers(entries, "DIRECTION", NUM_JOINTS, int, source)

    options = {}
    if "EFFECTOR" in entries:
        options["effector_length"] = _single(entries, "EFFECTOR", float, source)
    if "GRIPPER" in entries:
        options["gripper_max_aperture"] = _single(entries, "GRIPPER", float, source)
    if "TRANSPORT" in entries:
        options["transport"] = _enum_value(entries, "TRANSPORT", TransportKind, source)

    config = RobotConfiguration(
        port=com[0],
        baud=_single(entries, "BAUD", int, source),
        speed=_single(entries, "SPEED", int, source),
        channels=_numbers(entries, "CHANNEL", NUM_SERVOS, int, source),
        home=_numbers(entries, "HOME", NUM_SERVOS, int, source),
        degree=_numbers(entries, "DEGREE", NUM_SERVOS, float, source),
        wrist=wrist,
        default_joints=default[:NUM_JOINTS],
        default_gripper_mm=default[NUM_JOINTS],
        joint_directions=joint_directions(assembly, wrist),
        **options,
    )
    return config


def load_robot_configuration(path) -> RobotConfiguration:
    """
    Load the robot configuration file.

    Raises:
        ConfigurationError: file missing or content invalid
    """
    path = os.fspath(path)
    if not os.path.exists(path):
        logger.error(f"[ConfigLoader] File not found: {path}")
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e

    config = parse_configuration(text, source=os.path.basename(path))
    logger.info(
        f"[ConfigLoader] Loaded: {os.path.basename(path)} "
        f"(port={config.port}, wrist={config.wrist.value}, transport={config.transport.value})"
    )
    return config


def read_input_file(path) -> str:
    """
    Return the configuration filename named in the program input file.
    Relative names are resolved against the input file's directory.
    """
    path = os.fspath(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            tokens = f.read().split()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot open input file {path}: {e}") from e

    if not tokens:
        raise ConfigurationError(f"Input file {path} names no configuration file")

    filename = tokens[0]
    if not os.path.isabs(filename):
        filename = os.path.join(os.path.dirname(os.path.abspath(path)), filename)
    return filename
