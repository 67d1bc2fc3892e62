"""
Frame Algebra

Homogeneous transformations for task-level robot programming.
A Frame is a rigid-body pose (3x3 rotation + translation) of one coordinate
system relative to its parent. Frames are immutable values: every builder and
operator returns a new Frame.

Example (wrist pose for an object grasp):
    T5 = compose(invert(Z), object_grasp, object_approach, invert(E))
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np


ORTHONORMAL_TOLERANCE = 1e-6


@dataclass(frozen=True)
class Vector3:
    """Position in millimetres."""
    x: float
    y: float
    z: float

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    @classmethod
    def from_array(cls, arr) -> 'Vector3':
        if len(arr) != 3:
            raise ValueError(f"Expected 3 elements, got {len(arr)}")
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))


@dataclass(frozen=True, eq=False)
class Frame:
    """
    Rigid-body pose.

    Attributes:
        rotation: 3x3 orthonormal rotation matrix (read-only)
        translation: (3,) translation vector in mm (read-only)
    """
    rotation: np.ndarray
    translation: np.ndarray

    def __post_init__(self):
        rotation = np.array(self.rotation, dtype=float)
        translation = np.array(self.translation, dtype=float).reshape(-1)

        if rotation.shape != (3, 3):
            raise ValueError(f"Rotation must be 3x3, got {rotation.shape}")
        if translation.shape != (3,):
            raise ValueError(f"Translation must have 3 elements, got {translation.shape}")
        if not np.allclose(rotation.T @ rotation, np.eye(3), atol=ORTHONORMAL_TOLERANCE):
            raise ValueError("Rotation is not orthonormal")
        if np.linalg.det(rotation) < 0:
            raise ValueError("Rotation is a reflection (det = -1)")

        rotation.setflags(write=False)
        translation.setflags(write=False)
        object.__setattr__(self, "rotation", rotation)
        object.__setattr__(self, "translation", translation)

    @property
    def position(self) -> Vector3:
        return Vector3.from_array(self.translation)

    @property
    def matrix(self) -> np.ndarray:
        """4x4 homogeneous matrix (a fresh, writable copy)."""
        m = np.eye(4)
        m[:3, :3] = self.rotation
        m[:3, 3] = self.translation
        return m

    @classmethod
    def from_matrix(cls, matrix) -> 'Frame':
        m = np.asarray(matrix, dtype=float)
        if m.shape != (4, 4):
            raise ValueError(f"Homogeneous matrix must be 4x4, got {m.shape}")
        if not np.allclose(m[3], [0.0, 0.0, 0.0, 1.0]):
            raise ValueError("Last row of a homogeneous matrix must be [0, 0, 0, 1]")
        return cls(m[:3, :3], m[:3, 3])

    def __matmul__(self, other: 'Frame') -> 'Frame':
        return compose(self, other)

    def __str__(self) -> str:
        rows = []
        for row in self.matrix:
            rows.append(" ".join(f"{v:9.3f}" for v in row))
        return "\n".join(rows)


# ─────────────────────────────────────────────────────────────────────────────
# Builders
# ─────────────────────────────────────────────────────────────────────────────

def identity() -> Frame:
    return Frame(np.eye(3), np.zeros(3))


def translate(x: float, y: float, z: float) -> Frame:
    """Pure translation frame (mm)."""
    return Frame(np.eye(3), np.array([x, y, z], dtype=float))


def _axis_rotation(axis: str, radians: float) -> np.ndarray:
    c = math.cos(radians)
    s = math.sin(radians)
    if axis == "x":
        return np.array([[1.0, 0.0, 0.0],
                         [0.0, c, -s],
                         [0.0, s, c]])
    if axis == "y":
        return np.array([[c, 0.0, s],
                         [0.0, 1.0, 0.0],
                         [-s, 0.0, c]])
    return np.array([[c, -s, 0.0],
                     [s, c, 0.0],
                     [0.0, 0.0, 1.0]])


def rotate_x(degrees: float) -> Frame:
    """Pure rotation about the x axis."""
    return Frame(_axis_rotation("x", math.radians(degrees)), np.zeros(3))


def rotate_y(degrees: float) -> Frame:
    """Pure rotation about the y axis."""
    return Frame(_axis_rotation("y", math.radians(degrees)), np.zeros(3))


def rotate_z(degrees: float) -> Frame:
    """Pure rotation about the z axis."""
    return Frame(_axis_rotation("z", math.radians(degrees)), np.zeros(3))


# ─────────────────────────────────────────────────────────────────────────────
# Operators
# ─────────────────────────────────────────────────────────────────────────────

def compose(*frames: Frame) -> Frame:
    """
    Chain frames left to right.

    compose(A, B): B is expressed relative to A, the result relative to A's
    parent. Rotation = Ra·Rb, translation = Ra·tb + ta.
    """
    if not frames:
        return identity()

    rotation = frames[0].rotation
    translation = frames[0].translation
    for frame in frames[1:]:
        translation = rotation @ frame.translation + translation
        rotation = rotation @ frame.rotation
    return Frame(rotation, translation)


def invert(frame: Frame) -> Frame:
    """Inverse pose: rotation Rᵗ, translation -Rᵗ·t."""
    rotation_t = frame.rotation.T
    return Frame(rotation_t, -(rotation_t @ frame.translation))


def transform_point(frame: Frame, point: Vector3) -> Vector3:
    """Express a point given in `frame` coordinates in the parent frame."""
    return Vector3.from_array(frame.rotation @ point.to_array() + frame.translation)


def frames_close(a: Frame, b: Frame, atol: float = 1e-6,
                 translation_atol: Optional[float] = None) -> bool:
    """Element-wise comparison of two frames within tolerance."""
    if translation_atol is None:
        translation_atol = atol
    return (np.allclose(a.rotation, b.rotation, atol=atol)
            and np.allclose(a.translation, b.translation, atol=translation_atol))
