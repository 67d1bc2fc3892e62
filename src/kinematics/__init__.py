"""
Kinematics Module for the AL5D Arm

This module provides:
- Frame: immutable homogeneous transformation with compose/invert builders
- IKSolver: 5-DOF decoupled-wrist inverse kinematics (elbow-up)
- IKSolution: joint angles returned by the solver
"""

# Lazy imports to avoid loading numpy until a frame is needed
def __getattr__(name):
    if name in ('Frame', 'Vector3', 'compose', 'invert', 'translate',
                'rotate_x', 'rotate_y', 'rotate_z', 'identity'):
        from . import frame
        return getattr(frame, name)
    if name == 'IKSolver':
        from .ik_solver import IKSolver
        return IKSolver
    if name == 'IKSolution':
        from .ik_solver import IKSolution
        return IKSolution
    raise AttributeError(f"module 'kinematics' has no attribute '{name}'")

__all__ = [
    'Frame',
    'Vector3',
    'compose',
    'invert',
    'translate',
    'rotate_x',
    'rotate_y',
    'rotate_z',
    'identity',
    'IKSolver',
    'IKSolution',
]
