"""
Geometry: point primitives for the node layout.

Nodes live at fixed 3D positions. The engine only needs:
- Euclidean distance (growth picks the nearest unconnected node)
- Normalization (direction of each node for the migration peak)
- A deterministic layout for initialization

lerp() is not used by the engine; renderers use it to place points along
a tube.
"""

from __future__ import annotations

import numpy as np
from scipy.spatial.distance import cdist

Point3 = tuple[float, float, float]


def distance(a: Point3, b: Point3) -> float:
    """Euclidean distance between two points."""
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    dz = b[2] - a[2]
    return float(np.sqrt(dx * dx + dy * dy + dz * dz))


def lerp(a: Point3, b: Point3, t: float) -> Point3:
    """Linear interpolation from a (t=0) to b (t=1)."""
    return (
        a[0] + (b[0] - a[0]) * t,
        a[1] + (b[1] - a[1]) * t,
        a[2] + (b[2] - a[2]) * t,
    )


def normalize(v: Point3) -> Point3:
    """Unit vector along v. The zero vector maps to itself."""
    length = float(np.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2]))
    if length == 0.0:
        return (0.0, 0.0, 0.0)
    return (v[0] / length, v[1] / length, v[2] / length)


def fibonacci_sphere(n: int, radius: float = 4.0) -> np.ndarray:
    """
    Spread n points evenly over a sphere.

    Golden-angle spiral: point i sits at polar angle acos(1 - 2(i + 0.5)/n)
    and azimuth π(1 + √5)·i.

    Args:
        n: Number of points
        radius: Sphere radius

    Returns:
        Array of shape [n, 3]
    """
    if n <= 0:
        return np.zeros((0, 3), dtype=np.float64)

    i = np.arange(n, dtype=np.float64)
    phi = np.arccos(1.0 - 2.0 * (i + 0.5) / n)
    theta = np.pi * (1.0 + np.sqrt(5.0)) * i

    return np.column_stack([
        radius * np.sin(phi) * np.cos(theta),
        radius * np.sin(phi) * np.sin(theta),
        radius * np.cos(phi),
    ])


def pairwise_distances(points: np.ndarray) -> np.ndarray:
    """Distance matrix [n, n] for an [n, 3] array of positions."""
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    return cdist(points, points)
