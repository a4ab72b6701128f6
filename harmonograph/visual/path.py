"""
Curve path container.
"""

from typing import Iterator, List, Optional, Tuple
import numpy as np


Point = Tuple[float, float]


class CurvePath:
    """
    Ordered, append-only sequence of (x, y) points.

    One path belongs to one render pass and is rebuilt from scratch whenever
    the parameters change.
    """

    def __init__(self, points: Optional[np.ndarray] = None):
        if points is None:
            points = np.empty((0, 2), dtype=np.float64)
        points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        self._points = points.copy()
        self._points.setflags(write=False)

    @classmethod
    def from_arrays(cls, x: np.ndarray, y: np.ndarray) -> 'CurvePath':
        return cls(np.column_stack([x, y]))

    def add(self, point: Point) -> None:
        """Append a point to the end of the path."""
        extended = np.vstack([self._points, np.asarray(point, dtype=np.float64).reshape(1, 2)])
        extended.setflags(write=False)
        self._points = extended

    def __len__(self) -> int:
        return self._points.shape[0]

    def __iter__(self) -> Iterator[Point]:
        for x, y in self._points:
            yield (float(x), float(y))

    def __getitem__(self, index: int) -> Point:
        x, y = self._points[index]
        return (float(x), float(y))

    def __eq__(self, other) -> bool:
        if not isinstance(other, CurvePath):
            return NotImplemented
        return np.array_equal(self._points, other._points)

    @property
    def points(self) -> np.ndarray:
        """Read-only (N, 2) array view of the points."""
        return self._points

    @property
    def x(self) -> np.ndarray:
        return self._points[:, 0]

    @property
    def y(self) -> np.ndarray:
        return self._points[:, 1]

    def to_list(self) -> List[Point]:
        return [(float(x), float(y)) for x, y in self._points]

    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y); all zeros for an empty path."""
        if len(self) == 0:
            return (0.0, 0.0, 0.0, 0.0)
        mins = self._points.min(axis=0)
        maxs = self._points.max(axis=0)
        return (float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))
