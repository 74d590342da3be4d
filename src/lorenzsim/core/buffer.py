from __future__ import annotations

from collections import deque
from typing import Deque, Optional, Tuple

import numpy as np

from lorenzsim.core.chaos.base import TrajectoryPoint


class TrajectoryBuffer:
    """
    Ordered, capacity-bounded sequence of trajectory points.

    Insertion order is temporal order. Once full, every append evicts exactly
    one point from the front.
    """

    def __init__(self, capacity: int, seed: Optional[TrajectoryPoint] = None):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = int(capacity)
        self._points: Deque[TrajectoryPoint] = deque()
        if seed is not None:
            self.append(seed)

    def __len__(self) -> int:
        return len(self._points)

    def append(self, point: TrajectoryPoint) -> None:
        self._points.append(TrajectoryPoint(*point))
        if len(self._points) > self._capacity:
            self._points.popleft()

    def clear_and_seed(self, point: TrajectoryPoint) -> None:
        self._points.clear()
        self.append(point)

    def snapshot(self) -> Tuple[TrajectoryPoint, ...]:
        """Read-only copy of the current contents, oldest first."""
        return tuple(self._points)

    def to_array(self) -> np.ndarray:
        """Contents as an ``(N, 3)`` float64 array."""
        if not self._points:
            return np.empty((0, 3), dtype=np.float64)
        return np.array(self._points, dtype=np.float64)
