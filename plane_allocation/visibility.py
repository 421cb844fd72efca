"""
Visibility models that decide which tasks each plane can currently claim.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Set
import numpy as np
from .models import Plane, Task


class VisibilityModel(ABC):
    """Base class for visibility models."""

    @abstractmethod
    def compute(self, planes: List[Plane], tasks: List[Task]) -> Dict[Plane, Set[Task]]:
        """
        Compute the visibility set of every plane.

        Args:
            planes: Planes taking part in the allocation
            tasks: Tasks that are still uncompleted

        Returns:
            Dictionary mapping each plane to the tasks it can perceive
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Return the name of the visibility model."""
        pass


class OmniscientVisibility(VisibilityModel):
    """Every plane sees every task."""

    def get_name(self) -> str:
        return "Omniscient"

    def compute(self, planes: List[Plane], tasks: List[Task]) -> Dict[Plane, Set[Task]]:
        visible = set(tasks)
        return {plane: set(visible) for plane in planes}


class RangeVisibility(VisibilityModel):
    """A plane sees the tasks lying within its communication range."""

    def __init__(self, communication_range: Optional[float] = None):
        """
        Initialize range-based visibility.

        Args:
            communication_range: Range applied to every plane (None uses
                each plane's own communication_range)
        """
        self.communication_range = communication_range

    def get_name(self) -> str:
        if self.communication_range is None:
            return "Range (per plane)"
        return f"Range ({self.communication_range:g})"

    def compute(self, planes: List[Plane], tasks: List[Task]) -> Dict[Plane, Set[Task]]:
        if not planes or not tasks:
            return {plane: set() for plane in planes}

        plane_xy = np.array([[p.location.x, p.location.y] for p in planes], dtype=float)
        task_xy = np.array([[t.location.x, t.location.y] for t in tasks], dtype=float)
        distances = np.linalg.norm(plane_xy[:, None, :] - task_xy[None, :, :], axis=2)

        if self.communication_range is None:
            ranges = np.array([p.communication_range for p in planes], dtype=float)
        else:
            ranges = np.full(len(planes), self.communication_range, dtype=float)
        in_range = distances <= ranges[:, None]

        return {
            plane: {tasks[j] for j in np.flatnonzero(in_range[i])}
            for i, plane in enumerate(planes)
        }
