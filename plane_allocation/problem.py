"""
Problem (scenario) definitions and utilities.
"""

from dataclasses import dataclass, field, fields, asdict
from typing import List, Optional, Dict, Any
import json
import random
from . import config


@dataclass
class PlaneDefinition:
    """Initial location and capabilities of a plane."""
    x: float
    y: float
    speed: float = config.DEFAULT_SPEED
    communication_range: float = config.DEFAULT_COMMUNICATION_RANGE


@dataclass
class TaskDefinition:
    """A task and the simulation time (in seconds) at which it is submitted."""
    x: float
    y: float
    time: int = 0


@dataclass
class StationDefinition:
    """Location of a recharging station."""
    x: float
    y: float


def _number(value, kind: str, name: str, convert=float):
    try:
        return convert(value)
    except (TypeError, ValueError) as e:
        msg = f"Invalid {kind} field '{name}': expected a number, got {value!r}"
        raise ValueError(msg) from e


def _section(data: Dict[str, Any], name: str) -> List[Any]:
    entries = data.get(name, [])
    if not isinstance(entries, list):
        msg = f"Problem section '{name}' must be a list, got {type(entries).__name__}"
        raise ValueError(msg)
    return entries


def _build(cls, data: Dict[str, Any], kind: str, index: int):
    if not isinstance(data, dict):
        msg = f"Invalid {kind} definition at index {index}: expected a mapping, got {type(data).__name__}"
        raise ValueError(msg)
    types = {f.name: f.type for f in fields(cls)}
    unknown = set(data) - set(types)
    if unknown:
        msg = f"Invalid {kind} definition at index {index}: unknown fields {sorted(unknown)}"
        raise ValueError(msg)
    values = {
        name: _number(value, f"{kind} {index}", name, types[name])
        for name, value in data.items()
    }
    try:
        return cls(**values)
    except TypeError as e:
        msg = f"Invalid {kind} definition at index {index}: {e}"
        raise ValueError(msg) from e


@dataclass
class ProblemDefinition:
    """
    Definition of a problem or scenario.

    It includes the world's properties (width, height and duration), every
    plane with its initial location, every task that will be submitted
    throughout the simulation, and the recharging stations.
    """
    width: int = config.DEFAULT_WIDTH
    height: int = config.DEFAULT_HEIGHT
    duration: int = config.DEFAULT_DURATION
    planes: List[PlaneDefinition] = field(default_factory=list)
    tasks: List[TaskDefinition] = field(default_factory=list)
    stations: List[StationDefinition] = field(default_factory=list)

    def add_plane(self, plane: PlaneDefinition):
        """Add a plane to the problem."""
        self.planes.append(plane)

    def add_task(self, task: TaskDefinition):
        """Add a task to the problem."""
        self.tasks.append(task)

    def add_station(self, station: StationDefinition):
        """Add a recharging station to the problem."""
        self.stations.append(station)

    @staticmethod
    def generate_random_problem(
        num_planes: int,
        num_tasks: int,
        num_stations: int = 0,
        width: int = config.DEFAULT_WIDTH,
        height: int = config.DEFAULT_HEIGHT,
        duration: int = config.DEFAULT_DURATION,
        submission_window: int = 0,
        speed: float = config.DEFAULT_SPEED,
        communication_range: float = config.DEFAULT_COMMUNICATION_RANGE,
        seed: Optional[int] = None
    ) -> 'ProblemDefinition':
        """
        Generate a random problem.

        Args:
            num_planes: Number of planes to create
            num_tasks: Number of tasks to create
            num_stations: Number of recharging stations to create
            width: Width of the simulation space
            height: Height of the simulation space
            duration: Duration of the scenario in seconds
            submission_window: Tasks are submitted uniformly within
                [0, submission_window] seconds (0 submits all at start)
            speed: Speed of every plane
            communication_range: Communication range of every plane
            seed: Random seed for reproducibility

        Returns:
            ProblemDefinition with randomly placed planes, tasks and stations
        """
        rng = random.Random(seed)

        planes = [
            PlaneDefinition(
                x=rng.uniform(0, width),
                y=rng.uniform(0, height),
                speed=speed,
                communication_range=communication_range
            )
            for _ in range(num_planes)
        ]
        tasks = sorted(
            (
                TaskDefinition(
                    x=rng.uniform(0, width),
                    y=rng.uniform(0, height),
                    time=rng.randint(0, submission_window) if submission_window > 0 else 0
                )
                for _ in range(num_tasks)
            ),
            key=lambda t: t.time
        )
        stations = [
            StationDefinition(x=rng.uniform(0, width), y=rng.uniform(0, height))
            for _ in range(num_stations)
        ]

        return ProblemDefinition(
            width=width,
            height=height,
            duration=duration,
            planes=planes,
            tasks=tasks,
            stations=stations
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the problem to plain JSON-compatible data."""
        return asdict(self)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'ProblemDefinition':
        """
        Build a problem from plain data.

        Raises:
            ValueError: If a section, entry or numeric field is malformed
        """
        if not isinstance(data, dict):
            msg = f"Problem definition must be a mapping, got {type(data).__name__}"
            raise ValueError(msg)

        problem = ProblemDefinition(
            width=_number(data.get("width", config.DEFAULT_WIDTH), "problem", "width", int),
            height=_number(data.get("height", config.DEFAULT_HEIGHT), "problem", "height", int),
            duration=_number(data.get("duration", config.DEFAULT_DURATION), "problem", "duration", int),
        )
        for i, entry in enumerate(_section(data, "planes")):
            problem.add_plane(_build(PlaneDefinition, entry, "plane", i))
        for i, entry in enumerate(_section(data, "tasks")):
            problem.add_task(_build(TaskDefinition, entry, "task", i))
        for i, entry in enumerate(_section(data, "stations")):
            problem.add_station(_build(StationDefinition, entry, "station", i))
        return problem

    def save(self, filepath: str):
        """
        Save the problem to a JSON file.

        Args:
            filepath: Path to output JSON file
        """
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @staticmethod
    def load(filepath: str) -> 'ProblemDefinition':
        """
        Load a problem from a JSON file.

        Args:
            filepath: Path to input JSON file
        """
        with open(filepath) as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                msg = f"{filepath} is not a valid problem file: {e}"
                raise ValueError(msg) from e
        return ProblemDefinition.from_dict(data)

    def __repr__(self) -> str:
        return (f"ProblemDefinition({self.width}x{self.height}, planes={len(self.planes)}, "
                f"tasks={len(self.tasks)}, stations={len(self.stations)})")
