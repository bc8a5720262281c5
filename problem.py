import logging
from typing import List, Optional, Sequence

import numpy as np

from constants import SERVICE_TIME_HOURS
from exceptions import ConfigurationError
from mission_data import Base, Target
from movement_matrix import MatrixIndex, MovementMatrix, build_movement_matrix

logger = logging.getLogger(__name__)


class Problem:
    """
    One planning scenario: the ordered bases, the targets, the flight
    parameters and the derived movement matrix.

    Derived values exist only after `initialize()`. The visited flags live
    on the targets, outside the matrix, so re-initializing keeps them.
    """

    def __init__(
            self,
            bases: Sequence[Base],
            targets: Sequence[Target],
            max_time_in_air_in_hours: float,
            speed_in_km_per_hour: float,
            service_time_in_hours: float = SERVICE_TIME_HOURS,
            is_geographic: bool = False
    ):
        self.bases: List[Base] = list(bases)
        self.targets: List[Target] = list(targets)
        self.max_time_in_air_in_hours = max_time_in_air_in_hours
        self.speed_in_km_per_hour = speed_in_km_per_hour
        self.service_time_in_hours = service_time_in_hours
        self.is_geographic = is_geographic

        self.bases_count = 0
        self.sub_path_count = 0
        self.targets_count = 0
        self.targets_per_sub_path = 0
        self.points_count = 0
        self.index: Optional[MatrixIndex] = None
        self.matrix: Optional[MovementMatrix] = None

    def initialize(self) -> "Problem":
        self._validate()
        self.bases_count = len(self.bases)
        self.sub_path_count = self.bases_count - 1
        self.targets_count = len(self.targets)
        self.targets_per_sub_path = self.targets_count // self.sub_path_count
        self.points_count = self.targets_count + self.bases_count
        self.matrix = build_movement_matrix(
            self.targets, self.bases, self.speed_in_km_per_hour, self.is_geographic)
        self.index = self.matrix.index
        logger.debug(f"problem initialized: {self.bases_count} bases, {self.targets_count} targets, "
                     f"max time in air {self.max_time_in_air_in_hours:.4f} h")
        return self

    def _validate(self):
        if len(self.bases) < 2:
            raise ConfigurationError(f"at least two bases are required, got {len(self.bases)}")
        if self.speed_in_km_per_hour <= 0:
            raise ConfigurationError(f"speed must be positive, got {self.speed_in_km_per_hour}")
        if self.max_time_in_air_in_hours < 0:
            raise ConfigurationError(f"max time in air must not be negative, got {self.max_time_in_air_in_hours}")
        for position, base in enumerate(self.bases, 1): #ids drive the matrix mapping
            if base.id != position:
                raise ConfigurationError(f"base at position {position} has id {base.id}; ids must be 1..N in order")
        for position, target in enumerate(self.targets, 1):
            if target.id != position:
                raise ConfigurationError(f"target at position {position} has id {target.id}; ids must be 1..M in order")

    @property
    def is_initialized(self) -> bool:
        return self.matrix is not None

    def require_initialized(self):
        if not self.is_initialized:
            raise ConfigurationError("problem must be initialized before solving")

    def clone(self) -> "Problem":
        problem = Problem(
            self.bases,  #bases are immutable
            [t.clone() for t in self.targets],
            self.max_time_in_air_in_hours,
            self.speed_in_km_per_hour,
            self.service_time_in_hours,
            self.is_geographic)
        if not self.is_initialized:
            return problem.initialize()
        problem.bases_count = self.bases_count
        problem.sub_path_count = self.sub_path_count
        problem.targets_count = self.targets_count
        problem.targets_per_sub_path = self.targets_per_sub_path
        problem.points_count = self.points_count
        problem.index = self.index
        problem.matrix = self.matrix #read-only after initialization, safe to share
        return problem

    def target(self, target_id: int) -> Target:
        return self.targets[target_id - 1]

    def base(self, base_id: int) -> Base:
        return self.bases[base_id - 1]

    def visit(self, target_id: int, time_for_movement: float) -> None:
        self.target(target_id).visit(time_for_movement)

    def commit(self, sub_path) -> None: #claims the leg's targets for good
        for target in sub_path.targets:
            self.visit(target.id, target.time_for_movement)

    def reset_visits(self) -> None:
        for target in self.targets:
            target.visited = False
            target.time_for_movement = 0.0

    def visited_mask(self) -> np.ndarray: #true for targets claimed by earlier legs
        return np.fromiter((t.visited for t in self.targets), dtype=bool, count=len(self.targets))

    def unvisited_targets(self) -> List[Target]:
        return [t for t in self.targets if not t.visited]

    def __repr__(self) -> str:
        return (f"Problem(bases={len(self.bases)}, targets={len(self.targets)}, "
                f"max_time_in_air={self.max_time_in_air_in_hours}, speed={self.speed_in_km_per_hour}, "
                f"geographic={self.is_geographic})")
