import logging
import math
from typing import List

import numpy as np

from constants import (
    GENERATOR_MAX_WIDTH, GENERATOR_HEIGHT_CENTER, GENERATOR_TARGETS_PER_LEG, GENERATOR_EVEN_SHARE,
    GENERATOR_MAX_TIME_COEFFICIENT, GENERATOR_MAX_WEIGHT, GENERATOR_MAX_PLACEMENT_ATTEMPTS,
    SPEED_KM_PER_HOUR, SERVICE_TIME_HOURS
)
from exceptions import ConfigurationError, PathPlanningError
from mission_data import Base, Target
from problem import Problem

logger = logging.getLogger(__name__)

#bases sit one per equal-width section of a horizontal corridor,
#targets are scattered in a ring around each section centre

class ProblemGenerator:
    def __init__(
            self,
            bases_count: int,
            targets_count: int = 0,
            max_time_coefficient: float = GENERATOR_MAX_TIME_COEFFICIENT,
            is_for_experiments: bool = False,
            is_equivalent: bool = False,
            seed=None,
            max_width: float = GENERATOR_MAX_WIDTH,
            height_center: float = GENERATOR_HEIGHT_CENTER,
            speed_in_km_per_hour: float = SPEED_KM_PER_HOUR,
            service_time_in_hours: float = SERVICE_TIME_HOURS
    ):
        if bases_count < 2:
            raise ConfigurationError(f"at least two bases are required, got {bases_count}")
        if targets_count < 0:
            raise ConfigurationError(f"targets count must not be negative, got {targets_count}")
        self.bases_count = bases_count
        self.targets_count = targets_count or (bases_count - 1) * GENERATOR_TARGETS_PER_LEG #0 means default
        self.max_time_coefficient = max_time_coefficient
        self.is_equivalent = is_equivalent
        self.height_center = height_center
        self.speed_in_km_per_hour = speed_in_km_per_hour
        self.service_time_in_hours = service_time_in_hours

        self.section_width = max_width / bases_count
        self.base_radius = self.section_width / 8
        self.min_distance = self.base_radius * 0.2 if is_for_experiments else self.base_radius
        self.targets_radius = self.section_width * 0.4
        self.rng = np.random.default_rng(seed)

    def generate(self) -> Problem:
        counts = self.targets_per_base()
        bases = []
        targets = []
        for base_id in range(1, self.bases_count + 1):
            base = self.generate_base(base_id)
            bases.append(base)
            targets.extend(self.generate_targets(base, counts[base_id - 1], len(targets)))

        max_distance = self.max_time_coefficient * min_distance_between_bases(bases)
        problem = Problem(
            bases,
            targets,
            max_distance / self.speed_in_km_per_hour,
            self.speed_in_km_per_hour,
            self.service_time_in_hours,
            is_geographic=False)
        logger.info(f"generated {len(bases)} bases and {len(targets)} targets, "
                    f"max time in air {problem.max_time_in_air_in_hours:.4f} h")
        return problem

    def targets_per_base(self) -> List[int]:
        even = int(self.targets_count * GENERATOR_EVEN_SHARE / self.bases_count)
        counts = [even] * self.bases_count
        for _ in range(self.targets_count - even * self.bases_count): #leftovers go to interior bases
            index = int(self.rng.integers(1, self.bases_count - 1)) if self.bases_count > 2 else 0
            counts[index] += 1
        return counts

    def section_center(self, base_id: int) -> float:
        return (base_id - 0.5) * self.section_width

    def _random_point(self, center_x: float, radius: float):
        x = int(self.rng.integers(int(center_x - radius), int(center_x + radius), endpoint=True))
        y = int(self.rng.integers(int(self.height_center - radius), int(self.height_center + radius), endpoint=True))
        return x, y

    def generate_base(self, base_id: int) -> Base:
        center = self.section_center(base_id)
        for _ in range(GENERATOR_MAX_PLACEMENT_ATTEMPTS):
            x, y = self._random_point(center, self.base_radius)
            if math.hypot(x - center, y - self.height_center) <= self.base_radius:
                return Base(base_id, x, y)
        raise PathPlanningError(f"could not place base {base_id}")

    def generate_targets(self, base: Base, count: int, first_id_offset: int) -> List[Target]:
        center = self.section_center(base.id)
        placed = []
        for _ in range(count):
            for _ in range(GENERATOR_MAX_PLACEMENT_ATTEMPTS):
                x, y = self._random_point(center, self.targets_radius)
                from_center = math.hypot(x - center, y - self.height_center)
                if from_center > self.targets_radius or from_center < self.min_distance:
                    continue
                if math.hypot(x - base.x, y - base.y) < self.min_distance:
                    continue
                if any(math.hypot(x - px, y - py) < self.min_distance for px, py, _ in placed):
                    continue
                weight = 1 if self.is_equivalent else int(self.rng.integers(1, GENERATOR_MAX_WEIGHT, endpoint=True))
                placed.append((x, y, weight))
                break
            else:
                raise PathPlanningError(f"could not place {count} targets around base {base.id}")
        placed.sort(key=lambda point: (point[0], point[1])) #ids follow x, then y
        return [Target(first_id_offset + i + 1, x, y, weight) for i, (x, y, weight) in enumerate(placed)]

def min_distance_between_bases(bases: List[Base]) -> float:
    return min(math.hypot(b.x - a.x, b.y - a.y) for a, b in zip(bases, bases[1:]))

def generate_problem(bases_count: int, targets_count: int = 0, seed=None, initialize: bool = True, **kwargs) -> Problem:
    problem = ProblemGenerator(bases_count, targets_count, seed=seed, **kwargs).generate()
    return problem.initialize() if initialize else problem
