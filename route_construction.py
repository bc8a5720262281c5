from typing import List, Optional, Sequence

import numpy as np

from constants import NEIGHBORHOOD_TIME_FRACTION
from problem import Problem
from route_model import SubPath


#candidate legs are built as lists of target ids between the leg's two bases
#and only materialized into a SubPath (with owned, visited target copies) on demand

class LegRouteBuilder:
    """
    Construction toolbox for a single leg (start base -> next base).

    All lookups go through the problem's movement matrix; the column is the
    point the vehicle is at, the row is the point it flies to. Targets
    already claimed by earlier legs are never proposed.
    """

    def __init__(
            self,
            problem: Problem,
            start_base_id: int,
            rng: Optional[np.random.Generator] = None,
            neighborhood_time_fraction: float = NEIGHBORHOOD_TIME_FRACTION
    ):
        problem.require_initialized()
        self.problem = problem
        self.start_base = problem.base(start_base_id)
        self.end_base = problem.base(start_base_id + 1)
        self.index = problem.index
        self.start_index = self.index.base(start_base_id)
        self.end_index = self.index.base(start_base_id + 1)
        self.targets_count = problem.targets_count
        self.times = problem.matrix.times
        self.average_weights = problem.matrix.average_weights
        self.max_time = problem.max_time_in_air_in_hours
        self.neighborhood_time = neighborhood_time_fraction * self.max_time
        self.rng = rng if rng is not None else np.random.default_rng()

    def point_index(self, target_ids: Sequence[int]) -> int: #matrix index of the last point reached
        return self.index.target(target_ids[-1]) if target_ids else self.start_index

    def create_sub_path(self, target_ids: Sequence[int]) -> SubPath:
        targets = []
        previous = self.start_index
        for target_id in target_ids:
            index = self.index.target(target_id)
            target = self.problem.target(target_id).clone()
            target.visit(float(self.times[index, previous]))
            targets.append(target)
            previous = index
        return SubPath(self.start_base, self.end_base, targets, float(self.times[self.end_index, previous]))

    def path_time(self, target_ids: Sequence[int], to_end_base: bool = True) -> float:
        total = 0.0
        previous = self.start_index
        for target_id in target_ids:
            index = self.index.target(target_id)
            total += self.times[index, previous]
            previous = index
        if to_end_base:
            total += self.times[self.end_index, previous]
        return float(total)

    def available_time(self, prefix: Sequence[int]) -> float: #budget left after flying the prefix
        return self.max_time - self.path_time(prefix, to_end_base=False)

    def is_feasible(self, target_ids: Sequence[int]) -> bool:
        return self.path_time(target_ids) <= self.max_time

    def candidate_mask(self, excluded_ids: Sequence[int] = ()) -> np.ndarray:
        mask = ~self.problem.visited_mask()
        for target_id in excluded_ids:
            mask[self.index.target(target_id)] = False
        return mask

    def greedy_ids(self) -> List[int]:
        """
        Nearest-value construction: fly to the unvisited target with the best
        value density from the current point, falling back to the next best
        ones when the best would not leave enough time to reach the end base.
        """
        target_ids = []
        mask = self.candidate_mask()
        current = self.start_index
        available = self.max_time
        to_end = self.times[self.end_index, :self.targets_count]
        while mask.any():
            scores = self.average_weights[:self.targets_count, current]
            chosen = None
            for index in np.argsort(-scores, kind="stable"): #ties go to the lower id
                if not mask[index]:
                    continue
                if self.times[index, current] + to_end[index] <= available:
                    chosen = int(index)
                    break
            if chosen is None:
                break
            available -= self.times[chosen, current]
            target_ids.append(self.index.target_id(chosen))
            mask[chosen] = False
            current = chosen
        return target_ids

    def greedy_sub_path(self) -> SubPath:
        return self.create_sub_path(self.greedy_ids())

    def probable_walk(
            self,
            prefix: Sequence[int] = (),
            available_time: Optional[float] = None,
            neighborhood: bool = False
    ) -> List[int]:
        """
        Roulette-wheel walk extending `prefix`: each step draws the next
        target with probability proportional to its value density from the
        current point, among targets that still leave time to reach the end
        base. The neighborhood variant also drops targets farther than
        `neighborhood_time` from the current point.
        """
        target_ids = list(prefix)
        available = self.max_time if available_time is None else available_time
        mask = self.candidate_mask(target_ids)
        current = self.point_index(target_ids)
        to_end = self.times[self.end_index, :self.targets_count]
        while True:
            to_candidate = self.times[:self.targets_count, current]
            feasible = mask & (to_candidate + to_end <= available)
            if neighborhood:
                feasible &= to_candidate <= self.neighborhood_time
            candidates = np.flatnonzero(feasible)
            if candidates.size == 0:
                break
            position = self.roulette(self.average_weights[candidates, current])
            if position is None: #nothing worth flying to
                break
            chosen = int(candidates[position])
            available -= to_candidate[chosen]
            target_ids.append(self.index.target_id(chosen))
            mask[chosen] = False
            current = chosen
        return target_ids

    def roulette(self, weights: np.ndarray) -> Optional[int]:
        #first position whose cumulative probability reaches a uniform draw
        weights = np.asarray(weights, dtype=float)
        infinite = np.isposinf(weights)
        if infinite.any(): #co-located targets outrank everything else
            weights = infinite.astype(float)
        total = weights.sum()
        if not total > 0:
            return None
        cumulative = np.cumsum(weights / total)
        position = int(np.searchsorted(cumulative, self.rng.random(), side="left"))
        return min(position, len(weights) - 1)

    def reachable_target_ids(self) -> List[int]:
        #targets that fit a start -> target -> end detour within the budget
        round_trip = (self.times[:self.targets_count, self.start_index] +
                      self.times[self.end_index, :self.targets_count])
        reachable = self.candidate_mask() & (round_trip < self.max_time)
        return [self.index.target_id(int(index)) for index in np.flatnonzero(reachable)]

    def random_ids(self, reachable_ids: Sequence[int]) -> List[int]:
        if not reachable_ids:
            return []
        max_count = min(len(reachable_ids), self.problem.targets_per_sub_path)
        count = int(self.rng.integers(1, max(max_count, 2)))
        chosen = self.rng.choice(len(reachable_ids), size=count, replace=False)
        return [reachable_ids[position] for position in chosen]
