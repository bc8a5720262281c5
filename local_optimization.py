from typing import Callable, Dict, List, Optional

from route_construction import LegRouteBuilder
from route_enhancement import add_nearest
from route_model import SubPath
from solver_options import LocalOptimizationOption, require_option
from tabu_list import TabuList


class LocalOptimizer:
    """
    The local moves shared by the ABC and Tabu solvers.

    Every move has the signature (SubPath) -> Optional[SubPath] and returns
    a candidate only when it carries strictly more weight than its input.
    With a tabu list, rebuilt candidates whose encoding is tabu are skipped
    and every evaluated one is recorded.
    """

    def __init__(
            self,
            builder: LegRouteBuilder,
            option: LocalOptimizationOption,
            attempts: int,
            tabu_list: Optional[TabuList] = None
    ):
        self.builder = builder
        self.option = require_option(option, LocalOptimizationOption)
        self.attempts = max(1, attempts)
        self.tabu_list = tabu_list
        self.rng = builder.rng
        self._moves: Dict[LocalOptimizationOption, Callable[[SubPath], Optional[SubPath]]] = {
            LocalOptimizationOption.ADD_NEAREST: self.try_add_nearest,
            LocalOptimizationOption.REBUILD_PROBABLE: self.try_rebuild,
            LocalOptimizationOption.REBUILD_PROBABLE_NEIGHBORHOOD: self.try_rebuild,
            LocalOptimizationOption.REBUILD_PROBABLE_AND_ADD_NEAREST: self.try_rebuild_and_add_nearest,
            LocalOptimizationOption.REBUILD_PROBABLE_NEIGHBORHOOD_AND_ADD_NEAREST: self.try_rebuild_and_add_nearest,
        }

    def optimize(self, sub_path: SubPath) -> Optional[SubPath]:
        #repeat the selected move until it stops improving; None if it never did
        move = self._moves[self.option]
        improved = None
        candidate = move(sub_path)
        while candidate is not None:
            improved = candidate
            candidate = move(improved)
        return improved

    def _sample_position(self, sub_path: SubPath) -> int:
        if not sub_path.targets:
            return 0
        return int(self.rng.integers(0, len(sub_path)))

    def try_add_nearest(self, sub_path: SubPath) -> Optional[SubPath]:
        best = None
        for _ in range(self.attempts):
            candidate = add_nearest(self.builder, sub_path, self._sample_position(sub_path))
            if candidate is not None and (best is None or candidate.total_weight > best.total_weight):
                best = candidate
        if best is not None and best.total_weight > sub_path.total_weight:
            return best
        return None

    def add_nearest_to_convergence(self, sub_path: SubPath) -> SubPath:
        current = sub_path
        candidate = self.try_add_nearest(current)
        while candidate is not None:
            current = candidate
            candidate = self.try_add_nearest(current)
        return current

    def rebuild_candidates(self, sub_path: SubPath) -> List[SubPath]:
        """Keep a random prefix of the leg and regrow the rest by roulette walk."""
        target_ids = sub_path.target_ids
        candidates = []
        for _ in range(self.attempts):
            prefix = target_ids[:self._sample_position(sub_path) + 1]
            rebuilt_ids = self.builder.probable_walk(
                prefix, self.builder.available_time(prefix), self.option.uses_neighborhood)
            if self.tabu_list is not None:
                encoding = "/".join(str(target_id) for target_id in rebuilt_ids)
                if encoding in self.tabu_list:
                    continue
                self.tabu_list.push(encoding)
            candidates.append(self.builder.create_sub_path(rebuilt_ids))
        return candidates

    def try_rebuild(self, sub_path: SubPath) -> Optional[SubPath]:
        candidates = self.rebuild_candidates(sub_path)
        if not candidates:
            return None
        best = max(candidates, key=lambda sp: sp.total_weight) #first wins ties
        return best if best.total_weight > sub_path.total_weight else None

    def try_rebuild_and_add_nearest(self, sub_path: SubPath) -> Optional[SubPath]:
        candidates = self.rebuild_candidates(sub_path)
        if not candidates:
            return None
        best = max(candidates, key=lambda sp: sp.value_density)
        best = self.add_nearest_to_convergence(best)
        return best if best.total_weight > sub_path.total_weight else None
