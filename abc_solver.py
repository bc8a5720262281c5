import logging
from typing import List, Sequence, Set, Tuple

import numpy as np

from constants import (
    SCOUT_BEES_PER_TARGET, BEST_SCOUT_BEES_PER_TARGET, FORAGER_BEES_PER_TARGET,
    ABC_ITERATIONS_PER_BASE, MAX_GENERATION_ATTEMPTS,
    MAX_ITERATIONS_COEFFICIENT, SCOUT_BEES_COEFFICIENT, FORAGER_BEES_COEFFICIENT
)
from local_optimization import LocalOptimizer
from problem import Problem
from route_construction import LegRouteBuilder
from route_model import Solution, SubPath
from solver_options import ConstructionOption, LocalOptimizationOption, require_option, require_positive

logger = logging.getLogger(__name__)


class AbcSolver:
    """
    Artificial bee colony search, leg by leg.

    Each iteration sends scouts to build fresh candidate legs, keeps the
    best ones by value density (the heaviest candidate is always kept) and
    lets foragers improve every kept leg with the local move. A leg stops
    after `max_iterations_without_improvement` idle iterations or
    `max_total_iterations` iterations overall; the heaviest kept leg is
    committed.
    """

    def __init__(
            self,
            problem: Problem,
            construction_option: ConstructionOption,
            local_optimization_option: LocalOptimizationOption,
            max_iterations_coefficient: float = MAX_ITERATIONS_COEFFICIENT,
            scout_bees_coefficient: float = SCOUT_BEES_COEFFICIENT,
            forager_bees_coefficient: float = FORAGER_BEES_COEFFICIENT,
            seed=None
    ):
        problem.require_initialized()
        self.problem = problem
        self.construction_option = require_option(construction_option, ConstructionOption)
        self.local_optimization_option = require_option(local_optimization_option, LocalOptimizationOption)
        require_positive("max iterations coefficient", max_iterations_coefficient)
        require_positive("scout bees coefficient", scout_bees_coefficient)
        require_positive("forager bees coefficient", forager_bees_coefficient)

        targets_count = problem.targets_count
        self.scout_bees_count = max(1, int(targets_count * SCOUT_BEES_PER_TARGET * scout_bees_coefficient))
        self.best_scout_bees_count = max(1, int(targets_count * BEST_SCOUT_BEES_PER_TARGET))
        self.forager_bees_count = max(1, int(targets_count * FORAGER_BEES_PER_TARGET * forager_bees_coefficient))
        self.max_iterations_without_improvement = max(
            1, int(problem.bases_count * ABC_ITERATIONS_PER_BASE * max_iterations_coefficient))
        self.max_total_iterations = max(
            1, int(self.max_iterations_without_improvement * problem.targets_per_sub_path * max_iterations_coefficient))

        self.rng = np.random.default_rng(seed)
        self.weight_history: List[List[float]] = []  #heaviest kept leg after each iteration, per leg

    def seed(self, seed=None):
        self.rng = np.random.default_rng(seed)

    def solve(self) -> Solution:
        solution = Solution(service_time_in_hours=self.problem.service_time_in_hours)
        self.weight_history = []
        for start_base_id in range(1, self.problem.sub_path_count + 1):
            sub_path = self._solve_leg(start_base_id)
            self.problem.commit(sub_path)
            solution.add(sub_path)
            logger.info(f"abc leg {start_base_id}: {sub_path.describe()}, weight {sub_path.total_weight}")
        return solution

    def _solve_leg(self, start_base_id: int) -> SubPath:
        builder = LegRouteBuilder(self.problem, start_base_id, self.rng)
        optimizer = LocalOptimizer(builder, self.local_optimization_option, self.forager_bees_count)
        reachable_ids = []
        if self.construction_option is ConstructionOption.RANDOM:
            reachable_ids = builder.reachable_target_ids()

        best_bees: List[SubPath] = []
        previously_generated: Set[str] = set()
        history = []
        iterations_without_improvement = 0
        total_iterations = 0
        while (iterations_without_improvement < self.max_iterations_without_improvement
               and total_iterations < self.max_total_iterations):
            best_bees, previously_generated = self._send_scouts(
                builder, best_bees, previously_generated, reachable_ids)

            is_improved = False
            foraged = []
            for bee in best_bees:
                better = optimizer.optimize(bee)
                if better is not None:
                    is_improved = True
                    foraged.append(better)
                else:
                    foraged.append(bee)
            best_bees = foraged

            iterations_without_improvement = 0 if is_improved else iterations_without_improvement + 1
            total_iterations += 1
            history.append(max((bee.total_weight for bee in best_bees), default=0))
            logger.debug(f"leg {start_base_id} iteration {total_iterations}: best weight {history[-1]}, "
                         f"idle {iterations_without_improvement}")

        self.weight_history.append(history)
        if not best_bees: #not even a direct flight fits the budget
            return builder.create_sub_path([])
        return max(best_bees, key=lambda bee: bee.total_weight)

    def _construct(self, builder: LegRouteBuilder, reachable_ids: Sequence[int]) -> List[int]:
        if self.construction_option is ConstructionOption.RANDOM:
            return builder.random_ids(reachable_ids)
        return builder.probable_walk(neighborhood=self.construction_option is ConstructionOption.PROBABLE_NEIGHBORHOOD)

    def _send_scouts(
            self,
            builder: LegRouteBuilder,
            best_bees: List[SubPath],
            previously_generated: Set[str],
            reachable_ids: Sequence[int]
    ) -> Tuple[List[SubPath], Set[str]]:
        new_bees = []
        new_encodings = set()
        attempts = 0
        needed = self.scout_bees_count - len(best_bees)
        while len(new_bees) < needed and attempts < MAX_GENERATION_ATTEMPTS:
            attempts += 1
            target_ids = self._construct(builder, reachable_ids)
            encoding = "/".join(str(target_id) for target_id in target_ids)
            if encoding in previously_generated or encoding in new_encodings:
                continue
            new_encodings.add(encoding)
            if self.construction_option is ConstructionOption.RANDOM and not builder.is_feasible(target_ids):
                continue
            new_bees.append(builder.create_sub_path(target_ids))

        candidates = new_bees + best_bees
        if not candidates:
            return [], set()
        ranked = sorted(candidates, key=lambda bee: bee.value_density, reverse=True)
        selected = ranked[:self.best_scout_bees_count]
        heaviest = max(candidates, key=lambda bee: bee.total_weight)
        if not any(bee is heaviest for bee in selected):
            selected[-1] = heaviest
        return selected, {bee.encoding for bee in candidates}
