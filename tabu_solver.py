import logging
from typing import List

import numpy as np

from constants import (
    TABU_ITERATIONS_PER_TARGET_AND_BASE, TABU_LIST_SIZE_DIVISOR,
    MAX_ITERATIONS_COEFFICIENT, TABU_LIST_SIZE_COEFFICIENT
)
from exceptions import ConfigurationError
from local_optimization import LocalOptimizer
from problem import Problem
from route_construction import LegRouteBuilder
from route_model import Solution, SubPath
from solver_options import LocalOptimizationOption, require_option, require_positive
from tabu_list import TabuList

logger = logging.getLogger(__name__)


class TabuSolver:
    """
    Tabu search, leg by leg: start from the greedy leg and keep applying a
    rebuild move, never re-evaluating a leg whose encoding is still in the
    tabu list. Stops after `max_iterations_without_improvement` idle
    iterations.
    """

    def __init__(
            self,
            problem: Problem,
            local_optimization_option: LocalOptimizationOption,
            max_iterations_coefficient: float = MAX_ITERATIONS_COEFFICIENT,
            tabu_list_coefficient: float = TABU_LIST_SIZE_COEFFICIENT,
            seed=None
    ):
        problem.require_initialized()
        self.problem = problem
        self.local_optimization_option = require_option(local_optimization_option, LocalOptimizationOption)
        if not self.local_optimization_option.is_rebuild: #tabu filtering works on rebuilt candidates only
            raise ConfigurationError(f"tabu search does not support {local_optimization_option.name}")
        require_positive("max iterations coefficient", max_iterations_coefficient)
        require_positive("tabu list coefficient", tabu_list_coefficient)

        self.max_iterations_without_improvement = max(1, int(
            problem.targets_count * problem.bases_count * TABU_ITERATIONS_PER_TARGET_AND_BASE
            * max_iterations_coefficient))
        self.tabu_list_size = max(1, int(
            self.max_iterations_without_improvement / TABU_LIST_SIZE_DIVISOR * tabu_list_coefficient))
        self.attempts = max(1, problem.targets_per_sub_path)

        self.rng = np.random.default_rng(seed)
        self.weight_history: List[List[float]] = []  #incumbent weight after each iteration, per leg

    def seed(self, seed=None):
        self.rng = np.random.default_rng(seed)

    def solve(self) -> Solution:
        solution = Solution(service_time_in_hours=self.problem.service_time_in_hours)
        self.weight_history = []
        for start_base_id in range(1, self.problem.sub_path_count + 1):
            sub_path = self._solve_leg(start_base_id)
            self.problem.commit(sub_path)
            solution.add(sub_path)
            logger.info(f"tabu leg {start_base_id}: {sub_path.describe()}, weight {sub_path.total_weight}")
        return solution

    def _solve_leg(self, start_base_id: int) -> SubPath:
        builder = LegRouteBuilder(self.problem, start_base_id, self.rng)
        tabu_list = TabuList(self.tabu_list_size) #fresh history for every leg
        optimizer = LocalOptimizer(builder, self.local_optimization_option, self.attempts, tabu_list)

        current = builder.greedy_sub_path()
        tabu_list.push(current.encoding)
        history = [current.total_weight]
        iterations_without_improvement = 0
        while iterations_without_improvement < self.max_iterations_without_improvement:
            better = optimizer.optimize(current)
            if better is None:
                iterations_without_improvement += 1
            else:
                current = better
                iterations_without_improvement = 0
            history.append(current.total_weight)
        logger.debug(f"leg {start_base_id}: {len(history) - 1} iterations, tabu list holds {len(tabu_list)}")

        self.weight_history.append(history)
        return current
