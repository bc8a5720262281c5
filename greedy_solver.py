import logging

from problem import Problem
from route_construction import LegRouteBuilder
from route_model import Solution

logger = logging.getLogger(__name__)


class GreedySolver:
    """Best value density first, one leg at a time. No randomness, no tunables."""

    def __init__(self, problem: Problem):
        problem.require_initialized()
        self.problem = problem

    def solve(self) -> Solution:
        solution = Solution(service_time_in_hours=self.problem.service_time_in_hours)
        for start_base_id in range(1, self.problem.sub_path_count + 1):
            sub_path = LegRouteBuilder(self.problem, start_base_id).greedy_sub_path()
            self.problem.commit(sub_path)
            solution.add(sub_path)
            logger.info(f"greedy leg {start_base_id}: {sub_path.describe()}, weight {sub_path.total_weight}")
        return solution
