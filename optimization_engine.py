import logging
import time
from collections import Counter
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence

import numpy as np

from abc_solver import AbcSolver
from constants import WEIGHT_TOLERANCE
from exceptions import ConfigurationError
from greedy_solver import GreedySolver
from problem import Problem
from route_model import Solution
from solver_options import SolverKind, SolverOption, parse_solver_option
from tabu_solver import TabuSolver

logger = logging.getLogger(__name__)

ABC_COEFFICIENTS = ("max_iterations_coefficient", "scout_bees_coefficient", "forager_bees_coefficient")
TABU_COEFFICIENTS = ("max_iterations_coefficient", "tabu_list_coefficient")

def create_solver(problem: Problem, option, seed=None, **coefficients):
    """
    Build the solver behind a named option. Coefficients a solver does not
    use are ignored (Greedy has none); unknown options are rejected.
    """
    option = parse_solver_option(option)
    if option.kind is SolverKind.GREEDY:
        return GreedySolver(problem)
    if option.kind is SolverKind.ABC:
        kwargs = {k: v for k, v in coefficients.items() if k in ABC_COEFFICIENTS}
        return AbcSolver(problem, option.construction, option.local_optimization, seed=seed, **kwargs)
    if option.kind is SolverKind.TABU:
        kwargs = {k: v for k, v in coefficients.items() if k in TABU_COEFFICIENTS}
        return TabuSolver(problem, option.local_optimization, seed=seed, **kwargs)
    raise ConfigurationError(f"unknown solver option: {option!r}")

def run_solver(problem: Problem, option, seed=None, **coefficients) -> Solution:
    #solves an independent clone so the caller's problem keeps its visited state
    option = parse_solver_option(option)
    solver = create_solver(problem.clone(), option, seed=seed, **coefficients)
    start_time = time.time()
    solution = solver.solve()
    execution_time = time.time() - start_time
    solution.set_execution_characteristics(option, execution_time, **coefficients)
    logger.info(f"{option.label}: weight {solution.total_weight}, {execution_time * 1000:.2f} ms")
    return solution

class ProblemExperimentResult(NamedTuple):
    problem: Problem
    solutions: List[Solution]

    def solutions_for(self, option: SolverOption) -> List[Solution]:
        return [s for s in self.solutions if s.solver_option is option]

class SolverExperimentResult(NamedTuple):
    solver_option: SolverOption
    best_deviation_from_greedy_in_percents: float = 0.0
    average_deviation_from_greedy_in_percents: float = 0.0
    worst_deviation_from_greedy_in_percents: float = 0.0
    best_result_times: int = 0
    best_result_times_in_percents: float = 0.0
    worst_result_times: int = 0
    worst_result_times_in_percents: float = 0.0
    max_execution_time_in_ms: float = 0.0
    average_execution_time_in_ms: float = 0.0
    min_execution_time_in_ms: float = 0.0

    def as_row(self) -> List:
        return [self.solver_option.label,
                self.best_deviation_from_greedy_in_percents,
                self.average_deviation_from_greedy_in_percents,
                self.worst_deviation_from_greedy_in_percents,
                self.best_result_times, self.best_result_times_in_percents,
                self.worst_result_times, self.worst_result_times_in_percents,
                self.max_execution_time_in_ms, self.average_execution_time_in_ms, self.min_execution_time_in_ms]

METRIC_HEADERS = ["Solver Option", "Best Deviation (%)", "Average Deviation (%)", "Worst Deviation (%)",
                  "Best Result Times", "Best Result Times (%)", "Worst Result Times", "Worst Result Times (%)",
                  "Max Execution Time (ms)", "Average Execution Time (ms)", "Min Execution Time (ms)"]

def run_experiment(
        problems: Iterable[Problem],
        options: Sequence = tuple(SolverOption),
        runs_per_problem: int = 1,
        seed=None,
        **coefficients
) -> List[ProblemExperimentResult]:
    """
    Run every option `runs_per_problem` times on a fresh clone of every
    problem. Visits already recorded on a problem are cleared first.
    """
    if runs_per_problem < 1:
        raise ConfigurationError(f"runs per problem must be at least 1, got {runs_per_problem}")
    options = [parse_solver_option(o) for o in options]
    rng = np.random.default_rng(seed)
    results = []
    for problem_number, problem in enumerate(problems, 1):
        if not problem.is_initialized:
            problem.initialize()
        problem.reset_visits() #every run starts with all targets free
        result = ProblemExperimentResult(problem, [])
        for option in options:
            for _ in range(runs_per_problem):
                run_seed = int(rng.integers(0, 2 ** 31 - 1)) #independent stream per run
                result.solutions.append(run_solver(problem, option, seed=run_seed, **coefficients))
        logger.info(f"problem {problem_number}: {len(result.solutions)} solutions")
        results.append(result)
    return results

def deviation_from_greedy(weight: float, greedy_weight: float) -> float:
    if greedy_weight == 0:
        return 0.0 if weight == 0 else float('inf')
    return weight / greedy_weight - 1

def extreme_options(solutions: List[Solution], extreme_weight: float, most_often: bool = True,
                    tolerance: float = WEIGHT_TOLERANCE) -> List[SolverOption]:
    #options that reached the extreme weight most (or least) often within one problem
    counts = Counter(s.solver_option for s in solutions if abs(s.total_weight - extreme_weight) < tolerance)
    if not counts:
        return []
    top = max(counts.values()) if most_often else min(counts.values())
    return [option for option, count in counts.items() if count == top]

def calculate_metrics(
        results: List[ProblemExperimentResult],
        options: Optional[Sequence] = None
) -> List[SolverExperimentResult]:
    """
    Per option: deviation of its total weight from Greedy on the same problem
    (best, average, worst; percent), how often it reached the best or worst
    weight, and its execution time range in milliseconds.
    """
    if not results:
        return []
    options = [parse_solver_option(o) for o in options] if options is not None else \
        list(dict.fromkeys(s.solver_option for s in results[0].solutions))
    if SolverOption.GREEDY not in options:
        raise ConfigurationError("metrics are measured against greedy; include it among the options")

    metrics: Dict[SolverOption, SolverExperimentResult] = {}
    for option in options:
        best_deviations, worst_deviations, average_deviations, times_ms = [], [], [], []
        best_times = worst_times = 0
        for result in results:
            greedy_solutions = result.solutions_for(SolverOption.GREEDY)
            if not greedy_solutions:
                raise ConfigurationError("every problem needs a greedy solution to compare against")
            greedy_weight = greedy_solutions[0].total_weight
            weights = [s.total_weight for s in result.solutions]
            own = result.solutions_for(option)
            if not own:
                raise ConfigurationError(f"no solutions of {option.label} in the experiment results")
            deviations = [deviation_from_greedy(s.total_weight, greedy_weight) for s in own]
            best_deviations.append(max(deviations))
            worst_deviations.append(min(deviations))
            average_deviations.append(sum(deviations) / len(deviations))
            times_ms.extend(s.execution_time * 1000 for s in own)
            if option in extreme_options(result.solutions, max(weights)):
                best_times += 1
            if option in extreme_options(result.solutions, min(weights), most_often=False):
                worst_times += 1

        problems_count = len(results)
        metrics[option] = SolverExperimentResult(
            option,
            best_deviation_from_greedy_in_percents=round(max(best_deviations) * 100, 2),
            average_deviation_from_greedy_in_percents=round(sum(average_deviations) / problems_count * 100, 2),
            worst_deviation_from_greedy_in_percents=round(min(worst_deviations) * 100, 2),
            best_result_times=best_times,
            best_result_times_in_percents=round(best_times / problems_count * 100, 2),
            worst_result_times=worst_times,
            worst_result_times_in_percents=round(worst_times / problems_count * 100, 2),
            max_execution_time_in_ms=round(max(times_ms), 2),
            average_execution_time_in_ms=round(sum(times_ms) / len(times_ms), 2),
            min_execution_time_in_ms=round(min(times_ms), 2))
    return list(metrics.values())
