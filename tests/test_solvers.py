import pytest

from abc_solver import AbcSolver
from conftest import SMALL_ABC, SMALL_TABU, line_problem, three_base_problem
from constants import FEASIBILITY_TOLERANCE
from exceptions import ConfigurationError
from greedy_solver import GreedySolver
from mission_data import Base, Target
from optimization_engine import create_solver
from problem import Problem
from route_construction import LegRouteBuilder
from solver_options import (
    ConstructionOption, LocalOptimizationOption, SolverKind, SolverOption, parse_solver_option
)
from tabu_solver import TabuSolver

def coefficients_for(option):
    return SMALL_TABU if option.kind is SolverKind.TABU else SMALL_ABC

def test_greedy_visits_target_on_the_way():
    problem = line_problem(target_xy=(50, 0), weight=10, max_time=10.0)
    solution = GreedySolver(problem).solve()
    assert len(solution.sub_paths) == 1
    assert solution.sub_paths[0].target_ids == [1]
    assert solution.total_weight == 10
    assert problem.target(1).visited

def test_greedy_flies_direct_when_detour_does_not_fit():
    problem = line_problem(target_xy=(50, 50), weight=10, max_time=1.2)
    solution = GreedySolver(problem).solve()
    assert len(solution.sub_paths) == 1
    assert solution.sub_paths[0].targets == []
    assert solution.sub_paths[0].time_in_air == pytest.approx(1.0)
    assert not problem.target(1).visited

def test_greedy_is_idempotent_on_clones():
    problem = three_base_problem()
    first = GreedySolver(problem.clone()).solve()
    second = GreedySolver(problem.clone()).solve()
    assert [sp.encoding for sp in first] == [sp.encoding for sp in second]
    assert first.total_time_in_air == second.total_time_in_air
    assert not problem.visited_mask().any()

@pytest.mark.parametrize("option", list(SolverOption), ids=lambda o: o.label)
def test_every_solver_produces_valid_solution(option):
    problem = three_base_problem()
    solution = create_solver(problem, option, seed=11, **coefficients_for(option)).solve()
    assert len(solution.sub_paths) == 2
    ids = solution.visited_target_ids
    assert len(ids) == len(set(ids))
    for leg, sub_path in enumerate(solution.sub_paths, 1):
        assert sub_path.start_base.id == leg
        assert sub_path.end_base.id == leg + 1
        assert sub_path.time_in_air <= problem.max_time_in_air_in_hours + FEASIBILITY_TOLERANCE
    assert sorted(ids) == [t.id for t in problem.targets if t.visited]

@pytest.mark.parametrize("option", [o for o in SolverOption if o.kind is not SolverKind.GREEDY],
                         ids=lambda o: o.label)
def test_metaheuristics_handle_infeasible_leg(option):
    problem = line_problem(target_xy=(50, 50), max_time=1.2)
    solution = create_solver(problem, option, seed=1, **coefficients_for(option)).solve()
    assert solution.sub_paths[0].targets == []
    assert solution.sub_paths[0].time_in_air == pytest.approx(1.0)

def test_abc_weight_history_is_monotonic():
    for construction in ConstructionOption:
        solver = AbcSolver(three_base_problem(), construction,
                           LocalOptimizationOption.REBUILD_PROBABLE_AND_ADD_NEAREST, seed=5, **SMALL_ABC)
        solution = solver.solve()
        assert len(solver.weight_history) == 2
        for history, sub_path in zip(solver.weight_history, solution.sub_paths):
            assert history
            assert all(a <= b for a, b in zip(history, history[1:]))
            assert history[-1] == sub_path.total_weight

def test_tabu_weight_history_is_monotonic_and_starts_greedy():
    problem = three_base_problem()
    greedy_first_leg = GreedySolver(problem.clone()).solve().sub_paths[0]
    solver = TabuSolver(problem, LocalOptimizationOption.REBUILD_PROBABLE, seed=3, **SMALL_TABU)
    solution = solver.solve()
    first = solver.weight_history[0]
    assert first[0] == greedy_first_leg.total_weight
    assert all(a <= b for a, b in zip(first, first[1:]))
    assert solution.sub_paths[0].total_weight >= greedy_first_leg.total_weight

def test_seeded_solvers_are_reproducible():
    problem = three_base_problem()
    for option in (SolverOption.ABC_R_RP, SolverOption.ABC_PN_AN, SolverOption.TABU_RPNAAN):
        first = create_solver(problem.clone(), option, seed=42, **coefficients_for(option)).solve()
        second = create_solver(problem.clone(), option, seed=42, **coefficients_for(option)).solve()
        assert [sp.encoding for sp in first] == [sp.encoding for sp in second]

def test_scouts_stop_when_no_new_leg_exists():
    #only target 1 fits the budget, so every scout rebuilds the same leg
    bases = [Base(1, 0, 0), Base(2, 100, 0)]
    targets = [Target(1, 50, 5, 3)] + [Target(i, 50, 500 + i, 1) for i in (2, 3, 4)]
    problem = Problem(bases, targets, 1.1, 100.0).initialize()
    for construction in ConstructionOption:
        solver = AbcSolver(problem, construction, LocalOptimizationOption.REBUILD_PROBABLE, seed=0)
        assert solver.scout_bees_count == 6
        builder = LegRouteBuilder(problem, 1, solver.rng)
        reachable_ids = builder.reachable_target_ids()
        bees, generated = solver._send_scouts(builder, [], set(), reachable_ids)
        assert [bee.target_ids for bee in bees] == [[1]]
        assert generated == {"1"}
        bees, generated = solver._send_scouts(builder, bees, generated, reachable_ids)
        assert len(bees) < solver.scout_bees_count
        assert [bee.target_ids for bee in bees] == [[1]]
        assert solver._send_scouts(builder, [], {"1"}, reachable_ids) == ([], set())

def test_abc_sizing():
    solver = AbcSolver(three_base_problem(), ConstructionOption.PROBABLE, LocalOptimizationOption.ADD_NEAREST)
    assert solver.scout_bees_count == 30
    assert solver.best_scout_bees_count == 10
    assert solver.forager_bees_count == 5
    assert solver.max_iterations_without_improvement == 15
    assert solver.max_total_iterations == 150

def test_tabu_sizing():
    solver = TabuSolver(three_base_problem(), LocalOptimizationOption.REBUILD_PROBABLE)
    assert solver.max_iterations_without_improvement == 600
    assert solver.tabu_list_size == 120
    assert solver.attempts == 10

def test_configuration_errors_fail_fast():
    problem = three_base_problem()
    with pytest.raises(ConfigurationError):
        TabuSolver(problem, LocalOptimizationOption.ADD_NEAREST)
    with pytest.raises(ConfigurationError):
        TabuSolver(problem, "rebuild")
    with pytest.raises(ConfigurationError):
        AbcSolver(problem, "random", LocalOptimizationOption.ADD_NEAREST)
    with pytest.raises(ConfigurationError):
        AbcSolver(problem, ConstructionOption.RANDOM, LocalOptimizationOption.ADD_NEAREST,
                  scout_bees_coefficient=0)
    with pytest.raises(ConfigurationError):
        TabuSolver(problem, LocalOptimizationOption.REBUILD_PROBABLE, tabu_list_coefficient=-1)
    with pytest.raises(ConfigurationError):
        create_solver(problem, "AbcXyz")
    with pytest.raises(ConfigurationError):
        GreedySolver(Problem([Base(1, 0, 0), Base(2, 1, 0)], [], 1.0, 100.0))

def test_parse_solver_option():
    assert parse_solver_option("AbcPnRpaan") is SolverOption.ABC_PN_RPAAN
    assert parse_solver_option("tabu_rp") is SolverOption.TABU_RP
    assert parse_solver_option(SolverOption.GREEDY) is SolverOption.GREEDY
    assert SolverOption.ABC_R_AN.construction is ConstructionOption.RANDOM
    assert SolverOption.TABU_RPNAAN.local_optimization.adds_nearest
    assert len(SolverOption) == 20
