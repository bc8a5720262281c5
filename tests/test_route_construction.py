import numpy as np
import pytest

from conftest import line_problem, three_base_problem
from local_optimization import LocalOptimizer
from mission_data import Base, Target
from problem import Problem
from route_construction import LegRouteBuilder
from route_enhancement import add_nearest, nearest_target_index
from solver_options import LocalOptimizationOption
from tabu_list import TabuList

def builder_for(problem, start_base_id=1, seed=0):
    return LegRouteBuilder(problem, start_base_id, np.random.default_rng(seed))

def test_create_sub_path_records_movement_times():
    problem = line_problem(target_xy=(50, 0))
    builder = builder_for(problem)
    sub_path = builder.create_sub_path([1])
    assert sub_path.targets[0].time_for_movement == pytest.approx(0.5)
    assert sub_path.time_to_end_base == pytest.approx(0.5)
    assert not problem.target(1).visited #candidate targets are copies

def test_empty_sub_path_flies_directly():
    builder = builder_for(line_problem())
    sub_path = builder.create_sub_path([])
    assert sub_path.time_in_air == pytest.approx(1.0)
    assert builder.available_time([]) == pytest.approx(10.0)

def test_builder_maps_ids_through_matrix_index():
    problem = three_base_problem()
    builder = builder_for(problem, start_base_id=2)
    assert builder.index is problem.index
    assert builder.start_index == 21 and builder.end_index == 22
    assert builder.point_index([20]) == 19
    assert builder.reachable_target_ids()[0] >= 1
    for bad_ids in ([0], [21]): #no silent wrap-around onto other rows
        with pytest.raises(IndexError):
            builder.path_time(bad_ids)
        with pytest.raises(IndexError):
            builder.create_sub_path(bad_ids)

def test_greedy_prefers_value_density_and_repairs():
    #target 1 is the densest but too far for the budget, target 2 fits
    bases = [Base(1, 0, 0), Base(2, 100, 0)]
    targets = [Target(1, 5, 80, 100), Target(2, 50, 5, 1)]
    problem = Problem(bases, targets, 1.2, 100.0).initialize()
    assert builder_for(problem).greedy_ids() == [2]

def test_greedy_breaks_ties_by_lower_id():
    bases = [Base(1, 0, 0), Base(2, 100, 0)]
    targets = [Target(1, 50, 10, 3), Target(2, 50, -10, 3)]
    problem = Problem(bases, targets, 1.1, 100.0).initialize() #room for one detour only
    assert builder_for(problem).greedy_ids() == [1]

def test_greedy_skips_visited_targets():
    problem = three_base_problem()
    problem.visit(1, 0.1)
    ids = builder_for(problem).greedy_ids()
    assert 1 not in ids

def test_probable_walk_stays_within_budget():
    problem = three_base_problem(max_time=1.5)
    for seed in range(5):
        builder = builder_for(problem, seed=seed)
        for neighborhood in (False, True):
            ids = builder.probable_walk(neighborhood=neighborhood)
            assert len(set(ids)) == len(ids)
            assert builder.path_time(ids) <= problem.max_time_in_air_in_hours + 1e-9

def test_probable_walk_extends_prefix():
    problem = three_base_problem()
    builder = builder_for(problem)
    ids = builder.probable_walk([3], builder.available_time([3]))
    assert ids[0] == 3
    assert builder.is_feasible(ids)

def test_neighborhood_walk_moves_only_to_close_targets():
    problem = three_base_problem()
    builder = builder_for(problem, seed=3)
    ids = builder.probable_walk(neighborhood=True)
    previous = builder.start_index
    for target_id in ids:
        assert problem.matrix.time(target_id - 1, previous) <= 0.5 * problem.max_time_in_air_in_hours
        previous = target_id - 1

def test_roulette_edge_cases():
    builder = builder_for(line_problem())
    assert builder.roulette(np.array([0.0, 0.0])) is None
    for _ in range(10):
        assert builder.roulette(np.array([1.0, np.inf, 2.0])) == 1
        assert builder.roulette(np.array([0.0, 3.0])) == 1

def test_reachable_and_random_ids():
    problem = three_base_problem(max_time=1.2)
    builder = builder_for(problem, seed=7)
    reachable = builder.reachable_target_ids()
    assert reachable
    for target_id in reachable:
        index = target_id - 1
        assert problem.matrix.time(index, builder.start_index) + problem.matrix.time(builder.end_index, index) < 1.2
    for _ in range(20):
        ids = builder.random_ids(reachable)
        assert 1 <= len(ids) <= max(problem.targets_per_sub_path - 1, 1)
        assert len(set(ids)) == len(ids)
        assert set(ids) <= set(reachable)
    assert builder.random_ids([]) == []

def test_add_nearest_inserts_on_cheaper_side():
    bases = [Base(1, 0, 0), Base(2, 100, 0)]
    targets = [Target(1, 40, 0, 1), Target(2, 70, 0, 1), Target(3, 300, 0, 1)]
    problem = Problem(bases, targets, 2.0, 100.0).initialize()
    builder = builder_for(problem)
    assert nearest_target_index(builder, 0, [1]) == 1
    extended = add_nearest(builder, builder.create_sub_path([1]), 0)
    assert extended.target_ids == [1, 2]
    assert extended.time_in_air == pytest.approx(1.0)

def test_add_nearest_on_empty_leg_and_budget():
    problem = line_problem(target_xy=(50, 50), max_time=1.2)
    builder = builder_for(problem)
    assert add_nearest(builder, builder.create_sub_path([]), 0) is None #detour too long
    roomy = line_problem(target_xy=(50, 50), max_time=2.0)
    builder = builder_for(roomy)
    assert add_nearest(builder, builder.create_sub_path([]), 0).target_ids == [1]

def test_optimizer_improves_or_returns_none():
    problem = three_base_problem()
    builder = builder_for(problem, seed=1)
    start = builder.create_sub_path([1])
    for option in LocalOptimizationOption:
        optimizer = LocalOptimizer(builder, option, attempts=3)
        better = optimizer.optimize(start)
        if better is not None:
            assert better.total_weight > start.total_weight
            assert better.time_in_air <= problem.max_time_in_air_in_hours + 1e-6

    full = builder.create_sub_path(list(range(1, 21)))
    optimizer = LocalOptimizer(builder, LocalOptimizationOption.ADD_NEAREST, attempts=3)
    assert optimizer.optimize(full) is None #nothing left to add

def test_tabu_aware_rebuild_records_candidates():
    problem = three_base_problem()
    builder = builder_for(problem, seed=2)
    tabu = TabuList(100)
    optimizer = LocalOptimizer(builder, LocalOptimizationOption.REBUILD_PROBABLE, attempts=4, tabu_list=tabu)
    candidates = optimizer.rebuild_candidates(builder.create_sub_path([2, 4]))
    assert len(tabu) == len(candidates)
    for candidate in candidates:
        assert candidate.encoding in tabu
        assert candidate.target_ids[0] == 2
