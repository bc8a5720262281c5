import pytest

from conftest import three_base_problem
from exceptions import ConfigurationError, PathPlanningError
from mission_data import Base, Target
from problem import Problem

def test_initialize_derives_counts(three_bases):
    assert three_bases.is_initialized
    assert three_bases.bases_count == 3
    assert three_bases.sub_path_count == 2
    assert three_bases.targets_count == 20
    assert three_bases.targets_per_sub_path == 10
    assert three_bases.points_count == 23
    assert three_bases.matrix.shape == (23, 23)

def test_initialize_is_idempotent_and_keeps_visits(three_bases):
    three_bases.visit(3, 0.25)
    times = three_bases.matrix.times.copy()
    three_bases.initialize()
    assert (three_bases.matrix.times == times).all()
    assert three_bases.target(3).visited
    assert three_bases.sub_path_count == 2

def test_configuration_errors():
    target = Target(1, 1, 1, 1)
    with pytest.raises(ConfigurationError):
        Problem([Base(1, 0, 0)], [target], 1.0, 100.0).initialize()
    with pytest.raises(ConfigurationError):
        Problem([Base(1, 0, 0), Base(3, 1, 0)], [target], 1.0, 100.0).initialize()
    with pytest.raises(ConfigurationError):
        Problem([Base(1, 0, 0), Base(2, 1, 0)], [Target(2, 1, 1, 1)], 1.0, 100.0).initialize()
    with pytest.raises(ConfigurationError):
        Problem([Base(1, 0, 0), Base(2, 1, 0)], [target], 1.0, 0.0).initialize()

def test_configuration_error_is_a_value_error():
    assert issubclass(ConfigurationError, ValueError)
    assert issubclass(ConfigurationError, PathPlanningError)

def test_uninitialized_problem_is_rejected():
    problem = Problem([Base(1, 0, 0), Base(2, 1, 0)], [], 1.0, 100.0)
    assert not problem.is_initialized
    with pytest.raises(ConfigurationError):
        problem.require_initialized()

def test_clone_is_independent():
    problem = three_base_problem()
    problem.visit(5, 0.1)
    clone = problem.clone()
    assert clone.is_initialized
    assert clone.target(5).visited
    assert clone.target(5).time_for_movement == 0.1
    clone.visit(6, 0.2)
    assert not problem.target(6).visited
    assert clone.target(1) is not problem.target(1)

def test_reset_visits_and_mask():
    problem = three_base_problem()
    problem.visit(1, 0.1)
    problem.visit(20, 0.1)
    mask = problem.visited_mask()
    assert mask[0] and mask[19] and mask.sum() == 2
    assert len(problem.unvisited_targets()) == 18
    problem.reset_visits()
    assert not problem.visited_mask().any()
    assert problem.target(1).time_for_movement == 0.0

def test_target_clone_replays_visit():
    target = Target(4, 1, 2, 7)
    target.visit(0.3)
    copy = target.clone()
    assert copy.visited and copy.time_for_movement == 0.3
    copy.visit(0.9)
    assert target.time_for_movement == 0.3
