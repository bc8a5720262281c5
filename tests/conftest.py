import pytest

from mission_data import Base, Target
from problem import Problem

SMALL_ABC = dict(max_iterations_coefficient=0.2, scout_bees_coefficient=0.5, forager_bees_coefficient=0.5)
SMALL_TABU = dict(max_iterations_coefficient=0.02, tabu_list_coefficient=1.0)

def line_problem(target_xy=(50, 0), weight=10, max_time=10.0):
    #two bases 100 km apart, one target, 100 km/h
    bases = [Base(1, 0, 0), Base(2, 100, 0)]
    targets = [Target(1, target_xy[0], target_xy[1], weight)]
    return Problem(bases, targets, max_time, 100.0, 5 / 60).initialize()

def three_base_problem(max_time=2.0):
    #20 targets spread along two legs, 10 per leg
    bases = [Base(1, 0, 0), Base(2, 100, 0), Base(3, 200, 0)]
    targets = []
    for i in range(20):
        y = 12 if i % 2 else -12
        targets.append(Target(i + 1, 10 * i + 5, y, i % 5 + 1))
    return Problem(bases, targets, max_time, 100.0, 5 / 60).initialize()

@pytest.fixture
def three_bases():
    return three_base_problem()

@pytest.fixture
def line():
    return line_problem()
