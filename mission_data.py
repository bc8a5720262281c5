from typing import NamedTuple

#bases and movement cells are immutable, targets carry the mutable visit state
class Base(NamedTuple):
    id: int
    x: float
    y: float

class MovementCharacteristics(NamedTuple):
    average_weight: float  #weight of the row target divided by time to reach it from the column point
    time: float            #flight time between the two points in hours


class Target:
    """Intelligence object: a point with a value that can be collected once."""

    __slots__ = ("id", "x", "y", "weight", "visited", "time_for_movement")

    def __init__(self, id: int, x: float, y: float, weight: float):
        self.id = id
        self.x = x
        self.y = y
        self.weight = weight
        self.visited = False
        self.time_for_movement = 0.0  #valid only once visited

    def visit(self, time_for_movement: float) -> None:
        self.visited = True
        self.time_for_movement = time_for_movement

    def clone(self) -> "Target":
        target = Target(self.id, self.x, self.y, self.weight)
        if self.visited: #replay the visit with the same timing
            target.visit(self.time_for_movement)
        return target

    def __repr__(self) -> str:
        state = f", visited, t={self.time_for_movement:.4f}" if self.visited else ""
        return f"Target(id={self.id}, x={self.x}, y={self.y}, weight={self.weight}{state})"
