from typing import Any, Dict, List, Optional

from mission_data import Base, Target

def format_hours(hours: float) -> str: #0.7028 -> "0h 42m 10s"
    total_seconds = int(round(hours * 3600))
    h, rest = divmod(total_seconds, 3600)
    m, s = divmod(rest, 60)
    return f"{h}h {m}m {s}s"

def format_coordinate(value: float) -> str: #shortest round-trip text, 50.0 -> "50"
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


class SubPath:
    """
    One leg of the route: the start base, the targets visited on the way
    (each carrying the flight time spent reaching it) and the end base.

    Member targets are owned copies, so visiting them never leaks into the
    problem until the leg is committed.
    """

    def __init__(self, start_base: Base, end_base: Base, targets: List[Target], time_to_end_base: float):
        self.start_base = start_base
        self.end_base = end_base
        self.targets = targets
        self.time_to_end_base = time_to_end_base

    @property
    def target_ids(self) -> List[int]:
        return [t.id for t in self.targets]

    @property
    def encoding(self) -> str: #"3/7/1", empty string for a direct flight
        return "/".join(str(t.id) for t in self.targets)

    @property
    def total_weight(self) -> float:
        return sum(t.weight for t in self.targets)

    @property
    def time_in_air(self) -> float:
        return sum(t.time_for_movement for t in self.targets) + self.time_to_end_base

    @property
    def value_density(self) -> float:
        time_in_air = self.time_in_air
        if time_in_air <= 0:
            return 0.0
        return self.total_weight / time_in_air

    def clone(self) -> "SubPath":
        return SubPath(self.start_base, self.end_base, [t.clone() for t in self.targets], self.time_to_end_base)

    def describe(self) -> str:
        stops = [f"Base {self.start_base.id}"] + [f"Target {t.id}" for t in self.targets] + [f"Base {self.end_base.id}"]
        return f"{' -> '.join(stops)} ({format_hours(self.time_in_air)})"

    def coordinates_lines(self) -> List[str]:
        points = [self.start_base] + list(self.targets) + [self.end_base]
        return [f"{format_coordinate(p.x)}; {format_coordinate(p.y)}" for p in points]

    def __len__(self) -> int:
        return len(self.targets)

    def __repr__(self) -> str:
        return (f"SubPath({self.start_base.id}->{self.end_base.id}, targets=[{self.encoding}], "
                f"weight={self.total_weight}, time={self.time_in_air:.4f})")


class Solution:
    """Ordered legs of a full route, plus how and how fast it was produced."""

    def __init__(self, sub_paths: Optional[List[SubPath]] = None, service_time_in_hours: float = 0.0):
        self.sub_paths: List[SubPath] = list(sub_paths) if sub_paths else []
        self.service_time_in_hours = service_time_in_hours
        self.solver_option = None
        self.execution_time: Optional[float] = None  #seconds
        self.coefficients: Dict[str, Any] = {}

    def add(self, sub_path: SubPath) -> None:
        self.sub_paths.append(sub_path)

    @property
    def total_weight(self) -> float:
        return sum(sp.total_weight for sp in self.sub_paths)

    @property
    def total_time_in_air(self) -> float:
        return sum(sp.time_in_air for sp in self.sub_paths)

    @property
    def total_time(self) -> float: #service time is spent at every intermediate base
        stops = max(len(self.sub_paths) - 1, 0)
        return self.total_time_in_air + stops * self.service_time_in_hours

    def total_distance_km(self, speed_in_km_per_hour: float) -> float:
        return self.total_time_in_air * speed_in_km_per_hour

    @property
    def visited_target_ids(self) -> List[int]:
        return [target_id for sp in self.sub_paths for target_id in sp.target_ids]

    def sub_paths_info(self) -> List[str]:
        return [sp.describe() for sp in self.sub_paths]

    def coordinates_text(self) -> str:
        #one "x; y" line per point, legs separated by a blank line
        return "\n\n".join("\n".join(sp.coordinates_lines()) for sp in self.sub_paths)

    def set_execution_characteristics(self, solver_option, execution_time: float, **coefficients) -> None:
        self.solver_option = solver_option
        self.execution_time = execution_time
        self.coefficients = dict(coefficients)

    def __len__(self) -> int:
        return len(self.sub_paths)

    def __iter__(self):
        return iter(self.sub_paths)

    def __repr__(self) -> str:
        option = getattr(self.solver_option, "name", self.solver_option)
        return (f"Solution(option={option}, legs={len(self.sub_paths)}, weight={self.total_weight}, "
                f"time_in_air={self.total_time_in_air:.4f})")
