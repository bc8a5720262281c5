import logging
from typing import List, NamedTuple, Sequence, Tuple

import numpy as np

from constants import DISTANCE_DECIMALS
from distance_utils import distance_matrix
from mission_data import Base, MovementCharacteristics, Target

logger = logging.getLogger(__name__)

SELF_AVERAGE_WEIGHT = -np.inf  #sentinel pair for a point to itself
SELF_TIME = np.inf


class MatrixIndex(NamedTuple):
    """
    Maps target and base ids onto the unified matrix.

    The matrix is laid over [target_1 ... target_M, base_1 ... base_N]:
    target id t lives at t - 1 and base id b at M + b - 1.
    """
    targets_count: int
    bases_count: int

    @property
    def size(self) -> int:
        return self.targets_count + self.bases_count

    def target(self, target_id: int) -> int:
        if not 1 <= target_id <= self.targets_count:
            raise IndexError(f"target id {target_id} outside 1..{self.targets_count}")
        return target_id - 1

    def base(self, base_id: int) -> int:
        if not 1 <= base_id <= self.bases_count:
            raise IndexError(f"base id {base_id} outside 1..{self.bases_count}")
        return self.targets_count + base_id - 1

    def is_base(self, index: int) -> bool:
        return index >= self.targets_count

    def target_id(self, index: int) -> int: #inverse of target()
        if self.is_base(index):
            raise IndexError(f"matrix index {index} belongs to a base")
        return index + 1


class MovementMatrix:
    """Time and value-density layers of the movement characteristics matrix."""

    def __init__(self, times: np.ndarray, average_weights: np.ndarray, index: MatrixIndex):
        self.times = times
        self.average_weights = average_weights
        self.index = index

    def __getitem__(self, key: Tuple[int, int]) -> MovementCharacteristics:
        i, j = key
        return MovementCharacteristics(float(self.average_weights[i, j]), float(self.times[i, j]))

    @property
    def shape(self) -> Tuple[int, int]:
        return self.times.shape

    def time(self, i: int, j: int) -> float:
        return float(self.times[i, j])

    def as_rows(self, average_weight: bool = True, decimals: int = 2) -> List[List[float]]:
        #rounded rows of one layer, ready for csv or spreadsheet output
        layer = self.average_weights if average_weight else self.times
        return np.round(layer, decimals).tolist()


def build_movement_matrix(
        targets: Sequence[Target],
        bases: Sequence[Base],
        speed_in_km_per_hour: float,
        is_geographic: bool = False,
        decimals: int = DISTANCE_DECIMALS
) -> MovementMatrix:
    index = MatrixIndex(len(targets), len(bases))
    points = list(targets) + list(bases) #targets first, then bases
    distances = distance_matrix(points, is_geographic, decimals)
    times = distances / speed_in_km_per_hour

    weights = np.zeros(index.size, dtype=float)
    weights[:index.targets_count] = [t.weight for t in targets]
    with np.errstate(divide='ignore', invalid='ignore'): #co-located points give an infinite density
        average_weights = weights[:, None] / times
    average_weights[np.isnan(average_weights)] = 0.0
    average_weights[index.targets_count:, :] = 0.0 #base rows carry no value

    np.fill_diagonal(times, SELF_TIME)
    np.fill_diagonal(average_weights, SELF_AVERAGE_WEIGHT)
    logger.debug(f"movement matrix built: {index.size}x{index.size}, geographic={is_geographic}")
    return MovementMatrix(times, average_weights, index)
